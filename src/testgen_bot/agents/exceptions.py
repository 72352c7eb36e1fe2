"""Exceptions for agent operations.

Note: Names chosen to avoid collisions with stdlib exceptions (e.g. tarfile.ReadError).
"""


class AgentError(Exception):
    """Base exception for all agent operations."""


class ChangeResolutionError(AgentError):
    """Raised when the git invocation used to compute changed files fails."""


class SourceReadError(AgentError):
    """Raised when a changed source file cannot be read."""


class GenerationError(AgentError):
    """Raised when the text-generation service call fails or returns nothing."""


class GeneratorConfigError(AgentError):
    """Raised when the generator is configured with an unsupported provider."""


class ArtifactPersistError(AgentError):
    """Raised when a generated test file cannot be created or written."""
