"""Agent components for the test generation bot."""

from testgen_bot.agents.exceptions import (
    AgentError,
    ArtifactPersistError,
    ChangeResolutionError,
    GenerationError,
    GeneratorConfigError,
    SourceReadError,
)
from testgen_bot.agents.artifact_writer import TestArtifactWriter
from testgen_bot.agents.change_resolver import ChangeSetResolver
from testgen_bot.agents.test_generator import TestGenerator

__all__ = [
    "AgentError",
    "ArtifactPersistError",
    "ChangeResolutionError",
    "ChangeSetResolver",
    "GenerationError",
    "GeneratorConfigError",
    "SourceReadError",
    "TestArtifactWriter",
    "TestGenerator",
]
