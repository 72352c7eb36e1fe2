"""Data models for the test generation bot."""

from testgen_bot.models.artifact_models import (
    ArtifactResult,
    ArtifactStatus,
    OutputLayout,
    RunReport,
    WritePolicy,
)
from testgen_bot.models.change_models import (
    DEFAULT_EXTENSIONS,
    ChangeSet,
    ResolutionStrategy,
    ResolverConfig,
)

__all__ = [
    "ArtifactResult",
    "ArtifactStatus",
    "ChangeSet",
    "DEFAULT_EXTENSIONS",
    "OutputLayout",
    "ResolutionStrategy",
    "ResolverConfig",
    "RunReport",
    "WritePolicy",
]
