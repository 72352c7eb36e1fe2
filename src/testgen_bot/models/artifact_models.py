"""Models for generated test artifacts and run reports."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from testgen_bot.models.change_models import ResolutionStrategy


class WritePolicy(str, Enum):
    """What to do when the output test file already exists."""

    APPEND = "append"
    OVERWRITE = "overwrite"


class OutputLayout(str, Enum):
    """How output paths are derived from a changed file."""

    FLAT = "flat"          # tests/<stem>.test.<ext>
    MIRRORED = "mirrored"  # tests/<source dir>/<stem>.test.<ext>


class ArtifactStatus(str, Enum):
    CREATED = "created"
    APPENDED = "appended"
    OVERWRITTEN = "overwritten"
    SKIPPED = "skipped"
    FAILED = "failed"


class ArtifactResult(BaseModel):
    """Outcome of processing a single changed file."""

    model_config = ConfigDict(frozen=False)

    file_path: str                  # Changed source file, relative to repo root
    status: ArtifactStatus
    output_path: str | None = None  # Set when a test file was written
    error: str | None = None        # Failure or skip reason

    @property
    def ok(self) -> bool:
        return self.status != ArtifactStatus.FAILED


class RunReport(BaseModel):
    """Aggregate of a full resolve-then-process run."""

    model_config = ConfigDict(frozen=False)

    strategy: ResolutionStrategy = ResolutionStrategy.NONE
    changed_files: list[str] = Field(default_factory=list)
    results: list[ArtifactResult] = Field(default_factory=list)
    created: int = 0
    appended: int = 0
    overwritten: int = 0
    skipped: int = 0
    failed: int = 0
    started_at: datetime = Field(default_factory=datetime.now)

    @property
    def passed(self) -> bool:
        return self.failed == 0

    @property
    def failures(self) -> list[ArtifactResult]:
        return [result for result in self.results if not result.ok]
