"""Models describing change detection input and output."""

from collections.abc import Mapping
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_EXTENSIONS = (".js",)

# Environment variables recognised by ResolverConfig.from_env
BASE_REVISION_ENV = "BASE_SHA"
HEAD_REVISION_ENV = "HEAD_SHA"
BASE_BRANCH_ENV = "GITHUB_BASE_REF"


class ResolutionStrategy(str, Enum):
    """Which fallback step produced a change set."""

    REVISION_PAIR = "revision_pair"
    BASE_BRANCH = "base_branch"
    PREVIOUS_COMMIT = "previous_commit"
    WORKING_TREE = "working_tree"
    NONE = "none"


class ResolverConfig(BaseModel):
    """Explicit options for ChangeSetResolver.

    base_revision and head_revision are only used as a pair; supplying one
    without the other falls through to the next strategy.
    """

    model_config = ConfigDict(frozen=True)

    base_revision: str | None = None
    head_revision: str | None = None
    base_branch_ref: str | None = None
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    repo_path: str = "."

    @field_validator("base_revision", "head_revision", "base_branch_ref", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value.strip() if isinstance(value, str) else value

    @field_validator("extensions", mode="before")
    @classmethod
    def _normalize_extensions(cls, value):
        if isinstance(value, str):
            value = value.split(",")
        normalized = []
        for ext in value:
            ext = ext.strip()
            if not ext:
                continue
            normalized.append(ext if ext.startswith(".") else f".{ext}")
        return tuple(normalized) or DEFAULT_EXTENSIONS

    @property
    def has_revision_pair(self) -> bool:
        return bool(self.base_revision and self.head_revision)

    @classmethod
    def from_env(cls, env: Mapping[str, str], **overrides) -> "ResolverConfig":
        """Build a config from an environment mapping (usually os.environ)."""
        values = {
            "base_revision": env.get(BASE_REVISION_ENV),
            "head_revision": env.get(HEAD_REVISION_ENV),
            "base_branch_ref": env.get(BASE_BRANCH_ENV),
        }
        values.update(overrides)
        return cls(**values)


class ChangeSet(BaseModel):
    """Ordered, deduplicated changed source files and how they were found."""

    model_config = ConfigDict(frozen=False)

    files: list[str] = Field(default_factory=list)
    strategy: ResolutionStrategy = ResolutionStrategy.NONE
    repo_root: str | None = None  # work tree top level the paths are relative to
