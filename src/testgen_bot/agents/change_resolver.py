"""Change set resolver: finds source files changed between revisions."""

import logging
import subprocess
from typing import Callable

from testgen_bot.agents.exceptions import ChangeResolutionError
from testgen_bot.models import ChangeSet, ResolutionStrategy, ResolverConfig
from testgen_bot.utils.git_commands import (
    REV_PARSE_MISSING_EXIT_CODE,
    describe_git_error,
    filter_source_files,
    run_git,
    split_name_only,
)

logger = logging.getLogger(__name__)

GitRunner = Callable[[list[str], str], str]

PREVIOUS_COMMIT = "HEAD~1"
WORKING_TREE_QUERIES = (
    ["diff", "--name-only", "--cached"],                 # staged
    ["diff", "--name-only"],                             # unstaged
    ["ls-files", "--others", "--exclude-standard"],      # untracked
)


class ChangeSetResolver:
    """Determines the changed source files for a CI run via git."""

    def __init__(
        self,
        config: ResolverConfig | None = None,
        runner: GitRunner = run_git,
    ) -> None:
        self.config: ResolverConfig = config or ResolverConfig()
        self._runner: GitRunner = runner

    def resolve(self) -> list[str]:
        """Return the changed files, or [] if git could not be queried."""
        return self.resolve_change_set().files

    def resolve_change_set(self) -> ChangeSet:
        """Resolve changed files, trying each strategy in order.

        Flow:
        1. base_revision + head_revision -> diff base..head
        2. base_branch_ref -> diff origin/<ref>..HEAD
        3. HEAD~1 exists -> diff HEAD~1..HEAD
        4. otherwise -> staged + unstaged + untracked

        All queries run from the work tree top level, so paths are
        root-relative even when repo_path is a subdirectory.

        Never raises: git failures are logged once as a warning and yield an
        empty ChangeSet with strategy NONE.
        """
        try:
            repo_root = self._repo_root()
            strategy, raw_paths = self._query_changed_paths(repo_root)
        except ChangeResolutionError as e:
            logger.warning("Failed to compute git diff: %s", e)
            return ChangeSet(files=[], strategy=ResolutionStrategy.NONE)

        files = filter_source_files(raw_paths, self.config.extensions)
        logger.debug(
            "Resolved %d source files from %d paths via %s",
            len(files),
            len(raw_paths),
            strategy.value,
        )
        return ChangeSet(files=files, strategy=strategy, repo_root=repo_root)

    def _repo_root(self) -> str:
        """Top level of the work tree containing repo_path.

        Every later query runs from here so that diff and ls-files both
        report paths relative to the same root.
        """
        root = self._run(["rev-parse", "--show-toplevel"], self.config.repo_path).strip()
        if not root:
            raise ChangeResolutionError(
                f"Could not determine repository root for '{self.config.repo_path}'"
            )
        return root

    def _query_changed_paths(self, cwd: str) -> tuple[ResolutionStrategy, list[str]]:
        config = self.config

        if config.has_revision_pair:
            return ResolutionStrategy.REVISION_PAIR, self._name_only(
                ["diff", "--name-only", config.base_revision, config.head_revision], cwd
            )

        if config.base_branch_ref:
            return ResolutionStrategy.BASE_BRANCH, self._name_only(
                ["diff", "--name-only", f"origin/{config.base_branch_ref}", "HEAD"], cwd
            )

        if self._has_previous_commit(cwd):
            return ResolutionStrategy.PREVIOUS_COMMIT, self._name_only(
                ["diff", "--name-only", PREVIOUS_COMMIT, "HEAD"], cwd
            )

        paths: list[str] = []
        for query in WORKING_TREE_QUERIES:
            paths.extend(self._name_only(query, cwd))
        return ResolutionStrategy.WORKING_TREE, paths

    def _has_previous_commit(self, cwd: str) -> bool:
        """True when HEAD~1 resolves to a commit.

        `rev-parse --verify --quiet` exits 1 for a missing revision; any
        other failure (no repository, no git) is a resolution error.
        """
        try:
            self._run(
                ["rev-parse", "--verify", "--quiet", f"{PREVIOUS_COMMIT}^{{commit}}"], cwd
            )
        except ChangeResolutionError as e:
            cause = e.__cause__
            if (
                isinstance(cause, subprocess.CalledProcessError)
                and cause.returncode == REV_PARSE_MISSING_EXIT_CODE
            ):
                return False
            raise
        return True

    def _name_only(self, args: list[str], cwd: str) -> list[str]:
        return split_name_only(self._run(args, cwd))

    def _run(self, args: list[str], cwd: str) -> str:
        try:
            return self._runner(args, cwd)
        except (subprocess.CalledProcessError, OSError, UnicodeDecodeError) as e:
            raise ChangeResolutionError(describe_git_error(e)) from e
