"""Utilities for invoking git and normalizing the paths it reports."""

import subprocess
from collections.abc import Iterable

GIT_BINARY = "git"
# Report non-ASCII paths verbatim instead of C-quoting them ("caf\303\251.js")
GIT_CONFIG_OVERRIDES = ("-c", "core.quotePath=false")

# Exit code of `git rev-parse --verify --quiet` for a revision that does not exist
REV_PARSE_MISSING_EXIT_CODE = 1


def run_git(args: list[str], cwd: str = ".") -> str:
    """Run a git subcommand and return its stdout.

    Args:
        args: Arguments after "git" (e.g. ["diff", "--name-only", "HEAD~1", "HEAD"]).
        cwd: Working directory (repository root).

    Returns:
        Captured stdout as text.

    Raises:
        subprocess.CalledProcessError: If git exits non-zero.
        OSError: If git is not installed or cwd does not exist.
    """
    result = subprocess.run(
        [GIT_BINARY, *GIT_CONFIG_OVERRIDES, *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        encoding="utf-8",
        check=True,
    )
    return result.stdout


def describe_git_error(error: BaseException) -> str:
    """Render a git failure as a single readable message."""
    if isinstance(error, subprocess.CalledProcessError):
        cmd = error.cmd if isinstance(error.cmd, str) else " ".join(error.cmd)
        stderr = (error.stderr or "").strip()
        message = f"Command failed ({error.returncode}): {cmd}"
        return f"{message}: {stderr}" if stderr else message
    return str(error)


def split_name_only(output: str) -> list[str]:
    """Split `--name-only` style output into non-blank, stripped lines."""
    return [line.strip() for line in output.splitlines() if line.strip()]


def normalize_path(path: str) -> str:
    """Canonicalize path separators to forward slashes."""
    return path.strip().replace("\\", "/")


def filter_source_files(
    paths: Iterable[str],
    extensions: tuple[str, ...],
) -> list[str]:
    """Normalize, keep recognized extensions, and dedupe in first-seen order."""
    normalized = (normalize_path(path) for path in paths)
    matching = (path for path in normalized if path and path.endswith(extensions))
    return list(dict.fromkeys(matching))
