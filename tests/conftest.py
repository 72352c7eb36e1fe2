import subprocess
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from testgen_bot.agents.exceptions import GenerationError


def _git(repo: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *args],
        cwd=repo,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


@pytest.fixture
def git_repo(tmp_path):
    """An empty git repository with a committer identity configured."""
    repo = tmp_path / "repo"
    repo.mkdir()
    _git(repo, "init", "-q")
    _git(repo, "config", "user.email", "test@example.com")
    _git(repo, "config", "user.name", "Test User")
    _git(repo, "config", "commit.gpgsign", "false")
    return repo


@pytest.fixture
def git(git_repo):
    """Run a git command inside git_repo and return stripped stdout."""
    def run(*args: str) -> str:
        return _git(git_repo, *args)
    return run


@pytest.fixture
def commit(git_repo, git):
    """Write {relative_path: content} into git_repo and commit; return the new SHA."""
    def make_commit(files: dict[str, str], message: str = "change") -> str:
        for relative_path, content in files.items():
            path = git_repo / relative_path
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        git("add", "-A")
        git("commit", "-q", "-m", message)
        return git("rev-parse", "HEAD")
    return make_commit


@pytest.fixture
def mock_generator():
    """Generator double returning fixed test code."""
    generator = MagicMock()
    generator.generate.return_value = "test('generated', () => {});"
    return generator


@pytest.fixture
def failing_generator():
    """Generator double that rejects prompts containing any of the given markers."""
    def build(failing_markers: set[str], response: str = "test('ok', () => {});"):
        def generate(prompt: str) -> str:
            if any(marker in prompt for marker in failing_markers):
                raise GenerationError("429 Resource has been exhausted")
            return response

        generator = MagicMock()
        generator.generate.side_effect = generate
        return generator
    return build
