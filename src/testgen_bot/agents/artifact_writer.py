"""Test artifact writer: generates and persists a test file per changed file."""

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol

from testgen_bot.agents.exceptions import ArtifactPersistError, SourceReadError
from testgen_bot.models import ArtifactResult, ArtifactStatus, OutputLayout, WritePolicy
from testgen_bot.utils.output_paths import DEFAULT_OUTPUT_DIR, derive_test_path
from testgen_bot.utils.prompt_builder import build_test_prompt

logger = logging.getLogger(__name__)

APPEND_SEPARATOR = "\n\n"


class Generator(Protocol):
    def generate(self, prompt: str) -> str: ...


class TestArtifactWriter:
    """Requests generated tests for changed files and writes them under output_dir."""

    __test__ = False  # not a pytest test class

    def __init__(
        self,
        generator: Generator,
        output_dir: str = DEFAULT_OUTPUT_DIR,
        policy: WritePolicy = WritePolicy.APPEND,
        layout: OutputLayout = OutputLayout.FLAT,
        repo_path: str = ".",
    ) -> None:
        self.generator = generator
        self.policy = WritePolicy(policy)
        self.layout = OutputLayout(layout)
        self.repo_path = Path(repo_path)
        self.output_dir = self.repo_path / output_dir

    def process(
        self,
        changed_files: Iterable[str],
        source_root: str | None = None,
    ) -> list[ArtifactResult]:
        """Process each changed file in order; one failure never stops the batch.

        Args:
            changed_files: Paths relative to source_root.
            source_root: Directory the paths are relative to (defaults to repo_path).
        """
        return [
            self.process_file(changed_file, source_root) for changed_file in changed_files
        ]

    def process_file(self, changed_file: str, source_root: str | None = None) -> ArtifactResult:
        """Generate and persist tests for a single changed file.

        Flow:
        1. Read the source; skip if missing, unreadable, or blank
        2. Build the prompt and call the generator once
        3. Derive the output path and create its directory
        4. Create, append to, or overwrite the output file per policy

        Generation and persistence errors are logged as warnings and
        returned as a FAILED result rather than raised.
        """
        try:
            content = self._read_source(changed_file, source_root)
        except SourceReadError as e:
            logger.info("Skipping %s: %s", changed_file, e)
            return ArtifactResult(
                file_path=changed_file, status=ArtifactStatus.SKIPPED, error=str(e)
            )

        if content is None:
            return ArtifactResult(
                file_path=changed_file,
                status=ArtifactStatus.SKIPPED,
                error="file no longer exists",
            )
        if not content.strip():
            logger.info("Skipping %s: file is empty", changed_file)
            return ArtifactResult(
                file_path=changed_file, status=ArtifactStatus.SKIPPED, error="file is empty"
            )

        logger.info("Generating tests for: %s", changed_file)
        try:
            artifact = self.generator.generate(build_test_prompt(content))
            output_path, status = self._persist(changed_file, artifact)
        except Exception as e:
            # GenerationError / ArtifactPersistError, or whatever a custom generator raises
            logger.warning("Failed for %s: %s", changed_file, e)
            return ArtifactResult(
                file_path=changed_file, status=ArtifactStatus.FAILED, error=str(e)
            )

        return ArtifactResult(
            file_path=changed_file, status=status, output_path=str(output_path)
        )

    def _read_source(self, changed_file: str, source_root: str | None = None) -> str | None:
        """Return file content, or None if the file no longer exists.

        Raises:
            SourceReadError: If the file exists but cannot be read as UTF-8.
        """
        source_path = Path(source_root or self.repo_path) / changed_file
        if not source_path.is_file():
            return None
        try:
            return source_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise SourceReadError(f"Failed to read file '{changed_file}': {e}") from e

    def _persist(self, changed_file: str, artifact: str) -> tuple[Path, ArtifactStatus]:
        """Write artifact to the derived output path according to policy.

        Raises:
            ArtifactPersistError: On path derivation, mkdir, or write failure.
        """
        try:
            output_path = derive_test_path(changed_file, self.output_dir, self.layout)
            output_path.parent.mkdir(parents=True, exist_ok=True)

            if output_path.exists() and self.policy == WritePolicy.APPEND:
                logger.info("Appending -> %s", output_path)
                with open(output_path, "a", encoding="utf-8") as f:
                    f.write(f"{APPEND_SEPARATOR}{artifact}")
                return output_path, ArtifactStatus.APPENDED

            if output_path.exists():
                logger.info("Overwriting -> %s", output_path)
                output_path.write_text(artifact, encoding="utf-8")
                return output_path, ArtifactStatus.OVERWRITTEN

            logger.info("Creating -> %s", output_path)
            output_path.write_text(artifact, encoding="utf-8")
            return output_path, ArtifactStatus.CREATED
        except (OSError, ValueError) as e:
            raise ArtifactPersistError(
                f"Failed to write tests for '{changed_file}': {e}"
            ) from e
