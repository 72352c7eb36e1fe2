"""Utilities for the test generation bot."""

from testgen_bot.utils.git_commands import (
    describe_git_error,
    filter_source_files,
    normalize_path,
    run_git,
    split_name_only,
)
from testgen_bot.utils.output_paths import derive_test_path, output_file_name
from testgen_bot.utils.prompt_builder import build_test_prompt

__all__ = [
    "build_test_prompt",
    "derive_test_path",
    "describe_git_error",
    "filter_source_files",
    "normalize_path",
    "output_file_name",
    "run_git",
    "split_name_only",
]
