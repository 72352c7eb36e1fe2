"""Derivation of output test file paths from changed source files."""

from pathlib import Path, PurePosixPath

from testgen_bot.models.artifact_models import OutputLayout

DEFAULT_OUTPUT_DIR = "tests"
TEST_INFIX = ".test"


def output_file_name(changed_file: str) -> str:
    """Return "<stem>.test<suffix>" for a changed file (bar.js -> bar.test.js)."""
    source = PurePosixPath(changed_file)
    return f"{source.stem}{TEST_INFIX}{source.suffix}"


def derive_test_path(
    changed_file: str,
    output_dir: str | Path = DEFAULT_OUTPUT_DIR,
    layout: OutputLayout = OutputLayout.FLAT,
) -> Path:
    """Derive the deterministic output path for a changed file.

    Flat layout only uses the basename, so files sharing a basename in
    different directories map to the same output path.

    Raises:
        ValueError: If a mirrored path would escape output_dir.
    """
    output_root = Path(output_dir)
    name = output_file_name(changed_file)
    if layout == OutputLayout.FLAT:
        return output_root / name

    parent = PurePosixPath(changed_file).parent
    if ".." in parent.parts or parent.is_absolute():
        raise ValueError(
            f"Path traversal attempt detected: '{changed_file}' "
            f"resolves outside of '{output_root}'."
        )
    return output_root.joinpath(*parent.parts, name)
