"""Tests for git, path and prompt utility functions."""

import subprocess
from pathlib import Path

import pytest

from testgen_bot.models import OutputLayout
from testgen_bot.utils.git_commands import (
    describe_git_error,
    filter_source_files,
    normalize_path,
    run_git,
    split_name_only,
)
from testgen_bot.utils.output_paths import derive_test_path, output_file_name
from testgen_bot.utils.prompt_builder import (
    CODE_END_MARKER,
    CODE_START_MARKER,
    build_test_prompt,
)


# --- git_commands ---


def test_normalize_path_converts_backslashes():
    assert normalize_path("src\\lib\\a.js") == "src/lib/a.js"
    assert normalize_path("  src/a.js \n") == "src/a.js"


def test_split_name_only_drops_blank_lines():
    assert split_name_only("a.js\n\n  b.js  \n\n") == ["a.js", "b.js"]
    assert split_name_only("") == []


def test_filter_source_files_keeps_extension_and_order():
    paths = ["z.js", "a.ts", "m.js", "z.js", "lib\\m.js", "docs/readme.md", "jsfile"]
    assert filter_source_files(paths, (".js",)) == ["z.js", "m.js", "lib/m.js"]


def test_run_git_returns_stdout(git_repo):
    assert run_git(["rev-parse", "--is-inside-work-tree"], str(git_repo)).strip() == "true"


def test_run_git_raises_on_failure(git_repo):
    with pytest.raises(subprocess.CalledProcessError) as exc_info:
        run_git(["rev-parse", "--verify", "no-such-ref"], str(git_repo))
    assert exc_info.value.returncode != 0


def test_run_git_reports_non_ascii_paths_unquoted(git_repo):
    (git_repo / "naïve.js").write_text("let x = 1;\n", encoding="utf-8")
    output = run_git(["ls-files", "--others", "--exclude-standard"], str(git_repo))
    assert split_name_only(output) == ["naïve.js"]


def test_describe_git_error_includes_stderr():
    error = subprocess.CalledProcessError(
        128, ["git", "diff"], output="", stderr="fatal: not a git repository\n"
    )
    assert describe_git_error(error) == (
        "Command failed (128): git diff: fatal: not a git repository"
    )


def test_describe_git_error_for_os_error():
    assert "No such file" in describe_git_error(FileNotFoundError(2, "No such file or directory"))


# --- output_paths ---


@pytest.mark.parametrize(
    "changed_file, expected",
    [
        ("foo/bar.js", "bar.test.js"),
        ("index.js", "index.test.js"),
        ("lib/jquery.min.js", "jquery.min.test.js"),
        ("src/App.jsx", "App.test.jsx"),
    ],
)
def test_output_file_name(changed_file, expected):
    assert output_file_name(changed_file) == expected


def test_derive_test_path_flat():
    assert derive_test_path("foo/bar.js") == Path("tests") / "bar.test.js"


def test_derive_test_path_mirrored():
    assert derive_test_path("foo/sub/bar.js", "out", OutputLayout.MIRRORED) == (
        Path("out") / "foo" / "sub" / "bar.test.js"
    )


def test_derive_test_path_mirrored_top_level_file():
    assert derive_test_path("bar.js", layout=OutputLayout.MIRRORED) == Path("tests") / "bar.test.js"


@pytest.mark.parametrize("changed_file", ["../escape.js", "a/../../escape.js", "/abs/x.js"])
def test_derive_test_path_mirrored_rejects_traversal(changed_file):
    with pytest.raises(ValueError, match="Path traversal"):
        derive_test_path(changed_file, layout=OutputLayout.MIRRORED)


# --- prompt_builder ---


def test_prompt_delimits_code_with_markers():
    prompt = build_test_prompt("const a = 1;")
    start = prompt.index(CODE_START_MARKER)
    end = prompt.index(CODE_END_MARKER)
    assert start < prompt.index("const a = 1;") < end


def test_prompt_forbids_prose_and_fences():
    prompt = build_test_prompt("x")
    assert "Use the Jest testing framework" in prompt
    assert "Do NOT include explanations" in prompt
    assert "Do NOT include any markdown characters" in prompt
    assert "Output ONLY pure Jest test code" in prompt


def test_prompt_keeps_braces_and_placeholders_in_source():
    source = "const tpl = `${name}`; function f() { return '{end}'; }"
    prompt = build_test_prompt(source)
    assert source in prompt
    assert prompt.count(CODE_END_MARKER) == 1
