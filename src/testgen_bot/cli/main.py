"""CLI entry point for the test generation bot."""
import argparse
from dotenv import load_dotenv
import json
import logging
import os
import sys
import traceback
from pathlib import Path

from testgen_bot.agents.exceptions import AgentError, GeneratorConfigError
from testgen_bot.models import (
    ArtifactStatus,
    OutputLayout,
    ResolverConfig,
    RunReport,
    WritePolicy,
)
from testgen_bot.utils.output_paths import DEFAULT_OUTPUT_DIR

load_dotenv()

# Exit codes
EXIT_SUCCESS = 0
EXIT_INVALID_INPUT = 1
EXIT_PARTIAL_FAILURE = 2
EXIT_CONFIG_ERROR = 3
EXIT_UNEXPECTED = 5
EXIT_KEYBOARD_INTERRUPT = 130

# Defaults
DEFAULT_PROVIDER = "auto"
DEFAULT_EXTENSIONS = ".js"
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

# Safe keys allowed in config output (no secrets)
_SAFE_CONFIG_KEYS = frozenset({
    "repo_path", "output_dir", "policy", "layout", "extensions",
    "llm_provider", "model", "base_revision", "head_revision",
    "base_branch_ref", "dry_run", "output_json", "strict", "verbose",
})

_STATUS_SYMBOLS = {
    ArtifactStatus.CREATED: "+",
    ArtifactStatus.APPENDED: ">",
    ArtifactStatus.OVERWRITTEN: "=",
    ArtifactStatus.SKIPPED: "-",
    ArtifactStatus.FAILED: "!",
}


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    parser = argparse.ArgumentParser(
        prog="testgen-bot",
        description=(
            "Generate Jest tests for JavaScript files changed in the current "
            "git revision range"
        ),
    )
    parser.add_argument(
        "--repo-path",
        type=str,
        default=".",
        help="Path to the repository root (default: current directory)",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=DEFAULT_OUTPUT_DIR,
        help=f"Directory for generated tests, relative to the repo (default: {DEFAULT_OUTPUT_DIR})",
    )
    parser.add_argument(
        "--policy",
        type=str,
        default=WritePolicy.APPEND.value,
        choices=[policy.value for policy in WritePolicy],
        help="What to do when a test file already exists (default: append)",
    )
    parser.add_argument(
        "--layout",
        type=str,
        default=OutputLayout.FLAT.value,
        choices=[layout.value for layout in OutputLayout],
        help=(
            "flat: tests/<name>.test.js (default); "
            "mirrored: tests/<source dir>/<name>.test.js"
        ),
    )
    parser.add_argument(
        "--extensions",
        type=str,
        default=DEFAULT_EXTENSIONS,
        help=f"Comma-separated source extensions to consider (default: {DEFAULT_EXTENSIONS})",
    )
    parser.add_argument(
        "--llm-provider",
        type=str,
        default=DEFAULT_PROVIDER,
        choices=("auto", "gemini", "anthropic", "openai"),
        help=(
            "Text-generation provider: auto (default, first configured of "
            "gemini, anthropic, openai), gemini, anthropic, or openai"
        ),
    )
    parser.add_argument(
        "--model",
        type=str,
        default=None,
        help="Model ID override (default: provider-specific)",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable verbose output")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Resolve and list changed files without generating tests",
    )
    parser.add_argument(
        "--output-json", action="store_true", help="Output results as JSON"
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help=f"Exit with {EXIT_PARTIAL_FAILURE} when any file fails generation",
    )
    return parser


def configure_logging(verbose: bool) -> None:
    """Route module loggers to stderr; DEBUG when verbose, INFO otherwise."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def validate_repo_path(raw_path: str) -> str:
    """Validate and resolve the repository path.

    Raises:
        SystemExit: If path is not a valid directory.
    """
    resolved = Path(raw_path).resolve()
    if not resolved.is_dir():
        print(f"Error: '{raw_path}' is not a valid directory.", file=sys.stderr)
        raise SystemExit(EXIT_INVALID_INPUT)
    return str(resolved)


def build_resolver_config(args: argparse.Namespace, repo_path: str) -> ResolverConfig:
    """Read revision overrides from the environment once, at the process boundary."""
    return ResolverConfig.from_env(
        os.environ,
        extensions=args.extensions,
        repo_path=repo_path,
    )


def create_components(args: argparse.Namespace, resolver_config: ResolverConfig):
    """Create the resolver and writer from parsed CLI arguments."""
    from testgen_bot.orchestrator.pipeline import build_components

    return build_components(
        resolver_config,
        provider=args.llm_provider,
        model=args.model,
        output_dir=args.output_dir,
        policy=WritePolicy(args.policy),
        layout=OutputLayout(args.layout),
    )


def format_report_json(report: RunReport) -> str:
    """Serialize a RunReport to JSON, including derived fields."""
    payload = report.model_dump(mode="json")
    payload["passed"] = report.passed
    return json.dumps(payload, indent=2, default=str)


def print_report_human(report: RunReport) -> None:
    """Print results in human-readable format."""
    print(f"\n{'='*60}")
    print("Test Generation Results")
    print(f"{'='*60}")
    print(f"\nStrategy: {report.strategy.value}")
    print(f"Changed files: {len(report.changed_files)}")

    for result in report.results:
        symbol = _STATUS_SYMBOLS[result.status]
        target = f" -> {result.output_path}" if result.output_path else ""
        reason = f" ({result.error})" if result.error else ""
        print(f"  {symbol} {result.file_path}{target}{reason}")

    print(
        f"\nCreated: {report.created}, Appended: {report.appended}, "
        f"Overwritten: {report.overwritten}, Skipped: {report.skipped}, "
        f"Failed: {report.failed}"
    )
    print(f"\n{'='*60}")


def print_config_human(config: dict) -> None:
    """Print configuration in human-readable format.

    Only prints keys in the safe allowlist to prevent secret leakage.
    """
    print("\nConfiguration:")
    print(f"{'='*40}")
    for key, value in config.items():
        if key in _SAFE_CONFIG_KEYS:
            print(f"  {key}: {value}")
    print(f"{'='*40}")


def determine_exit_code(report: RunReport, strict: bool) -> int:
    """Per-file failures only change the exit code under --strict."""
    if strict and not report.passed:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS


def _handle_error(label: str, exc: BaseException, verbose: bool, exit_code: int) -> int:
    """Print error message to stderr and return the exit code."""
    print(f"{label}: {exc}", file=sys.stderr)
    if verbose:
        traceback.print_exc(file=sys.stderr)
    return exit_code


def _run_dry(args: argparse.Namespace, config: dict, resolver_config: ResolverConfig) -> int:
    from testgen_bot.agents.change_resolver import ChangeSetResolver

    change_set = ChangeSetResolver(resolver_config).resolve_change_set()
    if args.output_json:
        config = {key: value for key, value in config.items() if key in _SAFE_CONFIG_KEYS}
        print(json.dumps(
            {**config, "strategy": change_set.strategy.value, "changed_files": change_set.files},
            indent=2,
        ))
    else:
        print_config_human(config)
        print(f"\nStrategy: {change_set.strategy.value}")
        print(f"Changed files ({len(change_set.files)}):")
        for changed_file in change_set.files:
            print(f"  - {changed_file}")
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code integer.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        repo_path = validate_repo_path(args.repo_path)
    except SystemExit as exc:
        return exc.code

    resolver_config = build_resolver_config(args, repo_path)
    config = {
        "repo_path": repo_path,
        "output_dir": args.output_dir,
        "policy": args.policy,
        "layout": args.layout,
        "extensions": ",".join(resolver_config.extensions),
        "llm_provider": args.llm_provider,
        "model": args.model,
        "base_revision": resolver_config.base_revision,
        "head_revision": resolver_config.head_revision,
        "base_branch_ref": resolver_config.base_branch_ref,
        "dry_run": args.dry_run,
        "output_json": args.output_json,
        "strict": args.strict,
        "verbose": args.verbose,
    }

    try:
        if args.dry_run:
            return _run_dry(args, config, resolver_config)

        from testgen_bot.orchestrator.pipeline import run_pipeline

        resolver, writer = create_components(args, resolver_config)
        report = run_pipeline(resolver, writer)

        if args.output_json:
            print(format_report_json(report))
        else:
            print_report_human(report)

        return determine_exit_code(report, args.strict)

    except GeneratorConfigError as exc:
        return _handle_error("Configuration error", exc, args.verbose, EXIT_CONFIG_ERROR)

    except AgentError as exc:
        return _handle_error("Agent error", exc, args.verbose, EXIT_UNEXPECTED)

    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_KEYBOARD_INTERRUPT

    except Exception as exc:
        return _handle_error("Unexpected error", exc, args.verbose, EXIT_UNEXPECTED)


if __name__ == "__main__":
    sys.exit(main())
