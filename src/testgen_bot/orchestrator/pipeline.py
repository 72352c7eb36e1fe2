"""Linear resolve-then-process pipeline.

ChangeSetResolver runs once; TestArtifactWriter then handles each changed
file in sequence. The only state shared between files is the filesystem.
"""

import logging

from testgen_bot.agents.artifact_writer import TestArtifactWriter
from testgen_bot.agents.change_resolver import ChangeSetResolver
from testgen_bot.agents.test_generator import TestGenerator
from testgen_bot.models import (
    ArtifactResult,
    ArtifactStatus,
    OutputLayout,
    ResolverConfig,
    RunReport,
    WritePolicy,
)
from testgen_bot.utils.output_paths import DEFAULT_OUTPUT_DIR

logger = logging.getLogger(__name__)

# RunReport counter field for each status
_STATUS_COUNTERS = {
    ArtifactStatus.CREATED: "created",
    ArtifactStatus.APPENDED: "appended",
    ArtifactStatus.OVERWRITTEN: "overwritten",
    ArtifactStatus.SKIPPED: "skipped",
    ArtifactStatus.FAILED: "failed",
}


def build_components(
    resolver_config: ResolverConfig,
    provider: str = "auto",
    model: str | None = None,
    output_dir: str = DEFAULT_OUTPUT_DIR,
    policy: WritePolicy = WritePolicy.APPEND,
    layout: OutputLayout = OutputLayout.FLAT,
) -> tuple[ChangeSetResolver, TestArtifactWriter]:
    """Wire a resolver and writer from explicit configuration.

    Raises:
        GeneratorConfigError: If provider is not supported.
    """
    resolver = ChangeSetResolver(resolver_config)
    writer = TestArtifactWriter(
        generator=TestGenerator(provider=provider, model=model),
        output_dir=output_dir,
        policy=policy,
        layout=layout,
        repo_path=resolver_config.repo_path,
    )
    return resolver, writer


def summarize(report: RunReport, results: list[ArtifactResult]) -> RunReport:
    """Record results on report and recompute its per-status counters."""
    report.results = list(results)
    for field in _STATUS_COUNTERS.values():
        setattr(report, field, 0)
    for result in report.results:
        field = _STATUS_COUNTERS[result.status]
        setattr(report, field, getattr(report, field) + 1)
    return report


def run_pipeline(
    resolver: ChangeSetResolver,
    writer: TestArtifactWriter,
) -> RunReport:
    """Run one full resolve-then-process cycle and return its report."""
    change_set = resolver.resolve_change_set()
    report = RunReport(strategy=change_set.strategy, changed_files=change_set.files)
    logger.info("Found %d changed files.", len(change_set.files))

    if not change_set.files:
        logger.info("No JS files changed.")
        return report

    results = writer.process(change_set.files, source_root=change_set.repo_root)
    summarize(report, results)
    if report.failed:
        logger.warning(
            "%d of %d files failed test generation",
            report.failed,
            len(report.results),
        )
    return report
