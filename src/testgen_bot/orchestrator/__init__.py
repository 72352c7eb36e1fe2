"""Orchestration of the resolve-then-process pipeline."""

from testgen_bot.orchestrator.pipeline import build_components, run_pipeline, summarize

__all__ = [
    "build_components",
    "run_pipeline",
    "summarize",
]
