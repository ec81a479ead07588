"""Agent module - retrieval pipeline and runner."""

from hnfetch.agent.workflow import PipelineResult, StorySource, run_pipeline

__all__ = ["PipelineResult", "StorySource", "run_pipeline"]
