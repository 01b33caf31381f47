"""LangGraph workflow wiring the pipeline stages together."""

from pagefacts.graph.workflow import analyze, create_workflow, run_pipeline

__all__ = ["analyze", "create_workflow", "run_pipeline"]
