from .orchestrator import StudyPipeline, build_pipeline

__all__ = ["StudyPipeline", "build_pipeline"]
