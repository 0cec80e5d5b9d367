from .orchestrator import WorkflowOrchestrator

__all__ = ["WorkflowOrchestrator"]
