from enum import StrEnum


class WorkflowStatus(StrEnum):
    RUNNING = "RUNNING"
    PAUSED_FOR_REVIEW = "PAUSED_FOR_REVIEW"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class WorkerTool(StrEnum):
    NARRATIVE = "narrative"
    USER_REVIEW = "userReview"
    MODEL = "model"
    REVIEW = "review"
    USE_CASE = "usecase"
    MVC = "mvc"
    SCENARIO = "scenario"


class StateKey(StrEnum):
    """Keys of the worker state dict, also the artifact names exposed to clients."""

    NARRATIVE_OVERRIDE = "narrativeOverride"
    PLANTUML = "plantuml"
    ISSUES = "issues"
    NARRATIVE_ISSUES = "narrativeIssues"
    USE_CASE_MODEL = "useCaseModel"
    MVC_DIAGRAM = "mvcDiagram"
    SCENARIO = "scenario"
