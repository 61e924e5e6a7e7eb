from typing import Any


class WorkflowException(Exception):
    """Base exception for the workflow domain."""


class WorkflowSessionNotFoundException(WorkflowException):
    pass


class WorkflowStateException(WorkflowException):
    """The session is not in a state that allows the requested transition."""


class WorkflowValidationException(WorkflowException):
    pass


class UnknownWorkerException(WorkflowException):
    pass


class MissingArtifactException(WorkflowException):
    """A worker ran before the step that produces its input."""


class PauseForUserReview(WorkflowException):
    """
    Raised by a worker to suspend the pipeline until a person has reviewed the artifacts.
    The orchestrator persists review_data and resumes after the current step.
    """

    def __init__(self, request_id: str, review_data: dict[str, Any], message: str = "Workflow paused for user review"):
        super().__init__(message)
        self.request_id = request_id
        self.review_data = review_data
