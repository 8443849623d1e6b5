class StatusFlowError(Exception):
    """Base exception for the reporting workflow service."""

    status_code = 500


class InvalidStatusError(StatusFlowError):
    """Raised when a model is assigned a status outside its allowed set."""

    status_code = 422

    def __init__(self, model: str, status: object, allowed: frozenset[str]):
        self.model = model
        self.status = status
        self.allowed = allowed
        super().__init__(f"Invalid status '{status}' for {model}; expected one of {sorted(allowed)}")


class TaskStatusInconsistentError(StatusFlowError):
    """Raised when a submitted task still has unsubmitted child reports.

    Treated as a data integrity bug: never retried.
    """

    def __init__(self, task_id: int, report_statuses: list[str]):
        self.task_id = task_id
        self.report_statuses = report_statuses
        super().__init__(
            f"Task {task_id} is not due but has reports in an unsubmitted status: {report_statuses}"
        )


class UnknownEntityTypeError(StatusFlowError):
    """Raised when a polymorphic reference names a type with no registered model."""

    def __init__(self, type_name: str):
        self.type_name = type_name
        super().__init__(f"Unknown entity type '{type_name}'")
