"""Custom exceptions for Sprintly."""


class SprintlyError(Exception):
    """Base exception for all Sprintly errors."""

    pass


class ValidationError(SprintlyError):
    """Raised when task or config validation fails."""

    pass


class CircularDependencyError(ValidationError):
    """Raised by the strict dependency check when tasks depend on each other in a loop."""

    def __init__(self, task_ids: set[int]) -> None:
        self.task_ids = task_ids
        ids = ", ".join(str(task_id) for task_id in sorted(task_ids))
        super().__init__(f"Circular dependency detected involving task(s): {ids}")


class MissingReferenceError(ValidationError):
    """Raised when a task depends on a task ID that does not exist."""

    pass


class ParseError(SprintlyError):
    """Raised when YAML parsing fails."""

    pass
