from typing import Iterable, Optional


class TaskforgeError(Exception):
    """Base class for errors that abort a seeding or migration run."""


class GenerationExhausted(TaskforgeError):
    def __init__(self, attempts: int, what: str = "unique email"):
        self.attempts = attempts
        super().__init__(f"Could not generate {what} after {attempts} attempts")


class PrerequisiteMissing(TaskforgeError):
    def __init__(self, missing: Iterable[str], hint: Optional[str] = "run bootstrap-roles first"):
        self.missing = sorted(missing)
        message = f"Required roles missing: {', '.join(self.missing)}"
        if hint:
            message = f"{message} ({hint})"
        super().__init__(message)


class PersistenceError(TaskforgeError):
    pass
