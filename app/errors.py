"""Domain error types raised by the job lifecycle and persistence layers."""

from __future__ import annotations


class JobMowError(Exception):
    """Base class for all domain errors."""


class InvalidTransition(JobMowError):
    """A requested status change is not allowed from the job's current state."""

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot {requested} a job in status {current}")


class ValidationError(JobMowError):
    """A required field is missing or a value is unusable."""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


class PersistenceFailure(JobMowError):
    """The backend rejected a write; in-memory state has been rolled back."""


class ExternalServiceUnavailable(JobMowError):
    """AI, weather or postcode service absent. Always handled with a fallback."""


class NotFound(JobMowError):
    """A referenced job, customer or expense does not exist."""


class JobNotFound(NotFound):
    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__(f"Job {job_id} not found")


class CustomerNotFound(NotFound):
    def __init__(self, customer_id: str):
        self.customer_id = customer_id
        super().__init__(f"No jobs for customer {customer_id}")


class ExpenseNotFound(NotFound):
    def __init__(self, expense_id: str):
        self.expense_id = expense_id
        super().__init__(f"Expense {expense_id} not found")
