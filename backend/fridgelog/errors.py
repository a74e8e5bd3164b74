"""
Scheduler Errors
Typed errors raised by the scheduler; the HTTP layer maps them to responses
"""
from typing import List, Optional


class SchedulerError(Exception):
    """Base error for all scheduler failures"""

    code = "SCHEDULER_ERROR"
    status_code = 400

    def __init__(self, message: str, code: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code


class InvalidSchedule(SchedulerError):
    code = "SCHEDULE_ERROR"

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = errors or [message]


class InvalidIdentifier(SchedulerError):
    code = "INVALID_IDENTIFIER"


class InvalidDateRange(SchedulerError):
    code = "INVALID_DATE_RANGE"


class IncompleteRequiredItems(SchedulerError):
    code = "COMPLETION_ERROR"

    def __init__(self, missing_item_ids: List[str]):
        super().__init__("All required items must be completed")
        self.missing_item_ids = missing_item_ids


class NotFound(SchedulerError):
    code = "NOT_FOUND"
    status_code = 404


class AlreadyCompleted(SchedulerError):
    code = "ALREADY_COMPLETED"
    status_code = 409
