from .capacity import DEFAULT_POLICY, CapacityPolicy
from .errors import (
    DateNotInWindowError,
    InvalidDayError,
    SchedulingError,
    ServiceNotFoundError,
    WorkloadExceededError,
)
from .locks import DayLockRegistry
from .scheduling import AvailableWorkload, ScheduleService, ScheduleView

__all__ = [
    "AvailableWorkload",
    "CapacityPolicy",
    "DEFAULT_POLICY",
    "DateNotInWindowError",
    "DayLockRegistry",
    "InvalidDayError",
    "ScheduleService",
    "ScheduleView",
    "SchedulingError",
    "ServiceNotFoundError",
    "WorkloadExceededError",
]
