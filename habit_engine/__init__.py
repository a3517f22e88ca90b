from .errors import (
    AmbiguousError,
    HabitError,
    InvalidDate,
    InvalidSchedule,
    IsLockedError,
    NotFoundError,
    StoreError,
    UsageError,
)

__version__ = "0.3.0"

__all__ = [
    "AmbiguousError",
    "HabitError",
    "InvalidDate",
    "InvalidSchedule",
    "IsLockedError",
    "NotFoundError",
    "StoreError",
    "UsageError",
    "__version__",
]
