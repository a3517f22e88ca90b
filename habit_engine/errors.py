class HabitError(Exception):
    exit_code = 1

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class UsageError(HabitError):
    exit_code = 2


class InvalidDate(UsageError):
    pass


class InvalidSchedule(UsageError):
    pass


class NotFoundError(HabitError):
    exit_code = 3


class AmbiguousError(HabitError):
    exit_code = 4


class StoreError(HabitError):
    exit_code = 5


class IsLockedError(StoreError):
    pass
