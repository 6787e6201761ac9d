"""Employee domain enums."""

from enum import IntEnum


class EmployeeRole(IntEnum):
    """Employee role.

    Ordered: every permission check compares the integer values.
    """

    EMPLOYEE = 1
    LEADER = 2
    DIRECTOR = 3

    @property
    def display_name(self) -> str:
        """Role name as carried in access tokens (e.g. ``Director``)."""
        return self.name.capitalize()

    @classmethod
    def from_display_name(cls, value: str | None) -> "EmployeeRole":
        """Parse a role name, degrading to the lowest role when unrecognized."""
        if value:
            try:
                return cls[value.upper()]
            except KeyError:
                pass
        return cls.EMPLOYEE


class Gender(IntEnum):
    """Employee gender."""

    UNSPECIFIED = 0
    FEMALE = 1
    MALE = 2
