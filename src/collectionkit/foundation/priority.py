"""Scheduling priority hint attached to spawned work units."""

from __future__ import annotations

from enum import IntEnum


class Priority(IntEnum):
    """Ordered scheduling hint, forwarded uninterpreted to the substrate.

    ``None`` in place of a Priority means "substrate default".
    """
    BACKGROUND = 0
    LOW = 1
    MEDIUM = 2
    HIGH = 3

    @classmethod
    def parse(cls, value: object) -> Priority | None:
        """Coerce a name (case-insensitive), int, or numeric string to a Priority."""
        match value:
            case None | Priority():
                return value
            case bool():
                raise ValueError(f"Invalid priority: {value!r}")
            case int():
                return cls(value)
            case str() if value.strip().lstrip("-").isdigit():
                return cls(int(value))
            case str():
                try:
                    return cls[value.strip().upper()]
                except KeyError:
                    raise ValueError(f"Unknown priority: {value!r}") from None
        raise ValueError(f"Invalid priority: {value!r}")
