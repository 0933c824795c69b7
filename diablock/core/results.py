"""Command outcomes."""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class CommandResult:
    """
    Outcome of a player command.

    A rejected command carries a human-readable reason and has changed
    nothing.
    """

    success: bool
    message: str = ""
    data: Optional[Any] = None

    @classmethod
    def ok(cls, message: str = "", data: Any = None) -> "CommandResult":
        return cls(success=True, message=message, data=data)

    @classmethod
    def rejected(cls, reason: str) -> "CommandResult":
        return cls(success=False, message=reason)

    def __bool__(self) -> bool:
        return self.success
