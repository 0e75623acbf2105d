"""
Widget ABC contracts for metadata-driven fields.

Field widgets read and write their inner editors only through these
contracts, so an editor that forgets a capability fails at class creation
instead of at the first user edit.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable


class ValueGettable(ABC):
    """Editor whose current value can be read; None means empty."""

    @abstractmethod
    def get_value(self) -> Any:
        ...


class ValueSettable(ABC):
    """Editor that accepts a value; None clears it without emitting a change."""

    @abstractmethod
    def set_value(self, value: Any) -> None:
        ...


class PlaceholderCapable(ABC):
    """Editor that shows hint text while empty."""

    @abstractmethod
    def set_placeholder(self, text: str) -> None:
        ...


class ChangeSignalEmitter(ABC):
    """
    Editor that reports user edits.

    Adapters connect the signal that fires on *user* interaction only
    (textEdited, activated, clicked), so programmatic set_value calls never
    loop back into a commit.
    """

    @abstractmethod
    def connect_change_signal(self, callback: Callable[[Any], None]) -> None:
        """Call ``callback(new_value)`` whenever the user changes the editor."""
