"""Base item picker interface and exit-status protocol."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from enum import Enum
from typing import Protocol, TypeVar


class PickableItem(Protocol):
    """Anything that can be offered to a picker as a single line."""

    def formatted(self) -> str:
        ...


T = TypeVar("T", bound=PickableItem)


class PickOutcome(str, Enum):
    """How a picker process ended.

    Attributes:
        SELECTED: The user chose a line.
        CANCELLED: The user aborted (Esc, Ctrl-C) or the process was killed.
        GENERIC: Any other failure, including "no match".
        NOT_INSTALLED: The picker executable could not be launched.
    """

    SELECTED = "selected"
    CANCELLED = "cancelled"
    GENERIC = "generic"
    NOT_INSTALLED = "not_installed"


# Explicit exit status table; anything not listed is GENERIC
_EXIT_STATUS_OUTCOMES: list[tuple[range, PickOutcome]] = [
    (range(0, 1), PickOutcome.SELECTED),
    (range(128, 255), PickOutcome.CANCELLED),
]


def classify_exit_status(status: int | None) -> PickOutcome:
    """Map a picker exit status onto an outcome.

    Args:
        status: Process exit status. None or a negative value (Python's
            encoding of "killed by signal N") means no exit status.

    Returns:
        The outcome for that status
    """
    if status is None or status < 0:
        return PickOutcome.CANCELLED
    for statuses, outcome in _EXIT_STATUS_OUTCOMES:
        if status in statuses:
            return outcome
    return PickOutcome.GENERIC


def render_items(items: Sequence[T]) -> tuple[list[str], dict[str, T]]:
    """Render items into unique picker lines plus a reverse lookup.

    Lines keep the order of their first occurrence. When two distinct items
    render identically, the lookup keeps the last one.

    Returns:
        Tuple of (lines, formatted line -> item)
    """
    lines = list(dict.fromkeys(item.formatted() for item in items))
    lookup = {item.formatted(): item for item in items}
    return lines, lookup


class ItemPicker(ABC):
    """Abstract base class for interactive pickers."""

    @abstractmethod
    def pick(self, items: Sequence[T]) -> T:
        """Let the user choose one of ``items``.

        Args:
            items: Candidates to choose from

        Returns:
            The chosen item

        Raises:
            PickerCancelled: If the user aborted
            FzfNotInstalled: If the picker program is missing
            PickerError: For any other failure
        """
        ...
