"""Item picker backed by fzf."""

import copy
import logging
import subprocess
from collections.abc import Sequence

from togglcli.config import settings
from togglcli.errors import FzfNotInstalled, PickerCancelled, PickerError
from togglcli.picker.base import ItemPicker, PickOutcome, T, classify_exit_status, render_items

logger = logging.getLogger(__name__)

# Search only from the second whitespace-separated field on, accept ANSI input
FZF_ARGS = ["-n2..", "--ansi"]


class FzfPicker(ItemPicker):
    """Delegates selection to an fzf subprocess.

    Candidate lines are written to fzf's stdin; the chosen line comes back
    on stdout and the exit status tells selection, cancellation and failure
    apart (see ``classify_exit_status``).
    """

    def __init__(self, command: str | None = None) -> None:
        self.command = command or settings.picker_command

    def pick(self, items: Sequence[T]) -> T:
        if not items:
            raise PickerError("Nothing to pick from")

        lines, lookup = render_items(items)
        fzf_input = "\n".join(lines) + "\n"

        logger.debug(f"Launching {self.command} with {len(lines)} candidates")

        try:
            result = subprocess.run(
                [self.command, *FZF_ARGS],
                input=fzf_input,
                stdout=subprocess.PIPE,
                text=True,
            )
        except FileNotFoundError as e:
            raise FzfNotInstalled(f"'{self.command}' was not found on PATH") from e
        except OSError as e:
            raise PickerError(f"Could not launch '{self.command}': {e}") from e

        outcome = classify_exit_status(result.returncode)
        logger.debug(f"{self.command} exited with {result.returncode} ({outcome.value})")

        if outcome == PickOutcome.CANCELLED:
            raise PickerCancelled("Selection cancelled")
        if outcome != PickOutcome.SELECTED:
            raise PickerError(f"'{self.command}' exited with status {result.returncode}")

        selected = result.stdout.removesuffix("\n")
        if selected not in lookup:
            raise PickerError(f"'{self.command}' returned an unknown line: {selected!r}")
        return copy.copy(lookup[selected])
