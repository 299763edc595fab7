"""Interactive item pickers."""

from togglcli.picker.base import ItemPicker, PickableItem, PickOutcome, classify_exit_status
from togglcli.picker.fzf import FzfPicker

__all__ = ["ItemPicker", "PickableItem", "PickOutcome", "classify_exit_status", "FzfPicker"]
