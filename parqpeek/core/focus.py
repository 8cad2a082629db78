"""
Key routing between the query editor, the data pane and the save dialog

The router only decides; it never edits text. ``route`` returns a command
for keys it owns and None for keys that belong to the focused text buffer.
Keys are Textual key names ("ctrl+e", "pagedown", "a", ...).
"""

import logging
from enum import Enum
from typing import Dict, Optional, Type

from parqpeek.core.commands import (
    CancelSave,
    Command,
    ConfirmSave,
    Execute,
    NextBatch,
    OpenSave,
    PreviousBatch,
    Quit,
    Reset,
    ScrollLeft,
    ScrollRight,
    SelectNext,
    SelectPrev,
    ShowHelp,
    ToggleFocus,
)

logger = logging.getLogger(__name__)


class FocusTarget(Enum):
    QUERY_INPUT = "query_input"
    DATA_PANE = "data_pane"
    SAVE_DIALOG = "save_dialog"


# Intercepted before any focus-specific routing
GLOBAL_KEYS: Dict[str, Type[Command]] = {
    "ctrl+q": Quit,
    "ctrl+e": Execute,
    "ctrl+r": Reset,
    "ctrl+s": OpenSave,
    "f2": ToggleFocus,
    "f1": ShowHelp,
}

# Global commands still available in read-only (peek) mode
READ_ONLY_COMMANDS = (Quit, ShowHelp)

DATA_PANE_KEYS: Dict[str, Type[Command]] = {
    "up": SelectPrev,
    "down": SelectNext,
    "left": ScrollLeft,
    "right": ScrollRight,
    "pageup": PreviousBatch,
    "pagedown": NextBatch,
}


class FocusRouter:
    def __init__(self, read_only: bool = False):
        self.read_only = read_only
        self.focus = FocusTarget.DATA_PANE if read_only else FocusTarget.QUERY_INPUT

    @property
    def save_dialog_open(self) -> bool:
        return self.focus is FocusTarget.SAVE_DIALOG

    def route(self, key: str) -> Optional[Command]:
        """Map a key to a command, or None to hand it to the focused buffer."""
        if key == "escape":
            # Escape closes the save dialog rather than the app
            return CancelSave() if self.save_dialog_open else Quit()

        command_type = GLOBAL_KEYS.get(key)
        if command_type is not None:
            if self.read_only and command_type not in READ_ONLY_COMMANDS:
                logger.debug("Ignoring %s in read-only mode", key)
                return None
            return command_type()

        if self.focus is FocusTarget.SAVE_DIALOG:
            return ConfirmSave() if key == "enter" else None

        if self.focus is FocusTarget.DATA_PANE:
            command_type = DATA_PANE_KEYS.get(key)
            return command_type() if command_type is not None else None

        return None

    def toggle(self) -> None:
        """Swap query input and data pane. No effect while saving or read-only."""
        if self.read_only:
            return
        if self.focus is FocusTarget.QUERY_INPUT:
            self.focus = FocusTarget.DATA_PANE
        elif self.focus is FocusTarget.DATA_PANE:
            self.focus = FocusTarget.QUERY_INPUT

    def open_save_dialog(self) -> None:
        self.focus = FocusTarget.SAVE_DIALOG

    def close_save_dialog(self) -> None:
        self.focus = FocusTarget.QUERY_INPUT
