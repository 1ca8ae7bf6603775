"""Pending duration table edited apart from the live timer until saved."""

from __future__ import annotations

import logging
import re

from time_dilation.focus.timer import DurationTable, TimerMode

logger = logging.getLogger(__name__)

# Leading integer, the way a form field's parseInt reads "12abc" as 12.
# ASCII digits only: parseInt gives NaN for "٣" or "２５".
_LEADING_INT = re.compile(r"([+-]?)([0-9]+)", re.ASCII)

# Upper bound on a single duration (about 69 days)
MAX_MINUTES = 99_999


def parse_minutes(raw_input: str | int) -> int:
    """Parse user input as whole minutes, clamped to 1..MAX_MINUTES.

    Unparseable input counts as 0 and is clamped like any other value.
    """
    if isinstance(raw_input, int):
        minutes = raw_input
    else:
        match = _LEADING_INT.match(raw_input.lstrip())
        if not match:
            minutes = 0
        elif match.group(1) == "-":
            minutes = 0
        else:
            digits = match.group(2).lstrip("0")
            # Never hand int() an arbitrarily long digit run
            minutes = MAX_MINUTES if len(digits) > len(str(MAX_MINUTES)) else int(digits or "0")
    return min(MAX_MINUTES, max(1, minutes))


class DurationEditor:
    """Holds the pending DurationTable behind the settings panel."""

    def __init__(self, active: DurationTable, defaults: DurationTable | None = None):
        self._defaults = defaults or DurationTable()
        self._pending = active
        self._is_open = False

    @property
    def pending(self) -> DurationTable:
        return self._pending

    @property
    def is_open(self) -> bool:
        return self._is_open

    def open(self, active: DurationTable) -> None:
        """Show the editor, seeded from the active table."""
        self._pending = active
        self._is_open = True

    def close(self) -> None:
        """Hide the editor without committing."""
        self._is_open = False

    def toggle(self, active: DurationTable) -> None:
        if self._is_open:
            self.close()
        else:
            self.open(active)

    def pending_minutes(self, mode: TimerMode | str) -> int:
        return self._pending[mode] // 60

    def edit_duration(self, mode: TimerMode | str, raw_input: str | int) -> int:
        """Store a new pending duration. Returns the stored seconds."""
        seconds = parse_minutes(raw_input) * 60
        self._pending = self._pending.replace(mode, seconds)
        logger.debug(f"Pending {TimerMode(mode).value} duration: {seconds}s")
        return seconds

    def discard_to_default(self) -> None:
        """Reset the pending table only; the active table is untouched."""
        self._pending = self._defaults
        logger.info("Pending durations reset to defaults")

    def save(self) -> DurationTable:
        """Close the editor and hand back the table to commit."""
        self._is_open = False
        return self._pending
