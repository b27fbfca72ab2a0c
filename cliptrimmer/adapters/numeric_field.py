"""Numeric start/end time fields."""

import math
from typing import Optional, Protocol

from ..constants import RegionConstants
from ..region import RegionModel, format_seconds

START = "start"
END = "end"


class TextField(Protocol):
    """A text entry the adapter reads from and reverts."""

    def get_text(self) -> str: ...

    def set_text(self, text: str) -> None: ...

    def has_focus(self) -> bool: ...


def parse_seconds(text: str) -> Optional[float]:
    """Parse a field value, returning None for anything non-numeric."""
    try:
        value = float(text.strip())
    except (ValueError, AttributeError):
        return None
    if not math.isfinite(value):
        return None
    return value


class NumericFieldAdapter:
    """Applies typed start or end values to the region model.

    A value that does not parse, or that the model rejects, is not
    applied; the field is reset to the last accepted value instead.
    """

    def __init__(
        self,
        model: RegionModel,
        field: TextField,
        bound: str,
        step: float = RegionConstants.NUDGE_STEP,
    ):
        """Initialize the adapter.

        Args:
            model: Region model of the session
            field: The entry widget wrapper
            bound: Which end of the region the field edits ("start" or "end")
            step: Increment for keyboard stepping in seconds
        """
        if bound not in (START, END):
            raise ValueError(f"Unknown region bound: {bound}")
        self.model = model
        self.field = field
        self.bound = bound
        self.step_size = step
        self.enabled = False

    def enable(self) -> None:
        self.enabled = True

    def disable(self) -> None:
        self.enabled = False

    def commit(self) -> bool:
        """Apply the field text (focus-out or Return).

        Returns:
            True if the value was accepted
        """
        if not self.enabled:
            self.revert()
            return False

        text = self.field.get_text()
        if text.strip() == format_seconds(self._current()):
            # Unchanged readout, keep the unrounded value
            return True

        value = parse_seconds(text)
        if value is None:
            self.revert()
            return False

        if self.bound == START:
            accepted = self.model.set_start(value)
        else:
            accepted = self.model.set_end(value)

        if not accepted:
            self.revert()
        return accepted

    def step(self, direction: int) -> bool:
        """Nudge the bound by one step; ``direction`` is +1 or -1."""
        if not self.enabled or direction == 0:
            return False

        delta = self.step_size if direction > 0 else -self.step_size
        if self.bound == START:
            accepted = self.model.nudge_start(delta)
        else:
            accepted = self.model.nudge_end(delta)

        if not accepted:
            self.revert()
        return accepted

    def revert(self) -> None:
        """Show the last accepted value again."""
        self.field.set_text(format_seconds(self._current()))

    def _current(self) -> float:
        return self.model.start if self.bound == START else self.model.end
