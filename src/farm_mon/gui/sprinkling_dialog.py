"""
Sprinkling edit dialog state.

The component that wants a new value calls request() with the current
value and receives a Future. The dialog owns its open/closed state and
resolves the future when the user confirms (new value) or cancels
(the value it was opened with). Only one edit can be open at a time.
"""

import math
from concurrent.futures import Future
from typing import Optional


def validate_sprinkling(value) -> float:
    """
    Parses a sprinkling amount in mm; accepts numbers or numeric text.

    Integral values are returned as int.

    Raises:
        ValueError: for non-numeric, non-finite or negative input.
    """
    if isinstance(value, str):
        value = value.strip()
    value = float(value)
    if not math.isfinite(value) or value < 0:
        raise ValueError(f"Sprinkling must be a finite amount >= 0 mm, got {value}")
    if value.is_integer():
        value = int(value)
    return value


class SprinklingDialog:
    """
    Attributes:
        is_open: Whether an edit is in progress
        value: Value currently entered in the dialog (mm)
    """

    def __init__(self):
        self.is_open = False
        self.value: float = 0
        self._initial: float = 0
        self._future: Optional[Future] = None

    def request(self, current_value: float) -> Future:
        """
        Opens the dialog for one edit.

        Raises:
            RuntimeError: if another edit is still open.
        """
        if self.is_open:
            raise RuntimeError("A sprinkling edit is already open")

        self._future = Future()
        self._initial = current_value
        self.value = current_value
        self.is_open = True
        return self._future

    def set_value(self, value) -> float:
        """
        Updates the entered value; accepts numbers or numeric text.

        Raises:
            ValueError: for non-numeric, non-finite or negative input.
        """
        value = validate_sprinkling(value)
        self.value = value
        return value

    def confirm(self, value=None):
        """Closes the dialog and resolves the request with the entered value."""
        if not self.is_open:
            raise RuntimeError("No sprinkling edit is open")
        if value is not None:
            self.set_value(value)
        self._close(self.value)

    def cancel(self):
        """Closes the dialog and resolves the request with the original value."""
        if not self.is_open:
            return
        self._close(self._initial)

    def _close(self, result):
        future = self._future
        self.is_open = False
        self._future = None
        future.set_result(result)
