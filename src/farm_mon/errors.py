"""
Error taxonomy for farm_mon.

Recoverable conditions (InvalidSelection, NotFound) are turned into the
unselected view by the orchestrator. DegenerateGrid aborts dataset loading.
IndexOutOfRange signals a caller bug. A click outside the grid is not an
error at all: PixelGrid.resolve_click returns None.
"""


class FarmMonError(Exception):
    """Base class for all farm_mon errors."""


class InvalidSelection(FarmMonError, ValueError):
    """Malformed selection type or selection id."""


class NotFound(FarmMonError, LookupError):
    """Well-formed selection that references a missing plot or pixel."""


class DegenerateGrid(FarmMonError, ValueError):
    """Bounding box with zero extent on one axis, or empty dimensions."""


class IndexOutOfRange(FarmMonError, IndexError):
    """Pixel index outside the grid passed to a geometry helper."""
