"""
User-entered sprinkling (irrigation) values.

The store overlays the analytics series without ever mutating it. Every
edit returns a new store, so views holding an older store keep seeing the
values they were rendered with.
"""

from typing import Any, Dict, Iterator, Tuple


def override_key(identity: Any, day_index: int) -> Tuple[Any, int]:
    """
    Key of one sprinkling value.

    Args:
        identity: Selection.identity (plotId string or (row, col) tuple).
        day_index: Position of the day in the selection's series.
    """
    return identity, int(day_index)


class SprinklingOverrideStore:
    """
    Copy-on-write mapping of override_key -> sprinkling value in mm.

    Entries are only ever added or replaced, never removed.
    """

    def __init__(self, values: Dict[Tuple[Any, int], float] = None):
        self._values = dict(values or {})

    def get(self, key: Tuple[Any, int]) -> float:
        return self._values.get(key, 0)

    def set(self, key: Tuple[Any, int], value: float) -> "SprinklingOverrideStore":
        """Returns a new store with key set to value; self is unchanged."""
        values = dict(self._values)
        values[key] = value
        return SprinklingOverrideStore(values)

    def __contains__(self, key) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return len(self._values)

    def items(self) -> Iterator[Tuple[Tuple[Any, int], float]]:
        return iter(list(self._values.items()))

    def __repr__(self):
        return f"SprinklingOverrideStore({len(self._values)} values)"
