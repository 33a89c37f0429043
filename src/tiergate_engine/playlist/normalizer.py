"""Position normalization for ordered collections (playlists).

Every operation returns a dense sequence: positions ``0..n-1`` in ascending
order, with the same identifiers that went in (plus or minus the one item an
append or remove names). Inputs are never mutated.
"""

from dataclasses import dataclass
from typing import Iterable, Sequence, Union

from tiergate_engine.common.exceptions import (
    DuplicateItemError,
    EmptyReorderError,
    InvalidPositionError,
    ItemNotFoundError,
)


@dataclass(frozen=True)
class OrderedItem:
    item_id: str
    position: int


ItemLike = Union[OrderedItem, tuple[str, int]]


def _coerce(items: Iterable[ItemLike]) -> list[OrderedItem]:
    """Convert inputs to ``OrderedItem`` and check the input contract."""
    result: list[OrderedItem] = []
    seen: set[str] = set()
    for item in items:
        if not isinstance(item, OrderedItem):
            item_id, position = item
            item = OrderedItem(item_id, position)
        if isinstance(item.position, bool) or not isinstance(item.position, int) or item.position < 0:
            raise InvalidPositionError(item.item_id, item.position)
        if item.item_id in seen:
            raise DuplicateItemError(item.item_id)
        seen.add(item.item_id)
        result.append(item)
    return result


def normalize(items: Iterable[ItemLike]) -> list[OrderedItem]:
    """Compact positions to ``0..n-1``, keeping input order on ties.

    >>> normalize([("a", 0), ("b", 5), ("c", 10)])
    [OrderedItem(item_id='a', position=0), OrderedItem(item_id='b', position=1), OrderedItem(item_id='c', position=2)]

    Raises:
        DuplicateItemError: If an identifier appears more than once.
        InvalidPositionError: If a position is negative or not an integer.
    """
    ranked = sorted(_coerce(items), key=lambda item: item.position)
    return [OrderedItem(item.item_id, index) for index, item in enumerate(ranked)]


def append_item(items: Iterable[ItemLike], item_id: str) -> list[OrderedItem]:
    """Add ``item_id`` at the end of the collection."""
    current = normalize(items)
    if any(item.item_id == item_id for item in current):
        raise DuplicateItemError(item_id)
    current.append(OrderedItem(item_id, len(current)))
    return current


def remove_item(items: Iterable[ItemLike], item_id: str) -> list[OrderedItem]:
    """Drop ``item_id`` and close the gap it leaves."""
    current = normalize(items)
    remaining = [item for item in current if item.item_id != item_id]
    if len(remaining) == len(current):
        raise ItemNotFoundError(item_id)
    return normalize(remaining)


def apply_reorder(items: Iterable[ItemLike], moves: Sequence[ItemLike]) -> list[OrderedItem]:
    """Move the named items to their requested positions.

    Items not named in ``moves`` keep their relative order and fill the
    remaining slots. Moves are placed in ascending requested position (ties in
    request order); a requested position past the end lands at the end. A
    payload naming every item is therefore a plain normalization of that
    payload.

    Raises:
        EmptyReorderError: If ``moves`` is empty.
        ItemNotFoundError: If a move names an item not in the collection.
        DuplicateItemError: If a move names the same item twice.
    """
    requested = _coerce(moves)
    if not requested:
        raise EmptyReorderError()

    current = normalize(items)
    known = {item.item_id for item in current}
    for move in requested:
        if move.item_id not in known:
            raise ItemNotFoundError(move.item_id)

    moved = {move.item_id for move in requested}
    order = [item.item_id for item in current if item.item_id not in moved]
    last = -1
    for move in sorted(requested, key=lambda m: m.position):
        # never in front of an earlier move, so ties keep request order
        last = min(max(move.position, last + 1), len(order))
        order.insert(last, move.item_id)

    return [OrderedItem(item_id, index) for index, item_id in enumerate(order)]


def positions_by_id(items: Iterable[ItemLike]) -> dict[str, int]:
    """Map each identifier to its normalized position."""
    return {item.item_id: item.position for item in normalize(items)}
