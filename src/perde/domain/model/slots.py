"""Slot tables for boxed categories.

Every boxed category of an order owns a fixed-length array of slots; each
slot holds at most one line and a line occupies at most one slot.  Placement
conflicts are never errors: an explicit index that is out of range or taken
falls back to the first empty slot, and when the table is full the line is
kept as overflow (it still counts toward the order total, it just has no
slot).

Quick-entry (unboxed) categories never touch this module.
"""

from __future__ import annotations

import logging

from perde.domain.exceptions import ValidationError
from perde.domain.model.catalog import BOX_COUNTS, normalize_name
from perde.domain.model.line_item import LineItem

logger = logging.getLogger(__name__)

# Two-column display order for quick-entry rows: 1-4, 2-5, 3-6.
QUICK_ROW_ORDER = (0, 3, 1, 4, 2, 5)


class SlotAllocator:
    """Per-order slot occupancy for all boxed categories."""

    def __init__(self) -> None:
        self._tables: dict[str, list[LineItem | None]] = {
            key: [None] * count for key, count in BOX_COUNTS.items()
        }
        self._overflow: dict[str, list[LineItem]] = {key: [] for key in BOX_COUNTS}

    # --- Queries --------------------------------------------------------------

    def table(self, category: str) -> list[LineItem | None]:
        """Return a copy of the category's slot array."""
        return list(self._table(category))

    def overflow(self, category: str) -> list[LineItem]:
        return list(self._overflow[self._key(category)])

    def slot_of(self, line_id: str) -> tuple[str, int] | None:
        for key, table in self._tables.items():
            for index, line in enumerate(table):
                if line is not None and line.id == line_id:
                    return key, index
        return None

    def is_empty(self, category: str, index: int) -> bool:
        table = self._table(category)
        return 0 <= index < len(table) and table[index] is None

    # --- Mutations ------------------------------------------------------------

    def place_at(self, category: str, index: int, line: LineItem) -> bool:
        """Place *line* at *index* only if in range and empty."""
        table = self._table(category)
        if not (0 <= index < len(table)):
            return False
        occupant = table[index]
        if occupant is not None and occupant.id != line.id:
            return False
        self.remove(line.id)
        table[index] = line
        line.slot_index = index
        return True

    def place_first_empty(self, category: str, line: LineItem) -> int | None:
        """Place *line* in the left-most empty slot.

        Returns the slot index, or None when the table is full (the line is
        then kept as overflow with ``slot_index = None``).
        """
        key = self._key(category)
        self.remove(line.id)
        table = self._tables[key]
        for index, occupant in enumerate(table):
            if occupant is None:
                table[index] = line
                line.slot_index = index
                return index
        logger.debug("No free slot in %s for line %s", key, line.id)
        line.slot_index = None
        self._overflow[key].append(line)
        return None

    def place(self, category: str, line: LineItem, index: int | None) -> int | None:
        """Place at *index* when possible, otherwise at the first empty slot."""
        if index is not None and self.place_at(category, index, line):
            return index
        return self.place_first_empty(category, line)

    def swap(self, category: str, i: int, j: int) -> None:
        """Exchange the occupants of two slots (either side may be empty)."""
        table = self._table(category)
        for index in (i, j):
            if not (0 <= index < len(table)):
                raise ValidationError(
                    f"Slot {index + 1} is out of range for {normalize_name(category)}"
                )
        table[i], table[j] = table[j], table[i]
        if table[i] is not None:
            table[i].slot_index = i
        if table[j] is not None:
            table[j].slot_index = j

    def remove(self, line_id: str) -> bool:
        """Clear whichever slot (or overflow entry) held the line."""
        for key, table in self._tables.items():
            for index, line in enumerate(table):
                if line is not None and line.id == line_id:
                    table[index] = None
                    return True
            overflow = self._overflow[key]
            for index, line in enumerate(overflow):
                if line.id == line_id:
                    del overflow[index]
                    return True
        return False

    # --- Internal helpers -----------------------------------------------------

    def _key(self, category: str) -> str:
        key = normalize_name(category)
        if key not in self._tables:
            raise ValidationError(f"'{category}' is not a boxed category")
        return key

    def _table(self, category: str) -> list[LineItem | None]:
        return self._tables[self._key(category)]


def quick_rows(lines: list[LineItem]) -> list[tuple[int, LineItem | None]]:
    """Pair each quick-entry row number with its line, in display order.

    Display order only; line identity and persistence order stay the
    insertion order.
    """
    return [(i, lines[i] if i < len(lines) else None) for i in QUICK_ROW_ORDER]
