"""Unit tests for the slot allocator of boxed categories."""

import random
from decimal import Decimal

import pytest

from perde.domain.exceptions import ValidationError
from perde.domain.model.line_item import LineItem
from perde.domain.model.slots import SlotAllocator, quick_rows
from perde.domain.model.value_objects import Money


def _line(line_id: str) -> LineItem:
    return LineItem(
        id=line_id,
        category_id="c-fon",
        variant_id="v-saten",
        qty=1,
        width=100,
        height=0,
        unit_price=Money.of("10"),
        file_density=Decimal("1"),
        subtotal=Money.of("10"),
    )


class TestPlacement:

    def test_place_at_empty_slot(self):
        slots = SlotAllocator()
        line = _line("a")
        assert slots.place("FON PERDE", line, 2) == 2
        assert slots.table("FON PERDE")[2] is line
        assert line.slot_index == 2

    def test_occupied_slot_falls_back_to_first_empty(self):
        slots = SlotAllocator()
        slots.place("FON PERDE", _line("a"), 0)
        b = _line("b")
        assert slots.place("FON PERDE", b, 0) == 1
        assert b.slot_index == 1

    def test_out_of_range_falls_back_to_first_empty(self):
        slots = SlotAllocator()
        line = _line("a")
        assert slots.place("FON PERDE", line, 9) == 0

    def test_replacing_same_line_keeps_slot(self):
        slots = SlotAllocator()
        line = _line("a")
        slots.place("FON PERDE", line, 3)
        assert slots.place("FON PERDE", line, 3) == 3
        assert slots.table("FON PERDE").count(line) == 1

    def test_moving_line_frees_old_slot(self):
        slots = SlotAllocator()
        line = _line("a")
        slots.place("FON PERDE", line, 1)
        slots.place("FON PERDE", line, 4)
        table = slots.table("FON PERDE")
        assert table[1] is None
        assert table[4] is line

    def test_full_table_overflows(self):
        slots = SlotAllocator()
        for i in range(5):
            slots.place("FON PERDE", _line(f"l{i}"), None)
        extra = _line("extra")
        assert slots.place("FON PERDE", extra, None) is None
        assert extra.slot_index is None
        assert slots.overflow("FON PERDE") == [extra]

    def test_unboxed_category_rejected(self):
        with pytest.raises(ValidationError, match="not a boxed category"):
            SlotAllocator().place("AKSESUAR", _line("a"), 0)

    def test_table_sizes(self):
        slots = SlotAllocator()
        assert len(slots.table("TÜL PERDE")) == 10
        assert len(slots.table("güneşlik")) == 5


class TestSwapAndRemove:

    def test_swap_updates_slot_indices(self):
        slots = SlotAllocator()
        a, b = _line("a"), _line("b")
        slots.place("FON PERDE", a, 0)
        slots.place("FON PERDE", b, 3)
        slots.swap("FON PERDE", 0, 3)
        assert slots.table("FON PERDE")[0] is b
        assert a.slot_index == 3
        assert b.slot_index == 0

    def test_swap_with_empty_slot_moves_line(self):
        slots = SlotAllocator()
        a = _line("a")
        slots.place("FON PERDE", a, 0)
        slots.swap("FON PERDE", 0, 2)
        assert slots.table("FON PERDE")[0] is None
        assert a.slot_index == 2

    def test_swap_out_of_range_rejected(self):
        with pytest.raises(ValidationError, match="out of range"):
            SlotAllocator().swap("FON PERDE", 0, 5)

    def test_remove_clears_slot(self):
        slots = SlotAllocator()
        slots.place("FON PERDE", _line("a"), 1)
        assert slots.remove("a") is True
        assert slots.slot_of("a") is None
        assert slots.remove("a") is False

    def test_remove_clears_overflow(self):
        slots = SlotAllocator()
        for i in range(6):
            slots.place("FON PERDE", _line(f"l{i}"), None)
        assert slots.remove("l5") is True
        assert slots.overflow("FON PERDE") == []


class TestQuickRows:

    def test_display_order_is_two_columns(self):
        lines = [_line(str(i)) for i in range(4)]
        rows = quick_rows(lines)
        assert [index for index, _ in rows] == [0, 3, 1, 4, 2, 5]
        assert rows[1][1] is lines[3]
        assert rows[3][1] is None


class TestOccupancyInvariant:

    def test_random_operations_keep_one_slot_per_line(self):
        rng = random.Random(7)
        slots = SlotAllocator()
        live: dict[str, LineItem] = {}
        for step in range(300):
            action = rng.choice(["place", "place", "swap", "remove"])
            if action == "place":
                reuse = live and rng.random() < 0.3
                line = live[rng.choice(list(live))] if reuse else _line(f"l{step}")
                live[line.id] = line
                slots.place("FON PERDE", line, rng.choice([None, -1, 0, 2, 4, 9]))
            elif action == "swap":
                slots.swap("FON PERDE", rng.randrange(5), rng.randrange(5))
            elif live:
                slots.remove(live.pop(rng.choice(list(live))).id)

            table = slots.table("FON PERDE")
            ids = [line.id for line in table if line is not None]
            ids += [line.id for line in slots.overflow("FON PERDE")]
            assert len(ids) == len(set(ids))
            assert sorted(ids) == sorted(live)
            for index, line in enumerate(table):
                if line is not None:
                    assert line.slot_index == index
