"""Tests for the dense ordering helpers."""

from dataclasses import dataclass

import pytest

from sparklink.lib.exceptions import OrderingError
from sparklink.lib.ordering import (
    OrderEntry,
    append_at_end,
    changed_entries,
    move,
    order_entries,
    parse_entries,
    reindex_after_removal,
    renumber,
    sort_by_order,
    validate,
    validate_entries,
    with_order,
)


@dataclass(frozen=True)
class Item:
    id: str
    order: int


def _items(*names):
    return [Item(id=name, order=i) for i, name in enumerate(names)]


class TestValidate:
    def test_dense_zero_based_is_valid(self):
        assert validate(_items("a", "b", "c")) is True

    def test_empty_collection_is_valid(self):
        assert validate([]) is True

    def test_unsorted_but_dense_is_valid(self):
        items = [Item("a", 2), Item("b", 0), Item("c", 1)]
        assert validate(items) is True

    def test_gap_is_invalid(self):
        assert validate([Item("a", 0), Item("b", 2)]) is False

    def test_duplicate_order_is_invalid(self):
        assert validate([Item("a", 0), Item("b", 0)]) is False

    def test_one_based_is_invalid(self):
        assert validate([Item("a", 1), Item("b", 2)]) is False


class TestAppendAtEnd:
    def test_empty_collection_gets_order_zero(self):
        result = append_at_end([], Item("new", 99))
        assert result == [Item("new", 0)]

    def test_appends_after_existing_without_renumbering(self):
        items = _items("a", "b")
        result = append_at_end(items, Item("c", 7))

        assert [item.order for item in result] == [0, 1, 2]
        assert result[:2] == items
        assert validate(result)

    def test_input_not_mutated(self):
        items = _items("a")
        append_at_end(items, Item("b", 0))
        assert len(items) == 1


class TestReindexAfterRemoval:
    def test_delete_middle_item_closes_gap(self):
        """Three items [0,1,2]; removing order=1 leaves [0,1]."""
        items = _items("a", "b", "c")

        result = reindex_after_removal(items, 1)

        assert [item.id for item in result] == ["a", "c"]
        assert [item.order for item in result] == [0, 1]

    def test_remove_last_item_needs_no_renumbering(self):
        items = _items("a", "b", "c")
        result = reindex_after_removal(items, 2)
        assert result == items[:2]

    def test_remove_first_item_shifts_everything(self):
        result = reindex_after_removal(_items("a", "b", "c"), 0)
        assert [(i.id, i.order) for i in result] == [("b", 0), ("c", 1)]

    def test_result_is_valid_for_every_index(self):
        items = _items("a", "b", "c", "d", "e")
        for index in range(len(items)):
            assert validate(reindex_after_removal(items, index))

    def test_out_of_range_raises(self):
        with pytest.raises(IndexError):
            reindex_after_removal(_items("a"), 1)
        with pytest.raises(IndexError):
            reindex_after_removal([], 0)

    def test_does_not_mutate_input(self):
        items = _items("a", "b", "c")
        reindex_after_removal(items, 0)
        assert [item.order for item in items] == [0, 1, 2]


class TestMove:
    def test_move_first_to_last(self):
        """[A,B,C] moving A to index 2 gives [B,C,A] with orders [0,1,2]."""
        result = renumber(move(_items("A", "B", "C"), 0, 2))

        assert [item.id for item in result] == ["B", "C", "A"]
        assert [item.order for item in result] == [0, 1, 2]

    def test_move_last_to_first(self):
        result = move(_items("A", "B", "C"), 2, 0)
        assert [item.id for item in result] == ["C", "A", "B"]

    def test_move_to_same_index_is_identity(self):
        items = _items("A", "B", "C")
        assert move(items, 1, 1) == items

    def test_result_is_permutation_with_moved_item_at_target(self):
        items = _items("a", "b", "c", "d", "e", "f")
        for src in range(len(items)):
            for dst in range(len(items)):
                result = move(items, src, dst)
                assert sorted(i.id for i in result) == sorted(i.id for i in items)
                assert result[dst].id == items[src].id
                for position, item in enumerate(result):
                    assert abs(position - items.index(item)) <= 1 or item.id == items[src].id

    def test_renumbered_move_is_valid(self):
        items = _items("a", "b", "c", "d")
        assert validate(renumber(move(items, 3, 1)))

    def test_out_of_range_indices_raise(self):
        items = _items("a", "b")
        with pytest.raises(IndexError):
            move(items, 2, 0)
        with pytest.raises(IndexError):
            move(items, 0, -1)


class TestEntries:
    def test_order_entries_uses_list_position(self):
        items = [Item("x", 5), Item("y", 9)]
        assert order_entries(items) == [OrderEntry("x", 0), OrderEntry("y", 1)]

    def test_changed_entries_only_reports_moved_items(self):
        before = _items("a", "b", "c", "d")
        after = move(before, 1, 2)

        assert changed_entries(before, after) == [OrderEntry("c", 1), OrderEntry("b", 2)]

    def test_entry_to_dict_stringifies_id(self):
        assert OrderEntry(id=7, order=0).to_dict() == {"id": "7", "order": 0}

    def test_parse_entries(self):
        entries = parse_entries([{"id": "a", "order": "1"}, {"id": "b", "order": 0}])
        assert entries == [OrderEntry("a", 1), OrderEntry("b", 0)]

    def test_parse_entries_rejects_malformed_rows(self):
        with pytest.raises(OrderingError):
            parse_entries([{"id": "a"}])
        with pytest.raises(OrderingError):
            parse_entries([{"id": "a", "order": "first"}])


class TestValidateEntries:
    def test_accepts_exact_permutation(self):
        validate_entries([OrderEntry("b", 0), OrderEntry("a", 1)], ["a", "b"])

    def test_rejects_unknown_id(self):
        with pytest.raises(OrderingError, match="Unknown"):
            validate_entries([OrderEntry("a", 0), OrderEntry("z", 1)], ["a", "b"])

    def test_rejects_missing_id(self):
        with pytest.raises(OrderingError, match="missing"):
            validate_entries([OrderEntry("a", 0)], ["a", "b"])

    def test_rejects_duplicate_id(self):
        with pytest.raises(OrderingError, match="Duplicate"):
            validate_entries([OrderEntry("a", 0), OrderEntry("a", 1)], ["a", "b"])

    def test_rejects_gapped_orders(self):
        with pytest.raises(OrderingError):
            validate_entries([OrderEntry("a", 0), OrderEntry("b", 2)], ["a", "b"])


class TestHelpers:
    def test_sort_by_order(self):
        items = [Item("b", 1), Item("a", 0)]
        assert [i.id for i in sort_by_order(items)] == ["a", "b"]

    def test_with_order_on_plain_object(self):
        class Row:
            def __init__(self):
                self.id = "r"
                self.order = 0

        row = Row()
        clone = with_order(row, 3)
        assert clone.order == 3
        assert row.order == 0
