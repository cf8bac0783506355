"""Tests for spendsync.types."""

import pytest

from conftest import make_expense
from spendsync.types import ActionKind, Expense, Page, PendingAction, SyncResult, new_expense_id


class TestExpenseFromDict:
    def test_round_trip_omits_missing_notes(self):
        expense = make_expense("1")
        assert "notes" not in expense.to_dict()
        assert Expense.from_dict(expense.to_dict()) == expense

    def test_numeric_id_and_string_amount(self):
        expense = Expense.from_dict(
            {"id": 42, "title": "Taxi", "amount": "18.40", "date": "2024-01-02", "category": "Travel"}
        )
        assert expense.id == "42"
        assert expense.amount == 18.4

    @pytest.mark.parametrize(
        "data",
        [
            None,
            [],
            {"id": "1"},
            {"id": True, "title": "t", "amount": 1, "date": "d", "category": "c"},
            {"id": "1", "title": "t", "amount": "abc", "date": "d", "category": "c"},
            {"id": "1", "title": "t", "amount": False, "date": "d", "category": "c"},
            {"id": "1", "title": 5, "amount": 1, "date": "d", "category": "c"},
            {"id": "1", "title": "t", "amount": 1, "date": "d", "category": "c", "notes": 3},
        ],
    )
    def test_bad_shapes_raise(self, data):
        with pytest.raises(ValueError):
            Expense.from_dict(data)


class TestPendingAction:
    def test_record_id_and_expense(self):
        expense = make_expense("a")
        assert PendingAction.add(expense).record_id == "a"
        assert PendingAction.update(expense).expense == expense
        assert PendingAction.delete("a").record_id == "a"
        assert PendingAction.delete("a").expense is None

    def test_persisted_shape(self):
        assert PendingAction.delete("a").to_dict() == {"kind": "delete", "payload": "a"}
        assert PendingAction.add(make_expense("a")).to_dict()["kind"] == "add"

    @pytest.mark.parametrize(
        "action",
        [
            PendingAction.add(make_expense("a", notes="n")),
            PendingAction.update(make_expense("b")),
            PendingAction.delete("c"),
        ],
    )
    def test_from_dict_inverts_to_dict(self, action):
        assert PendingAction.from_dict(action.to_dict()) == action

    @pytest.mark.parametrize(
        "data",
        [
            "add",
            {"kind": "upsert", "payload": "a"},
            {"kind": "delete", "payload": ""},
            {"kind": "delete", "payload": {"id": "a"}},
            {"kind": "add", "payload": "a"},
        ],
    )
    def test_from_dict_rejects(self, data):
        with pytest.raises(ValueError):
            PendingAction.from_dict(data)

    def test_kind_is_string_enum(self):
        assert ActionKind.ADD == "add"


class TestResults:
    def test_unattempted_is_not_success(self):
        result = SyncResult()
        assert result.success is False
        assert result.remaining == 0

    def test_remaining_after_failure(self):
        result = SyncResult(attempted=True, pushed=1, total=3, errors=["boom"])
        assert result.remaining == 2

    def test_page_has_more(self):
        assert Page(items=[make_expense("1")], page=1, page_size=1, total=2).has_more
        assert not Page(items=[make_expense("1")], page=1, page_size=5, total=1).has_more

    def test_new_expense_id_is_numeric(self):
        assert new_expense_id().isdigit()
