"""Tests for the in-memory habit store."""

import pytest

from conftest import MONDAY, TODAY, WEDNESDAY, make_habit
from core.errors import HabitNotFoundError, InvalidInputError
from core.habit_store import HabitStore

pytestmark = pytest.mark.unit


class TestCreate:
    def test_create_habit(self, store):
        habit = store.create("  Morning Meditation ", "mindfulness", [5, 1, 3, 1], 3)

        assert habit.id
        assert habit.title == "Morning Meditation"
        assert habit.category == "mindfulness"
        assert habit.frequency == [1, 3, 5]
        assert habit.goal_per_week == 3
        assert habit.completion_history == []
        assert (habit.streak, habit.completions_this_week, habit.total_completions) == (0, 0, 0)
        assert habit.completed_today is False
        assert store.get(habit.id) == habit

    def test_ids_are_unique(self, store):
        ids = {store.create(f"Habit {i}").id for i in range(20)}
        assert len(ids) == 20

    def test_list_keeps_insertion_order(self, store):
        titles = ["Read", "Run", "Sleep early"]
        for title in titles:
            store.create(title)
        assert [h.title for h in store.list()] == titles

    @pytest.mark.parametrize("title", ["", "   ", "\t\n", None])
    def test_blank_title_rejected(self, store, title):
        store.create("Existing")
        with pytest.raises(InvalidInputError):
            store.create(title)
        assert len(store) == 1

    def test_empty_frequency_allowed(self, store):
        assert store.create("Someday", frequency=[]).frequency == []

    @pytest.mark.parametrize("frequency", [[7], [-1], [1, "2"], [True]])
    def test_bad_frequency_rejected(self, store, frequency):
        with pytest.raises(InvalidInputError):
            store.create("Read", frequency=frequency)
        assert len(store) == 0

    def test_unknown_category_rejected(self, store):
        with pytest.raises(InvalidInputError):
            store.create("Read", category="gaming")

    @pytest.mark.parametrize("goal", [-1, 8])
    def test_goal_out_of_range_rejected(self, store, goal):
        with pytest.raises(InvalidInputError):
            store.create("Read", goal_per_week=goal)

    def test_long_title_rejected(self, store):
        with pytest.raises(InvalidInputError):
            store.create("x" * 101)


class TestUpdate:
    def test_get_unknown_returns_none(self, store):
        assert store.get("missing") is None
        assert "missing" not in store

    def test_update_unknown_raises(self, store):
        store.create("Read")
        with pytest.raises(HabitNotFoundError):
            store.update("missing", lambda h: h)
        assert len(store) == 1

    def test_toggle_unknown_raises(self, store):
        before = store.list()
        with pytest.raises(HabitNotFoundError):
            store.toggle("missing", MONDAY)
        assert store.list() == before

    def test_update_replaces_record(self, store):
        habit = store.create("Read")
        updated = store.update(habit.id, lambda h: h.model_copy(update={"title": "Read more"}))

        assert store.get(habit.id).title == "Read more"
        assert updated is store.get(habit.id)

    def test_failed_mutator_leaves_store_unchanged(self, store):
        habit = store.toggle(store.create("Read").id, MONDAY)

        def broken(_):
            raise InvalidInputError("nope")

        with pytest.raises(InvalidInputError):
            store.update(habit.id, broken)
        assert store.get(habit.id) == habit

    def test_toggle_uses_clock(self, store):
        habit = store.create("Read")
        toggled = store.toggle(habit.id)

        assert toggled.completion_history[0].date == TODAY
        assert toggled.completed_today is True
        assert store.get(habit.id) == toggled

    def test_replace_keeps_position(self, store):
        first = store.create("First")
        store.create("Second")
        store.toggle(first.id, MONDAY)
        store.replace(first)

        assert [h.title for h in store.list()] == ["First", "Second"]
        assert store.get(first.id).completion_history == []


def test_load_recomputes_stale_derived_fields(clock):
    stale = make_habit(completed=[MONDAY, WEDNESDAY]).model_copy(update={"streak": 40, "completed_today": True})
    store = HabitStore(clock=clock, policy="scheduled")
    store.load([stale])

    loaded = store.get(stale.id)
    assert loaded.streak == 2
    assert loaded.total_completions == 2
    assert loaded.completions_this_week == 2
    assert loaded.completed_today is False


def test_calendar_policy_store(clock):
    store = HabitStore(clock=clock, policy="calendar")
    habit = store.create("Steps", "fitness", [1, 3, 5])
    store.toggle(habit.id, MONDAY)

    assert store.toggle(habit.id, WEDNESDAY).streak == 1
