import pytest

from core.intent import parse_habit_intent

pytestmark = pytest.mark.unit


def test_weekday_meditation():
    draft = parse_habit_intent("I want to start meditating every weekday")

    assert draft.title == "Meditating"
    assert draft.category == "mindfulness"
    assert draft.frequency == [1, 2, 3, 4, 5]
    assert draft.goal_per_week == 5


def test_daily_habit():
    draft = parse_habit_intent("Drink water daily")

    assert draft.title == "Drink water"
    assert draft.category == "health"
    assert draft.frequency == [0, 1, 2, 3, 4, 5, 6]
    assert draft.goal_per_week == 7


def test_weekend_habit():
    draft = parse_habit_intent("I'd like to start a habit of going for a long run on weekends")

    assert draft.category == "fitness"
    assert draft.frequency == [0, 6]
    assert draft.title.startswith("Going for a long run")


def test_named_weekdays():
    draft = parse_habit_intent("Remind me to floss on Mondays and Fridays.")

    assert draft.title == "Floss"
    assert draft.frequency == [1, 5]
    assert draft.goal_per_week == 2


def test_defaults_when_no_schedule_or_keyword():
    draft = parse_habit_intent("I want to tidy the garage")

    assert draft.category == "productivity"
    assert draft.frequency == [1, 3, 5]


def test_reading_is_learning():
    assert parse_habit_intent("track reading 20 pages every day").category == "learning"


@pytest.mark.parametrize("text", ["", "   ", "hello there", "how am I doing this week?", "start"])
def test_no_intent(text):
    assert parse_habit_intent(text) is None


@pytest.mark.parametrize(
    "text, category",
    [
        ("I want to create a habit of reading", "learning"),
        ("I want to start playing piano", "creativity"),
        ("track brunch with friends every sunday", "productivity"),
        ("I already want to journal daily", "mindfulness"),
    ],
)
def test_keywords_match_word_starts(text, category):
    assert parse_habit_intent(text).category == category
