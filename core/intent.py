"""Turns a chat message like "I want to start meditating every weekday" into a habit draft."""
import re
from typing import Optional

from models.habit import HabitDraft

# Checked in order; first hit wins. Keywords match at the start of a word
CATEGORY_KEYWORDS = [
    ("mindfulness", ("meditat", "mindful", "breath", "journal", "gratitude", "yoga")),
    ("fitness", ("run", "gym", "workout", "exercise", "walk", "steps", "push-up", "pushup", "swim", "cycle", "lift")),
    ("sleep", ("sleep", "bed", "nap", "wake up")),
    ("health", ("water", "drink", "eat", "vegetable", "fruit", "vitamin", "diet", "sugar", "floss")),
    ("learning", ("read", "study", "learn", "course", "language", "book", "practice")),
    ("creativity", ("draw", "paint", "write", "music", "guitar", "piano", "sing", "photo")),
    ("work", ("work", "email", "meeting", "inbox", "office")),
    ("productivity", ("plan", "todo", "to-do", "focus", "clean", "organi")),
]

WEEKDAY_NAMES = {
    "sunday": 0,
    "monday": 1,
    "tuesday": 2,
    "wednesday": 3,
    "thursday": 4,
    "friday": 5,
    "saturday": 6,
}

CREATION_CUES = ("want to", "remind me to", "habit of", "habit", "start", "track", "every", "daily")

DEFAULT_FREQUENCY = [1, 3, 5]

# Leading phrasing stripped from the title
_LEAD_IN = re.compile(
    r"^(?:i\s+|i(?='d))?(?:(?:would like to|want to|wanna|need to|should|will|'d like to)\b)?\s*"
    r"(?:(?:start|begin|track|build|create|add|remind me to|make)\b)?\s*"
    r"(?:a\s+)?(?:new\s+)?(?:habit\s+(?:of|to)?\s*)?",
)
_SCHEDULE_TAIL = re.compile(
    r"\b(?:every\s*day|everyday|daily|each day|on weekdays|every weekday|weekdays|on weekends|every weekend|weekends"
    r"|(?:on|every)\s+(?:(?:sun|mon|tues|wednes|thurs|fri|satur)days?(?:\s*(?:,|and)\s*)?)+)\b.*$",
)

def _category(text: str) -> str:
    for category, keywords in CATEGORY_KEYWORDS:
        if any(re.search(r"\b" + re.escape(k), text) for k in keywords):
            return category
    return "productivity"

def _frequency(text: str):
    if "weekday" in text:
        return [1, 2, 3, 4, 5]
    if "weekend" in text:
        return [0, 6]
    if "daily" in text or "every day" in text or "everyday" in text or "each day" in text:
        return list(range(7))
    named = sorted({idx for name, idx in WEEKDAY_NAMES.items() if name in text})
    return named or list(DEFAULT_FREQUENCY)

def _title(text: str) -> str:
    title = text.strip().rstrip(".!?")
    title = _LEAD_IN.sub("", title, count=1)
    title = _SCHEDULE_TAIL.sub("", title).strip(" ,.-")
    return title[:1].upper() + title[1:100]

def parse_habit_intent(text: str) -> Optional[HabitDraft]:
    """
    Keyword parse of free text into a HabitDraft.

    Returns None when the text carries no creation cue or nothing is left to
    use as a title.
    """
    if not text:
        return None
    lowered = " ".join(text.lower().split())
    if not any(cue in lowered for cue in CREATION_CUES):
        return None

    title = _title(lowered)
    if not title:
        return None

    frequency = _frequency(lowered)
    return HabitDraft(
        title=title,
        category=_category(lowered),
        frequency=frequency,
        goal_per_week=len(frequency),
    )
