"""Activity records and keyword classification for the insight engine."""

import re
from dataclasses import dataclass
from enum import Enum


class ActivityCategory(Enum):
    EXERCISE = "exercise"
    LEARNING = "learning"
    WORK = "work"
    SOCIAL = "social"
    SLEEP = "sleep"
    LEISURE = "leisure"
    OTHER = "other"


class ExerciseType(Enum):
    STRENGTH = "strength"
    AEROBIC = "aerobic"
    COMBINED = "combined"


# Order matters: "Strength Training" must land in EXERCISE and "Workout"
# must not fall through to WORK. Keywords are regex patterns; "rest" is a
# whole word so "Interests" and "Restaurant" stay out of SLEEP.
CATEGORY_KEYWORDS = (
    (ActivityCategory.EXERCISE, ("exercise", "fitness", "workout", "training")),
    (ActivityCategory.LEARNING, ("learning", "study", "reading", "education")),
    (ActivityCategory.WORK, ("work", "career", "job")),
    (ActivityCategory.SOCIAL, ("social", "family", "friends", "relationship")),
    (ActivityCategory.SLEEP, ("sleep", r"\brest\b")),
    (ActivityCategory.LEISURE, ("leisure", "entertainment")),
)

EXERCISE_KEYWORDS = (
    (ExerciseType.STRENGTH, ("strength", "weight", "resistance")),
    (ExerciseType.AEROBIC, ("cardio", "running", "cycling", "aerobic")),
)

WELL_STUDIED_CATEGORIES = frozenset(
    {
        ActivityCategory.EXERCISE,
        ActivityCategory.SLEEP,
        ActivityCategory.WORK,
        ActivityCategory.LEARNING,
    }
)


@dataclass
class Activity:
    """One category of daily time use entered by the user."""

    name: str
    hours: float
    days_per_week: int = 7
    color: str | None = None
    icon: str | None = None

    @property
    def effective_daily_hours(self) -> float:
        """Hours per day averaged over a full week."""

        return self.hours * self.days_per_week / 7

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "hours": self.hours,
            "days_per_week": self.days_per_week,
            "color": self.color,
            "icon": self.icon,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Activity":
        return cls(
            name=str(data.get("name", "")),
            hours=float(data.get("hours", 0.0)),
            days_per_week=int(data.get("days_per_week", data.get("daysPerWeek", 7))),
            color=data.get("color"),
            icon=data.get("icon"),
        )


@dataclass(frozen=True)
class ActivityProfile:
    """Classification of an activity name, computed once per analysis."""

    name: str
    category: ActivityCategory
    exercise_type: ExerciseType | None = None

    @property
    def well_studied(self) -> bool:
        return self.category in WELL_STUDIED_CATEGORIES


def classify_activity(name: str) -> ActivityCategory:
    """Return the first category whose keywords occur in ``name``.

    >>> classify_activity("Strength Training")
    <ActivityCategory.EXERCISE: 'exercise'>
    """
    lowered = (name or "").lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(re.search(keyword, lowered) for keyword in keywords):
            return category
    return ActivityCategory.OTHER


def classify_exercise(name: str) -> ExerciseType:
    lowered = (name or "").lower()
    for exercise_type, keywords in EXERCISE_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return exercise_type
    return ExerciseType.COMBINED


def profile_activity(name: str) -> ActivityProfile:
    category = classify_activity(name)
    exercise_type = (
        classify_exercise(name) if category is ActivityCategory.EXERCISE else None
    )
    return ActivityProfile(
        name=name, category=category, exercise_type=exercise_type
    )
