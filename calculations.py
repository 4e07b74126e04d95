"""Lifetime arithmetic for the visualizer: ages, weeks and activity years."""

from dataclasses import dataclass, field
from datetime import date, datetime
from math import floor
from typing import Sequence

import numpy as np

from activities import Activity
from config import (
    COLOR_PALETTE,
    DAYS_PER_YEAR,
    HOURS_PER_YEAR,
    MAX_DAILY_HOURS,
    MS_PER_DAY,
    WEEKS_PER_YEAR,
)

FREE_TIME = "Free Time"


@dataclass
class ActivityStat:
    name: str
    years: float
    percentage: float
    color: str
    icon: str
    comparisons: list[dict[str, str]] = field(default_factory=list)


@dataclass
class FutureProjection:
    activity: str
    years_so_far: float
    years_remaining: float


@dataclass
class LifeSummary:
    """Everything the results panel shows for one birthdate and expectancy."""

    age: float
    life_expectancy: float
    activity_stats: list[ActivityStat]
    weeks_lived: int
    weeks_total: float
    weeks_remaining: float
    future_projections: list[FutureProjection]
    days_remaining: float = 0.0


@dataclass
class Insight:
    text: str
    activity_name: str
    kind: str  # balance | pattern | projection | comparison | motivation
    icon: str
    priority: int


def _as_datetime(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime(value.year, value.month, value.day)


def format_number(num: float) -> str:
    """Format with thousands separators and at most one decimal place."""

    text = f"{num:,.1f}"
    return text[:-2] if text.endswith(".0") else text


# ---------------------------------------------------------------------------
# Time arithmetic
# ---------------------------------------------------------------------------

def calculate_age(birthdate: date, now: date | None = None) -> int:
    """Return the age in whole calendar years on ``now`` (default today)."""

    today = now or date.today()
    age = today.year - birthdate.year
    if (today.month, today.day) < (birthdate.month, birthdate.day):
        age -= 1
    return age


def calculate_alive_days(birthdate: date, now: datetime | None = None) -> float:
    """Return the fractional number of days elapsed since ``birthdate``."""

    current = _as_datetime(now) if now is not None else datetime.now()
    elapsed = current - _as_datetime(birthdate)
    return elapsed.total_seconds() * 1000 / MS_PER_DAY


def calculate_activity_years(daily_hours: float, alive_days: float) -> float:
    """Years spent on an activity practised ``daily_hours`` per day.

    Uses a fixed 8760-hour year, so leap days are ignored.
    """
    return daily_hours * alive_days / HOURS_PER_YEAR


def calculate_remaining_years(
    birthdate: date, life_expectancy: float, now: date | None = None
) -> float:
    return max(0, life_expectancy - calculate_age(birthdate, now))


def calculate_remaining_weeks(
    birthdate: date, life_expectancy: float, now: date | None = None
) -> float:
    return max(0, calculate_remaining_years(birthdate, life_expectancy, now) * WEEKS_PER_YEAR)


def calculate_total_weeks(life_expectancy: float) -> float:
    return life_expectancy * WEEKS_PER_YEAR


def calculate_lived_weeks(birthdate: date, now: datetime | None = None) -> int:
    return floor(calculate_alive_days(birthdate, now) / 7)


# ---------------------------------------------------------------------------
# Icons and comparisons
# ---------------------------------------------------------------------------

ACTIVITY_ICONS = {
    "Sleep": "fa-bed",
    "Work": "fa-briefcase",
    "Commute": "fa-car",
    "Exercise": "fa-dumbbell",
    "Social Media": "fa-hashtag",
    "TV/Entertainment": "fa-tv",
    "Eating": "fa-utensils",
    "Family Time": "fa-users",
    "Cooking": "fa-kitchen-set",
    "Shopping": "fa-shopping-cart",
    "Hobbies": "fa-paint-brush",
    "Reading": "fa-book",
    "Gaming": "fa-gamepad",
    "Studying": "fa-graduation-cap",
    "Cleaning": "fa-broom",
    "Meditation": "fa-om",
    "Phone Calls": "fa-phone",
    "Social Activities": "fa-users",
    "Travel": "fa-plane",
}


def get_activity_icon(activity_name: str) -> str:
    normalized = activity_name.strip().lower()
    for key, icon in ACTIVITY_ICONS.items():
        if key.lower() in normalized:
            return icon
    return "fa-circle"


ACTIVITY_COMPARISONS = {
    "Sleep": [("fa-clock", lambda y: f"{format_number(y * 365 * 8)} total hours of rest and recovery")],
    "Work": [("fa-clock", lambda y: f"{format_number(y * 365 * 8)} hours of professional work")],
    "Commute": [("fa-road", lambda y: f"Approximately {format_number(y * 15000)} miles traveled")],
    "Exercise": [("fa-fire", lambda y: f"Approximately {format_number(y * 365 * 400)} calories burned")],
    "Reading": [("fa-book", lambda y: f"Approximately {floor(y * 50)} books read (assuming 200 pages/book)")],
    "Studying": [("fa-graduation-cap", lambda y: f"{floor(y / 4)} college degrees equivalent in study time")],
}

GENERIC_COMPARISONS = [
    ("fa-clock", lambda y, name: f"{format_number(y * 365 * 24)} total hours spent on {name.lower()}"),
    ("fa-calendar-days", lambda y, name: f"{format_number(y * 365)} days dedicated to this activity"),
]


def generate_comparisons(
    activity_name: str, years: float, rng: np.random.Generator | None = None
) -> list[dict[str, str]]:
    """Translate years spent on an activity into tangible equivalents."""

    if activity_name in ACTIVITY_COMPARISONS:
        return [
            {"icon": icon, "text": text(years)}
            for icon, text in ACTIVITY_COMPARISONS[activity_name]
        ]

    order = range(len(GENERIC_COMPARISONS))
    if rng is not None:
        order = rng.permutation(len(GENERIC_COMPARISONS))
    return [
        {"icon": GENERIC_COMPARISONS[i][0], "text": GENERIC_COMPARISONS[i][1](years, activity_name)}
        for i in list(order)[:2]
    ]


# ---------------------------------------------------------------------------
# Lifetime summaries
# ---------------------------------------------------------------------------

def _color_for(activity: Activity, index: int) -> str:
    return activity.color or COLOR_PALETTE[index % len(COLOR_PALETTE)]


def _free_hours(activities: Sequence[Activity]) -> float:
    return max(0.0, MAX_DAILY_HOURS - sum(a.hours for a in activities))


def _build_summary(
    activities: Sequence[Activity],
    age: float,
    alive_days: float,
    life_expectancy: float,
    rng: np.random.Generator | None = None,
) -> tuple[list[ActivityStat], list[FutureProjection]]:
    stats = []
    projections = []
    for index, activity in enumerate(activities):
        years = calculate_activity_years(activity.hours, alive_days)
        percentage = years / age * 100 if age > 0 else 0.0
        stats.append(
            ActivityStat(
                name=activity.name,
                years=years,
                percentage=percentage,
                color=_color_for(activity, index),
                icon=activity.icon or get_activity_icon(activity.name),
                comparisons=generate_comparisons(activity.name, years, rng),
            )
        )
        projections.append(
            FutureProjection(
                activity=activity.name,
                years_so_far=years,
                years_remaining=activity.hours / 24 * (life_expectancy - age),
            )
        )

    free_hours = _free_hours(activities)
    projections.append(
        FutureProjection(
            activity=FREE_TIME,
            years_so_far=calculate_activity_years(free_hours, alive_days),
            years_remaining=free_hours / 24 * (life_expectancy - age),
        )
    )
    return stats, projections


def summarize_life(
    birthdate: date,
    activities: Sequence[Activity],
    life_expectancy: float,
    now: datetime | None = None,
    rng: np.random.Generator | None = None,
) -> LifeSummary:
    """Summarize time spent so far and projected for each activity.

    Args:
        birthdate: Date of birth.
        activities: Daily activities with their hours per day.
        life_expectancy: Expected lifespan in years.
        now: Point in time to evaluate at (defaults to the current time).
        rng: Optional generator used to order generic comparisons.

    Returns:
        A :class:`LifeSummary` with per-activity stats, weeks lived and
        remaining, and future projections including a "Free Time" row.
    """
    current = _as_datetime(now) if now is not None else datetime.now()
    age = calculate_age(birthdate, current.date())
    alive_days = calculate_alive_days(birthdate, current)
    stats, projections = _build_summary(activities, age, alive_days, life_expectancy, rng)

    return LifeSummary(
        age=age,
        life_expectancy=life_expectancy,
        activity_stats=stats,
        weeks_lived=calculate_lived_weeks(birthdate, current),
        weeks_total=calculate_total_weeks(life_expectancy),
        weeks_remaining=calculate_remaining_weeks(birthdate, life_expectancy, current.date()),
        future_projections=projections,
        days_remaining=max(0, (life_expectancy - age) * DAYS_PER_YEAR),
    )


def project_life(
    summary: LifeSummary,
    birthdate: date,
    activities: Sequence[Activity],
    weeks_advanced: float,
    now: datetime | None = None,
    rng: np.random.Generator | None = None,
) -> LifeSummary:
    """Recompute ``summary`` as if ``weeks_advanced`` weeks had passed."""

    if weeks_advanced <= 0:
        return summary

    current = _as_datetime(now) if now is not None else datetime.now()
    projected_age = summary.age + weeks_advanced / WEEKS_PER_YEAR
    alive_days = calculate_alive_days(birthdate, current) + weeks_advanced * 7
    stats, projections = _build_summary(
        activities, projected_age, alive_days, summary.life_expectancy, rng
    )

    return LifeSummary(
        age=projected_age,
        life_expectancy=summary.life_expectancy,
        activity_stats=stats,
        weeks_lived=summary.weeks_lived + int(weeks_advanced),
        weeks_total=summary.weeks_total,
        weeks_remaining=max(0, summary.weeks_remaining - weeks_advanced),
        future_projections=projections,
        days_remaining=max(0, (summary.life_expectancy - projected_age) * DAYS_PER_YEAR),
    )


def project_activity_timeline(
    activities: Sequence[Activity], life_expectancy: float
) -> tuple[np.ndarray, dict[str, np.ndarray]]:
    """Cumulative years spent on each activity at every whole age.

    Returns:
        ``(ages, series)`` where ``ages`` runs from 0 to ``life_expectancy``
        and ``series`` maps activity names (plus "Free Time") to arrays of
        cumulative years aligned with ``ages``.
    """
    last_age = max(0, int(floor(life_expectancy)))
    ages = np.arange(0, last_age + 1, dtype=float)
    days = ages * DAYS_PER_YEAR

    series = {
        activity.name: activity.hours * days / HOURS_PER_YEAR
        for activity in activities
    }
    series[FREE_TIME] = _free_hours(activities) * days / HOURS_PER_YEAR
    return ages, series


def calculate_exercise_optimization(
    activities: Sequence[Activity], age: float, life_expectancy: float
) -> dict | None:
    """Estimate years gained by adding 30 minutes of daily exercise.

    Exercise is counted at double weight. Returns ``None`` when no activity
    mentions exercise.
    """
    exercise = next((a for a in activities if "exercise" in a.name.lower()), None)
    if exercise is None:
        return None

    years_gained = 0.5 / 24 * max(0.0, life_expectancy - age) * 2
    return {
        "years_gained": round(years_gained, 1),
        "increased_hours": exercise.hours + 0.5,
    }


# ---------------------------------------------------------------------------
# Insights
# ---------------------------------------------------------------------------

def generate_activity_insights(
    activity_stats: Sequence[ActivityStat],
    age: float,
    life_expectancy: float,
    rng: np.random.Generator | None = None,
    limit: int = 5,
) -> list[Insight]:
    """Return up to ``limit`` observations about the activity mix, most important first."""

    insights: list[Insight] = []
    ranked = sorted(activity_stats, key=lambda s: s.percentage, reverse=True)
    top = ranked[0] if ranked else None
    second = ranked[1] if len(ranked) > 1 else None

    if top and top.percentage > 30:
        insights.append(Insight(
            f"You spend {top.percentage:.1f}% of your life on {top.name}. "
            "Consider if this aligns with your life priorities.",
            top.name, "balance", get_activity_icon(top.name), 9,
        ))

    if top and second and second.percentage > 0:
        ratio = top.percentage / second.percentage
        if ratio > 2:
            insights.append(Insight(
                f"You spend {ratio:.1f}x more time on {top.name} than on {second.name}. "
                "Is this intentional?",
                top.name, "comparison", get_activity_icon(top.name), 8,
            ))

    sleep = next((s for s in activity_stats if s.name.lower() == "sleep"), None)
    if sleep:
        if sleep.percentage < 25:
            insights.append(Insight(
                "You spend less than 25% of your time sleeping. "
                "Most health experts recommend about 33% (8 hours daily).",
                "Sleep", "pattern", "fa-bed", 10,
            ))
        elif sleep.percentage > 40:
            insights.append(Insight(
                "You spend over 40% of your time sleeping. "
                "This is above the average of 33% (8 hours daily).",
                "Sleep", "pattern", "fa-bed", 7,
            ))

    work = next((s for s in activity_stats if s.name.lower() == "work"), None)
    if work and work.percentage > 33:
        insights.append(Insight(
            "Work occupies over a third of your life. Consider ways to make your "
            "work more fulfilling or find better work-life balance.",
            "Work", "balance", "fa-briefcase", 8,
        ))

    exercise = next(
        (
            s for s in activity_stats
            if s.name.lower() == "exercise"
            or "workout" in s.name.lower()
            or "fitness" in s.name.lower()
        ),
        None,
    )
    if exercise is None:
        insights.append(Insight(
            "No exercise activity was found in your entries. "
            "Consider adding some physical activity to your routine.",
            "Exercise", "motivation", "fa-dumbbell", 8,
        ))
    elif exercise.percentage < 4:
        insights.append(Insight(
            "You spend less than 4% of your time on physical activity. "
            "Even small increases could have significant health benefits.",
            exercise.name, "motivation", "fa-dumbbell", 9,
        ))

    years_remaining = life_expectancy - age
    if years_remaining > 0 and activity_stats:
        if rng is not None:
            featured = activity_stats[int(rng.integers(len(activity_stats)))]
        else:
            featured = top
        future_years = featured.percentage / 100 * years_remaining
        insights.append(Insight(
            f"At your current rate, you'll spend about {future_years:.1f} more years "
            f"on {featured.name} in your lifetime.",
            featured.name, "projection", get_activity_icon(featured.name), 6,
        ))

    social_media = next(
        (
            s for s in activity_stats
            if any(k in s.name.lower() for k in ("social media", "phone", "internet"))
        ),
        None,
    )
    if social_media and social_media.percentage > 10:
        insights.append(Insight(
            f"You spend {social_media.percentage:.1f}% of your life on {social_media.name}. "
            f"That's {social_media.years * 365 * 24:.0f} hours so far.",
            social_media.name, "pattern", "fa-hashtag", 7,
        ))

    personal_dev = [
        s for s in activity_stats
        if any(k in s.name.lower() for k in ("read", "study", "learn", "education"))
    ]
    personal_dev_share = sum(s.percentage for s in personal_dev)
    if personal_dev and personal_dev_share < 5:
        insights.append(Insight(
            f"You allocate {personal_dev_share:.1f}% of your time to personal development "
            "activities. Small increases here compound over time.",
            personal_dev[0].name, "motivation", get_activity_icon(personal_dev[0].name), 7,
        ))

    # sorted() is stable, so equal priorities keep insertion order
    return sorted(insights, key=lambda i: i.priority, reverse=True)[:limit]
