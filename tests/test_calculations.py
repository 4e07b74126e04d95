import os
import sys
from datetime import date, datetime

import numpy as np
import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from activities import Activity
from calculations import (
    FREE_TIME,
    ActivityStat,
    calculate_activity_years,
    calculate_age,
    calculate_alive_days,
    calculate_exercise_optimization,
    calculate_lived_weeks,
    calculate_remaining_weeks,
    calculate_remaining_years,
    calculate_total_weeks,
    format_number,
    generate_activity_insights,
    generate_comparisons,
    get_activity_icon,
    project_activity_timeline,
    project_life,
    summarize_life,
)


def _stat(name, percentage, years=1.0):
    return ActivityStat(name=name, years=years, percentage=percentage, color="#000000", icon="fa-circle")


def test_calculate_age_before_and_after_birthday():
    birthdate = date(1990, 6, 15)
    assert calculate_age(birthdate, date(2020, 6, 14)) == 29
    assert calculate_age(birthdate, date(2020, 6, 15)) == 30
    assert calculate_age(birthdate, date(2020, 12, 31)) == 30


def test_calculate_alive_days_is_fractional():
    birthdate = date(2000, 1, 1)
    assert calculate_alive_days(birthdate, datetime(2000, 1, 11)) == pytest.approx(10)
    assert calculate_alive_days(birthdate, datetime(2000, 1, 11, 12)) == pytest.approx(10.5)


def test_calculate_activity_years_uses_fixed_year():
    # 8 hours a day for 365 days is exactly one third of a year
    assert calculate_activity_years(8, 365) == pytest.approx(1 / 3)
    assert calculate_activity_years(0, 10_000) == 0


def test_remaining_and_total_weeks():
    birthdate = date(1990, 1, 1)
    now = date(2020, 6, 1)
    assert calculate_remaining_years(birthdate, 80, now) == 50
    assert calculate_remaining_weeks(birthdate, 80, now) == 50 * 52
    assert calculate_total_weeks(80) == 4160


def test_remaining_weeks_never_negative():
    birthdate = date(1930, 1, 1)
    now = date(2020, 6, 1)
    assert calculate_remaining_years(birthdate, 70, now) == 0
    assert calculate_remaining_weeks(birthdate, 70, now) == 0


def test_calculate_lived_weeks_floors():
    assert calculate_lived_weeks(date(2000, 1, 1), datetime(2000, 1, 14)) == 1
    assert calculate_lived_weeks(date(2000, 1, 1), datetime(2000, 1, 15)) == 2


def test_format_number_drops_trailing_zero():
    assert format_number(1234.0) == "1,234"
    assert format_number(1234.56) == "1,234.6"


def test_summarize_life_with_fixed_now():
    birthdate = date(1990, 1, 1)
    now = datetime(2020, 1, 1)
    activities = [Activity("Sleep", 8), Activity("Work", 8)]

    summary = summarize_life(birthdate, activities, 80, now=now)

    alive_days = (now - datetime(1990, 1, 1)).days
    assert summary.age == 30
    assert summary.weeks_total == 80 * 52
    assert summary.weeks_remaining == 50 * 52
    assert summary.weeks_lived == alive_days // 7
    assert summary.days_remaining == 50 * 365

    sleep = summary.activity_stats[0]
    assert sleep.years == pytest.approx(8 * alive_days / 8760)
    assert sleep.percentage == pytest.approx(sleep.years / 30 * 100)
    assert sleep.icon == "fa-bed"
    assert sleep.comparisons

    names = [p.activity for p in summary.future_projections]
    assert names == ["Sleep", "Work", FREE_TIME]
    free = summary.future_projections[-1]
    assert free.years_remaining == pytest.approx(8 / 24 * 50)
    assert summary.future_projections[0].years_remaining == pytest.approx(8 / 24 * 50)


def test_summarize_life_zero_age_has_zero_percentages():
    now = datetime(2020, 6, 1)
    summary = summarize_life(date(2020, 1, 1), [Activity("Sleep", 12)], 80, now=now)
    assert summary.age == 0
    assert summary.activity_stats[0].percentage == 0.0


def test_summarize_life_assigns_palette_colors():
    summary = summarize_life(
        date(1990, 1, 1),
        [Activity("A", 1), Activity("B", 1, color="#123456")],
        80,
        now=datetime(2020, 1, 1),
    )
    assert summary.activity_stats[0].color.startswith("#")
    assert summary.activity_stats[1].color == "#123456"


def test_project_life_advances_time():
    birthdate = date(1990, 1, 1)
    now = datetime(2020, 1, 1)
    activities = [Activity("Sleep", 8)]
    summary = summarize_life(birthdate, activities, 80, now=now)

    assert project_life(summary, birthdate, activities, 0, now=now) is summary

    projected = project_life(summary, birthdate, activities, 52, now=now)
    assert projected.age == pytest.approx(31)
    assert projected.weeks_lived == summary.weeks_lived + 52
    assert projected.weeks_remaining == summary.weeks_remaining - 52
    assert projected.activity_stats[0].years > summary.activity_stats[0].years
    assert projected.days_remaining == pytest.approx(49 * 365)


def test_project_life_clamps_past_expectancy():
    birthdate = date(1990, 1, 1)
    now = datetime(2020, 1, 1)
    activities = [Activity("Sleep", 8)]
    summary = summarize_life(birthdate, activities, 31, now=now)
    projected = project_life(summary, birthdate, activities, 520, now=now)
    assert projected.weeks_remaining == 0
    assert projected.days_remaining == 0


def test_project_activity_timeline_includes_free_time():
    ages, series = project_activity_timeline([Activity("Sleep", 8), Activity("Work", 8)], 80.6)
    assert ages[0] == 0
    assert ages[-1] == 80
    assert set(series) == {"Sleep", "Work", FREE_TIME}
    assert series["Sleep"][-1] == pytest.approx(80 / 3)
    assert series[FREE_TIME][-1] == pytest.approx(80 / 3)
    assert np.all(np.diff(series["Work"]) >= 0)


def test_get_activity_icon_matches_substrings():
    assert get_activity_icon("Sleep") == "fa-bed"
    assert get_activity_icon("morning exercise") == "fa-dumbbell"
    assert get_activity_icon("Knitting") == "fa-circle"


def test_generate_comparisons_specific_and_generic():
    exercise = generate_comparisons("Exercise", 1.0)
    assert exercise == [{"icon": "fa-fire", "text": "Approximately 146,000 calories burned"}]

    generic = generate_comparisons("Knitting", 1.0)
    assert [c["icon"] for c in generic] == ["fa-clock", "fa-calendar-days"]
    assert "knitting" in generic[0]["text"]

    seeded = generate_comparisons("Knitting", 1.0, rng=np.random.default_rng(0))
    assert sorted(c["icon"] for c in seeded) == ["fa-calendar-days", "fa-clock"]


def test_exercise_optimization():
    assert calculate_exercise_optimization([Activity("Sleep", 8)], 30, 80) is None

    result = calculate_exercise_optimization([Activity("Morning Exercise", 1)], 30, 78)
    assert result == {"years_gained": 2.0, "increased_hours": 1.5}

    past = calculate_exercise_optimization([Activity("Exercise", 1)], 90, 80)
    assert past["years_gained"] == 0


def test_insights_sorted_and_limited():
    stats = [_stat("Work", 40), _stat("Sleep", 15), _stat("Reading", 1)]
    insights = generate_activity_insights(stats, 30, 80)

    assert len(insights) <= 5
    priorities = [i.priority for i in insights]
    assert priorities == sorted(priorities, reverse=True)
    # Short sleep is the highest priority observation
    assert insights[0].activity_name == "Sleep"
    assert insights[0].kind == "pattern"
    texts = " ".join(i.text for i in insights)
    assert "2.7x more time on Work than on Sleep" in texts


def test_insights_missing_exercise_and_projection():
    stats = [_stat("Sleep", 33), _stat("Work", 20)]
    insights = generate_activity_insights(stats, 30, 80, limit=10)
    kinds = {(i.kind, i.activity_name) for i in insights}
    assert ("motivation", "Exercise") in kinds
    projection = next(i for i in insights if i.kind == "projection")
    assert projection.activity_name == "Sleep"
    assert "16.5 more years" in projection.text


def test_insights_skip_ratio_when_second_is_zero():
    stats = [_stat("Work", 50), _stat("Exercise", 0)]
    insights = generate_activity_insights(stats, 30, 80, limit=10)
    assert not any(i.kind == "comparison" for i in insights)


def test_insights_empty_stats():
    insights = generate_activity_insights([], 30, 80)
    assert [i.activity_name for i in insights] == ["Exercise"]
