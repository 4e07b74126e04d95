import math
import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from activities import Activity, profile_activity
from projections import (
    NO_HORIZON,
    AgeRange,
    RandomTipSelector,
    SLEEP_DEBT_WARNINGS,
    STRENGTH_TIPS,
    TipSelector,
    calculate_compounding_factors,
    calculate_cost_benefit_analysis,
    calculate_time_value,
    calculate_trend_analysis,
    generate_trend_recommendations,
    get_activity_value_score,
    potential_roi,
    reallocation_recommendation,
)


def test_age_range_normalized_to_current_age():
    window = AgeRange(start=20, end=60).normalized(30)
    assert window.start == 30
    assert window.end == 60
    assert window.horizon_years == 30

    collapsed = AgeRange(start=20, end=25).normalized(30)
    assert collapsed.horizon_years == 0


def test_exercise_overtraining_scenario():
    result = calculate_trend_analysis(
        Activity("Exercise", 1), 0.5, AgeRange(30, 80), current_age=30
    )
    factors = result.compounding_factors

    # 10.5 h/week is beyond 600 minutes, so the horizon no longer compounds
    assert factors.health_multiplier == pytest.approx((1 + 0.15 * 0.95 * 0.5) * 1.25)
    assert factors.skill_multiplier == 1
    assert factors.total_benefit == pytest.approx(1.3390625)

    assert result.original_years == pytest.approx(1 * 365 * 50 / 8760)
    assert result.modified_years == pytest.approx(1.5 * 365 * 50 / 8760 * 1.3390625)
    assert result.compound_effect == pytest.approx(result.modified_years - result.original_years)
    assert result.yearly_impact == pytest.approx(result.compound_effect / 50)
    assert any("diminishing returns" in r for r in result.recommendations)


def test_sleep_debt_scenario():
    result = calculate_trend_analysis(
        Activity("Sleep", 6), -1, AgeRange(35, 80), current_age=35
    )
    factors = result.compounding_factors

    assert factors.health_multiplier == pytest.approx((1 - 0.4 * (1 + 4 / 30)) * 0.9)
    assert factors.skill_multiplier == pytest.approx(0.75)
    assert factors.total_benefit == pytest.approx(0.5)
    assert result.compound_effect < 0
    assert result.recommendations[0] == SLEEP_DEBT_WARNINGS[0]
    assert len(result.recommendations) == 3


def test_severe_sleep_restriction_warning():
    recommendations = generate_trend_recommendations("Sleep", -2, 8)
    assert len(recommendations) == 4
    assert "Severe sleep restriction" in recommendations[-1]


def test_zero_change_is_treated_as_decrease():
    sleep = calculate_compounding_factors("Sleep", 0, 30, 10, 8)
    assert sleep.total_benefit == pytest.approx(0.9)

    exercise = calculate_compounding_factors("Exercise", 0, 45, 10, 1)
    assert exercise.total_benefit == pytest.approx(0.85)

    hobby = calculate_compounding_factors("Knitting", 0, 45, 10, 1)
    assert hobby.total_benefit == 1


def test_zero_change_trend_scales_original_years_by_benefit():
    result = calculate_trend_analysis(Activity("Sleep", 8), 0, AgeRange(30, 80), current_age=30)

    assert result.original_years == pytest.approx(8 * 365 * 50 / 8760)
    assert result.compounding_factors.total_benefit == pytest.approx(0.9)
    assert result.modified_years == pytest.approx(
        result.original_years * result.compounding_factors.total_benefit
    )
    assert result.modified_years == pytest.approx(15.0)
    assert result.compound_effect == pytest.approx(15.0 - 8 * 365 * 50 / 8760)


@pytest.mark.parametrize(
    "name, change, age",
    [
        ("Running", 4, 25),
        ("Weight Training", 4, 20),
        ("Study", 4, 20),
        ("Work", -4, 70),
        ("Sleep", -4, 30),
        ("Family Time", 4, 50),
    ],
)
def test_total_benefit_is_clamped(name, change, age):
    factors = calculate_compounding_factors(name, change, age, 60, 2)
    assert 0.5 <= factors.total_benefit <= 2.5


def test_compounding_factors_are_idempotent():
    profile = profile_activity("Cardio Running")
    first = calculate_compounding_factors(profile, 1, 40, 20, 0.5)
    second = calculate_compounding_factors(profile, 1, 40, 20, 0.5)
    assert first == second


def test_trend_analysis_with_no_horizon():
    result = calculate_trend_analysis(Activity("Exercise", 1), 1, AgeRange(20, 30), current_age=40)
    assert result.original_years == 0
    assert result.modified_years == 0
    assert result.compound_effect == 0
    assert result.yearly_impact == 0
    assert result.recommendations == []
    assert result.compounding_factors.total_benefit == 1


def test_trend_analysis_rejects_infinite_horizon():
    result = calculate_trend_analysis(
        Activity("Work", 8), 1, AgeRange(30, math.inf), current_age=30
    )
    assert result.compound_effect == 0


def test_strength_recommendations_use_selector():
    default = generate_trend_recommendations("Strength Training", 0.25, 0.25)
    assert default[2:4] == list(STRENGTH_TIPS[:2])

    first = generate_trend_recommendations("Strength Training", 0.25, 0.25, RandomTipSelector(seed=7))
    second = generate_trend_recommendations("Strength Training", 0.25, 0.25, RandomTipSelector(seed=7))
    assert first == second
    assert set(first[2:4]) <= set(STRENGTH_TIPS)


def test_custom_selector_controls_tips():
    class LastTips(TipSelector):
        def choose(self, tips, count):
            return list(tips[-count:])

    recommendations = generate_trend_recommendations("Sleep", -1, 7, LastTips())
    assert recommendations == list(SLEEP_DEBT_WARNINGS[-3:])


def test_unknown_activity_gets_no_recommendations():
    assert generate_trend_recommendations("Knitting", 1, 1) == []


def test_activity_value_scores_depend_on_age():
    assert get_activity_value_score("Exercise", 45) == pytest.approx(1.17)
    assert get_activity_value_score("Exercise", 30) == pytest.approx(0.9)
    assert get_activity_value_score("Work", 40) == pytest.approx(0.96)
    assert get_activity_value_score("Learning", 25) == pytest.approx(1.02)
    assert get_activity_value_score("Learning", 60) == pytest.approx(0.68)
    assert get_activity_value_score("Knitting", 30) == 0.5


def test_time_value_is_antisymmetric_and_bounded():
    forward = calculate_time_value("Entertainment", "Exercise", 2, 45)
    backward = calculate_time_value("Exercise", "Entertainment", 2, 45)
    assert forward == pytest.approx(-backward)
    assert calculate_time_value("Entertainment", "Exercise", 24 * 10, 45) == 100
    assert calculate_time_value("Exercise", "Entertainment", 24 * 10, 45) == -100


def test_cost_benefit_moves_equal_years():
    result = calculate_cost_benefit_analysis(
        Activity("TV Entertainment", 3), Activity("Exercise", 0.5), 1, 45, 80
    )
    assert result.opportunity_cost.years_lost == pytest.approx(1 * 365 * 35 / 8760)
    assert result.benefit.years_gained == result.opportunity_cost.years_lost
    assert result.net_impact.time_value == pytest.approx((1.17 - 0.4) / 24 * 100)
    assert result.net_impact.recommendation.startswith("Neutral")
    assert result.net_impact.confidence == "medium"
    assert result.benefit.potential_roi == "Potential 1095 additional healthy days per year"
    assert result.benefit.qualitative_impact == "Improved health, energy, and longevity"
    assert result.opportunity_cost.qualitative_impact == "Potential stress increase and reduced relaxation"


def test_cost_benefit_confidence_levels():
    high = calculate_cost_benefit_analysis(Activity("Work", 8), Activity("Sleep", 7), 1, 30, 80)
    low = calculate_cost_benefit_analysis(Activity("Gaming", 2), Activity("Knitting", 1), 1, 30, 80)
    assert high.net_impact.confidence == "high"
    assert low.net_impact.confidence == "low"


def test_cost_benefit_neutral_without_horizon():
    result = calculate_cost_benefit_analysis(Activity("Work", 8), Activity("Exercise", 1), 1, 85, 80)
    assert result.opportunity_cost.years_lost == 0
    assert result.benefit.years_gained == 0
    assert result.benefit.qualitative_impact == NO_HORIZON
    assert result.net_impact.time_value == 0
    assert result.net_impact.confidence == "low"
    assert result.net_impact.recommendation == "Neutral: No remaining horizon to evaluate."

    zero_hours = calculate_cost_benefit_analysis(Activity("Work", 8), Activity("Exercise", 1), 0, 30, 80)
    assert zero_hours.net_impact.time_value == 0


@pytest.mark.parametrize(
    "value, prefix",
    [
        (60, "Highly recommended"),
        (30, "Recommended"),
        (0, "Neutral"),
        (-30, "Caution"),
        (-60, "Not recommended"),
    ],
)
def test_reallocation_recommendation_bands(value, prefix):
    assert reallocation_recommendation(value).startswith(prefix)


def test_potential_roi_text():
    assert potential_roi("Study", 1, 35) == "significant career advancement potential"
    assert potential_roi("Study", 1, 65) == "personal satisfaction career advancement potential"
    assert potential_roi("Work", 3, 35) == "Diminishing returns likely"
    assert potential_roi("Work", 1, 35) == "Potential career acceleration"
    assert potential_roi("Knitting", 1, 35) == "Qualitative life improvement"


def test_interests_are_not_scored_as_sleep():
    result = calculate_cost_benefit_analysis(
        Activity("Work", 8), Activity("Hobbies/Interests", 1), 1, 45, 80
    )
    assert result.net_impact.time_value == pytest.approx((0.5 - 0.96) / 24 * 100)
    assert result.net_impact.confidence == "medium"
    assert result.benefit.qualitative_impact == "Potential positive life impact"
    assert get_activity_value_score("Hobbies/Interests", 45) == 0.5
    assert get_activity_value_score("Rest/Relaxation", 45) == pytest.approx(0.95)
