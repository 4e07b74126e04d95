import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from life_phases import (
    FINAL_NEXT_PHASE,
    calculate_life_phase_optimization,
    calculate_transition_planning,
    determine_life_phase,
    generate_phase_recommendations,
)


@pytest.mark.parametrize(
    "age, phase",
    [
        (18, "Foundation Building"),
        (24.9, "Foundation Building"),
        (25, "Career Establishment"),
        (40, "Growth & Family"),
        (50, "Peak Performance"),
        (64, "Transition Planning"),
        (65, "Legacy & Fulfillment"),
        (90, "Legacy & Fulfillment"),
    ],
)
def test_determine_life_phase_boundaries(age, phase):
    assert determine_life_phase(age) == phase


def test_recommendations_cover_every_phase():
    phases = generate_phase_recommendations(30, 80)
    assert [p.phase for p in phases] == [
        "Foundation Building",
        "Career Establishment",
        "Growth & Family",
        "Peak Performance",
        "Transition Planning",
        "Legacy & Fulfillment",
    ]
    for phase in phases:
        assert len(phase.suggested_allocations) == 4
        assert len(phase.key_focus) == 4
        assert all(a.hours > 0 for a in phase.suggested_allocations)


def test_transition_to_next_phase():
    plan = calculate_transition_planning(30, 80)
    assert plan.next_phase == "Growth & Family"
    assert plan.time_to_transition == 5
    assert plan.preparation_steps[0] == "Achieve financial stability"


def test_transition_in_final_phase_uses_remaining_life():
    plan = calculate_transition_planning(70, 82)
    assert plan.next_phase == FINAL_NEXT_PHASE
    assert plan.time_to_transition == 12

    past_expectancy = calculate_transition_planning(90, 82)
    assert past_expectancy.time_to_transition == 0


def test_life_phase_optimization_bundle():
    result = calculate_life_phase_optimization(52, [], 80)
    assert result.current_phase == "Peak Performance"
    assert result.transition_planning.next_phase == "Transition Planning"
    assert result.transition_planning.time_to_transition == 3
    assert len(result.recommendations) == 6
