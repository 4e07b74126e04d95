"""Static life-phase tables and transition planning."""

from dataclasses import dataclass, field


@dataclass
class SuggestedAllocation:
    activity: str
    hours: float
    reason: str


@dataclass
class PhaseRecommendation:
    phase: str
    age_range: str
    priority: str
    suggested_allocations: list[SuggestedAllocation] = field(default_factory=list)
    key_focus: list[str] = field(default_factory=list)


@dataclass
class TransitionPlanning:
    next_phase: str
    time_to_transition: float
    preparation_steps: list[str] = field(default_factory=list)


@dataclass
class LifePhaseResult:
    current_phase: str
    recommendations: list[PhaseRecommendation]
    transition_planning: TransitionPlanning


# (upper age bound, phase label); the last phase is open-ended
PHASE_BRACKETS = (
    (25, "Foundation Building"),
    (35, "Career Establishment"),
    (45, "Growth & Family"),
    (55, "Peak Performance"),
    (65, "Transition Planning"),
    (None, "Legacy & Fulfillment"),
)

FINAL_NEXT_PHASE = "Continued Fulfillment"

PREPARATION_STEPS = {
    "Foundation Building": [
        "Complete education and certifications",
        "Build professional network",
        "Develop core skills in chosen field",
        "Gain internship or entry-level experience",
    ],
    "Career Establishment": [
        "Achieve financial stability",
        "Develop leadership skills",
        "Consider family planning",
        "Build emergency fund and investments",
    ],
    "Growth & Family": [
        "Develop expertise and specialization",
        "Build wealth and assets",
        "Strengthen family relationships",
        "Focus on health and fitness",
    ],
    "Peak Performance": [
        "Maximize earning potential",
        "Develop leadership and mentoring skills",
        "Diversify investments",
        "Maintain health and energy",
    ],
    "Transition Planning": [
        "Plan retirement finances",
        "Develop post-career interests",
        "Focus on health optimization",
        "Strengthen family and social connections",
    ],
    "Legacy & Fulfillment": [
        "Maintain physical and mental health",
        "Stay engaged with community",
        "Share knowledge and experience",
        "Focus on meaningful relationships",
    ],
}

PHASE_TABLE = (
    (
        "Foundation Building", "18-25", "Learning & Skill Development",
        (
            ("Learning/Study", 4, "Build foundational knowledge and skills"),
            ("Exercise", 1.5, "Establish healthy habits early"),
            ("Social Time", 3, "Build lifelong relationships and network"),
            ("Work/Internships", 6, "Gain practical experience"),
        ),
        ("Education completion", "Habit formation", "Network building", "Self-discovery"),
    ),
    (
        "Career Establishment", "25-35", "Professional Growth & Relationships",
        (
            ("Work/Career", 8, "Establish career trajectory"),
            ("Learning/Skills", 2, "Stay competitive and grow"),
            ("Exercise", 1.5, "Maintain health during busy period"),
            ("Relationship/Family", 3, "Build lasting partnerships"),
        ),
        ("Career advancement", "Financial stability", "Relationship building", "Health maintenance"),
    ),
    (
        "Growth & Family", "35-45", "Balance & Family Development",
        (
            ("Work/Career", 7.5, "Peak earning potential"),
            ("Family Time", 4, "Child development critical period"),
            ("Exercise", 1.5, "Counter sedentary work lifestyle"),
            ("Personal Time", 2, "Prevent burnout and maintain identity"),
        ),
        ("Family development", "Career peak", "Financial growth", "Work-life balance"),
    ),
    (
        "Peak Performance", "45-55", "Leadership & Wealth Building",
        (
            ("Work/Leadership", 7, "Maximum impact and influence"),
            ("Exercise", 2, "Combat age-related health decline"),
            ("Family/Mentoring", 3, "Guide next generation"),
            ("Learning/Growth", 2, "Stay relevant and adaptable"),
        ),
        ("Leadership development", "Wealth accumulation", "Health preservation", "Legacy building"),
    ),
    (
        "Transition Planning", "55-65", "Preparation & Health Focus",
        (
            ("Work/Transition", 6, "Prepare for retirement transition"),
            ("Exercise/Health", 2.5, "Invest in long-term health"),
            ("Hobbies/Interests", 3, "Develop retirement activities"),
            ("Family/Relationships", 3, "Strengthen support systems"),
        ),
        ("Retirement planning", "Health optimization", "Interest development", "Relationship deepening"),
    ),
    (
        "Legacy & Fulfillment", "65+", "Health & Contribution",
        (
            ("Exercise/Health", 3, "Maintain independence and vitality"),
            ("Hobbies/Interests", 4, "Pursue lifelong passions"),
            ("Family/Community", 4, "Share wisdom and stay connected"),
            ("Rest/Relaxation", 2, "Enjoy well-earned leisure"),
        ),
        ("Health maintenance", "Purpose fulfillment", "Wisdom sharing", "Enjoyment"),
    ),
)


def _bracket_index(age: float) -> int:
    for index, (upper, _label) in enumerate(PHASE_BRACKETS):
        if upper is not None and age < upper:
            return index
    return len(PHASE_BRACKETS) - 1


def determine_life_phase(age: float) -> str:
    """Return the phase label for ``age``.

    >>> determine_life_phase(30)
    'Career Establishment'
    """
    return PHASE_BRACKETS[_bracket_index(age)][1]


def generate_phase_recommendations(
    current_age: float, life_expectancy: float
) -> list[PhaseRecommendation]:
    """Return the suggested allocations for every phase, not just the current one."""

    return [
        PhaseRecommendation(
            phase=phase,
            age_range=age_range,
            priority=priority,
            suggested_allocations=[
                SuggestedAllocation(activity=activity, hours=float(hours), reason=reason)
                for activity, hours, reason in allocations
            ],
            key_focus=list(focus),
        )
        for phase, age_range, priority, allocations, focus in PHASE_TABLE
    ]


def calculate_transition_planning(
    current_age: float, life_expectancy: float
) -> TransitionPlanning:
    safe_expectancy = max(current_age, life_expectancy)
    index = _bracket_index(current_age)
    upper, label = PHASE_BRACKETS[index]

    if upper is None:
        next_phase = FINAL_NEXT_PHASE
        time_to_transition = max(0, safe_expectancy - current_age)
    else:
        next_phase = PHASE_BRACKETS[index + 1][1]
        time_to_transition = max(0, upper - current_age)

    return TransitionPlanning(
        next_phase=next_phase,
        time_to_transition=time_to_transition,
        preparation_steps=list(PREPARATION_STEPS[label]),
    )


def calculate_life_phase_optimization(
    current_age: float, activities=None, life_expectancy: float = 0.0
) -> LifePhaseResult:
    """Bundle the current phase, the full phase table and the next transition.

    ``activities`` is accepted for call-site symmetry with the other
    analyses; the tables do not depend on it.
    """
    safe_expectancy = max(current_age, life_expectancy)
    return LifePhaseResult(
        current_phase=determine_life_phase(current_age),
        recommendations=generate_phase_recommendations(current_age, safe_expectancy),
        transition_planning=calculate_transition_planning(current_age, safe_expectancy),
    )
