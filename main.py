# main.py
import json
from datetime import date

import numpy as np
import streamlit as st

from activities import Activity
from calculations import (
    calculate_exercise_optimization,
    format_number,
    generate_activity_insights,
    project_life,
    summarize_life,
)
from config import (
    CHANGE_IN_HOURS_RANGE,
    CHANGE_STEP,
    COLOR_PALETTE,
    DAYS_PER_WEEK_RANGE,
    DEFAULT_BIRTHDATE,
    DEFAULT_CHANGE_IN_HOURS,
    DEFAULT_COUNTRY_CODE,
    DEFAULT_LIFE_EXPECTANCY,
    DEFAULT_REALLOCATE_HOURS,
    HOURS_RANGE,
    LIFE_EXPECTANCY_CACHE_TTL,
    LIFE_EXPECTANCY_RANGE,
    MIN_BIRTH_YEAR,
)
from life_phases import calculate_life_phase_optimization
from projections import (
    AgeRange,
    RandomTipSelector,
    calculate_cost_benefit_analysis,
    calculate_trend_analysis,
)
from storage import LifeDataCreate, LifeDataStore, create_db_engine, init_db
from utils import (
    activities_from_state,
    initialize_session_state,
    load_from_query_params,
    update_query_params,
)
from validation import validate_inputs
from visualization import (
    compare_snapshots,
    show_activity_pie,
    show_projection_chart,
    show_time_value_gauge,
    show_timeline_chart,
    show_trend_chart,
)
from worldbank import CountryCache, WorldBankClient

INSIGHT_ICONS = {
    "balance": "⚖️",
    "pattern": "🔁",
    "projection": "🔭",
    "comparison": "📊",
    "motivation": "💪",
}


@st.cache_resource
def get_store() -> LifeDataStore:
    """Create the snapshot store once per server process."""

    engine = create_db_engine()
    init_db(engine)
    return LifeDataStore(engine)


@st.cache_resource
def get_client() -> WorldBankClient:
    """World Bank client sharing one country cache across sessions."""

    return WorldBankClient(cache=CountryCache(), store=get_store())


@st.cache_data(ttl=LIFE_EXPECTANCY_CACHE_TTL, show_spinner=False)
def fetch_life_expectancy(country_code: str):
    return get_client().get_life_expectancy(country_code, quick_fail=True)


def _with_colors(activities: list[Activity]) -> list[Activity]:
    for index, activity in enumerate(activities):
        if not activity.color:
            activity.color = COLOR_PALETTE[index % len(COLOR_PALETTE)]
    return activities


def _on_input_change():
    st.session_state.form_expanded = True
    st.session_state.results_expanded = False
    st.session_state.results_available = False


def resolve_life_expectancy(use_manual: bool, manual_value: float | None, country_code: str | None):
    """Return ``(life_expectancy, warnings)`` from the manual entry or the provider."""

    if use_manual:
        return manual_value, []
    if not country_code:
        return None, []
    return fetch_life_expectancy(country_code)


def render_form():
    with st.expander("🧭 Your Life in Numbers", expanded=st.session_state.form_expanded):
        countries, country_warnings = get_client().get_countries(quick_fail=True)
        for warning_msg in country_warnings[-1:]:
            st.warning(warning_msg)
        names = {c["code"]: c["name"] for c in countries}
        codes = list(names.keys())
        default_code = st.session_state.get("country_code", DEFAULT_COUNTRY_CODE)

        with st.form("life_form"):
            col1, col2 = st.columns(2)
            with col1:
                earliest = date(MIN_BIRTH_YEAR, 1, 1)
                stored = date.fromisoformat(st.session_state.get("birthdate", DEFAULT_BIRTHDATE))
                birthdate = st.date_input(
                    "Birthdate",
                    value=min(max(stored, earliest), date.today()),
                    min_value=earliest,
                    max_value=date.today(),
                    help="Used to calculate how much time has already passed",
                )
            with col2:
                country_code = st.selectbox(
                    "Country",
                    codes,
                    index=codes.index(default_code) if default_code in codes else 0,
                    format_func=lambda code: names.get(code, code),
                    help="Life expectancy at birth comes from World Bank data",
                )

            col3, col4 = st.columns(2)
            with col3:
                use_manual = st.checkbox(
                    "Enter life expectancy manually",
                    value=st.session_state.use_manual_life_expectancy,
                )
            with col4:
                manual_life_expectancy = st.number_input(
                    "Life Expectancy (years)",
                    min_value=LIFE_EXPECTANCY_RANGE[0],
                    max_value=LIFE_EXPECTANCY_RANGE[1],
                    value=min(
                        max(
                            float(st.session_state.get("manual_life_expectancy", DEFAULT_LIFE_EXPECTANCY)),
                            LIFE_EXPECTANCY_RANGE[0],
                        ),
                        LIFE_EXPECTANCY_RANGE[1],
                    ),
                    step=0.5,
                )

            rows = st.data_editor(
                st.session_state.activities,
                num_rows="dynamic",
                use_container_width=True,
                column_order=["name", "hours", "days_per_week"],
                column_config={
                    "name": st.column_config.TextColumn("Activity", required=True),
                    "hours": st.column_config.NumberColumn(
                        "Hours/Day", min_value=HOURS_RANGE[0], max_value=HOURS_RANGE[1], step=0.25
                    ),
                    "days_per_week": st.column_config.NumberColumn(
                        "Days/Week", min_value=DAYS_PER_WEEK_RANGE[0], max_value=DAYS_PER_WEEK_RANGE[1], step=1
                    ),
                },
                key="activities_editor",
            )

            submitted = st.form_submit_button("📊 Visualize My Life")
            if submitted:
                _on_input_change()
                activities = _with_colors(activities_from_state(rows))
                life_expectancy, le_warnings = resolve_life_expectancy(
                    use_manual, manual_life_expectancy, country_code
                )
                for warning_msg in le_warnings[-1:]:
                    st.warning(warning_msg)

                errors = validate_inputs(birthdate, activities, life_expectancy)
                if errors:
                    for err in errors:
                        st.error(err)
                    return

                st.session_state.activities = [a.to_dict() for a in activities]
                st.session_state.birthdate = birthdate.isoformat()
                st.session_state.country_code = country_code
                st.session_state.manual_life_expectancy = manual_life_expectancy
                st.session_state.use_manual_life_expectancy = use_manual
                update_query_params()

                summary = summarize_life(birthdate, activities, life_expectancy)
                st.session_state.results_data = {
                    "summary": summary,
                    "birthdate": birthdate,
                    "country_code": country_code,
                    "activities": activities,
                }
                st.session_state.weeks_advanced = 0
                st.session_state.results_available = True
                st.session_state.results_expanded = True
                st.session_state.form_expanded = False
                st.rerun()


def render_results(summary, birthdate, activities, weeks_advanced: int = 0):
    """Render the lifetime summary and return the insights shown."""

    st.write(
        f"Based on your birthdate and country, you've lived **{summary.age} years** "
        f"out of an expected **{format_number(summary.life_expectancy)} years**. "
        f"You have approximately **{format_number(summary.weeks_remaining)} weeks** remaining."
    )
    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Weeks lived", format_number(summary.weeks_lived))
    with col2:
        st.metric("Weeks remaining", format_number(summary.weeks_remaining))
    with col3:
        st.metric("Days remaining", format_number(summary.days_remaining))

    shown = summary
    if weeks_advanced > 0:
        shown = project_life(summary, birthdate, activities, weeks_advanced)
        st.info(
            f"Projected at age {shown.age:.1f}: about {shown.days_remaining:,.0f} days remaining."
        )

    show_activity_pie(shown.activity_stats)
    show_projection_chart(shown.future_projections, shown.activity_stats)
    show_timeline_chart(activities, summary.life_expectancy, current_age=shown.age)

    for stat in shown.activity_stats:
        comparisons = "; ".join(c["text"] for c in stat.comparisons)
        st.write(
            f"**{stat.name}**: {stat.years:.1f} years ({stat.percentage:.1f}% of your life). {comparisons}"
        )

    insights = generate_activity_insights(
        shown.activity_stats, summary.age, summary.life_expectancy
    )
    if insights:
        st.subheader("Insights")
        for insight in insights:
            st.write(f"{INSIGHT_ICONS.get(insight.kind, '•')} {insight.text}")

    optimization = calculate_exercise_optimization(
        activities, summary.age, summary.life_expectancy
    )
    if optimization:
        st.success(
            f"Adding 30 minutes of exercise a day ({optimization['increased_hours']:g} h total) "
            f"could add roughly {optimization['years_gained']} healthy years."
        )
    return insights


def render_trend_panel(activities, current_age, life_expectancy):
    st.markdown("Project how a daily change compounds over the years.")
    names = [a.name for a in activities]
    col1, col2 = st.columns(2)
    with col1:
        name = st.selectbox("Activity", names, key="trend_activity")
        change = st.slider(
            "Change in hours per day",
            min_value=CHANGE_IN_HOURS_RANGE[0],
            max_value=CHANGE_IN_HOURS_RANGE[1],
            value=DEFAULT_CHANGE_IN_HOURS,
            step=CHANGE_STEP,
            key="trend_change",
        )
    with col2:
        upper = max(int(current_age) + 1, int(np.ceil(life_expectancy)))
        start, end = st.slider(
            "Age range",
            min_value=int(current_age),
            max_value=upper,
            value=(int(current_age), upper),
            key="trend_range",
        )
        shuffle = st.checkbox("Vary tips", value=False, key="trend_shuffle")

    activity = next(a for a in activities if a.name == name)
    result = calculate_trend_analysis(
        activity,
        change,
        AgeRange(start=start, end=end),
        current_age,
        selector=RandomTipSelector() if shuffle else None,
    )
    factors = result.compounding_factors
    col3, col4, col5 = st.columns(3)
    with col3:
        st.metric("Net effect", f"{result.compound_effect:+.2f} years")
    with col4:
        st.metric("Per year", f"{result.yearly_impact:+.3f} years")
    with col5:
        st.metric("Total benefit", f"{factors.total_benefit:.2f}x")
    show_trend_chart(result)
    for recommendation in result.recommendations:
        st.write(f"- {recommendation}")
    return result


def render_cost_benefit_panel(activities, current_age, life_expectancy):
    if len(activities) < 2:
        st.info("Add at least two activities to compare reallocating time.")
        return None

    names = [a.name for a in activities]
    col1, col2, col3 = st.columns(3)
    with col1:
        from_name = st.selectbox("Take time from", names, key="cb_from")
    with col2:
        to_name = st.selectbox("Give time to", names, index=1, key="cb_to")
    with col3:
        hours = st.number_input(
            "Hours per day", min_value=0.0, max_value=HOURS_RANGE[1],
            value=DEFAULT_REALLOCATE_HOURS, step=0.25, key="cb_hours",
        )

    by_name = {a.name: a for a in activities}
    result = calculate_cost_benefit_analysis(
        by_name[from_name], by_name[to_name], hours, current_age, life_expectancy
    )
    col4, col5 = st.columns(2)
    with col4:
        st.metric(f"Lost from {from_name}", f"{result.opportunity_cost.years_lost:.1f} years")
        st.caption(result.opportunity_cost.qualitative_impact)
    with col5:
        st.metric(f"Gained for {to_name}", f"{result.benefit.years_gained:.1f} years")
        st.caption(f"{result.benefit.qualitative_impact}. {result.benefit.potential_roi}")
    show_time_value_gauge(result.net_impact.time_value)
    st.write(f"{result.net_impact.recommendation} (confidence: {result.net_impact.confidence})")
    return result


def render_life_phase_panel(current_age, activities, life_expectancy):
    result = calculate_life_phase_optimization(current_age, activities, life_expectancy)
    plan = result.transition_planning
    st.write(
        f"You are in the **{result.current_phase}** phase. "
        f"Next: **{plan.next_phase}** in about {plan.time_to_transition:g} years."
    )
    for step in plan.preparation_steps:
        st.write(f"- {step}")

    for phase in result.recommendations:
        marker = "➡️ " if phase.phase == result.current_phase else ""
        st.markdown(f"**{marker}{phase.phase}** ({phase.age_range}): {phase.priority}")
        st.write(
            ", ".join(f"{a.activity} {a.hours:g}h" for a in phase.suggested_allocations)
        )
    return result


def render_snapshot_panel(results_data):
    store = get_store()
    col1, col2 = st.columns(2)
    with col1:
        if st.button("💾 Save snapshot"):
            payload = LifeDataCreate(
                birthdate=results_data["birthdate"],
                country_code=results_data["country_code"],
                activities=json.dumps([a.to_dict() for a in results_data["activities"]]),
            )
            record = store.save_life_data(payload)
            st.session_state.saved_snapshot_id = record.id
            st.success(f"Saved as snapshot #{record.id}")
    with col2:
        snapshot_id = st.number_input("Compare with snapshot #", min_value=1, step=1, value=1)
        if st.button("Load snapshot"):
            record = store.get_life_data(int(snapshot_id))
            if record is None:
                st.warning(f"Snapshot #{int(snapshot_id)} not found")
            else:
                compare_snapshots(
                    [
                        {
                            "label": "Current",
                            "activities": [a.to_dict() for a in results_data["activities"]],
                        },
                        {
                            "label": f"Snapshot #{record.id}",
                            "activities": [a.to_dict() for a in record.activity_list()],
                        },
                    ]
                )


def render_calculation_methodology():
    st.markdown(
        """
        1) **Age and days lived**: age is the calendar difference between today and your birthdate; days lived are the exact elapsed time in days.

        2) **Years on an activity**: `years = hours_per_day * days_lived / 8760`. A fixed 365-day year is used, so leap days are ignored.

        3) **Weeks**: total weeks are `life_expectancy * 52`; remaining weeks are `max(0, life_expectancy - age) * 52`.

        4) **Future projections**: remaining years on an activity are `hours_per_day / 24 * (life_expectancy - age)`. Hours not assigned to any activity are shown as Free Time.

        5) **Trend analysis**: a daily change is projected over an age range and scaled by health and skill multipliers. The combined benefit is clamped between 0.5x and 2.5x.

        6) **Cost-benefit**: moving hours from one activity to another scores the difference in age-adjusted activity values on a -100 to 100 scale.

        7) **Life phases**: recommendations come from fixed age brackets (under 25, 35, 45, 55, 65 and beyond).
        """
    )


def main():
    st.set_page_config(
        page_title="Lifetime Visualizer",
        page_icon="⏳",
        initial_sidebar_state="expanded",
    )
    st.title("⏳ Lifetime Visualizer")
    if "params_loaded" not in st.session_state:
        loaded, _ = load_from_query_params()
        st.session_state.activities = json.loads(loaded["activities"])
        st.session_state.params_loaded = True
    initialize_session_state()
    render_form()

    if st.session_state.get("results_available"):
        data = st.session_state["results_data"]
        summary = data["summary"]
        activities = data["activities"]
        with st.expander("📆 Your Lifetime Summary", expanded=st.session_state.results_expanded):
            weeks_advanced = st.slider(
                "Move forward in time (weeks)",
                min_value=0,
                max_value=max(1, int(summary.weeks_remaining)),
                key="weeks_advanced",
            )
            render_results(summary, data["birthdate"], activities, weeks_advanced)
        with st.expander("📈 Trend Analysis"):
            render_trend_panel(activities, summary.age, summary.life_expectancy)
        with st.expander("⚖️ Cost-Benefit of Reallocating Time"):
            render_cost_benefit_panel(activities, summary.age, summary.life_expectancy)
        with st.expander("🧱 Life Phases"):
            render_life_phase_panel(summary.age, activities, summary.life_expectancy)
        with st.expander("💾 Snapshots"):
            render_snapshot_panel(data)

    with st.expander("🛠️ Calculation Methodology"):
        render_calculation_methodology()


if __name__ == "__main__":
    main()
