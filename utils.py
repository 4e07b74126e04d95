# utils.py
import json
import logging
from datetime import date

import streamlit as st

from activities import Activity
from config import (
    DEFAULT_ACTIVITIES,
    DEFAULT_BIRTHDATE,
    DEFAULT_COUNTRY_CODE,
    DEFAULT_LIFE_EXPECTANCY,
)

QUERY_PARAM_DEFAULTS = {
    "birthdate": DEFAULT_BIRTHDATE,
    "country_code": DEFAULT_COUNTRY_CODE,
    "manual_life_expectancy": DEFAULT_LIFE_EXPECTANCY,
    "activities": json.dumps(DEFAULT_ACTIVITIES),
}


def initialize_session_state():
    """Initialize the Streamlit session state variables.

    Examples
    --------
    >>> initialize_session_state()
    >>> st.session_state.setdefault("extra_key", "default")
    """
    st.session_state.setdefault("activities", [dict(a) for a in DEFAULT_ACTIVITIES])
    st.session_state.setdefault("use_manual_life_expectancy", False)
    st.session_state.setdefault("form_expanded", True)
    st.session_state.setdefault("results_expanded", False)
    st.session_state.setdefault("results_available", False)
    st.session_state.setdefault("weeks_advanced", 0)
    st.session_state.setdefault("saved_snapshot_id", None)


def update_query_params():
    """Mirror the current form values into the page URL so it can be shared."""

    params = {}
    for key in QUERY_PARAM_DEFAULTS:
        if key in st.session_state:
            value = st.session_state[key]
            if key == "activities" and not isinstance(value, str):
                value = json.dumps(value)
            params[key] = str(value)
    st.query_params.update(params)


def load_from_query_params():
    """Populate session state from query params, falling back to defaults.

    Returns:
        tuple: ``(loaded, all_present)`` where ``loaded`` maps each known key
            to its typed value and ``all_present`` is ``True`` when every key
            was supplied and parsed.
    """
    params = st.query_params.to_dict()
    loaded = {}
    all_present = True

    for key, default in QUERY_PARAM_DEFAULTS.items():
        raw = params.get(key)
        if raw is None:
            all_present = False
            value = default
        else:
            try:
                value = type(default)(raw)
                if key == "birthdate":
                    date.fromisoformat(value)
                elif key == "activities":
                    [Activity.from_dict(item) for item in json.loads(value)]
            except (TypeError, ValueError, AttributeError) as e:
                logging.warning(f"Ignoring invalid query param {key}={raw!r}: {e}")
                all_present = False
                value = default
        loaded[key] = value
        st.session_state[key] = value

    return loaded, all_present


def activities_from_state(rows) -> list[Activity]:
    """Convert editor rows (dicts or a JSON string) to activities, skipping blank rows."""

    if isinstance(rows, str):
        rows = json.loads(rows)
    activities = []
    for row in rows or []:
        name = str(row.get("name") or "").strip()
        if not name:
            continue
        activities.append(
            Activity.from_dict(
                {
                    **row,
                    "name": name,
                    "hours": row.get("hours") or 0.0,
                    "days_per_week": row.get("days_per_week") or 7,
                }
            )
        )
    return activities
