import json
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import utils
from config import DEFAULT_ACTIVITIES, DEFAULT_BIRTHDATE, DEFAULT_LIFE_EXPECTANCY


class QueryParamsStub(dict):
    def to_dict(self):
        return dict(self)

    def update(self, params):
        self.clear()
        super().update(params)


class StreamlitStub:
    def __init__(self):
        self.session_state = {}
        self.query_params = QueryParamsStub()


def test_query_params_round_trip(monkeypatch):
    st_stub = StreamlitStub()
    monkeypatch.setattr(utils, "st", st_stub)

    activities = [{"name": "Reading", "hours": 1.5, "days_per_week": 7}]
    inputs = {
        "birthdate": "1985-03-02",
        "country_code": "JPN",
        "manual_life_expectancy": 84.0,
        "activities": activities,
    }

    st_stub.session_state.update(inputs)
    utils.update_query_params()

    assert st_stub.query_params["activities"] == json.dumps(activities)
    assert st_stub.query_params["manual_life_expectancy"] == "84.0"

    st_stub.session_state = {}
    loaded, all_present = utils.load_from_query_params()

    assert all_present
    assert loaded["birthdate"] == "1985-03-02"
    assert loaded["country_code"] == "JPN"
    assert loaded["manual_life_expectancy"] == 84.0
    assert json.loads(loaded["activities"]) == activities
    assert isinstance(st_stub.session_state["manual_life_expectancy"], float)


def test_load_defaults_when_missing(monkeypatch):
    st_stub = StreamlitStub()
    monkeypatch.setattr(utils, "st", st_stub)

    loaded, all_present = utils.load_from_query_params()

    assert not all_present
    assert loaded["birthdate"] == DEFAULT_BIRTHDATE
    assert loaded["manual_life_expectancy"] == DEFAULT_LIFE_EXPECTANCY
    assert json.loads(loaded["activities"]) == DEFAULT_ACTIVITIES


def test_invalid_values_fall_back(monkeypatch):
    st_stub = StreamlitStub()
    st_stub.query_params.update(
        {
            "birthdate": "1985-03-02",
            "country_code": "JPN",
            "manual_life_expectancy": "lots",
            "activities": "[{\"name\": \"Sleep\", \"hours\": \"eight\"}]",
        }
    )
    monkeypatch.setattr(utils, "st", st_stub)

    loaded, all_present = utils.load_from_query_params()

    assert not all_present
    assert loaded["manual_life_expectancy"] == DEFAULT_LIFE_EXPECTANCY
    assert json.loads(loaded["activities"]) == DEFAULT_ACTIVITIES
    assert loaded["country_code"] == "JPN"


def test_initialize_session_state_keeps_existing(monkeypatch):
    st_stub = StreamlitStub()
    st_stub.session_state["weeks_advanced"] = 10
    monkeypatch.setattr(utils, "st", st_stub)

    utils.initialize_session_state()

    assert st_stub.session_state["weeks_advanced"] == 10
    assert st_stub.session_state["form_expanded"] is True
    assert [a["name"] for a in st_stub.session_state["activities"]] == [
        a["name"] for a in DEFAULT_ACTIVITIES
    ]


def test_activities_from_state_skips_blank_rows():
    rows = [
        {"name": "Sleep", "hours": 8, "days_per_week": 7},
        {"name": "  ", "hours": 2, "days_per_week": 7},
        {"name": "Reading", "hours": None, "days_per_week": None},
    ]
    activities = utils.activities_from_state(rows)

    assert [a.name for a in activities] == ["Sleep", "Reading"]
    assert activities[1].hours == 0.0
    assert activities[1].days_per_week == 7

    from_json = utils.activities_from_state(json.dumps(rows[:1]))
    assert from_json[0].hours == 8.0
