import enum

import numpy as np
import pytest

from labor_sim.config import (
    DEFAULT_AI_ADOPTION,
    DEFAULT_BASELINE,
    SCENARIO_PRESETS,
    BaselineSnapshot,
    Scenario,
    default_baseline,
    normalize_ai_adoption,
    parse_bool,
    to_plain,
)


@pytest.fixture
def provider_payload():
    return {
        "labor_market": {
            "total_employment": 1_000_000,
            "unemployment_rate": 5.0,
            "labor_force_participation": 60.0,
            "job_openings": 50_000,
        },
        "wages": {"average_hourly": 30, "median_weekly": 1000, "real_wage_growth": 1.0},
        "productivity": {"growth_rate": 2.0, "output_per_hour": 100},
        "sectors": {"retail": {"employment": 400_000, "automation_exposure": 0.5}},
    }


@pytest.mark.parametrize(
    "indicators, expected",
    [
        ({"companies_using_ai": {"value": 42}}, 42.0),
        ({"real": {"companies_using_ai": {"value": 18}}}, 18.0),
        ({"companies_using_ai": 0}, 0.0),
        ({"real": {}}, DEFAULT_AI_ADOPTION),
        (None, DEFAULT_AI_ADOPTION),
    ],
)
def test_normalize_ai_adoption(indicators, expected):
    assert normalize_ai_adoption(indicators) == expected


def test_baseline_from_provider_payload(provider_payload):
    provider_payload["ai_indicators"] = {"real": {"companies_using_ai": {"value": 22}}}
    baseline = BaselineSnapshot.from_dict(provider_payload)
    assert baseline.ai_adoption == 22.0
    assert baseline.labor_market.total_employment == 1_000_000.0
    assert baseline.sectors["retail"].automation_exposure == 0.5


def test_baseline_round_trips_through_dict(provider_payload):
    baseline = BaselineSnapshot.from_dict(provider_payload)
    assert baseline.ai_adoption == DEFAULT_AI_ADOPTION
    assert BaselineSnapshot.from_dict(baseline.to_dict()) == baseline


def test_baseline_missing_field_raises(provider_payload):
    del provider_payload["wages"]["median_weekly"]
    with pytest.raises(KeyError):
        BaselineSnapshot.from_dict(provider_payload)


def test_default_baseline_is_a_copy():
    baseline = default_baseline()
    baseline.labor_market.unemployment_rate = 20
    baseline.sectors["retail"].employment = 0
    assert DEFAULT_BASELINE.labor_market.unemployment_rate == 4.1
    assert DEFAULT_BASELINE.sectors["retail"].employment > 0


def test_default_sector_employment_fits_total():
    sectors = sum(s.employment for s in DEFAULT_BASELINE.sectors.values())
    assert sectors < DEFAULT_BASELINE.labor_market.total_employment


def test_scenario_from_config():
    scenario = Scenario.from_config(
        {
            "name": "Test",
            "start_year": 2026,
            "end_year": 2028,
            "steps_per_year": 4,
            "target_unemployment": 0,
            "displacement_lag": 3,
        }
    )
    assert scenario.timeframe.total_steps == 8
    assert scenario.targets.unemployment_rate == 0.0
    assert scenario.ai_parameters.displacement_lag == 3
    assert scenario.economic_parameters.gdp_growth == 2.0
    assert scenario.interventions == []


def test_scenario_rejects_zero_steps():
    with pytest.raises(ValueError):
        Scenario.from_config({"start_year": 2025, "end_year": 2026, "steps_per_year": 0})


@pytest.mark.parametrize(
    "raw, expected",
    [(False, False), ("false", False), ("False", False), ("0", False), (0, False),
     ("no", False), (True, True), ("true", True), ("1", True), (1, True)],
)
def test_sector_variation_parses_flags(raw, expected):
    scenario = Scenario.from_config({"start_year": 2025, "sector_variation": raw})
    assert scenario.ai_parameters.sector_variation is expected


@pytest.mark.parametrize("raw", ["maybe", 2, 0.5, [], ""])
def test_parse_bool_rejects_non_flags(raw):
    with pytest.raises(ValueError):
        parse_bool(raw)
    with pytest.raises(ValueError):
        Scenario.from_config({"start_year": 2025, "sector_variation": raw})


@pytest.mark.parametrize("name", sorted(SCENARIO_PRESETS))
def test_presets_are_valid(name):
    scenario = Scenario.from_config({**SCENARIO_PRESETS[name], "name": name})
    assert scenario.name == name
    assert scenario.targets.unemployment_rate is not None


def test_to_plain():
    class Color(enum.Enum):
        RED = "red"

    scenario = Scenario.from_config({"start_year": 2025})
    plain = to_plain(
        {
            "color": Color.RED,
            "value": np.float64(1.5),
            "count": np.int64(3),
            "pair": (1, 2),
            "scenario": scenario,
        }
    )
    assert plain["color"] == "red"
    assert type(plain["value"]) is float
    assert type(plain["count"]) is int
    assert plain["pair"] == [1, 2]
    assert plain["scenario"]["timeframe"] == {
        "start_year": 2025,
        "end_year": 2030,
        "steps_per_year": 12,
    }
