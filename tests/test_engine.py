import itertools
import json
from dataclasses import replace

import pandas as pd
import pytest

from labor_sim.coefficients import JOB_OPENINGS_FLOOR, UNEMPLOYMENT_CEILING, UNEMPLOYMENT_FLOOR
from labor_sim.config import SCENARIO_PRESETS
from labor_sim.engine import CSV_COLUMNS, SimulationEngine
from labor_sim.interventions import InterventionEffects
from labor_sim.exceptions import (
    InvalidParameterPathError,
    ScenarioNotConfiguredError,
    SimulationCancelled,
    SimulationError,
)


# ── Scenario creation ────────────────────────────────────────────────

def test_create_scenario_fills_defaults(engine):
    scenario = engine.create_scenario({"start_year": 2025})
    assert scenario.timeframe.end_year == 2030
    assert scenario.timeframe.total_steps == 60
    assert scenario.targets.unemployment_rate is None
    assert scenario.targets.ai_adoption_rate == 50.0
    assert scenario.ai_parameters.adoption_curve == "s_curve"
    assert scenario.ai_parameters.displacement_lag == 6
    assert engine.scenario is scenario


def test_create_scenario_leaves_config_untouched(engine, baseline_config):
    before = dict(baseline_config)
    engine.create_scenario(baseline_config)
    assert baseline_config == before


@pytest.mark.parametrize(
    "override",
    [
        {"automation_pace": "glacial"},
        {"adoption_curve": "zigzag"},
        {"end_year": 2025},
        {"end_year": 2020},
    ],
)
def test_create_scenario_rejects_bad_input(engine, baseline_config, override):
    with pytest.raises(ValueError):
        engine.create_scenario({**baseline_config, **override})


def test_policy_preset_installs_interventions(engine):
    scenario = engine.create_scenario(SCENARIO_PRESETS["Policy Response"])
    assert [i.type.value for i in scenario.interventions] == ["ubi", "job_retraining", "robot_tax"]
    assert scenario.interventions[0].parameters["monthly_amount"] == 500


def test_scenario_sees_interventions_added_later(configured_engine):
    configured_engine.interventions.add_intervention("wage_subsidy")
    assert len(configured_engine.scenario.interventions) == 1


def test_run_requires_scenario(engine):
    with pytest.raises(ScenarioNotConfiguredError):
        engine.run_simulation()
    with pytest.raises(ScenarioNotConfiguredError):
        engine.run_sensitivity_analysis("targets.ai_adoption_rate", [50])


# ── Adoption curves ──────────────────────────────────────────────────

@pytest.mark.parametrize("curve", ["linear", "s_curve", "exponential"])
def test_adoption_curves_hit_both_ends(engine, baseline_config, curve):
    scenario = engine.create_scenario({**baseline_config, "adoption_curve": curve})
    initial = engine.baseline.ai_adoption
    assert engine.calculate_ai_adoption(0.0, scenario).rate == pytest.approx(initial)
    assert engine.calculate_ai_adoption(1.0, scenario).rate == pytest.approx(70)
    mid = engine.calculate_ai_adoption(0.5, scenario).rate
    assert initial < mid < 70


def test_exponential_from_zero_falls_back_to_linear(engine, baseline_config):
    engine.baseline.ai_adoption = 0.0
    scenario = engine.create_scenario({**baseline_config, "adoption_curve": "exponential"})
    assert engine.calculate_ai_adoption(0.5, scenario).rate == pytest.approx(35)


def test_adoption_is_clamped(engine, baseline_config):
    scenario = engine.create_scenario(baseline_config)
    assert engine.calculate_ai_adoption(2.0, scenario).rate == pytest.approx(70)
    assert engine.calculate_ai_adoption(-1.0, scenario).progress == 0.0


# ── Full run ─────────────────────────────────────────────────────────

@pytest.fixture
def run(configured_engine):
    return configured_engine.run_simulation()


def test_run_reaches_target_unemployment(run):
    assert len(run.results) == 61
    assert run.results[0].year == 2025
    assert run.results[-1].year == 2030
    assert run.results[-1].labor_market.unemployment_rate == pytest.approx(8.0, abs=0.5)


def test_run_produces_displacement_and_new_jobs(run):
    impact = run.summary["ai_impact"]
    assert impact["cumulative_displacement"] > 0
    assert impact["cumulative_new_jobs"] > 0
    assert impact["net_impact"] == impact["cumulative_new_jobs"] - impact["cumulative_displacement"]
    assert impact["ai_adoption"]["final"] == pytest.approx(70)


def test_run_stays_within_bounds(run):
    displaced = [r.derived.cumulative_displacement for r in run.results]
    new_jobs = [r.derived.cumulative_new_jobs for r in run.results]
    assert displaced == sorted(displaced)
    assert new_jobs == sorted(new_jobs)
    for r in run.results:
        assert UNEMPLOYMENT_FLOOR <= r.labor_market.unemployment_rate <= UNEMPLOYMENT_CEILING
        assert 0 <= r.ai_adoption.rate <= 100
        assert r.labor_market.job_openings >= JOB_OPENINGS_FLOOR
        assert sum(r.state.skill_distribution.values()) == pytest.approx(1.0)
        for impact in r.labor_impact.sector_impacts.values():
            assert impact.displaced >= 0
            assert impact.new_jobs >= 0
            assert impact.net_change == impact.new_jobs - impact.displaced


def test_states_are_not_shared_mutably(run):
    first, second = run.results[0].state, run.results[1].state
    assert first is not second
    assert first.sectors is not second.sectors


# ── State update ─────────────────────────────────────────────────────

def test_wage_growth_carries_over_between_steps(configured_engine, state):
    scenario = configured_engine.scenario
    adoption = configured_engine.calculate_ai_adoption(0.0, scenario)
    impact = replace(
        configured_engine.calculate_labor_impact(state, adoption, scenario),
        wage_pressure=0.1,
    )
    effects = InterventionEffects(wage_effect=0.05)
    first = configured_engine.update_state(state, impact, effects, scenario)
    second = configured_engine.update_state(first, impact, effects, scenario)
    assert first.wages.real_wage_growth == pytest.approx(1.2 + 0.15)
    assert second.wages.real_wage_growth == pytest.approx(1.2 + 0.30)
    assert second.wages.average_hourly == pytest.approx(
        first.wages.average_hourly * (1 + 1.5 / 100 / 12)
    )


def test_run_wage_growth_accumulates_pressure(run):
    for before, after in zip(run.results, run.results[1:]):
        step = after.labor_impact.wage_pressure + after.interventions.wage_effect
        assert after.wages.real_wage_growth == pytest.approx(
            before.wages.real_wage_growth + step
        )


def test_initial_skill_wages_use_fractional_growth(engine, state):
    expected = engine.models.sbtc.calculate_employment_by_skill(160_000_000, 35, 0.023)
    for tier, group in state.skills.items():
        assert group.avg_wage == pytest.approx(expected[tier].avg_wage)
    # Within a fraction of a percent of the untouched tier wage
    assert state.skills["high"].avg_wage == pytest.approx(45.0, rel=0.01)


def test_wage_pressure_in_percentage_points(configured_engine, state):
    scenario = configured_engine.scenario
    adoption = configured_engine.calculate_ai_adoption(0.5, scenario)
    impact = configured_engine.calculate_labor_impact(state, adoption, scenario)
    premiums = configured_engine.models.sbtc.calculate_skill_premiums(adoption.rate, 0.023)
    expected = 100 * (
        0.3 * premiums["high"].wage_change
        + 0.4 * premiums["mid"].wage_change
        + 0.3 * premiums["low"].wage_change
    )
    assert impact.wage_pressure == pytest.approx(expected)
    assert abs(impact.wage_pressure) < 1


def test_runs_are_deterministic(configured_engine):
    configured_engine.run_simulation()
    first = configured_engine.to_frame()
    configured_engine.run_simulation()
    pd.testing.assert_frame_equal(first, configured_engine.to_frame())


def test_no_target_run_stays_within_bounds(engine, baseline_config):
    config = {**baseline_config, "ai_adoption_rate": 95, "automation_pace": "accelerating"}
    del config["target_unemployment"]
    engine.create_scenario(config)
    run = engine.run_simulation()
    for r in run.results:
        assert r.labor_impact.target_adjustment == 0
        assert UNEMPLOYMENT_FLOOR <= r.labor_market.unemployment_rate <= UNEMPLOYMENT_CEILING


def test_summary_sections(run):
    summary = run.summary
    assert summary["timeframe"]["duration_years"] == 5
    assert set(summary["skills"]) == {"high", "mid", "low"}
    sectors = summary["sector_summary"]
    assert len(sectors["most_affected"]) == 3
    assert len(sectors["least_affected"]) == 3
    assert (
        sectors["most_affected"][0]["employment_change"]
        <= sectors["least_affected"][0]["employment_change"]
    )
    assert summary["interventions"]["total_fiscal_cost"] == 0


def test_on_step_called_for_every_step(configured_engine):
    seen = []
    configured_engine.run_simulation(on_step=seen.append)
    assert [r.step for r in seen] == list(range(61))


def test_cancellation(configured_engine):
    counter = itertools.count()
    with pytest.raises(SimulationCancelled) as excinfo:
        configured_engine.run_simulation(should_cancel=lambda: next(counter) >= 3)
    assert excinfo.value.step == 3
    assert configured_engine.results == []


# ── Interventions in a run ───────────────────────────────────────────

def test_ubi_costs_money_and_lowers_participation(engine, baseline_config):
    engine.create_scenario(baseline_config)
    plain = engine.run_simulation().summary["interventions"]

    engine.create_scenario(
        {**baseline_config, "interventions": [{"type": "ubi", "parameters": {"monthly_amount": 1000}}]}
    )
    ubi_run = engine.run_simulation()
    ubi = ubi_run.summary["interventions"]
    assert ubi["total_fiscal_cost"] > plain["total_fiscal_cost"] == 0
    assert ubi["total_lfpr_effect"] < 0
    assert ubi["details"][0]["type"] == "ubi"
    lfpr = ubi_run.summary["labor_market_changes"]["labor_force_participation"]
    assert lfpr["final"] < lfpr["initial"]


def test_intervention_window_in_run(engine, baseline_config):
    engine.create_scenario(
        {
            **baseline_config,
            "interventions": [
                {"type": "robot_tax", "config": {"start_year": 2027, "end_year": 2028}}
            ],
        }
    )
    for r in engine.run_simulation().results:
        active = 2027 <= int(r.year) <= 2028
        assert bool(r.interventions.details) == active


def test_omitting_interventions_keeps_current_ones(engine, baseline_config):
    engine.create_scenario({**baseline_config, "interventions": [{"type": "ubi"}]})
    engine.create_scenario(baseline_config)
    assert len(engine.scenario.interventions) == 1
    engine.create_scenario({**baseline_config, "interventions": []})
    assert engine.scenario.interventions == []


# ── Queries and export ───────────────────────────────────────────────

def test_results_for_year(run, configured_engine):
    assert len(configured_engine.results_for_year(2026)) == 12
    assert len(configured_engine.results_for_year(2030)) == 1
    assert configured_engine.results_for_year(2040) == []


def test_regional_outlook(run, configured_engine):
    outlook = configured_engine.regional_outlook(run.results[30])
    assert set(outlook.regional) == {"northeast", "midwest", "south", "west"}
    assert outlook.most_vulnerable_region in outlook.regional


def test_export_before_run(configured_engine):
    with pytest.raises(SimulationError):
        configured_engine.export_results("csv")


def test_export_formats(run, configured_engine):
    csv = configured_engine.export_results("csv")
    lines = csv.strip().splitlines()
    assert lines[0] == ",".join(CSV_COLUMNS)
    assert len(lines) == 62

    payload = json.loads(configured_engine.export_results("json"))
    assert len(payload["results"]) == 61
    assert payload["scenario"]["name"] == "Baseline"
    assert "sector_summary" in payload["summary"]

    frame = configured_engine.export_results("frame")
    assert list(frame.columns) == CSV_COLUMNS
    assert frame["Year"].iloc[-1] == 2030

    with pytest.raises(ValueError):
        configured_engine.export_results("xml")


# ── Sensitivity ──────────────────────────────────────────────────────

def test_sensitivity_leaves_scenario_alone(configured_engine):
    scenario = configured_engine.scenario
    result = configured_engine.run_sensitivity_analysis("targets.ai_adoption_rate", [50, 90])
    assert configured_engine.scenario is scenario
    assert scenario.targets.ai_adoption_rate == 70
    assert configured_engine.results == []

    low, high = result["analysis"]
    assert result["parameter"] == "targets.ai_adoption_rate"
    assert low["parameter_value"] == 50
    assert (
        high["summary"]["ai_impact"]["cumulative_displacement"]
        > low["summary"]["ai_impact"]["cumulative_displacement"]
    )


@pytest.mark.parametrize("path", ["targets.nope", "", "targets..ai_adoption_rate", "name.first"])
def test_sensitivity_rejects_unknown_paths(configured_engine, path):
    with pytest.raises(InvalidParameterPathError):
        configured_engine.run_sensitivity_analysis(path, [1])


def test_initialize_state_rejects_bad_baseline():
    engine = SimulationEngine()
    engine.baseline.labor_market.unemployment_rate = 100
    with pytest.raises(SimulationError):
        engine.initialize_state()
