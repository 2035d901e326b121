import pytest

from labor_sim.costs import (
    NO_COST_MODEL,
    CostAssumptions,
    InterventionCostCalculator,
    format_dollars,
)
from labor_sim.interventions import InterventionSystem


@pytest.fixture
def system():
    return InterventionSystem()


@pytest.fixture
def calculator():
    return InterventionCostCalculator()


def test_job_retraining_cost(system, calculator):
    retraining = system.add_intervention("job_retraining", {"funding_per_worker": 10_000, "success_rate": 60})
    cost = calculator.calculate_intervention_cost(retraining, 100_000, 5)
    assert cost.annual_cost == 200_000_000
    assert cost.estimated_jobs_saved == 12_000
    assert cost.roi == pytest.approx(12_000 * 59_428 / 200_000_000)
    assert cost.cost_per_job == pytest.approx(200_000_000 / 12_000)
    assert not cost.revenue_generating


def test_robot_tax_raises_revenue(system, calculator):
    tax = system.add_intervention("robot_tax", {"tax_rate": 5})
    cost = calculator.calculate_intervention_cost(tax, 100_000, 5)
    assert cost.annual_cost == 0
    assert cost.annual_revenue == pytest.approx(100_000 * 59_428 * 1.3 * 0.05)
    assert cost.net_annual_cost == pytest.approx(-cost.annual_revenue)
    assert cost.estimated_jobs_saved == 500
    assert cost.roi is None
    assert cost.revenue_generating


def test_ubi_means_testing(system, calculator):
    universal = system.add_intervention("ubi")
    tested = system.add_intervention("ubi", {"phase_out_threshold": 60_000})
    gross = 258_000_000 * 12_000
    assert calculator.calculate_intervention_cost(universal, 0, 5).annual_cost == pytest.approx(
        gross * 0.85
    )
    assert calculator.calculate_intervention_cost(tested, 0, 5).annual_cost == pytest.approx(
        gross * 0.7 * 0.85
    )
    # Avoided social costs offset the bill
    offset = calculator.calculate_intervention_cost(universal, 1_000_000, 5)
    assert offset.annual_cost == pytest.approx(gross * 0.85 - 15_000 * 1_000_000)


@pytest.mark.parametrize(
    "adjustment, share", [("full_wage", 0.5), ("partial_subsidy", 0.25), ("proportional", 0.0)]
)
def test_reduced_workweek_cost_share(system, calculator, adjustment, share):
    workweek = system.add_intervention("reduced_workweek", {"target_hours": 32, "wage_adjustment": adjustment})
    cost = calculator.calculate_intervention_cost(workweek, 0, 5)
    reduction = (38.6 - 32) / 38.6
    assert cost.annual_cost == pytest.approx(160_000_000 * 59_428 * reduction * share)
    assert cost.estimated_jobs_saved == int(160_000_000 * reduction * 0.6)
    if share == 0:
        assert cost.roi == 0


def test_wage_subsidy_and_education(system, calculator):
    subsidy = system.add_intervention("wage_subsidy", {"subsidy_rate": 50, "max_wage_covered": 40_000})
    cost = calculator.calculate_intervention_cost(subsidy, 10_000, 5)
    assert cost.annual_cost == pytest.approx(8_000 * 40_000 * 0.5)
    assert cost.estimated_jobs_saved == 5_600

    education = system.add_intervention("education_subsidy")
    cost = calculator.calculate_intervention_cost(education, 0, 5)
    assert cost.annual_cost == pytest.approx(160e9)
    assert cost.estimated_jobs_saved == 200_000


def test_types_without_cost_model(system, calculator):
    guarantee = system.add_intervention("job_guarantee")
    cost = calculator.calculate_intervention_cost(guarantee, 100_000, 5)
    assert (cost.annual_cost, cost.annual_revenue, cost.estimated_jobs_saved) == (0, 0, 0)
    assert cost.roi == 0
    assert cost.description == NO_COST_MODEL


def test_custom_assumptions(system):
    calculator = InterventionCostCalculator(CostAssumptions(education_funding_increase=10))
    education = system.add_intervention("education_subsidy")
    assert calculator.calculate_intervention_cost(education, 0, 5).annual_cost == pytest.approx(80e9)


def test_all_costs_without_interventions(calculator):
    analysis = calculator.calculate_all_costs([])
    assert analysis.interventions == []
    assert analysis.net_cost == 0
    assert analysis.cost_per_job_saved == 0


def test_all_costs_over_a_run(engine, baseline_config, calculator):
    engine.create_scenario(
        {
            **baseline_config,
            "end_year": 2027,
            "interventions": [
                {"type": "job_retraining"},
                {"type": "robot_tax", "parameters": {"tax_rate": 10}},
                {"type": "ubi", "config": {"active": False}},
            ],
        }
    )
    run = engine.run_simulation()
    displaced = run.summary["ai_impact"]["cumulative_displacement"]
    analysis = calculator.calculate_all_costs(engine.interventions.interventions, run)

    assert [c.type for c in analysis.interventions] == ["job_retraining", "robot_tax"]
    retraining, tax = analysis.interventions
    assert retraining.annual_cost == pytest.approx(-(-displaced // 2) * 10_000)
    assert analysis.total_cost == pytest.approx(retraining.annual_cost * 2)
    assert analysis.total_revenue == pytest.approx(tax.annual_revenue * 2)
    assert analysis.net_cost == pytest.approx(analysis.total_cost - analysis.total_revenue)
    assert analysis.total_jobs_saved == retraining.estimated_jobs_saved + tax.estimated_jobs_saved
    assert analysis.cost_per_job_saved == pytest.approx(analysis.net_cost / analysis.total_jobs_saved)

    frame = analysis.to_frame()
    assert list(frame["type"]) == ["job_retraining", "robot_tax"]
    assert analysis.to_dict()["interventions"][1]["revenue_generating"] is True


def test_all_costs_default_horizon(system, calculator):
    education = system.add_intervention("education_subsidy")
    analysis = calculator.calculate_all_costs([education])
    assert analysis.total_cost == pytest.approx(160e9 * 5)


@pytest.mark.parametrize(
    "amount, text",
    [(2.5e12, "$2.5T"), (160e9, "$160.0B"), (1_500_000, "$1.5M"), (10_000, "$10.0K"), (950, "$950")],
)
def test_format_dollars(amount, text):
    assert format_dollars(amount) == text
