import json
import math

import pytest

from labor_sim.exceptions import InterventionParameterError, UnknownInterventionError
from labor_sim.interventions import (
    EFFECT_FUNCTIONS,
    INTERVENTION_TYPES,
    QUALITATIVE_EFFECTS,
    InterventionSystem,
    InterventionType,
    PolicyCoefficients,
)


@pytest.fixture
def system():
    return InterventionSystem()


def test_catalog_covers_every_type():
    assert len(InterventionType) == 17
    assert set(INTERVENTION_TYPES) == set(InterventionType)
    assert set(QUALITATIVE_EFFECTS) == set(InterventionType)
    assert set(EFFECT_FUNCTIONS) == set(InterventionType)


def test_every_type_produces_finite_effects_with_defaults(system, state, labor_impact):
    for itype in InterventionType:
        intervention = system.add_intervention(itype)
        effect = system.calculate_effect(intervention, state, labor_impact)
        for value in (effect.job_effect, effect.wage_effect, effect.lfpr_effect,
                      effect.fiscal_cost, effect.economic_impact):
            assert math.isfinite(value), itype


def test_add_merges_overrides_onto_defaults(system):
    intervention = system.add_intervention("ubi", {"monthly_amount": 500})
    assert intervention.type is InterventionType.UBI
    assert intervention.parameters == {
        "monthly_amount": 500,
        "eligibility_age": 18,
        "phase_out_threshold": 0,
    }
    assert intervention.name == "Universal Basic Income"
    assert intervention.category == "income_support"
    assert intervention.active is True
    assert intervention.start_year is None and intervention.end_year is None
    assert system.interventions == [intervention]


def test_config_fields(system):
    intervention = system.add_intervention(
        "robot_tax", config={"name": "Robot tax", "active": False, "start_year": 2027}
    )
    assert intervention.name == "Robot tax"
    assert intervention.active is False
    assert intervention.start_year == 2027


def test_unknown_type(system):
    with pytest.raises(UnknownInterventionError) as excinfo:
        system.add_intervention("space_program")
    assert isinstance(excinfo.value, KeyError)
    assert "space_program" in str(excinfo.value)


@pytest.mark.parametrize(
    "itype, params",
    [
        ("ubi", {"monthly_amount": 6000}),
        ("ubi", {"monthly_amount": "lots"}),
        ("job_retraining", {"eligibility": "everyone"}),
        ("wage_subsidy", {"sector_targeting": ["mining"]}),
        ("transition_assistance", {"retraining_requirement": "yes"}),
        ("ubi", {"monthly_amt": 100}),
    ],
)
def test_invalid_parameters_rejected(system, itype, params):
    with pytest.raises(InterventionParameterError):
        system.add_intervention(itype, params)
    assert system.interventions == []


def test_parameter_error_is_value_error(system):
    with pytest.raises(ValueError):
        system.add_intervention("ubi", {"monthly_amount": -1})


def test_window_must_be_ordered(system):
    with pytest.raises(InterventionParameterError):
        system.add_intervention("ubi", config={"start_year": 2030, "end_year": 2028})


def test_ubi_formula(system, state, labor_impact):
    system.add_intervention("ubi", {"monthly_amount": 1000})
    effects = system.calculate_effects(state, 2025, labor_impact)
    adults = 210_000_000 * 0.78
    annual = 1000 * 12 * adults
    assert effects.fiscal_cost == pytest.approx(annual / 12)
    assert effects.lfpr_effect == pytest.approx(-0.5 / 12)
    assert effects.wage_effect == pytest.approx(0.1)
    assert effects.job_effect == round(annual * 0.7 * 0.00001 / 12)
    assert effects.economic_impact == pytest.approx(annual * 0.7 * 1.2 / 12)


def test_ubi_scales_with_coefficients(state, labor_impact):
    small = InterventionSystem(PolicyCoefficients(population=1_000_000))
    small.add_intervention("ubi")
    effects = small.calculate_effects(state, 2025, labor_impact)
    assert effects.fiscal_cost == pytest.approx(1000 * 1_000_000 * 0.78)


def test_retraining_uses_displaced_workers(system, state, labor_impact):
    system.add_intervention("job_retraining", {"success_rate": 50, "eligibility": "all_unemployed"})
    effects = system.calculate_effects(state, 2025, labor_impact)
    participants = 2 * labor_impact.total_displaced
    assert effects.job_effect == round(participants * 0.5 * 0.8)
    assert effects.fiscal_cost == pytest.approx(participants * 10_000 / 6)


def test_revenue_policies_have_negative_fiscal_cost(system, state, labor_impact):
    system.add_intervention("robot_tax", {"tax_rate": 10})
    system.add_intervention("ai_licensing")
    effects = system.calculate_effects(state, 2025, labor_impact)
    for detail in effects.details:
        assert detail.effect.fiscal_cost < 0


def test_job_guarantee_takeup_by_eligibility(state, labor_impact):
    costs = {}
    for eligibility in ("all_unemployed", "displaced_only", "long_term_only"):
        system = InterventionSystem()
        system.add_intervention("job_guarantee", {"eligibility": eligibility})
        costs[eligibility] = system.calculate_effects(state, 2025, labor_impact).fiscal_cost
    assert costs["all_unemployed"] > costs["displaced_only"] > costs["long_term_only"] > 0


def test_portable_benefits_cost_only_from_general_revenue(system, state, labor_impact):
    payroll = system.add_intervention("portable_benefits")
    public = system.add_intervention("portable_benefits", {"funding_model": "general_revenue"})
    assert system.calculate_effect(payroll, state, labor_impact).fiscal_cost == 0
    assert system.calculate_effect(public, state, labor_impact).fiscal_cost > 0


def test_negative_income_tax_discourages_work_less_than_ubi(system, state, labor_impact):
    nit = system.add_intervention("negative_income_tax", {"guarantee_level": 12_000})
    ubi = system.add_intervention("ubi", {"monthly_amount": 1000})
    nit_effect = system.calculate_effect(nit, state, labor_impact)
    ubi_effect = system.calculate_effect(ubi, state, labor_impact)
    assert ubi_effect.lfpr_effect < nit_effect.lfpr_effect < 0
    assert 0 < nit_effect.fiscal_cost < ubi_effect.fiscal_cost


def test_sectoral_bargaining_trades_jobs_for_wages(system, state, labor_impact):
    effect = system.calculate_effect(system.add_intervention("sectoral_bargaining"), state, labor_impact)
    assert effect.wage_effect > 0
    assert effect.job_effect < 0


def test_public_private_retraining_capped_by_capacity(system, state):
    from types import SimpleNamespace

    intervention = system.add_intervention(
        "public_private_retraining", {"program_capacity": 120_000}
    )
    flood = SimpleNamespace(total_displaced=1_000_000)
    effect = system.calculate_effect(intervention, state, flood)
    # 10,000 participants per month, 70% placed, 90% of those hired
    assert effect.job_effect == round(10_000 * 0.7 * 0.9)
    assert effect.fiscal_cost == pytest.approx(10_000 * 12_000 * 0.5)


def test_activation_window_is_inclusive(system, state, labor_impact):
    system.add_intervention("ubi", config={"start_year": 2027, "end_year": 2028})
    assert system.calculate_effects(state, 2026, labor_impact).details == []
    assert system.calculate_effects(state, 2027, labor_impact).fiscal_cost > 0
    assert system.calculate_effects(state, 2028, labor_impact).fiscal_cost > 0
    outside = system.calculate_effects(state, 2029, labor_impact)
    assert outside.fiscal_cost == 0 and outside.job_effect == 0


def test_inactive_interventions_are_skipped(system, state, labor_impact):
    system.add_intervention("ubi", config={"active": False})
    assert system.calculate_effects(state, 2025, labor_impact).details == []


def test_skill_transition_strength_stacks(system, state, labor_impact):
    assert system.calculate_effects(state, 2025, labor_impact).skill_transition_strength == 1.0
    system.add_intervention("job_retraining")
    system.add_intervention("public_private_retraining")
    system.add_intervention("skills_based_immigration")
    strength = system.calculate_effects(state, 2025, labor_impact).skill_transition_strength
    assert strength == pytest.approx(1.0 + 0.5 + 0.8)


def test_update_and_remove(system):
    a = system.add_intervention("ubi")
    b = system.add_intervention("wage_subsidy")
    system.update_intervention(a.id, parameters={"monthly_amount": 200}, active=False, end_year=2030)
    assert a.parameters["monthly_amount"] == 200
    assert a.active is False and a.end_year == 2030
    with pytest.raises(InterventionParameterError):
        system.update_intervention(a.id, parameters={"monthly_amount": 99_999})
    assert a.parameters["monthly_amount"] == 200

    system.remove_intervention(a.id)
    assert system.interventions == [b]
    with pytest.raises(KeyError):
        system.get(a.id)


def test_summary_and_categories(system):
    system.add_intervention("ubi")
    system.add_intervention("transition_assistance", config={"active": False})
    system.add_intervention("robot_tax")
    summary = system.get_summary()
    assert summary["total_interventions"] == 3
    assert summary["active_interventions"] == 2
    assert summary["by_category"]["income_support"] == [
        "Universal Basic Income",
        "Transition Assistance",
    ]
    assert summary["interventions"][2]["type"] == "robot_tax"


def test_available_types_lists_schemas():
    types = InterventionSystem.available_types()
    assert len(types) == 17
    ubi = next(t for t in types if t["type"] == "ubi")
    assert ubi["parameters"]["monthly_amount"]["default"] == 1000
    assert ubi["parameters"]["monthly_amount"]["kind"] == "number"


def test_export_import_preserves_interventions(system):
    system.add_intervention("education_subsidy", {"program_types": ["vocational"]})
    system.add_intervention("ubi", {"monthly_amount": 750}, {"start_year": 2026})
    exported = system.export_config()
    assert json.loads(exported)["interventions"][1]["type"] == "ubi"

    restored = InterventionSystem()
    restored.import_config(exported)
    assert [i.to_dict() for i in restored.interventions] == [
        i.to_dict() for i in system.interventions
    ]
