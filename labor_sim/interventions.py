"""
Policy interventions that perturb the labor market simulation.

Each intervention type has three independent pieces:

* a parameter schema (``INTERVENTION_TYPES``) used to resolve and validate
  caller overrides,
* a qualitative effects table (``QUALITATIVE_EFFECTS``) for display only,
* a numeric effect function, registered in ``EFFECT_FUNCTIONS``.

Effect functions are pure: they read the current state, the step's labor
impact and the intervention's parameters, and return monthly figures.
"""

import copy
import enum
import json
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from .coefficients import SKILL_INTERVENTION_PRESETS
from .config import to_plain
from .exceptions import InterventionParameterError, UnknownInterventionError

logger = logging.getLogger(__name__)


class InterventionType(str, enum.Enum):
    UBI = "ubi"
    JOB_RETRAINING = "job_retraining"
    WAGE_SUBSIDY = "wage_subsidy"
    REDUCED_WORKWEEK = "reduced_workweek"
    ROBOT_TAX = "robot_tax"
    EDUCATION_SUBSIDY = "education_subsidy"
    JOB_GUARANTEE = "job_guarantee"
    PORTABLE_BENEFITS = "portable_benefits"
    TRANSITION_ASSISTANCE = "transition_assistance"
    NEGATIVE_INCOME_TAX = "negative_income_tax"
    SECTORAL_BARGAINING = "sectoral_bargaining"
    AI_LICENSING = "ai_licensing"
    UNIVERSAL_BASIC_SERVICES = "universal_basic_services"
    WORKER_OWNERSHIP = "worker_ownership"
    GIG_ECONOMY_REGULATIONS = "gig_economy_regulations"
    SKILLS_BASED_IMMIGRATION = "skills_based_immigration"
    PUBLIC_PRIVATE_RETRAINING = "public_private_retraining"


def resolve_type(value: Union[str, InterventionType]) -> InterventionType:
    try:
        return InterventionType(value)
    except ValueError:
        raise UnknownInterventionError(value) from None


# ──────────────────────────────────────────────────────────────────────
# Behavioral and demographic constants
# ──────────────────────────────────────────────────────────────────────

@dataclass
class PolicyCoefficients:
    """Constants shared by the effect formulas. Override for other economies."""

    population: float = 210_000_000
    adult_share: float = 0.78
    hours_per_year: float = 2080
    standard_workweek: float = 40
    marginal_propensity_to_consume: float = 0.7
    transfer_multiplier: float = 1.2  # direct transfers, typically 0.8-1.5x
    government_spending_multiplier: float = 1.5
    jobs_per_dollar: float = 0.00001  # one job per $100k of spending
    high_risk_employment_share: float = 0.15
    gig_workforce_share: float = 0.15
    education_seeking_share: float = 0.05

    @property
    def adult_population(self) -> float:
        return self.population * self.adult_share


# ──────────────────────────────────────────────────────────────────────
# Parameter schemas
# ──────────────────────────────────────────────────────────────────────

PARAMETER_KINDS = ("number", "select", "multiselect", "boolean")


@dataclass(frozen=True)
class ParameterSpec:
    kind: str
    default: Any
    min: Optional[float] = None
    max: Optional[float] = None
    options: Sequence[str] = ()
    unit: str = ""
    description: str = ""

    def validate(self, name: str, value: Any) -> Any:
        """Return the value in canonical form or raise InterventionParameterError."""
        if self.kind == "number":
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InterventionParameterError(f"{name} must be a number, got {value!r}")
            if self.min is not None and value < self.min:
                raise InterventionParameterError(f"{name}={value} is below minimum {self.min}")
            if self.max is not None and value > self.max:
                raise InterventionParameterError(f"{name}={value} is above maximum {self.max}")
            return value
        if self.kind == "select":
            if value not in self.options:
                raise InterventionParameterError(
                    f"{name} must be one of {list(self.options)}, got {value!r}"
                )
            return value
        if self.kind == "multiselect":
            if isinstance(value, str) or not isinstance(value, Iterable):
                raise InterventionParameterError(f"{name} must be a list, got {value!r}")
            values = list(value)
            unknown = [v for v in values if v not in self.options]
            if unknown:
                raise InterventionParameterError(
                    f"{name} has unknown options {unknown}; allowed {list(self.options)}"
                )
            return values
        if self.kind == "boolean":
            if not isinstance(value, bool):
                raise InterventionParameterError(f"{name} must be true or false, got {value!r}")
            return value
        raise InterventionParameterError(f"{name} has unsupported kind {self.kind!r}")


@dataclass(frozen=True)
class InterventionDefinition:
    name: str
    description: str
    category: str
    cost_model: str
    parameters: Dict[str, ParameterSpec]


def _number(default, lo, hi, unit="", description=""):
    return ParameterSpec("number", default, min=lo, max=hi, unit=unit, description=description)


def _select(default, options, description=""):
    return ParameterSpec("select", default, options=tuple(options), description=description)


def _multi(default, options, description=""):
    return ParameterSpec("multiselect", tuple(default), options=tuple(options), description=description)


def _flag(default, description=""):
    return ParameterSpec("boolean", default, description=description)


T = InterventionType

INTERVENTION_TYPES: Dict[InterventionType, InterventionDefinition] = {
    T.UBI: InterventionDefinition(
        "Universal Basic Income",
        "Monthly cash payment to all adult citizens",
        "income_support", "population_based",
        {
            "monthly_amount": _number(1000, 0, 5000, "USD/month"),
            "eligibility_age": _number(18, 16, 25),
            "phase_out_threshold": _number(
                0, 0, 200_000, "USD/year",
                "Income level at which UBI phases out (0 = universal)",
            ),
        },
    ),
    T.JOB_RETRAINING: InterventionDefinition(
        "Job Retraining Programs",
        "Government-funded programs to retrain displaced workers",
        "workforce_development", "participant_based",
        {
            "funding_per_worker": _number(10_000, 1000, 50_000, "USD"),
            "program_duration": _number(6, 1, 24, "months"),
            "success_rate": _number(60, 0, 100, "%"),
            "eligibility": _select(
                "displaced_only", ["all_unemployed", "displaced_only", "means_tested"]
            ),
        },
    ),
    T.WAGE_SUBSIDY: InterventionDefinition(
        "Wage Subsidies",
        "Government subsidies to employers for maintaining employment",
        "employment_support", "wage_based",
        {
            "subsidy_rate": _number(25, 0, 100, "% of wage"),
            "max_wage_covered": _number(50_000, 0, 150_000, "USD/year"),
            "duration": _number(12, 1, 36, "months"),
            "sector_targeting": _multi(
                ["high_automation_risk"],
                ["all", "high_automation_risk", "manufacturing", "retail", "transportation"],
            ),
        },
    ),
    T.REDUCED_WORKWEEK: InterventionDefinition(
        "Reduced Work Week",
        "Mandate or incentivize shorter work weeks to spread employment",
        "work_sharing", "economy_wide",
        {
            "target_hours": _number(32, 20, 40, "hours/week"),
            "wage_adjustment": _select(
                "partial_subsidy", ["full_wage", "proportional", "partial_subsidy"]
            ),
            "implementation": _select("incentive", ["mandate", "incentive", "voluntary"]),
        },
    ),
    T.ROBOT_TAX: InterventionDefinition(
        "Automation Tax",
        "Tax on automation to fund worker transition",
        "taxation", "revenue_generating",
        {
            "tax_rate": _number(5, 0, 50, "% of labor cost savings"),
            "revenue_allocation": _multi(
                ["retraining", "education"], ["ubi", "retraining", "education", "general_fund"]
            ),
            "exemptions": _multi(["small_business"], ["small_business", "healthcare", "research"]),
        },
    ),
    T.EDUCATION_SUBSIDY: InterventionDefinition(
        "Education & Skills Subsidy",
        "Subsidized education for AI-complementary skills",
        "workforce_development", "participant_based",
        {
            "subsidy_amount": _number(15_000, 0, 100_000, "USD/year"),
            "program_types": _multi(
                ["stem_degree", "bootcamp"],
                ["stem_degree", "vocational", "bootcamp", "apprenticeship"],
            ),
            "income_cap": _number(75_000, 0, 200_000, "USD/year"),
        },
    ),
    T.JOB_GUARANTEE: InterventionDefinition(
        "Federal Job Guarantee",
        "Government as employer of last resort",
        "employment_support", "participant_based",
        {
            "hourly_wage": _number(20, 15, 30, "USD/hour"),
            "job_types": _multi(
                ["infrastructure", "caregiving"],
                ["infrastructure", "caregiving", "environment", "community_service"],
            ),
            "eligibility": _select(
                "all_unemployed", ["all_unemployed", "long_term_only", "displaced_only"]
            ),
        },
    ),
    T.PORTABLE_BENEFITS: InterventionDefinition(
        "Portable Benefits System",
        "Benefits that follow workers across jobs and gig work",
        "safety_net", "earnings_based",
        {
            "benefit_types": _multi(
                ["healthcare", "retirement"],
                ["healthcare", "retirement", "unemployment", "disability"],
            ),
            "funding_model": _select(
                "payroll_tax", ["employer_mandate", "payroll_tax", "general_revenue"]
            ),
            "contribution_rate": _number(5, 0, 20, "% of earnings"),
        },
    ),
    T.TRANSITION_ASSISTANCE: InterventionDefinition(
        "Transition Assistance",
        "Direct payments to workers displaced by automation",
        "income_support", "displaced_based",
        {
            "replacement_rate": _number(70, 0, 100, "% of previous wage"),
            "duration": _number(24, 6, 48, "months"),
            "retraining_requirement": _flag(True),
        },
    ),
    T.NEGATIVE_INCOME_TAX: InterventionDefinition(
        "Negative Income Tax",
        "Income-tested payment that phases out as earnings rise",
        "income_support", "income_based",
        {
            "guarantee_level": _number(12_000, 0, 30_000, "USD/year"),
            "phase_out_rate": _number(50, 10, 100, "%", "Benefit reduction per dollar earned"),
            "eligibility": _select("all_adults", ["all_adults", "working_age", "families_only"]),
        },
    ),
    T.SECTORAL_BARGAINING: InterventionDefinition(
        "Sectoral Bargaining",
        "Industry-wide wage boards setting minimum standards",
        "labor_standards", "administrative",
        {
            "coverage_target": _number(50, 10, 100, "% of sector workers"),
            "wage_floor_premium": _number(10, 0, 30, "% above market"),
            "sectors": _multi(
                ["retail", "healthcare"],
                ["all", "retail", "healthcare", "transportation", "manufacturing"],
            ),
        },
    ),
    T.AI_LICENSING: InterventionDefinition(
        "AI Deployment Licensing",
        "Licensing fees and compliance review for labor-replacing AI systems",
        "taxation", "revenue_generating",
        {
            "license_fee": _number(2, 0, 10, "% of AI-attributed output"),
            "compliance_level": _select("moderate", ["light", "moderate", "strict"]),
            "revenue_use": _select("retraining", ["retraining", "general_fund", "ubi_dividend"]),
        },
    ),
    T.UNIVERSAL_BASIC_SERVICES: InterventionDefinition(
        "Universal Basic Services",
        "Free or subsidized access to essential services",
        "safety_net", "population_based",
        {
            "service_types": _multi(
                ["healthcare", "transportation"],
                ["healthcare", "housing", "transportation", "childcare", "internet"],
            ),
            "coverage": _number(50, 0, 100, "% of population"),
            "delivery_model": _select("mixed", ["public_provision", "vouchers", "mixed"]),
        },
    ),
    T.WORKER_OWNERSHIP: InterventionDefinition(
        "Worker Ownership Incentives",
        "Tax incentives for employee ownership conversions",
        "ownership", "tax_expenditure",
        {
            "tax_incentive": _number(20, 0, 50, "% of conversion value"),
            "target_firms": _select("mid_size", ["small_business", "mid_size", "all"]),
            "esop_conversion_rate": _number(2, 0, 10, "% of firms/year"),
        },
    ),
    T.GIG_ECONOMY_REGULATIONS: InterventionDefinition(
        "Gig Economy Regulations",
        "Worker classification standards and earnings floors for platform work",
        "labor_standards", "administrative",
        {
            "classification_standard": _select(
                "economic_realities", ["abc_test", "economic_realities", "status_quo"]
            ),
            "minimum_earnings_standard": _number(18, 0, 40, "USD/hour"),
            "benefits_mandate": _flag(True),
        },
    ),
    T.SKILLS_BASED_IMMIGRATION: InterventionDefinition(
        "Skills-Based Immigration",
        "Expanded visas for workers with AI-complementary skills",
        "workforce_development", "processing_based",
        {
            "annual_visas": _number(100_000, 0, 1_000_000, "visas/year"),
            "skill_threshold": _select("bachelors", ["bachelors", "masters", "phd"]),
            "sector_focus": _multi(
                ["technology", "healthcare"],
                ["technology", "healthcare", "manufacturing", "all"],
            ),
        },
    ),
    T.PUBLIC_PRIVATE_RETRAINING: InterventionDefinition(
        "Public-Private Retraining Partnerships",
        "Employer co-funded retraining with placement pipelines",
        "workforce_development", "participant_based",
        {
            "public_share": _number(50, 0, 100, "% of program cost"),
            "employer_match": _number(50, 0, 100, "% of public funding"),
            "program_capacity": _number(500_000, 10_000, 5_000_000, "participants/year"),
            "placement_guarantee": _flag(False),
        },
    ),
}

# Display-only annotations, kept apart from the numeric formulas
QUALITATIVE_EFFECTS: Dict[InterventionType, Dict[str, Dict[str, str]]] = {
    T.UBI: {
        "labor_force_participation": {"direction": "decrease", "magnitude": "small"},
        "consumption": {"direction": "increase", "magnitude": "medium"},
        "poverty_rate": {"direction": "decrease", "magnitude": "large"},
        "entrepreneurship": {"direction": "increase", "magnitude": "small"},
    },
    T.JOB_RETRAINING: {
        "skill_mismatch": {"direction": "decrease", "magnitude": "large"},
        "unemployment_duration": {"direction": "decrease", "magnitude": "medium"},
        "wages_post_displacement": {"direction": "increase", "magnitude": "medium"},
    },
    T.WAGE_SUBSIDY: {
        "employment_retention": {"direction": "increase", "magnitude": "large"},
        "business_costs": {"direction": "decrease", "magnitude": "medium"},
        "wage_pressure": {"direction": "decrease", "magnitude": "small"},
    },
    T.REDUCED_WORKWEEK: {
        "employment": {"direction": "increase", "magnitude": "medium"},
        "productivity_per_hour": {"direction": "increase", "magnitude": "small"},
        "worker_wellbeing": {"direction": "increase", "magnitude": "medium"},
    },
    T.ROBOT_TAX: {
        "automation_pace": {"direction": "decrease", "magnitude": "small"},
        "tax_revenue": {"direction": "increase", "magnitude": "medium"},
        "business_investment": {"direction": "decrease", "magnitude": "small"},
    },
    T.EDUCATION_SUBSIDY: {
        "skill_supply": {"direction": "increase", "magnitude": "large"},
        "wage_premium": {"direction": "decrease", "magnitude": "small"},
        "inequality": {"direction": "decrease", "magnitude": "medium"},
    },
    T.JOB_GUARANTEE: {
        "unemployment_floor": {"direction": "establish", "magnitude": "large"},
        "wage_floor": {"direction": "increase", "magnitude": "medium"},
        "public_services": {"direction": "increase", "magnitude": "medium"},
    },
    T.PORTABLE_BENEFITS: {
        "gig_worker_security": {"direction": "increase", "magnitude": "large"},
        "job_mobility": {"direction": "increase", "magnitude": "medium"},
        "entrepreneurship": {"direction": "increase", "magnitude": "small"},
    },
    T.TRANSITION_ASSISTANCE: {
        "consumption_stability": {"direction": "increase", "magnitude": "large"},
        "job_search_quality": {"direction": "increase", "magnitude": "medium"},
        "skill_preservation": {"direction": "increase", "magnitude": "medium"},
    },
    T.NEGATIVE_INCOME_TAX: {
        "poverty_rate": {"direction": "decrease", "magnitude": "large"},
        "work_incentive": {"direction": "preserve", "magnitude": "medium"},
        "administrative_cost": {"direction": "decrease", "magnitude": "small"},
    },
    T.SECTORAL_BARGAINING: {
        "wage_floor": {"direction": "increase", "magnitude": "medium"},
        "wage_inequality": {"direction": "decrease", "magnitude": "medium"},
        "employment": {"direction": "decrease", "magnitude": "small"},
    },
    T.AI_LICENSING: {
        "automation_pace": {"direction": "decrease", "magnitude": "medium"},
        "tax_revenue": {"direction": "increase", "magnitude": "medium"},
        "innovation": {"direction": "decrease", "magnitude": "small"},
    },
    T.UNIVERSAL_BASIC_SERVICES: {
        "cost_of_living": {"direction": "decrease", "magnitude": "large"},
        "public_employment": {"direction": "increase", "magnitude": "medium"},
        "labor_force_participation": {"direction": "increase", "magnitude": "small"},
    },
    T.WORKER_OWNERSHIP: {
        "wealth_inequality": {"direction": "decrease", "magnitude": "medium"},
        "layoff_rate": {"direction": "decrease", "magnitude": "small"},
        "productivity": {"direction": "increase", "magnitude": "small"},
    },
    T.GIG_ECONOMY_REGULATIONS: {
        "gig_worker_earnings": {"direction": "increase", "magnitude": "large"},
        "platform_employment": {"direction": "decrease", "magnitude": "small"},
        "benefit_coverage": {"direction": "increase", "magnitude": "large"},
    },
    T.SKILLS_BASED_IMMIGRATION: {
        "skill_supply": {"direction": "increase", "magnitude": "medium"},
        "innovation": {"direction": "increase", "magnitude": "medium"},
        "high_skill_wages": {"direction": "decrease", "magnitude": "small"},
    },
    T.PUBLIC_PRIVATE_RETRAINING: {
        "placement_rate": {"direction": "increase", "magnitude": "large"},
        "skill_mismatch": {"direction": "decrease", "magnitude": "large"},
        "public_cost_share": {"direction": "decrease", "magnitude": "medium"},
    },
}


# ──────────────────────────────────────────────────────────────────────
# Records
# ──────────────────────────────────────────────────────────────────────

@dataclass
class Intervention:
    id: str
    type: InterventionType
    name: str
    description: str
    category: str
    parameters: Dict[str, Any]
    effects: Dict[str, Dict[str, str]]
    cost_model: str
    active: bool = True
    start_year: Optional[int] = None
    end_year: Optional[int] = None

    def applies_to(self, year: int) -> bool:
        if not self.active:
            return False
        if self.start_year is not None and year < self.start_year:
            return False
        if self.end_year is not None and year > self.end_year:
            return False
        return True

    def to_dict(self) -> Dict[str, Any]:
        return to_plain(self)


@dataclass
class InterventionEffect:
    """Monthly effect of one intervention. fiscal_cost < 0 means net revenue."""

    job_effect: float = 0.0
    wage_effect: float = 0.0  # percentage points of annual wage growth
    lfpr_effect: float = 0.0  # percentage points
    fiscal_cost: float = 0.0  # USD
    economic_impact: float = 0.0  # USD


@dataclass
class EffectDetail:
    intervention_id: str
    intervention: str
    type: InterventionType
    effect: InterventionEffect


@dataclass
class InterventionEffects:
    """Sum of the active interventions' effects for one step."""

    job_effect: float = 0.0
    wage_effect: float = 0.0
    lfpr_effect: float = 0.0
    fiscal_cost: float = 0.0
    economic_impact: float = 0.0
    skill_transition_strength: float = 1.0
    details: List[EffectDetail] = field(default_factory=list)

    def add(self, intervention: Intervention, effect: InterventionEffect) -> None:
        self.job_effect += effect.job_effect
        self.wage_effect += effect.wage_effect
        self.lfpr_effect += effect.lfpr_effect
        self.fiscal_cost += effect.fiscal_cost
        self.economic_impact += effect.economic_impact
        self.details.append(
            EffectDetail(intervention.id, intervention.name, intervention.type, effect)
        )

    def to_dict(self) -> Dict[str, Any]:
        return to_plain(self)


# ──────────────────────────────────────────────────────────────────────
# Effect formulas
#
# Signature: (params, state, labor_impact, coefficients) -> InterventionEffect
# ``state`` exposes labor_market, wages, sectors and ai; ``labor_impact``
# exposes total_displaced for the current step. Annual amounts are divided
# by 12; per-step flows (displaced workers) are used as they are.
# ──────────────────────────────────────────────────────────────────────

def _annual_wage(state, c: PolicyCoefficients) -> float:
    return state.wages.average_hourly * c.hours_per_year


def _ubi(params, state, labor_impact, c):
    amount = params["monthly_amount"]
    annual_cost = amount * 12 * c.adult_population
    mpc = c.marginal_propensity_to_consume
    return InterventionEffect(
        job_effect=round(annual_cost * mpc * c.jobs_per_dollar / 12),
        wage_effect=0.1 * (amount / 1000),  # slight wage floor increase
        lfpr_effect=-0.5 * (amount / 1000) / 12,  # income effect
        fiscal_cost=annual_cost / 12,
        economic_impact=annual_cost * mpc * c.transfer_multiplier / 12,
    )


def _job_retraining(params, state, labor_impact, c):
    displaced = labor_impact.total_displaced
    participants = displaced * (2 if params["eligibility"] == "all_unemployed" else 1)
    successful = participants * params["success_rate"] / 100
    # Retrained workers earn ~15% more
    economic = successful * _annual_wage(state, c) * 1.15
    return InterventionEffect(
        job_effect=round(successful * 0.8),  # 80% of successful retrains find work
        wage_effect=0.05,
        lfpr_effect=0.02,
        fiscal_cost=participants * params["funding_per_worker"] / params["program_duration"],
        economic_impact=economic / 12,
    )


def _wage_subsidy(params, state, labor_impact, c):
    eligible = state.labor_market.total_employment * c.high_risk_employment_share
    wage = _annual_wage(state, c)
    rate = params["subsidy_rate"] / 100
    annual_cost = eligible * min(wage, params["max_wage_covered"]) * rate
    jobs_saved = eligible * 0.05 * rate
    return InterventionEffect(
        job_effect=round(jobs_saved / 12),
        wage_effect=-0.02,  # slight wage suppression
        fiscal_cost=annual_cost / 12,
        economic_impact=jobs_saved * wage * 0.8 / 12,
    )


def _reduced_workweek(params, state, labor_impact, c):
    reduction = (c.standard_workweek - params["target_hours"]) / c.standard_workweek
    # Work spreading at 50% efficiency
    new_jobs = state.labor_market.total_employment * reduction * 0.5
    wage = _annual_wage(state, c)
    cost = new_jobs * wage * 0.25 if params["wage_adjustment"] == "partial_subsidy" else 0.0
    return InterventionEffect(
        job_effect=round(new_jobs / 12),
        wage_effect=0.1 if params["wage_adjustment"] == "full_wage" else -0.05,
        lfpr_effect=0.05,
        fiscal_cost=cost / 12,
        economic_impact=new_jobs * wage * c.marginal_propensity_to_consume / 12,
    )


def _robot_tax(params, state, labor_impact, c):
    displaced = labor_impact.total_displaced
    wage = _annual_wage(state, c)
    rate = params["tax_rate"] / 100
    revenue = displaced * wage * rate
    reduction = displaced * 0.1 * rate
    investment_drag = revenue * 0.3
    economic = revenue + reduction * wage * 0.5 - investment_drag
    return InterventionEffect(
        job_effect=round(reduction / 12),
        fiscal_cost=-revenue / 12,
        economic_impact=economic / 12,
    )


def _education_subsidy(params, state, labor_impact, c):
    participants = c.population * c.education_seeking_share * (params["income_cap"] / 100_000)
    annual_cost = participants * params["subsidy_amount"]
    future_jobs = participants * 0.001
    productivity_gain = future_jobs * _annual_wage(state, c) * 1.2
    return InterventionEffect(
        job_effect=round(future_jobs / 12),
        wage_effect=0.02,
        lfpr_effect=-0.01,  # some leave the workforce to study
        fiscal_cost=annual_cost / 12,
        economic_impact=(annual_cost * 0.8 + productivity_gain) / 12,
    )


_GUARANTEE_TAKEUP = {"all_unemployed": 0.4, "long_term_only": 0.2, "displaced_only": 0.3}


def _job_guarantee(params, state, labor_impact, c):
    lm = state.labor_market
    unemployed = max(0.0, lm.labor_force - lm.total_employment)
    participants = unemployed * _GUARANTEE_TAKEUP[params["eligibility"]]
    annual_wage = params["hourly_wage"] * c.hours_per_year
    annual_cost = participants * annual_wage * 1.3  # program overhead
    # Public jobs at 80% of market productivity
    output = participants * annual_wage * 0.8
    return InterventionEffect(
        job_effect=round(participants / 12),
        wage_effect=0.15 * (params["hourly_wage"] / 20),
        lfpr_effect=0.1,
        fiscal_cost=annual_cost / 12,
        economic_impact=output * c.government_spending_multiplier / 12,
    )


def _portable_benefits(params, state, labor_impact, c):
    gig = state.labor_market.total_employment * c.gig_workforce_share
    wage = _annual_wage(state, c)
    benefit_cost = gig * wage * params["contribution_rate"] / 100
    jobs = gig * 0.02
    mobility_gain = gig * 0.03 * wage * 0.1
    entrepreneurship_gain = jobs * wage * 1.2
    publicly_funded = params["funding_model"] == "general_revenue"
    return InterventionEffect(
        job_effect=round(jobs / 12),
        lfpr_effect=0.03,
        fiscal_cost=benefit_cost / 12 if publicly_funded else 0.0,
        economic_impact=(mobility_gain + entrepreneurship_gain) / 12,
    )


def _transition_assistance(params, state, labor_impact, c):
    displaced = labor_impact.total_displaced
    wage = _annual_wage(state, c)
    per_worker = wage * params["replacement_rate"] / 100
    annual_cost = displaced * 12 * per_worker * (params["duration"] / 12)
    match_improvement = 0.1
    consumption = annual_cost * 0.8
    better_matches = displaced * match_improvement * wage * 0.1
    return InterventionEffect(
        job_effect=round(displaced * match_improvement / 12),
        wage_effect=0.05,
        lfpr_effect=0.02,
        fiscal_cost=annual_cost / 12,
        economic_impact=(consumption * c.government_spending_multiplier + better_matches) / 12,
    )


_NIT_ELIGIBLE_SHARE = {"all_adults": 0.25, "working_age": 0.22, "families_only": 0.12}


def _negative_income_tax(params, state, labor_impact, c):
    guarantee = params["guarantee_level"]
    phase_out = params["phase_out_rate"] / 100
    eligible = c.adult_population * _NIT_ELIGIBLE_SHARE[params["eligibility"]]
    # Recipients sit on average halfway up the phase-out range
    average_benefit = guarantee * (1 - phase_out * 0.5)
    annual_cost = eligible * average_benefit
    mpc = c.marginal_propensity_to_consume
    return InterventionEffect(
        job_effect=round(annual_cost * mpc * c.jobs_per_dollar / 12),
        wage_effect=0.05 * (guarantee / 12_000),
        # Steeper phase-out, stronger work disincentive
        lfpr_effect=-0.3 * (guarantee / 12_000) * phase_out / 12,
        fiscal_cost=annual_cost / 12,
        economic_impact=annual_cost * mpc * c.transfer_multiplier / 12,
    )


def _sector_share(state, sectors: Sequence[str]) -> float:
    if "all" in sectors:
        return 1.0
    total = sum(s.employment for s in state.sectors.values())
    if total <= 0:
        return 0.0
    return sum(state.sectors[s].employment for s in sectors if s in state.sectors) / total


def _sectoral_bargaining(params, state, labor_impact, c):
    coverage = params["coverage_target"] / 100
    premium = params["wage_floor_premium"] / 100
    covered = (
        state.labor_market.total_employment * _sector_share(state, params["sectors"]) * coverage
    )
    wage = _annual_wage(state, c)
    # Labor demand elasticity ~0.2 on the negotiated premium
    jobs_lost = covered * premium * 0.2
    earnings_gain = covered * wage * premium
    return InterventionEffect(
        job_effect=-round(jobs_lost / 12),
        wage_effect=2.0 * premium * coverage,
        lfpr_effect=0.02,
        fiscal_cost=covered * 50 / 12,  # wage board administration, $50/worker
        economic_impact=(earnings_gain * c.marginal_propensity_to_consume - jobs_lost * wage) / 12,
    )


_COMPLIANCE_SLOWDOWN = {"light": 0.05, "moderate": 0.10, "strict": 0.20}
_LICENSING_RECYCLING = {"retraining": 0.8, "ubi_dividend": 0.8, "general_fund": 0.5}


def _ai_licensing(params, state, labor_impact, c):
    wage = _annual_wage(state, c)
    # AI-attributed value added: ~10% of the wage bill in adopting firms
    ai_output = state.ai.adoption_rate / 100 * state.labor_market.total_employment * wage * 0.1
    revenue = ai_output * params["license_fee"] / 100
    slowdown = _COMPLIANCE_SLOWDOWN[params["compliance_level"]]
    reduction = labor_impact.total_displaced * slowdown
    compliance_drag = ai_output * slowdown * 0.05
    economic = (
        revenue * _LICENSING_RECYCLING[params["revenue_use"]]
        - revenue * 0.3
        - compliance_drag
    ) / 12 + reduction * wage * 0.5 / 12
    return InterventionEffect(
        job_effect=round(reduction),
        fiscal_cost=-revenue / 12,
        economic_impact=economic,
    )


# Annual cost per recipient (USD)
_SERVICE_COSTS = {
    "healthcare": 4000,
    "housing": 3000,
    "transportation": 800,
    "childcare": 2500,
    "internet": 300,
}
_DELIVERY = {
    # (overhead multiplier, jobs per $1M)
    "public_provision": (1.10, 8.0),
    "vouchers": (1.05, 4.0),
    "mixed": (1.08, 6.0),
}


def _universal_basic_services(params, state, labor_impact, c):
    services = params["service_types"]
    recipients = c.population * params["coverage"] / 100
    overhead, jobs_per_million = _DELIVERY[params["delivery_model"]]
    annual_cost = recipients * sum(_SERVICE_COSTS[s] for s in services) * overhead
    # Childcare and transit remove barriers to work
    enabling = sum(1 for s in services if s in ("childcare", "transportation"))
    return InterventionEffect(
        job_effect=round(annual_cost / 1_000_000 * jobs_per_million / 12),
        lfpr_effect=0.02 * enabling * params["coverage"] / 100,
        fiscal_cost=annual_cost / 12,
        economic_impact=annual_cost * c.marginal_propensity_to_consume * c.transfer_multiplier / 12,
    )


_OWNERSHIP_FIRM_SHARE = {"small_business": 0.15, "mid_size": 0.25, "all": 0.50}


def _worker_ownership(params, state, labor_impact, c):
    wage = _annual_wage(state, c)
    converted = (
        state.labor_market.total_employment
        * _OWNERSHIP_FIRM_SHARE[params["target_firms"]]
        * params["esop_conversion_rate"] / 100
    )
    # Employee-owned firms lay off ~3% fewer workers in downturns
    retained = converted * 0.03
    tax_expenditure = converted * wage * 0.05 * params["tax_incentive"] / 100
    return InterventionEffect(
        job_effect=round(retained / 12),
        wage_effect=0.03 * min(1.0, params["esop_conversion_rate"] / 2),
        fiscal_cost=tax_expenditure / 12,
        economic_impact=(converted * wage * 0.04 + retained * wage * 0.8) / 12,
    )


_RECLASSIFICATION_RATE = {"abc_test": 0.6, "economic_realities": 0.4, "status_quo": 0.05}


def _gig_economy_regulations(params, state, labor_impact, c):
    gig = state.labor_market.total_employment * c.gig_workforce_share
    reclassified = gig * _RECLASSIFICATION_RATE[params["classification_standard"]]
    floor = params["minimum_earnings_standard"]
    mandate = params["benefits_mandate"]
    # Platforms trim headcount as per-worker costs rise
    cutback = reclassified * (0.03 + (0.02 if mandate else 0.0))
    earnings_gain = reclassified * floor * c.hours_per_year * 0.1
    return InterventionEffect(
        job_effect=-round(cutback / 12),
        wage_effect=0.1 * (reclassified / gig if gig else 0.0) * (floor / 18),
        lfpr_effect=0.02 if mandate else 0.01,
        fiscal_cost=reclassified * 25 / 12,  # enforcement
        economic_impact=(earnings_gain * c.marginal_propensity_to_consume - cutback * floor * c.hours_per_year) / 12,
    )


_SKILL_PREMIUM = {"bachelors": 1.2, "masters": 1.5, "phd": 1.8}


def _skills_based_immigration(params, state, labor_impact, c):
    visas = params["annual_visas"]
    premium = _SKILL_PREMIUM[params["skill_threshold"]]
    return InterventionEffect(
        job_effect=round(visas * 0.3 / 12),  # complementary hiring
        wage_effect=-0.01,
        lfpr_effect=0.01,
        fiscal_cost=visas * 2000 / 12,  # processing and integration
        economic_impact=visas * _annual_wage(state, c) * premium * 1.5 / 12,
    )


def _public_private_retraining(params, state, labor_impact, c):
    participants = min(params["program_capacity"] / 12, labor_impact.total_displaced)
    success = 0.6 + 0.2 * params["employer_match"] / 100
    if params["placement_guarantee"]:
        success += 0.1
    successful = participants * success
    cost_per_participant = 12_000
    return InterventionEffect(
        job_effect=round(successful * 0.9),
        wage_effect=0.06,
        lfpr_effect=0.03,
        fiscal_cost=participants * cost_per_participant * params["public_share"] / 100,
        economic_impact=successful * _annual_wage(state, c) * 1.2 / 12,
    )


EffectFunction = Callable[[Mapping[str, Any], Any, Any, PolicyCoefficients], InterventionEffect]

EFFECT_FUNCTIONS: Dict[InterventionType, EffectFunction] = {
    T.UBI: _ubi,
    T.JOB_RETRAINING: _job_retraining,
    T.WAGE_SUBSIDY: _wage_subsidy,
    T.REDUCED_WORKWEEK: _reduced_workweek,
    T.ROBOT_TAX: _robot_tax,
    T.EDUCATION_SUBSIDY: _education_subsidy,
    T.JOB_GUARANTEE: _job_guarantee,
    T.PORTABLE_BENEFITS: _portable_benefits,
    T.TRANSITION_ASSISTANCE: _transition_assistance,
    T.NEGATIVE_INCOME_TAX: _negative_income_tax,
    T.SECTORAL_BARGAINING: _sectoral_bargaining,
    T.AI_LICENSING: _ai_licensing,
    T.UNIVERSAL_BASIC_SERVICES: _universal_basic_services,
    T.WORKER_OWNERSHIP: _worker_ownership,
    T.GIG_ECONOMY_REGULATIONS: _gig_economy_regulations,
    T.SKILLS_BASED_IMMIGRATION: _skills_based_immigration,
    T.PUBLIC_PRIVATE_RETRAINING: _public_private_retraining,
}


# ──────────────────────────────────────────────────────────────────────
# System
# ──────────────────────────────────────────────────────────────────────

class InterventionSystem:
    """Holds the active interventions and aggregates their effects per step."""

    def __init__(
        self,
        coefficients: Optional[PolicyCoefficients] = None,
        skill_presets: Mapping[str, Mapping[str, float]] = SKILL_INTERVENTION_PRESETS,
    ):
        self.coefficients = coefficients or PolicyCoefficients()
        self.skill_presets = skill_presets
        self.interventions: List[Intervention] = []

    # ── Catalog ──────────────────────────────────────────────────────

    @staticmethod
    def available_types() -> List[Dict[str, Any]]:
        return [
            {
                "type": t.value,
                "name": d.name,
                "description": d.description,
                "category": d.category,
                "parameters": to_plain(d.parameters),
            }
            for t, d in INTERVENTION_TYPES.items()
        ]

    @staticmethod
    def resolve_parameters(
        intervention_type: InterventionType, overrides: Optional[Mapping[str, Any]] = None
    ) -> Dict[str, Any]:
        """Merge overrides onto the schema defaults and validate every value."""
        schema = INTERVENTION_TYPES[intervention_type].parameters
        overrides = dict(overrides or {})
        unknown = sorted(set(overrides) - set(schema))
        if unknown:
            raise InterventionParameterError(
                f"Unknown parameters for {intervention_type.value}: {unknown}"
            )
        resolved = {}
        for name, spec in schema.items():
            value = overrides[name] if overrides.get(name) is not None else spec.default
            resolved[name] = spec.validate(name, value)
        return resolved

    # ── Management ───────────────────────────────────────────────────

    def add_intervention(
        self,
        intervention_type: Union[str, InterventionType],
        params: Optional[Mapping[str, Any]] = None,
        config: Optional[Mapping[str, Any]] = None,
    ) -> Intervention:
        itype = resolve_type(intervention_type)
        definition = INTERVENTION_TYPES[itype]
        config = config or {}
        start_year = config.get("start_year")
        end_year = config.get("end_year")
        if start_year is not None and end_year is not None and end_year < start_year:
            raise InterventionParameterError(
                f"end_year ({end_year}) is before start_year ({start_year})"
            )

        intervention = Intervention(
            id=config.get("id") or uuid.uuid4().hex,
            type=itype,
            name=config.get("name") or definition.name,
            description=definition.description,
            category=definition.category,
            parameters=self.resolve_parameters(itype, params),
            effects=copy.deepcopy(QUALITATIVE_EFFECTS[itype]),
            cost_model=definition.cost_model,
            active=config.get("active", True) is not False,
            start_year=start_year,
            end_year=end_year,
        )
        self.interventions.append(intervention)
        logger.info("Added intervention %s (%s)", intervention.name, itype.value)
        return intervention

    def get(self, intervention_id: str) -> Intervention:
        for intervention in self.interventions:
            if intervention.id == intervention_id:
                return intervention
        raise KeyError(intervention_id)

    def remove_intervention(self, intervention_id: str) -> None:
        # In place: scenarios hold a reference to this list
        self.interventions[:] = [i for i in self.interventions if i.id != intervention_id]

    def clear(self) -> None:
        self.interventions.clear()

    def update_intervention(
        self,
        intervention_id: str,
        parameters: Optional[Mapping[str, Any]] = None,
        active: Optional[bool] = None,
        start_year: Optional[int] = None,
        end_year: Optional[int] = None,
    ) -> Intervention:
        intervention = self.get(intervention_id)
        if parameters:
            merged = {**intervention.parameters, **parameters}
            intervention.parameters = self.resolve_parameters(intervention.type, merged)
        if active is not None:
            intervention.active = active
        if start_year is not None:
            intervention.start_year = start_year
        if end_year is not None:
            intervention.end_year = end_year
        return intervention

    # ── Effects ──────────────────────────────────────────────────────

    def calculate_effect(self, intervention: Intervention, state, labor_impact) -> InterventionEffect:
        return EFFECT_FUNCTIONS[intervention.type](
            intervention.parameters, state, labor_impact, self.coefficients
        )

    def calculate_effects(
        self,
        state,
        year: int,
        labor_impact,
        interventions: Optional[Sequence[Intervention]] = None,
    ) -> InterventionEffects:
        """Aggregate monthly effects of every intervention active in ``year``."""
        effects = InterventionEffects()
        uplift = 0.0
        for intervention in self.interventions if interventions is None else interventions:
            if not intervention.applies_to(year):
                continue
            effect = self.calculate_effect(intervention, state, labor_impact)
            effects.add(intervention, effect)
            preset = self.skill_presets.get(intervention.type.value, {})
            uplift += preset.get("low_to_mid", 1.0) - 1.0
            logger.debug("%s in %d: %s", intervention.type.value, year, effect)
        # Programs stack additively on the base transition rates
        effects.skill_transition_strength = 1.0 + uplift
        return effects

    # ── Reporting / import-export ────────────────────────────────────

    def by_category(self) -> Dict[str, List[str]]:
        categories: Dict[str, List[str]] = {}
        for intervention in self.interventions:
            categories.setdefault(intervention.category, []).append(intervention.name)
        return categories

    def get_summary(self) -> Dict[str, Any]:
        return {
            "total_interventions": len(self.interventions),
            "active_interventions": sum(1 for i in self.interventions if i.active),
            "by_category": self.by_category(),
            "interventions": [
                {
                    "id": i.id,
                    "name": i.name,
                    "type": i.type.value,
                    "active": i.active,
                    "parameters": to_plain(i.parameters),
                }
                for i in self.interventions
            ],
        }

    def export_config(self) -> str:
        return json.dumps(
            {
                "interventions": [i.to_dict() for i in self.interventions],
                "exported_at": datetime.now().isoformat(),
            },
            indent=2,
        )

    def import_config(self, config: Union[str, Mapping[str, Any]]) -> List[Intervention]:
        """Replace the current interventions with an exported configuration.

        Every entry is re-validated against its schema.
        """
        data = json.loads(config) if isinstance(config, str) else config
        self.clear()
        for entry in data.get("interventions", []):
            self.add_intervention(
                entry["type"],
                entry.get("parameters"),
                {
                    "id": entry.get("id"),
                    "name": entry.get("name"),
                    "active": entry.get("active", True),
                    "start_year": entry.get("start_year"),
                    "end_year": entry.get("end_year"),
                },
            )
        return self.interventions
