"""
Fiscal cost and return estimates for policy interventions.

Independent of the per-step effect formulas in ``interventions``: these are
back-of-envelope annual figures built from national aggregates and the
displacement a finished run produced. Six intervention types carry a cost
model; the rest are listed with zero cost.
"""

import logging
import math
from dataclasses import dataclass, field, fields
from typing import Any, Callable, Dict, List, Optional, Sequence

import pandas as pd

from .config import to_plain
from .engine import SimulationRun
from .interventions import Intervention, InterventionType

logger = logging.getLogger(__name__)

DEFAULT_YEARS = 5
NO_COST_MODEL = "Cost model not available for this intervention"


@dataclass
class CostAssumptions:
    """US aggregates used by the cost models."""

    adult_population: float = 258_000_000
    average_wage: float = 59_428  # USD/year
    working_population: float = 160_000_000
    avg_hours_per_week: float = 38.6
    education_spending: float = 800e9  # current annual US spending
    education_funding_increase: float = 20.0  # percent on top of current spending
    graduates_per_year: float = 4_000_000


@dataclass
class CostEstimate:
    annual_cost: float = 0.0
    annual_revenue: float = 0.0
    jobs_saved: int = 0
    description: str = NO_COST_MODEL


@dataclass
class InterventionCost:
    name: str
    type: str
    annual_cost: float
    annual_revenue: float
    net_annual_cost: float
    estimated_jobs_saved: int
    cost_per_job: float
    roi: Optional[float]  # None when the intervention raises revenue instead
    revenue_generating: bool
    description: str


@dataclass
class CostAnalysis:
    interventions: List[InterventionCost] = field(default_factory=list)
    total_cost: float = 0.0
    total_revenue: float = 0.0
    net_cost: float = 0.0
    total_jobs_saved: int = 0
    cost_per_job_saved: float = 0.0

    def to_frame(self) -> pd.DataFrame:
        columns = [f.name for f in fields(InterventionCost)]
        return pd.DataFrame([to_plain(c) for c in self.interventions], columns=columns)

    def to_dict(self) -> Dict[str, Any]:
        return to_plain(self)


def format_dollars(amount: float) -> str:
    for bound, suffix in ((1e12, "T"), (1e9, "B"), (1e6, "M"), (1e3, "K")):
        if amount >= bound:
            return f"${amount / bound:.1f}{suffix}"
    return f"${amount:.0f}"


# ──────────────────────────────────────────────────────────────────────
# Cost models
#
# Signature: (params, jobs_displaced, years, assumptions) -> CostEstimate
# ``jobs_displaced`` is the run's cumulative displacement.
# ──────────────────────────────────────────────────────────────────────

def _ubi(params, jobs_displaced, years, a):
    monthly = params.get("monthly_amount", 1000)
    # Means-tested when a phase-out threshold is set
    eligible = a.adult_population if not params.get("phase_out_threshold") else a.adult_population * 0.7
    gross = eligible * monthly * 12
    stimulus = gross * 0.15
    avoided_social_costs = jobs_displaced * 15_000
    return CostEstimate(
        annual_cost=gross - stimulus - avoided_social_costs,
        jobs_saved=math.floor(gross * 0.7 / a.average_wage * 0.1),
        description=(
            f"${monthly:,.0f}/month to {eligible:,.0f} adults. "
            f"Gross: {format_dollars(gross)}/yr"
        ),
    )


def _job_retraining(params, jobs_displaced, years, a):
    funding = params.get("funding_per_worker", 10_000)
    success = params.get("success_rate", 60) / 100
    participants = math.ceil(jobs_displaced / years)
    return CostEstimate(
        annual_cost=participants * funding,
        jobs_saved=math.floor(participants * success),
        description=(
            f"{format_dollars(funding)} per worker, {participants:,} annual participants, "
            f"{success:.0%} success rate"
        ),
    )


def _wage_subsidy(params, jobs_displaced, years, a):
    rate = params.get("subsidy_rate", 25) / 100
    cap = params.get("max_wage_covered", 50_000)
    covered = math.floor(jobs_displaced * 0.8)  # at-risk jobs reached
    return CostEstimate(
        annual_cost=covered * min(a.average_wage, cap) * rate,
        jobs_saved=math.floor(covered * 0.7),
        description=(
            f"{rate:.0%} subsidy on wages up to {format_dollars(cap)}, covering {covered:,} jobs"
        ),
    )


_WORKWEEK_COST_SHARE = {"full_wage": 0.5, "partial_subsidy": 0.25, "proportional": 0.0}


def _reduced_workweek(params, jobs_displaced, years, a):
    hours = params.get("target_hours", 32)
    reduction = (a.avg_hours_per_week - hours) / a.avg_hours_per_week
    adjustment = params.get("wage_adjustment", "partial_subsidy")
    share = _WORKWEEK_COST_SHARE.get(adjustment, 0.0)
    return CostEstimate(
        annual_cost=a.working_population * a.average_wage * reduction * share,
        # Work spreading at 60% of the arithmetic maximum
        jobs_saved=math.floor(a.working_population * reduction * 0.6),
        description=(
            f"{hours:g}hr week (from {a.avg_hours_per_week:g}hrs), "
            f"{adjustment.replace('_', ' ')} approach"
        ),
    )


def _robot_tax(params, jobs_displaced, years, a):
    rate = params.get("tax_rate", 5) / 100
    labor_cost = a.average_wage * 1.3  # wages plus benefits
    revenue = jobs_displaced * labor_cost * rate
    return CostEstimate(
        annual_revenue=revenue,
        jobs_saved=math.floor(jobs_displaced * rate * 0.1),
        description=(
            f"{rate:.0%} tax on automation savings, "
            f"generating {format_dollars(revenue)}/yr in revenue"
        ),
    )


def _education_subsidy(params, jobs_displaced, years, a):
    increase = a.education_funding_increase
    improved = a.graduates_per_year * 0.05
    return CostEstimate(
        annual_cost=a.education_spending * increase / 100,
        jobs_saved=math.floor(improved),
        description=(
            f"{increase:g}% increase in education funding, "
            f"improving outcomes for {improved:,.0f} graduates annually"
        ),
    )


T = InterventionType

COST_MODELS: Dict[InterventionType, Callable[..., CostEstimate]] = {
    T.UBI: _ubi,
    T.JOB_RETRAINING: _job_retraining,
    T.WAGE_SUBSIDY: _wage_subsidy,
    T.REDUCED_WORKWEEK: _reduced_workweek,
    T.ROBOT_TAX: _robot_tax,
    T.EDUCATION_SUBSIDY: _education_subsidy,
}


def years_simulated(run: Optional[SimulationRun]) -> int:
    if run is None:
        return DEFAULT_YEARS
    return run.scenario.timeframe.years


class InterventionCostCalculator:
    """Annual cost, revenue, jobs saved and ROI per intervention."""

    def __init__(self, assumptions: Optional[CostAssumptions] = None):
        self.assumptions = assumptions or CostAssumptions()

    def calculate_intervention_cost(
        self, intervention: Intervention, jobs_displaced: float, years: int
    ) -> InterventionCost:
        model = COST_MODELS.get(intervention.type)
        estimate = (
            model(intervention.parameters, jobs_displaced, years, self.assumptions)
            if model is not None
            else CostEstimate()
        )
        cost, revenue, saved = estimate.annual_cost, estimate.annual_revenue, estimate.jobs_saved

        roi: Optional[float] = 0.0
        if cost > 0 and saved > 0:
            roi = saved * self.assumptions.average_wage / cost
        elif revenue > 0:
            roi = None

        return InterventionCost(
            name=intervention.name,
            type=intervention.type.value,
            annual_cost=cost,
            annual_revenue=revenue,
            net_annual_cost=cost - revenue,
            estimated_jobs_saved=saved,
            cost_per_job=(cost - revenue) / saved if saved > 0 else 0.0,
            roi=roi,
            revenue_generating=roi is None,
            description=estimate.description,
        )

    def calculate_all_costs(
        self,
        interventions: Sequence[Intervention],
        run: Optional[SimulationRun] = None,
    ) -> CostAnalysis:
        """Totals over the run's horizon for the active ``interventions``.

        Without a run, displacement is taken as zero over a five-year horizon.
        """
        analysis = CostAnalysis()
        active = [i for i in interventions if i.active]
        if not active:
            return analysis

        displaced = run.summary["ai_impact"]["cumulative_displacement"] if run is not None else 0
        years = years_simulated(run)
        for intervention in active:
            cost = self.calculate_intervention_cost(intervention, displaced, years)
            analysis.interventions.append(cost)
            analysis.total_cost += cost.annual_cost * years
            analysis.total_revenue += cost.annual_revenue * years
            analysis.total_jobs_saved += cost.estimated_jobs_saved

        analysis.net_cost = analysis.total_cost - analysis.total_revenue
        if analysis.total_jobs_saved > 0:
            analysis.cost_per_job_saved = analysis.net_cost / analysis.total_jobs_saved
        logger.info(
            "Costed %d interventions over %d years: net %s",
            len(active), years, format_dollars(analysis.net_cost),
        )
        return analysis
