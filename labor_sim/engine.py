"""
Labor market simulation engine.

Each step of a run follows the same loop:

1. AI adoption
   Baseline adoption moves toward the scenario target along a linear,
   exponential or logistic curve.

2. Labor impact
   The task-based model turns the step's change in adoption into displaced
   and reinstated jobs per sector. Displacement responds to adoption with a
   configurable lag. A target-adjustment term steers unemployment toward the
   scenario's target over the remaining horizon.

3. Interventions
   Active policies add job, wage, participation, fiscal and output effects.

4. State update
   Employment, unemployment, job openings, wages, productivity, sectors,
   skill tiers and macro shares all advance to a new state. The previous
   state is never modified, and unchanged parts are shared between states.
"""

import copy
import json
import logging
from dataclasses import dataclass, fields, is_dataclass, replace
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Sequence

import numpy as np
import pandas as pd

from .coefficients import (
    AUTOMATION_PACE_MULTIPLIERS,
    JOB_OPENINGS_FLOOR,
    JOB_OPENINGS_UR_SENSITIVITY,
    PRODUCTIVITY_PER_ADOPTION_POINT,
    S_CURVE_MIDPOINT,
    S_CURVE_STEEPNESS,
    SKILL_WAGE_WEIGHTS,
    UNEMPLOYMENT_CEILING,
    UNEMPLOYMENT_FLOOR,
    WORKING_AGE_POPULATION,
)
from .config import BaselineSnapshot, Scenario, default_baseline, to_plain
from .exceptions import (
    InvalidParameterPathError,
    ScenarioNotConfiguredError,
    SimulationCancelled,
    SimulationError,
)
from .interventions import InterventionEffects, InterventionSystem
from .models import (
    EconomicModelManager,
    FullImpact,
    NationalImpact,
    SectorImpact,
    SkillGroup,
    SkillPremium,
)

logger = logging.getLogger(__name__)

CSV_COLUMNS = [
    "Year",
    "AI Adoption %",
    "Unemployment Rate %",
    "Total Employment",
    "Job Openings",
    "Avg Hourly Wage",
    "Productivity Growth %",
    "Cumulative Displaced",
    "Cumulative New Jobs",
]


def _sigmoid(x):
    return 1.0 / (1.0 + np.exp(-x))


# ──────────────────────────────────────────────────────────────────────
# State
# ──────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class LaborMarketState:
    total_employment: float
    unemployment_rate: float  # percent
    labor_force_participation: float  # percent
    job_openings: float
    labor_force: float


@dataclass(frozen=True)
class WageState:
    average_hourly: float
    median_weekly: float
    real_wage_growth: float  # percent/year


@dataclass(frozen=True)
class ProductivityState:
    growth_rate: float  # percent/year
    output_per_hour: float


@dataclass(frozen=True)
class SectorState:
    employment: float
    automation_exposure: float


@dataclass(frozen=True)
class AIState:
    adoption_rate: float
    displaced_workers: int = 0  # cumulative
    new_jobs_created: int = 0  # cumulative


@dataclass(frozen=True)
class MacroState:
    labor_share: float
    ai_capital_share: float
    tfp_growth: float


@dataclass(frozen=True)
class SimulationState:
    labor_market: LaborMarketState
    wages: WageState
    productivity: ProductivityState
    sectors: Dict[str, SectorState]
    ai: AIState
    skills: Dict[str, SkillGroup]
    skill_distribution: Dict[str, float]  # tier shares before AI employment effects
    macroeconomic: MacroState

    def to_dict(self) -> Dict[str, Any]:
        return to_plain(self)


# ──────────────────────────────────────────────────────────────────────
# Step records
# ──────────────────────────────────────────────────────────────────────

@dataclass
class AIAdoption:
    rate: float
    change_from_baseline: float
    curve_type: str
    progress: float


@dataclass
class LaborImpact:
    adoption_rate: float
    total_displaced: int
    total_new_jobs: int
    target_adjustment: int
    net_job_change: int
    sector_impacts: Dict[str, SectorImpact]
    productivity_gain: float
    wage_pressure: float  # percentage points of real wage growth
    skill_effects: Dict[str, SkillPremium]
    labor_share: float
    ai_capital_share: float
    polarization_index: float  # 0 (all low) .. 2 (all high)

    @property
    def ai_net_change(self) -> int:
        return self.total_new_jobs - self.total_displaced


@dataclass
class DerivedMetrics:
    employment_to_population: float
    jobs_per_unemployed: Optional[float]
    cumulative_displacement: int
    cumulative_new_jobs: int
    net_ai_job_impact: int


@dataclass
class SimulationResult:
    step: int
    year: float
    progress: float  # percent of horizon
    ai_adoption: AIAdoption
    state: SimulationState
    labor_impact: LaborImpact
    interventions: InterventionEffects
    derived: DerivedMetrics

    @property
    def labor_market(self) -> LaborMarketState:
        return self.state.labor_market

    @property
    def wages(self) -> WageState:
        return self.state.wages

    @property
    def productivity(self) -> ProductivityState:
        return self.state.productivity

    @property
    def sectors(self) -> Dict[str, SectorState]:
        return self.state.sectors

    def to_dict(self) -> Dict[str, Any]:
        return to_plain(self)


@dataclass
class SimulationRun:
    scenario: Scenario
    results: List[SimulationResult]
    summary: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return to_plain(self)


def set_parameter(target: Any, path: str, value: Any) -> None:
    """Assign ``value`` at a dotted path such as ``targets.ai_adoption_rate``.

    Path segments address dataclass fields, existing mapping keys or list
    indices. Anything else raises InvalidParameterPathError.
    """
    parts = path.split(".")
    if not path or not all(parts):
        raise InvalidParameterPathError(f"Invalid parameter path: {path!r}")

    def has(obj, key):
        if is_dataclass(obj):
            return key in {f.name for f in fields(obj)}
        if isinstance(obj, dict):
            return key in obj
        if isinstance(obj, list):
            return key.isdigit() and int(key) < len(obj)
        return False

    def get(obj, key):
        if is_dataclass(obj):
            return getattr(obj, key)
        if isinstance(obj, list):
            return obj[int(key)]
        return obj[key]

    obj = target
    for i, key in enumerate(parts):
        if not has(obj, key):
            walked = ".".join(parts[:i + 1])
            raise InvalidParameterPathError(f"{walked!r} does not exist (in {path!r})")
        if i < len(parts) - 1:
            obj = get(obj, key)

    last = parts[-1]
    if is_dataclass(obj):
        setattr(obj, last, value)
    elif isinstance(obj, list):
        obj[int(last)] = value
    else:
        obj[last] = value


# ──────────────────────────────────────────────────────────────────────
# Engine
# ──────────────────────────────────────────────────────────────────────

class SimulationEngine:
    """Runs scenarios against a baseline snapshot."""

    def __init__(
        self,
        baseline: Optional[BaselineSnapshot] = None,
        models: Optional[EconomicModelManager] = None,
        interventions: Optional[InterventionSystem] = None,
    ):
        self.baseline = baseline if baseline is not None else default_baseline()
        self.models = models or EconomicModelManager()
        self.interventions = interventions or InterventionSystem()
        self.scenario: Optional[Scenario] = None
        self.results: List[SimulationResult] = []

    # ── Scenario ─────────────────────────────────────────────────────

    def create_scenario(self, config: Optional[Mapping[str, Any]] = None) -> Scenario:
        """Build and install a scenario from flat user input.

        An ``interventions`` entry (list of ``{"type", "parameters", "config"}``)
        replaces the engine's current interventions; without one the current
        interventions carry over.
        """
        config = config or {}
        scenario = Scenario.from_config(config)
        if "interventions" in config:
            self.interventions.clear()
            for entry in config["interventions"] or []:
                self.interventions.add_intervention(
                    entry["type"], entry.get("parameters"), entry.get("config")
                )
        # Live view: interventions added later are seen by the next run
        scenario.interventions = self.interventions.interventions
        self.scenario = scenario
        logger.info("Created scenario %r (%s)", scenario.name, scenario.id)
        return scenario

    # ── Step functions ───────────────────────────────────────────────

    def initialize_state(self) -> SimulationState:
        self.models.reset()
        b = self.baseline
        lm = b.labor_market
        if not 0 <= lm.unemployment_rate < 100:
            raise SimulationError(
                f"Baseline unemployment rate {lm.unemployment_rate} is outside [0, 100)"
            )
        labor_force = lm.total_employment / (1 - lm.unemployment_rate / 100)

        distribution = {k: t.share_of_workforce for k, t in self.models.sbtc.tiers.items()}
        skills = self.models.sbtc.calculate_employment_by_skill(
            lm.total_employment, b.ai_adoption, b.productivity.growth_rate / 100, distribution
        )
        solow = self.models.solow
        return SimulationState(
            labor_market=LaborMarketState(
                total_employment=lm.total_employment,
                unemployment_rate=lm.unemployment_rate,
                labor_force_participation=lm.labor_force_participation,
                job_openings=lm.job_openings,
                labor_force=labor_force,
            ),
            wages=WageState(
                average_hourly=b.wages.average_hourly,
                median_weekly=b.wages.median_weekly,
                real_wage_growth=b.wages.real_wage_growth,
            ),
            productivity=ProductivityState(
                growth_rate=b.productivity.growth_rate,
                output_per_hour=b.productivity.output_per_hour,
            ),
            sectors={
                name: SectorState(s.employment, s.automation_exposure)
                for name, s in b.sectors.items()
            },
            ai=AIState(adoption_rate=b.ai_adoption),
            skills=skills,
            skill_distribution=distribution,
            macroeconomic=MacroState(
                labor_share=solow.labor_share,
                ai_capital_share=solow.beta,
                tfp_growth=solow.tech_growth,
            ),
        )

    def calculate_ai_adoption(self, progress: float, scenario: Scenario) -> AIAdoption:
        """Adoption at ``progress`` (0..1) through the horizon, clamped to [0, 100]."""
        initial = self.baseline.ai_adoption
        target = scenario.targets.ai_adoption_rate
        curve = scenario.ai_parameters.adoption_curve
        p = min(1.0, max(0.0, progress))

        if curve == "linear":
            adoption = initial + (target - initial) * p
        elif curve == "exponential":
            if initial > 0 and target > 0:
                adoption = initial * (target / initial) ** p
            else:
                # Geometric path undefined from zero; fall back to a straight line
                adoption = initial + (target - initial) * p
        elif curve == "s_curve":
            # Logistic rescaled so the curve starts at initial and ends at target
            lo = _sigmoid(-S_CURVE_STEEPNESS * S_CURVE_MIDPOINT)
            hi = _sigmoid(S_CURVE_STEEPNESS * (1 - S_CURVE_MIDPOINT))
            s = (_sigmoid(S_CURVE_STEEPNESS * (p - S_CURVE_MIDPOINT)) - lo) / (hi - lo)
            adoption = initial + (target - initial) * float(s)
        else:
            raise ValueError(f"Unknown adoption curve {curve!r}")

        return AIAdoption(
            rate=min(100.0, max(0.0, adoption)),
            change_from_baseline=adoption - initial,
            curve_type=curve,
            progress=p,
        )

    def _lagged_adoption(self, progress: float, scenario: Scenario) -> float:
        lag = scenario.ai_parameters.displacement_lag / 12 / scenario.timeframe.years
        return self.calculate_ai_adoption(progress - lag, scenario).rate

    def calculate_labor_impact(
        self, state: SimulationState, ai_adoption: AIAdoption, scenario: Scenario
    ) -> LaborImpact:
        """Job flows for one step.

        Task-model fractions are levels at a given adoption rate, so a step's
        flows come from the change in those levels since the previous step.
        Displacement tracks adoption ``displacement_lag`` months earlier.
        """
        pace = AUTOMATION_PACE_MULTIPLIERS.get(scenario.targets.automation_pace)
        if pace is None:
            raise ValueError(f"Unknown automation pace {scenario.targets.automation_pace!r}")
        total_steps = scenario.timeframe.total_steps
        dp = 1 / total_steps
        growth = state.productivity.growth_rate
        task = self.models.task

        rate_now = ai_adoption.rate
        rate_prev = state.ai.adoption_rate
        lagged_now = self._lagged_adoption(ai_adoption.progress, scenario)
        lagged_prev = self._lagged_adoption(ai_adoption.progress - dp, scenario)

        exposures = [s.automation_exposure for s in state.sectors.values()]
        mean_exposure = float(np.mean(exposures)) if exposures else 0.0

        sector_impacts = {}
        polarization_score = {"low": 0, "medium": 1, "high": 2}
        polarization = 0
        total_displaced = total_new = 0
        for name, sector in state.sectors.items():
            now = task.net_impact(name, rate_now, growth, pace)
            before = task.net_impact(name, rate_prev, growth, pace)
            loss_now = task.displacement_effect(name, lagged_now, pace).effective_job_loss
            loss_prev = task.displacement_effect(name, lagged_prev, pace).effective_job_loss

            exposure_scale = 1.0
            if scenario.ai_parameters.sector_variation and mean_exposure > 0:
                exposure_scale = sector.automation_exposure / mean_exposure

            displaced = round(sector.employment * max(0.0, loss_now - loss_prev) * exposure_scale)
            reinstated = (
                now.reinstatement.total_reinstatement - before.reinstatement.total_reinstatement
            )
            # AI-adjacent hiring (maintenance, supervision) per displaced worker
            new_jobs = round(sector.employment * max(0.0, reinstated)) + round(
                displaced * scenario.ai_parameters.new_job_multiplier
            )

            sector_impacts[name] = SectorImpact(
                displaced=displaced,
                new_jobs=new_jobs,
                net_change=new_jobs - displaced,
                polarization_risk=now.polarization_risk,
                task_details=now.displacement.task_impacts,
            )
            total_displaced += displaced
            total_new += new_jobs
            polarization += polarization_score[now.polarization_risk]

        target_adjustment = self._target_adjustment(
            state, scenario, total_new - total_displaced, ai_adoption.progress
        )

        premiums = self.models.sbtc.calculate_skill_premiums(rate_now, growth / 100)
        # Percentage points of real wage growth
        wage_pressure = 100 * sum(
            premiums[k].wage_change * w for k, w in SKILL_WAGE_WEIGHTS.items()
        )

        solow = self.models.solow
        solow.update_ai_capital_share(rate_now)

        return LaborImpact(
            adoption_rate=rate_now,
            total_displaced=total_displaced,
            total_new_jobs=total_new,
            target_adjustment=target_adjustment,
            net_job_change=total_new - total_displaced + target_adjustment,
            sector_impacts=sector_impacts,
            productivity_gain=(rate_now - rate_prev) * PRODUCTIVITY_PER_ADOPTION_POINT,
            wage_pressure=wage_pressure,
            skill_effects=premiums,
            labor_share=solow.labor_share,
            ai_capital_share=solow.beta,
            polarization_index=polarization / len(state.sectors) if state.sectors else 0.0,
        )

    @staticmethod
    def _target_adjustment(
        state: SimulationState, scenario: Scenario, ai_net_change: int, progress: float
    ) -> int:
        """Jobs to add this step so unemployment reaches the target by the last step."""
        target = scenario.targets.unemployment_rate
        if target is None:
            return 0
        total_steps = scenario.timeframe.total_steps
        step = int(round(progress * total_steps))
        remaining = total_steps - step + 1
        lm = state.labor_market
        projected_unemployed = lm.labor_force - (lm.total_employment + ai_net_change)
        target_unemployed = lm.labor_force * target / 100
        return int(round((projected_unemployed - target_unemployed) / remaining))

    def update_state(
        self,
        state: SimulationState,
        labor_impact: LaborImpact,
        effects: InterventionEffects,
        scenario: Optional[Scenario] = None,
    ) -> SimulationState:
        scenario = scenario or self.scenario
        steps_per_year = scenario.timeframe.steps_per_year if scenario else 12
        lm = state.labor_market

        # Participation shifts resize the labor force
        lfpr = lm.labor_force_participation + effects.lfpr_effect
        labor_force = lm.labor_force
        if lm.labor_force_participation > 0:
            labor_force = lm.labor_force * lfpr / lm.labor_force_participation

        employment = lm.total_employment + labor_impact.net_job_change + effects.job_effect
        if labor_force > 0:
            raw_ur = (labor_force - employment) / labor_force * 100
        else:
            raw_ur = UNEMPLOYMENT_CEILING
        ur = min(UNEMPLOYMENT_CEILING, max(UNEMPLOYMENT_FLOOR, raw_ur))
        if ur != raw_ur:
            logger.warning("Unemployment rate %.2f%% clamped to %.2f%%", raw_ur, ur)

        openings = lm.job_openings * (1 - (ur - lm.unemployment_rate) * JOB_OPENINGS_UR_SENSITIVITY)
        if openings < JOB_OPENINGS_FLOOR:
            logger.warning("Job openings %.0f raised to floor %d", openings, JOB_OPENINGS_FLOOR)
            openings = JOB_OPENINGS_FLOOR

        # Pressure and policy effects compound on the previous step's growth
        wage_growth = state.wages.real_wage_growth + labor_impact.wage_pressure + effects.wage_effect
        wage_factor = 1 + wage_growth / 100 / steps_per_year
        productivity_growth = state.productivity.growth_rate + labor_impact.productivity_gain

        sectors = dict(state.sectors)
        for name, impact in labor_impact.sector_impacts.items():
            if name in sectors:
                sectors[name] = replace(
                    sectors[name], employment=sectors[name].employment + impact.net_change
                )

        ai_rate = labor_impact.adoption_rate
        transition = self.models.sbtc.calculate_skill_transitions(
            state.skill_distribution,
            effects.skill_transition_strength,
            period_fraction=1 / steps_per_year,
        )
        skills = self.models.sbtc.calculate_employment_by_skill(
            employment, ai_rate, productivity_growth / 100, transition.new_distribution
        )

        return SimulationState(
            labor_market=LaborMarketState(
                total_employment=employment,
                unemployment_rate=ur,
                labor_force_participation=lfpr,
                job_openings=openings,
                labor_force=labor_force,
            ),
            wages=WageState(
                average_hourly=state.wages.average_hourly * wage_factor,
                median_weekly=state.wages.median_weekly * wage_factor,
                real_wage_growth=wage_growth,
            ),
            productivity=ProductivityState(
                growth_rate=productivity_growth,
                output_per_hour=state.productivity.output_per_hour
                * (1 + productivity_growth / 100 / steps_per_year),
            ),
            sectors=sectors,
            ai=AIState(
                adoption_rate=ai_rate,
                displaced_workers=state.ai.displaced_workers + labor_impact.total_displaced,
                new_jobs_created=state.ai.new_jobs_created + labor_impact.total_new_jobs,
            ),
            skills=skills,
            skill_distribution=transition.new_distribution,
            macroeconomic=MacroState(
                labor_share=labor_impact.labor_share,
                ai_capital_share=labor_impact.ai_capital_share,
                tfp_growth=state.macroeconomic.tfp_growth,
            ),
        )

    @staticmethod
    def calculate_derived_metrics(state: SimulationState) -> DerivedMetrics:
        lm = state.labor_market
        unemployed = lm.labor_force - lm.total_employment
        return DerivedMetrics(
            employment_to_population=lm.total_employment / WORKING_AGE_POPULATION * 100,
            jobs_per_unemployed=lm.job_openings / unemployed if unemployed > 0 else None,
            cumulative_displacement=state.ai.displaced_workers,
            cumulative_new_jobs=state.ai.new_jobs_created,
            net_ai_job_impact=state.ai.new_jobs_created - state.ai.displaced_workers,
        )

    # ── Runs ─────────────────────────────────────────────────────────

    def iter_simulation(
        self,
        scenario: Optional[Scenario] = None,
        should_cancel: Optional[Callable[[], bool]] = None,
    ) -> Iterator[SimulationResult]:
        """Yield one result per step without keeping the sequence."""
        scenario = scenario or self.scenario
        if scenario is None:
            raise ScenarioNotConfiguredError()

        tf = scenario.timeframe
        total_steps = tf.total_steps
        logger.info(
            "Running %r: %d-%d, %d steps, %d interventions",
            scenario.name, tf.start_year, tf.end_year, total_steps, len(scenario.interventions),
        )

        state = self.initialize_state()
        for step in range(total_steps + 1):
            if should_cancel is not None and should_cancel():
                logger.info("Run %r cancelled at step %d", scenario.name, step)
                raise SimulationCancelled(step)

            year = tf.start_year + step / tf.steps_per_year
            progress = step / total_steps
            adoption = self.calculate_ai_adoption(progress, scenario)
            impact = self.calculate_labor_impact(state, adoption, scenario)
            effects = self.interventions.calculate_effects(
                state, int(year), impact, scenario.interventions
            )
            state = self.update_state(state, impact, effects, scenario)

            logger.debug(
                "step %d: adoption %.1f%%, unemployment %.2f%%, displaced %d, new %d",
                step, adoption.rate, state.labor_market.unemployment_rate,
                impact.total_displaced, impact.total_new_jobs,
            )
            yield SimulationResult(
                step=step,
                year=round(year, 2),
                progress=round(progress * 100, 1),
                ai_adoption=adoption,
                state=state,
                labor_impact=impact,
                interventions=effects,
                derived=self.calculate_derived_metrics(state),
            )

    def _collect(self, scenario, on_step=None, should_cancel=None) -> List[SimulationResult]:
        results = []
        for result in self.iter_simulation(scenario, should_cancel):
            results.append(result)
            if on_step is not None:
                on_step(result)
        return results

    def run_simulation(
        self,
        on_step: Optional[Callable[[SimulationResult], None]] = None,
        should_cancel: Optional[Callable[[], bool]] = None,
    ) -> SimulationRun:
        if self.scenario is None:
            raise ScenarioNotConfiguredError()
        results = self._collect(self.scenario, on_step, should_cancel)
        self.results = results
        summary = self.generate_summary(results)
        logger.info(
            "Finished %r: unemployment %.2f%% -> %.2f%%",
            self.scenario.name,
            results[0].labor_market.unemployment_rate,
            results[-1].labor_market.unemployment_rate,
        )
        return SimulationRun(self.scenario, results, summary)

    def run_scenario(self, scenario: Scenario) -> SimulationRun:
        """Run ``scenario`` without touching the installed scenario or results."""
        results = self._collect(scenario)
        return SimulationRun(scenario, results, self.generate_summary(results))

    # ── Summary ──────────────────────────────────────────────────────

    def generate_summary(self, results: Sequence[SimulationResult]) -> Dict[str, Any]:
        if not results:
            raise SimulationError("Cannot summarize an empty result sequence")
        first, last = results[0], results[-1]
        lm0, lm1 = first.labor_market, last.labor_market
        wage0, wage1 = first.wages.average_hourly, last.wages.average_hourly
        return {
            "timeframe": {
                "start_year": first.year,
                "end_year": last.year,
                "duration_years": last.year - first.year,
            },
            "labor_market_changes": {
                "unemployment_rate": {
                    "initial": lm0.unemployment_rate,
                    "final": lm1.unemployment_rate,
                    "change": lm1.unemployment_rate - lm0.unemployment_rate,
                },
                "total_employment": {
                    "initial": lm0.total_employment,
                    "final": lm1.total_employment,
                    "change": lm1.total_employment - lm0.total_employment,
                },
                "job_openings": {
                    "initial": lm0.job_openings,
                    "final": lm1.job_openings,
                    "change": lm1.job_openings - lm0.job_openings,
                },
                "labor_force_participation": {
                    "initial": lm0.labor_force_participation,
                    "final": lm1.labor_force_participation,
                    "change": lm1.labor_force_participation - lm0.labor_force_participation,
                },
            },
            "ai_impact": {
                "ai_adoption": {
                    "initial": first.ai_adoption.rate,
                    "final": last.ai_adoption.rate,
                },
                "cumulative_displacement": last.derived.cumulative_displacement,
                "cumulative_new_jobs": last.derived.cumulative_new_jobs,
                "net_impact": last.derived.net_ai_job_impact,
            },
            "wages": {
                "average_hourly": {
                    "initial": wage0,
                    "final": wage1,
                    "change_percent": (wage1 - wage0) / wage0 * 100 if wage0 else 0.0,
                },
            },
            "productivity": {
                "growth_rate": {
                    "initial": first.productivity.growth_rate,
                    "final": last.productivity.growth_rate,
                },
            },
            "skills": {
                tier: {
                    "initial_share": first.state.skills[tier].share,
                    "final_share": last.state.skills[tier].share,
                    "final_avg_wage": last.state.skills[tier].avg_wage,
                }
                for tier in last.state.skills
            },
            "interventions": self._intervention_summary(results),
            "sector_summary": self._sector_summary(first.sectors, last.sectors),
        }

    @staticmethod
    def _intervention_summary(results: Sequence[SimulationResult]) -> Dict[str, Any]:
        keys = ("job_effect", "wage_effect", "lfpr_effect", "fiscal_cost", "economic_impact")
        totals = {k: sum(getattr(r.interventions, k) for r in results) for k in keys}
        steps = len(results)
        return {
            **{f"total_{k}": v for k, v in totals.items()},
            "monthly_averages": {k: v / steps for k, v in totals.items()},
            "details": to_plain(results[-1].interventions.details),
        }

    @staticmethod
    def _sector_summary(
        initial: Mapping[str, SectorState], final: Mapping[str, SectorState]
    ) -> Dict[str, List[Dict[str, Any]]]:
        rows = []
        for name, start in initial.items():
            change = final[name].employment - start.employment
            rows.append({
                "name": name,
                "employment_change": change,
                "employment_change_percent": (
                    change / start.employment * 100 if start.employment else None
                ),
                "automation_exposure": start.automation_exposure,
            })
        rows.sort(key=lambda r: r["employment_change"])
        return {
            "most_affected": rows[:3],
            "least_affected": list(reversed(rows[-3:])),
        }

    # ── Queries / export ─────────────────────────────────────────────

    def results_for_year(self, year: int) -> List[SimulationResult]:
        return [r for r in self.results if int(r.year) == year]

    def regional_outlook(self, result: SimulationResult) -> FullImpact:
        """Regional and input-output breakdown of one step's sector impacts."""
        national = NationalImpact(
            sector_impacts=result.labor_impact.sector_impacts,
            total_employment=result.labor_market.total_employment,
            average_hourly_wage=result.wages.average_hourly,
        )
        return self.models.calculate_full_impact(national, result.sectors)

    def to_frame(self, results: Optional[Sequence[SimulationResult]] = None) -> pd.DataFrame:
        results = self.results if results is None else results
        return pd.DataFrame(
            [
                [
                    r.year,
                    round(r.ai_adoption.rate, 1),
                    round(r.labor_market.unemployment_rate, 2),
                    round(r.labor_market.total_employment),
                    round(r.labor_market.job_openings),
                    round(r.wages.average_hourly, 2),
                    round(r.productivity.growth_rate, 2),
                    r.derived.cumulative_displacement,
                    r.derived.cumulative_new_jobs,
                ]
                for r in results
            ],
            columns=CSV_COLUMNS,
        )

    def export_results(self, fmt: str = "json"):
        if not self.results:
            raise SimulationError("No results to export; run the simulation first")
        if fmt == "json":
            return json.dumps(
                to_plain({
                    "scenario": self.scenario,
                    "results": self.results,
                    "summary": self.generate_summary(self.results),
                }),
                indent=2,
            )
        if fmt == "csv":
            return self.to_frame().to_csv(index=False)
        if fmt == "frame":
            return self.to_frame()
        raise ValueError(f"Unknown export format {fmt!r}; expected json, csv or frame")

    # ── Sensitivity ──────────────────────────────────────────────────

    def run_sensitivity_analysis(self, parameter_path: str, values: Sequence[Any]) -> Dict[str, Any]:
        """Re-run the scenario once per value of a dotted parameter path.

        Every run works on its own deep copy; the installed scenario and
        results are left as they were.
        """
        if self.scenario is None:
            raise ScenarioNotConfiguredError()
        original = self.scenario
        analysis = []
        for value in values:
            working = copy.deepcopy(original)
            set_parameter(working, parameter_path, value)
            logger.info("Sensitivity run %s=%r", parameter_path, value)
            run = self.run_scenario(working)
            analysis.append({"parameter_value": value, "summary": run.summary})
        self.scenario = original
        return {"parameter": parameter_path, "analysis": analysis}
