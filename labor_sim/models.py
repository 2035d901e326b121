"""
Economic model suite for the labor market simulation.

Models included:

1. Solow Growth Model with AI capital
   Y = A * K^alpha * K_AI^beta * L^(1-alpha-beta)

2. Task-Based Labor Demand (Acemoglu & Restrepo)
   Jobs are bundles of tasks; AI displaces some tasks and reinstates new ones.
   The net labor effect is the balance of the two forces.

3. Skill-Biased Technological Change
   High-skill workers are complemented by AI, mid-skill routine work is
   hollowed out, low-skill work is partly protected by physical presence.

4. Regional Labor Markets
   National sector impacts are scaled into Census regions by local industry
   concentration and AI diffusion speed; wage and job gaps drive migration.

5. Sector Interdependency (input-output)
   A shock to one sector ripples to its suppliers (indirect) and customers
   (induced) through the input-output table.

All models are deterministic. The only state they carry is the Solow
model's AI capital share, which the manager resets at the start of a run.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

import numpy as np

from .coefficients import (
    BASE_MOBILITY_RATE,
    DOWNSTREAM_PASS_THROUGH,
    EMPLOYMENT_INTENSITY,
    FALLBACK_SECTOR,
    INPUT_OUTPUT_SHARES,
    JOB_LOSS_PASS_THROUGH,
    JOB_PULL_WEIGHT,
    MOVING_COST_FRICTION,
    NON_ROUTINE_TASKS,
    REGION_PROFILES,
    REINSTATEMENT_RATE,
    RIPPLE_MIN_JOBS,
    ROUTINE_TASKS,
    SECTOR_IDS,
    SECTOR_MULTIPLIERS,
    SECTOR_TASK_COMPOSITION,
    SKILL_INTERVENTION_PRESETS,
    SKILL_TIERS,
    SKILL_TRANSITION_RATES,
    TASK_TYPES,
    UPSTREAM_PASS_THROUGH,
    WAGE_PULL_WEIGHT,
    RegionProfile,
    SkillTier,
    TaskType,
)

logger = logging.getLogger(__name__)


# ──────────────────────────────────────────────────────────────────────
# Result records
# ──────────────────────────────────────────────────────────────────────

@dataclass
class TaskImpact:
    share: float
    exposure: float
    displacement: float


@dataclass
class DisplacementEffect:
    total_displacement: float
    task_impacts: Dict[str, TaskImpact]
    effective_job_loss: float


@dataclass
class ReinstatementEffect:
    total_reinstatement: float
    new_task_categories: Dict[str, float]


@dataclass
class NetTaskImpact:
    displacement: DisplacementEffect
    reinstatement: ReinstatementEffect
    net_change: float
    polarization_risk: str  # low, medium, high


@dataclass
class SkillPremium:
    wage_change: float
    employment_change: float
    premium_vs_median: float


@dataclass
class SkillGroup:
    employment: float
    share: float
    avg_wage: float


@dataclass
class InequalityMetrics:
    wage_ratio_90_10: float
    wage_ratio_90_50: float
    wage_ratio_50_10: float
    skill_premium: float
    polarization_index: float


@dataclass
class SkillTransition:
    new_distribution: Dict[str, float]
    upward: float
    downward: float

    @property
    def net_upward(self) -> float:
        return self.upward - self.downward


@dataclass
class SectorImpact:
    """One sector's AI job flows for a simulation step."""

    displaced: int
    new_jobs: int
    net_change: int
    polarization_risk: str = "low"
    task_details: Dict[str, TaskImpact] = field(default_factory=dict)


@dataclass
class NationalImpact:
    """National figures the regional and input-output models scale from."""

    sector_impacts: Dict[str, SectorImpact]
    total_employment: float
    average_hourly_wage: float


@dataclass
class RegionalImpact:
    region: str
    name: str
    employment: float
    displaced: float
    new_jobs: float
    net_change: float
    net_change_rate: float  # percent of regional employment
    unemployment_change: float  # percentage points
    avg_hourly_wage: float
    real_wage: float  # cost-of-living adjusted
    vulnerability_index: float
    sector_net_change: Dict[str, float]


@dataclass
class MigrationFlow:
    origin: str
    destination: str
    pull_factor: float
    workers: float


@dataclass
class RippleEffect:
    source: str
    direct: float
    indirect: Dict[str, float]
    induced: Dict[str, float]
    multiplier: float

    @property
    def total_indirect(self) -> float:
        return sum(self.indirect.values())

    @property
    def total_induced(self) -> float:
        return sum(self.induced.values())

    @property
    def total(self) -> float:
        return (self.direct + self.total_indirect + self.total_induced) * self.multiplier


@dataclass
class EconomyWideEffects:
    direct_total: float
    indirect_total: float
    induced_total: float
    total_effect: float
    spillover_by_sector: Dict[str, float]
    output_impact_millions: float
    cascade_risk: str
    ripples: Dict[str, RippleEffect]


@dataclass
class ComprehensiveImpact:
    task_based: NetTaskImpact
    skill_premiums: Dict[str, SkillPremium]
    skill_employment: Dict[str, SkillGroup]
    inequality: InequalityMetrics
    labor_share: float
    ai_capital_share: float
    physical_capital_share: float


@dataclass
class FullImpact:
    regional: Dict[str, RegionalImpact]
    migration_flows: List[MigrationFlow]
    divergence_index: float
    most_vulnerable_region: Optional[str]
    interdependency: EconomyWideEffects


# ──────────────────────────────────────────────────────────────────────
# 1. Solow growth with AI capital
# ──────────────────────────────────────────────────────────────────────

class SolowGrowthModel:
    """Extended Solow-Swan model treating AI as a distinct capital type."""

    def __init__(
        self,
        alpha: float = 0.30,  # physical capital share
        beta: float = 0.08,  # AI capital share, grows with adoption
        depreciation: float = 0.05,
        savings_rate: float = 0.22,  # BEA gross saving ~22% of GNI
        population_growth: float = 0.005,
        tech_growth: float = 0.015,  # Solow residual
        ai_capital_growth: float = 0.15,
    ):
        self.alpha = alpha
        self.beta = beta
        self.depreciation = depreciation
        self.savings_rate = savings_rate
        self.population_growth = population_growth
        self.tech_growth = tech_growth
        self.ai_capital_growth = ai_capital_growth
        self._initial_beta = beta

    def reset(self) -> None:
        self.beta = self._initial_beta

    def calculate_output(
        self,
        physical_capital: float,
        ai_capital: float,
        labor: float,
        tfp: float = 1.0,
        alpha: Optional[float] = None,
        beta: Optional[float] = None,
    ) -> float:
        a = self.alpha if alpha is None else alpha
        b = self.beta if beta is None else beta
        return tfp * physical_capital ** a * ai_capital ** b * labor ** (1 - a - b)

    def calculate_productivity(self, physical_capital, ai_capital, labor, tfp=1.0) -> float:
        """Output per worker."""
        if labor <= 0:
            raise ValueError("labor must be positive")
        return self.calculate_output(physical_capital, ai_capital, labor, tfp) / labor

    def calculate_steady_state(
        self,
        savings_rate: Optional[float] = None,
        depreciation: Optional[float] = None,
        population_growth: Optional[float] = None,
        tech_growth: Optional[float] = None,
    ) -> float:
        """Steady-state capital-labor ratio k* = (s / (delta + n + g))^(1/(1-alpha-beta))."""
        s = self.savings_rate if savings_rate is None else savings_rate
        d = self.depreciation if depreciation is None else depreciation
        n = self.population_growth if population_growth is None else population_growth
        g = self.tech_growth if tech_growth is None else tech_growth
        return (s / (d + n + g)) ** (1 / (1 - self.alpha - self.beta))

    def marginal_product_labor(self, output: float, labor: float) -> float:
        # Competitive wage
        return self.labor_share * output / labor

    def marginal_product_ai(self, output: float, ai_capital: float) -> float:
        return self.beta * output / ai_capital

    def project_capital_accumulation(
        self, initial_capital: float, output: float, periods: int = 1
    ) -> List[float]:
        """K(t+1) = (1 - delta) K(t) + s Y(t), with Y compounding at the TFP rate."""
        capital = initial_capital
        trajectory = [capital]
        for _ in range(periods):
            capital = capital - self.depreciation * capital + self.savings_rate * output
            trajectory.append(capital)
            output *= 1 + self.tech_growth
        return trajectory

    @property
    def labor_share(self) -> float:
        return 1 - self.alpha - self.beta

    def update_ai_capital_share(self, ai_adoption_rate: float) -> float:
        # Empirically beta rises with adoption; saturates near 0.25
        self.beta = min(0.25, 0.03 + ai_adoption_rate / 100 * 0.20)
        return self.beta


# ──────────────────────────────────────────────────────────────────────
# 2. Task-based labor demand
# ──────────────────────────────────────────────────────────────────────

class TaskBasedLaborModel:
    """Displacement and reinstatement of tasks, per sector."""

    def __init__(
        self,
        task_types: Mapping[str, TaskType] = TASK_TYPES,
        sector_composition: Mapping[str, Mapping[str, float]] = SECTOR_TASK_COMPOSITION,
        reinstatement_rate: float = REINSTATEMENT_RATE,
    ):
        self.task_types = task_types
        self.sector_composition = sector_composition
        self.reinstatement_rate = reinstatement_rate
        self._warned_sectors = set()

    def composition(self, sector: str) -> Mapping[str, float]:
        if sector in self.sector_composition:
            return self.sector_composition[sector]
        if sector not in self._warned_sectors:
            logger.warning(
                "No task profile for sector %r; using %r profile", sector, FALLBACK_SECTOR
            )
            self._warned_sectors.add(sector)
        return self.sector_composition[FALLBACK_SECTOR]

    def displacement_effect(
        self, sector: str, ai_adoption_rate: float, automation_pace: float = 1.0
    ) -> DisplacementEffect:
        task_impacts = {}
        total = 0.0
        for task, share in self.composition(sector).items():
            exposure = self.task_types[task].ai_exposure
            displacement = share * exposure * (ai_adoption_rate / 100) * automation_pace
            task_impacts[task] = TaskImpact(share, exposure, displacement)
            total += displacement
        return DisplacementEffect(
            total_displacement=total,
            task_impacts=task_impacts,
            effective_job_loss=total * JOB_LOSS_PASS_THROUGH,
        )

    def reinstatement_effect(
        self, sector: str, ai_adoption_rate: float, productivity_growth: float
    ) -> ReinstatementEffect:
        comp = self.composition(sector)
        creative_share = (
            comp.get("creative", 0.0)
            + comp.get("nonroutine_cognitive_interpersonal", 0.0) * 0.5
        )
        base = self.reinstatement_rate * (ai_adoption_rate / 100)
        productivity_bonus = productivity_growth * 0.02
        sector_bonus = creative_share * 0.1
        return ReinstatementEffect(
            total_reinstatement=base + productivity_bonus + sector_bonus,
            new_task_categories={
                "AI supervision": base * 0.3,
                "Human-AI collaboration": base * 0.25,
                "Creative expansion": sector_bonus * 0.5,
                "Service quality": base * 0.25,
                "New products/services": productivity_bonus,
            },
        )

    def net_impact(
        self,
        sector: str,
        ai_adoption_rate: float,
        productivity_growth: float,
        automation_pace: float = 1.0,
    ) -> NetTaskImpact:
        displacement = self.displacement_effect(sector, ai_adoption_rate, automation_pace)
        reinstatement = self.reinstatement_effect(sector, ai_adoption_rate, productivity_growth)
        return NetTaskImpact(
            displacement=displacement,
            reinstatement=reinstatement,
            net_change=reinstatement.total_reinstatement - displacement.effective_job_loss,
            polarization_risk=self.polarization_risk(displacement.task_impacts),
        )

    @staticmethod
    def polarization_risk(task_impacts: Mapping[str, TaskImpact]) -> str:
        """Routine work disappearing faster than non-routine work signals polarization."""

        def displaced(tasks):
            return sum(task_impacts[t].displacement for t in tasks if t in task_impacts)

        index = displaced(ROUTINE_TASKS) / (displaced(NON_ROUTINE_TASKS) + 0.01)
        if index > 3:
            return "high"
        if index > 1.5:
            return "medium"
        return "low"

    def sector_task_breakdown(self, sector: str) -> Optional[List[Dict[str, object]]]:
        comp = self.sector_composition.get(sector)
        if comp is None:
            return None
        return [
            {
                "task_type": task,
                "task_name": self.task_types[task].name,
                "share": share,
                "ai_exposure": self.task_types[task].ai_exposure,
            }
            for task, share in comp.items()
        ]


# ──────────────────────────────────────────────────────────────────────
# 3. Skill-biased technological change
# ──────────────────────────────────────────────────────────────────────

class SkillBiasedTechModel:
    """Wage and employment effects of AI split across skill tiers."""

    def __init__(
        self,
        tiers: Mapping[str, SkillTier] = SKILL_TIERS,
        transition_rates: Mapping[str, float] = SKILL_TRANSITION_RATES,
        intervention_presets: Mapping[str, Mapping[str, float]] = SKILL_INTERVENTION_PRESETS,
    ):
        self.tiers = tiers
        self.transition_rates = transition_rates
        self.intervention_presets = intervention_presets

    def calculate_skill_premiums(
        self, ai_adoption_rate: float, productivity_growth: float = 0.02
    ) -> Dict[str, SkillPremium]:
        """Per-tier wage and employment changes, both as fractions.

        ``productivity_growth`` is a yearly fraction (0.02 is 2%), unlike the
        percent figures carried in simulation state.
        """
        factor = ai_adoption_rate / 100
        premiums = {}
        for key, tier in self.tiers.items():
            effect = (
                tier.ai_complementarity * factor * productivity_growth
                - tier.ai_substitutability * factor * tier.substitution_decay
            )
            premiums[key] = SkillPremium(
                wage_change=effect * tier.wage_elasticity,
                # Fixed sensitivity, not derived from the wage effect
                employment_change=factor * tier.employment_sensitivity,
                premium_vs_median=1 + effect,
            )
        return premiums

    def calculate_employment_by_skill(
        self,
        total_employment: float,
        ai_adoption_rate: float,
        productivity_growth: float = 0.02,
        shares: Optional[Mapping[str, float]] = None,
    ) -> Dict[str, SkillGroup]:
        """Employment, share and hourly wage per tier.

        ``shares`` overrides the tiers' base workforce shares, which lets the
        engine carry an evolving skill distribution between steps.
        """
        premiums = self.calculate_skill_premiums(ai_adoption_rate, productivity_growth)
        groups = {}
        for key, tier in self.tiers.items():
            base_share = tier.share_of_workforce if shares is None else shares[key]
            p = premiums[key]
            share = base_share * (1 + p.employment_change)
            groups[key] = SkillGroup(
                employment=total_employment * share,
                share=share,
                avg_wage=tier.avg_wage * (1 + p.wage_change),
            )
        return groups

    @staticmethod
    def calculate_inequality_metrics(skill_employment: Mapping[str, SkillGroup]) -> InequalityMetrics:
        high = skill_employment["high"]
        mid = skill_employment["mid"]
        low = skill_employment["low"]
        mean_wage = (high.avg_wage + mid.avg_wage + low.avg_wage) / 3
        return InequalityMetrics(
            wage_ratio_90_10=high.avg_wage / low.avg_wage,
            wage_ratio_90_50=high.avg_wage / mid.avg_wage,
            wage_ratio_50_10=mid.avg_wage / low.avg_wage,
            skill_premium=high.avg_wage / mean_wage,
            polarization_index=(high.share + low.share) / mid.share if mid.share else 0.0,
        )

    def calculate_skill_transitions(
        self,
        distribution: Mapping[str, float],
        intervention_strength: float = 1.0,
        period_fraction: float = 1.0,
    ) -> SkillTransition:
        """Move workforce mass between tiers.

        Rates are annual; ``period_fraction`` scales them to a shorter step.
        Only upskilling flows respond to intervention strength.
        """
        r = self.transition_rates
        high, mid, low = distribution["high"], distribution["mid"], distribution["low"]

        low_to_mid = low * r["low_to_mid"] * intervention_strength * period_fraction
        mid_to_high = mid * r["mid_to_high"] * intervention_strength * period_fraction
        mid_to_low = mid * r["mid_to_low"] * period_fraction
        high_to_mid = high * r["high_to_mid"] * period_fraction

        return SkillTransition(
            new_distribution={
                "high": high + mid_to_high - high_to_mid,
                "mid": mid + low_to_mid + high_to_mid - mid_to_high - mid_to_low,
                "low": low + mid_to_low - low_to_mid,
            },
            upward=low_to_mid + mid_to_high,
            downward=mid_to_low + high_to_mid,
        )

    def transition_strength(self, intervention_type: str) -> float:
        preset = self.intervention_presets.get(intervention_type, {})
        return preset.get("low_to_mid", 1.0)

    def apply_intervention_effect(
        self, distribution: Mapping[str, float], intervention_type: str, strength: float = 1.0
    ) -> SkillTransition:
        return self.calculate_skill_transitions(
            distribution, strength * self.transition_strength(intervention_type)
        )


# ──────────────────────────────────────────────────────────────────────
# 4. Regional labor markets
# ──────────────────────────────────────────────────────────────────────

class RegionalLaborMarketModel:
    """Scales national impacts into regions and estimates migration between them."""

    def __init__(self, regions: Mapping[str, RegionProfile] = REGION_PROFILES):
        self.regions = regions

    def calculate_regional_impact(
        self,
        national: NationalImpact,
        region: str,
        sector_states: Optional[Mapping[str, object]] = None,
    ) -> RegionalImpact:
        profile = self.regions[region]
        employment = national.total_employment * profile.employment_share

        displaced = new_jobs = 0.0
        sector_net = {}
        for sector, impact in national.sector_impacts.items():
            scale = (
                profile.sector_concentration.get(sector, 1.0)
                * profile.adoption_speed
                * profile.employment_share
            )
            displaced += impact.displaced * scale
            new_jobs += impact.new_jobs * scale
            sector_net[sector] = impact.net_change * scale
        net_change = new_jobs - displaced

        net_rate = net_change / employment * 100 if employment > 0 else 0.0
        wage = national.average_hourly_wage * profile.wage_multiplier
        return RegionalImpact(
            region=region,
            name=profile.name,
            employment=employment,
            displaced=displaced,
            new_jobs=new_jobs,
            net_change=net_change,
            net_change_rate=net_rate,
            unemployment_change=-net_rate,
            avg_hourly_wage=wage,
            real_wage=wage / profile.cost_of_living,
            vulnerability_index=self.vulnerability_index(region, sector_states),
            sector_net_change=sector_net,
        )

    def calculate_all_regions(
        self, national: NationalImpact, sector_states: Optional[Mapping[str, object]] = None
    ) -> Dict[str, RegionalImpact]:
        return {
            region: self.calculate_regional_impact(national, region, sector_states)
            for region in self.regions
        }

    def vulnerability_index(
        self, region: str, sector_states: Optional[Mapping[str, object]] = None
    ) -> float:
        """Employment-weighted automation exposure of the region's industry mix."""
        profile = self.regions[region]
        if not sector_states:
            return 0.0
        total = sum(s.employment for s in sector_states.values())
        if total <= 0:
            return 0.0
        exposure = sum(
            profile.sector_concentration.get(name, 1.0)
            * s.automation_exposure
            * s.employment / total
            for name, s in sector_states.items()
        )
        return exposure * profile.adoption_speed

    def calculate_migration_flows(
        self, regional: Mapping[str, RegionalImpact]
    ) -> List[MigrationFlow]:
        flows = []
        for origin, o in regional.items():
            for dest, d in regional.items():
                if origin == dest:
                    continue
                wage_diff = (d.real_wage - o.real_wage) / o.real_wage if o.real_wage else 0.0
                job_diff = (d.net_change_rate - o.net_change_rate) / 100
                pull = wage_diff * WAGE_PULL_WEIGHT + job_diff * JOB_PULL_WEIGHT
                if pull <= 0:
                    continue
                workers = o.employment * pull * BASE_MOBILITY_RATE * (1 - MOVING_COST_FRICTION)
                flows.append(MigrationFlow(origin, dest, pull, workers))
        flows.sort(key=lambda f: abs(f.workers), reverse=True)
        return flows

    @staticmethod
    def divergence_index(regional: Mapping[str, RegionalImpact]) -> float:
        """Coefficient of variation of regional net-change rates."""
        rates = np.array([r.net_change_rate for r in regional.values()], dtype=float)
        if rates.size == 0:
            return 0.0
        mean = rates.mean()
        if mean == 0:
            return 0.0
        return float(rates.std() / abs(mean))


# ──────────────────────────────────────────────────────────────────────
# 5. Sector interdependency
# ──────────────────────────────────────────────────────────────────────

class SectorInterdependencyModel:
    """Input-output propagation of sector employment shocks."""

    def __init__(
        self,
        sector_ids: List[str] = SECTOR_IDS,
        input_output_shares: List[List[float]] = INPUT_OUTPUT_SHARES,
        multipliers: Mapping[str, float] = SECTOR_MULTIPLIERS,
        employment_intensity: Mapping[str, float] = EMPLOYMENT_INTENSITY,
    ):
        self.sector_ids = list(sector_ids)
        self.io = np.asarray(input_output_shares, dtype=float)
        if self.io.shape != (len(self.sector_ids), len(self.sector_ids)):
            raise ValueError(
                f"input-output table shape {self.io.shape} does not match "
                f"{len(self.sector_ids)} sectors"
            )
        self.multipliers = multipliers
        self.employment_intensity = employment_intensity
        self._index = {s: i for i, s in enumerate(self.sector_ids)}

    def calculate_ripple_effects(self, source: str, direct_impact: float) -> RippleEffect:
        i = self._index.get(source)
        if i is None:
            logger.debug("Sector %r not in input-output table; no spillovers", source)
            return RippleEffect(source, direct_impact, {}, {}, 1.0)

        indirect = {}
        induced = {}
        for j, other in enumerate(self.sector_ids):
            if j == i:
                continue
            # Suppliers lose orders in proportion to what the source buys from them
            upstream = direct_impact * self.io[i, j] * UPSTREAM_PASS_THROUGH
            if abs(upstream) > RIPPLE_MIN_JOBS:
                indirect[other] = float(upstream)
            # Customers are affected in proportion to what they buy from the source
            downstream = direct_impact * self.io[j, i] * DOWNSTREAM_PASS_THROUGH
            if abs(downstream) > RIPPLE_MIN_JOBS:
                induced[other] = float(downstream)

        return RippleEffect(
            source=source,
            direct=direct_impact,
            indirect=indirect,
            induced=induced,
            multiplier=self.multipliers.get(source, 1.0),
        )

    def calculate_economy_wide_effects(
        self, direct_impacts: Mapping[str, float]
    ) -> EconomyWideEffects:
        ripples = {s: self.calculate_ripple_effects(s, d) for s, d in direct_impacts.items()}

        spillover: Dict[str, float] = {}
        spills = []
        for ripple in ripples.values():
            for target, jobs in list(ripple.indirect.items()) + list(ripple.induced.items()):
                spillover[target] = spillover.get(target, 0.0) + jobs
                spills.append(jobs)

        output_impact = sum(
            jobs / self.employment_intensity[s]
            for s, jobs in spillover.items()
            if self.employment_intensity.get(s)
        )

        return EconomyWideEffects(
            direct_total=sum(r.direct for r in ripples.values()),
            indirect_total=sum(r.total_indirect for r in ripples.values()),
            induced_total=sum(r.total_induced for r in ripples.values()),
            total_effect=sum(r.total for r in ripples.values()),
            spillover_by_sector=spillover,
            output_impact_millions=output_impact,
            cascade_risk=self.cascade_risk(spills),
            ripples=ripples,
        )

    @staticmethod
    def cascade_risk(spillovers: List[float]) -> str:
        magnitude = sum(abs(x) for x in spillovers)
        if magnitude == 0:
            return "low"
        negative = sum(-x for x in spillovers if x < 0)
        concentration = negative / magnitude
        if concentration > 0.7:
            return "high"
        if concentration > 0.4:
            return "medium"
        return "low"


# ──────────────────────────────────────────────────────────────────────
# Composition root
# ──────────────────────────────────────────────────────────────────────

class EconomicModelManager:
    """Coordinates the five models for the simulation engine."""

    def __init__(
        self,
        solow: Optional[SolowGrowthModel] = None,
        task: Optional[TaskBasedLaborModel] = None,
        sbtc: Optional[SkillBiasedTechModel] = None,
        regional: Optional[RegionalLaborMarketModel] = None,
        interdependency: Optional[SectorInterdependencyModel] = None,
    ):
        self.solow = solow or SolowGrowthModel()
        self.task = task or TaskBasedLaborModel()
        self.sbtc = sbtc or SkillBiasedTechModel()
        self.regional = regional or RegionalLaborMarketModel()
        self.interdependency = interdependency or SectorInterdependencyModel()

    def reset(self) -> None:
        self.solow.reset()

    def calculate_comprehensive_impact(
        self,
        sector: str,
        ai_adoption_rate: float,
        total_employment: float,
        productivity_growth: float,
        automation_pace: float = 1.0,
    ) -> ComprehensiveImpact:
        task_impact = self.task.net_impact(
            sector, ai_adoption_rate, productivity_growth, automation_pace
        )
        # Task model takes percent growth, skill tiers a fraction
        growth = productivity_growth / 100
        premiums = self.sbtc.calculate_skill_premiums(ai_adoption_rate, growth)
        skill_employment = self.sbtc.calculate_employment_by_skill(
            total_employment, ai_adoption_rate, growth
        )
        inequality = self.sbtc.calculate_inequality_metrics(skill_employment)

        self.solow.update_ai_capital_share(ai_adoption_rate)
        return ComprehensiveImpact(
            task_based=task_impact,
            skill_premiums=premiums,
            skill_employment=skill_employment,
            inequality=inequality,
            labor_share=self.solow.labor_share,
            ai_capital_share=self.solow.beta,
            physical_capital_share=self.solow.alpha,
        )

    def calculate_full_impact(
        self, national_impact: NationalImpact, sector_states: Mapping[str, object]
    ) -> FullImpact:
        regional = self.regional.calculate_all_regions(national_impact, sector_states)
        flows = self.regional.calculate_migration_flows(regional)
        most_vulnerable = max(
            regional.values(), key=lambda r: r.vulnerability_index, default=None
        )
        interdependency = self.interdependency.calculate_economy_wide_effects(
            {s: float(i.net_change) for s, i in national_impact.sector_impacts.items()}
        )
        return FullImpact(
            regional=regional,
            migration_flows=flows,
            divergence_index=self.regional.divergence_index(regional),
            most_vulnerable_region=most_vulnerable.region if most_vulnerable else None,
            interdependency=interdependency,
        )

    def enhanced_sector_exposure(self, sector: str, ai_adoption_rate: float) -> Dict[str, object]:
        displacement = self.task.displacement_effect(sector, ai_adoption_rate)
        loss = displacement.effective_job_loss
        return {
            "task_breakdown": self.task.sector_task_breakdown(sector),
            "displacement": displacement,
            "risk_level": "high" if loss > 0.1 else "medium" if loss > 0.05 else "low",
        }
