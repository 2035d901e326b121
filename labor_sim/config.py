"""
Configuration for the AI Labor Market Simulator.

Defines the scenario configuration, the baseline economic snapshot the
engine starts from, and named scenario presets.
"""

import copy
import enum
import uuid
from dataclasses import dataclass, field, fields, is_dataclass
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

import numpy as np

from .coefficients import AUTOMATION_PACE_MULTIPLIERS

ADOPTION_CURVES = ("linear", "exponential", "s_curve")
AUTOMATION_PACES = tuple(AUTOMATION_PACE_MULTIPLIERS)

# Share of companies using AI when the data provider reports nothing
DEFAULT_AI_ADOPTION = 35.0


def to_plain(obj: Any) -> Any:
    """Recursively convert dataclasses, enums and numpy scalars to JSON-ready data."""
    if is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: to_plain(getattr(obj, f.name)) for f in fields(obj)}
    if isinstance(obj, enum.Enum):
        return obj.value
    if isinstance(obj, Mapping):
        return {str(to_plain(k)): to_plain(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_plain(v) for v in obj]
    if isinstance(obj, np.generic):
        return obj.item()
    return obj


def parse_bool(value: Any) -> bool:
    """Read a flag from JSON or command-line input; "false" and "0" are False."""
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if isinstance(value, (int, np.integer)) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        s = value.strip().lower()
        if s in {"true", "1", "yes", "on"}:
            return True
        if s in {"false", "0", "no", "off"}:
            return False
    raise ValueError(f"Expected a boolean, got {value!r}")


# ──────────────────────────────────────────────────────────────────────
# Baseline snapshot
# ──────────────────────────────────────────────────────────────────────

@dataclass
class LaborMarketBaseline:
    total_employment: float
    unemployment_rate: float  # percent
    labor_force_participation: float  # percent
    job_openings: float


@dataclass
class WageBaseline:
    average_hourly: float
    median_weekly: float
    real_wage_growth: float  # percent/year


@dataclass
class ProductivityBaseline:
    growth_rate: float  # percent/year
    output_per_hour: float


@dataclass
class SectorBaseline:
    employment: float
    automation_exposure: float  # 0-1


def _indicator_value(indicator: Any) -> Optional[float]:
    if isinstance(indicator, Mapping):
        indicator = indicator.get("value")
    return None if indicator is None else float(indicator)


def normalize_ai_adoption(ai_indicators: Optional[Mapping[str, Any]]) -> float:
    """Reduce either provider shape of the AI indicator block to one number.

    Accepts ``{"companies_using_ai": {"value": x}}`` and
    ``{"real": {"companies_using_ai": {"value": x}}}``.
    """
    if not ai_indicators:
        return DEFAULT_AI_ADOPTION
    for block in (ai_indicators, ai_indicators.get("real") or {}):
        value = _indicator_value(block.get("companies_using_ai"))
        if value is not None:
            return value
    return DEFAULT_AI_ADOPTION


@dataclass
class BaselineSnapshot:
    """Economic starting point supplied by an external data provider."""

    labor_market: LaborMarketBaseline
    wages: WageBaseline
    productivity: ProductivityBaseline
    sectors: Dict[str, SectorBaseline]
    ai_adoption: float = DEFAULT_AI_ADOPTION

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BaselineSnapshot":
        lm = data["labor_market"]
        wages = data["wages"]
        prod = data["productivity"]
        if "ai_adoption" in data:
            adoption = float(data["ai_adoption"])
        else:
            adoption = normalize_ai_adoption(data.get("ai_indicators"))
        return cls(
            labor_market=LaborMarketBaseline(
                total_employment=float(lm["total_employment"]),
                unemployment_rate=float(lm["unemployment_rate"]),
                labor_force_participation=float(lm["labor_force_participation"]),
                job_openings=float(lm["job_openings"]),
            ),
            wages=WageBaseline(
                average_hourly=float(wages["average_hourly"]),
                median_weekly=float(wages["median_weekly"]),
                real_wage_growth=float(wages["real_wage_growth"]),
            ),
            productivity=ProductivityBaseline(
                growth_rate=float(prod["growth_rate"]),
                output_per_hour=float(prod["output_per_hour"]),
            ),
            sectors={
                name: SectorBaseline(
                    employment=float(s["employment"]),
                    automation_exposure=float(s["automation_exposure"]),
                )
                for name, s in data.get("sectors", {}).items()
            },
            ai_adoption=adoption,
        )

    def to_dict(self) -> Dict[str, Any]:
        return to_plain(self)


# BLS CES/JOLTS, October 2024; sector employment from CES supersectors
DEFAULT_BASELINE = BaselineSnapshot(
    labor_market=LaborMarketBaseline(
        total_employment=160_000_000,
        unemployment_rate=4.1,
        labor_force_participation=62.7,
        job_openings=7_700_000,
    ),
    wages=WageBaseline(
        average_hourly=35.46,
        median_weekly=1_165.0,
        real_wage_growth=1.2,
    ),
    productivity=ProductivityBaseline(growth_rate=2.3, output_per_hour=115.0),
    sectors={
        "technology": SectorBaseline(6_200_000, 0.45),
        "healthcare": SectorBaseline(22_500_000, 0.25),
        "manufacturing": SectorBaseline(12_900_000, 0.55),
        "retail": SectorBaseline(15_600_000, 0.50),
        "finance": SectorBaseline(9_200_000, 0.60),
        "education": SectorBaseline(3_900_000, 0.30),
        "transportation": SectorBaseline(6_600_000, 0.55),
        "professional_services": SectorBaseline(22_900_000, 0.45),
    },
    ai_adoption=DEFAULT_AI_ADOPTION,  # Census BTOS / McKinsey: ~35% of firms use AI
)


def default_baseline() -> BaselineSnapshot:
    """Fresh copy of the bundled baseline, safe to hand to an engine."""
    return copy.deepcopy(DEFAULT_BASELINE)


# ──────────────────────────────────────────────────────────────────────
# Scenario
# ──────────────────────────────────────────────────────────────────────

@dataclass
class Timeframe:
    start_year: int
    end_year: int
    steps_per_year: int = 12

    @property
    def years(self) -> int:
        return self.end_year - self.start_year

    @property
    def total_steps(self) -> int:
        return self.years * self.steps_per_year


@dataclass
class Targets:
    unemployment_rate: Optional[float] = None  # percent; None = no target
    ai_adoption_rate: float = 50.0
    productivity_growth: float = 3.0
    automation_pace: str = "moderate"  # slow, moderate, fast, accelerating


@dataclass
class AIParameters:
    adoption_curve: str = "s_curve"  # linear, exponential, s_curve
    sector_variation: bool = True
    displacement_lag: int = 6  # months
    new_job_multiplier: float = 0.3


@dataclass
class EconomicParameters:
    gdp_growth: float = 2.0
    inflation: float = 2.5
    interest_rate: float = 4.0
    labor_elasticity: float = -0.5


@dataclass
class Scenario:
    """A complete, resolved simulation configuration."""

    id: str
    name: str
    description: str
    created: str
    timeframe: Timeframe
    targets: Targets = field(default_factory=Targets)
    ai_parameters: AIParameters = field(default_factory=AIParameters)
    economic_parameters: EconomicParameters = field(default_factory=EconomicParameters)
    interventions: List[Any] = field(default_factory=list)

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "Scenario":
        """Build a scenario from flat user input, filling documented defaults."""

        def pick(key, default):
            value = config.get(key)
            return default if value is None else value

        start_year = int(pick("start_year", datetime.now().year))
        end_year = int(pick("end_year", start_year + 5))
        if end_year <= start_year:
            raise ValueError(
                f"end_year ({end_year}) must be after start_year ({start_year})"
            )
        steps_per_year = int(pick("steps_per_year", 12))
        if steps_per_year < 1:
            raise ValueError(f"steps_per_year must be positive, got {steps_per_year}")

        pace = pick("automation_pace", "moderate")
        if pace not in AUTOMATION_PACES:
            raise ValueError(
                f"automation_pace must be one of {AUTOMATION_PACES}, got {pace!r}"
            )
        curve = pick("adoption_curve", "s_curve")
        if curve not in ADOPTION_CURVES:
            raise ValueError(
                f"adoption_curve must be one of {ADOPTION_CURVES}, got {curve!r}"
            )

        target_ur = config.get("target_unemployment")
        return cls(
            id=uuid.uuid4().hex,
            name=pick("name", "Unnamed Scenario"),
            description=pick("description", ""),
            created=datetime.now().isoformat(),
            timeframe=Timeframe(start_year, end_year, steps_per_year),
            targets=Targets(
                unemployment_rate=None if target_ur is None else float(target_ur),
                ai_adoption_rate=float(pick("ai_adoption_rate", 50.0)),
                productivity_growth=float(pick("productivity_growth", 3.0)),
                automation_pace=pace,
            ),
            ai_parameters=AIParameters(
                adoption_curve=curve,
                sector_variation=parse_bool(pick("sector_variation", True)),
                displacement_lag=int(pick("displacement_lag", 6)),
                new_job_multiplier=float(pick("new_job_multiplier", 0.3)),
            ),
            economic_parameters=EconomicParameters(
                gdp_growth=float(pick("gdp_growth", 2.0)),
                inflation=float(pick("inflation", 2.5)),
                interest_rate=float(pick("interest_rate", 4.0)),
                labor_elasticity=float(pick("labor_elasticity", -0.5)),
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        return to_plain(self)


# Named scenario presets (flat input for SimulationEngine.create_scenario)
SCENARIO_PRESETS: Dict[str, Dict[str, Any]] = {
    "Baseline Projection": {
        "target_unemployment": 5.0,
        "ai_adoption_rate": 55,
        "automation_pace": "moderate",
        "adoption_curve": "s_curve",
    },
    "Rapid Automation": {
        "target_unemployment": 9.0,
        "ai_adoption_rate": 85,
        "productivity_growth": 4.5,
        "automation_pace": "fast",
        "adoption_curve": "exponential",
    },
    "Gradual Transition": {
        "target_unemployment": 4.5,
        "ai_adoption_rate": 50,
        "automation_pace": "slow",
        "adoption_curve": "linear",
    },
    "Accelerated Disruption": {
        "target_unemployment": 12.0,
        "ai_adoption_rate": 95,
        "productivity_growth": 5.0,
        "automation_pace": "accelerating",
        "adoption_curve": "s_curve",
    },
    "Policy Response": {
        "target_unemployment": 8.0,
        "ai_adoption_rate": 70,
        "automation_pace": "moderate",
        "interventions": [
            {"type": "ubi", "parameters": {"monthly_amount": 500}},
            {"type": "job_retraining", "parameters": {"success_rate": 70}},
            {"type": "robot_tax", "parameters": {"tax_rate": 10}},
        ],
    },
}
