"""
Monte Carlo uncertainty analysis.

Draws perturbed copies of a scenario, runs each through the engine and
summarizes the spread of outcomes. The randomness lives here only; every
individual run stays deterministic given its drawn scenario.
"""

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import numpy as np
import pandas as pd

from .config import Scenario, to_plain
from .engine import SimulationEngine, SimulationRun
from .exceptions import ScenarioNotConfiguredError, SimulationCancelled

logger = logging.getLogger(__name__)

FINAL_METRICS = (
    "final_unemployment",
    "final_employment",
    "cumulative_displacement",
    "cumulative_new_jobs",
    "net_job_change",
    "final_ai_adoption",
    "final_productivity",
    "final_wage_growth",
)
YEARLY_METRICS = ("unemployment", "employment", "ai_adoption", "productivity")
PERCENTILES = (5, 10, 25, 75, 90, 95)
HISTOGRAM_BINS = 20


@dataclass
class ParameterRanges:
    """Spread of each perturbed input; noise is Gaussian with sd = range / 2.

    Only inputs the engine reads are drawn. Productivity, GDP and elasticity
    settings are carried on the scenario but do not move the projection.
    """

    ai_adoption_variance: float = 15.0  # percentage points
    job_multiplier_variance: float = 0.15
    displacement_lag_variance: float = 3.0  # months


@dataclass
class HistogramBin:
    start: float
    end: float
    mid: float
    count: int
    frequency: float


@dataclass
class DistributionStats:
    min: float
    max: float
    mean: float
    median: float
    std: float
    p5: float
    p10: float
    p25: float
    p75: float
    p90: float
    p95: float
    histogram: List[HistogramBin] = field(default_factory=list)

    @classmethod
    def from_values(cls, values) -> Optional["DistributionStats"]:
        arr = np.asarray(values, dtype=float)
        arr = arr[~np.isnan(arr)]
        if arr.size == 0:
            return None
        p = dict(zip(PERCENTILES, np.percentile(arr, PERCENTILES)))
        counts, edges = np.histogram(arr, bins=HISTOGRAM_BINS)
        histogram = [
            HistogramBin(
                start=float(edges[i]),
                end=float(edges[i + 1]),
                mid=float((edges[i] + edges[i + 1]) / 2),
                count=int(c),
                frequency=float(c) / arr.size,
            )
            for i, c in enumerate(counts)
        ]
        return cls(
            min=float(arr.min()),
            max=float(arr.max()),
            mean=float(arr.mean()),
            median=float(np.median(arr)),
            std=float(arr.std()),  # population sd
            p5=float(p[5]),
            p10=float(p[10]),
            p25=float(p[25]),
            p75=float(p[75]),
            p90=float(p[90]),
            p95=float(p[95]),
            histogram=histogram,
        )


@dataclass
class MonteCarloResults:
    iterations: int
    distributions: Dict[str, Optional[DistributionStats]]
    yearly_distributions: Dict[int, Dict[str, Optional[DistributionStats]]]
    raw_results: List[Dict[str, Any]]

    def to_frame(self) -> pd.DataFrame:
        """One row per iteration, final metrics only."""
        return pd.DataFrame([{k: r[k] for k in FINAL_METRICS} for r in self.raw_results])

    def to_dict(self) -> Dict[str, Any]:
        return to_plain(self)


def key_metrics(run: SimulationRun) -> Dict[str, Any]:
    """Final-state metrics and yearly snapshots of one run."""
    summary = run.summary
    final = run.results[-1]
    yearly: Dict[int, Dict[str, float]] = {}
    for r in run.results:
        year = int(r.year)
        if year not in yearly:
            yearly[year] = {
                "unemployment": r.labor_market.unemployment_rate,
                "employment": r.labor_market.total_employment,
                "ai_adoption": r.ai_adoption.rate,
                "productivity": r.productivity.growth_rate,
            }
    return {
        "final_unemployment": summary["labor_market_changes"]["unemployment_rate"]["final"],
        "final_employment": final.labor_market.total_employment,
        "cumulative_displacement": summary["ai_impact"]["cumulative_displacement"],
        "cumulative_new_jobs": summary["ai_impact"]["cumulative_new_jobs"],
        "net_job_change": summary["ai_impact"]["net_impact"],
        "final_ai_adoption": final.ai_adoption.rate,
        "final_productivity": final.productivity.growth_rate,
        "final_wage_growth": summary["wages"]["average_hourly"]["change_percent"],
        "yearly": yearly,
    }


class MonteCarloSimulation:
    """Runs many perturbed copies of a scenario through one engine."""

    def __init__(
        self,
        engine: SimulationEngine,
        iterations: int = 1000,
        ranges: Optional[ParameterRanges] = None,
        seed: Optional[int] = None,
    ):
        if iterations < 1:
            raise ValueError(f"iterations must be positive, got {iterations}")
        self.engine = engine
        self.iterations = iterations
        self.ranges = ranges or ParameterRanges()
        self.seed = seed
        self.rng = np.random.default_rng(seed)
        self.results: Optional[MonteCarloResults] = None

    def _noise(self, value: float, variance: float) -> float:
        return float(value + self.rng.normal(0.0, variance / 2))

    def randomize_scenario(self, scenario: Scenario) -> Scenario:
        """Perturbed deep copy of ``scenario``."""
        r = self.ranges
        drawn = copy.deepcopy(scenario)
        targets, ai = drawn.targets, drawn.ai_parameters
        targets.ai_adoption_rate = min(
            100.0, max(0.0, self._noise(targets.ai_adoption_rate, r.ai_adoption_variance))
        )
        ai.new_job_multiplier = max(0.1, self._noise(ai.new_job_multiplier, r.job_multiplier_variance))
        ai.displacement_lag = max(1, int(round(self._noise(ai.displacement_lag, r.displacement_lag_variance))))
        return drawn

    def run(
        self,
        base_scenario: Optional[Scenario] = None,
        progress_callback: Optional[Callable[[float], None]] = None,
        should_cancel: Optional[Callable[[], bool]] = None,
    ) -> MonteCarloResults:
        base = base_scenario or self.engine.scenario
        if base is None:
            raise ScenarioNotConfiguredError()

        original = self.engine.scenario
        logger.info("Monte Carlo: %d iterations of %r (seed=%s)", self.iterations, base.name, self.seed)
        raw = []
        try:
            for i in range(self.iterations):
                if should_cancel is not None and should_cancel():
                    raise SimulationCancelled(i)
                run = self.engine.run_scenario(self.randomize_scenario(base))
                raw.append(key_metrics(run))
                if progress_callback is not None:
                    progress_callback((i + 1) / self.iterations * 100)
        finally:
            self.engine.scenario = original

        self.results = self.analyze(raw)
        return self.results

    def analyze(self, raw: List[Dict[str, Any]]) -> MonteCarloResults:
        distributions = {
            m: DistributionStats.from_values([r[m] for r in raw]) for m in FINAL_METRICS
        }
        years = sorted(raw[0]["yearly"]) if raw else []
        yearly = {
            year: {
                m: DistributionStats.from_values(
                    [r["yearly"][year][m] for r in raw if year in r["yearly"]]
                )
                for m in YEARLY_METRICS
            }
            for year in years
        }
        return MonteCarloResults(len(raw), distributions, yearly, raw)

    def probability(self, metric: str, threshold: float, comparison: str = "greater") -> Optional[float]:
        """Share of iterations where ``metric`` is above/below/equal to ``threshold``."""
        if self.results is None or metric not in FINAL_METRICS:
            return None
        values = np.array([r[metric] for r in self.results.raw_results], dtype=float)
        values = values[~np.isnan(values)]
        if values.size == 0:
            return None
        if comparison == "greater":
            hits = values > threshold
        elif comparison == "less":
            hits = values < threshold
        elif comparison == "equal":
            hits = values == threshold
        else:
            raise ValueError(f"comparison must be greater, less or equal, got {comparison!r}")
        return float(hits.mean())

    def report(self) -> Optional[Dict[str, Any]]:
        if self.results is None:
            return None
        d = self.results.distributions
        unemployment = d["final_unemployment"]
        displacement = d["cumulative_displacement"]
        net = d["net_job_change"]
        return {
            "iterations": self.results.iterations,
            "unemployment": {
                "most_likely": unemployment.median,
                "range": (unemployment.p10, unemployment.p90),
                "confidence_90": (unemployment.p5, unemployment.p95),
                "probability_above_10": self.probability("final_unemployment", 10, "greater"),
            },
            "displacement": {
                "most_likely": displacement.median,
                "range": (displacement.p10, displacement.p90),
                "confidence_90": (displacement.p5, displacement.p95),
            },
            "net_job_change": {
                "most_likely": net.median,
                "range": (net.p10, net.p90),
                "probability_positive": self.probability("net_job_change", 0, "greater"),
            },
        }
