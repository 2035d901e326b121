"""
Parameter sensitivity analysis.

Sweeps one scenario input across a range, re-running the engine for each
value, and measures how strongly each headline outcome responds. The
response is summarized as an elasticity (relative spread of the outcome
over relative spread of the input) and graded low, medium or high.
Sweeps over several inputs combine into tornado chart rows.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

import numpy as np
import pandas as pd

from .config import to_plain
from .engine import SimulationEngine
from .exceptions import ScenarioNotConfiguredError

logger = logging.getLogger(__name__)

# Elasticity at or above each bound earns the level
SENSITIVITY_LEVELS = (("high", 1.5), ("medium", 0.5))


@dataclass(frozen=True)
class SensitivityParameter:
    name: str
    path: str  # dotted scenario path, see engine.set_parameter
    base_value: float
    min: float
    max: float
    step: float
    unit: str = ""

    def values(self) -> List[float]:
        return [float(v) for v in np.arange(self.min, self.max + self.step / 2, self.step)]


@dataclass(frozen=True)
class SensitivityOutcome:
    name: str
    unit: str
    extract: Callable[[Mapping[str, Any]], float]


SENSITIVITY_PARAMETERS: Dict[str, SensitivityParameter] = {
    "unemployment_rate": SensitivityParameter(
        "Target Unemployment Rate", "targets.unemployment_rate", 10, 4, 20, 2, "%"
    ),
    "ai_adoption": SensitivityParameter(
        "AI Adoption Rate", "targets.ai_adoption_rate", 70, 30, 100, 10, "%"
    ),
    "target_year": SensitivityParameter(
        "Target Year", "timeframe.end_year", 2029, 2026, 2034, 1
    ),
}

SENSITIVITY_OUTCOMES: Dict[str, SensitivityOutcome] = {
    "final_unemployment": SensitivityOutcome(
        "Final Unemployment Rate", "%",
        lambda s: s["labor_market_changes"]["unemployment_rate"]["final"],
    ),
    "net_job_impact": SensitivityOutcome(
        "Net Job Impact", "millions", lambda s: s["ai_impact"]["net_impact"] / 1e6
    ),
    "jobs_displaced": SensitivityOutcome(
        "Jobs Displaced", "millions", lambda s: s["ai_impact"]["cumulative_displacement"] / 1e6
    ),
    "jobs_created": SensitivityOutcome(
        "Jobs Created", "millions", lambda s: s["ai_impact"]["cumulative_new_jobs"] / 1e6
    ),
    "productivity_growth": SensitivityOutcome(
        "Final Productivity Growth", "%", lambda s: s["productivity"]["growth_rate"]["final"]
    ),
}


@dataclass
class SensitivityRun:
    """Outcomes of one sweep: a row per tested value, a column per outcome."""

    parameter_id: str
    parameter: SensitivityParameter
    results: pd.DataFrame

    @property
    def base_value(self) -> float:
        return self.parameter.base_value

    def to_dict(self) -> Dict[str, Any]:
        return {
            "parameter_id": self.parameter_id,
            "parameter": to_plain(self.parameter),
            "results": to_plain(self.results.to_dict(orient="records")),
        }


@dataclass
class OutcomeSensitivity:
    name: str
    unit: str
    min: float
    max: float
    range: float
    mean: float
    elasticity: float
    level: str


def get_sensitivity_level(elasticity: float) -> str:
    for level, bound in SENSITIVITY_LEVELS:
        if elasticity >= bound:
            return level
    return "low"


class SensitivityAnalysis:
    """Parameter sweeps over the scenario installed on ``engine``."""

    def __init__(
        self,
        engine: SimulationEngine,
        parameters: Optional[Mapping[str, SensitivityParameter]] = None,
        outcomes: Optional[Mapping[str, SensitivityOutcome]] = None,
    ):
        self.engine = engine
        self.parameters = dict(SENSITIVITY_PARAMETERS if parameters is None else parameters)
        self.outcomes = dict(SENSITIVITY_OUTCOMES if outcomes is None else outcomes)

    def _parameter(self, parameter_id: str) -> SensitivityParameter:
        try:
            return self.parameters[parameter_id]
        except KeyError:
            raise KeyError(f"Unknown sensitivity parameter: {parameter_id}") from None

    def sweep_values(self, parameter_id: str) -> List[float]:
        """Values to sweep; end years not after the start year are dropped."""
        parameter = self._parameter(parameter_id)
        values = parameter.values()
        if parameter.path == "timeframe.end_year":
            if self.engine.scenario is None:
                raise ScenarioNotConfiguredError()
            start = self.engine.scenario.timeframe.start_year
            kept = [int(v) for v in values if v > start]
            if len(kept) < len(values):
                logger.warning(
                    "Dropped %d end years at or before start year %d",
                    len(values) - len(kept), start,
                )
            values = kept
        return values

    def run_analysis(
        self, parameter_id: str, outcomes: Optional[Sequence[str]] = None
    ) -> SensitivityRun:
        if self.engine.scenario is None:
            raise ScenarioNotConfiguredError()
        parameter = self._parameter(parameter_id)
        selected = list(outcomes) if outcomes is not None else list(self.outcomes)
        unknown = [o for o in selected if o not in self.outcomes]
        if unknown:
            raise KeyError(f"Unknown sensitivity outcomes: {unknown}")

        values = self.sweep_values(parameter_id)
        logger.info("Sensitivity analysis of %s over %d values", parameter_id, len(values))
        sweep = self.engine.run_sensitivity_analysis(parameter.path, values)
        rows = [
            {
                "parameter_value": entry["parameter_value"],
                **{o: float(self.outcomes[o].extract(entry["summary"])) for o in selected},
            }
            for entry in sweep["analysis"]
        ]
        frame = pd.DataFrame(rows, columns=["parameter_value", *selected])
        return SensitivityRun(parameter_id, parameter, frame)

    def run_all(self, parameter_ids: Optional[Sequence[str]] = None) -> Dict[str, SensitivityRun]:
        ids = list(self.parameters) if parameter_ids is None else list(parameter_ids)
        return {pid: self.run_analysis(pid) for pid in ids}

    def calculate_sensitivity(self, run: SensitivityRun) -> Optional[Dict[str, OutcomeSensitivity]]:
        """Spread and elasticity of every outcome in ``run``; None under two rows."""
        results = run.results
        if len(results) < 2:
            return None

        inputs = results["parameter_value"].astype(float)
        input_range = float(inputs.max() - inputs.min())
        metrics = {}
        for outcome_id in results.columns.drop("parameter_value"):
            values = results[outcome_id].dropna().astype(float)
            if len(values) < 2:
                continue
            lo, hi, mean = float(values.min()), float(values.max()), float(values.mean())
            spread = hi - lo
            if input_range > 0 and mean != 0 and run.base_value:
                elasticity = abs((spread / mean) / (input_range / run.base_value))
            else:
                elasticity = 0.0
            outcome = self.outcomes.get(outcome_id)
            metrics[outcome_id] = OutcomeSensitivity(
                name=outcome.name if outcome else outcome_id,
                unit=outcome.unit if outcome else "",
                min=lo,
                max=hi,
                range=spread,
                mean=mean,
                elasticity=elasticity,
                level=get_sensitivity_level(elasticity),
            )
        return metrics

    @staticmethod
    def generate_tornado_data(
        runs: Mapping[str, SensitivityRun], outcome: str = "final_unemployment"
    ) -> pd.DataFrame:
        """Low/high outcome per swept parameter, widest swing first."""
        rows = []
        for run in runs.values():
            if run is None or run.results.empty or outcome not in run.results:
                continue
            values = run.results[outcome]
            rows.append({
                "parameter": run.parameter.name,
                "low": float(values.min()),
                "high": float(values.max()),
                "range": float(values.max() - values.min()),
            })
        frame = pd.DataFrame(rows, columns=["parameter", "low", "high", "range"])
        return frame.sort_values("range", ascending=False, kind="stable").reset_index(drop=True)
