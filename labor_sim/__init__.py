"""AI labor market simulator."""

from .config import (
    DEFAULT_BASELINE,
    SCENARIO_PRESETS,
    BaselineSnapshot,
    Scenario,
    default_baseline,
)
from .costs import CostAnalysis, InterventionCostCalculator
from .engine import SimulationEngine, SimulationResult, SimulationRun, SimulationState
from .exceptions import (
    InterventionParameterError,
    InvalidParameterPathError,
    ScenarioNotConfiguredError,
    SimulationCancelled,
    SimulationError,
    UnknownInterventionError,
)
from .interventions import (
    Intervention,
    InterventionSystem,
    InterventionType,
    PolicyCoefficients,
)
from .models import (
    EconomicModelManager,
    RegionalLaborMarketModel,
    SectorInterdependencyModel,
    SkillBiasedTechModel,
    SolowGrowthModel,
    TaskBasedLaborModel,
)
from .monte_carlo import MonteCarloSimulation, ParameterRanges
from .sensitivity import SensitivityAnalysis, SensitivityRun, get_sensitivity_level

__version__ = "0.1.0"
