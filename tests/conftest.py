from types import SimpleNamespace

import pytest

from labor_sim.engine import SimulationEngine


@pytest.fixture
def engine():
    return SimulationEngine()


@pytest.fixture
def baseline_config():
    # 5-year horizon toward 8% unemployment, no interventions
    return {
        "name": "Baseline",
        "start_year": 2025,
        "end_year": 2030,
        "target_unemployment": 8,
        "ai_adoption_rate": 70,
        "automation_pace": "moderate",
        "adoption_curve": "s_curve",
    }


@pytest.fixture
def configured_engine(engine, baseline_config):
    engine.create_scenario(baseline_config)
    return engine


@pytest.fixture
def state(engine):
    return engine.initialize_state()


@pytest.fixture
def labor_impact():
    return SimpleNamespace(total_displaced=50_000)
