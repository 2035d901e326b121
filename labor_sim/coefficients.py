"""
Static coefficient tables for the labor market model suite.

Task categories and sector task compositions follow the Acemoglu & Restrepo
task framework; skill tiers follow the skill-biased technological change
literature; regional profiles approximate the four Census regions; the
input-output shares are a condensed 8-sector version of the BEA use table.

Everything here is plain data. Models take these tables as constructor
defaults so alternative calibrations can be passed in without patching.
"""

from dataclasses import dataclass
from typing import Dict, List

# Sector ids shared by every table below and by the baseline snapshot.
SECTOR_IDS: List[str] = [
    "technology",
    "healthcare",
    "manufacturing",
    "retail",
    "finance",
    "education",
    "transportation",
    "professional_services",
]

# Unknown sectors borrow this composition.
FALLBACK_SECTOR = "retail"


# ──────────────────────────────────────────────────────────────────────
# Task-based labor model
# ──────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class TaskType:
    """A category of work tasks with its technical exposure to AI."""

    name: str
    description: str
    ai_exposure: float  # 0-1
    share: float  # economy-wide share of task time


TASK_TYPES: Dict[str, TaskType] = {
    "routine_cognitive": TaskType(
        "Routine Cognitive",
        "Repetitive information processing (data entry, bookkeeping)",
        0.85, 0.20,
    ),
    "routine_manual": TaskType(
        "Routine Manual",
        "Repetitive physical tasks (assembly, packaging)",
        0.70, 0.15,
    ),
    "nonroutine_cognitive_analytical": TaskType(
        "Non-Routine Analytical",
        "Complex problem solving, analysis",
        0.45, 0.20,  # rising with LLMs
    ),
    "nonroutine_cognitive_interpersonal": TaskType(
        "Non-Routine Interpersonal",
        "Management, negotiation, teaching",
        0.25, 0.20,
    ),
    "nonroutine_manual": TaskType(
        "Non-Routine Manual",
        "Complex physical tasks requiring adaptability",
        0.30, 0.15,
    ),
    "creative": TaskType(
        "Creative",
        "Innovation, artistic creation, novel problem solving",
        0.20, 0.10,  # augmented more than replaced
    ),
}

ROUTINE_TASKS = ("routine_cognitive", "routine_manual")
NON_ROUTINE_TASKS = (
    "nonroutine_cognitive_analytical",
    "nonroutine_cognitive_interpersonal",
    "creative",
)

# Fraction of each sector's work in each task category (rows sum to 1).
SECTOR_TASK_COMPOSITION: Dict[str, Dict[str, float]] = {
    "technology": {
        "routine_cognitive": 0.10,
        "routine_manual": 0.02,
        "nonroutine_cognitive_analytical": 0.45,
        "nonroutine_cognitive_interpersonal": 0.20,
        "nonroutine_manual": 0.03,
        "creative": 0.20,
    },
    "healthcare": {
        "routine_cognitive": 0.15,
        "routine_manual": 0.10,
        "nonroutine_cognitive_analytical": 0.25,
        "nonroutine_cognitive_interpersonal": 0.35,
        "nonroutine_manual": 0.10,
        "creative": 0.05,
    },
    "manufacturing": {
        "routine_cognitive": 0.15,
        "routine_manual": 0.40,
        "nonroutine_cognitive_analytical": 0.15,
        "nonroutine_cognitive_interpersonal": 0.10,
        "nonroutine_manual": 0.15,
        "creative": 0.05,
    },
    "retail": {
        "routine_cognitive": 0.30,
        "routine_manual": 0.20,
        "nonroutine_cognitive_analytical": 0.10,
        "nonroutine_cognitive_interpersonal": 0.30,
        "nonroutine_manual": 0.05,
        "creative": 0.05,
    },
    "finance": {
        "routine_cognitive": 0.25,
        "routine_manual": 0.02,
        "nonroutine_cognitive_analytical": 0.35,
        "nonroutine_cognitive_interpersonal": 0.25,
        "nonroutine_manual": 0.03,
        "creative": 0.10,
    },
    "education": {
        "routine_cognitive": 0.15,
        "routine_manual": 0.05,
        "nonroutine_cognitive_analytical": 0.25,
        "nonroutine_cognitive_interpersonal": 0.40,
        "nonroutine_manual": 0.05,
        "creative": 0.10,
    },
    "transportation": {
        "routine_cognitive": 0.15,
        "routine_manual": 0.35,
        "nonroutine_cognitive_analytical": 0.10,
        "nonroutine_cognitive_interpersonal": 0.15,
        "nonroutine_manual": 0.20,
        "creative": 0.05,
    },
    "professional_services": {
        "routine_cognitive": 0.20,
        "routine_manual": 0.05,
        "nonroutine_cognitive_analytical": 0.35,
        "nonroutine_cognitive_interpersonal": 0.25,
        "nonroutine_manual": 0.05,
        "creative": 0.10,
    },
}

# Historical average is ~0.3-0.5 new tasks per displaced task
REINSTATEMENT_RATE = 0.4
# ~60% of displaced task time turns into actual job loss (partial automation)
JOB_LOSS_PASS_THROUGH = 0.6


# ──────────────────────────────────────────────────────────────────────
# Skill-biased technological change
# ──────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SkillTier:
    """A skill group and how it interacts with AI."""

    name: str
    description: str
    share_of_workforce: float
    avg_wage: float  # $/hour
    ai_complementarity: float
    ai_substitutability: float
    wage_elasticity: float
    substitution_decay: float  # per-unit-adoption substitution drag
    employment_sensitivity: float  # fixed employment change per unit adoption


SKILL_TIERS: Dict[str, SkillTier] = {
    "high": SkillTier(
        "High-Skill", "Advanced degree, specialized knowledge",
        0.30, 45.00, 0.7, 0.2, 0.3, 0.01, 0.02,
    ),
    "mid": SkillTier(
        "Mid-Skill", "Some college, vocational training",
        0.40, 25.00, 0.3, 0.6, 0.5, 0.015, -0.03,  # hollowing out
    ),
    "low": SkillTier(
        "Low-Skill", "High school or less",
        0.30, 15.00, 0.2, 0.4, 0.6, 0.01, -0.01,  # physical presence protects some tasks
    ),
}

# Annual transition rates between tiers
SKILL_TRANSITION_RATES: Dict[str, float] = {
    "low_to_mid": 0.05,
    "mid_to_high": 0.03,
    "high_to_mid": 0.01,
    "mid_to_low": 0.02,
}

# Upskilling multipliers by intervention type. Transition strength is read
# from low_to_mid; a program without one leaves the base rates unchanged.
SKILL_INTERVENTION_PRESETS: Dict[str, Dict[str, float]] = {
    "job_retraining": {"low_to_mid": 1.5, "mid_to_high": 1.2},
    "education_subsidy": {"low_to_mid": 1.3, "mid_to_high": 1.5},
    "public_private_retraining": {"low_to_mid": 1.8, "mid_to_high": 1.4},
    "skills_based_immigration": {"mid_to_high": 0.9, "high_inflow": 1.2},
}


# ──────────────────────────────────────────────────────────────────────
# Regional labor markets
# ──────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class RegionProfile:
    """Static economic profile of a region."""

    name: str
    population_millions: float
    employment_share: float  # share of national employment
    wage_multiplier: float  # vs national average wage
    cost_of_living: float  # index, 1.0 = national average
    tech_concentration: float  # index, 1.0 = national average
    adoption_speed: float  # AI diffusion speed vs national
    sector_concentration: Dict[str, float]  # location quotients by sector


# Census Bureau 2023 population estimates; BLS QCEW location quotients (rounded)
REGION_PROFILES: Dict[str, RegionProfile] = {
    "northeast": RegionProfile(
        "Northeast", 57.6, 0.17, 1.15, 1.25, 1.20, 1.15,
        {
            "technology": 1.20, "healthcare": 1.10, "manufacturing": 0.80,
            "retail": 0.95, "finance": 1.40, "education": 1.20,
            "transportation": 0.90, "professional_services": 1.20,
        },
    ),
    "midwest": RegionProfile(
        "Midwest", 68.9, 0.21, 0.92, 0.90, 0.80, 0.90,
        {
            "technology": 0.80, "healthcare": 1.00, "manufacturing": 1.40,
            "retail": 1.00, "finance": 0.90, "education": 1.00,
            "transportation": 1.10, "professional_services": 0.85,
        },
    ),
    "south": RegionProfile(
        "South", 128.7, 0.38, 0.93, 0.92, 0.90, 0.95,
        {
            "technology": 0.85, "healthcare": 1.00, "manufacturing": 1.00,
            "retail": 1.05, "finance": 0.90, "education": 0.95,
            "transportation": 1.10, "professional_services": 0.90,
        },
    ),
    "west": RegionProfile(
        "West", 78.6, 0.24, 1.12, 1.20, 1.40, 1.20,
        {
            "technology": 1.35, "healthcare": 0.95, "manufacturing": 0.80,
            "retail": 0.98, "finance": 0.95, "education": 0.95,
            "transportation": 0.95, "professional_services": 1.15,
        },
    ),
}

# Migration flow calibration
BASE_MOBILITY_RATE = 0.02  # ~2% of workers move between regions per year (CPS ASEC)
MOVING_COST_FRICTION = 0.5
WAGE_PULL_WEIGHT = 0.3
JOB_PULL_WEIGHT = 0.4


# ──────────────────────────────────────────────────────────────────────
# Sector interdependency (input-output)
# ──────────────────────────────────────────────────────────────────────

# Row sector's purchases from column sector as a share of row output,
# columns ordered as SECTOR_IDS.
INPUT_OUTPUT_SHARES: List[List[float]] = [
    # tech  health  mfg   retail  fin   edu   trans  prof
    [0.12, 0.01, 0.05, 0.02, 0.04, 0.01, 0.02, 0.10],  # technology
    [0.04, 0.10, 0.08, 0.03, 0.05, 0.02, 0.02, 0.08],  # healthcare
    [0.04, 0.01, 0.25, 0.03, 0.04, 0.00, 0.06, 0.06],  # manufacturing
    [0.03, 0.01, 0.10, 0.05, 0.04, 0.00, 0.08, 0.06],  # retail
    [0.08, 0.01, 0.01, 0.01, 0.15, 0.01, 0.01, 0.10],  # finance
    [0.05, 0.03, 0.03, 0.02, 0.03, 0.05, 0.02, 0.05],  # education
    [0.03, 0.01, 0.12, 0.03, 0.04, 0.00, 0.10, 0.05],  # transportation
    [0.07, 0.01, 0.02, 0.01, 0.05, 0.01, 0.02, 0.12],  # professional_services
]

# BEA Type II employment multipliers (condensed)
SECTOR_MULTIPLIERS: Dict[str, float] = {
    "technology": 1.8,
    "healthcare": 1.5,
    "manufacturing": 2.2,
    "retail": 1.4,
    "finance": 1.9,
    "education": 1.3,
    "transportation": 1.7,
    "professional_services": 1.6,
}

# Jobs per $1M of gross output
EMPLOYMENT_INTENSITY: Dict[str, float] = {
    "technology": 2.5,
    "healthcare": 9.0,
    "manufacturing": 3.5,
    "retail": 11.0,
    "finance": 2.8,
    "education": 12.0,
    "transportation": 6.5,
    "professional_services": 5.5,
}

UPSTREAM_PASS_THROUGH = 0.5  # supplier effect per unit of input share
DOWNSTREAM_PASS_THROUGH = 0.3  # customer effect per unit of purchase share
RIPPLE_MIN_JOBS = 100  # smaller spillovers are noise


# ──────────────────────────────────────────────────────────────────────
# Engine-level constants
# ──────────────────────────────────────────────────────────────────────

AUTOMATION_PACE_MULTIPLIERS: Dict[str, float] = {
    "slow": 0.5,
    "moderate": 1.0,
    "fast": 1.5,
    "accelerating": 2.0,
}

# Blend of tier wage changes into the economy-wide wage pressure
SKILL_WAGE_WEIGHTS: Dict[str, float] = {"high": 0.3, "mid": 0.4, "low": 0.3}

# Logistic adoption curve shape (progress runs 0..1)
S_CURVE_MIDPOINT = 0.5
S_CURVE_STEEPNESS = 10.0

UNEMPLOYMENT_FLOOR = 0.0
UNEMPLOYMENT_CEILING = 50.0
JOB_OPENINGS_FLOOR = 1_000_000
JOB_OPENINGS_UR_SENSITIVITY = 0.05  # openings fall 5% per point of unemployment increase
PRODUCTIVITY_PER_ADOPTION_POINT = 0.02
WORKING_AGE_POPULATION = 210_000_000
