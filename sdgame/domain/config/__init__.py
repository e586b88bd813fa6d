"""
Domain Configuration

Tunable constants for the evaluation engine.
"""

from .engine_config import (
    DemandSettings,
    CapacitySettings,
    ResourceSettings,
    ScoringWeights,
    ScoringSettings,
    EngineConfig,
)

__all__ = [
    "DemandSettings",
    "CapacitySettings",
    "ResourceSettings",
    "ScoringWeights",
    "ScoringSettings",
    "EngineConfig",
]
