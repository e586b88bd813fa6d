"""
Domain Models

Data structures for designs, scenarios, engine state and evaluation results.
"""

from .component import (
    ComponentType,
    Component,
    ComponentConfig,
    STORE_TYPES,
    CACHING_TYPES,
    SCALABLE_TYPES,
    DEFAULT_BASE_LATENCY_MS,
)
from .design import Connection, Design
from .scenario import TrafficPhase, Goal, Constraint, Scenario
from .state import EngineState
from .evaluation import Score, EvaluationResult
from .world import GameState

__all__ = [
    # Components
    "ComponentType",
    "Component",
    "ComponentConfig",
    "STORE_TYPES",
    "CACHING_TYPES",
    "SCALABLE_TYPES",
    "DEFAULT_BASE_LATENCY_MS",
    # Design
    "Connection",
    "Design",
    # Scenario
    "TrafficPhase",
    "Goal",
    "Constraint",
    "Scenario",
    # State & results
    "EngineState",
    "Score",
    "EvaluationResult",
    "GameState",
]
