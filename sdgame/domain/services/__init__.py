"""
Domain Services Package

Pure evaluation logic: topology arena, demand sampling, load propagation,
node resource decisions and scoring.
"""

from .topology import TopologyGraph
from .demand import DemandModel, DemandSample
from .resources import ResourceModel, NodeEvaluation, CRASH_MANUAL, CRASH_OVERLOAD, CRASH_OOM
from .flow import FlowPropagator, PotentialLoad, FlowResult
from .scoring import ScoringModel, ScoreCard
from .engine import EvaluationEngine

__all__ = [
    # Graph
    "TopologyGraph",
    # Demand
    "DemandModel",
    "DemandSample",
    # Resources
    "ResourceModel",
    "NodeEvaluation",
    "CRASH_MANUAL",
    "CRASH_OVERLOAD",
    "CRASH_OOM",
    # Propagation
    "FlowPropagator",
    "PotentialLoad",
    "FlowResult",
    # Scoring
    "ScoringModel",
    "ScoreCard",
    # Engine
    "EvaluationEngine",
]
