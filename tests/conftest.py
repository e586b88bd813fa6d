"""
Shared fixtures for the evaluation engine tests.

Traffic sources built here default to ``fluctuation`` and ``random_drop``
off so that offered demand equals the scripted phase rate exactly.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

from sdgame.domain.models import (
    Component,
    ComponentType,
    Connection,
    Constraint,
    Design,
    Goal,
    Scenario,
    TrafficPhase,
)
from sdgame.domain.services import EvaluationEngine


FIXED_NOW = 1_700_000_000.0


def component(comp_id, comp_type, operational_cost=0.0, **properties):
    """Build a Component; traffic sources get deterministic demand flags."""
    if isinstance(comp_type, str):
        comp_type = ComponentType.from_string(comp_type)
    if comp_type == ComponentType.TRAFFIC_SOURCE:
        properties.setdefault("fluctuation", False)
        properties.setdefault("random_drop", False)
    return Component(
        id=comp_id,
        name=comp_id,
        type=comp_type,
        operational_cost=operational_cost,
        properties=properties,
    )


def design(components, edges, design_id="d1", scenario_id="flat", **properties):
    """Build a Design from components and ``(from, to)`` pairs."""
    return Design(
        id=design_id,
        scenario_id=scenario_id,
        player_id="p1",
        components=list(components),
        connections=[Connection(a, b) for a, b in edges],
        properties=properties,
    )


def flat_scenario(qps, budget=None, max_latency_ms=0.0, scenario_id="flat"):
    """Scenario holding a constant rate for 100 s."""
    constraints = [Constraint("budget", budget)] if budget is not None else []
    return Scenario(
        id=scenario_id,
        title="Flat",
        goal=Goal(max_latency_ms=max_latency_ms),
        phases=[TrafficPhase("Flat", qps, qps, 100)],
        constraints=constraints,
    )


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def engine():
    """Engine with a fixed clock so results compare equal."""
    return EvaluationEngine(clock=lambda: FIXED_NOW)


@pytest.fixture
def tinyurl_scenario():
    return Scenario(
        id="s1",
        title="TinyURL",
        goal=Goal(min_qps=10000, max_latency_ms=200, availability=99.9, duration=60),
        phases=[
            TrafficPhase("Warm-up", 100, 1000, 10),
            TrafficPhase("Growth", 1000, 5000, 10),
            TrafficPhase("Viral", 5000, 10000, 10),
        ],
        constraints=[Constraint("budget", 10)],
    )


@pytest.fixture
def simple_design():
    """users -> lb -> web -> db, comfortably provisioned."""
    return design(
        [
            component("users", "TRAFFIC_SOURCE"),
            component("lb", "LOAD_BALANCER", 1.0, max_qps=100000),
            component("web", "WEB_SERVER", 2.0, max_qps=5000),
            component("db", "DATABASE", 3.0, max_qps=5000),
        ],
        [("users", "lb"), ("lb", "web"), ("web", "db")],
    )
