"""
In-Memory Repository Adapters

Implement the outbound repository ports with process-local dictionaries.
Stored and returned objects are deep copies, so a caller mutating a design
it fetched never changes what another reader sees.
"""

from __future__ import annotations
import copy
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from sdgame.application.ports.outbound import (
    IDesignRepository,
    IGameStateRepository,
    IScenarioRepository,
)
from sdgame.domain.errors import NotFoundError
from sdgame.domain.models import (
    Constraint,
    Design,
    GameState,
    Goal,
    Scenario,
    TrafficPhase,
)


class ReadWriteLock:
    """Readers proceed concurrently; a writer waits for exclusive access."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._readers:
                self._cond.wait()
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class InMemoryDesignRepository(IDesignRepository):

    def __init__(self) -> None:
        self._designs: Dict[str, Design] = {}
        self._lock = ReadWriteLock()

    def save(self, design: Design) -> None:
        snapshot = copy.deepcopy(design)
        with self._lock.write():
            self._designs[design.id] = snapshot

    def get_by_id(self, design_id: str) -> Design:
        with self._lock.read():
            design = self._designs.get(design_id)
            if design is None:
                raise NotFoundError(
                    f"Design not found: {design_id}",
                    details={"design_id": design_id},
                )
            return copy.deepcopy(design)

    def list_by_player_id(self, player_id: str) -> List[Design]:
        with self._lock.read():
            return [
                copy.deepcopy(d) for d in self._designs.values()
                if not player_id or d.player_id == player_id
            ]


def default_scenarios() -> List[Scenario]:
    """Built-in level catalog."""
    return [
        Scenario(
            id="s1",
            title="TinyURL Short-Link Service",
            description=(
                "Build a URL shortener that survives going viral. Traffic "
                "ramps from 100 to 10,000 QPS in thirty seconds."
            ),
            goal=Goal(min_qps=10000, max_latency_ms=200, availability=99.9, duration=60),
            phases=[
                TrafficPhase("Warm-up", 100, 1000, 10),
                TrafficPhase("Growth", 1000, 5000, 10),
                TrafficPhase("Viral", 5000, 10000, 10),
            ],
            constraints=[Constraint("budget", 10)],
        ),
    ]


class InMemoryScenarioRepository(IScenarioRepository):
    """Read-only scenario catalog, ordered as loaded."""

    def __init__(self, scenarios: Optional[List[Scenario]] = None) -> None:
        self._scenarios: Dict[str, Scenario] = {}
        for scenario in (scenarios if scenarios is not None else default_scenarios()):
            self._scenarios[scenario.id] = scenario

    def get_by_id(self, scenario_id: str) -> Scenario:
        scenario = self._scenarios.get(scenario_id)
        if scenario is None:
            raise NotFoundError(
                f"Scenario not found: {scenario_id}",
                details={"scenario_id": scenario_id},
            )
        return copy.deepcopy(scenario)

    def list_all(self) -> List[Scenario]:
        return [copy.deepcopy(s) for s in self._scenarios.values()]


class InMemoryGameStateRepository(IGameStateRepository):

    def __init__(self) -> None:
        self._states: Dict[str, GameState] = {}
        self._lock = threading.Lock()

    def save(self, state: GameState) -> None:
        with self._lock:
            self._states[state.player_id] = copy.deepcopy(state)

    def get_by_player_id(self, player_id: str) -> Optional[GameState]:
        with self._lock:
            state = self._states.get(player_id)
            return copy.deepcopy(state) if state is not None else None
