"""
Engine State

Per-tick state the engine consumes and returns: crash flags, restart
timestamps, queue backlogs and replica warm-up timers. The engine never keeps
it between calls; callers thread ``EvaluationResult.next_state`` into the
next ``evaluate`` call or write it back through component properties with
``apply_to``.
"""

from __future__ import annotations
import copy
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Tuple

from sdgame.domain.errors import InvalidInputError
from .component import as_bool, as_float
from .design import Design


def _copy(mapping: Mapping[str, Any]) -> Dict[str, Any]:
    return dict(mapping)


@dataclass(frozen=True)
class EngineState:
    crashed: FrozenSet[str] = frozenset()
    restart_times: Mapping[str, float] = field(default_factory=dict)
    backlogs: Mapping[str, float] = field(default_factory=dict)
    replica_start_times: Mapping[str, Tuple[float, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "crashed", frozenset(self.crashed))
        object.__setattr__(self, "restart_times", _copy(self.restart_times))
        object.__setattr__(self, "backlogs", _copy(self.backlogs))
        object.__setattr__(self, "replica_start_times", _copy(
            {k: tuple(v) for k, v in self.replica_start_times.items()}
        ))

    @classmethod
    def from_design(cls, design: Design) -> EngineState:
        """Lift round-tripped property markers into an explicit state."""
        crashed = set()
        restart_times: Dict[str, float] = {}
        backlogs: Dict[str, float] = {}
        replicas: Dict[str, Tuple[float, ...]] = {}

        for comp in design.components:
            props = comp.properties or {}
            if "crashed" in props and as_bool(comp.id, "crashed", props["crashed"]):
                crashed.add(comp.id)
            if props.get("restart_timestamp") is not None:
                restart_times[comp.id] = as_float(comp.id, "restart_timestamp", props["restart_timestamp"])
            if props.get("backlog") is not None:
                backlogs[comp.id] = max(0.0, as_float(comp.id, "backlog", props["backlog"]))
            if props.get("replica_start_times") is not None:
                raw = props["replica_start_times"]
                if isinstance(raw, (str, bytes)) or not isinstance(raw, Iterable):
                    raise InvalidInputError(
                        f"Component '{comp.id}': replica_start_times must be a list",
                        details={"component_id": comp.id, "property": "replica_start_times"},
                    )
                replicas[comp.id] = tuple(
                    as_float(comp.id, "replica_start_times", t) for t in raw
                )

        return cls(
            crashed=frozenset(crashed),
            restart_times=restart_times,
            backlogs=backlogs,
            replica_start_times=replicas,
        )

    def restart(self, component_id: str, at: float) -> EngineState:
        """Clear a crash and open the restart grace window at ``at``."""
        restart_times = dict(self.restart_times)
        restart_times[component_id] = float(at)
        return EngineState(
            crashed=self.crashed - {component_id},
            restart_times=restart_times,
            backlogs=self.backlogs,
            replica_start_times=self.replica_start_times,
        )

    def apply_to(self, design: Design) -> Design:
        """Return a copy of ``design`` whose properties carry this state."""
        updated = copy.deepcopy(design)
        for comp in updated.components:
            props = comp.properties
            props["crashed"] = comp.id in self.crashed

            if comp.id in self.restart_times:
                props["restart_timestamp"] = self.restart_times[comp.id]
            else:
                props.pop("restart_timestamp", None)

            if comp.id in self.backlogs:
                props["backlog"] = self.backlogs[comp.id]
            else:
                props.pop("backlog", None)

            if comp.id in self.replica_start_times:
                props["replica_start_times"] = list(self.replica_start_times[comp.id])
            else:
                props.pop("replica_start_times", None)
        return updated

    def to_dict(self) -> Dict[str, Any]:
        return {
            "crashed": sorted(self.crashed),
            "restart_times": dict(self.restart_times),
            "backlogs": dict(self.backlogs),
            "replica_start_times": {k: list(v) for k, v in self.replica_start_times.items()},
        }
