"""
Scenario Domain Model

A game level: ordered traffic phases, a goal and constraints such as a
budget ceiling.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class TrafficPhase:
    """One stage of traffic growth, e.g. "Normal", "Viral", "DDoS"."""
    name: str
    start_qps: float
    end_qps: float
    duration_seconds: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "start_qps": self.start_qps,
            "end_qps": self.end_qps,
            "duration_seconds": self.duration_seconds,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> TrafficPhase:
        return TrafficPhase(
            name=str(data.get("name", "")),
            start_qps=float(data.get("start_qps", 0)),
            end_qps=float(data.get("end_qps", 0)),
            duration_seconds=float(data.get("duration_seconds", 0)),
        )


@dataclass(frozen=True)
class Goal:
    """Level objective."""
    min_qps: float = 0.0
    max_latency_ms: float = 0.0
    availability: float = 0.0
    duration: int = 0               # seconds the test must hold

    def to_dict(self) -> Dict[str, Any]:
        return {
            "min_qps": self.min_qps,
            "max_latency_ms": self.max_latency_ms,
            "availability": self.availability,
            "duration": self.duration,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> Goal:
        return Goal(
            min_qps=float(data.get("min_qps", 0)),
            max_latency_ms=float(data.get("max_latency_ms", 0)),
            availability=float(data.get("availability", 0)),
            duration=int(data.get("duration", 0)),
        )


@dataclass(frozen=True)
class Constraint:
    """Limit applied to a design, e.g. ``Constraint("budget", 10)``."""
    type: str
    value: float

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "value": self.value}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> Constraint:
        return Constraint(type=str(data.get("type", "")), value=float(data.get("value", 0)))


@dataclass
class Scenario:
    """A game level or challenge."""
    id: str
    title: str = ""
    description: str = ""
    goal: Goal = field(default_factory=Goal)
    phases: List[TrafficPhase] = field(default_factory=list)
    constraints: List[Constraint] = field(default_factory=list)

    @property
    def total_duration(self) -> float:
        return sum(p.duration_seconds for p in self.phases)

    @property
    def budget(self) -> Optional[float]:
        """Operational budget per second, if the level sets one."""
        for constraint in self.constraints:
            if constraint.type.lower() == "budget":
                return constraint.value
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "goal": self.goal.to_dict(),
            "phases": [p.to_dict() for p in self.phases],
            "constraints": [c.to_dict() for c in self.constraints],
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> Scenario:
        return Scenario(
            id=str(data["id"]),
            title=str(data.get("title", "")),
            description=str(data.get("description", "")),
            goal=Goal.from_dict(data.get("goal") or {}),
            phases=[TrafficPhase.from_dict(p) for p in data.get("phases") or []],
            constraints=[Constraint.from_dict(c) for c in data.get("constraints") or []],
        )
