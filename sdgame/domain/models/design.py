"""
Design Domain Model

A player's system topology: components, directed connections and global
properties, linked to the scenario it is played against.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Set

from sdgame.domain.errors import InvalidInputError
from .component import Component, ComponentType


@dataclass(frozen=True)
class Connection:
    """
    Directed edge between two components.

    ``protocol`` and ``traffic_type`` are informational; every edge carries
    the full read/write/malicious split.
    """
    from_id: str
    to_id: str
    protocol: str = "HTTP"          # HTTP, GRPC, TCP
    traffic_type: str = "all"       # all, read, write

    def to_dict(self) -> Dict[str, str]:
        return {
            "from_id": self.from_id,
            "to_id": self.to_id,
            "protocol": self.protocol,
            "traffic_type": self.traffic_type,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> Connection:
        if "from_id" not in data or "to_id" not in data:
            raise InvalidInputError(
                "Connection requires 'from_id' and 'to_id'",
                details={"connection": data},
            )
        return Connection(
            from_id=str(data["from_id"]),
            to_id=str(data["to_id"]),
            protocol=str(data.get("protocol", "HTTP")),
            traffic_type=str(data.get("traffic_type", "all")),
        )


@dataclass
class Design:
    """Complete player-authored topology."""
    id: str
    scenario_id: str
    player_id: str = ""
    components: List[Component] = field(default_factory=list)
    connections: List[Connection] = field(default_factory=list)
    properties: Dict[str, Any] = field(default_factory=dict)
    created_at: int = 0
    updated_at: int = 0

    @property
    def retention_rate(self) -> float:
        """Global user retention multiplier, clamped to [0, 1]."""
        raw = self.properties.get("retention_rate", 1.0)
        try:
            value = float(raw)
        except (TypeError, ValueError):
            raise InvalidInputError(
                f"Design '{self.id}': retention_rate must be numeric, got {raw!r}",
                details={"design_id": self.id},
            )
        return min(1.0, max(0.0, value))

    def get_component(self, comp_id: str) -> Component:
        for comp in self.components:
            if comp.id == comp_id:
                return comp
        raise InvalidInputError(
            f"Design '{self.id}' has no component '{comp_id}'",
            details={"design_id": self.id, "component_id": comp_id},
        )

    def validate(self) -> None:
        """
        Check structural integrity before simulation.

        Raises:
            InvalidInputError: on empty or duplicate component ids, or a
                connection referencing an unknown component
        """
        seen: Set[str] = set()
        for comp in self.components:
            if not comp.id:
                raise InvalidInputError(
                    f"Design '{self.id}' contains a component without an id",
                    details={"design_id": self.id},
                )
            if comp.id in seen:
                raise InvalidInputError(
                    f"Design '{self.id}' has duplicate component id '{comp.id}'",
                    details={"design_id": self.id, "component_id": comp.id},
                )
            if not isinstance(comp.type, ComponentType):
                raise InvalidInputError(
                    f"Component '{comp.id}' has invalid type {comp.type!r}",
                    details={"design_id": self.id, "component_id": comp.id},
                )
            seen.add(comp.id)

        for conn in self.connections:
            for endpoint in (conn.from_id, conn.to_id):
                if endpoint not in seen:
                    raise InvalidInputError(
                        f"Connection {conn.from_id} -> {conn.to_id} references "
                        f"unknown component '{endpoint}'",
                        details={"design_id": self.id, "connection": conn.to_dict()},
                    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "player_id": self.player_id,
            "scenario_id": self.scenario_id,
            "components": [c.to_dict() for c in self.components],
            "connections": [c.to_dict() for c in self.connections],
            "properties": dict(self.properties),
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> Design:
        if not data.get("id"):
            raise InvalidInputError("Design requires an 'id'", details={})
        return Design(
            id=str(data["id"]),
            scenario_id=str(data.get("scenario_id", "")),
            player_id=str(data.get("player_id", "")),
            components=[Component.from_dict(c) for c in data.get("components") or []],
            connections=[Connection.from_dict(c) for c in data.get("connections") or []],
            properties=dict(data.get("properties") or {}),
            created_at=int(data.get("created_at", 0) or 0),
            updated_at=int(data.get("updated_at", 0) or 0),
        )
