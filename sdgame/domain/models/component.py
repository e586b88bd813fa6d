"""
Component Domain Model

Infrastructure components a player can place on the board, plus the typed
configuration resolved from their open-ended property bag.

Property resolution happens once, at design-load time. After that the engine
only reads ``ComponentConfig`` fields and never probes raw properties.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional

from sdgame.domain.errors import InvalidInputError


# =============================================================================
# Component Types
# =============================================================================

class ComponentType(Enum):
    """Kinds of infrastructure a design can contain."""
    TRAFFIC_SOURCE = "TRAFFIC_SOURCE"
    LOAD_BALANCER = "LOAD_BALANCER"
    WEB_SERVER = "WEB_SERVER"
    DATABASE = "DATABASE"
    CACHE = "CACHE"
    MESSAGE_QUEUE = "MESSAGE_QUEUE"
    CDN = "CDN"
    WAF = "WAF"
    OBJECT_STORAGE = "OBJECT_STORAGE"
    SEARCH_ENGINE = "SEARCH_ENGINE"
    AUTO_SCALING_GROUP = "AUTO_SCALING_GROUP"
    API_GATEWAY = "API_GATEWAY"
    NOSQL = "NOSQL"

    @classmethod
    def from_string(cls, value: str) -> ComponentType:
        """Convert a string to ComponentType, accepting common spellings."""
        key = str(value).strip().upper().replace("-", "_").replace(" ", "_")
        _ALIASES: Dict[str, ComponentType] = {
            "TRAFFICSOURCE": cls.TRAFFIC_SOURCE,
            "SOURCE": cls.TRAFFIC_SOURCE,
            "LOADBALANCER": cls.LOAD_BALANCER,
            "LB": cls.LOAD_BALANCER,
            "WEBSERVER": cls.WEB_SERVER,
            "SERVER": cls.WEB_SERVER,
            "DB": cls.DATABASE,
            "MESSAGEQUEUE": cls.MESSAGE_QUEUE,
            "MQ": cls.MESSAGE_QUEUE,
            "OBJECTSTORAGE": cls.OBJECT_STORAGE,
            "SEARCHENGINE": cls.SEARCH_ENGINE,
            "AUTOSCALINGGROUP": cls.AUTO_SCALING_GROUP,
            "ASG": cls.AUTO_SCALING_GROUP,
            "APIGATEWAY": cls.API_GATEWAY,
        }
        if key in _ALIASES:
            return _ALIASES[key]
        try:
            return cls(key)
        except ValueError:
            valid = sorted(t.value for t in cls)
            raise InvalidInputError(
                f"Unknown component type '{value}'. Valid: {valid}",
                details={"type": value},
            )


STORE_TYPES: FrozenSet[ComponentType] = frozenset({
    ComponentType.DATABASE,
    ComponentType.NOSQL,
    ComponentType.OBJECT_STORAGE,
    ComponentType.SEARCH_ENGINE,
})

CACHING_TYPES: FrozenSet[ComponentType] = frozenset({
    ComponentType.CACHE,
    ComponentType.CDN,
})

SCALABLE_TYPES: FrozenSet[ComponentType] = frozenset({
    ComponentType.WEB_SERVER,
    ComponentType.AUTO_SCALING_GROUP,
})

#: Base latency (ms) used when a component does not declare ``base_latency``.
DEFAULT_BASE_LATENCY_MS: Dict[ComponentType, float] = {
    ComponentType.TRAFFIC_SOURCE: 0.0,
    ComponentType.LOAD_BALANCER: 2.0,
    ComponentType.WEB_SERVER: 20.0,
    ComponentType.DATABASE: 10.0,
    ComponentType.CACHE: 1.0,
    ComponentType.MESSAGE_QUEUE: 5.0,
    ComponentType.CDN: 5.0,
    ComponentType.WAF: 2.0,
    ComponentType.OBJECT_STORAGE: 15.0,
    ComponentType.SEARCH_ENGINE: 20.0,
    ComponentType.AUTO_SCALING_GROUP: 20.0,
    ComponentType.API_GATEWAY: 5.0,
    ComponentType.NOSQL: 8.0,
}


# =============================================================================
# Property Coercion
# =============================================================================

def as_float(comp_id: str, key: str, value: Any) -> float:
    if isinstance(value, bool):
        raise InvalidInputError(
            f"Component '{comp_id}': property '{key}' must be numeric, got bool",
            details={"component_id": comp_id, "property": key},
        )
    try:
        return float(value)
    except (TypeError, ValueError):
        raise InvalidInputError(
            f"Component '{comp_id}': property '{key}' must be numeric, got {value!r}",
            details={"component_id": comp_id, "property": key},
        )


def as_int(comp_id: str, key: str, value: Any) -> int:
    return int(as_float(comp_id, key, value))


def as_bool(comp_id: str, key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "yes", "on", "1"):
            return True
        if lowered in ("false", "no", "off", "0", ""):
            return False
    raise InvalidInputError(
        f"Component '{comp_id}': property '{key}' must be boolean, got {value!r}",
        details={"component_id": comp_id, "property": key},
    )


# =============================================================================
# Typed Configuration
# =============================================================================

@dataclass(frozen=True)
class ComponentConfig:
    """
    Typed view over a component's property bag.

    Fields that do not apply to a component type simply keep their defaults;
    e.g. ``delivery_mode`` is only read for message queues and the traffic
    fields only for traffic sources.
    """
    id: str
    type: ComponentType
    operational_cost: float = 0.0

    # Capacity / performance
    max_qps: Optional[float] = None          # None = unlimited
    base_latency_ms: float = 0.0

    # Auto-scaling (WEB_SERVER / AUTO_SCALING_GROUP)
    auto_scaling: bool = False
    max_replicas: int = 1
    scale_up_threshold: float = 0.7

    # Replication (DATABASE)
    replication_mode: Optional[str] = None   # "master-slave"
    slave_count: int = 0
    replication_role: str = "master"         # master, slave

    # Delivery (MESSAGE_QUEUE)
    delivery_mode: str = "push"              # push, pull

    # Traffic (TRAFFIC_SOURCE)
    read_ratio: float = 0.8
    base_qps: float = 0.0
    burst_traffic: bool = False
    fluctuation: bool = True
    random_drop: bool = True
    attack_enabled: bool = False
    attack_base_qps: float = 5000.0

    @property
    def is_unlimited(self) -> bool:
        return self.max_qps is None or self.max_qps <= 0

    @property
    def is_master_slave(self) -> bool:
        return self.replication_mode == "master-slave"

    @property
    def is_slave(self) -> bool:
        return self.replication_role == "slave"

    @property
    def is_pull(self) -> bool:
        return self.delivery_mode == "pull"

    @property
    def nominal_capacity(self) -> float:
        """Single-replica capacity, with every slave of a master-slave database serving reads."""
        if self.is_unlimited:
            return float("inf")
        if self.type == ComponentType.DATABASE and self.is_master_slave:
            return self.max_qps * (1 + self.slave_count)
        return self.max_qps

    @property
    def max_potential_capacity(self) -> float:
        """Capacity ceiling including the auto-scaling limit."""
        if self.type in SCALABLE_TYPES and self.auto_scaling:
            return self.nominal_capacity * self.max_replicas
        return self.nominal_capacity

    @classmethod
    def resolve(cls, component: "Component") -> ComponentConfig:
        """
        Resolve a component's property bag into a typed configuration.

        Raises:
            InvalidInputError: if a property cannot be coerced or is out of range
        """
        cid = component.id
        props = component.properties or {}
        kwargs: Dict[str, Any] = {
            "id": cid,
            "type": component.type,
            "operational_cost": as_float(cid, "operational_cost", component.operational_cost),
            "base_latency_ms": DEFAULT_BASE_LATENCY_MS.get(component.type, 0.0),
        }

        if props.get("max_qps") is not None:
            max_qps = as_float(cid, "max_qps", props["max_qps"])
            if max_qps < 0:
                raise InvalidInputError(
                    f"Component '{cid}': max_qps must be >= 0",
                    details={"component_id": cid, "property": "max_qps"},
                )
            kwargs["max_qps"] = max_qps if max_qps > 0 else None
        if props.get("base_latency") is not None:
            kwargs["base_latency_ms"] = as_float(cid, "base_latency", props["base_latency"])

        if "auto_scaling" in props:
            kwargs["auto_scaling"] = as_bool(cid, "auto_scaling", props["auto_scaling"])
        if props.get("max_replicas") is not None:
            max_replicas = as_int(cid, "max_replicas", props["max_replicas"])
            if max_replicas < 1:
                raise InvalidInputError(
                    f"Component '{cid}': max_replicas must be >= 1",
                    details={"component_id": cid, "property": "max_replicas"},
                )
            kwargs["max_replicas"] = max_replicas
        if props.get("scale_up_threshold") is not None:
            threshold = as_float(cid, "scale_up_threshold", props["scale_up_threshold"])
            if not 0 < threshold <= 1:
                raise InvalidInputError(
                    f"Component '{cid}': scale_up_threshold must be in (0, 1]",
                    details={"component_id": cid, "property": "scale_up_threshold"},
                )
            kwargs["scale_up_threshold"] = threshold

        if props.get("replication_mode") is not None:
            kwargs["replication_mode"] = str(props["replication_mode"]).strip().lower().replace("_", "-")
        if props.get("slave_count") is not None:
            kwargs["slave_count"] = max(0, as_int(cid, "slave_count", props["slave_count"]))
        if props.get("replication_role") is not None:
            kwargs["replication_role"] = str(props["replication_role"]).strip().lower()
        if props.get("delivery_mode") is not None:
            kwargs["delivery_mode"] = str(props["delivery_mode"]).strip().lower()

        if props.get("read_ratio") is not None:
            ratio = as_float(cid, "read_ratio", props["read_ratio"])
            if not 0.0 <= ratio <= 1.0:
                raise InvalidInputError(
                    f"Component '{cid}': read_ratio must be in [0, 1]",
                    details={"component_id": cid, "property": "read_ratio"},
                )
            kwargs["read_ratio"] = ratio
        if props.get("base_qps") is not None:
            kwargs["base_qps"] = max(0.0, as_float(cid, "base_qps", props["base_qps"]))
        for flag in ("burst_traffic", "fluctuation", "random_drop", "attack_enabled"):
            if flag in props:
                kwargs[flag] = as_bool(cid, flag, props[flag])
        if props.get("attack_base_qps") is not None:
            kwargs["attack_base_qps"] = max(0.0, as_float(cid, "attack_base_qps", props["attack_base_qps"]))

        return cls(**kwargs)


# =============================================================================
# Component Entity
# =============================================================================

@dataclass
class Component:
    """A single placed component within a design."""
    id: str
    name: str
    type: ComponentType
    setup_cost: float = 0.0
    operational_cost: float = 0.0
    properties: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "setup_cost": self.setup_cost,
            "operational_cost": self.operational_cost,
            "properties": dict(self.properties),
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> Component:
        if "id" not in data or "type" not in data:
            raise InvalidInputError(
                "Component requires 'id' and 'type'",
                details={"component": data},
            )
        return Component(
            id=str(data["id"]),
            name=str(data.get("name") or data["id"]),
            type=ComponentType.from_string(data["type"]),
            setup_cost=as_float(str(data["id"]), "setup_cost", data.get("setup_cost") or 0.0),
            operational_cost=as_float(str(data["id"]), "operational_cost", data.get("operational_cost") or 0.0),
            properties=dict(data.get("properties") or {}),
        )
