"""
Tests for domain models: components, designs, scenarios, engine state and
game state.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

from sdgame.domain.errors import InvalidInputError
from sdgame.domain.models import (
    Component,
    ComponentConfig,
    ComponentType,
    Design,
    EngineState,
    GameState,
    Scenario,
)
from conftest import component, design


# =============================================================================
# ComponentType
# =============================================================================

class TestComponentType:

    def test_canonical_names(self):
        assert ComponentType.from_string("WEB_SERVER") == ComponentType.WEB_SERVER
        assert ComponentType.from_string("message_queue") == ComponentType.MESSAGE_QUEUE

    def test_aliases(self):
        assert ComponentType.from_string("LB") == ComponentType.LOAD_BALANCER
        assert ComponentType.from_string("auto-scaling-group") == ComponentType.AUTO_SCALING_GROUP
        assert ComponentType.from_string("ApiGateway") == ComponentType.API_GATEWAY

    def test_unknown_type_rejected(self):
        with pytest.raises(InvalidInputError):
            ComponentType.from_string("MAINFRAME")


# =============================================================================
# ComponentConfig
# =============================================================================

class TestComponentConfig:

    def test_defaults(self):
        cfg = ComponentConfig.resolve(component("web", "WEB_SERVER"))
        assert cfg.is_unlimited
        assert cfg.base_latency_ms == 20.0
        assert cfg.max_replicas == 1
        assert cfg.scale_up_threshold == 0.7

    def test_string_values_are_coerced(self):
        """Property bags from JSON clients may carry numbers as strings."""
        cfg = ComponentConfig.resolve(component(
            "web", "WEB_SERVER", max_qps="1000", auto_scaling="true", max_replicas="4",
        ))
        assert cfg.max_qps == 1000.0
        assert cfg.auto_scaling is True
        assert cfg.max_replicas == 4

    def test_zero_max_qps_is_unlimited(self):
        cfg = ComponentConfig.resolve(component("lb", "LOAD_BALANCER", max_qps=0))
        assert cfg.is_unlimited
        assert cfg.max_potential_capacity == float("inf")

    def test_max_potential_capacity_includes_replicas(self):
        cfg = ComponentConfig.resolve(component(
            "web", "WEB_SERVER", max_qps=1000, auto_scaling=True, max_replicas=3,
        ))
        assert cfg.max_potential_capacity == 3000.0

    def test_nominal_capacity_counts_read_slaves(self):
        cfg = ComponentConfig.resolve(component(
            "db", "DATABASE", max_qps=1000, replication_mode="master-slave", slave_count=2,
        ))
        assert cfg.nominal_capacity == 3000.0
        assert cfg.max_potential_capacity == 3000.0

    def test_replication_mode_normalized(self):
        cfg = ComponentConfig.resolve(component(
            "db", "DATABASE", replication_mode="MASTER_SLAVE", slave_count=2,
        ))
        assert cfg.is_master_slave
        assert cfg.slave_count == 2

    @pytest.mark.parametrize("props", [
        {"max_qps": "lots"},
        {"max_qps": -1},
        {"read_ratio": 1.5},
        {"max_replicas": 0},
        {"scale_up_threshold": 0},
        {"auto_scaling": "maybe"},
    ])
    def test_invalid_properties_rejected(self, props):
        with pytest.raises(InvalidInputError):
            ComponentConfig.resolve(component("x", "WEB_SERVER", **props))


# =============================================================================
# Design
# =============================================================================

class TestDesign:

    def test_from_dict_round_trip(self):
        data = {
            "id": "d1",
            "scenario_id": "s1",
            "components": [
                {"id": "users", "type": "TRAFFIC_SOURCE"},
                {"id": "web", "type": "WEB_SERVER", "operational_cost": 2,
                 "properties": {"max_qps": 1000}},
            ],
            "connections": [{"from_id": "users", "to_id": "web"}],
            "properties": {"retention_rate": 0.9},
        }
        d = Design.from_dict(data)
        assert d.get_component("users").name == "users"
        assert d.connections[0].protocol == "HTTP"
        assert Design.from_dict(d.to_dict()).to_dict() == d.to_dict()

    def test_component_requires_id_and_type(self):
        with pytest.raises(InvalidInputError):
            Component.from_dict({"type": "CACHE"})

    def test_duplicate_ids_rejected(self):
        d = design([component("a", "CACHE"), component("a", "CACHE")], [])
        with pytest.raises(InvalidInputError):
            d.validate()

    def test_unknown_endpoint_rejected(self):
        d = design([component("a", "CACHE")], [("a", "ghost")])
        with pytest.raises(InvalidInputError) as exc:
            d.validate()
        assert "ghost" in str(exc.value)

    @pytest.mark.parametrize("raw,expected", [(0.5, 0.5), (1.7, 1.0), (-1, 0.0), ("0.25", 0.25)])
    def test_retention_rate_clamped(self, raw, expected):
        d = design([], [], retention_rate=raw)
        assert d.retention_rate == expected

    def test_retention_rate_defaults_to_one(self):
        assert design([], []).retention_rate == 1.0

    def test_get_component_missing(self):
        with pytest.raises(InvalidInputError):
            design([], []).get_component("nope")


# =============================================================================
# Scenario
# =============================================================================

class TestScenario:

    def test_budget_and_duration(self, tinyurl_scenario):
        assert tinyurl_scenario.budget == 10
        assert tinyurl_scenario.total_duration == 30

    def test_no_budget(self):
        assert Scenario(id="x").budget is None

    def test_from_dict(self, tinyurl_scenario):
        restored = Scenario.from_dict(tinyurl_scenario.to_dict())
        assert restored.phases == tinyurl_scenario.phases
        assert restored.goal == tinyurl_scenario.goal


# =============================================================================
# EngineState
# =============================================================================

class TestEngineState:

    def test_from_design_reads_markers(self):
        d = design([
            component("web", "WEB_SERVER", crashed=True, restart_timestamp=12,
                      replica_start_times=[0, 5]),
            component("mq", "MESSAGE_QUEUE", backlog=250),
        ], [])
        state = EngineState.from_design(d)
        assert state.crashed == frozenset({"web"})
        assert state.restart_times == {"web": 12.0}
        assert state.backlogs == {"mq": 250.0}
        assert state.replica_start_times == {"web": (0.0, 5.0)}

    def test_apply_to_round_trip(self):
        d = design([component("web", "WEB_SERVER"), component("mq", "MESSAGE_QUEUE")], [])
        state = EngineState(
            crashed={"web"},
            backlogs={"mq": 40.0},
            replica_start_times={"web": (1.0, 2.0)},
        )
        updated = state.apply_to(d)

        assert updated is not d
        assert "crashed" not in d.get_component("web").properties
        assert EngineState.from_design(updated) == state

    def test_apply_to_clears_stale_markers(self):
        d = design([component("mq", "MESSAGE_QUEUE", backlog=99, crashed=True)], [])
        updated = EngineState().apply_to(d)
        props = updated.get_component("mq").properties
        assert props["crashed"] is False
        assert "backlog" not in props

    def test_restart(self):
        state = EngineState(crashed={"web", "db"})
        restarted = state.restart("web", 20)
        assert restarted.crashed == frozenset({"db"})
        assert restarted.restart_times == {"web": 20.0}
        assert state.crashed == frozenset({"web", "db"})

    def test_string_markers_are_coerced(self):
        d = design([
            component("web", "WEB_SERVER", crashed="no", restart_timestamp="3.5"),
            component("mq", "MESSAGE_QUEUE", crashed="yes", backlog="-7"),
        ], [])
        state = EngineState.from_design(d)
        assert state.crashed == frozenset({"mq"})
        assert state.restart_times == {"web": 3.5}
        assert state.backlogs == {"mq": 0.0}

    def test_bad_crash_marker_rejected(self):
        d = design([component("web", "WEB_SERVER", crashed="sometimes")], [])
        with pytest.raises(InvalidInputError):
            EngineState.from_design(d)

    def test_bad_replica_list_rejected(self):
        d = design([component("web", "WEB_SERVER", replica_start_times="0,1")], [])
        with pytest.raises(InvalidInputError):
            EngineState.from_design(d)

    def test_to_dict(self):
        state = EngineState(crashed={"b", "a"}, replica_start_times={"w": (0.0,)})
        assert state.to_dict()["crashed"] == ["a", "b"]
        assert state.to_dict()["replica_start_times"] == {"w": [0.0]}


# =============================================================================
# GameState
# =============================================================================

class TestGameState:

    def test_defaults(self):
        state = GameState(player_id="p1")
        assert state.balance == 1000.0
        assert state.system_health == 100.0
        assert not state.is_bankrupt

    def test_update_metrics(self):
        state = GameState(player_id="p1")
        state.update_metrics(avg_latency=700, error_rate=0.1, qps=1000)
        assert state.system_health == pytest.approx(70.0)
        assert state.balance == pytest.approx(1009.0)
        assert state.total_users == 900

    def test_health_floor(self):
        state = GameState(player_id="p1")
        state.update_metrics(avg_latency=5000, error_rate=1.0, qps=0)
        assert state.system_health == 0.0

    def test_deduct_cost(self):
        state = GameState(player_id="p1", balance=10)
        state.deduct_cost(cost_per_second=3, duration_seconds=4)
        assert state.balance == -2
        assert state.uptime == 4
        assert state.is_bankrupt
