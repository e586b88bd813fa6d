"""
Tests for node capacity decisions: crashes, throttling, auto-scaling,
restart grace, synthetic CPU/RAM and message queues.

Each test runs the full engine on a tiny design so that crash and scaling
decisions are checked the way callers observe them.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

from sdgame.domain.models import EngineState
from sdgame.domain.services import CRASH_MANUAL, CRASH_OOM, CRASH_OVERLOAD, ResourceModel, TopologyGraph
from conftest import component, design, flat_scenario


def source_to(*rest, edges=None, read_ratio=1.0):
    """users -> rest[0] -> rest[1] ... unless explicit edges are given."""
    comps = [component("users", "TRAFFIC_SOURCE", read_ratio=read_ratio)] + list(rest)
    if edges is None:
        ids = [c.id for c in comps]
        edges = list(zip(ids, ids[1:]))
    return design(comps, edges)


# =============================================================================
# Crash and throttle
# =============================================================================

class TestOverload:

    def test_crash_above_multiplier(self, engine):
        d = source_to(component("web", "WEB_SERVER", max_qps=1000), component("db", "DATABASE"))
        result = engine.evaluate(d, flat_scenario(1600))

        assert result.crash_reasons == {"web": CRASH_OVERLOAD}
        assert result.component_loads["web"] == 0
        assert result.component_loads["db"] == 0
        assert result.success_rate == 0
        assert "web" in result.next_state.crashed

    def test_throttle_below_multiplier(self, engine):
        d = source_to(component("web", "WEB_SERVER", max_qps=1000), component("db", "DATABASE"))
        result = engine.evaluate(d, flat_scenario(1400))

        assert result.crashed_component_ids == []
        assert result.component_loads["web"] == pytest.approx(1000)
        assert result.component_loads["db"] == pytest.approx(1000)
        assert result.success_rate == pytest.approx(1000 / 1400)

    def test_load_balancer_tolerates_more(self, engine):
        d = source_to(component("lb", "LOAD_BALANCER", max_qps=1000))
        result = engine.evaluate(d, flat_scenario(2500))
        assert result.crashed_component_ids == []
        assert result.component_loads["lb"] == pytest.approx(1000)

    def test_unlimited_never_crashes(self, engine):
        d = source_to(component("web", "WEB_SERVER"))
        result = engine.evaluate(d, flat_scenario(10 ** 7))
        assert result.crashed_component_ids == []
        assert result.effective_capacities["web"] == float("inf")
        assert result.to_dict()["effective_capacities"]["web"] is None

    def test_manual_crash(self, engine):
        d = source_to(component("web", "WEB_SERVER"), component("db", "DATABASE"))
        result = engine.evaluate(d, flat_scenario(100), state=EngineState(crashed={"web"}))
        assert result.crash_reasons["web"] == CRASH_MANUAL
        assert result.fulfilled_qps == 0


class TestRestartGrace:

    def _design(self):
        return source_to(component("web", "WEB_SERVER", max_qps=1000), component("db", "DATABASE"))

    def test_no_crash_inside_grace(self, engine):
        state = EngineState(restart_times={"web": 8.0})
        result = engine.evaluate(self._design(), flat_scenario(1600), 10, state=state)
        assert result.crashed_component_ids == []
        assert result.component_loads["web"] == pytest.approx(1000)

    def test_crash_after_grace(self, engine):
        state = EngineState(restart_times={"web": 8.0})
        result = engine.evaluate(self._design(), flat_scenario(1600), 14, state=state)
        assert result.crash_reasons == {"web": CRASH_OVERLOAD}

    def test_restart_times_carried_forward(self, engine):
        state = EngineState(restart_times={"web": 8.0})
        result = engine.evaluate(self._design(), flat_scenario(100), 10, state=state)
        assert result.next_state.restart_times == {"web": 8.0}


# =============================================================================
# Auto-scaling
# =============================================================================

class TestAutoScaling:

    def _design(self, **props):
        web = component("web", "WEB_SERVER", 1.0, max_qps=1000, auto_scaling=True, max_replicas=3, **props)
        return source_to(web, component("db", "DATABASE"))

    def test_warm_replicas_add_capacity(self, engine):
        state = EngineState(replica_start_times={"web": (0.0, 0.0, 0.0)})
        result = engine.evaluate(self._design(), flat_scenario(2500), 20, state=state)

        assert result.crashed_component_ids == []
        assert result.replica_counts["web"] == 3
        assert result.effective_capacities["web"] == pytest.approx(3000)
        assert result.component_loads["web"] == pytest.approx(2500)

    def test_booting_replicas_do_not_serve(self, engine):
        result = engine.evaluate(self._design(), flat_scenario(1400), 0)

        assert result.replica_counts["web"] == 2
        assert result.effective_capacities["web"] == pytest.approx(1000)
        assert result.next_state.replica_start_times["web"] == (0.0, 0.0)

    def test_replicas_warm_up(self, engine):
        first = engine.evaluate(self._design(), flat_scenario(1400), 0)
        later = engine.evaluate(self._design(), flat_scenario(1400), 10, state=first.next_state)
        assert later.effective_capacities["web"] == pytest.approx(2000)
        assert later.component_loads["web"] == pytest.approx(1400)

    def test_target_follows_demand(self, engine):
        result = engine.evaluate(self._design(), flat_scenario(1000), 0)
        assert result.replica_counts["web"] == 2
        quiet = engine.evaluate(self._design(), flat_scenario(10), 0)
        assert quiet.replica_counts["web"] == 1

    def test_extra_replicas_cost(self, engine):
        state = EngineState(replica_start_times={"web": (0.0, 0.0, 0.0)})
        result = engine.evaluate(self._design(), flat_scenario(2500), 20, state=state)
        assert result.operational_cost == pytest.approx(3.0)


class TestMasterSlave:

    def test_reads_scale_with_slaves(self, engine):
        db = component("db", "DATABASE", max_qps=1000, replication_mode="master-slave", slave_count=2)
        d = source_to(db, read_ratio=0.8)
        result = engine.evaluate(d, flat_scenario(2500))
        assert result.effective_capacities["db"] == pytest.approx(2600)
        assert result.crashed_component_ids == []
        assert result.success_rate == pytest.approx(1.0)

    def test_replication_bonus(self, engine):
        db = component("db", "DATABASE", max_qps=1000, replication_mode="master-slave", slave_count=1)
        result = engine.evaluate(source_to(db), flat_scenario(100), state=EngineState(crashed={"db"}))
        assert result.score_for("Reliability").value == 100.0


# =============================================================================
# CPU / RAM
# =============================================================================

class TestResources:

    def test_cpu_weights_writes(self, engine):
        reads = engine.evaluate(source_to(component("web", "WEB_SERVER", max_qps=1000)), flat_scenario(500))
        mixed = engine.evaluate(
            source_to(component("web", "WEB_SERVER", max_qps=1000), read_ratio=0.5), flat_scenario(500)
        )
        assert reads.cpu_usage["web"] == pytest.approx(45)
        assert mixed.cpu_usage["web"] == pytest.approx(85)

    def test_ram_by_type(self, engine):
        d = source_to(
            component("lb", "LB", max_qps=1000),
            component("cache", "CACHE", max_qps=1000),
            component("db", "DATABASE", max_qps=200),
            edges=[("users", "lb"), ("lb", "cache"), ("cache", "db")],
        )
        result = engine.evaluate(d, flat_scenario(500))
        assert result.ram_usage["lb"] == pytest.approx(15 + 30 * 0.5)
        assert result.ram_usage["cache"] == pytest.approx(20 + 50 * 0.5)
        assert result.ram_usage["db"] == pytest.approx(30 + 40 * 0.5)

    def test_out_of_memory(self, engine):
        result = engine.evaluate(source_to(component("lb", "LB", max_qps=100)), flat_scenario(290))
        assert result.crash_reasons == {"lb": CRASH_OOM}


# =============================================================================
# Message queues
# =============================================================================

class TestQueues:

    def _design(self):
        return source_to(
            component("mq", "MESSAGE_QUEUE", max_qps=10000),
            component("worker", "WEB_SERVER", max_qps=800),
        )

    def test_backlog_builds(self, engine):
        result = engine.evaluate(self._design(), flat_scenario(1000))
        assert result.backlogs["mq"] == pytest.approx(200)
        assert result.ram_usage["mq"] == pytest.approx(10.2)
        assert result.next_state.backlogs == {"mq": pytest.approx(200)}

    def test_consumer_receives_processing_rate(self, engine):
        result = engine.evaluate(self._design(), flat_scenario(1000))
        assert result.potential_loads["worker"] == pytest.approx(800)
        assert result.component_loads["worker"] == pytest.approx(800)
        assert result.component_loads["worker"] + result.backlogs["mq"] == pytest.approx(1000)

    def test_backlog_adds_delay(self, engine):
        result = engine.evaluate(self._design(), flat_scenario(1000))
        # worker runs at 100% utilization: congestion 1 + 0.05 * 10
        assert result.avg_latency_ms == pytest.approx((0 + 5 + 20 + 250) * 1.5)

    def test_backlog_threads_through_ticks(self, engine):
        first = engine.evaluate(self._design(), flat_scenario(1000), 0)
        second = engine.evaluate(self._design(), flat_scenario(1000), 1, state=first.next_state)
        assert second.backlogs["mq"] == pytest.approx(400)
        assert second.component_loads["worker"] == pytest.approx(800)

    def test_conserves_work_behind_throttled_producer(self, engine):
        d = source_to(
            component("web", "WEB_SERVER", max_qps=800),
            component("mq", "MESSAGE_QUEUE"),
            component("db", "DATABASE", max_qps=700),
        )
        result = engine.evaluate(d, flat_scenario(1000))

        assert result.crashed_component_ids == []
        assert result.component_loads["mq"] == pytest.approx(800)
        assert result.component_loads["db"] == pytest.approx(700)
        assert result.backlogs["mq"] == pytest.approx(100)
        assert result.component_loads["db"] + result.backlogs["mq"] == pytest.approx(
            result.component_loads["mq"]
        )
        assert result.fulfilled_qps == pytest.approx(700)

    def test_no_consumers(self, engine):
        d = source_to(component("mq", "MESSAGE_QUEUE"))
        result = engine.evaluate(d, flat_scenario(100))
        assert result.backlogs["mq"] == pytest.approx(100)
        assert result.avg_latency_ms == pytest.approx(5000)

    def test_drains_prior_backlog(self, engine):
        d = source_to(
            component("mq", "MESSAGE_QUEUE"),
            component("worker", "WEB_SERVER", max_qps=1000),
        )
        state = EngineState(backlogs={"mq": 300.0})
        result = engine.evaluate(d, flat_scenario(500), state=state)
        assert result.backlogs["mq"] == 0.0
        assert result.component_loads["worker"] == pytest.approx(800)

    def test_drains_backlog_without_inflow(self, engine):
        d = source_to(
            component("mq", "MESSAGE_QUEUE"),
            component("worker", "WEB_SERVER", max_qps=1000),
        )
        result = engine.evaluate(d, flat_scenario(0), state=EngineState(backlogs={"mq": 300.0}))
        assert result.component_loads["worker"] == pytest.approx(300)
        assert result.backlogs["mq"] == 0.0

    def test_drains_backlog_while_producer_down(self, engine):
        d = source_to(
            component("web", "WEB_SERVER"),
            component("mq", "MESSAGE_QUEUE"),
            component("worker", "WEB_SERVER", max_qps=200),
        )
        state = EngineState(crashed={"web"}, backlogs={"mq": 300.0})
        result = engine.evaluate(d, flat_scenario(500), state=state)

        assert result.component_loads["mq"] == 0
        assert result.component_loads["worker"] == pytest.approx(200)
        assert result.backlogs["mq"] == pytest.approx(100)
        assert "mq" in result.active_component_ids

    def test_push_skips_crashed_consumer(self, engine):
        d = source_to(
            component("mq", "MESSAGE_QUEUE"),
            component("w1", "WEB_SERVER", max_qps=800),
            component("w2", "WEB_SERVER", max_qps=800),
            edges=[("users", "mq"), ("mq", "w1"), ("mq", "w2")],
        )
        result = engine.evaluate(d, flat_scenario(1000), state=EngineState(crashed={"w1"}))
        assert result.component_loads["w1"] == 0
        assert result.component_loads["w2"] == pytest.approx(800)
        assert result.backlogs["mq"] == pytest.approx(200)

    def test_cycle_through_queue_terminates(self, engine):
        d = source_to(
            component("mq", "MESSAGE_QUEUE"),
            component("worker", "WEB_SERVER", max_qps=800),
            edges=[("users", "mq"), ("mq", "worker"), ("worker", "mq")],
        )
        result = engine.evaluate(d, flat_scenario(1000))
        assert result.component_loads["worker"] == pytest.approx(800)
        assert result.backlogs["mq"] == pytest.approx(200)

    def test_pull_mode_respects_consumer_capacity(self, engine):
        d = source_to(
            component("mq", "MESSAGE_QUEUE", delivery_mode="pull"),
            component("small", "WEB_SERVER", max_qps=400),
            component("big", "WEB_SERVER", max_qps=10000),
            edges=[("users", "mq"), ("mq", "small"), ("mq", "big")],
        )
        result = engine.evaluate(d, flat_scenario(1000))
        assert result.component_loads["small"] == pytest.approx(400)
        assert result.component_loads["big"] == pytest.approx(600)
        assert result.backlogs["mq"] == 0.0
        assert result.crashed_component_ids == []


class TestPullShares:

    def _topology(self, *caps):
        consumers = [component(f"c{i}", "WEB_SERVER", max_qps=cap) for i, cap in enumerate(caps)]
        d = source_to(
            component("mq", "MESSAGE_QUEUE", delivery_mode="pull"),
            *consumers,
            edges=[("users", "mq")] + [("mq", c.id) for c in consumers],
        )
        return TopologyGraph(d)

    def test_even_when_all_have_room(self):
        topo = self._topology(1000, 1000)
        assert ResourceModel.pull_shares(topo, topo.index_of["mq"], 1000) == pytest.approx([0.5, 0.5])

    def test_full_consumers_pass_the_rest_on(self):
        topo = self._topology(100, 300, 10000)
        shares = ResourceModel.pull_shares(topo, topo.index_of["mq"], 1000)
        assert shares == pytest.approx([0.1, 0.3, 0.6])

    def test_skipped_consumer_pulls_nothing(self):
        topo = self._topology(1000, 1000)
        skip = {topo.index_of["c0"]}
        assert ResourceModel.pull_shares(topo, topo.index_of["mq"], 600, skip) == pytest.approx([0.0, 1.0])

    def test_no_output(self):
        topo = self._topology(1000)
        assert ResourceModel.pull_shares(topo, topo.index_of["mq"], 0) == [0.0]
