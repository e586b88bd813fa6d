"""
Load Propagation

Two traversals over the topology, both iterative with an explicit work-list.
Each work item carries the set of nodes already on its own path: a branch
never re-enters such a node, so cycles are truncated while shared diamonds
are still explored along every path.

    Pass 1 (potential)  offered load each node would see if nothing failed
    Pass 2 (actual)     capped flow after crashes, throttling and queueing

Work reaching a message queue is held until the work-list runs dry. The queue
then releases min(pending, processing rate - already released), where pending
is its carried-over backlog plus everything delivered so far minus what it
already released. Both passes release this way, so consumers behind a queue
see at most what the queue can process.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import AbstractSet, Callable, Dict, FrozenSet, List, Optional, Sequence, Set, Tuple

from sdgame.domain.config.engine_config import CapacitySettings, ScoringSettings
from sdgame.domain.models.component import CACHING_TYPES, STORE_TYPES, ComponentType
from sdgame.domain.models.state import EngineState
from .demand import DemandSample
from .resources import NodeEvaluation, ResourceModel
from .topology import TopologyGraph

logger = logging.getLogger(__name__)

_INCIDENT_TYPES = frozenset({ComponentType.DATABASE, ComponentType.NOSQL})


@dataclass
class PotentialLoad:
    """Pass-1 totals, indexed by node index."""
    read: List[float]
    write: List[float]
    malicious: List[float]

    @classmethod
    def zeros(cls, size: int) -> PotentialLoad:
        return cls(read=[0.0] * size, write=[0.0] * size, malicious=[0.0] * size)

    def total(self, idx: int) -> float:
        return self.read[idx] + self.write[idx] + self.malicious[idx]


@dataclass
class FlowResult:
    """Pass-2 accumulators."""
    loads: List[float]
    malicious: List[float]
    queue_inflow: Dict[int, float] = field(default_factory=dict)
    queue_released: Dict[int, float] = field(default_factory=dict)
    reached: Set[int] = field(default_factory=set)
    fulfilled: float = 0.0
    security_incidents: float = 0.0
    slave_writes: Dict[int, float] = field(default_factory=dict)

    @classmethod
    def zeros(cls, size: int) -> FlowResult:
        return cls(loads=[0.0] * size, malicious=[0.0] * size)


@dataclass(frozen=True)
class _Visit:
    node: int
    read: float
    write: float
    malicious: float
    path: FrozenSet[int]
    gateway_seen: bool = False


class _QueueLedger:
    """
    Work held at message queues during one traversal.

    Deliveries are merged per (queue, gateway_seen) so that gateway
    mitigation survives the queue. Malicious traffic is not queued and passes
    through whole.
    """

    def __init__(self, rates: Dict[int, float], backlogs: Dict[int, float]):
        self.rates = rates
        self.backlogs = backlogs
        self.inflow: Dict[int, float] = {idx: 0.0 for idx in rates}
        self.released: Dict[int, float] = {idx: 0.0 for idx in rates}
        self._inbox: Dict[Tuple[int, bool], _Visit] = {}
        for idx in rates:
            if backlogs.get(idx, 0.0) > 0:
                self._inbox[(idx, False)] = _Visit(idx, 0.0, 0.0, 0.0, frozenset({idx}))

    def __contains__(self, idx: int) -> bool:
        return idx in self.rates

    def deliver(self, visit: _Visit) -> None:
        self.inflow[visit.node] += visit.read + visit.write
        key = (visit.node, visit.gateway_seen)
        held = self._inbox.get(key)
        if held is not None:
            visit = _Visit(
                visit.node,
                held.read + visit.read,
                held.write + visit.write,
                held.malicious + visit.malicious,
                held.path | visit.path,
                visit.gateway_seen,
            )
        self._inbox[key] = visit

    def release(self) -> List[_Visit]:
        """Empty every inbox, scaled to what each queue can process now."""
        inbox, self._inbox = self._inbox, {}
        by_queue: Dict[int, List[_Visit]] = {}
        for (idx, _), visit in inbox.items():
            by_queue.setdefault(idx, []).append(visit)

        out: List[_Visit] = []
        for idx, visits in by_queue.items():
            pending = self.backlogs.get(idx, 0.0) + self.inflow[idx] - self.released[idx]
            amount = max(0.0, min(pending, self.rates[idx] - self.released[idx]))
            self.released[idx] += amount

            arrived = sum(v.read + v.write for v in visits)
            for v in visits:
                if arrived > 0:
                    scale = amount / arrived
                    read, write = v.read * scale, v.write * scale
                else:
                    # Backlog only; queued work is released as writes
                    read, write = 0.0, amount / len(visits)
                out.append(_Visit(idx, read, write, v.malicious, v.path, v.gateway_seen))
        return out


class FlowPropagator:
    """Runs both propagation passes over one topology."""

    def __init__(
        self,
        capacity: Optional[CapacitySettings] = None,
        scoring: Optional[ScoringSettings] = None,
    ):
        self.capacity = capacity or CapacitySettings()
        self.scoring = scoring or ScoringSettings()

    # ------------------------------------------------------------------
    # Pass 1
    # ------------------------------------------------------------------

    def potential(
        self,
        topology: TopologyGraph,
        demands: Sequence[DemandSample],
        resources: Optional[ResourceModel] = None,
        state: Optional[EngineState] = None,
    ) -> PotentialLoad:
        """
        Accumulate offered read/write/malicious load at every node.

        ``demands`` holds one sample per entry of ``topology.roots``. Queues
        release at their planned rate and carry ``state`` backlogs forward.
        """
        resources = resources or ResourceModel()
        state = state or EngineState()
        result = PotentialLoad.zeros(len(topology))

        ledger = _QueueLedger(
            resources.planned_queue_rates(topology, state),
            {idx: state.backlogs.get(topology.ids[idx], 0.0)
             for idx in topology.indices_of_type(ComponentType.MESSAGE_QUEUE)},
        )
        crashed = frozenset(topology.index_of[cid] for cid in state.crashed if cid in topology.index_of)

        def step(visit: _Visit) -> Optional[_Visit]:
            idx = visit.node
            result.read[idx] += visit.read
            result.write[idx] += visit.write
            result.malicious[idx] += visit.malicious
            read, write, malicious = self._edge_transform(topology, idx, visit.read, visit.write, visit.malicious)
            return _Visit(idx, read, write, malicious, visit.path, visit.gateway_seen)

        self._traverse(
            self._root_visits(topology, demands), ledger, step,
            lambda visit: self._forward(topology, resources, visit, crashed),
        )
        logger.debug("Potential load computed for %d nodes of %s", len(topology), topology.design_id)
        return result

    # ------------------------------------------------------------------
    # Pass 2
    # ------------------------------------------------------------------

    def actual(
        self,
        topology: TopologyGraph,
        demands: Sequence[DemandSample],
        evaluations: List[NodeEvaluation],
        resources: ResourceModel,
    ) -> FlowResult:
        result = FlowResult.zeros(len(topology))
        ledger = _QueueLedger(
            resources.queue_rates(topology, evaluations),
            {ev.index: ev.prior_backlog for ev in evaluations},
        )
        crashed = frozenset(ev.index for ev in evaluations if ev.crashed)

        def step(visit: _Visit) -> Optional[_Visit]:
            idx = visit.node
            cfg = topology.config(idx)
            ev = evaluations[idx]
            result.reached.add(idx)

            if ev.crashed:
                return None

            read = visit.read * ev.throttle
            write = visit.write * ev.throttle
            malicious = visit.malicious
            result.loads[idx] += read + write
            result.malicious[idx] += malicious

            gateway_seen = visit.gateway_seen or cfg.type == ComponentType.API_GATEWAY

            if cfg.type in _INCIDENT_TYPES and malicious > 0:
                weight = malicious / self.scoring.security_incident_divisor
                if gateway_seen:
                    weight *= self.scoring.gateway_mitigation
                result.security_incidents += weight

            # Fulfilled traffic is consumed here; only the remainder moves on.
            if cfg.type in CACHING_TYPES:
                result.fulfilled += read * (1 - self.capacity.cache_pass_through)
            elif cfg.type in STORE_TYPES:
                result.fulfilled += read
                read = 0.0
                if cfg.is_slave:
                    if write > 0:
                        result.slave_writes[idx] = result.slave_writes.get(idx, 0.0) + write
                else:
                    result.fulfilled += write
                    write = 0.0

            read, write, malicious = self._edge_transform(topology, idx, read, write, malicious)
            if cfg.type == ComponentType.WAF:
                keep = 1 - self.capacity.waf_false_positive_rate
                read *= keep
                write *= keep
            return _Visit(idx, read, write, malicious, visit.path, gateway_seen)

        self._traverse(
            self._root_visits(topology, demands), ledger, step,
            lambda visit: self._forward(topology, resources, visit, crashed),
        )

        result.queue_inflow = dict(ledger.inflow)
        result.queue_released = dict(ledger.released)
        # A queue draining only carried-over backlog is still in service
        result.reached.update(idx for idx, amount in ledger.released.items() if amount > 0)

        logger.debug("Actual flow reached %d of %d nodes", len(result.reached), len(topology))
        return result

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    @staticmethod
    def _root_visits(topology: TopologyGraph, demands: Sequence[DemandSample]) -> List[_Visit]:
        return [
            _Visit(root, d.read, d.write, d.malicious, frozenset({root}))
            for root, d in zip(topology.roots, demands)
        ]

    @staticmethod
    def _traverse(
        roots: List[_Visit],
        ledger: _QueueLedger,
        step: Callable[[_Visit], Optional[_Visit]],
        forward: Callable[[_Visit], List[_Visit]],
    ) -> None:
        """
        Depth-first over the work-list.

        ``step`` applies a node to an arriving visit and returns what the node
        passes on, or None when it stops the flow. Output of a queue in
        ``ledger`` is held there and released once the work-list is empty.
        Released work carries the queue on its path, so it never re-enters
        that queue and the loop ends.
        """
        stack = list(reversed(roots))
        while True:
            while stack:
                visit = stack.pop()
                outgoing = step(visit)
                if outgoing is None:
                    continue
                if visit.node in ledger:
                    ledger.deliver(outgoing)
                else:
                    stack.extend(reversed(forward(outgoing)))

            released = ledger.release()
            if not released:
                return
            for visit in reversed(released):
                stack.extend(reversed(forward(visit)))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _edge_transform(
        self,
        topology: TopologyGraph,
        idx: int,
        read: float,
        write: float,
        malicious: float,
    ) -> Tuple[float, float, float]:
        """Type-specific change to what a node forwards."""
        comp_type = topology.config(idx).type
        if comp_type in CACHING_TYPES:
            read *= self.capacity.cache_pass_through
        elif comp_type == ComponentType.WAF:
            malicious *= self.capacity.waf_malicious_pass_through
        return read, write, malicious

    def _forward(
        self,
        topology: TopologyGraph,
        resources: ResourceModel,
        visit: _Visit,
        crashed: AbstractSet[int],
    ) -> List[_Visit]:
        cfg = topology.config(visit.node)
        if cfg.type != ComponentType.MESSAGE_QUEUE:
            return self._fan_out(topology, visit)
        # Queues hand work only to consumers that are up
        if cfg.is_pull:
            return self._pull_out(topology, resources, visit, crashed)
        return self._fan_out(topology, visit, crashed)

    @staticmethod
    def _fan_out(
        topology: TopologyGraph,
        visit: _Visit,
        skip: AbstractSet[int] = frozenset(),
    ) -> List[_Visit]:
        successors = [nxt for nxt in topology.successors_of(visit.node) if nxt not in skip]
        if not successors:
            return []
        n = len(successors)
        return [
            _Visit(nxt, visit.read / n, visit.write / n, visit.malicious / n,
                   visit.path | {nxt}, visit.gateway_seen)
            for nxt in successors
            if nxt not in visit.path
        ]

    @staticmethod
    def _pull_out(
        topology: TopologyGraph,
        resources: ResourceModel,
        visit: _Visit,
        crashed: AbstractSet[int],
    ) -> List[_Visit]:
        successors = topology.successors_of(visit.node)
        output = visit.read + visit.write + visit.malicious
        fractions = resources.pull_shares(topology, visit.node, output, crashed)
        return [
            _Visit(
                nxt,
                visit.read * frac,
                visit.write * frac,
                visit.malicious * frac,
                visit.path | {nxt},
                visit.gateway_seen,
            )
            for nxt, frac in zip(successors, fractions)
            if nxt not in visit.path
        ]
