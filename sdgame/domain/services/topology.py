"""
Topology Graph

Builds the directed component graph of a design once per evaluation, together
with a stable node-index arena so the traversal passes work on integer
indices instead of id lookups.

    ids[i]         component id at index i
    index_of[id]   reverse lookup
    configs[i]     resolved ComponentConfig
    successors[i]  outgoing neighbour indices, in connection order
                   (duplicate connections stay separate edges)
    roots          TRAFFIC_SOURCE indices, in component order

Usage:
    topology = TopologyGraph(design)
    for root in topology.roots:
        ...
"""

from __future__ import annotations

import logging
from typing import Dict, List, Tuple

import networkx as nx

from sdgame.domain.errors import InvalidInputError, SimulationInvariantViolation
from sdgame.domain.models.component import ComponentConfig, ComponentType
from sdgame.domain.models.design import Design

logger = logging.getLogger(__name__)


class TopologyGraph:
    """Index arena plus a NetworkX view of one design."""

    def __init__(self, design: Design):
        self.design_id = design.id
        self.ids: List[str] = []
        self.index_of: Dict[str, int] = {}
        self.configs: List[ComponentConfig] = []

        self.graph = nx.DiGraph()
        for comp in design.components:
            idx = len(self.ids)
            self.ids.append(comp.id)
            self.index_of[comp.id] = idx
            self.configs.append(ComponentConfig.resolve(comp))
            self.graph.add_node(comp.id, index=idx, type=comp.type.value, name=comp.name)

        successors: List[List[int]] = [[] for _ in self.ids]
        for conn in design.connections:
            try:
                src = self.index_of[conn.from_id]
                dst = self.index_of[conn.to_id]
            except KeyError as e:
                raise InvalidInputError(
                    f"Connection {conn.from_id} -> {conn.to_id} references unknown component {e}",
                    details={"design_id": design.id, "connection": conn.to_dict()},
                ) from e
            successors[src].append(dst)
            if self.graph.has_edge(conn.from_id, conn.to_id):
                self.graph[conn.from_id][conn.to_id]["multiplicity"] += 1
            else:
                self.graph.add_edge(conn.from_id, conn.to_id, protocol=conn.protocol, multiplicity=1)

        self.successors: List[Tuple[int, ...]] = [tuple(s) for s in successors]
        self.roots: Tuple[int, ...] = tuple(
            i for i, cfg in enumerate(self.configs)
            if cfg.type == ComponentType.TRAFFIC_SOURCE
        )

        if self.has_cycle():
            logger.warning(
                "Design %s contains a cycle; looping flow will be truncated", design.id
            )

    def __len__(self) -> int:
        return len(self.ids)

    def config(self, idx: int) -> ComponentConfig:
        self._check(idx)
        return self.configs[idx]

    def successors_of(self, idx: int) -> Tuple[int, ...]:
        self._check(idx)
        return self.successors[idx]

    def has_cycle(self) -> bool:
        return not nx.is_directed_acyclic_graph(self.graph)

    def indices_of_type(self, comp_type: ComponentType) -> List[int]:
        return [i for i, cfg in enumerate(self.configs) if cfg.type == comp_type]

    def _check(self, idx: int) -> None:
        if not 0 <= idx < len(self.ids):
            logger.error("Node index %s outside arena of %d nodes (design %s)",
                         idx, len(self.ids), self.design_id)
            raise SimulationInvariantViolation(
                f"Node index {idx} outside arena of {len(self.ids)} nodes",
                details={"design_id": self.design_id, "index": idx},
            )
