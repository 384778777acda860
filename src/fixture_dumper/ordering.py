"""
Dump Order Resolver — orders entities so dependencies are emitted first.

This is the core ordering logic:
1. Build the dependency graph from non-nullable associations
2. Stable topological sort (ties broken by input position)
3. On a mandatory cycle: report it, release the earliest remaining entity
   in input order, keep sorting
4. Return a DumpPlan (order + reported cycles)

Design Principles:
- Pure: no persistence access, no I/O
- Deterministic: same input order, same output order
- Never fails the run: cycles are reported, not raised

Edge rule: B → A (A after B) iff A has a non-nullable association (single
or many) whose target is B, B is part of the input, and B is not A. Nullable
associations never constrain order: a null-capable slot can point at an
instance named later in the run.
"""

from __future__ import annotations

import heapq
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field

import structlog

from fixture_dumper.core.errors import CyclicMandatoryDependency
from fixture_dumper.metadata.descriptors import EntityDescriptor

logger = structlog.get_logger()


@dataclass(frozen=True)
class DumpPlan:
    """Resolved dump order plus the mandatory cycles found on the way."""

    order: tuple[EntityDescriptor, ...]
    cycles: tuple[CyclicMandatoryDependency, ...] = field(default=())

    @property
    def names(self) -> list[str]:
        return [d.name for d in self.order]

    @property
    def has_cycles(self) -> bool:
        return bool(self.cycles)


class DumpOrderResolver:
    """
    Resolves a set of entity descriptors into a dump order.

    Thread-safe: No mutable state, each resolve() call is independent.

    Example:
        resolver = DumpOrderResolver()
        plan = resolver.resolve([book, author])
        plan.names   # ["app.Author", "app.Book"]
    """

    def order(self, descriptors: Iterable[EntityDescriptor]) -> list[EntityDescriptor]:
        """Dump order of *descriptors*; every entity appears exactly once."""
        return list(self.resolve(descriptors).order)

    def resolve(self, descriptors: Iterable[EntityDescriptor]) -> DumpPlan:
        nodes = self._unique(descriptors)
        graph = self._dependency_graph(nodes)

        logger.debug(
            "ordering.start",
            entity_count=len(nodes),
            edge_count=sum(len(v) for v in graph.values()),
        )

        order, cycles = self._topological_sort(nodes, graph)

        logger.info(
            "ordering.resolved",
            entity_count=len(order),
            cycle_count=len(cycles),
        )
        return DumpPlan(order=tuple(nodes[i] for i in order), cycles=tuple(cycles))

    @staticmethod
    def _unique(descriptors: Iterable[EntityDescriptor]) -> list[EntityDescriptor]:
        seen: set[str] = set()
        nodes = []
        for descriptor in descriptors:
            if descriptor.name in seen:
                continue
            seen.add(descriptor.name)
            nodes.append(descriptor)
        return nodes

    @staticmethod
    def _dependency_graph(nodes: list[EntityDescriptor]) -> dict[int, list[int]]:
        """Adjacency list by input position: dependency -> dependents."""
        index = {d.name: i for i, d in enumerate(nodes)}
        graph: dict[int, list[int]] = defaultdict(list)
        for i, descriptor in enumerate(nodes):
            for target in dict.fromkeys(descriptor.mandatory_targets()):
                j = index.get(target)
                if j is None or j == i:
                    continue
                graph[j].append(i)
        return graph

    def _topological_sort(
        self, nodes: list[EntityDescriptor], graph: dict[int, list[int]]
    ) -> tuple[list[int], list[CyclicMandatoryDependency]]:
        """
        Kahn's algorithm with a min-heap on input position.

        When nothing is ready, the remaining nodes contain a cycle: report it
        and release the earliest remaining node so its cycle members follow
        in input order.
        """
        in_degree = [0] * len(nodes)
        for dependents in graph.values():
            for dependent in dependents:
                in_degree[dependent] += 1

        ready = [i for i, degree in enumerate(in_degree) if degree == 0]
        heapq.heapify(ready)
        done = [False] * len(nodes)
        result: list[int] = []
        cycles: list[CyclicMandatoryDependency] = []

        while len(result) < len(nodes):
            if not ready:
                remaining = [i for i in range(len(nodes)) if not done[i]]
                cycle = self._find_cycle(remaining, graph, done)
                report = CyclicMandatoryDependency([nodes[i].name for i in cycle])
                cycles.append(report)
                logger.warning("ordering.cycle_detected", cycle=report.cycle)
                release = min(cycle[:-1]) if len(cycle) > 1 else remaining[0]
                in_degree[release] = 0
                heapq.heappush(ready, release)

            node = heapq.heappop(ready)
            if done[node]:
                continue
            done[node] = True
            result.append(node)

            for dependent in graph.get(node, []):
                if done[dependent]:
                    continue
                in_degree[dependent] -= 1
                if in_degree[dependent] == 0:
                    heapq.heappush(ready, dependent)

        return result, cycles

    @staticmethod
    def _find_cycle(
        remaining: list[int], graph: dict[int, list[int]], done: list[bool]
    ) -> list[int]:
        """
        Find a cycle among the remaining nodes.

        Uses depth-first search with three-color marking:
        - WHITE (0): Unvisited
        - GRAY (1): Currently visiting (on current path)
        - BLACK (2): Finished visiting

        If we encounter a GRAY node, we've found a cycle. The returned path
        starts and ends with the same node.
        """
        WHITE, GRAY, BLACK = 0, 1, 2
        color = {i: WHITE for i in remaining}
        path: list[int] = []

        def dfs(node: int) -> list[int] | None:
            color[node] = GRAY
            path.append(node)
            for neighbor in graph.get(node, []):
                if done[neighbor]:
                    continue
                if color[neighbor] == GRAY:
                    start = path.index(neighbor)
                    return path[start:] + [neighbor]
                if color[neighbor] == WHITE:
                    found = dfs(neighbor)
                    if found:
                        return found
            color[node] = BLACK
            path.pop()
            return None

        for node in remaining:
            if color[node] == WHITE:
                found = dfs(node)
                if found:
                    return found
        return [remaining[0]]
