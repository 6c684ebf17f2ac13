"""Connectivity evaluation: match graph, dangling ports, solved state.

A board is solved when

1. no open port dangles: every port faces a neighbour whose facing port is
   open too (ports pointing off the board always dangle), and
2. the match graph over tiles that have at least one port forms a single
   connected component (or none, when every tile is blank).

``evaluate`` recomputes everything from a snapshot. ``IncrementalEvaluator``
keeps per-cell results for a live board and, after a rotation, refreshes only
the rotated cell and its direct neighbours. Both produce identical
``Evaluation`` values for the same board state.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import TYPE_CHECKING

from connex.puzzle.board import BoardSnapshot, NeighborTable
from connex.puzzle.types import Coord, Direction, Topology

if TYPE_CHECKING:
    from connex.puzzle.board import Board

Edge = tuple[int, int]  # (lower index, higher index)


@dataclass(frozen=True)
class MatchGraph:
    """Undirected graph of mutually matched adjacent cells (by flat index)."""

    size: int
    edges: frozenset[Edge]

    def adjacency(self) -> list[list[int]]:
        adj: list[list[int]] = [[] for _ in range(self.size)]
        for a, b in self.edges:
            adj[a].append(b)
            adj[b].append(a)
        return adj


@dataclass(frozen=True)
class Evaluation:
    solved: bool
    # (coord, direction) ordered by cell index, then the topology's direction order
    dangling: tuple[tuple[Coord, Direction], ...]
    mismatched: frozenset[Coord]
    components: int
    edges: frozenset[Edge]


class _DisjointSet:
    def __init__(self, size: int) -> None:
        self._parent = list(range(size))
        self._rank = [0] * size

    def find(self, x: int) -> int:
        parent = self._parent
        while parent[x] != x:
            parent[x] = parent[parent[x]]
            x = parent[x]
        return x

    def union(self, a: int, b: int) -> None:
        ra, rb = self.find(a), self.find(b)
        if ra == rb:
            return
        if self._rank[ra] < self._rank[rb]:
            ra, rb = rb, ra
        self._parent[rb] = ra
        if self._rank[ra] == self._rank[rb]:
            self._rank[ra] += 1


# ------------------------------------------------------------------
# Per-cell primitives shared by the full and incremental paths
# ------------------------------------------------------------------


def _cell_links(
    topology: Topology,
    neighbors: NeighborTable,
    ports: tuple[frozenset[Direction], ...] | list[frozenset[Direction]],
    index: int,
) -> tuple[set[int], list[Direction]]:
    """Matched neighbour indices and dangling directions for one cell."""
    linked: set[int] = set()
    dangling: list[Direction] = []
    own = ports[index]
    if not own:
        return linked, dangling
    for k, direction in enumerate(topology.directions):
        if direction not in own:
            continue
        n = neighbors[index][k]
        if n is not None and topology.inverse[direction] in ports[n]:
            linked.add(n)
        else:
            dangling.append(direction)
    return linked, dangling


def _count_components(
    ports: tuple[frozenset[Direction], ...] | list[frozenset[Direction]],
    edges: frozenset[Edge] | set[Edge],
) -> int:
    """Union-find over cells with at least one port."""
    ds = _DisjointSet(len(ports))
    for a, b in edges:
        ds.union(a, b)
    return len({ds.find(i) for i, p in enumerate(ports) if p})


# ------------------------------------------------------------------
# Full recomputation
# ------------------------------------------------------------------


def build_match_graph(snapshot: BoardSnapshot) -> MatchGraph:
    edges: set[Edge] = set()
    for index in range(len(snapshot)):
        linked, _ = _cell_links(snapshot.topology, snapshot.neighbors, snapshot.ports, index)
        for n in linked:
            edges.add((min(index, n), max(index, n)))
    return MatchGraph(size=len(snapshot), edges=frozenset(edges))


def find_dangling_ports(snapshot: BoardSnapshot) -> list[tuple[Coord, Direction]]:
    result: list[tuple[Coord, Direction]] = []
    for index in range(len(snapshot)):
        _, dangling = _cell_links(snapshot.topology, snapshot.neighbors, snapshot.ports, index)
        coord = snapshot.coord(index)
        result.extend((coord, d) for d in dangling)
    return result


def count_components(snapshot: BoardSnapshot, graph: MatchGraph | None = None) -> int:
    if graph is None:
        graph = build_match_graph(snapshot)
    return _count_components(snapshot.ports, graph.edges)


def evaluate(snapshot: BoardSnapshot) -> Evaluation:
    """Decide whether the board is solved and collect diagnostics."""
    graph = build_match_graph(snapshot)
    dangling = find_dangling_ports(snapshot)
    components = _count_components(snapshot.ports, graph.edges)
    return Evaluation(
        solved=not dangling and components <= 1,
        dangling=tuple(dangling),
        mismatched=frozenset(coord for coord, _ in dangling),
        components=components,
        edges=graph.edges,
    )


def is_solved(snapshot: BoardSnapshot) -> bool:
    return evaluate(snapshot).solved


# ------------------------------------------------------------------
# Incremental evaluation
# ------------------------------------------------------------------


class IncrementalEvaluator:
    """Evaluation state kept in step with a live board.

    Call ``update(coord)`` after every rotation of ``coord``. Only that cell
    and its immediate neighbours are recomputed; the component count is
    traversed lazily and only once no port dangles.
    """

    def __init__(self, board: Board) -> None:
        self.board = board
        self.rebuild()

    def rebuild(self) -> None:
        """Recompute everything from the board, e.g. after a bulk restore."""
        board = self.board
        size = len(board)
        self._ports: list[frozenset[Direction]] = [board.ports_by_index(i) for i in range(size)]
        self._links: list[set[int]] = [set() for _ in range(size)]
        self._dangling: list[list[Direction]] = [[] for _ in range(size)]
        self._dangling_total = 0
        for index in range(size):
            self._refresh_cell(index)
        self._components: int | None = None

    def _refresh_cell(self, index: int) -> None:
        linked, dangling = _cell_links(
            self.board.topology, self._neighbors, self._ports, index
        )
        self._links[index] = linked
        self._dangling_total += len(dangling) - len(self._dangling[index])
        self._dangling[index] = dangling

    @property
    def _neighbors(self) -> NeighborTable:
        return self.board.neighbor_table

    def update(self, coord: Coord) -> None:
        index = self.board.index(coord)
        self._ports[index] = self.board.ports_by_index(index)
        self._refresh_cell(index)
        for n in self._neighbors[index]:
            if n is not None:
                self._refresh_cell(n)
        self._components = None

    @property
    def dangling_count(self) -> int:
        return self._dangling_total

    def components(self) -> int:
        if self._components is None:
            self._components = self._traverse_components()
        return self._components

    def _traverse_components(self) -> int:
        seen = [False] * len(self._ports)
        count = 0
        for start, ports in enumerate(self._ports):
            if not ports or seen[start]:
                continue
            count += 1
            seen[start] = True
            queue = deque([start])
            while queue:
                current = queue.popleft()
                for n in self._links[current]:
                    # Only mutual links are recorded, so both ends agree
                    if not seen[n]:
                        seen[n] = True
                        queue.append(n)
        return count

    def is_solved(self) -> bool:
        if self._dangling_total:
            return False
        return self.components() <= 1

    def evaluation(self) -> Evaluation:
        dangling: list[tuple[Coord, Direction]] = []
        edges: set[Edge] = set()
        for index, directions in enumerate(self._dangling):
            if directions:
                coord = self.board.coord(index)
                dangling.extend((coord, d) for d in directions)
            for n in self._links[index]:
                if index < n:
                    edges.add((index, n))
        components = self.components()
        return Evaluation(
            solved=not dangling and components <= 1,
            dangling=tuple(dangling),
            mismatched=frozenset(coord for coord, _ in dangling),
            components=components,
            edges=frozenset(edges),
        )
