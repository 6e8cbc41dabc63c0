"""Register allocation by graph colouring of an interference graph."""

from __future__ import annotations

from typing import Optional

from compilertoolkit.linearscan import NotConfiguredError

_SEPARATOR = "-" * 40


class RegisterAllocator:
    """Colours an interference graph with k physical registers.

    Vertices whose key is below the number of colours are physical registers
    and keep their key as colour; all other vertices are virtual registers.
    """

    def __init__(self) -> None:
        self.graph_id: Optional[int] = None
        self.colors: Optional[int] = None
        self.adjacency: dict[int, set[int]] = {}
        self.results: dict[int, bool] = {}
        self.coloring: dict[int, Optional[int]] = {}
        self._pending_edges: set[int] = set()

    @property
    def configured(self) -> bool:
        """Whether both the graph id and the colour count have been set."""
        return self.graph_id is not None and self.colors is not None

    def _require_configured(self) -> int:
        if not self.configured:
            raise NotConfiguredError("graph id and number of colours must be set")
        assert self.colors is not None
        return self.colors

    def set_graph_id(self, graph_id: int) -> None:
        """Set the number identifying the graph."""
        if graph_id < 0:
            raise ValueError("graph id must not be negative")
        self.graph_id = graph_id

    def set_colors(self, colors: int) -> None:
        """Set the number of physical registers and reset every analysis."""
        if colors < 0:
            raise ValueError("number of colours must not be negative")
        self.colors = colors
        self.results = {k: True for k in range(1, colors + 1)}

    def add_edge(self, neighbour: int) -> None:
        """Queue a neighbour for the next vertex added."""
        self._pending_edges.add(neighbour)

    def add_vertex(self, vertex: int) -> None:
        """Add a vertex joined to every queued neighbour, then clear the queue."""
        edges = self._pending_edges
        self._pending_edges = set()
        self.adjacency.setdefault(vertex, set()).update(edges)
        for neighbour in edges:
            self.adjacency.setdefault(neighbour, set()).add(vertex)

    def describe_graph(self) -> str:
        """Return the adjacency lists, one vertex per line."""
        lines = "".join(
            f"Vértice {vertex} -> "
            + "".join(f"{n} " for n in sorted(self.adjacency[vertex]))
            + "\n"
            for vertex in sorted(self.adjacency)
        )
        return "== GRAFO ==\n" + lines

    def describe_settings(self) -> str:
        """Return the graph id and the number of physical registers."""
        if not self.configured:
            return ""
        return (
            f"Graph {self.graph_id} -> Physical Registers: {self.colors}\n"
            f"{_SEPARATOR}\n"
        )

    def _is_virtual(self, vertex: int) -> bool:
        assert self.colors is not None
        return vertex >= self.colors

    def _select(self, graph: dict[int, set[int]], k: int) -> Optional[int]:
        candidates = [(len(n), v) for v, n in graph.items() if self._is_virtual(v)]
        if not candidates:
            return None
        degree, vertex = min(candidates)
        if degree >= k:
            _, vertex = min((-deg, v) for deg, v in candidates)
        return vertex

    def _color_of(self, vertex: int) -> Optional[int]:
        if not self._is_virtual(vertex):
            return vertex
        return self.coloring.get(vertex)

    def color(self, k: int) -> str:
        """Try to colour the graph with k colours and return the transcript.

        The outcome is recorded in ``results[k]`` and the colours given to the
        virtual registers in ``coloring`` (None marks the one that failed).
        """
        total = self._require_configured()
        if not 1 <= k <= total:
            raise ValueError(f"k must be between 1 and {total}")

        lines = [f"{_SEPARATOR}\n", f"K = {k}\n\n"]
        graph = {v: set(n) for v, n in self.adjacency.items()}
        stack: list[tuple[int, set[int]]] = []

        while (vertex := self._select(graph, k)) is not None:
            neighbours = graph.pop(vertex)
            neighbours.discard(vertex)
            for neighbour in neighbours:
                graph[neighbour].discard(vertex)
            stack.append((vertex, neighbours))
            marker = " *" if len(neighbours) >= k else ""
            lines.append(f"Push: {vertex}{marker}\n")

        self.coloring = {}
        while stack:
            vertex, neighbours = stack.pop()
            graph[vertex] = neighbours
            present = [n for n in neighbours if n in graph]
            for neighbour in present:
                graph[neighbour].add(vertex)
            used = {self._color_of(n) for n in present}
            new_color = 0
            while new_color in used:
                new_color += 1
            if new_color < k:
                self.coloring[vertex] = new_color
                lines.append(f"Pop: {vertex} -> {new_color}\n")
            else:
                self.coloring[vertex] = None
                self.results[k] = False
                lines.append(f"Pop: {vertex} -> NO COLOR AVAILABLE\n")
                break

        return "".join(lines)

    def evaluate_colorings(self) -> str:
        """Colour the graph for every k from the colour count down to 2."""
        if not self.configured:
            return ""
        assert self.colors is not None
        parts = [self.color(k) for k in range(self.colors, 1, -1)]
        parts.append(f"{_SEPARATOR}\n")
        return "".join(parts)

    def summary(self) -> str:
        """Report, for each k down to 2, whether the colouring spilled."""
        if not self.configured:
            return ""
        assert self.colors is not None
        width = len(str(self.colors))
        lines = [_SEPARATOR]
        for k in range(self.colors, 1, -1):
            outcome = "Successful Allocation" if self.results.get(k, True) else "SPILL"
            lines.append(f"\nGraph {self.graph_id} -> K = {str(k).rjust(width)}: {outcome}")
        return "".join(lines)