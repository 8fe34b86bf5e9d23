"""Выгрузка упрощённого графа в неориентированный DOT-эскиз родословной."""
from __future__ import annotations
from typing import Dict, List, Tuple

import networkx as nx

from .graph import RelationGraph

GRAPH_ATTRS: Dict[str, str] = {
    "rankdir": "TB",
    "splines": "ortho",
    "ratio": "auto",
    "mincross": "2.0",
}
NODE_ATTRS: Dict[str, str] = {
    "fontname": "Sans",
    "shape": "record",
}


class Pedigree:
    """Узлы и рёбра для отрисовки; веса и направления не хранятся."""

    def __init__(self, name: str = "pedigree"):
        self.g = nx.Graph(name=name)
        self.g.graph["graph"] = dict(GRAPH_ATTRS)

    @property
    def nodes(self) -> List[str]:
        return list(self.g.nodes)

    @property
    def edges(self) -> List[Tuple[str, str]]:
        return list(self.g.edges)

    def add_node(self, node: str) -> None:
        self.g.add_node(node, **NODE_ATTRS)

    def add_edge(self, src: str, dst: str) -> None:
        self.g.add_edge(src, dst)

    def to_dot(self) -> str:
        return nx.nx_pydot.to_pydot(self.g).to_string()

    def write_dot(self, path) -> None:
        nx.nx_pydot.write_dot(self.g, path)


def emit_pedigree(graph: RelationGraph) -> Pedigree:
    ped = Pedigree()
    for node1, node2, _ in graph.weighted_edges():
        ped.add_node(node1)
        ped.add_node(node2)
        ped.add_edge(node1, node2)
    return ped


def pedigree_edges(graph: RelationGraph) -> List[Tuple[str, str]]:
    """Рёбра родословной в порядке обхода графа."""
    return emit_pedigree(graph).edges
