"""
Граф родства с именованными узлами.

Узлы хранятся как целочисленные слоты networkx-графа, имя ↔ слот ведётся
в отдельном индексе. Рёбра неориентированные и взвешенные, между парой
узлов не более одного ребра (повторная запись перезаписывает вес).

Синтетические узлы ("Unknown…") – неизвестные предки между двумя
известными особями; признак синтетичности хранится в графе, а не
выводится из имени.

Упрощение графа (``prune_to_shortest``): для каждой пары известных особей
ищутся K кратчайших простых путей (алгоритм Йена поверх Дейкстры,
``networkx.shortest_simple_paths``), и из них собирается новый граф.
"""
from __future__ import annotations
import itertools
import logging
import math
from typing import Dict, Iterator, List, Sequence, Set, Tuple

import networkx as nx
from tqdm import tqdm

LOGGER = logging.getLogger(__name__)

UNKNOWN_PREFIX = "Unknown"
DEFAULT_K_PATHS = 10
# веса сравниваются с таким числом знаков при разрешении ничьих
_WEIGHT_DIGITS = 12


class RelationGraph:
    """Взвешенный неориентированный граф, адресуемый по имени особи."""

    def __init__(self):
        self._g = nx.Graph()
        self._ids: Dict[str, int] = {}
        self._names: Dict[int, str] = {}
        self._synthetic: Set[str] = set()
        self._next_id = 0
        self._unknown_counter = itertools.count(1)

    def __len__(self) -> int:
        return len(self._ids)

    def __contains__(self, name: str) -> bool:
        return name in self._ids

    # ------------------------------------------------------------------ #
    # узлы
    # ------------------------------------------------------------------ #
    def add_node(self, name: str, synthetic: bool = False) -> None:
        if name in self._ids:
            return
        node_id = self._next_id
        self._next_id += 1
        self._g.add_node(node_id)
        self._ids[name] = node_id
        self._names[node_id] = name
        if synthetic:
            self._synthetic.add(name)

    def remove_node(self, name: str) -> None:
        node_id = self._id(name)
        self._g.remove_node(node_id)
        del self._ids[name]
        del self._names[node_id]
        self._synthetic.discard(name)

    def remove_disconnected(self) -> List[str]:
        """Удаляет все узлы без соседей, возвращает их имена."""
        isolated = [name for name, node_id in self._ids.items()
                    if self._g.degree(node_id) == 0]
        for name in isolated:
            self.remove_node(name)
        return isolated

    def nodes(self) -> List[str]:
        return list(self._ids)

    def known_nodes(self) -> List[str]:
        return [name for name in self._ids if name not in self._synthetic]

    def is_synthetic(self, name: str) -> bool:
        return name in self._synthetic

    def neighbors(self, name: str) -> List[str]:
        return [self._names[i] for i in self._g.neighbors(self._id(name))]

    def _id(self, name: str) -> int:
        assert name in self._ids, f"node {name!r} is not registered"
        return self._ids[name]

    def _new_unknown_name(self) -> str:
        while True:
            name = f"{UNKNOWN_PREFIX}{next(self._unknown_counter)}"
            if name not in self._ids:
                return name

    # ------------------------------------------------------------------ #
    # рёбра и пути
    # ------------------------------------------------------------------ #
    def add_weighted_edge(self, n1: str, n2: str, weight: float) -> None:
        assert n1 != n2, f"self-loop on {n1!r}"
        self._g.add_edge(self._id(n1), self._id(n2), weight=weight)

    def weighted_edge(self, n1: str, n2: str) -> float:
        u, v = self._id(n1), self._id(n2)
        assert self._g.has_edge(u, v), f"no edge {n1!r} -- {n2!r}"
        return self._g.edges[u, v]["weight"]

    def weighted_edges(self) -> Iterator[Tuple[str, str, float]]:
        for u, v, w in self._g.edges(data="weight"):
            yield self._names[u], self._names[v], w

    def number_of_edges(self) -> int:
        return self._g.number_of_edges()

    def add_path(self, names: Sequence[str], weights: Sequence[float]) -> None:
        assert len(weights) == len(names) - 1, \
            "weights along path should be one less than names along path"
        for name in names:
            self.add_node(name)
        for (n1, n2), w in zip(zip(names, names[1:]), weights):
            self.add_weighted_edge(n1, n2, w)

    def add_unknown_path(self, n1: str, n2: str, distance: int, weight: float) -> List[str]:
        """
        Путь n1 → (distance − 1) неизвестных → n2.

        Вес ``weight`` делится поровну между ``distance`` рёбрами.
        """
        assert distance >= 1, f"distance must be positive, got {distance}"
        unknowns = [self._new_unknown_name() for _ in range(distance - 1)]
        for name in unknowns:
            self.add_node(name, synthetic=True)
        path = [n1, *unknowns, n2]
        self.add_path(path, [weight / distance] * distance)
        return path

    def path_weight(self, names: Sequence[str]) -> float:
        return sum(self.weighted_edge(a, b) for a, b in zip(names, names[1:]))

    # ------------------------------------------------------------------ #
    # упрощение
    # ------------------------------------------------------------------ #
    def k_shortest_paths(self, n1: str, n2: str, k: int = DEFAULT_K_PATHS) -> List[List[str]]:
        """
        До ``k`` простых путей n1 → n2 по возрастанию суммарного веса.

        Пути с весом, равным k-му, тоже извлекаются, затем всё сортируется
        по (вес, последовательность имён) и обрезается до k – так результат
        не зависит от порядка обхода при ничьих.
        """
        assert k >= 1, "k must be positive"
        source, target = self._id(n1), self._id(n2)
        candidates: List[Tuple[float, List[str]]] = []
        try:
            for ids in nx.shortest_simple_paths(self._g, source, target, weight="weight"):
                names = [self._names[i] for i in ids]
                cost = round(self.path_weight(names), _WEIGHT_DIGITS)
                if len(candidates) >= k and not math.isclose(cost, candidates[-1][0]):
                    break
                candidates.append((cost, names))
        except nx.NetworkXNoPath:
            return []
        candidates.sort()
        return [names for _, names in candidates[:k]]

    def prune_to_shortest(self, k: int = DEFAULT_K_PATHS) -> "RelationGraph":
        """Новый граф только из k кратчайших путей между известными особями."""
        pruned = RelationGraph()
        pairs = list(itertools.combinations(sorted(self.known_nodes()), 2))
        LOGGER.info("✂️  Pruning %d known pairs (k = %d) …", len(pairs), k)
        for a, b in tqdm(pairs, desc="pairs"):
            for names in self.k_shortest_paths(a, b, k):
                for name in names:
                    if self.is_synthetic(name):
                        pruned.add_node(name, synthetic=True)
                weights = [self.weighted_edge(u, v) for u, v in zip(names, names[1:])]
                pruned.add_path(names, weights)
        return pruned
