"""
Коэффициент родства → родственная дистанция (число поколений).

r = 0.5 – родитель/потомок, 0.25 – полусибсы/дед, 0.125 – …
Каждое поколение делит коэффициент пополам, поэтому
    d = round(log2(1 / r)),
а округление сглаживает шум оценок. r ≤ 0 – «не родственники».

Здесь же нормализация значений и таблица кодов ML-Relate.
"""
from __future__ import annotations
import math
from typing import Dict, Tuple

import numpy as np
from numba import njit

# коды колонки R в выгрузке ML-Relate → дистанция (0 – не родственники)
ML_RELATE_DISTANCE: Dict[str, int] = {
    "PO": 1,
    "FS": 2,
    "HS": 3,
    "U": 0,
}
ML_RELATE_MAX_DISTANCE = max(ML_RELATE_DISTANCE.values())


@njit(cache=True)
def relatedness_to_distance(r: float) -> Tuple[int, bool]:
    """
    Возвращает (дистанция, родственны ли).

        relatedness_to_distance(0.5)   → (1, True)
        relatedness_to_distance(0.25)  → (2, True)
        relatedness_to_distance(0.125) → (3, True)
        relatedness_to_distance(<=0)   → (0, False)

    NaN, бесконечность и значения столь малые, что 1 / r переполняется,
    тоже считаются «не родственниками».
    """
    if r <= 0.0 or math.isnan(r):
        return 0, False
    x = math.log2(1.0 / r)
    if math.isinf(x):
        return 0, False
    # округление половин «от нуля»
    d = math.floor(abs(x) + 0.5)
    if x < 0:
        d = -d
    return int(d), True


@njit(cache=True)
def _encode_distances_numba(vals: np.ndarray):
    n = vals.shape[0]
    dists = np.zeros(n, dtype=np.int64)
    related = np.zeros(n, dtype=np.bool_)
    for i in range(n):
        d, rel = relatedness_to_distance(vals[i])
        dists[i] = d
        related[i] = rel
    return dists, related


def encode_distances(values) -> Tuple[np.ndarray, np.ndarray]:
    """Векторный вариант ``relatedness_to_distance``: (дистанции, маска родства)."""
    vals = np.asarray(values, dtype=np.float64)
    return _encode_distances_numba(vals)


def normalize(values) -> np.ndarray:
    """
    Линейно приводит значения к [0, 1].

    Минимум и максимум берутся по values ∪ {0, 1}: если все значения уже
    лежат в [0, 1], результат совпадает с входом.
    """
    vals = np.asarray(values, dtype=np.float64)
    bounded = np.append(vals, [0.0, 1.0])
    lo, hi = bounded.min(), bounded.max()
    return (vals - lo) / (hi - lo)


def clip_unrelated(values) -> np.ndarray:
    """Отрицательные оценки без нормализации считаем «не родственниками» (0)."""
    vals = np.asarray(values, dtype=np.float64)
    return np.where(vals < 0, 0.0, vals)


def ml_relate_to_distance(code: str) -> int:
    try:
        return ML_RELATE_DISTANCE[code.strip()]
    except KeyError:
        raise ValueError(f"ML-Relate entry {code!r} not understood") from None
