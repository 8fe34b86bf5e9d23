"""
Конвейер: таблица родства → граф с неизвестными предками → упрощённая родословная.

    * load_relatedness / load_ml_relate – чтение CSV в единый формат строк
    * inflate                         – цепочки неизвестных для каждой пары
    * build_pedigree                  – нормализация, inflate, чистка, упрощение
    * infer_pedigree                  – всё вместе, от файла до DOT-эскиза
"""
from __future__ import annotations
import logging
from pathlib import Path
from typing import Iterable, Sequence

import numpy as np
import pandas as pd

from .graph import DEFAULT_K_PATHS, RelationGraph
from .kinship import (
    ML_RELATE_MAX_DISTANCE,
    clip_unrelated,
    encode_distances,
    ml_relate_to_distance,
    normalize as normalize_values,
)
from .pedigree import Pedigree, emit_pedigree

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_DISTANCE = 9
ROW_COLUMNS = ["indv1", "indv2", "relatedness", "distance"]

RELATEDNESS_FIELDS = 3  # Indv1, Indv2, Relatedness
# Ind1, Ind2, R, LnL.R., U, HS, FS, PO, Relationships, Relatedness
ML_RELATE_FIELDS = 10


# --------------------------------------------------------------------------- #
# 1. Загрузка
# --------------------------------------------------------------------------- #
def _read_table(path, n_fields: int) -> pd.DataFrame:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Could not read input file: {path}")
    try:
        df = pd.read_csv(path, dtype=str, skipinitialspace=True,
                         keep_default_na=False)
    except pd.errors.ParserError as exc:
        raise ValueError(f"Problem parsing {path}: {exc}") from exc
    if df.shape[1] != n_fields:
        raise ValueError(
            f"{path}: expected {n_fields} columns, found {df.shape[1]}"
        )
    if df.isna().any().any():
        raise ValueError(f"{path}: rows with missing fields")
    return df


def _parse_floats(column: pd.Series) -> np.ndarray:
    try:
        vals = column.astype(np.float64).to_numpy()
    except ValueError as exc:
        raise ValueError(f"Could not read entry as float: {exc}") from exc
    bad = ~np.isfinite(vals)
    if bad.any():
        raise ValueError(
            f"Relatedness must be finite, got {column[bad].tolist()}"
        )
    return vals


def rows_frame(records: Iterable[Sequence]) -> pd.DataFrame:
    """
    Строки (indv1, indv2, relatedness[, distance]) → DataFrame ядра.

    distance = NaN означает «вычислить из relatedness».
    """
    data = []
    for rec in records:
        indv1, indv2, rel = rec[0], rec[1], rec[2]
        dist = rec[3] if len(rec) > 3 and rec[3] is not None else np.nan
        data.append((str(indv1), str(indv2), float(rel), float(dist)))
    return pd.DataFrame(data, columns=ROW_COLUMNS)


def load_relatedness(path) -> pd.DataFrame:
    """Простой формат: заголовок + три колонки Indv1, Indv2, Relatedness."""
    df = _read_table(path, RELATEDNESS_FIELDS)
    rows = pd.DataFrame({
        "indv1": df.iloc[:, 0].str.strip(),
        "indv2": df.iloc[:, 1].str.strip(),
        "relatedness": _parse_floats(df.iloc[:, 2]),
        "distance": np.nan,
    }, columns=ROW_COLUMNS)
    LOGGER.info("📦  Loaded %d relatedness rows from %s", len(rows), path)
    return rows


def load_ml_relate(path) -> pd.DataFrame:
    """Выгрузка ML-Relate: дистанция из кода R, родство – из последней колонки."""
    df = _read_table(path, ML_RELATE_FIELDS)
    rows = pd.DataFrame({
        "indv1": df.iloc[:, 0].str.strip(),
        "indv2": df.iloc[:, 1].str.strip(),
        "relatedness": _parse_floats(df.iloc[:, 9]),
        "distance": [float(ml_relate_to_distance(c)) for c in df.iloc[:, 2]],
    }, columns=ROW_COLUMNS)
    LOGGER.info("📦  Loaded %d ML-Relate rows from %s", len(rows), path)
    return rows


# --------------------------------------------------------------------------- #
# 2. Граф
# --------------------------------------------------------------------------- #
def prepare_relatedness(rows: pd.DataFrame, normalize: bool = False) -> pd.DataFrame:
    rows = rows.copy()
    if normalize:
        rows["relatedness"] = normalize_values(rows["relatedness"].to_numpy())
    else:
        rows["relatedness"] = clip_unrelated(rows["relatedness"].to_numpy())
    return rows


def inflate(rows: pd.DataFrame, max_distance: int = DEFAULT_MAX_DISTANCE) -> RelationGraph:
    """
    Для каждой родственной пары – цепочка из (d − 1) неизвестных.

    Отбрасываются без ошибки: не родственники, d ≤ 0, d > max_distance,
    пары особи с самой собой.
    """
    rel = rows["relatedness"].to_numpy(dtype=np.float64)
    given = rows["distance"].to_numpy(dtype=np.float64)
    missing = np.isnan(given)

    encoded, related = encode_distances(rel)
    dist = np.where(missing, encoded, np.nan_to_num(given)).astype(np.int64)
    related = np.where(missing, related, rel > 0)

    keep = (
        related
        & (dist > 0)
        & (dist <= max_distance)
        & (rows["indv1"] != rows["indv2"]).to_numpy()
    )
    for i in np.flatnonzero(~keep):
        LOGGER.debug("skip row %d: %s – %s (r = %s, d = %d)",
                     i, rows["indv1"].iat[i], rows["indv2"].iat[i], rel[i], dist[i])

    g = RelationGraph()
    # известные – до генерации неизвестных, иначе имена могут совпасть
    for name in pd.unique(rows[["indv1", "indv2"]].to_numpy().ravel()):
        g.add_node(name)
    for i in np.flatnonzero(keep):
        g.add_unknown_path(rows["indv1"].iat[i], rows["indv2"].iat[i],
                           int(dist[i]), float(rel[i]))

    LOGGER.info("🔗  Inflated %d of %d rows → %d nodes, %d edges",
                int(keep.sum()), len(rows), len(g), g.number_of_edges())
    return g


def build_pedigree(
    rows: pd.DataFrame,
    max_distance: int = DEFAULT_MAX_DISTANCE,
    normalize: bool = False,
    rm_unrelated: bool = True,
    k: int = DEFAULT_K_PATHS,
) -> RelationGraph:
    rows = prepare_relatedness(rows, normalize=normalize)
    g = inflate(rows, max_distance=max_distance)

    if rm_unrelated:
        removed = g.remove_disconnected()
        LOGGER.info("🧹  Removed %d disconnected nodes", len(removed))

    pruned = g.prune_to_shortest(k=k)
    LOGGER.info("✅  Pedigree: %d nodes, %d edges", len(pruned), pruned.number_of_edges())
    return pruned


def infer_pedigree(
    input_path=None,
    ml_relate_path=None,
    max_distance: int = DEFAULT_MAX_DISTANCE,
    normalize: bool = False,
    rm_unrelated: bool = True,
    k: int = DEFAULT_K_PATHS,
) -> Pedigree:
    if input_path is not None:
        rows = load_relatedness(input_path)
    elif ml_relate_path is not None:
        if max_distance > ML_RELATE_MAX_DISTANCE:
            LOGGER.warning("ML-Relate does not handle distance > %d, max_distance = %d has no effect",
                           ML_RELATE_MAX_DISTANCE, max_distance)
        rows = load_ml_relate(ml_relate_path)
    else:
        raise ValueError("One of input_path or ml_relate_path is required")

    pruned = build_pedigree(rows, max_distance=max_distance, normalize=normalize,
                            rm_unrelated=rm_unrelated, k=k)
    return emit_pedigree(pruned)
