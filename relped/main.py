#!/usr/bin/env python3
"""
CLI‑обёртка: таблица родства → pedigree.dot.

Примеры:
    python -m relped.main --input relatedness.csv --output pedigree.dot
    python -m relped.main --ml-relate mlrelate.csv --max-distance 3 --output ped.dot
"""
from __future__ import annotations
import argparse
import sys

from .graph import DEFAULT_K_PATHS
from .model import DEFAULT_MAX_DISTANCE, LOGGER, infer_pedigree


def _parse(argv=None):
    p = argparse.ArgumentParser("relped")
    src = p.add_mutually_exclusive_group(required=True)
    src.add_argument("--input", help="CSV: Indv1, Indv2, Relatedness (с заголовком)")
    src.add_argument("--ml-relate", help="выгрузка ML-Relate (10 колонок)")
    p.add_argument("--output", required=True, help="куда записать DOT")
    p.add_argument("--normalize", action="store_true",
                   help="привести родство к [0, 1]")
    p.add_argument("--rm-unrelated", action=argparse.BooleanOptionalAction, default=True,
                   help="убрать особей без родственников")
    p.add_argument("--max-distance", type=int, default=DEFAULT_MAX_DISTANCE,
                   help="максимальная учитываемая дистанция")
    p.add_argument("--k-paths", type=int, default=DEFAULT_K_PATHS,
                   help="сколько кратчайших путей оставлять на пару")

    args = p.parse_args(argv)
    if args.max_distance < 1:
        p.error("--max-distance must be positive")
    if args.k_paths < 1:
        p.error("--k-paths must be positive")
    return args


def main(argv=None) -> int:
    args = _parse(argv)

    try:
        ped = infer_pedigree(
            input_path=args.input,
            ml_relate_path=args.ml_relate,
            max_distance=args.max_distance,
            normalize=args.normalize,
            rm_unrelated=args.rm_unrelated,
            k=args.k_paths,
        )
        ped.write_dot(args.output)
    except (ValueError, OSError) as exc:
        LOGGER.error("%s", exc)
        return 2

    print(f"✅  Saved {len(ped.nodes)} nodes, {len(ped.edges)} edges → {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
