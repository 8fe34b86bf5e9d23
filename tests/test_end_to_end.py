from pathlib import Path

import networkx as nx
import pytest

from relped.main import main
from relped.model import infer_pedigree, load_ml_relate, load_relatedness
from .fixtures import ML_RELATE_CSV, PLAIN_CSV


def test_end_to_end(tmp_path: Path):
    src = tmp_path / "rel.csv"
    src.write_text(PLAIN_CSV)
    out = tmp_path / "pedigree.dot"

    assert main(["--input", str(src), "--output", str(out)]) == 0
    parsed = nx.nx_pydot.read_dot(out)
    # A–C через одного неизвестного, B–C не родственники
    assert {frozenset(e) for e in parsed.edges()} == {
        frozenset(("A", "B")),
        frozenset(("A", "Unknown1")),
        frozenset(("Unknown1", "C")),
    }


def test_ml_relate(tmp_path: Path):
    src = tmp_path / "ml.csv"
    src.write_text(ML_RELATE_CSV)

    rows = load_ml_relate(src)
    assert rows["distance"].tolist() == [1.0, 0.0, 2.0]

    ped = infer_pedigree(ml_relate_path=src, max_distance=3)
    pairs = {frozenset(e) for e in ped.edges}
    assert frozenset(("A", "B")) in pairs
    assert len(pairs) == 3
    assert "Unknown1" in ped.nodes


def test_bad_float_aborts_without_output(tmp_path: Path):
    src = tmp_path / "rel.csv"
    src.write_text("Indv1,Indv2,Relatedness\nA,B,half\n")
    out = tmp_path / "pedigree.dot"

    assert main(["--input", str(src), "--output", str(out)]) == 2
    assert not out.exists()


def test_malformed_tables(tmp_path: Path):
    wrong_cols = tmp_path / "cols.csv"
    wrong_cols.write_text("Indv1,Indv2\nA,B\n")
    with pytest.raises(ValueError):
        load_relatedness(wrong_cols)

    bad_code = tmp_path / "ml.csv"
    bad_code.write_text(ML_RELATE_CSV.replace("FS,-8.7", "XX,-8.7"))
    with pytest.raises(ValueError):
        load_ml_relate(bad_code)

    with pytest.raises(FileNotFoundError):
        load_relatedness(tmp_path / "missing.csv")


def test_non_finite_relatedness_is_rejected(tmp_path: Path):
    for bad in ("nan", "inf"):
        src = tmp_path / f"{bad}.csv"
        src.write_text(f"Indv1,Indv2,Relatedness\nA,B,0.5\nA,C,{bad}\n")
        with pytest.raises(ValueError):
            load_relatedness(src)


def test_unwritable_output(tmp_path: Path):
    src = tmp_path / "rel.csv"
    src.write_text(PLAIN_CSV)
    out = tmp_path / "missing_dir" / "pedigree.dot"

    assert main(["--input", str(src), "--output", str(out)]) == 2
    assert not out.exists()
