import numpy as np
import pytest

from relped.kinship import (
    clip_unrelated,
    encode_distances,
    ml_relate_to_distance,
    normalize,
    relatedness_to_distance,
)


def test_relatedness_to_distance():
    assert relatedness_to_distance(0.5) == (1, True)
    assert relatedness_to_distance(0.25) == (2, True)
    assert relatedness_to_distance(0.125) == (3, True)
    # шум оценок сглаживается округлением
    for r in (0.9, 0.3, 0.06, 0.01):
        d, rel = relatedness_to_distance(r)
        assert rel
        assert d == int(np.floor(np.log2(1 / r) + 0.5))


def test_unrelated():
    for r in (0.0, -0.01, -3.0):
        _, rel = relatedness_to_distance(r)
        assert not rel


def test_encode_distances():
    dists, related = encode_distances([0.5, 0.0, -1.0, 0.25])
    assert dists.tolist()[0] == 1 and dists.tolist()[3] == 2
    assert related.tolist() == [True, False, False, True]


def test_normalize_identity_inside_unit_interval():
    vals = np.array([0.1, 0.5, 0.9, 0.0, 1.0])
    assert np.allclose(normalize(vals), vals)


def test_normalize_rescales_out_of_range():
    vals = np.array([0.25, -0.5, 1.5])
    out = normalize(vals)
    assert np.isclose(out.min(), 0.0)
    assert np.isclose(out.max(), 1.0)
    assert np.isclose(out[0], 0.375)
    # порядок сохраняется
    assert np.array_equal(np.argsort(out), np.argsort(vals))


def test_clip_unrelated():
    assert clip_unrelated([-0.2, 0.3]).tolist() == [0.0, 0.3]


def test_ml_relate_codes():
    assert ml_relate_to_distance("PO") == 1
    assert ml_relate_to_distance("FS") == 2
    assert ml_relate_to_distance("HS") == 3
    assert ml_relate_to_distance("U") == 0
    with pytest.raises(ValueError):
        ml_relate_to_distance("GP")


def test_non_finite_is_unrelated():
    for r in (float("nan"), float("inf"), 1e-320):
        _, rel = relatedness_to_distance(r)
        assert not rel
