# test/test_orientation.py
import numpy as np
import pytest

from mat2nwb.core.orientation import (
    COLUMN_LAYOUT,
    ROW_LAYOUT,
    is_vector,
    n_samples,
    orient,
    to_time_first,
)


def test_column_vector_to_row_layout():
    v = np.arange(5.0).reshape(5, 1)
    out, notes = orient(v, ROW_LAYOUT)
    assert out.shape == (1, 5)
    assert np.array_equal(out.ravel(), v.ravel())
    assert notes


def test_row_vector_to_column_layout():
    v = np.arange(5.0).reshape(1, 5)
    out, notes = orient(v, COLUMN_LAYOUT)
    assert out.shape == (5, 1)
    assert notes


@pytest.mark.parametrize("layout", [ROW_LAYOUT, COLUMN_LAYOUT])
def test_orient_is_idempotent(layout):
    for a in (np.zeros((1, 8)), np.zeros((8, 1)), np.zeros((3, 10)), np.zeros((2, 9, 4))):
        once, _ = orient(a, layout)
        twice, _ = orient(once, layout)
        assert twice.shape == once.shape
        assert np.array_equal(twice, once)


def test_already_oriented_is_untouched():
    v = np.arange(4.0).reshape(1, 4)
    out, notes = orient(v, ROW_LAYOUT)
    assert out is v
    assert notes == []


def test_wide_matrix_transposed_for_column_layout():
    m = np.arange(30.0).reshape(3, 10)
    out, notes = orient(m, COLUMN_LAYOUT)
    assert out.shape == (10, 3)
    assert np.array_equal(out, m.T)
    assert any("transposed 2D" in n for n in notes)


def test_matrix_left_alone_in_row_layout():
    m = np.zeros((3, 10))
    out, notes = orient(m, ROW_LAYOUT)
    assert out.shape == (3, 10)
    assert any("multi-dimensional" in n for n in notes)


def test_nd_array_longest_dimension_moved_first():
    a = np.arange(2 * 9 * 4).reshape(2, 9, 4)
    out, notes = orient(a, COLUMN_LAYOUT)
    assert out.shape == (9, 2, 4)
    assert out.size == a.size
    assert np.array_equal(out, np.swapaxes(a, 0, 1))
    assert any("permuted 3D" in n for n in notes)


def test_one_dimensional_and_scalar_unchanged():
    a = np.arange(6.0)
    out, notes = orient(a, COLUMN_LAYOUT)
    assert out.shape == (6,)
    assert notes == []


def test_rejects_bad_axis():
    with pytest.raises(ValueError):
        orient(np.zeros((2, 2)), 2)


def test_to_time_first():
    assert to_time_first(np.zeros((1, 7)), ROW_LAYOUT).shape == (7,)
    assert to_time_first(np.zeros((7, 1)), COLUMN_LAYOUT).shape == (7,)
    assert to_time_first(np.zeros((3, 7)), ROW_LAYOUT).shape == (7, 3)
    assert to_time_first(np.zeros((7, 3)), COLUMN_LAYOUT).shape == (7, 3)
    assert to_time_first(np.float64(1.0), COLUMN_LAYOUT).shape == (1,)


def test_n_samples_and_is_vector():
    assert n_samples(np.zeros((1, 7)), ROW_LAYOUT) == 7
    assert n_samples(np.zeros((7, 3)), COLUMN_LAYOUT) == 7
    assert is_vector(np.zeros((1, 1)))
    assert not is_vector(np.zeros(4))
