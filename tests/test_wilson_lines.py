from __future__ import annotations

import numpy as np
import pytest

from dipole_code.wilson_lines import (
    LatticeFileError, WilsonLineGrid, find_index, find_indices,
    hermitian_conjugate, load_wilson_lines, multiply, trace,
)
from conftest import lattice_line, random_unitary, write_lattice


def _random_complex(rng) -> np.ndarray:
    return rng.normal(size=(3, 3)) + 1j * rng.normal(size=(3, 3))


# ----------------------- colour-matrix algebra -----------------------

def test_multiply_matches_index_sum(rng):
    A, B = _random_complex(rng), _random_complex(rng)
    C = multiply(A, B)
    for i in range(3):
        for j in range(3):
            assert C[i, j] == pytest.approx(sum(A[i, k] * B[k, j] for k in range(3)))

def test_hermitian_conjugate_entries(rng):
    A = _random_complex(rng)
    Ad = hermitian_conjugate(A)
    for i in range(3):
        for j in range(3):
            assert Ad[i, j] == np.conj(A[j, i])

def test_operands_not_mutated(rng):
    A, B = _random_complex(rng), _random_complex(rng)
    A0, B0 = A.copy(), B.copy()
    multiply(A, B); hermitian_conjugate(A); trace(B)
    np.testing.assert_array_equal(A, A0)
    np.testing.assert_array_equal(B, B0)

def test_trace_of_conjugate_is_conjugate_of_trace(rng):
    for _ in range(20):
        M = _random_complex(rng)
        assert trace(hermitian_conjugate(M)) == pytest.approx(np.conj(trace(M)))

def test_trace_is_cyclic(rng):
    for _ in range(20):
        A, B = _random_complex(rng), _random_complex(rng)
        assert trace(multiply(A, B)) == pytest.approx(trace(multiply(B, A)))

def test_unitary_product_has_trace_three(rng):
    U = random_unitary(rng)
    assert trace(multiply(U, hermitian_conjugate(U))) == pytest.approx(3.0, abs=1e-12)


# ----------------------- nearest grid point -----------------------

def test_find_index_is_nearest(rng):
    coords = np.sort(rng.uniform(-5, 5, size=17))
    for q in rng.uniform(-8, 8, size=500):
        i = find_index(q, coords)
        assert np.all(abs(coords[i] - q) <= np.abs(coords - q))

def test_find_index_ties_go_low():
    coords = [0.0, 1.0, 2.0]
    assert find_index(0.5, coords) == 0
    assert find_index(1.5, coords) == 1

def test_find_index_clamps_out_of_range():
    coords = [0.0, 1.0, 2.0]
    assert find_index(-10.0, coords) == 0
    assert find_index(10.0, coords) == 2
    assert find_index(1.0, coords) == 1

def test_find_indices_matches_scalar(rng):
    coords = np.linspace(-3, 3, 13)
    q = np.concatenate([rng.uniform(-5, 5, size=200), coords, coords + 0.25])
    expected = [find_index(v, coords) for v in q]
    np.testing.assert_array_equal(find_indices(q, coords), expected)

def test_find_indices_single_point():
    np.testing.assert_array_equal(find_indices([-1.0, 0.0, 3.0], [0.5]), [0, 0, 0])


# ----------------------- lattice file -----------------------

def test_load_identity_lattice(identity_lattice):
    grid = load_wilson_lines(identity_lattice)
    assert grid.shape == (2, 2)
    np.testing.assert_array_equal(grid.x_coords, [0.0, 1.0])
    np.testing.assert_array_equal(grid.y_coords, [0.0, 1.0])
    for k in range(4):
        np.testing.assert_array_equal(grid.matrix(k), np.eye(3))

def test_load_keeps_row_major_entries(unitary_lattice):
    path, sites = unitary_lattice
    grid = load_wilson_lines(path)
    assert grid.shape == (4, 4)
    for k, (x, y, U) in enumerate(sites):
        np.testing.assert_array_equal(grid.matrix(k), U)
        np.testing.assert_array_equal(grid.wilson_line(x, y), U)
        assert grid.index(x, y) == k

def test_bounds_and_step(unitary_lattice):
    grid = load_wilson_lines(unitary_lattice[0])
    assert (grid.min_x, grid.max_x, grid.x_step) == (0.0, 3.0, 1.0)
    assert (grid.min_y, grid.max_y, grid.y_step) == (0.0, 3.0, 1.0)

def test_comments_and_short_lines_skipped(tmp_path):
    I = np.eye(3)
    text = ("# comment line\n"
            "\n"
            "   \n"
            "#0 0 this would not parse\n"
            + lattice_line(0.0, 0.0, I) + "\n"
            + "short\n"
            + lattice_line(0.0, 0.5, I) + "\n")
    path = tmp_path / "lat.dat"; path.write_text(text)
    grid = load_wilson_lines(path)
    assert grid.shape == (1, 2)

def test_missing_file(tmp_path):
    with pytest.raises(LatticeFileError):
        load_wilson_lines(tmp_path / "nope.dat")
    with pytest.raises(FileNotFoundError):
        load_wilson_lines(tmp_path / "nope.dat")

def test_malformed_line(tmp_path):
    path = tmp_path / "bad.dat"
    path.write_text("0.0 0.0 1.0 0.0 0.0 0.0 0.0 0.0\n")
    with pytest.raises(ValueError, match="expected 20"):
        load_wilson_lines(path)

def test_non_numeric_field(tmp_path):
    path = tmp_path / "bad.dat"
    path.write_text(lattice_line(0.0, 0.0, np.eye(3)).replace("1.0", "one", 1) + "\n")
    with pytest.raises(ValueError, match=r"bad\.dat:1"):
        load_wilson_lines(path)

def test_empty_file(tmp_path):
    path = tmp_path / "empty.dat"; path.write_text("# nothing here\n")
    with pytest.raises(ValueError, match="No Wilson lines"):
        load_wilson_lines(path)

def test_y_major_order_rejected(tmp_path):
    I = np.eye(3)
    path = write_lattice(tmp_path / "ymajor.dat",
                         [(0.0, 0.0, I), (1.0, 0.0, I), (0.0, 1.0, I), (1.0, 1.0, I)])
    with pytest.raises(ValueError, match="scan order"):
        load_wilson_lines(path)

def test_incomplete_grid_rejected(tmp_path):
    I = np.eye(3)
    path = write_lattice(tmp_path / "holes.dat",
                         [(0.0, 0.0, I), (0.0, 1.0, I), (1.0, 0.0, I)])
    with pytest.raises(ValueError, match="grid"):
        load_wilson_lines(path)

def test_grid_is_read_only(identity_lattice):
    grid = load_wilson_lines(identity_lattice)
    with pytest.raises(ValueError):
        grid.matrices[0, 0, 0] = 2.0
    with pytest.raises(ValueError):
        grid.x_coords[0] = 5.0

def test_grid_validates_shape():
    with pytest.raises(ValueError, match="matrices.shape"):
        WilsonLineGrid(np.array([0.0, 1.0]), np.array([0.0]), np.zeros((3, 3, 3)))
    with pytest.raises(ValueError, match="strictly increasing"):
        WilsonLineGrid(np.array([1.0, 0.0]), np.array([0.0]), np.zeros((2, 3, 3)))
