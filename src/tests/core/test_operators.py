"""
Matrix Builder Tests
====================

Layout of constraint matrix R and tangent matrix T:
- shapes, pair ordering, column mapping
- zero pattern and block antisymmetry
- dephasing directions in ker(R)
- input is never modified

Run: python -m pytest tests/core/test_operators.py -v
"""

import numpy as np
import pytest

from scipy.linalg import dft, hadamard

from unitary_defect.operators import (
    build_R,
    build_T,
    n_pairs,
    row_pairs,
    column_index,
)


def random_complex(N, seed=0):
    rng = np.random.default_rng(seed)
    return rng.normal(size=(N, N)) + 1j * rng.normal(size=(N, N))


def random_unitary(N, seed=0):
    Q, _ = np.linalg.qr(random_complex(N, seed))
    return Q


# =============================================================================
# P1: Indexing helpers
# =============================================================================

@pytest.mark.parametrize("N,tau", [(2, 1), (3, 3), (4, 6), (7, 21)])
def test_n_pairs(N, tau):
    assert n_pairs(N) == tau


def test_row_pairs_order():
    """Pairs are enumerated row-major: (0,1), (0,2), ..., (N-2,N-1)."""
    assert list(row_pairs(4)) == [(0, 1), (0, 2), (0, 3), (1, 2), (1, 3), (2, 3)]
    assert len(list(row_pairs(6))) == n_pairs(6)


def test_column_index():
    """Entry (r, k) maps to column r·N + k."""
    N = 3
    cols = [column_index(r, k, N) for r in range(N) for k in range(N)]
    assert cols == list(range(N * N))


# =============================================================================
# P2: Constraint matrix R
# =============================================================================

def test_R_hadamard_2x2():
    """H₂: single pair, M = (1/2, -1/2), purely real."""
    H = hadamard(2) / np.sqrt(2)
    R = build_R(H)

    expected = np.array([
        [0.5, -0.5, -0.5, 0.5],
        [0.0, 0.0, 0.0, 0.0],
    ])
    assert R.shape == (2, 4)
    assert np.allclose(R, expected, atol=1e-15)


@pytest.mark.parametrize("N", [2, 3, 4, 5])
def test_R_shape(N):
    R = build_R(random_complex(N))
    assert R.shape == (2 * n_pairs(N), N * N)


def test_R_entrywise_definition():
    """Every entry of R matches the pairwise definition."""
    N = 4
    U = random_complex(N, seed=1)
    R = build_R(U)

    expected = np.zeros_like(R)
    t = 0
    for r in range(N - 1):
        for s in range(r + 1, N):
            for k in range(N):
                M = U[r, k] * np.conj(U[s, k])
                expected[t, column_index(r, k, N)] = M.real
                expected[t + 1, column_index(r, k, N)] = M.imag
                expected[t, column_index(s, k, N)] = -M.real
                expected[t + 1, column_index(s, k, N)] = -M.imag
            t += 2

    assert np.allclose(R, expected, rtol=0, atol=1e-13)


def test_R_zero_pattern():
    """Rows of pair (r, s) only touch blocks r and s."""
    N = 4
    R = build_R(random_complex(N, seed=2))

    for p, (r, s) in enumerate(row_pairs(N)):
        support = set(range(r * N, (r + 1) * N)) | set(range(s * N, (s + 1) * N))
        for t in (2 * p, 2 * p + 1):
            nonzero = set(np.flatnonzero(R[t]))
            assert nonzero <= support, f"Pair {(r, s)} row {t} leaks outside blocks {r}, {s}"


def test_R_rows_sum_to_zero():
    """Block r and block s of each row cancel: R·1 = 0 for any U."""
    R = build_R(random_complex(5, seed=3))
    assert np.allclose(R.sum(axis=1), 0, atol=1e-12)


def test_R_kernel_contains_dephasing():
    """Row phases and column phases lie in ker(R) for unitary U."""
    N = 5
    U = random_unitary(N, seed=4)
    R = build_R(U)

    for r in range(N):
        phi = np.zeros(N * N)
        phi[r * N:(r + 1) * N] = 1.0      # phase on row r
        assert np.allclose(R @ phi, 0, atol=1e-12), f"Row phase {r} not in ker(R)"

    for k in range(N):
        phi = np.zeros(N * N)
        phi[k::N] = 1.0                   # phase on column k
        assert np.allclose(R @ phi, 0, atol=1e-12), f"Column phase {k} not in ker(R)"


def test_R_rank_bound():
    """rank(R) <= (N-1)² for unitary U."""
    for N in (3, 4, 5):
        R = build_R(random_unitary(N, seed=N))
        assert np.linalg.matrix_rank(R) <= (N - 1) ** 2


# =============================================================================
# P3: Tangent matrix T
# =============================================================================

@pytest.mark.parametrize("N", [2, 3, 4, 5])
def test_T_shape(N):
    T = build_T(random_complex(N))
    assert T.shape == (N * N, N * (N - 1))


def test_T_hadamard_2x2():
    """H₂ is real: one non-zero (A, 0) column, (0, S) column vanishes."""
    H = hadamard(2) / np.sqrt(2)
    T = build_T(H)

    expected = np.array([
        [0.5, 0.0],
        [-0.5, 0.0],
        [-0.5, 0.0],
        [0.5, 0.0],
    ])
    assert np.allclose(T, expected, atol=1e-15)


def test_T_column_layout():
    """First tau columns are (A, 0) images, last tau are (0, S) images."""
    N = 4
    U = random_complex(N, seed=5)
    P, Q = U.real, U.imag
    T = build_T(U)
    tau = n_pairs(N)

    for p, (k, l) in enumerate(row_pairs(N)):
        a = P[k] * P[l] + Q[k] * Q[l]
        s = -P[k] * Q[l] + Q[k] * P[l]
        assert np.allclose(T[k * N:(k + 1) * N, p], a)
        assert np.allclose(T[l * N:(l + 1) * N, p], -a)
        assert np.allclose(T[k * N:(k + 1) * N, tau + p], s)
        assert np.allclose(T[l * N:(l + 1) * N, tau + p], -s)

        others = [r for r in range(N) if r not in (k, l)]
        for r in others:
            assert np.all(T[r * N:(r + 1) * N, p] == 0)
            assert np.all(T[r * N:(r + 1) * N, tau + p] == 0)


def test_T_real_input_kills_imaginary_directions():
    """For real U the (0, S) columns are identically zero."""
    N = 4
    T = build_T(random_unitary(N).real)
    tau = n_pairs(N)
    assert np.all(T[:, tau:] == 0)


def test_T_columns_sum_to_zero():
    """Block k and block l cancel in every column."""
    T = build_T(random_complex(5, seed=6))
    assert np.allclose(T.sum(axis=0), 0, atol=1e-12)


def test_T_matches_jacobian():
    """Columns of T are half the derivative of |U|² along (X + iY)·U."""
    N = 3
    U = random_unitary(N, seed=7)
    T = build_T(U)
    tau = n_pairs(N)

    for p, (k, l) in enumerate(row_pairs(N)):
        A = np.zeros((N, N))
        A[k, l], A[l, k] = 1.0, -1.0
        S = np.zeros((N, N))
        S[k, l] = S[l, k] = 1.0

        for col, G in ((p, A), (tau + p, 1j * S)):
            dU = G @ U
            dF = 2 * (U.conj() * dU).real
            assert np.allclose(T[:, col], 0.5 * dF.ravel(), atol=1e-12)


# =============================================================================
# P4: Input handling
# =============================================================================

def test_builders_do_not_modify_input():
    U = dft(4, scale='sqrtn')
    U_copy = U.copy()
    build_R(U)
    build_T(U)
    assert np.array_equal(U, U_copy)


def test_builders_accept_nested_lists():
    U = [[1, 1], [1, -1]]
    assert build_R(U).shape == (2, 4)
    assert build_T(U).shape == (4, 2)
