"""
Constraint Matrix R
===================

Linear system whose kernel holds the first-order moduli-preserving,
unitarity-preserving deformations of U.

DEFINITIONS:
    For every pair of rows (r, s), r < s, orthogonality of rows r and s
    reads  Σ_k U[r,k]·conj(U[s,k]) = 0.

    Perturb each entry by a phase, U[r,k] -> U[r,k]·exp(i·φ[r,k]).
    To first order the orthogonality condition becomes

        Σ_k U[r,k]·conj(U[s,k]) · (φ[r,k] - φ[s,k]) = 0

    which is one complex (= two real) linear equations in the N² unknowns φ.

    R stacks these equations: pair p -> rows 2p (Re) and 2p+1 (Im).

SHAPE:
    R: (2·tau, N²),  tau = N(N-1)/2

COLUMN MAPPING:
    φ[r, k]  ->  column (r mod N)·N + k

PROPERTY:
    The 2N-1 dephasing directions (row phases, column phases, minus the
    global phase counted twice) always lie in ker(R), so
        rank(R) <= N² - (2N-1) = (N-1)²
    and the defect d = (N-1)² - rank(R) is non-negative for exact input.

NOTE:
    No unitarity check is done here. A non-unitary U gives a well-defined
    but meaningless R.

REFERENCE: Tadej & Życzkowski, Linear Algebra Appl. 429, 447-481 (2008)
"""

import numpy as np
from typing import Iterator, Tuple


def n_pairs(N: int) -> int:
    """Number of unordered row pairs tau = N(N-1)/2."""
    return N * (N - 1) // 2


def row_pairs(N: int) -> Iterator[Tuple[int, int]]:
    """
    Enumerate row pairs (r, s), r < s, in row-major nested order.

    This order fixes the row layout of R and the column layout of T.
    """
    for r in range(N - 1):
        for s in range(r + 1, N):
            yield r, s


def column_index(r: int, k: int, N: int) -> int:
    """Flattened column of the unknown attached to entry (r, k) of U."""
    return (r % N) * N + k


def build_R(U: np.ndarray) -> np.ndarray:
    """
    Build constraint matrix R from U.

    DEFINITION:
        For pair index p of rows (r, s) and column k, with
        M = U[r,k]·conj(U[s,k]):

            R[2p,   col(r,k)] = +Re M      R[2p,   col(s,k)] = -Re M
            R[2p+1, col(r,k)] = +Im M      R[2p+1, col(s,k)] = -Im M

        All other entries are zero.

    Args:
        U: (N, N) complex matrix (not modified)

    Returns:
        R: (2·tau, N²) real matrix
    """
    U = np.asarray(U, dtype=complex)
    N = U.shape[0]
    R = np.zeros((2 * n_pairs(N), N * N))

    for p, (r, s) in enumerate(row_pairs(N)):
        t = 2 * p
        M = U[r, :] * np.conj(U[s, :])
        cols_r = column_index(r, 0, N) + np.arange(N)
        cols_s = column_index(s, 0, N) + np.arange(N)

        R[t, cols_r] = M.real
        R[t + 1, cols_r] = M.imag
        R[t, cols_s] = -M.real
        R[t + 1, cols_s] = -M.imag

    return R
