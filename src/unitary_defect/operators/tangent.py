"""
Tangent Space Image Matrix T
============================

Image of tangent vectors to the unitary group at U under the Jacobian of
the squared-moduli map.

DEFINITIONS:
    Write U = P + iQ (P, Q real). The squared-moduli map is

        F : (P, Q) -> P∘P + Q∘Q        (entrywise, R^(2N²) -> R^(N²))

    Tangent vectors at U are (X + iY)·U with X real antisymmetric and
    Y real symmetric. Diagonal Y only rotates row phases and maps to zero,
    so the basis used here is, for each pair (k, l), k < l:

        (A, 0):  A[k,l] = 1, A[l,k] = -1          antisymmetric real part
        (0, S):  S[k,l] = S[l,k] = 1              symmetric imaginary part

    Their images under DF (up to the common factor 2) only touch rows k, l:

        (A, 0):  block k =  P[k]∘P[l] + Q[k]∘Q[l],   block l = -block k
        (0, S):  block k = -P[k]∘Q[l] + Q[k]∘P[l],   block l = -block k

    block r = entries r·N ... r·N + N-1 of the length-N² column.

SHAPE:
    T: (N², N(N-1))
    columns 0..tau-1 are (A, 0) images, tau..2tau-1 are (0, S) images,
    both in row_pairs() order.

PROPERTY:
    rank(T) = dimension of the image of the tangent space, so
    d = (N-1)² - rank(T) agrees with the constraint-matrix defect for
    exactly unitary U.
"""

import numpy as np

from .constraint import n_pairs, row_pairs


def _pair_column(N: int, k: int, l: int, block: np.ndarray) -> np.ndarray:
    """Length-N² column with `block` at block k and `-block` at block l."""
    V = np.zeros(N * N)
    V[k * N:(k + 1) * N] = block
    V[l * N:(l + 1) * N] = -block
    return V


def build_T(U: np.ndarray) -> np.ndarray:
    """
    Build tangent image matrix T from U.

    Args:
        U: (N, N) complex matrix (not modified)

    Returns:
        T: (N², N(N-1)) real matrix
    """
    U = np.asarray(U, dtype=complex)
    N = U.shape[0]
    P = U.real
    Q = U.imag
    tau = n_pairs(N)
    T = np.zeros((N * N, 2 * tau))

    for p, (k, l) in enumerate(row_pairs(N)):
        # (A, 0): antisymmetric real part
        T[:, p] = _pair_column(N, k, l, P[k] * P[l] + Q[k] * Q[l])
        # (0, S): symmetric imaginary part
        T[:, tau + p] = _pair_column(N, k, l, -P[k] * Q[l] + Q[k] * P[l])

    return T
