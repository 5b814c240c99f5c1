"""
Dephased Defect
===============

d(U) = (N-1)² - rank, computed three ways:

    'R'  exact rank of constraint matrix R        (operators/constraint.py)
    'S'  #singular values of R above sv_tolerance  (same R)
    'T'  exact rank of tangent image matrix T      (operators/tangent.py)

'R' and 'T' use numpy's default rank tolerance (σ_max · max(shape) · eps).
They are EXTREMELY sensitive to inexact input: replacing 1.000000 with
0.999998 in U gives an untrustworthy result. For approximate U use 'S'
with an explicit sv_tolerance.

This is in analysis/ layer because it depends on operators (R, T builders).

LOGGING:
    Progress messages go to logging.getLogger(__name__) at INFO level, or to
    the `logger` passed by the caller. Nothing here configures handlers.

REFERENCE: Tadej & Życzkowski, Linear Algebra Appl. 429, 447-481 (2008)
"""

import logging
import warnings
from typing import Any, Dict, Optional

import numpy as np

from ..constants import (
    DEFAULT_METHOD,
    DEFAULT_SV_TOLERANCE,
    EPS_UNITARY,
    METHOD_RANK,
    METHOD_SVD,
    METHOD_TANGENT,
)
from ..errors import IllConditionedWarning
from ..operators.constraint import build_R, n_pairs
from ..operators.tangent import build_T
from .validation import (
    check_unitary,
    normalize_sv_tolerance,
    validate_matrix,
    validate_method,
)


_LOG = logging.getLogger(__name__)


def _max_rank(N: int) -> int:
    """(N-1)²: rank bound once the 2N-1 dephasing freedoms are removed."""
    return (N - 1) ** 2


def _defect_from_rank(N: int, rank: int) -> int:
    d = _max_rank(N) - int(rank)
    if d < 0:
        # rank above (N-1)² is impossible for unitary U
        warnings.warn(
            f"Negative defect d={d} (rank={rank} > (N-1)²={_max_rank(N)}): "
            f"U is not unitary to working precision",
            IllConditionedWarning,
            stacklevel=3,
        )
    return d


# =============================================================================
# KERNELS
# =============================================================================

def _run_R(U: np.ndarray, log: logging.Logger) -> Dict[str, Any]:
    N = U.shape[0]
    log.info("Preparing matrix R...")
    R = build_R(U)
    log.info("Computing rank of R...")
    rank = int(np.linalg.matrix_rank(R))
    return {
        'matrix_shape': R.shape,
        'rank': rank,
        'defect': _defect_from_rank(N, rank),
        'singular_values': None,
    }


def _run_S(U: np.ndarray, sv_tolerance: float,
           log: logging.Logger) -> Dict[str, Any]:
    N = U.shape[0]
    log.info("Preparing matrix R...")
    R = build_R(U)
    log.info("Computing singular values of R...")
    sv = np.linalg.svd(R, compute_uv=False)

    # zero spectrum (U = I, permutation matrices): nothing discarded
    if sv.size and sv[0] > 0 and sv_tolerance >= sv[0]:
        warnings.warn(
            f"sv_tolerance={sv_tolerance:g} >= largest singular value {sv[0]:.3e}: "
            f"every singular value counted as zero",
            IllConditionedWarning,
            stacklevel=3,
        )

    rank = int(np.sum(sv > sv_tolerance))
    return {
        'matrix_shape': R.shape,
        'rank': rank,
        'defect': _defect_from_rank(N, rank),
        'singular_values': sv,
    }


def _run_T(U: np.ndarray, log: logging.Logger) -> Dict[str, Any]:
    N = U.shape[0]
    log.info("Computing dimension of the tangent space...")
    T = build_T(U)
    rank = int(np.linalg.matrix_rank(T))
    return {
        'matrix_shape': T.shape,
        'rank': rank,
        'defect': _defect_from_rank(N, rank),
        'singular_values': None,
    }


def defect_R(U: np.ndarray, logger: Optional[logging.Logger] = None) -> int:
    """
    Defect via exact rank of constraint matrix R.

    Args:
        U: (N, N) unitary matrix
        logger: optional logger for progress messages

    Returns:
        d = (N-1)² - rank(R)

    NOTE: No input validation. Use defect_u() for checked input.
    """
    U = np.asarray(U, dtype=complex)
    return _run_R(U, logger or _LOG)['defect']


def defect_S(U: np.ndarray, sv_tolerance: float = DEFAULT_SV_TOLERANCE,
             logger: Optional[logging.Logger] = None) -> int:
    """
    Defect via number of singular values of R above sv_tolerance.

    Generalizes defect_R by replacing numpy's implicit rank tolerance with an
    explicit one. Use for U known only to finite accuracy (e.g. found by
    numerical optimization).

    Args:
        U: (N, N) unitary matrix
        sv_tolerance: singular values > sv_tolerance count as non-zero
        logger: optional logger for progress messages

    Returns:
        d = (N-1)² - #{σ(R) > sv_tolerance}

    Raises:
        ToleranceDomainError: if sv_tolerance is <= 0, NaN or inf
    """
    U = np.asarray(U, dtype=complex)
    tol = normalize_sv_tolerance(sv_tolerance, stacklevel=3)
    return _run_S(U, tol, logger or _LOG)['defect']


def defect_T(U: np.ndarray, logger: Optional[logging.Logger] = None) -> int:
    """
    Defect via exact rank of tangent image matrix T.

    Returns:
        d = (N-1)² - rank(T)

    NOTE: Same sensitivity to inexact U as defect_R.
    """
    U = np.asarray(U, dtype=complex)
    return _run_T(U, logger or _LOG)['defect']


# =============================================================================
# DISPATCHER
# =============================================================================

def defect_report(U, method: str = DEFAULT_METHOD,
                  sv_tolerance: Optional[float] = None, *,
                  logger: Optional[logging.Logger] = None,
                  unitarity_tol: float = EPS_UNITARY,
                  strict: bool = False) -> Dict[str, Any]:
    """
    Validate input, compute defect with the selected method, return details.

    Args:
        U: (N, N) complex matrix, unitary to working precision
        method: 'R' (default), 'S' or 'T'
        sv_tolerance: method 'S' only (default DEFAULT_SV_TOLERANCE);
                      accepted and ignored for 'R' and 'T'
        logger: optional logger for progress messages
        unitarity_tol: allowed ||U U^† - I||_F
        strict: If True, non-unitary U raises NotUnitaryError.
                If False (default), it only emits NotUnitaryWarning.

    Returns:
        dict with N, method, n_pairs, matrix_shape, rank, max_rank, defect,
        unitarity_deviation, sv_tolerance, singular_values

    Raises:
        InvalidMethodError, ShapeMismatchError, ToleranceDomainError,
        NotUnitaryError (strict only), ValueError (NaN/inf in U)
    """
    return _report(U, method, sv_tolerance, logger, unitarity_tol, strict)


def _report(U, method, sv_tolerance, logger, unitarity_tol, strict,
            stacklevel: int = 4) -> Dict[str, Any]:
    # stacklevel 4: warn <- validation helper <- _report <- public function <- caller
    log = logger or _LOG
    method = validate_method(method)
    U = validate_matrix(U)
    N = U.shape[0]
    deviation = check_unitary(U, tol=unitarity_tol, strict=strict,
                              method=method, stacklevel=stacklevel)

    tol = None
    if method == METHOD_SVD:
        tol = normalize_sv_tolerance(sv_tolerance, stacklevel=stacklevel)
        log.info("Method: '%s' with sv_tolerance = %g", method, tol)
        result = _run_S(U, tol, log)
    else:
        log.info("Method: '%s'", method)
        if sv_tolerance is not None:
            log.debug("sv_tolerance=%r ignored for method '%s'", sv_tolerance, method)
        if method == METHOD_RANK:
            result = _run_R(U, log)
        else:
            result = _run_T(U, log)

    return {
        'N': N,
        'method': method,
        'n_pairs': n_pairs(N),
        'matrix_shape': result['matrix_shape'],
        'rank': result['rank'],
        'max_rank': _max_rank(N),
        'defect': result['defect'],
        'unitarity_deviation': deviation,
        'sv_tolerance': tol,
        'singular_values': result['singular_values'],
    }


def defect_u(U, method: str = DEFAULT_METHOD,
             sv_tolerance: Optional[float] = None, *,
             logger: Optional[logging.Logger] = None,
             unitarity_tol: float = EPS_UNITARY,
             strict: bool = False) -> int:
    """
    Dephased defect of a unitary (Hadamard) matrix U.

    Examples (F = Fourier matrix):
        defect_u(F)                 # method 'R'
        defect_u(F, 'S', 1e-10)     # custom sv_tolerance
        defect_u(F, 'S')            # sv_tolerance = 1e-13
        defect_u(F, 'T')
        defect_u(F, 'R', 1e-12)     # sv_tolerance ignored

    See defect_report() for arguments and errors.
    """
    return _report(U, method, sv_tolerance, logger,
                   unitarity_tol, strict)['defect']


def compare_methods(U, sv_tolerance: Optional[float] = None, *,
                    logger: Optional[logging.Logger] = None,
                    unitarity_tol: float = EPS_UNITARY,
                    strict: bool = False) -> Dict[str, Any]:
    """
    Compute defect with all three methods on the same U.

    Returns:
        dict with 'R', 'S', 'T' defects and 'agree' (all three equal)

    NOTE: Disagreement on supposedly exact U usually means U is only
    approximately unitary; trust 'S' with a tolerance above the noise.
    """
    log = logger or _LOG
    U = validate_matrix(U)
    check_unitary(U, tol=unitarity_tol, strict=strict, stacklevel=3)
    tol = normalize_sv_tolerance(sv_tolerance, stacklevel=3)

    d = {
        METHOD_RANK: _run_R(U, log)['defect'],
        METHOD_SVD: _run_S(U, tol, log)['defect'],
        METHOD_TANGENT: _run_T(U, log)['defect'],
    }
    d['agree'] = len({d[METHOD_RANK], d[METHOD_SVD], d[METHOD_TANGENT]}) == 1
    return d


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    print("=" * 60)
    print("DEPHASED DEFECT OF FOURIER MATRICES")
    print("=" * 60)

    for N in range(2, 9):
        j = np.arange(N)
        F = np.exp(2j * np.pi * np.outer(j, j) / N) / np.sqrt(N)
        result = compare_methods(F)
        print(f"N={N}: d_R={result['R']}, d_S={result['S']}, d_T={result['T']}, "
              f"agree={result['agree']}")
