"""
Input Validation
================

Fail-fast checks run by the dispatcher before any matrix is built.

The builders in operators/ trust their input. Everything a caller can get
wrong (method name, shape, tolerance, unitarity) is checked here once.
"""

import numbers
import warnings
from typing import Optional

import numpy as np

from ..constants import (
    DEFAULT_METHOD,
    DEFAULT_SV_TOLERANCE,
    EPS_UNITARY,
    METHOD_SVD,
    METHODS,
    MIN_N,
)
from ..errors import (
    InvalidMethodError,
    NotUnitaryError,
    NotUnitaryWarning,
    ShapeMismatchError,
    ToleranceDomainError,
)


def validate_method(method) -> str:
    """
    Normalize method selector to one of METHODS.

    None -> DEFAULT_METHOD. Matching is exact: "r" is rejected.

    Raises:
        InvalidMethodError: if method is not 'R', 'S' or 'T'
    """
    if method is None:
        return DEFAULT_METHOD
    if isinstance(method, str) and method in METHODS:
        return method
    raise InvalidMethodError(
        f"METHOD not implemented: {method!r} (expected one of {', '.join(METHODS)})"
    )


def validate_matrix(U) -> np.ndarray:
    """
    Convert U to a complex (N, N) array and check its shape.

    Returns:
        complex ndarray (a copy only if a dtype conversion was needed)

    Raises:
        ShapeMismatchError: if U is not 2-D, not square, or N < MIN_N
        ValueError: if U contains NaN or inf
    """
    U = np.asarray(U, dtype=complex)

    if U.ndim != 2:
        raise ShapeMismatchError(f"U must be a 2-D matrix, got {U.ndim}-D array of shape {U.shape}")
    if U.shape[0] != U.shape[1]:
        raise ShapeMismatchError(f"U must be square, got shape {U.shape}")
    if U.shape[0] < MIN_N:
        raise ShapeMismatchError(f"Defect requires N >= {MIN_N}, got N={U.shape[0]}")
    if not np.all(np.isfinite(U)):
        raise ValueError("U contains NaN or inf entries")

    return U


def unitarity_deviation(U) -> float:
    """Frobenius norm ||U U^† - I||_F."""
    U = np.asarray(U, dtype=complex)
    N = U.shape[0]
    return float(np.linalg.norm(U @ U.conj().T - np.eye(N), ord='fro'))


def check_unitary(U: np.ndarray, tol: float = EPS_UNITARY,
                  strict: bool = False, method: Optional[str] = None,
                  stacklevel: int = 2) -> float:
    """
    Measure how far U is from unitary.

    Args:
        U: (N, N) complex matrix
        tol: allowed ||U U^† - I||_F
        strict: If True, raise on violation. If False (default), only warn.
        method: selected method, only used to word the message
        stacklevel: passed to warnings.warn (2 = caller of check_unitary)

    Returns:
        deviation ||U U^† - I||_F

    WARNING:
        Methods 'R' and 'T' use an implicit, machine-precision rank
        tolerance. For approximately unitary U their result is
        untrustworthy; use method 'S' with an explicit sv_tolerance.
    """
    deviation = unitarity_deviation(U)
    if deviation > tol:
        msg = f"U is not unitary: ||U U^† - I||_F = {deviation:.3e} > {tol:.1e}. "
        if method == METHOD_SVD:
            msg += "Choose sv_tolerance above the noise level of U."
        else:
            msg += "Use method 'S' with a suitable sv_tolerance for approximate input."
        if strict:
            raise NotUnitaryError(msg)
        warnings.warn(msg, NotUnitaryWarning, stacklevel=stacklevel)
    return deviation


def normalize_sv_tolerance(sv_tolerance, stacklevel: int = 2) -> float:
    """
    Resolve the singular value tolerance for method 'S'.

    None -> DEFAULT_SV_TOLERANCE.
    Non-numeric (str, bool, ...) -> DEFAULT_SV_TOLERANCE with a UserWarning.

    Raises:
        ToleranceDomainError: if tolerance is <= 0, NaN or inf
    """
    if sv_tolerance is None:
        return DEFAULT_SV_TOLERANCE

    if isinstance(sv_tolerance, bool) or not isinstance(sv_tolerance, numbers.Real):
        warnings.warn(
            f"sv_tolerance={sv_tolerance!r} is not numeric, "
            f"using default {DEFAULT_SV_TOLERANCE:g}",
            UserWarning,
            stacklevel=stacklevel,
        )
        return DEFAULT_SV_TOLERANCE

    tol = float(sv_tolerance)
    if not np.isfinite(tol) or tol <= 0:
        raise ToleranceDomainError(f"sv_tolerance must be a positive finite number, got {sv_tolerance!r}")
    return tol
