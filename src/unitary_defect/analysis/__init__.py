"""Defect computation - rank of R, singular values of R, rank of T."""

from .defect import (
    defect_u,
    defect_report,
    compare_methods,
    defect_R,
    defect_S,
    defect_T,
)

from .validation import (
    validate_method,
    validate_matrix,
    unitarity_deviation,
    check_unitary,
    normalize_sv_tolerance,
)
