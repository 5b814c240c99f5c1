"""
UNITARY_DEFECT - Dephased defect of unitary (Hadamard) matrices
===============================================================

Structure:
    operators/  - Matrix builders (constraint matrix R, tangent matrix T)
    analysis/   - Rank / singular value computation, dispatcher, validation
    constants   - Tolerances and defaults
    errors      - Exception and warning taxonomy

Usage:
    >>> from unitary_defect import defect_u
    >>> defect_u(F)              # method 'R'
    >>> defect_u(F, 'S', 1e-10)  # approximate input
    >>> defect_u(F, 'T')

Requirements:
    Python >= 3.9
    numpy >= 1.20

REFERENCE: Tadej & Życzkowski, Linear Algebra Appl. 429, 447-481 (2008)
"""

import sys

# Python version check
if sys.version_info < (3, 9):
    raise ImportError(f"unitary_defect requires Python >= 3.9, got {sys.version}")

# numpy version check
import numpy as np
_numpy_version = tuple(int(p) for p in np.__version__.split('.')[:2] if p.isdigit())
if _numpy_version < (1, 20):
    raise ImportError(f"unitary_defect requires numpy >= 1.20, got {np.__version__}")

from . import analysis
from . import operators

from .analysis import (
    defect_u,
    defect_report,
    compare_methods,
    defect_R,
    defect_S,
    defect_T,
    unitarity_deviation,
)
from .operators import (
    build_R,
    build_T,
    n_pairs,
    row_pairs,
    column_index,
)
from .constants import (
    DEFAULT_METHOD,
    DEFAULT_SV_TOLERANCE,
    EPS_UNITARY,
    METHODS,
)
from .errors import (
    DefectError,
    InvalidMethodError,
    ShapeMismatchError,
    ToleranceDomainError,
    NotUnitaryError,
    NotUnitaryWarning,
    IllConditionedWarning,
)

__version__ = "0.1.0"
