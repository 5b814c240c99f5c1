"""
Global constants for unitary_defect
===================================

All tolerances and defaults in ONE place.
"""

# Numerical tolerances
DEFAULT_SV_TOLERANCE = 1e-13   # Method 'S': singular values above this count as non-zero
EPS_UNITARY = 1e-8             # ||U U^† - I||_F above this -> U is not unitary

# NOTE: older documentation of the defect routine quoted 1e-12 as the default
# for method 'S'. The value actually used has always been 1e-13; we keep 1e-13.

# Method selectors
METHOD_RANK = "R"        # exact rank of constraint matrix R
METHOD_SVD = "S"         # singular values of R above DEFAULT_SV_TOLERANCE
METHOD_TANGENT = "T"     # rank of tangent-space image matrix T

METHODS = (METHOD_RANK, METHOD_SVD, METHOD_TANGENT)
DEFAULT_METHOD = METHOD_RANK

# Smallest admissible matrix size (formulas use N-1 row pairs)
MIN_N = 2

# =============================================================================
# MATRIX CONVENTIONS
# =============================================================================
#
# Row pairs (r, s), r < s, are enumerated row-major:
#   (0,1), (0,2), ..., (0,N-1), (1,2), ..., (N-2,N-1)
#   tau = N(N-1)/2 pairs in total.
#
# Flattened unknowns: entry (r, k) of U  ->  column  (r mod N)·N + k
#   i.e. block r of length N holds row r of U.
#
# CONSTRAINT MATRIX R: shape (2·tau, N²)
#   pair p contributes rows 2p (real part) and 2p+1 (imaginary part)
#
# TANGENT MATRIX T: shape (N², N(N-1))
#   columns 0 .. tau-1      antisymmetric real directions (A, 0)
#   columns tau .. 2tau-1   symmetric imaginary directions (0, S)
#
# DEFECT:
#   d(U) = (N-1)² - rank
#   (N-1)² is the dimension left after removing the 2N-1 dephasing freedoms.
#
# =============================================================================
