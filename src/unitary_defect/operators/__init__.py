"""Matrix builders - constraint matrix R, tangent image matrix T."""

from .constraint import (
    build_R,
    n_pairs,
    row_pairs,
    column_index,
)

from .tangent import (
    build_T,
)
