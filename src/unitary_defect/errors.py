"""Exceptions and warnings raised by the defect routines."""


class DefectError(Exception):
    """Base class for all unitary_defect errors."""


class InvalidMethodError(DefectError, ValueError):
    """Method selector is not one of 'R', 'S', 'T'."""


class ShapeMismatchError(DefectError, ValueError):
    """U is not a square 2-D matrix of size N >= 2."""


class ToleranceDomainError(DefectError, ValueError):
    """Singular value tolerance is not a positive finite number."""


class NotUnitaryError(DefectError, ValueError):
    """U deviates from unitarity by more than the allowed tolerance (strict mode)."""


class NotUnitaryWarning(UserWarning):
    """U deviates from unitarity; methods 'R' and 'T' become untrustworthy."""


class IllConditionedWarning(UserWarning):
    """Rank computation gave a result that cannot hold for exact input."""
