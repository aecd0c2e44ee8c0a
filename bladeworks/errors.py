# Bladeworks: Clifford Algebra Table Engine (C) 2026 Eunkyum Kim
# Licensed under the Apache License, Version 2.0 | "Unbending" Paradigm

"""Exception taxonomy for algebra construction and evaluation.

Each error also derives from the closest builtin so callers that only
know about ``ValueError`` / ``LookupError`` / ``ArithmeticError`` still
catch them.
"""


class BladeworksError(Exception):
    """Base class for every error raised by the kernel."""


class ConstructionError(BladeworksError, ValueError):
    """Invalid signature, basis spec, parent or transform.

    Raised from :class:`~bladeworks.algebra.Algebra` construction; no
    partially built algebra is ever returned.
    """


class ParseError(BladeworksError, ValueError):
    """A blade label cannot be decomposed into known subscripts."""


class AlgebraicError(BladeworksError, ArithmeticError):
    """Operation undefined for the operand (zero norm, bad grade)."""


class BladeLookupError(BladeworksError, LookupError):
    """Reference to a blade label the algebra does not define."""
