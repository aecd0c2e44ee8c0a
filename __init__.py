"""Bladeworks: Clifford algebra Cayley, complement and metric tables on PyTorch."""

__version__ = "0.1.0"

from bladeworks.algebra import Algebra
from bladeworks.multivector import Multivector
from bladeworks.config import build_preset

__all__ = [
    "__version__",
    "Algebra",
    "Multivector",
    "build_preset",
]
