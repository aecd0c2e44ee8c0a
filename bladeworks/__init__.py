# Bladeworks: Clifford Algebra Table Engine (C) 2026 Eunkyum Kim
# Licensed under the Apache License, Version 2.0 | "Unbending" Paradigm

"""Clifford algebra table engine.

Provides algebras over an explicit ordered basis (optionally a change of
basis of a parent algebra), their Cayley, complement and metric tables, and
a sparse multivector type with the usual products.
"""

from .algebra import Algebra
from .multivector import Multivector
from .signature import BasisVector, Signature
from .basis import Basis, BasisBlade
from .tables import CayleyTable
from .duality import DualTable
from .validation import check_multivector, check_tensor
from .config import algebra_from_config, build_preset, load_presets
from .inspection import format_cayley_table, format_dual_table, format_metric, log_tables

from .errors import (
    BladeworksError,
    ConstructionError,
    ParseError,
    AlgebraicError,
    BladeLookupError,
)

__all__ = [
    # algebra
    "Algebra",
    "Multivector",
    "Signature",
    "BasisVector",
    "Basis",
    "BasisBlade",
    "CayleyTable",
    "DualTable",
    # validation
    "check_multivector",
    "check_tensor",
    # config
    "algebra_from_config",
    "build_preset",
    "load_presets",
    # inspection
    "format_cayley_table",
    "format_dual_table",
    "format_metric",
    "log_tables",
    # errors
    "BladeworksError",
    "ConstructionError",
    "ParseError",
    "AlgebraicError",
    "BladeLookupError",
]
