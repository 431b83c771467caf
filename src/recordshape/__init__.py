# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Public import surface for record shape derivation."""

from recordshape.diagnostics import Diagnostic, DiagnosticCoordinator
from recordshape.engine import derive_record_shape
from recordshape.model import Component, DerivationOptions, Initializer, RecordShape
from recordshape.naming import NamingPolicy, SuffixNamingPolicy
from recordshape.symbols import (
    IGNORE_DEFAULT,
    INITIALIZER,
    InterfaceRef,
    MethodRef,
    SymbolAdapter,
    TypeRef,
)

__all__ = [
    "IGNORE_DEFAULT",
    "INITIALIZER",
    "Component",
    "DerivationOptions",
    "Diagnostic",
    "DiagnosticCoordinator",
    "Initializer",
    "InterfaceRef",
    "MethodRef",
    "NamingPolicy",
    "RecordShape",
    "SuffixNamingPolicy",
    "SymbolAdapter",
    "TypeRef",
    "derive_record_shape",
]
