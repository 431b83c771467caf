# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Symbol adapter backends."""

from recordshape.adapters.memory import InMemoryAdapter, accessor
from recordshape.adapters.python import PythonSymbolAdapter, RecordInterfaceDecl

__all__ = ["InMemoryAdapter", "PythonSymbolAdapter", "RecordInterfaceDecl", "accessor"]
