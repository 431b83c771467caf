# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Naming policies for derived records and their builders."""

from collections.abc import Sequence
from typing import Protocol

from recordshape.symbols import TypeRef


class NamingPolicy(Protocol):
    """Choose names for the derived record and its builder."""

    def record_name(
        self, qualified_name: str, type_parameters: Sequence[TypeRef]
    ) -> str:
        """Return the record name for a root interface."""

    def builder_name(self, record_name: str) -> str:
        """Return the builder name for a record."""


class SuffixNamingPolicy:
    """Append configurable suffixes to the interface and record names."""

    def __init__(
        self, interface_suffix: str = "Record", builder_suffix: str = "Builder"
    ) -> None:
        self._interface_suffix = interface_suffix
        self._builder_suffix = builder_suffix

    def record_name(
        self, qualified_name: str, type_parameters: Sequence[TypeRef]
    ) -> str:
        simple_name = qualified_name.rpartition(".")[2]
        return f"{simple_name}{self._interface_suffix}"

    def builder_name(self, record_name: str) -> str:
        return f"{record_name}{self._builder_suffix}"
