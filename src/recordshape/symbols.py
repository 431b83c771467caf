# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Symbol adapter contract and the handles it hands to the derivation engine."""

from dataclasses import dataclass
from typing import Literal, Protocol, TypeAlias


Severity = Literal["ERROR", "INTERNAL_ERROR"]

IGNORE_DEFAULT = "IGNORE_DEFAULT"
INITIALIZER = "INITIALIZER"


@dataclass(frozen=True)
class TypeRef:
    """Represent one type expression.

    Attributes:
        text: Rendered type expression.
        void: Whether the expression denotes "no value".
    """

    text: str
    void: bool = False

    def is_void(self) -> bool:
        return self.void

    def __str__(self) -> str:
        return self.text


VOID = TypeRef(text="None", void=True)


@dataclass(frozen=True)
class Parameter:
    """Represent one declared method parameter."""

    name: str
    type: TypeRef


@dataclass(frozen=True)
class Annotation:
    """Represent one marker attached to a method.

    Attributes:
        kind: Marker kind, e.g. ``IGNORE_DEFAULT``.
        value: Marker argument, if the marker takes one.
    """

    kind: str
    value: str | None = None


@dataclass(frozen=True)
class InterfaceRef:
    """Represent a handle to one interface declaration.

    Attributes:
        qualified_name: Distinguishing dotted name.
        simple_name: Unqualified declaration name.
        package_name: Namespace the declaration lives in.
        file_path: Source file path, when known.
        line: Declaration line (1-based), when known.
    """

    qualified_name: str
    simple_name: str
    package_name: str
    file_path: str | None = None
    line: int | None = None


@dataclass(frozen=True)
class MethodRef:
    """Represent a handle to one method declaration.

    Attributes:
        name: Simple method name.
        declaring_interface: Qualified name of the declaring interface.
        is_static: Whether the method is bound to the type rather than an instance.
        is_default: Whether the method carries an implementation.
        parameters: Declared parameters, receiver excluded.
        return_type: Declared return type.
        type_parameters: Method-level generic parameters.
        annotations: Markers attached to the method.
        file_path: Source file path, when known.
        line: Declaration line (1-based), when known.
    """

    name: str
    declaring_interface: str = ""
    is_static: bool = False
    is_default: bool = False
    parameters: tuple[Parameter, ...] = ()
    return_type: TypeRef = VOID
    type_parameters: tuple[TypeRef, ...] = ()
    annotations: tuple[Annotation, ...] = ()
    file_path: str | None = None
    line: int | None = None


@dataclass(frozen=True)
class FieldRef:
    """Represent a handle to one class-level member of an interface."""

    name: str
    type: TypeRef
    is_static: bool = True
    is_final: bool = True
    file_path: str | None = None
    line: int | None = None


PinSite: TypeAlias = InterfaceRef | MethodRef


@dataclass(frozen=True)
class Report:
    """Represent one diagnostic as received by an adapter."""

    severity: Severity
    message: str
    pin_site: PinSite


class SymbolAdapter(Protocol):
    """Read-through view of interface declarations for the derivation engine."""

    def direct_supertypes(self, iface: InterfaceRef) -> list[InterfaceRef]:
        """Return direct supertypes in declaration order."""

    def declared_methods(self, iface: InterfaceRef) -> list[MethodRef]:
        """Return declared, non-synthetic methods in declaration order."""

    def declared_fields(self, iface: InterfaceRef) -> list[FieldRef]:
        """Return declared class-level members in declaration order."""

    def qualified_name(self, iface: InterfaceRef) -> str:
        """Return the distinguishing name of ``iface``."""

    def type_parameters(self, iface: InterfaceRef) -> list[TypeRef]:
        """Return the formal generic parameters of ``iface`` in order."""

    def has_annotation(self, method: MethodRef, kind: str) -> bool:
        """Return whether ``method`` carries a marker of ``kind``."""

    def annotation_value(self, method: MethodRef, kind: str) -> str | None:
        """Return the argument of the ``kind`` marker on ``method``, if any."""

    def report(self, severity: Severity, message: str, pin_site: PinSite) -> None:
        """Record one diagnostic against ``pin_site``."""
