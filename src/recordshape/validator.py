# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Structural validation of interface methods as record component candidates."""

from dataclasses import dataclass
from typing import Literal, TypeAlias

from recordshape.symbols import (
    IGNORE_DEFAULT,
    InterfaceRef,
    MethodRef,
    SymbolAdapter,
    TypeRef,
)

RejectKind = Literal["SIGNATURE", "GENERIC_METHOD"]

SIGNATURE_MESSAGE = (
    "Non-static, non-default methods must take no arguments and must return "
    "a value. Bad method: {iface}.{method}()"
)
GENERIC_METHOD_MESSAGE = (
    "Interface methods cannot have type parameters. Bad method: {iface}.{method}()"
)


@dataclass(frozen=True)
class Accept:
    """The method is a component candidate."""

    name: str
    type: TypeRef


@dataclass(frozen=True)
class Skip:
    """The method is deliberately ignored."""

    reason: Literal["static", "ignored_default"]


@dataclass(frozen=True)
class Reject:
    """The method violates the structural contract."""

    kind: RejectKind
    message: str


Verdict: TypeAlias = Accept | Skip | Reject


def validate_method(
    adapter: SymbolAdapter, method: MethodRef, declaring: InterfaceRef
) -> Verdict:
    """Classify one declared method.

    Checks run in a fixed order and the first match decides, so a method
    violating several rules yields exactly one rejection.

    Args:
        adapter: Adapter answering marker queries.
        method: Method under validation.
        declaring: Interface declaring ``method``; its simple name is used
            in rejection messages.

    Returns:
        ``Accept``, ``Skip`` or ``Reject``.
    """
    if method.is_static:
        return Skip(reason="static")
    if method.is_default and adapter.has_annotation(method, IGNORE_DEFAULT):
        return Skip(reason="ignored_default")
    if method.parameters or method.return_type.is_void():
        return Reject(
            kind="SIGNATURE",
            message=SIGNATURE_MESSAGE.format(
                iface=declaring.simple_name, method=method.name
            ),
        )
    if method.type_parameters:
        return Reject(
            kind="GENERIC_METHOD",
            message=GENERIC_METHOD_MESSAGE.format(
                iface=declaring.simple_name, method=method.name
            ),
        )
    return Accept(name=method.name, type=method.return_type)
