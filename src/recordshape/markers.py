# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Runtime markers recognized by the Python source adapter."""

from dataclasses import dataclass
from typing import Callable, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class RecordInterfaceSettings:
    """Describe the options attached by ``record_interface``."""

    add_builder: bool = True
    package: str | None = None


def record_interface(
    cls: type | None = None,
    *,
    add_builder: bool = True,
    package: str | None = None,
):
    """Mark a protocol class as the root of a record shape derivation.

    Usable bare (``@record_interface``) or with arguments
    (``@record_interface(add_builder=False)``).

    Args:
        cls: Decorated class when used bare.
        add_builder: Whether the derived record wants a builder companion.
        package: Namespace override for the derived record.
    """
    settings = RecordInterfaceSettings(add_builder=add_builder, package=package)

    def decorate(target: type) -> type:
        target.__record_interface__ = settings
        return target

    if cls is not None:
        return decorate(cls)
    return decorate


def ignore_default(method: T) -> T:
    """Exclude a default (implemented) accessor from the derived components."""
    method.__ignore_default__ = True
    return method


def initializer(name: str) -> Callable[[T], T]:
    """Name a public static member supplying the component's initial value."""

    def decorate(method: T) -> T:
        method.__record_initializer__ = name
        return method

    return decorate
