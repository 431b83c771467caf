# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""In-memory symbol adapter for tests and embedding."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, replace

from recordshape.symbols import (
    Annotation,
    FieldRef,
    InterfaceRef,
    MethodRef,
    Parameter,
    PinSite,
    Report,
    Severity,
    TypeRef,
    VOID,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _InterfaceEntry:
    ref: InterfaceRef
    extends: tuple[str, ...]
    type_parameters: tuple[TypeRef, ...]
    methods: tuple[MethodRef, ...]
    fields: tuple[FieldRef, ...]


def type_ref(text: str | None) -> TypeRef:
    """Build a type handle; ``None`` and ``"None"`` denote void."""
    if text is None or text == "None":
        return VOID
    return TypeRef(text=text)


def accessor(
    name: str,
    returns: str | None = "int",
    *,
    params: Iterable[tuple[str, str]] = (),
    static: bool = False,
    default: bool = False,
    type_parameters: Iterable[str] = (),
    annotations: Iterable[Annotation] = (),
) -> MethodRef:
    """Build a method handle for ``InMemoryAdapter.add_interface``.

    Args:
        name: Method name.
        returns: Return type text; ``None`` for void.
        params: ``(name, type)`` pairs.
        static: Whether the method is static.
        default: Whether the method carries an implementation.
        type_parameters: Method-level generic parameter names.
        annotations: Markers attached to the method.

    Returns:
        Method handle without a declaring interface.
    """
    return MethodRef(
        name=name,
        is_static=static,
        is_default=default,
        parameters=tuple(
            Parameter(name=param_name, type=type_ref(param_type))
            for param_name, param_type in params
        ),
        return_type=type_ref(returns),
        type_parameters=tuple(TypeRef(text=param) for param in type_parameters),
        annotations=tuple(annotations),
    )


class InMemoryAdapter:
    """Serve interface declarations registered in memory."""

    def __init__(self) -> None:
        self._entries: dict[str, _InterfaceEntry] = {}
        self.reports: list[Report] = []

    def add_interface(
        self,
        qualified_name: str,
        *,
        extends: Iterable[str] = (),
        type_parameters: Iterable[str] = (),
        methods: Iterable[MethodRef] = (),
        fields: Iterable[FieldRef] = (),
        package_name: str | None = None,
    ) -> InterfaceRef:
        """Register one interface.

        Args:
            qualified_name: Dotted interface name.
            extends: Qualified names of direct supertypes, resolved lazily.
            type_parameters: Generic parameter names.
            methods: Declared methods in declaration order.
            fields: Declared class-level members.
            package_name: Namespace; defaults to the qualified name's prefix.

        Returns:
            The registered interface handle.
        """
        prefix, _, simple_name = qualified_name.rpartition(".")
        ref = InterfaceRef(
            qualified_name=qualified_name,
            simple_name=simple_name,
            package_name=prefix if package_name is None else package_name,
        )
        self._entries[qualified_name] = _InterfaceEntry(
            ref=ref,
            extends=tuple(extends),
            type_parameters=tuple(TypeRef(text=param) for param in type_parameters),
            methods=tuple(
                replace(method, declaring_interface=qualified_name)
                for method in methods
            ),
            fields=tuple(fields),
        )
        return ref

    def interface(self, qualified_name: str) -> InterfaceRef:
        return self._entries[qualified_name].ref

    def direct_supertypes(self, iface: InterfaceRef) -> list[InterfaceRef]:
        entry = self._entries[iface.qualified_name]
        supertypes: list[InterfaceRef] = []
        for name in entry.extends:
            found = self._entries.get(name)
            if found is None:
                logger.warning(
                    f"Unregistered supertype skipped (interface={iface.qualified_name} "
                    f"base={name})"
                )
                continue
            supertypes.append(found.ref)
        return supertypes

    def declared_methods(self, iface: InterfaceRef) -> list[MethodRef]:
        return list(self._entries[iface.qualified_name].methods)

    def declared_fields(self, iface: InterfaceRef) -> list[FieldRef]:
        return list(self._entries[iface.qualified_name].fields)

    def qualified_name(self, iface: InterfaceRef) -> str:
        return iface.qualified_name

    def type_parameters(self, iface: InterfaceRef) -> list[TypeRef]:
        return list(self._entries[iface.qualified_name].type_parameters)

    def has_annotation(self, method: MethodRef, kind: str) -> bool:
        return any(annotation.kind == kind for annotation in method.annotations)

    def annotation_value(self, method: MethodRef, kind: str) -> str | None:
        for annotation in method.annotations:
            if annotation.kind == kind:
                return annotation.value
        return None

    def report(self, severity: Severity, message: str, pin_site: PinSite) -> None:
        logger.debug(f"Diagnostic recorded (severity={severity} message={message})")
        self.reports.append(
            Report(severity=severity, message=message, pin_site=pin_site)
        )
