# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Resolution of component initializers declared with the ``initializer`` marker."""

import logging

from recordshape.diagnostics import DiagnosticCoordinator
from recordshape.model import Component, Initializer
from recordshape.symbols import INITIALIZER, FieldRef, MethodRef, SymbolAdapter

logger = logging.getLogger(__name__)

MISSING_INITIALIZER_MESSAGE = (
    "No matching public static field or method found for initializer named: {name}"
)


class InitializerDetector:
    """Match ``initializer`` markers to static members of the declaring interface."""

    def __init__(
        self, adapter: SymbolAdapter, coordinator: DiagnosticCoordinator
    ) -> None:
        self._adapter = adapter
        self._coordinator = coordinator

    def detect(self, components: list[Component]) -> tuple[Initializer, ...]:
        """Resolve initializers for the given components.

        Methods of the declaring interface are scanned before its fields; the
        first matching member wins. A component whose marker matches nothing
        gets exactly one error.

        Args:
            components: Walked components.

        Returns:
            Resolved initializers, in component order.
        """
        initializers: list[Initializer] = []
        for component in components:
            name = self._adapter.annotation_value(component.origin_method, INITIALIZER)
            if name is None:
                continue
            expression = self._resolve(component=component, name=name)
            if expression is None:
                logger.warning(
                    f"Initializer not found (component={component.name} "
                    f"initializer={name} interface={component.declared_in.qualified_name})"
                )
                self._coordinator.error(
                    "INITIALIZER",
                    MISSING_INITIALIZER_MESSAGE.format(name=name),
                    component.origin_method,
                )
                continue
            initializers.append(
                Initializer(component=component.name, expression=expression)
            )
        return tuple(initializers)

    def _resolve(self, component: Component, name: str) -> str | None:
        iface = component.declared_in
        for method in self._adapter.declared_methods(iface):
            if method.name == name and _is_valid_method(method, component):
                return f"{iface.simple_name}.{name}()"
        for declared_field in self._adapter.declared_fields(iface):
            if declared_field.name == name and _is_valid_field(
                declared_field, component
            ):
                return f"{iface.simple_name}.{name}"
        return None


def _is_valid_method(method: MethodRef, component: Component) -> bool:
    if method.name.startswith("_") or not method.is_static or method.parameters:
        return False
    return method.return_type == component.type


def _is_valid_field(declared_field: FieldRef, component: Component) -> bool:
    if declared_field.name.startswith("_"):
        return False
    if not (declared_field.is_static and declared_field.is_final):
        return False
    return declared_field.type == component.type
