# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Assembly of the final record shape from walked components."""

import logging

from recordshape.diagnostics import DiagnosticCoordinator, InternalDerivationError
from recordshape.model import Component, DerivationOptions, Initializer, RecordShape
from recordshape.naming import NamingPolicy
from recordshape.symbols import InterfaceRef, SymbolAdapter

logger = logging.getLogger(__name__)

EMPTY_SHAPE_MESSAGE = "Annotated interface has no component methods"


class ShapeAssembler:
    """Build ``RecordShape`` values for successful derivations."""

    def __init__(
        self,
        adapter: SymbolAdapter,
        coordinator: DiagnosticCoordinator,
        naming_policy: NamingPolicy,
    ) -> None:
        self._adapter = adapter
        self._coordinator = coordinator
        self._naming_policy = naming_policy

    def assemble(
        self,
        root: InterfaceRef,
        components: list[Component],
        options: DerivationOptions,
        initializers: tuple[Initializer, ...] = (),
    ) -> RecordShape | None:
        """Assemble the record shape for ``root``.

        Args:
            root: Root interface of the derivation.
            components: Walked components in emission order.
            options: Per-derivation configuration.
            initializers: Resolved component initializers.

        Returns:
            The record shape, or ``None`` when the derivation failed or
            produced no components.

        Raises:
            InternalDerivationError: If a component breaks a shape invariant.
        """
        if self._coordinator.failed:
            return None
        if not components:
            self._coordinator.error("EMPTY_SHAPE", EMPTY_SHAPE_MESSAGE, root)
            return None
        self._check_components(components)

        type_parameters = tuple(self._adapter.type_parameters(root))
        name = self._naming_policy.record_name(root.qualified_name, type_parameters)
        builder_name = (
            self._naming_policy.builder_name(name) if options.add_builder else None
        )
        package_name = options.package_override or root.package_name
        logger.debug(
            f"Assembling record shape (interface={root.qualified_name} name={name} "
            f"package={package_name} components={len(components)})"
        )
        return RecordShape(
            interface_name=root.qualified_name,
            name=name,
            package_name=package_name,
            type_parameters=type_parameters,
            components=tuple(components),
            add_builder=options.add_builder,
            builder_name=builder_name,
            initializers=initializers,
        )

    def _check_components(self, components: list[Component]) -> None:
        seen: set[str] = set()
        for component in components:
            origin = component.origin_method
            if component.type.is_void():
                raise InternalDerivationError(
                    f"Internal error: component {component.name} has a void type",
                    origin,
                )
            if origin.parameters:
                raise InternalDerivationError(
                    f"Internal error: component {component.name} originates "
                    "from a method with parameters",
                    origin,
                )
            if component.name in seen:
                raise InternalDerivationError(
                    f"Internal error: duplicate component {component.name}", origin
                )
            seen.add(component.name)
