# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Domain models for derived record shapes."""

from dataclasses import dataclass

from recordshape.symbols import InterfaceRef, MethodRef, TypeRef


@dataclass(frozen=True)
class Component:
    """Represent one validated record component.

    Attributes:
        name: Component name, taken verbatim from the origin method.
        type: Component type; never void.
        origin_method: Nullary accessor the component was derived from.
        declared_in: Interface that declares ``origin_method``.
    """

    name: str
    type: TypeRef
    origin_method: MethodRef
    declared_in: InterfaceRef


@dataclass(frozen=True)
class Initializer:
    """Represent the initial-value expression for one component."""

    component: str
    expression: str


@dataclass(frozen=True)
class RecordShape:
    """Represent the ordered, typed field list of a derived record.

    Attributes:
        interface_name: Qualified name of the root interface.
        name: Record name chosen by the naming policy.
        package_name: Namespace the record belongs to.
        type_parameters: Root interface generic parameters, in order.
        components: Components in emission order.
        add_builder: Whether a builder companion is wanted.
        builder_name: Builder name hint; ``None`` when ``add_builder`` is false.
        initializers: Resolved component initializers.
    """

    interface_name: str
    name: str
    package_name: str
    type_parameters: tuple[TypeRef, ...]
    components: tuple[Component, ...]
    add_builder: bool
    builder_name: str | None
    initializers: tuple[Initializer, ...] = ()

    def component_names(self) -> list[str]:
        return [component.name for component in self.components]


@dataclass(frozen=True)
class DerivationOptions:
    """Describe per-derivation configuration.

    Attributes:
        add_builder: Mark the shape as wanting a builder companion.
        package_override: Record namespace; defaults to the root's namespace.
        interface_suffix: Suffix appended to the interface name for the record.
        builder_suffix: Suffix appended to the record name for the builder.
        report_conflicting_overrides: Report same-name components whose types differ.
        detect_initializers: Resolve ``initializer`` markers on components.
    """

    add_builder: bool = True
    package_override: str | None = None
    interface_suffix: str = "Record"
    builder_suffix: str = "Builder"
    report_conflicting_overrides: bool = False
    detect_initializers: bool = True
