# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Depth-first collection of record components across an interface graph."""

import logging
from dataclasses import dataclass, field

from recordshape.diagnostics import DiagnosticCoordinator
from recordshape.model import Component
from recordshape.symbols import InterfaceRef, MethodRef, SymbolAdapter
from recordshape.validator import Accept, Reject, validate_method

logger = logging.getLogger(__name__)

CONFLICTING_OVERRIDE_MESSAGE = (
    "Component {name} is declared as {first_type} in {first_iface} and as "
    "{type} in {iface}. Bad method: {iface}.{name}()"
)


@dataclass
class _WalkState:
    visited: set[str] = field(default_factory=set)
    used: dict[str, Component] = field(default_factory=dict)
    components: list[Component] = field(default_factory=list)


class InheritanceWalker:
    """Walk an interface and its supertypes in pre-order, collecting components."""

    def __init__(
        self,
        adapter: SymbolAdapter,
        coordinator: DiagnosticCoordinator,
        report_conflicting_overrides: bool = False,
    ) -> None:
        """Initialize the walker.

        Args:
            adapter: Source of interface declarations.
            coordinator: Sink for validation diagnostics.
            report_conflicting_overrides: Report a later same-name declaration
                whose type differs from the first-seen one.
        """
        self._adapter = adapter
        self._coordinator = coordinator
        self._report_conflicting_overrides = report_conflicting_overrides

    def walk(self, root: InterfaceRef) -> list[Component]:
        """Collect components reachable from ``root``.

        Args:
            root: Interface the derivation starts from.

        Returns:
            Components in first-seen order. The list is meaningless when the
            coordinator reports a failure.
        """
        state = _WalkState()
        self._visit(iface=root, state=state)
        logger.debug(
            f"Interface graph walked (root={root.qualified_name} "
            f"visited={len(state.visited)} components={len(state.components)})"
        )
        return state.components

    def _visit(self, iface: InterfaceRef, state: _WalkState) -> None:
        qualified_name = self._adapter.qualified_name(iface)
        if qualified_name in state.visited:
            return
        state.visited.add(qualified_name)

        for method in self._adapter.declared_methods(iface):
            verdict = validate_method(self._adapter, method, iface)
            if isinstance(verdict, Reject):
                self._coordinator.error(verdict.kind, verdict.message, method)
            elif isinstance(verdict, Accept):
                self._accept(iface=iface, method=method, verdict=verdict, state=state)

        for supertype in self._adapter.direct_supertypes(iface):
            # a rejected interface already invalidates the root shape
            if self._coordinator.failed:
                return
            self._visit(iface=supertype, state=state)

    def _accept(
        self,
        iface: InterfaceRef,
        method: MethodRef,
        verdict: Accept,
        state: _WalkState,
    ) -> None:
        first = state.used.get(verdict.name)
        if first is None:
            component = Component(
                name=verdict.name,
                type=verdict.type,
                origin_method=method,
                declared_in=iface,
            )
            state.used[verdict.name] = component
            state.components.append(component)
            return
        if self._report_conflicting_overrides and first.type != verdict.type:
            self._coordinator.error(
                "CONFLICTING_OVERRIDE",
                CONFLICTING_OVERRIDE_MESSAGE.format(
                    name=verdict.name,
                    first_type=first.type,
                    first_iface=first.declared_in.simple_name,
                    type=verdict.type,
                    iface=iface.simple_name,
                ),
                method,
            )
