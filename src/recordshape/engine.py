# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Entry point deriving one record shape from one root interface."""

import logging

from recordshape.assembler import ShapeAssembler
from recordshape.diagnostics import DiagnosticCoordinator, InternalDerivationError
from recordshape.initializers import InitializerDetector
from recordshape.model import DerivationOptions, Initializer, RecordShape
from recordshape.naming import NamingPolicy, SuffixNamingPolicy
from recordshape.symbols import InterfaceRef, SymbolAdapter
from recordshape.walker import InheritanceWalker

logger = logging.getLogger(__name__)


def derive_record_shape(
    adapter: SymbolAdapter,
    root: InterfaceRef,
    options: DerivationOptions | None = None,
    naming_policy: NamingPolicy | None = None,
) -> RecordShape | None:
    """Derive the record shape of ``root``.

    Diagnostics are routed through ``adapter.report``; no exception raised by
    the engine escapes this function.

    Args:
        adapter: Source of interface declarations and diagnostic sink.
        root: Interface to derive from.
        options: Per-derivation configuration; defaults apply when omitted.
        naming_policy: Record and builder naming; defaults to suffix naming
            built from ``options``.

    Returns:
        The derived shape, or ``None`` if any diagnostic was emitted.
    """
    options = options or DerivationOptions()
    naming_policy = naming_policy or SuffixNamingPolicy(
        interface_suffix=options.interface_suffix,
        builder_suffix=options.builder_suffix,
    )
    coordinator = DiagnosticCoordinator(adapter)
    walker = InheritanceWalker(
        adapter=adapter,
        coordinator=coordinator,
        report_conflicting_overrides=options.report_conflicting_overrides,
    )
    assembler = ShapeAssembler(
        adapter=adapter, coordinator=coordinator, naming_policy=naming_policy
    )

    try:
        components = walker.walk(root)
        initializers: tuple[Initializer, ...] = ()
        if options.detect_initializers and components and not coordinator.failed:
            initializers = InitializerDetector(
                adapter=adapter, coordinator=coordinator
            ).detect(components)
        shape = assembler.assemble(
            root=root,
            components=components,
            options=options,
            initializers=initializers,
        )
    except InternalDerivationError as exc:
        coordinator.internal_error(str(exc), exc.pin_site)
        shape = None

    if shape is None:
        logger.warning(
            f"Record shape derivation failed (interface={root.qualified_name} "
            f"diagnostics={len(coordinator.diagnostics)})"
        )
        return None
    logger.info(
        f"Record shape derived (interface={root.qualified_name} "
        f"record={shape.name} components={len(shape.components)})"
    )
    return shape
