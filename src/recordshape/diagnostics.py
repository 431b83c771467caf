# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Diagnostic collection and routing for one derivation."""

import logging
from dataclasses import dataclass
from typing import Literal

from recordshape.symbols import InterfaceRef, PinSite, Severity, SymbolAdapter

logger = logging.getLogger(__name__)

ErrorKind = Literal[
    "SIGNATURE",
    "GENERIC_METHOD",
    "EMPTY_SHAPE",
    "CONFLICTING_OVERRIDE",
    "INITIALIZER",
    "INTERNAL_ERROR",
]


@dataclass(frozen=True)
class Diagnostic:
    """Represent one emitted diagnostic.

    Attributes:
        severity: ``ERROR`` or ``INTERNAL_ERROR``.
        kind: Error taxonomy entry.
        message: User-facing message text.
        pin_site: Method or interface the diagnostic is attributed to.
    """

    severity: Severity
    kind: ErrorKind
    message: str
    pin_site: PinSite


class InternalDerivationError(RuntimeError):
    """Represent an engine invariant violation."""

    def __init__(self, message: str, pin_site: PinSite) -> None:
        super().__init__(message)
        self.pin_site = pin_site


class DiagnosticCoordinator:
    """Collect diagnostics in emission order and forward them to the adapter."""

    def __init__(self, adapter: SymbolAdapter) -> None:
        self._adapter = adapter
        self._diagnostics: list[Diagnostic] = []

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return list(self._diagnostics)

    @property
    def failed(self) -> bool:
        """Whether any diagnostic has been emitted for this derivation."""
        return bool(self._diagnostics)

    def error(self, kind: ErrorKind, message: str, pin_site: PinSite) -> None:
        """Emit a recoverable error that aborts the current derivation.

        Args:
            kind: Error taxonomy entry.
            message: User-facing message text.
            pin_site: Offending method or interface.
        """
        self._emit(
            Diagnostic(severity="ERROR", kind=kind, message=message, pin_site=pin_site)
        )

    def internal_error(self, message: str, pin_site: PinSite) -> None:
        """Emit an engine invariant violation."""
        self._emit(
            Diagnostic(
                severity="INTERNAL_ERROR",
                kind="INTERNAL_ERROR",
                message=message,
                pin_site=pin_site,
            )
        )

    def _emit(self, diagnostic: Diagnostic) -> None:
        logger.debug(
            f"Diagnostic emitted (kind={diagnostic.kind} "
            f"site={format_pin_site(diagnostic.pin_site)})"
        )
        self._diagnostics.append(diagnostic)
        self._adapter.report(
            diagnostic.severity, diagnostic.message, diagnostic.pin_site
        )


def format_pin_site(pin_site: PinSite) -> str:
    """Render a pin site for human consumption.

    Args:
        pin_site: Method or interface handle.

    Returns:
        ``file:line`` when the site has a location, otherwise a dotted name.
    """
    if pin_site.file_path is not None and pin_site.line is not None:
        return f"{pin_site.file_path}:{pin_site.line}"
    if isinstance(pin_site, InterfaceRef):
        return pin_site.qualified_name
    return f"{pin_site.declaring_interface}.{pin_site.name}"
