"""Interface Locator: validates the container and finds its ``Interface``."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import ClassVar, Union

from .diagnostics import DiagnosticKind
from .syntax import Declaration, NominalDecl
from . import constants

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InterfaceLocated:
    """The container is a struct that nests a protocol named ``Interface``."""

    ok: ClassVar[bool] = True

    container: NominalDecl
    interface: NominalDecl
    is_concurrency_safe: bool = False


@dataclass(frozen=True)
class LocateFailure:
    """Structural misuse detected before any synthesis."""

    ok: ClassVar[bool] = False

    kind: DiagnosticKind
    declaration: Declaration


LocateResult = Union[InterfaceLocated, LocateFailure]


def find_interface(container: NominalDecl) -> NominalDecl | None:
    """First direct member that is a protocol named ``Interface``."""
    return next(
        (
            member
            for member in container.members
            if member.kind == constants.PROTOCOL_KIND
            and member.name.name == constants.INTERFACE_NAME
        ),
        None,
    )


def locate_interface(declaration: Declaration) -> LocateResult:
    if declaration.kind != constants.AGGREGATE_KIND:
        logger.debug("Rejecting %s declaration", declaration.kind)
        return LocateFailure(kind=DiagnosticKind.NOT_AN_AGGREGATE, declaration=declaration)

    interface = find_interface(declaration)
    if interface is None:
        logger.debug("No nested %s in %s", constants.INTERFACE_NAME, declaration.name)
        return LocateFailure(kind=DiagnosticKind.MISSING_INTERFACE, declaration=declaration)

    return InterfaceLocated(
        container=declaration,
        interface=interface,
        is_concurrency_safe=declaration.is_concurrency_safe,
    )
