"""Orchestrator — expand() entry point.

Container declaration → Interface Locator → Signature Model Extractor →
{initializer, forwarding methods, Impl record}. The result is always
``[storage, init, forward₁…N, Impl]``; any structural failure is reported
to the sink and yields ``[]``.
"""

from __future__ import annotations

import logging

from .config import DEFAULT_CONFIG, ExpansionConfig
from .diagnostics import DiagnosticSink, emit
from .forwarding import synthesize_forwarding_methods
from .impl_record import synthesize_impl_record
from .initializer import synthesize_initializer
from .locator import locate_interface
from .signature import extract_signatures
from .syntax import Declaration, VariableDecl, ident, named_type
from . import constants

logger = logging.getLogger(__name__)


def storage_declaration() -> VariableDecl:
    """``public var impl: Impl``"""
    return VariableDecl(
        modifiers=(constants.PUBLIC_MODIFIER,),
        binding=constants.VAR_BINDING,
        name=ident(constants.IMPL_MEMBER_NAME),
        type=named_type(constants.IMPL_STRUCT_NAME),
    )


def expand(
    declaration: Declaration,
    sink: DiagnosticSink,
    config: ExpansionConfig = DEFAULT_CONFIG,
) -> list[Declaration]:
    """Synthesize the delegate members for *declaration*.

    Args:
        declaration: The declaration the attribute is attached to.
        sink: Receives the diagnostic when the declaration is malformed.
        config: Naming and rendering options.

    Returns:
        The generated declarations in splice order, or an empty list when a
        diagnostic was reported.
    """
    located = locate_interface(declaration)
    if not located.ok:
        emit(located.kind, located.declaration, sink, config)
        return []

    signatures = extract_signatures(located.interface)
    concurrency_safe = located.is_concurrency_safe
    logger.info(
        "Expanding %s: %d method(s), concurrency_safe=%s",
        located.container.name,
        len(signatures),
        concurrency_safe,
    )
    return [
        storage_declaration(),
        synthesize_initializer(signatures, concurrency_safe=concurrency_safe),
        *synthesize_forwarding_methods(signatures, config),
        synthesize_impl_record(signatures, concurrency_safe=concurrency_safe),
    ]
