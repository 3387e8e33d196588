"""Forwarding Method Synthesizer — methods that call through to ``impl``.

Each forwarding method keeps the interface method's signature and its body
is one expression::

    try await impl.name(a, &b, c())

Arguments follow the parameter's passing mode (value, ``&`` for ``inout``,
a call for ``@autoclosure``). ``await`` is applied first and ``try`` wraps
it, so error propagation sees the resolved result of the suspension.
"""

from __future__ import annotations

import logging
from typing import Sequence

from .config import DEFAULT_CONFIG, ExpansionConfig
from .signature import MethodSignature, Parameter, ParamMode
from .syntax import (
    AwaitExpr,
    Expr,
    FunctionDecl,
    FunctionParameter,
    InOutExpr,
    LabeledArgument,
    TryExpr,
    call,
    member_access,
    ref,
)
from . import constants

logger = logging.getLogger(__name__)


def forwarding_argument(param: Parameter) -> LabeledArgument:
    value = ref(param.internal_name)
    if param.mode == ParamMode.BY_MUTABLE_REF:
        return LabeledArgument(value=InOutExpr(operand=value))
    if param.mode == ParamMode.LAZY:
        return LabeledArgument(value=call(value))
    return LabeledArgument(value=value)


def forwarding_call(signature: MethodSignature) -> Expr:
    expr: Expr = call(
        member_access(ref(constants.IMPL_MEMBER_NAME), signature.name),
        [forwarding_argument(param) for param in signature.parameters],
    )
    if signature.effect.is_async:
        expr = AwaitExpr(operand=expr)
    if signature.effect.throws:
        expr = TryExpr(operand=expr)
    return expr


def forwarding_parameter(param: Parameter) -> FunctionParameter:
    """Redeclare *param*; unnamed parameters get their synthetic name."""
    if not param.synthetic_name and param.internal_name == param.external_label:
        return FunctionParameter(first_name=param.external_label, type=param.type)
    return FunctionParameter(
        first_name=param.external_label,
        second_name=param.internal_name,
        type=param.type,
    )


def synthesize_forwarding_method(
    signature: MethodSignature, config: ExpansionConfig = DEFAULT_CONFIG
) -> FunctionDecl:
    attributes = (
        (constants.INLINABLE_ATTRIBUTE, constants.INLINE_ALWAYS_ATTRIBUTE)
        if config.inline_hints
        else ()
    )
    return FunctionDecl(
        attributes=attributes,
        modifiers=(constants.PUBLIC_MODIFIER,),
        name=signature.name,
        generic_parameters=signature.generic_parameters,
        parameters=tuple(forwarding_parameter(p) for p in signature.parameters),
        effect=signature.effect,
        thrown_type=signature.thrown_type,
        return_type=signature.return_type if signature.declares_return else None,
        generic_constraints=signature.generic_constraints,
        body=(forwarding_call(signature),),
    )


def synthesize_forwarding_methods(
    signatures: Sequence[MethodSignature], config: ExpansionConfig = DEFAULT_CONFIG
) -> list[FunctionDecl]:
    methods = [synthesize_forwarding_method(s, config) for s in signatures]
    logger.debug("Synthesized %d forwarding method(s)", len(methods))
    return methods
