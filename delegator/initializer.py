"""Initializer Synthesizer: ``public init`` taking one closure per method."""

from __future__ import annotations

import logging
from typing import Sequence

from .impl_record import closure_type
from .signature import MethodSignature
from .syntax import (
    AssignExpr,
    FunctionParameter,
    InitializerDecl,
    LabeledArgument,
    call,
    ref,
    with_attributes,
)
from . import constants

logger = logging.getLogger(__name__)


def initializer_parameter(
    signature: MethodSignature, *, concurrency_safe: bool = False
) -> FunctionParameter:
    """``name: @escaping [@Sendable] <closure type>``.

    The closure outlives the call that supplies it, hence ``@escaping``.
    """
    param_type = with_attributes(
        closure_type(signature, concurrency_safe=concurrency_safe),
        constants.ESCAPING_ATTRIBUTE,
    )
    return FunctionParameter(first_name=signature.name, type=param_type)


def initializer_body(signatures: Sequence[MethodSignature]) -> AssignExpr:
    """``impl = Impl(name: name, ...)`` in method declaration order."""
    arguments = [
        LabeledArgument(label=signature.name, value=ref(signature.name))
        for signature in signatures
    ]
    return AssignExpr(
        target=ref(constants.IMPL_MEMBER_NAME),
        value=call(ref(constants.IMPL_STRUCT_NAME), arguments, multiline=True),
    )


def synthesize_initializer(
    signatures: Sequence[MethodSignature], *, concurrency_safe: bool = False
) -> InitializerDecl:
    parameters = tuple(
        initializer_parameter(signature, concurrency_safe=concurrency_safe)
        for signature in signatures
    )
    logger.debug("Synthesized initializer with %d parameter(s)", len(parameters))
    return InitializerDecl(
        modifiers=(constants.PUBLIC_MODIFIER,),
        parameters=parameters,
        body=(initializer_body(signatures),),
    )
