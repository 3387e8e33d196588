"""Implementation Record Synthesizer: the nested ``Impl`` struct."""

from __future__ import annotations

import logging
from typing import Sequence

from .signature import MethodSignature
from .syntax import (
    FunctionType,
    Identifier,
    NominalDecl,
    TupleTypeElement,
    TypeExpr,
    VariableDecl,
    ident,
    with_attributes,
)
from . import constants

logger = logging.getLogger(__name__)


def closure_type(signature: MethodSignature, *, concurrency_safe: bool = False) -> TypeExpr:
    """The callable type stored for *signature*.

    Parameters are unlabelled (``_ name: T``) with their type, and so their
    passing-mode markers, copied as written; the effect and return type are
    copied from the method.
    """
    function_type = FunctionType(
        parameters=tuple(
            TupleTypeElement(
                first_name=Identifier(name=constants.WILDCARD),
                second_name=param.internal_name,
                type=param.type,
            )
            for param in signature.parameters
        ),
        effect=signature.effect,
        thrown_type=signature.thrown_type,
        return_type=signature.return_type,
    )
    if concurrency_safe:
        return with_attributes(function_type, constants.CONCURRENCY_SAFE_ATTRIBUTE)
    return function_type


def impl_field(signature: MethodSignature, *, concurrency_safe: bool = False) -> VariableDecl:
    return VariableDecl(
        attributes=signature.attributes,
        modifiers=(constants.PUBLIC_MODIFIER,),
        binding=constants.VAR_BINDING,
        name=signature.name,
        type=closure_type(signature, concurrency_safe=concurrency_safe),
    )


def synthesize_impl_record(
    signatures: Sequence[MethodSignature], *, concurrency_safe: bool = False
) -> NominalDecl:
    fields = tuple(
        impl_field(signature, concurrency_safe=concurrency_safe) for signature in signatures
    )
    logger.debug("Synthesized %s with %d field(s)", constants.IMPL_STRUCT_NAME, len(fields))
    return NominalDecl(
        kind=constants.AGGREGATE_KIND,
        modifiers=(constants.PUBLIC_MODIFIER,),
        name=ident(constants.IMPL_STRUCT_NAME),
        inherited=(constants.CONCURRENCY_SAFE_PROTOCOL,) if concurrency_safe else (),
        members=fields,
    )
