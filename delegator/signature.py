"""Signature Model Extractor: interface method declaration → MethodSignature."""

from __future__ import annotations

import logging
from enum import Enum

from pydantic import BaseModel, ConfigDict

from .syntax import (
    AttributedType,
    EffectKind,
    FunctionDecl,
    FunctionParameter,
    Identifier,
    NominalDecl,
    TypeExpr,
    void_type,
)
from . import constants

logger = logging.getLogger(__name__)


class ParamMode(str, Enum):
    BY_VALUE = "by_value"
    BY_MUTABLE_REF = "by_mutable_ref"
    LAZY = "lazy"


class Parameter(BaseModel):
    model_config = ConfigDict(frozen=True)

    external_label: Identifier
    internal_name: Identifier
    type: TypeExpr
    mode: ParamMode = ParamMode.BY_VALUE
    index: int = 0
    synthetic_name: bool = False


class MethodSignature(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: Identifier
    parameters: tuple[Parameter, ...] = ()
    return_type: TypeExpr
    effect: EffectKind = EffectKind.NONE
    thrown_type: TypeExpr | None = None
    generic_parameters: str | None = None
    generic_constraints: str | None = None
    attributes: tuple[str, ...] = ()
    declares_return: bool = False
    source: FunctionDecl | None = None


def parameter_mode(type_expr: TypeExpr) -> ParamMode:
    """Derive the passing mode from the markers written on a parameter type."""
    if not isinstance(type_expr, AttributedType):
        return ParamMode.BY_VALUE
    if type_expr.specifier == constants.INOUT_SPECIFIER:
        return ParamMode.BY_MUTABLE_REF
    if constants.AUTOCLOSURE_ATTRIBUTE in type_expr.attributes:
        return ParamMode.LAZY
    return ParamMode.BY_VALUE


def synthetic_parameter_name(index: int) -> Identifier:
    return Identifier(name=f"{constants.SYNTHETIC_PARAM_PREFIX}{index}")


def extract_parameter(param: FunctionParameter, index: int) -> Parameter:
    """Resolve labels for one formal parameter.

    The internal name falls back to the external label; when neither names
    the value, a positional ``p<index>`` is synthesized.
    """
    internal = param.second_name or param.first_name
    synthetic = internal.is_wildcard
    if synthetic:
        internal = synthetic_parameter_name(index)
    return Parameter(
        external_label=param.first_name,
        internal_name=internal,
        type=param.type,
        mode=parameter_mode(param.type),
        index=index,
        synthetic_name=synthetic,
    )


def extract_signature(decl: FunctionDecl) -> MethodSignature:
    parameters = tuple(
        extract_parameter(param, index) for index, param in enumerate(decl.parameters)
    )
    signature = MethodSignature(
        name=decl.name,
        parameters=parameters,
        return_type=decl.return_type if decl.return_type is not None else void_type(),
        effect=decl.effect,
        thrown_type=decl.thrown_type,
        generic_parameters=decl.generic_parameters,
        generic_constraints=decl.generic_constraints,
        attributes=decl.attributes,
        declares_return=decl.return_type is not None,
        source=decl,
    )
    logger.debug(
        "Extracted %s: %d parameter(s), effect=%s",
        signature.name.escaped,
        len(parameters),
        signature.effect.value,
    )
    return signature


def extract_signatures(interface: NominalDecl) -> list[MethodSignature]:
    """One signature per function member, in declaration order."""
    return [extract_signature(decl) for decl in interface.function_members()]
