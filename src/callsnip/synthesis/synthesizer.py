from __future__ import annotations

from typing import List, Sequence

from callsnip.invariants import never
from callsnip.synthesis.examples import extract_example
from callsnip.synthesis.literals import (
    block_literal,
    empty_array_literal,
    enum_member_literal,
    function_literal,
    placeholder,
    primitive_literal,
)
from callsnip.synthesis.model import (
    AnonymousFunctionType,
    ArrayOrTupleType,
    EnumLiteralType,
    OtherType,
    Parameter,
    PrimitiveKind,
    PrimitiveType,
    Signature,
    SnippetConfig,
)

_DEFAULT_CONFIG = SnippetConfig()


def _primitive_default(
    parameter: Parameter, primitive: PrimitiveType, config: SnippetConfig
) -> str | None:
    if primitive.kind is PrimitiveKind.STRING:
        special = config.special_literals.get(parameter.name)
        if special is not None:
            return block_literal(config.dialect, special)
    return primitive_literal(config.dialect, primitive.kind)


def _typed_default(parameter: Parameter, config: SnippetConfig) -> str | None:
    descriptor = parameter.type
    if isinstance(descriptor, EnumLiteralType):
        if not descriptor.first_member:
            return None
        return enum_member_literal(descriptor.enum_name, descriptor.first_member)
    if isinstance(descriptor, AnonymousFunctionType):
        return function_literal(config.dialect, descriptor)
    if isinstance(descriptor, ArrayOrTupleType):
        return empty_array_literal(config.dialect, descriptor.is_tuple)
    if isinstance(descriptor, PrimitiveType):
        return _primitive_default(parameter, descriptor, config)
    if isinstance(descriptor, OtherType):
        return None
    never(
        "unclassified type descriptor",
        parameter=parameter.name,
        descriptor_type=type(descriptor).__name__,
    )


def synthesize_parameter(
    parameter: Parameter,
    config: SnippetConfig = _DEFAULT_CONFIG,
    tab_stop: int = 1,
) -> str:
    """Placeholder text for one parameter.

    An inline documentation example wins; then the type descriptor picks an
    enum member, a function literal, an empty array, or a primitive default.
    Anything left over becomes a named placeholder.
    """
    example = extract_example(parameter.documentation)
    if example is not None:
        return example
    value = _typed_default(parameter, config)
    if value is not None:
        return value
    return placeholder(parameter.name, tab_stop if config.numbered_placeholders else 1)


def render_arguments(signature: Signature, config: SnippetConfig = _DEFAULT_CONFIG) -> List[str]:
    return [
        synthesize_parameter(parameter, config, tab_stop=position)
        for position, parameter in enumerate(signature.required_parameters, start=1)
    ]


def build_snippet(
    label: str,
    signatures: Sequence[Signature],
    config: SnippetConfig = _DEFAULT_CONFIG,
) -> str:
    """Append a call argument list for the first signature to ``label``.

    A symbol without call signatures keeps its label unchanged.
    """
    if not signatures:
        return label
    arguments = render_arguments(signatures[0], config)
    return f"{label}({', '.join(arguments)})"
