"""Snippet synthesis subpackage for callsnip."""

from callsnip.synthesis.examples import extract_example, tokenize_examples
from callsnip.synthesis.literals import placeholder, strip_placeholders
from callsnip.synthesis.model import (
    AnonymousFunctionType,
    ArrayOrTupleType,
    Dialect,
    EnumLiteralType,
    OtherType,
    Parameter,
    PrimitiveKind,
    PrimitiveType,
    ReturnKind,
    Signature,
    SnippetConfig,
    TypeDescriptor,
    strip_return_annotation,
)
from callsnip.synthesis.synthesizer import build_snippet, render_arguments, synthesize_parameter

__all__ = [
    "AnonymousFunctionType",
    "ArrayOrTupleType",
    "Dialect",
    "EnumLiteralType",
    "OtherType",
    "Parameter",
    "PrimitiveKind",
    "PrimitiveType",
    "ReturnKind",
    "Signature",
    "SnippetConfig",
    "TypeDescriptor",
    "build_snippet",
    "extract_example",
    "placeholder",
    "render_arguments",
    "strip_placeholders",
    "strip_return_annotation",
    "synthesize_parameter",
    "tokenize_examples",
]
