from __future__ import annotations

import ast

import pytest

from callsnip.engine import Position, PythonSourceEngine, SymbolKind
from callsnip.synthesis import (
    AnonymousFunctionType,
    ArrayOrTupleType,
    Dialect,
    EnumLiteralType,
    OtherType,
    PrimitiveKind,
    PrimitiveType,
    ReturnKind,
    SnippetConfig,
    build_snippet,
)
from callsnip.synthesis.model import DEFAULT_IMAGE_LITERAL

SOURCE = '''
from enum import Enum, IntEnum
from typing import Annotated, Callable, List, Optional, Tuple, Union, overload


class Direction(Enum):
    """Which way to drive."""

    _ignore_ = ["helper"]
    Forward = 2
    Backward = 1


class Empty(Enum):
    pass


class Led(IntEnum):
    White = 5
    Red = 0
    Blue = 1


def move(speed: int, dir: Direction) -> None:
    """Drive the robot.

    :param int speed: how fast
    :param dir: where to go
    """


def show(leds: str, interval: int = 400) -> None:
    pass


def say(text: str, times: int, *rest: int, loud: bool) -> None:
    """Print text.

    Args:
        text (str): what to print, eg: "Hello", "Bye"
        times: how many times
            eg: 3
    """


def on_event(handler: Callable[[int, str], bool], when: "Direction") -> None:
    pass


def plot(points: List[int], pair: Tuple[int, int], maybe: Optional[float], other: int | None, mystery) -> None:
    pass


def paint(shade: Empty) -> None:
    pass


@overload
def scale(value: int) -> int: ...
@overload
def scale(value: str, factor: str) -> str: ...
def scale(value, factor=None):
    return value


class Robot:
    def __init__(self, name: str, color: Led) -> None:
        self.name = name

    def turn(self, angle: float, *, fast: bool = False) -> None:
        pass

    @staticmethod
    def build(model: str) -> "Robot":
        return Robot(model, Led.White)

    @classmethod
    def default(cls) -> "Robot":
        return cls("r", Led.White)


class Marker:
    pass


def outer(total: int):
    def inner(step: int, label: str) -> None:
        pass
    return inner


callback: Callable[[], int] = lambda: 0
PI = 3.14
double = lambda x, y=2: x * y
'''

PYTHON = SnippetConfig(dialect=Dialect.PYTHON)


@pytest.fixture
def engine() -> PythonSourceEngine:
    return PythonSourceEngine(SOURCE)


def _line_of(text: str) -> int:
    return SOURCE.splitlines().index(text)


def _snippet(engine: PythonSourceEngine, name: str, **kwargs) -> str:
    symbol = engine.resolve_symbol(name, **kwargs)
    assert symbol is not None, name
    return build_snippet(name, engine.call_signatures(symbol), PYTHON)


def _annotation(text: str) -> ast.expr:
    return ast.parse(text, mode="eval").body


def test_function_with_enum_parameter(engine: PythonSourceEngine) -> None:
    assert _snippet(engine, "move") == "move(0, Direction.Forward)"


def test_led_image_parameter(engine: PythonSourceEngine) -> None:
    assert _snippet(engine, "show") == f'show("""{DEFAULT_IMAGE_LITERAL}""")'


def test_docstring_examples_and_keyword_only(engine: PythonSourceEngine) -> None:
    assert _snippet(engine, "say") == 'say("Hello", 3)'


def test_callable_and_forward_reference(engine: PythonSourceEngine) -> None:
    assert _snippet(engine, "on_event") == "on_event(lambda arg0, arg1: False, Direction.Forward)"


def test_collections_optionals_and_unannotated(engine: PythonSourceEngine) -> None:
    assert _snippet(engine, "plot") == "plot([], (), 0, 0, ${5:mystery})"


def test_enum_without_members_falls_back(engine: PythonSourceEngine) -> None:
    assert _snippet(engine, "paint") == "paint(${1:shade})"


def test_overloads_first_declared_wins(engine: PythonSourceEngine) -> None:
    symbol = engine.resolve_symbol("scale")
    assert symbol is not None
    signatures = engine.call_signatures(symbol)
    assert len(signatures) == 2
    assert build_snippet("scale", signatures, PYTHON) == "scale(0)"


def test_class_is_called_through_init(engine: PythonSourceEngine) -> None:
    assert _snippet(engine, "Robot") == 'Robot("", Led.White)'
    assert _snippet(engine, "Marker") == "Marker()"


def test_methods_resolve_under_parent(engine: PythonSourceEngine) -> None:
    assert engine.resolve_symbol("turn") is None
    assert _snippet(engine, "turn", parent="Robot") == "turn(0)"
    assert _snippet(engine, "build", parent="Robot") == 'build("")'
    assert _snippet(engine, "default", parent="Robot") == "default()"


def test_self_parent_resolves_enclosing_class(engine: PythonSourceEngine) -> None:
    position = Position(_line_of("    def turn(self, angle: float, *, fast: bool = False) -> None:") + 1, 8)
    assert _snippet(engine, "build", position=position, parent="self") == 'build("")'


def test_variables(engine: PythonSourceEngine) -> None:
    assert _snippet(engine, "callback") == "callback()"
    assert _snippet(engine, "PI") == "PI"
    assert _snippet(engine, "double") == "double(${1:x})"


def test_nested_scopes_follow_position(engine: PythonSourceEngine) -> None:
    assert engine.resolve_symbol("inner") is None
    position = Position(_line_of("    return inner"), 4)
    assert _snippet(engine, "inner", position=position) == 'inner(0, "")'
    total = engine.resolve_symbol("total", position)
    assert total is not None
    assert total.kind is SymbolKind.PARAMETER
    assert engine.call_signatures(total) == ()


def test_unknown_names_do_not_resolve(engine: PythonSourceEngine) -> None:
    assert engine.resolve_symbol("missing") is None
    assert engine.resolve_symbol("missing", parent="Robot") is None
    assert engine.resolve_symbol("missing", parent="Nowhere.Deeper") is None


def test_visible_symbols_skip_class_body_from_methods(engine: PythonSourceEngine) -> None:
    position = Position(_line_of("    def turn(self, angle: float, *, fast: bool = False) -> None:") + 1, 8)
    names = {symbol.name for symbol in engine.visible_symbols(position)}
    assert {"angle", "fast", "move", "Robot"} <= names
    assert "build" not in names


def test_member_symbols(engine: PythonSourceEngine) -> None:
    names = [symbol.name for symbol in engine.member_symbols("Robot")]
    assert names == ["__init__", "turn", "build", "default"]
    members = engine.member_symbols("Direction")
    assert [symbol.kind for symbol in members] == [SymbolKind.ENUM_MEMBER] * 3
    assert engine.member_symbols("PI") == ()


def test_describe(engine: PythonSourceEngine) -> None:
    move = engine.describe(engine.resolve_symbol("move"))
    assert move.kind is SymbolKind.FUNCTION
    assert move.display == "move(speed: int, dir: Direction) -> None"
    assert move.documentation.startswith("Drive the robot.")
    build = engine.describe(engine.resolve_symbol("build", parent="Robot"))
    assert build.kind is SymbolKind.METHOD
    assert build.modifiers == ("static",)
    forward = engine.describe(engine.resolve_symbol("Forward", parent="Direction"))
    assert forward.kind is SymbolKind.ENUM_MEMBER
    assert forward.display == "Direction.Forward"
    direction = engine.describe(engine.resolve_symbol("Direction"))
    assert direction.kind is SymbolKind.ENUM
    assert direction.display == "class Direction"


def test_parameter_documentation(engine: PythonSourceEngine) -> None:
    symbol = engine.resolve_symbol("move")
    (signature,) = engine.call_signatures(symbol)
    assert [p.documentation for p in signature.parameters] == ["how fast", "where to go"]


def test_classify_annotations(engine: PythonSourceEngine) -> None:
    classify = engine.classify
    assert classify(None) == OtherType()
    assert classify(_annotation("None")) == PrimitiveType(PrimitiveKind.VOID)
    assert classify(_annotation("complex")) == PrimitiveType(PrimitiveKind.NUMBER)
    assert classify(_annotation("Annotated[int, 'unit']")) == PrimitiveType(PrimitiveKind.NUMBER)
    assert classify(_annotation("Union[None, str]")) == PrimitiveType(PrimitiveKind.STRING)
    assert classify(_annotation("Union[int, str]")) == OtherType("Union[int, str]")
    assert classify(_annotation("Optional[Led]")) == EnumLiteralType("Led", "White")
    assert classify(_annotation("robot.Direction")) == EnumLiteralType("robot.Direction", "Forward")
    assert classify(_annotation("list")) == ArrayOrTupleType()
    assert classify(_annotation("tuple[int, ...]")) == ArrayOrTupleType(is_tuple=True)
    assert classify(_annotation("Callable[..., int]")) == AnonymousFunctionType(
        "(*args)", ReturnKind.NUMBER
    )
    assert classify(_annotation("Callable")) == OtherType("Callable")
    assert classify(_annotation("dict[str, int]")) == OtherType("dict[str, int]")
    assert classify(_annotation("'not valid ('")) == OtherType("not valid (")


def test_unparsable_source_degrades_to_empty_module() -> None:
    broken = PythonSourceEngine("def broken(:\n    pass\n")
    assert broken.resolve_symbol("broken") is None
    assert broken.visible_symbols() == ()


def test_from_path(write_module) -> None:
    path = write_module(
        """
        def greet(name: str, loud: bool) -> None:
            pass
        """
    )
    engine = PythonSourceEngine.from_path(path)
    assert engine.path == path
    assert _snippet(engine, "greet") == 'greet("", False)'


def test_lines_being_edited_do_not_hide_the_module() -> None:
    engine = PythonSourceEngine(
        "class Motor:\n"
        "    def run(self, speed: int) -> None:\n"
        "        pass\n"
        "\n"
        "motor = Motor()\n"
        "motor.\n"
    )
    assert _snippet(engine, "run", parent="motor") == "run(0)"


def test_instances_resolve_members_of_their_class(write_module) -> None:
    engine = PythonSourceEngine.from_path(
        write_module(
            """
            class Motor:
                def run(self, speed: int) -> None:
                    pass

            def drive(left: Motor, right: "Motor") -> None:
                pass

            spare: Motor = make()
            """
        )
    )
    inside = Position(5, 4)
    assert _snippet(engine, "run", position=inside, parent="left") == "run(0)"
    assert _snippet(engine, "run", position=inside, parent="right") == "run(0)"
    assert _snippet(engine, "run", parent="spare") == "run(0)"
    assert [symbol.name for symbol in engine.member_symbols("spare")] == ["run"]


@pytest.mark.parametrize(
    "tail",
    [
        "\nresult = move(\n    1,\n    2,\n    3,\n    4,\n    5,\n    6,\n",
        "\nresult = move(speed=[1, 2,\n",
        "\nif True:\n    result = move(\n        1,\n        2,\n",
    ],
)
def test_open_calls_being_typed_keep_the_module(tail: str) -> None:
    engine = PythonSourceEngine(SOURCE + tail)
    assert _snippet(engine, "move") == "move(0, Direction.Forward)"
    assert _snippet(engine, "Robot") == 'Robot("", Led.White)'


def test_open_call_before_later_definitions() -> None:
    head, _, rest = SOURCE.partition("\ndef move(")
    edited = head + "\nresult = move(\n    1,\n    2,\n\n" + "\ndef move(" + rest
    engine = PythonSourceEngine(edited)
    assert _snippet(engine, "move") == "move(0, Direction.Forward)"
    assert _snippet(engine, "say") == 'say("Hello", 3)'


def test_nul_bytes_are_ignored() -> None:
    engine = PythonSourceEngine(SOURCE.replace("def show(", "\x00def show("))
    assert _snippet(engine, "move") == "move(0, Direction.Forward)"
    assert _snippet(engine, "show") == f'show("""{DEFAULT_IMAGE_LITERAL}""")'


def test_unparsable_source_is_logged(caplog) -> None:
    with caplog.at_level("WARNING", logger="callsnip.engine.python_engine"):
        PythonSourceEngine('"""never closed\n' + "x = (\n" * 12)
    assert "unparsable source" in caplog.text


CLASSES = '''
from dataclasses import KW_ONLY, dataclass, field
from typing import ClassVar


class Base:
    def __init__(self, speed: int, name: str) -> None:
        self.speed = speed


class Child(Base):
    pass


class GrandChild(Child):
    """Inherits through two levels."""


class Loop(Loop):
    pass


@dataclass
class Point:
    x: int
    y: int


@dataclass(frozen=True)
class Sprite:
    """A drawable.

    Attributes:
        name: sprite label, eg: "hero"
    """

    name: str
    visible: bool
    layer: int = 0
    tags: list = field(default_factory=list)
    count: ClassVar[int] = 0
    cache: dict = field(init=False, repr=False)


@dataclass
class Labeled(Point):
    label: str = ""


@dataclass
class Options:
    path: str
    _: KW_ONLY
    verbose: bool


@dataclass(kw_only=True)
class Settings:
    level: int


@dataclass(init=False)
class Manual(Base):
    mode: int
'''


@pytest.fixture
def classes() -> PythonSourceEngine:
    return PythonSourceEngine(CLASSES)


def test_inherited_initializer(classes: PythonSourceEngine) -> None:
    assert _snippet(classes, "Child") == 'Child(0, "")'
    assert _snippet(classes, "GrandChild") == 'GrandChild(0, "")'
    assert _snippet(classes, "Loop") == "Loop()"


def test_dataclass_fields_build_the_initializer(classes: PythonSourceEngine) -> None:
    assert _snippet(classes, "Point") == "Point(0, 0)"
    assert _snippet(classes, "Sprite") == 'Sprite("hero", False)'
    (signature,) = classes.call_signatures(classes.resolve_symbol("Sprite"))
    assert [p.name for p in signature.parameters] == ["name", "visible", "layer", "tags"]
    assert signature.min_argument_count == 2


def test_dataclass_base_fields_come_first(classes: PythonSourceEngine) -> None:
    (signature,) = classes.call_signatures(classes.resolve_symbol("Labeled"))
    assert [p.name for p in signature.parameters] == ["x", "y", "label"]
    assert _snippet(classes, "Labeled") == "Labeled(0, 0)"


def test_dataclass_keyword_only_fields_are_not_required(classes: PythonSourceEngine) -> None:
    assert _snippet(classes, "Options") == 'Options("")'
    assert _snippet(classes, "Settings") == "Settings()"


def test_dataclass_without_generated_init_uses_base(classes: PythonSourceEngine) -> None:
    assert _snippet(classes, "Manual") == 'Manual(0, "")'
