from __future__ import annotations

import ast
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Sequence, Tuple

from callsnip.engine.contract import (
    EngineSymbol,
    Position,
    SymbolDetail,
    SymbolKind,
    TypeEngine,
)
from callsnip.synthesis.model import (
    AnonymousFunctionType,
    ArrayOrTupleType,
    EnumLiteralType,
    OtherType,
    Parameter,
    PrimitiveKind,
    PrimitiveType,
    ReturnKind,
    Signature,
    TypeDescriptor,
)

logger = logging.getLogger(__name__)

_ENUM_BASES = frozenset({"Enum", "IntEnum", "StrEnum", "Flag", "IntFlag", "ReprEnum"})
_NUMBER_NAMES = frozenset({"int", "float", "complex"})
_ARRAY_NAMES = frozenset({"list", "List"})
_TUPLE_NAMES = frozenset({"tuple", "Tuple"})
_OPTIONAL_NAMES = frozenset({"Optional"})
_UNION_NAMES = frozenset({"Union"})
_CALLABLE_NAMES = frozenset({"Callable"})
_OVERLOAD_NAMES = frozenset({"overload"})
_MAX_REPAIRS = 8
_OPEN_BRACKETS = "([{"
_CLOSE_BRACKETS = ")]}"
_QUOTE_CHARS = "\"'"
_TRIPLE_QUOTES = ("\"\"\"", "'''")
_GOOGLE_SECTION_RE = re.compile(r"^(Args|Arguments|Parameters|Params|Attributes):\s*$")
_GOOGLE_ENTRY_RE = re.compile(r"^(\*{0,2}\w+)\s*(?:\([^)]*\))?\s*:\s*(.*)$")
_SPHINX_PARAM_RE = re.compile(r"^:param\s+(?:[^:]*\s)?(\w+)\s*:\s*(.*)$")

_FunctionNode = ast.FunctionDef | ast.AsyncFunctionDef
_ScopeNode = ast.Module | ast.ClassDef | ast.FunctionDef | ast.AsyncFunctionDef


@dataclass(frozen=True)
class _SymbolSite:
    nodes: Tuple[ast.AST, ...]
    owner: ast.ClassDef | None = None


def _dotted_name(node: ast.AST) -> str | None:
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        base = _dotted_name(node.value)
        if base is None:
            return None
        return f"{base}.{node.attr}"
    return None


def _last_segment(node: ast.AST) -> str | None:
    name = _dotted_name(node)
    if name is None:
        return None
    return name.rsplit(".", 1)[-1]


def _decorator_names(fn: _FunctionNode | ast.ClassDef) -> set[str]:
    names: set[str] = set()
    for decorator in fn.decorator_list:
        target = decorator.func if isinstance(decorator, ast.Call) else decorator
        name = _last_segment(target)
        if name is not None:
            names.add(name)
    return names


def _is_overload(fn: _FunctionNode) -> bool:
    return bool(_decorator_names(fn) & _OVERLOAD_NAMES)


def _is_dataclass(cls: ast.ClassDef) -> bool:
    return "dataclass" in _decorator_names(cls)


def _keyword_flag(call: ast.expr | None, callee: str, keyword: str) -> bool | None:
    """Constant boolean passed as ``keyword`` to a ``callee(...)`` call."""
    if not isinstance(call, ast.Call) or _last_segment(call.func) != callee:
        return None
    for item in call.keywords:
        if item.arg == keyword and isinstance(item.value, ast.Constant):
            return bool(item.value.value)
    return None


def _dataclass_flag(cls: ast.ClassDef, keyword: str) -> bool | None:
    for decorator in cls.decorator_list:
        flag = _keyword_flag(decorator, "dataclass", keyword)
        if flag is not None:
            return flag
    return None


def _field_has_default(value: ast.expr | None) -> bool:
    if value is None:
        return False
    if isinstance(value, ast.Call) and _last_segment(value.func) == "field":
        return any(item.arg in {"default", "default_factory"} for item in value.keywords)
    return True


def _unparse(node: ast.AST | None) -> str:
    if node is None:
        return ""
    try:
        return ast.unparse(node)
    except (ValueError, TypeError, AttributeError):
        return ""


def _union_members(node: ast.expr) -> List[ast.expr]:
    if isinstance(node, ast.BinOp) and isinstance(node.op, ast.BitOr):
        return _union_members(node.left) + _union_members(node.right)
    return [node]


def _is_none(node: ast.expr) -> bool:
    return isinstance(node, ast.Constant) and node.value is None


def _indent_of(line: str) -> int:
    return len(line) - len(line.lstrip())


def _open_bracket_line(lines: Sequence[str], stop: int) -> int | None:
    """Line of the outermost bracket still open at the end of line ``stop``."""
    openers: List[int] = []
    quote: str | None = None
    for idx in range(min(stop + 1, len(lines))):
        line = lines[idx]
        pos = 0
        while pos < len(line):
            if quote is not None:
                if line[pos] == "\\":
                    pos += 2
                elif line.startswith(quote, pos):
                    pos += len(quote)
                    quote = None
                else:
                    pos += 1
                continue
            char = line[pos]
            if char == "#":
                break
            if char in _QUOTE_CHARS:
                quote = line[pos : pos + 3] if line[pos : pos + 3] in _TRIPLE_QUOTES else char
                pos += len(quote)
                continue
            if char in _OPEN_BRACKETS:
                openers.append(idx)
            elif char in _CLOSE_BRACKETS and openers:
                openers.pop()
            pos += 1
        # Single quotes do not span lines.
        if quote is not None and quote not in _TRIPLE_QUOTES:
            quote = None
    return openers[0] if openers else None


def _statement_end(lines: Sequence[str], start: int) -> int:
    """First line after ``start`` that begins a statement at its indentation or less."""
    indent = _indent_of(lines[start])
    for idx in range(start + 1, len(lines)):
        line = lines[idx]
        if line.strip() and _indent_of(line) <= indent and line.lstrip()[0] not in _CLOSE_BRACKETS:
            return idx
    return len(lines)


def _stub(line: str) -> str:
    return line[: _indent_of(line)] + "pass"


def _parse_leniently(source: str, filename: str) -> ast.Module:
    """Parse source that may be mid-edit.

    A statement left with an open bracket is replaced by ``pass`` at its
    indentation along with its continuation lines. Any other line that fails to
    parse is stubbed the same way, then blanked, so the rest of the module
    still resolves.
    """
    lines = source.replace("\x00", "").splitlines()
    for _ in range(_MAX_REPAIRS):
        try:
            return ast.parse("\n".join(lines), filename=filename)
        except SyntaxError as exc:
            idx = (exc.lineno or 0) - 1
            if not 0 <= idx < len(lines):
                idx = len(lines) - 1
            if idx < 0:
                raise
            opener = _open_bracket_line(lines, idx)
            if opener is not None:
                end = _statement_end(lines, opener)
                lines[opener : end] = [_stub(lines[opener])] + [""] * (end - opener - 1)
                continue
            line = lines[idx]
            lines[idx] = "" if line == _stub(line) else _stub(line)
    return ast.parse("\n".join(lines), filename=filename)


def _parameter_docs(fn: _FunctionNode | ast.ClassDef) -> Dict[str, str]:
    """Per-parameter documentation from a Sphinx or Google style docstring."""
    docstring = ast.get_docstring(fn) or ""
    docs: Dict[str, List[str]] = {}
    current: str | None = None
    in_google_section = False
    section_indent = 0
    entry_indent = 0
    for raw_line in docstring.splitlines():
        stripped = raw_line.strip()
        indent = len(raw_line) - len(raw_line.lstrip())
        sphinx = _SPHINX_PARAM_RE.match(stripped)
        if sphinx is not None:
            current = sphinx.group(1)
            docs[current] = [sphinx.group(2)]
            in_google_section = False
            continue
        if _GOOGLE_SECTION_RE.match(stripped):
            in_google_section = True
            section_indent = indent
            current = None
            continue
        if not stripped:
            continue
        if in_google_section:
            if indent <= section_indent:
                in_google_section = False
                current = None
                continue
            entry = _GOOGLE_ENTRY_RE.match(stripped)
            if entry is not None and (current is None or indent <= entry_indent):
                current = entry.group(1).lstrip("*")
                entry_indent = indent
                docs[current] = [entry.group(2)]
                continue
        if current is not None and not stripped.startswith(":"):
            docs[current].append(stripped)
        else:
            current = None
    return {name: "\n".join(lines).strip() for name, lines in docs.items()}


class PythonSourceEngine(TypeEngine):
    """Type engine over one Python module's source text.

    Resolution is lexical: names are looked up in the scopes enclosing a
    position, innermost first. Imports are not followed, so symbols defined in
    other modules do not resolve.
    """

    language_id = "python"

    def __init__(self, source: str, path: Path | None = None) -> None:
        self.source = source
        self.path = path
        try:
            self.tree = _parse_leniently(source, str(path or "<source>"))
        except SyntaxError as exc:
            logger.warning("unparsable source %s: %s", path, exc)
            self.tree = ast.Module(body=[], type_ignores=[])
        self._classes: Dict[str, ast.ClassDef] = {}
        for node in ast.walk(self.tree):
            if isinstance(node, ast.ClassDef):
                self._classes.setdefault(node.name, node)

    @classmethod
    def from_path(cls, path: Path) -> "PythonSourceEngine":
        return cls(path.read_text(encoding="utf-8"), path)

    # Scopes

    def _scope_chain(self, position: Position | None) -> List[_ScopeNode]:
        chain: List[_ScopeNode] = [self.tree]
        if position is None:
            return chain
        line = position.line + 1
        body: Iterable[ast.stmt] = self.tree.body
        while True:
            enclosing = None
            for node in body:
                if not isinstance(node, (ast.ClassDef, ast.FunctionDef, ast.AsyncFunctionDef)):
                    continue
                end = node.end_lineno or node.lineno
                if node.lineno <= line <= end:
                    enclosing = node
                    break
            if enclosing is None:
                break
            chain.append(enclosing)
            body = enclosing.body
        return list(reversed(chain))

    def _scope_members(self, scope: _ScopeNode) -> Dict[str, List[ast.AST]]:
        members: Dict[str, List[ast.AST]] = {}
        if isinstance(scope, (ast.FunctionDef, ast.AsyncFunctionDef)):
            arguments = scope.args
            for arg in arguments.posonlyargs + arguments.args + arguments.kwonlyargs:
                members.setdefault(arg.arg, []).append(arg)
            for arg in (arguments.vararg, arguments.kwarg):
                if arg is not None:
                    members.setdefault(arg.arg, []).append(arg)
        for stmt in scope.body:
            if isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)):
                members.setdefault(stmt.name, []).append(stmt)
            elif isinstance(stmt, ast.Assign):
                for target in stmt.targets:
                    if isinstance(target, ast.Name):
                        members.setdefault(target.id, []).append(stmt)
            elif isinstance(stmt, ast.AnnAssign) and isinstance(stmt.target, ast.Name):
                members.setdefault(stmt.target.id, []).append(stmt)
        return members

    def _symbol_for(
        self, name: str, nodes: List[ast.AST], scope: _ScopeNode
    ) -> EngineSymbol:
        owner = scope if isinstance(scope, ast.ClassDef) else None
        container = scope.name if isinstance(scope, (ast.ClassDef, ast.FunctionDef, ast.AsyncFunctionDef)) else ""
        # A later assignment or definition rebinds the name.
        last = nodes[-1]
        if isinstance(last, (ast.FunctionDef, ast.AsyncFunctionDef)):
            functions = tuple(n for n in nodes if isinstance(n, (ast.FunctionDef, ast.AsyncFunctionDef)))
            kind = SymbolKind.METHOD if owner is not None else SymbolKind.FUNCTION
            return EngineSymbol(name, kind, container, _SymbolSite(functions, owner))
        if isinstance(last, ast.ClassDef):
            kind = SymbolKind.ENUM if self._is_enum(last) else SymbolKind.CLASS
            return EngineSymbol(name, kind, container, _SymbolSite((last,), owner))
        if isinstance(last, ast.arg):
            return EngineSymbol(name, SymbolKind.PARAMETER, container, _SymbolSite((last,), owner))
        if owner is not None and self._is_enum(owner):
            return EngineSymbol(name, SymbolKind.ENUM_MEMBER, container, _SymbolSite((last,), owner))
        return EngineSymbol(name, SymbolKind.VARIABLE, container, _SymbolSite((last,), owner))

    def _visible_scopes(self, chain: List[_ScopeNode]) -> List[_ScopeNode]:
        # Class bodies do not enclose the scopes nested in them.
        return [
            scope
            for idx, scope in enumerate(chain)
            if idx == 0 or not isinstance(scope, ast.ClassDef)
        ]

    def _enclosing_class(self, chain: List[_ScopeNode]) -> ast.ClassDef | None:
        for scope in chain:
            if isinstance(scope, ast.ClassDef):
                return scope
        return None

    def _lookup(self, name: str, scopes: Iterable[_ScopeNode]) -> EngineSymbol | None:
        for scope in scopes:
            nodes = self._scope_members(scope).get(name)
            if nodes:
                return self._symbol_for(name, nodes, scope)
        return None

    def resolve_symbol(
        self,
        name: str,
        position: Position | None = None,
        parent: str | None = None,
    ) -> EngineSymbol | None:
        chain = self._scope_chain(position)
        symbol = self._lookup(name, self._visible_scopes(chain))
        if symbol is not None or not parent:
            return symbol
        container = self._resolve_container(parent, chain)
        if container is None:
            logger.debug("unresolved parent %s for %s", parent, name)
            return None
        return self._member(container, name)

    def _resolve_container(self, parent: str, chain: List[_ScopeNode]) -> EngineSymbol | None:
        head, *rest = parent.split(".")
        owner = self._enclosing_class(chain) if head in {"self", "cls"} else None
        if owner is not None:
            container = EngineSymbol(owner.name, SymbolKind.CLASS, handle=_SymbolSite((owner,)))
        else:
            container = self._lookup(head, self._visible_scopes(chain))
        for segment in rest:
            if container is None:
                return None
            container = self._member(container, segment)
        return container

    def _container_class(self, container: EngineSymbol) -> ast.ClassDef | None:
        site = container.handle
        if not isinstance(site, _SymbolSite) or not site.nodes:
            return None
        node = site.nodes[-1]
        if isinstance(node, ast.ClassDef):
            return node
        return self._instance_class(node)

    def _instance_class(self, node: ast.AST) -> ast.ClassDef | None:
        """Class of a variable annotated with it or assigned from its constructor."""
        annotation = None
        if isinstance(node, (ast.arg, ast.AnnAssign)):
            annotation = node.annotation
        if annotation is not None:
            if isinstance(annotation, ast.Constant) and isinstance(annotation.value, str):
                name = annotation.value.rsplit(".", 1)[-1].strip()
            else:
                name = _last_segment(annotation)
            return self._classes.get(name) if name else None
        value = node.value if isinstance(node, ast.Assign) else None
        if isinstance(value, ast.Call):
            name = _last_segment(value.func)
            return self._classes.get(name) if name else None
        return None

    def member_symbols(
        self, parent: str, position: Position | None = None
    ) -> Tuple[EngineSymbol, ...]:
        container = self._resolve_container(parent, self._scope_chain(position))
        cls = self._container_class(container) if container is not None else None
        if cls is None:
            return ()
        return tuple(
            self._symbol_for(name, nodes, cls)
            for name, nodes in self._scope_members(cls).items()
        )

    def _member(self, container: EngineSymbol, name: str) -> EngineSymbol | None:
        cls = self._container_class(container)
        if cls is None:
            return None
        return self._lookup(name, [cls])

    def visible_symbols(self, position: Position | None = None) -> Tuple[EngineSymbol, ...]:
        seen: set[str] = set()
        symbols: List[EngineSymbol] = []
        for scope in self._visible_scopes(self._scope_chain(position)):
            for name, nodes in self._scope_members(scope).items():
                if name in seen:
                    continue
                seen.add(name)
                symbols.append(self._symbol_for(name, nodes, scope))
        return tuple(symbols)

    # Types

    def _is_enum(self, cls: ast.ClassDef, _seen: frozenset[str] = frozenset()) -> bool:
        for base in cls.bases:
            name = _last_segment(base)
            if name is None:
                continue
            if name in _ENUM_BASES:
                return True
            parent = self._classes.get(name)
            if parent is not None and name not in _seen and parent is not cls:
                if self._is_enum(parent, _seen | {cls.name}):
                    return True
        return False

    def enum_members(self, cls: ast.ClassDef) -> Tuple[str, ...]:
        members: List[str] = []
        for stmt in cls.body:
            targets: List[ast.expr] = []
            if isinstance(stmt, ast.Assign):
                targets = list(stmt.targets)
            elif isinstance(stmt, ast.AnnAssign) and stmt.value is not None:
                targets = [stmt.target]
            for target in targets:
                if isinstance(target, ast.Name) and not target.id.startswith("_"):
                    members.append(target.id)
        return tuple(members)

    def classify(self, node: ast.expr | None) -> TypeDescriptor:
        if node is None:
            return OtherType()
        printed = _unparse(node)
        if _is_none(node):
            return PrimitiveType(PrimitiveKind.VOID)
        if isinstance(node, ast.Constant) and isinstance(node.value, str):
            try:
                parsed = ast.parse(node.value, mode="eval").body
            except SyntaxError:
                return OtherType(node.value)
            return self.classify(parsed)
        if isinstance(node, ast.BinOp):
            members = [m for m in _union_members(node) if not _is_none(m)]
            if len(members) == 1:
                return self.classify(members[0])
            return OtherType(printed)
        if isinstance(node, ast.Subscript):
            return self._classify_subscript(node, printed)
        name = _last_segment(node)
        if name is None:
            return OtherType(printed)
        if name in _NUMBER_NAMES:
            return PrimitiveType(PrimitiveKind.NUMBER)
        if name == "str":
            return PrimitiveType(PrimitiveKind.STRING)
        if name == "bool":
            return PrimitiveType(PrimitiveKind.BOOLEAN)
        if name in _ARRAY_NAMES or name in _TUPLE_NAMES:
            return ArrayOrTupleType(is_tuple=name in _TUPLE_NAMES)
        cls = self._classes.get(name)
        if cls is not None and self._is_enum(cls):
            members = self.enum_members(cls)
            return EnumLiteralType(printed, members[0] if members else None)
        return OtherType(printed)

    def _classify_subscript(self, node: ast.Subscript, printed: str) -> TypeDescriptor:
        name = _last_segment(node.value)
        items = list(node.slice.elts) if isinstance(node.slice, ast.Tuple) else [node.slice]
        if name in _OPTIONAL_NAMES:
            return self.classify(items[0])
        if name in _UNION_NAMES:
            members = [m for m in items if not _is_none(m)]
            if len(members) == 1:
                return self.classify(members[0])
            return OtherType(printed)
        if name == "Annotated":
            return self.classify(items[0])
        if name in _ARRAY_NAMES or name in _TUPLE_NAMES:
            return ArrayOrTupleType(is_tuple=name in _TUPLE_NAMES)
        if name in _CALLABLE_NAMES and len(items) == 2:
            return AnonymousFunctionType(
                self._callable_parameter_text(items[0]),
                self._return_kind(self.classify(items[1])),
            )
        return OtherType(printed)

    def _callable_parameter_text(self, node: ast.expr) -> str:
        if isinstance(node, ast.List):
            parts = [f"arg{idx}: {_unparse(elt)}" for idx, elt in enumerate(node.elts)]
            return f"({', '.join(parts)})"
        return "(*args)"

    @staticmethod
    def _return_kind(descriptor: TypeDescriptor) -> ReturnKind:
        if isinstance(descriptor, PrimitiveType):
            if descriptor.kind is PrimitiveKind.NUMBER:
                return ReturnKind.NUMBER
            if descriptor.kind is PrimitiveKind.STRING:
                return ReturnKind.STRING
            if descriptor.kind is PrimitiveKind.BOOLEAN:
                return ReturnKind.BOOLEAN
        return ReturnKind.OTHER

    # Signatures

    def _function_signature(self, fn: _FunctionNode, owner: ast.ClassDef | None) -> Signature:
        arguments = fn.args
        positional = arguments.posonlyargs + arguments.args
        required = len(positional) - len(arguments.defaults)
        decorators = _decorator_names(fn)
        if owner is not None and "staticmethod" not in decorators and positional:
            positional = positional[1:]
            required -= 1
        docs = _parameter_docs(fn)
        ordered = list(positional)
        if arguments.vararg is not None:
            ordered.append(arguments.vararg)
        ordered.extend(arguments.kwonlyargs)
        if arguments.kwarg is not None:
            ordered.append(arguments.kwarg)
        parameters = tuple(
            Parameter(arg.arg, self.classify(arg.annotation), docs.get(arg.arg, ""))
            for arg in ordered
        )
        return Signature(parameters, max(0, required), self.classify(fn.returns))

    def _callable_signature(self, annotation: ast.expr | None) -> Signature | None:
        if not isinstance(annotation, ast.Subscript):
            return None
        if _last_segment(annotation.value) not in _CALLABLE_NAMES:
            return None
        if not isinstance(annotation.slice, ast.Tuple) or len(annotation.slice.elts) != 2:
            return None
        params_node, return_node = annotation.slice.elts
        if not isinstance(params_node, ast.List):
            return Signature((), 0, self.classify(return_node))
        parameters = tuple(
            Parameter(f"arg{idx}", self.classify(elt)) for idx, elt in enumerate(params_node.elts)
        )
        return Signature(parameters, len(parameters), self.classify(return_node))

    def _lambda_signature(self, value: ast.Lambda) -> Signature:
        positional = value.args.posonlyargs + value.args.args
        parameters = tuple(Parameter(arg.arg) for arg in positional)
        return Signature(parameters, len(positional) - len(value.args.defaults))

    def _local_bases(self, cls: ast.ClassDef, seen: frozenset[str]) -> List[ast.ClassDef]:
        bases: List[ast.ClassDef] = []
        for base in cls.bases:
            name = _last_segment(base)
            parent = self._classes.get(name) if name is not None else None
            if parent is None or parent is cls or name in seen:
                continue
            bases.append(parent)
        return bases

    def _class_signatures(
        self, cls: ast.ClassDef, _seen: frozenset[str] = frozenset()
    ) -> Tuple[Signature, ...]:
        """Constructor signatures: own ``__init__``, dataclass fields, then bases."""
        initializers = self._scope_members(cls).get("__init__", [])
        functions = [n for n in initializers if isinstance(n, (ast.FunctionDef, ast.AsyncFunctionDef))]
        if functions:
            overloads = [fn for fn in functions if _is_overload(fn)]
            chosen = overloads or [functions[-1]]
            return tuple(self._function_signature(fn, cls) for fn in chosen)
        if _is_dataclass(cls) and _dataclass_flag(cls, "init") is not False:
            return (self._dataclass_signature(cls),)
        for base in self._local_bases(cls, _seen):
            inherited = self._class_signatures(base, _seen | {cls.name})
            if inherited:
                return inherited
        return ()

    def _dataclass_fields(
        self, cls: ast.ClassDef, _seen: frozenset[str] = frozenset()
    ) -> Dict[str, Tuple[ast.AnnAssign, bool]]:
        """Init fields in declaration order, base class fields first.

        Each field maps to its class-body node and whether it is keyword-only.
        A redeclared field keeps the position of its first declaration.
        """
        fields: Dict[str, Tuple[ast.AnnAssign, bool]] = {}
        for base in reversed(self._local_bases(cls, _seen)):
            if _is_dataclass(base):
                fields.update(self._dataclass_fields(base, _seen | {cls.name}))
        keyword_only = bool(_dataclass_flag(cls, "kw_only"))
        for stmt in cls.body:
            if not isinstance(stmt, ast.AnnAssign) or not isinstance(stmt.target, ast.Name):
                continue
            annotation = stmt.annotation
            if isinstance(annotation, ast.Subscript):
                annotation = annotation.value
            marker = _last_segment(annotation)
            if marker == "ClassVar":
                continue
            if marker == "KW_ONLY":
                keyword_only = True
                continue
            if _keyword_flag(stmt.value, "field", "init") is False:
                continue
            field_keyword_only = _keyword_flag(stmt.value, "field", "kw_only")
            fields[stmt.target.id] = (
                stmt,
                keyword_only if field_keyword_only is None else field_keyword_only,
            )
        return fields

    def _dataclass_signature(self, cls: ast.ClassDef) -> Signature:
        docs = _parameter_docs(cls)
        positional: List[Tuple[Parameter, bool]] = []
        keyword: List[Parameter] = []
        for name, (stmt, keyword_only) in self._dataclass_fields(cls).items():
            parameter = Parameter(name, self.classify(stmt.annotation), docs.get(name, ""))
            if keyword_only:
                keyword.append(parameter)
            else:
                positional.append((parameter, _field_has_default(stmt.value)))
        required = 0
        for _, has_default in positional:
            if has_default:
                break
            required += 1
        parameters = tuple(parameter for parameter, _ in positional) + tuple(keyword)
        return Signature(parameters, required, OtherType(cls.name))

    def call_signatures(self, symbol: EngineSymbol) -> Tuple[Signature, ...]:
        site = symbol.handle
        if not isinstance(site, _SymbolSite) or not site.nodes:
            return ()
        node = site.nodes[-1]
        if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
            functions = [n for n in site.nodes if isinstance(n, (ast.FunctionDef, ast.AsyncFunctionDef))]
            overloads = [fn for fn in functions if _is_overload(fn)]
            chosen = overloads or [functions[-1]]
            return tuple(self._function_signature(fn, site.owner) for fn in chosen)
        if isinstance(node, ast.ClassDef):
            return self._class_signatures(node) or (Signature(),)
        annotation = None
        if isinstance(node, ast.arg):
            annotation = node.annotation
        elif isinstance(node, ast.AnnAssign):
            annotation = node.annotation
        elif isinstance(node, ast.Assign) and isinstance(node.value, ast.Lambda):
            return (self._lambda_signature(node.value),)
        signature = self._callable_signature(annotation)
        return (signature,) if signature is not None else ()

    # Details

    def describe(self, symbol: EngineSymbol) -> SymbolDetail:
        site = symbol.handle
        if not isinstance(site, _SymbolSite) or not site.nodes:
            return SymbolDetail(symbol.name, symbol.kind)
        node = site.nodes[-1]
        modifiers: List[str] = []
        if symbol.name.startswith("_") and not symbol.name.startswith("__"):
            modifiers.append("private")
        display = symbol.name
        documentation = ""
        if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
            if isinstance(node, ast.AsyncFunctionDef):
                modifiers.append("async")
            decorators = _decorator_names(node)
            if "staticmethod" in decorators:
                modifiers.append("static")
            if "classmethod" in decorators:
                modifiers.append("classmethod")
            shown = site.nodes[0] if _is_overload(site.nodes[0]) else node
            display = f"{symbol.name}({_unparse(shown.args)})"
            if shown.returns is not None:
                display += f" -> {_unparse(shown.returns)}"
            documentation = ast.get_docstring(node) or ""
        elif isinstance(node, ast.ClassDef):
            display = f"class {symbol.name}"
            documentation = ast.get_docstring(node) or ""
        elif isinstance(node, ast.arg) and node.annotation is not None:
            display = f"{symbol.name}: {_unparse(node.annotation)}"
        elif isinstance(node, ast.AnnAssign):
            display = f"{symbol.name}: {_unparse(node.annotation)}"
        if symbol.kind is SymbolKind.ENUM_MEMBER:
            display = f"{symbol.container}.{symbol.name}"
        return SymbolDetail(
            name=symbol.name,
            kind=symbol.kind,
            modifiers=tuple(modifiers),
            display=display,
            documentation=documentation,
        )
