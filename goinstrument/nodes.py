"""Mutable Go syntax model.

Nodes are plain dataclasses.  Parsed nodes remember the byte ``span`` they
came from so the printer can reproduce untouched source exactly; nodes built
in code (for example statements returned by an instrumenter) have no span.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Iterator, Optional, Union

Span = Optional[tuple[int, int]]


class Node:
    span: Span

    @property
    def pos(self) -> Optional[int]:
        return self.span[0] if self.span else None

    @property
    def end(self) -> Optional[int]:
        return self.span[1] if self.span else None


# ── Expressions ──────────────────────────────────────────────────────


@dataclass(eq=False)
class Ident(Node):
    name: str
    span: Span = None


@dataclass(eq=False)
class BasicLit(Node):
    value: str
    span: Span = None


@dataclass(eq=False)
class SelectorExpr(Node):
    x: Expr
    sel: Ident
    span: Span = None


@dataclass(eq=False)
class StarExpr(Node):
    x: Expr
    span: Span = None


@dataclass(eq=False)
class CallExpr(Node):
    fun: Expr
    args: list[Expr] = field(default_factory=list)
    span: Span = None


@dataclass(eq=False)
class BinaryExpr(Node):
    x: Expr
    op: str
    y: Expr
    span: Span = None


@dataclass(eq=False)
class FuncLit(Node):
    type: FuncType
    body: BlockStmt
    span: Span = None


@dataclass(eq=False)
class RawExpr(Node):
    """Expression kept as source text (generic, array, map, func types...)."""

    text: str
    span: Span = None


Expr = Union[Ident, BasicLit, SelectorExpr, StarExpr, CallExpr, BinaryExpr, FuncLit, RawExpr]


# ── Fields and signatures ────────────────────────────────────────────


@dataclass(eq=False)
class Field(Node):
    names: list[Ident]
    type: Optional[Expr]
    span: Span = None


@dataclass(eq=False)
class FieldList(Node):
    items: list[Field] = field(default_factory=list)
    # A single unnamed result such as ``error`` is written without parens.
    parens: bool = True
    span: Span = None


@dataclass(eq=False)
class FuncType(Node):
    params: FieldList = field(default_factory=FieldList)
    results: Optional[FieldList] = None
    span: Span = None


# ── Statements ───────────────────────────────────────────────────────


@dataclass(eq=False)
class Comment(Node):
    text: str
    # Written on the same line as the preceding statement or spec.
    trailing: bool = False
    blank_before: bool = False
    span: Span = None


@dataclass(eq=False)
class BlockStmt(Node):
    stmts: list[Stmt] = field(default_factory=list)
    dirty: bool = False
    span: Span = None


@dataclass(eq=False)
class AssignStmt(Node):
    lhs: list[Expr]
    tok: str
    rhs: list[Expr]
    blank_before: bool = False
    span: Span = None


@dataclass(eq=False)
class ExprStmt(Node):
    x: Expr
    blank_before: bool = False
    span: Span = None


@dataclass(eq=False)
class DeferStmt(Node):
    call: CallExpr
    blank_before: bool = False
    span: Span = None


@dataclass(eq=False)
class IfStmt(Node):
    cond: Expr
    body: BlockStmt
    blank_before: bool = False
    span: Span = None


@dataclass(eq=False)
class ReturnStmt(Node):
    results: list[Expr] = field(default_factory=list)
    blank_before: bool = False
    span: Span = None


@dataclass(eq=False)
class RawStmt(Node):
    text: str
    blank_before: bool = False
    span: Span = None


Stmt = Union[AssignStmt, ExprStmt, DeferStmt, IfStmt, ReturnStmt, BlockStmt, RawStmt, Comment]


# ── Declarations ─────────────────────────────────────────────────────


@dataclass(eq=False)
class ImportSpec(Node):
    path: str
    name: Optional[Ident] = None
    span: Span = None


@dataclass(eq=False)
class GenDecl(Node):
    """An ``import`` declaration, single or parenthesised."""

    specs: list[Union[ImportSpec, Comment]] = field(default_factory=list)
    lparen: bool = False
    dirty: bool = False
    span: Span = None

    @property
    def imports(self) -> list[ImportSpec]:
        return [s for s in self.specs if isinstance(s, ImportSpec)]


@dataclass(eq=False)
class FuncDecl(Node):
    recv: Optional[FieldList] = None
    name: Optional[Ident] = None
    type: FuncType = field(default_factory=FuncType)
    body: Optional[BlockStmt] = None
    doc: list[Comment] = field(default_factory=list)
    span: Span = None


@dataclass(eq=False)
class RawDecl(Node):
    """Top level declaration the tool never looks into (types, vars, consts)."""

    text: str
    span: Span = None


Decl = Union[GenDecl, FuncDecl, RawDecl]


@dataclass(eq=False)
class File(Node):
    name: Optional[Ident]
    decls: list[Decl] = field(default_factory=list)
    comments: list[Comment] = field(default_factory=list)
    # Source bytes the spans point into; empty for trees built in code.
    source: bytes = b""
    span: Span = None

    @property
    def imports(self) -> list[ImportSpec]:
        return [s for d in self.decls if isinstance(d, GenDecl) for s in d.imports]


# ── Traversal ────────────────────────────────────────────────────────

# Comments are reachable through File.comments; walking FuncDecl.doc as well
# would visit them twice.
_SKIP_FIELDS = {"span", "source", "comments", "doc"}


def iter_child_nodes(node: Node) -> Iterator[Node]:
    """Yield the direct children of ``node`` in source order."""
    for f in fields(node):
        if f.name in _SKIP_FIELDS:
            continue
        value = getattr(node, f.name)
        if isinstance(value, Node):
            yield value
        elif isinstance(value, list):
            for item in value:
                if isinstance(item, Node):
                    yield item


def walk(node: Node) -> Iterator[Node]:
    """Pre-order, depth-first traversal starting at ``node``."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(list(iter_child_nodes(current))))
