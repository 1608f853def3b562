"""Turn a (possibly edited) ``File`` back into Go source.

Regions that were not edited are copied byte for byte from the original
source.  Dirty blocks and import declarations, and every node built in code,
are rendered in gofmt style with tab indentation.
"""

from .nodes import (
    AssignStmt,
    BasicLit,
    BinaryExpr,
    BlockStmt,
    CallExpr,
    Comment,
    DeferStmt,
    ExprStmt,
    Field,
    FieldList,
    File,
    FuncDecl,
    FuncLit,
    FuncType,
    GenDecl,
    Ident,
    IfStmt,
    ImportSpec,
    RawDecl,
    RawExpr,
    RawStmt,
    ReturnStmt,
    SelectorExpr,
    StarExpr,
)

INDENT = "\t"


class Printer:
    def __init__(self, source: bytes = b""):
        self.source = source

    def _original(self, node) -> str:
        start, end = node.span
        return self.source[start:end].decode("utf-8")

    def _unchanged(self, node) -> bool:
        return node.span is not None and not getattr(node, "dirty", False)

    # ── file ─────────────────────────────────────────────────────

    def file(self, file: File) -> str:
        if file.span is None or file.name is None or file.name.span is None:
            return self._file_from_scratch(file)

        out = []
        cursor = self._line_end(file.name.end)
        spanned = [d.pos for d in file.decls if d.span is not None]
        if spanned:
            cursor = min(cursor, spanned[0])
        out.append(self.source[:cursor].decode("utf-8"))
        for decl in file.decls:
            if decl.span is None:
                out.append("\n\n" + self.decl(decl))
                continue
            out.append(self.source[cursor : decl.pos].decode("utf-8"))
            out.append(self.decl(decl))
            cursor = decl.end
        out.append(self.source[cursor:].decode("utf-8"))
        return "".join(out)

    def _line_end(self, pos: int) -> int:
        end = self.source.find(b"\n", pos)
        return len(self.source) if end < 0 else end

    def _file_from_scratch(self, file: File) -> str:
        name = file.name.name if file.name is not None else "main"
        parts = [f"package {name}"]
        for decl in file.decls:
            parts.append(self.decl(decl))
        return "\n\n".join(parts) + "\n"

    def decl(self, decl) -> str:
        if isinstance(decl, GenDecl):
            return self.gen_decl(decl)
        if isinstance(decl, FuncDecl):
            return self.func_decl(decl)
        if isinstance(decl, RawDecl):
            return decl.text
        raise TypeError(f"cannot print {type(decl).__name__}")

    # ── imports ──────────────────────────────────────────────────

    def gen_decl(self, decl: GenDecl) -> str:
        if self._unchanged(decl):
            return self._original(decl)
        if not decl.lparen and len(decl.specs) == 1:
            return "import " + self.import_spec(decl.specs[0])

        lines = []
        for spec in decl.specs:
            if isinstance(spec, Comment) and spec.trailing and lines:
                lines[-1] += " " + spec.text
                continue
            if isinstance(spec, Comment):
                lines.append(INDENT + spec.text)
            else:
                lines.append(INDENT + self.import_spec(spec))
        return "import (\n" + "\n".join(lines) + "\n)"

    def import_spec(self, spec: ImportSpec) -> str:
        if spec.span is not None:
            return self._original(spec)
        path = f'"{spec.path}"'
        if spec.name is not None:
            return f"{spec.name.name} {path}"
        return path

    # ── functions ────────────────────────────────────────────────

    def func_decl(self, fn: FuncDecl) -> str:
        if fn.span is not None and fn.body is not None and fn.body.span is not None:
            head = self.source[fn.pos : fn.body.pos].decode("utf-8")
            tail = self.source[fn.body.end : fn.end].decode("utf-8")
            return head + self.block(fn.body, 0) + tail
        if fn.span is not None and fn.body is None:
            return self._original(fn)

        out = ["func "]
        if fn.recv is not None:
            out.append(self.field_list(fn.recv) + " ")
        out.append(fn.name.name if fn.name is not None else "")
        out.append(self.signature(fn.type))
        if fn.body is not None:
            out.append(" " + self.block(fn.body, 0))
        return "".join(out)

    def signature(self, ft: FuncType) -> str:
        s = self.field_list(ft.params)
        if ft.results is not None and ft.results.items:
            s += " " + self.field_list(ft.results)
        return s

    def field_list(self, fl: FieldList) -> str:
        inner = ", ".join(self.field(f) for f in fl.items)
        if not fl.parens and len(fl.items) == 1 and not fl.items[0].names:
            return inner
        return f"({inner})"

    def field(self, f: Field) -> str:
        names = ", ".join(n.name for n in f.names)
        typ = self.expr(f.type) if f.type is not None else ""
        if names and typ:
            return f"{names} {typ}"
        return names or typ

    # ── statements ───────────────────────────────────────────────

    def block(self, block: BlockStmt, depth: int) -> str:
        if self._unchanged(block):
            return self._original(block)
        if not block.stmts:
            return "{\n" + INDENT * depth + "}"

        lines = ["{"]
        for stmt in block.stmts:
            if self._on_brace_line(block, stmt):
                lines[0] += " " + stmt.text
                continue
            if isinstance(stmt, Comment) and stmt.trailing:
                lines[-1] += " " + stmt.text
                continue
            if getattr(stmt, "blank_before", False):
                lines.append("")
            lines.append(INDENT * (depth + 1) + self.stmt(stmt, depth + 1))
        lines.append(INDENT * depth + "}")
        return "\n".join(lines)

    def _on_brace_line(self, block: BlockStmt, stmt) -> bool:
        # A comment written after the opening brace stays there even when
        # statements are prepended.
        if not (isinstance(stmt, Comment) and stmt.trailing):
            return False
        if block.span is None or stmt.span is None:
            return False
        return b"\n" not in self.source[block.pos : stmt.pos]

    def stmt(self, stmt, depth: int) -> str:
        if isinstance(stmt, (RawStmt, Comment)):
            return stmt.text
        if isinstance(stmt, AssignStmt):
            lhs = ", ".join(self.expr(e, depth) for e in stmt.lhs)
            rhs = ", ".join(self.expr(e, depth) for e in stmt.rhs)
            return f"{lhs} {stmt.tok} {rhs}"
        if isinstance(stmt, ExprStmt):
            return self.expr(stmt.x, depth)
        if isinstance(stmt, DeferStmt):
            return "defer " + self.expr(stmt.call, depth)
        if isinstance(stmt, IfStmt):
            return f"if {self.expr(stmt.cond, depth)} {self.block(stmt.body, depth)}"
        if isinstance(stmt, ReturnStmt):
            if not stmt.results:
                return "return"
            return "return " + ", ".join(self.expr(e, depth) for e in stmt.results)
        if isinstance(stmt, BlockStmt):
            return self.block(stmt, depth)
        raise TypeError(f"cannot print {type(stmt).__name__}")

    # ── expressions ──────────────────────────────────────────────

    def expr(self, e, depth: int = 0) -> str:
        if isinstance(e, Ident):
            return e.name
        if isinstance(e, BasicLit):
            return e.value
        if isinstance(e, RawExpr):
            return e.text
        if isinstance(e, SelectorExpr):
            return f"{self.expr(e.x, depth)}.{e.sel.name}"
        if isinstance(e, StarExpr):
            return "*" + self.expr(e.x, depth)
        if isinstance(e, CallExpr):
            args = ", ".join(self.expr(a, depth) for a in e.args)
            return f"{self.expr(e.fun, depth)}({args})"
        if isinstance(e, BinaryExpr):
            return f"{self.expr(e.x, depth)} {e.op} {self.expr(e.y, depth)}"
        if isinstance(e, FuncLit):
            return "func" + self.signature(e.type) + " " + self.block(e.body, depth)
        raise TypeError(f"cannot print {type(e).__name__}")


def print_file(file: File) -> str:
    return Printer(file.source).file(file)
