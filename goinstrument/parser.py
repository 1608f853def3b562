"""Build the Go syntax model from source using tree-sitter.

Only the parts the instrumenter inspects are modelled: the package clause,
imports, and function/method signatures.  Statements and other top-level
declarations are kept as source text with their byte spans.
"""

from tree_sitter import Language, Parser
from tree_sitter_go import language

from .errors import ParseError
from .nodes import (
    BlockStmt,
    Comment,
    Field,
    FieldList,
    File,
    FuncDecl,
    FuncType,
    GenDecl,
    Ident,
    ImportSpec,
    RawDecl,
    RawExpr,
    RawStmt,
    SelectorExpr,
    StarExpr,
)

GO_LANGUAGE = Language(language())


def get_text(node, code_bytes: bytes) -> str:
    """Extract source text for a tree-sitter node."""
    return code_bytes[node.start_byte : node.end_byte].decode("utf-8")


def make_parser() -> Parser:
    ts_parser = Parser()
    ts_parser.language = GO_LANGUAGE
    return ts_parser


def _first_error(node):
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _first_error(child)
            if found is not None:
                return found
    return None


class GoFileParser:
    def __init__(self, ts_parser, code_bytes):
        self.ts_parser = ts_parser
        self.code_bytes = code_bytes

    def parse(self) -> File:
        tree = self.ts_parser.parse(self.code_bytes)
        root = tree.root_node
        if root.has_error:
            bad = _first_error(root) or root
            line, col = bad.start_point[0] + 1, bad.start_point[1] + 1
            raise ParseError(f"syntax error at line {line}, column {col}")

        file = File(name=None, source=self.code_bytes, span=(0, len(self.code_bytes)))
        doc: list[Comment] = []
        doc_end_row = -2
        prev_end_row = -2

        for child in root.named_children:
            if child.type == "comment":
                comment = self._comment(child)
                file.comments.append(comment)
                if child.start_point[0] == prev_end_row:
                    # trailing comment of the previous declaration
                    pass
                elif doc and child.start_point[0] == doc_end_row + 1:
                    doc.append(comment)
                    doc_end_row = child.end_point[0]
                else:
                    doc = [comment]
                    doc_end_row = child.end_point[0]
                continue

            attached = doc if doc and doc_end_row == child.start_point[0] - 1 else []
            doc = []
            prev_end_row = child.end_point[0]

            if child.type == "package_clause":
                file.name = self._package_name(child)
            elif child.type == "import_declaration":
                file.decls.append(self._import_decl(child))
            elif child.type in ("function_declaration", "method_declaration"):
                fn = self._func_decl(child)
                fn.doc = attached
                file.decls.append(fn)
            else:
                file.decls.append(RawDecl(self._text(child), span=self._span(child)))

        if file.name is None:
            raise ParseError("missing package clause")
        return file

    # ── helpers ───────────────────────────────────────────────────

    def _text(self, node) -> str:
        return get_text(node, self.code_bytes)

    @staticmethod
    def _span(node):
        return (node.start_byte, node.end_byte)

    def _ident(self, node) -> Ident:
        return Ident(self._text(node), span=self._span(node))

    def _comment(self, node, **kwargs) -> Comment:
        return Comment(self._text(node), span=self._span(node), **kwargs)

    def _package_name(self, node) -> Ident:
        for child in node.named_children:
            if child.type in ("package_identifier", "identifier"):
                return self._ident(child)
        raise ParseError("package clause without a name")

    # ── imports ──────────────────────────────────────────────────

    def _import_decl(self, node) -> GenDecl:
        decl = GenDecl(span=self._span(node))
        for child in node.named_children:
            if child.type == "import_spec":
                decl.specs.append(self._import_spec(child))
            elif child.type == "import_spec_list":
                decl.lparen = True
                prev_row = child.start_point[0]
                for item in child.named_children:
                    if item.type == "import_spec":
                        decl.specs.append(self._import_spec(item))
                    elif item.type == "comment":
                        decl.specs.append(
                            self._comment(item, trailing=item.start_point[0] == prev_row)
                        )
                    prev_row = item.end_point[0]
        return decl

    def _import_spec(self, node) -> ImportSpec:
        path_node = node.child_by_field_name("path")
        name_node = node.child_by_field_name("name")
        raw = self._text(path_node) if path_node else '""'
        return ImportSpec(
            path=raw[1:-1],
            name=self._ident(name_node) if name_node else None,
            span=self._span(node),
        )

    # ── functions ────────────────────────────────────────────────

    def _func_decl(self, node) -> FuncDecl:
        fn = FuncDecl(span=self._span(node))

        recv = node.child_by_field_name("receiver")
        if recv is not None:
            fn.recv = self._field_list(recv)

        name = node.child_by_field_name("name")
        if name is not None:
            fn.name = self._ident(name)

        params = node.child_by_field_name("parameters")
        result = node.child_by_field_name("result")
        fn.type = FuncType(
            params=self._field_list(params) if params is not None else FieldList(),
            results=self._results(result) if result is not None else None,
        )

        body = node.child_by_field_name("body")
        if body is not None:
            fn.body = self._block(body)
        return fn

    def _field_list(self, node) -> FieldList:
        fl = FieldList(span=self._span(node))
        for child in node.named_children:
            if child.type not in ("parameter_declaration", "variadic_parameter_declaration"):
                continue
            names = [self._ident(n) for n in child.children_by_field_name("name")]
            type_node = child.child_by_field_name("type")
            if type_node is None:
                typ = None
            elif child.type == "variadic_parameter_declaration":
                typ = RawExpr("..." + self._text(type_node), span=self._span(type_node))
            else:
                typ = self._type(type_node)
            fl.items.append(Field(names, typ, span=self._span(child)))
        return fl

    def _results(self, node) -> FieldList:
        if node.type == "parameter_list":
            return self._field_list(node)
        # bare result type: func f() error
        return FieldList([Field([], self._type(node), span=self._span(node))],
                         parens=False, span=self._span(node))

    def _type(self, node):
        if node.type == "type_identifier":
            return self._ident(node)
        if node.type == "qualified_type":
            pkg = node.child_by_field_name("package")
            name = node.child_by_field_name("name")
            if pkg is not None and name is not None:
                return SelectorExpr(self._ident(pkg), self._ident(name), span=self._span(node))
        if node.type == "pointer_type" and node.named_children:
            return StarExpr(self._type(node.named_children[0]), span=self._span(node))
        return RawExpr(self._text(node), span=self._span(node))

    # ── bodies ───────────────────────────────────────────────────

    def _block(self, node) -> BlockStmt:
        block = BlockStmt(span=self._span(node))
        items = []
        for child in node.named_children:
            if child.type == "statement_list":
                items.extend(child.named_children)
            else:
                items.append(child)

        prev_end = node.start_byte + 1
        prev_row = node.start_point[0]
        for item in items:
            gap = self.code_bytes[prev_end : item.start_byte]
            blank = gap.count(b"\n") >= 2
            if item.type == "comment":
                stmt = self._comment(item, trailing=item.start_point[0] == prev_row,
                                     blank_before=blank)
            else:
                stmt = RawStmt(self._text(item), blank_before=blank, span=self._span(item))
            block.stmts.append(stmt)
            prev_end = item.end_byte
            prev_row = item.end_point[0]
        return block


def parse_source(code_bytes: bytes, ts_parser=None) -> File:
    """Parse one Go source file into a ``File``."""
    try:
        code_bytes.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ParseError("source is not valid UTF-8") from e
    return GoFileParser(ts_parser or make_parser(), code_bytes).parse()
