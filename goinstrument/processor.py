import logging
from dataclasses import dataclass, field
from typing import Callable

from .base import FunctionSelector, Instrumenter
from .imports import merge_imports
from .nodes import Field, File, FuncDecl, Ident, SelectorExpr, StarExpr, walk
from .patch import Patch, apply_patches

logger = logging.getLogger(__name__)


def extended_span_name(*names: str) -> str:
    """Join the non-empty name segments with dots."""
    return ".".join(n for n in names if n)


# ── Signature shape ──────────────────────────────────────────────────


def receiver_type_name(fn: FuncDecl) -> str:
    """Named type of a method receiver, or "" for functions.

    One level of pointer is unwrapped.  Generic and parenthesised receivers
    are not recognised and fall back to "".
    """
    if fn.recv is None:
        return ""
    for f in fn.recv.items:
        if f is None:
            continue
        t = f.type
        if isinstance(t, StarExpr):
            t = t.x
        if isinstance(t, Ident):
            return t.name
    return ""


def function_name(fn: FuncDecl) -> str:
    return fn.name.name if fn.name is not None else ""


def _single_name(f: Field) -> str | None:
    # anonymous, or several names sharing one type
    if len(f.names) != 1 or f.names[0] is None:
        return None
    return f.names[0].name


# ── Processor ────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Processor:
    """Finds context-carrying functions in a file and instruments them.

    The object holds configuration only and can be reused across files.
    """

    instrumenter: Instrumenter
    function_selector: FunctionSelector
    span_name: Callable[..., str] = field(default=extended_span_name)
    context_name: str = "ctx"
    context_package: str = "context"
    context_type: str = "Context"
    error_name: str = "err"
    error_type: str = "error"

    def is_context(self, f: Field) -> bool:
        if _single_name(f) != self.context_name:
            return False
        pkg = ""
        sym = ""
        if isinstance(f.type, SelectorExpr):
            if isinstance(f.type.x, Ident):
                pkg = f.type.x.name
            if f.type.sel is not None:
                sym = f.type.sel.name
        return pkg == self.context_package and sym == self.context_type

    def is_error(self, f: Field) -> bool:
        if _single_name(f) != self.error_name:
            return False
        return isinstance(f.type, Ident) and f.type.name == self.error_type

    def has_context(self, fn: FuncDecl) -> bool:
        params = fn.type.params if fn.type is not None else None
        if params is None:
            return False
        return any(self.is_context(f) for f in params.items if f is not None)

    def has_error(self, fn: FuncDecl) -> bool:
        results = fn.type.results if fn.type is not None else None
        if results is None:
            return False
        return any(self.is_error(f) for f in results.items if f is not None)

    def collect(self, file: File) -> list[Patch]:
        """Walk the tree once and return pending patches in source order."""
        package_name = ""
        patches: list[Patch] = []

        for node in walk(file):
            if not package_name and isinstance(node, File) and node.name is not None:
                package_name = node.name.name

            if not isinstance(node, FuncDecl):
                continue

            fname = function_name(node)
            if not self.function_selector.accept_function(fname):
                logger.debug("skipping %s: rejected by selector", fname)
                continue

            if not self.has_context(node):
                logger.debug("skipping %s: no %s %s.%s parameter", fname,
                              self.context_name, self.context_package, self.context_type)
                continue

            if node.body is None:
                logger.debug("skipping %s: declaration has no body", fname)
                continue

            has_error = self.has_error(node)
            span_name = self.span_name(package_name, receiver_type_name(node), fname)
            stmts = self.instrumenter.prefix_statements(span_name, has_error)
            patches.append(Patch(
                body=node.body,
                stmts=stmts,
                span_name=span_name,
                has_error=has_error,
                pos=node.body.pos,
            ))

        return patches

    def process(self, file: File) -> list[Patch]:
        """Instrument ``file`` in place and return the committed patches.

        Raises PatchError, before touching imports, if any patch cannot be
        applied.
        """
        patches = self.collect(file)
        if not patches:
            return patches

        apply_patches(file, patches)
        added = merge_imports(file, self.instrumenter.imports())
        logger.info("instrumented %d functions, added %d imports", len(patches), len(added))
        return patches
