import re

from .base import FunctionSelector
from .nodes import File, FuncDecl

EXCLUDE_DIRECTIVE = "//instrument:exclude"


class AcceptAll(FunctionSelector):
    def accept_function(self, name):
        return True


class NameFilter(FunctionSelector):
    """Regular-expression include/exclude lists; exclusion wins.

    An empty include list accepts every name not excluded.
    """

    def __init__(self, include=(), exclude=()):
        self.include = [re.compile(p) for p in include]
        self.exclude = [re.compile(p) for p in exclude]

    def accept_function(self, name):
        if any(p.search(name) for p in self.exclude):
            return False
        if not self.include:
            return True
        return any(p.search(name) for p in self.include)


class ExcludeDirective(FunctionSelector):
    """Rejects functions whose doc comment carries ``//instrument:exclude``.

    Methods share the bare-name namespace, so excluding ``Get`` on one type
    excludes every ``Get`` in the file.
    """

    def __init__(self, excluded=()):
        self.excluded = set(excluded)

    @classmethod
    def from_file(cls, file: File) -> "ExcludeDirective":
        excluded = set()
        for decl in file.decls:
            if not isinstance(decl, FuncDecl) or decl.name is None:
                continue
            if any(c.text.strip().startswith(EXCLUDE_DIRECTIVE) for c in decl.doc):
                excluded.add(decl.name.name)
        return cls(excluded)

    def accept_function(self, name):
        return name not in self.excluded


class AllOf(FunctionSelector):
    def __init__(self, *selectors: FunctionSelector):
        self.selectors = selectors

    def accept_function(self, name):
        return all(s.accept_function(name) for s in self.selectors)
