import logging

from .nodes import File, GenDecl, ImportSpec

logger = logging.getLogger(__name__)


def has_import(file: File, path: str) -> bool:
    """True if ``path`` is imported under its own name.

    Renamed, blank and dot imports do not count: the inserted code refers to
    the package by its default name.
    """
    return any(spec.name is None and spec.path == path for spec in file.imports)


def add_import(file: File, path: str) -> bool:
    """Add ``import "path"`` to ``file`` unless it is already imported.

    The first import declaration that is not the cgo pseudo-import is
    extended; a file without one gets a new declaration right after the
    package clause.  Returns True when the file was changed.
    """
    if has_import(file, path):
        return False

    spec = ImportSpec(path=path)
    target = None
    for decl in file.decls:
        if not isinstance(decl, GenDecl):
            continue
        if any(s.path == "C" for s in decl.imports):
            continue
        target = decl
        break

    if target is None:
        file.decls.insert(0, GenDecl(specs=[spec], dirty=True))
    else:
        target.specs.append(spec)
        target.lparen = True
        target.dirty = True

    logger.debug("added import %s", path)
    return True


def merge_imports(file: File, paths: list[str]) -> list[str]:
    """Add each path once; return the paths that were actually added."""
    return [path for path in paths if add_import(file, path)]
