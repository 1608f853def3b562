"""Deferred body edits and their coordinated application."""

import logging
from dataclasses import dataclass, field
from typing import Optional

from .errors import PatchError
from .nodes import BlockStmt, File, Stmt, walk

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Patch:
    """Statements to prepend to one function body.

    ``body`` is the target block itself; insertion is addressed by node
    identity so earlier edits never shift later targets.  ``pos`` is the
    body's source offset and is only used for reporting.
    """

    body: BlockStmt
    stmts: list[Stmt]
    span_name: str = ""
    has_error: bool = False
    pos: Optional[int] = field(default=None)


def apply_patches(file: File, patches: list[Patch]) -> None:
    """Commit every patch or none of them."""
    if not patches:
        return

    wanted: dict[int, Patch] = {}
    for p in patches:
        if id(p.body) in wanted:
            raise PatchError(f"two patches target the same body ({p.span_name!r})")
        wanted[id(p.body)] = p

    # Locate every target first so a missing one aborts before any mutation.
    found: dict[int, BlockStmt] = {}
    for node in walk(file):
        if isinstance(node, BlockStmt) and id(node) in wanted:
            found[id(node)] = node

    missing = [p.span_name or "<anonymous>" for key, p in wanted.items() if key not in found]
    if missing:
        raise PatchError(f"insertion point not found in tree for: {', '.join(missing)}")

    for key, body in found.items():
        p = wanted[key]
        body.stmts[0:0] = list(p.stmts)
        body.dirty = True
        logger.debug("prepended %d statements to %s", len(p.stmts), p.span_name)
