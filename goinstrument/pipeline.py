"""Instrument one Go source file end to end: parse, process, print."""

import logging
import re
from dataclasses import dataclass, field
from typing import Optional

from . import instrumenters as _instrumenters  # noqa: F401
from .errors import InstrumentError
from .nodes import File
from .parser import parse_source
from .patch import Patch
from .printer import print_file
from .processor import Processor
from .registry import available_instrumenters, get_instrumenter
from .selectors import AllOf, ExcludeDirective, NameFilter

logger = logging.getLogger(__name__)

GENERATED_RE = re.compile(r"^// Code generated .* DO NOT EDIT\.$")


def is_generated(file: File) -> bool:
    """True for files carrying the standard generated-code marker."""
    limit = file.name.pos if file.name is not None and file.name.pos is not None else None
    for comment in file.comments:
        if limit is not None and comment.pos is not None and comment.pos > limit:
            break
        for line in comment.text.splitlines():
            if GENERATED_RE.match(line.strip()):
                return True
    return False


@dataclass
class InstrumentResult:
    code: str
    patches: list[Patch] = field(default_factory=list)
    skipped: bool = False

    @property
    def functions(self) -> list[str]:
        return [p.span_name for p in self.patches]


def build_processor(
    file: File,
    app: str = "app",
    instrumenter: str = "otel",
    include=(),
    exclude=(),
) -> Processor:
    inst = get_instrumenter(instrumenter, tracer_name=app)
    if inst is None:
        names = ", ".join(sorted(available_instrumenters()))
        raise InstrumentError(f"unknown instrumenter '{instrumenter}'. Available: {names}")
    selector = AllOf(NameFilter(include, exclude), ExcludeDirective.from_file(file))
    return Processor(instrumenter=inst, function_selector=selector)


def instrument_source(
    code_bytes: bytes,
    *,
    app: str = "app",
    instrumenter: str = "otel",
    skip_generated: bool = False,
    include=(),
    exclude=(),
    processor: Optional[Processor] = None,
) -> InstrumentResult:
    file = parse_source(code_bytes)

    if skip_generated and is_generated(file):
        logger.info("skipping generated file")
        return InstrumentResult(code=code_bytes.decode("utf-8"), skipped=True)

    if processor is None:
        processor = build_processor(file, app, instrumenter, include, exclude)

    patches = processor.process(file)
    if not patches:
        return InstrumentResult(code=code_bytes.decode("utf-8"))
    return InstrumentResult(code=print_file(file), patches=patches)
