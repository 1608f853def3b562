from .base import FunctionSelector, Instrumenter
from .errors import InstrumentError, ParseError, PatchError
from .patch import Patch, apply_patches
from .processor import Processor, extended_span_name
from .registry import available_instrumenters, get_instrumenter

__all__ = [
    "FunctionSelector",
    "InstrumentError",
    "Instrumenter",
    "ParseError",
    "Patch",
    "PatchError",
    "Processor",
    "apply_patches",
    "available_instrumenters",
    "extended_span_name",
    "get_instrumenter",
]
