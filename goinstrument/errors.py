class InstrumentError(Exception):
    """Base class for failures that abort instrumenting a file."""

    stage = "instrument"


class ParseError(InstrumentError):
    stage = "parse"


class PatchError(InstrumentError):
    """A collected patch could not be committed; the tree was left untouched."""

    stage = "instrument"
