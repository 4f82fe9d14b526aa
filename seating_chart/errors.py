from __future__ import annotations


class SeatingLayoutError(Exception):
    pass


class InvalidDimensions(SeatingLayoutError):
    """Negative or non-numeric row/seat counts or capacity hints."""


class MalformedEditorInput(SeatingLayoutError):
    """Builder output that cannot be turned into a canonical layout."""


class PersistenceFailure(SeatingLayoutError):
    pass


class LayoutNotFound(SeatingLayoutError):
    pass
