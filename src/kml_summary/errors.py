"""Exceptions raised by the summary pipeline."""


class KmlParseError(ValueError):
    """Raised when a KML or KMZ payload cannot be read."""


class InvalidCollectionError(ValueError):
    """Raised when the input is not a collection of features."""
