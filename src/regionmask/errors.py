"""
Terminal failures of a mask extraction.

Recoverable anomalies (malformed lines, unknown shapes) never raise; only
these two conditions abort an extraction.
"""


class RegionMaskError(ValueError):
    """Base class for extraction failures."""


class NoValidRegionsError(RegionMaskError):
    """No region contributed to the extraction, so no grid can be built."""

    def __init__(self, message="No valid regions found"):
        super().__init__(message)


class EmptyMaskError(RegionMaskError):
    """Regions were found but the combined mask has no true pixel."""

    def __init__(self, message="Empty area: the combined mask has no pixel set"):
        super().__init__(message)
