"""
Exception hierarchy for findr-tutorials.

The CLI catches ``FindrTutorialsError`` and renders it as an error panel;
library callers can catch the specific subclasses.
"""


class FindrTutorialsError(Exception):
    """Base class for all package errors."""


class SampleAlignmentError(FindrTutorialsError):
    """Raised when tables that must share sample ordering do not."""


class ResultTableError(FindrTutorialsError):
    """Raised when a result table or DAG does not have the expected shape."""


class MappingError(FindrTutorialsError):
    """Raised when a variant-to-gene mapping does not match its data tables."""


class BackendNotFoundError(FindrTutorialsError):
    """Raised when no analysis backend is registered under a name."""


class InputFormatError(FindrTutorialsError):
    """Raised when a raw input file lacks expected columns or content."""
