"""
Exceptions raised by qpml
"""


class QpmlError(Exception):
    """Base class for all qpml errors"""


class InputUnreadableError(QpmlError, OSError):
    """The plan source (file, stream or database) could not be read"""


class MalformedStructureError(QpmlError, ValueError):
    """The input does not describe a tree with exactly one root.

    ``line_number`` is the 1-based line that broke the structure, or
    ``None`` when the input had no usable line at all.
    """

    def __init__(self, message, line_number=None):
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


class SerializationMismatchError(QpmlError, ValueError):
    """A stored document does not have the expected QPML shape"""

    def __init__(self, message, field=None):
        if field:
            message = f"{field}: {message}"
        super().__init__(message)
        self.field = field
