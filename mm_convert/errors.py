"""Custom exceptions raised by the converter."""


class ConversionError(Exception):
    """Base error for a failed conversion; ``str(exc)`` is the user message."""


class SourceNotFoundError(ConversionError):
    """Raised when the source path does not exist."""

    def __init__(self, message: str = "Source file not found."):
        super().__init__(message)


class UnsupportedFileTypeError(ConversionError):
    """Raised for an extension other than txt, docx, xlsx or pptx."""

    def __init__(
        self,
        message: str = "Unsupported file type. Please select txt, docx, xlsx, or pptx.",
    ):
        super().__init__(message)


class ContainerError(ConversionError):
    """Source package is not a readable zip archive."""


class TargetWriteError(ConversionError):
    """Target path could not be created or written."""


class MalformedXMLError(ConversionError):
    """An XML part could not be tokenized to completion."""

    def __init__(self, message: str, offset: int = -1):
        super().__init__(message)
        self.offset = offset
