"""Custom exception classes for the academic assistant."""


class AssistantError(Exception):
    """Base exception for academic assistant errors."""
    pass


class ValidationError(AssistantError):
    """Raised when user input fails validation."""
    pass


class FileTypeNotSupportedError(ValidationError):
    """Raised when an uploaded file is not a PDF."""
    pass


class FileSizeExceededError(ValidationError):
    """Raised when file size exceeds the maximum allowed."""
    pass


class EmptyQuestionError(ValidationError):
    """Raised when a question has no content."""
    pass


class ProcessingError(AssistantError):
    """Raised when document processing fails."""
    pass


class ExtractionError(ProcessingError):
    """Raised when text extraction from a PDF fails."""
    pass


class InvalidStatusTransitionError(ProcessingError):
    """Raised when a document status change is not allowed."""
    pass


class DocumentNotFoundError(AssistantError):
    """Raised when a document id is unknown."""
    pass


class DocumentNotReadyError(AssistantError):
    """Raised when a document has not finished processing."""
    pass


class StorageError(AssistantError):
    """Raised when reading or writing persisted state fails."""
    pass


class ServiceUnavailableError(AssistantError):
    """Raised when required services are not available."""
    pass
