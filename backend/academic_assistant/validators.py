"""Upload validation utilities."""
from typing import Iterable, Optional

from academic_assistant.exceptions import FileSizeExceededError, FileTypeNotSupportedError

PDF_CONTENT_TYPE = "application/pdf"


class DocumentValidator:
    """Checks uploaded files before they are accepted."""

    @classmethod
    def validate_content_type(
        cls,
        content_type: Optional[str],
        allowed: Iterable[str] = (PDF_CONTENT_TYPE,),
    ) -> str:
        """
        Validate the declared media type, ignoring parameters such as charset.

        Raises:
            FileTypeNotSupportedError: If the type is missing or not allowed
        """
        media_type = (content_type or "").split(";", 1)[0].strip().lower()
        if media_type not in {a.lower() for a in allowed}:
            raise FileTypeNotSupportedError("Please upload only PDF files")
        return media_type

    @classmethod
    def validate_file_size(cls, file_size_bytes: int, max_size_mb: float) -> None:
        """Validate file size."""
        if file_size_bytes > max_size_mb * 1024 * 1024:
            file_size_mb = file_size_bytes / (1024 * 1024)
            raise FileSizeExceededError(
                f"File size must be less than {max_size_mb:g}MB "
                f"(received {file_size_mb:.2f} MB)."
            )


def validate_upload(
    content_type: Optional[str],
    file_size_bytes: int,
    max_size_mb: float,
    allowed: Iterable[str] = (PDF_CONTENT_TYPE,),
) -> None:
    """Run every upload check. Type is checked before size."""
    DocumentValidator.validate_content_type(content_type, allowed)
    DocumentValidator.validate_file_size(file_size_bytes, max_size_mb)
