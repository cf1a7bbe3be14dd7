"""Upload endpoint for PDF documents."""
from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from academic_assistant.api.schemas import DocumentResponse
from academic_assistant.exceptions import ValidationError
from academic_assistant.services.document_upload_service import DocumentUploadService
from academic_assistant.utils.logger import logger

router = APIRouter()


def get_upload_service() -> DocumentUploadService:
    """Get upload service from main app."""
    from academic_assistant.main import upload_service
    if upload_service is None:
        raise HTTPException(status_code=503, detail="Upload service not initialized")
    return upload_service


@router.post("/upload", response_model=DocumentResponse)
async def upload_document(
    file: Annotated[UploadFile, File(...)],
    upload_service: DocumentUploadService = Depends(get_upload_service),
):
    """
    Upload a PDF document.

    Processing continues in the background. Poll GET /api/documents/{id}
    until the status is ready or error.

    Args:
        file: PDF file to upload
        upload_service: Document upload service instance

    Returns:
        DocumentResponse with status processing
    """
    file_content = await file.read()

    try:
        document = await upload_service.upload(file_content, file.filename, file.content_type)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Unexpected error uploading document: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to upload document: {str(e)}")

    return DocumentResponse.from_document(document)
