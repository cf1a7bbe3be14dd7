"""Document listing, content, summary and deletion endpoints."""
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from academic_assistant.api.routes.upload import get_upload_service
from academic_assistant.api.schemas import (
    DeleteResponse,
    DocumentResponse,
    DocumentSummaryResponse,
    PageContent,
)
from academic_assistant.exceptions import DocumentNotFoundError, DocumentNotReadyError
from academic_assistant.services.document_summary import DocumentSummarizer
from academic_assistant.services.document_upload_service import DocumentUploadService

router = APIRouter()


def get_summarizer() -> DocumentSummarizer:
    """Get document summarizer from main app."""
    from academic_assistant.main import summarizer
    if summarizer is None:
        raise HTTPException(status_code=503, detail="Summarizer not initialized")
    return summarizer


@router.get("/documents", response_model=List[DocumentResponse])
async def list_documents(upload_service: DocumentUploadService = Depends(get_upload_service)):
    """List all documents with their processing status."""
    return [DocumentResponse.from_document(d) for d in upload_service.list_documents()]


@router.get("/documents/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: str,
    upload_service: DocumentUploadService = Depends(get_upload_service),
):
    """Get one document. Clients poll this until processing finishes."""
    try:
        return DocumentResponse.from_document(upload_service.get_document(document_id))
    except DocumentNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/documents/{document_id}/content", response_model=List[PageContent])
async def get_document_content(
    document_id: str,
    upload_service: DocumentUploadService = Depends(get_upload_service),
):
    """
    Get the cleaned text of a ready document.

    Returns:
        Pages in reading order

    Raises:
        HTTPException: 404 if unknown, 409 if not ready
    """
    try:
        pages = upload_service.get_content(document_id)
    except DocumentNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DocumentNotReadyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return [PageContent.from_page(p) for p in pages]


@router.get("/documents/{document_id}/summary", response_model=DocumentSummaryResponse)
async def get_document_summary(
    document_id: str,
    upload_service: DocumentUploadService = Depends(get_upload_service),
    summarizer: DocumentSummarizer = Depends(get_summarizer),
):
    """Summarize a ready document."""
    try:
        document = upload_service.get_document(document_id)
        summary = summarizer.summarize(document)
    except DocumentNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DocumentNotReadyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return DocumentSummaryResponse.from_summary(summary)


@router.delete("/documents/{document_id}", response_model=DeleteResponse)
async def delete_document(
    document_id: str,
    upload_service: DocumentUploadService = Depends(get_upload_service),
):
    """Delete a document and cancel its processing if still running."""
    try:
        upload_service.delete(document_id)
    except DocumentNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return DeleteResponse(success=True)
