"""FAQ and question analytics endpoints."""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from academic_assistant.api.schemas import AnalyticsResponse, FAQItemResponse
from academic_assistant.services.faq_service import FAQTracker

router = APIRouter()


def get_faq_tracker() -> FAQTracker:
    """Get FAQ tracker from main app."""
    from academic_assistant.main import faq_tracker
    if faq_tracker is None:
        raise HTTPException(status_code=503, detail="FAQ tracker not initialized")
    return faq_tracker


@router.get("/faq/popular", response_model=List[FAQItemResponse])
async def popular_questions(
    limit: int = Query(10, ge=1, le=100),
    tracker: FAQTracker = Depends(get_faq_tracker),
):
    """Most popular FAQ entries."""
    return [FAQItemResponse.from_item(item) for item in tracker.get_popular(limit)]


@router.get("/faq/trending", response_model=List[FAQItemResponse])
async def trending_questions(
    limit: int = Query(5, ge=1, le=100),
    window_days: int = Query(7, ge=1, le=365),
    tracker: FAQTracker = Depends(get_faq_tracker),
):
    """FAQ entries asked recently, weighted by how often."""
    return [FAQItemResponse.from_item(item) for item in tracker.get_trending(limit, window_days)]


@router.get("/faq/suggested", response_model=List[FAQItemResponse])
async def suggested_questions(
    context: Optional[str] = None,
    limit: int = Query(6, ge=1, le=100),
    tracker: FAQTracker = Depends(get_faq_tracker),
):
    """FAQ entries related to the given context, popular ones without context."""
    return [FAQItemResponse.from_item(item) for item in tracker.get_suggested(context, limit)]


@router.get("/faq/analytics", response_model=AnalyticsResponse)
async def question_analytics(tracker: FAQTracker = Depends(get_faq_tracker)):
    """Keyword, category and repeat statistics over recent questions."""
    return AnalyticsResponse.from_analytics(tracker.get_analytics())


@router.get("/faq/categories", response_model=List[str])
async def faq_categories(tracker: FAQTracker = Depends(get_faq_tracker)):
    return tracker.get_categories()


@router.get("/faq/categories/{category}", response_model=List[FAQItemResponse])
async def faq_by_category(category: str, tracker: FAQTracker = Depends(get_faq_tracker)):
    return [FAQItemResponse.from_item(item) for item in tracker.get_by_category(category)]
