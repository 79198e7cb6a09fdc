"""
Feedback API routes
"""

from typing import Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from vrms.models.entities import Feedback
from vrms.models.enums import FeedbackCategory, FeedbackStatus
from vrms.models.schemas import (
    FeedbackCreateRequest,
    FeedbackListResponse,
    FeedbackUpdateRequest,
)
from vrms.services.feedback_service import FeedbackService, get_feedback_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/feedback", tags=["feedback"])


@router.post("", response_model=Feedback, status_code=status.HTTP_201_CREATED)
def add_feedback(
    payload: FeedbackCreateRequest,
    service: FeedbackService = Depends(get_feedback_service),
):
    """
    Submit a complaint, suggestion, compliment or maintenance request
    """
    try:
        return service.add_feedback(payload)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("FEEDBACK_ADD_FAILED")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to add feedback: {str(e)}",
        )


@router.get("", response_model=FeedbackListResponse)
def list_feedback(
    search: Optional[str] = Query(default=None, description="Subject or description"),
    status_filter: Optional[FeedbackStatus] = Query(default=None, alias="status"),
    category: Optional[FeedbackCategory] = None,
    resident_id: Optional[str] = None,
    service: FeedbackService = Depends(get_feedback_service),
):
    items = service.list_feedback(
        search=search,
        status_filter=status_filter,
        category=category,
        resident_id=resident_id,
    )
    return FeedbackListResponse(feedback=items, count=len(items))


@router.get("/{feedback_id}", response_model=Feedback)
def get_feedback(feedback_id: str, service: FeedbackService = Depends(get_feedback_service)):
    return service.get_feedback(feedback_id)


@router.patch("/{feedback_id}", response_model=Feedback)
def update_feedback(
    feedback_id: str,
    payload: FeedbackUpdateRequest,
    service: FeedbackService = Depends(get_feedback_service),
):
    """Admin update of status, priority or reply"""
    return service.update_feedback(feedback_id, payload)
