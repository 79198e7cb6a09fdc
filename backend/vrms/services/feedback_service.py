"""
Feedback service for resident complaints, suggestions and maintenance requests
"""

from typing import List, Optional
import logging

from fastapi import Depends, HTTPException, status

from vrms.dependencies import get_store
from vrms.models.entities import Feedback
from vrms.models.enums import FeedbackCategory, FeedbackStatus
from vrms.models.intents import FeedbackPatch
from vrms.models.schemas import FeedbackCreateRequest, FeedbackUpdateRequest
from vrms.store.store import DomainStore

logger = logging.getLogger(__name__)


class FeedbackService:
    """Service for feedback operations"""

    def __init__(self, store: DomainStore):
        self.store = store

    def get_feedback(self, feedback_id: str) -> Feedback:
        for fb in self.store.snapshot.feedback:
            if fb.id == feedback_id:
                return fb
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Feedback not found")

    def add_feedback(self, request: FeedbackCreateRequest) -> Feedback:
        """New feedback always starts open"""
        if not any(r.id == request.resident_id for r in self.store.snapshot.residents):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Resident with ID {request.resident_id} not found",
            )

        fields = request.model_dump()
        fields["attachments"] = tuple(fields["attachments"])
        feedback = self.store.add_feedback(**fields, status=FeedbackStatus.OPEN)
        if feedback is None:
            raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Store is closed")

        logger.info(
            f"FEEDBACK_ADDED | feedback_id={feedback.id} resident_id={feedback.resident_id} "
            f"category={feedback.category.value} priority={feedback.priority.value}"
        )
        return feedback

    def update_feedback(self, feedback_id: str, request: FeedbackUpdateRequest) -> Feedback:
        self.get_feedback(feedback_id)
        patch = FeedbackPatch(**request.model_dump(exclude_unset=True))
        self.store.update_feedback(feedback_id, patch)
        return self.get_feedback(feedback_id)

    def list_feedback(
        self,
        search: Optional[str] = None,
        status_filter: Optional[FeedbackStatus] = None,
        category: Optional[FeedbackCategory] = None,
        resident_id: Optional[str] = None,
    ) -> List[Feedback]:
        """Search matches subject or description. Newest first."""
        term = (search or "").strip().lower()
        result = []
        for fb in self.store.snapshot.feedback:
            if term and term not in fb.subject.lower() and term not in fb.description.lower():
                continue
            if status_filter and fb.status != status_filter:
                continue
            if category and fb.category != category:
                continue
            if resident_id and fb.resident_id != resident_id:
                continue
            result.append(fb)

        result.sort(key=lambda x: x.created_at, reverse=True)
        return result


def get_feedback_service(store: DomainStore = Depends(get_store)) -> FeedbackService:
    return FeedbackService(store)
