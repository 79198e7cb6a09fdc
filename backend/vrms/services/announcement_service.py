"""
Announcement service for property notices
"""

from datetime import datetime
from typing import List, Optional
import logging

from fastapi import Depends, HTTPException, status

from vrms.dependencies import get_store
from vrms.models.entities import Announcement
from vrms.models.enums import AnnouncementType
from vrms.models.intents import AnnouncementPatch
from vrms.models.schemas import (
    AnnouncementCreateRequest,
    AnnouncementResponse,
    AnnouncementUpdateRequest,
)
from vrms.store.store import DomainStore

logger = logging.getLogger(__name__)


class AnnouncementService:
    """Service for announcement operations"""

    def __init__(self, store: DomainStore):
        self.store = store

    def get_announcement(self, announcement_id: str) -> Announcement:
        for ann in self.store.snapshot.announcements:
            if ann.id == announcement_id:
                return ann
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Announcement not found")

    def to_response(self, announcement: Announcement, now: Optional[datetime] = None) -> AnnouncementResponse:
        return AnnouncementResponse(
            **announcement.model_dump(),
            expired=announcement.is_expired(now=now),
        )

    def add_announcement(self, request: AnnouncementCreateRequest) -> Announcement:
        fields = request.model_dump(exclude={"type", "created_by"})
        if fields["target_units"] is not None:
            fields["target_units"] = tuple(u.strip().upper() for u in fields["target_units"])
        fields["attachments"] = tuple(fields["attachments"])

        announcement = self.store.add_announcement(
            **fields,
            announcement_type=request.type,
            created_by=request.created_by or self.store.snapshot.current_user.name,
        )
        if announcement is None:
            raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Store is closed")

        logger.info(
            f"ANNOUNCEMENT_ADDED | announcement_id={announcement.id} type={announcement.type.value} "
            f"audience={announcement.target_audience.value}"
        )
        return announcement

    def update_announcement(self, announcement_id: str, request: AnnouncementUpdateRequest) -> Announcement:
        self.get_announcement(announcement_id)
        patch = AnnouncementPatch(**request.model_dump(exclude_unset=True))
        self.store.update_announcement(announcement_id, patch)
        return self.get_announcement(announcement_id)

    def list_announcements(
        self,
        search: Optional[str] = None,
        type_filter: Optional[AnnouncementType] = None,
        current_only: bool = False,
        unit: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> List[Announcement]:
        """
        Search matches title or content.
        current_only keeps active, unexpired notices; unit keeps notices
        addressed to everyone or to that unit.
        """
        term = (search or "").strip().lower()
        unit_norm = (unit or "").strip().upper()
        result = []
        for ann in self.store.snapshot.announcements:
            if term and term not in ann.title.lower() and term not in ann.content.lower():
                continue
            if type_filter and ann.type != type_filter:
                continue
            if current_only and (not ann.is_active or ann.is_expired(now=now)):
                continue
            if unit_norm and ann.target_units and unit_norm not in ann.target_units:
                continue
            result.append(ann)

        result.sort(key=lambda x: x.created_at, reverse=True)
        return result


def get_announcement_service(store: DomainStore = Depends(get_store)) -> AnnouncementService:
    return AnnouncementService(store)
