"""
Announcement API routes
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from vrms.models.enums import AnnouncementType
from vrms.models.schemas import (
    AnnouncementCreateRequest,
    AnnouncementListResponse,
    AnnouncementResponse,
    AnnouncementUpdateRequest,
)
from vrms.services.announcement_service import AnnouncementService, get_announcement_service

router = APIRouter(prefix="/announcements", tags=["announcements"])


@router.post("", response_model=AnnouncementResponse, status_code=status.HTTP_201_CREATED)
def add_announcement(
    payload: AnnouncementCreateRequest,
    service: AnnouncementService = Depends(get_announcement_service),
):
    """
    Publish an announcement.
    specific-units announcements must list their target units.
    """
    return service.to_response(service.add_announcement(payload))


@router.get("", response_model=AnnouncementListResponse)
def list_announcements(
    search: Optional[str] = Query(default=None, description="Title or content"),
    type_filter: Optional[AnnouncementType] = Query(default=None, alias="type"),
    current_only: bool = Query(default=False, description="Only active, unexpired notices"),
    unit: Optional[str] = Query(default=None, description="Only notices visible to this unit"),
    service: AnnouncementService = Depends(get_announcement_service),
):
    items = service.list_announcements(
        search=search,
        type_filter=type_filter,
        current_only=current_only,
        unit=unit,
    )
    announcements = [service.to_response(a) for a in items]
    return AnnouncementListResponse(announcements=announcements, count=len(announcements))


@router.get("/{announcement_id}", response_model=AnnouncementResponse)
def get_announcement(
    announcement_id: str,
    service: AnnouncementService = Depends(get_announcement_service),
):
    return service.to_response(service.get_announcement(announcement_id))


@router.patch("/{announcement_id}", response_model=AnnouncementResponse)
def update_announcement(
    announcement_id: str,
    payload: AnnouncementUpdateRequest,
    service: AnnouncementService = Depends(get_announcement_service),
):
    return service.to_response(service.update_announcement(announcement_id, payload))
