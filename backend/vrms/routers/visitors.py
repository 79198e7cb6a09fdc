"""
Visitor API routes
"""

from datetime import date
from typing import Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from vrms.models.entities import Visitor
from vrms.models.enums import VisitorStatus
from vrms.models.intents import VisitorPatch
from vrms.models.schemas import (
    TokenValidationRequest,
    TokenValidationResponse,
    VisitorCheckInRequest,
    VisitorCreateRequest,
    VisitorListResponse,
)
from vrms.services.visitor_service import VisitorService, get_visitor_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/visitors", tags=["visitors"])


@router.post(
    "",
    response_model=Visitor,
    status_code=status.HTTP_201_CREATED,
    summary="Register visitor",
    description="""
    Register a new visit.

    Creates visitor entry with:
    - generated visitor ID (VIS...)
    - QR access token bound to the visit date and unit
    - status=registered
    """,
)
def register_visitor(
    request: VisitorCreateRequest,
    service: VisitorService = Depends(get_visitor_service),
):
    try:
        return service.register_visitor(request)
    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to register visitor: {str(e)}",
        )


@router.get("", response_model=VisitorListResponse)
def list_visitors(
    search: Optional[str] = Query(default=None, description="Visitor name, unit or resident"),
    status_filter: Optional[VisitorStatus] = Query(default=None, alias="status"),
    visit_date: Optional[date] = None,
    service: VisitorService = Depends(get_visitor_service),
):
    """Visitor log, newest first"""
    visitors = service.list_visitors(search=search, status_filter=status_filter, visit_date=visit_date)
    return VisitorListResponse(visitors=visitors, count=len(visitors))


@router.get("/last", response_model=Visitor)
def get_last_registered(service: VisitorService = Depends(get_visitor_service)):
    """Most recently registered visitor, for the registration confirmation panel"""
    visitor = service.last_registered()
    if not visitor:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No visitors registered yet")
    return visitor


@router.post("/validate-token", response_model=TokenValidationResponse)
def validate_token(
    payload: TokenValidationRequest,
    service: VisitorService = Depends(get_visitor_service),
):
    """
    Gate check of a scanned QR token.
    Malformed tokens are reported as invalid, never as an error.
    """
    return service.validate_token(payload.qr_code, payload.expected_date)


@router.post("/sweep", response_model=VisitorListResponse)
def run_overdue_sweep(
    request: Request,
    service: VisitorService = Depends(get_visitor_service),
):
    """Run the overdue sweep now instead of waiting for the next tick"""
    sweeper = getattr(request.app.state, "sweeper", None)
    if sweeper is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Sweeper is not running")

    marked = sweeper.sweep()
    visitors = [service.get_visitor(visitor_id) for visitor_id in marked]
    return VisitorListResponse(visitors=visitors, count=len(visitors))


@router.get("/{visitor_id}", response_model=Visitor)
def get_visitor(visitor_id: str, service: VisitorService = Depends(get_visitor_service)):
    return service.get_visitor(visitor_id)


@router.patch("/{visitor_id}", response_model=Visitor)
def update_visitor(
    visitor_id: str,
    payload: VisitorPatch,
    service: VisitorService = Depends(get_visitor_service),
):
    """Edit visit details. Status may only move along allowed transitions."""
    return service.update_visitor(visitor_id, payload)


@router.post("/{visitor_id}/check-in", response_model=Visitor)
def check_in_visitor(
    visitor_id: str,
    payload: Optional[VisitorCheckInRequest] = None,
    service: VisitorService = Depends(get_visitor_service),
):
    guard = payload.guard_on_duty if payload else None
    return service.check_in(visitor_id, guard_on_duty=guard)


@router.post("/{visitor_id}/check-out", response_model=Visitor)
def check_out_visitor(visitor_id: str, service: VisitorService = Depends(get_visitor_service)):
    return service.check_out(visitor_id)
