"""
Visitor service for registration, check-in/out and gate token validation
"""

from datetime import date, datetime
from typing import List, Optional
import logging

from fastapi import Depends, HTTPException, status

from vrms.dependencies import get_store
from vrms.models.entities import Visitor
from vrms.models.enums import VisitorStatus
from vrms.models.intents import VisitorPatch
from vrms.models.schemas import TokenValidationResponse, VisitorCreateRequest
from vrms.store.store import DomainStore
from vrms.utils.timeutils import format_date_time, site_timezone
from vrms.utils.tokens import is_qr_code_valid, parse_qr_code

logger = logging.getLogger(__name__)


class VisitorService:
    """Service for visitor-related operations"""

    def __init__(self, store: DomainStore):
        self.store = store

    # -----------------------------
    # Unit Normalizer
    # -----------------------------
    def _norm_unit(self, unit: Optional[str]) -> str:
        return (unit or "").strip().upper()

    def _find(self, visitor_id: str) -> Optional[Visitor]:
        for visitor in self.store.snapshot.visitors:
            if visitor.id == visitor_id:
                return visitor
        return None

    def get_visitor(self, visitor_id: str) -> Visitor:
        visitor = self._find(visitor_id)
        if not visitor:
            logger.warning(f"VISITOR_NOT_FOUND | visitor_id={visitor_id}")
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Visitor not found")
        return visitor

    def register_visitor(self, request: VisitorCreateRequest) -> Visitor:
        """
        Register a new visit.
        The returned visitor carries the ID and QR token the store generated.
        """
        fields = request.model_dump()
        fields["visiting_unit"] = self._norm_unit(request.visiting_unit)

        visitor = self.store.register_visitor(**fields)
        if visitor is None:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Store is not accepting registrations",
            )
        return visitor

    def check_in(self, visitor_id: str, guard_on_duty: Optional[str] = None) -> Visitor:
        """registered -> active. Guard defaults to the current operator."""
        visitor = self.get_visitor(visitor_id)
        if visitor.status != VisitorStatus.REGISTERED:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Visitor is {visitor.status.value}; only registered visitors can check in",
            )

        guard = (guard_on_duty or "").strip() or self.store.snapshot.current_user.name
        self.store.check_in_visitor(visitor_id, guard)
        visitor = self.get_visitor(visitor_id)
        if visitor.status != VisitorStatus.ACTIVE or visitor.guard_on_duty != guard:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Visitor is {visitor.status.value}; check-in was not applied",
            )
        logger.info(
            f"VISITOR_CHECK_IN | visitor_id={visitor_id} guard={guard} "
            f"at={format_date_time(visitor.check_in_time)}"
        )
        return visitor

    def check_out(self, visitor_id: str) -> Visitor:
        """active -> completed"""
        visitor = self.get_visitor(visitor_id)
        if visitor.status != VisitorStatus.ACTIVE:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Visitor is {visitor.status.value}; only active visitors can check out",
            )

        self.store.check_out_visitor(visitor_id)
        visitor = self.get_visitor(visitor_id)
        # Status may have moved on since the check above (e.g. overdue sweep)
        if visitor.status != VisitorStatus.COMPLETED:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Visitor is {visitor.status.value}; check-out was not applied",
            )
        logger.info(f"VISITOR_CHECK_OUT | visitor_id={visitor_id} at={format_date_time(visitor.check_out_time)}")
        return visitor

    def update_visitor(self, visitor_id: str, updates: VisitorPatch) -> Visitor:
        before = self.get_visitor(visitor_id)
        self.store.update_visitor(visitor_id, updates)
        after = self.get_visitor(visitor_id)

        if after is before and updates.changes():
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Update rejected: status transition not allowed",
            )
        return after

    def list_visitors(
        self,
        search: Optional[str] = None,
        status_filter: Optional[VisitorStatus] = None,
        visit_date: Optional[date] = None,
    ) -> List[Visitor]:
        """
        Visitor log: search matches visitor name, unit or resident name
        (case-insensitive). Newest registrations first.
        """
        term = (search or "").strip().lower()
        result = []
        for v in self.store.snapshot.visitors:
            if term and not any(
                term in field.lower() for field in (v.visitor_name, v.visiting_unit, v.resident_name)
            ):
                continue
            if status_filter and v.status != status_filter:
                continue
            if visit_date and v.visit_date != visit_date:
                continue
            result.append(v)

        result.sort(key=lambda x: x.created_at, reverse=True)
        return result

    def last_registered(self) -> Optional[Visitor]:
        visitors = self.store.snapshot.visitors
        return visitors[-1] if visitors else None

    def validate_token(self, qr_code: str, expected_date: Optional[date] = None) -> TokenValidationResponse:
        """
        Gate check: the token must decode and be issued for expected_date
        (today at the site when not given).
        """
        expected_date = expected_date or datetime.now(site_timezone()).date()
        payload = parse_qr_code(qr_code)
        valid = payload is not None and is_qr_code_valid(qr_code, expected_date)

        visitor = self._find(payload.visitor_id) if payload else None
        logger.info(
            f"TOKEN_VALIDATION | valid={valid} expected_date={expected_date.isoformat()} "
            f"visitor_id={payload.visitor_id if payload else None}"
        )
        return TokenValidationResponse(valid=valid, payload=payload, visitor=visitor)


def get_visitor_service(store: DomainStore = Depends(get_store)) -> VisitorService:
    """VisitorService bound to the application's store"""
    return VisitorService(store)
