"""
Dashboard service - counters computed from the current snapshot
"""

from collections import Counter
from datetime import datetime
from typing import Optional

from fastapi import Depends

from vrms.dependencies import get_store
from vrms.models.enums import FeedbackStatus, VehicleStatus, VisitorStatus
from vrms.models.schemas import DashboardResponse
from vrms.store.store import DomainStore
from vrms.utils.timeutils import site_timezone


class DashboardService:
    def __init__(self, store: DomainStore):
        self.store = store

    def get_stats(self, now: Optional[datetime] = None) -> DashboardResponse:
        snapshot = self.store.snapshot
        tz = site_timezone()
        now = now or datetime.now(tz)
        today = (now.astimezone(tz) if now.tzinfo else now).date()

        visitor_status = Counter(v.status for v in snapshot.visitors)
        vehicle_status = Counter(v.status.value for v in snapshot.vehicles)
        feedback_status = Counter(f.status.value for f in snapshot.feedback)

        return DashboardResponse(
            current_user=snapshot.current_user,
            active_visitors=visitor_status[VisitorStatus.ACTIVE],
            today_visits=sum(1 for v in snapshot.visitors if v.visit_date == today),
            pending_check_ins=visitor_status[VisitorStatus.REGISTERED],
            overdue_visitors=visitor_status[VisitorStatus.OVERDUE],
            total_visitors=len(snapshot.visitors),
            active_residents=sum(1 for r in snapshot.residents if r.is_active),
            inactive_residents=sum(1 for r in snapshot.residents if not r.is_active),
            vehicles_by_status={s.value: vehicle_status[s.value] for s in VehicleStatus},
            open_feedback=feedback_status[FeedbackStatus.OPEN.value],
            feedback_by_status={s.value: feedback_status[s.value] for s in FeedbackStatus},
            active_announcements=sum(
                1 for a in snapshot.announcements if a.is_active and not a.is_expired(now=now)
            ),
            expired_announcements=sum(1 for a in snapshot.announcements if a.is_expired(now=now)),
        )


def get_dashboard_service(store: DomainStore = Depends(get_store)) -> DashboardService:
    return DashboardService(store)
