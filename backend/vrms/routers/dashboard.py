"""
Dashboard API routes
"""

from fastapi import APIRouter, Depends

from vrms.dependencies import get_store
from vrms.models.entities import CurrentUser, Snapshot
from vrms.models.schemas import DashboardResponse
from vrms.services.dashboard_service import DashboardService, get_dashboard_service
from vrms.store.store import DomainStore

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=DashboardResponse)
def get_stats(service: DashboardService = Depends(get_dashboard_service)):
    return service.get_stats()


@router.get("/me", response_model=CurrentUser)
def get_current_user(store: DomainStore = Depends(get_store)):
    """The operator the console is running as"""
    return store.snapshot.current_user


@router.get("/snapshot", response_model=Snapshot)
def get_snapshot(store: DomainStore = Depends(get_store)):
    """Entire application state as a single read"""
    return store.snapshot
