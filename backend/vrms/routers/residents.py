"""
Resident API routes
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from vrms.models.intents import ResidentPatch
from vrms.models.schemas import (
    ResidentCreateRequest,
    ResidentListResponse,
    ResidentResponse,
    VehicleListResponse,
)
from vrms.services.resident_service import ResidentService, get_resident_service

router = APIRouter(prefix="/residents", tags=["residents"])


@router.post("", response_model=ResidentResponse, status_code=status.HTTP_201_CREATED)
def add_resident(
    payload: ResidentCreateRequest,
    service: ResidentService = Depends(get_resident_service),
):
    """Add a resident to the directory"""
    resident = service.add_resident(payload)
    return service.to_response(resident)


@router.get("", response_model=ResidentListResponse)
def list_residents(
    search: Optional[str] = Query(default=None, description="Name, unit or email"),
    active: Optional[bool] = None,
    service: ResidentService = Depends(get_resident_service),
):
    residents = [service.to_response(r) for r in service.list_residents(search=search, active=active)]
    return ResidentListResponse(residents=residents, count=len(residents))


@router.get("/{resident_id}", response_model=ResidentResponse)
def get_resident(resident_id: str, service: ResidentService = Depends(get_resident_service)):
    return service.to_response(service.get_resident(resident_id))


@router.patch("/{resident_id}", response_model=ResidentResponse)
def update_resident(
    resident_id: str,
    payload: ResidentPatch,
    service: ResidentService = Depends(get_resident_service),
):
    """Partial update. The resident ID and creation time never change."""
    return service.to_response(service.update_resident(resident_id, payload))


@router.get("/{resident_id}/vehicles", response_model=VehicleListResponse)
def list_resident_vehicles(resident_id: str, service: ResidentService = Depends(get_resident_service)):
    service.get_resident(resident_id)
    vehicles = service.vehicles_for(resident_id)
    return VehicleListResponse(vehicles=vehicles, count=len(vehicles))
