"""
Vehicle registry API routes
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from vrms.models.entities import Vehicle
from vrms.models.enums import VehicleStatus
from vrms.models.schemas import (
    VehicleCreateRequest,
    VehicleListResponse,
    VehicleStatusUpdateRequest,
)
from vrms.services.vehicle_service import VehicleService, get_vehicle_service

router = APIRouter(prefix="/vehicles", tags=["vehicles"])


@router.post("", response_model=Vehicle, status_code=status.HTTP_201_CREATED)
def add_vehicle(
    payload: VehicleCreateRequest,
    service: VehicleService = Depends(get_vehicle_service),
):
    """Register a vehicle against an existing resident"""
    return service.add_vehicle(payload)


@router.get("", response_model=VehicleListResponse)
def list_vehicles(
    search: Optional[str] = Query(default=None, description="Plate, make or model"),
    status_filter: Optional[VehicleStatus] = Query(default=None, alias="status"),
    service: VehicleService = Depends(get_vehicle_service),
):
    vehicles = service.list_vehicles(search=search, status_filter=status_filter)
    return VehicleListResponse(vehicles=vehicles, count=len(vehicles))


@router.get("/blacklist/{plate_number}")
def check_blacklist(plate_number: str, service: VehicleService = Depends(get_vehicle_service)):
    """Gate lookup: is this plate blacklisted?"""
    return {"plate_number": plate_number, "blacklisted": service.is_blacklisted(plate_number)}


@router.get("/{vehicle_id}", response_model=Vehicle)
def get_vehicle(vehicle_id: str, service: VehicleService = Depends(get_vehicle_service)):
    return service.get_vehicle(vehicle_id)


@router.patch("/{vehicle_id}/status", response_model=Vehicle)
def update_vehicle_status(
    vehicle_id: str,
    payload: VehicleStatusUpdateRequest,
    service: VehicleService = Depends(get_vehicle_service),
):
    """Approve, suspend or blacklist a vehicle"""
    return service.update_status(vehicle_id, payload.status)
