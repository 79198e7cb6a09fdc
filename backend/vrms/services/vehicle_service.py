"""
Vehicle service for the whitelist/blacklist register
"""

from typing import List, Optional
import logging

from fastapi import Depends, HTTPException, status

from vrms.dependencies import get_store
from vrms.models.entities import Vehicle
from vrms.models.enums import VehicleStatus
from vrms.models.intents import VehiclePatch
from vrms.models.schemas import VehicleCreateRequest
from vrms.store.store import DomainStore

logger = logging.getLogger(__name__)


class VehicleService:
    """Service for vehicle operations"""

    def __init__(self, store: DomainStore):
        self.store = store

    def _norm_plate(self, plate: Optional[str]) -> str:
        return " ".join((plate or "").upper().split())

    def get_vehicle(self, vehicle_id: str) -> Vehicle:
        for vehicle in self.store.snapshot.vehicles:
            if vehicle.id == vehicle_id:
                return vehicle
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Vehicle not found")

    def add_vehicle(self, request: VehicleCreateRequest) -> Vehicle:
        if not any(r.id == request.resident_id for r in self.store.snapshot.residents):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Resident with ID {request.resident_id} not found",
            )

        fields = request.model_dump()
        fields["plate_number"] = self._norm_plate(request.plate_number)

        vehicle = self.store.add_vehicle(**fields)
        if vehicle is None:
            raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Store is closed")

        logger.info(
            f"VEHICLE_ADDED | vehicle_id={vehicle.id} plate={vehicle.plate_number} "
            f"resident_id={vehicle.resident_id} status={vehicle.status.value}"
        )
        return vehicle

    def update_status(self, vehicle_id: str, new_status: VehicleStatus) -> Vehicle:
        self.get_vehicle(vehicle_id)
        self.store.update_vehicle(vehicle_id, VehiclePatch(status=new_status))
        logger.info(f"VEHICLE_STATUS | vehicle_id={vehicle_id} status={new_status.value}")
        return self.get_vehicle(vehicle_id)

    def list_vehicles(
        self,
        search: Optional[str] = None,
        status_filter: Optional[VehicleStatus] = None,
    ) -> List[Vehicle]:
        """Search matches plate, make or model (case-insensitive)"""
        term = (search or "").strip().lower()
        result = []
        for v in self.store.snapshot.vehicles:
            if term and not any(term in field.lower() for field in (v.plate_number, v.make, v.model)):
                continue
            if status_filter and v.status != status_filter:
                continue
            result.append(v)
        return result

    def is_blacklisted(self, plate_number: str) -> bool:
        plate = self._norm_plate(plate_number)
        return any(
            v.plate_number == plate and v.status == VehicleStatus.BLACKLIST
            for v in self.store.snapshot.vehicles
        )


def get_vehicle_service(store: DomainStore = Depends(get_store)) -> VehicleService:
    return VehicleService(store)
