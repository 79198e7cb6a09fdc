"""
Resident service for resident records and their vehicles
"""

from typing import List, Optional
import logging

from fastapi import Depends, HTTPException, status

from vrms.dependencies import get_store
from vrms.models.entities import Resident, Vehicle
from vrms.models.intents import ResidentPatch
from vrms.models.schemas import ResidentCreateRequest, ResidentResponse
from vrms.store.store import DomainStore

logger = logging.getLogger(__name__)


class ResidentService:
    """Service for resident operations"""

    def __init__(self, store: DomainStore):
        self.store = store

    def get_resident(self, resident_id: str) -> Resident:
        for resident in self.store.snapshot.residents:
            if resident.id == resident_id:
                return resident
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resident not found")

    def vehicles_for(self, resident_id: str) -> List[Vehicle]:
        """Vehicles whose back-reference points at this resident"""
        return [v for v in self.store.snapshot.vehicles if v.resident_id == resident_id]

    def to_response(self, resident: Resident) -> ResidentResponse:
        owned = len(resident.vehicles) + len(self.vehicles_for(resident.id))
        return ResidentResponse(**resident.model_dump(), vehicle_count=owned)

    def add_resident(self, request: ResidentCreateRequest) -> Resident:
        fields = request.model_dump()
        fields["unit"] = fields["unit"].strip().upper()

        resident = self.store.add_resident(**fields)
        if resident is None:
            raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Store is closed")

        logger.info(f"RESIDENT_ADDED | resident_id={resident.id} unit={resident.unit}")
        return resident

    def update_resident(self, resident_id: str, updates: ResidentPatch) -> Resident:
        self.get_resident(resident_id)
        self.store.update_resident(resident_id, updates)
        return self.get_resident(resident_id)

    def list_residents(
        self,
        search: Optional[str] = None,
        active: Optional[bool] = None,
    ) -> List[Resident]:
        """Search matches name, unit or email (case-insensitive)"""
        term = (search or "").strip().lower()
        result = []
        for r in self.store.snapshot.residents:
            if term and not any(term in field.lower() for field in (r.name, r.unit, r.email)):
                continue
            if active is not None and r.is_active != active:
                continue
            result.append(r)
        return result


def get_resident_service(store: DomainStore = Depends(get_store)) -> ResidentService:
    return ResidentService(store)
