from datetime import datetime
from typing import List, Optional
from pymongo import DESCENDING
from procurement_intake.repositories.base import BaseRepository
from procurement_intake.models.request import ProcurementRequest, RequestStatus

class RequestRepository(BaseRepository[ProcurementRequest]):

    async def list_newest_first(self, skip: int = 0, limit: int = 0) -> List[ProcurementRequest]:
        return await self.list(sort=[("created_at", DESCENDING)], skip=skip, limit=limit)

    async def update_status(self, id: str, status: RequestStatus) -> Optional[ProcurementRequest]:
        return await self.update(id, {
            "status": RequestStatus(status).value,
            "updated_at": datetime.utcnow()
        })
