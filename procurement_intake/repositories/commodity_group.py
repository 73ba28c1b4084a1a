import logging
from typing import List, Optional
from pymongo import ASCENDING
from procurement_intake.repositories.base import BaseRepository
from procurement_intake.models.commodity_group import CommodityGroup, seed_documents

logger = logging.getLogger(__name__)

class CommodityGroupRepository(BaseRepository[CommodityGroup]):
    """Read-only access to the seeded commodity group table."""

    def _key(self, id: str) -> str:
        # Seeded with the three-digit code as _id
        return id

    async def ensure_seeded(self) -> int:
        """Insert the static table once. Returns the number of inserted groups."""
        if await self.count() > 0:
            return 0
        docs = seed_documents()
        await self.collection.insert_many(docs)
        logger.info(f"Seeded {len(docs)} commodity groups")
        return len(docs)

    async def list_all(self) -> List[CommodityGroup]:
        return await self.list(sort=[("_id", ASCENDING)])

    async def resolve(self, value: Optional[str]) -> Optional[CommodityGroup]:
        """Exact id match first, then exact group name match."""
        if not value:
            return None
        group = await self.get(value)
        if group:
            return group
        return await self.get_by_field("group", value)

    async def resolve_id(self, value: Optional[str]) -> Optional[str]:
        group = await self.resolve(value)
        return group.id if group else None
