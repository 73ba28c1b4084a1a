from typing import Generic, TypeVar, Any, Dict, List, Optional, Tuple
from motor.motor_asyncio import AsyncIOMotorCollection
from bson import ObjectId
from procurement_intake.models.base import MongoModel

T = TypeVar("T", bound=MongoModel)

class BaseRepository(Generic[T]):
    def __init__(self, collection: AsyncIOMotorCollection, model_cls: type[T]):
        self.collection = collection
        self.model_cls = model_cls

    def _key(self, id: str) -> Any:
        """Documents created by the app use ObjectId keys."""
        return ObjectId(id) if ObjectId.is_valid(id) else None

    async def get(self, id: str) -> Optional[T]:
        """Get a document by ID."""
        key = self._key(id)
        if key is None:
            return None
        doc = await self.collection.find_one({"_id": key})
        return self.model_cls.from_mongo(doc) if doc else None

    async def get_by_field(self, field: str, value: Any) -> Optional[T]:
        """Get a document by a specific field."""
        doc = await self.collection.find_one({field: value})
        return self.model_cls.from_mongo(doc) if doc else None

    async def list(
        self,
        filter: Optional[Dict[str, Any]] = None,
        sort: Optional[List[Tuple[str, int]]] = None,
        skip: int = 0,
        limit: int = 0,
    ) -> List[T]:
        """List documents with optional filter, sort and pagination. limit=0 means no limit."""
        cursor = self.collection.find(filter or {})
        if sort:
            cursor = cursor.sort(sort)
        cursor = cursor.skip(skip).limit(limit)
        docs = await cursor.to_list(length=limit or None)
        return [self.model_cls.from_mongo(doc) for doc in docs]

    async def create(self, model: T) -> T:
        """Create a new document."""
        data = model.to_mongo()
        result = await self.collection.insert_one(data)
        model.id = str(result.inserted_id)
        return model

    async def update(self, id: str, update_data: Dict[str, Any]) -> Optional[T]:
        """Partially update a document by ID and return the fresh copy."""
        key = self._key(id)
        if key is None:
            return None
        result = await self.collection.update_one({"_id": key}, {"$set": update_data})
        if result.matched_count == 0:
            return None
        return await self.get(id)

    async def delete(self, id: str) -> bool:
        """Delete a document by ID."""
        key = self._key(id)
        if key is None:
            return False
        result = await self.collection.delete_one({"_id": key})
        return result.deleted_count > 0

    async def count(self, filter: Optional[Dict[str, Any]] = None) -> int:
        """Count documents matching a filter."""
        return await self.collection.count_documents(filter or {})
