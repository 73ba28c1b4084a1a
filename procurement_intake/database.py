import logging
from motor.motor_asyncio import AsyncIOMotorClient
from procurement_intake.config import settings
from procurement_intake.repositories.request import RequestRepository
from procurement_intake.repositories.commodity_group import CommodityGroupRepository
from procurement_intake.models.request import ProcurementRequest
from procurement_intake.models.commodity_group import CommodityGroup

logger = logging.getLogger(__name__)

class Database:
    client: AsyncIOMotorClient = None

    # Repositories
    requests: RequestRepository = None
    commodity_groups: CommodityGroupRepository = None

    def connect(self):
        """Initialize database connection and repositories."""
        self.client = AsyncIOMotorClient(settings.MONGODB_URL)
        db = self.client[settings.DB_NAME]

        self.requests = RequestRepository(db.requests, ProcurementRequest)
        self.commodity_groups = CommodityGroupRepository(db.commodity_groups, CommodityGroup)

        logger.info(f"Connected to MongoDB database '{settings.DB_NAME}'")

    def close(self):
        """Close database connection."""
        if self.client:
            self.client.close()
            logger.info("Disconnected from MongoDB")

db = Database()
