from procurement_intake.models.base import MongoModel
from procurement_intake.models.commodity_group import CommodityGroup, COMMODITY_GROUPS
from procurement_intake.models.request import (
    ProcurementRequest, OrderLine, RequestStatus, DiscountType,
    OrderLineIn, RequestCreate, RequestUpdate, StatusChange,
)
