from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Dict, List, Optional, Union
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from procurement_intake.models.base import MongoModel
from procurement_intake.models.commodity_group import CommodityGroup
from procurement_intake.tools.money import to_number

# Accepts "1.234,50 €", "EUR 99" or plain numbers
Money = Annotated[float, BeforeValidator(to_number)]

class RequestStatus(str, Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    CLOSED = "closed"

class DiscountType(str, Enum):
    PERCENT = "percent"
    ABSOLUTE = "absolute"
    NONE = "none"

class OrderLine(BaseModel):
    """A single priced position of a request. total_price is always derived."""
    position_description: str = ""
    unit_price: float = 0.0
    amount: float = 0.0
    unit: str = ""
    discount_type: DiscountType = DiscountType.NONE
    discount_value: Optional[float] = Field(None, gt=0, description="Positive reduction magnitude")
    total_price: float = Field(0.0, ge=0)

    model_config = ConfigDict(use_enum_values=True, validate_default=True)

class ProcurementRequest(MongoModel):
    """
    Procurement request as stored in the requests collection.
    """
    requestor_name: str = ""
    title: str = ""
    vendor_name: str = ""
    vat_id: str = ""
    department: str = ""

    commodity_group_id: str
    commodity_group: Optional[CommodityGroup] = None

    order_lines: List[OrderLine] = []
    total_cost: float = 0.0
    extras: float = 0.0

    status: RequestStatus = Field(default=RequestStatus.OPEN)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "requestor_name": "Jane Doe",
                "title": "Adobe Creative Cloud licences",
                "vendor_name": "Global Tech Solutions",
                "vat_id": "DE123456789",
                "department": "Marketing",
                "commodity_group_id": "031",
                "order_lines": [
                    {
                        "position_description": "Creative Cloud seat",
                        "unit_price": 100.0,
                        "amount": 2,
                        "unit": "licences",
                        "discount_type": "percent",
                        "discount_value": 10.0,
                        "total_price": 180.0
                    }
                ],
                "extras": 34.2,
                "total_cost": 214.2,
                "status": "open"
            }
        }
    )

# Request Payloads
class OrderLineIn(BaseModel):
    position_description: Optional[str] = None
    unit_price: Any = None
    amount: Any = None
    unit: Optional[str] = None
    discount: Optional[Union[str, float]] = None
    discount_type: Optional[str] = None
    discount_value: Any = None

    model_config = ConfigDict(extra="ignore")

class RequestCreate(BaseModel):
    requestor_name: str = ""
    title: str = ""
    vendor_name: str = ""
    vat_id: str = ""
    department: str = ""
    commodity_group_id: Optional[str] = None
    commodity_group: Optional[str] = Field(None, description="Group id or exact group name")
    order_lines: List[OrderLineIn] = []
    total_cost: Optional[Money] = None
    extras: Optional[Money] = None
    status: RequestStatus = RequestStatus.OPEN

    model_config = ConfigDict(extra="ignore")

class RequestUpdate(BaseModel):
    requestor_name: Optional[str] = None
    title: Optional[str] = None
    vendor_name: Optional[str] = None
    vat_id: Optional[str] = None
    department: Optional[str] = None
    commodity_group_id: Optional[str] = None
    commodity_group: Optional[str] = None
    order_lines: Optional[List[OrderLineIn]] = None
    total_cost: Optional[Money] = None
    extras: Optional[Money] = None
    status: Optional[RequestStatus] = None

    model_config = ConfigDict(extra="ignore")

class StatusChange(BaseModel):
    status: RequestStatus

class ExtractTextRequest(BaseModel):
    text: str = ""

class ExtractionResponse(BaseModel):
    fields: Dict[str, Any]
