import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from procurement_intake.models.commodity_group import CommodityGroup, COMMODITY_GROUPS
from procurement_intake.models.request import ProcurementRequest, OrderLine

REQUEST_ID = "65f1a2b3c4d5e6f708192a3b"

GROUPS_BY_ID = {row["id"]: CommodityGroup(**row) for row in COMMODITY_GROUPS}

async def fake_resolve(value):
    """Same contract as CommodityGroupRepository.resolve, backed by the seed table."""
    if not value:
        return None
    if value in GROUPS_BY_ID:
        return GROUPS_BY_ID[value]
    return next((g for g in GROUPS_BY_ID.values() if g.group == value), None)

@pytest.fixture
def mock_db():
    mock = MagicMock()
    mock.requests = AsyncMock()
    mock.commodity_groups = AsyncMock()
    mock.commodity_groups.resolve.side_effect = fake_resolve
    mock.commodity_groups.list_all.return_value = list(GROUPS_BY_ID.values())

    async def _create(model):
        model.id = REQUEST_ID
        return model
    mock.requests.create.side_effect = _create

    with patch("procurement_intake.api.requests.db", mock), \
         patch("procurement_intake.api.commodity_groups.db", mock), \
         patch("procurement_intake.agents.extraction.db", mock):
        yield mock

@pytest.fixture
def mock_llm():
    with patch("procurement_intake.agents.extraction.groq_tool") as mock:
        mock.generate_structured = MagicMock()
        yield mock

@pytest.fixture
def sample_llm_output():
    return {
        "requestor_name": "Jane Doe",
        "title": "Creative Cloud licences",
        "vendor_name": "Global Tech Solutions",
        "vat_id": "DE123456789",
        "commodity_group": "031",
        "department": "Marketing",
        "order_lines": [
            {
                "position_description": "Creative Cloud seat",
                "unit_price": "100,00 €",
                "amount": 2,
                "unit": "licences",
                "discount": "-10%",
                "total_price": 999
            },
            {
                "position_description": "Onboarding",
                "unit_price": 150,
                "amount": "1",
                "unit": "session",
                "discount": 5,
                "total_price": 145
            }
        ],
        "extras": None,
        "total_cost": "1.234,50",
        "status": "open"
    }

@pytest.fixture
def sample_request():
    return ProcurementRequest(
        id=REQUEST_ID,
        requestor_name="Jane Doe",
        title="Creative Cloud licences",
        vendor_name="Global Tech Solutions",
        vat_id="DE123456789",
        department="Marketing",
        commodity_group_id="031",
        commodity_group=GROUPS_BY_ID["031"],
        order_lines=[
            OrderLine(
                position_description="Creative Cloud seat",
                unit_price=100.0,
                amount=2,
                unit="licences",
                discount_type="percent",
                discount_value=10.0,
                total_price=180.0
            )
        ],
        total_cost=214.2,
        extras=34.2
    )
