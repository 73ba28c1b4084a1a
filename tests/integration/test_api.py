import pytest
from unittest.mock import AsyncMock, patch
from httpx import ASGITransport, AsyncClient
from procurement_intake.main import app

REQUEST_ID = "65f1a2b3c4d5e6f708192a3b"

def client(raise_app_exceptions=True):
    transport = ASGITransport(app=app, raise_app_exceptions=raise_app_exceptions)
    return AsyncClient(transport=transport, base_url="http://test")

@pytest.mark.asyncio
async def test_health_check():
    async with client() as ac:
        response = await ac.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"

@pytest.mark.asyncio
async def test_list_commodity_groups(mock_db):
    async with client() as ac:
        response = await ac.get("/api/commodity-groups")
    assert response.status_code == 200
    groups = response.json()
    assert len(groups) == 50
    assert groups[30] == {"_id": "031", "category": "Information Technology", "group": "Software"}

@pytest.mark.asyncio
async def test_get_commodity_group_by_name(mock_db):
    async with client() as ac:
        response = await ac.get("/api/commodity-groups/Software")
        missing = await ac.get("/api/commodity-groups/999")
    assert response.json()["_id"] == "031"
    assert missing.status_code == 404

@pytest.mark.asyncio
async def test_create_request_normalizes_lines(mock_db):
    payload = {
        "requestor_name": "Jane Doe",
        "title": "Creative Cloud licences",
        "vendor_name": "Global Tech Solutions",
        "vat_id": "DE123456789",
        "department": "Marketing",
        "commodity_group_id": "031",
        "order_lines": [
            {"position_description": "Seat", "unit_price": "100,00", "amount": 2, "unit": "licences", "discount": "10%", "total_price": 1},
            {"position_description": "Onboarding", "unit_price": 150, "amount": 1, "unit": "session", "discount": 5}
        ],
        "total_cost": "354,00"
    }
    async with client() as ac:
        response = await ac.post("/api/requests/", json=payload)

    assert response.status_code == 201
    body = response.json()
    assert body["_id"] == REQUEST_ID
    assert body["status"] == "open"
    assert body["commodity_group"]["group"] == "Software"
    assert [l["total_price"] for l in body["order_lines"]] == [180.0, 145.0]
    assert body["order_lines"][0]["discount_type"] == "percent"
    assert body["total_cost"] == 354.0
    assert body["extras"] == 29.0
    mock_db.requests.create.assert_awaited_once()

@pytest.mark.asyncio
async def test_create_request_resolves_group_by_name(mock_db):
    async with client() as ac:
        response = await ac.post("/api/requests/", json={"title": "Laptops", "commodity_group": "Hardware"})
    assert response.status_code == 201
    assert response.json()["commodity_group_id"] == "029"
    assert response.json()["total_cost"] == 0.0

@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [
    {"title": "No group"},
    {"title": "Bad id", "commodity_group_id": "999"},
    {"title": "Bad name", "commodity_group": "Office snacks"},
])
async def test_create_request_rejects_invalid_group(mock_db, payload):
    async with client() as ac:
        response = await ac.post("/api/requests/", json=payload)
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid commodity group"
    mock_db.requests.create.assert_not_called()

@pytest.mark.asyncio
async def test_list_requests(mock_db, sample_request):
    mock_db.requests.list_newest_first.return_value = [sample_request]
    async with client() as ac:
        response = await ac.get("/api/requests/")
    assert response.status_code == 200
    assert response.json()[0]["_id"] == REQUEST_ID

@pytest.mark.asyncio
@pytest.mark.parametrize("query", ["skip=-1", "limit=-5"])
async def test_list_requests_rejects_negative_paging(mock_db, query):
    async with client() as ac:
        response = await ac.get(f"/api/requests/?{query}")
    assert response.status_code == 422
    mock_db.requests.list_newest_first.assert_not_called()

@pytest.mark.asyncio
async def test_get_request(mock_db, sample_request):
    mock_db.requests.get.return_value = sample_request
    async with client() as ac:
        response = await ac.get(f"/api/requests/{REQUEST_ID}")
    assert response.status_code == 200
    assert response.json()["order_lines"][0]["total_price"] == 180.0

@pytest.mark.asyncio
async def test_get_request_not_found(mock_db):
    mock_db.requests.get.return_value = None
    async with client() as ac:
        response = await ac.get("/api/requests/unknown")
    assert response.status_code == 404

@pytest.mark.asyncio
async def test_patch_replaces_order_lines(mock_db, sample_request):
    mock_db.requests.get.return_value = sample_request
    mock_db.requests.update.return_value = sample_request
    payload = {
        "title": "Updated title",
        "order_lines": [{"position_description": "Seat", "unit_price": 50, "amount": 4, "discount": "25%"}]
    }
    async with client() as ac:
        response = await ac.patch(f"/api/requests/{REQUEST_ID}", json=payload)

    assert response.status_code == 200
    request_id, ops = mock_db.requests.update.call_args.args
    assert request_id == REQUEST_ID
    assert ops["title"] == "Updated title"
    assert ops["order_lines"] == [{
        "position_description": "Seat", "unit_price": 50.0, "amount": 4.0, "unit": "",
        "discount_type": "percent", "discount_value": 25.0, "total_price": 150.0
    }]
    assert "vendor_name" not in ops
    assert "commodity_group_id" not in ops
    assert "updated_at" in ops
    assert ops["total_cost"] == 184.2
    assert ops["extras"] == 34.2

@pytest.mark.asyncio
@pytest.mark.parametrize("payload, total_cost, extras", [
    ({"total_cost": "214,2049"}, 214.2, 34.2),
    ({"extras": "10"}, 190.0, 10.0),
    ({"total_cost": 250, "extras": 70.004}, 250.0, 70.0),
    ({"order_lines": [], "extras": 5}, 5.0, 5.0),
])
async def test_patch_reconciles_totals(mock_db, sample_request, payload, total_cost, extras):
    mock_db.requests.get.return_value = sample_request
    mock_db.requests.update.return_value = sample_request
    async with client() as ac:
        response = await ac.patch(f"/api/requests/{REQUEST_ID}", json=payload)
    assert response.status_code == 200
    ops = mock_db.requests.update.call_args.args[1]
    assert ops["total_cost"] == total_cost
    assert ops["extras"] == extras

@pytest.mark.asyncio
async def test_patch_without_money_fields_leaves_totals(mock_db, sample_request):
    mock_db.requests.get.return_value = sample_request
    mock_db.requests.update.return_value = sample_request
    async with client() as ac:
        await ac.patch(f"/api/requests/{REQUEST_ID}", json={"title": "Renamed"})
    ops = mock_db.requests.update.call_args.args[1]
    assert "total_cost" not in ops
    assert "extras" not in ops

@pytest.mark.asyncio
async def test_patch_changes_commodity_group(mock_db, sample_request):
    mock_db.requests.get.return_value = sample_request
    mock_db.requests.update.return_value = sample_request
    async with client() as ac:
        response = await ac.patch(f"/api/requests/{REQUEST_ID}", json={"commodity_group": "Consulting"})
    assert response.status_code == 200
    ops = mock_db.requests.update.call_args.args[1]
    assert ops["commodity_group_id"] == "004"
    assert ops["commodity_group"]["_id"] == "004"
    assert "order_lines" not in ops

@pytest.mark.asyncio
async def test_patch_rejects_invalid_group(mock_db, sample_request):
    mock_db.requests.get.return_value = sample_request
    async with client() as ac:
        response = await ac.patch(f"/api/requests/{REQUEST_ID}", json={"commodity_group_id": "999"})
    assert response.status_code == 400
    mock_db.requests.update.assert_not_called()

@pytest.mark.asyncio
async def test_patch_missing_request(mock_db):
    mock_db.requests.get.return_value = None
    async with client() as ac:
        response = await ac.patch(f"/api/requests/{REQUEST_ID}", json={"title": "x"})
    assert response.status_code == 404

@pytest.mark.asyncio
async def test_change_status(mock_db, sample_request):
    sample_request.status = "in_progress"
    mock_db.requests.update_status.return_value = sample_request
    async with client() as ac:
        response = await ac.post(f"/api/requests/{REQUEST_ID}/status", json={"status": "in_progress"})
    assert response.status_code == 200
    assert response.json()["status"] == "in_progress"
    mock_db.requests.update_status.assert_awaited_once_with(REQUEST_ID, "in_progress")

@pytest.mark.asyncio
async def test_change_status_rejects_unknown_status(mock_db):
    async with client() as ac:
        response = await ac.post(f"/api/requests/{REQUEST_ID}/status", json={"status": "approved"})
    assert response.status_code == 422
    mock_db.requests.update_status.assert_not_called()

@pytest.mark.asyncio
async def test_delete_request(mock_db):
    mock_db.requests.delete.return_value = True
    async with client() as ac:
        response = await ac.delete(f"/api/requests/{REQUEST_ID}")
        mock_db.requests.delete.return_value = False
        missing = await ac.delete(f"/api/requests/{REQUEST_ID}")
    assert response.status_code == 204
    assert missing.status_code == 404

@pytest.mark.asyncio
async def test_extract_requires_file(mock_db):
    async with client() as ac:
        response = await ac.post("/api/requests/extract")
    assert response.status_code == 400
    assert response.json()["detail"] == "file required"

@pytest.mark.asyncio
async def test_extract_rejects_unsupported_file(mock_db):
    files = {"file": ("offer.docx", b"PK", "application/vnd.openxmlformats-officedocument.wordprocessingml.document")}
    async with client() as ac:
        response = await ac.post("/api/requests/extract", files=files)
    assert response.status_code == 400

@pytest.mark.asyncio
async def test_extract_pdf(mock_db, mock_llm, sample_llm_output):
    mock_llm.generate_structured.return_value = sample_llm_output
    files = {"file": ("offer.pdf", b"%PDF-1.7 fake", "application/pdf")}
    with patch("procurement_intake.agents.extraction.document_text_tool") as mock_ocr:
        mock_ocr.extract_text.return_value = "Offer text with enough characters"
        async with client() as ac:
            response = await ac.post("/api/requests/extract", files=files)

    assert response.status_code == 200
    fields = response.json()["fields"]
    assert fields["commodity_group_id"] == "031"
    assert fields["order_lines"][0]["total_price"] == 180.0
    mock_ocr.extract_text.assert_called_once_with(b"%PDF-1.7 fake", "application/pdf")

@pytest.mark.asyncio
async def test_extract_text(mock_db, mock_llm, sample_llm_output):
    mock_llm.generate_structured.return_value = sample_llm_output
    async with client() as ac:
        response = await ac.post("/api/requests/extract-text", json={"text": "Offer ..."})
    assert response.status_code == 200
    assert response.json()["fields"]["total_cost"] == 1234.5

@pytest.mark.asyncio
async def test_extract_failure_returns_server_error(mock_db, mock_llm):
    mock_llm.generate_structured.side_effect = RuntimeError("model unavailable")
    async with client() as ac:
        response = await ac.post("/api/requests/extract-text", json={"text": "Offer ..."})
    assert response.status_code == 500
    assert response.json()["detail"] == "model unavailable"

@pytest.mark.asyncio
async def test_persistence_failure_returns_server_error(mock_db):
    mock_db.requests.list_newest_first = AsyncMock(side_effect=RuntimeError("connection refused"))
    async with client(raise_app_exceptions=False) as ac:
        response = await ac.get("/api/requests/")
    assert response.status_code == 500
    assert response.json()["detail"] == "connection refused"
