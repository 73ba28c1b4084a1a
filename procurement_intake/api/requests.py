import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, File, HTTPException, Query, Response, UploadFile

from procurement_intake.database import db
from procurement_intake.agents.extraction import extraction_agent
from procurement_intake.models.commodity_group import CommodityGroup
from procurement_intake.models.request import (
    ExtractionResponse,
    ExtractTextRequest,
    ProcurementRequest,
    RequestCreate,
    RequestUpdate,
    StatusChange,
)
from procurement_intake.tools.document_text import guess_mime_type
from procurement_intake.tools.line_normalizer import normalize_order_line, reconcile_totals

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/requests", tags=["Requests"])

PLAIN_FIELDS = ("requestor_name", "title", "vendor_name", "vat_id", "department")

async def resolve_commodity_group(group_id: Optional[str], group_name: Optional[str]) -> CommodityGroup:
    group = await db.commodity_groups.resolve(group_id or group_name)
    if not group:
        raise HTTPException(status_code=400, detail="Invalid commodity group")
    return group

@router.get("/", response_model=List[ProcurementRequest])
async def list_requests(skip: int = Query(0, ge=0), limit: int = Query(0, ge=0)):
    return await db.requests.list_newest_first(skip=skip, limit=limit)

@router.get("/{request_id}", response_model=ProcurementRequest)
async def get_request(request_id: str):
    request = await db.requests.get(request_id)
    if not request:
        raise HTTPException(status_code=404, detail="Request not found")
    return request

@router.post("/", response_model=ProcurementRequest, status_code=201)
async def create_request(payload: RequestCreate):
    group = await resolve_commodity_group(payload.commodity_group_id, payload.commodity_group)

    lines = [normalize_order_line(line.model_dump()) for line in payload.order_lines]
    total_cost, extras = reconcile_totals(lines, payload.total_cost, payload.extras)

    request = ProcurementRequest(
        **{field: getattr(payload, field) for field in PLAIN_FIELDS},
        commodity_group_id=group.id,
        commodity_group=group,
        order_lines=lines,
        total_cost=total_cost,
        extras=extras,
        status=payload.status,
    )
    await db.requests.create(request)

    logger.info(f"Created request {request.id} ({len(lines)} lines, total {total_cost})")
    return request

@router.patch("/{request_id}", response_model=ProcurementRequest)
async def update_request(request_id: str, payload: RequestUpdate):
    existing = await db.requests.get(request_id)
    if not existing:
        raise HTTPException(status_code=404, detail="Request not found")

    data = payload.model_dump(exclude_unset=True)
    ops: Dict[str, Any] = {
        field: data[field] for field in PLAIN_FIELDS if data.get(field) is not None
    }

    if data.get("commodity_group_id") or data.get("commodity_group"):
        group = await resolve_commodity_group(data.get("commodity_group_id"), data.get("commodity_group"))
        ops["commodity_group_id"] = group.id
        ops["commodity_group"] = group.to_mongo()

    lines = existing.order_lines
    if payload.order_lines is not None:
        # Lines are replaced wholesale, never merged
        lines = [normalize_order_line(line.model_dump()) for line in payload.order_lines]
        ops["order_lines"] = [line.model_dump() for line in lines]

    total_cost, extras = data.get("total_cost"), data.get("extras")
    if "order_lines" in ops or total_cost is not None or extras is not None:
        if total_cost is None and extras is None:
            # New lines with no new totals: keep extras, rebuild the stale total
            extras = existing.extras
        ops["total_cost"], ops["extras"] = reconcile_totals(lines, total_cost, extras)
    if payload.status is not None:
        ops["status"] = payload.status.value

    ops["updated_at"] = datetime.utcnow()
    updated = await db.requests.update(request_id, ops)
    if not updated:
        raise HTTPException(status_code=404, detail="Request not found")

    logger.info(f"Updated request {request_id}: {sorted(ops)}")
    return updated

@router.delete("/{request_id}", status_code=204)
async def delete_request(request_id: str):
    deleted = await db.requests.delete(request_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Request not found")
    logger.info(f"Deleted request {request_id}")
    return Response(status_code=204)

@router.post("/{request_id}/status", response_model=ProcurementRequest)
async def change_status(request_id: str, change: StatusChange):
    updated = await db.requests.update_status(request_id, change.status)
    if not updated:
        raise HTTPException(status_code=404, detail="Request not found")
    logger.info(f"Request {request_id} moved to {updated.status}")
    return updated

@router.post("/extract", response_model=ExtractionResponse)
async def extract_from_file(file: Optional[UploadFile] = File(None)):
    if file is None:
        raise HTTPException(status_code=400, detail="file required")
    if guess_mime_type(file.filename, file.content_type) is None:
        raise HTTPException(status_code=400, detail="Invalid file type. Only PDF, PNG, JPEG allowed.")

    try:
        content = await file.read()
        fields = await extraction_agent.extract_from_file(content, file.filename, file.content_type)
        enriched = await extraction_agent.enrich_fields(fields)
    except Exception as e:
        logger.error(f"Extraction from {file.filename} failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return {"fields": enriched}

@router.post("/extract-text", response_model=ExtractionResponse)
async def extract_from_text(body: ExtractTextRequest):
    try:
        fields = await extraction_agent.extract_from_text(body.text)
        enriched = await extraction_agent.enrich_fields(fields)
    except Exception as e:
        logger.error(f"Extraction from text failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return {"fields": enriched}
