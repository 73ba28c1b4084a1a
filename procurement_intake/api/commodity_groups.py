from typing import List
from fastapi import APIRouter, HTTPException

from procurement_intake.database import db
from procurement_intake.models.commodity_group import CommodityGroup

router = APIRouter(prefix="/api/commodity-groups", tags=["Commodity Groups"])

@router.get("", response_model=List[CommodityGroup])
async def list_commodity_groups():
    return await db.commodity_groups.list_all()

@router.get("/{group_id}", response_model=CommodityGroup)
async def get_commodity_group(group_id: str):
    """Look up a group by its code or its exact name."""
    group = await db.commodity_groups.resolve(group_id)
    if not group:
        raise HTTPException(status_code=404, detail="Commodity group not found")
    return group
