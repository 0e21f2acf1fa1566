"""Region directory used by the location pickers"""

from fastapi import APIRouter

from ...config import LOCATION_SCHEMA
from ...errors import NotFound
from .data import REGIONS

router = APIRouter(prefix="/locations", tags=["Locations"])


@router.get("")
async def list_regions():
    return {"schema": LOCATION_SCHEMA, "states": sorted(REGIONS)}


@router.get("/{state}")
async def get_region(state: str):
    region = REGIONS.get(state)
    if region is None:
        raise NotFound(f"Unknown state: {state}")
    return {"state": state, **region}
