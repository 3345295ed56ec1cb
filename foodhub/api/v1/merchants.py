"""
Merchant Search Endpoints
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from foodhub.database import get_db
from foodhub.schemas.common import ResponseModel
from foodhub.services.geospatial_service import GeospatialService

router = APIRouter()


@router.get("/nearby", response_model=ResponseModel)
def find_nearby_merchants(
    latitude: float = Query(...),
    longitude: float = Query(...),
    radius_meters: float = Query(...),
    limit: Optional[int] = Query(None),
    offset: int = Query(0),
    include_inactive: bool = Query(False),
    db: Session = Depends(get_db)
):
    """Merchants within ``radius_meters`` of a point, nearest first"""
    result = GeospatialService(db).find_merchants_within_radius(
        latitude=latitude,
        longitude=longitude,
        radius_meters=radius_meters,
        limit=limit,
        offset=offset,
        include_inactive=include_inactive
    )
    return ResponseModel(success=True, data=result)


@router.get("/deliverable", response_model=ResponseModel)
def find_deliverable_merchants(
    latitude: float = Query(...),
    longitude: float = Query(...),
    limit: Optional[int] = Query(None),
    offset: int = Query(0),
    include_inactive: bool = Query(False),
    db: Session = Depends(get_db)
):
    """Merchants whose delivery radius covers a point, nearest first"""
    result = GeospatialService(db).find_merchants_in_delivery_range(
        latitude=latitude,
        longitude=longitude,
        limit=limit,
        offset=offset,
        include_inactive=include_inactive
    )
    return ResponseModel(success=True, data=result)


@router.get("/metrics", response_model=ResponseModel)
def get_merchant_metrics(db: Session = Depends(get_db)):
    return ResponseModel(success=True, data=GeospatialService(db).get_performance_metrics())
