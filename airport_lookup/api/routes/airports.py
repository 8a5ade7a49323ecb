from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from typing import Optional

from airport_lookup.api.deps import get_airport_search_service
from airport_lookup.services.airport_search import AirportSearchService

router = APIRouter()

@router.get("/airports")
async def search_airports(
    q: Optional[str] = Query(None),
    # raw string so a bad value falls back to the default instead of a 422
    limit: Optional[str] = Query(None),
    svc: AirportSearchService = Depends(get_airport_search_service),
):
    result = await svc.search(q, limit)
    return Response(content=result.to_json(), media_type="application/json")
