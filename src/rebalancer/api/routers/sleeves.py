"""Sleeve management endpoints."""

from fastapi import APIRouter, Depends

from rebalancer.api.deps import get_cache, get_sleeve_service
from rebalancer.api.schemas import SleeveCreateRequest, SleeveListResponse, SleeveResponse
from rebalancer.services import SleeveCreate, SleeveMemberInput, SleeveService, TTLCache

router = APIRouter(prefix="/sleeves", tags=["sleeves"])


def _to_input(data: SleeveCreateRequest) -> SleeveCreate:
    return SleeveCreate(
        name=data.name,
        is_active=data.is_active,
        members=[
            SleeveMemberInput(
                ticker=m.ticker,
                rank=m.rank,
                is_active=m.is_active,
                is_legacy=m.is_legacy,
            )
            for m in data.members
        ],
    )


@router.get("/", response_model=SleeveListResponse)
def list_sleeves(
    service: SleeveService = Depends(get_sleeve_service),
) -> SleeveListResponse:
    """List all sleeves with their ranked members."""
    sleeves = service.list_sleeves()
    return SleeveListResponse(
        sleeves=[SleeveResponse.model_validate(s) for s in sleeves],
        count=len(sleeves),
    )


@router.post("/", response_model=SleeveResponse, status_code=201)
def create_sleeve(
    data: SleeveCreateRequest,
    service: SleeveService = Depends(get_sleeve_service),
    cache: TTLCache = Depends(get_cache),
) -> SleeveResponse:
    """Create a sleeve. Tickers must exist and be unique within the sleeve."""
    sleeve = service.create_sleeve(_to_input(data))
    cache.clear()
    return SleeveResponse.model_validate(sleeve)


@router.get("/{sleeve_id}", response_model=SleeveResponse)
def get_sleeve(
    sleeve_id: str,
    service: SleeveService = Depends(get_sleeve_service),
) -> SleeveResponse:
    return SleeveResponse.model_validate(service.get_sleeve(sleeve_id))


@router.put("/{sleeve_id}", response_model=SleeveResponse)
def update_sleeve(
    sleeve_id: str,
    data: SleeveCreateRequest,
    service: SleeveService = Depends(get_sleeve_service),
    cache: TTLCache = Depends(get_cache),
) -> SleeveResponse:
    """Replace a sleeve's name, flags and members."""
    sleeve = service.update_sleeve(sleeve_id, _to_input(data))
    cache.clear()
    return SleeveResponse.model_validate(sleeve)


@router.delete("/{sleeve_id}", status_code=204)
def delete_sleeve(
    sleeve_id: str,
    service: SleeveService = Depends(get_sleeve_service),
    cache: TTLCache = Depends(get_cache),
) -> None:
    """Delete a sleeve not referenced by any model."""
    service.delete_sleeve(sleeve_id)
    cache.clear()
