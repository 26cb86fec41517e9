"""Allocation model endpoints."""

from fastapi import APIRouter, Depends

from rebalancer.api.deps import get_cache, get_model_service
from rebalancer.api.schemas import (
    EqualWeightModelRequest,
    ModelCreateRequest,
    ModelListResponse,
    ModelResponse,
)
from rebalancer.services import ModelCreate, ModelMemberInput, ModelService, TTLCache

router = APIRouter(prefix="/models", tags=["models"])


def _to_input(data: ModelCreateRequest) -> ModelCreate:
    return ModelCreate(
        name=data.name,
        description=data.description,
        members=[
            ModelMemberInput(
                sleeve_id=m.sleeve_id,
                target_weight_bps=m.target_weight_bps,
                is_active=m.is_active,
            )
            for m in data.members
        ],
    )


@router.get("/", response_model=ModelListResponse)
def list_models(
    service: ModelService = Depends(get_model_service),
) -> ModelListResponse:
    models = service.list_models()
    return ModelListResponse(
        models=[ModelResponse.model_validate(m) for m in models],
        count=len(models),
    )


@router.post("/", response_model=ModelResponse, status_code=201)
def create_model(
    data: ModelCreateRequest,
    service: ModelService = Depends(get_model_service),
    cache: TTLCache = Depends(get_cache),
) -> ModelResponse:
    """Create a model. Active weights must total exactly 10000 basis points."""
    model = service.create_model(_to_input(data))
    cache.clear()
    return ModelResponse.model_validate(model)


@router.post("/equal-weight", response_model=ModelResponse, status_code=201)
def create_equal_weight_model(
    data: EqualWeightModelRequest,
    service: ModelService = Depends(get_model_service),
    cache: TTLCache = Depends(get_cache),
) -> ModelResponse:
    """Create a model splitting 10000 basis points evenly over the sleeves."""
    model = service.equal_weight_model(data.name, data.sleeve_ids, data.description)
    cache.clear()
    return ModelResponse.model_validate(model)


@router.get("/{model_id}", response_model=ModelResponse)
def get_model(
    model_id: str,
    service: ModelService = Depends(get_model_service),
) -> ModelResponse:
    return ModelResponse.model_validate(service.get_model(model_id))


@router.put("/{model_id}", response_model=ModelResponse)
def update_model(
    model_id: str,
    data: ModelCreateRequest,
    service: ModelService = Depends(get_model_service),
    cache: TTLCache = Depends(get_cache),
) -> ModelResponse:
    model = service.update_model(model_id, _to_input(data))
    cache.clear()
    return ModelResponse.model_validate(model)


@router.delete("/{model_id}", status_code=204)
def delete_model(
    model_id: str,
    service: ModelService = Depends(get_model_service),
    cache: TTLCache = Depends(get_cache),
) -> None:
    service.delete_model(model_id)
    cache.clear()
