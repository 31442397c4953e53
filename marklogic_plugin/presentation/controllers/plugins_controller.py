"""Plugin listing and stage validation endpoints."""

from typing import Any, Dict, List

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Body, Depends, HTTPException, Path, status
from pydantic import ValidationError

from marklogic_plugin.application.dtos.validation_dto import (
    StageValidationRequestDTO,
    StageValidationResponseDTO,
)
from marklogic_plugin.application.plugins.registry import PluginRegistry
from marklogic_plugin.application.use_cases.validation_use_cases import (
    ValidateStageUseCase,
)
from marklogic_plugin.domain.entities.errors import PluginNotFoundError
from marklogic_plugin.shared import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/plugins", tags=["Plugins"])


@router.get("", response_model=List[Dict[str, Any]])
@inject
async def list_plugins(
    plugin_registry: PluginRegistry = Depends(Provide["plugin_registry"]),
) -> List[Dict[str, Any]]:
    """List the published stages and their properties."""
    return plugin_registry.list_plugins()


@router.post("/{plugin_type}/validate", response_model=StageValidationResponseDTO)
@inject
async def validate_stage(
    plugin_type: str = Path(..., description="batchsource, batchsink or action"),
    payload: Dict[str, Any] = Body(...),
    validate_stage_use_case: ValidateStageUseCase = Depends(
        Provide["validate_stage_use_case"]
    ),
) -> StageValidationResponseDTO:
    """
    Validate stage properties.

    Invalid properties are reported in the response body with a 200 status;
    only an unknown plugin type is an HTTP error.
    """
    try:
        request = StageValidationRequestDTO.model_validate(
            {**payload, "plugin_type": plugin_type}
        )
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc

    try:
        return validate_stage_use_case.execute(request)
    except PluginNotFoundError as exc:
        logger.warning("plugins.validate.not_found", plugin_type=plugin_type)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message) from exc
    except Exception as exc:  # pragma: no cover
        logger.error("plugins.validate.failure", error=str(exc), exc_info=exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to validate stage",
        ) from exc
