from fastapi import APIRouter, Depends

from multimodel.server.container import get_container

router = APIRouter(prefix="/models", tags=["Models"])


@router.get("", summary="List all models")
async def list_models(container=Depends(get_container)):
    return container.orchestrator.catalog.describe()
