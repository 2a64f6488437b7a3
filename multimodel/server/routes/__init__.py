from fastapi import FastAPI

from .models import router as models_router
from .tools import router as tools_router


def register_routes(app: FastAPI):
    app.include_router(tools_router, prefix="/v1")
    app.include_router(models_router, prefix="/v1")
