"""FastAPI surface for the multimodel query router.

Routes:
- GET  /v1/tools              tool descriptors (name, description, input schema)
- POST /v1/tools/{tool_name}  invoke a tool; the body is the argument object
- GET  /v1/models             the model catalog
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from multimodel.server.container import get_container
from multimodel.server.routes import register_routes

tags_metadata = [
    {
        "name": "Tools",
        "description": "Query OpenAI, Gemini and Voyage through one tool-call contract"
    },
    {
        "name": "Models",
        "description": "Default and available models per provider"
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    if get_container.cache_info().currsize:
        await get_container().aclose()


app = FastAPI(
    title='Multimodel Query Router',
    version='1.0.0',
    description='Query multiple LLM providers and cross-validate their answers',
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

# Register all API routes
register_routes(app)
