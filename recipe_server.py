"""
HTTP surface for the recipe matcher.

Endpoints:
- GET  /products  - sorted list of known products
- POST /units     - units a product can be given in
- POST /recipes   - maximal recipe combinations for a stock
- GET  /health    - liveness and catalog size
"""

import logging
from typing import Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from constants import DEFAULT_NUMBER_OF_SERVINGS
from error_utils import CatalogIntegrityError, ValidationError
from recipe_suggestions import RecipeSuggestionService

logger = logging.getLogger(__name__)


class MeasurementModel(BaseModel):
    quantity: float
    unit: str


class ProductUnitsRequest(BaseModel):
    product: str


class RecipeSuggestionsRequest(BaseModel):
    number_of_servings: int = Field(
        default=DEFAULT_NUMBER_OF_SERVINGS, alias="numberOfServings"
    )
    available_products: Dict[str, MeasurementModel] = Field(
        default_factory=dict, alias="availableProducts"
    )


class RecipeSuggestion(BaseModel):
    name: str
    source: str


def create_app(
    service: RecipeSuggestionService, http_origin: Optional[str] = None
) -> FastAPI:
    """
    Create the FastAPI application around a suggestion service.

    Args:
        service: Service holding the loaded catalog and conversion context
        http_origin: Value for Access-Control-Allow-Origin, None disables CORS
    """
    app = FastAPI(title="Recipe Matcher", version="1.0.0")
    app.state.service = service

    if http_origin:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[http_origin],
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        response = await call_next(request)
        if response.status_code >= 400:
            logger.warning(
                f"Request: {request.method} {request.url} -> {response.status_code}"
            )
        return response

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(
            status_code=400, content={"status": "error", "message": str(exc)}
        )

    @app.exception_handler(CatalogIntegrityError)
    async def catalog_error_handler(request: Request, exc: CatalogIntegrityError):
        logger.error(f"Catalog integrity error: {exc}")
        return JSONResponse(
            status_code=500, content={"status": "error", "message": str(exc)}
        )

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "recipes": len(service.catalog),
            "products": len(service.catalog.products),
        }

    @app.get("/products", response_model=List[str])
    async def list_products():
        return list(service.catalog.products)

    @app.post("/units", response_model=List[str])
    async def list_units(request: ProductUnitsRequest):
        return service.catalog.units_for(request.product)

    @app.post("/recipes", response_model=List[List[RecipeSuggestion]])
    def suggest_recipes(request: RecipeSuggestionsRequest):
        available_products = {
            name: {"quantity": m.quantity, "unit": m.unit}
            for name, m in request.available_products.items()
        }
        return service.suggest(available_products, request.number_of_servings)

    return app
