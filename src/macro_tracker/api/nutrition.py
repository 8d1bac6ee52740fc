"""Nutrition lookup endpoints."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile, status

from macro_tracker.api.auth import require_user
from macro_tracker.api.schemas import (
    BarcodeDebugResponse,
    BarcodeNutritionResponse,
    BarcodeRequest,
    NutritionRequest,
    ProductInfo,
)
from macro_tracker.domain.lookup import (
    AnalysisFailed,
    EstimateFailed,
    NotFound,
    ProductFound,
)
from macro_tracker.domain.nutrition import (
    DataSource,
    NutritionRecord,
    RawProduct,
    ResolutionRequest,
)
from macro_tracker.services.ai_estimation import detect_image_type
from macro_tracker.services.normalization import analyze_product, normalize

if TYPE_CHECKING:
    from macro_tracker.containers import AppContainer

MAX_IMAGE_BYTES = 5 * 1024 * 1024
ALLOWED_IMAGE_TYPES = frozenset({"image/jpeg", "image/png", "image/webp"})

_BARCODE_PATTERN = re.compile(r"\d{8,14}")
_logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/nutrition", tags=["nutrition"])


@router.post("")
async def resolve_nutrition(
    payload: NutritionRequest,
    request: Request,
    user_id: UUID = Depends(require_user),
) -> NutritionRecord:
    """Resolve nutrition by barcode, text search, then AI estimate."""
    try:
        resolution = ResolutionRequest(
            food_name=payload.food_name,
            barcode=payload.barcode,
            search_terms=payload.search_terms,
        )
    except ValueError as exc:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    if resolution.barcode_value:
        _require_valid_barcode(resolution.barcode_value)

    container: AppContainer = request.app.state.container
    _logger.info("Resolving nutrition for user %s", user_id)
    outcome = await container.nutrition_resolver.resolve(resolution)
    if isinstance(outcome, NotFound):
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail=outcome.message)
    if isinstance(outcome, AnalysisFailed):
        raise HTTPException(status.HTTP_502_BAD_GATEWAY, detail=outcome.message)
    return outcome.record


@router.get("/barcode", dependencies=[Depends(require_user)])
async def barcode_nutrition(
    request: Request, barcode: str | None = None
) -> BarcodeNutritionResponse:
    """Look up a product by barcode only."""
    return await _barcode_lookup(request, barcode, serving_size=None)


@router.post("/barcode", dependencies=[Depends(require_user)])
async def barcode_nutrition_with_serving(
    payload: BarcodeRequest, request: Request
) -> BarcodeNutritionResponse:
    """Look up a product by barcode with a custom serving size."""
    return await _barcode_lookup(request, payload.barcode, payload.serving_size)


@router.get("/debug", dependencies=[Depends(require_user)])
async def barcode_debug(
    request: Request, barcode: str | None = None
) -> BarcodeDebugResponse:
    """Show how a product's nutrients are read and converted."""
    code = _require_barcode(barcode)
    _require_valid_barcode(code)
    product = await _fetch_product(request, code)
    return BarcodeDebugResponse.from_analysis(
        barcode=code,
        product=product,
        analysis=analyze_product(product),
        converted=normalize(product),
    )


@router.post("/image", dependencies=[Depends(require_user)])
async def image_nutrition(
    request: Request,
    food_image: UploadFile | None = File(default=None, alias="foodImage"),
) -> NutritionRecord:
    """Estimate nutrition from a food photo."""
    container: AppContainer = request.app.state.container
    if container.ai_estimator is None:
        raise HTTPException(
            status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="AI image analysis is not configured",
        )
    if food_image is None:
        raise HTTPException(
            status.HTTP_400_BAD_REQUEST, detail="Food image is required"
        )

    image_bytes = await food_image.read()
    if not image_bytes:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail="Food image is empty")
    if len(image_bytes) > MAX_IMAGE_BYTES:
        raise HTTPException(
            status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="Food image must be 5MB or smaller",
        )
    image_type = detect_image_type(image_bytes) or food_image.content_type
    if image_type not in ALLOWED_IMAGE_TYPES:
        raise HTTPException(
            status.HTTP_400_BAD_REQUEST,
            detail="Food image must be a JPEG, PNG or WebP file",
        )

    estimate = await container.ai_estimator.estimate_image(image_bytes)
    if isinstance(estimate, EstimateFailed):
        raise HTTPException(
            status.HTTP_502_BAD_GATEWAY, detail="Failed to analyze food image"
        )
    return estimate.data.tagged(DataSource.AI_ANALYSIS)


async def _barcode_lookup(
    request: Request, barcode: str | None, serving_size: str | None
) -> BarcodeNutritionResponse:
    code = _require_barcode(barcode)
    _require_valid_barcode(code)
    product = await _fetch_product(request, code)
    data = normalize(product, serving_size)
    if data is None:
        raise HTTPException(
            status.HTTP_404_NOT_FOUND,
            detail="Product found but nutrition data incomplete",
        )
    _logger.info("Found product via barcode: %s", data.food_details.name)
    return BarcodeNutritionResponse(
        food_details=data.food_details,
        macronutrients=data.macronutrients,
        data_source=DataSource.DATABASE_BARCODE,
        barcode=code,
        custom_serving=serving_size,
        product_info=ProductInfo.from_product(product),
    )


async def _fetch_product(request: Request, barcode: str) -> RawProduct:
    container: AppContainer = request.app.state.container
    lookup = await container.food_database.lookup_by_barcode(barcode)
    if not isinstance(lookup, ProductFound):
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Product not found")
    return lookup.product


def _require_barcode(barcode: str | None) -> str:
    code = (barcode or "").strip()
    if not code:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail="Barcode is required")
    return code


def _require_valid_barcode(barcode: str) -> None:
    if not _BARCODE_PATTERN.fullmatch(barcode):
        raise HTTPException(
            status.HTTP_400_BAD_REQUEST,
            detail="Invalid barcode format. Must be 8-14 digits.",
        )
