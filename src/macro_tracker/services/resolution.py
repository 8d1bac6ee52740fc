"""Nutrition resolution across the food database and the AI fallback."""

import logging
from dataclasses import dataclass

from macro_tracker.adapters.openfoodfacts_client import FoodDatabaseClient
from macro_tracker.domain.lookup import (
    AnalysisFailed,
    EstimateFailed,
    LookupFailed,
    NotFound,
    ProductFound,
    Resolved,
    ResolutionOutcome,
    SearchHits,
)
from macro_tracker.domain.nutrition import (
    DataSource,
    NutritionData,
    ResolutionRequest,
)
from macro_tracker.services.ai_estimation import AIEstimationService
from macro_tracker.services.normalization import normalize

AI_UNAVAILABLE_MESSAGE = "No nutrition data found and AI fallback unavailable"
AI_FAILED_MESSAGE = "No nutrition data found and AI analysis failed"

_logger = logging.getLogger(__name__)


@dataclass
class NutritionResolver:
    """Resolve nutrition data by barcode, then text search, then AI estimate.

    The first strategy that yields data wins and its provenance is attached
    to the record. Database misses and outages fall through silently; only
    the final outcome is returned.
    """

    food_database: FoodDatabaseClient
    ai_estimator: AIEstimationService | None = None
    search_limit: int = 5

    async def resolve(self, request: ResolutionRequest) -> ResolutionOutcome:
        """Run the strategies in order and return the first success."""
        if request.barcode_value:
            data = await self._from_barcode(request.barcode_value)
            if data is not None:
                return Resolved(record=data.tagged(DataSource.DATABASE_BARCODE))

        query = request.search_query
        if query:
            data = await self._from_search(query)
            if data is not None:
                return Resolved(record=data.tagged(DataSource.DATABASE_SEARCH))

        if self.ai_estimator is None:
            _logger.info("AI fallback not configured; giving up on %s", request)
            return NotFound(message=AI_UNAVAILABLE_MESSAGE)

        analysis_input = request.estimation_input()
        _logger.info("Falling back to AI for %r", analysis_input)
        estimate = await self.ai_estimator.estimate(analysis_input)
        if isinstance(estimate, EstimateFailed):
            return AnalysisFailed(message=AI_FAILED_MESSAGE)
        return Resolved(record=estimate.data.tagged(DataSource.AI_ANALYSIS))

    async def _from_barcode(self, barcode: str) -> NutritionData | None:
        lookup = await self.food_database.lookup_by_barcode(barcode)
        if not isinstance(lookup, ProductFound):
            _logger.info("Barcode %s not resolved: %s", barcode, lookup.reason)
            return None
        data = normalize(lookup.product)
        if data is None:
            _logger.info("Barcode %s product has incomplete data", barcode)
            return None
        _logger.info("Found product via barcode: %s", data.food_details.name)
        return data

    async def _from_search(self, query: str) -> NutritionData | None:
        search = await self.food_database.search_by_text(query, self.search_limit)
        if isinstance(search, LookupFailed):
            _logger.info("Search %r not resolved: %s", query, search.reason)
            return None
        if not isinstance(search, SearchHits) or not search.products:
            _logger.info("Search %r returned no products", query)
            return None
        data = normalize(search.products[0])
        if data is None:
            _logger.info("Best match for %r has incomplete data", query)
            return None
        _logger.info("Found product via search: %s", data.food_details.name)
        return data
