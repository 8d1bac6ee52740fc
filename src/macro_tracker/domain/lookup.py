"""Typed outcomes of nutrition lookup strategies."""

from dataclasses import dataclass

from macro_tracker.domain.nutrition import NutritionData, NutritionRecord, RawProduct


@dataclass(frozen=True)
class ProductFound:
    """The food database returned a product."""

    product: RawProduct


@dataclass(frozen=True)
class ProductMissing:
    """The food database has no product for the barcode."""

    reason: str


@dataclass(frozen=True)
class SearchHits:
    """Products matching a text search, in relevance order."""

    products: list[RawProduct]


@dataclass(frozen=True)
class LookupFailed:
    """The food database could not be reached or answered garbage."""

    reason: str


ProductLookup = ProductFound | ProductMissing | LookupFailed
ProductSearch = SearchHits | LookupFailed


@dataclass(frozen=True)
class EstimateSucceeded:
    """The AI model produced structured nutrition data."""

    data: NutritionData


@dataclass(frozen=True)
class EstimateFailed:
    """The AI model call errored or returned no usable payload."""

    reason: str


NutritionEstimate = EstimateSucceeded | EstimateFailed


@dataclass(frozen=True)
class Resolved:
    """A strategy produced a nutrition record."""

    record: NutritionRecord


@dataclass(frozen=True)
class NotFound:
    """Every strategy was exhausted without a result."""

    message: str


@dataclass(frozen=True)
class AnalysisFailed:
    """The AI fallback was attempted and failed."""

    message: str


ResolutionOutcome = Resolved | NotFound | AnalysisFailed
