"""Tests for the nutrition resolution pipeline."""

import asyncio

import pytest

from macro_tracker.domain.lookup import (
    AnalysisFailed,
    LookupFailed,
    NotFound,
    ProductFound,
    Resolved,
    SearchHits,
)
from macro_tracker.domain.nutrition import DataSource, ResolutionRequest
from macro_tracker.services.resolution import (
    AI_FAILED_MESSAGE,
    AI_UNAVAILABLE_MESSAGE,
    NutritionResolver,
)
from tests.conftest import make_product


def test_request_requires_an_identifier() -> None:
    with pytest.raises(ValueError, match="Either foodName, barcode, or searchTerms"):
        ResolutionRequest(food_name="  ", barcode="", search_terms=None)


def test_request_prefers_search_terms_for_queries() -> None:
    request = ResolutionRequest(food_name="apple", search_terms=" fuji apple ")

    assert request.search_query == "fuji apple"
    assert request.estimation_input() == "fuji apple"
    assert ResolutionRequest(barcode=" ", food_name="x").barcode_value is None
    assert (
        ResolutionRequest(barcode="3017620422003").estimation_input()
        == "Product with barcode 3017620422003"
    )


def test_resolve_by_barcode_skips_search(food_database, ai_estimator) -> None:
    food_database.barcodes["3017620422003"] = ProductFound(product=make_product())
    food_database.searches["x"] = SearchHits(products=[make_product(name="Other")])
    resolver = NutritionResolver(food_database=food_database, ai_estimator=ai_estimator)

    outcome = asyncio.run(
        resolver.resolve(ResolutionRequest(barcode="3017620422003", food_name="x"))
    )

    assert isinstance(outcome, Resolved)
    assert outcome.record.data_source == DataSource.DATABASE_BARCODE
    assert outcome.record.food_details.name == "Nutella"
    assert food_database.search_calls == []


def test_resolve_falls_through_to_search(
    food_database, ai_estimator, model_client
) -> None:
    food_database.searches["nutella"] = SearchHits(
        products=[make_product(name="Nutella Jar"), make_product(name="Other")]
    )
    resolver = NutritionResolver(food_database=food_database, ai_estimator=ai_estimator)

    outcome = asyncio.run(
        resolver.resolve(ResolutionRequest(barcode="12345678", food_name="nutella"))
    )

    assert isinstance(outcome, Resolved)
    assert outcome.record.data_source == DataSource.DATABASE_SEARCH
    assert outcome.record.food_details.name == "Nutella Jar"
    assert food_database.barcode_calls == ["12345678"]
    assert food_database.search_calls == [("nutella", 5)]
    assert model_client.calls == []


def test_resolve_skips_incomplete_barcode_product(food_database, ai_estimator) -> None:
    food_database.barcodes["12345678"] = ProductFound(product=make_product(name=None))
    food_database.searches["spread"] = SearchHits(products=[make_product()])
    resolver = NutritionResolver(food_database=food_database, ai_estimator=ai_estimator)

    outcome = asyncio.run(
        resolver.resolve(ResolutionRequest(barcode="12345678", search_terms="spread"))
    )

    assert isinstance(outcome, Resolved)
    assert outcome.record.data_source == DataSource.DATABASE_SEARCH


def test_resolve_treats_database_outage_as_miss(
    food_database, ai_estimator, model_client
) -> None:
    food_database.barcodes["12345678"] = LookupFailed(reason="timeout")
    food_database.searches["banana"] = LookupFailed(reason="timeout")
    resolver = NutritionResolver(food_database=food_database, ai_estimator=ai_estimator)

    outcome = asyncio.run(
        resolver.resolve(ResolutionRequest(barcode="12345678", food_name="banana"))
    )

    assert isinstance(outcome, Resolved)
    assert outcome.record.data_source == DataSource.AI_ANALYSIS
    assert model_client.calls[0]["user_content"] == [
        {"type": "input_text", "text": "banana"}
    ]


def test_resolve_only_normalizes_the_first_search_hit(
    food_database, ai_estimator
) -> None:
    food_database.searches["banana"] = SearchHits(
        products=[make_product(name=None), make_product(name="Banana Chips")]
    )
    resolver = NutritionResolver(food_database=food_database, ai_estimator=ai_estimator)

    outcome = asyncio.run(resolver.resolve(ResolutionRequest(food_name="banana")))

    assert isinstance(outcome, Resolved)
    assert outcome.record.data_source == DataSource.AI_ANALYSIS


def test_resolve_ai_estimate_values_are_rounded(food_database, ai_estimator) -> None:
    resolver = NutritionResolver(food_database=food_database, ai_estimator=ai_estimator)

    outcome = asyncio.run(resolver.resolve(ResolutionRequest(food_name="banana")))

    assert isinstance(outcome, Resolved)
    record = outcome.record
    assert record.food_details.name == "Banana"
    assert record.macronutrients.calories == 105
    assert record.macronutrients.protein_grams == 1.3
    assert record.macronutrients.carbohydrates.total_grams == 27.0
    assert record.macronutrients.fat.total_grams == 0.4
    assert record.macronutrients.fat.saturated_grams == 0.1


def test_resolve_barcode_only_uses_synthesized_ai_input(
    food_database, ai_estimator, model_client
) -> None:
    resolver = NutritionResolver(food_database=food_database, ai_estimator=ai_estimator)

    outcome = asyncio.run(resolver.resolve(ResolutionRequest(barcode=" 12345678 ")))

    assert isinstance(outcome, Resolved)
    assert food_database.search_calls == []
    assert model_client.calls[0]["user_content"][0]["text"] == (
        "Product with barcode 12345678"
    )


def test_resolve_without_estimator_reports_not_found(food_database) -> None:
    resolver = NutritionResolver(food_database=food_database)

    outcome = asyncio.run(resolver.resolve(ResolutionRequest(food_name="mystery")))

    assert outcome == NotFound(message=AI_UNAVAILABLE_MESSAGE)


def test_resolve_reports_failed_analysis(
    food_database, ai_estimator, model_client
) -> None:
    model_client.error = RuntimeError("model unavailable")
    resolver = NutritionResolver(food_database=food_database, ai_estimator=ai_estimator)

    outcome = asyncio.run(resolver.resolve(ResolutionRequest(food_name="mystery")))

    assert outcome == AnalysisFailed(message=AI_FAILED_MESSAGE)


def test_resolve_is_repeatable_for_database_hits(food_database) -> None:
    food_database.barcodes["3017620422003"] = ProductFound(product=make_product())
    resolver = NutritionResolver(food_database=food_database)
    request = ResolutionRequest(barcode="3017620422003")

    first = asyncio.run(resolver.resolve(request))
    second = asyncio.run(resolver.resolve(request))

    assert first == second


def test_resolve_barcode_product_with_huge_values(
    food_database, ai_estimator, model_client
) -> None:
    food_database.barcodes["12345678"] = ProductFound(
        product=make_product(name="Junk", nutriments={"sugars_100g": "1e28"})
    )
    food_database.searches["junk"] = SearchHits(products=[make_product()])
    resolver = NutritionResolver(food_database=food_database, ai_estimator=ai_estimator)

    outcome = asyncio.run(
        resolver.resolve(ResolutionRequest(barcode="12345678", search_terms="junk"))
    )

    assert isinstance(outcome, Resolved)
    assert outcome.record.data_source == DataSource.DATABASE_BARCODE
    assert outcome.record.macronutrients.carbohydrates.sugar_grams == 1e28
    assert food_database.search_calls == []
    assert model_client.calls == []


def test_resolve_ignores_blank_barcode(food_database, ai_estimator) -> None:
    food_database.searches["nutella"] = SearchHits(products=[make_product()])
    resolver = NutritionResolver(food_database=food_database, ai_estimator=ai_estimator)

    outcome = asyncio.run(
        resolver.resolve(ResolutionRequest(barcode="   ", food_name="nutella"))
    )

    assert isinstance(outcome, Resolved)
    assert outcome.record.data_source == DataSource.DATABASE_SEARCH
    assert food_database.barcode_calls == []
