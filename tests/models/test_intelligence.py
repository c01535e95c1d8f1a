from datetime import date

import pytest
from pydantic import ValidationError

from agents.inventory_intelligence.optimization import EMERGENCY_STOCKOUT_RISK, StockOptimizer
from models.enums import DemandVariability, IntelligenceErrorKind, Priority
from models.intelligence import (
    CRITICAL_STOCKOUT_RISK,
    GENERIC_FAILURE_MESSAGE,
    AnalysisResult,
    IntelligenceError,
    PurchaseRecommendation,
    StockCoverage,
)
from models.inventory import CatalogItem, SaleRecord
from tests.mocks import make_forecast, make_item


# --- StockCoverage ---


def test_stock_coverage_from_velocity():
    coverage = StockCoverage.from_velocity(30, 1.5)
    assert coverage.days == 20
    assert not coverage.is_unbounded
    assert coverage.days_or_sentinel() == 20


@pytest.mark.parametrize("velocity", [0, -1])
def test_stock_coverage_unbounded_without_velocity(velocity):
    coverage = StockCoverage.from_velocity(30, velocity)
    assert coverage.is_unbounded
    assert coverage.days is None
    assert coverage.days_or_sentinel() == 999


def test_stock_coverage_serialises_unbounded_flag():
    assert StockCoverage.unlimited().model_dump() == {"days": None, "is_unbounded": True}
    assert StockCoverage.of_days(4.5).model_dump(mode="json") == {"days": 4.5, "is_unbounded": False}


def test_stock_coverage_is_frozen():
    with pytest.raises(ValidationError):
        StockCoverage.of_days(3).days = 4


# --- Priority ---


def test_priority_rank_orders_severity():
    ranked = sorted(Priority, key=lambda p: p.rank, reverse=True)
    assert ranked == [Priority.CRITICAL, Priority.HIGH, Priority.MEDIUM, Priority.LOW]


# --- Input models ---


def test_catalog_item_rejects_negative_stock():
    with pytest.raises(ValidationError):
        CatalogItem(id="A", name="Salt", current_stock=-1)


def test_sale_record_requires_positive_quantity():
    with pytest.raises(ValidationError):
        SaleRecord(item_id="A", sale_date=date(2024, 1, 1), quantity=0)


def test_sale_record_unit_cost_for_item():
    item = make_item(unit_cost=50.0)
    assert SaleRecord(item_id="A", sale_date=date(2024, 1, 1), quantity=1).unit_cost_for(item) == 50.0
    recorded = SaleRecord(item_id="A", sale_date=date(2024, 1, 1), quantity=1, cost_price_at_sale=0.0)
    assert recorded.unit_cost_for(item) == 0.0


def test_purchase_recommendation_requires_positive_quantity():
    with pytest.raises(ValidationError):
        PurchaseRecommendation(
            item_id="A",
            item_name="Salt",
            current_stock=0,
            recommended_quantity=0,
            urgency="Now",
            priority=Priority.HIGH,
            reason="",
            potential_lost_sales=0,
            estimated_cost=0,
            expected_revenue=0,
        )


# --- AnalysisResult ---


def test_failure_result_is_empty():
    result = AnalysisResult.failure(IntelligenceErrorKind.ANALYSIS_FAILED, "database timeout")

    assert result.success is False
    assert result.error.message == "database timeout"
    assert result.error.user_message == GENERIC_FAILURE_MESSAGE
    assert result.item_analyses == []
    assert result.purchase_recommendations == []
    assert result.summary is None
    assert result.critical_items() == []


def test_no_trackable_items_error_is_shown_as_is():
    error = IntelligenceError(kind=IntelligenceErrorKind.NO_TRACKABLE_ITEMS, message="Enable tracking")
    assert error.user_message == "Enable tracking"


def test_critical_items_selects_emergencies():
    optimizer = StockOptimizer()
    urgent = optimizer.optimize(
        make_forecast("Urgent", current_stock=1, next_30_days_demand=80.0, demand_variability=DemandVariability.HIGH)
    )
    fine = optimizer.optimize(make_forecast("Fine", current_stock=40, next_30_days_demand=20.0))

    result = AnalysisResult(success=True, stock_optimizations=[fine, urgent])

    assert [o.item_name for o in result.critical_items()] == ["Urgent"]


def test_critical_items_threshold_matches_emergency_orders():
    fine = StockOptimizer().optimize(make_forecast("Fine", current_stock=40, next_30_days_demand=20.0))
    at_threshold = fine.model_copy(update={"item_name": "At", "stockout_risk": CRITICAL_STOCKOUT_RISK})
    below = fine.model_copy(update={"item_name": "Below", "stockout_risk": CRITICAL_STOCKOUT_RISK - 1})

    result = AnalysisResult(success=True, stock_optimizations=[at_threshold, below])

    assert EMERGENCY_STOCKOUT_RISK == CRITICAL_STOCKOUT_RISK
    assert [o.item_name for o in result.critical_items()] == ["At"]


def test_result_round_trips_through_json():
    opt = StockOptimizer().optimize(make_forecast("Sugar 1kg", current_stock=0, daily_velocity=0.0))
    result = AnalysisResult(success=True, stock_optimizations=[opt])

    restored = AnalysisResult.model_validate_json(result.model_dump_json())

    assert restored.stock_optimizations[0].days_until_stockout.is_unbounded
    assert restored == result
