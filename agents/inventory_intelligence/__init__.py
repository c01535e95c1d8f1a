"""Inventory demand forecasting and stock optimization"""

from .performance import (
    DescriptionExpenseMatcher,
    ItemIdExpenseMatcher,
    ItemPerformanceAnalyzer,
)
from .forecasting import DemandForecaster, fallback_forecast
from .optimization import (
    StockOptimizer,
    calculate_overstock_risk,
    calculate_stockout_risk,
    generate_stock_recommendation,
)
from .recommendations import RecommendationAggregator
from .orchestrator import InventoryIntelligenceOrchestrator


__all__ = [
    # Performance analysis
    "ItemPerformanceAnalyzer",
    "DescriptionExpenseMatcher",
    "ItemIdExpenseMatcher",
    # Forecasting
    "DemandForecaster",
    "fallback_forecast",
    # Optimization
    "StockOptimizer",
    "calculate_stockout_risk",
    "calculate_overstock_risk",
    "generate_stock_recommendation",
    # Aggregation
    "RecommendationAggregator",
    # Entry point
    "InventoryIntelligenceOrchestrator",
]
