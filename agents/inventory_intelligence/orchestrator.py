"""
Module: agents.inventory_intelligence.orchestrator

Contains the InventoryIntelligenceOrchestrator, the public entry point of the
inventory intelligence pipeline. It analyses item performance, forecasts
demand for the highest-revenue items, optimizes stock levels and aggregates
the results, returning a single AnalysisResult that is either a full bundle
or a structured error.
"""

import logging
from collections.abc import Callable, Mapping, Sequence
from datetime import datetime
from typing import Any

from config.config import InventoryIntelligenceConfig
from connectors.entity_records import (
    business_context_from_profile,
    catalog_items_from_records,
    expense_records_from_records,
    sale_records_from_invoices,
)
from connectors.text_oracle import TextOracle
from models.enums import IntelligenceErrorKind
from models.intelligence import AnalysisResult
from models.inventory import BusinessContext, CatalogItem, ExpenseRecord, SaleRecord

from .forecasting import DemandForecaster
from .optimization import StockOptimizer
from .performance import ExpenseMatcher, ItemPerformanceAnalyzer
from .recommendations import RecommendationAggregator

logger = logging.getLogger(__name__)

NO_TRACKABLE_ITEMS_MESSAGE = "No trackable items found. Please enable stock tracking for your inventory items."


class InventoryIntelligenceOrchestrator:
    """
    Runs the inventory intelligence pipeline:
    performance analysis -> demand forecast -> stock optimization -> aggregation.
    Holds no state between runs; the oracle, clock and configuration are injected.
    """

    def __init__(
        self,
        oracle: TextOracle | None = None,
        config: InventoryIntelligenceConfig | None = None,
        *,
        expense_matcher: ExpenseMatcher | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.config = config or InventoryIntelligenceConfig()
        self.clock = clock
        self.analyzer = ItemPerformanceAnalyzer(expense_matcher)
        self.forecaster = DemandForecaster(oracle, self.config, clock=clock)
        self.optimizer = StockOptimizer()
        self.aggregator = RecommendationAggregator()

    async def analyze_inventory_optimization(
        self,
        items: Sequence[CatalogItem],
        sales: Sequence[SaleRecord],
        expenses: Sequence[ExpenseRecord],
        context: BusinessContext | None = None,
    ) -> AnalysisResult:
        """
        Analyze inventory and produce stock recommendations.

        Args:
            items: Catalog items; only trackable ones are analysed.
            sales: Historical invoice lines.
            expenses: Historical expenses, attributed to items by the expense matcher.
            context: Business context for the forecast prompt.

        Returns:
            An AnalysisResult. Never raises: a missing trackable item yields a
            NO_TRACKABLE_ITEMS failure and anything unexpected an ANALYSIS_FAILED one.
        """
        trackable_items = [item for item in items if item.is_trackable]
        if not trackable_items:
            logger.info("Inventory analysis skipped: no trackable items")
            return AnalysisResult.failure(IntelligenceErrorKind.NO_TRACKABLE_ITEMS, NO_TRACKABLE_ITEMS_MESSAGE)

        try:
            return await self._run_pipeline(trackable_items, sales, expenses, context)
        except Exception as e:
            logger.error(f"Error in inventory intelligence analysis: {e}", exc_info=True)
            return AnalysisResult.failure(IntelligenceErrorKind.ANALYSIS_FAILED, str(e) or type(e).__name__)

    async def analyze_entity_records(
        self,
        *,
        items: Sequence[Mapping[str, Any]] = (),
        invoices: Sequence[Mapping[str, Any]] = (),
        expenses: Sequence[Mapping[str, Any]] = (),
        company_profile: Mapping[str, Any] | None = None,
    ) -> AnalysisResult:
        """Run the analysis over raw entity-store records (invoices with line items, etc.)."""
        try:
            catalog = catalog_items_from_records(items)
            sales = sale_records_from_invoices(invoices)
            expense_records = expense_records_from_records(expenses)
            context = business_context_from_profile(company_profile)
        except Exception as e:
            logger.error(f"Could not read entity records for inventory analysis: {e}", exc_info=True)
            return AnalysisResult.failure(IntelligenceErrorKind.ANALYSIS_FAILED, str(e) or type(e).__name__)

        return await self.analyze_inventory_optimization(catalog, sales, expense_records, context)

    async def _run_pipeline(
        self,
        items: Sequence[CatalogItem],
        sales: Sequence[SaleRecord],
        expenses: Sequence[ExpenseRecord],
        context: BusinessContext | None,
    ) -> AnalysisResult:
        logger.info(f"Analyzing {len(items)} trackable items ({len(sales)} sales, {len(expenses)} expenses)")

        # 1. Per-item performance, highest revenue first
        analyses = [self.analyzer.analyze(item, sales, expenses) for item in items]
        analyses.sort(key=lambda analysis: analysis.total_revenue, reverse=True)

        # 2. Demand forecasts for the top items only
        forecasts = await self.forecaster.forecast_all(analyses[: self.config.forecast_item_limit], context)

        # 3. Stock targets and recommendations
        optimizations = [self.optimizer.optimize(forecast) for forecast in forecasts]

        # 4. Recommendations, alerts, financial impact
        aggregated = self.aggregator.aggregate(optimizations)

        result = AnalysisResult(
            success=True,
            item_analyses=analyses,
            demand_forecasts=forecasts,
            stock_optimizations=sorted(optimizations, key=lambda opt: opt.stockout_risk, reverse=True),
            purchase_recommendations=aggregated.purchase_recommendations,
            inventory_alerts=aggregated.inventory_alerts,
            financial_impact=aggregated.financial_impact,
            summary=aggregated.summary,
            analyzed_at=self.clock(),
        )
        logger.info(f"Inventory analysis complete. {aggregated.summary.key_insight}")
        return result
