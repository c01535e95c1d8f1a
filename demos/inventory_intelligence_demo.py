"""
Demo script for the inventory intelligence pipeline.

Generates a synthetic catalog with invoices and restock expenses, runs the
full analysis (performance -> forecast -> optimization -> recommendations)
and prints the purchase recommendations and alerts.

Forecasts come from OpenAI when OPENAI_API_KEY is set (in the environment or
the project `.env`); otherwise every item uses the historical fallback.
"""

import asyncio

from agents.inventory_intelligence import InventoryIntelligenceOrchestrator
from config.config import ForecastOracleConfig, InventoryIntelligenceConfig
from connectors.text_oracle import OpenAITextOracle
from utils.data_generation import generate_synthetic_inventory_data
from utils.logger import get_logger

logger = get_logger("inventory_intelligence_demo")


async def main():
    items, invoices, expenses = generate_synthetic_inventory_data(num_items=12, untracked_every=6)
    logger.info(f"Generated {len(items)} items, {len(invoices)} invoices, {len(expenses)} expenses")

    oracle = OpenAITextOracle(ForecastOracleConfig.from_env())
    orchestrator = InventoryIntelligenceOrchestrator(oracle, InventoryIntelligenceConfig(forecast_item_limit=8))

    result = await orchestrator.analyze_entity_records(
        items=items,
        invoices=invoices,
        expenses=expenses,
        company_profile={"business_sector": "retail"},
    )

    if not result.success:
        print(f"Analysis failed: {result.error.user_message}")
        return

    print("\n=== Inventory Summary ===")
    print(f"Items analysed:   {result.summary.total_items}")
    print(f"Critical:         {result.summary.critical_items}")
    print(f"Low stock:        {result.summary.low_stock_items}")
    print(f"Overstocked:      {result.summary.overstock_items}")
    print(f"Insight:          {result.summary.key_insight}")

    print("\n=== Purchase Recommendations ===")
    for rec in result.purchase_recommendations:
        print(
            f"[{rec.priority.value.upper():8}] {rec.item_name:<22} order {rec.recommended_quantity:>6.0f} "
            f"({rec.urgency}) cost {rec.estimated_cost:,.2f}"
        )

    print("\n=== Alerts ===")
    for alert in result.inventory_alerts:
        print(f"[{alert.severity.value.upper():8}] {alert.message} -> {alert.action}")

    impact = result.financial_impact
    print("\n=== Financial Impact ===")
    print(f"Potential revenue loss: {impact.total_potential_revenue_loss:,.2f}")
    print(f"Capital tied up:        {impact.total_capital_tied_up:,.2f}")
    print(f"Reorder cost:           {impact.total_reorder_cost:,.2f}")
    print(f"Projected ROI:          {impact.roi_projection_pct:.1f}%")


if __name__ == "__main__":
    asyncio.run(main())
