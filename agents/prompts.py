from __future__ import annotations

"""Prompt builder utilities for the demand forecasting oracle.

The functions in this module **only** format the user-visible parts of prompts so they are
reusable from multiple call-sites.  System instructions or model parameters remain in the
oracle implementation because they depend on the backend.

All builders return **plain strings** (or plain JSON-schema dicts); they do *not* include
any role metadata.
"""

import json
from typing import Any

from models.intelligence import ItemPerformanceAnalysis

__all__ = [
    "DEMAND_FORECAST_SCHEMA",
    "build_demand_forecast_prompt",
]


DEMAND_FORECAST_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "next30DaysDemand": {"type": "number"},
        "next60DaysDemand": {"type": "number"},
        "next90DaysDemand": {"type": "number"},
        "seasonalAdjustment": {"type": "number"},
        "confidenceLevel": {"type": "number"},
        "demandVariability": {"type": "string", "enum": ["low", "medium", "high"]},
        "forecastReasoning": {"type": "string"},
    },
    "required": [
        "next30DaysDemand",
        "next60DaysDemand",
        "next90DaysDemand",
        "seasonalAdjustment",
        "confidenceLevel",
        "demandVariability",
        "forecastReasoning",
    ],
}


def _format_days_remaining(analysis: ItemPerformanceAnalysis) -> str:
    coverage = analysis.days_of_stock_remaining
    if coverage.is_unbounded:
        return "no stockout expected at current velocity (no recent sales)"
    return f"{coverage.days:.1f} days"


def build_demand_forecast_prompt(
    analysis: ItemPerformanceAnalysis,
    *,
    business_sector: str = "general",
    market: str = "Kenya",
) -> str:
    """Return the user prompt asking for a 30/60/90-day demand forecast of one item."""
    monthly_pattern = json.dumps(analysis.monthly_sales_histogram)
    return f"""
        You are an inventory demand forecasting AI for a {business_sector} business in {market}.

        Analyze this product's sales data and forecast demand:

        Product: {analysis.item_name}
        Current Stock: {analysis.current_stock} units
        Daily Sales Velocity: {analysis.daily_velocity:.2f} units/day
        Weekly Sales: {analysis.weekly_velocity:.1f} units/week
        Monthly Sales: {analysis.monthly_velocity:.1f} units/month
        Profit Margin: {analysis.profit_margin_pct:.1f}%
        Stock Turnover: {analysis.stock_turnover:.2f}x
        Days of Stock Remaining: {_format_days_remaining(analysis)}
        Sales Trend: {analysis.sales_trend.value}

        Monthly Sales Pattern: {monthly_pattern}

        Provide a demand forecast in JSON format:

        {{
          "next30DaysDemand": number,
          "next60DaysDemand": number,
          "next90DaysDemand": number,
          "seasonalAdjustment": number (1.0 = no adjustment, >1.0 = higher demand expected),
          "confidenceLevel": number (0-100),
          "demandVariability": "low" | "medium" | "high",
          "forecastReasoning": "string explaining the forecast logic"
        }}

        Consider:
        - Seasonal trends for the {market} market
        - Recent sales velocity
        - Stock turnover patterns
        - Business sector context
        """
