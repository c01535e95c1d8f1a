"""
Stock optimization: converts a demand forecast into a safety-stock target,
stockout and overstock risk scores, and a recommended action. Pure.
"""

import logging
import math

from models.enums import DemandVariability, Priority, StockAction
from models.intelligence import (
    CRITICAL_STOCKOUT_RISK,
    DemandForecast,
    StockCoverage,
    StockOptimization,
    StockRecommendation,
)

logger = logging.getLogger(__name__)

SAFETY_STOCK_DEMAND_SHARE = 0.2

SAFETY_STOCK_MULTIPLIERS = {
    DemandVariability.LOW: 1.2,
    DemandVariability.MEDIUM: 1.5,
    DemandVariability.HIGH: 2.0,
}
DEFAULT_SAFETY_STOCK_MULTIPLIER = 1.5

STOCKOUT_VARIABILITY_MULTIPLIERS = {
    DemandVariability.LOW: 1.0,
    DemandVariability.MEDIUM: 1.2,
    DemandVariability.HIGH: 1.5,
}
DEFAULT_STOCKOUT_VARIABILITY_MULTIPLIER = 1.2

# (minimum adjusted stock/demand ratio, risk), checked top down
STOCKOUT_RISK_BANDS = [(1.5, 5), (1.0, 15), (0.7, 35), (0.4, 65), (0.2, 85)]
MAX_STOCKOUT_RISK = 95

# (maximum months of stock, risk), checked top down
OVERSTOCK_RISK_BANDS = [(1.5, 0), (2.5, 20), (4.0, 45), (6.0, 70)]
MAX_OVERSTOCK_RISK = 90

EMERGENCY_STOCKOUT_RISK = CRITICAL_STOCKOUT_RISK
REORDER_NOW_STOCKOUT_RISK = 65
REDUCE_STOCK_OVERSTOCK_RISK = 70


def calculate_stockout_risk(current_stock: float, demand_forecast: float, demand_variability) -> int:
    """Risk (0-100) of running out within the forecast month."""
    if demand_forecast == 0:
        return 0

    demand_ratio = current_stock / demand_forecast
    multiplier = STOCKOUT_VARIABILITY_MULTIPLIERS.get(demand_variability, DEFAULT_STOCKOUT_VARIABILITY_MULTIPLIER)
    adjusted_ratio = demand_ratio / multiplier

    for minimum_ratio, risk in STOCKOUT_RISK_BANDS:
        if adjusted_ratio >= minimum_ratio:
            return risk
    return MAX_STOCKOUT_RISK


def calculate_overstock_risk(current_stock: float, demand_forecast: float, daily_velocity: float) -> int:
    """Risk (0-100) that stock on hand far exceeds forecast demand."""
    if daily_velocity == 0 or demand_forecast == 0:
        return 0

    months_of_stock = current_stock / max(1, demand_forecast)
    for maximum_months, risk in OVERSTOCK_RISK_BANDS:
        if months_of_stock <= maximum_months:
            return risk
    return MAX_OVERSTOCK_RISK


def generate_stock_recommendation(
    *,
    current_stock: int,
    optimal_stock: int,
    stockout_risk: int,
    overstock_risk: int,
    reorder_level: int,
    next_30_days_demand: float,
) -> StockRecommendation:
    """Pick the first matching action: emergency, reorder now, reorder soon, reduce, maintain."""
    shortfall = optimal_stock - current_stock

    if stockout_risk >= EMERGENCY_STOCKOUT_RISK:
        return StockRecommendation(
            action=StockAction.EMERGENCY_ORDER,
            message="URGENT: Emergency reorder required immediately!",
            quantity=max(shortfall, next_30_days_demand),
            timeframe="Immediate - within 24 hours",
            priority=Priority.CRITICAL,
        )

    if stockout_risk >= REORDER_NOW_STOCKOUT_RISK:
        return StockRecommendation(
            action=StockAction.REORDER_NOW,
            message="Reorder now to prevent stockout",
            quantity=max(0, shortfall),
            timeframe="Within 3-5 days",
            priority=Priority.HIGH,
        )

    if current_stock <= reorder_level:
        return StockRecommendation(
            action=StockAction.REORDER_SOON,
            message="Below reorder level - order when convenient",
            quantity=max(0, shortfall),
            timeframe="Within 1-2 weeks",
            priority=Priority.MEDIUM,
        )

    if overstock_risk >= REDUCE_STOCK_OVERSTOCK_RISK:
        return StockRecommendation(
            action=StockAction.REDUCE_STOCK,
            message="Consider promotional pricing to reduce excess stock",
            quantity=0,
            timeframe="Plan promotion within 30 days",
            priority=Priority.LOW,
        )

    return StockRecommendation(
        action=StockAction.MAINTAIN,
        message="Stock levels are optimal",
        quantity=0,
        timeframe="Monitor regularly",
        priority=Priority.LOW,
    )


class StockOptimizer:
    """Turns demand forecasts into stock targets and recommendations."""

    def optimize(self, forecast: DemandForecast) -> StockOptimization:
        demand = forecast.next_30_days_demand
        multiplier = SAFETY_STOCK_MULTIPLIERS.get(forecast.demand_variability, DEFAULT_SAFETY_STOCK_MULTIPLIER)
        safety_stock = math.ceil(demand * SAFETY_STOCK_DEMAND_SHARE * multiplier)
        optimal_stock = math.ceil(demand + safety_stock)

        stockout_risk = calculate_stockout_risk(forecast.current_stock, demand, forecast.demand_variability)
        overstock_risk = calculate_overstock_risk(forecast.current_stock, demand, forecast.daily_velocity)
        recommendation = generate_stock_recommendation(
            current_stock=forecast.current_stock,
            optimal_stock=optimal_stock,
            stockout_risk=stockout_risk,
            overstock_risk=overstock_risk,
            reorder_level=forecast.reorder_level,
            next_30_days_demand=demand,
        )
        logger.debug(
            f"{forecast.item_name}: stockout={stockout_risk}% overstock={overstock_risk}% "
            f"-> {recommendation.action.value} ({recommendation.quantity})"
        )

        return StockOptimization(
            **dict(forecast),
            recommended_safety_stock=safety_stock,
            optimal_stock=optimal_stock,
            stockout_risk=stockout_risk,
            overstock_risk=overstock_risk,
            recommendation=recommendation,
            stock_gap=optimal_stock - forecast.current_stock,
            days_until_stockout=StockCoverage.from_velocity(forecast.current_stock, forecast.daily_velocity),
        )
