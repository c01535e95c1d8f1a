"""
Aggregation of stock optimizations into purchase recommendations, alerts,
financial impact and a summary.
"""

import logging
import math
from collections.abc import Sequence

from models.enums import Priority
from models.intelligence import (
    CRITICAL_STOCKOUT_RISK,
    AggregatedRecommendations,
    FinancialImpact,
    InventoryAlert,
    InventorySummary,
    PurchaseRecommendation,
    StockOptimization,
)

logger = logging.getLogger(__name__)

LOST_SALES_LIKELIHOOD = 0.7  # Share of at-risk demand that is actually lost
REVENUE_LOSS_FACTOR = 0.5

HIGH_STOCKOUT_RISK = 65
LOW_STOCK_RISK = 50
HEALTHY_RISK_CEILING = 30
OVERSTOCK_ALERT_RISK = 70
CAPITAL_TIED_UP_RISK = 50
SLOW_MOVING_TURNOVER = 2

LOW_STOCK_SHARE = 0.3
OVERSTOCK_SHARE = 0.2


def calculate_potential_lost_sales(optimization: StockOptimization) -> float:
    return (
        optimization.stockout_risk / 100
        * optimization.next_30_days_demand
        * optimization.unit_price
        * LOST_SALES_LIKELIHOOD
    )


def generate_purchase_recommendations(
    optimizations: Sequence[StockOptimization],
) -> list[PurchaseRecommendation]:
    """Purchase orders for every item with a positive recommended quantity, most urgent first."""
    recommendations = [
        PurchaseRecommendation(
            item_id=opt.item_id,
            item_name=opt.item_name,
            current_stock=opt.current_stock,
            recommended_quantity=opt.recommendation.quantity,
            urgency=opt.recommendation.timeframe,
            priority=opt.recommendation.priority,
            reason=opt.recommendation.message,
            potential_lost_sales=calculate_potential_lost_sales(opt),
            estimated_cost=opt.recommendation.quantity * opt.unit_cost,
            expected_revenue=opt.recommendation.quantity * opt.unit_price,
        )
        for opt in optimizations
        if opt.recommendation.quantity > 0
    ]
    return sorted(recommendations, key=lambda rec: rec.priority.rank, reverse=True)


def _stockout_message(opt: StockOptimization) -> str:
    if opt.days_until_stockout.is_unbounded:
        return f"Critical: {opt.item_name} is at immediate risk of stocking out"
    return f"Critical: {opt.item_name} will stock out in {math.floor(opt.days_until_stockout.days)} days"


def generate_inventory_alerts(optimizations: Sequence[StockOptimization]) -> list[InventoryAlert]:
    """Independent alert rules per item; an item can raise several alerts."""
    alerts: list[InventoryAlert] = []
    for opt in optimizations:
        if opt.stockout_risk >= CRITICAL_STOCKOUT_RISK:
            alerts.append(
                InventoryAlert(
                    severity=Priority.CRITICAL,
                    item_name=opt.item_name,
                    message=_stockout_message(opt),
                    action="Place emergency order immediately",
                    impact="Lost sales, disappointed customers, revenue loss",
                )
            )

        if HIGH_STOCKOUT_RISK <= opt.stockout_risk < CRITICAL_STOCKOUT_RISK:
            alerts.append(
                InventoryAlert(
                    severity=Priority.HIGH,
                    item_name=opt.item_name,
                    message=f"High stockout risk for {opt.item_name} ({opt.stockout_risk}% risk)",
                    action="Reorder within 3-5 days",
                    impact="Potential lost sales and customer dissatisfaction",
                )
            )

        if opt.overstock_risk >= OVERSTOCK_ALERT_RISK:
            alerts.append(
                InventoryAlert(
                    severity=Priority.MEDIUM,
                    item_name=opt.item_name,
                    message=f"Excess stock detected for {opt.item_name}",
                    action="Consider promotional pricing or bundling",
                    impact="Capital tied up, potential obsolescence",
                )
            )

        if opt.stock_turnover < SLOW_MOVING_TURNOVER and opt.current_stock > 0:
            alerts.append(
                InventoryAlert(
                    severity=Priority.LOW,
                    item_name=opt.item_name,
                    message=f"{opt.item_name} is slow-moving ({opt.stock_turnover:.1f}x turnover)",
                    action="Review pricing strategy or discontinue",
                    impact="Capital efficiency, storage costs",
                )
            )
    return sorted(alerts, key=lambda alert: alert.severity.rank, reverse=True)


def calculate_financial_impact(optimizations: Sequence[StockOptimization]) -> FinancialImpact:
    revenue_loss = 0.0
    capital_tied_up = 0.0
    opportunity = 0.0
    reorder_cost = 0.0

    for opt in optimizations:
        if opt.stockout_risk >= LOW_STOCK_RISK:
            revenue_loss += (
                opt.next_30_days_demand * opt.unit_price * (opt.stockout_risk / 100) * REVENUE_LOSS_FACTOR
            )
        if opt.overstock_risk >= CAPITAL_TIED_UP_RISK:
            capital_tied_up += max(0, opt.current_stock - opt.next_30_days_demand) * opt.unit_cost
        quantity = opt.recommendation.quantity
        if quantity > 0:
            opportunity += quantity * (opt.unit_price - opt.unit_cost)
            reorder_cost += quantity * opt.unit_cost

    return FinancialImpact(
        total_potential_revenue_loss=revenue_loss,
        total_capital_tied_up=capital_tied_up,
        total_optimization_opportunity=opportunity,
        total_reorder_cost=reorder_cost,
        net_benefit=opportunity - revenue_loss,
        roi_projection_pct=opportunity / reorder_cost * 100 if reorder_cost > 0 else 0.0,
    )


def generate_inventory_summary(
    optimizations: Sequence[StockOptimization], financial_impact: FinancialImpact
) -> InventorySummary:
    total = len(optimizations)
    critical = sum(1 for opt in optimizations if opt.stockout_risk >= CRITICAL_STOCKOUT_RISK)
    low_stock = sum(1 for opt in optimizations if opt.stockout_risk >= LOW_STOCK_RISK)
    healthy = sum(
        1
        for opt in optimizations
        if opt.stockout_risk < HEALTHY_RISK_CEILING and opt.overstock_risk < HEALTHY_RISK_CEILING
    )
    overstock = sum(1 for opt in optimizations if opt.overstock_risk >= OVERSTOCK_ALERT_RISK)

    if critical > 0:
        key_insight = f"{critical} items need immediate attention to prevent stockouts."
    elif low_stock > total * LOW_STOCK_SHARE:
        key_insight = f"{low_stock} items have low stock levels. Consider bulk reordering."
    elif overstock > total * OVERSTOCK_SHARE:
        key_insight = f"{overstock} items are overstocked. Consider promotional strategies."
    else:
        key_insight = "Your inventory levels are well-balanced."

    return InventorySummary(
        total_items=total,
        critical_items=critical,
        low_stock_items=low_stock,
        healthy_stock_items=healthy,
        overstock_items=overstock,
        key_insight=key_insight,
        financial_impact=financial_impact,
    )


class RecommendationAggregator:
    """Builds the recommendation, alert and financial views over a set of optimizations."""

    def aggregate(self, optimizations: Sequence[StockOptimization]) -> AggregatedRecommendations:
        financial_impact = calculate_financial_impact(optimizations)
        aggregated = AggregatedRecommendations(
            purchase_recommendations=generate_purchase_recommendations(optimizations),
            inventory_alerts=generate_inventory_alerts(optimizations),
            financial_impact=financial_impact,
            summary=generate_inventory_summary(optimizations, financial_impact),
        )
        logger.info(
            f"Aggregated {len(optimizations)} optimizations: "
            f"{len(aggregated.purchase_recommendations)} purchase recommendations, "
            f"{len(aggregated.inventory_alerts)} alerts"
        )
        return aggregated
