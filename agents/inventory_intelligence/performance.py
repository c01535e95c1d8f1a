"""
Item performance analysis: turns raw sales and expense history for one catalog
item into velocity, profitability and trend figures. Pure, no I/O.
"""

import logging
import math
from collections.abc import Sequence
from typing import Protocol

from models.enums import SalesTrend
from models.intelligence import ItemPerformanceAnalysis, StockCoverage
from models.inventory import CatalogItem, ExpenseRecord, PurchaseRecord, SaleRecord

logger = logging.getLogger(__name__)

TREND_MIN_RECORDS = 4
TREND_THRESHOLD_PCT = 20.0


class ExpenseMatcher(Protocol):
    """Decides whether an expense was a purchase of a catalog item."""

    def matches(self, item: CatalogItem, expense: ExpenseRecord) -> bool: ...


class DescriptionExpenseMatcher:
    """
    Heuristic match: the item's name appears in the expense description
    (case-insensitive). Short or generic item names produce false positives
    and abbreviated descriptions produce false negatives.
    """

    def matches(self, item: CatalogItem, expense: ExpenseRecord) -> bool:
        if not item.name or not expense.description:
            return False
        return item.name.lower() in expense.description.lower()


class ItemIdExpenseMatcher:
    """Exact join on ``ExpenseRecord.item_id``, for expense stores that link expenses to items."""

    def matches(self, item: CatalogItem, expense: ExpenseRecord) -> bool:
        return expense.item_id is not None and expense.item_id == item.id


def calculate_sales_trend(item_sales: Sequence[SaleRecord]) -> SalesTrend:
    """Compare average quantity per sale between the earlier and later half of the history."""
    if len(item_sales) < TREND_MIN_RECORDS:
        return SalesTrend.INSUFFICIENT_DATA

    ordered = sorted(item_sales, key=lambda sale: sale.sale_date)
    middle = len(ordered) // 2
    first_half, second_half = ordered[:middle], ordered[middle:]
    first_avg = sum(sale.quantity for sale in first_half) / len(first_half)
    second_avg = sum(sale.quantity for sale in second_half) / len(second_half)
    if first_avg == 0:
        return SalesTrend.STABLE

    growth_rate = (second_avg - first_avg) / first_avg * 100
    if growth_rate > TREND_THRESHOLD_PCT:
        return SalesTrend.GROWING
    if growth_rate < -TREND_THRESHOLD_PCT:
        return SalesTrend.DECLINING
    return SalesTrend.STABLE


def monthly_sales_histogram(item_sales: Sequence[SaleRecord]) -> dict[str, float]:
    """Quantity sold per abbreviated month label ("Jan", "Feb"...)."""
    histogram: dict[str, float] = {}
    for sale in item_sales:
        month = sale.sale_date.strftime("%b")
        histogram[month] = histogram.get(month, 0) + sale.quantity
    return histogram


class ItemPerformanceAnalyzer:
    """
    Derives historical sales and purchase metrics for a catalog item.

    Args:
        expense_matcher: Strategy attributing expenses to items. Defaults to
            matching the item name against the expense description.
    """

    def __init__(self, expense_matcher: ExpenseMatcher | None = None):
        self.expense_matcher = expense_matcher or DescriptionExpenseMatcher()

    def analyze(
        self,
        item: CatalogItem,
        sales: Sequence[SaleRecord],
        expenses: Sequence[ExpenseRecord],
    ) -> ItemPerformanceAnalysis:
        item_sales = [sale for sale in sales if sale.item_id == item.id]
        purchases = [
            PurchaseRecord(
                purchase_date=expense.expense_date,
                amount=expense.amount,
                estimated_quantity=math.floor(expense.amount / (item.unit_cost or 1)),
            )
            for expense in expenses
            if self.expense_matcher.matches(item, expense)
        ]

        total_quantity_sold = sum(sale.quantity for sale in item_sales)
        total_revenue = sum(sale.revenue for sale in item_sales)
        total_cost = sum(sale.quantity * sale.unit_cost_for(item) for sale in item_sales)
        gross_profit = total_revenue - total_cost
        profit_margin_pct = gross_profit / total_revenue * 100 if total_revenue > 0 else 0.0

        sale_dates = [sale.sale_date for sale in item_sales]
        last_sale_date = max(sale_dates) if sale_dates else None
        days_span = max(1, (last_sale_date - min(sale_dates)).days) if sale_dates else 1
        daily_velocity = total_quantity_sold / days_span

        analysis = ItemPerformanceAnalysis(
            item_id=item.id,
            item_name=item.name,
            current_stock=item.current_stock,
            reorder_level=item.reorder_level,
            unit_cost=item.unit_cost,
            unit_price=item.unit_price,
            total_quantity_sold=total_quantity_sold,
            total_revenue=total_revenue,
            gross_profit=gross_profit,
            profit_margin_pct=profit_margin_pct,
            daily_velocity=daily_velocity,
            weekly_velocity=daily_velocity * 7,
            monthly_velocity=daily_velocity * 30,
            days_of_stock_remaining=StockCoverage.from_velocity(item.current_stock, daily_velocity),
            monthly_sales_histogram=monthly_sales_histogram(item_sales),
            sales_trend=calculate_sales_trend(item_sales),
            stock_turnover=total_quantity_sold / max(1, item.current_stock),
            purchase_history=purchases,
            last_sale_date=last_sale_date,
        )
        logger.debug(
            f"Analyzed {item.name}: sold={total_quantity_sold} revenue={total_revenue:.2f} "
            f"velocity={daily_velocity:.2f}/day trend={analysis.sales_trend.value}"
        )
        return analysis
