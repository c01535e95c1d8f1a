"""
Derived models produced by the inventory intelligence pipeline.

Each model extends the previous stage so a StockOptimization still carries
the forecast and performance figures it was computed from. Everything here is
recomputed on every analysis run and is JSON-serialisable through
``model_dump(mode="json")``.
"""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, computed_field

from .enums import (
    DemandVariability,
    ForecastSource,
    IntelligenceErrorKind,
    Priority,
    SalesTrend,
    StockAction,
)
from .inventory import PurchaseRecord

# Legacy value shown when stock never runs out at the current velocity
UNBOUNDED_DAYS_SENTINEL = 999

# Stockout risk at which an item needs an emergency order
CRITICAL_STOCKOUT_RISK = 90


class StockCoverage(BaseModel):
    """Days of stock left at a given sales velocity, or unbounded when nothing sells."""

    model_config = ConfigDict(frozen=True)

    days: float | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_unbounded(self) -> bool:
        return self.days is None

    @classmethod
    def of_days(cls, days: float) -> StockCoverage:
        return cls(days=days)

    @classmethod
    def unlimited(cls) -> StockCoverage:
        return cls(days=None)

    @classmethod
    def from_velocity(cls, stock: float, daily_velocity: float) -> StockCoverage:
        """Coverage of ``stock`` units consumed at ``daily_velocity`` units per day."""
        if daily_velocity <= 0:
            return cls.unlimited()
        return cls.of_days(max(0.0, stock / daily_velocity))

    def days_or_sentinel(self) -> float:
        return UNBOUNDED_DAYS_SENTINEL if self.days is None else self.days


class ItemPerformanceAnalysis(BaseModel):
    """Historical sales and stock metrics for one catalog item."""

    item_id: str
    item_name: str
    current_stock: int
    reorder_level: int
    unit_cost: float
    unit_price: float
    total_quantity_sold: float = 0.0
    total_revenue: float = 0.0
    gross_profit: float = 0.0
    profit_margin_pct: float = 0.0
    daily_velocity: float = Field(default=0.0, ge=0)
    weekly_velocity: float = Field(default=0.0, ge=0)
    monthly_velocity: float = Field(default=0.0, ge=0)
    days_of_stock_remaining: StockCoverage = Field(default_factory=StockCoverage.unlimited)
    monthly_sales_histogram: dict[str, float] = Field(default_factory=dict)
    sales_trend: SalesTrend = SalesTrend.INSUFFICIENT_DATA
    stock_turnover: float = 0.0
    purchase_history: list[PurchaseRecord] = Field(default_factory=list)
    last_sale_date: date | None = None


class DemandForecast(ItemPerformanceAnalysis):
    """An item analysis extended with a 30/60/90-day demand forecast."""

    next_30_days_demand: float = Field(ge=0)
    next_60_days_demand: float = Field(ge=0)
    next_90_days_demand: float = Field(ge=0)
    seasonal_adjustment: float = 1.0
    confidence_level: float = Field(ge=0, le=100)
    demand_variability: DemandVariability = DemandVariability.MEDIUM
    forecast_reasoning: str = ""
    forecast_date: datetime
    forecast_source: ForecastSource = ForecastSource.ORACLE


class StockRecommendation(BaseModel):
    """What to do about an item's stock. ``action`` is the variant tag."""

    action: StockAction
    message: str
    quantity: float = 0.0
    timeframe: str
    priority: Priority


class StockOptimization(DemandForecast):
    """A demand forecast turned into stock targets, risk scores and a recommendation."""

    recommended_safety_stock: int
    optimal_stock: int
    stockout_risk: int = Field(ge=0, le=100)
    overstock_risk: int = Field(ge=0, le=100)
    recommendation: StockRecommendation
    stock_gap: int
    days_until_stockout: StockCoverage


class PurchaseRecommendation(BaseModel):
    item_id: str
    item_name: str
    current_stock: int
    recommended_quantity: float = Field(gt=0)
    urgency: str
    priority: Priority
    reason: str
    potential_lost_sales: float
    estimated_cost: float
    expected_revenue: float


class InventoryAlert(BaseModel):
    severity: Priority
    item_name: str
    message: str
    action: str
    impact: str


class FinancialImpact(BaseModel):
    total_potential_revenue_loss: float = 0.0
    total_capital_tied_up: float = 0.0
    total_optimization_opportunity: float = 0.0
    total_reorder_cost: float = 0.0
    net_benefit: float = 0.0
    roi_projection_pct: float = 0.0


class InventorySummary(BaseModel):
    total_items: int
    critical_items: int
    low_stock_items: int
    healthy_stock_items: int
    overstock_items: int
    key_insight: str
    financial_impact: FinancialImpact


class AggregatedRecommendations(BaseModel):
    """Everything derived from a set of stock optimizations."""

    purchase_recommendations: list[PurchaseRecommendation] = Field(default_factory=list)
    inventory_alerts: list[InventoryAlert] = Field(default_factory=list)
    financial_impact: FinancialImpact = Field(default_factory=FinancialImpact)
    summary: InventorySummary


GENERIC_FAILURE_MESSAGE = "Could not analyze inventory optimization. Please try again."


class IntelligenceError(BaseModel):
    kind: IntelligenceErrorKind
    message: str

    @property
    def user_message(self) -> str:
        """Message safe to show an end user."""
        if self.kind == IntelligenceErrorKind.NO_TRACKABLE_ITEMS:
            return self.message
        return GENERIC_FAILURE_MESSAGE


class AnalysisResult(BaseModel):
    """Outcome of one inventory optimization run.

    On failure ``error`` is set, every list is empty and ``financial_impact``
    and ``summary`` are None.
    """

    success: bool
    error: IntelligenceError | None = None
    item_analyses: list[ItemPerformanceAnalysis] = Field(default_factory=list)
    demand_forecasts: list[DemandForecast] = Field(default_factory=list)
    stock_optimizations: list[StockOptimization] = Field(default_factory=list)
    purchase_recommendations: list[PurchaseRecommendation] = Field(default_factory=list)
    inventory_alerts: list[InventoryAlert] = Field(default_factory=list)
    financial_impact: FinancialImpact | None = None
    summary: InventorySummary | None = None
    analyzed_at: datetime | None = None

    @classmethod
    def failure(cls, kind: IntelligenceErrorKind, message: str) -> AnalysisResult:
        return cls(success=False, error=IntelligenceError(kind=kind, message=message))

    def critical_items(self) -> list[StockOptimization]:
        """Optimizations needing immediate attention."""
        return [
            opt
            for opt in self.stock_optimizations
            if opt.stockout_risk >= CRITICAL_STOCKOUT_RISK
            or opt.recommendation.action == StockAction.EMERGENCY_ORDER
        ]
