"""
Centralized Enum definitions for the project.
"""

from enum import Enum


class SalesTrend(str, Enum):
    """Direction of an item's sales, comparing the first and second half of its history"""

    GROWING = "growing"
    DECLINING = "declining"
    STABLE = "stable"
    INSUFFICIENT_DATA = "insufficient_data"


class DemandVariability(str, Enum):
    """How volatile demand is expected to be over the forecast horizon"""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class StockAction(str, Enum):
    """Action recommended for an item's stock level"""

    EMERGENCY_ORDER = "emergency_order"
    REORDER_NOW = "reorder_now"
    REORDER_SOON = "reorder_soon"
    REDUCE_STOCK = "reduce_stock"
    MAINTAIN = "maintain"


class Priority(str, Enum):
    """Priority of a recommendation, also used as alert severity"""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    Priority.CRITICAL: 4,
    Priority.HIGH: 3,
    Priority.MEDIUM: 2,
    Priority.LOW: 1,
}


class ForecastSource(str, Enum):
    """Where a demand forecast came from"""

    ORACLE = "oracle"  # Text-generation model response
    FALLBACK = "fallback"  # Historical average, used when the model is unavailable


class IntelligenceErrorKind(str, Enum):
    """Failure kinds surfaced to callers of the inventory intelligence pipeline"""

    NO_TRACKABLE_ITEMS = "no_trackable_items"
    ANALYSIS_FAILED = "analysis_failed"
