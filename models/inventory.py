"""
Inventory-related input models for the inventory intelligence pipeline.
Includes CatalogItem, SaleRecord, ExpenseRecord, PurchaseRecord and BusinessContext.

These are read-only facts supplied by the caller (catalog, invoices, expenses);
the pipeline never mutates them.
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field


class CatalogItem(BaseModel):
    """A product in the catalog."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    current_stock: int = Field(default=0, ge=0)
    reorder_level: int = Field(default=0, ge=0)
    unit_cost: float = Field(default=0.0, ge=0)
    unit_price: float = Field(default=0.0, ge=0)
    is_trackable: bool = False


class SaleRecord(BaseModel):
    """One invoice line for a catalog item."""

    model_config = ConfigDict(frozen=True)

    item_id: str
    sale_date: date
    quantity: float = Field(gt=0)
    revenue: float = 0.0
    unit_price: float = 0.0
    cost_price_at_sale: float | None = None  # None: use the item's current unit cost
    invoice_id: str | None = None

    def unit_cost_for(self, item: CatalogItem) -> float:
        if self.cost_price_at_sale is None:
            return item.unit_cost
        return self.cost_price_at_sale


class ExpenseRecord(BaseModel):
    """A historical purchase or restock expense."""

    model_config = ConfigDict(frozen=True)

    expense_date: date
    amount: float = 0.0
    description: str = ""
    item_id: str | None = None  # Only set when the expense store links expenses to items


class PurchaseRecord(BaseModel):
    """An expense attributed to an item, with the quantity it probably bought."""

    purchase_date: date
    amount: float
    estimated_quantity: int


class BusinessContext(BaseModel):
    """Company-level context passed to the demand forecast prompt."""

    business_sector: str = "general"
