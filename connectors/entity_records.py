"""
Module: connectors.entity_records

Converts raw records from the generic entity store (catalog items, invoices
with nested line items, expenses, company profile) into the models the
inventory intelligence pipeline works on.
"""

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from models.inventory import BusinessContext, CatalogItem, ExpenseRecord, SaleRecord

logger = logging.getLogger(__name__)

__all__ = [
    "catalog_items_from_records",
    "sale_records_from_invoices",
    "expense_records_from_records",
    "business_context_from_profile",
]


def _number(value: Any, default: float = 0.0) -> float:
    """Entity-store numbers may be missing, null or strings."""
    if value is None or value == "":
        return default
    return float(value)


def _calendar_date(value: Any) -> Any:
    """Entity-store dates may carry a time part; only the calendar day is used."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str):
        return value[:10]
    return value


def catalog_items_from_records(records: Iterable[Mapping[str, Any]]) -> list[CatalogItem]:
    """Map catalog records (``item_name``, ``current_stock``...) to CatalogItems."""
    items = []
    for record in records:
        items.append(
            CatalogItem(
                id=str(record["id"]),
                name=record.get("item_name") or record.get("name") or "",
                current_stock=int(_number(record.get("current_stock"))),
                reorder_level=int(_number(record.get("reorder_level"))),
                unit_cost=_number(record.get("unit_cost")),
                unit_price=_number(record.get("unit_price")),
                is_trackable=bool(record.get("is_trackable", False)),
            )
        )
    return items


def sale_records_from_invoices(invoices: Iterable[Mapping[str, Any]]) -> list[SaleRecord]:
    """Flatten invoice line items into SaleRecords dated by the invoice date.

    Lines without an ``item_id`` (free-text service lines) and lines with a
    non-positive quantity are not sales of a catalog item and are skipped.
    """
    sales = []
    for invoice in invoices:
        invoice_date = invoice.get("invoice_date")
        if not invoice_date:
            logger.warning(f"Skipping invoice {invoice.get('id', '[unknown]')} without an invoice_date")
            continue
        for line in invoice.get("line_items") or []:
            item_id = line.get("item_id")
            quantity = _number(line.get("quantity"))
            if not item_id or quantity <= 0:
                continue
            unit_price = _number(line.get("unit_price"))
            cost_price = line.get("cost_price")
            sales.append(
                SaleRecord(
                    item_id=str(item_id),
                    sale_date=_calendar_date(invoice_date),
                    quantity=quantity,
                    revenue=_number(line.get("total"), default=quantity * unit_price),
                    unit_price=unit_price,
                    cost_price_at_sale=_number(cost_price) if cost_price else None,
                    invoice_id=str(invoice["id"]) if invoice.get("id") else None,
                )
            )
    return sales


def expense_records_from_records(records: Iterable[Mapping[str, Any]]) -> list[ExpenseRecord]:
    expenses = []
    for record in records:
        expense_date = record.get("expense_date")
        if not expense_date:
            logger.warning(f"Skipping expense {record.get('id', '[unknown]')} without an expense_date")
            continue
        expenses.append(
            ExpenseRecord(
                expense_date=_calendar_date(expense_date),
                amount=_number(record.get("amount")),
                description=record.get("description") or "",
                item_id=str(record["item_id"]) if record.get("item_id") else None,
            )
        )
    return expenses


def business_context_from_profile(profile: Mapping[str, Any] | None) -> BusinessContext:
    if not profile or not profile.get("business_sector"):
        return BusinessContext()
    return BusinessContext(business_sector=profile["business_sector"])
