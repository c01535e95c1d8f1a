import pandas as pd
import pytest

from connectors.entity_records import (
    catalog_items_from_records,
    expense_records_from_records,
    sale_records_from_invoices,
)
from utils.data_generation import DEFAULT_ITEM_NAMES, generate_synthetic_inventory_data

# Define common parameters for tests
TEST_START_DATE = "2024-01-01"
TEST_END_DATE = "2024-02-29"
TEST_NUM_ITEMS = 5
TEST_SEED = 123


@pytest.fixture(scope="module")  # Generate data once for the module
def generated_data():
    return generate_synthetic_inventory_data(
        start_date_str=TEST_START_DATE,
        end_date_str=TEST_END_DATE,
        num_items=TEST_NUM_ITEMS,
        seed=TEST_SEED,
        untracked_every=5,
    )


def test_output_types(generated_data):
    items, invoices, expenses = generated_data
    assert isinstance(items, list) and all(isinstance(i, dict) for i in items)
    assert isinstance(invoices, list) and all(isinstance(i, dict) for i in invoices)
    assert isinstance(expenses, list) and all(isinstance(e, dict) for e in expenses)


def test_items(generated_data):
    items, _, _ = generated_data

    assert [i["id"] for i in items] == ["ITEM-001", "ITEM-002", "ITEM-003", "ITEM-004", "ITEM-005"]
    assert [i["item_name"] for i in items] == DEFAULT_ITEM_NAMES[:TEST_NUM_ITEMS]
    assert [i["is_trackable"] for i in items] == [True, True, True, True, False]
    for item in items:
        assert item["current_stock"] >= 0
        assert item["unit_price"] > item["unit_cost"] > 0


def test_item_names_cycle_with_batch_suffix():
    items, _, _ = generate_synthetic_inventory_data(end_date_str="2024-01-03", num_items=len(DEFAULT_ITEM_NAMES) + 1)
    assert items[-1]["item_name"] == f"{DEFAULT_ITEM_NAMES[0]} (Batch 2)"


def test_invoices_one_per_sales_day_in_range(generated_data):
    _, invoices, _ = generated_data
    invoice_dates = [pd.Timestamp(inv["invoice_date"]) for inv in invoices]

    assert invoice_dates == sorted(invoice_dates)
    assert len(set(invoice_dates)) == len(invoice_dates)
    assert min(invoice_dates) >= pd.Timestamp(TEST_START_DATE)
    assert max(invoice_dates) <= pd.Timestamp(TEST_END_DATE)
    assert invoices[0]["id"] == "INV-00001"


def test_invoice_line_items(generated_data):
    items, invoices, _ = generated_data
    item_ids = {i["id"] for i in items}

    for invoice in invoices:
        assert invoice["line_items"]
        for line in invoice["line_items"]:
            assert line["item_id"] in item_ids
            assert line["quantity"] > 0
            assert line["total"] == pytest.approx(line["quantity"] * line["unit_price"], abs=0.01)
            assert line["cost_price"] < line["unit_price"]


def test_expenses_include_restocks_and_overheads(generated_data):
    items, _, expenses = generated_data
    descriptions = [e["description"] for e in expenses]

    # 60 days restocked every 30 days
    for item in items:
        assert descriptions.count(f"Restock {item['item_name']}") == 2
    assert "Office rent" in descriptions
    assert "Electricity bill" in descriptions
    assert all(e["amount"] > 0 for e in expenses)


def test_same_seed_same_data():
    first = generate_synthetic_inventory_data(end_date_str="2024-01-15", num_items=3, seed=7)
    second = generate_synthetic_inventory_data(end_date_str="2024-01-15", num_items=3, seed=7)
    assert first == second


def test_different_seed_different_sales():
    _, first, _ = generate_synthetic_inventory_data(end_date_str="2024-01-15", num_items=3, seed=7)
    _, second, _ = generate_synthetic_inventory_data(end_date_str="2024-01-15", num_items=3, seed=8)
    assert first != second


def test_records_load_through_entity_connectors(generated_data):
    items, invoices, expenses = generated_data

    catalog = catalog_items_from_records(items)
    sales = sale_records_from_invoices(invoices)
    expense_records = expense_records_from_records(expenses)

    assert len(catalog) == TEST_NUM_ITEMS
    assert len(sales) == sum(len(inv["line_items"]) for inv in invoices)
    assert len(expense_records) == len(expenses)
