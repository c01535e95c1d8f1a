import json
from datetime import date

from agents.inventory_intelligence.performance import ItemPerformanceAnalyzer
from agents.prompts import DEMAND_FORECAST_SCHEMA, build_demand_forecast_prompt
from tests.mocks import make_item, make_sale


def _analysis(sales):
    return ItemPerformanceAnalyzer().analyze(make_item(name="Tea Leaves 250g", current_stock=20), sales, [])


def test_prompt_describes_item_performance():
    sales = [make_sale(sale_date=date(2024, 1, 1), quantity=10), make_sale(sale_date=date(2024, 1, 31), quantity=10)]

    prompt = build_demand_forecast_prompt(_analysis(sales), business_sector="retail", market="Kenya")

    assert "demand forecasting AI for a retail business in Kenya" in prompt
    assert "Product: Tea Leaves 250g" in prompt
    assert "Current Stock: 20 units" in prompt
    assert "Daily Sales Velocity: 0.67 units/day" in prompt
    assert "Monthly Sales: 20.0 units/month" in prompt
    assert "Days of Stock Remaining: 30.0 days" in prompt
    assert "Sales Trend: insufficient_data" in prompt
    assert 'Monthly Sales Pattern: {"Jan": 20.0}' in prompt
    assert "Seasonal trends for the Kenya market" in prompt


def test_prompt_for_item_without_sales_has_no_day_count():
    prompt = build_demand_forecast_prompt(_analysis([]))

    assert "general business in Kenya" in prompt
    assert "Days of Stock Remaining: no stockout expected" in prompt
    assert "999" not in prompt
    assert "Monthly Sales Pattern: {}" in prompt


def test_schema_requires_every_property():
    assert set(DEMAND_FORECAST_SCHEMA["required"]) == set(DEMAND_FORECAST_SCHEMA["properties"])
    assert DEMAND_FORECAST_SCHEMA["properties"]["demandVariability"]["enum"] == ["low", "medium", "high"]
    json.dumps(DEMAND_FORECAST_SCHEMA)
