import numpy as np
import pandas as pd

# Staple goods sold by a typical Kenyan retail shop
DEFAULT_ITEM_NAMES = [
    "Maize Flour 2kg",
    "Cooking Oil 1L",
    "Sugar 1kg",
    "Rice 5kg",
    "Tea Leaves 250g",
    "Milk 500ml",
    "Bread Loaf",
    "Bar Soap",
    "Toothpaste 100ml",
    "Detergent 1kg",
    "Table Salt 1kg",
    "Wheat Flour 2kg",
]


def _item_name(index: int) -> str:
    base = DEFAULT_ITEM_NAMES[index % len(DEFAULT_ITEM_NAMES)]
    cycle = index // len(DEFAULT_ITEM_NAMES)
    return base if cycle == 0 else f"{base} (Batch {cycle + 1})"


def generate_synthetic_inventory_data(
    start_date_str: str = "2024-01-01",
    end_date_str: str = "2024-03-31",
    num_items: int = 12,
    seed: int = 42,
    base_daily_demand: float = 3.0,
    demand_spread: float = 2.5,
    trend_strength: float = 0.6,
    unit_cost_start: float = 40.0,
    unit_cost_step: float = 15.0,
    markup: float = 0.35,
    untracked_every: int = 0,
    restock_interval_days: int = 30,
    overhead_expenses: tuple[str, ...] = ("Office rent", "Electricity bill"),
) -> tuple[list[dict], list[dict], list[dict]]:
    """
    Generates synthetic catalog, invoice and expense records in the shape the
    entity store returns them (see ``connectors.entity_records``).

    Args:
        start_date_str: First sales day (YYYY-MM-DD).
        end_date_str: Last sales day (YYYY-MM-DD).
        num_items: Number of catalog items.
        seed: Random seed for reproducibility.
        base_daily_demand: Poisson mean of daily sales for the slowest item.
        demand_spread: Extra demand, scaled by a random factor per item.
        trend_strength: Relative change in demand from the first to the last day;
            each item trends up or down at random.
        unit_cost_start: Unit cost of the first item.
        unit_cost_step: Added unit cost per item index (cycled every 5 items).
        markup: Unit price = unit cost * (1 + markup).
        untracked_every: If > 0, every n-th item has stock tracking disabled.
        restock_interval_days: Days between restock expenses for each item.
        overhead_expenses: Descriptions of expenses unrelated to any item.

    Returns:
        A tuple containing:
        - items: catalog item records.
        - invoices: one invoice per sales day, with ``line_items``.
        - expenses: restock and overhead expense records.
    """
    rng = np.random.default_rng(seed)
    dates = pd.date_range(start=start_date_str, end=end_date_str)
    day_positions = np.linspace(0.0, 1.0, num=len(dates))

    items: list[dict] = []
    rows: list[dict] = []
    for index in range(num_items):
        item_id = f"ITEM-{index + 1:03d}"
        unit_cost = round(unit_cost_start + (index % 5) * unit_cost_step, 2)
        unit_price = round(unit_cost * (1 + markup), 2)
        mean_demand = base_daily_demand + demand_spread * rng.random()
        direction = rng.choice([-1.0, 1.0])
        trend = 1.0 + direction * trend_strength * (day_positions - 0.5)
        daily_quantities = rng.poisson(np.clip(mean_demand * trend, 0.05, None))

        for sale_date, quantity in zip(dates, daily_quantities):
            if quantity > 0:
                rows.append(
                    {
                        "date": sale_date,
                        "item_id": item_id,
                        "quantity": int(quantity),
                        "unit_price": unit_price,
                        "unit_cost": unit_cost,
                    }
                )

        monthly_demand = mean_demand * 30
        items.append(
            {
                "id": item_id,
                "item_name": _item_name(index),
                "current_stock": int(rng.integers(0, max(2, int(monthly_demand * 3)))),
                "reorder_level": int(round(mean_demand * 7)),
                "unit_cost": unit_cost,
                "unit_price": unit_price,
                "is_trackable": not (untracked_every > 0 and (index + 1) % untracked_every == 0),
            }
        )

    sales_df = pd.DataFrame(rows, columns=["date", "item_id", "quantity", "unit_price", "unit_cost"])

    invoices: list[dict] = []
    for number, (sale_date, day_sales) in enumerate(sales_df.groupby("date", sort=True), start=1):
        invoices.append(
            {
                "id": f"INV-{number:05d}",
                "invoice_date": sale_date.strftime("%Y-%m-%d"),
                "line_items": [
                    {
                        "item_id": row.item_id,
                        "quantity": int(row.quantity),
                        "unit_price": float(row.unit_price),
                        "total": round(float(row.quantity * row.unit_price), 2),
                        "cost_price": float(row.unit_cost),
                    }
                    for row in day_sales.itertuples(index=False)
                ],
            }
        )

    expenses: list[dict] = []
    restock_dates = dates[:: max(1, restock_interval_days)]
    for item in items:
        item_sales = sales_df.loc[sales_df["item_id"] == item["id"], "quantity"]
        restock_quantity = int(item_sales.sum() / max(1, len(restock_dates))) + 1
        for restock_date in restock_dates:
            expenses.append(
                {
                    "id": f"EXP-{len(expenses) + 1:05d}",
                    "expense_date": restock_date.strftime("%Y-%m-%d"),
                    "description": f"Restock {item['item_name']}",
                    "amount": round(restock_quantity * item["unit_cost"], 2),
                }
            )
    for description in overhead_expenses:
        expenses.append(
            {
                "id": f"EXP-{len(expenses) + 1:05d}",
                "expense_date": dates[0].strftime("%Y-%m-%d"),
                "description": description,
                "amount": round(float(rng.uniform(5_000, 20_000)), 2),
            }
        )

    return items, invoices, expenses
