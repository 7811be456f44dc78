# Overview: Read-only financial aggregation for the dashboard and reports.

from __future__ import annotations

from datetime import datetime

from sqlalchemy import case, func

from dealership.extensions import db
from dealership.models import (
    Expense,
    StoreExpense,
    Vehicle,
    STATUS_AVAILABLE,
    STATUS_SOLD,
)
from dealership.time_utils import month_bounds, to_utc_z, utcnow


class ReportError(Exception):
    """Raised when report parameters are out of range."""
    pass


MAX_REPORT_MONTHS = 60


def vehicle_profit(vehicle: Vehicle) -> dict:
    """
    (sale price if sold, else asking price) - sum of the vehicle's expenses.

    For unsold vehicles the figure is an estimate; a missing asking price
    counts as zero.
    """
    total_expenses = int(
        db.session.query(func.coalesce(func.sum(Expense.amount_cents), 0))
        .filter(Expense.vehicle_id == vehicle.id)
        .scalar()
        or 0
    )
    if vehicle.status == STATUS_SOLD:
        base = vehicle.sale_price_cents or 0
    else:
        base = vehicle.price_cents or 0

    return {
        "total_expenses_cents": total_expenses,
        "profit_cents": base - total_expenses,
        "profit_is_estimated": vehicle.status != STATUS_SOLD,
    }


def _sum_amount(model, start: datetime | None = None, end: datetime | None = None) -> int:
    query = db.session.query(func.coalesce(func.sum(model.amount_cents), 0))
    if start is not None:
        query = query.filter(model.date >= start)
    if end is not None:
        query = query.filter(model.date < end)
    return int(query.scalar() or 0)


def monthly_sales(offset: int = 0, now: datetime | None = None) -> dict:
    """Count and revenue of SOLD vehicles with sale_date in the month window."""
    start, end = month_bounds(offset, now)
    row = db.session.query(
        func.count(Vehicle.id).label("sales_count"),
        func.coalesce(func.sum(Vehicle.sale_price_cents), 0).label("revenue_cents"),
    ).filter(
        Vehicle.status == STATUS_SOLD,
        Vehicle.sale_date >= start,
        Vehicle.sale_date < end,
    ).one()

    return {
        "start": to_utc_z(start),
        "end": to_utc_z(end),
        "sales_count": int(row.sales_count or 0),
        "revenue_cents": int(row.revenue_cents or 0),
    }


def monthly_expenses(offset: int = 0, now: datetime | None = None) -> dict:
    """Vehicle + store expenses dated in the month window."""
    start, end = month_bounds(offset, now)
    vehicle_total = _sum_amount(Expense, start, end)
    store_total = _sum_amount(StoreExpense, start, end)
    return {
        "start": to_utc_z(start),
        "end": to_utc_z(end),
        "vehicle_expenses_cents": vehicle_total,
        "store_expenses_cents": store_total,
        "expenses_cents": vehicle_total + store_total,
    }


def dashboard_stats(now: datetime | None = None) -> dict:
    """
    Snapshot for the dashboard. Recomputed from the store on every call.

    `now` pins the month windows (tests); defaults to the wall clock.
    """
    now = now or utcnow()

    counts = db.session.query(
        func.count(Vehicle.id).label("total"),
        func.coalesce(func.sum(case((Vehicle.status == STATUS_AVAILABLE, 1), else_=0)), 0).label("available"),
        func.coalesce(func.sum(case((Vehicle.status == STATUS_SOLD, 1), else_=0)), 0).label("sold"),
    ).one()

    total_vehicle_expenses = _sum_amount(Expense)
    total_store_expenses = _sum_amount(StoreExpense)

    current_sales = monthly_sales(0, now)
    previous_sales = monthly_sales(-1, now)
    current_expenses = monthly_expenses(0, now)
    previous_expenses = monthly_expenses(-1, now)

    return {
        "total_vehicles": int(counts.total or 0),
        "total_available": int(counts.available or 0),
        "total_sold": int(counts.sold or 0),
        "total_expenses": total_vehicle_expenses + total_store_expenses,
        "total_vehicle_expenses": total_vehicle_expenses,
        "total_store_expenses": total_store_expenses,
        "current_month_sales": current_sales["sales_count"],
        "current_month_revenue": current_sales["revenue_cents"],
        "previous_month_sales": previous_sales["sales_count"],
        "previous_month_revenue": previous_sales["revenue_cents"],
        "current_month_expenses": current_expenses["expenses_cents"],
        "previous_month_expenses": previous_expenses["expenses_cents"],
    }


def total_revenue_cents() -> int:
    return int(
        db.session.query(func.coalesce(func.sum(Vehicle.sale_price_cents), 0))
        .filter(Vehicle.status == STATUS_SOLD)
        .scalar()
        or 0
    )


def financial_report(now: datetime | None = None) -> dict:
    """
    All-time revenue, expenses and net profit, plus the two most recent months.

    net_profit_cents = revenue - (vehicle + store expenses). Acquisition
    prices and trade-in values are not subtracted; staff record those costs
    as expenses when they want them counted.
    """
    now = now or utcnow()
    revenue = total_revenue_cents()
    vehicle_expenses = _sum_amount(Expense)
    store_expenses = _sum_amount(StoreExpense)
    total_expenses = vehicle_expenses + store_expenses

    months = {}
    for label, offset in (("current_month", 0), ("previous_month", -1)):
        sales = monthly_sales(offset, now)
        expenses = monthly_expenses(offset, now)
        months[label] = {
            "start": sales["start"],
            "end": sales["end"],
            "sales_count": sales["sales_count"],
            "revenue_cents": sales["revenue_cents"],
            "expenses_cents": expenses["expenses_cents"],
            "profit_cents": sales["revenue_cents"] - expenses["expenses_cents"],
        }

    current, previous = months["current_month"], months["previous_month"]
    return {
        "as_of": to_utc_z(now),
        "total_revenue_cents": revenue,
        "total_vehicle_expenses_cents": vehicle_expenses,
        "total_store_expenses_cents": store_expenses,
        "total_expenses_cents": total_expenses,
        "net_profit_cents": revenue - total_expenses,
        "current_month": current,
        "previous_month": previous,
        "sales_change": current["sales_count"] - previous["sales_count"],
        "revenue_change_cents": current["revenue_cents"] - previous["revenue_cents"],
    }


def monthly_report(months: int = 12, now: datetime | None = None) -> dict:
    """One row per calendar month, oldest first, ending with the current month."""
    if months < 1 or months > MAX_REPORT_MONTHS:
        raise ReportError(f"months must be between 1 and {MAX_REPORT_MONTHS}")

    now = now or utcnow()
    rows = []
    for offset in range(-(months - 1), 1):
        sales = monthly_sales(offset, now)
        expenses = monthly_expenses(offset, now)
        rows.append(
            {
                "period": sales["start"][:7],
                "sales_count": sales["sales_count"],
                "revenue_cents": sales["revenue_cents"],
                "vehicle_expenses_cents": expenses["vehicle_expenses_cents"],
                "store_expenses_cents": expenses["store_expenses_cents"],
                "profit_cents": sales["revenue_cents"] - expenses["expenses_cents"],
            }
        )

    return {
        "as_of": to_utc_z(now),
        "months": months,
        "rows": rows,
    }
