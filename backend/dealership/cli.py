# Overview: Flask CLI command groups for bootstrap, demo data and reports.

# backend/dealership/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init-db
#   Create all tables that do not exist yet (use `flask db upgrade` for migrations).
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
# - python -m flask system seed
#   Insert demo people, vehicles and expenses when the people table is empty.
#
# Reports:
# - python -m flask reports dashboard
#   Print the dashboard snapshot (counts, month-over-month sales and expenses).
# - python -m flask reports monthly --months 6
#   Print revenue, expenses and profit per calendar month.

import click
from flask.cli import with_appcontext

from .extensions import db
from .models import Person
from .errors import DealershipError
from .services import people_service, vehicle_service, expense_service, reporting_service


def _money(cents: int) -> str:
    return f"R$ {cents / 100:,.2f}"


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init-db')
@with_appcontext
def init_db():
    """Create missing tables."""
    db.create_all()
    click.echo("PASS Database tables created")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Confirm destructive reset')
@with_appcontext
def reset_db(yes):
    """DEV/TEST only: drop and recreate all tables."""
    if not yes:
        click.echo("FAIL Refusing to reset without --yes")
        raise SystemExit(1)
    db.drop_all()
    db.create_all()
    click.echo("PASS Database reset")


@system_group.command('seed')
@with_appcontext
def seed():
    """Idempotent demo data: two owners, one client, two vehicles, two expenses."""
    if db.session.query(Person).count() > 0:
        click.echo("SKIP People already exist; not seeding")
        return

    try:
        owner1 = people_service.create_person({
            "name": "João Silva",
            "email": "joao@email.com",
            "phone": "11999998888",
            "type": "OWNER",
            "document": "123.456.789-00",
        })
        owner2 = people_service.create_person({
            "name": "Maria Oliveira",
            "email": "maria@email.com",
            "phone": "11988887777",
            "type": "OWNER",
            "document": "987.654.321-99",
        })
        people_service.create_person({
            "name": "Carlos Santos",
            "email": "carlos@email.com",
            "phone": "11977776666",
            "type": "CLIENT",
            "document": "111.222.333-44",
        })

        civic = vehicle_service.create_vehicle({
            "plate": "ABC-1234",
            "brand": "Honda",
            "model": "Civic EX",
            "color": "Prata",
            "year_fab": 2020,
            "year_model": 2020,
            "price_cents": 8_500_000,
            "status": "AVAILABLE",
            "owner_id": owner1["id"],
            "notes": "Carro em ótimo estado, único dono.",
        })
        vehicle_service.create_vehicle({
            "plate": "XYZ-9876",
            "brand": "Toyota",
            "model": "Corolla XEi",
            "color": "Preto",
            "year_fab": 2021,
            "year_model": 2021,
            "price_cents": 11_000_000,
            "owner_id": owner2["id"],
            "notes": "Precisa de polimento.",
        })

        expense_service.create_expense(civic["id"], "Lavagem completa", 15_000)
        expense_service.create_expense(civic["id"], "Troca de óleo", 35_000)
    except DealershipError as exc:
        click.echo(f"FAIL {exc.message}")
        raise SystemExit(1)

    click.echo("PASS Seeded 3 people, 2 vehicles, 2 expenses")


@click.group('reports')
def reports_group():
    """Financial report commands."""


@reports_group.command('dashboard')
@with_appcontext
def dashboard():
    """Print the dashboard snapshot."""
    stats = reporting_service.dashboard_stats()
    click.echo(f"Vehicles:          {stats['total_vehicles']} "
               f"({stats['total_available']} available, {stats['total_sold']} sold)")
    click.echo(f"Total expenses:    {_money(stats['total_expenses'])}")
    click.echo(f"This month:        {stats['current_month_sales']} sales, "
               f"{_money(stats['current_month_revenue'])} revenue, "
               f"{_money(stats['current_month_expenses'])} expenses")
    click.echo(f"Previous month:    {stats['previous_month_sales']} sales, "
               f"{_money(stats['previous_month_revenue'])} revenue, "
               f"{_money(stats['previous_month_expenses'])} expenses")


@reports_group.command('monthly')
@click.option('--months', default=12, show_default=True, type=int, help='Number of months to show')
@with_appcontext
def monthly(months):
    """Print revenue, expenses and profit per month."""
    try:
        report = reporting_service.monthly_report(months=months)
    except reporting_service.ReportError as exc:
        click.echo(f"FAIL {exc}")
        raise SystemExit(1)

    click.echo(f"{'Period':<8} {'Sales':>5} {'Revenue':>18} {'Expenses':>18} {'Profit':>18}")
    for row in report["rows"]:
        expenses = row["vehicle_expenses_cents"] + row["store_expenses_cents"]
        click.echo(
            f"{row['period']:<8} {row['sales_count']:>5} {_money(row['revenue_cents']):>18} "
            f"{_money(expenses):>18} {_money(row['profit_cents']):>18}"
        )


def register_commands(app):
    app.cli.add_command(system_group)
    app.cli.add_command(reports_group)
