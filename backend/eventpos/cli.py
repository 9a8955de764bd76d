# Overview: Flask CLI command group for event setup and a terminal-side dashboard.

# backend/eventpos/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask event <command> [options]
#
# Setup:
# - python -m flask event init-db
#   Create all tables (idempotent).
# - python -m flask event reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
# - python -m flask event seed
#   Load the default stand catalog with stock and bundle promotions (skips existing names).
# - python -m flask event add-promo --product-id 1 --trigger 3 --price 15,00
#   Add one bundle tier to a product.
#
# During the event:
# - python -m flask event sell --item 1:3 --item 5:1
#   Ring up a cart (product_id:quantity, repeatable) and commit it as one sale.
# - python -m flask event restock --product-id 1 --quantity 24 --cost 89,90
#   Record a restock purchase (cost + stock increase in one step).
# - python -m flask event dashboard
#   Print today's figures and the end-of-event projection.

import click
from flask import current_app
from flask.cli import with_appcontext

from .extensions import db
from .commands import Command, RESTOCK, execute_command
from .money import format_money, parse_money_to_cents
from .services import catalog_service, state_service, projection_service
from .services.pricing_service import price_item
from .services.projection_service import EventSettings
from .session import TerminalSession
from .validation import ValidationError, ConflictError, UnknownProductError, coerce_int, require_positive_int
from .time_utils import utcnow


# (name, category, unit cost, price, units per pack, initial stock, [(trigger, bundle price)])
DEFAULT_CATALOG = [
    ("Skol", "beer", 350, 700, 12, 120, [(3, 1800), (6, 3300)]),
    ("Beats Senses", "drinks", 600, 1200, 6, 48, [(3, 3000)]),
    ("Spaten", "beer", 450, 900, 12, 96, [(3, 2400)]),
    ("Brutal Fruit", "drinks", 550, 1000, 6, 36, []),
    ("Water", "water", 150, 400, 12, 60, [(3, 1000)]),
    ("Stella Artois", "beer", 550, 1100, 12, 72, [(3, 3000)]),
    ("Beats Red Mix", "drinks", 600, 1200, 6, 48, [(3, 3000)]),
]


@click.group('event')
def event_group():
    """Event setup and dashboard commands."""


@event_group.command('init-db')
@with_appcontext
def init_db():
    """Create all tables."""
    db.create_all()
    click.echo("PASS Tables created.")


@event_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()

    click.echo("BUILD  Creating all tables...")
    db.create_all()

    click.echo("PASS Database reset complete. Run 'python -m flask event seed' to load the catalog.")


@event_group.command('seed')
@with_appcontext
def seed():
    """Load the default catalog. Products that already exist are left alone."""
    created = 0
    for name, category, cost, price, per_pack, stock, promos in DEFAULT_CATALOG:
        try:
            product = catalog_service.create_product(
                name=name,
                category=category,
                unit_cost_cents=cost,
                suggested_price_cents=price,
                units_per_pack=per_pack,
                initial_quantity=stock,
            )
        except ConflictError:
            click.echo(f"SKIP  {name} already exists")
            continue

        for trigger, bundle_price in promos:
            catalog_service.create_promotion(product.id, trigger, bundle_price)
        created += 1
        click.echo(f"ADD   {name}: {stock} units at {format_money(price)}")

    click.echo(f"PASS Seeded {created} products.")


@event_group.command('add-promo')
@click.option('--product-id', type=int, required=True, help='Product ID')
@click.option('--trigger', type=int, required=True, help='Units in the bundle')
@click.option('--price', required=True, help='Bundle price, e.g. 15,00')
@with_appcontext
def add_promo(product_id, trigger, price):
    """Add one bundle tier to a product's price schedule."""
    if trigger <= 0:
        raise click.BadParameter("must be > 0", param_hint="--trigger")
    try:
        cents = parse_money_to_cents(price)
    except ValueError:
        raise click.BadParameter("must be a number", param_hint="--price")

    try:
        promo = catalog_service.create_promotion(product_id, trigger, cents)
    except (UnknownProductError, ConflictError) as e:
        raise click.ClickException(str(e))

    click.echo(f"PASS Promotion {promo.id}: {trigger} units for {format_money(cents)}")


@event_group.command('restock')
@click.option('--product-id', type=int, required=True, help='Product ID')
@click.option('--quantity', required=True, help='Units bought')
@click.option('--cost', required=True, help='Total paid, e.g. 89,90')
@with_appcontext
def restock(product_id, quantity, cost):
    """Record a restock purchase."""
    command = Command(RESTOCK, {"product_id": product_id, "quantity": quantity, "total_cost": cost})
    try:
        expense = execute_command(command)
    except (ValidationError, UnknownProductError) as e:
        raise click.ClickException(str(e))

    click.echo(
        f"PASS {expense.label}: +{expense.quantity}un | -{format_money(expense.total_cost_cents)}"
    )


def _parse_item(raw: str) -> tuple[int, int]:
    product_id, sep, quantity = raw.partition(":")
    if not sep:
        raise click.BadParameter(f"{raw!r} is not product_id:quantity", param_hint="--item")
    try:
        return coerce_int("product_id", product_id), require_positive_int("quantity", quantity)
    except ValidationError as e:
        raise click.BadParameter(str(e), param_hint="--item")


@event_group.command('sell')
@click.option('--item', 'items', multiple=True, required=True, help='product_id:quantity (repeatable)')
@with_appcontext
def sell(items):
    """Ring up a cart and commit it as one sale."""
    session = TerminalSession(current_app.config["REFRESH_INTERVAL_SECONDS"])
    session.refresh()

    for product_id, quantity in (_parse_item(raw) for raw in items):
        product = session.state.product(product_id)
        if product is None:
            raise click.ClickException(f"Product {product_id} not found")
        for _ in range(quantity):
            if not session.add(product_id):
                stock = session.state.stock(product_id)
                on_hand = stock.current_quantity if stock else 0
                raise click.ClickException(f"{product.name}: only {on_hand} in stock")

    for line in session.cart.lines(session.state):
        name = session.state.product(line.product_id).name
        line_total = price_item(session.state, line.product_id, line.quantity)
        click.echo(f"  {line.quantity:>3}x {name:<24} {format_money(line_total):>14}")

    result = session.commit()
    if result is None:
        raise click.ClickException("Nothing to sell")
    if not result.success:
        raise click.ClickException(result.message)

    click.echo(f"PASS {result.message}")


@event_group.command('dashboard')
@with_appcontext
def dashboard():
    """Print today's figures and the projection."""
    settings = EventSettings.from_config(current_app.config)
    state = state_service.load_state()
    p = projection_service.compute_projection(state, utcnow(), settings)

    click.echo("\n" + "=" * 60)
    click.echo(f"{'Gross':<28} {format_money(p.gross_cents):>30}")
    click.echo(f"{'Cost of goods':<28} {format_money(p.cost_cents):>30}")
    click.echo(f"{'Net':<28} {format_money(p.net_cents):>30}")
    click.echo(f"{'Expenses':<28} {format_money(p.expenses_cents):>30}")
    click.echo(f"{'Cash balance':<28} {format_money(p.cash_balance_cents):>30}")
    click.echo(f"{'Per partner':<28} {format_money(p.per_partner_share_cents):>30}")
    click.echo(f"{'Goal':<28} {p.goal_percent:>29.1f}%")
    click.echo("-" * 60)
    click.echo(f"{'Items sold':<28} {p.items_sold:>30}")
    click.echo(f"{'Per hour':<28} {format_money(p.rate_per_hour_cents):>30}")
    click.echo(f"{'Projected gross':<28} {format_money(p.projected_gross_cents):>30}")
    click.echo(f"{'Projected per partner':<28} {format_money(p.projected_per_partner_net_cents):>30}")
    if p.is_closed:
        click.echo("Event closed")
    else:
        click.echo(f"{p.remaining_hours:.1f}h remaining")
    click.echo("=" * 60 + "\n")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(event_group)
