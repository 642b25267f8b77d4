import json
import click
from flask.cli import with_appcontext
from extensions import get_storefront
from app.services.catalog import CATALOG_KEY, decode_products
from app.services.errors import StorageError
from app.services.sample_catalog import sample_products


@click.command("seed-catalog")
@click.option("--file", "path", type=click.Path(exists=True, dir_okay=False), help="JSON list of products")
@with_appcontext
def seed_catalog(path):
    """Write the sample catalog, or the products in FILE, to storage."""
    if path:
        with open(path, encoding="utf-8") as fh:
            try:
                products = decode_products(json.load(fh))
            except ValueError as e:
                raise click.ClickException(f"Invalid catalog file: {e}")
    else:
        products = sample_products()
    storefront = get_storefront()
    try:
        storefront.storage.save(CATALOG_KEY, [p.model_dump(mode="json") for p in products])
    except StorageError as e:
        raise click.ClickException(str(e))
    storefront.catalog.replace(products)
    click.echo(f"Seeded {len(products)} products.")


@click.command("list-orders")
@click.option("--user", "user_id", default=None, help="Only orders for this user id")
@with_appcontext
def list_orders(user_id):
    """Print order history, most recent first."""
    orders = get_storefront().orders.history(user_id)
    if not orders:
        click.echo("No orders.")
        return
    for order in orders:
        click.echo(
            f"{order.id}  {order.order_date:%Y-%m-%d %H:%M}  {order.user_id:<12} "
            f"{order.status.value:<11} {order.final_amount}"
        )


def register_cli(app):
    app.cli.add_command(seed_catalog)
    app.cli.add_command(list_orders)
