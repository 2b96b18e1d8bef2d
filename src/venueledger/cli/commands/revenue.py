"""Revenue commands."""

import click
from venueledger.cli.account_resolution import format_money, resolve_account_or_exit
from venueledger.cli.error_handling import handle_domain_error
from venueledger.domain.errors import DomainError
from venueledger.domain.period import utc_today
from venueledger.utils.amount_parser import parse_amount
from venueledger.utils.date_parser import parse_date

WINDOW_CHOICES = click.Choice(["7", "30", "90"])


@click.group()
def revenue_group():
    """Post and chart booking revenue."""
    pass


@revenue_group.command("credit")
@click.argument("account", metavar="ACCOUNT")
@click.argument("amount", metavar="AMOUNT")
@click.option("--day", help="Day the revenue belongs to (YYYY-MM-DD or 'today', 'yesterday')")
@click.pass_context
def credit(ctx, account: str, amount: str, day: str | None):
    """Credit settled booking revenue to an account.

    Both the balance and the available amount grow by AMOUNT.

    Examples:
        venueledger revenue credit owner-42 500000
        venueledger revenue credit 3 "250,000" --day yesterday
    """
    ledger = ctx.obj["services"].ledger
    account_id = resolve_account_or_exit(ctx, ledger, account)

    try:
        value = parse_amount(amount)
        today = utc_today()
        revenue_day = parse_date(day, today=today) if day else today
        acc = ledger.credit_revenue(account_id, revenue_day, value)
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)

    click.echo(f"Credited {format_money(value)} to account {acc.id} for {revenue_day.isoformat()}")
    click.echo(
        f"Balance: {format_money(acc.balance)} | Available: {format_money(acc.available_amount)}"
    )


@revenue_group.command("chart")
@click.argument("account", metavar="ACCOUNT")
@click.option("--window", type=WINDOW_CHOICES, default="7", show_default=True, help="Trailing days")
@click.option("--nonzero", is_flag=True, help="Only print days with revenue")
@click.pass_context
def chart(ctx, account: str, window: str, nonzero: bool):
    """Show daily revenue over a trailing window ending today."""
    services = ctx.obj["services"]
    account_id = resolve_account_or_exit(ctx, services.ledger, account)

    try:
        result = services.periods.aggregate(account_id, int(window))
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(
        f"\nRevenue {result.start_date.isoformat()} .. {result.end_date.isoformat()} "
        f"({result.window_days} days):"
    )
    click.echo("-" * 40)
    for point in result.series:
        if nonzero and point.amount == 0:
            continue
        click.echo(f"{point.day.isoformat()}  {format_money(point.amount):>20s}")
    click.echo("-" * 40)
    click.echo(f"{'Total':<10}  {format_money(result.total):>20s}")


def register_commands(cli):
    """Register revenue commands with main CLI."""
    cli.add_command(revenue_group, name="revenue")
