"""Summary commands."""

import click
from venueledger.cli.account_resolution import format_money, resolve_account_or_exit
from venueledger.cli.error_handling import handle_domain_error
from venueledger.domain.entities import WithdrawalStatus
from venueledger.domain.errors import DomainError


@click.group()
def summary_group():
    """Owner dashboard and admin overview."""
    pass


@summary_group.command("owner")
@click.argument("account", metavar="ACCOUNT")
@click.option("--recent", type=int, default=5, show_default=True, help="Recent withdrawals to show")
@click.pass_context
def owner_summary(ctx, account: str, recent: int):
    """Show the owner dashboard for an account."""
    services = ctx.obj["services"]
    account_id = resolve_account_or_exit(ctx, services.ledger, account)

    try:
        view = services.summaries.get_owner_summary(account_id, recent_limit=recent)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nAccount {view.account_id}")
    click.echo("-" * 50)
    click.echo(f"{'Balance':<25} {format_money(view.balance):>24}")
    click.echo(f"{'Available':<25} {format_money(view.available_amount):>24}")
    click.echo(f"{'Pending withdrawals':<25} {format_money(view.pending_amount):>24}")
    click.echo(f"{'Total withdrawn':<25} {format_money(view.total_withdrawn):>24}")
    click.echo(f"{'Average withdrawal':<25} {format_money(view.average_withdrawal):>24}")
    click.echo(f"{'Requested this month':<25} {format_money(view.this_month_total):>24}")

    if view.recent_withdrawals:
        click.echo("\nRecent withdrawals:")
        for req in view.recent_withdrawals:
            click.echo(
                f"  {req.created_at:%Y-%m-%d}  {format_money(req.amount):>16}  {req.status.value}"
            )


@summary_group.command("admin")
@click.pass_context
def admin_summary(ctx):
    """Show the admin overview of all accounts and withdrawals."""
    view = ctx.obj["services"].summaries.get_admin_summary()

    click.echo("\nAccounts:")
    click.echo("-" * 50)
    click.echo(f"{'Venue owners':<25} {view.totals.owner_count:>24}")
    click.echo(f"{'Total balance':<25} {format_money(view.totals.total_balance):>24}")
    click.echo(f"{'Total available':<25} {format_money(view.totals.total_available):>24}")
    if view.admin_account is not None:
        click.echo(f"{'Admin balance':<25} {format_money(view.admin_account.balance):>24}")

    click.echo("\nWithdrawals:")
    click.echo("-" * 50)
    for status in WithdrawalStatus:
        breakdown = view.withdrawal_status_breakdown[status]
        click.echo(f"{status.value:<12} {breakdown.count:>6}  {format_money(breakdown.amount):>29}")
    click.echo(
        f"{'TOTAL':<12} {view.total_withdrawals:>6}  {format_money(view.total_withdrawal_amount):>29}"
    )


def register_commands(cli):
    """Register summary commands with main CLI."""
    cli.add_command(summary_group, name="summary")
