"""Withdrawal workflow commands."""

import click
from venueledger.cli.account_resolution import format_money, resolve_account_or_exit
from venueledger.cli.error_handling import handle_domain_error
from venueledger.domain.entities import (
    SortDirection,
    WithdrawalFilter,
    WithdrawalRequest,
    WithdrawalStatus,
)
from venueledger.domain.errors import DomainError
from venueledger.domain.withdrawal import SORT_FIELDS
from venueledger.utils.amount_parser import parse_amount

STATUS_CHOICES = click.Choice(["pending", "approved", "rejected"], case_sensitive=False)


def _format_request(req: WithdrawalRequest) -> str:
    resolved = f"{req.resolved_at:%Y-%m-%d %H:%M}" if req.resolved_at else "-"
    return (
        f"ID: {req.id:4d} | Account: {req.account_id:3d} | {req.status.value:8s} | "
        f"{format_money(req.amount):>16s} | {req.created_at:%Y-%m-%d %H:%M} | "
        f"{resolved:16s} | {req.description}"
    )


@click.group()
def withdrawal_group():
    """File and resolve withdrawal requests."""
    pass


@withdrawal_group.command("request")
@click.argument("account", metavar="ACCOUNT")
@click.option("--description", required=True, help="Reason shown to the admin")
@click.option("--amount", help="Amount to withdraw (defaults to the entire available amount)")
@click.pass_context
def request_withdrawal(ctx, account: str, description: str, amount: str | None):
    """File a withdrawal request for an account.

    The requested funds are reserved immediately, so they cannot be requested
    twice while the request is pending.

    Examples:
        venueledger withdrawal request owner-42 --description "Weekly payout"
        venueledger withdrawal request 3 --description "Partial" --amount 100000
    """
    services = ctx.obj["services"]
    account_id = resolve_account_or_exit(ctx, services.ledger, account)

    try:
        if amount is None:
            req = services.withdrawals.request_full_withdrawal(account_id, description)
        else:
            req = services.withdrawals.request_withdrawal(
                account_id, description, parse_amount(amount)
            )
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)

    acc = services.ledger.get_account(account_id)
    click.echo(f"Created withdrawal request {req.id} for {format_money(req.amount)} (PENDING)")
    click.echo(f"Available now: {format_money(acc.available_amount)}")


@withdrawal_group.command("list")
@click.option("--account", help="Account ID or principal ID")
@click.option("--status", type=STATUS_CHOICES, help="Only show requests with this status")
@click.option("--search", help="Match description or principal ID")
@click.option("--page", type=int, default=1, show_default=True)
@click.option("--page-size", type=int, default=20, show_default=True)
@click.option("--sort", type=click.Choice(SORT_FIELDS), default="created_at", show_default=True)
@click.option("--asc", is_flag=True, help="Sort ascending (default is descending)")
@click.pass_context
def list_withdrawals(
    ctx,
    account: str | None,
    status: str | None,
    search: str | None,
    page: int,
    page_size: int,
    sort: str,
    asc: bool,
):
    """List withdrawal requests, newest first."""
    services = ctx.obj["services"]
    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, services.ledger, account)

    filter = WithdrawalFilter(
        account_id=account_id,
        status=WithdrawalStatus(status.upper()) if status else None,
        search=search,
        page=page,
        page_size=page_size,
        sort_field=sort,
        sort_direction=SortDirection.ASC if asc else SortDirection.DESC,
    )
    try:
        result = services.withdrawals.list_withdrawals(filter)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not result.items:
        click.echo("No withdrawal requests found.")
        return

    click.echo(f"\nWithdrawal requests (page {result.page}/{result.total_pages}, {result.total_items} total):")
    click.echo("-" * 110)
    for req in result.items:
        click.echo(_format_request(req))


@withdrawal_group.command("show")
@click.argument("request_id", type=int)
@click.pass_context
def show_withdrawal(ctx, request_id: int):
    """Show one withdrawal request."""
    services = ctx.obj["services"]
    try:
        req = services.withdrawals.get_withdrawal(request_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Withdrawal request {req.id}")
    click.echo(f"  Account:     {req.account_id}")
    click.echo(f"  Description: {req.description}")
    click.echo(f"  Amount:      {format_money(req.amount)}")
    click.echo(f"  Status:      {req.status.value}")
    click.echo(f"  Created:     {req.created_at:%Y-%m-%d %H:%M}")
    if req.resolved_at is not None:
        click.echo(f"  Resolved:    {req.resolved_at:%Y-%m-%d %H:%M}")


def _resolve(ctx, request_id: int, status: WithdrawalStatus, yes: bool) -> None:
    services = ctx.obj["services"]
    verb = "approve" if status is WithdrawalStatus.APPROVED else "reject"

    try:
        req = services.withdrawals.get_withdrawal(request_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not yes and not click.confirm(
        f"Are you sure you want to {verb} withdrawal {req.id} for {format_money(req.amount)}?"
    ):
        click.echo("Cancelled.")
        return

    try:
        req = services.withdrawals.resolve(request_id, status)
    except DomainError as e:
        handle_domain_error(ctx, e)

    acc = services.ledger.get_account(req.account_id)
    click.echo(f"Withdrawal request {req.id} {req.status.value}")
    click.echo(
        f"Account {acc.id} balance: {format_money(acc.balance)} | "
        f"available: {format_money(acc.available_amount)}"
    )


@withdrawal_group.command("approve")
@click.argument("request_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def approve(ctx, request_id: int, yes: bool):
    """Approve a pending withdrawal; the funds leave the balance."""
    _resolve(ctx, request_id, WithdrawalStatus.APPROVED, yes)


@withdrawal_group.command("reject")
@click.argument("request_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def reject(ctx, request_id: int, yes: bool):
    """Reject a pending withdrawal; the funds become available again."""
    _resolve(ctx, request_id, WithdrawalStatus.REJECTED, yes)


@withdrawal_group.command("history")
@click.option("--window", type=click.Choice(["7", "30", "90"]), default="7", show_default=True)
@click.option("--account", help="Account ID or principal ID")
@click.option("--status", type=STATUS_CHOICES, help="Only count requests with this status")
@click.pass_context
def history(ctx, window: str, account: str | None, status: str | None):
    """Show withdrawal amounts per day over a trailing window."""
    services = ctx.obj["services"]
    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, services.ledger, account)

    try:
        result = services.periods.aggregate_withdrawals(
            int(window),
            account_id=account_id,
            status=WithdrawalStatus(status.upper()) if status else None,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nWithdrawals {result.start_date.isoformat()} .. {result.end_date.isoformat()}:")
    click.echo("-" * 40)
    for point in result.series:
        click.echo(f"{point.day.isoformat()}  {format_money(point.amount):>20s}")
    click.echo("-" * 40)
    click.echo(f"{'Total':<10}  {format_money(result.total):>20s}")


def register_commands(cli):
    """Register withdrawal commands with main CLI."""
    cli.add_command(withdrawal_group, name="withdrawal")
