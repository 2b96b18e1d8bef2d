"""Account management commands."""

import click
from venueledger.cli.account_resolution import format_money, resolve_account_or_exit
from venueledger.cli.error_handling import handle_domain_error
from venueledger.domain.entities import AccountRole
from venueledger.domain.errors import DomainError

ROLE_CHOICES = click.Choice(["owner", "admin"], case_sensitive=False)


@click.group()
def account_group():
    """Manage cash-flow accounts."""
    pass


@account_group.command("create")
@click.argument("principal", metavar="PRINCIPAL_ID")
@click.option("--role", type=ROLE_CHOICES, default="owner", show_default=True, help="Account role")
@click.pass_context
def create_account(ctx, principal: str, role: str):
    """Create the cash-flow account of a principal.

    Each principal (venue owner or admin user) has exactly one account.

    Examples:
        venueledger account create owner-42
        venueledger account create admin-1 --role admin
    """
    ledger = ctx.obj["services"].ledger

    try:
        account_id = ledger.create_account(principal, AccountRole(role.upper()))
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created {role.lower()} account for '{principal}' (ID: {account_id})")


@account_group.command("list")
@click.option("--role", type=ROLE_CHOICES, help="Only show accounts with this role")
@click.pass_context
def list_accounts(ctx, role: str | None):
    """List all accounts with their balances."""
    ledger = ctx.obj["services"].ledger

    accounts = ledger.list_accounts(role=AccountRole(role.upper()) if role else None)
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 80)
    for acc in accounts:
        click.echo(
            f"ID: {acc.id:3d} | {acc.owner_principal_id:20s} | {acc.role.value:5s} | "
            f"Balance: {format_money(acc.balance):>16s} | Available: {format_money(acc.available_amount):>16s}"
        )


@account_group.command("show")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def show_account(ctx, account: str):
    """Show one account.

    ACCOUNT can be an account ID or the owning principal ID.
    """
    ledger = ctx.obj["services"].ledger
    account_id = resolve_account_or_exit(ctx, ledger, account)
    acc = ledger.get_account(account_id)

    click.echo(f"Account {acc.id} ({acc.role.value})")
    click.echo(f"  Principal: {acc.owner_principal_id}")
    click.echo(f"  Balance:   {format_money(acc.balance)}")
    click.echo(f"  Available: {format_money(acc.available_amount)}")
    click.echo(f"  Reserved:  {format_money(acc.reserved_amount)}")
    click.echo(f"  Created:   {acc.created_at:%Y-%m-%d %H:%M}")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
