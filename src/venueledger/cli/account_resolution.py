"""CLI helpers for account resolution and money formatting."""

from __future__ import annotations

from decimal import Decimal

import click
from venueledger.cli.error_handling import handle_domain_error
from venueledger.domain.errors import DomainError
from venueledger.domain.ledger import LedgerService
from venueledger.utils.account_resolver import resolve_account


def resolve_account_or_exit(ctx: click.Context, ledger: LedgerService, account: str | int) -> int:
    """Resolve account ID or principal ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_account(ledger, account)
    except DomainError as exc:
        handle_domain_error(ctx, exc)


def format_money(amount: Decimal) -> str:
    """Format an amount with thousands separators."""
    return f"{amount:,.2f}"
