"""Period aggregation domain service."""

from collections import defaultdict
from datetime import date, datetime, time, timedelta, UTC
from decimal import Decimal
from typing import Iterable, Optional

from venueledger.database.base import Database
from venueledger.domain.entities import DailyAmount, PeriodSeries, WithdrawalStatus
from venueledger.domain.errors import (
    NotFoundError,
    ValidationError,
    account_not_found,
    invalid_window,
)

WINDOW_DAYS = (7, 30, 90)


def utc_today() -> date:
    """Current calendar day in UTC, the day boundary used for all bucketing."""
    return datetime.now(UTC).date()


def trailing_window(window_days: int, today: Optional[date] = None) -> tuple[date, date]:
    """Get the first and last day of a trailing window ending today (inclusive).

    Raises:
        ValidationError: If window_days is not 7, 30 or 90
    """
    if window_days not in WINDOW_DAYS:
        raise ValidationError(invalid_window(window_days, WINDOW_DAYS))
    end = today or utc_today()
    return end - timedelta(days=window_days - 1), end


def zero_filled_series(
    start: date, end: date, amounts_by_day: dict[date, Decimal]
) -> tuple[DailyAmount, ...]:
    """Emit one DailyAmount per day from start to end, 0 where nothing was posted."""
    series = []
    day = start
    while day <= end:
        series.append(DailyAmount(day=day, amount=amounts_by_day.get(day, Decimal("0"))))
        day += timedelta(days=1)
    return tuple(series)


class PeriodAggregator:
    """Service producing chart-ready daily series over trailing windows."""

    def __init__(self, db: Database):
        """Initialize period aggregator.

        Args:
            db: Database instance
        """
        self.db = db

    def _build(
        self,
        window_days: int,
        start: date,
        end: date,
        amounts: Iterable[tuple[date, Decimal]],
    ) -> PeriodSeries:
        amounts_by_day: dict[date, Decimal] = defaultdict(lambda: Decimal("0"))
        for day, amount in amounts:
            amounts_by_day[day] += amount

        series = zero_filled_series(start, end, amounts_by_day)
        return PeriodSeries(
            window_days=window_days,
            start_date=start,
            end_date=end,
            series=series,
            total=sum((point.amount for point in series), Decimal("0")),
        )

    def aggregate(
        self, account_id: int, window_days: int, today: Optional[date] = None
    ) -> PeriodSeries:
        """Aggregate an account's daily revenue over a trailing window.

        Days without revenue are emitted with amount 0, so the series always has
        exactly window_days points in ascending date order.

        Args:
            account_id: Account ID
            window_days: 7, 30 or 90
            today: Last day of the window (defaults to the current date)

        Returns:
            PeriodSeries whose total is the sum of the series

        Raises:
            ValidationError: If window_days is not supported
            NotFoundError: If account doesn't exist
        """
        start, end = trailing_window(window_days, today)
        if self.db.get_account(account_id) is None:
            raise NotFoundError(account_not_found(account_id))

        entries = self.db.list_revenue_entries(account_id, start_date=start, end_date=end)
        return self._build(
            window_days, start, end, ((e.day, e.amount_for_day) for e in entries)
        )

    def aggregate_withdrawals(
        self,
        window_days: int,
        account_id: Optional[int] = None,
        status: Optional[WithdrawalStatus] = None,
        today: Optional[date] = None,
    ) -> PeriodSeries:
        """Aggregate withdrawal amounts by the day they were filed.

        Backs the admin withdrawal history chart; same zero-fill rules as
        aggregate().

        Raises:
            ValidationError: If window_days is not supported
            NotFoundError: If account_id is given and doesn't exist
        """
        start, end = trailing_window(window_days, today)
        if account_id is not None and self.db.get_account(account_id) is None:
            raise NotFoundError(account_not_found(account_id))

        requests = self.db.list_withdrawals(
            account_id=account_id,
            status=status,
            created_from=datetime.combine(start, time.min),
            created_before=datetime.combine(end + timedelta(days=1), time.min),
            sort_field="created_at",
            descending=False,
        )
        return self._build(
            window_days, start, end, ((r.created_at.date(), r.amount) for r in requests)
        )
