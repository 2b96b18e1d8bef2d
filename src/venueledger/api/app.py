"""FastAPI application exposing the ledger, withdrawal workflow and summaries."""

import logging
from typing import Optional

from fastapi import Depends, FastAPI, Query, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from venueledger.api.schemas import (
    AccountPage,
    AccountResponse,
    AdminSummaryResponse,
    CreateAccountRequest,
    CreateWithdrawalRequest,
    CreditRevenueRequest,
    OwnerSummaryResponse,
    PeriodSeriesResponse,
    ResolveWithdrawalRequest,
    WithdrawalPage,
    WithdrawalResponse,
)
from venueledger.config import Settings
from venueledger.database.factories import create_database
from venueledger.domain.entities import AccountRole, WithdrawalFilter, WithdrawalStatus
from venueledger.domain.period import utc_today
from venueledger.domain.errors import (
    AlreadyResolvedError,
    ConflictError,
    DomainError,
    InsufficientFundsError,
    LockTimeoutError,
    NotFoundError,
    ValidationError,
)
from venueledger.services import Services

logger = logging.getLogger(__name__)

ERROR_STATUS_CODES = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (InsufficientFundsError, status.HTTP_409_CONFLICT),
    (AlreadyResolvedError, status.HTTP_409_CONFLICT),
    (ConflictError, status.HTTP_409_CONFLICT),
    (LockTimeoutError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
)


def status_code_for(error: DomainError) -> int:
    for error_type, code in ERROR_STATUS_CODES:
        if isinstance(error, error_type):
            return code
    return status.HTTP_400_BAD_REQUEST


def get_services(request: Request) -> Services:
    return request.app.state.services


def _parse_status(value: Optional[str]) -> Optional[WithdrawalStatus]:
    if value is None:
        return None
    try:
        return WithdrawalStatus(value.strip().upper())
    except ValueError:
        raise ValidationError(f"Unknown withdrawal status '{value}'")


def _parse_role(value: Optional[str]) -> Optional[AccountRole]:
    if value is None:
        return None
    try:
        return AccountRole(value.strip().upper())
    except ValueError:
        raise ValidationError(f"Unknown account role '{value}'")


def create_app(services: Optional[Services] = None, settings: Optional[Settings] = None) -> FastAPI:
    """Build the API application.

    Args:
        services: Pre-wired services (tests and the CLI pass their own)
        settings: Settings used to open the database when services is None

    Returns:
        FastAPI application
    """
    if services is None:
        settings = settings or Settings.from_env()
        db = create_database(settings)
        db.connect()
        db.initialize_schema()
        services = Services.build(db, settings)

    app = FastAPI(
        title="Venueledger API",
        description="Cash flow and withdrawal settlement for venue owners",
        version="0.1.0",
    )
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(DomainError)
    async def handle_domain_error(request: Request, exc: DomainError) -> JSONResponse:
        code = status_code_for(exc)
        logger.warning(f"{request.method} {request.url.path} -> {code}: {exc}")
        return JSONResponse(status_code=code, content={"detail": str(exc)})

    @app.get("/health", tags=["System"])
    def health_check():
        return {"status": "healthy", "service": "venueledger"}

    # Accounts

    @app.post(
        "/accounts",
        response_model=AccountResponse,
        status_code=status.HTTP_201_CREATED,
        tags=["Accounts"],
    )
    def create_account(
        body: CreateAccountRequest, services: Services = Depends(get_services)
    ) -> AccountResponse:
        account_id = services.ledger.create_account(body.owner_principal_id, body.role)
        return AccountResponse.model_validate(services.ledger.get_account(account_id))

    @app.get("/accounts", response_model=AccountPage, tags=["Accounts"])
    def list_accounts(
        role: Optional[str] = None,
        page: int = 1,
        size: int = 20,
        services: Services = Depends(get_services),
    ) -> AccountPage:
        result = services.summaries.list_accounts_page(
            role=_parse_role(role), page=page, page_size=size
        )
        return AccountPage.model_validate(result)

    @app.get("/accounts/{account_id}", response_model=AccountResponse, tags=["Accounts"])
    def get_account(account_id: int, services: Services = Depends(get_services)) -> AccountResponse:
        return AccountResponse.model_validate(services.ledger.get_account(account_id))

    @app.post("/accounts/{account_id}/revenue", response_model=AccountResponse, tags=["Accounts"])
    def credit_revenue(
        account_id: int,
        body: CreditRevenueRequest,
        services: Services = Depends(get_services),
    ) -> AccountResponse:
        account = services.ledger.credit_revenue(
            account_id, body.day or utc_today(), body.amount
        )
        return AccountResponse.model_validate(account)

    @app.get(
        "/accounts/{account_id}/revenue", response_model=PeriodSeriesResponse, tags=["Accounts"]
    )
    def revenue_chart(
        account_id: int, window: int = 7, services: Services = Depends(get_services)
    ) -> PeriodSeriesResponse:
        return PeriodSeriesResponse.model_validate(services.periods.aggregate(account_id, window))

    @app.get(
        "/accounts/{account_id}/summary", response_model=OwnerSummaryResponse, tags=["Accounts"]
    )
    def owner_summary(
        account_id: int, services: Services = Depends(get_services)
    ) -> OwnerSummaryResponse:
        return OwnerSummaryResponse.model_validate(
            services.summaries.get_owner_summary(account_id)
        )

    @app.post(
        "/accounts/{account_id}/withdrawals",
        response_model=WithdrawalResponse,
        status_code=status.HTTP_201_CREATED,
        tags=["Withdrawals"],
    )
    def request_withdrawal(
        account_id: int,
        body: CreateWithdrawalRequest,
        services: Services = Depends(get_services),
    ) -> WithdrawalResponse:
        if body.amount is None:
            request = services.withdrawals.request_full_withdrawal(account_id, body.description)
        else:
            request = services.withdrawals.request_withdrawal(
                account_id, body.description, body.amount
            )
        return WithdrawalResponse.model_validate(request)

    # Withdrawals

    @app.get("/withdrawals", response_model=WithdrawalPage, tags=["Withdrawals"])
    def list_withdrawals(
        account_id: Optional[int] = Query(default=None, alias="accountId"),
        status: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        size: int = 20,
        sort: str = "created_at",
        direction: str = "desc",
        services: Services = Depends(get_services),
    ) -> WithdrawalPage:
        filter = WithdrawalFilter(
            account_id=account_id,
            status=_parse_status(status),
            search=search,
            page=page,
            page_size=size,
            sort_field=sort,
            sort_direction=direction.lower(),
        )
        return WithdrawalPage.model_validate(services.withdrawals.list_withdrawals(filter))

    # Registered before /withdrawals/{request_id} so "history" is not taken for an ID
    @app.get("/withdrawals/history", response_model=PeriodSeriesResponse, tags=["Withdrawals"])
    def withdrawal_history(
        window: int = 7,
        account_id: Optional[int] = Query(default=None, alias="accountId"),
        status: Optional[str] = None,
        services: Services = Depends(get_services),
    ) -> PeriodSeriesResponse:
        result = services.periods.aggregate_withdrawals(
            window, account_id=account_id, status=_parse_status(status)
        )
        return PeriodSeriesResponse.model_validate(result)

    @app.get("/withdrawals/{request_id}", response_model=WithdrawalResponse, tags=["Withdrawals"])
    def get_withdrawal(
        request_id: int, services: Services = Depends(get_services)
    ) -> WithdrawalResponse:
        return WithdrawalResponse.model_validate(services.withdrawals.get_withdrawal(request_id))

    @app.patch("/withdrawals/{request_id}", response_model=WithdrawalResponse, tags=["Withdrawals"])
    def resolve_withdrawal(
        request_id: int,
        body: ResolveWithdrawalRequest,
        services: Services = Depends(get_services),
    ) -> WithdrawalResponse:
        return WithdrawalResponse.model_validate(
            services.withdrawals.resolve(request_id, body.status)
        )

    # Admin

    @app.get("/admin/summary", response_model=AdminSummaryResponse, tags=["Admin"])
    def admin_summary(services: Services = Depends(get_services)) -> AdminSummaryResponse:
        return AdminSummaryResponse.model_validate(services.summaries.get_admin_summary())

    return app
