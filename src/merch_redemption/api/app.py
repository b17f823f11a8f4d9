"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from merch_redemption.api.action_requests import (
    ActionPostRequest,
    NextActionPostRequest,
    RedeemRequest,
)
from merch_redemption.app_logging import configure_logging
from merch_redemption.config import parse_csv
from merch_redemption.containers import AppContainer
from merch_redemption.domain.actions import ActionError
from merch_redemption.errors import ClientInputError, ResolutionError
from merch_redemption.services.redemption import (
    COMPLETED_PATH,
    ELIGIBILITY_PATH,
    FORM_PATH,
    QUOTE_PATH,
    REDEEM_PATH,
)

X_ACTION_VERSION_HEADER = "X-Action-Version"
X_BLOCKCHAIN_IDS_HEADER = "X-Blockchain-Ids"

_ALLOWED_HEADERS = [
    "Content-Type",
    "Content-Encoding",
    "Authorization",
    "Accept-Encoding",
    "X-Accept-Action-Version",
    "X-Accept-Blockchain-Ids",
]


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)
    action_version = container.settings.action_version
    blockchain_ids = ",".join(parse_csv(container.settings.blockchain_ids))

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.middleware("http")
    async def action_supportability(  # type: ignore[no-untyped-def]
        request: Request, call_next
    ):
        response = await call_next(request)
        response.headers[X_ACTION_VERSION_HEADER] = action_version
        response.headers[X_BLOCKCHAIN_IDS_HEADER] = blockchain_ids
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=_ALLOWED_HEADERS,
        expose_headers=[X_ACTION_VERSION_HEADER, X_BLOCKCHAIN_IDS_HEADER],
    )

    @app.exception_handler(ClientInputError)
    async def client_input_error(
        request: Request, exc: ClientInputError
    ) -> JSONResponse:
        return _action_error(exc.message)

    @app.exception_handler(ResolutionError)
    async def resolution_error(request: Request, exc: ResolutionError) -> JSONResponse:
        logger.warning(
            "Chain lookup failed for %s", request.url.path, exc_info=exc.__cause__
        )
        return _action_error(exc.message)

    @app.exception_handler(RequestValidationError)
    async def invalid_request(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.error("Invalid request body for %s: %s", request.url.path, exc.errors())
        return _action_error("Invalid request")

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    router = APIRouter(prefix=container.config.route_prefix)

    @router.get(QUOTE_PATH)
    async def quote(request: Request) -> dict[str, object]:
        """Entry metadata with a fresh session reference."""
        state_container: AppContainer = request.app.state.container
        return state_container.redemption_service.quote().to_payload()

    @router.post(ELIGIBILITY_PATH)
    async def check_redeem_eligibility(
        body: ActionPostRequest,
        request: Request,
        session_reference: str | None = Query(default=None, alias="sessionReference"),
    ) -> dict[str, object]:
        """Propose a reference-only transaction once the owner is eligible."""
        state_container: AppContainer = request.app.state.container
        proposal = await state_container.redemption_service.check_eligibility(
            body.account, session_reference
        )
        return proposal.to_payload()

    @router.post(FORM_PATH)
    async def fill_shipment_form(
        body: ActionPostRequest,
        request: Request,
        session_reference: str | None = Query(default=None, alias="sessionReference"),
    ) -> dict[str, object]:
        """Return the shipping form for the owner's redeemable shirts."""
        state_container: AppContainer = request.app.state.container
        menu = await state_container.redemption_service.fill_shipment_form(
            body.account, session_reference
        )
        return menu.to_payload()

    @router.post(REDEEM_PATH)
    async def redeem(
        body: RedeemRequest,
        request: Request,
        session_reference: str | None = Query(default=None, alias="sessionReference"),
    ) -> dict[str, object]:
        """Record the shipment and propose the burn-and-pay transaction."""
        state_container: AppContainer = request.app.state.container
        proposal = await state_container.redemption_service.redeem(
            body.account,
            session_reference,
            body.data.to_form() if body.data else None,
        )
        return proposal.to_payload()

    @router.post(COMPLETED_PATH)
    async def completed(
        body: NextActionPostRequest,
        request: Request,
        session_reference: str | None = Query(default=None, alias="sessionReference"),
    ) -> dict[str, object]:
        """Acknowledge the broadcast and record its signature in the background."""
        state_container: AppContainer = request.app.state.container
        action = state_container.redemption_service.completed(
            session_reference, body.signature
        )
        return action.to_payload()

    app.include_router(router)
    return app


def _action_error(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content=ActionError(message=message).to_payload(),
    )
