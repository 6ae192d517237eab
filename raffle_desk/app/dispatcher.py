"""
Action Dispatcher

Routes an action name plus flat parameters to a use case. Public actions
run directly; protected actions pass the access guard and the rate limiter
first. Every outcome, including unexpected exceptions, comes back as a
Result so a single bad request never takes the process down.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

from pydantic import ValidationError

from config import ApplicationConfig
from raffle_desk.api.utils.jwt import identity_from_token
from raffle_desk.app.repositories.errors import VersionConflictError
from raffle_desk.app.services.mailer import IMailer
from raffle_desk.app.services.rate_limiter import RateLimiter
from raffle_desk.app.services.unit_of_work import UnitOfWork
from raffle_desk.app.use_cases.access import AuthorizeUseCase, AuthorizedUser
from raffle_desk.app.use_cases.auth import (
    ForgotPasswordUseCase,
    LoginUseCase,
    RegisterCommand,
    RegisterUseCase,
    ResetPasswordUseCase,
    VerifyOtpUseCase,
)
from raffle_desk.app.use_cases.staff import (
    ApproveStaffUseCase,
    ExtendValidityUseCase,
    GetProfileUseCase,
    ListStaffUseCase,
    StaffPatch,
    UpdateStaffUseCase,
)
from raffle_desk.app.use_cases.tickets import (
    AddTicketsCommand,
    AddTicketsUseCase,
    GetTicketUseCase,
    ListTicketsUseCase,
    LogSaleCommand,
    LogSaleUseCase,
    SearchTicketsUseCase,
    TicketStatsUseCase,
    UpdateTicketCommand,
    UpdateTicketUseCase,
)
from raffle_desk.domain.base import normalize_email
from raffle_desk.domain.entities import RateClass, StaffRole, TicketStatus
from raffle_desk.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)

Params = Mapping[str, Any]


class InvalidParameter(ValueError):
    pass


def require_param(params: Params, name: str) -> str:
    value = params.get(name)
    if value is None or str(value).strip() == "":
        raise InvalidParameter(f"Missing required parameter: {name}")
    return str(value)


def int_param(params: Params, name: str, default: Optional[int] = None) -> int:
    value = params.get(name)
    if value is None or str(value).strip() == "":
        if default is None:
            raise InvalidParameter(f"Missing required parameter: {name}")
        return default
    try:
        return int(str(value).strip())
    except ValueError:
        raise InvalidParameter(f"Parameter {name} must be an integer")


@dataclass(frozen=True)
class ActionContext:
    params: Params
    caller: Optional[AuthorizedUser] = None


Handler = Callable[["ActionDispatcher", ActionContext], Awaitable[Result[Any]]]


@dataclass(frozen=True)
class ActionRoute:
    handler: Handler
    public: bool = False
    rate_class: RateClass = RateClass.read
    required_role: Optional[StaffRole] = None


# ============================================================================
# Public handlers
# ============================================================================


async def _ping(dispatcher: "ActionDispatcher", ctx: ActionContext) -> Result[Any]:
    return Return.ok({"message": "pong"})


async def _register(dispatcher: "ActionDispatcher", ctx: ActionContext) -> Result[Any]:
    command = RegisterCommand(
        email=str(ctx.params.get("email") or ""),
        name=str(ctx.params.get("name") or ""),
        password=str(ctx.params.get("password") or ""),
        confirm_password=str(ctx.params.get("confirmPassword") or ""),
    )
    return await RegisterUseCase(dispatcher.uow, dispatcher.mailer).execute(command)


async def _login(dispatcher: "ActionDispatcher", ctx: ActionContext) -> Result[Any]:
    return await LoginUseCase(dispatcher.uow).execute(
        require_param(ctx.params, "email"), str(ctx.params.get("password") or "")
    )


async def _forgot_password(dispatcher: "ActionDispatcher", ctx: ActionContext) -> Result[Any]:
    return await ForgotPasswordUseCase(dispatcher.uow, dispatcher.mailer).execute(
        require_param(ctx.params, "email")
    )


async def _verify_otp(dispatcher: "ActionDispatcher", ctx: ActionContext) -> Result[Any]:
    return await VerifyOtpUseCase(dispatcher.uow).execute(
        require_param(ctx.params, "email"), require_param(ctx.params, "otp")
    )


async def _reset_password(dispatcher: "ActionDispatcher", ctx: ActionContext) -> Result[Any]:
    return await ResetPasswordUseCase(dispatcher.uow).execute(
        require_param(ctx.params, "email"),
        require_param(ctx.params, "resetToken"),
        str(ctx.params.get("newPassword") or ""),
    )


# ============================================================================
# Protected handlers
# ============================================================================


async def _me(dispatcher: "ActionDispatcher", ctx: ActionContext) -> Result[Any]:
    return await GetProfileUseCase(dispatcher.uow).execute(ctx.caller)


async def _list_staff(dispatcher: "ActionDispatcher", ctx: ActionContext) -> Result[Any]:
    return await ListStaffUseCase(dispatcher.uow).execute(ctx.caller)


async def _approve_staff(dispatcher: "ActionDispatcher", ctx: ActionContext) -> Result[Any]:
    return await ApproveStaffUseCase(dispatcher.uow).execute(
        ctx.caller,
        require_param(ctx.params, "targetEmail"),
        require_param(ctx.params, "decision"),
    )


async def _extend_validity(dispatcher: "ActionDispatcher", ctx: ActionContext) -> Result[Any]:
    return await ExtendValidityUseCase(dispatcher.uow).execute(
        ctx.caller,
        require_param(ctx.params, "targetEmail"),
        int_param(ctx.params, "additionalDays"),
    )


async def _update_staff(dispatcher: "ActionDispatcher", ctx: ActionContext) -> Result[Any]:
    target_email = require_param(ctx.params, "targetEmail")
    patch = StaffPatch.model_validate(dict(ctx.params))
    return await UpdateStaffUseCase(dispatcher.uow).execute(ctx.caller, target_email, patch)


async def _list_tickets(dispatcher: "ActionDispatcher", ctx: ActionContext) -> Result[Any]:
    raw_status = ctx.params.get("status")
    try:
        status = TicketStatus(raw_status) if raw_status else None
    except ValueError:
        raise InvalidParameter(f"Unknown ticket status: {raw_status}")
    return await ListTicketsUseCase(dispatcher.uow).execute(
        status=status,
        offset=int_param(ctx.params, "offset", 0),
        limit=int_param(ctx.params, "limit", 100),
    )


async def _get_ticket(dispatcher: "ActionDispatcher", ctx: ActionContext) -> Result[Any]:
    return await GetTicketUseCase(dispatcher.uow).execute(int_param(ctx.params, "number"))


async def _ticket_stats(dispatcher: "ActionDispatcher", ctx: ActionContext) -> Result[Any]:
    return await TicketStatsUseCase(dispatcher.uow).execute()


async def _search_tickets(dispatcher: "ActionDispatcher", ctx: ActionContext) -> Result[Any]:
    return await SearchTicketsUseCase(dispatcher.uow).execute(
        require_param(ctx.params, "query"), int_param(ctx.params, "limit", 20)
    )


async def _log_sale(dispatcher: "ActionDispatcher", ctx: ActionContext) -> Result[Any]:
    command = LogSaleCommand.model_validate(dict(ctx.params))
    return await LogSaleUseCase(dispatcher.uow).execute(ctx.caller, command)


async def _update_ticket(dispatcher: "ActionDispatcher", ctx: ActionContext) -> Result[Any]:
    command = UpdateTicketCommand.model_validate(dict(ctx.params))
    return await UpdateTicketUseCase(dispatcher.uow).execute(ctx.caller, command)


async def _add_tickets(dispatcher: "ActionDispatcher", ctx: ActionContext) -> Result[Any]:
    command = AddTicketsCommand.model_validate(dict(ctx.params))
    return await AddTicketsUseCase(dispatcher.uow).execute(ctx.caller, command)


ROUTES: Dict[str, ActionRoute] = {
    # Public
    "ping": ActionRoute(_ping, public=True),
    "login": ActionRoute(_login, public=True, rate_class=RateClass.auth),
    "register": ActionRoute(_register, public=True),
    "forgot_password": ActionRoute(_forgot_password, public=True),
    "verify_otp": ActionRoute(_verify_otp, public=True),
    "reset_password": ActionRoute(_reset_password, public=True),
    # Reads
    "me": ActionRoute(_me),
    "list_tickets": ActionRoute(_list_tickets),
    "get_ticket": ActionRoute(_get_ticket),
    "ticket_stats": ActionRoute(_ticket_stats),
    "list_staff": ActionRoute(_list_staff, required_role=StaffRole.admin),
    # Search
    "search_tickets": ActionRoute(_search_tickets, rate_class=RateClass.search),
    # Writes
    "log_sale": ActionRoute(_log_sale, rate_class=RateClass.write, required_role=StaffRole.staff),
    "update_ticket": ActionRoute(
        _update_ticket, rate_class=RateClass.write, required_role=StaffRole.staff
    ),
    "add_tickets": ActionRoute(
        _add_tickets, rate_class=RateClass.write, required_role=StaffRole.admin
    ),
    "approve_staff": ActionRoute(
        _approve_staff, rate_class=RateClass.write, required_role=StaffRole.admin
    ),
    "extend_validity": ActionRoute(
        _extend_validity, rate_class=RateClass.write, required_role=StaffRole.admin
    ),
    "update_staff": ActionRoute(
        _update_staff, rate_class=RateClass.write, required_role=StaffRole.admin
    ),
}


def classify_action(action: str) -> RateClass:
    """Rate class of an action; anything unmapped counts as a read."""
    route = ROUTES.get(action)
    return route.rate_class if route else RateClass.read


class ActionDispatcher:
    """
    Single entry point for every action.

    Flow for protected actions:
    1. Resolve identity from the session token
    2. AuthorizeUseCase with the route's required role
    3. RateLimiter.check(identity, route class) -> RATE_LIMIT when denied
    4. Handler, bounded by REQUEST_TIMEOUT_SECONDS
    """

    def __init__(
        self,
        uow: UnitOfWork,
        rate_limiter: RateLimiter,
        mailer: Optional[IMailer] = None,
        routes: Optional[Dict[str, ActionRoute]] = None,
        timeout_seconds: Optional[float] = None,
    ):
        self.uow = uow
        self.rate_limiter = rate_limiter
        self.mailer = mailer
        self.routes = routes if routes is not None else ROUTES
        self.timeout_seconds = timeout_seconds or ApplicationConfig.REQUEST_TIMEOUT_SECONDS

    async def dispatch(
        self, action: Optional[str], params: Params, token: Optional[str] = None
    ) -> Result[Any]:
        action = str(action or "").strip()
        route = self.routes.get(action)
        if route is None:
            return Return.err(Error("INVALID_ACTION", f"Unknown action: {action or '(none)'}"))

        try:
            return await asyncio.wait_for(
                self._run(action, route, params, token), timeout=self.timeout_seconds
            )
        except (InvalidParameter, ValidationError) as exc:
            return Return.err(Error("INVALID_INPUT", _describe_invalid(exc)))
        except VersionConflictError as exc:
            logger.warning(f"Version conflict on {action}: {exc}")
            return Return.err(
                Error("VERSION_CONFLICT", "Record was modified concurrently, retry the request")
            )
        except asyncio.TimeoutError:
            logger.error(f"Action {action} timed out after {self.timeout_seconds}s")
            return Return.err(
                Error("SERVER_ERROR", "Request timed out", {"detail": f"{action} timed out"})
            )
        except Exception as exc:
            # Exception text stays in the log only
            logger.exception(f"Unhandled error in action {action}")
            return Return.err(
                Error(
                    "SERVER_ERROR",
                    "Internal server error",
                    {"detail": f"{action} failed ({type(exc).__name__})"},
                )
            )

    async def _run(
        self, action: str, route: ActionRoute, params: Params, token: Optional[str]
    ) -> Result[Any]:
        if route.public:
            if route.rate_class == RateClass.auth:
                identity = normalize_email(str(params.get("email") or "")) or "anonymous"
                limited = await self._check_rate(identity, route.rate_class)
                if limited is not None:
                    return limited
            return await route.handler(self, ActionContext(params=params))

        identity = identity_from_token(token)
        authorized = await AuthorizeUseCase(self.uow).execute(identity, route.required_role)
        if authorized.is_err():
            return Return.err(authorized.error)

        caller = authorized.value
        limited = await self._check_rate(caller.email, route.rate_class)
        if limited is not None:
            return limited

        return await route.handler(self, ActionContext(params=params, caller=caller))

    async def _check_rate(self, identity: str, rate_class: RateClass) -> Optional[Result[Any]]:
        decision = await self.rate_limiter.check(identity, rate_class)
        if decision.allowed:
            return None
        logger.warning(f"Rate limit hit: {identity} on {rate_class.value}")
        return Return.err(
            Error(
                "RATE_LIMIT",
                f"Too many {rate_class.value} requests, retry in {decision.retry_after}s",
                {"retryAfter": decision.retry_after},
            )
        )


def _describe_invalid(exc: Exception) -> str:
    if isinstance(exc, ValidationError):
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        return f"Invalid parameter {location}: {first.get('msg')}" if location else first.get("msg")
    return str(exc)
