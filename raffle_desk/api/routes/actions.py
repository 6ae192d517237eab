import json
from typing import Any, Dict, Optional
from urllib.parse import parse_qsl

from fastapi import APIRouter, Depends, Request
from fastapi.security import HTTPAuthorizationCredentials

from raffle_desk.api.error import ClientError, success_envelope, to_http_error
from raffle_desk.app.dispatcher import ActionDispatcher
from raffle_desk.depends import get_dispatcher, security
from raffle_desk.libs.result import Error

router = APIRouter()


async def _read_body(request: Request) -> Dict[str, Any]:
    raw = await request.body()
    if not raw.strip():
        return {}

    content_type = request.headers.get("content-type", "")
    if "application/x-www-form-urlencoded" in content_type:
        return dict(parse_qsl(raw.decode("utf-8"), keep_blank_values=True))

    try:
        body = json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError):
        raise ClientError(Error("INVALID_JSON", "Request body is not valid JSON"))
    if not isinstance(body, dict):
        raise ClientError(Error("INVALID_JSON", "Request body must be a JSON object"))
    return body


def _payload(value: Any) -> Optional[Dict[str, Any]]:
    if value is None:
        return None
    if hasattr(value, "to_payload"):
        return value.to_payload()
    return dict(value)


@router.api_route("/exec", methods=["GET", "POST"])
async def exec_action(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    dispatcher: ActionDispatcher = Depends(get_dispatcher),
):
    """
    Run one action.

    Parameters come from the query string, merged with a JSON object or
    form-encoded body on POST. ``action`` selects the handler; the session
    token comes from ``Authorization: Bearer`` or the ``token`` parameter.

    Success and failure both use the response envelope; the HTTP status
    matches the envelope's ``status``.
    """
    params: Dict[str, Any] = dict(request.query_params)
    if request.method == "POST":
        params.update(await _read_body(request))

    action = params.pop("action", None)
    token = params.pop("token", None)
    if credentials is not None:
        token = credentials.credentials

    result = await dispatcher.dispatch(action, params, token)
    if result.is_err():
        raise to_http_error(result.error)

    return success_envelope(_payload(result.value))
