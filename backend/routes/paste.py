"""Copy/paste routes — the whole public surface of the relay.

POST /air-copy            → store a form value, return its key
GET  /air-copy            → same, with query params (for curl-less shells)
GET  /air-paste/{key}     → fetch the value for a key
"""

import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.responses import PlainTextResponse

from errors import InvalidTTLError
from services.gateway import Gateway
from services.store import SetOptions

logger = logging.getLogger(__name__)

router = APIRouter()

WELCOME = """Welcome to AirPaste!
Tired of typing a bunch of text into a tunneled ssh session or a remote desktop where copy-paste doesn't work? AirPaste is here to help!

How to "air copy":
- POST /air-copy with form value "value" to copy the value and get the key, optionally you can set the time to live (ttl) in seconds with form value "ttl"
\tOR
- GET /air-copy with query param "value" to copy the value and get the key, optionally you can set the time to live (ttl) in seconds with query param "ttl"

Keys expire after 2 minutes by default. A negative ttl keeps the value until the server restarts.

How to "air paste":
- GET /air-paste/:key to paste the value with the key

Happy pasting! 🎉
"""


def get_gateway(request: Request) -> Gateway:
    return request.app.state.gateway


def _parse_ttl(raw: str | None) -> SetOptions:
    """Map the ttl form/query field to store options. Empty means the default TTL."""
    if raw is None or not raw.strip():
        return SetOptions()
    try:
        ttl = timedelta(seconds=int(raw))
    except (ValueError, OverflowError) as e:
        raise InvalidTTLError(raw) from e
    return SetOptions(ttl=ttl)


def _copy(gateway: Gateway, value: str, raw_ttl: str | None) -> PlainTextResponse:
    options = _parse_ttl(raw_ttl)
    key = gateway.issue_and_store(value, options)
    ttl = options.ttl if options.ttl is not None else "default"
    logger.info("Issued key %s (ttl=%s, %d chars)", key, ttl, len(value))
    return PlainTextResponse(key)


@router.get("/", response_class=PlainTextResponse)
def welcome() -> str:
    return WELCOME


@router.post("/air-copy", response_class=PlainTextResponse)
def air_copy_form(
    value: str = Form(""),
    ttl: str | None = Form(None),
    gateway: Gateway = Depends(get_gateway),
) -> PlainTextResponse:
    return _copy(gateway, value, ttl)


@router.get("/air-copy", response_class=PlainTextResponse)
def air_copy_query(
    value: str = Query(""),
    ttl: str | None = Query(None),
    gateway: Gateway = Depends(get_gateway),
) -> PlainTextResponse:
    return _copy(gateway, value, ttl)


@router.get("/air-paste/{key}", response_class=PlainTextResponse)
def air_paste(key: str, gateway: Gateway = Depends(get_gateway)) -> PlainTextResponse:
    value, found = gateway.retrieve(key)
    if not found:
        logger.info("Key %s not found or expired", key)
        return PlainTextResponse("Key not found", status_code=404)
    return PlainTextResponse(value)
