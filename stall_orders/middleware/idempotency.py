"""
Stall Orders — Idempotency Key Middleware

Order submission is retried by flaky clients. With an Idempotency-Key
header the key is claimed atomically in Redis (SET NX) before the handler
runs, then overwritten with the final response:
  - Key free           → claim it, run the handler, store a non-5xx response
  - Key stored         → replay the stored response (no order created)
  - Key still in flight → 409, the first request has not finished yet
  - Key reused with a different request body → 422

A 5xx or an unhandled error releases the claim so the client may retry.
"""
import hashlib
import json
import logging

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from stall_orders.core.config import get_settings
from stall_orders.core.redis_client import get_redis

settings = get_settings()
logger = logging.getLogger(__name__)

IDEMPOTENCY_PREFIX = "idempotent:"
IDEMPOTENCY_METHODS = {"POST"}
IDEMPOTENCY_PATHS = {"/orders", "/orders/"}
IN_FLIGHT = "in_flight"


def request_fingerprint(method: str, path: str, body: bytes) -> str:
    """Identifies the request a key was first used for."""
    digest = hashlib.sha256()
    digest.update(f"{method} {path.rstrip('/')}\n".encode())
    digest.update(body)
    return digest.hexdigest()


class IdempotencyMiddleware(BaseHTTPMiddleware):
    """Runs a keyed POST /orders at most once and replays its response."""

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.method not in IDEMPOTENCY_METHODS:
            return await call_next(request)

        if request.url.path not in IDEMPOTENCY_PATHS:
            return await call_next(request)

        idem_key = request.headers.get("Idempotency-Key")
        if not idem_key:
            return await call_next(request)

        fingerprint = request_fingerprint(request.method, request.url.path, await request.body())
        redis = get_redis()
        cache_key = f"{IDEMPOTENCY_PREFIX}{idem_key}"

        claimed = await redis.set(
            cache_key,
            json.dumps({"state": IN_FLIGHT, "fingerprint": fingerprint}),
            nx=True,
            ex=settings.IDEMPOTENCY_IN_FLIGHT_TTL_SECONDS,
        )
        if not claimed:
            return await self._existing(redis, cache_key, idem_key, fingerprint)

        try:
            response = await call_next(request)
        except Exception:
            await redis.delete(cache_key)
            raise

        body_bytes = b""
        async for chunk in response.body_iterator:
            body_bytes += chunk

        try:
            body = json.loads(body_bytes)
        except ValueError:
            body = body_bytes.decode("utf-8", errors="replace")

        # 5xx is retry-safe, so it is never pinned to the key
        if response.status_code < 500:
            await redis.setex(
                cache_key,
                settings.IDEMPOTENCY_KEY_TTL_SECONDS,
                json.dumps({
                    "fingerprint": fingerprint,
                    "body": body,
                    "status_code": response.status_code,
                }),
            )
        else:
            await redis.delete(cache_key)

        return Response(
            content=body_bytes,
            status_code=response.status_code,
            media_type=response.media_type,
            headers=dict(response.headers),
        )

    async def _existing(self, redis, cache_key: str, idem_key: str, fingerprint: str) -> Response:
        cached = await redis.get(cache_key)
        if cached is None:
            # released by a failed first attempt between our SET and GET
            return JSONResponse(
                status_code=409,
                content={"error": "A request with this Idempotency-Key just failed; retry it."},
            )

        data = json.loads(cached)
        if data.get("fingerprint") != fingerprint:
            logger.warning("Idempotency key %s reused with a different request", idem_key)
            return JSONResponse(
                status_code=422,
                content={"error": "Idempotency-Key was already used for a different request."},
            )

        if data.get("state") == IN_FLIGHT:
            return JSONResponse(
                status_code=409,
                content={"error": "A request with this Idempotency-Key is still in progress."},
            )

        logger.info("Replaying stored response for idempotency key %s", idem_key)
        return JSONResponse(
            content=data["body"],
            status_code=data["status_code"],
            headers={"X-Idempotency-Replay": "true"},
        )
