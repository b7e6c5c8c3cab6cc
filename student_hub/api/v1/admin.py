# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Admin moderation endpoints.

This module provides the moderation dashboard API:
- GET /enrollments - Snapshot of all enrollments with counters
- GET /enrollments/export - CSV download
- GET /enrollments/{id} - One enrollment
- PATCH /enrollments/{id} - Change status
- DELETE /enrollments/{id} - Confirmed hard delete
- WebSocket /enrollments/stream - Live snapshots

Every endpoint requires a bearer token whose verified email is on the
admin allow-list. The WebSocket takes the token as a query parameter.

Client Usage (JavaScript):
    const ws = new WebSocket(
        `wss://api.example.com/api/admin/enrollments/stream?token=${jwt}`
    );
    ws.onmessage = (event) => {
        const msg = JSON.parse(event.data);
        if (msg.type === "snapshot") render(msg.enrollments, msg.stats);
    };
    ws.send(JSON.stringify({type: "search", term: "ali"}));
"""

import asyncio
import json
import logging
from typing import Any

from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Query,
    Response,
    WebSocket,
    WebSocketDisconnect,
    status,
)

from student_hub.api.dependencies import (
    get_identity_provider,
    get_moderation_service,
    require_admin,
)
from student_hub.api.v1.enrollments import persistence_http_error
from student_hub.domains.auth import IdentityProvider, Principal
from student_hub.domains.enrollment import (
    AuthorizationError,
    Enrollment,
    EnrollmentListResponse,
    EnrollmentNotFoundError,
    PersistenceError,
    StatusUpdateRequest,
    ValidationError,
)
from student_hub.domains.moderation import (
    EnrollmentSubscription,
    ModerationService,
    export_filename,
)
from student_hub.utils.datetime import utc_now

logger = logging.getLogger(__name__)

router = APIRouter()

# Application-defined close codes (4000-4999)
WS_CLOSE_UNAUTHENTICATED = 4401
WS_CLOSE_FORBIDDEN = 4403

# Delay before re-reading the collection after a failed snapshot
SNAPSHOT_RETRY_SECONDS = 5.0


async def _load(moderation: ModerationService) -> list[Enrollment]:
    try:
        return await moderation.list_enrollments()
    except PersistenceError as e:
        raise persistence_http_error(e)


def _not_found(error: EnrollmentNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=error.message)


# =========================================================================
# HTTP Endpoints
# =========================================================================


@router.get(
    "/enrollments",
    response_model=EnrollmentListResponse,
    response_model_by_alias=True,
    summary="List enrollments",
    description="All enrollments, newest first, optionally filtered by student name or course title.",
)
async def list_enrollments(
    q: str | None = Query(None, max_length=200, description="Search term"),
    principal: Principal = Depends(require_admin),
    moderation: ModerationService = Depends(get_moderation_service),
) -> EnrollmentListResponse:
    enrollments = await _load(moderation)
    visible = moderation.filter(enrollments, q)
    return EnrollmentListResponse(
        enrollments=visible,
        stats=moderation.summarize(enrollments),
        total=len(visible),
    )


@router.get(
    "/enrollments/export",
    summary="Export enrollments as CSV",
    response_class=Response,
    responses={200: {"content": {"text/csv": {}}}},
)
async def export_enrollments(
    q: str | None = Query(None, max_length=200, description="Search term"),
    principal: Principal = Depends(require_admin),
    moderation: ModerationService = Depends(get_moderation_service),
) -> Response:
    """Download the (filtered) enrollments as a CSV attachment."""
    enrollments = moderation.filter(await _load(moderation), q)
    filename = export_filename(utc_now().date())
    logger.info("Exported %d enrollments for %s", len(enrollments), principal.email)
    return Response(
        content=moderation.export(enrollments),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get(
    "/enrollments/{enrollment_id}",
    response_model=Enrollment,
    response_model_by_alias=True,
    summary="Get an enrollment",
)
async def get_enrollment(
    enrollment_id: str,
    principal: Principal = Depends(require_admin),
    moderation: ModerationService = Depends(get_moderation_service),
) -> Enrollment:
    try:
        return await moderation.get(enrollment_id)
    except EnrollmentNotFoundError as e:
        raise _not_found(e)
    except PersistenceError as e:
        raise persistence_http_error(e)


@router.patch(
    "/enrollments/{enrollment_id}",
    response_model=Enrollment,
    response_model_by_alias=True,
    summary="Change enrollment status",
)
async def update_enrollment_status(
    enrollment_id: str,
    body: StatusUpdateRequest,
    principal: Principal = Depends(require_admin),
    moderation: ModerationService = Depends(get_moderation_service),
) -> Enrollment:
    try:
        return await moderation.set_status(
            enrollment_id, body.status, principal.verified_email
        )
    except AuthorizationError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=e.message)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message
        )
    except EnrollmentNotFoundError as e:
        raise _not_found(e)
    except PersistenceError as e:
        raise persistence_http_error(e)


@router.delete(
    "/enrollments/{enrollment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete an enrollment",
    description="Permanently deletes an enrollment. Requires ``confirm=true``.",
)
async def delete_enrollment(
    enrollment_id: str,
    confirm: bool = Query(False, description="Confirm the permanent deletion"),
    principal: Principal = Depends(require_admin),
    moderation: ModerationService = Depends(get_moderation_service),
) -> Response:
    try:
        deleted = await moderation.remove(
            enrollment_id, principal.verified_email, confirmed=confirm
        )
    except AuthorizationError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=e.message)
    except EnrollmentNotFoundError as e:
        raise _not_found(e)
    except PersistenceError as e:
        raise persistence_http_error(e)

    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_428_PRECONDITION_REQUIRED,
            detail="Deletion must be confirmed with confirm=true",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =========================================================================
# Live Stream
# =========================================================================


class StreamConnection:
    """State of one admin WebSocket connection.

    Attributes:
        websocket: The WebSocket connection.
        principal: Authenticated admin.
        search_term: Current filter applied to snapshots.
        latest: Most recent unfiltered snapshot.
    """

    def __init__(
        self,
        websocket: WebSocket,
        principal: Principal,
        moderation: ModerationService,
    ) -> None:
        self.websocket = websocket
        self.principal = principal
        self.moderation = moderation
        self.search_term: str | None = None
        self.latest: list[Enrollment] | None = None
        self._send_lock = asyncio.Lock()

    async def send(self, message: dict[str, Any]) -> None:
        async with self._send_lock:
            await self.websocket.send_json(message)

    def snapshot_message(self) -> dict[str, Any]:
        enrollments = self.latest or []
        visible = self.moderation.filter(enrollments, self.search_term)
        return {
            "type": "snapshot",
            "enrollments": [
                e.model_dump(mode="json", by_alias=True) for e in visible
            ],
            "stats": self.moderation.summarize(enrollments).model_dump(),
            "total": len(visible),
            "search": self.search_term or "",
        }

    async def publish(self, enrollments: list[Enrollment]) -> None:
        self.latest = enrollments
        await self.send(self.snapshot_message())


def seconds_until_expiry(principal: Principal) -> float:
    """Seconds left before the principal's token expires (never negative)."""
    return max((principal.expires_at - utc_now()).total_seconds(), 0.0)


async def _authenticate(
    websocket: WebSocket,
    identity: IdentityProvider,
    moderation: ModerationService,
) -> Principal | None:
    principal = identity.resolve(websocket.query_params.get("token"))
    if principal is None:
        await websocket.send_json({
            "type": "error",
            "code": "AUTH_FAILED",
            "message": "Invalid or expired token",
        })
        await websocket.close(code=WS_CLOSE_UNAUTHENTICATED)
        return None

    if not moderation.authorize(principal.verified_email):
        logger.info("Admin stream denied for %s", principal.email or principal.uid)
        await websocket.send_json({
            "type": "error",
            "code": "UNAUTHORIZED",
            "message": "Admin access required",
        })
        await websocket.close(code=WS_CLOSE_FORBIDDEN)
        return None

    return principal


async def _snapshot_sender(
    connection: StreamConnection,
    subscription: EnrollmentSubscription,
) -> None:
    """Forward every snapshot of the subscription to the client.

    A failed read is reported to the client and retried on the next
    change, or after SNAPSHOT_RETRY_SECONDS if nothing changes.
    """
    loop = asyncio.get_running_loop()
    while not subscription.closed:
        try:
            async for enrollments in subscription:
                await connection.publish(enrollments)
        except PersistenceError as e:
            logger.error("Admin stream snapshot failed: %s", e.original_error)
            await connection.send({
                "type": "error",
                "code": "STORE_UNAVAILABLE",
                "message": e.user_message,
            })
            loop.call_later(SNAPSHOT_RETRY_SECONDS, subscription.refresh)


async def _receive_message(websocket: WebSocket) -> Any:
    """Read one client message as JSON.

    Raises:
        WebSocketDisconnect: If the client went away.
        ValueError: If the frame is binary or not valid JSON.
    """
    message = await websocket.receive()
    if message["type"] == "websocket.disconnect":
        raise WebSocketDisconnect(message.get("code", status.WS_1000_NORMAL_CLOSURE))
    text = message.get("text")
    if text is None:
        raise ValueError("Binary frames are not supported")
    return json.loads(text)


@router.websocket("/enrollments/stream")
async def enrollment_stream(
    websocket: WebSocket,
    identity: IdentityProvider = Depends(get_identity_provider),
    moderation: ModerationService = Depends(get_moderation_service),
) -> None:
    """Stream enrollment snapshots to an admin dashboard.

    Sends a snapshot on connect and after every change. Accepts:
    - {"type": "search", "term": "..."} to filter the snapshots
    - {"type": "ping"} answered with pong

    The connection closes when the token expires.
    """
    await websocket.accept()

    principal = await _authenticate(websocket, identity, moderation)
    if principal is None:
        return

    connection = StreamConnection(websocket, principal, moderation)
    subscription = moderation.subscribe()
    sender_task = asyncio.create_task(_snapshot_sender(connection, subscription))
    logger.info("Admin stream opened by %s", principal.email)

    try:
        while True:
            remaining = seconds_until_expiry(principal)
            if remaining <= 0:
                raise asyncio.TimeoutError
            data = await asyncio.wait_for(_receive_message(websocket), timeout=remaining)
            msg_type = data.get("type") if isinstance(data, dict) else None

            if msg_type == "search":
                connection.search_term = str(data.get("term") or "").strip() or None
                if connection.latest is not None:
                    await connection.send(connection.snapshot_message())

            elif msg_type == "ping":
                await connection.send({
                    "type": "pong",
                    "timestamp": utc_now().isoformat(),
                })

            else:
                await connection.send({
                    "type": "error",
                    "code": "UNKNOWN_MESSAGE_TYPE",
                    "message": f"Unknown message type: {msg_type}",
                })

    except asyncio.TimeoutError:
        logger.info("Admin stream session expired for %s", principal.email)
        await connection.send({
            "type": "session_expired",
            "message": "Your session has expired. Please sign in again.",
        })
        await websocket.close(code=WS_CLOSE_UNAUTHENTICATED)
    except WebSocketDisconnect:
        logger.debug("Admin stream disconnected: %s", principal.email)
    except ValueError as e:
        logger.warning("Admin stream received malformed message: %s", e)
        await websocket.close(code=status.WS_1003_UNSUPPORTED_DATA)
    finally:
        subscription.cancel()
        sender_task.cancel()
        await asyncio.gather(sender_task, return_exceptions=True)
