"""Direct messaging router: conversations, threads and the realtime thread socket."""

import json
from typing import Annotated
import anyio
from anyio import to_thread
from fastapi import (
    APIRouter,
    Depends,
    Query,
    WebSocket,
    WebSocketDisconnect,
    status,
)
from sqlmodel import Session

from app.database.database import get_session
from app.core.dependencies import (
    get_current_user,
    get_message_broker,
    get_websocket_user,
)
from app.exceptions import AppException, ValidationError
from app.models.message import MessageCreate, MessagePublic, UnreadCount
from app.models.user import User, UserSummary
from app.services import messaging as messaging_service
from app.services.opportunity import to_user_summary
from app.services.realtime import MessageBroker, Subscription, ThreadFeed
from app.utils.logger import logger
from app.utils.validation import ensure_id

router = APIRouter(prefix="/messages", tags=["messages"])


@router.get("/conversations", response_model=list[UserSummary])
def list_conversations(
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[User, Depends(get_current_user)],
    search: str | None = Query(
        default=None, description="Case-insensitive match on name or organization"
    ),
) -> list[UserSummary]:
    """
    Everyone the caller has exchanged at least one message with, each listed once.
    """
    users = messaging_service.list_conversations(
        session, ensure_id(current_user.id_user, "User")
    )
    return [
        summary
        for summary in map(
            to_user_summary, messaging_service.filter_conversations(users, search)
        )
        if summary is not None
    ]


@router.get("/unread-count", response_model=UnreadCount)
def read_unread_count(
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> UnreadCount:
    return UnreadCount(
        unread_count=messaging_service.get_unread_count(
            session, ensure_id(current_user.id_user, "User")
        )
    )


@router.get("/{other_user_id}", response_model=list[MessagePublic])
def read_thread(
    other_user_id: int,
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> list[MessagePublic]:
    """
    Open the conversation with another user, oldest message first.

    Every unread message the other user sent to the caller is marked read.
    """
    return _open_thread(
        session, ensure_id(current_user.id_user, "User"), other_user_id
    )


@router.post("/", response_model=MessagePublic, status_code=status.HTTP_201_CREATED)
def send_message(
    message_in: MessageCreate,
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[User, Depends(get_current_user)],
    broker: Annotated[MessageBroker, Depends(get_message_broker)],
) -> MessagePublic:
    """
    Send a direct message and push it to the receiver's open threads.

    Raises:
        `404 NotFoundError`: If the receiver doesn't exist.
        `422 EmptyMessageError`: If the content is blank.
        `422 ValidationError`: If the caller messages themselves.
        `503 BackendUnavailableError`: If the message could not be stored.
    """
    message = _store_message(
        session,
        ensure_id(current_user.id_user, "User"),
        message_in.receiver_id,
        message_in.content,
    )
    broker.publish(message)
    return message


@router.websocket("/ws/{other_user_id}")
async def thread_socket(
    websocket: WebSocket,
    other_user_id: int,
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[User, Depends(get_websocket_user)],
    broker: Annotated[MessageBroker, Depends(get_message_broker)],
):
    """
    Live view of one conversation.

    Frames sent to the client:
    - `{"type": "thread", "messages": [...]}` once, right after connecting
    - `{"type": "message", "message": {...}}` for every new message in the thread
    - `{"type": "error", "detail": "..."}` when a sent message is refused

    Frames accepted from the client: `{"content": "..."}`.
    """
    user_id = ensure_id(current_user.id_user, "User")
    feed = ThreadFeed(user_id, other_user_id)

    # Subscribe before loading so nothing sent in between is missed
    async with broker.subscribe(user_id) as subscription:
        await websocket.accept()
        feed.load(
            await to_thread.run_sync(_open_thread, session, user_id, other_user_id)
        )
        await websocket.send_json(
            {
                "type": "thread",
                "messages": [m.model_dump(mode="json") for m in feed.messages],
            }
        )

        async with anyio.create_task_group() as tg:
            tg.start_soon(_forward_pushes, websocket, subscription, feed)
            try:
                await _receive_outgoing(websocket, session, broker, feed)
            except WebSocketDisconnect:
                logger.debug(f"Thread socket closed by user {user_id}")
            finally:
                tg.cancel_scope.cancel()


def _open_thread(
    session: Session, user_id: int, other_user_id: int
) -> list[MessagePublic]:
    messages = [
        messaging_service.to_message_public(m)
        for m in messaging_service.load_thread(session, user_id, other_user_id)
    ]
    session.commit()
    return messages


def _store_message(
    session: Session, sender_id: int, receiver_id: int, content: str
) -> MessagePublic:
    message = messaging_service.send_message(session, sender_id, receiver_id, content)
    public = messaging_service.to_message_public(message)
    session.commit()
    return public


async def _forward_pushes(
    websocket: WebSocket, subscription: Subscription, feed: ThreadFeed
) -> None:
    async for message in subscription:
        if feed.receive(message):
            await websocket.send_json(
                {"type": "message", "message": message.model_dump(mode="json")}
            )


def _frame_content(raw: str) -> str:
    """Extract the text of a `{"content": "..."}` frame sent by the client."""
    try:
        payload = json.loads(raw)
    except ValueError:
        raise ValidationError("Message frames must be valid JSON", field="content")
    if not isinstance(payload, dict):
        return ""
    content = payload.get("content", "")
    if not isinstance(content, str):
        raise ValidationError("Message content must be text", field="content")
    return content


async def _receive_outgoing(
    websocket: WebSocket, session: Session, broker: MessageBroker, feed: ThreadFeed
) -> None:
    while True:
        raw = await websocket.receive_text()
        try:
            message = await to_thread.run_sync(
                _store_message,
                session,
                feed.user_id,
                feed.other_user_id,
                _frame_content(raw),
            )
        except AppException as e:
            await websocket.send_json({"type": "error", "detail": e.message})
            continue
        broker.publish(message)
        if feed.append(message):
            await websocket.send_json(
                {"type": "message", "message": message.model_dump(mode="json")}
            )
