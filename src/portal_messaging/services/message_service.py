from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable

from portal_messaging.application.context import MessagingContext
from portal_messaging.application.dto.message import FileSendResult, FileUpload
from portal_messaging.application.exceptions import (
    AttachmentStoreError,
    NotFoundError,
    RejectedError,
    ValidationError,
)
from portal_messaging.application.locks import conversation_key
from portal_messaging.application.policies.permissions import assert_conversation_access
from portal_messaging.application.uow import UnitOfWork
from portal_messaging.domain.entities.message import Message
from portal_messaging.domain.entities.user import User
from portal_messaging.domain.value_objects.enums import MessageType

logger = logging.getLogger(__name__)


async def send_message(
    conversation_id: uuid.UUID | None,
    sender_id: str,
    content: str,
    uow: UnitOfWork,
    ctx: MessagingContext,
) -> Message:
    """Append a text message and notify every other participant.

    The sender's own copy is stored already read.
    """
    if conversation_id is None:
        raise ValidationError("conversation_id is required")
    if not content or not content.strip():
        raise ValidationError("Message content is required")

    sender = await _get_sender(sender_id, ctx)
    msg = Message(
        id=ctx.ids.new_id(),
        conversation_id=conversation_id,
        sender_id=sender.id,
        content=content,
        timestamp=ctx.clock.now(),
        read=True,
        type=MessageType.TEXT,
    )
    return await _append(msg, sender, uow, ctx)


async def send_file(
    conversation_id: uuid.UUID | None,
    sender_id: str,
    file: FileUpload,
    uow: UnitOfWork,
    ctx: MessagingContext,
) -> Message:
    """Store an attachment, then append a file message referencing it.

    Nothing is appended unless the blob store succeeded.
    """
    if conversation_id is None:
        raise ValidationError("conversation_id is required")
    if not file.name:
        raise ValidationError("File name is required")

    ctx.attachments.validate(file)
    sender = await _get_sender(sender_id, ctx)
    conversation = await uow.conversations.get_by_id(conversation_id)
    assert_conversation_access(conversation, sender.id)

    file_url = await ctx.attachments.store(file)

    msg = Message(
        id=ctx.ids.new_id(),
        conversation_id=conversation_id,
        sender_id=sender.id,
        content=file.name,
        timestamp=ctx.clock.now(),
        read=True,
        type=MessageType.FILE,
        file_name=file.name,
        file_size=file.size,
        file_type=file.content_type,
        file_url=file_url,
    )
    return await _append(msg, sender, uow, ctx)


async def send_files(
    conversation_id: uuid.UUID | None,
    sender_id: str,
    files: Iterable[FileUpload],
    uow: UnitOfWork,
    ctx: MessagingContext,
) -> list[FileSendResult]:
    """Send several attachments; a rejected or invalid file does not stop the rest."""
    results: list[FileSendResult] = []
    for file in files:
        try:
            msg = await send_file(conversation_id, sender_id, file, uow, ctx)
        except (RejectedError, AttachmentStoreError, ValidationError) as exc:
            logger.info("File %s not sent: %s", file.name, exc.detail)
            results.append(FileSendResult(file_name=file.name, error=exc))
            continue
        results.append(FileSendResult(file_name=file.name, message=msg))
    return results


async def list_messages(
    conversation_id: uuid.UUID,
    uow: UnitOfWork,
    *,
    viewer_id: str | None = None,
) -> list[Message]:
    conversation = await uow.conversations.get_by_id(conversation_id)
    if viewer_id is None:
        if conversation is None:
            raise NotFoundError("Conversation not found")
    else:
        assert_conversation_access(conversation, viewer_id)
    return await uow.messages.list_by_conversation(conversation_id)


async def delete_message(
    message_id: uuid.UUID,
    uow: UnitOfWork,
    *,
    requester_id: str | None = None,
) -> None:
    """Hard-delete a message.

    The conversation's ``last_message`` is left as it was, even when it points
    at the deleted message.
    """
    msg = await uow.messages.get_by_id(message_id)
    if msg is None:
        raise NotFoundError("Message not found")
    if requester_id is not None:
        conversation = await uow.conversations.get_by_id(msg.conversation_id)
        assert_conversation_access(conversation, requester_id)

    await uow.messages_w.delete(message_id)
    await uow.commit()
    logger.info("Message %s deleted from conversation %s", message_id, msg.conversation_id)


async def open_attachment(reference: str, ctx: MessagingContext) -> bytes:
    return await ctx.attachments.open(reference)


async def _get_sender(sender_id: str, ctx: MessagingContext) -> User:
    sender = await ctx.users.get_user(sender_id)
    if sender is None:
        raise NotFoundError("User not found")
    return sender


async def _append(
    msg: Message,
    sender: User,
    uow: UnitOfWork,
    ctx: MessagingContext,
) -> Message:
    async with ctx.locks.hold(conversation_key(msg.conversation_id)):
        conversation = await uow.conversations.get_by_id(msg.conversation_id)
        conversation = assert_conversation_access(conversation, sender.id)

        msg = await uow.messages_w.append(msg)
        await uow.conversations_w.record_last_message(conversation.id, msg)
        recipients = [p for p in conversation.participants if p != sender.id]
        await uow.conversations_w.increment_unread(conversation.id, recipients)
        await uow.commit()

    logger.debug(
        "Message %s appended to %s by %s", msg.id, conversation.id, sender.id,
    )
    ctx.dispatcher.dispatch(msg, conversation, sender)
    return msg
