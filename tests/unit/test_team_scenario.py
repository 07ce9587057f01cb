from __future__ import annotations

import pytest

from portal_messaging.services import conversation_service, message_service
from tests.conftest import make_ctx


@pytest.mark.asyncio
async def test_team_gkm_kickoff(uow, store, clock):
    ctx = make_ctx(store, clock=clock)
    team = await conversation_service.create_group_conversation(
        "1", "Team GKM", "General team discussions", ["2", "4"], uow, ctx,
    )
    direct = await conversation_service.create_direct_conversation("1", "3", uow, ctx)
    await message_service.send_message(direct.id, "3", "Morning!", uow, ctx)
    clock.advance(minutes=2)

    await message_service.send_message(team.id, "1", "kickoff at 10am", uow, ctx)
    await ctx.dispatcher.drain()

    mine = [n for n in store.notifications.values() if "kickoff at 10am" in n.message]
    assert sorted(n.user_id for n in mine) == ["2", "4"]
    assert all(n.title == "New Message" for n in mine)

    inbox = await conversation_service.list_conversations("1", uow, ctx)
    assert inbox[0].title == "Team GKM"
    assert inbox[0].last_message.content == "kickoff at 10am"
    assert inbox[0].unread_count == 0
    assert inbox[1].conversation.id == direct.id
    assert inbox[1].unread_count == 1
