"""Discord client: feeds guild/DM messages into the dispatcher"""

import asyncio
from typing import Optional

import discord

from .auth import AuthenticationError, Authenticator
from .dispatch import InboundMessage, KeyDispatcher
from .logs import log_error, log_success


def origin_id(message: discord.Message) -> int:
    """Guild id, or the channel id for DMs"""
    if message.guild is not None:
        return message.guild.id
    return message.channel.id


def to_inbound(message: discord.Message) -> InboundMessage:
    return InboundMessage(
        origin_id=origin_id(message),
        content=message.content or "",
        attachment_urls=[attachment.url for attachment in message.attachments],
    )


class SniperClient(discord.Client):
    def __init__(self, *, dispatcher: KeyDispatcher, authenticator: Authenticator,
                 intents: Optional[discord.Intents] = None):
        if intents is None:
            intents = discord.Intents.default()
            intents.message_content = True
        super().__init__(intents=intents)
        self.dispatcher = dispatcher
        self.authenticator = authenticator
        self.exit_code = 0
        self._auth_task: Optional[asyncio.Task] = None
        self._close_task: Optional[asyncio.Future] = None

    async def setup_hook(self):
        self._auth_task = asyncio.create_task(self.authenticator.run_forever(), name="krampus-login")
        self._auth_task.add_done_callback(self._on_auth_stopped)

    def _on_auth_stopped(self, task: asyncio.Task):
        if task.cancelled():
            return
        error = task.exception()
        if error is None:
            return
        if not isinstance(error, AuthenticationError):
            log_error(f"Login loop crashed: {error!r}")
        self.exit_code = 1
        self._close_task = asyncio.ensure_future(self.close())

    async def on_ready(self):
        log_success(f"Connected as {self.user}")

    async def on_message(self, message: discord.Message):
        self.dispatcher.handle(to_inbound(message))

    async def close(self):
        if self._auth_task is not None and not self._auth_task.done():
            self._auth_task.cancel()
        await super().close()
