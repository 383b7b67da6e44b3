"""
Slack Bolt App
==============

Creates the Bolt application and its Socket Mode handler.

Socket Mode keeps a WebSocket open to Slack, so the bot needs no public
URL. It requires an app-level token (xapp-...) with connections:write.
"""

from slack_bolt.async_app import AsyncApp
from slack_bolt.adapter.socket_mode.async_handler import AsyncSocketModeHandler

from robin.utils.config import SlackConfig
from robin.utils.logger import Logger

logger = Logger("SlackApp")


def create_slack_app(config: SlackConfig) -> AsyncApp:
    """
    Create the Bolt app.

    Args:
        config: Slack credentials
    """
    app = AsyncApp(
        token=config.bot_token,
        signing_secret=config.signing_secret,
    )

    logger.info("Slack Bolt app created")
    return app


async def create_socket_handler(app: AsyncApp, config: SlackConfig) -> AsyncSocketModeHandler:
    """
    Create a Socket Mode handler for the app.

    Args:
        app: The Bolt app instance
        config: Slack credentials (app_token is used here)
    """
    handler = AsyncSocketModeHandler(app=app, app_token=config.app_token)

    logger.info("Socket Mode handler created")
    return handler


async def resolve_bot_user_id(app: AsyncApp, configured: str | None = None) -> str | None:
    """
    The bot's own user ID: the configured one, else from auth.test.

    Also logs which workspace the bot is connected to.
    """
    result = await app.client.auth_test()
    logger.info(f"Bot connected as: {result.get('user')} in team: {result.get('team')}")
    return configured or result.get("user_id")


async def log_bot_channels(app: AsyncApp) -> list[str]:
    """Log (and return) the names of channels visible to the bot."""
    response = await app.client.conversations_list(types="public_channel,private_channel")
    names = [channel["name"] for channel in response.get("channels", [])]
    logger.info(f"Bot is in channels: {', '.join(names) or '(none)'}")
    return names
