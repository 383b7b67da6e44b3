"""
Robin - Main Entry Point
========================

Wires everything together and starts the bot:
1. Load configuration
2. Create the knowledge store and register the get-knowledge tool
3. Pick the knowledge client (in-process or stdio server)
4. Create the generation client and the agent
5. Create the Slack app and register handlers
6. Start Socket Mode

Run with:
    python -m robin.main

Or after installing:
    robin
"""

import asyncio
import signal
import sys

from robin.utils.config import get_config
from robin.utils.logger import Logger

main_logger = Logger("Main")


async def main():
    """Main async entry point."""
    main_logger.info("Starting Robin...")

    try:
        main_logger.info("Loading configuration...")
        config = get_config()

        main_logger.info("Setting up knowledge tools...")
        from robin.knowledge import KnowledgeStore
        from robin.tools import tool_registry
        from robin.tools.client import create_knowledge_client
        from robin.tools.knowledge_tools import register_knowledge_tools

        store = KnowledgeStore(config.knowledge.data_dir)
        register_knowledge_tools(tool_registry, store)
        knowledge_client = create_knowledge_client(config.knowledge, tool_registry)

        main_logger.info("Creating agent...")
        from robin.agent import Agent, create_generator
        agent = Agent(knowledge_client, create_generator(config.generation))

        main_logger.info("Creating Slack app...")
        from robin.slack.app import (
            create_slack_app,
            create_socket_handler,
            log_bot_channels,
            resolve_bot_user_id,
        )
        app = create_slack_app(config.slack)
        bot_user_id = await resolve_bot_user_id(app, config.slack.bot_user_id)
        main_logger.info(f"Bot User ID: {bot_user_id}")

        try:
            await log_bot_channels(app)
        except Exception as e:
            main_logger.warning(f"Could not list channels: {e}")

        main_logger.info("Registering event handlers...")
        from robin.slack.handlers import register_handlers
        register_handlers(
            app,
            agent,
            store,
            bot_user_id=bot_user_id,
            rounds=config.discussion.rounds,
        )

        main_logger.info("Starting Socket Mode connection...")
        handler = await create_socket_handler(app, config.slack)

        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(
                sig,
                lambda: asyncio.create_task(_shutdown(handler))
            )

        main_logger.info("Robin is running! Press Ctrl+C to stop.")
        await handler.start_async()

    except KeyboardInterrupt:
        main_logger.info("Received interrupt signal")
    except Exception as e:
        main_logger.error("Failed to start bot", e)
        sys.exit(1)


async def _shutdown(handler):
    """Close the Socket Mode connection."""
    main_logger.info("Shutting down...")
    await handler.close_async()
    main_logger.info("Shutdown complete")


def run():
    """Synchronous entry point used by the `robin` command."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
