"""
Slack Event Handlers
====================

Routes Slack events to the agent and the knowledge store.

Events and actions:
- message:                       answer for every user @mentioned in a message
- app_home_opened:               publish the App Home tab
- view_knowledge_bank (button):  open the setup form, prefilled
- knowledge_bank_modal (submit): save the user's knowledge record
- start_discussion (button):     open the discussion form
- /discussion (command):         open the discussion form
- discussion_modal (submit):     run a discussion in a new thread

Error Handling:
    - Acknowledge actions, commands and submissions first (3 second limit)
    - Failures are logged; users only ever see a fixed, friendly message
"""

import re
from typing import TYPE_CHECKING

from slack_bolt.async_app import AsyncAck, AsyncApp
from slack_sdk.web.async_client import AsyncWebClient

from robin.agent.discussion import (
    DEFAULT_ROUNDS,
    DiscussionSession,
    Participant,
    run_discussion,
)
from robin.slack import views
from robin.slack.users import (
    display_name_of,
    fetch_user,
    participant_from_user,
    resolve_participant,
    resolve_participants,
)
from robin.utils.logger import Logger

if TYPE_CHECKING:
    from robin.agent import Agent
    from robin.knowledge import KnowledgeStore

logger = Logger("Handlers")

MENTION_PATTERN = re.compile(r"<@([A-Z0-9]+)>")

ERROR_REPLY = "Sorry, I encountered an error processing your request."
NO_ANSWER_REPLY = "Sorry, I couldn't come up with an answer for that right now."
STARTING_UP_REPLY = "Sorry, I'm still starting up. Please try again in a moment."
NO_EMAIL_REPLY = (
    "I couldn't find an email address on your Slack profile, "
    "so your AI Assistant can't be saved yet."
)
NO_PARTICIPANTS_REPLY = (
    "None of the selected users have an email address on their Slack profile, "
    "so there is nobody to discuss with."
)

# Set during registration
_agent: "Agent | None" = None
_store: "KnowledgeStore | None" = None
_bot_user_id: str | None = None
_rounds: int = DEFAULT_ROUNDS


def register_handlers(
    app: AsyncApp,
    agent: "Agent",
    store: "KnowledgeStore",
    bot_user_id: str | None = None,
    rounds: int = DEFAULT_ROUNDS
) -> None:
    """
    Register all event handlers with the Slack app.

    Args:
        app: The Bolt app instance
        agent: Answers questions on behalf of users
        store: Knowledge records written by the setup form
        bot_user_id: The bot's own user ID, never answered for
        rounds: How many times each participant speaks in a discussion
    """
    global _agent, _store, _bot_user_id, _rounds
    _agent = agent
    _store = store
    _bot_user_id = bot_user_id
    _rounds = rounds

    app.event("message")(_handle_message)
    app.event("app_home_opened")(_handle_home_opened)

    app.action(views.SETUP_ACTION_ID)(_handle_open_setup)
    app.view(views.SETUP_MODAL_ID)(_handle_setup_submission)

    app.action(views.DISCUSSION_ACTION_ID)(_handle_open_discussion)
    app.command("/discussion")(_handle_open_discussion)
    app.view(views.DISCUSSION_MODAL_ID)(_handle_discussion_submission)

    logger.info("Registered Slack event handlers")


def extract_mentions(text: str, exclude: str | None = None) -> list[str]:
    """User IDs mentioned in text, in order, without duplicates or `exclude`."""
    user_ids = dict.fromkeys(MENTION_PATTERN.findall(text or ""))
    return [user_id for user_id in user_ids if user_id != exclude]


def strip_mentions(text: str) -> str:
    """Remove <@U123> mentions from text."""
    return MENTION_PATTERN.sub("", text or "").strip()


# ==============================================================================
# Messages
# ==============================================================================

async def _handle_message(event: dict, client: AsyncWebClient) -> None:
    """
    Answer on behalf of every user mentioned in a message.

    Each mentioned user is handled on their own: a failure for one does
    not stop the others. Answers go into the message's thread.
    """
    # Ignore bot messages (including our own) and edits/deletes
    if event.get("bot_id") or event.get("subtype"):
        return

    text = event.get("text") or ""
    user_ids = extract_mentions(text, exclude=_bot_user_id)
    logger.info(f"Processing message with {len(user_ids)} user mentions")

    if not user_ids:
        return

    channel_id = event.get("channel")
    thread_ts = event.get("thread_ts") or event.get("ts")

    if _agent is None:
        logger.error("Agent not initialized")
        await client.chat_postMessage(channel=channel_id, thread_ts=thread_ts, text=STARTING_UP_REPLY)
        return

    question = strip_mentions(text) or text

    for user_id in user_ids:
        logger.info(f"Processing mention for user ID: {user_id}")
        try:
            participant = await resolve_participant(client, user_id)
            if participant is None:
                continue

            answer = await _agent.answer_as_user(question, participant.email)

            await client.chat_postMessage(
                channel=channel_id,
                thread_ts=thread_ts,
                text=answer or NO_ANSWER_REPLY,
                parse="full",
                unfurl_links=True,
                unfurl_media=True,
            )
            logger.info("Response sent successfully")

        except Exception as e:
            logger.error(f"Error processing user {user_id}", e)
            await _reply_safely(client, channel_id, thread_ts, ERROR_REPLY)


async def _reply_safely(
    client: AsyncWebClient,
    channel: str,
    thread_ts: str | None,
    text: str
) -> None:
    """Post a fallback reply; a failure here is only logged."""
    try:
        await client.chat_postMessage(channel=channel, thread_ts=thread_ts, text=text)
    except Exception as e:
        logger.error("Failed to send error reply", e)


# ==============================================================================
# App Home and setup form
# ==============================================================================

async def _handle_home_opened(event: dict, client: AsyncWebClient) -> None:
    """Publish the App Home tab for the user who opened it."""
    try:
        await client.views_publish(user_id=event["user"], view=views.home_view())
        logger.debug(f"Published home view for {event['user']}")
    except Exception as e:
        logger.error("Error publishing home view", e)


async def _handle_open_setup(ack: AsyncAck, body: dict, client: AsyncWebClient) -> None:
    """Open the setup form, prefilled with the user's stored record."""
    await ack()

    try:
        existing = {}
        user = await fetch_user(client, body["user"]["id"])
        participant = participant_from_user(user)
        if participant is not None and _store is not None:
            existing = _store.load(participant.email)

        await client.views_open(
            trigger_id=body["trigger_id"],
            view=views.knowledge_modal(existing)
        )
    except Exception as e:
        logger.error("Error opening setup modal", e)


async def _handle_setup_submission(
    ack: AsyncAck,
    body: dict,
    view: dict,
    client: AsyncWebClient
) -> None:
    """Save the submitted setup form and confirm by DM."""
    await ack()

    user_id = body["user"]["id"]

    try:
        fields = views.read_knowledge_submission(view)
        user = await fetch_user(client, user_id)
        participant = participant_from_user(user)

        if participant is None or _store is None:
            logger.warning(f"Cannot save knowledge for {user_id}: no email on profile")
            await client.chat_postMessage(channel=user_id, text=NO_EMAIL_REPLY)
            return

        display_name = display_name_of(user)
        _store.save(participant.email, {
            **fields,
            "display_name": display_name,
            "slack_id": user_id,
        })

        await client.chat_postMessage(
            channel=user_id,
            text=(
                f"Thanks for updating your AI Assistant, {display_name}! "
                f"Your preferences have been saved."
            )
        )
    except Exception as e:
        logger.error(f"Error handling setup submission for {user_id}", e)


# ==============================================================================
# Discussions
# ==============================================================================

async def _handle_open_discussion(ack: AsyncAck, body: dict, client: AsyncWebClient) -> None:
    """Open the discussion form (home button or /discussion)."""
    await ack()

    try:
        await client.views_open(trigger_id=body["trigger_id"], view=views.discussion_modal())
    except Exception as e:
        logger.error("Error opening discussion modal", e)


async def _handle_discussion_submission(
    ack: AsyncAck,
    body: dict,
    view: dict,
    client: AsyncWebClient
) -> None:
    """
    Start a discussion between the selected users.

    The kickoff message is sent to the requesting user; every answer is
    posted in its thread under the speaker's display name.
    """
    await ack()

    try:
        user_ids, agenda = views.read_discussion_submission(view)
        requester = body["user"]["id"]
        logger.info(f"Discussion requested by {requester}", {"users": user_ids})

        mentions = ", ".join(f"<@{user_id}>" for user_id in user_ids)
        kickoff = await client.chat_postMessage(
            channel=requester,
            text=f"Discussion started with: {mentions}\nAgenda:\n{agenda}",
        )
        channel = kickoff["channel"]
        thread_ts = kickoff["ts"]

        participants = await resolve_participants(client, user_ids)
        if not participants:
            await client.chat_postMessage(
                channel=channel, thread_ts=thread_ts, text=NO_PARTICIPANTS_REPLY
            )
            return

        if _agent is None:
            logger.error("Agent not initialized")
            await client.chat_postMessage(
                channel=channel, thread_ts=thread_ts, text=STARTING_UP_REPLY
            )
            return

        session = DiscussionSession(
            participants=tuple(participants),
            agenda=agenda,
            channel=channel,
            thread_ts=thread_ts,
        )

        async def post(participant: Participant, answer: str) -> None:
            await client.chat_postMessage(
                channel=session.channel,
                thread_ts=session.thread_ts,
                text=answer,
                username=participant.display_name,
                icon_emoji=":robot_face:",
            )

        await run_discussion(session, _agent, post, rounds=_rounds)

    except Exception as e:
        logger.error("Error handling discussion submission", e)
