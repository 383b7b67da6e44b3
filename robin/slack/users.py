"""
Slack user lookups.

Knowledge records are keyed by email, while Slack events only carry user
IDs, so every flow starts by resolving the ID through users.info.
"""

from slack_sdk.web.async_client import AsyncWebClient

from robin.agent.discussion import Participant
from robin.utils.logger import Logger

logger = Logger("SlackUsers")


def display_name_of(user: dict) -> str:
    """Best human-facing name: display name, then real name, then handle."""
    profile = user.get("profile") or {}
    return (
        profile.get("display_name")
        or user.get("real_name")
        or profile.get("real_name")
        or user.get("name")
        or user.get("id", "")
    )


def participant_from_user(user: dict) -> Participant | None:
    """
    Build a Participant from a users.info "user" object.

    Returns None when the profile carries no email.
    """
    profile = user.get("profile") or {}
    email = profile.get("email")
    if not email:
        return None

    return Participant(
        user_id=user.get("id", ""),
        email=email,
        name=user.get("real_name") or user.get("name") or email,
        display_name=display_name_of(user),
    )


async def fetch_user(client: AsyncWebClient, user_id: str) -> dict:
    """Fetch the users.info "user" object for a Slack user ID."""
    response = await client.users_info(user=user_id, include_locale=True)
    return response["user"]


async def resolve_participant(client: AsyncWebClient, user_id: str) -> Participant | None:
    """
    Resolve a Slack user ID to a Participant.

    Returns None (with a warning) if the user has no email on their profile.
    """
    user = await fetch_user(client, user_id)
    participant = participant_from_user(user)

    if participant is None:
        logger.warning(f"No email found for user {user.get('name', user_id)}")
    else:
        logger.info(f"Processed user: {participant.name} ({participant.email})")

    return participant


async def resolve_participants(
    client: AsyncWebClient,
    user_ids: list[str]
) -> list[Participant]:
    """
    Resolve several users, keeping the given order.

    Users without an email, or whose lookup fails, are left out.
    """
    participants = []
    for user_id in user_ids:
        try:
            participant = await resolve_participant(client, user_id)
        except Exception as e:
            logger.error(f"Error fetching info for user {user_id}", e)
            continue
        if participant is not None:
            participants.append(participant)
    return participants
