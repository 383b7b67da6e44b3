"""
Discussion Orchestration
========================

Simulates a discussion between Slack users: each participant's AI
assistant takes turns answering the agenda, round after round, seeing
everything said so far.

The order of turns is an explicit schedule rather than nested loops:

    participants [U1, U2], rounds 3
    -> (1, U1) (1, U2) (2, U1) (2, U2) (3, U1) (3, U2)

The transcript is an immutable tuple passed from one step to the next,
so two discussions running at the same time never share state.

A failing step (generation error, Slack error) is logged and skipped;
the remaining steps still run.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Awaitable, Callable, Sequence

from robin.utils.logger import Logger

if TYPE_CHECKING:
    from robin.agent.core import Agent

logger = Logger("Discussion")

DEFAULT_ROUNDS = 3


@dataclass(frozen=True)
class Participant:
    """
    A Slack user taking part in a discussion.

    Attributes:
        user_id: Slack user ID
        email: Email used to find their knowledge record
        name: Real name (used in the transcript)
        display_name: Name shown on posted answers
    """
    user_id: str
    email: str
    name: str
    display_name: str


@dataclass(frozen=True)
class ConversationTurn:
    """One answer in a discussion."""
    speaker_name: str
    answer_text: str
    iteration: int
    user_id: str = ""


@dataclass(frozen=True)
class DiscussionSession:
    """
    Who is discussing what, and where answers are posted.

    Attributes:
        participants: Speakers in turn order
        agenda: The discussion topic
        channel: Slack channel for the answers
        thread_ts: Thread the answers are posted into
    """
    participants: tuple[Participant, ...]
    agenda: str
    channel: str
    thread_ts: str | None = None


PostAnswer = Callable[[Participant, str], Awaitable[None]]


def discussion_schedule(
    participants: Sequence[Participant],
    rounds: int = DEFAULT_ROUNDS
) -> list[tuple[int, Participant]]:
    """
    The full list of turns: every participant once per round, in order.

    Iterations are numbered from 1.
    """
    return [
        (iteration, participant)
        for iteration in range(1, rounds + 1)
        for participant in participants
    ]


async def run_discussion(
    session: DiscussionSession,
    agent: "Agent",
    post: PostAnswer,
    rounds: int = DEFAULT_ROUNDS
) -> tuple[ConversationTurn, ...]:
    """
    Run every scheduled turn of a discussion.

    For each turn the participant's answer is generated from the agenda,
    their knowledge and the transcript so far, added to the transcript,
    and then posted. A turn whose answer was generated stays in the
    transcript even if posting it fails.

    Args:
        session: The discussion to run
        agent: Generates the answers
        post: Called with each participant and their answer
        rounds: How many times each participant speaks

    Returns:
        The final transcript
    """
    transcript: tuple[ConversationTurn, ...] = ()
    schedule = discussion_schedule(session.participants, rounds)

    logger.info(
        f"Starting discussion with {len(session.participants)} participants",
        {"agenda": session.agenda[:100], "turns": len(schedule)}
    )

    for iteration, participant in schedule:
        try:
            answer = await agent.answer_in_discussion(
                session.agenda, participant.email, transcript
            )
            if not answer:
                logger.warning(
                    f"Empty answer for user {participant.user_id} (iteration {iteration})"
                )
                continue

            transcript = transcript + (
                ConversationTurn(
                    speaker_name=participant.name,
                    answer_text=answer,
                    iteration=iteration,
                    user_id=participant.user_id,
                ),
            )
            logger.info(f"Got answer for user {participant.user_id} (iteration {iteration})")

            await post(participant, answer)
        except Exception as e:
            logger.error(
                f"Error getting answer for user {participant.user_id} (iteration {iteration})", e
            )

    logger.info(f"Discussion finished with {len(transcript)} answers")
    return transcript
