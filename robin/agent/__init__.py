"""
Agent System
============

Turns a question (or a discussion agenda) into an answer written as if
by the person whose knowledge is used.

This module provides:
- Agent: knowledge lookup + prompt + generation
- Discussion types and run_discussion() for multi-user sessions
- Generation clients for the external text service
"""

from robin.agent.core import Agent
from robin.agent.discussion import (
    ConversationTurn,
    DiscussionSession,
    Participant,
    discussion_schedule,
    run_discussion,
)
from robin.agent.generations import (
    GenerationsAPIClient,
    OpenAIGenerationClient,
    create_generator,
    decode_generation_text,
)

__all__ = [
    "Agent",
    "ConversationTurn",
    "DiscussionSession",
    "Participant",
    "discussion_schedule",
    "run_discussion",
    "GenerationsAPIClient",
    "OpenAIGenerationClient",
    "create_generator",
    "decode_generation_text",
]
