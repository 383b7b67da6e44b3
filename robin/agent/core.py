"""
Agent Core
==========

Answers questions on behalf of Slack users.

    Question + email
         │
         ▼
    get-knowledge (local registry or stdio server)
         │
         ▼
    Build prompt (single-user or discussion template)
         │
         ▼
    Generation service
         │
         ▼
    Decoded answer

Lookup problems (no record, corrupted file, ...) do not stop the flow:
the tool returns a placeholder sentence and that goes into the prompt.
Generation errors propagate to the caller.
"""

from typing import Sequence

from robin.agent.discussion import ConversationTurn
from robin.agent.generations import TextGenerator
from robin.agent.prompts import build_discussion_prompt, build_user_prompt
from robin.tools.client import KnowledgeClient
from robin.utils.logger import Logger

logger = Logger("Agent")


class Agent:
    """
    Combines knowledge lookup, prompt assembly and generation.

    Example:
        agent = Agent(LocalKnowledgeClient(tool_registry), generator)

        answer = await agent.answer_as_user(
            question="What's our deploy process?",
            email="jane@example.com"
        )
    """

    def __init__(self, knowledge: KnowledgeClient, generator: TextGenerator):
        """
        Args:
            knowledge: Client for the get-knowledge tool
            generator: Text generation backend
        """
        self.knowledge = knowledge
        self.generator = generator

    async def answer_as_user(self, question: str, email: str) -> str | None:
        """
        Answer a question as the user who owns the email.

        Returns:
            The generated answer, or None if the service returned no text

        Raises:
            Whatever the generation backend raises on failure
        """
        knowledge_text = await self.knowledge.knowledge_text(email)
        prompt = build_user_prompt(question, knowledge_text)

        logger.debug("Generating answer in user context", {"email": email, "chars": len(prompt)})
        answer = await self.generator.generate(prompt)
        logger.info(f"Generated answer for {email}" if answer else f"No answer generated for {email}")
        return answer

    async def answer_in_discussion(
        self,
        agenda: str,
        email: str,
        transcript: Sequence[ConversationTurn]
    ) -> str | None:
        """
        Take one turn in a discussion as the user who owns the email.

        Args:
            agenda: The discussion topic
            email: The speaking participant's email
            transcript: Turns so far, oldest first
        """
        knowledge_text = await self.knowledge.knowledge_text(email)
        prompt = build_discussion_prompt(agenda, knowledge_text, transcript)

        logger.debug(
            "Generating answer in discussion context",
            {"email": email, "turns_so_far": len(transcript)}
        )
        return await self.generator.generate(prompt)
