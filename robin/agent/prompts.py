"""
Prompt Templates
================

Builds the text sent to the generation service.

Two variants:
- build_user_prompt: answer one question as the owner of the knowledge
- build_discussion_prompt: take a turn in a multi-person discussion

Both are plain string interpolation; the same inputs always give the
same prompt.
"""

from typing import Iterable

from robin.agent.discussion import ConversationTurn

USER_PROMPT_TEMPLATE = """You are responding to a question asked by someone else, and you're answering as if you're the person whose knowledge is being used.
Your knowledge and expertise is: {knowledge}.
Someone asked: {question}.

Guidelines for your response:
- Keep your response under 2-3 short sentences
- Be direct and to the point
- Be friendly and helpful, like you're talking to a colleague
- Avoid technical jargon unless absolutely necessary
- Don't mention "knowledge base" or technical terms
- Don't use the word "user" in your answer
- Don't use any IDs
- Don't mention that you're using someone else's knowledge
- Don't url encode the answer
- Answer based on your knowledge and expertise
- If asked for more details, provide specific information related to the current topic
- Never respond with general background information unless specifically asked
- Stay focused on the current topic of discussion
- If the question is not related to your knowledge, simply say "I don't have information about that in my knowledge base"
- Never make up or guess information that's not in your knowledge base
- If someone asks if you're sure, and the information wasn't in your knowledge base, say "I apologize, I don't have that information in my knowledge base"
- Never provide information about topics not mentioned in your knowledge base
- If the question contains multiple topics, only answer the parts you have information about
- When you have specific examples in your knowledge, include them in your response
- If asked about differences, highlight the key specific differences you know about
- When asked for more details, stay on the same topic and provide additional specific information
- Never switch topics unless explicitly asked
"""

DISCUSSION_PROMPT_TEMPLATE = """You are a helpful assistant that can answer questions about the user's knowledge base.
There is a discussion going on between the users.
The user's knowledge base is: {knowledge}.
Considering the user's knowledge base, give a helpful answer.
The conversation so far is: {conversation}.
The agenda of the discussion is: {agenda}.
Respond to the user's question based on the conversation so far and the agenda.
Give meaningful answers.
Don't talk about the user in your answer and instead focus on the answer.
Generate short and concise answers less than 50 words.
"""


def build_user_prompt(question: str, knowledge_text: str) -> str:
    """
    Prompt for answering a single question on someone's behalf.

    Args:
        question: What was asked
        knowledge_text: The knowledge record (or lookup placeholder text)
    """
    return USER_PROMPT_TEMPLATE.format(knowledge=knowledge_text, question=question)


def render_transcript(turns: Iterable[ConversationTurn]) -> str:
    """Render turns as "{name} said: {answer}" lines."""
    return "\n".join(f"{turn.speaker_name} said: {turn.answer_text}" for turn in turns)


def build_discussion_prompt(
    agenda: str,
    knowledge_text: str,
    turns: Iterable[ConversationTurn] = ()
) -> str:
    """
    Prompt for one participant's turn in a discussion.

    Args:
        agenda: What the discussion is about
        knowledge_text: The participant's knowledge record
        turns: Everything said so far, oldest first
    """
    return DISCUSSION_PROMPT_TEMPLATE.format(
        knowledge=knowledge_text,
        conversation=render_transcript(turns),
        agenda=agenda,
    )
