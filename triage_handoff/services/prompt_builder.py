"""
Renders the single prompt string sent to the chat model.
"""

from triage_handoff.models.domain import Conversation, Message, Specialist
from triage_handoff.utils.prompts import load_prompts

PROMPTS = load_prompts()


def assistant_persona() -> str:
    return PROMPTS["personas"]["assistant"]


def specialist_persona(specialist: Specialist) -> str:
    return PROMPTS["personas"]["specialist"].format(
        name=specialist.name, specialty=specialist.specialty
    )


def render_transcript(messages: list[Message]) -> str:
    """One `role: content` line per message."""
    return "\n".join(f"{msg.role}: {msg.content}" for msg in messages)


def build_prompt(
    conversation: Conversation,
    question: str,
    persona: str,
    history_window: int = 10,
) -> str:
    """
    Assembles persona, running summary, recent transcript and the new question.

    Args:
        conversation: Conversation before the question is appended
        question: New user message
        persona: Persona line (see assistant_persona / specialist_persona)
        history_window: Maximum number of recent messages rendered

    Returns:
        Prompt text
    """
    chat = PROMPTS["chat"]
    sections = [persona]

    if conversation.summary:
        sections.append(chat["summary_line"].format(summary=conversation.summary))

    recent = conversation.recent_messages(history_window)
    if recent:
        sections.append(chat["history_header"] + "\n" + render_transcript(recent))

    sections.append(chat["question_line"].format(question=question))
    sections.append(chat["answer_cue"])
    return "\n\n".join(sections)
