"""Conversation context tracking for AI mode.

Keeps a light memory across turns (who/what was mentioned, which topics
are covered, how the user sounds) and renders it into the prompt's
additional context.
"""

import re
from dataclasses import replace
from typing import Any

from resume_builder.interview.intents import detect_frustration
from resume_builder.interview.paths import FieldProposal
from resume_builder.interview.state import ConversationContext, UserTone

_MAX_ENTITIES = 20

# Leaf names whose values are names of people or organizations
_ENTITY_LEAVES = frozenset(
    {"fullName", "companyName", "schoolName", "organizationName", "name", "company"}
)

_UNCERTAIN = re.compile(
    r"\b(not sure|i think|maybe|i guess|don'?t remember|can'?t remember|probably|"
    r"around|about|approximately)\b",
    re.IGNORECASE,
)
_CONFIDENT = re.compile(r"\b(definitely|absolutely|of course|certainly|exactly)\b", re.IGNORECASE)


def detect_user_tone(text: str) -> UserTone:
    """Estimate the user's tone from one reply."""
    if detect_frustration(text):
        return "frustrated"
    if _UNCERTAIN.search(text):
        return "uncertain"
    if _CONFIDENT.search(text):
        return "confident"
    return "neutral"


def _leaf_name(path: str) -> str:
    return path.rsplit(".", 1)[-1]


def _topic(path: str) -> str:
    return path.split(".", 1)[0].split("[", 1)[0]


def update_context(
    context: ConversationContext,
    user_message: str,
    merged_fields: list[FieldProposal],
    section: str,
    follow_up_count: int,
) -> ConversationContext:
    """Return the context after one turn.

    Args:
        context: Context before the turn (not mutated).
        user_message: The user's reply.
        merged_fields: Proposals that were merged into the record.
        section: Section the turn belonged to.
        follow_up_count: Follow-up count of that section after the turn.

    Returns:
        New ConversationContext.
    """
    entities = list(context.mentioned_entities)
    topics = list(context.answered_topics)

    for proposal in merged_fields:
        path = proposal.get("path", "")
        topic = _topic(path)
        if topic and topic not in topics:
            topics.append(topic)
        value = proposal.get("value")
        if _leaf_name(path) in _ENTITY_LEAVES and isinstance(value, str) and value.strip():
            entity = value.strip()
            # Most recent mention last
            entities = [e for e in entities if e != entity] + [entity]

    counts = dict(context.follow_up_counts)
    counts[section] = follow_up_count

    return replace(
        context,
        mentioned_entities=entities[-_MAX_ENTITIES:],
        answered_topics=topics,
        user_tone=detect_user_tone(user_message),
        follow_up_counts=counts,
    )


def build_context_summary(context: ConversationContext, record: dict[str, Any]) -> str:
    """Render context and record highlights for the system prompt."""
    parts = []
    if context.answered_topics:
        parts.append(f"Topics already covered: {', '.join(context.answered_topics)}")
    if context.mentioned_entities:
        parts.append(f"Names/companies mentioned: {', '.join(context.mentioned_entities)}")

    personal_info = record.get("personalInfo") or {}
    if isinstance(personal_info, dict) and personal_info.get("fullName"):
        parts.append(f"User's name: {personal_info['fullName']}")

    work = record.get("workExperience")
    if isinstance(work, list) and work:
        parts.append(f"Work experiences collected: {len(work)}")
    education = record.get("education")
    if isinstance(education, list) and education:
        parts.append(f"Education entries collected: {len(education)}")

    if context.user_tone != "neutral":
        parts.append(f"User seems {context.user_tone} - adjust tone accordingly")

    return "\n".join(parts)
