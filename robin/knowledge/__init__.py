"""
Knowledge
=========

Per-user knowledge records stored as JSON files on local disk.
"""

from robin.knowledge.store import (
    KnowledgeLookup,
    KnowledgeStatus,
    KnowledgeStore,
    knowledge_filename,
    sanitize_email,
)

__all__ = [
    "KnowledgeLookup",
    "KnowledgeStatus",
    "KnowledgeStore",
    "knowledge_filename",
    "sanitize_email",
]
