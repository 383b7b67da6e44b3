"""
Knowledge Store
===============

File-backed storage for per-user knowledge records.

Each Slack user who fills in the setup form gets one JSON file describing
who they are and what they know. Robin reads that file whenever it has to
answer on the user's behalf.

File Structure:
    ~/.robin/data/
    ├── jane_doe_example_com.json
    └── a_b_x_com.json

The file name is derived from the user's email by replacing every
character outside [a-zA-Z0-9] with an underscore. Reads and writes must
use the same rule or records become unreachable, so both go through
knowledge_filename().

Lookups never raise. Every outcome is a KnowledgeStatus:

    directory missing          -> NOT_CONFIGURED
    file missing               -> NOT_FOUND
    file unreadable            -> UNAVAILABLE
    bad JSON / a primitive     -> CORRUPTED
    otherwise                  -> FOUND
"""

import json
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

from robin.utils.logger import Logger

logger = Logger("KnowledgeStore")

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9]")


def sanitize_email(email: str) -> str:
    """
    Turn an email address into a filesystem-safe key.

    Deterministic and idempotent: sanitizing twice yields the same key.

    Example:
        sanitize_email("a.b@x.com")  # "a_b_x_com"
    """
    return _UNSAFE_CHARS.sub("_", email)


def knowledge_filename(email: str) -> str:
    """File name holding the knowledge record for an email."""
    return f"{sanitize_email(email)}.json"


class KnowledgeStatus(str, Enum):
    """Outcome of a knowledge lookup."""
    FOUND = "found"
    NOT_CONFIGURED = "not_configured"
    NOT_FOUND = "not_found"
    CORRUPTED = "corrupted"
    UNAVAILABLE = "unavailable"


@dataclass
class KnowledgeLookup:
    """
    Result of KnowledgeStore.lookup().

    Attributes:
        status: What the lookup found
        email: The email that was looked up
        path: The file that was (or would have been) read
        record: The parsed record when status is FOUND
    """
    status: KnowledgeStatus
    email: str
    path: Path
    record: dict[str, Any] | list[Any] | None = field(default=None)

    @property
    def found(self) -> bool:
        return self.status is KnowledgeStatus.FOUND

    @property
    def text(self) -> str | None:
        """The record as pretty-printed JSON, or None when not found."""
        if self.record is None:
            return None
        return json.dumps(self.record, indent=2, ensure_ascii=False)


class KnowledgeStore:
    """
    Reads and writes knowledge records under a single directory.

    There is no caching: every lookup re-reads the file, so edits made by
    the setup form are visible on the very next question.

    Example:
        store = KnowledgeStore(Path("~/.robin/data").expanduser())

        result = store.lookup("jane@example.com")
        if result.found:
            print(result.text)

        store.save("jane@example.com", {"assistant_name": "Robin"})
    """

    def __init__(self, data_dir: Path):
        """
        Args:
            data_dir: Directory holding one JSON file per user
        """
        self.data_dir = data_dir

    def path_for(self, email: str) -> Path:
        """Path of the knowledge file for an email."""
        return self.data_dir / knowledge_filename(email)

    def lookup(self, email: str) -> KnowledgeLookup:
        """
        Look up the knowledge record for an email.

        Args:
            email: The user's email address

        Returns:
            KnowledgeLookup describing the outcome
        """
        path = self.path_for(email)
        logger.info(f"Retrieving knowledge base for {email} from {path}")

        if not self.data_dir.is_dir():
            logger.error(f"Data directory does not exist: {self.data_dir}")
            return KnowledgeLookup(KnowledgeStatus.NOT_CONFIGURED, email, path)

        if not path.is_file():
            logger.info(f"No knowledge base found for {email}")
            return KnowledgeLookup(KnowledgeStatus.NOT_FOUND, email, path)

        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Error reading knowledge base for {email}", e)
            return KnowledgeLookup(KnowledgeStatus.UNAVAILABLE, email, path)

        try:
            record = json.loads(content)
        except json.JSONDecodeError as e:
            logger.error(f"Error parsing knowledge base for {email}", e)
            return KnowledgeLookup(KnowledgeStatus.CORRUPTED, email, path)

        if not isinstance(record, (dict, list)):
            logger.error(
                f"Invalid knowledge base format for {email}",
                TypeError(f"expected a JSON object or array, got {type(record).__name__}")
            )
            return KnowledgeLookup(KnowledgeStatus.CORRUPTED, email, path)

        return KnowledgeLookup(KnowledgeStatus.FOUND, email, path, record)

    def load(self, email: str) -> dict[str, Any]:
        """
        Get the stored record, or an empty dict if there is none usable.

        Used to prefill the setup form.
        """
        result = self.lookup(email)
        if result.found and isinstance(result.record, dict):
            return dict(result.record)
        return {}

    def save(self, email: str, fields: dict[str, Any]) -> dict[str, Any]:
        """
        Merge fields into the user's record and write it back.

        Existing keys not present in fields are kept. The data directory is
        created when missing and updated_at is stamped on every save.

        Args:
            email: The user's email address
            fields: Values to set on the record

        Returns:
            The record as written
        """
        record = self.load(email)
        record.update(fields)
        record["updated_at"] = datetime.now(timezone.utc).isoformat()

        self.data_dir.mkdir(parents=True, exist_ok=True)
        path = self.path_for(email)
        path.write_text(json.dumps(record, indent=2, ensure_ascii=False), encoding="utf-8")

        logger.info(f"Saved knowledge base for {email}", {"path": str(path)})
        return record
