"""
Data models for the Survey Assistant chat service.
"""

from enum import Enum
from dataclasses import dataclass
from typing import Dict, Optional


class Role(Enum):
    USER      = "user"
    ASSISTANT = "assistant"


class ExportKind(Enum):
    SUMMARY    = "summary"
    TRANSCRIPT = "transcript"


class ExportFormat(Enum):
    WORD = "word"
    PDF  = "pdf"

    @property
    def extension(self) -> str:
        return "docx" if self is ExportFormat.WORD else "pdf"


@dataclass(frozen=True)
class Message:
    """One conversation entry. Never mutated after it is appended."""
    role: Role
    content: str

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(Role.USER, content)

    @classmethod
    def assistant(cls, content: str) -> "Message":
        return cls(Role.ASSISTANT, content)

    def to_dict(self) -> Dict[str, str]:
        """Shape expected by chat-completion APIs and JSON responses."""
        return {"role": self.role.value, "content": self.content}


@dataclass
class DocumentSection:
    """A block of an export document: optional bold label, then body text."""
    body: str
    label: Optional[str] = None
