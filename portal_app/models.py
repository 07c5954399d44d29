from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class Role(str, Enum):
    DEVELOPER = "developer"
    EVALUATOR = "evaluator"


class Status(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self is not Status.PENDING


class Verdict(str, Enum):
    ACCEPTED = "accepted"
    REJECTED = "rejected"


@dataclass(frozen=True)
class Identity:
    user_id: str
    email: str


@dataclass(frozen=True)
class Actor:
    user_id: str
    email: str
    role: Role


@dataclass
class UploadedFile:
    name: str
    content_type: str
    data: bytes = field(repr=False)

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass
class SubmissionDraft:
    full_name: str = ""
    phone_number: str = ""
    location: str = ""
    email: str = ""
    hobbies: str = ""
    profile_image: Optional[UploadedFile] = None
    source_archive: Optional[UploadedFile] = None


@dataclass
class Submission:
    id: str
    user_id: str
    full_name: str
    phone_number: str
    location: str
    email: str
    hobbies: str
    profile_picture_ref: str
    source_code_ref: str
    status: Status
    feedback: Optional[str]
    created_at: int

    def to_row(self) -> Dict[str, Any]:
        row = dict(self.__dict__)
        row["status"] = self.status.value
        return row


@dataclass(frozen=True)
class Decision:
    submission_id: str
    verdict: Verdict
    feedback: str


@dataclass(frozen=True)
class Notification:
    recipient_email: str
    recipient_name: str
    verdict: Verdict
    feedback: str

    def to_payload(self) -> Dict[str, str]:
        return {
            "to": self.recipient_email,
            "name": self.recipient_name,
            "decision": self.verdict.value,
            "feedback": self.feedback,
        }
