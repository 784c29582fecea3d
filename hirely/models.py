"""Data models for jobs, applications, profiles and chat messages.

Attributes are snake_case; ``to_dict``/``from_dict`` use the camelCase keys of
the hosted store and the local cache files.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, TypeVar

from hirely.log import get_logger

log = get_logger(__name__)


class JobType(str, Enum):
    FULL_TIME = "Full-time"
    PART_TIME = "Part-time"
    CONTRACT = "Contract"
    REMOTE = "Remote"
    INTERNSHIP = "Internship"
    FREELANCE = "Freelance"


class ApplicationStatus(str, Enum):
    PENDING = "pending"
    REVIEWED = "reviewed"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    ON_HOLD = "on_hold"


class Role(str, Enum):
    CANDIDATE = "candidate"
    RECRUITER = "recruiter"


class VideoCallStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


def _value(v: Any) -> Any:
    return v.value if isinstance(v, Enum) else v


E = TypeVar("E", bound=Enum)


def _enum(cls: type[E], raw: Any, default: E | None) -> E | None:
    """Stored enum value, or ``default`` when it is empty or unknown to this version."""
    if not raw:
        return default
    try:
        return cls(raw)
    except ValueError:
        log.warning("Unknown %s %r in stored record, using %s", cls.__name__, raw, _value(default))
        return default


@dataclass
class Job:
    KEY: ClassVar[str] = "id"

    id: str
    title: str
    company: str
    location: str
    type: str = JobType.FULL_TIME.value
    salary: str = "Not specified"
    category: str = "Other"
    posted_at: str = "Recently"
    description: str = ""
    logo: str = ""
    is_external: bool = False
    external_url: str | None = None
    external_source: str | None = None
    employer_id: str | None = None
    document_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "company": self.company,
            "location": self.location,
            "type": _value(self.type),
            "salary": self.salary,
            "category": self.category,
            "postedAt": self.posted_at,
            "description": self.description,
            "logo": self.logo,
            "isExternal": self.is_external,
        }
        optional = {
            "externalUrl": self.external_url,
            "externalSource": self.external_source,
            "employerId": self.employer_id,
            "documentUrl": self.document_url,
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        return data

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Job:
        return cls(
            id=str(d.get("id", "")),
            title=d.get("title") or "Untitled",
            company=d.get("company") or "Unknown Company",
            location=d.get("location") or "",
            type=d.get("type") or JobType.FULL_TIME.value,
            salary=d.get("salary") or "Not specified",
            category=d.get("category") or "Other",
            posted_at=d.get("postedAt") or "Recently",
            description=d.get("description") or "",
            logo=d.get("logo") or "",
            is_external=bool(d.get("isExternal", False)),
            external_url=d.get("externalUrl"),
            external_source=d.get("externalSource"),
            employer_id=d.get("employerId"),
            document_url=d.get("documentUrl") or None,
        )


@dataclass
class Message:
    id: str
    chat_id: str
    sender_id: str
    text: str
    timestamp: int
    is_video_call_request: bool = False
    video_call_status: VideoCallStatus | None = None
    video_call_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "chatId": self.chat_id,
            "senderId": self.sender_id,
            "text": self.text,
            "timestamp": self.timestamp,
        }
        if self.is_video_call_request:
            data["isVideoCallRequest"] = True
            data["videoCallStatus"] = _value(self.video_call_status)
            data["videoCallUrl"] = self.video_call_url
        return data

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Message:
        status = d.get("videoCallStatus")
        return cls(
            id=str(d.get("id", "")),
            chat_id=d.get("chatId", ""),
            sender_id=d.get("senderId", ""),
            text=d.get("text", ""),
            timestamp=int(d.get("timestamp") or 0),
            is_video_call_request=bool(d.get("isVideoCallRequest", False)),
            video_call_status=_enum(VideoCallStatus, status, None),
            video_call_url=d.get("videoCallUrl"),
        )


@dataclass
class Application:
    KEY: ClassVar[str] = "id"

    id: str
    job_id: str
    candidate_id: str
    candidate_name: str
    candidate_email: str
    applied_at: int
    status: ApplicationStatus = ApplicationStatus.PENDING
    employer_id: str | None = None
    resume_url: str | None = None
    messages: list[Message] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "jobId": self.job_id,
            "candidateId": self.candidate_id,
            "candidateName": self.candidate_name,
            "candidateEmail": self.candidate_email,
            "appliedAt": self.applied_at,
            "status": _value(self.status),
            "messages": [m.to_dict() for m in self.messages],
        }
        if self.employer_id is not None:
            data["employerId"] = self.employer_id
        if self.resume_url:
            data["resumeUrl"] = self.resume_url
        return data

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Application:
        return cls(
            id=str(d.get("id", "")),
            job_id=d.get("jobId", ""),
            candidate_id=d.get("candidateId", ""),
            candidate_name=d.get("candidateName", ""),
            candidate_email=d.get("candidateEmail", ""),
            applied_at=int(d.get("appliedAt") or 0),
            status=_enum(ApplicationStatus, d.get("status"), ApplicationStatus.PENDING),
            employer_id=d.get("employerId"),
            resume_url=d.get("resumeUrl") or None,
            messages=[Message.from_dict(m) for m in d.get("messages") or []],
        )


@dataclass
class Profile:
    KEY: ClassVar[str] = "uid"

    uid: str
    email: str
    role: Role
    name: str

    def to_dict(self) -> dict[str, Any]:
        return {"uid": self.uid, "email": self.email, "role": _value(self.role), "name": self.name}

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Profile:
        return cls(
            uid=str(d.get("uid", "")),
            email=d.get("email", ""),
            role=_enum(Role, d.get("role"), Role.CANDIDATE),
            name=d.get("name", ""),
        )
