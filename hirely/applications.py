"""Candidate applications, recruiter status updates and the interview chat."""
from __future__ import annotations

import time
import uuid

from hirely.errors import RemoteUnavailable, ValidationError
from hirely.log import get_logger
from hirely.models import (
    Application,
    ApplicationStatus,
    Job,
    Message,
    Profile,
    Role,
    VideoCallStatus,
)
from hirely.store import Store, WriteResult

log = get_logger(__name__)

MEET_URL = "https://meet.jit.si/{room}"


def _now_ms() -> int:
    return int(time.time() * 1000)


def new_application_id() -> str:
    return f"app_{uuid.uuid4().hex}"


def new_message_id() -> str:
    return f"msg_{uuid.uuid4().hex[:16]}"


def apply(
    store: Store, candidate: Profile, job: Job, resume_url: str | None = None
) -> tuple[Application, WriteResult]:
    if candidate.role != Role.CANDIDATE:
        raise ValidationError("Only candidates can apply for jobs.")
    # External listings are applied to on the provider's site; ours need a resume
    if not job.is_external and not resume_url:
        raise ValidationError("Please attach a resume before applying.")

    application = Application(
        id=new_application_id(),
        job_id=job.id,
        candidate_id=candidate.uid,
        candidate_name=candidate.name,
        candidate_email=candidate.email,
        applied_at=_now_ms(),
        status=ApplicationStatus.PENDING,
        employer_id=job.employer_id,
        resume_url=resume_url,
    )
    result = store.applications.create(application)
    log.info("%s applied to %s (%s)", candidate.uid, job.title, application.id)
    return application, result


def applications_for_candidate(store: Store, candidate_id: str) -> list[Application]:
    return [a for a in store.applications.list() if a.candidate_id == candidate_id]


def applications_for_employer(store: Store, employer_id: str) -> list[Application]:
    apps = [a for a in store.applications.list() if a.employer_id == employer_id]
    return sorted(apps, key=lambda a: a.applied_at, reverse=True)


def applied_job_ids(store: Store, candidate_id: str) -> set[str]:
    return {a.job_id for a in applications_for_candidate(store, candidate_id)}


def applicant_count(applications: list[Application], job_id: str) -> int:
    return sum(1 for a in applications if a.job_id == job_id)


def update_status(store: Store, app_id: str, status: str | ApplicationStatus) -> WriteResult:
    """Any status may follow any other; only the value itself is checked."""
    try:
        status = ApplicationStatus(status)
    except ValueError:
        raise ValidationError(f"Unknown application status {status!r}") from None
    result = store.applications.update(app_id, {"status": status.value})
    log.info("Application %s → %s (synced=%s)", app_id, status.value, result.synced)
    return result


# ── Chat ─────────────────────────────────────────────────────────────────


def _require_application(store: Store, app_id: str) -> Application:
    application = store.applications.get(app_id)
    if application is None:
        raise ValidationError(f"Unknown application {app_id!r}")
    return application


def get_messages(store: Store, app_id: str) -> list[Message]:
    return _require_application(store, app_id).messages


def _append(store: Store, application: Application, msg: Message) -> WriteResult:
    messages = [m.to_dict() for m in application.messages] + [msg.to_dict()]
    result = store.applications.update(application.id, {"messages": messages})
    if result.remote_ok:
        try:
            store.remote.append_message(application.id, msg.to_dict())
        except RemoteUnavailable as exc:
            log.debug("Message mirror for %s failed: %s", application.id, exc)
    return result


def send_message(store: Store, app_id: str, sender_id: str, text: str) -> tuple[Message, WriteResult]:
    if not (text or "").strip():
        raise ValidationError("Message is required")
    application = _require_application(store, app_id)
    msg = Message(
        id=new_message_id(),
        chat_id=app_id,
        sender_id=sender_id,
        text=text.strip(),
        timestamp=_now_ms(),
    )
    return msg, _append(store, application, msg)


def request_video_call(store: Store, app_id: str, sender_id: str) -> tuple[Message, WriteResult]:
    application = _require_application(store, app_id)
    now = _now_ms()
    msg = Message(
        id=new_message_id(),
        chat_id=app_id,
        sender_id=sender_id,
        text="Requested a video interview.",
        timestamp=now,
        is_video_call_request=True,
        video_call_status=VideoCallStatus.PENDING,
        video_call_url=MEET_URL.format(room=f"hirely-interview-{app_id}-{now}"),
    )
    log.info("Video call requested on %s", app_id)
    return msg, _append(store, application, msg)


def set_video_call_status(
    store: Store, app_id: str, message_id: str, status: str | VideoCallStatus
) -> WriteResult:
    try:
        status = VideoCallStatus(status)
    except ValueError:
        raise ValidationError(f"Unknown video call status {status!r}") from None
    if status == VideoCallStatus.PENDING:
        raise ValidationError("A video call request can only be accepted or rejected.")

    application = _require_application(store, app_id)
    target = next(
        (m for m in application.messages if m.id == message_id and m.is_video_call_request), None
    )
    if target is None:
        raise ValidationError(f"No video call request {message_id!r} on {app_id!r}")
    target.video_call_status = status

    result = store.applications.update(app_id, {"messages": [m.to_dict() for m in application.messages]})
    if result.remote_ok:
        try:
            store.remote.update_message(app_id, message_id, target.to_dict())
        except RemoteUnavailable as exc:
            log.debug("Message mirror for %s failed: %s", app_id, exc)
    return result
