from __future__ import annotations

import re

import pytest

from hirely import applications
from hirely.errors import ValidationError
from hirely.models import Application, ApplicationStatus, Job, Profile, Role, VideoCallStatus

CANDIDATE = Profile(uid="c1", email="asha@example.com", role=Role.CANDIDATE, name="Asha")
RECRUITER = Profile(uid="r1", email="hr@acme.io", role=Role.RECRUITER, name="Acme HR")


def _local_job():
    return Job(id="job_1", title="Backend Developer", company="Acme", location="Pune", employer_id="r1")


def _external_job():
    return Job(id="serp_1", title="Data Analyst", company="Zoho", location="Chennai", is_external=True)


def _seed(store, app_id="app_1", applied_at=1, employer_id="r1", messages=None):
    app = Application(
        id=app_id, job_id="job_1", candidate_id="c1", candidate_name="Asha",
        candidate_email="asha@example.com", applied_at=applied_at, employer_id=employer_id,
        messages=messages or [],
    )
    records = [r for r in store.cache.read("applications") if r["id"] != app_id]
    store.cache.write_all("applications", records + [app.to_dict()])
    return app


def test_apply_to_local_job_requires_resume(store, session):
    with pytest.raises(ValidationError, match="resume"):
        applications.apply(store, CANDIDATE, _local_job())
    assert session.calls == []


def test_recruiter_cannot_apply(store):
    with pytest.raises(ValidationError):
        applications.apply(store, RECRUITER, _external_job())


def test_apply_creates_pending_application(store, session):
    app, result = applications.apply(store, CANDIDATE, _local_job(), resume_url="https://files/cv.pdf")
    assert re.fullmatch(r"app_[0-9a-f]{32}", app.id)
    assert app.status is ApplicationStatus.PENDING
    assert app.employer_id == "r1"
    assert result.synced
    assert store.cache.read("applications")[0]["resumeUrl"] == "https://files/cv.pdf"


def test_apply_to_external_job_without_resume(store, session):
    session.down = True
    app, result = applications.apply(store, CANDIDATE, _external_job())
    assert app.employer_id is None
    assert result.cached and not result.remote_ok
    assert applications.applied_job_ids(store, "c1") == {"serp_1"}


def test_employer_view_is_newest_first(store, session):
    session.down = True
    _seed(store, "app_old", applied_at=100)
    _seed(store, "app_new", applied_at=200)
    _seed(store, "app_other", applied_at=300, employer_id="r2")
    apps = applications.applications_for_employer(store, "r1")
    assert [a.id for a in apps] == ["app_new", "app_old"]
    assert applications.applicant_count(apps, "job_1") == 2


def test_update_status_accepts_any_transition(store, session):
    _seed(store)
    applications.update_status(store, "app_1", "accepted")
    result = applications.update_status(store, "app_1", ApplicationStatus.PENDING)
    assert result.synced
    assert store.cache.read("applications")[0]["status"] == "pending"


def test_update_status_rejects_unknown_value(store, session):
    with pytest.raises(ValidationError):
        applications.update_status(store, "app_1", "hired")
    assert session.calls == []


def test_empty_message_fails_before_any_call(store, session):
    with pytest.raises(ValidationError, match="Message is required"):
        applications.send_message(store, "app_1", "c1", "   ")
    assert session.calls == []


def test_send_message_to_unknown_application(store, session):
    session.down = True
    with pytest.raises(ValidationError):
        applications.send_message(store, "nope", "c1", "hello")


def test_send_message_appends_and_mirrors(store, session):
    _seed(store)
    msg, result = applications.send_message(store, "app_1", "c1", " Hello there ")
    assert msg.text == "Hello there"
    assert msg.chat_id == "app_1"
    assert result.synced
    assert ("POST", "messages/app_1") in [c[:2] for c in session.calls]

    session.down = True
    assert [m.text for m in applications.get_messages(store, "app_1")] == ["Hello there"]


def test_offline_message_is_not_mirrored(store, session):
    _seed(store)
    session.down = True
    _, result = applications.send_message(store, "app_1", "r1", "Are you free Monday?")
    assert not result.remote_ok
    assert not [c for c in session.calls if c[1].startswith("messages/")]
    assert len(applications.get_messages(store, "app_1")) == 1


def test_video_call_request_and_answer(store, session):
    _seed(store)
    session.down = True
    msg, _ = applications.request_video_call(store, "app_1", "r1")
    assert msg.is_video_call_request
    assert msg.video_call_status is VideoCallStatus.PENDING
    assert msg.video_call_url.startswith("https://meet.jit.si/hirely-interview-app_1-")

    applications.set_video_call_status(store, "app_1", msg.id, "accepted")
    stored = applications.get_messages(store, "app_1")[0]
    assert stored.video_call_status is VideoCallStatus.ACCEPTED


def test_video_call_status_validation(store, session):
    _seed(store)
    session.down = True
    msg, _ = applications.request_video_call(store, "app_1", "r1")
    with pytest.raises(ValidationError):
        applications.set_video_call_status(store, "app_1", msg.id, "pending")
    with pytest.raises(ValidationError):
        applications.set_video_call_status(store, "app_1", "msg_missing", "rejected")
    with pytest.raises(ValidationError):
        applications.set_video_call_status(store, "app_1", msg.id, "maybe")
