from __future__ import annotations

from hirely.models import Application, ApplicationStatus, Job, Message, Profile, Role, VideoCallStatus


def test_job_from_store_record_defaults():
    job = Job.from_dict({"id": 7, "_id": "mongo", "location": "Delhi", "isExternal": 1})
    assert job.id == "7"
    assert job.title == "Untitled"
    assert job.company == "Unknown Company"
    assert job.salary == "Not specified"
    assert job.category == "Other"
    assert job.posted_at == "Recently"
    assert job.is_external is True


def test_job_to_dict_omits_unset_optionals():
    data = Job(id="j1", title="Dev", company="Acme", location="Pune").to_dict()
    assert data["postedAt"] == "Recently"
    assert data["isExternal"] is False
    assert not {"externalUrl", "externalSource", "employerId", "documentUrl"} & data.keys()


def test_application_with_messages():
    data = {
        "id": "a1", "jobId": "j1", "candidateId": "c1", "candidateName": "Asha",
        "candidateEmail": "asha@example.com", "appliedAt": 1700000000000, "status": "on_hold",
        "employerId": "r1",
        "messages": [
            {"id": "m1", "chatId": "a1", "senderId": "r1", "text": "Hi", "timestamp": 1},
            {"id": "m2", "chatId": "a1", "senderId": "r1", "text": "Call?", "timestamp": 2,
             "isVideoCallRequest": True, "videoCallStatus": "pending", "videoCallUrl": "https://meet"},
        ],
    }
    app = Application.from_dict(data)
    assert app.status is ApplicationStatus.ON_HOLD
    assert app.resume_url is None
    assert app.messages[1].video_call_status is VideoCallStatus.PENDING
    assert app.to_dict() == data


def test_plain_message_has_no_video_fields():
    data = Message(id="m1", chat_id="a1", sender_id="c1", text="hello", timestamp=5).to_dict()
    assert "isVideoCallRequest" not in data
    assert "videoCallUrl" not in data


def test_profile_role():
    profile = Profile.from_dict({"uid": "u1", "email": "x@y.z", "role": "recruiter", "name": "X"})
    assert profile.role is Role.RECRUITER
    assert profile.to_dict()["role"] == "recruiter"
    assert Profile.from_dict({"uid": "u2"}).role is Role.CANDIDATE


def test_unknown_enum_values_fall_back():
    app = Application.from_dict({
        "id": "a1", "status": "interviewing",
        "messages": [{"id": "m1", "isVideoCallRequest": True, "videoCallStatus": "expired"}],
    })
    assert app.status is ApplicationStatus.PENDING
    assert app.messages[0].video_call_status is None
    assert Profile.from_dict({"uid": "u1", "role": "admin"}).role is Role.CANDIDATE
