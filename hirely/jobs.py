"""Recruiter job posting on top of the cached store."""
from __future__ import annotations

import uuid
from datetime import datetime

from hirely.errors import ValidationError
from hirely.log import get_logger
from hirely.models import Job, JobType, Profile, Role
from hirely.sources.normalize import avatar_logo, detect_category
from hirely.store import Store, WriteResult

log = get_logger(__name__)


def new_job_id() -> str:
    return f"job_{uuid.uuid4().hex}"


def post_job(
    store: Store,
    recruiter: Profile,
    *,
    title: str,
    company: str,
    description: str,
    location: str = "",
    type: str = JobType.FULL_TIME.value,
    salary: str = "",
    category: str = "",
    document_url: str | None = None,
) -> tuple[Job, WriteResult]:
    if recruiter.role != Role.RECRUITER:
        raise ValidationError("Only recruiters can post jobs.")
    missing = [
        name for name, value in (("title", title), ("company", company), ("description", description))
        if not (value or "").strip()
    ]
    if missing:
        raise ValidationError(f"Missing required field(s): {', '.join(missing)}")
    if type not in {t.value for t in JobType}:
        raise ValidationError(f"Unknown job type {type!r}")

    job = Job(
        id=new_job_id(),
        title=title.strip(),
        company=company.strip(),
        location=location.strip() or "Remote",
        type=type,
        salary=salary.strip() or "Not specified",
        category=category.strip() or detect_category(title),
        posted_at=datetime.now().strftime("%d/%m/%Y"),
        description=description.strip(),
        logo=avatar_logo(company.strip()),
        employer_id=recruiter.uid,
        document_url=document_url or None,
    )
    result = store.jobs.create(job)
    log.info("Posted %s @ %s as %s (synced=%s)", job.title, job.company, job.id, result.synced)
    return job, result


def jobs_for_employer(store: Store, employer_id: str) -> list[Job]:
    return [j for j in store.jobs.list() if j.employer_id == employer_id]


def delete_job(store: Store, job_id: str) -> WriteResult:
    result = store.jobs.delete(job_id)
    log.info("Deleted job %s (synced=%s)", job_id, result.synced)
    return result
