"""Map heterogeneous provider fields onto the canonical Job shape."""
from __future__ import annotations

import hashlib
import random
import re
import string
import time
from datetime import datetime
from urllib.parse import quote

from hirely.models import JobType

NOT_SPECIFIED = "Not specified"
OTHER = "Other"

AVATAR_URL = "https://ui-avatars.com/api/?name={name}&background=6366f1&color=fff&size=100"

# Currency amount, optional range, optional per-period suffix.
SALARY_RE = re.compile(
    r"(?:₹|Rs\.?|INR|USD|\$)\s*[\d,]+"
    r"(?:\s*[-–to]+\s*(?:₹|Rs\.?|INR|USD|\$)?\s*[\d,]+)?"
    r"(?:\s*(?:per|/|p\.?)\s*(?:month|annum|year|hr|hour))?",
    re.IGNORECASE,
)

# Checked in order; first hit wins.
TITLE_CATEGORIES: list[tuple[str, tuple[str, ...]]] = [
    ("Engineering", ("engineer", "developer", "software", "devops", "backend", "frontend", "full stack")),
    ("Design", ("design", "ui", "ux", "graphic")),
    ("Marketing", ("market", "seo", "content", "social media")),
    ("Sales", ("sales", "business development", "account")),
    ("Product", ("product", "project manager", "scrum")),
    ("Engineering", ("data", "analyst", "machine learning", "ai")),
    ("Engineering", ("intern",)),
]

PROVIDER_LABEL_CATEGORIES: list[tuple[str, tuple[str, ...]]] = [
    ("Engineering", ("it", "engineering", "software", "tech")),
    ("Design", ("design", "creative")),
    ("Marketing", ("marketing", "pr", "advertising")),
    ("Sales", ("sales", "retail")),
    ("Product", ("product", "project", "consult")),
]

_BASE36 = string.ascii_lowercase + string.digits


def _has_keyword(text: str, keyword: str) -> bool:
    # Two/three-letter tokens (ui, ux, ai, it, pr, seo) only count as whole words
    if len(keyword) <= 3:
        return re.search(rf"\b{re.escape(keyword)}\b", text) is not None
    return keyword in text


def _classify(text: str, rules: list[tuple[str, tuple[str, ...]]]) -> str | None:
    low = (text or "").lower()
    for category, keywords in rules:
        if any(_has_keyword(low, k) for k in keywords):
            return category
    return None


def detect_category(title: str) -> str:
    return _classify(title, TITLE_CATEGORIES) or OTHER


def map_provider_category(label: str, title: str) -> str:
    """Provider label first, then the title heuristic."""
    return _classify(label, PROVIDER_LABEL_CATEGORIES) or detect_category(title)


def detect_job_type(title: str, description: str = "", schedule_type: str | None = None) -> str:
    if schedule_type:
        return schedule_type
    t = (title or "").lower()
    d = (description or "").lower()
    if "intern" in t:
        return JobType.INTERNSHIP.value
    if "full-time" in d or "full time" in d:
        return JobType.FULL_TIME.value
    if "part-time" in d or "part time" in d:
        return JobType.PART_TIME.value
    if "contract" in d:
        return JobType.CONTRACT.value
    if "remote" in d:
        return JobType.REMOTE.value
    return JobType.FULL_TIME.value


def detect_job_type_from_title(title: str) -> str:
    t = (title or "").lower()
    if "intern" in t:
        return JobType.INTERNSHIP.value
    if "part-time" in t or "part time" in t:
        return JobType.PART_TIME.value
    if "contract" in t:
        return JobType.CONTRACT.value
    if "remote" in t:
        return JobType.REMOTE.value
    if "freelance" in t:
        return JobType.FREELANCE.value
    return JobType.FULL_TIME.value


def extract_salary(description: str, explicit: str | None = None) -> str:
    if explicit:
        return explicit
    m = SALARY_RE.search(description or "")
    return m.group(0) if m else NOT_SPECIFIED


def format_inr(amount: float) -> str:
    """Indian digit grouping: 1234567 → '12,34,567'."""
    n = int(round(amount))
    sign = "-" if n < 0 else ""
    digits = str(abs(n))
    if len(digits) <= 3:
        return sign + digits
    head, tail = digits[:-3], digits[-3:]
    groups: list[str] = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return sign + ",".join(groups + [tail])


def salary_range(salary_min: float | None, salary_max: float | None) -> str:
    if salary_min and salary_max:
        return f"₹{format_inr(salary_min)} - ₹{format_inr(salary_max)}"
    if salary_min:
        return f"₹{format_inr(salary_min)}+"
    return NOT_SPECIFIED


def avatar_logo(company: str) -> str:
    return AVATAR_URL.format(name=quote(company or "C"))


def display_date(iso: str | None) -> str:
    if not iso:
        return "Recently"
    try:
        return datetime.fromisoformat(iso.replace("Z", "+00:00")).strftime("%d/%m/%Y")
    except ValueError:
        return "Recently"


def random_suffix(length: int) -> str:
    return "".join(random.choices(_BASE36, k=length))


def now_ms() -> int:
    return int(time.time() * 1000)


def per_fetch_id(prefix: str, middle: str | int, suffix_len: int) -> str:
    return f"{prefix}_{middle}_{random_suffix(suffix_len)}"


def stable_id(prefix: str, provider_key: str) -> str:
    digest = hashlib.sha256(f"{prefix}|{provider_key}".encode()).hexdigest()[:12]
    return f"{prefix}_{digest}"
