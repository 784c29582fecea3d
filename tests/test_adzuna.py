from __future__ import annotations

import re
from unittest.mock import MagicMock, patch

import pytest

from hirely.errors import ProviderError
from hirely.sources.adzuna import BASE_URL, AdzunaSource


def _resp(data=None, status=200, text=""):
    r = MagicMock()
    r.ok = 200 <= status < 300
    r.status_code = status
    r.text = text
    r.json.return_value = data or {}
    return r


HIT = {
    "id": "4123",
    "title": "Python Developer",
    "company": {"display_name": "Infosys"},
    "location": {"display_name": "Hyderabad"},
    "category": {"label": "IT Jobs"},
    "salary_min": 600000,
    "salary_max": 900000,
    "created": "2024-03-15T08:30:00Z",
    "description": "Build APIs.",
    "redirect_url": "https://adzuna.example/land/4123",
}


@pytest.fixture
def source():
    return AdzunaSource("app-id", "app-key", results_per_page=20)


def test_to_job_maps_fields(source):
    job = source.to_job(HIT)
    assert re.fullmatch(r"adzuna_4123_[a-z0-9]{5}", job.id)
    assert job.company == "Infosys"
    assert job.location == "Hyderabad"
    assert job.salary == "₹6,00,000 - ₹9,00,000"
    assert job.category == "Engineering"
    assert job.posted_at == "15/03/2024"
    assert job.external_source == "Adzuna"
    assert job.external_url == "https://adzuna.example/land/4123"
    assert job.is_external


def test_to_job_fallbacks(source):
    job = source.to_job({"title": "Chef", "category": {"label": "Hospitality & Catering Jobs"}})
    assert job.company == "Unknown Company"
    assert job.location == "India"
    assert job.salary == "Not specified"
    assert job.category == "Other"
    assert job.posted_at == "Recently"
    assert re.fullmatch(r"adzuna_\d+_[a-z0-9]{5}", job.id)


@patch("hirely.sources.adzuna.requests.get")
def test_collect_builds_request(mock_get, source):
    mock_get.return_value = _resp({"results": [HIT], "count": 57})
    jobs, total = source.collect("python", "Pune", page=2, per_page=10)

    assert len(jobs) == 1 and total == 57
    args, kwargs = mock_get.call_args
    assert args[0] == f"{BASE_URL}/2"
    assert kwargs["params"]["what"] == "python"
    assert kwargs["params"]["where"] == "Pune"
    assert kwargs["params"]["results_per_page"] == 10
    assert kwargs["params"]["sort_by"] == "date"


@patch("hirely.sources.adzuna.requests.get")
def test_fetch_payload(mock_get, source):
    mock_get.return_value = _resp({"results": [HIT, HIT], "count": 2})
    payload = source.fetch()
    assert payload["query"] == "software developer"
    assert payload["count"] == 2
    assert payload["total"] == 2
    assert "where" not in mock_get.call_args.kwargs["params"]


@patch("hirely.sources.adzuna.requests.get")
def test_http_error_carries_status(mock_get, source):
    mock_get.return_value = _resp(status=401, text="Unauthorised")
    with pytest.raises(ProviderError) as info:
        source.fetch("python")
    assert info.value.status == 401
    assert source.search("python") == []


@patch("hirely.sources.adzuna.requests.get")
def test_unconfigured_returns_nothing(mock_get):
    source = AdzunaSource("", "key")
    assert not source.configured
    assert source.search("python") == []
    mock_get.assert_not_called()
