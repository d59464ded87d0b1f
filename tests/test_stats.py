"""
Tests for GET /jobs/stats
"""

from datetime import datetime, timezone

from app.services.job_service import month_label
from tests.helpers import API


def _stats(client, user):
    response = client.get(f"{API}/jobs/stats", headers=user["headers"])
    assert response.status_code == 200
    return response.json()


def test_stats_for_new_user(client, alice):
    data = _stats(client, alice)

    assert data == {
        "defaultStats": {"pending": 0, "interview": 0, "declined": 0},
        "monthlyApplications": [],
    }


def test_status_breakdown_always_has_three_keys(client, alice, make_jobs):
    owner = alice["user"]["id"]
    make_jobs(owner, 4, status="interview")
    make_jobs(owner, 1, status="declined")

    stats = _stats(client, alice)["defaultStats"]

    assert stats == {"pending": 0, "interview": 4, "declined": 1}


def test_status_breakdown_sums_to_total(client, alice, make_jobs):
    owner = alice["user"]["id"]
    make_jobs(owner, 2, status="pending")
    make_jobs(owner, 3, status="interview")
    make_jobs(owner, 1, status="declined")

    stats = _stats(client, alice)["defaultStats"]
    total = client.get(f"{API}/jobs", headers=alice["headers"]).json()["totalJobs"]

    assert sum(stats.values()) == total == 6


def test_monthly_applications_keeps_last_six_months_ascending(client, alice, make_jobs):
    owner = alice["user"]["id"]
    # Eight months of history, two jobs in the newest month
    for month in range(1, 9):
        make_jobs(owner, 1, created_at=datetime(2024, month, 10, tzinfo=timezone.utc))
    make_jobs(owner, 1, created_at=datetime(2024, 8, 20, tzinfo=timezone.utc))

    monthly = _stats(client, alice)["monthlyApplications"]

    assert [entry["date"] for entry in monthly] == [
        "Mar 2024",
        "Apr 2024",
        "May 2024",
        "Jun 2024",
        "Jul 2024",
        "Aug 2024",
    ]
    assert [entry["count"] for entry in monthly] == [1, 1, 1, 1, 1, 2]


def test_monthly_applications_across_year_boundary(client, alice, make_jobs):
    owner = alice["user"]["id"]
    make_jobs(owner, 2, created_at=datetime(2023, 12, 5, tzinfo=timezone.utc))
    make_jobs(owner, 1, created_at=datetime(2024, 1, 5, tzinfo=timezone.utc))

    monthly = _stats(client, alice)["monthlyApplications"]

    assert monthly == [{"date": "Dec 2023", "count": 2}, {"date": "Jan 2024", "count": 1}]


def test_stats_are_scoped_to_owner(client, alice, bob, make_jobs):
    make_jobs(alice["user"]["id"], 5, status="declined")
    make_jobs(bob["user"]["id"], 1, status="pending")

    data = _stats(client, bob)

    assert data["defaultStats"] == {"pending": 1, "interview": 0, "declined": 0}
    assert sum(entry["count"] for entry in data["monthlyApplications"]) == 1


def test_month_label():
    assert month_label(2024, 3) == "Mar 2024"
    assert month_label(2023, 12) == "Dec 2023"
