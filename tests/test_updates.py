from fieldservice.models import Job, JobUpdate, Notification

from .conftest import make_profile, auth_headers_for


def test_team_member_completes_job_through_updates(
    client, test_db, assigned_job, team_headers, manager_headers
):
    started = client.post(
        f"/jobs/{assigned_job.id}/updates",
        json={"status": "in-progress", "notes": "Arrived on site"},
        headers=team_headers,
    )
    assert started.status_code == 201

    response = client.post(
        f"/jobs/{assigned_job.id}/updates",
        json={
            "status": "completed",
            "notes": "All done",
            "photos": ["https://cdn.example.com/a.jpg", "https://cdn.example.com/b.jpg"],
        },
        headers=team_headers,
    )

    assert response.status_code == 201
    update = response.json()["update"]
    assert update["status"] == "completed"
    assert update["photos"] == ["https://cdn.example.com/a.jpg", "https://cdn.example.com/b.jpg"]
    assert update["author"]["full_name"] == "Tom Team"

    job = client.get(f"/jobs/{assigned_job.id}", headers=team_headers).json()["job"]
    assert job["status"] == "completed"

    edit = client.put(
        f"/jobs/{assigned_job.id}", json={"scheduled_date": "2999-01-01"}, headers=manager_headers
    )
    assert edit.status_code == 400
    assert edit.json()["error"] == "Cannot modify a completed job"


def test_update_with_illegal_transition_writes_nothing(client, test_db, assigned_job, team_headers):
    response = client.post(
        f"/jobs/{assigned_job.id}/updates",
        json={"status": "completed", "notes": "Skipping ahead"},
        headers=team_headers,
    )

    assert response.status_code == 400
    test_db.expire_all()
    assert test_db.query(JobUpdate).count() == 0
    assert test_db.get(Job, assigned_job.id).status == "scheduled"


def test_update_stores_location_as_point(client, test_db, assigned_job, team_headers):
    response = client.post(
        f"/jobs/{assigned_job.id}/updates",
        json={"notes": "On my way", "location": {"latitude": 40.7128, "longitude": -74.006}},
        headers=team_headers,
    )

    assert response.status_code == 201
    assert response.json()["update"]["location"] == {"latitude": 40.7128, "longitude": -74.006}
    assert test_db.query(JobUpdate).one().location == "POINT(-74.006 40.7128)"


def test_update_requires_notes(client, assigned_job, team_headers):
    response = client.post(
        f"/jobs/{assigned_job.id}/updates", json={"notes": "   "}, headers=team_headers
    )
    assert response.status_code == 400


def test_update_rejects_non_url_photos(client, assigned_job, team_headers):
    response = client.post(
        f"/jobs/{assigned_job.id}/updates",
        json={"notes": "pics", "photos": ["not a url"]},
        headers=team_headers,
    )
    assert response.status_code == 400


def test_customers_cannot_post_updates(client, assigned_job, customer_headers):
    response = client.post(
        f"/jobs/{assigned_job.id}/updates", json={"notes": "hello"}, headers=customer_headers
    )
    assert response.status_code == 403


def test_unassigned_team_member_gets_not_found(client, test_db, job, company):
    stranger = make_profile(test_db, "team", company, "Stranger Team")

    response = client.post(
        f"/jobs/{job.id}/updates", json={"notes": "hi"}, headers=auth_headers_for(stranger)
    )

    assert response.status_code == 404
    assert response.json()["error"] == "Job not found or access denied"


def test_update_notifies_customer_and_manager_but_not_author(
    client, test_db, assigned_job, team_headers, customer_profile, manager, manager_headers
):
    client.post(f"/jobs/{assigned_job.id}/updates", json={"notes": "Halfway"}, headers=team_headers)

    recipients = {n.user_id for n in test_db.query(Notification).all()}
    assert recipients == {customer_profile.id, manager.id}
    assert all("Halfway" in n.message for n in test_db.query(Notification).all())

    test_db.query(Notification).delete()
    test_db.commit()

    client.post(f"/jobs/{assigned_job.id}/updates", json={"notes": "Checked"}, headers=manager_headers)
    recipients = [n.user_id for n in test_db.query(Notification).all()]
    assert recipients == [customer_profile.id]


def test_list_updates_newest_first(client, assigned_job, team_headers, customer_headers):
    for note in ("first", "second"):
        client.post(f"/jobs/{assigned_job.id}/updates", json={"notes": note}, headers=team_headers)

    response = client.get(f"/jobs/{assigned_job.id}/updates", headers=customer_headers)

    assert response.status_code == 200
    assert [u["notes"] for u in response.json()["updates"]] == ["second", "first"]
