from datetime import datetime, timedelta

from fieldservice.domain.locations.service import LocationService
from fieldservice.models import TeamLocation, TeamMember, utcnow

from .conftest import auth_headers_for, make_profile


def test_team_member_records_location(client, test_db, team_member, team_headers):
    response = client.post(
        "/team-locations",
        json={"latitude": 51.5074, "longitude": -0.1278, "accuracy": 12.5},
        headers=team_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"]["team_member_id"] == team_member.id
    assert body["data"]["accuracy"] == 12.5
    assert test_db.query(TeamLocation).count() == 1


def test_record_location_validation(client, team_member, team_headers):
    bad_payloads = [
        {"latitude": 91, "longitude": 0},
        {"latitude": 0, "longitude": -181},
        {"latitude": "51.5", "longitude": 0},
        {"longitude": 0},
        {"latitude": 0, "longitude": 0, "accuracy": -1},
    ]
    for payload in bad_payloads:
        response = client.post("/team-locations", json=payload, headers=team_headers)
        assert response.status_code == 400, payload


def test_record_location_roles(client, test_db, customer_headers, team_headers):
    assert (
        client.post("/team-locations", json={"latitude": 1.0, "longitude": 1.0}, headers=customer_headers).status_code
        == 403
    )
    # Team role without a team member record
    response = client.post("/team-locations", json={"latitude": 1.0, "longitude": 1.0}, headers=team_headers)
    assert response.status_code == 404
    assert response.json()["error"] == "Team member record not found"


def test_latest_location_is_idempotent(client, test_db, team_member, manager_headers):
    now = utcnow()
    test_db.add_all(
        [
            TeamLocation(team_member_id=team_member.id, latitude=1, longitude=1, timestamp=now - timedelta(minutes=5)),
            TeamLocation(team_member_id=team_member.id, latitude=2, longitude=2, timestamp=now),
        ]
    )
    test_db.commit()

    first = client.get(f"/team-locations?teamMemberId={team_member.id}", headers=manager_headers)
    second = client.get(f"/team-locations?teamMemberId={team_member.id}", headers=manager_headers)

    assert first.status_code == 200
    assert first.json() == second.json()
    assert first.json()["location"]["latitude"] == 2


def test_latest_location_without_samples_is_null(client, team_member, manager_headers):
    response = client.get(f"/team-locations?teamMemberId={team_member.id}", headers=manager_headers)
    assert response.json() == {"location": None}


def test_latest_location_other_company_is_forbidden(
    client, test_db, other_company, team_member, admin_headers
):
    rival_manager = make_profile(test_db, "manager", other_company, "Rival Manager")

    response = client.get(
        f"/team-locations?teamMemberId={team_member.id}", headers=auth_headers_for(rival_manager)
    )
    assert response.status_code == 403

    # Admins are not bound to a company
    assert client.get(f"/team-locations?teamMemberId={team_member.id}", headers=admin_headers).status_code == 200


def test_latest_location_unknown_member(client, manager_headers):
    response = client.get("/team-locations?teamMemberId=missing", headers=manager_headers)
    assert response.status_code == 404


def test_company_locations_one_entry_per_member(client, test_db, company, team_member, manager_headers):
    idle_profile = make_profile(test_db, "team", company, "Idle Ivan")
    idle = TeamMember(company_id=company.id, profile_id=idle_profile.id)
    test_db.add(idle)
    now = utcnow()
    test_db.add_all(
        [
            TeamLocation(team_member_id=team_member.id, latitude=1, longitude=1, timestamp=now - timedelta(minutes=1)),
            TeamLocation(team_member_id=team_member.id, latitude=3, longitude=3, timestamp=now),
        ]
    )
    test_db.commit()

    response = client.get("/team-locations", headers=manager_headers)

    assert response.status_code == 200
    entries = {e["teamMember"]["name"]: e["location"] for e in response.json()["locations"]}
    assert entries["Idle Ivan"] is None
    assert entries["Tom Team"]["latitude"] == 3


def test_company_locations_for_other_company_forbidden(client, other_company, manager_headers):
    response = client.get(f"/team-locations?companyId={other_company.id}", headers=manager_headers)
    assert response.status_code == 403


def test_customers_cannot_read_locations(client, team_member, customer_headers):
    response = client.get(f"/team-locations?teamMemberId={team_member.id}", headers=customer_headers)
    assert response.status_code == 403


def test_location_history_window(client, test_db, team_member, manager_headers):
    base = datetime(2026, 1, 1, 12, 0, 0)
    for minutes in (0, 10, 20):
        test_db.add(
            TeamLocation(
                team_member_id=team_member.id,
                latitude=minutes,
                longitude=0,
                timestamp=base + timedelta(minutes=minutes),
            )
        )
    test_db.commit()

    response = client.get(
        "/team-locations/history",
        params={
            "teamMemberId": team_member.id,
            "start": (base + timedelta(minutes=5)).isoformat(),
            "end": (base + timedelta(minutes=25)).isoformat(),
        },
        headers=manager_headers,
    )

    assert response.status_code == 200
    assert [loc["latitude"] for loc in response.json()["locations"]] == [10, 20]


def test_team_member_deletes_own_history(client, test_db, team_member, team_headers, company):
    test_db.add(TeamLocation(team_member_id=team_member.id, latitude=1, longitude=1))
    test_db.add(TeamLocation(team_member_id=team_member.id, latitude=2, longitude=2))
    other_profile = make_profile(test_db, "team", company, "Other Team")
    other = TeamMember(company_id=company.id, profile_id=other_profile.id)
    test_db.add(other)
    test_db.commit()

    response = client.delete(f"/team-locations?teamMemberId={team_member.id}", headers=team_headers)
    assert response.json() == {"success": True, "deleted": 2}

    response = client.delete(f"/team-locations?teamMemberId={other.id}", headers=team_headers)
    assert response.status_code == 403


def test_delete_history_requires_team_member_id(client, manager_headers):
    assert client.delete("/team-locations", headers=manager_headers).status_code == 400


def test_privacy_settings_round_trip(client, team_headers):
    response = client.get("/team-locations/privacy", headers=team_headers)
    assert response.json() == {
        "settings": {"trackingEnabled": False, "shareAccuracy": True, "trackOnlyDuringShift": True}
    }

    settings = {"trackingEnabled": True, "shareAccuracy": False, "trackOnlyDuringShift": False}
    response = client.put("/team-locations/privacy", json=settings, headers=team_headers)
    assert response.json() == {"settings": settings}
    assert client.get("/team-locations/privacy", headers=team_headers).json() == {"settings": settings}


def test_privacy_settings_require_all_booleans(client, team_headers):
    response = client.put(
        "/team-locations/privacy", json={"trackingEnabled": "yes", "shareAccuracy": True}, headers=team_headers
    )
    assert response.status_code == 400


def test_purge_removes_only_stale_samples(test_db, team_member):
    now = utcnow()
    test_db.add_all(
        [
            TeamLocation(team_member_id=team_member.id, latitude=1, longitude=1, timestamp=now - timedelta(days=45)),
            TeamLocation(team_member_id=team_member.id, latitude=2, longitude=2, timestamp=now - timedelta(days=1)),
        ]
    )
    test_db.commit()

    assert LocationService(test_db).purge_older_than(30) == 1
    assert [loc.latitude for loc in test_db.query(TeamLocation).all()] == [2]
