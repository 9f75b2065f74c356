from unittest.mock import patch

from fieldservice.domain.assignments.repository import AssignmentRepository
from fieldservice.models import JobAssignment, Notification, TeamMember

from .conftest import auth_headers_for, make_profile


def test_manager_assigns_team_member_then_duplicate_conflicts(
    client, test_db, job, team_member, team_profile, manager_headers, manager
):
    payload = {"team_member_id": team_member.id, "role": "cleaner"}

    response = client.post(f"/jobs/{job.id}/assignments", json=payload, headers=manager_headers)

    assert response.status_code == 201
    assignment = response.json()["assignment"]
    assert assignment["role"] == "cleaner"
    assert assignment["assigned_by"] == manager.id
    assert assignment["team_member"]["full_name"] == "Tom Team"

    notification = test_db.query(Notification).one()
    assert notification.user_id == team_profile.id
    assert notification.title == "New Job Assignment"
    assert notification.type == "job_assigned"

    response = client.post(f"/jobs/{job.id}/assignments", json=payload, headers=manager_headers)

    assert response.status_code == 400
    assert response.json()["error"] == "Team member is already assigned to this job"
    assert test_db.query(JobAssignment).count() == 1


def test_assignment_requires_privileged_role(client, job, team_member, team_headers, customer_headers):
    payload = {"team_member_id": team_member.id}
    assert client.post(f"/jobs/{job.id}/assignments", json=payload, headers=team_headers).status_code == 403
    assert (
        client.post(f"/jobs/{job.id}/assignments", json=payload, headers=customer_headers).status_code
        == 403
    )


def test_inactive_team_member_is_not_found(client, test_db, job, team_member, manager_headers):
    team_member.is_active = False
    test_db.commit()

    response = client.post(
        f"/jobs/{job.id}/assignments", json={"team_member_id": team_member.id}, headers=manager_headers
    )

    assert response.status_code == 404


def test_cannot_assign_to_terminal_job(client, test_db, job, team_member, manager_headers):
    job.status = "completed"
    test_db.commit()

    response = client.post(
        f"/jobs/{job.id}/assignments", json={"team_member_id": team_member.id}, headers=manager_headers
    )

    assert response.status_code == 400
    assert test_db.query(JobAssignment).count() == 0


def test_invalid_role_is_rejected(client, job, team_member, manager_headers):
    response = client.post(
        f"/jobs/{job.id}/assignments",
        json={"team_member_id": team_member.id, "role": "boss"},
        headers=manager_headers,
    )
    assert response.status_code == 400


def test_list_assignments_flattens_team_member(
    client, assigned_job, team_headers, customer_headers, test_db, company
):
    response = client.get(f"/jobs/{assigned_job.id}/assignments", headers=team_headers)

    assert response.status_code == 200
    [assignment] = response.json()["assignments"]
    assert assignment["team_member"]["employee_id"] == "EMP-1"
    assert assignment["team_member"]["email"] == "tom.team@example.com"

    assert client.get(f"/jobs/{assigned_job.id}/assignments", headers=customer_headers).status_code == 200


def test_list_team_members(client, test_db, company, team_member, manager_headers, team_headers):
    inactive_profile = make_profile(test_db, "team", company, "Idle Ivan")
    test_db.add(TeamMember(company_id=company.id, profile_id=inactive_profile.id, is_active=False))
    active_profile = make_profile(test_db, "team", company, "Alice Active")
    test_db.add(TeamMember(company_id=company.id, profile_id=active_profile.id))
    test_db.commit()

    response = client.get("/team-members", headers=manager_headers)

    assert response.status_code == 200
    names = [tm["full_name"] for tm in response.json()["teamMembers"]]
    assert names == ["Alice Active", "Tom Team"]

    assert client.get("/team-members", headers=team_headers).status_code == 403


def test_duplicate_insert_race_is_reported_as_conflict(client, test_db, job, team_member, manager_headers):
    payload = {"team_member_id": team_member.id, "role": "cleaner"}
    assert client.post(f"/jobs/{job.id}/assignments", json=payload, headers=manager_headers).status_code == 201

    # A concurrent request that passed the existence check hits the unique constraint
    with patch.object(AssignmentRepository, "get_assignment", return_value=None):
        response = client.post(f"/jobs/{job.id}/assignments", json=payload, headers=manager_headers)

    assert response.status_code == 400
    assert response.json()["error"] == "Team member is already assigned to this job"
    assert test_db.query(JobAssignment).count() == 1


def test_team_member_from_another_company_cannot_be_assigned(
    client, test_db, job, other_company, manager_headers, admin_headers
):
    outsider = make_profile(test_db, "team", other_company, "Rita Rival")
    foreign_member = TeamMember(company_id=other_company.id, profile_id=outsider.id)
    test_db.add(foreign_member)
    test_db.commit()

    payload = {"team_member_id": foreign_member.id}
    for headers in (manager_headers, admin_headers):
        response = client.post(f"/jobs/{job.id}/assignments", json=payload, headers=headers)
        assert response.status_code == 404
        assert response.json()["error"] == "Team member not found or inactive"

    assert test_db.query(JobAssignment).count() == 0
    assert test_db.query(Notification).count() == 0


def test_manager_of_another_company_cannot_assign(client, test_db, job, team_member, other_company):
    rival_manager = make_profile(test_db, "manager", other_company, "Rex Rival")

    response = client.post(
        f"/jobs/{job.id}/assignments",
        json={"team_member_id": team_member.id},
        headers=auth_headers_for(rival_manager),
    )

    assert response.status_code == 404
    assert response.json()["error"] == "Job not found"
    assert test_db.query(JobAssignment).count() == 0
