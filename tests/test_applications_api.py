from backend.app.models.application import Application


def _register(client, *, email: str, role: str, name: str = "Test User") -> dict:
    r = client.post(
        "/api/auth/register",
        json={"email": email, "password": "Testpass123!", "role": role, "name": name},
    )
    assert r.status_code == 201, r.text
    return r.json()


def _auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def _create_job(client, token: str, title: str = "QA Engineer") -> dict:
    r = client.post(
        "/api/jobs",
        json={"title": title, "description": "Test all the things.", "company": "Acme", "location": "Berlin"},
        headers=_auth_headers(token),
    )
    assert r.status_code == 201, r.text
    return r.json()


def _setup(client):
    employer = _register(client, email="employer@example.com", role="EMPLOYER", name="Employer")
    seeker = _register(client, email="seeker@example.com", role="JOB_SEEKER", name="Seeker")
    job = _create_job(client, employer["token"])
    return employer, seeker, job


def _apply(client, job_id: int, token: str):
    return client.post(f"/api/jobs/{job_id}/apply", headers=_auth_headers(token))


def test_apply_creates_pending_application(client):
    _, seeker, job = _setup(client)
    r = _apply(client, job["id"], seeker["token"])
    assert r.status_code == 201, r.text
    application = r.json()
    assert application["status"] == "PENDING"
    assert application["job_id"] == job["id"]
    assert application["applicant_id"] == seeker["user"]["id"]
    assert application["applied_at"]


def test_apply_twice_conflicts_and_stores_one_row(client, db_session):
    _, seeker, job = _setup(client)
    assert _apply(client, job["id"], seeker["token"]).status_code == 201

    again = _apply(client, job["id"], seeker["token"])
    assert again.status_code == 400, again.text
    assert "already applied" in again.json()["error"]

    count = (
        db_session.query(Application)
        .filter(Application.job_id == job["id"], Application.applicant_id == seeker["user"]["id"])
        .count()
    )
    assert count == 1


def test_apply_to_missing_job_is_not_found(client):
    seeker = _register(client, email="lonely@example.com", role="JOB_SEEKER")
    assert _apply(client, 999, seeker["token"]).status_code == 404


def test_apply_requires_token(client):
    _, _, job = _setup(client)
    assert client.post(f"/api/jobs/{job['id']}/apply").status_code == 401


def test_list_mine_includes_job_and_employer_newest_first(client):
    employer, seeker, first_job = _setup(client)
    second_job = _create_job(client, employer["token"], title="Second")
    _apply(client, first_job["id"], seeker["token"])
    _apply(client, second_job["id"], seeker["token"])

    r = client.get("/api/applications/me", headers=_auth_headers(seeker["token"]))
    assert r.status_code == 200, r.text
    items = r.json()
    assert [a["job"]["title"] for a in items] == ["Second", "QA Engineer"]
    assert items[0]["job"]["employer"]["email"] == "employer@example.com"
    assert "password" not in str(items)


def test_list_mine_only_shows_callers_applications(client):
    _, seeker, job = _setup(client)
    other = _register(client, email="other-seeker@example.com", role="JOB_SEEKER")
    _apply(client, job["id"], seeker["token"])

    r = client.get("/api/applications/me", headers=_auth_headers(other["token"]))
    assert r.status_code == 200
    assert r.json() == []


def test_withdraw_own_application(client):
    _, seeker, job = _setup(client)
    application = _apply(client, job["id"], seeker["token"]).json()

    r = client.delete(f"/api/applications/{application['id']}", headers=_auth_headers(seeker["token"]))
    assert r.status_code == 204, r.text
    assert client.get("/api/applications/me", headers=_auth_headers(seeker["token"])).json() == []
    # Withdrawn applications can be submitted again.
    assert _apply(client, job["id"], seeker["token"]).status_code == 201


def test_withdraw_someone_elses_application_looks_missing(client):
    employer, seeker, job = _setup(client)
    application = _apply(client, job["id"], seeker["token"]).json()

    r = client.delete(f"/api/applications/{application['id']}", headers=_auth_headers(employer["token"]))
    assert r.status_code == 404, r.text
    missing = client.delete("/api/applications/9999", headers=_auth_headers(seeker["token"]))
    assert missing.status_code == 404
    assert r.json()["error"] == missing.json()["error"]


def test_job_owner_lists_job_applications(client):
    employer, seeker, job = _setup(client)
    _apply(client, job["id"], seeker["token"])

    r = client.get(f"/api/jobs/{job['id']}/applications", headers=_auth_headers(employer["token"]))
    assert r.status_code == 200, r.text
    assert [a["applicant"]["email"] for a in r.json()] == ["seeker@example.com"]

    forbidden = client.get(f"/api/jobs/{job['id']}/applications", headers=_auth_headers(seeker["token"]))
    assert forbidden.status_code == 403


def test_owner_approves_application(client):
    employer, seeker, job = _setup(client)
    application = _apply(client, job["id"], seeker["token"]).json()

    r = client.put(
        f"/api/applications/{application['id']}/status",
        json={"status": "APPROVED"},
        headers=_auth_headers(employer["token"]),
    )
    assert r.status_code == 200, r.text
    assert r.json()["status"] == "APPROVED"


def test_status_values_are_case_insensitive(client):
    employer, seeker, job = _setup(client)
    application = _apply(client, job["id"], seeker["token"]).json()

    r = client.put(
        f"/api/applications/{application['id']}/status",
        json={"status": "rejected"},
        headers=_auth_headers(employer["token"]),
    )
    assert r.status_code == 200, r.text
    assert r.json()["status"] == "REJECTED"


def test_only_job_owner_can_change_status(client):
    _, seeker, job = _setup(client)
    other_employer = _register(client, email="rival@example.com", role="EMPLOYER")
    application = _apply(client, job["id"], seeker["token"]).json()

    for token in (seeker["token"], other_employer["token"]):
        r = client.put(
            f"/api/applications/{application['id']}/status",
            json={"status": "APPROVED"},
            headers=_auth_headers(token),
        )
        assert r.status_code == 403, r.text

    assert client.get("/api/applications/me", headers=_auth_headers(seeker["token"])).json()[0]["status"] == "PENDING"


def test_invalid_status_is_rejected(client):
    employer, seeker, job = _setup(client)
    application = _apply(client, job["id"], seeker["token"]).json()

    r = client.put(
        f"/api/applications/{application['id']}/status",
        json={"status": "HIRED"},
        headers=_auth_headers(employer["token"]),
    )
    assert r.status_code == 400, r.text


def test_decided_application_cannot_change_again(client):
    employer, seeker, job = _setup(client)
    application = _apply(client, job["id"], seeker["token"]).json()
    url = f"/api/applications/{application['id']}/status"
    headers = _auth_headers(employer["token"])

    assert client.put(url, json={"status": "APPROVED"}, headers=headers).status_code == 200
    for status in ("REJECTED", "PENDING", "APPROVED"):
        r = client.put(url, json={"status": status}, headers=headers)
        assert r.status_code == 409, (status, r.text)
        assert r.json()["details"]["status"] == "APPROVED"


def test_pending_to_pending_is_a_no_op(client):
    employer, seeker, job = _setup(client)
    application = _apply(client, job["id"], seeker["token"]).json()

    r = client.put(
        f"/api/applications/{application['id']}/status",
        json={"status": "PENDING"},
        headers=_auth_headers(employer["token"]),
    )
    assert r.status_code == 200, r.text
    assert r.json()["status"] == "PENDING"


def test_status_update_on_missing_application(client):
    employer, _, _ = _setup(client)
    r = client.put(
        "/api/applications/555/status",
        json={"status": "APPROVED"},
        headers=_auth_headers(employer["token"]),
    )
    assert r.status_code == 404


def test_end_to_end_hiring_flow(client):
    employer = _register(client, email="e2e-employer@example.com", role="EMPLOYER", name="Hiring Co")
    job = _create_job(client, employer["token"], title="Data Engineer")
    seeker = _register(client, email="e2e-seeker@example.com", role="JOB_SEEKER", name="Applicant")

    applied = _apply(client, job["id"], seeker["token"])
    assert applied.status_code == 201, applied.text

    dashboard = client.get("/api/employer/jobs", headers=_auth_headers(employer["token"])).json()
    assert len(dashboard) == 1
    applications = dashboard[0]["applications"]
    assert [a["status"] for a in applications] == ["PENDING"]

    approved = client.put(
        f"/api/applications/{applications[0]['id']}/status",
        json={"status": "APPROVED"},
        headers=_auth_headers(employer["token"]),
    )
    assert approved.status_code == 200, approved.text

    mine = client.get("/api/applications/me", headers=_auth_headers(seeker["token"])).json()
    assert len(mine) == 1
    assert mine[0]["status"] == "APPROVED"
    assert mine[0]["job"]["title"] == "Data Engineer"


def test_application_id_beyond_integer_range_is_not_found(client):
    employer, seeker, _ = _setup(client)
    huge = "99999999999999999999999"

    r = client.delete(f"/api/applications/{huge}", headers=_auth_headers(seeker["token"]))
    assert r.status_code == 404, r.text
    r = client.put(
        f"/api/applications/{huge}/status",
        json={"status": "APPROVED"},
        headers=_auth_headers(employer["token"]),
    )
    assert r.status_code == 404, r.text
