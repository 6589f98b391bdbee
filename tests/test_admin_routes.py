from conftest import register, signup


def test_roles_listed(client, student):
    _, headers = student
    assert client.get("/api/admin/roles", headers=headers).json()["data"] == [
        "admin", "faculty", "recruiter", "student"
    ]


def test_list_users_admin_only(client, admin, student):
    _, stu_headers = student
    assert client.get("/api/admin/users", headers=stu_headers).status_code == 403

    _, admin_headers = admin
    body = client.get("/api/admin/users", headers=admin_headers).json()
    assert body["pagination"]["total"] == 2

    students = client.get("/api/admin/users?role=student", headers=admin_headers).json()
    assert [u["name"] for u in students["data"]] == ["Sam Student"]
    assert students["data"][0]["studentProfile"]["gpa"] == 3.5


def test_role_change_takes_effect_with_existing_token(client, admin):
    user, headers = signup(client, "student", name="Switching User")
    assert client.post("/api/postings", json={}, headers=headers).status_code == 403

    _, admin_headers = admin
    response = client.patch(f"/api/admin/users/{user['id']}/role", json={"roleId": "Recruiter"},
                            headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["data"]["role"] == "recruiter"

    assert client.get("/api/auth/me", headers=headers).json()["data"]["role"] == "recruiter"


def test_role_change_unknown_user(client, admin):
    _, headers = admin
    response = client.patch("/api/admin/users/999/role", json={"roleId": "faculty"}, headers=headers)
    assert response.status_code == 404


def test_student_profile_edit_rules(client, faculty, recruiter):
    stu = register(client, "student", name="Pat Student")
    _, fac_headers = faculty
    url = f"/api/users/{stu['id']}/student-profile"

    ok = client.put(url, json={"gpa": 3.1, "gradYear": 2026, "departmentId": 2}, headers=fac_headers)
    assert ok.status_code == 200
    assert ok.json()["data"]["studentProfile"] == {
        "gpa": 3.1, "gradYear": 2026, "departmentId": 2, "program": None, "hasAcceptedOffer": False,
    }

    bad_dept = client.put(url, json={"gpa": 3.1, "gradYear": 2026, "departmentId": 99}, headers=fac_headers)
    assert bad_dept.json() == {"message": "Department not found"}

    rec, rec_headers = recruiter
    assert client.put(url, json={"gpa": 4.0, "gradYear": 2026}, headers=rec_headers).status_code == 403
    not_student = client.put(f"/api/users/{rec['id']}/student-profile",
                             json={"gpa": 4.0, "gradYear": 2026}, headers=fac_headers)
    assert not_student.status_code == 400


def test_accepted_offer_flag_not_client_settable(client, student):
    user, headers = student
    response = client.put(f"/api/users/{user['id']}/student-profile",
                          json={"gpa": 3.5, "gradYear": 2025, "hasAcceptedOffer": True}, headers=headers)
    assert response.json()["data"]["studentProfile"]["hasAcceptedOffer"] is False


def test_admin_signup_can_be_disabled(client, monkeypatch):
    from placement_portal.api.routes import auth_routes

    monkeypatch.setattr(auth_routes.settings, "allow_admin_signup", False)
    response = client.post("/api/auth/register", json={
        "name": "Mallory", "email": "mallory@example.edu", "password": "long-enough", "role": "admin",
    })
    assert response.status_code == 403


class TestReferenceData:

    def test_seeded_defaults(self, client):
        assert [d["name"] for d in client.get("/api/departments").json()["data"]] == [
            "Computer Science", "Electrical Engineering"
        ]
        assert [s["name"] for s in client.get("/api/skills").json()["data"]] == ["JavaScript", "React", "Node.js"]

    def test_admin_adds_skill(self, client, admin):
        _, headers = admin
        response = client.post("/api/skills", json={"name": "Python"}, headers=headers)
        assert response.status_code == 201
        assert response.json()["data"] == {"id": 4, "name": "Python"}

    def test_duplicate_name_is_rejected(self, client, admin):
        _, headers = admin
        response = client.post("/api/departments", json={"name": "Computer Science"}, headers=headers)
        assert response.status_code == 400

    def test_non_admin_cannot_add(self, client, faculty):
        _, headers = faculty
        assert client.post("/api/skills", json={"name": "Rust"}, headers=headers).status_code == 403
