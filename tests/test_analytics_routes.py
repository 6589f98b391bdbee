import csv
import io

from conftest import posting_payload, signup


def apply(client, headers, posting_id):
    response = client.post("/api/applications", json={"postingId": posting_id}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]["id"]


def move(client, headers, application_id, status):
    response = client.patch(f"/api/applications/{application_id}/status", json={"status": status}, headers=headers)
    assert response.status_code == 200, response.text


def test_analytics_restricted_to_faculty_and_admin(client, student, recruiter):
    for _, headers in (student, recruiter):
        assert client.get("/api/analytics/funnel", headers=headers).status_code == 403
    assert client.get("/api/analytics/funnel").status_code == 401


def test_funnel_and_velocity(client, recruiter, posting, student, faculty):
    _, rec_headers = recruiter
    _, stu_headers = student
    app_id = apply(client, stu_headers, posting["id"])
    move(client, rec_headers, app_id, "UNDER_REVIEW")

    _, fac_headers = faculty
    funnel = client.get("/api/analytics/funnel", headers=fac_headers).json()["data"]
    assert funnel == [{"stage": "UNDER_REVIEW", "count": 1}]

    velocity = client.get("/api/analytics/pipeline-velocity", headers=fac_headers).json()["data"]
    assert [v["stage"] for v in velocity] == ["APPLIED to UNDER_REVIEW"]
    assert velocity[0]["days"] == 0.0


def test_skills_demand_counts_all_postings(client, recruiter, admin):
    _, rec_headers = recruiter
    client.post("/api/postings", json=posting_payload(requiredSkills=[2, 3]), headers=rec_headers)
    client.post("/api/postings", json=posting_payload(requiredSkills=[3], status="Closed"), headers=rec_headers)

    _, headers = admin
    data = client.get("/api/analytics/skills-demand", headers=headers).json()["data"]
    assert data == [
        {"skillId": 3, "skill": "Node.js", "count": 2},
        {"skillId": 2, "skill": "React", "count": 1},
    ]


def test_export_csv(client, posting, student, admin):
    user, stu_headers = student
    app_id = apply(client, stu_headers, posting["id"])

    _, headers = admin
    response = client.get("/api/analytics/export", headers=headers)
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert response.headers["content-disposition"] == "attachment; filename=applications_report.csv"

    rows = list(csv.reader(io.StringIO(response.text)))
    assert rows[0][0] == "Application ID"
    assert rows[1][:6] == [str(app_id), "Sam Student", user["email"], "Computer Science", "2025", "3.5"]
    assert rows[1][6:9] == ["Backend Engineer", "Acme", "APPLIED"]


class TestDashboards:

    def test_student_dashboard(self, client, recruiter, posting, student):
        _, rec_headers = recruiter
        user, headers = student
        first = apply(client, headers, posting["id"])
        second_posting = client.post("/api/postings", json=posting_payload(title="Second"),
                                     headers=rec_headers).json()["data"]
        apply(client, headers, second_posting["id"])
        for status in ("UNDER_REVIEW", "INTERVIEW", "OFFERED"):
            move(client, rec_headers, first, status)

        data = client.get(f"/api/student/{user['id']}/dashboard", headers=headers).json()["data"]
        assert data == {
            "studentId": user["id"],
            "applications": 2,
            "acceptedOffers": 0,
            "hasAcceptedOffer": False,
            "progress": {"pending": 1, "underReview": 0, "offers": 1},
        }

    def test_recruiter_dashboard(self, client, recruiter, posting, student):
        rec, rec_headers = recruiter
        client.post("/api/postings", json=posting_payload(status="Closed"), headers=rec_headers)
        _, stu_headers = student
        apply(client, stu_headers, posting["id"])

        data = client.get(f"/api/recruiter/{rec['id']}/dashboard", headers=rec_headers).json()["data"]
        assert data == {
            "recruiterId": rec["id"],
            "activePostings": 1,
            "totalPostings": 2,
            "applicationsReceived": 1,
            "applicationsByStatus": [{"stage": "APPLIED", "count": 1}],
        }

    def test_faculty_dashboard(self, client, faculty, student):
        _, stu_headers = student
        client.post("/api/verification-docs", json={
            "type": "resume", "documentName": "cv.pdf", "url": "https://files.example.edu/cv.pdf",
        }, headers=stu_headers)

        fac, headers = faculty
        data = client.get(f"/api/faculty/{fac['id']}/dashboard", headers=headers).json()["data"]
        assert data == {
            "facultyId": fac["id"],
            "pendingDocuments": 1,
            "verifiedDocuments": 0,
            "rejectedDocuments": 0,
            "students": 1,
        }

    def test_dashboards_are_self_or_admin(self, client, student, admin):
        user, _ = student
        _, other_headers = signup(client, "student", name="Other Student")
        assert client.get(f"/api/student/{user['id']}/dashboard", headers=other_headers).status_code == 403

        _, admin_headers = admin
        assert client.get(f"/api/student/{user['id']}/dashboard", headers=admin_headers).status_code == 200
        assert client.get(f"/api/faculty/{user['id']}/dashboard", headers=admin_headers).status_code == 404
