from datetime import datetime, timezone

from conftest import posting_payload, signup


def instant(value):
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    assert parsed.tzinfo is not None, value
    return parsed


def test_create_and_fetch_round_trip(client, recruiter):
    user, headers = recruiter
    payload = posting_payload(salary="80k", deadline="2030-06-01T12:00:00+05:30", location="Pune")
    response = client.post("/api/postings", json=payload, headers=headers)
    assert response.status_code == 201
    created = response.json()["data"]
    assert created["recruiterId"] == user["id"]

    fetched = client.get(f"/api/postings/{created['id']}").json()["data"]
    assert fetched == created
    for key, value in payload.items():
        if key == "deadline":
            assert instant(fetched[key]) == instant(value)
        else:
            assert fetched[key] == value, key
    assert instant(fetched["deadline"]) == datetime(2030, 6, 1, 6, 30, tzinfo=timezone.utc)


def test_timestamps_carry_utc_offset(client, posting):
    for key in ("deadline", "createdAt", "updatedAt"):
        assert instant(posting[key]).utcoffset().total_seconds() == 0


def test_update_deadline_keeps_instant(client, recruiter, posting):
    _, headers = recruiter
    response = client.put(f"/api/postings/{posting['id']}",
                          json={"deadline": "2031-01-15T18:00:00-05:00"}, headers=headers)
    assert instant(response.json()["data"]["deadline"]) == datetime(2031, 1, 15, 23, 0, tzinfo=timezone.utc)


def test_recruiter_id_in_body_is_ignored_for_recruiters(client, recruiter):
    user, headers = recruiter
    other, _ = signup(client, "recruiter", name="Other Recruiter")
    response = client.post("/api/postings", json=posting_payload(recruiterId=other["id"]), headers=headers)
    assert response.json()["data"]["recruiterId"] == user["id"]


def test_admin_must_name_a_recruiter(client, admin, recruiter):
    _, admin_headers = admin
    rec, _ = recruiter
    missing = client.post("/api/postings", json=posting_payload(), headers=admin_headers)
    assert missing.status_code == 400

    ok = client.post("/api/postings", json=posting_payload(recruiterId=rec["id"]), headers=admin_headers)
    assert ok.status_code == 201
    assert ok.json()["data"]["recruiterId"] == rec["id"]


def test_students_cannot_create(client, student):
    _, headers = student
    response = client.post("/api/postings", json=posting_payload(), headers=headers)
    assert response.status_code == 403


def test_unknown_skill_rejected(client, recruiter):
    _, headers = recruiter
    response = client.post("/api/postings", json=posting_payload(requiredSkills=[1, 99]), headers=headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Unknown skill id(s): 99"


def test_grad_years_required(client, recruiter):
    _, headers = recruiter
    payload = posting_payload(eligibility={"minGpa": 2.0, "gradYear": []})
    assert client.post("/api/postings", json=payload, headers=headers).status_code == 400


def test_get_missing_posting(client):
    response = client.get("/api/postings/999")
    assert response.status_code == 404
    assert response.json() == {"message": "Posting not found"}


def test_list_filters_and_paginates(client, recruiter):
    _, headers = recruiter
    client.post("/api/postings", json=posting_payload(title="Data Intern", type="internship",
                                                      location="Berlin", requiredSkills=[3]), headers=headers)
    client.post("/api/postings", json=posting_payload(title="Backend Engineer"), headers=headers)
    client.post("/api/postings", json=posting_payload(title="Closed Role", status="closed"), headers=headers)

    body = client.get("/api/postings").json()
    assert [p["title"] for p in body["data"]] == ["Backend Engineer", "Data Intern"]
    assert body["pagination"] == {"page": 1, "limit": 10, "total": 2, "totalPages": 1}

    assert [p["title"] for p in client.get("/api/postings?remoteOnly=true").json()["data"]] == ["Backend Engineer"]
    assert [p["title"] for p in client.get("/api/postings?type=internship").json()["data"]] == ["Data Intern"]
    assert [p["title"] for p in client.get("/api/postings?skill=3").json()["data"]] == ["Data Intern"]
    assert [p["title"] for p in client.get("/api/postings?search=acme").json()["data"]] == [
        "Backend Engineer", "Data Intern"
    ]

    page2 = client.get("/api/postings?limit=1&page=2").json()
    assert [p["title"] for p in page2["data"]] == ["Data Intern"]
    assert page2["pagination"]["totalPages"] == 2

    assert client.get("/api/postings?page=5").json()["data"] == []


def test_limit_is_capped(client):
    assert client.get("/api/postings?limit=1000").json()["pagination"]["limit"] == 100


def test_update_is_partial(client, recruiter, posting):
    _, headers = recruiter
    response = client.put(f"/api/postings/{posting['id']}", json={"title": "Senior Engineer"}, headers=headers)
    assert response.status_code == 200
    updated = response.json()["data"]
    assert updated["title"] == "Senior Engineer"
    assert updated["company"] == posting["company"]
    assert updated["eligibility"] == posting["eligibility"]
    assert updated["requiredSkills"] == posting["requiredSkills"]


def test_update_replaces_eligibility_and_skills(client, recruiter, posting):
    _, headers = recruiter
    response = client.put(f"/api/postings/{posting['id']}", json={
        "eligibility": {"minGpa": 3.5, "gradYear": [2027]}, "requiredSkills": [3],
    }, headers=headers)
    updated = response.json()["data"]
    assert updated["eligibility"] == {"minGpa": 3.5, "gradYear": [2027]}
    assert updated["requiredSkills"] == [3]


def test_update_null_clears_salary_only(client, recruiter):
    _, headers = recruiter
    created = client.post("/api/postings", json=posting_payload(salary="80k"), headers=headers).json()["data"]
    response = client.put(f"/api/postings/{created['id']}", json={"salary": None, "title": None}, headers=headers)
    assert response.status_code == 200
    updated = response.json()["data"]
    assert updated["salary"] is None
    assert updated["title"] == created["title"]


def test_only_owner_or_admin_may_change(client, posting, admin):
    _, other_headers = signup(client, "recruiter", name="Other Recruiter")
    url = f"/api/postings/{posting['id']}"
    assert client.put(url, json={"title": "Mine now"}, headers=other_headers).status_code == 403
    assert client.delete(url, headers=other_headers).status_code == 403

    _, admin_headers = admin
    assert client.put(url, json={"status": "Closed"}, headers=admin_headers).status_code == 200


def test_delete_keeps_applications(client, recruiter, posting, student):
    _, rec_headers = recruiter
    _, stu_headers = student
    applied = client.post("/api/applications", json={"postingId": posting["id"]}, headers=stu_headers)
    assert applied.status_code == 201

    response = client.delete(f"/api/postings/{posting['id']}", headers=rec_headers)
    assert response.status_code == 200
    assert response.json()["data"]["id"] == posting["id"]
    assert client.get(f"/api/postings/{posting['id']}").status_code == 404

    mine = client.get("/api/applications", headers=stu_headers).json()["data"]
    assert [a["postingId"] for a in mine] == [posting["id"]]


def test_eligibility_endpoint(client, posting, student, recruiter):
    _, stu_headers = student
    response = client.get(f"/api/postings/{posting['id']}/eligibility", headers=stu_headers)
    assert response.json()["data"] == {"allowed": True, "reason": ""}

    _, rec_headers = recruiter
    response = client.get(f"/api/postings/{posting['id']}/eligibility", headers=rec_headers)
    assert response.json()["data"] == {"allowed": False, "reason": "Not a student."}
