from decimal import Decimal


def _setup_student_with_lessons(client, lessons=4):
    student = client.post("/api/v1/students", json={"full_name": "  Anna Petrova ", "email": ""}).json()
    course = client.post("/api/v1/courses", json={
        "name": "English B1",
        "type": "group",
        "lesson_price": "10",
        "schedule_days": [3, 1],
    }).json()
    enrollment = client.post("/api/v1/enrollments", json={
        "student_id": student["id"],
        "course_id": course["id"],
        "billing_mode": "per_lesson",
    }).json()
    client.put("/api/v1/attendance/count", json={
        "enrollment_id": enrollment["id"], "year": 2024, "month": 3, "count": lessons,
    })
    return student, course, enrollment


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_student_and_course_crud(client):
    student, course, enrollment = _setup_student_with_lessons(client)
    assert student["full_name"] == "Anna Petrova"
    assert course["schedule_days"] == [1, 3]
    assert enrollment["student_name"] == "Anna Petrova"
    assert enrollment["course_name"] == "English B1"

    response = client.put(f"/api/v1/courses/{course['id']}", json={"lesson_price": "12"})
    assert Decimal(response.json()["lesson_price"]) == Decimal("12")

    assert client.get("/api/v1/students/9999").status_code == 404
    bad = client.post("/api/v1/courses", json={"name": "X", "schedule_days": [9]})
    assert bad.status_code == 422


def test_attendance_sheet_and_lock(client):
    _, course, enrollment = _setup_student_with_lessons(client, lessons=2)

    rows = client.get("/api/v1/attendance", params={"year": 2024, "month": 3}).json()
    assert rows[0]["count"] == 2
    assert rows[0]["hint"] == 8

    locked = client.post("/api/v1/attendance/lock", json={"year": 2024, "month": 3, "course_id": course["id"]})
    assert locked.json()["result"] == {"records": 1, "locked": True}

    response = client.put("/api/v1/attendance/count", json={
        "enrollment_id": enrollment["id"], "year": 2024, "month": 3, "count": 5,
    })
    assert response.status_code == 409
    body = response.json()
    assert body["error"] == "LockedPeriod"
    assert body["notice"]["level"] == "warning"

    increment = client.post("/api/v1/attendance/increment", json={"year": 2024, "month": 3})
    assert increment.json()["result"]["skipped_locked"] == [enrollment["id"]]
    assert increment.json()["notice"]["level"] == "warning"


def test_billing_flow_over_http(client, renderer):
    student, _, _ = _setup_student_with_lessons(client)

    generated = client.post("/api/v1/invoices/generate", json={"year": 2024, "month": 3}).json()
    assert generated["result"]["created"] == 1
    assert "1 created" in generated["notice"]["message"]

    drafts = client.get("/api/v1/invoices", params={"year": 2024, "month": 3}).json()
    assert len(drafts) == 1
    invoice_id = drafts[0]["id"]
    assert Decimal(drafts[0]["total"]) == Decimal("40")

    issued = client.post(f"/api/v1/invoices/{invoice_id}/issue")
    assert issued.status_code == 200
    number = issued.json()["result"]["number"]
    assert number == "LS-202403-001"
    assert renderer.rendered == [number]

    again = client.post(f"/api/v1/invoices/{invoice_id}/issue")
    assert again.status_code == 409
    assert again.json()["error"] == "NotDraft"

    paid = client.post("/api/v1/payments", json={
        "student_id": student["id"], "invoice_id": invoice_id, "amount": "25", "method": "cash",
    })
    assert paid.status_code == 201
    summary = client.get(f"/api/v1/invoices/{invoice_id}/summary").json()
    assert Decimal(summary["remaining"]) == Decimal("15")
    assert summary["status"] == "issued"

    debtors = client.get("/api/v1/payments/debtors").json()
    assert [(d["student_name"], Decimal(d["debt"])) for d in debtors] == [("Anna Petrova", Decimal("15"))]

    balance = client.get(f"/api/v1/students/{student['id']}/balance").json()
    assert Decimal(balance["debt"]) == Decimal("15")

    detail = client.get(f"/api/v1/invoices/{invoice_id}").json()
    assert detail["lines"][0]["qty"] == 4


def test_error_mapping(client, renderer):
    student, course, enrollment = _setup_student_with_lessons(client)

    invalid = client.post("/api/v1/payments", json={
        "student_id": student["id"], "amount": "0", "method": "cash",
    })
    assert invalid.status_code == 422
    assert invalid.json()["error"] == "InvalidAmount"

    conflict = client.delete(f"/api/v1/courses/{course['id']}")
    assert conflict.status_code == 409
    assert conflict.json()["blockers"] == ["1 enrollment(s)"]

    client.post("/api/v1/invoices/generate", json={"year": 2024, "month": 3})
    invoice_id = client.get("/api/v1/invoices", params={"year": 2024, "month": 3}).json()[0]["id"]
    renderer.fail_ids.add(invoice_id)
    failed = client.post(f"/api/v1/invoices/{invoice_id}/issue")
    assert failed.status_code == 502
    assert failed.json()["number"] == "LS-202403-001"

    renderer.fail_ids.clear()
    retried = client.post(f"/api/v1/invoices/{invoice_id}/pdf")
    assert retried.json()["result"]["pdf_path"].endswith("LS-202403-001.pdf")
    assert retried.json()["result"]["invoice_id"] == invoice_id

    missing = client.get("/api/v1/invoices/999")
    assert missing.status_code == 404
    assert set(missing.json()) == {"error", "detail", "notice"}
    assert client.get("/api/v1/invoices", params={"year": 2024, "month": 13}).status_code == 422


def test_settings_roundtrip(client):
    assert client.get("/api/v1/settings").json()["invoice_prefix"] == "LS"
    updated = client.put("/api/v1/settings", json={"org_name": "Riverside Languages", "invoice_prefix": "RL"})
    assert updated.json()["org_name"] == "Riverside Languages"
    assert client.get("/api/v1/settings").json()["invoice_prefix"] == "RL"
