import io

import pandas as pd
import pytest

from academy.models import ScheduleDays, Student
from academy.services.students import (
    center_prefix, create_students_bulk, create_students_from_rows, next_roll_number,
)
from utils.errors import NotAuthorized, ValidationError


@pytest.mark.parametrize("name, prefix", [
    ("Greater Noida", "GN"),
    ("south delhi main", "SDM"),
    ("Delhi", "DE"),
    ("", "STU"),
    (None, "STU"),
])
def test_center_prefix(name, prefix):
    assert center_prefix(name) == prefix


def test_next_roll_number_compares_sequences_numerically(app, center, make_student):
    assert next_roll_number(center, 2024) == "GN-2024-001"

    make_student(center, "Aarav Shah", "GN-2024-009")
    make_student(center, "Diya Patel", "GN-2024-010")
    make_student(center, "Old Timer", "GN-2023-050")
    assert next_roll_number(center, 2024) == "GN-2024-011"


def test_bulk_names_generate_sequential_roll_numbers(app, manager, scope_for):
    result = create_students_bulk(scope_for(manager), ["Aarav Shah", "  ", "Diya Patel", "Kabir Singh"], year=2024)

    assert result == {"created": 3, "failed": ["Empty name provided"]}
    rolls = [s.roll_number for s in Student.query.order_by(Student.roll_number).all()]
    assert rolls == ["GN-2024-001", "GN-2024-002", "GN-2024-003"]


def test_rows_report_per_row_failures(app, manager, center, scope_for, make_student):
    make_student(center, "Existing", "GN-2024-001")
    rows = [
        {"roll_number": "GN-2024-001", "name": "Aarav Shah"},
        {"roll_number": "GN-2024-002", "name": "Diya Patel"},
        {"roll_number": "GN-2024-003", "name": ""},
        {"roll_number": "", "name": "Kabir Singh"},
        {"roll_number": "GN-2024-004", "name": "Meera Nair"},
    ]
    result = create_students_from_rows(scope_for(manager), rows)

    assert result["created"] == 2
    assert result["failed"] == [
        "Aarav Shah: Roll number GN-2024-001 already exists",
        "Row with roll number GN-2024-003: Empty name",
        "Kabir Singh: Empty roll number",
    ]
    assert Student.query.count() == 3


def test_admin_bulk_import_needs_center(app, admin, scope_for):
    with pytest.raises(ValidationError) as exc:
        create_students_bulk(scope_for(admin), ["Aarav Shah"])
    assert exc.value.message == "Center must be specified"


def test_manager_cannot_import_into_other_center(app, manager, scope_for, make_center):
    other = make_center("Delhi")
    with pytest.raises(NotAuthorized):
        create_students_bulk(scope_for(manager), ["Aarav Shah"], center_id=other.id)


def test_create_student_route_generates_roll_number(client, auth_header, manager, center, make_batch):
    batch = make_batch(center, "Morning A", ScheduleDays.MWF)
    response = client.post("/students/create", headers=auth_header(manager), json={
        "name": "Aarav Shah",
        "batch_id": batch.id,
    })
    assert response.status_code == 201
    student = response.get_json()["data"]
    assert student["roll_number"].startswith("GN-")
    assert student["roll_number"].endswith("-001")
    assert student["center_id"] == center.id


def test_student_batch_must_share_center(client, auth_header, admin, center, make_center, make_batch):
    other = make_center("Delhi")
    batch = make_batch(other, "Morning A", ScheduleDays.MWF)
    response = client.post("/students/create", headers=auth_header(admin), json={
        "name": "Aarav Shah",
        "center_id": center.id,
        "batch_id": batch.id,
    })
    assert response.status_code == 400
    assert response.get_json()["error"] == "Batch belongs to a different center"


def test_duplicate_roll_number_conflicts(client, auth_header, manager, center, make_student):
    make_student(center, "Aarav Shah", "GN-2024-001")
    response = client.post("/students/create", headers=auth_header(manager), json={
        "name": "Diya Patel", "roll_number": "GN-2024-001",
    })
    assert response.status_code == 409
    assert response.get_json()["error"] == "A student with this roll number already exists"


def test_faculty_cannot_create_students(client, auth_header, faculty):
    response = client.post("/students/create", headers=auth_header(faculty), json={"name": "Aarav Shah"})
    assert response.status_code == 403


def test_list_is_scoped_to_managers_center(client, auth_header, manager, center, make_center, make_student):
    other = make_center("Delhi")
    make_student(center, "Aarav Shah", "GN-2024-001")
    make_student(other, "Diya Patel", "DE-2024-001")

    response = client.get("/students/list", headers=auth_header(manager))
    data = response.get_json()["data"]
    assert data["total"] == 1
    assert [s["name"] for s in data["students"]] == ["Aarav Shah"]


def test_search(client, auth_header, admin, center, make_student):
    make_student(center, "Aarav Shah", "GN-2024-001")
    make_student(center, "Diya Patel", "GN-2024-002")

    response = client.get("/students/search?q=diya", headers=auth_header(admin))
    assert [s["roll_number"] for s in response.get_json()["data"]] == ["GN-2024-002"]


def test_assign_and_unassign(client, auth_header, manager, center, make_batch, make_student):
    batch = make_batch(center, "Morning A", ScheduleDays.MWF)
    aarav = make_student(center, "Aarav Shah", "GN-2024-001")
    diya = make_student(center, "Diya Patel", "GN-2024-002")

    response = client.post(f"/batches/{batch.id}/assign", headers=auth_header(manager),
                           json={"student_ids": [aarav.id, diya.id]})
    assert response.get_json()["data"] == {"assigned": 2}

    response = client.post(f"/students/{aarav.id}/unassign", headers=auth_header(manager))
    assert response.get_json()["data"]["batch_id"] is None
    assert Student.query.filter_by(batch_id=batch.id).count() == 1


def test_bulk_route_accepts_text(client, auth_header, manager):
    response = client.post("/students/bulk", headers=auth_header(manager),
                           json={"text": "Aarav Shah\nDiya Patel"})
    assert response.status_code == 201
    assert response.get_json()["data"]["created"] == 2


def test_bulk_upload_csv_file(client, auth_header, manager):
    payload = b"roll_number,name\nGN-2024-101,Aarav Shah\nGN-2024-102,Diya Patel\n"
    response = client.post(
        "/students/bulk_upload",
        headers=auth_header(manager),
        data={"file": (io.BytesIO(payload), "students.csv")},
        content_type="multipart/form-data",
    )
    assert response.status_code == 201
    assert response.get_json()["data"] == {"created": 2, "failed": []}


def test_bulk_upload_rejects_other_files(client, auth_header, manager):
    response = client.post(
        "/students/bulk_upload",
        headers=auth_header(manager),
        data={"file": (io.BytesIO(b"\x89PNG"), "photo.png")},
        content_type="multipart/form-data",
    )
    assert response.status_code == 400
    assert response.get_json()["error"] == "Only CSV or Excel files are accepted"


def test_bulk_upload_excel_sheet(client, auth_header, manager):
    buffer = io.BytesIO()
    pd.DataFrame([["GN-2024-201", "Aarav Shah"]], columns=["Roll Number", "Name"]).to_excel(buffer, index=False)
    buffer.seek(0)

    response = client.post(
        "/students/bulk_upload",
        headers=auth_header(manager),
        data={"file": (buffer, "students.xlsx")},
        content_type="multipart/form-data",
    )
    assert response.get_json()["data"] == {"created": 1, "failed": []}
    assert Student.query.one().roll_number == "GN-2024-201"
