from utils.csv_import import parse_name_list, parse_student_csv


def test_header_row_is_skipped():
    text = "Roll Number,Name\nGN-2024-001,Aarav Shah\nGN-2024-002,Diya Patel\n"
    assert parse_student_csv(text) == [
        {"roll_number": "GN-2024-001", "name": "Aarav Shah"},
        {"roll_number": "GN-2024-002", "name": "Diya Patel"},
    ]


def test_tab_delimited_without_header():
    text = "GN-2024-001\tAarav Shah\n\nGN-2024-002\tDiya Patel"
    rows = parse_student_csv(text)
    assert [r["roll_number"] for r in rows] == ["GN-2024-001", "GN-2024-002"]
    assert rows[1]["name"] == "Diya Patel"


def test_short_rows_keep_empty_name():
    rows = parse_student_csv("roll,name\nGN-2024-009\n")
    assert rows == [{"roll_number": "GN-2024-009", "name": ""}]


def test_empty_text():
    assert parse_student_csv("") == []
    assert parse_student_csv(None) == []


def test_parse_name_list_splits_lines_and_commas():
    assert parse_name_list("Aarav Shah\nDiya Patel, Kabir Singh\n\n") == [
        "Aarav Shah", "Diya Patel", "Kabir Singh",
    ]


def test_first_row_naming_roll_in_a_cell_is_data():
    rows = parse_student_csv("GN-2026-001,Sam Carroll\nGN-2026-002,Ann Lee")
    assert rows == [
        {"roll_number": "GN-2026-001", "name": "Sam Carroll"},
        {"roll_number": "GN-2026-002", "name": "Ann Lee"},
    ]


def test_header_variants_are_skipped():
    for header in ("roll_number,name", "Roll No.,Student Name", "ROLL\tNAME"):
        sep = "\t" if "\t" in header else ","
        rows = parse_student_csv(f"{header}\nGN-2024-001{sep}Aarav Shah")
        assert rows == [{"roll_number": "GN-2024-001", "name": "Aarav Shah"}]


def test_extra_fields_do_not_reject_the_upload():
    rows = parse_student_csv("R1,Ann\nR2,Lee, Bob\nR3,Cy")
    assert rows == [
        {"roll_number": "R1", "name": "Ann"},
        {"roll_number": "R2", "name": "Lee, Bob"},
        {"roll_number": "R3", "name": "Cy"},
    ]
