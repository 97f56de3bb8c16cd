from showcase.schemas.student import DirectoryEntry, StudentProfile
from showcase.services.directory import fetch_verified_students, search_students


def entry(id, name, course, skills):
    return DirectoryEntry(
        student=StudentProfile(id=id, course=course, skills=skills, verified=True),
        name=name,
        email=f"{name.lower()}@example.com",
    )


ANN = entry("s1", "Ann", "Data", ["sql"])
BEN = entry("s2", "Ben", "Web", ["react"])


def test_name_match_is_case_insensitive():
    assert search_students([ANN, BEN], "ann") == [ANN]


def test_skill_match():
    assert search_students([ANN, BEN], "react") == [BEN]


def test_course_match():
    assert search_students([ANN, BEN], "WEB") == [BEN]


def test_empty_term_returns_everything_in_order():
    assert search_students([ANN, BEN], "") == [ANN, BEN]
    assert search_students([BEN, ANN], "   ") == [BEN, ANN]


def test_no_match():
    assert search_students([ANN, BEN], "rust") == []


def test_student_without_course():
    nobody = entry("s3", "Cy", None, [])
    assert search_students([nobody], "data") == []


def test_fetch_verified_students_joins_profiles(db, store):
    db.seed("students", id="s1", verified=True, course="Data", created_at="2026-01-01T00:00:00+00:00")
    db.seed("students", id="s2", verified=True, course="Web", created_at="2026-03-01T00:00:00+00:00")
    db.seed("students", id="s3", verified=False, course="Ops", created_at="2026-02-01T00:00:00+00:00")
    db.seed("profiles", id="s1", name="Ann", email="ann@example.com")
    db.seed("profiles", id="s2", name="Ben", email="ben@example.com")
    db.seed("profiles", id="s3", name="Cy", email="cy@example.com")

    entries = fetch_verified_students(store)

    assert [e.name for e in entries] == ["Ben", "Ann"]
    assert entries[1].email == "ann@example.com"


def test_student_without_profile_is_left_out(db, store):
    db.seed("students", id="s1", verified=True, created_at="2026-01-01T00:00:00+00:00")

    assert fetch_verified_students(store) == []
