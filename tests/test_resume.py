from datetime import date

from showcase.schemas.auth import Profile
from showcase.schemas.milestone import Milestone
from showcase.schemas.student import StudentProfile
from showcase.services.resume import render_resume, resume_content_disposition, resume_filename

PROFILE = Profile(id="s1", name="Ann Lee", email="ann@example.com")


def milestone(title, verified, description=None):
    return Milestone(
        id=title,
        student_id="s1",
        title=title,
        description=description,
        date_completed=date(2026, 5, 1),
        verified_by_admin=verified,
    )


def test_available_banner():
    html = render_resume(PROFILE, StudentProfile(id="s1", availability="available"), [])
    assert "Available for Opportunities" in html

    html = render_resume(PROFILE, StudentProfile(id="s1", availability="not_available"), [])
    assert "Available for Opportunities" not in html


def test_no_verified_milestones_means_no_section():
    html = render_resume(PROFILE, StudentProfile(id="s1"), [milestone("Draft", False)])

    assert "Achievements &amp; Milestones" not in html
    assert "Draft" not in html


def test_only_verified_milestones_are_listed():
    html = render_resume(
        PROFILE,
        StudentProfile(id="s1"),
        [milestone("Capstone", True, "Built a thing"), milestone("Pending talk", False)],
    )

    assert "Achievements &amp; Milestones" in html
    assert "Capstone" in html
    assert "Built a thing" in html
    assert "May 2026" in html
    assert "Pending talk" not in html


def test_optional_sections():
    student = StudentProfile(
        id="s1",
        course="Data Science",
        bio="Loves <tables>",
        github_url="https://github.com/ann",
        skills=["sql", "python"],
    )

    html = render_resume(PROFILE, student, [])

    assert "<h1>Ann Lee</h1>" in html
    assert "ann@example.com" in html
    assert 'href="https://github.com/ann"' in html
    assert "<h2>Education</h2>" in html and "Data Science" in html
    assert "Loves &lt;tables&gt;" in html
    assert '<span class="skill-tag">sql</span><span class="skill-tag">python</span>' in html


def test_empty_profile_has_no_optional_sections():
    html = render_resume(PROFILE, StudentProfile(id="s1"), [])

    for heading in ("<h2>About</h2>", "<h2>Education</h2>", "<h2>Skills</h2>", "GitHub"):
        assert heading not in html


def test_resume_filename():
    assert resume_filename("Ann  Mary Lee") == "Ann_Mary_Lee_Resume.html"


def test_content_disposition_for_non_ascii_name():
    header = resume_content_disposition("അനു Lee")

    header.encode("latin-1")
    assert 'filename="_Lee_Resume.html"' in header
    assert "filename*=UTF-8''%E0%B4%85%E0%B4%A8%E0%B5%81_Lee_Resume.html" in header


def test_content_disposition_escapes_quotes():
    header = resume_content_disposition('Ann "AJ" Lee')

    assert header.startswith('attachment; filename="Ann__AJ__Lee_Resume.html";')
    assert "filename*=UTF-8''Ann_%22AJ%22_Lee_Resume.html" in header
