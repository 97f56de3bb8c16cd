import re
import unicodedata
from html import escape
from typing import List
from urllib.parse import quote

from showcase.schemas.auth import Profile
from showcase.schemas.milestone import Milestone
from showcase.schemas.student import StudentProfile

RESUME_STYLE = """
    * { margin: 0; padding: 0; box-sizing: border-box; }
    body {
      font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', sans-serif;
      line-height: 1.6;
      color: #1a1a1a;
      max-width: 800px;
      margin: 0 auto;
      padding: 40px 20px;
      background: white;
    }
    h1 { font-size: 32px; font-weight: 600; margin-bottom: 8px; color: #000; }
    h2 {
      font-size: 20px;
      font-weight: 600;
      margin-top: 32px;
      margin-bottom: 16px;
      color: #000;
      border-bottom: 2px solid #000;
      padding-bottom: 8px;
    }
    .contact { font-size: 14px; color: #666; margin-bottom: 24px; }
    .contact a { color: #0066cc; text-decoration: none; }
    .bio { font-size: 15px; line-height: 1.7; margin-bottom: 24px; color: #333; }
    .skills { display: flex; flex-wrap: wrap; gap: 8px; margin-bottom: 24px; }
    .skill-tag {
      background: #f5f5f5;
      padding: 6px 12px;
      border-radius: 6px;
      font-size: 13px;
      color: #333;
      border: 1px solid #e0e0e0;
    }
    .milestone { margin-bottom: 20px; padding-left: 20px; border-left: 3px solid #000; }
    .milestone-title { font-weight: 600; font-size: 16px; color: #000; }
    .milestone-date { font-size: 13px; color: #666; margin-bottom: 4px; }
    .milestone-desc { font-size: 14px; color: #555; line-height: 1.6; }
    .availability {
      display: inline-block;
      background: #e8f5e9;
      color: #2e7d32;
      padding: 8px 16px;
      border-radius: 6px;
      font-size: 14px;
      font-weight: 500;
      margin-bottom: 24px;
    }
    @media print { body { padding: 20px; } }
"""

AVAILABLE_BANNER = '<div class="availability">Available for Opportunities</div>'
MILESTONES_HEADING = "<h2>Achievements &amp; Milestones</h2>"


def resume_filename(name: str) -> str:
    return re.sub(r"\s+", "_", name.strip()) + "_Resume.html"


def resume_content_disposition(name: str) -> str:
    """Attachment header that survives any profile name.

    Headers are Latin-1, so the plain ``filename`` is reduced to ASCII and the
    real name travels in ``filename*`` (RFC 6266).
    """
    filename = resume_filename(name)
    ascii_name = unicodedata.normalize("NFKD", filename).encode("ascii", "ignore").decode("ascii")
    ascii_name = re.sub(r"[^A-Za-z0-9._-]", "_", ascii_name)
    return f"attachment; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(filename)}"


def _milestone_block(milestone: Milestone) -> str:
    block = (
        '<div class="milestone">'
        f'<div class="milestone-title">{escape(milestone.title)}</div>'
        f'<div class="milestone-date">{milestone.date_completed.strftime("%B %Y")}</div>'
    )
    if milestone.description:
        block += f'<div class="milestone-desc">{escape(milestone.description)}</div>'
    return block + "</div>"


def render_resume(profile: Profile, student: StudentProfile, milestones: List[Milestone]) -> str:
    """Render a standalone HTML resume.

    Only admin-verified milestones are listed, in the order given.
    """
    sections = []

    contact = escape(profile.email)
    if student.github_url:
        contact += f' | <a href="{escape(student.github_url)}" target="_blank">GitHub</a>'
    sections.append(f'<div class="contact">{contact}</div>')

    if student.availability == "available":
        sections.append(AVAILABLE_BANNER)

    if student.bio:
        sections.append(f'<h2>About</h2><div class="bio">{escape(student.bio)}</div>')

    if student.course:
        sections.append(
            '<h2>Education</h2><div class="milestone">'
            f'<div class="milestone-title">{escape(student.course)}</div></div>'
        )

    if student.skills:
        tags = "".join(f'<span class="skill-tag">{escape(skill)}</span>' for skill in student.skills)
        sections.append(f'<h2>Skills</h2><div class="skills">{tags}</div>')

    verified = [m for m in milestones if m.verified_by_admin]
    if verified:
        sections.append(MILESTONES_HEADING + "".join(_milestone_block(m) for m in verified))

    name = escape(profile.name)
    body = "\n".join(sections)
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{name} - Resume</title>
  <style>{RESUME_STYLE}</style>
</head>
<body>
<h1>{name}</h1>
{body}
</body>
</html>
"""
