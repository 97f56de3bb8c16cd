import logging
from typing import List

from showcase.schemas.student import DirectoryEntry, StudentProfile

logger = logging.getLogger(__name__)


def attach_profiles(store, students: List[StudentProfile]) -> List[DirectoryEntry]:
    profiles = {p.id: p for p in store.profiles.list_in("id", [s.id for s in students])}

    entries = []
    for student in students:
        profile = profiles.get(student.id)
        if profile is None:
            logger.warning(f"Student {student.id} has no profile row; leaving it out")
            continue
        entries.append(DirectoryEntry(student=student, name=profile.name, email=profile.email))
    return entries


def fetch_verified_students(store) -> List[DirectoryEntry]:
    students = store.students.list_by("verified", True, order_by="created_at", ascending=False)
    return attach_profiles(store, students)


def search_students(entries: List[DirectoryEntry], term: str) -> List[DirectoryEntry]:
    if not term or not term.strip():
        return list(entries)

    needle = term.lower()

    def matches(entry: DirectoryEntry) -> bool:
        if needle in entry.name.lower():
            return True
        if entry.student.course and needle in entry.student.course.lower():
            return True
        return any(needle in skill.lower() for skill in entry.student.skills)

    return [entry for entry in entries if matches(entry)]
