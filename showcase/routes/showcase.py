from fastapi import APIRouter, Depends, Query
from typing import List

from showcase.dependencies.auth import public_supabase_client
from showcase.schemas.student import DirectoryEntry
from showcase.services.directory import fetch_verified_students, search_students

router = APIRouter()

# Public directory of verified students
@router.get("/students", response_model=List[DirectoryEntry])
def get_showcase_students(
    search: str = Query("", description="Matches name, course or any skill"),
    context=Depends(public_supabase_client)
):
    students = fetch_verified_students(context["store"])
    return search_students(students, search)
