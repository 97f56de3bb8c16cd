import logging
from typing import Any, Dict, Iterable, List, Optional, Type

import httpx
from fastapi.encoders import jsonable_encoder
from postgrest.exceptions import APIError
from postgrest.types import ReturnMethod
from pydantic import BaseModel

from showcase.schemas.auth import Profile
from showcase.schemas.complaint import Complaint
from showcase.schemas.message import RecruiterMessage
from showcase.schemas.milestone import Milestone
from showcase.schemas.notification import Notification
from showcase.schemas.student import StudentProfile
from showcase.services.errors import NotFound, TransientIOError, Unauthorized, ValidationError

logger = logging.getLogger(__name__)

# PostgREST / Postgres error codes we translate
PERMISSION_CODES = {"42501", "PGRST301", "PGRST302"}
NOT_FOUND_CODES = {"PGRST116"}
VALIDATION_CODES = {"23502", "22P02", "23514", "23503", "22007"}


def translate_api_error(error: APIError, table: str):
    code = str(error.code or "")
    message = error.message or str(error)
    if code in PERMISSION_CODES:
        return Unauthorized(f"Not allowed to modify {table}: {message}")
    if code in NOT_FOUND_CODES:
        return NotFound(f"No matching row in {table}")
    if code in VALIDATION_CODES:
        return ValidationError(message)
    return TransientIOError(f"Backend error on {table}: {message}")


def run_query(query, table: str):
    try:
        return query.execute()
    except APIError as e:
        logger.error(f"Supabase error on {table}: {e.code} {e.message}")
        raise translate_api_error(e, table)
    except httpx.HTTPError as e:
        logger.error(f"Supabase unreachable while querying {table}: {str(e)}")
        raise TransientIOError(f"Could not reach the database: {str(e)}")


class Table:
    """CRUD access to one Supabase table, returning pydantic records.

    Nothing here decides whether a write is allowed; that is the workflow's
    job (and row-level security's). Backend errors are translated into the
    service error taxonomy and propagated unchanged otherwise.
    """

    def __init__(self, supabase, name: str, model: Type[BaseModel], required: Iterable[str] = ()):
        self.supabase = supabase
        self.name = name
        self.model = model
        self.required = tuple(required)

    def _execute(self, query):
        return run_query(query, self.name)

    def _check_required(self, row: Dict[str, Any]):
        missing = [column for column in self.required if row.get(column) in (None, "")]
        if missing:
            raise ValidationError(f"Missing required fields for {self.name}: {', '.join(missing)}")

    def _records(self, response) -> List[BaseModel]:
        return [self.model.model_validate(row) for row in response.data or []]

    def create(self, row: Dict[str, Any], minimal: bool = False):
        """Insert ``row`` and return the stored record.

        With ``minimal`` nothing is read back and None is returned, for
        callers that may insert rows they are not allowed to select
        (a notification addressed to someone else, an anonymous message).
        """
        self._check_required(row)
        if minimal:
            self._execute(self.supabase.table(self.name).insert(jsonable_encoder(row), returning=ReturnMethod.minimal))
            return None
        response = self._execute(self.supabase.table(self.name).insert(jsonable_encoder(row)))
        return self._records(response)[0]

    def upsert(self, row: Dict[str, Any]):
        self._check_required(row)
        response = self._execute(self.supabase.table(self.name).upsert(jsonable_encoder(row)))
        return self._records(response)[0]

    def get(self, id: str):
        response = self._execute(self.supabase.table(self.name).select("*").eq("id", id))
        if not response.data:
            raise NotFound(f"{self.name} {id} not found")
        return self.model.model_validate(response.data[0])

    def find(self, id: str):
        try:
            return self.get(id)
        except NotFound:
            return None

    def list_where(
        self,
        filters: Optional[Dict[str, Any]] = None,
        order_by: str = "created_at",
        ascending: bool = False,
        limit: Optional[int] = None,
    ):
        query = self.supabase.table(self.name).select("*")
        for key, value in (filters or {}).items():
            query = query.eq(key, value)
        query = query.order(order_by, desc=not ascending)
        if limit is not None:
            query = query.limit(limit)
        return self._records(self._execute(query))

    def list_by(self, key: str, value: Any, order_by: str = "created_at", ascending: bool = False, limit: Optional[int] = None):
        return self.list_where({key: value}, order_by=order_by, ascending=ascending, limit=limit)

    def list_in(self, key: str, values: List[Any]):
        if not values:
            return []
        return self._records(self._execute(self.supabase.table(self.name).select("*").in_(key, values)))

    def count_where(self, filters: Optional[Dict[str, Any]] = None) -> int:
        query = self.supabase.table(self.name).select("id", count="exact")
        for key, value in (filters or {}).items():
            query = query.eq(key, value)
        response = self._execute(query)
        return response.count or 0

    def update(self, id: str, fields: Dict[str, Any]):
        response = self._execute(self.supabase.table(self.name).update(jsonable_encoder(fields)).eq("id", id))
        if not response.data:
            raise NotFound(f"{self.name} {id} not found")
        return self.model.model_validate(response.data[0])

    def update_where(self, filters: Dict[str, Any], fields: Dict[str, Any]):
        query = self.supabase.table(self.name).update(jsonable_encoder(fields))
        for key, value in filters.items():
            query = query.eq(key, value)
        return self._records(self._execute(query))

    def delete(self, id: str):
        self._execute(self.supabase.table(self.name).delete().eq("id", id))


class EntityStore:
    def __init__(self, supabase):
        self.supabase = supabase
        self.profiles = Table(supabase, "profiles", Profile, required=("id", "name", "email"))
        self.students = Table(supabase, "students", StudentProfile, required=("id",))
        self.complaints = Table(supabase, "complaints", Complaint, required=("student_id", "title", "description"))
        self.milestones = Table(supabase, "milestones", Milestone, required=("student_id", "title", "date_completed"))
        self.messages = Table(
            supabase,
            "recruiter_messages",
            RecruiterMessage,
            required=("student_id", "sender_name", "sender_email", "message"),
        )
        self.notifications = Table(supabase, "notifications", Notification, required=("user_id", "message"))

    def roles_for(self, user_id: str) -> frozenset:
        query = self.supabase.table("user_roles").select("role").eq("user_id", user_id)
        response = run_query(query, "user_roles")
        return frozenset(row["role"] for row in response.data or [])
