from pydantic import BaseModel
from typing import Optional, FrozenSet
from datetime import datetime

ROLE_STUDENT = "student"
ROLE_ADMIN = "admin"

# --- Profiles (auth.users.id -> profiles.id) ---
class Profile(BaseModel):
    id: str  # auth.users.id
    name: str
    email: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

# --- Actor ---
# Identity of whoever is making the call. Anonymous recruiters have no id.
class Actor(BaseModel):
    id: Optional[str] = None
    roles: FrozenSet[str] = frozenset()

    @property
    def is_anonymous(self) -> bool:
        return self.id is None

    @property
    def is_admin(self) -> bool:
        return ROLE_ADMIN in self.roles

    def owns(self, user_id: str) -> bool:
        return self.id is not None and self.id == user_id


ANONYMOUS = Actor()
