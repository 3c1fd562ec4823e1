from typing import Optional

from app.schemas.person_schema import CamelModel


# --------------------------------------------------
# LOGIN
# --------------------------------------------------
class LoginRequest(CamelModel):
    password: str


class UserOut(CamelModel):
    id: str
    name: str
    role: str


class TokenOut(CamelModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut


# --------------------------------------------------
# CONTRIBUTORS
# --------------------------------------------------
class ContributorCreate(CamelModel):
    name: str
    password: str


class ContributorUpdate(CamelModel):
    name: str
    password: Optional[str] = None
