from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import Optional


class LoginRequest(BaseModel):
    """
    Login payload.

    Both fields are optional at the schema level so a missing one is
    answered with the API's own 400 message. Email shape is not checked
    here: login must not hint at which accounts exist.
    """
    email: Optional[str] = None
    password: Optional[str] = None


class EmailResponse(BaseModel):
    """
    Safe user representation for API responses.

    Critical: Never include password_hash in any response.
    """
    email: str


class DemoLoginResponse(EmailResponse):
    demo: bool = True


class OkResponse(BaseModel):
    ok: bool = True


class ClientCreate(BaseModel):
    """
    Proposed client.

    Rules live in app.validation so every violation is reported at once,
    rather than pydantic stopping at a missing name.
    """
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    status: Optional[str] = None


class ClientUpdate(ClientCreate):
    """
    Partial update.

    model_dump(exclude_unset=True) gives the fields the caller supplied;
    anything absent keeps its stored value.
    """


class ClientResponse(BaseModel):
    id: int
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    status: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CreatedResponse(BaseModel):
    id: int


class UpdatedResponse(BaseModel):
    updated: int


class DeletedResponse(BaseModel):
    deleted: int
