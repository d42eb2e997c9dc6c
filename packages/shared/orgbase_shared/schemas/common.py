from enum import Enum
from typing import Optional, List
from pydantic import BaseModel

class Role(str, Enum):
    ADMIN = "Admin"
    MEMBER = "Member"

class JoinRequestState(str, Enum):
    NONE = "none"
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"

# Accepted and declined requests are removed from the store, so both are terminal.
JOIN_REQUEST_TRANSITIONS: dict["JoinRequestState", list["JoinRequestState"]] = {
    JoinRequestState.NONE: [JoinRequestState.PENDING],
    JoinRequestState.PENDING: [JoinRequestState.ACCEPTED, JoinRequestState.DECLINED],
    JoinRequestState.ACCEPTED: [],
    JoinRequestState.DECLINED: [],
}

class FieldError(BaseModel):
    field: str
    message: str

class ErrorBody(BaseModel):
    code: str
    message: str
    status: int
    fields: Optional[List[FieldError]] = None

class ErrorResponse(BaseModel):
    error: ErrorBody

class MutationResponse(BaseModel):
    message: str
    affected: int = 0
