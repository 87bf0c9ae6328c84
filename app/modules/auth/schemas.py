from pydantic import BaseModel, EmailStr, field_validator
from typing import Optional


class SignupRequest(BaseModel):
    email: Optional[EmailStr] = None
    password: Optional[str] = None

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_is_missing(cls, value):
        return value or None


class SigninRequest(BaseModel):
    # Not EmailStr: a malformed address must fail like any other bad login
    email: Optional[str] = None
    password: Optional[str] = None


class SignupResponse(BaseModel):
    success: bool = True
    message: str
    token: str


class SignedInUser(BaseModel):
    id: str
    email: str


class SigninResponse(BaseModel):
    success: bool = True
    message: str
    token: str
    user: SignedInUser
