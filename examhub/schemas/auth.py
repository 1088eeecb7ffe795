from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from ..models.core import NotificationPreferences


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class TokenData(BaseModel):
    email: Optional[str] = None
    account_id: Optional[int] = None
    role: Optional[str] = None
    student_id: Optional[int] = None


class AccountBase(BaseModel):
    email: EmailStr
    name: str
    role: Literal["admin", "student"] = "student"
    profile_image: Optional[str] = None
    student_id: Optional[int] = None


class AccountCreate(AccountBase):
    password: str = Field(..., min_length=6)
    notification_preferences: Optional[NotificationPreferences] = None


class AccountUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    profile_image: Optional[str] = None
    notification_preferences: Optional[NotificationPreferences] = None


class AccountOut(AccountBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    is_admin: bool
    notification_preferences: NotificationPreferences


class StudentLoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
