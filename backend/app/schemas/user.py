from pydantic import BaseModel, Field, model_validator
from datetime import datetime
from typing import Optional

EMAIL_REGX = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
MIN_PASSWORD_LENGTH = 6


# Schema for creating user
class UserCreate(BaseModel):
    full_name: str = ""
    email: str = Field(..., pattern=EMAIL_REGX)
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    confirm_password: str

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self

# Schema for login (JSON body)
class UserLogin(BaseModel):
    email: str = Field(..., pattern=EMAIL_REGX)
    password: str

# Schema for returning user (without password)
class UserResponse(BaseModel):
    id: str
    email: str
    full_name: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True

# Schema for signup response
class UserSignupResponse(BaseModel):
    user: UserResponse
    access_token: str
    token_type: str

# Password reset flow
class EmailExistsResponse(BaseModel):
    email: str
    valid: bool
    exists: bool

class PasswordResetRequest(BaseModel):
    email: str = Field(..., pattern=EMAIL_REGX)

class PasswordUpdate(BaseModel):
    token: str
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    confirm_password: str

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self
