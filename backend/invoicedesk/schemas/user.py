from pydantic import BaseModel, EmailStr, ConfigDict
from typing import Optional
import uuid

class UserBase(BaseModel):
    email: EmailStr
    name: str

# Schema for user response (never includes the password hash)
class UserOut(UserBase):
    id: uuid.UUID

    model_config = ConfigDict(from_attributes=True)


# Schema for token data
class Token(BaseModel):
    access_token: str
    token_type: str

class TokenPayload(BaseModel):
    sub: Optional[str] = None # 'sub' (subject) is the user ID
