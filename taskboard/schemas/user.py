from pydantic import BaseModel, ConfigDict
from datetime import datetime

from .common import IdStr

class UserBase(BaseModel):
    email: str

class UserCreate(UserBase):
    password: str

class User(UserBase):
    id: IdStr
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class TokenData(BaseModel):
    owner_id: str

class AuthResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: User
