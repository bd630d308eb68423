from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime

class Address(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    name: str
    phone_number: str
    address: str
    city: str
    state: str
    pincode: str
    default: bool = Field(default=False)
    created_at: datetime = Field(default_factory=datetime.utcnow)
