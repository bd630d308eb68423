from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime


class Brand(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, unique=True)
    logo_url: Optional[str] = None
    status: bool = Field(default=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)


class Color(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    label: str = Field(index=True, unique=True)
    hex_code: Optional[str] = None
    status: bool = Field(default=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)


class Size(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    title: str = Field(index=True, unique=True)
    status: bool = Field(default=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
