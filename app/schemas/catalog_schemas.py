from pydantic import BaseModel
from typing import Optional


class BrandCreate(BaseModel):
    name: str
    logo_url: Optional[str] = None
    status: bool = True

class BrandUpdate(BaseModel):
    name: Optional[str] = None
    logo_url: Optional[str] = None
    status: Optional[bool] = None


class ColorCreate(BaseModel):
    label: str
    hex_code: Optional[str] = None
    status: bool = True

class ColorUpdate(BaseModel):
    label: Optional[str] = None
    hex_code: Optional[str] = None
    status: Optional[bool] = None


class SizeCreate(BaseModel):
    title: str
    status: bool = True

class SizeUpdate(BaseModel):
    title: Optional[str] = None
    status: Optional[bool] = None
