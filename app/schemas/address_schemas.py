from typing import Optional
from pydantic import BaseModel

class AddressCreate(BaseModel):
    name: str
    phone_number: str
    address: str
    city: str
    state: str
    pincode: str
    default: bool = False


class AddressUpdate(BaseModel):
    name: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    default: Optional[bool] = None
