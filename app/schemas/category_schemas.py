from pydantic import BaseModel
from typing import List, Optional

class CategoryCreate(BaseModel):
    title: str
    parent_id: Optional[int] = None
    status: bool = True
    main_image: Optional[str] = None

class CategoryUpdate(BaseModel):
    title: Optional[str] = None
    parent_id: Optional[int] = None
    status: Optional[bool] = None
    main_image: Optional[str] = None

class StatusBulkUpdate(BaseModel):
    ids: List[int]
    status: bool
