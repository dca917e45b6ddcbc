from datetime import datetime
from pydantic import BaseModel, Field
from .base import ORMBase

class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=64)
    description: str = ""
    sort: int = 0


class CategoryRead(ORMBase):
    id: int
    name: str
    description: str
    sort: int
    thread_count: int
    created_at: datetime
