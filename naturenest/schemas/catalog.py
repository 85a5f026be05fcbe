# naturenest/schemas/catalog.py
from pydantic import BaseModel


class CategoryOut(BaseModel):
    id: int
    name: str
    description: str

    model_config = {"from_attributes": True}


class AmenityOut(BaseModel):
    id: int
    name: str
    description: str

    model_config = {"from_attributes": True}
