from pydantic import BaseModel, ConfigDict
from datetime import datetime
from uuid import UUID


class UserPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str
    created_at: datetime
