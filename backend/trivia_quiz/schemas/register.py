from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class RegisterEmailRequest(BaseModel):
    email: Optional[str] = None


class RegisterEmailResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message: str
    user_id: Optional[str] = Field(None, alias="userId")
