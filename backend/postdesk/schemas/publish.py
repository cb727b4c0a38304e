from typing import Optional

from pydantic import BaseModel


class PublishRequest(BaseModel):
    filename: Optional[str] = None
    content: Optional[str] = None
    message: Optional[str] = None


class PublishResponse(BaseModel):
    success: bool = True
    path: Optional[str]
    url: str


class PublishErrorResponse(BaseModel):
    error: str
