from typing import Optional

from pydantic import BaseModel, Field


class Notice(BaseModel):
    notice_id: Optional[str] = Field(
        default=None, description="Omit to create; provide to update."
    )
    title: str = Field(min_length=1)
    date: str
    valid_until: Optional[str] = None
    category: str = "General"
    description: str = ""
    content: str = ""
    pdf_path: Optional[str] = Field(
        default=None,
        description="Stored document path returned by the notice document upload.",
    )
