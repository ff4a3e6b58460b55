from datetime import date

from pydantic import Field

from paralegal.models.base import CamelModel


class CaseDocument(CamelModel):
    id: str
    name: str
    content: str = ""
    uploaded_date: str = Field(default_factory=lambda: date.today().isoformat())
