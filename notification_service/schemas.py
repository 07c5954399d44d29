from typing import Optional
from pydantic import BaseModel

DECISIONS = ("accepted", "rejected")

class SendEmailIn(BaseModel):
    # all optional so that missing fields map to a 400, not FastAPI's 422
    to: Optional[str] = None
    name: Optional[str] = None
    decision: Optional[str] = None
    feedback: Optional[str] = None

    def missing_fields(self) -> list[str]:
        return [f for f in ("to", "name", "decision", "feedback") if not getattr(self, f)]

class SendEmailOut(BaseModel):
    success: bool = True

class ErrorOut(BaseModel):
    error: str
