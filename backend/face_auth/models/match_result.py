from datetime import datetime
from pydantic import BaseModel, Field
from typing import List, Optional


class Comparison(BaseModel):
    """Pairwise result reported by the face service for two embeddings."""
    distance: float = Field(ge=0)
    similarity: float = Field(ge=0, le=100)  # percentage
    is_match: bool
    confidence: str  # label such as "high" / "low"


class MatchResult(BaseModel):
    person_id: str
    name: str
    distance: float
    confidence: float  # similarity / 100


class CandidateTrace(BaseModel):
    person_id: str
    name: str
    status: str  # compared | invalid_embedding | dimension_mismatch | comparison_failed
    similarity: Optional[float] = None
    distance: Optional[float] = None
    confidence_label: Optional[str] = None
    passed: bool = False


class MatchOutcome(BaseModel):
    match: Optional[MatchResult] = None
    trace: List[CandidateTrace] = []

    @property
    def candidates_compared(self) -> int:
        return sum(1 for entry in self.trace if entry.status == "compared")


class MatchedPerson(BaseModel):
    personId: str
    name: str
    distance: float
    confidence: float


class AuthorizationResponse(BaseModel):
    status: str  # authorized | denied
    authorized: bool
    match: Optional[MatchedPerson] = None
    message: str
    candidates_evaluated: int
    timestamp: datetime
