from .person import EnrolledIdentity, PersonSummary, RegisterResponse, FaceAttributes, FaceExtraction
from .match_result import (
    Comparison,
    MatchResult,
    CandidateTrace,
    MatchOutcome,
    MatchedPerson,
    AuthorizationResponse,
)

__all__ = [
    "EnrolledIdentity",
    "PersonSummary",
    "RegisterResponse",
    "FaceAttributes",
    "FaceExtraction",
    "Comparison",
    "MatchResult",
    "CandidateTrace",
    "MatchOutcome",
    "MatchedPerson",
    "AuthorizationResponse",
]
