from datetime import datetime
from pydantic import BaseModel
from typing import Any, List, Optional, Union


class EnrolledIdentity(BaseModel):
    id: str
    name: str = ""
    # Kept exactly as stored; the matcher decides whether it is usable
    embedding: Any = None


class PersonSummary(BaseModel):
    personId: str
    name: str
    embedding_size: int
    created_at: Optional[datetime] = None


class RegisterResponse(BaseModel):
    status: str
    personId: str
    name: str
    embedding_size: int


class FaceAttributes(BaseModel):
    quality_score: Optional[float] = None
    gender: Optional[Union[str, int]] = None
    age: Optional[float] = None


class FaceExtraction(BaseModel):
    embedding: List[float]
    embedding_size: int
    num_faces_detected: int = 1
    face: Optional[FaceAttributes] = None
