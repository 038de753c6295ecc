import asyncio
import os
from typing import Dict, List, Optional, Sequence

import pytest

# Keep test runs from writing log files
os.environ.setdefault("LOG_DIR", "")

from face_auth.exceptions import CorpusUnavailableError
from face_auth.models.match_result import Comparison
from face_auth.models.person import EnrolledIdentity


class FakeCorpus:
    """In-memory stand-in for the Firestore person collection."""

    def __init__(self, persons: Optional[List[EnrolledIdentity]] = None, fail: bool = False):
        self.persons = persons or []
        self.fail = fail
        self.loads = 0

    async def load_corpus(self) -> List[EnrolledIdentity]:
        self.loads += 1
        if self.fail:
            raise CorpusUnavailableError("firestore unreachable")
        return list(self.persons)


class StubComparator:
    """
    Deterministic comparator: the similarity for a candidate is looked up by
    the first value of its embedding, which tests use as a tag.
    """

    def __init__(
        self,
        similarities: Dict[float, float],
        failing: Sequence[float] = (),
        raising: Sequence[float] = (),
        delays: Optional[Dict[float, float]] = None
    ):
        self.similarities = similarities
        self.failing = set(failing)
        self.raising = set(raising)
        self.delays = delays or {}
        self.calls: List[tuple] = []
        self.in_flight = 0
        self.peak_in_flight = 0

    async def compare(self, embedding1, embedding2) -> Optional[Comparison]:
        tag = embedding2[0]
        self.calls.append((list(embedding1), list(embedding2)))
        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        try:
            if tag in self.delays:
                await asyncio.sleep(self.delays[tag])
        finally:
            self.in_flight -= 1
        if tag in self.raising:
            raise RuntimeError("connection reset")
        if tag in self.failing:
            return None
        similarity = self.similarities[tag]
        return Comparison(
            distance=round(1 - similarity / 100, 4),
            similarity=similarity,
            is_match=similarity >= 70,
            confidence="high" if similarity >= 85 else "low"
        )


def person(person_id: str, tag: float, dims: int = 4, name: Optional[str] = None) -> EnrolledIdentity:
    embedding = [tag] + [0.1] * (dims - 1)
    return EnrolledIdentity(id=person_id, name=name or person_id.upper(), embedding=embedding)


PROBE = [0.5, 0.1, 0.1, 0.1]


@pytest.fixture
def probe():
    return list(PROBE)
