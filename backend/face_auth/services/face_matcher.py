"""
Face matcher: selects the best enrolled person for a probe embedding.

Similarity itself is computed by the face service; this module only decides
which candidates may be compared and reduces the comparisons to at most one
match.
"""

import asyncio
import logging
from numbers import Real
from typing import Any, List, Optional, Protocol, Sequence

from face_auth.models.match_result import CandidateTrace, Comparison, MatchOutcome, MatchResult
from face_auth.models.person import EnrolledIdentity

logger = logging.getLogger(__name__)

DEFAULT_SIMILARITY_THRESHOLD = 70.0


class CorpusLoader(Protocol):
    async def load_corpus(self) -> List[EnrolledIdentity]:
        ...


class Comparator(Protocol):
    async def compare(self, embedding1: Sequence[float], embedding2: Sequence[float]) -> Optional[Comparison]:
        ...


def is_valid_embedding(embedding: Any) -> bool:
    if not isinstance(embedding, (list, tuple)):
        return False
    return all(isinstance(v, Real) and not isinstance(v, bool) for v in embedding)


class FaceMatcher:
    """
    Matches a probe embedding against every enrolled person.

    A candidate is skipped, never fatal, when its stored embedding is missing,
    malformed or of a different dimension, or when its comparison fails or
    times out. Only a corpus load failure propagates to the caller.
    """

    def __init__(
        self,
        corpus_loader: CorpusLoader,
        comparator: Comparator,
        threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
        max_concurrency: int = 4,
        comparison_timeout: float = 10.0
    ):
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self.corpus_loader = corpus_loader
        self.comparator = comparator
        self.threshold = self._check_threshold(threshold)
        self.max_concurrency = max_concurrency
        self.comparison_timeout = comparison_timeout

    @staticmethod
    def _check_threshold(threshold: float) -> float:
        if not 0 <= threshold <= 100:
            raise ValueError(f"threshold must be a percentage in [0, 100], got {threshold}")
        return float(threshold)

    async def find_best_match(
        self,
        probe: Sequence[float],
        threshold: Optional[float] = None
    ) -> Optional[MatchResult]:
        outcome = await self.match(probe, threshold)
        return outcome.match

    async def match(
        self,
        probe: Sequence[float],
        threshold: Optional[float] = None
    ) -> MatchOutcome:
        """
        Run one match and return the best result together with a
        per-candidate trace.

        Raises:
            ValueError: empty probe or threshold outside [0, 100]
            CorpusUnavailableError: enrolled persons could not be loaded
        """
        if not probe:
            raise ValueError("probe embedding must not be empty")
        threshold = self.threshold if threshold is None else self._check_threshold(threshold)

        persons = await self.corpus_loader.load_corpus()
        if not persons:
            logger.info("No known persons in database")
            return MatchOutcome()

        logger.info(f"Comparing against {len(persons)} registered person(s)...")

        trace: List[Optional[CandidateTrace]] = [None] * len(persons)
        comparable = []
        for index, person in enumerate(persons):
            if not is_valid_embedding(person.embedding):
                logger.warning(f"Skipping {person.name} - invalid embedding")
                trace[index] = CandidateTrace(person_id=person.id, name=person.name, status="invalid_embedding")
            elif len(person.embedding) != len(probe):
                logger.warning(
                    f"Skipping {person.name} - embedding dimension mismatch "
                    f"(stored: {len(person.embedding)}, current: {len(probe)})"
                )
                trace[index] = CandidateTrace(person_id=person.id, name=person.name, status="dimension_mismatch")
            else:
                comparable.append(index)

        semaphore = asyncio.Semaphore(self.max_concurrency)
        comparisons = await asyncio.gather(*[
            self._compare(semaphore, probe, persons[index]) for index in comparable
        ])

        # Reduce in corpus order so that ties go to the earliest person
        best: Optional[MatchResult] = None
        best_similarity = 0.0
        for index, comparison in zip(comparable, comparisons):
            person = persons[index]
            if comparison is None:
                logger.warning(f"Failed to compare with {person.name}")
                trace[index] = CandidateTrace(person_id=person.id, name=person.name, status="comparison_failed")
                continue

            passed = comparison.similarity >= threshold
            logger.info(
                f"{person.name:<20} | "
                f"Similarity: {comparison.similarity:.2f}% | "
                f"Distance: {comparison.distance:.4f} | "
                f"Confidence: {comparison.confidence:<10} | "
                f"Match: {'YES' if passed else 'NO'}"
            )
            trace[index] = CandidateTrace(
                person_id=person.id,
                name=person.name,
                status="compared",
                similarity=comparison.similarity,
                distance=comparison.distance,
                confidence_label=comparison.confidence,
                passed=passed,
            )

            if passed and (best is None or comparison.similarity > best_similarity):
                best_similarity = comparison.similarity
                best = MatchResult(
                    person_id=person.id,
                    name=person.name,
                    distance=comparison.distance,
                    confidence=comparison.similarity / 100,
                )

        logger.info("=" * 60)
        if best is not None:
            logger.info(f"MATCH FOUND: {best.name} ({best_similarity:.2f}% similarity)")
        else:
            logger.info("NO MATCH - Unknown person (all similarities below threshold)")
        logger.info("=" * 60)

        return MatchOutcome(match=best, trace=trace)

    async def _compare(
        self,
        semaphore: asyncio.Semaphore,
        probe: Sequence[float],
        person: EnrolledIdentity
    ) -> Optional[Comparison]:
        async with semaphore:
            try:
                return await asyncio.wait_for(
                    self.comparator.compare(probe, person.embedding),
                    timeout=self.comparison_timeout,
                )
            except asyncio.TimeoutError:
                logger.warning(f"Comparison with {person.name} timed out after {self.comparison_timeout}s")
                return None
            except Exception as e:
                logger.error(f"Comparator error for {person.name}: {str(e)}")
                return None
