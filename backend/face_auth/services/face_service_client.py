"""HTTP client for the InsightFace recognition service.

The service owns face detection, embedding extraction and pairwise
comparison. Every call here degrades to ``None``/``False`` on failure so
callers can decide what a missing answer means for them.
"""
import logging
from typing import Optional, Sequence

import httpx
from pydantic import ValidationError

from face_auth.exceptions import FaceServiceError
from face_auth.models.match_result import Comparison
from face_auth.models.person import FaceExtraction

logger = logging.getLogger(__name__)


class FaceServiceClient:

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None
    ):
        """
        Args:
            base_url: Base URL of the face service (e.g. http://localhost:5000)
            timeout: Per-request timeout in seconds
            client: Pre-built AsyncClient, mainly for tests
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client or httpx.AsyncClient(
            timeout=timeout,
            limits=httpx.Limits(max_keepalive_connections=10, max_connections=20),
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def _post_json(self, path: str, **kwargs) -> dict:
        response = await self._client.post(f"{self.base_url}{path}", timeout=self.timeout, **kwargs)
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict):
            raise FaceServiceError(f"Unexpected payload from {path}: {type(payload).__name__}")
        return payload

    async def extract_embedding(self, image_bytes: bytes) -> Optional[FaceExtraction]:
        """
        Extract a face embedding from a JPEG image.

        Returns:
            FaceExtraction, or None if no face was detected or the service failed
        """
        logger.info(f"Calling face service for extraction ({len(image_bytes)} bytes)")
        try:
            result = await self._post_json(
                "/extract-embedding",
                files={"image": ("image.jpg", image_bytes, "image/jpeg")},
            )

            if not result.get("success"):
                logger.info(f"No embedding extracted: {result.get('message') or result.get('error')}")
                return None

            extraction = FaceExtraction(
                embedding=result["embedding"],
                embedding_size=result.get("embedding_size", len(result["embedding"])),
                num_faces_detected=result.get("num_faces_detected", 1),
                face=result.get("face"),
            )
        except (httpx.HTTPError, FaceServiceError, KeyError, ValueError, ValidationError) as e:
            logger.error(f"Face extraction failed: {str(e)} (service at {self.base_url})")
            return None

        logger.info(
            f"Face detected: {extraction.embedding_size} dims, "
            f"{extraction.num_faces_detected} face(s)"
        )
        face = extraction.face
        if face is not None and face.quality_score:
            logger.info(f"Face quality: {face.quality_score * 100:.2f}%")
        if face is not None and face.gender is not None and face.age:
            logger.info(f"Gender: {face.gender}, Age: ~{face.age:.0f}")

        return extraction

    async def compare_embeddings(
        self,
        embedding1: Sequence[float],
        embedding2: Sequence[float]
    ) -> Optional[Comparison]:
        """Compare two embeddings; None when the comparison could not be made."""
        try:
            result = await self._post_json(
                "/compare-embeddings",
                json={"embedding1": list(embedding1), "embedding2": list(embedding2)},
            )

            if not result.get("success"):
                logger.error(f"Comparison failed: {result.get('error')}")
                return None

            return Comparison(
                distance=result["distance"],
                similarity=result["similarity"],
                is_match=result["is_match"],
                confidence=result["confidence"],
            )
        except (httpx.HTTPError, FaceServiceError, KeyError, ValueError, ValidationError) as e:
            logger.error(f"Error comparing embeddings: {str(e)}")
            return None

    # The matcher only needs a ``compare`` capability
    compare = compare_embeddings

    async def check_health(self) -> bool:
        try:
            response = await self._client.get(f"{self.base_url}/health", timeout=self.timeout)
            if not response.is_success:
                return False

            result = response.json()
            return isinstance(result, dict) and result.get("status") == "healthy" and result.get("ready") is True
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Face service unavailable: {str(e)}")
            return False
