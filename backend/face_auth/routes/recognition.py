from fastapi import APIRouter, File, Form, Request, HTTPException, UploadFile
from datetime import datetime, timezone
from typing import List
import asyncio
import logging

from face_auth.exceptions import CorpusUnavailableError
from face_auth.models.match_result import AuthorizationResponse, MatchedPerson
from face_auth.models.person import FaceExtraction, PersonSummary, RegisterResponse

logger = logging.getLogger(__name__)
router = APIRouter()


async def _extract_probe(request: Request, image: UploadFile) -> FaceExtraction:
    contents = await image.read()
    if not contents:
        raise HTTPException(status_code=400, detail="Empty image upload")

    face_client = request.app.state.face_client
    if face_client is None:
        raise HTTPException(status_code=503, detail="Face recognition service not configured")

    extraction = await face_client.extract_embedding(contents)
    if extraction is None:
        # Cannot evaluate, which is different from "no match"
        raise HTTPException(
            status_code=422,
            detail="No face detected or face recognition service unavailable"
        )
    return extraction


@router.post("/upload", response_model=AuthorizationResponse)
async def authorize(request: Request, image: UploadFile = File(...)):
    try:
        extraction = await _extract_probe(request, image)

        face_matcher = request.app.state.face_matcher
        if face_matcher is None:
            raise HTTPException(status_code=503, detail="Person store not available")

        outcome = await face_matcher.match(extraction.embedding)
        match = outcome.match

        if match is None:
            return AuthorizationResponse(
                status="denied",
                authorized=False,
                message="Unknown person",
                candidates_evaluated=outcome.candidates_compared,
                timestamp=datetime.now(timezone.utc)
            )

        return AuthorizationResponse(
            status="authorized",
            authorized=True,
            match=MatchedPerson(
                personId=match.person_id,
                name=match.name,
                distance=match.distance,
                confidence=match.confidence
            ),
            message=f"Welcome, {match.name}",
            candidates_evaluated=outcome.candidates_compared,
            timestamp=datetime.now(timezone.utc)
        )

    except HTTPException:
        raise
    except CorpusUnavailableError as e:
        logger.error(f"Known persons unavailable: {str(e)}")
        raise HTTPException(status_code=503, detail="Person store not available")
    except ValueError as e:
        logger.warning(f"Unusable probe embedding: {str(e)}")
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.error(f"Authorization error: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Authorization failed: {str(e)}")


@router.post("/register", response_model=RegisterResponse)
async def register(
    request: Request,
    name: str = Form(...),
    image: UploadFile = File(...)
):
    name = name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="Name is required")

    try:
        firebase_service = request.app.state.firebase_service
        if firebase_service is None:
            raise HTTPException(status_code=503, detail="Person store not available")

        extraction = await _extract_probe(request, image)
        person_id = await asyncio.to_thread(firebase_service.add_person, name, extraction.embedding)

        return RegisterResponse(
            status="success",
            personId=person_id,
            name=name,
            embedding_size=len(extraction.embedding)
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Registration error: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Registration failed: {str(e)}")


@router.get("/persons", response_model=List[PersonSummary])
async def list_persons(request: Request):
    firebase_service = request.app.state.firebase_service
    if firebase_service is None:
        raise HTTPException(status_code=503, detail="Person store not available")

    try:
        persons = await asyncio.to_thread(firebase_service.list_persons)
    except CorpusUnavailableError as e:
        logger.error(f"Person listing error: {str(e)}")
        raise HTTPException(status_code=503, detail="Person store not available")

    return [
        PersonSummary(
            personId=person['id'],
            name=person['name'],
            embedding_size=person['embedding_size'],
            created_at=person.get('created_at')
        )
        for person in persons
    ]
