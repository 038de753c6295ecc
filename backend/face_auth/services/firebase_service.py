import firebase_admin
from firebase_admin import credentials, firestore
from typing import Dict, List, Optional
import asyncio
import logging

from face_auth.exceptions import CorpusUnavailableError
from face_auth.models.person import EnrolledIdentity

logger = logging.getLogger(__name__)


class FirebaseService:

    def __init__(
        self,
        credentials_path: Optional[str] = None,
        collection: str = "known_persons",
        db=None
    ):

        self.collection = collection

        if db is not None:
            self.db = db
            return

        try:
            cred = credentials.Certificate(credentials_path)
            if not firebase_admin._apps:
                firebase_admin.initialize_app(cred)

            self.db = firestore.client()
            logger.info("Firebase initialized successfully")
        except Exception as e:
            logger.error(f"Firebase initialization failed: {str(e)}")
            raise

    def get_known_persons(self) -> List[EnrolledIdentity]:
        """Fetch every enrolled person, in the order Firestore returns them."""
        try:
            persons = []
            for doc in self.db.collection(self.collection).stream():
                data = doc.to_dict() or {}
                persons.append(EnrolledIdentity(
                    id=doc.id,
                    name=str(data.get('name') or ''),
                    embedding=data.get('embedding')
                ))

            return persons
        except Exception as e:
            logger.error(f"Known persons retrieval failed: {str(e)}")
            raise CorpusUnavailableError(str(e)) from e

    async def load_corpus(self) -> List[EnrolledIdentity]:
        # Firestore's client is blocking, keep it off the event loop
        return await asyncio.to_thread(self.get_known_persons)

    def list_persons(self) -> List[Dict]:
        try:
            persons = []
            for doc in self.db.collection(self.collection).stream():
                data = doc.to_dict() or {}
                embedding = data.get('embedding')
                persons.append({
                    'id': doc.id,
                    'name': data.get('name') or '',
                    'embedding_size': len(embedding) if isinstance(embedding, list) else 0,
                    'created_at': data.get('created_at')
                })

            return persons
        except Exception as e:
            logger.error(f"Person listing failed: {str(e)}")
            raise CorpusUnavailableError(str(e)) from e

    def add_person(self, name: str, embedding: List[float]) -> str:
        try:
            doc_ref = self.db.collection(self.collection).document()
            doc_ref.set({
                'name': name,
                'embedding': list(embedding),
                'created_at': firestore.SERVER_TIMESTAMP
            })

            logger.info(f"Registered person: {name} ({doc_ref.id})")
            return doc_ref.id
        except Exception as e:
            logger.error(f"Person registration failed: {str(e)}")
            raise
