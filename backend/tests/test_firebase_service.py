"""
Tests for FirebaseService with a mocked Firestore client.
"""

from unittest.mock import MagicMock

import pytest

from face_auth.exceptions import CorpusUnavailableError
from face_auth.services.firebase_service import FirebaseService


def make_doc(doc_id, data):
    doc = MagicMock()
    doc.id = doc_id
    doc.to_dict.return_value = data
    return doc


def make_service(docs=None, error=None):
    db = MagicMock()
    collection = db.collection.return_value
    if error is not None:
        collection.stream.side_effect = error
    else:
        collection.stream.return_value = iter(docs or [])
    return FirebaseService(collection="known_persons", db=db), db


class TestKnownPersons:
    def test_documents_become_identities_in_order(self):
        service, db = make_service([
            make_doc("b", {"name": "Bob", "embedding": [0.1, 0.2]}),
            make_doc("a", {"name": "Alice", "embedding": [0.3, 0.4]}),
        ])

        persons = service.get_known_persons()

        db.collection.assert_called_with("known_persons")
        assert [p.id for p in persons] == ["b", "a"]
        assert persons[1].name == "Alice"
        assert persons[1].embedding == [0.3, 0.4]

    def test_corrupted_documents_are_passed_through(self):
        service, _ = make_service([
            make_doc("x", {"name": "NoEmbedding"}),
            make_doc("y", {"name": "Bad", "embedding": "oops"}),
        ])

        persons = service.get_known_persons()

        assert persons[0].embedding is None
        assert persons[1].embedding == "oops"

    def test_null_name_becomes_empty(self):
        service, _ = make_service([make_doc("n", {"name": None, "embedding": [0.1]})])

        persons = service.get_known_persons()

        assert persons[0].name == ""

    def test_store_failure_raises(self):
        service, _ = make_service(error=RuntimeError("deadline exceeded"))
        with pytest.raises(CorpusUnavailableError):
            service.get_known_persons()

    @pytest.mark.asyncio
    async def test_load_corpus_runs_off_loop(self):
        service, _ = make_service([make_doc("a", {"name": "Alice", "embedding": [1.0]})])
        persons = await service.load_corpus()
        assert persons[0].id == "a"


class TestEnrollment:
    def test_add_person(self):
        service, db = make_service()
        doc_ref = db.collection.return_value.document.return_value
        doc_ref.id = "new-id"

        person_id = service.add_person("Carol", (0.5, 0.6))

        assert person_id == "new-id"
        stored = doc_ref.set.call_args[0][0]
        assert stored["name"] == "Carol"
        assert stored["embedding"] == [0.5, 0.6]
        assert "created_at" in stored

    def test_list_persons(self):
        service, _ = make_service([
            make_doc("a", {"name": "Alice", "embedding": [0.1] * 512}),
            make_doc("b", {"name": "Bob"}),
        ])

        persons = service.list_persons()

        assert persons[0]["embedding_size"] == 512
        assert persons[1]["embedding_size"] == 0
        assert persons[1]["created_at"] is None
