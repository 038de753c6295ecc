"""Errors surfaced by the face authorization services.

Per-candidate problems (bad stored embeddings, failed comparisons) are not
represented here: the matcher skips those candidates instead of raising.
"""


class CorpusUnavailableError(Exception):
    """The enrolled persons could not be loaded from the store."""


class FaceServiceError(Exception):
    """The face recognition service returned an unusable response."""
