from certadmin.core.firebase_config import get_firestore_client


def get_db():
    """
    Dependency to get the Firestore client.
    The client is shared and thread-safe, so there is nothing to close after the request.
    """
    yield get_firestore_client()
