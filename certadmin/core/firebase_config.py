import base64
import binascii
import json
import os
import logging
from typing import Any, Dict, Optional

import firebase_admin
from firebase_admin import credentials, firestore

from certadmin.core.config import settings

logger = logging.getLogger(__name__)

_firebase_app_initialized = False


def decode_service_account(sa_base64: str) -> Dict[str, Any]:
    """
    Decodes a base64-encoded service account JSON, as stored in FIREBASE_ADMIN_SA_BASE64.
    Surrounding whitespace and double quotes are stripped first.
    """
    cleaned = sa_base64.strip().strip('"')
    try:
        return json.loads(base64.b64decode(cleaned).decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ValueError(f"FIREBASE_ADMIN_SA_BASE64 is not a valid base64-encoded service account: {e}") from e


def _build_credential(service_account: Optional[Dict[str, Any]] = None):
    if service_account is not None:
        return credentials.Certificate(service_account)

    if settings.FIREBASE_ADMIN_SA_BASE64:
        return credentials.Certificate(decode_service_account(settings.FIREBASE_ADMIN_SA_BASE64))

    cred_path = settings.GOOGLE_APPLICATION_CREDENTIALS
    if not cred_path:
        logger.error("Neither FIREBASE_ADMIN_SA_BASE64 nor GOOGLE_APPLICATION_CREDENTIALS is set.")
        raise ValueError("Firebase credentials are not configured (FIREBASE_ADMIN_SA_BASE64 or GOOGLE_APPLICATION_CREDENTIALS).")

    if not os.path.exists(cred_path):
        logger.error(f"Firebase service account key file not found at path: {cred_path}")
        raise FileNotFoundError(f"Firebase service account key file not found at path: {cred_path}")

    return credentials.Certificate(cred_path)


def initialize_firebase_app(service_account: Optional[Dict[str, Any]] = None):
    """
    Initializes the Firebase Admin SDK.
    An explicit service account dict (used by the debug scripts) wins over the environment.
    """
    global _firebase_app_initialized
    if _firebase_app_initialized:
        logger.info("Firebase app already initialized.")
        return firebase_admin.get_app()

    try:
        cred = _build_credential(service_account)
        firebase_admin.initialize_app(cred)
        _firebase_app_initialized = True
        logger.info("Firebase Admin SDK initialized successfully.")
        return firebase_admin.get_app()
    except Exception as e:
        logger.error(f"Error initializing Firebase Admin SDK: {e}", exc_info=True)
        raise


def get_firebase_app():
    """
    Returns the initialized Firebase app.
    Initializes the app if it hasn't been initialized yet.
    """
    if not _firebase_app_initialized:
        return initialize_firebase_app()
    return firebase_admin.get_app()


def get_firestore_client():
    return firestore.client(app=get_firebase_app())
