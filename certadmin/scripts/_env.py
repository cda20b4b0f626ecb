import logging
import os
from typing import Any, Dict

from dotenv import dotenv_values

from certadmin.core.config import PROJECT_ROOT
from certadmin.core.firebase_config import decode_service_account, get_firestore_client, initialize_firebase_app

logger = logging.getLogger(__name__)

ENV_LOCAL_PATH = os.path.join(PROJECT_ROOT, ".env.local")
SA_VARIABLE = "FIREBASE_ADMIN_SA_BASE64"


class MissingServiceAccountError(Exception):
    pass


def load_service_account(env_path: str = ENV_LOCAL_PATH) -> Dict[str, Any]:
    """Reads FIREBASE_ADMIN_SA_BASE64 from `env_path` (not the process environment) and decodes it."""
    if not os.path.exists(env_path):
        raise MissingServiceAccountError(f"No se encontró el archivo {env_path}")

    sa_base64 = dotenv_values(env_path).get(SA_VARIABLE)
    if not sa_base64:
        raise MissingServiceAccountError(f"No se encontró {SA_VARIABLE} en {os.path.basename(env_path)}")

    return decode_service_account(sa_base64)


def connect(env_path: str = ENV_LOCAL_PATH):
    """Initializes Firebase Admin with the service account from `env_path` and returns a Firestore client."""
    initialize_firebase_app(service_account=load_service_account(env_path))
    return get_firestore_client()
