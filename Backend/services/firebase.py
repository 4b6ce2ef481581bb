# services/firebase.py
import json
import logging
import os
from pathlib import Path

import firebase_admin
from firebase_admin import credentials, firestore

from config import Config, REPO_ROOT

logger = logging.getLogger(__name__)

_db = None


def _credential_file() -> Path | None:
    """
    First existing service-account file, in order:
      1) GOOGLE_APPLICATION_CREDENTIALS as given (quotes, ~ and $VARS expanded)
      2) the same file name under FIREBASE_CREDENTIALS_DIR, or relative to the repo
      3) the first *.json in FIREBASE_CREDENTIALS_DIR
    """
    cred_dir = Path(Config.FIREBASE_CREDENTIALS_DIR)
    env_path = (Config.GOOGLE_APPLICATION_CREDENTIALS or "").strip().strip('"').strip("'")
    if env_path:
        given = Path(os.path.expandvars(env_path)).expanduser()
        for candidate in (given, cred_dir / given.name, REPO_ROOT / given):
            if candidate.exists():
                return candidate
        logger.warning("GOOGLE_APPLICATION_CREDENTIALS=%s not found", env_path)

    if cred_dir.is_dir():
        matches = sorted(cred_dir.glob("*.json"))
        if matches:
            return matches[0]
    return None


def _resolve_cred():
    if Config.FIREBASE_SERVICE_ACCOUNT_JSON:
        try:
            info = json.loads(Config.FIREBASE_SERVICE_ACCOUNT_JSON)
        except ValueError as e:
            raise RuntimeError(f"Invalid FIREBASE_SERVICE_ACCOUNT_JSON: {e}") from e
        return credentials.Certificate(info)

    path = _credential_file()
    if path is None:
        # On Cloud Run, default credentials (attached service account) will work
        logger.info("No credential file found, using application default credentials")
        return credentials.ApplicationDefault()
    return credentials.Certificate(str(path))


def get_db():
    """Return a Firestore client, initializing Firebase Admin once per process."""
    global _db
    if _db is not None:
        return _db
    if not firebase_admin._apps:
        firebase_admin.initialize_app(_resolve_cred())
        logger.info("Firebase initialized")
    _db = firestore.client()
    return _db
