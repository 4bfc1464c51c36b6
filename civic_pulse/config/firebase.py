"""
Firebase Firestore initialization.
Single Firestore client used by the similar-issue lookup.
"""

import json
import logging
import os
from typing import Optional

import firebase_admin
from firebase_admin import credentials, firestore, initialize_app

from civic_pulse.core.settings import settings

logger = logging.getLogger(__name__)

db: Optional[firestore.Client] = None

REQUIRED_CREDENTIAL_FIELDS = ("type", "project_id", "private_key", "client_email")


def _load_certificate(cred_path: str) -> credentials.Certificate:
    """Validate the service account file before handing it to the SDK."""
    if not os.path.exists(cred_path):
        raise FileNotFoundError(
            f"Firebase credentials file not found: {cred_path}\n"
            f"Check FIREBASE_CREDENTIALS_PATH (cwd: {os.getcwd()})"
        )

    try:
        with open(cred_path, "r") as f:
            cred_data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Firebase credentials file is not valid JSON: {e}")

    missing_fields = [field for field in REQUIRED_CREDENTIAL_FIELDS if field not in cred_data]
    if missing_fields:
        raise ValueError(f"Firebase credentials file is missing required fields: {missing_fields}")

    logger.info(f"[FIRESTORE] Credentials validated for project {cred_data.get('project_id', 'N/A')}")
    return credentials.Certificate(cred_path)


def initialize_firestore() -> firestore.Client:
    global db

    if db is not None:
        return db

    try:
        if not firebase_admin._apps:
            if settings.FIREBASE_CREDENTIALS_PATH:
                initialize_app(_load_certificate(settings.FIREBASE_CREDENTIALS_PATH))
                logger.info("[FIRESTORE] Firebase Admin SDK initialized with service account")
            else:
                logger.info("[FIRESTORE] No credentials path set, using Application Default Credentials")
                initialize_app()

        db = firestore.client()
        logger.info(f"[FIRESTORE] Project: {settings.FIREBASE_PROJECT_ID or 'default'}")
        return db

    except FileNotFoundError as e:
        raise RuntimeError(f"Firestore initialization FAILED - credentials file not found. {e}")
    except ValueError as e:
        raise RuntimeError(f"Firestore initialization FAILED - invalid credentials file. {e}")
    except Exception as e:
        raise RuntimeError(f"Firestore initialization FAILED. Error: {e}")


def get_db() -> firestore.Client:
    """
    Get the initialized Firestore client.

    Raises RuntimeError if Firestore cannot be initialized.
    """
    if db is None:
        initialize_firestore()
    return db
