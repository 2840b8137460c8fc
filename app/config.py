# app/config.py

import os
import json
import logging
import firebase_admin
from firebase_admin import credentials
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

# --- Service settings ---
STORAGE_BACKEND: str = os.environ.get("STORAGE_BACKEND", "local").lower()
UPLOAD_DIR: str = os.environ.get("UPLOAD_DIR", "uploads")
PALETTE_SIZE: int = int(os.environ.get("PALETTE_SIZE", "5"))
LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO").upper()
PORT: int = int(os.environ.get("PORT", "5000"))
ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.environ.get("ALLOWED_ORIGINS", "*").split(",")
    if origin.strip()
]

# --- Cloud storage settings ---
FIREBASE_STORAGE_BUCKET = os.environ.get("FIREBASE_STORAGE_BUCKET")
SUPABASE_URL = os.environ.get("SUPABASE_URL")
SUPABASE_KEY = os.environ.get("SUPABASE_KEY")
SUPABASE_BUCKET = os.environ.get("SUPABASE_BUCKET")


def initialize_firebase():
    """
    Initializes the Firebase Admin SDK with the storage bucket configured.

    Credentials are looked up in two places:
    1. FIREBASE_ADMIN_CREDENTIALS, a JSON string (deployment)
    2. FIREBASE_ADMIN_CREDENTIALS_PATH, a service account file (local development)

    Safe to call more than once; the existing default app is reused.
    """
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass  # no default app yet

    options = {"storageBucket": FIREBASE_STORAGE_BUCKET}

    admin_json_string = os.environ.get("FIREBASE_ADMIN_CREDENTIALS")
    if admin_json_string:
        logger.info("Initializing Firebase from environment variable...")
        try:
            cred = credentials.Certificate(json.loads(admin_json_string))
            return firebase_admin.initialize_app(cred, options)
        except Exception as e:
            logger.error(f"Failed to initialize Firebase from environment variable: {e}")
            raise RuntimeError("Firebase initialization failed from environment.") from e

    cred_path = os.environ.get("FIREBASE_ADMIN_CREDENTIALS_PATH")
    if cred_path and os.path.exists(cred_path):
        logger.info(f"Initializing Firebase from local file: {cred_path}")
        try:
            cred = credentials.Certificate(cred_path)
            return firebase_admin.initialize_app(cred, options)
        except Exception as e:
            logger.error(f"Failed to initialize Firebase from local file: {e}")
            raise RuntimeError("Firebase initialization failed from local file.") from e

    logger.error("Firebase credentials missing for both deployment and local paths.")
    raise RuntimeError("Cannot use Firebase storage without Firebase credentials.")
