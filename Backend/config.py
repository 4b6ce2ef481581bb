# config.py
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

REPO_ROOT = Path(__file__).resolve().parent.parent


class Config:
    # ---- Quiz content ----
    QUESTIONS_DIR = os.getenv("QUESTIONS_DIR", str(REPO_ROOT / "questions"))
    QUESTIONS_PER_QUIZ = int(os.getenv("QUESTIONS_PER_QUIZ", "5"))

    # Max Levenshtein distance still accepted as a correct answer
    FUZZY_THRESHOLD = int(os.getenv("FUZZY_THRESHOLD", "2"))

    # ---- Firestore ----
    SUBMISSIONS_COLLECTION = os.getenv("SUBMISSIONS_COLLECTION", "submissions")

    # "development" makes every day a Friday (weekly summary always shown)
    APP_ENV = os.getenv("APP_ENV", "production")

    # ---- Client ----
    QUIZ_API_URL = os.getenv("QUIZ_API_URL", "http://localhost:5001")
    SHARE_URL = os.getenv("SHARE_URL", "https://www.femkjappe.no")
    LOCAL_STATE_PATH = os.getenv(
        "LOCAL_STATE_PATH", str(Path.home() / ".femkjappe" / "state.json")
    )
    REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "10"))

    # ---- Firebase credentials (resolved in services/firebase.py) ----
    FIREBASE_SERVICE_ACCOUNT_JSON = os.getenv("FIREBASE_SERVICE_ACCOUNT_JSON")
    GOOGLE_APPLICATION_CREDENTIALS = os.getenv("GOOGLE_APPLICATION_CREDENTIALS")
    FIREBASE_CREDENTIALS_DIR = os.getenv(
        "FIREBASE_CREDENTIALS_DIR", str(REPO_ROOT / "firebase" / "credentials")
    )

    @classmethod
    def is_development(cls) -> bool:
        return cls.APP_ENV.lower() == "development"
