import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./bloodbridge.db")

# Firebase Configuration (phone OTP sign-in happens on the device; we only verify ID tokens)
FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID")

# Donation appointment slots, comma separated and in display order
DAILY_SLOTS = [
    s.strip()
    for s in os.getenv(
        "DAILY_SLOTS",
        "09:00-10:00,10:00-11:00,11:00-12:00,12:00-13:00,14:00-15:00,15:00-16:00,16:00-17:00",
    ).split(",")
    if s.strip()
]
BLOOD_BANK_LOCATION = os.getenv("BLOOD_BANK_LOCATION", "Mega Blood Bank, Hyderabad")
# When false, donor posts can be submitted without picking an appointment
APPOINTMENT_BOOKING_REQUIRED = os.getenv("APPOINTMENT_BOOKING_REQUIRED", "true").lower() == "true"

# Which administrative level (besides state) a post must carry: district, constituency or both
LOCATION_SCHEMA = os.getenv("LOCATION_SCHEMA", "district").lower()

# Live feed shows only the most recent posts
FEED_LIMIT = int(os.getenv("FEED_LIMIT", "50"))

# Rate limiting for write endpoints (Redis is optional, memory-only without it)
REDIS_URL = os.getenv("REDIS_URL")
RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
POST_RATE_LIMIT = int(os.getenv("POST_RATE_LIMIT", "10"))
POST_RATE_WINDOW_SECONDS = int(os.getenv("POST_RATE_WINDOW_SECONDS", "3600"))

# Retry hint sent with 503 responses when the store is unreachable
BACKEND_RETRY_AFTER_SECONDS = int(os.getenv("BACKEND_RETRY_AFTER_SECONDS", "5"))

FRONTEND_ORIGINS = [
    o.strip() for o in os.getenv("FRONTEND_ORIGINS", "*").split(",") if o.strip()
]
