import base64
import json
import logging
import time

import httpx
from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding
from cryptography.x509 import load_pem_x509_certificate
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .config import FIREBASE_PROJECT_ID
from .database import get_db
from .errors import BackendUnavailable
from .models import User

logger = logging.getLogger(__name__)

security = HTTPBearer()

GOOGLE_CERTS_URL = (
    "https://www.googleapis.com/robot/v1/metadata/x509/securetoken@system.gserviceaccount.com"
)

# Cache for Google's public keys
_cached_keys = None


async def get_google_public_keys(refresh: bool = False):
    """Fetch Google's public keys for Firebase token verification"""
    global _cached_keys
    if _cached_keys and not refresh:
        logger.debug("✅ Using cached Google public keys")
        return _cached_keys

    try:
        async with httpx.AsyncClient(timeout=10) as client:
            response = await client.get(GOOGLE_CERTS_URL)
    except httpx.HTTPError as e:
        logger.error(f"❌ Error fetching Google public keys: {str(e)}")
        raise BackendUnavailable("Sign-in service is unreachable. Please try again.") from e

    if response.status_code != 200:
        logger.error(f"❌ Failed to fetch Google public keys: HTTP {response.status_code}")
        raise BackendUnavailable("Sign-in service is unreachable. Please try again.")

    _cached_keys = response.json()
    logger.info(f"✅ Fetched {len(_cached_keys)} Google public keys")
    return _cached_keys


def _b64decode(segment: str) -> bytes:
    return base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4))


async def verify_firebase_token(token: str) -> dict:
    """
    Verify a Firebase ID token (issued after phone OTP sign-in).
    Checks the RS256 signature against Google's certificates, then the claims.
    """
    if not FIREBASE_PROJECT_ID:
        logger.error("❌ FIREBASE_PROJECT_ID not configured")
        raise HTTPException(status_code=500, detail="Firebase not configured")

    parts = token.split(".")
    if len(parts) != 3:
        logger.warning(f"⚠️ Malformed token received: {len(parts)} parts")
        raise HTTPException(status_code=401, detail="Invalid token format. Expected a valid JWT token.")
    header_b64, payload_b64, signature_b64 = parts

    try:
        header = json.loads(_b64decode(header_b64))
        payload = json.loads(_b64decode(payload_b64))
        signature = _b64decode(signature_b64)
    except (ValueError, TypeError) as e:
        logger.error(f"❌ Failed to decode token: {str(e)}")
        raise HTTPException(status_code=401, detail="Invalid token") from e

    kid = header.get("kid")
    if header.get("alg") != "RS256" or not kid:
        logger.error(f"❌ Invalid token header: alg={header.get('alg')}, kid={kid}")
        raise HTTPException(status_code=401, detail="Invalid token header")

    public_keys = await get_google_public_keys()
    if kid not in public_keys:
        logger.warning(f"⚠️ Key ID {kid} not found in public keys, refreshing cache")
        public_keys = await get_google_public_keys(refresh=True)
        if kid not in public_keys:
            raise HTTPException(status_code=401, detail="Unable to verify token signature")

    cert = load_pem_x509_certificate(public_keys[kid].encode(), default_backend())
    try:
        cert.public_key().verify(
            signature, f"{header_b64}.{payload_b64}".encode(), padding.PKCS1v15(), hashes.SHA256()
        )
    except Exception as e:
        logger.error(f"❌ Token signature verification failed: {str(e)}")
        raise HTTPException(status_code=401, detail="Invalid token signature") from e

    if payload.get("aud") != FIREBASE_PROJECT_ID:
        raise HTTPException(status_code=401, detail="Invalid token audience")
    if payload.get("iss") != f"https://securetoken.google.com/{FIREBASE_PROJECT_ID}":
        raise HTTPException(status_code=401, detail="Invalid token issuer")
    if payload.get("exp", 0) < time.time():
        raise HTTPException(
            status_code=401,
            detail="Token has expired. Please refresh your session.",
            headers={"X-Token-Expired": "true"},
        )
    if payload.get("iat", 0) > time.time() + 60:  # Allow 60 seconds clock skew
        raise HTTPException(status_code=401, detail="Invalid token")
    if not payload.get("sub"):
        raise HTTPException(status_code=401, detail="Invalid token claims")

    return payload


async def get_token_claims(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> dict:
    """Verified Firebase claims for the bearer token"""
    if not credentials:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated. Please provide a valid Bearer token in the Authorization header.",
        )
    return await verify_firebase_token(credentials.credentials)


async def get_current_uid(claims: dict = Depends(get_token_claims)) -> str:
    """The signed-in user's id, passed explicitly into every lifecycle call"""
    return claims["sub"]


async def get_current_user(
    claims: dict = Depends(get_token_claims),
    db: Session = Depends(get_db),
) -> User:
    """Get (or create on first sign in) the profile for the token's user"""
    firebase_uid = claims["sub"]
    user = db.query(User).filter(User.firebase_uid == firebase_uid).first()
    if user:
        return user

    logger.info(f"🆕 Creating profile for {firebase_uid}")
    user = User(
        firebase_uid=firebase_uid,
        phone=claims.get("phone_number"),
        name=claims.get("name"),
        email=claims.get("email"),
        donation_history=[],
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Another request created the profile between our read and insert
        db.rollback()
        return db.query(User).filter(User.firebase_uid == firebase_uid).one()
    db.refresh(user)
    return user
