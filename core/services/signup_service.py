# =============================================================================
# core/services/signup_service.py - Event Signups
# =============================================================================
# Registers participants for the synchronized event.
# One registration per email address; a second one is rejected with 409.
# =============================================================================

import logging
import secrets
from datetime import datetime, timezone

from supabase import Client

from app.exceptions import DatabaseError, DuplicateSignupError
from core.models.signup import SignupCreate, SignupResponse
from core.services.throttle import enforce_quota
from lib.rate_limiter import RateLimiter, RateLimitResult, RateLimitRule

logger = logging.getLogger(__name__)

SIGNUPS_TABLE = "pajama_party_signups"


def generate_verification_token() -> str:
    """64 hex characters from 32 random bytes."""
    return secrets.token_hex(32)


class SignupService:
    """Service for event registration."""

    def __init__(
        self,
        client: Client,
        limiter: RateLimiter | None,
        rule: RateLimitRule,
        event_date_display: str,
    ):
        self.client = client
        self.limiter = limiter
        self.rule = rule
        self.event_date_display = event_date_display

    def _email_registered(self, email: str) -> bool:
        try:
            response = (
                self.client.table(SIGNUPS_TABLE)
                .select("id")
                .eq("email", email)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error(f"Signup duplicate check failed: {e}")
            raise DatabaseError("Database error occurred", operation="signups.check") from e
        return bool(response.data)

    def register(
        self,
        signup: SignupCreate,
        identity: str,
    ) -> tuple[SignupResponse, RateLimitResult | None]:
        """
        Store a signup.

        Args:
            signup: Validated payload
            identity: Client IP; used for rate limiting and stored for consent records

        Raises:
            RateLimitExceededError: Client used up its quota
            RateLimitUnavailableError: Counter store failed
            DuplicateSignupError: Email already registered
            DatabaseError: Query or insert failed
        """
        quota = enforce_quota(self.limiter, self.rule, identity)

        if self._email_registered(signup.email):
            raise DuplicateSignupError()

        now = datetime.now(timezone.utc).isoformat()
        data = {
            "name": signup.name,
            "email": signup.email,
            "preferred_station": signup.preferred_station,
            "participation_level": signup.participation_level.value,
            "message": signup.message or None,
            "newsletter_consent": signup.newsletter_consent,
            "privacy_consent": signup.privacy_consent,
            "gdpr_consent_timestamp": now,
            "ip_address": identity,
            "user_agent": signup.user_agent,
            "consent_version": signup.consent_version,
            "legal_basis": "consent",
            "data_retention_period": "2_years",
            "source_page": signup.source_page,
            "email_verified": False,
            "verification_token": generate_verification_token(),
            "created_at": now,
            "updated_at": now,
        }

        try:
            response = self.client.table(SIGNUPS_TABLE).insert(data).execute()
        except Exception as e:
            logger.error(f"Signup insert failed: {e}")
            raise DatabaseError("Failed to save signup. Please try again.", operation="signups.insert") from e

        if not response.data:
            raise DatabaseError("Failed to save signup. Please try again.", operation="signups.insert")

        signup_id = str(response.data[0]["id"])
        logger.info(
            f"New signup: {signup.participation_level.value} level, station: {signup.preferred_station}"
        )

        return SignupResponse(
            signup_id=signup_id,
            next_steps=[
                "Check your email for verification link",
                "Join our community channels for updates",
                f"Mark {self.event_date_display} in your calendar",
            ],
        ), quota
