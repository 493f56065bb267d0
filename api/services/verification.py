import logging
import re
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from api.models import Session
from lib.phone import normalize_phone
from .sms import SMSService

logger = logging.getLogger(__name__)

CODE_PATTERN = re.compile(r"^-\s*(\d+)$")

CODE_MESSAGE = "Sacred Code: -{code}"

CODE_MATCH = 'match'
CODE_MISMATCH = 'mismatch'
CODE_EXPIRED = 'expired'
CODE_MISSING = 'missing'


def looks_like_code(text: str) -> bool:
    return CODE_PATTERN.match((text or '').strip()) is not None


def generate_code() -> str:
    """A single random unsigned 32-bit draw, as a decimal string"""
    return str(secrets.randbits(32))


def _as_utc(moment: datetime) -> datetime:
    # Naive timestamps are UTC
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


class VerificationService:
    def __init__(self, sms_service: SMSService, code_ttl_minutes: int = 10):
        self.sms = sms_service
        self.code_ttl = timedelta(minutes=code_ttl_minutes)

    async def issue_code(self, session: Session, phone_text: str) -> str:
        """Generate a sacred code, text it to the user and admins, and store it on the session"""
        phone = normalize_phone(phone_text)
        if phone is None:
            raise ValueError(f"Not a phone number: {phone_text}")

        code = generate_code()
        body = CODE_MESSAGE.format(code=code)

        logger.info(f"Issuing sacred code for {session.user_id}")
        await self.sms.send_message(phone, body)

        # Only a code the user actually received goes on the session
        session.phone_number = phone
        session.sacred_code = code
        session.code_issued_at = datetime.now(timezone.utc)

        await self.sms.notify_admins(body)
        return code

    def check_code(self, session: Session, text: str, now: Optional[datetime] = None) -> str:
        """Compare a '-1234' style reply with the code on the session"""
        if not session.sacred_code:
            return CODE_MISSING

        now = _as_utc(now or datetime.now(timezone.utc))
        if session.code_issued_at and now - _as_utc(session.code_issued_at) > self.code_ttl:
            logger.info(f"Sacred code expired for {session.user_id}")
            return CODE_EXPIRED

        match = CODE_PATTERN.match((text or '').strip())
        if not match or not secrets.compare_digest(match.group(1), session.sacred_code):
            return CODE_MISMATCH
        return CODE_MATCH
