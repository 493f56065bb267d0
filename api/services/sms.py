import logging
import asyncio
from typing import List, Optional

from lib.twilio_client import TwilioClient

logger = logging.getLogger(__name__)

class SMSService:
    def __init__(self, twilio_client: TwilioClient, admin_numbers: Optional[List[str]] = None):
        self.client = twilio_client
        self.admin_numbers = admin_numbers or []
        logger.info(f"SMS service initialized with {len(self.admin_numbers)} admin number(s)")

    async def send_message(self, to: str, body: str) -> str:
        """Send an SMS message using Twilio"""
        try:
            logger.info(f"Sending message to {to}")
            # Run Twilio API call in an executor to prevent blocking
            loop = asyncio.get_event_loop()
            sid = await loop.run_in_executor(
                None,
                lambda: self.client.send_message(to, body)
            )
            logger.info(f"Message sent successfully: {sid}")
            return sid
        except Exception as e:
            logger.error(f"Failed to send message: {str(e)}")
            raise

    async def notify_admins(self, body: str) -> None:
        """Copy a message to every admin number. Failures are logged, not raised."""
        for number in self.admin_numbers:
            try:
                await self.send_message(number, body)
            except Exception as e:
                logger.warning(f"Failed to notify admin {number}: {str(e)}")
