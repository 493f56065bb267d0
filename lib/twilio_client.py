from twilio.rest import Client
from twilio.base.exceptions import TwilioRestException
from typing import Optional
import logging
from lib.config import get_settings
from lib.error_handler import AppError

settings = get_settings()
logger = logging.getLogger(__name__)

class TwilioClient:
    def __init__(self, client: Optional[Client] = None, phone_number: Optional[str] = None):
        try:
            self.client = client or Client(
                settings.twilio_account_sid,
                settings.twilio_auth_token
            )
            self.phone_number = phone_number or settings.twilio_phone_number
        except Exception as e:
            logger.error(f"Failed to initialize Twilio client: {str(e)}")
            raise AppError("Failed to initialize messaging service")

    @staticmethod
    def format_number(phone_number: str) -> str:
        """Format a 10-digit US number as E.164. Numbers already in E.164 pass through."""
        if phone_number.startswith('+'):
            return phone_number
        return f"+1{phone_number}"

    def send_message(self, to_number: str, message: str) -> str:
        """Send an SMS message and return the message SID."""
        to_number = self.format_number(to_number)
        try:
            message = self.client.messages.create(
                body=message,
                from_=self.phone_number,
                to=to_number
            )
            logger.info(f"Message sent successfully to {to_number}")
            return message.sid
        except TwilioRestException as e:
            logger.error(f"Twilio error sending message: {str(e)}")
            if e.code == 21608:  # Unverified number
                raise AppError(
                    f"Unverified number {to_number}",
                    status_code=400,
                    user_message="This phone number is not verified with our test account."
                )
            elif e.code == 21211:  # Invalid phone number
                raise AppError(
                    f"Invalid number {to_number}",
                    status_code=400,
                    user_message="That doesn't look like a frequency I can reach. Check the number and try again."
                )
            else:
                raise AppError(f"Failed to send message: {str(e)}")
        except Exception as e:
            logger.error(f"Unexpected error sending message: {str(e)}")
            raise AppError("An unexpected error occurred while sending the message.")
