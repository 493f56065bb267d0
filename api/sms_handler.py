import logging
from typing import Any, Dict, List

from twilio.twiml.messaging_response import MessagingResponse

from api.models import Reply
from api.turn_handler import TurnHandler
from lib.error_handler import ErrorHandler

logger = logging.getLogger(__name__)

class SMSHandler:
    def __init__(self, turn_handler: TurnHandler):
        self.turn_handler = turn_handler
        self.error_handler = ErrorHandler()

    async def handle_incoming_message(self, webhook_data: Dict[str, Any]) -> str:
        """Handle incoming SMS webhook from Twilio"""
        try:
            from_number = self._field(webhook_data, 'From')
            message = self._field(webhook_data, 'Body')
            logger.info(f"Processing text from {from_number}: {message[:20]}...")

            replies = await self.turn_handler.process_turn(from_number, message)
            return self._create_twiml_response(replies)

        except Exception as e:
            error_message = self.error_handler.handle_turn_error(e)
            return self._create_twiml_response([Reply.prompt(error_message)])

    @staticmethod
    def _field(webhook_data: Dict[str, Any], name: str) -> str:
        # Flask's to_dict(flat=False) gives lists, to_dict() gives plain strings
        value = webhook_data.get(name, '')
        if isinstance(value, list):
            value = value[0] if value else ''
        return value or ''

    def _create_twiml_response(self, replies: List[Reply]) -> str:
        """Create TwiML response, one <Message> per reply"""
        resp = MessagingResponse()
        for reply in replies:
            text = reply.as_sms_text()
            if not text and not reply.media_urls:
                continue
            message = resp.message(text)
            for url in reply.media_urls:
                message.media(url)
        return str(resp)
