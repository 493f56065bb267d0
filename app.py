from flask import Flask, request, jsonify
from supabase import create_client
import asyncio
import logging
import sys

from api.sms_handler import SMSHandler
from api.turn_handler import TurnHandler
from api.services.images import ImageSearchService
from api.services.qna import QnAService
from api.services.sms import SMSService
from api.services.storage import StorageService, MemoryStorageService
from api.services.trivia import TriviaService
from api.services.verification import VerificationService
from lib.config import get_settings
from lib.error_handler import AppError, ErrorHandler
from lib.twilio_client import TwilioClient

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    stream=sys.stdout
)
logger = logging.getLogger(__name__)

settings = get_settings()


def build_turn_handler(settings, supabase_client=None, twilio_client=None) -> TurnHandler:
    """Wire the external services into a turn handler"""
    if supabase_client is None:
        logger.info("Initializing Supabase client...")
        supabase_client = create_client(settings.supabase_url, settings.supabase_key)
        logger.info("Supabase client initialized successfully")

    if settings.session_backend == 'memory':
        logger.warning("Using in-memory session storage - sessions are lost on restart")
        storage_service = MemoryStorageService()
    else:
        storage_service = StorageService(supabase_client=supabase_client)

    logger.info("Initializing Twilio client...")
    sms_service = SMSService(
        twilio_client=twilio_client or TwilioClient(),
        admin_numbers=settings.admin_numbers
    )
    logger.info("Twilio client initialized successfully")

    image_service = None
    if settings.image_search_enabled and settings.bing_search_key:
        image_service = ImageSearchService(settings.bing_search_key)

    return TurnHandler(
        storage_service=storage_service,
        trivia_service=TriviaService(supabase_client),
        verification_service=VerificationService(
            sms_service,
            code_ttl_minutes=settings.sacred_code_ttl_minutes
        ),
        qna_service=QnAService(
            settings.qna_endpoint_hostname,
            settings.qna_knowledgebase_id,
            settings.qna_auth_key
        ),
        image_service=image_service,
        points_per_answer=settings.points_per_answer,
        welcome_card_path=settings.welcome_card_path,
    )


app = Flask(__name__)
turn_handler = build_turn_handler(settings)
sms_handler = SMSHandler(turn_handler)
error_handler = ErrorHandler()

@app.route("/test", methods=['GET'])
def test():
    """Test endpoint to verify server is running"""
    return jsonify({
        "status": "ok",
        "message": "Server is running"
    })

@app.route("/sms", methods=['POST'])
def handle_sms():
    """Handle incoming SMS webhooks from Twilio"""
    try:
        logger.info("Received webhook from Twilio")
        webhook_data = request.form.to_dict(flat=False)

        response = asyncio.run(sms_handler.handle_incoming_message(webhook_data))

        logger.info("Successfully processed message")
        return response, 200, {'Content-Type': 'application/xml'}

    except Exception as e:
        logger.error(f"Error handling message: {str(e)}", exc_info=True)
        return (
            '<?xml version="1.0" encoding="UTF-8"?><Response>'
            '<Message>Sorry, an error occurred.</Message></Response>',
            500,
            {'Content-Type': 'application/xml'}
        )

@app.route("/api/messages", methods=['POST'])
def handle_chat_message():
    """Handle a message from the JSON web chat channel"""
    data = request.get_json(silent=True) or {}
    user_id = data.get('from')
    if not user_id:
        return jsonify({'status': 'error', 'message': 'Missing from'}), 400

    try:
        replies = asyncio.run(turn_handler.process_turn(user_id, data.get('text', '')))
        return jsonify({
            'status': 'success',
            'replies': [reply.model_dump() for reply in replies]
        })
    except AppError as e:
        logger.error(f"Error handling chat message: {e.message}")
        return jsonify({'status': 'error', 'message': e.user_message}), e.status_code
    except Exception as e:
        logger.error(f"Error handling chat message: {str(e)}", exc_info=True)
        return jsonify({'status': 'error', 'message': error_handler.handle_turn_error(e)}), 500

if __name__ == "__main__":
    logger.info("Starting Flask server...")
    app.run(debug=True, port=8000)
