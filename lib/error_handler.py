from typing import Optional
import logging

logger = logging.getLogger(__name__)

class AppError(Exception):
    def __init__(self, message: str, status_code: int = 500, user_message: Optional[str] = None):
        self.message = message
        self.status_code = status_code
        self.user_message = user_message or "An error occurred. Please try again later."
        super().__init__(self.message)

class ErrorHandler:
    @staticmethod
    def handle_turn_error(error: Exception) -> str:
        logger.error(f"Turn error: {str(error)}")
        if isinstance(error, AppError):
            return error.user_message
        return "Sorry, the council could not hear you. Please try again."

    @staticmethod
    def handle_storage_error(error: Exception) -> str:
        logger.error(f"Storage error: {str(error)}")
        return "There was an issue saving your progress. Please try again."

    @staticmethod
    def handle_sms_error(error: Exception) -> str:
        logger.error(f"SMS error: {str(error)}")
        if isinstance(error, AppError):
            return error.user_message
        return "The sacred code couldn't be sent. Please try again later."
