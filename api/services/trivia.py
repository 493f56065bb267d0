import logging

from api.models import TriviaQuestion
from lib.error_handler import AppError

logger = logging.getLogger(__name__)

class TriviaService:
    def __init__(self, supabase_client, function_name: str = 'random_trivia_question'):
        self.supabase = supabase_client
        self.function_name = function_name

    def random_question(self) -> TriviaQuestion:
        """Pull one random question row from the trivia table"""
        try:
            result = self.supabase.rpc(self.function_name, {}).execute()
        except Exception as e:
            logger.error(f"Failed to fetch trivia question: {str(e)}")
            raise AppError(f"Trivia query failed: {str(e)}", user_message="The ancient scrolls are out of reach right now. Please try again in a moment.")

        rows = result.data
        if isinstance(rows, dict):
            rows = [rows]
        if not rows:
            logger.error("Trivia table returned no rows")
            raise AppError("No trivia questions available", status_code=503, user_message="The council has run out of questions for now. Please come back later.")

        question = TriviaQuestion.from_row(rows[0])
        logger.info(f"Drew trivia question: {question.question[:40]}...")
        return question
