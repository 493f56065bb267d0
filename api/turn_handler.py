import logging
from typing import List, Optional

from api.cards import create_adaptive_card_attachment
from api.models import Reply, Session, EXPECTING_INPUT
from api.services.verification import (
    VerificationService,
    looks_like_code,
    CODE_MATCH,
    CODE_EXPIRED,
    CODE_MISSING,
)
from api.services.qna import QnAService
from api.services.trivia import TriviaService
from api.services.images import ImageSearchService, PLACEHOLDER_URL
from lib.error_handler import AppError, ErrorHandler
from lib.phone import is_phone_number

logger = logging.getLogger(__name__)

QUIT_COMMANDS = ('quit', 'exit', 'end game', 'stop')
PASSPHRASES = ('climate', 'change', 'world', 'future', 'please')

CODE_SENT_TEXT = (
    "Great I just sent a sacred code to your frequency, can you provide that to me please? "
    "(Please enter the dash along with the code)"
)
CODE_MISMATCH_TEXT = "I'm sorry, something doesn't appear to be correct. Please try again."
CODE_EXPIRED_TEXT = "That sacred code has faded. Send me your phone number again and I'll send a new one."
NO_CODE_TEXT = "I haven't sent you a sacred code yet. What is your phone number?"
EXPLAIN_GAME_TEXT = (
    "Ok. AMUN.... The fate of the whole nation is in your hands. I ask you, immerse yourself into "
    "my story (what you call mystery). Enter into the kosmos of the ancient and future world. "
    "See through the eyes of the Ancient Sabaens and survive the year 2033. Do this by changing "
    "your behavior NOW! You will have approximately 10 seconds to master these questions. "
    "Are you ready? Well come. I mean welcome..."
)
FIRST_QUESTION_TEXT = (
    "Excellent, let's explore your thought patterns now if you don't mind. "
    "Can you answer a couple of questions for me... {question}"
)
CORRECT_TEXT = "Great JOB! We need more people like you. Let's try another one, {question}"
WRONG_TEXT = (
    "Let's try again, that was a nice try, the answer is: {answer}.  "
    "The facts of the matter are actually, {fact} Ok try this question, {question}"
)
FAREWELL_TEXT = (
    "Thank you kosmosan, your score is {score}. Now you have been initiated into the supreme "
    "council and you know just enough to start and go out and save the world."
)


def is_correct_answer(user_answer: str, correct_answer: str) -> bool:
    """Lenient match: the user's answer only has to appear within the correct answer"""
    user_answer = (user_answer or '').strip().lower()
    if not user_answer:
        return False
    return user_answer in (correct_answer or '').strip().lower()


class TurnHandler:
    def __init__(
        self,
        storage_service,
        trivia_service: TriviaService,
        verification_service: VerificationService,
        qna_service: QnAService,
        image_service: Optional[ImageSearchService] = None,
        points_per_answer: int = 10,
        welcome_card_path: str = './cards/welcomeCard.json',
    ):
        self.storage = storage_service
        self.trivia = trivia_service
        self.verification = verification_service
        self.qna = qna_service
        self.images = image_service
        self.points_per_answer = points_per_answer
        self.welcome_card_path = welcome_card_path
        self.error_handler = ErrorHandler()

    async def process_turn(self, user_id: str, text: str) -> List[Reply]:
        """Run one conversational turn and return the outbound replies"""
        logger.info(f"Processing turn for {user_id}")
        session = self.storage.load(user_id)
        try:
            replies = await self._dispatch(session, text or '')
        except AppError as e:
            replies = [Reply.prompt(self.error_handler.handle_turn_error(e))]
        except Exception:
            # Persist whatever changed, but let the original error surface
            try:
                self.storage.save(session)
            except Exception as save_error:
                logger.error(f"Failed to save session for {user_id}: {str(save_error)}")
            raise

        try:
            self.storage.save(session)
        except Exception as e:
            raise AppError(
                f"Failed to save session for {user_id}: {str(e)}",
                user_message=self.error_handler.handle_storage_error(e)
            ) from e
        return replies

    async def _dispatch(self, session: Session, text: str) -> List[Reply]:
        user_answer = text.strip().lower()

        if user_answer in QUIT_COMMANDS:
            return self._quit(session)

        if looks_like_code(user_answer):
            return self._check_code(session, user_answer)

        if is_phone_number(text):
            return await self._send_code(session, text)

        if not session.verified and any(word in user_answer for word in PASSPHRASES):
            logger.info(f"Passphrase accepted for {session.user_id}")
            session.verified = True
            return [self._next_question(session, FIRST_QUESTION_TEXT)]

        if not session.verified:
            return await self._faq(text)

        return [self._score_answer(session, user_answer)]

    def _quit(self, session: Session) -> List[Reply]:
        logger.info(f"{session.user_id} quit with score {session.score}")
        reply = Reply.statement(FAREWELL_TEXT.format(score=session.score))
        session.reset()
        return [reply]

    async def _send_code(self, session: Session, text: str) -> List[Reply]:
        try:
            await self.verification.issue_code(session, text)
        except Exception as e:
            return [Reply.prompt(self.error_handler.handle_sms_error(e))]
        return [Reply.prompt(CODE_SENT_TEXT)]

    def _check_code(self, session: Session, text: str) -> List[Reply]:
        result = self.verification.check_code(session, text)
        if result == CODE_MISSING:
            return [Reply.prompt(NO_CODE_TEXT)]
        if result == CODE_EXPIRED:
            session.sacred_code = ''
            session.code_issued_at = None
            return [Reply.prompt(CODE_EXPIRED_TEXT)]
        if result != CODE_MATCH:
            return [Reply.prompt(CODE_MISMATCH_TEXT)]

        logger.info(f"Sacred code verified for {session.user_id}")
        session.verified = True
        session.sacred_code = ''
        session.code_issued_at = None
        return [
            Reply.prompt(EXPLAIN_GAME_TEXT),
            self._next_question(session, FIRST_QUESTION_TEXT),
        ]

    async def _faq(self, text: str) -> List[Reply]:
        answer = await self.qna.get_answer(text)
        if answer:
            return [Reply.prompt(answer)]
        reply = Reply(input_hint=EXPECTING_INPUT)
        reply.attachments.append(create_adaptive_card_attachment(self.welcome_card_path))
        return [reply]

    def _next_question(self, session: Session, template: str, **fields) -> Reply:
        question = self.trivia.random_question()
        session.advance_question(question)
        return Reply.prompt(template.format(question=question.question, **fields))

    def _score_answer(self, session: Session, user_answer: str) -> Reply:
        if not session.current_question:
            return self._next_question(session, "{question}")

        if is_correct_answer(user_answer, session.current_answer):
            # Only score once the question has moved on, so a failed draw can't be replayed for points
            reply = self._next_question(session, CORRECT_TEXT)
            session.score += self.points_per_answer
            logger.info(f"Correct answer from {session.user_id}, score {session.score}")
            return reply

        reply = self._next_question(
            session,
            WRONG_TEXT,
            answer=session.current_answer.lower(),
            fact=session.current_fact.lower()
        )
        # The question just answered is now the previous one
        image_url = self._answer_image(session.previous_answer)
        if image_url:
            reply.media_urls.append(image_url)
        return reply

    def _answer_image(self, answer: str) -> Optional[str]:
        if not self.images or not answer:
            return None
        url = self.images.get_image_url(answer)
        return None if url == PLACEHOLDER_URL else url
