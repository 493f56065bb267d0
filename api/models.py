from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

EXPECTING_INPUT = 'expectingInput'
IGNORING_INPUT = 'ignoringInput'
ACCEPTING_INPUT = 'acceptingInput'

ADAPTIVE_CARD_CONTENT_TYPE = 'application/vnd.microsoft.card.adaptive'


class Session(BaseModel):
    """Per-user game record, read and overwritten on every turn"""
    user_id: str
    score: int = 0
    phone_number: str = ''
    sacred_code: str = ''
    code_issued_at: Optional[datetime] = None
    current_question: str = ''
    current_answer: str = ''
    current_fact: str = ''
    previous_question: str = ''
    previous_answer: str = ''
    previous_fact: str = ''
    verified: bool = False

    def advance_question(self, question: 'TriviaQuestion') -> None:
        """Shift the current question to previous and make `question` current"""
        self.previous_question = self.current_question
        self.previous_answer = self.current_answer
        self.previous_fact = self.current_fact
        self.current_question = question.question
        self.current_answer = question.answer
        self.current_fact = question.fact

    def reset(self) -> None:
        self.score = 0
        self.phone_number = ''
        self.sacred_code = ''
        self.code_issued_at = None
        self.previous_question = ''
        self.previous_answer = ''
        self.previous_fact = ''
        self.verified = False


class TriviaQuestion(BaseModel):
    question: str
    answer: str
    fact: str = ''

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> 'TriviaQuestion':
        return cls(
            question=str(row.get('question_txt') or ''),
            answer=str(row.get('correct_answer') or ''),
            fact=str(row.get('fact_txt') or '')
        )


class Attachment(BaseModel):
    content_type: str = ADAPTIVE_CARD_CONTENT_TYPE
    content: Dict[str, Any] = Field(default_factory=dict)
    fallback_text: str = ''


class Reply(BaseModel):
    text: str = ''
    speak: str = ''
    input_hint: str = ACCEPTING_INPUT
    attachments: List[Attachment] = Field(default_factory=list)
    media_urls: List[str] = Field(default_factory=list)

    @classmethod
    def prompt(cls, text: str) -> 'Reply':
        return cls(text=text, speak=text, input_hint=EXPECTING_INPUT)

    @classmethod
    def statement(cls, text: str) -> 'Reply':
        return cls(text=text, speak=text, input_hint=IGNORING_INPUT)

    def as_sms_text(self) -> str:
        """Plain text for channels that can't render cards"""
        parts = [self.text] if self.text else []
        parts.extend(a.fallback_text for a in self.attachments if a.fallback_text)
        return "\n\n".join(parts)
