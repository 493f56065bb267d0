import os
import pytest
from unittest.mock import AsyncMock, MagicMock
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.append(str(project_root))

# Settings read the environment at import time, so set it before importing the app
os.environ.setdefault('TWILIO_ACCOUNT_SID', 'ACtest')
os.environ.setdefault('TWILIO_AUTH_TOKEN', 'test-token')
os.environ.setdefault('TWILIO_PHONE_NUMBER', '+15005550006')
os.environ['SESSION_BACKEND'] = 'memory'
os.environ['WELCOME_CARD_PATH'] = str(project_root / 'cards' / 'welcomeCard.json')

# Mock Supabase before importing app
import supabase
def mock_create_client(*args, **kwargs):
    mock_client = MagicMock()
    mock_client.table = MagicMock()
    mock_client.rpc = MagicMock()
    return mock_client

supabase.create_client = mock_create_client

from api.models import TriviaQuestion
from api.services.storage import MemoryStorageService
from api.services.verification import VerificationService
from api.turn_handler import TurnHandler

# Now we can safely import the app
from app import app

TEST_PHONE = "+17195550123"
WELCOME_CARD_PATH = os.environ['WELCOME_CARD_PATH']

QUESTIONS = [
    TriviaQuestion(question="What gas do trees absorb?", answer="Carbon dioxide", fact="Trees store carbon in their wood."),
    TriviaQuestion(question="Which kingdom built the Marib dam?", answer="Saba", fact="The dam stood for a thousand years."),
    TriviaQuestion(question="What powers the climate?", answer="The sun", fact="Sunlight drives the weather."),
    TriviaQuestion(question="How many continents are there?", answer="Seven", fact="Antarctica is one of them."),
]

@pytest.fixture
def test_client():
    app.config['TESTING'] = True
    return app.test_client()

@pytest.fixture
def mock_sms_service():
    mock = MagicMock()
    mock.send_message = AsyncMock(return_value='SM123')
    mock.notify_admins = AsyncMock()
    return mock

@pytest.fixture
def mock_trivia_service():
    mock = MagicMock()
    mock.random_question = MagicMock(side_effect=list(QUESTIONS))
    return mock

@pytest.fixture
def mock_qna_service():
    mock = MagicMock()
    mock.get_answer = AsyncMock(return_value=None)
    return mock

@pytest.fixture
def storage_service():
    return MemoryStorageService()

@pytest.fixture
def turn_handler(storage_service, mock_trivia_service, mock_sms_service, mock_qna_service):
    return TurnHandler(
        storage_service=storage_service,
        trivia_service=mock_trivia_service,
        verification_service=VerificationService(mock_sms_service, code_ttl_minutes=10),
        qna_service=mock_qna_service,
        points_per_answer=10,
        welcome_card_path=WELCOME_CARD_PATH,
    )
