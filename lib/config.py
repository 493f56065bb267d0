from pydantic import BaseModel
from dotenv import load_dotenv
from typing import List
import os

from lib.phone import normalize_phone

load_dotenv()

class Settings(BaseModel):
    # Twilio settings
    twilio_account_sid: str = os.getenv('TWILIO_ACCOUNT_SID', '')
    twilio_auth_token: str = os.getenv('TWILIO_AUTH_TOKEN', '')
    twilio_phone_number: str = os.getenv('TWILIO_PHONE_NUMBER', '')

    # Extra numbers that get a copy of every sacred code
    admin_notify_numbers: str = os.getenv('ADMIN_NOTIFY_NUMBERS', '')

    @property
    def admin_numbers(self) -> List[str]:
        numbers = []
        for entry in self.admin_notify_numbers.split(','):
            entry = entry.strip()
            if not entry:
                continue
            # E.164 numbers go through untouched; anything else is read as a US number
            numbers.append(entry if entry.startswith('+') else normalize_phone(entry) or entry)
        return numbers

    # Supabase settings
    supabase_url: str = os.getenv('SUPABASE_URL', '')
    supabase_key: str = os.getenv('SUPABASE_KEY', '')
    session_backend: str = os.getenv('SESSION_BACKEND', 'supabase')

    # QnA Maker settings
    qna_endpoint_hostname: str = os.getenv('QNA_ENDPOINT_HOSTNAME', '')
    qna_knowledgebase_id: str = os.getenv('QNA_KNOWLEDGEBASE_ID', '')
    qna_auth_key: str = os.getenv('QNA_AUTH_KEY', '')

    # Bing image search settings
    bing_search_key: str = os.getenv('BING_SEARCH_KEY', '')
    image_search_enabled: bool = os.getenv('IMAGE_SEARCH_ENABLED', 'false').lower() in ('1', 'true', 'yes')

    # Game settings
    sacred_code_ttl_minutes: int = int(os.getenv('SACRED_CODE_TTL_MINUTES', '10'))
    points_per_answer: int = int(os.getenv('POINTS_PER_ANSWER', '10'))
    welcome_card_path: str = os.getenv('WELCOME_CARD_PATH', os.path.join('.', 'cards', 'welcomeCard.json'))

def get_settings() -> Settings:
    return Settings()
