from twilio.rest import Client
from supabase import create_client
import logging

from lib.config import get_settings

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

def check_twilio_setup(settings):
    client = Client(settings.twilio_account_sid, settings.twilio_auth_token)

    account = client.api.accounts(settings.twilio_account_sid).fetch()
    print(f"\nTwilio Account Status:")
    print(f"Type: {account.type}")
    print(f"Status: {account.status}")

    # Trial accounts can only text verified numbers
    print("\nVerified Numbers:")
    verified_numbers = client.outgoing_caller_ids.list()
    if verified_numbers:
        for number in verified_numbers:
            print(f"- {number.phone_number}")
    else:
        print("No verified numbers found")

def check_supabase_setup(settings):
    supabase = create_client(settings.supabase_url, settings.supabase_key)

    sessions = supabase.table('bot_sessions').select('user_id').limit(1).execute()
    print(f"\nbot_sessions reachable ({len(sessions.data)} sample row(s))")

    question = supabase.rpc('random_trivia_question', {}).execute()
    if question.data:
        print(f"Sample question: {question.data[0]['question_txt']}")
    else:
        print("No trivia questions found - run scripts/seed_questions.py")

if __name__ == "__main__":
    settings = get_settings()
    check_twilio_setup(settings)
    check_supabase_setup(settings)
