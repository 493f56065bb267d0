import json
import sys
from pathlib import Path
from supabase import create_client
from lib.config import get_settings

REQUIRED_FIELDS = ('question_txt', 'correct_answer', 'fact_txt')

def seed_questions(path: str):
    """Load trivia questions from a JSON file into the trivia_questions table"""
    try:
        settings = get_settings()
        supabase = create_client(settings.supabase_url, settings.supabase_key)

        rows = json.loads(Path(path).read_text(encoding='utf-8'))
        for row in rows:
            missing = [f for f in REQUIRED_FIELDS if f not in row]
            if missing:
                raise ValueError(f"Question {row} is missing {', '.join(missing)}")

        print(f"Inserting {len(rows)} questions into 'trivia_questions'...")
        supabase.table('trivia_questions').insert(rows).execute()
        print("Questions inserted successfully!")

    except Exception as e:
        print(f"Error seeding questions: {str(e)}")
        raise

if __name__ == "__main__":
    seed_questions(sys.argv[1] if len(sys.argv) > 1 else 'scripts/questions.json')
