import logging
from typing import Dict

from api.models import Session

logger = logging.getLogger(__name__)

class StorageService:
    """Session records kept in the Supabase `bot_sessions` table, one row per user"""

    def __init__(self, supabase_client, table: str = 'bot_sessions'):
        self.supabase = supabase_client
        self.sessions_table = table
        logger.info(f"Storage service initialized with table: {table}")

    def load(self, user_id: str) -> Session:
        try:
            result = self.supabase.table(self.sessions_table)\
                .select('*')\
                .eq('user_id', user_id)\
                .limit(1)\
                .execute()
            if hasattr(result, 'error') and result.error:
                raise Exception(f"Supabase error: {result.error}")
            if result.data:
                return Session(**result.data[0])
            logger.info(f"No session for {user_id}, starting a new one")
            return Session(user_id=user_id)
        except Exception as e:
            logger.error(f"Failed to load session: {str(e)}")
            raise

    def save(self, session: Session) -> None:
        try:
            data = session.model_dump(mode='json')
            result = self.supabase.table(self.sessions_table)\
                .upsert(data, on_conflict='user_id')\
                .execute()
            if hasattr(result, 'error') and result.error:
                raise Exception(f"Supabase error: {result.error}")
        except Exception as e:
            logger.error(f"Failed to save session: {str(e)}")
            raise


class MemoryStorageService:
    """Process-local session store for development and tests"""

    def __init__(self):
        self._sessions: Dict[str, dict] = {}

    def load(self, user_id: str) -> Session:
        data = self._sessions.get(user_id)
        if data is None:
            return Session(user_id=user_id)
        return Session(**data)

    def save(self, session: Session) -> None:
        self._sessions[session.user_id] = session.model_dump()
