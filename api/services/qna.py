import logging
from typing import Optional

import aiohttp

logger = logging.getLogger(__name__)


def normalize_host(hostname: str) -> str:
    """QnA Maker runtime hosts are configured bare; the API wants https://<host>/qnamaker"""
    host = hostname.strip().rstrip('/')
    if not host.startswith('https://'):
        host = f"https://{host}"
    if not host.endswith('/qnamaker'):
        host = f"{host}/qnamaker"
    return host


class QnAService:
    def __init__(self, hostname: str, knowledgebase_id: str, endpoint_key: str, timeout: int = 10):
        self.knowledgebase_id = knowledgebase_id
        self.endpoint_key = endpoint_key
        self.host = normalize_host(hostname) if hostname else ''
        self.timeout = timeout
        if not self.enabled:
            logger.warning("QnA Maker is not configured - FAQ answers disabled")

    @property
    def enabled(self) -> bool:
        return bool(self.host and self.knowledgebase_id and self.endpoint_key)

    @property
    def url(self) -> str:
        return f"{self.host}/knowledgebases/{self.knowledgebase_id}/generateAnswer"

    async def get_answer(self, question: str) -> Optional[str]:
        """Return the best matching knowledge-base answer, or None"""
        if not self.enabled or not question:
            return None

        headers = {
            'Authorization': f"EndpointKey {self.endpoint_key}",
            'Content-Type': 'application/json'
        }
        payload = {'question': question, 'top': 1}

        try:
            async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self.timeout)) as session:
                async with session.post(self.url, json=payload, headers=headers) as response:
                    if response.status != 200:
                        logger.warning(f"QnA Maker returned {response.status}: {await response.text()}")
                        return None
                    data = await response.json()
        except Exception as e:
            logger.warning(f"QnA Maker Exception: {str(e)} Check your QnA Maker configuration.")
            return None

        answers = [a for a in data.get('answers', []) if a.get('score', 0) > 0]
        if not answers:
            logger.info("No QnA Maker answers were found.")
            return None
        return answers[0].get('answer')
