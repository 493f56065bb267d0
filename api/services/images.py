import logging
import requests

logger = logging.getLogger(__name__)

BING_IMAGE_SEARCH_URL = 'https://api.cognitive.microsoft.com/bing/v7.0/images/search'
PLACEHOLDER_URL = 'http://tempuri.org'

class ImageSearchService:
    def __init__(self, subscription_key: str, timeout: int = 10):
        self.subscription_key = subscription_key
        self.timeout = timeout

    def get_image_url(self, query: str) -> str:
        """Return the first image result for `query`, or the placeholder URL"""
        try:
            response = requests.get(
                BING_IMAGE_SEARCH_URL,
                params={'q': query, 'mkt': 'en-us', 'setLang': 'en'},
                headers={'Ocp-Apim-Subscription-Key': self.subscription_key},
                timeout=self.timeout
            )
            response.raise_for_status()
            for item in response.json().get('value', []):
                if item.get('contentUrl'):
                    return item['contentUrl'].replace('\\', '')
            logger.info(f"No images found for '{query}'")
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.warning(f"Image search failed: {str(e)}")
        return PLACEHOLDER_URL
