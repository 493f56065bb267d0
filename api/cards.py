import json
import logging
from typing import Any, Dict, List

from .models import Attachment, ADAPTIVE_CARD_CONTENT_TYPE

logger = logging.getLogger(__name__)


def _text_blocks(elements: List[Dict[str, Any]]) -> List[str]:
    texts = []
    for element in elements:
        if element.get('type') == 'TextBlock' and element.get('text'):
            texts.append(element['text'])
        # Containers and column sets nest their own elements
        for key in ('items', 'columns'):
            if isinstance(element.get(key), list):
                texts.extend(_text_blocks(element[key]))
    return texts


def card_fallback_text(card: Dict[str, Any]) -> str:
    """Plain-text rendering of an adaptive card for SMS"""
    if card.get('speak'):
        return card['speak']
    return "\n".join(_text_blocks(card.get('body', [])))


def load_card(path: str) -> Dict[str, Any]:
    with open(path, 'r', encoding='utf-8') as card_file:
        return json.load(card_file)


def create_adaptive_card_attachment(path: str) -> Attachment:
    """Load an adaptive card from file and wrap it as a reply attachment"""
    try:
        card = load_card(path)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load adaptive card {path}: {str(e)}")
        raise
    return Attachment(
        content_type=ADAPTIVE_CARD_CONTENT_TYPE,
        content=card,
        fallback_text=card_fallback_text(card)
    )
