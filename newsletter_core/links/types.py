from enum import Enum
from dataclasses import dataclass
from typing import Dict


NO_TEXT = "No text"
NO_CONTEXT = "No context"


class LinkType(str, Enum):
    """Link category. INTERNAL is part of the vocabulary but never assigned."""
    INTERNAL = "internal"
    EXTERNAL = "external"
    SOCIAL = "social"
    UNSUBSCRIBE = "unsubscribe"


@dataclass
class ExtractedLink:
    """A link found in email content"""
    url: str
    text: str = NO_TEXT
    context: str = NO_CONTEXT
    type: LinkType = LinkType.EXTERNAL

    def to_dict(self) -> Dict[str, str]:
        return {
            "url": self.url,
            "text": self.text,
            "context": self.context,
            "type": self.type.value,
        }
