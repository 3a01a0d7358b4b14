"""
Follow-up keyword classifier.

Maps a single normalized word to one of a fixed set of response actions.
Rows are checked in order and the first row containing the word wins.
Words that match no row produce no action.
"""
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, List, Optional, Tuple


class FollowUpAction(str, Enum):
    """Actions a follow-up word can trigger."""
    RATING = "RATING"
    PHONE = "PHONE"
    CALL = "CALL"
    INFO = "INFO"
    ADDRESS = "ADDRESS"
    PICTURES = "PICTURES"
    MENU = "MENU"
    ANOTHER = "ANOTHER"
    ACKNOWLEDGE = "ACKNOWLEDGE"
    THANKS = "THANKS"


# Priority-ordered (keywords, action) table
FOLLOW_UP_TABLE: List[Tuple[FrozenSet[str], FollowUpAction]] = [
    (frozenset(["rated", "rating", "review", "recommend", "recommended"]), FollowUpAction.RATING),
    (frozenset(["number", "phone"]), FollowUpAction.PHONE),
    (frozenset(["call"]), FollowUpAction.CALL),
    (frozenset(["information", "info"]), FollowUpAction.INFO),
    (frozenset(["where", "location", "address", "direction", "directions", "addr"]), FollowUpAction.ADDRESS),
    (frozenset(["pictures", "pic", "pics"]), FollowUpAction.PICTURES),
    (frozenset(["menu", "have"]), FollowUpAction.MENU),
    (frozenset(["not", "else", "no", "anything", "something"]), FollowUpAction.ANOTHER),
    (frozenset(["good", "great", "yes", "perfect"]), FollowUpAction.ACKNOWLEDGE),
    (frozenset(["thanks", "thank"]), FollowUpAction.THANKS),
]

POSITIVE_RESPONSE = "Great!"
WELCOME_RESPONSE = "You're welcome!"


@dataclass
class Classification:
    """A word and the action it mapped to."""
    word: str
    action: FollowUpAction


def classify_word(word: str) -> Optional[FollowUpAction]:
    """Return the action bound to an already-normalized word, if any."""
    for keywords, action in FOLLOW_UP_TABLE:
        if word in keywords:
            return action
    return None


def classify_words(words: List[str]) -> List[Classification]:
    """Classify each word in order, keeping only words that matched a row."""
    matches = []
    for word in words:
        action = classify_word(word)
        if action is not None:
            matches.append(Classification(word=word, action=action))
    return matches
