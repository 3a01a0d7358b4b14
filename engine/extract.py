"""
Structured input extraction.

The host framework normally supplies command and object tokens for each
turn. When it does not, this module derives them deterministically from the
raw utterance using a fixed vocabulary. No NLU is involved: a token is a
command or an object only if it appears in the word lists below.
"""
import logging
from typing import List, Optional

from .state import StructuredInput

logger = logging.getLogger(__name__)


# Commands that start a new restaurant query
TRIGGER_COMMANDS = frozenset([
    "find",
    "where",
    "show",
    "recommend",
    "recommendation",
    "recommendations",
])

# Subjects the handler searches for
FOODS = frozenset([
    "bagel", "bagels", "barbecue", "bbq", "breakfast", "brunch", "burger",
    "burgers", "burrito", "burritos", "cafe", "chinese", "coffee", "curry",
    "dessert", "desserts", "dim sum", "diner", "dinner", "donut", "donuts",
    "dumplings", "falafel", "food", "french", "fried chicken", "greek",
    "hot dog", "hot dogs", "ice cream", "indian", "italian", "japanese",
    "kebab", "korean", "lunch", "mediterranean", "mexican", "noodles",
    "pancakes", "pasta", "pho", "pizza", "ramen", "restaurant",
    "restaurants", "salad", "sandwich", "sandwiches", "seafood", "steak",
    "sushi", "taco", "tacos", "tapas", "thai", "vegan", "vegetarian",
    "vietnamese", "wings",
])

TRAILING_PUNCTUATION = ").,;?!:"


def normalize_word(word: str) -> str:
    """Strip trailing punctuation and lower-case a single token."""
    return word.rstrip(TRAILING_PUNCTUATION).lower()


def tokenize(text: str) -> List[str]:
    """Split text on whitespace and normalize every token, dropping empties."""
    words = [normalize_word(w) for w in text.split()]
    return [w for w in words if w]


def extract_structured_input(utterance: str) -> StructuredInput:
    """
    Extract command and object tokens from a raw utterance.

    Two-word foods ("ice cream") are matched before single words, so the
    bigram is kept as one object token. Tokens keep utterance order.
    """
    words = tokenize(utterance)
    commands: List[str] = []
    objects: List[str] = []

    i = 0
    while i < len(words):
        word = words[i]
        if i + 1 < len(words):
            bigram = f"{word} {words[i + 1]}"
            if bigram in FOODS:
                objects.append(bigram)
                i += 2
                continue
        if word in TRIGGER_COMMANDS:
            commands.append(word)
        elif word in FOODS:
            objects.append(word)
        i += 1

    logger.debug(f"Extracted commands={commands} objects={objects} from '{utterance}'")
    return StructuredInput(commands=commands, objects=objects)


def is_triggered(structured_input: Optional[StructuredInput]) -> bool:
    """True when the input names both a trigger command and a food subject."""
    if structured_input is None:
        return False
    has_command = any(c.lower() in TRIGGER_COMMANDS for c in structured_input.commands)
    has_object = any(o.lower() in FOODS for o in structured_input.objects)
    return has_command and has_object


def build_query(structured_input: StructuredInput) -> str:
    """
    Build search terms from object tokens.

    Every token is followed by a single space, so ["tacos"] becomes "tacos ".
    """
    return "".join(f"{o} " for o in structured_input.objects)
