"""
Phonetic normalization of recognized words into the chant vocabulary.

Speech recognizers rarely spell the holy names correctly. English models hear
"Hare" as "hi", "hello" or "hurry"; Hindi models drop or swap matras. Each
recognized word is mapped onto Hare / Krsna / Rama, or dropped.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List

from .types import Token, Locale, HARE, KRSNA, RAMA, EMPTY


# Words the English recognizer produces for each name
HARE_WORDS = frozenset({
    "hare", "hi", "had", "a", "i", "hade", "hadi", "huddy", "hee", "hai",
    "hello", "today", "hooray", "honey", "hurry", "hari", "how", "are",
    "hoodie",
})
KRISHNA_WORDS = frozenset({"krishna", "krish", "christian"})
RAMA_WORDS = frozenset({"rama"})

# Devanagari fragments, matched by containment. Includes known
# mis-transcriptions of "हरे".
HINDI_FRAGMENTS = (
    (KRSNA, ("कृष्ण", "क्रिष्ण")),
    (RAMA, ("राम",)),
    (HARE, ("हरे", "हरि", "खाद्य", "हद")),
)

# Roman display labels and Devanagari glyphs per token
DISPLAY_LABELS: Dict[Token, str] = {HARE: "Hare", KRSNA: "Krishna", RAMA: "Rama"}
DEVANAGARI: Dict[str, str] = {"Hare": "हरे", "Krishna": "कृष्णा", "Rama": "राम"}


@dataclass
class NormalizedText:
    """Result of normalizing a whole transcript."""
    tokens: List[Token] = field(default_factory=list)
    words: List[str] = field(default_factory=list)
    counts: Dict[str, int] = field(default_factory=lambda: {"Hare": 0, "Krishna": 0, "Rama": 0})

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    @property
    def text(self) -> str:
        return " ".join(self.words)


def normalize(raw_word: str, locale: Locale = "en") -> Token:
    """
    Map one recognized word to a canonical token.

    Returns EMPTY when the word is not a chant word. Never raises.

    Examples:
        normalize("Hello") -> "Hare"
        normalize("christian") -> "Krsna"
        normalize("weather") -> ""
        normalize("हरेकृष्णा", "hi") -> "Krsna"
    """
    if not raw_word:
        return EMPTY

    if locale == "hi":
        return _normalize_hindi(raw_word)

    word = raw_word.lower()
    if word in HARE_WORDS:
        return HARE
    if word in KRISHNA_WORDS:
        return KRSNA
    if word in RAMA_WORDS:
        return RAMA
    return EMPTY


def _normalize_hindi(raw_word: str) -> Token:
    for token, fragments in HINDI_FRAGMENTS:
        for fragment in fragments:
            if fragment in raw_word:
                return token
    return EMPTY


def normalize_text(text: str, locale: Locale = "en") -> NormalizedText:
    """
    Normalize a whitespace-delimited transcript.

    Unmatched words are dropped, not replaced with padding.

    Examples:
        normalize_text("hi krishna rama today").words
            -> ["Hare", "Krishna", "Rama", "Hare"]
    """
    result = NormalizedText()
    counts: Counter = Counter()

    for raw_word in text.split():
        token = normalize(raw_word, locale)
        if not token:
            continue
        label = DISPLAY_LABELS[token]
        result.tokens.append(token)
        result.words.append(label)
        counts[label] += 1

    result.counts.update(counts)
    return result


def to_devanagari(text: str) -> str:
    """Transliterate roman display words into Devanagari."""
    return " ".join(DEVANAGARI.get(word, word) for word in text.split())
