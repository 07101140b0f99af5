"""Phrase normalisation: splitting, stemming and stop-word filtering."""

import unicodedata
from itertools import groupby

from comicsearch.stemmer import stem

MAX_PHRASE_BYTES = 4096

FORBIDDEN_WORDS = frozenset(
    {
        "of", "the", "a", "and", "or",
        "will", "would", "i", "me", "you", "your",
        "he", "his", "him", "who", "it", "that",
        "she", "her", "we",
        "our", "they", "their", "them",
    }
)


class PhraseTooLongError(ValueError):
    """Raised when a phrase exceeds the size limit for normalisation."""

    def __init__(self, size):
        super().__init__(f"message size exceeds 4 KiB limit: got {size} bytes")
        self.size = size


def _is_word_char(ch):
    return ch.isalpha() or unicodedata.category(ch) == "Nd"


def split_words(text):
    """Split text into runs of letters and decimal digits."""
    return ["".join(run) for is_word, run in groupby(text, key=_is_word_char) if is_word]


def norm(phrase):
    """Return the unique stems of a phrase, without stop words, in first-seen order."""
    stems = (stem(word) for word in split_words(phrase))
    return list(dict.fromkeys(s for s in stems if s not in FORBIDDEN_WORDS))


def norm_request(phrase):
    """Normalise a phrase, refusing phrases larger than 4 KiB in UTF-8."""
    size = len(phrase.encode("utf-8"))
    if size > MAX_PHRASE_BYTES:
        raise PhraseTooLongError(size)
    return norm(phrase)