"""Candidate key extraction from free text"""

import re
from dataclasses import dataclass
from typing import Iterable, List

# Everything that is not an ASCII letter or digit is stripped from a word
NON_ALNUM_PATTERN = re.compile(r"[^a-zA-Z0-9]")
LETTER_PATTERN = re.compile(r"[a-zA-Z]")
DIGIT_PATTERN = re.compile(r"[0-9]")
URL_PREFIXES = ("http:", "https:")

MESSAGE_SOURCE = "message"


@dataclass(frozen=True)
class CandidateKey:
    """A normalized key and where it was found (message text or an attachment URL)"""
    value: str
    source: str = MESSAGE_SOURCE


def looks_like_url(word: str) -> bool:
    return word.lower().startswith(URL_PREFIXES)


def normalize_word(word: str) -> str:
    return NON_ALNUM_PATTERN.sub("", word)


def is_mixed(word: str) -> bool:
    """At least one letter and at least one digit"""
    return bool(LETTER_PATTERN.search(word)) and bool(DIGIT_PATTERN.search(word))


def extract_keys(text: str, key_lengths: Iterable[int], strict: bool = False,
                 ignore_urls: bool = True) -> List[str]:
    """Pull candidate keys out of text.

    Every whitespace-separated word is reduced to its ASCII letters and digits
    and kept if the result has an accepted length (and, when strict, mixes
    letters with digits). Order is kept and duplicates are not collapsed:
    a key posted twice is attempted twice.
    """
    if not text:
        return []

    lengths = set(key_lengths)
    keys = []

    for word in text.split():
        if ignore_urls and looks_like_url(word):
            continue

        stripped = normalize_word(word)
        if len(stripped) not in lengths:
            continue
        if strict and not is_mixed(stripped):
            continue

        keys.append(stripped)

    return keys
