"""
Word Validator

Holds the playable dictionary and answers format, membership,
random-selection and suggestion queries.
"""

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable, List, Optional

from ..config.game_settings import ALPHABET, BUILTIN_WORDS, WORD_LENGTH


class RejectionReason(Enum):
    """Why a word was refused."""
    EMPTY_INPUT = "Word cannot be empty"
    WRONG_LENGTH = "Word must be exactly {word_length} letters"
    INVALID_CHARACTERS = "Word must contain only letters"
    NOT_IN_DICTIONARY = "Not in word list"
    NOT_FOUND = "Word is not in the dictionary"

    def describe(self, word_length: int = WORD_LENGTH) -> str:
        return self.value.format(word_length=word_length)


@dataclass
class ValidationResult:
    """Outcome of a single word check or single-word mutation."""
    valid: bool
    word: Optional[str] = None
    reason: Optional[RejectionReason] = None
    is_common: Optional[bool] = None
    message: Optional[str] = None

    def __post_init__(self):
        if self.reason is not None and self.message is None:
            self.message = self.reason.describe()

    def to_dict(self) -> dict:
        data = {'valid': self.valid, 'word': self.word}
        if self.reason is not None:
            data['reason'] = self.reason.name
            data['message'] = self.message
        if self.is_common is not None:
            data['is_common'] = self.is_common
        return data


@dataclass
class BatchResult:
    """Counts for a batch mutation. Partial success is allowed."""
    successful: int = 0
    failed: int = 0
    results: List[ValidationResult] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            'successful': self.successful,
            'failed': self.failed,
            'results': [result.to_dict() for result in self.results]
        }


class WordValidator:
    """
    Dictionary of playable words.

    The dictionary starts as the built-in word set and can be extended,
    shrunk, exported or replaced. Every word entering the dictionary passes
    validate_format first.
    """

    def __init__(self, builtin_words: Iterable[str] = BUILTIN_WORDS, word_length: int = WORD_LENGTH):
        self.word_length = word_length
        self.common_words: FrozenSet[str] = frozenset(
            word for word in (w.upper() for w in builtin_words) if self._is_shape_valid(word)
        )
        self.valid_words = set(self.common_words)

    def _is_shape_valid(self, word: str) -> bool:
        return len(word) == self.word_length and all(char in ALPHABET for char in word)

    def validate_format(self, word) -> ValidationResult:
        """Check emptiness, length and alphabet; success carries the uppercased word."""
        if not word or not isinstance(word, str):
            return ValidationResult(valid=False, reason=RejectionReason.EMPTY_INPUT)

        upper_word = word.upper()

        if len(upper_word) != self.word_length:
            return ValidationResult(
                valid=False, word=upper_word, reason=RejectionReason.WRONG_LENGTH,
                message=RejectionReason.WRONG_LENGTH.describe(self.word_length)
            )

        if not all(char in ALPHABET for char in upper_word):
            return ValidationResult(valid=False, word=upper_word, reason=RejectionReason.INVALID_CHARACTERS)

        return ValidationResult(valid=True, word=upper_word)

    def validate_word(self, word) -> ValidationResult:
        """
        Format check followed by dictionary membership.

        A well-formed word missing from the dictionary is reported as
        NOT_IN_DICTIONARY so callers can tell it apart from format errors.
        """
        format_result = self.validate_format(word)
        if not format_result.valid:
            return format_result

        normalized_word = format_result.word
        if normalized_word not in self.valid_words:
            return ValidationResult(valid=False, word=normalized_word, reason=RejectionReason.NOT_IN_DICTIONARY)

        return ValidationResult(
            valid=True,
            word=normalized_word,
            is_common=normalized_word in self.common_words
        )

    def is_member(self, word) -> bool:
        return self.validate_word(word).valid

    def pick_random(self) -> Optional[str]:
        """Uniform choice from the current dictionary, None when it is empty."""
        if not self.valid_words:
            return None
        return random.choice(sorted(self.valid_words))

    def get_suggestions(self, partial_word: str, limit: int = 5) -> List[str]:
        """Dictionary words starting with the given prefix, alphabetically."""
        if not partial_word:
            return []

        prefix = partial_word.upper()
        suggestions = []
        for word in sorted(self.valid_words):
            if word.startswith(prefix):
                suggestions.append(word)
                if len(suggestions) >= limit:
                    break
        return suggestions

    def add(self, word) -> ValidationResult:
        format_result = self.validate_format(word)
        if not format_result.valid:
            return format_result

        self.valid_words.add(format_result.word)
        return ValidationResult(valid=True, word=format_result.word)

    def add_many(self, words: Iterable) -> BatchResult:
        batch = BatchResult()
        for word in words:
            result = self.add(word)
            batch.results.append(result)
            if result.valid:
                batch.successful += 1
            else:
                batch.failed += 1
        return batch

    def remove(self, word) -> ValidationResult:
        format_result = self.validate_format(word)
        if not format_result.valid:
            return format_result

        normalized_word = format_result.word
        if normalized_word not in self.valid_words:
            return ValidationResult(valid=False, word=normalized_word, reason=RejectionReason.NOT_FOUND)

        self.valid_words.discard(normalized_word)
        return ValidationResult(valid=True, word=normalized_word)

    def reset(self) -> None:
        """Restore the built-in word set, dropping custom words."""
        self.valid_words = set(self.common_words)

    def export(self) -> List[str]:
        return sorted(self.valid_words)

    def import_words(self, words: Iterable) -> BatchResult:
        """Replace the whole dictionary with the given words."""
        self.valid_words = set()
        return self.add_many(words)

    def get_stats(self) -> dict:
        exported = self.export()
        custom_words = self.valid_words - self.common_words
        return {
            'total_words': len(self.valid_words),
            'common_words': len(self.common_words & self.valid_words),
            'custom_words': len(custom_words),
            'sample_words': exported[:10]
        }

    def __len__(self) -> int:
        return len(self.valid_words)

    def __contains__(self, word) -> bool:
        return self.is_member(word)
