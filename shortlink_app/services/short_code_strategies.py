"""
Short code generation strategies.
Uses Strategy Pattern so the allocator does not care how candidates are made.
"""

import random
import string
from abc import ABC, abstractmethod
from typing import Optional

BASE62_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits


class ShortCodeStrategy(ABC):
    """Abstract base class for short code generation strategies"""

    @abstractmethod
    def generate(self) -> str:
        """
        Generate one candidate short code.

        Candidates are NOT guaranteed unique; the allocator checks them
        against the repository.
        """
        pass


class RandomShortCodeStrategy(ShortCodeStrategy):
    """
    Random generation strategy.

    Draws ``length`` independent characters uniformly from the 62-character
    alphabet. This is not cryptographically secure: uniqueness comes from the
    size of the code space (62^8 ~ 2.2e14) plus the allocator's collision
    check, not from unpredictability.
    """

    def __init__(
        self,
        length: int = 8,
        alphabet: str = BASE62_ALPHABET,
        rng: Optional[random.Random] = None
    ):
        if length < 1:
            raise ValueError(f"Short code length must be positive, got {length}")
        if len(set(alphabet)) != len(alphabet):
            raise ValueError("Alphabet must not contain duplicate characters")
        self.length = length
        self.alphabet = alphabet
        self._rng = rng or random.Random()

    def generate(self) -> str:
        """Generate a random string of the configured length"""
        return ''.join(self._rng.choice(self.alphabet) for _ in range(self.length))
