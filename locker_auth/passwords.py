"""
Password Generator - Random passwords, passphrases and strength scoring
for password-list entries.
"""

import re
import secrets
from dataclasses import dataclass, field
from typing import List

LOWERCASE = "abcdefghijklmnopqrstuvwxyz"
UPPERCASE = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
NUMBERS = "0123456789"
SYMBOLS = "!@#$%^&*()_+-=[]{}|;:,.<>?"
SIMILAR = "il1Lo0O"

COMMON_WORDS = [
    "apple", "banana", "cherry", "dragon", "eagle", "forest", "garden", "harbor",
    "island", "jungle", "knight", "lemon", "mountain", "nature", "ocean", "palace",
    "queen", "river", "sunset", "tiger", "umbrella", "valley", "winter", "yellow",
    "zebra", "bridge", "castle", "diamond", "energy", "flower", "galaxy", "harmony",
    "journey", "kingdom", "liberty", "melody", "phoenix", "rainbow", "thunder", "victory",
]


@dataclass
class PasswordConfig:
    """Character classes and length for generate_password()."""
    length: int = 16
    include_uppercase: bool = True
    include_lowercase: bool = True
    include_numbers: bool = True
    include_symbols: bool = True
    exclude_similar: bool = False


@dataclass
class PassphraseConfig:
    """Options for generate_passphrase()."""
    word_count: int = 4
    separator: str = "-"
    include_numbers: bool = False
    capitalize_words: bool = False


@dataclass
class StrengthReport:
    """Result of calculate_strength()."""
    score: int
    strength: str  # weak | fair | good | strong
    feedback: List[str] = field(default_factory=list)


class PasswordGenerator:
    """Password and passphrase generation using the secrets module."""

    @staticmethod
    def generate_password(config: PasswordConfig) -> str:
        """
        Generate a random password.

        Raises:
            ValueError: If no character class is selected or length < 1
        """
        if config.length < 1:
            raise ValueError("Password length must be positive")

        charset = ""
        if config.include_lowercase:
            charset += LOWERCASE
        if config.include_uppercase:
            charset += UPPERCASE
        if config.include_numbers:
            charset += NUMBERS
        if config.include_symbols:
            charset += SYMBOLS

        if config.exclude_similar:
            charset = "".join(c for c in charset if c not in SIMILAR)

        if not charset:
            raise ValueError("At least one character type must be selected")

        return "".join(secrets.choice(charset) for _ in range(config.length))

    @staticmethod
    def generate_passphrase(config: PassphraseConfig) -> str:
        """Generate a passphrase from the common word list."""
        if config.word_count < 1:
            raise ValueError("Passphrase needs at least one word")

        words = []
        for _ in range(config.word_count):
            word = secrets.choice(COMMON_WORDS)
            if config.capitalize_words:
                word = word.capitalize()
            # Roughly 30% of words get a number suffix.
            if config.include_numbers and secrets.randbelow(10) >= 7:
                word += str(secrets.randbelow(100))
            words.append(word)

        return config.separator.join(words)

    @staticmethod
    def calculate_strength(password: str) -> StrengthReport:
        """Score a password from 0 to 100 with improvement hints."""
        feedback = []
        score = 0

        if len(password) >= 12:
            score += 25
        elif len(password) >= 8:
            score += 15
        else:
            feedback.append("Use at least 8 characters")

        checks = [
            (r"[a-z]", 15, "Include lowercase letters"),
            (r"[A-Z]", 15, "Include uppercase letters"),
            (r"[0-9]", 15, "Include numbers"),
            (r"[^a-zA-Z0-9]", 20, "Include special characters"),
        ]
        for pattern, points, hint in checks:
            if re.search(pattern, password):
                score += points
            else:
                feedback.append(hint)

        if not re.search(r"(.)\1{2,}", password):
            score += 10
        else:
            feedback.append("Avoid repeated characters")

        if score >= 80:
            strength = "strong"
        elif score >= 60:
            strength = "good"
        elif score >= 40:
            strength = "fair"
        else:
            strength = "weak"

        return StrengthReport(score=score, strength=strength, feedback=feedback)
