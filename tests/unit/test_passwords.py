"""
Unit tests for PasswordGenerator.
"""

import pytest
from locker_auth.passwords import (
    COMMON_WORDS,
    SIMILAR,
    SYMBOLS,
    PassphraseConfig,
    PasswordConfig,
    PasswordGenerator,
)


class TestGeneratePassword:
    """Tests for random passwords."""

    def test_default_length(self):
        """Test default config yields 16 characters."""
        assert len(PasswordGenerator.generate_password(PasswordConfig())) == 16

    def test_digits_only(self):
        """Test a single character class is respected."""
        config = PasswordConfig(
            length=32,
            include_uppercase=False,
            include_lowercase=False,
            include_symbols=False,
        )

        assert PasswordGenerator.generate_password(config).isdigit()

    def test_exclude_similar(self):
        """Look-alike characters are never produced."""
        config = PasswordConfig(length=200, exclude_similar=True)
        password = PasswordGenerator.generate_password(config)

        assert not set(password) & set(SIMILAR)

    def test_no_character_class(self):
        """Test empty charset raises ValueError."""
        config = PasswordConfig(
            include_uppercase=False,
            include_lowercase=False,
            include_numbers=False,
            include_symbols=False,
        )

        with pytest.raises(ValueError):
            PasswordGenerator.generate_password(config)

    def test_non_positive_length(self):
        with pytest.raises(ValueError):
            PasswordGenerator.generate_password(PasswordConfig(length=0))


class TestGeneratePassphrase:
    """Tests for word passphrases."""

    def test_words_from_list(self):
        """Test passphrase words come from the word list."""
        phrase = PasswordGenerator.generate_passphrase(PassphraseConfig(word_count=5))

        words = phrase.split("-")
        assert len(words) == 5
        assert all(w in COMMON_WORDS for w in words)

    def test_capitalize_and_separator(self):
        """Test custom separator and capitalization."""
        config = PassphraseConfig(word_count=3, separator=" ", capitalize_words=True)
        words = PasswordGenerator.generate_passphrase(config).split(" ")

        assert len(words) == 3
        assert all(w[0].isupper() for w in words)

    def test_zero_words(self):
        with pytest.raises(ValueError):
            PasswordGenerator.generate_passphrase(PassphraseConfig(word_count=0))


class TestCalculateStrength:
    """Tests for strength scoring."""

    def test_strong(self):
        """Test a long mixed password scores 100."""
        report = PasswordGenerator.calculate_strength("Tr0ub4dor&3xyz")

        assert report.score == 100
        assert report.strength == "strong"
        assert report.feedback == []

    def test_weak(self):
        """Test a short lowercase password is weak with hints."""
        report = PasswordGenerator.calculate_strength("abc")

        assert report.score == 25
        assert report.strength == "weak"
        assert "Use at least 8 characters" in report.feedback
        assert "Include numbers" in report.feedback

    def test_repeated_characters(self):
        """Test runs of three identical characters cost points."""
        report = PasswordGenerator.calculate_strength("Passsword1!")

        assert "Avoid repeated characters" in report.feedback
        assert report.score == 80

    def test_fair(self):
        """Test eight lowercase letters plus digits is fair."""
        report = PasswordGenerator.calculate_strength("abcdefg1")

        assert report.score == 55
        assert report.strength == "fair"

    def test_symbols_constant(self):
        """Generated symbols count as special characters."""
        report = PasswordGenerator.calculate_strength("a" + SYMBOLS[0])
        assert "Include special characters" not in report.feedback
