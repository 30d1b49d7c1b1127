"""
Phone number validation and normalization for Indian mobile numbers.

A valid number is ten ASCII digits starting with 6-9, optionally prefixed by
the 91 country code and/or a plus sign. Whitespace is ignored.
"""

import re

DEFAULT_COUNTRY_CODE = "91"
DEFAULT_LEADING_DIGITS = "6789"


class PhoneNumberNormalizer:
    """
    Validates and canonicalizes local mobile numbers.

    The canonical form is the country code followed by the ten local
    digits, with no plus sign (e.g. ``919876543210``).
    """

    def __init__(
        self,
        country_code: str = DEFAULT_COUNTRY_CODE,
        leading_digits: str = DEFAULT_LEADING_DIGITS
    ):
        self.country_code = country_code
        self.leading_digits = leading_digits
        self._pattern = re.compile(
            rf"^\+?(?:{re.escape(country_code)})?[{leading_digits}][0-9]{{9}}$",
            re.ASCII
        )

    @staticmethod
    def _strip_whitespace(raw: str) -> str:
        return re.sub(r"\s+", "", raw or "")

    def is_valid(self, raw: str) -> bool:
        """Check whether ``raw`` denotes a dialable local mobile number."""
        return bool(self._pattern.match(self._strip_whitespace(raw)))

    def normalize(self, raw: str) -> str:
        """
        Convert a number to canonical form.

        Best-effort: input that is neither 10 digits nor already prefixed
        with the country code is returned stripped but otherwise unchanged.
        """
        cleaned = self._strip_whitespace(raw)
        if cleaned.startswith("+"):
            cleaned = cleaned[1:]

        if cleaned.startswith(self.country_code) and len(cleaned) == len(self.country_code) + 10:
            return cleaned
        if len(cleaned) == 10 and cleaned.isascii() and cleaned.isdigit():
            return f"{self.country_code}{cleaned}"
        return cleaned

    def to_local(self, raw: str) -> str:
        """Normalize and drop the country code, leaving the 10 local digits."""
        canonical = self.normalize(raw)
        if canonical.startswith(self.country_code) and len(canonical) == len(self.country_code) + 10:
            return canonical[len(self.country_code):]
        return canonical

    def to_e164(self, raw: str) -> str:
        """Normalize and prefix with a plus sign."""
        return f"+{self.normalize(raw)}"


_default = PhoneNumberNormalizer()


def is_valid(raw: str) -> bool:
    """Validate using the default (India) numbering plan."""
    return _default.is_valid(raw)


def normalize(raw: str) -> str:
    """Normalize using the default (India) numbering plan."""
    return _default.normalize(raw)
