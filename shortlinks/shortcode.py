"""Short code generation utilities."""

import secrets
import string
from typing import Optional


class ShortCodeGenerator:
    """Generate random short codes for URLs."""

    # Base62 characters (alphanumeric, case-sensitive)
    BASE62_CHARS = string.ascii_letters + string.digits  # a-zA-Z0-9

    MIN_LENGTH = 3
    MAX_LENGTH = 10

    def __init__(self, default_length: int = 6):
        """Initialize short code generator.

        Args:
            default_length: Default length for generated codes
        """
        if not self.MIN_LENGTH <= default_length < self.MAX_LENGTH:
            raise ValueError(
                f"Default length must be between {self.MIN_LENGTH} and {self.MAX_LENGTH - 1} "
                f"(given value: {default_length})"
            )
        self.default_length = default_length

    def generate(self, length: Optional[int] = None) -> str:
        """Generate a random short code.

        Characters come from the secrets module so that valid codes cannot be
        predicted from previously issued ones.

        Args:
            length: Length of the code (uses default if not specified)

        Returns:
            Random short code
        """
        length = length or self.default_length
        return ''.join(secrets.choice(self.BASE62_CHARS) for _ in range(length))

    @classmethod
    def is_valid_format(
        cls,
        code: str,
        min_length: int = MIN_LENGTH,
        max_length: int = MAX_LENGTH,
    ) -> bool:
        """Check if code has valid format (base62 within the length range).

        Args:
            code: Code to validate
            min_length: Minimum accepted length
            max_length: Maximum accepted length

        Returns:
            True if valid format
        """
        if not isinstance(code, str) or not min_length <= len(code) <= max_length:
            return False
        return all(c in cls.BASE62_CHARS for c in code)
