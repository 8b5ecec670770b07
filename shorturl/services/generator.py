"""Short code generation."""

import secrets
import string
from typing import Optional

from shorturl.core.config import settings
from shorturl.services.exceptions import ShortCodeGenerationError


class ShortCodeGenerator:
    """
    Generate random, non-sequential short codes.

    Codes are drawn from the operating system's entropy source, so two
    codes carry no relation to each other or to the URL they map.
    """

    # Base62 characters (alphanumeric, case-sensitive)
    BASE62_CHARS = string.ascii_letters + string.digits

    def __init__(self, length: Optional[int] = None, alphabet: Optional[str] = None):
        """Initialize the generator.

        Args:
            length: Code length, defaults to settings.SHORT_CODE_LENGTH
            alphabet: Characters to draw from, defaults to settings.SHORT_CODE_CHARS
        """
        self.length = settings.SHORT_CODE_LENGTH if length is None else length
        self.alphabet = alphabet if alphabet is not None else (settings.SHORT_CODE_CHARS or self.BASE62_CHARS)

        if self.length < 1:
            raise ValueError("Short code length must be at least 1")
        if not self.alphabet:
            raise ValueError("Short code alphabet must not be empty")

    def generate(self) -> str:
        """Generate a new short code.

        Returns:
            str: A random code of ``self.length`` characters

        Raises:
            ShortCodeGenerationError: If the entropy source is unavailable
        """
        try:
            return ''.join(secrets.choice(self.alphabet) for _ in range(self.length))
        except (OSError, NotImplementedError) as e:
            raise ShortCodeGenerationError("Entropy source unavailable for short code generation") from e
