"""Test utilities for URL shortener tests."""

import random
import string
from datetime import datetime
from typing import Any, Dict, Iterable, Optional

from shorturl.models.url import UrlMapping
from shorturl.services.generator import ShortCodeGenerator


def random_string(length: int = 10) -> str:
    """Generate a random alphanumeric string."""
    return ''.join(random.choice(string.ascii_letters + string.digits) for _ in range(length))


def random_url() -> str:
    """Generate a random URL for testing."""
    domain = f"{random_string(8)}.com"
    path = random_string(12)
    return f"https://{domain}/{path}"


def create_test_mapping_data(
    destination_url: Optional[str] = None,
    short_code: Optional[str] = None,
    expires_at: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Create test data dict for a UrlMapping."""
    data = {
        "destination_url": destination_url or random_url(),
        "short_code": short_code or random_string(7),
    }
    if expires_at is not None:
        data["expires_at"] = expires_at
    return data


async def create_test_mapping(
    db,
    destination_url: Optional[str] = None,
    short_code: Optional[str] = None,
    expires_at: Optional[datetime] = None,
    commit: bool = True,
) -> UrlMapping:
    """Create and persist a test UrlMapping in the database."""
    mapping = UrlMapping(**create_test_mapping_data(
        destination_url=destination_url,
        short_code=short_code,
        expires_at=expires_at,
    ))
    db.add(mapping)
    if commit:
        await db.commit()
    else:
        await db.flush()
    await db.refresh(mapping)
    return mapping


class SequenceCodeGenerator(ShortCodeGenerator):
    """Generator handing out predefined codes; the last one repeats forever."""

    def __init__(self, codes: Iterable[str]):
        super().__init__()
        self.codes = list(codes)
        self.calls = 0

    def generate(self) -> str:
        self.calls += 1
        if len(self.codes) > 1:
            return self.codes.pop(0)
        return self.codes[0]
