"""
Slug generation.

A slug is the URL-safe identifier of an article, derived from its title.
Generation is pure; uniqueness is a cross-article constraint checked by the
caller through the repository, which disambiguates with ``with_suffix``.
"""

from typing import Awaitable, Callable, Optional

from slugify import slugify

SLUG_MAX_LENGTH = 50
FALLBACK_SLUG = "article"

SlugExistsChecker = Callable[[str], Awaitable[bool]]


def _truncate(slug: str, length: int) -> str:
    return slug[:length].rstrip("-")


def generate_slug(title: str) -> str:
    """
    Derive a slug from a title.

    "Hello, World! 2024" -> "hello-world-2024". The result always matches
    ``^[a-z0-9-]{1,50}$`` with no leading or trailing hyphen. Non-Latin
    scripts are transliterated ("Привет мир" -> "privet-mir").
    """
    slug = slugify(title or "", lowercase=True)
    slug = _truncate(slug, SLUG_MAX_LENGTH).strip("-")
    return slug or FALLBACK_SLUG


def with_suffix(slug: str, attempt: int) -> str:
    """
    Disambiguated variant of ``slug`` for the given retry attempt.

    Attempt 0 is the slug itself; attempt 2 gives "my-title-2" and so on.
    The base is shortened so the result stays within the length limit.
    """
    if attempt <= 0:
        return slug
    suffix = f"-{attempt}"
    base = _truncate(slug, SLUG_MAX_LENGTH - len(suffix)) or FALLBACK_SLUG
    return f"{base}{suffix}"


async def find_available_slug(
    title: str,
    slug_exists: SlugExistsChecker,
    max_attempts: int = 5,
) -> Optional[str]:
    """
    First slug for ``title`` the checker reports as free, or None when every
    attempt collides.
    """
    base = generate_slug(title)
    for attempt in range(max_attempts):
        candidate = with_suffix(base, attempt + 1 if attempt else 0)
        if not await slug_exists(candidate):
            return candidate
    return None
