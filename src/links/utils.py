import random
import secrets
from string import ascii_lowercase, ascii_uppercase, digits
from logging import getLogger
from urllib.parse import urlsplit

from config import SHORT_CODE_LENGTH, LINK_PASSWORD_LENGTH

logger = getLogger('links_utils')

# URL-safe alphabet, 64 symbols
short_code_alphabet = ascii_uppercase + ascii_lowercase + digits + '_-'
password_alphabet = ascii_lowercase + digits


def generate_short_code(length: int = SHORT_CODE_LENGTH) -> str:
    return ''.join(secrets.choice(short_code_alphabet) for _ in range(length))


def generate_link_password(length: int = LINK_PASSWORD_LENGTH) -> str:
    """Access secret for a protected link.

    Uses the non-cryptographic ``random`` module, so the value is guessable
    by anyone able to observe enough generator output.
    """
    return ''.join(random.choices(password_alphabet, k=length))


def validate_and_fix_url(url: str) -> str:
    url = url.strip()
    if not url.startswith(('http://', 'https://')):
        url = 'https://' + url
        logger.debug(f"Fixed url to {url}")

    parts = urlsplit(url)
    if not parts.hostname or ('.' not in parts.hostname and parts.hostname != 'localhost'):
        raise ValueError(f"Invalid URL: {url}")
    if any(ch.isspace() for ch in url):
        raise ValueError(f"Invalid URL: {url}")
    return url
