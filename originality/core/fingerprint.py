"""Content fingerprints for corpus entries."""

import hashlib
import re

_NON_ALNUM_RE = re.compile(r'[^a-z0-9\s]')


def normalize_text(text: str) -> str:
    """Lowercase and drop everything except a-z, 0-9 and whitespace."""
    return _NON_ALNUM_RE.sub('', (text or '').lower())


def fingerprint(text: str) -> str:
    """Compute the SHA256 hex digest of the normalized text."""
    return hashlib.sha256(normalize_text(text).encode('utf-8')).hexdigest()
