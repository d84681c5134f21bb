"""
Identifier normalization.

Category handles, group labels and query parameters are compared only
through ``slugify``: two identifiers are the same iff their slugs are
equal.
"""

import re
from typing import Optional

_SEPARATORS = re.compile(r"[&/]")
_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(value: Optional[str] = "") -> str:
    """Return a lowercase ``[a-z0-9-]`` identifier for ``value``.

    ``&`` and ``/`` become dashes, any other run of non‑alphanumeric
    characters collapses into a single dash and leading/trailing dashes
    are stripped.  ``None`` is treated as an empty string.

    >>> slugify("A & B/C")
    'a-b-c'
    """
    text = str(value or "").strip().lower()
    text = _SEPARATORS.sub("-", text)
    text = _NON_ALNUM.sub("-", text)
    return text.strip("-")
