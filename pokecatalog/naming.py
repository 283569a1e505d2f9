"""Naming helpers.

Lookup keys are lower-cased slugs; display names are derived from them.
"""

from __future__ import annotations


def normalize_key(name: str) -> str:
    """Return the case-insensitive lookup key for a creature name."""
    return name.strip().lower()


def slug_titlecase(slug: str) -> str:
    """Convert a PokéAPI slug (kebab-case) to a title-cased display name.

    ``"mr-mime"`` becomes ``"Mr Mime"``; single-letter tokens are upper-cased
    so ``"porygon-z"`` becomes ``"Porygon Z"``.
    """
    tokens = slug.replace("-", " ").split()
    out_tokens: list[str] = []
    for token in tokens:
        if len(token) == 1:
            out_tokens.append(token.upper())
        else:
            out_tokens.append(token[:1].upper() + token[1:])
    return " ".join(out_tokens)
