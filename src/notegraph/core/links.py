"""Wikilink extraction."""

import re

# [[Name]] or [[Name|Display]]
WIKILINK_PATTERN = re.compile(r"\[\[([^\]|]+)(?:\|[^\]]+)?\]\]")


def extract_wiki_links(content: str) -> list[str]:
    """Extract outbound link names from note text.

    Names are stripped of surrounding whitespace; duplicates are removed
    keeping the first occurrence.

    Example:
        >>> extract_wiki_links("See [[B]], [[C|the C note]] and [[B]] again")
        ['B', 'C']
    """
    seen: dict[str, None] = {}
    for match in WIKILINK_PATTERN.finditer(content):
        name = match.group(1).strip()
        if name:
            seen.setdefault(name, None)
    return list(seen)
