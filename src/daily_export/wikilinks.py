from __future__ import annotations

import re

# [[Target]], [[Target#Anchor]], [[Target|Alias]], [[Folder/Target#Anchor|Alias]]
WIKILINK_RE = re.compile(r"\[\[([^\]|#]+)(?:#[^\]|]*)?(?:\|[^\]]+)?\]\]")


def extract_wiki_links(content: str) -> list[str]:
    """Extract wiki link targets from note text.

    Anchors and aliases are dropped, folder prefixes are kept (resolution
    only looks at the last path segment later on).

    Args:
        content (str): the note text

    Returns:
        list[str]: unique stripped targets, in order of first appearance
    """
    links: list[str] = []
    for match in WIKILINK_RE.finditer(content or ""):
        target = match.group(1).strip()
        if target not in links:
            links.append(target)
    return links
