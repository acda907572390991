"""
Reassembly of translated chunks.

Models sometimes echo a prompt delimiter around their answer
(e.g. <TRANSLATE_THIS>...</TRANSLATE_THIS>). Such a single wrapping pair is
removed before the chunk outputs are joined.
"""
import re
from typing import Iterable

# Opening tag (with optional attributes) ... closing tag. Applied with fullmatch,
# so nothing may follow the closing tag, not even a newline.
# Tag names are compared separately, case-insensitively.
WRAPPING_TAG_PATTERN = re.compile(
    r'<([a-zA-Z][\w-]*)[^>]*>(.*?)</\s*([a-zA-Z][\w-]*)\s*>',
    re.DOTALL | re.IGNORECASE
)


def remove_wrapping_tags(text: str) -> str:
    """
    Strip one markup pair wrapping the entire text.

    Args:
        text: Chunk output from the model

    Returns:
        The inner content when text is exactly <tag ...>content</tag> with
        matching tag names, otherwise text unchanged

    Example:
        >>> remove_wrapping_tags("<T>Hello</t>")
        'Hello'
        >>> remove_wrapping_tags("<a>x</b>")
        '<a>x</b>'
    """
    match = WRAPPING_TAG_PATTERN.fullmatch(text)
    if match and match.group(1).lower() == match.group(3).lower():
        return match.group(2)
    return text


def reassemble(final_translations: Iterable[str]) -> str:
    """
    Join per-chunk translations into the final text.

    Each output is unwrapped, outputs are concatenated in chunk order without
    separators, then leading/trailing newlines are trimmed.
    """
    return "".join(remove_wrapping_tags(t) for t in final_translations).strip("\n")
