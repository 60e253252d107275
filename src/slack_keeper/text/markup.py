"""Pure Slack mrkdwn transforms used by the normalization pipeline.

Each function takes and returns a plain string with no I/O. Unterminated or
malformed markup is left as literal text.
"""

import re

_ENTITIES = {
    "&nbsp;": " ",
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&#39;": "'",
}
_ENTITY_PATTERN = re.compile("|".join(re.escape(entity) for entity in _ENTITIES))

# <target|label> and <target>; tokens opening with @, # or ! are mentions.
_LABELLED_LINK = re.compile(r"<(?![@#!])([^|<>\s]+)\|([^<>]+)>")
_BARE_LINK = re.compile(r"<(?![@#!])([^|<>]+)>")

_CHANNEL_MENTION = re.compile(r"<#([A-Z0-9]+)(?:\|([^<>]*))?>")
_BROADCAST = re.compile(r"<!(here|channel|everyone)(?:\|[^<>]*)?>")
_LABELLED_SPECIAL = re.compile(r"<!([^|<>]+)\|([^<>]+)>")
_BARE_SPECIAL = re.compile(r"<!([^|<>]+)>")

# URLs are swapped for placeholders while delimiters are stripped.
_URL = re.compile(r"https?://[^\s<>()*~`]*[^\s<>()*~`_.,;:!?]")
_PLACEHOLDER = re.compile("\ue000(\\d+)\ue001")
_DELIMITER_PATTERNS = (
    (re.compile(r"\*\*(.*?)\*\*"), r"\1"),
    (re.compile(r"\*(.*?)\*"), r"\1"),
    (re.compile(r"(?<![A-Za-z0-9])__(.+?)__(?![A-Za-z0-9])"), r"\1"),
    (re.compile(r"(?<![A-Za-z0-9])_(.+?)_(?![A-Za-z0-9])"), r"\1"),
    (re.compile(r"~(.*?)~"), r"\1"),
    (re.compile(r"```([\s\S]*?)```"), r"\1"),
    (re.compile(r"`([^`]*)`"), r"\1"),
)
_BLOCK_QUOTE = re.compile(r"^[ \t]*(?:>[ \t]?)+", re.MULTILINE)


def _unify_line_endings(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def decode_entities(text: str) -> str:
    """Replace Slack's HTML escapes with literal characters.

    Repeats until no escape remains, so double-escaped input such as
    ``&amp;lt;`` decodes fully on the first pass.
    """
    previous = None
    while previous != text:
        previous = text
        text = _ENTITY_PATTERN.sub(lambda m: _ENTITIES[m.group(0)], text)
    return text


def unwrap_links(text: str) -> str:
    """``<url|Label>`` -> ``Label (url)``; ``<url>`` -> ``url``."""
    text = _LABELLED_LINK.sub(r"\2 (\1)", text)
    return _BARE_LINK.sub(r"\1", text)


def convert_structural_mentions(text: str) -> str:
    """Convert channel references and special mentions to readable text.

    ``<#C123|general>`` -> ``#general``, ``<!here>`` -> ``@here``, and any
    other labelled special token (user groups, dates) -> its label.
    """
    text = _CHANNEL_MENTION.sub(
        lambda m: f"#{m.group(2) or m.group(1)}", text
    )
    text = _BROADCAST.sub(r"@\1", text)
    text = _LABELLED_SPECIAL.sub(r"\2", text)
    return _BARE_SPECIAL.sub(r"@\1", text)


def strip_formatting(text: str) -> str:
    """Remove emphasis, strikethrough, code delimiters, and block-quote markers.

    Delimiter pairs are matched non-greedily and only on a single line (code
    fences excepted). Underscores inside words (``snake_case``) are kept, and
    URLs are never modified. Line endings are unified first so quote markers
    after a lone carriage return are found. Quote markers go last so a marker
    uncovered by delimiter removal is stripped too.
    """
    text = _unify_line_endings(text)
    urls: list[str] = []

    def _hold(match: re.Match) -> str:
        urls.append(match.group(0))
        return f"\ue000{len(urls) - 1}\ue001"

    text = _URL.sub(_hold, text)
    for pattern, replacement in _DELIMITER_PATTERNS:
        text = pattern.sub(replacement, text)
    text = _PLACEHOLDER.sub(
        lambda m: urls[int(m.group(1))] if int(m.group(1)) < len(urls) else m.group(0), text
    )
    return _BLOCK_QUOTE.sub("", text)


def normalize_whitespace(text: str) -> str:
    """Unify line endings, drop trailing blanks, cap blank lines at one, and trim."""
    text = _unify_line_endings(text)
    text = re.sub(r"[ \t]+\n", "\n", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()
