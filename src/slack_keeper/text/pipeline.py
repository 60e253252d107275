"""Slack mrkdwn -> plain text normalization pipeline.

Steps run in a fixed order:
1. Entity decoding (&amp;, &lt;, ...)
2. Link unwrapping (<url|Label> -> "Label (url)")
3. User mention expansion (async name lookup, "@id" fallback)
4. Channel and special mention conversion (#general, @here)
5. Formatting strip (emphasis, code, block quotes)
6. Whitespace normalization

Removing a delimiter in step 5 can expose markup that an earlier step would
have handled (``*<@U1*>`` becomes ``<@U1>``), so the steps are repeated until
a pass changes nothing. The result is a fixed point of one pass, which makes
normalizing it again a no-op.
"""

import logging

from slack_keeper.text.markup import (
    convert_structural_mentions,
    decode_entities,
    normalize_whitespace,
    strip_formatting,
    unwrap_links,
)
from slack_keeper.text.mentions import NameResolver, expand_user_mentions, user_ids

logger = logging.getLogger(__name__)

MAX_PASSES = 5


async def _normalize_once(
    text: str, resolver: NameResolver | None, names: dict[str, str]
) -> str:
    s = decode_entities(text)
    s = unwrap_links(s)

    ids = user_ids(s)
    # Names resolved in an earlier pass are reused, including id fallbacks
    missing = ids - names.keys()
    if missing and resolver is not None:
        names.update(await resolver.resolve(missing))
        logger.debug("Resolved %d mentioned users", len(missing))
    s = expand_user_mentions(s, names)

    s = convert_structural_mentions(s)
    s = strip_formatting(s)
    return normalize_whitespace(s)


async def normalize(text: str | None, resolver: NameResolver | None = None) -> str:
    """Convert raw Slack message text into clean plain text.

    Args:
        text: Raw mrkdwn text. None is treated as empty.
        resolver: Source of display names for user mentions. Without one,
            every user mention falls back to ``@<id>``.
    """
    s = text or ""
    names: dict[str, str] = {}
    for _ in range(MAX_PASSES):
        cleaned = await _normalize_once(s, resolver, names)
        if cleaned == s:
            return cleaned
        s = cleaned
    logger.warning("Text still changing after %d normalization passes", MAX_PASSES)
    return s
