"""Message normalization: Slack mrkdwn to plain text."""

from slack_keeper.text.markup import (
    convert_structural_mentions,
    decode_entities,
    normalize_whitespace,
    strip_formatting,
    unwrap_links,
)
from slack_keeper.text.mentions import (
    NameResolver,
    StaticResolver,
    expand_user_mentions,
    extract_mentions,
    user_ids,
)
from slack_keeper.text.pipeline import normalize

__all__ = [
    "convert_structural_mentions",
    "decode_entities",
    "expand_user_mentions",
    "extract_mentions",
    "NameResolver",
    "normalize",
    "normalize_whitespace",
    "StaticResolver",
    "strip_formatting",
    "unwrap_links",
    "user_ids",
]
