"""Tests for mention extraction and user mention expansion."""

import pytest

from slack_keeper.models.text import MentionKind, MentionToken
from slack_keeper.text.mentions import (
    StaticResolver,
    expand_user_mentions,
    extract_mentions,
    user_ids,
)


def test_extract_mentions_in_order_and_distinct():
    """Tokens come back once each, in order of first appearance."""
    text = "<@U1> see <#C2|gen> <!here> and <@U1|ada> again"

    assert extract_mentions(text) == [
        MentionToken(kind=MentionKind.USER, id="U1"),
        MentionToken(kind=MentionKind.CHANNEL, id="C2"),
        MentionToken(kind=MentionKind.BROADCAST, id="here"),
    ]


def test_bare_user_id_recognized():
    """Bare @U... ids of realistic length count as user mentions."""
    assert user_ids("ping @U0123ABCD please") == {"U0123ABCD"}


def test_short_bare_id_ignored():
    """Short bare tokens are ordinary text."""
    assert user_ids("ping @U1 please") == set()


def test_email_not_a_mention():
    """An @ inside an email address is not a mention."""
    assert user_ids("mail bob@U0123ABCDE.example") == set()


def test_user_ids_collects_both_forms():
    """Wrapped and bare mentions are both collected."""
    assert user_ids("<@W1> and @U0123ABCD") == {"W1", "U0123ABCD"}


def test_expand_known_and_unknown():
    """Known ids become @name, unknown ids fall back to @id."""
    text = "<@U1> and <@U2|old-name>"
    assert expand_user_mentions(text, {"U1": "Ada"}) == "@Ada and @U2"


def test_expand_bare_mention():
    """Bare ids are expanded like wrapped ones."""
    assert expand_user_mentions("hi @U0123ABCD", {"U0123ABCD": "Grace"}) == "hi @Grace"


@pytest.mark.asyncio
async def test_static_resolver():
    """The static resolver maps unknown ids to themselves."""
    resolver = StaticResolver({"U1": "Ada"})

    assert await resolver.resolve({"U1", "U2"}) == {"U1": "Ada", "U2": "U2"}
