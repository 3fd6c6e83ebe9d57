"""
Link annotation for weakly known words.

Rewrites free text so that every word still being learned points at its note
as an Obsidian wikilink, and demotes links to words that are no longer weak
back to plain text. Tokenization is lossless: anything that is not a word or
a link is copied through byte for byte.
"""

import re
from collections.abc import Callable, Collection

# Inner names and aliases may not contain brackets, so a link never overlaps
# the brackets of a neighbouring one.
_LINK = r"\[\[[^\[\]|\n]+(?:\|[^\[\]\n]+)?\]\]"

TOKEN_RE = re.compile(rf"{_LINK}|\s+|\w+|(?:(?!{_LINK})[^\w\s])+")
LINK_RE = re.compile(r"^\[\[([^\[\]|\n]+)(?:\|([^\[\]\n]+))?\]\]$")
WORD_RE = re.compile(r"^\w+$")
LINKABLE_NAME_RE = re.compile(r"^[^\[\]|\n]+$")


def identity_lemmatizer(token: str) -> str:
    return token


def tokenize(text: str) -> list[str]:
    """Split text into link, whitespace, word and punctuation tokens."""
    return TOKEN_RE.findall(text)


def parse_link(token: str) -> tuple[str, str | None] | None:
    """Return (name, alias) for a `[[name]]` or `[[name|alias]]` token."""
    m = LINK_RE.match(token)
    if not m:
        return None
    return m.group(1), m.group(2)


def _rewrite_token(
    token: str,
    weak_words: Collection[str],
    lemmatize: Callable[[str], str],
) -> str:
    link = parse_link(token)
    if link is not None:
        name, alias = link
        if name in weak_words:
            return token
        return alias if alias is not None else name

    if not WORD_RE.match(token):
        return token

    lowered = token.lower()
    lemma = lemmatize(lowered) or lowered
    if lemma in weak_words and LINKABLE_NAME_RE.match(lemma):
        return f"[[{lemma}|{token}]]"
    if lowered in weak_words:
        return f"[[{lowered}|{token}]]"
    return token


def annotate_once(
    text: str,
    weak_words: Collection[str],
    lemmatize: Callable[[str], str] = identity_lemmatizer,
) -> str:
    """A single rewrite pass over the tokens of `text`."""
    return "".join(_rewrite_token(t, weak_words, lemmatize) for t in tokenize(text))


def annotate(
    text: str,
    weak_words: Collection[str],
    lemmatize: Callable[[str], str] = identity_lemmatizer,
) -> str:
    """
    Link weak words in `text` and unlink words that are no longer weak.

    Args:
        text: Arbitrary markdown.
        weak_words: Names of words still being learned.
        lemmatize: Token -> base form; an empty result falls back to the token.

    Returns:
        The rewritten text. Running annotate again on the result with the
        same arguments returns it unchanged.
    """
    # Every pass either strips brackets from a stale link or adds a link to a
    # weak word, which later passes keep, so the loop always settles.
    current = text
    while True:
        rewritten = annotate_once(current, weak_words, lemmatize)
        if rewritten == current:
            return current
        current = rewritten
