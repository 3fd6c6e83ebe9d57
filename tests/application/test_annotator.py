"""Tests for weak-word link annotation."""

import pytest

from openwords.application.annotator import (
    annotate,
    annotate_once,
    identity_lemmatizer,
    parse_link,
    tokenize,
)

LEMMAS = {"swam": "swim", "ran": "run", "apples": "apple"}


def lemmatize(token):
    return LEMMAS.get(token, token)


# ---------- tokenize ----------


def test_tokenize_classes():
    assert tokenize("a  [[b|c]],d") == ["a", "  ", "[[b|c]]", ",", "d"]


@pytest.mark.parametrize(
    "text",
    [
        "",
        "Hello, world!\n\n  tabs\tand -- dashes...",
        "x [[ y ]] z [[ unclosed",
        "[[a|[[b]]]] ]]][[[",
        "naïve café, 東京 and émigré",
    ],
)
def test_tokenize_is_lossless(text):
    assert "".join(tokenize(text)) == text


def test_parse_link():
    assert parse_link("[[swim|swam]]") == ("swim", "swam")
    assert parse_link("[[swim]]") == ("swim", None)
    assert parse_link("swim") is None


# ---------- annotate ----------


def test_weak_link_is_kept():
    text = "The [[swim|swam]] fish"
    assert annotate(text, {"swim"}, identity_lemmatizer) == text


def test_non_weak_link_reverts_to_alias():
    assert annotate("The [[run|ran]] fish", set(), identity_lemmatizer) == "The ran fish"


def test_non_weak_link_without_alias_reverts_to_name():
    assert annotate("A [[pear]] and a plum", set()) == "A pear and a plum"


def test_weak_lemma_is_linked_with_surface_alias():
    assert annotate("I swam home", {"swim"}, lemmatize) == "I [[swim|swam]] home"


def test_case_is_preserved_in_alias():
    assert annotate("Apples are red.", {"apple"}, lemmatize) == "[[apple|Apples]] are red."


def test_lowercased_token_fallback():
    assert annotate("They ran", {"ran"}, lemmatize) == "They [[ran|ran]]"


def test_empty_lemma_falls_back_to_token():
    assert annotate("pear", {"pear"}, lambda t: "") == "[[pear|pear]]"


def test_unrelated_text_untouched():
    text = "Nothing *to* see here.\n\n- item one\n- item two\n"
    assert annotate(text, {"apple"}, lemmatize) == text


def test_demoted_alias_is_relinked_by_lemma():
    # The alias of a stale link can itself be a weak word
    assert annotate("[[run|swam]]", {"swim"}, lemmatize) == "[[swim|swam]]"
    assert annotate_once("[[run|swam]]", {"swim"}, lemmatize) == "swam"


@pytest.mark.parametrize(
    "text",
    [
        "I swam and ran past the apples.",
        "The [[swim|swam]] fish [[run|ran]] away",
        "[[pear]] [[Apple|apples]] and [[apple]]",
        "[[a|[[b]]]] swam",
    ],
)
def test_annotate_is_idempotent(text):
    weak = {"swim", "apple", "b"}
    once = annotate(text, weak, lemmatize)
    assert annotate(once, weak, lemmatize) == once


def test_weak_words_accept_any_collection():
    assert annotate("swam", ["swim"], lemmatize) == "[[swim|swam]]"
    assert annotate("swam", frozenset({"swim"}), lemmatize) == "[[swim|swam]]"


def test_deeply_nested_stale_links_settle_in_one_call():
    text = "[[" * 20 + "a" + "]]" * 20
    once = annotate(text, set())
    assert once == "a"
    assert annotate(once, set()) == once


def test_deeply_nested_around_weak_link():
    text = "[[" * 12 + "[[swim|swam]]" + "]]" * 12
    once = annotate(text, {"swim"}, lemmatize)
    assert annotate(once, {"swim"}, lemmatize) == once
