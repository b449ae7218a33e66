import pytest

from packages.categorization.constants import DEFAULT_CATEGORY_KEYWORDS, Category
from packages.categorization.rules import (
    DEFAULT_RULES,
    CategoryRule,
    KeywordMatcher,
    build_rules,
    suggest_category,
)


@pytest.fixture
def matcher():
    return KeywordMatcher()


def test_first_matching_rule_wins(matcher):
    assert matcher.predict("Pagamento Netflix mensile") == "abbonamenti"


@pytest.mark.parametrize(
    "description,expected",
    [
        ("POS ESSELUNGA MILANO", "cibo"),
        ("Telepass pedaggi", "trasporti"),
        ("Rata mutuo casa", "casa"),
        ("Farmacia Comunale", "salute"),
        ("Biglietti Cinema", "svago"),
        ("Ryanair DAC", "viaggi"),
        ("Zooplus ordine", "animali"),
    ],
)
def test_default_table(matcher, description, expected):
    assert matcher.predict(description) == expected


def test_earlier_rule_shadows_later_keyword(matcher):
    # "amazon prime" (abbonamenti) is checked before "amazon" (svago)
    assert matcher.predict("Amazon Prime Video") == "abbonamenti"
    assert matcher.predict("Amazon marketplace") == "svago"


def test_substring_not_word_match(matcher):
    # "ip" inside "stipendio" is a trasporti keyword
    assert matcher.predict("Stipendio") == "trasporti"


def test_default_label(matcher):
    assert matcher.predict("xyz qqq") == Category.VARIE.value
    assert matcher.predict("") == "varie"
    assert matcher.predict(None) == "varie"


def test_table_order_decides():
    first = build_rules([("svago", ["netflix"]), ("abbonamenti", ["netflix"])])
    second = build_rules([("abbonamenti", ["netflix"]), ("svago", ["netflix"])])

    assert KeywordMatcher(rules=first).predict("Pagamento Netflix mensile") == "svago"
    assert KeywordMatcher(rules=second).predict("Pagamento Netflix mensile") == "abbonamenti"


def test_equivalent_table_structures_agree():
    pairs = [("svago", ["netflix"]), ("abbonamenti", ["netflix", "spotify"])]
    from_list = KeywordMatcher(rules=build_rules(pairs))
    from_dict = KeywordMatcher(rules=build_rules(dict(pairs).items()))
    from_rules = KeywordMatcher(
        rules=[CategoryRule("svago", ("netflix",)), CategoryRule("abbonamenti", ("netflix", "spotify"))]
    )

    for description in ("Pagamento Netflix mensile", "Spotify AB", "Altro"):
        results = {m.predict(description) for m in (from_list, from_dict, from_rules)}
        assert len(results) == 1


def test_keywords_are_lowercased():
    matcher = KeywordMatcher(rules=build_rules([("abbonamenti", ["NETFLIX"])]))
    assert matcher.predict("netflix") == "abbonamenti"


def test_default_rules_keep_authored_order():
    assert [r.label for r in DEFAULT_RULES] == [label for label, _ in DEFAULT_CATEGORY_KEYWORDS]
    assert DEFAULT_RULES[0].label == "cibo"
    assert DEFAULT_RULES[-1].label == "animali"


def test_later_rules_not_evaluated_after_match():
    calls = []

    class SpyRule(CategoryRule):
        def matches(self, text_lower):
            calls.append(self.label)
            return super().matches(text_lower)

    matcher = KeywordMatcher(
        rules=[SpyRule("a", ("netflix",)), SpyRule("b", ("netflix",)), SpyRule("c", ("x",))]
    )

    assert matcher.predict("Netflix") == "a"
    assert calls == ["a"]


def test_suggest_category_uses_default_table():
    assert suggest_category("Spotify Premium") == "abbonamenti"
