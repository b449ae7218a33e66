from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

from .constants import DEFAULT_CATEGORY, DEFAULT_CATEGORY_KEYWORDS


@dataclass(frozen=True)
class CategoryRule:
    label: str
    keywords: Tuple[str, ...]

    def matches(self, text_lower: str) -> bool:
        return any(kw in text_lower for kw in self.keywords)


def build_rules(pairs: Iterable[Tuple[str, Iterable[str]]]) -> Tuple[CategoryRule, ...]:
    """Build an ordered rule table from (label, keywords) pairs, keeping their order."""
    return tuple(
        CategoryRule(label=label, keywords=tuple(kw.lower() for kw in keywords))
        for label, keywords in pairs
    )


DEFAULT_RULES = build_rules(DEFAULT_CATEGORY_KEYWORDS)


class KeywordMatcher:
    def __init__(
        self,
        rules: Optional[Sequence[CategoryRule]] = None,
        default: str = DEFAULT_CATEGORY,
    ):
        # Explicit ordered table: the first rule with a matching keyword wins
        self.rules: Tuple[CategoryRule, ...] = tuple(rules) if rules is not None else DEFAULT_RULES
        self.default = default

    def predict(self, text: str) -> str:
        """
        Return the label of the first rule with a keyword contained in text.

        Plain substring containment on the lowercased text, no word
        boundaries. Falls back to the default label.
        """
        if not text:
            return self.default

        text_lower = text.lower()

        for rule in self.rules:
            if rule.matches(text_lower):
                return rule.label

        return self.default


_default_matcher = KeywordMatcher()


def suggest_category(description: str) -> str:
    """Categorize a description with the default rule table."""
    return _default_matcher.predict(description)
