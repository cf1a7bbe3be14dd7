"""Immutable tables and weights used by retrieval and answer synthesis."""
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import FrozenSet, Mapping, Tuple


@dataclass(frozen=True)
class ContextRule:
    """Bonus applied when both the query and the content match."""

    query_pattern: "re.Pattern[str]"
    content_pattern: "re.Pattern[str]"
    weight: float

    @classmethod
    def of(cls, query_pattern: str, content_pattern: str, weight: float) -> "ContextRule":
        return cls(
            re.compile(query_pattern, re.IGNORECASE),
            re.compile(content_pattern, re.IGNORECASE),
            weight,
        )


STOP_WORDS: FrozenSet[str] = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by",
    "from", "about", "what", "how", "when", "where", "why", "who", "which", "that", "this",
    "is", "are", "was", "were", "be", "been", "being", "have", "has", "had", "do", "does", "did",
    "will", "would", "could", "should", "may", "might", "can", "shall",
})

CONTEXT_RULES: Tuple[ContextRule, ...] = (
    ContextRule.of(r"(what is|define|definition)", r"(is a|is the|refers to|defined as|means)", 4),
    ContextRule.of(r"(how does|how to|process|method)", r"(process|method|approach|technique|procedure|steps)", 4),
    ContextRule.of(r"(why|reason|because)", r"(because|reason|due to|since|therefore|purpose)", 4),
    ContextRule.of(r"(types|kinds|categories)", r"(types|kinds|categories|include|main|primary)", 4),
    ContextRule.of(r"(example|application|use)", r"(example|application|used|practice|industry|case)", 3),
    ContextRule.of(r"(benefit|advantage|pros)", r"(benefit|advantage|strength|positive|improved)", 3),
    ContextRule.of(r"(limitation|disadvantage|problem)", r"(limitation|disadvantage|problem|issue|challenge)", 3),
)

# Simpler rules used by the fallback search path
FALLBACK_CONTEXT_RULES: Tuple[ContextRule, ...] = (
    ContextRule.of(r"(what is|define)", r"(is (a|an|the)|definition|refers to)", 3),
    ContextRule.of(r"(how|process|method)", r"(process|method|approach|technique|procedure)", 3),
    ContextRule.of(r"(why|reason)", r"(because|reason|due to|purpose|since)", 3),
    ContextRule.of(r"(type|kind|category)", r"(type|kind|category|include|main|primary|key)", 3),
    ContextRule.of(r"(application|example|use)", r"(application|used|example|industry|practice)", 3),
)

SYNONYMS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "machine": ("ml", "artificial", "automated"),
    "learning": ("training", "education", "study"),
    "data": ("information", "dataset", "statistics"),
    "analysis": ("analytics", "examination", "evaluation"),
    "research": ("study", "investigation", "academic"),
    "method": ("approach", "technique", "procedure"),
    "process": ("procedure", "steps", "workflow"),
    "application": ("use", "usage", "implementation"),
    "type": ("kind", "category", "classification"),
    "algorithm": ("method", "technique", "approach"),
})


@dataclass(frozen=True)
class ScoringRules:
    """Weights and pattern tables for keyword relevance scoring."""

    stop_words: FrozenSet[str] = STOP_WORDS
    placeholder_term: str = "query"
    min_term_length: int = 3
    max_terms: int = 10

    phrase_weight: float = 10.0
    term_weight: float = 3.0
    boundary_weight: float = 2.0
    position_step: float = 0.1
    density_weight: float = 5.0
    title_weight: float = 1.0
    context_rules: Tuple[ContextRule, ...] = CONTEXT_RULES
    # Match context rules on the filtered terms instead of the raw question
    context_on_terms: bool = False
    max_results: int = 8

    fallback_phrase_weight: float = 5.0
    fallback_term_weight: float = 2.0
    fallback_boundary_weight: float = 1.0
    fallback_synonym_weight: float = 1.0
    fallback_density_weight: float = 2.0
    fallback_context_rules: Tuple[ContextRule, ...] = FALLBACK_CONTEXT_RULES
    fallback_max_results: int = 6
    synonyms: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: SYNONYMS, compare=False)

    # Answer synthesis thresholds
    supporting_ratio: float = 0.7
    confidence_divisor: float = 10.0
    close_second_ratio: float = 0.8
    close_second_bonus: float = 0.1
    coverage_weight: float = 0.2
    high_confidence: float = 0.7
    moderate_confidence: float = 0.4


DEFAULT_SCORING_RULES = ScoringRules()
