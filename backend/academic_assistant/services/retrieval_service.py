"""Keyword retrieval over document chunks."""
import re
from typing import Iterable, List

from academic_assistant.models.document import Chunk, Document, DocumentStatus, ScoredChunk
from academic_assistant.services.scoring_rules import DEFAULT_SCORING_RULES, ContextRule, ScoringRules
from academic_assistant.utils.logger import logger

PUNCTUATION = re.compile(r"[^\w\s]")


def _contains_word(term: str, content: str) -> bool:
    return re.search(rf"\b{re.escape(term)}\b", content) is not None


def _context_bonus(rules: Iterable[ContextRule], query: str, content: str) -> float:
    return sum(
        rule.weight
        for rule in rules
        if rule.query_pattern.search(query) and rule.content_pattern.search(content)
    )


class RetrievalEngine:
    """
    Scores chunks against a question with explainable keyword heuristics.

    Scoring is a pure function of the query, the chunk and its document.
    Nothing is cached or indexed between calls.
    """

    def __init__(self, rules: ScoringRules = DEFAULT_SCORING_RULES):
        """
        Initialize retrieval engine.

        Args:
            rules: Weights and pattern tables
        """
        self.rules = rules

    def extract_query_terms(self, query: str) -> List[str]:
        """
        Extract search terms from a question.

        Args:
            query: Raw question

        Returns:
            Up to max_terms lowercase terms without stop words or short tokens,
            or the placeholder term when nothing remains
        """
        words = PUNCTUATION.sub(" ", query.lower()).split()
        terms = [
            w for w in words
            if len(w) >= self.rules.min_term_length and w not in self.rules.stop_words
        ][: self.rules.max_terms]
        return terms or [self.rules.placeholder_term]

    def score_chunk(self, query: str, terms: List[str], chunk: Chunk, document: Document) -> float:
        """
        Score one chunk.

        Args:
            query: Raw question, used for the contextual rules
            terms: Terms from extract_query_terms
            chunk: Chunk to score
            document: Document owning the chunk

        Returns:
            Non-negative relevance score
        """
        rules = self.rules
        content = chunk.content.lower()
        score = 0.0

        if " ".join(terms) in content:
            score += rules.phrase_weight

        n = len(terms)
        matched = 0
        for i, term in enumerate(terms):
            if term not in content:
                continue
            matched += 1
            position_weight = 1 + (n - i) * rules.position_step
            score += rules.term_weight * position_weight
            if _contains_word(term, content):
                score += rules.boundary_weight * position_weight

        context_query = " ".join(terms) if rules.context_on_terms else query.lower()
        score += _context_bonus(rules.context_rules, context_query, content)

        total_words = max(len(content.split()), 1)
        score += matched / total_words * rules.density_weight

        name = document.name.lower()
        score += sum(rules.title_weight for term in terms if term in name)

        return score

    def search(self, query: str, documents: Iterable[Document]) -> List[ScoredChunk]:
        """
        Rank chunks of ready documents against a question.

        Args:
            query: Raw question
            documents: Candidate documents; only ready ones are searched

        Returns:
            Chunks with a positive score, best first, ties in reading order,
            truncated to max_results
        """
        terms = self.extract_query_terms(query)
        results: List[ScoredChunk] = []

        for document in documents:
            if document.status != DocumentStatus.READY:
                continue
            for chunk in document.chunks:
                score = self.score_chunk(query, terms, chunk, document)
                if score > 0:
                    results.append(ScoredChunk(chunk=chunk, score=score, document=document))

        ranked = sorted(results, key=lambda r: r.score, reverse=True)[: self.rules.max_results]
        logger.debug(
            f"Search matched {len(results)} chunks",
            extra={
                "result_count": len(ranked),
                "top_score": ranked[0].score if ranked else 0.0,
            },
        )
        return ranked

    def simple_search(self, query: str, documents: Iterable[Document]) -> List[ScoredChunk]:
        """
        Simpler ranking used when the main path fails.

        Raw query words are matched directly, with synonym expansion and a
        smaller contextual table.
        """
        rules = self.rules
        query_lower = query.lower()
        words = [w for w in query_lower.split() if len(w) > 2]
        expanded = [s for w in words for s in rules.synonyms.get(w, ())]
        results: List[ScoredChunk] = []

        for document in documents:
            if document.status != DocumentStatus.READY:
                continue
            for chunk in document.chunks:
                content = chunk.content.lower()
                score = 0.0

                if query_lower in content:
                    score += rules.fallback_phrase_weight

                for word in words:
                    if word in content:
                        score += rules.fallback_term_weight
                        if _contains_word(word, content):
                            score += rules.fallback_boundary_weight

                for term in expanded:
                    if term in content and term not in words:
                        score += rules.fallback_synonym_weight

                score += _context_bonus(rules.fallback_context_rules, query_lower, content)

                matched = sum(1 for w in words if w in content)
                score += matched / max(len(content.split()), 1) * rules.fallback_density_weight

                if score > 0:
                    results.append(ScoredChunk(chunk=chunk, score=score, document=document))

        return sorted(results, key=lambda r: r.score, reverse=True)[: rules.fallback_max_results]
