"""Template-driven answer synthesis from ranked chunks."""
import re
from typing import Iterable, List, Optional

from academic_assistant.models.document import AnswerResult, Document, DocumentStatus, ScoredChunk, Source
from academic_assistant.qa.templates import (
    ALWAYS_FOLLOW_UPS,
    GENERIC_FOLLOW_UPS,
    HIGH_CONFIDENCE_NOTE,
    MODERATE_CONFIDENCE_NOTE,
    ComparisonTemplate,
    ContextualTemplate,
    ListTemplate,
    NoResultsTemplate,
    SummaryTemplate,
)
from academic_assistant.services.retrieval_service import RetrievalEngine

SENTENCE_SPLIT = re.compile(r"[.!?]+")
LIST_ITEM = re.compile(r"(?:•|\*|\d+\.|-)([^•*\n]+)")
EXCERPT_LENGTH = 150
MAX_SOURCES = 3
MAX_FOLLOW_UPS = 4


def split_sentences(content: str) -> List[str]:
    return SENTENCE_SPLIT.split(content)


class AnswerSynthesizer:
    """Builds an answer, a confidence score and citations from ranked chunks."""

    def __init__(self, engine: RetrievalEngine):
        """
        Initialize answer synthesizer.

        Args:
            engine: Retrieval engine whose term extraction and rules are shared
        """
        self.engine = engine
        self.rules = engine.rules

    def synthesize(
        self,
        query: str,
        ranked_chunks: List[ScoredChunk],
        documents: Optional[Iterable[Document]] = None,
    ) -> AnswerResult:
        """
        Compose an answer for a question.

        Args:
            query: Raw question
            ranked_chunks: Results of RetrievalEngine.search, best first
            documents: Documents that were searched, used to word the
                no-result message

        Returns:
            AnswerResult with a confidence annotation appended to the answer
        """
        if not ranked_chunks:
            return AnswerResult(
                answer=self.no_results_message(query, documents),
                confidence=0.0,
                sources=[],
                follow_ups=list(GENERIC_FOLLOW_UPS),
            )

        answer = self.compose(query, ranked_chunks[:MAX_SOURCES])
        confidence = self.confidence(query, ranked_chunks)

        return AnswerResult(
            answer=answer + self.confidence_note(confidence),
            confidence=confidence,
            sources=self.sources(ranked_chunks),
            follow_ups=self.follow_ups(query, ranked_chunks),
        )

    def no_results_message(self, query: str, documents: Optional[Iterable[Document]]) -> str:
        if documents is not None and not any(d.status == DocumentStatus.READY for d in documents):
            return NoResultsTemplate.NO_DOCUMENTS
        return NoResultsTemplate.build(query)

    def compose(self, query: str, top: List[ScoredChunk]) -> str:
        """Pick a template from the question wording. First match wins."""
        query_lower = query.lower()

        if "summary" in query_lower or "overview" in query_lower:
            return self._summary(top)
        if "compare" in query_lower or "difference" in query_lower:
            return self._comparison(top)
        if "list" in query_lower or "types" in query_lower or "kinds" in query_lower:
            return self._list(top)
        return self._contextual(query, top)

    def _summary(self, top: List[ScoredChunk]) -> str:
        points = []
        for result in top:
            content = result.chunk.content
            sentence = next((s.strip() for s in split_sentences(content) if len(s.strip()) > 30), None)
            points.append(sentence or content[:100])
        return SummaryTemplate.build(points)

    def _comparison(self, top: List[ScoredChunk]) -> str:
        if len(top) >= 2:
            return ComparisonTemplate.build(top[0].chunk.content, top[1].chunk.content)
        return ComparisonTemplate.build(top[0].chunk.content)

    def _list(self, top: List[ScoredChunk]) -> str:
        content = top[0].chunk.content
        items = [m.group(1).strip() for m in LIST_ITEM.finditer(content)]
        items = [item for item in items if item]
        if len(items) > 1:
            return ListTemplate.build(items)
        return ListTemplate.fallback(content)

    def _contextual(self, query: str, top: List[ScoredChunk]) -> str:
        main = top[0]
        content = main.chunk.content
        terms = self.engine.extract_query_terms(query)

        sentences = [s for s in split_sentences(content) if len(s.strip()) > 20]
        best = sentences[0] if sentences else content[:200]
        best_overlap = 0
        for sentence in sentences:
            lowered = sentence.lower()
            overlap = sum(1 for term in terms if term in lowered)
            if overlap > best_overlap:
                best_overlap = overlap
                best = sentence

        supporting = None
        if len(top) > 1 and top[1].score > main.score * self.rules.supporting_ratio:
            candidate = split_sentences(top[1].chunk.content)[0].strip()
            if len(candidate) > 20:
                supporting = candidate

        return ContextualTemplate.build(main.document.name, best.strip(), supporting)

    def confidence(self, query: str, ranked_chunks: List[ScoredChunk]) -> float:
        """
        Estimate answer confidence in [0, 1].

        Based on the top score, agreement from a close second result and the
        share of query terms present in the top chunk.
        """
        if not ranked_chunks:
            return 0.0
        rules = self.rules
        top_score = ranked_chunks[0].score
        confidence = min(top_score / rules.confidence_divisor, 1.0)

        if len(ranked_chunks) > 1 and ranked_chunks[1].score > top_score * rules.close_second_ratio:
            confidence += rules.close_second_bonus

        terms = self.engine.extract_query_terms(query)
        top_content = ranked_chunks[0].chunk.content.lower()
        coverage = sum(1 for term in terms if term in top_content) / len(terms)
        confidence += coverage * rules.coverage_weight

        return max(0.0, min(confidence, 1.0))

    def confidence_note(self, confidence: float) -> str:
        if confidence > self.rules.high_confidence:
            return HIGH_CONFIDENCE_NOTE
        if confidence > self.rules.moderate_confidence:
            return MODERATE_CONFIDENCE_NOTE
        return ""

    @staticmethod
    def sources(ranked_chunks: List[ScoredChunk]) -> List[Source]:
        """Cite the top three chunks."""
        sources = []
        for result in ranked_chunks[:MAX_SOURCES]:
            content = result.chunk.content
            excerpt = content[:EXCERPT_LENGTH] + "..." if len(content) > EXCERPT_LENGTH else content
            sources.append(
                Source(
                    document=result.document.name,
                    page=result.chunk.page,
                    excerpt=excerpt,
                    relevance_score=round(result.score, 1),
                )
            )
        return sources

    def follow_ups(self, query: str, ranked_chunks: List[ScoredChunk]) -> List[str]:
        """Suggest up to four follow-up questions."""
        query_lower = query.lower()
        suggestions: List[str] = []

        if ranked_chunks:
            content = ranked_chunks[0].chunk.content.lower()

            if "what is" in query_lower:
                topic = " ".join(self.engine.extract_query_terms(query)[-2:]) or "this topic"
                suggestions.append(f"How does {topic} work?")
                suggestions.append(f"What are the applications of {topic}?")
            elif "how" in query_lower:
                suggestions.append("What are the benefits of this approach?")
                suggestions.append("What challenges might arise?")
            elif "why" in query_lower:
                suggestions.append("What are the implications of this?")
                suggestions.append("How does this compare to alternatives?")

            if "method" in content or "approach" in content:
                suggestions.append("What are the steps involved in this method?")
            if "result" in content or "finding" in content:
                suggestions.append("What were the key findings?")
                suggestions.append("How significant are these results?")
            if "application" in content or "use" in content:
                suggestions.append("What are some real-world examples?")

        suggestions.extend(ALWAYS_FOLLOW_UPS)
        return list(dict.fromkeys(suggestions))[:MAX_FOLLOW_UPS]
