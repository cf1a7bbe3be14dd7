"""FAQ tracking and question analytics."""
import copy
import threading
import uuid
from collections import Counter
from datetime import datetime, timedelta, timezone
from types import MappingProxyType
from typing import Callable, Dict, List, Optional, Tuple

from academic_assistant.models.faq import (
    FAQItem,
    KeywordCount,
    QuestionAnalytics,
    QuestionHistoryEntry,
    QuestionTrend,
)
from academic_assistant.services.faq_store import FAQRepository, InMemoryFAQRepository
from academic_assistant.utils.logger import logger

MAX_HISTORY = 1000
RECENT_WINDOW = 100
REPEAT_THRESHOLD = 0.7
CREATE_THRESHOLD = 0.6
MIN_SIMILAR_OCCURRENCES = 2
MAX_POPULARITY = 100
NEW_FAQ_POPULARITY = 5
MAX_KEYWORDS = 10
DEFAULT_CATEGORY = "General"

KEYWORD_STOP_WORDS = frozenset({
    "what", "how", "why", "when", "where", "who", "is", "are", "the", "a", "an", "and",
    "or", "but", "in", "on", "at", "to", "for", "of", "with", "by",
})

# Checked in order, first category with a matching keyword wins
CATEGORY_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("Summary", ("summarize", "summary", "main", "topic", "overview", "about", "key points")),
    ("Research Methods", ("method", "methodology", "approach", "technique", "procedure")),
    ("Results", ("results", "findings", "outcomes", "conclusion", "discovered")),
    ("Analysis", ("analyze", "analysis", "examine", "evaluate", "assess", "limitations")),
    ("Applications", ("application", "practical", "use", "implement", "apply")),
    ("Theory", ("theory", "theoretical", "framework", "model", "concept")),
    ("Data", ("data", "dataset", "source", "information", "evidence")),
    ("Context", ("context", "background", "related", "comparison", "literature")),
    ("Future Work", ("future", "recommendation", "direction", "further", "next")),
)

DEFAULT_FAQS = (
    MappingProxyType({
        "question": "What is the main topic of this document?",
        "answer": "I'll analyze the document to identify its primary subject matter, key themes, and central arguments.",
        "category": "Summary",
        "popularity": 100,
        "keywords": ("main", "topic", "subject", "theme", "about"),
    }),
    MappingProxyType({
        "question": "Can you summarize the key points?",
        "answer": "I'll provide a concise overview of the most important concepts, findings, and conclusions from your documents.",
        "category": "Summary",
        "popularity": 95,
        "keywords": ("summarize", "key points", "main points", "overview"),
    }),
    MappingProxyType({
        "question": "What are the research methods used?",
        "answer": "I'll examine the document to identify the research methodology, data collection techniques, and analytical approaches used.",
        "category": "Research Methods",
        "popularity": 80,
        "keywords": ("research methods", "methodology", "approach", "technique"),
    }),
    MappingProxyType({
        "question": "What are the main findings or results?",
        "answer": "I'll highlight the primary discoveries, outcomes, and significant results presented in the research.",
        "category": "Results",
        "popularity": 85,
        "keywords": ("findings", "results", "outcomes", "conclusions"),
    }),
    MappingProxyType({
        "question": "What are the practical applications?",
        "answer": "I'll identify how the concepts or findings can be applied in real-world scenarios or practical contexts.",
        "category": "Applications",
        "popularity": 75,
        "keywords": ("applications", "practical", "real-world", "implementation"),
    }),
    MappingProxyType({
        "question": "What are the limitations of this study?",
        "answer": "I'll examine the document to identify any acknowledged limitations, constraints, or areas for future research.",
        "category": "Analysis",
        "popularity": 70,
        "keywords": ("limitations", "constraints", "weaknesses", "gaps"),
    }),
    MappingProxyType({
        "question": "How does this relate to other research?",
        "answer": "I'll look for references to related work, comparisons with other studies, and how this research fits into the broader field.",
        "category": "Context",
        "popularity": 65,
        "keywords": ("related research", "comparison", "context", "literature"),
    }),
    MappingProxyType({
        "question": "What are the theoretical frameworks mentioned?",
        "answer": "I'll identify the theoretical foundations, conceptual models, and frameworks that underpin the research.",
        "category": "Theory",
        "popularity": 60,
        "keywords": ("theoretical framework", "theory", "model", "framework"),
    }),
    MappingProxyType({
        "question": "What data sources were used?",
        "answer": "I'll examine the document to identify the sources of data, datasets, or information used in the research.",
        "category": "Data",
        "popularity": 55,
        "keywords": ("data sources", "dataset", "data", "sources"),
    }),
    MappingProxyType({
        "question": "What are the future research directions?",
        "answer": "I'll look for suggestions about future work, unanswered questions, and potential areas for further investigation.",
        "category": "Future Work",
        "popularity": 50,
        "keywords": ("future research", "future work", "recommendations", "directions"),
    }),
)


def jaccard_similarity(first: str, second: str) -> float:
    """Jaccard overlap of the whitespace-separated word sets of two strings."""
    words1 = set(first.split())
    words2 = set(second.split())
    union = words1 | words2
    if not union:
        return 0.0
    return len(words1 & words2) / len(union)


def categorize_question(question: str) -> str:
    """Map a lowercased question to a category from CATEGORY_KEYWORDS."""
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in question for keyword in keywords):
            return category
    return DEFAULT_CATEGORY


def extract_keywords(question: str) -> List[str]:
    """Words longer than two characters that are not stop words, at most ten."""
    words = [w for w in question.split() if len(w) > 2 and w not in KEYWORD_STOP_WORDS]
    return words[:MAX_KEYWORDS]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class FAQTracker:
    """
    Records asked questions and maintains a list of frequently asked ones.

    A question similar to an existing FAQ bumps that FAQ. A question that
    keeps recurring in recent history without a matching FAQ becomes a new
    FAQ. Read queries never mutate state.
    """

    def __init__(
        self,
        repository: Optional[FAQRepository] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize FAQ tracker.

        Args:
            repository: Persistence for FAQ items and history, in-memory if None
            clock: Returns the current time, injectable for tests
        """
        self.repository = repository or InMemoryFAQRepository()
        self.clock = clock or _utc_now
        self._lock = threading.Lock()
        self._faqs, self._history = self.repository.load()
        self._add_default_faqs()

    def _add_default_faqs(self) -> None:
        existing = {faq.question for faq in self._faqs}
        now = self.clock()
        added = 0
        for default in DEFAULT_FAQS:
            if default["question"] in existing:
                continue
            self._faqs.append(
                FAQItem(
                    id=self._generate_id(),
                    question=default["question"],
                    answer=default["answer"],
                    category=default["category"],
                    popularity=default["popularity"],
                    keywords=list(default["keywords"]),
                    last_asked=now,
                    times_asked=default["popularity"],
                )
            )
            added += 1
        if added:
            self.repository.save(self._faqs, self._history)

    @staticmethod
    def _generate_id() -> str:
        return uuid.uuid4().hex[:9]

    def track(self, question: str) -> Optional[FAQItem]:
        """
        Record a question.

        Args:
            question: Question as asked

        Returns:
            Copy of the FAQ item that was bumped or created, None otherwise
        """
        normalized = question.lower().strip()
        category = categorize_question(normalized)
        now = self.clock()

        with self._lock:
            self._history.insert(0, QuestionHistoryEntry(question=question, timestamp=now, category=category))
            del self._history[MAX_HISTORY:]

            faq = self._find_similar_faq(normalized)
            if faq is not None:
                faq.times_asked += 1
                faq.last_asked = now
                faq.popularity = min(MAX_POPULARITY, faq.popularity + 1)
            elif self._should_create_faq(normalized):
                faq = self._create_faq(question, normalized, category, now)

            self.repository.save(self._faqs, self._history)
            return copy.copy(faq) if faq is not None else None

    def _find_similar_faq(self, normalized: str) -> Optional[FAQItem]:
        for faq in self._faqs:
            if jaccard_similarity(normalized, faq.question.lower()) >= REPEAT_THRESHOLD:
                return faq
        return None

    def _should_create_faq(self, normalized: str) -> bool:
        recent = self._history[:RECENT_WINDOW]
        similar = sum(
            1 for entry in recent
            if jaccard_similarity(normalized, entry.question.lower().strip()) >= CREATE_THRESHOLD
        )
        return similar >= MIN_SIMILAR_OCCURRENCES

    def _create_faq(self, question: str, normalized: str, category: str, now: datetime) -> FAQItem:
        keywords = extract_keywords(normalized)
        faq = FAQItem(
            id=self._generate_id(),
            question=question,
            answer=(
                "This is a frequently asked question. I'll analyze your documents to provide "
                f"a comprehensive answer about {', '.join(keywords[:3])}."
            ),
            category=category,
            popularity=NEW_FAQ_POPULARITY,
            keywords=keywords,
            last_asked=now,
            times_asked=1,
        )
        self._faqs.append(faq)
        logger.info(f"Created FAQ entry: {question}", extra={"question_category": category})
        return faq

    def _snapshot(self) -> List[FAQItem]:
        with self._lock:
            return [copy.copy(faq) for faq in self._faqs]

    def get_popular(self, limit: int = 10) -> List[FAQItem]:
        """Most popular FAQ items first."""
        faqs = self._snapshot()
        faqs.sort(key=lambda faq: faq.popularity, reverse=True)
        return faqs[:limit]

    def get_trending(self, limit: int = 5, window_days: int = 7) -> List[FAQItem]:
        """
        FAQ items asked within the window, ranked by recency-weighted count.

        Args:
            limit: Maximum number of items
            window_days: Only items asked within this many days are considered

        Returns:
            FAQ items sorted by times_asked * (last_asked / now), highest first
        """
        now = self.clock()
        threshold = now - timedelta(days=window_days)
        now_ts = now.timestamp()

        recent = [faq for faq in self._snapshot() if faq.last_asked >= threshold]
        recent.sort(key=lambda faq: faq.times_asked * (faq.last_asked.timestamp() / now_ts), reverse=True)
        return recent[:limit]

    def get_suggested(self, context: Optional[str] = None, limit: int = 6) -> List[FAQItem]:
        """
        FAQ items relevant to some context text.

        Items are ranked by keyword overlap with the context times popularity.
        Without context this is get_popular.
        """
        if not context:
            return self.get_popular(limit)

        context_keywords = extract_keywords(context.lower())

        def score(faq: FAQItem) -> int:
            overlap = sum(
                1 for keyword in faq.keywords
                if any(ctx in keyword or keyword in ctx for ctx in context_keywords)
            )
            return overlap * faq.popularity

        faqs = self._snapshot()
        faqs.sort(key=score, reverse=True)
        return faqs[:limit]

    def get_analytics(self) -> QuestionAnalytics:
        """Keyword, category and repeat statistics over the last 100 questions."""
        with self._lock:
            total = len(self._history)
            recent = list(self._history[:RECENT_WINDOW])

        keyword_counts: Counter = Counter()
        category_counts: Dict[str, int] = {}
        question_counts: Counter = Counter()
        for entry in recent:
            keyword_counts.update(extract_keywords(entry.question.lower()))
            category = entry.category or DEFAULT_CATEGORY
            category_counts[category] = category_counts.get(category, 0) + 1
            question_counts[entry.question.lower().strip()] += 1

        popular_keywords = [KeywordCount(keyword=k, count=c) for k, c in keyword_counts.most_common(10)]
        trends = [
            QuestionTrend(question=q, count=c)
            for q, c in question_counts.most_common()
            if c > 1
        ][:5]

        return QuestionAnalytics(
            total_questions=total,
            popular_keywords=popular_keywords,
            category_distribution=category_counts,
            recent_trends=trends,
        )

    def get_categories(self) -> List[str]:
        return sorted({faq.category for faq in self._snapshot()})

    def get_by_category(self, category: str) -> List[FAQItem]:
        faqs = [faq for faq in self._snapshot() if faq.category == category]
        faqs.sort(key=lambda faq: faq.popularity, reverse=True)
        return faqs
