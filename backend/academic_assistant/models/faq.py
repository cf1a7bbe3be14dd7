"""FAQ and question analytics data models."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List


@dataclass
class FAQItem:
    """A reusable frequently asked question."""

    id: str
    question: str
    answer: str
    category: str
    popularity: int
    keywords: List[str]
    last_asked: datetime
    times_asked: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "question": self.question,
            "answer": self.answer,
            "category": self.category,
            "popularity": self.popularity,
            "keywords": list(self.keywords),
            "last_asked": self.last_asked.isoformat(),
            "times_asked": self.times_asked,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FAQItem":
        return cls(
            id=data["id"],
            question=data["question"],
            answer=data["answer"],
            category=data["category"],
            popularity=data["popularity"],
            keywords=list(data.get("keywords", [])),
            last_asked=datetime.fromisoformat(data["last_asked"]),
            times_asked=data["times_asked"],
        )


@dataclass
class QuestionHistoryEntry:
    """One tracked question."""

    question: str
    timestamp: datetime
    category: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "question": self.question,
            "timestamp": self.timestamp.isoformat(),
            "category": self.category,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "QuestionHistoryEntry":
        return cls(
            question=data["question"],
            timestamp=datetime.fromisoformat(data["timestamp"]),
            category=data["category"],
        )


@dataclass
class KeywordCount:
    keyword: str
    count: int


@dataclass
class QuestionTrend:
    question: str
    count: int
    trend: str = "stable"


@dataclass
class QuestionAnalytics:
    """Aggregate statistics over tracked questions."""

    total_questions: int
    popular_keywords: List[KeywordCount] = field(default_factory=list)
    category_distribution: Dict[str, int] = field(default_factory=dict)
    recent_trends: List[QuestionTrend] = field(default_factory=list)
