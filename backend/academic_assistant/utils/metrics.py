"""Prometheus metrics exposed on /metrics."""
from prometheus_client import Counter, Histogram

DOCUMENTS_UPLOADED = Counter(
    "academic_assistant_documents_uploaded_total",
    "Upload attempts by outcome",
    ["outcome"],
)

DOCUMENTS_PROCESSED = Counter(
    "academic_assistant_documents_processed_total",
    "Finished background processing runs by final status",
    ["status"],
)

QUESTIONS_ANSWERED = Counter(
    "academic_assistant_questions_answered_total",
    "Answered questions by answer source",
    ["source"],
)

QUESTION_LATENCY = Histogram(
    "academic_assistant_question_answer_seconds",
    "Time spent answering one question",
)
