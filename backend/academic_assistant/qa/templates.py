"""Centralized answer templates for the academic assistant."""
from typing import List, Optional

HIGH_CONFIDENCE_NOTE = "\n\n*High confidence answer based on document content*"
MODERATE_CONFIDENCE_NOTE = "\n\n*Moderate confidence - you may want to ask for clarification*"
FOLLOW_UP_HEADER = "\n\n**Follow-up questions you might ask:**\n"

GENERIC_FOLLOW_UPS = (
    "What are the main topics covered in my documents?",
    "Can you summarize the key points?",
    "What type of document did I upload?",
    "What questions can I ask about this content?",
)

ALWAYS_FOLLOW_UPS = (
    "Can you provide more details about this topic?",
    "What else should I know about this subject?",
)


class NoResultsTemplate:
    """Message for questions that matched nothing."""

    NO_DOCUMENTS = (
        "I don't have any processed documents to search through yet. "
        "Please upload and wait for documents to be processed."
    )

    @staticmethod
    def build(query: str) -> str:
        return (
            f'I couldn\'t find specific information about "{query}" in your uploaded documents. '
            "This might be because:\n\n"
            "• The content doesn't directly address this topic\n"
            "• Different terminology is used in the documents\n"
            "• The information might be in a section I haven't indexed yet\n\n"
            "Try rephrasing your question with different keywords, "
            "or ask me about the main topics covered in your documents."
        )


class SummaryTemplate:
    """Numbered key points from the top chunks."""

    HEADER = "Based on the document content, here's a summary:\n\n"

    @staticmethod
    def build(points: List[str]) -> str:
        answer = SummaryTemplate.HEADER
        for index, point in enumerate(points, 1):
            answer += f"{index}. {point}\n"
        return answer


class ComparisonTemplate:
    """Two chunks side by side."""

    @staticmethod
    def build(first: str, second: Optional[str] = None) -> str:
        if second is None:
            return f"According to the document: {first}"
        return (
            "From the documents:\n\n"
            f"**First perspective:** {first}\n\n"
            f"**Another perspective:** {second}"
        )


class ListTemplate:
    """Bullet list extracted from a chunk."""

    @staticmethod
    def build(items: List[str]) -> str:
        answer = "According to the document:\n\n"
        for item in items:
            answer += f"• {item}\n"
        return answer

    @staticmethod
    def fallback(content: str) -> str:
        return f"The document explains: {content}"


class ContextualTemplate:
    """Best matching sentence, optionally with a supporting one."""

    @staticmethod
    def build(document_name: str, sentence: str, supporting: Optional[str] = None) -> str:
        answer = f"According to **{document_name}**:\n\n{sentence}."
        if supporting:
            answer += f"\n\nAdditionally: {supporting}."
        return answer


class FallbackTemplate:
    """Messages for the degraded answering path."""

    NO_DOCUMENTS = (
        "No documents are currently available for analysis. "
        "Please upload and process some documents first."
    )

    @staticmethod
    def build(content: str) -> str:
        return f"Based on your documents: {content}"

    @staticmethod
    def no_match(query: str) -> str:
        return (
            f'I couldn\'t find specific information about "{query}" in the uploaded documents. '
            "Please try rephrasing your question with different keywords."
        )


def format_follow_ups(follow_ups: List[str], limit: int = 3) -> str:
    """Render follow-up questions as a numbered block appended to an answer."""
    if not follow_ups:
        return ""
    return FOLLOW_UP_HEADER + "".join(f"{i}. {q}\n" for i, q in enumerate(follow_ups[:limit], 1))


def predefined_annotation(knowledge_base: str) -> str:
    return f"\n\n---\n*This answer is from the {knowledge_base}.*"
