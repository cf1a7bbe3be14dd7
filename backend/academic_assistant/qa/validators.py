"""Validation logic for questions and answers."""
import re
from typing import Dict, List

from academic_assistant.exceptions import EmptyQuestionError
from academic_assistant.models.document import AnswerResult

CONTROL_CHARACTERS = re.compile(r"[\x00-\x08\x0B-\x0C\x0E-\x1F\x7F]")


class QuestionValidator:
    """Normalizes questions and rejects empty ones."""

    def validate(self, question: str) -> str:
        """
        Clean a question.

        Args:
            question: Raw question

        Returns:
            Question without control characters or surrounding whitespace

        Raises:
            EmptyQuestionError: If nothing is left after cleaning
        """
        cleaned = CONTROL_CHARACTERS.sub("", question or "").strip()
        if not cleaned:
            raise EmptyQuestionError("Question cannot be empty")
        return cleaned


class OutputValidator:
    """Validates answer structure before it is returned."""

    def validate_result(self, result: AnswerResult) -> Dict:
        """
        Validate answer structure.

        Args:
            result: Answer to check

        Returns:
            Dictionary with is_valid, errors
        """
        errors: List[str] = []

        if not isinstance(result.answer, str) or not result.answer.strip():
            errors.append("Answer must be a non-empty string")
        if not 0.0 <= result.confidence <= 1.0:
            errors.append(f"Confidence {result.confidence} outside [0, 1]")
        for source in result.sources:
            if source.page < 1:
                errors.append(f"Invalid page number {source.page} for {source.document}")

        return {"is_valid": len(errors) == 0, "errors": errors}
