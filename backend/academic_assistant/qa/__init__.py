"""Question answering: predefined answers, retrieval-backed synthesis and validation."""
from academic_assistant.qa.answer_synthesizer import AnswerSynthesizer
from academic_assistant.qa.assistant import AcademicAssistant
from academic_assistant.qa.predefined_qa import PredefinedAnswerMatcher
from academic_assistant.qa.validators import OutputValidator, QuestionValidator

__all__ = [
    "AcademicAssistant",
    "AnswerSynthesizer",
    "PredefinedAnswerMatcher",
    "OutputValidator",
    "QuestionValidator",
]
