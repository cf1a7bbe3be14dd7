"""Question answering entry point."""
import asyncio
import time
from typing import Iterable, List, Optional

from academic_assistant.models.document import AnswerResult, Document, Source
from academic_assistant.qa.answer_synthesizer import AnswerSynthesizer
from academic_assistant.qa.predefined_qa import PredefinedAnswerMatcher
from academic_assistant.qa.templates import FallbackTemplate, format_follow_ups
from academic_assistant.qa.validators import OutputValidator, QuestionValidator
from academic_assistant.services.document_store import DocumentStore
from academic_assistant.services.faq_service import FAQTracker
from academic_assistant.services.retrieval_service import RetrievalEngine
from academic_assistant.utils.logger import logger
from academic_assistant.utils.metrics import QUESTION_LATENCY, QUESTIONS_ANSWERED

FALLBACK_EXCERPT_LENGTH = 120


class AcademicAssistant:
    """
    Answers questions about uploaded documents.

    Stages: predefined answers, then retrieval and synthesis under a time
    limit, then a simple keyword search, then a fixed message. ask() never
    raises for internal failures.
    """

    def __init__(
        self,
        document_store: DocumentStore,
        engine: RetrievalEngine,
        synthesizer: AnswerSynthesizer,
        faq_tracker: Optional[FAQTracker] = None,
        predefined: Optional[PredefinedAnswerMatcher] = None,
        question_validator: Optional[QuestionValidator] = None,
        output_validator: Optional[OutputValidator] = None,
        search_timeout_seconds: float = 5.0,
        append_follow_ups: bool = True,
    ):
        """
        Initialize assistant.

        Args:
            document_store: Source of documents when the caller passes none
            engine: Retrieval engine
            synthesizer: Answer synthesizer
            faq_tracker: Records every asked question, optional
            predefined: Canned answer matcher, None disables the pre-filter
            question_validator: Question validator
            output_validator: Output validator
            search_timeout_seconds: Time limit for retrieval and synthesis
            append_follow_ups: Append suggested follow-ups to answer text
        """
        self.document_store = document_store
        self.engine = engine
        self.synthesizer = synthesizer
        self.faq_tracker = faq_tracker
        self.predefined = predefined
        self.question_validator = question_validator or QuestionValidator()
        self.output_validator = output_validator or OutputValidator()
        self.search_timeout_seconds = search_timeout_seconds
        self.append_follow_ups = append_follow_ups

    async def ask(self, question: str, documents: Optional[Iterable[Document]] = None) -> AnswerResult:
        """
        Answer a question.

        Args:
            question: User's question
            documents: Documents to search, defaults to every stored document

        Returns:
            AnswerResult with answer text, confidence, sources and follow-ups

        Raises:
            EmptyQuestionError: If the question is empty
        """
        question = self.question_validator.validate(question)
        start_time = time.time()

        if self.faq_tracker is not None:
            try:
                self.faq_tracker.track(question)
            except Exception as e:
                logger.error(f"Failed to track question: {str(e)}", exc_info=True)

        result = self._predefined(question)
        if result is None:
            docs = list(documents) if documents is not None else self.document_store.list()
            result = await self._answer_from_documents(question, docs)

        validation = self.output_validator.validate_result(result)
        if not validation["is_valid"]:
            logger.warning(f"Output validation errors: {validation['errors']}")

        elapsed = time.time() - start_time
        QUESTION_LATENCY.observe(elapsed)
        QUESTIONS_ANSWERED.labels(source=result.source).inc()
        logger.info(
            "Question answered",
            extra={
                "answer_source": result.source,
                "confidence": result.confidence,
                "result_count": len(result.sources),
                "knowledge_base": result.knowledge_base,
                "processing_time_ms": elapsed * 1000,
            },
        )
        return result

    def _predefined(self, question: str) -> Optional[AnswerResult]:
        if self.predefined is None:
            return None
        match = self.predefined.find(question)
        if match is None:
            return None
        return AnswerResult(
            answer=match.annotated_answer,
            confidence=1.0,
            sources=[Source(document=match.knowledge_base.document_name, page=1, excerpt=match.source_excerpt)],
            source="predefined",
            knowledge_base=match.knowledge_base.name,
        )

    async def _answer_from_documents(self, question: str, documents: List[Document]) -> AnswerResult:
        if not documents:
            return AnswerResult(answer=FallbackTemplate.NO_DOCUMENTS, confidence=0.0, source="fallback")

        try:
            result = await asyncio.wait_for(
                asyncio.to_thread(self._retrieve_and_synthesize, question, documents),
                timeout=self.search_timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.error(f"Answering timed out after {self.search_timeout_seconds} seconds")
            return AnswerResult(answer=FallbackTemplate.no_match(question), confidence=0.0, source="error")
        except Exception as e:
            logger.error(f"Retrieval failed, using simple search: {str(e)}", exc_info=True)
            return self._fallback(question, documents)

        if self.append_follow_ups and result.sources:
            result.answer += format_follow_ups(result.follow_ups)
        return result

    def _retrieve_and_synthesize(self, question: str, documents: List[Document]) -> AnswerResult:
        ranked = self.engine.search(question, documents)
        return self.synthesizer.synthesize(question, ranked, documents)

    def _fallback(self, question: str, documents: List[Document]) -> AnswerResult:
        try:
            ranked = self.engine.simple_search(question, documents)
            if not ranked:
                return AnswerResult(answer=FallbackTemplate.no_match(question), confidence=0.0, source="fallback")
            sources = []
            for result in ranked[:3]:
                content = result.chunk.content
                excerpt = (
                    content[:FALLBACK_EXCERPT_LENGTH] + "..."
                    if len(content) > FALLBACK_EXCERPT_LENGTH
                    else content
                )
                sources.append(Source(document=result.document.name, page=result.chunk.page, excerpt=excerpt))
            return AnswerResult(
                answer=FallbackTemplate.build(ranked[0].chunk.content),
                confidence=0.0,
                sources=sources,
                source="fallback",
            )
        except Exception as e:
            logger.error(f"Simple search failed: {str(e)}", exc_info=True)
            return AnswerResult(answer=FallbackTemplate.no_match(question), confidence=0.0, source="error")
