"""Ask endpoint for question answering."""
from fastapi import APIRouter, Depends, HTTPException

from academic_assistant.api.schemas import AskRequest, AskResponse
from academic_assistant.exceptions import EmptyQuestionError
from academic_assistant.qa.assistant import AcademicAssistant

router = APIRouter()


def get_assistant() -> AcademicAssistant:
    """Get assistant from main app."""
    from academic_assistant.main import assistant
    if assistant is None:
        raise HTTPException(status_code=503, detail="Assistant not initialized")
    return assistant


@router.post("/ask", response_model=AskResponse)
async def ask_question(
    request: AskRequest,
    assistant: AcademicAssistant = Depends(get_assistant),
):
    """
    Answer a question about uploaded documents.

    Predefined answers are checked first, then all ready documents are
    searched. Internal failures degrade to a fallback answer.

    Args:
        request: AskRequest with question
        assistant: Academic assistant instance

    Returns:
        AskResponse with answer, sources, confidence and follow-ups
    """
    try:
        result = await assistant.ask(request.question)
    except EmptyQuestionError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return AskResponse.from_result(result)
