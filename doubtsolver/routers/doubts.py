"""
Doubt Solver: Doubt Router
The main loop: conversation -> LLM -> word-list formatting -> history + weak topic.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from doubtsolver.config import HISTORY_LIMIT, VariantProfile
from doubtsolver.dependencies import get_profile, get_store
from doubtsolver.errors import ValidationError, NotFoundError, PersistenceError
from doubtsolver.schemas import AskDoubtRequest, Answer, ChatMessage, DoubtOut
from doubtsolver.store import Store
from doubtsolver.tutor.formatter import format_answer
from doubtsolver.tutor.llm import LLMProvider, build_messages, get_llm
from doubtsolver.tutor.weak_topics import WeakTopicScorer

logger = logging.getLogger(__name__)
router = APIRouter(tags=["doubts"])


def triggering_message(messages: list[ChatMessage]) -> str:
    """Content of the most recent user message ("" if there is none)."""
    for message in reversed(messages):
        if message.role == "user":
            return message.content or ""
    return ""


def _save_doubt(store: Store, question: str, answer: Answer, image_url: Optional[str]) -> None:
    """History + weak-topic bump. A storage failure never costs the student the answer."""
    try:
        store.add_doubt(
            question_text=question or None,
            answer=answer.answer,
            subject=answer.subject,
            topic=answer.topic,
            steps=answer.steps,
            image_url=image_url,
        )
        WeakTopicScorer(store).record_occurrence(answer.topic)
    except PersistenceError:
        logger.exception("Doubt answered but could not be saved")


# ─── Ask Doubt ───────────────────────────────────────────────────────────────

@router.post("/ask-doubt", response_model=Answer)
def ask_doubt(
    req: AskDoubtRequest,
    profile: VariantProfile = Depends(get_profile),
    store: Store = Depends(get_store),
    llm: LLMProvider = Depends(get_llm),
):
    if not req.messages:
        raise ValidationError("Messages required")

    question = triggering_message(req.messages)
    conversation = [{"role": m.role, "content": m.content or ""} for m in req.messages]
    logger.info(f"Doubt received: {len(conversation)} messages, last={question[:60]!r}")

    result = llm.generate(
        build_messages(profile.system_prompt, conversation),
        model=profile.model,
        temperature=profile.temperature,
        max_tokens=profile.max_tokens,
    )

    text = result.text
    if profile.word_list_format:
        text = format_answer(text, question)

    answer = Answer(answer=text)
    _save_doubt(store, question, answer, req.image_url)
    return answer


# ─── History ─────────────────────────────────────────────────────────────────

@router.get("/history", response_model=list[DoubtOut])
def list_history(
    limit: int = Query(HISTORY_LIMIT, ge=1, le=500),
    store: Store = Depends(get_store),
):
    return [DoubtOut.model_validate(d) for d in store.list_doubts(limit)]


@router.get("/history/{doubt_id}", response_model=DoubtOut)
def get_history_item(doubt_id: str, store: Store = Depends(get_store)):
    doubt = store.get_doubt(doubt_id)
    if doubt is None:
        raise NotFoundError("Doubt not found")
    return DoubtOut.model_validate(doubt)
