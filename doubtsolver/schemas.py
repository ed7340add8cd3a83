"""
Doubt Solver: Request/Response Schemas
Pydantic models for the HTTP surface. Wire names are camelCase
(followUpQuestion, taskType, isCompleted, ...), Python names are snake_case.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ─── Ask Doubt ───────────────────────────────────────────────────────────────

class ChatMessage(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: Optional[str] = ""


class AskDoubtRequest(BaseModel):
    messages: Optional[list[ChatMessage]] = None
    image_url: Optional[str] = Field(
        None, validation_alias=AliasChoices("image_url", "imageUrl")
    )


class Answer(CamelModel):
    subject: str = "General"
    topic: str = "General"
    answer: str
    steps: list[str] = Field(default_factory=list)
    follow_up_question: str = ""


# ─── History ─────────────────────────────────────────────────────────────────

class DoubtOut(CamelModel):
    id: str
    question_text: Optional[str] = None
    image_url: Optional[str] = None
    answer: str
    steps: list[str] = Field(default_factory=list)
    subject: str
    topic: str
    timestamp: datetime


# ─── Daily Tasks / Weak Topics ───────────────────────────────────────────────

class TaskOut(CamelModel):
    id: str
    date: str
    task_type: Literal["practice", "revision", "concept"]
    topic: str
    question_text: str
    is_completed: bool = False


class CompleteTaskRequest(BaseModel):
    task_id: Optional[str] = Field(
        None, validation_alias=AliasChoices("taskId", "task_id")
    )
    completed: bool = True


class WeakTopicOut(CamelModel):
    topic: str
    score: int
    last_updated: datetime


# ─── Uploads ─────────────────────────────────────────────────────────────────

class UploadOut(CamelModel):
    image_url: str
