"""Generation start schemas."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ChatMessage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    sender: str = "user"
    text: str = ""


class GenerateFromEmotionRequest(BaseModel):
    messages: list[ChatMessage]
    make_instrumental: bool = False


class GenerateFromEmotionResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    clip_ids: list[str] = Field(min_length=1)
    prompt: str
