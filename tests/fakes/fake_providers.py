"""Deterministic in-process stand-ins for the embedding and completion providers."""

import re
import zlib
from typing import Any, Callable

from langchain_core.messages import AIMessage, BaseMessage


class FakeEmbedder:
    """Bag-of-words embedder: each word is hashed into one of `dimension` buckets.

    Identical texts get identical vectors; texts sharing no words are
    orthogonal. `vectors` pins exact vectors for specific texts.
    """

    def __init__(
        self,
        dimension: int = 64,
        vectors: dict[str, list[float]] | None = None,
        error: Exception | None = None,
    ):
        self.dimension = dimension
        self.vectors = vectors or {}
        self.error = error
        self.calls: list[str] = []

    def vector_for(self, text: str) -> list[float]:
        if text in self.vectors:
            return list(self.vectors[text])
        vector = [0.0] * self.dimension
        for word in re.findall(r"[a-z0-9]+", text.lower()):
            vector[zlib.crc32(word.encode()) % self.dimension] += 1.0
        return vector

    async def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        if self.error:
            raise self.error
        return self.vector_for(text)


class FakeChatModel:
    """Scripted chat model.

    Replies are consumed in order (the last one repeats), or produced by a
    callable given the message list. Every call's messages are recorded.
    """

    def __init__(
        self,
        replies: list[str] | None = None,
        responder: Callable[[list[BaseMessage]], str] | None = None,
        error: Exception | None = None,
    ):
        self.replies = list(replies or ["ok"])
        self.responder = responder
        self.error = error
        self.calls: list[list[BaseMessage]] = []

    async def ainvoke(self, messages: list[BaseMessage], **kwargs: Any) -> AIMessage:
        self.calls.append(list(messages))
        if self.error:
            raise self.error
        if self.responder:
            return AIMessage(content=self.responder(messages))
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        return AIMessage(content=reply)

    @property
    def prompts(self) -> list[str]:
        """Concatenated text of each recorded call."""
        return ["\n".join(str(m.content) for m in call) for call in self.calls]
