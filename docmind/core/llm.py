"""LLM client utilities for LangChain integration."""

import asyncio
from collections.abc import Sequence
from typing import Any

from langchain_anthropic import ChatAnthropic
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import BaseMessage, HumanMessage
from langchain_openai import ChatOpenAI

from docmind.core.config import Settings


def get_chat_llm(settings: Settings) -> ChatOpenAI:
    """
    Chat-style model used for classification, Q&A and reasoning.

    Args:
        settings: Application settings

    Returns:
        ChatOpenAI instance configured with API key, model and deadline
    """
    return ChatOpenAI(
        api_key=settings.OPENAI_API_KEY,
        model=settings.CHAT_MODEL,
        temperature=settings.CHAT_TEMPERATURE,
        timeout=settings.LLM_TIMEOUT_SECONDS,
    )


def get_generative_llm(settings: Settings) -> ChatAnthropic:
    """
    Generative model used for long-form writing, reading and creative output.

    Args:
        settings: Application settings

    Returns:
        ChatAnthropic instance configured with API key, model and deadline
    """
    return ChatAnthropic(
        api_key=settings.ANTHROPIC_API_KEY,
        model=settings.GENERATIVE_MODEL,
        temperature=settings.GENERATIVE_TEMPERATURE,
        max_tokens=settings.GENERATIVE_MAX_TOKENS,
        timeout=settings.LLM_TIMEOUT_SECONDS,
    )


def message_text(response: Any) -> str:
    """Flatten a chat model response into plain text.

    Anthropic responses may carry a list of content blocks instead of a string.
    """
    content = getattr(response, "content", response)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(block.get("text", ""))
        return "".join(parts)
    return str(content)


async def invoke_chat(
    llm: BaseChatModel,
    messages: Sequence[BaseMessage],
    timeout: float,
) -> str:
    """
    Invoke a chat model with a bounded deadline and return its text.

    Raises:
        asyncio.TimeoutError: If the model does not answer within `timeout` seconds
        Exception: Whatever the provider raises
    """
    response = await asyncio.wait_for(llm.ainvoke(list(messages)), timeout=timeout)
    return message_text(response)


async def generate_text(llm: BaseChatModel, prompt: str, timeout: float) -> str:
    """Single-prompt completion on the generative model."""
    return await invoke_chat(llm, [HumanMessage(content=prompt)], timeout=timeout)
