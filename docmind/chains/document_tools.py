"""One-shot document tools: direct chat and single-feature text transforms.

These bypass the orchestration graph and memory entirely; each call is a
single chat-model completion.
"""

from collections.abc import Sequence

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from docmind.core.llm import invoke_chat
from docmind.core.schemas_assistant import ChatMessage

DOCUMENT_ASSISTANT_PERSONA = (
    "You are DocMind, a helpful document assistant. Help users with document-related "
    "tasks including writing, editing, summarizing, formatting, and analyzing documents. "
    "Keep responses focused and practical."
)

TEXT_TOOL_SYSTEM_PROMPTS: dict[str, str] = {
    "summarize": "You are a helpful assistant that summarizes text concisely while preserving key information.",
    "autocorrect": "You are a grammar correction assistant. Return only the corrected text without additional commentary.",
    "suggest": "You are a writing improvement assistant. Provide specific suggestions in a clear, numbered list format.",
    "generate": "You are a content generation assistant. Create well-structured, coherent content based on the user's input.",
}

TEXT_TOOL_PROMPTS: dict[str, str] = {
    "summarize": "Please summarize the following text concisely while preserving the main points and essential information: {text}",
    "autocorrect": "Correct any grammar, spelling, and punctuation errors in the following text. Maintain the original intent and improve readability: {text}",
    "suggest": "Provide specific, actionable suggestions to improve the following text. Format as a numbered list: {text}",
    "generate": "Based on the following input, generate enhanced content that follows best practices for this type of document: {text}",
}

FALLBACK_SYSTEM_PROMPT = "You are a helpful assistant."
EMPTY_CHAT_REPLY = "Sorry, I couldn't generate a response."
EMPTY_TOOL_REPLY = "No response generated."


def _to_message(message: ChatMessage) -> BaseMessage:
    if message.role == "user":
        return HumanMessage(content=message.content)
    if message.role == "assistant":
        return AIMessage(content=message.content)
    return SystemMessage(content=message.content)


def document_system_prompt(file_content: str | None) -> str:
    if not file_content:
        return DOCUMENT_ASSISTANT_PERSONA
    return (
        "You are DocMind, a helpful document assistant. The user has provided a file with "
        f"the following content: {file_content}. Help users with document-related tasks "
        "including writing, editing, summarizing, formatting, and analyzing documents. "
        "Keep responses focused and practical."
    )


async def chat_with_document(
    messages: Sequence[ChatMessage],
    chat_llm: BaseChatModel,
    file_content: str | None = None,
    timeout: float = 60.0,
) -> str:
    """Answer the latest message under the document-assistant persona."""
    prompt = [
        SystemMessage(content=document_system_prompt(file_content)),
        *(_to_message(m) for m in messages),
    ]
    reply = await invoke_chat(chat_llm, prompt, timeout=timeout)
    return reply or EMPTY_CHAT_REPLY


async def run_text_tool(
    feature: str,
    text: str,
    chat_llm: BaseChatModel,
    timeout: float = 60.0,
) -> str:
    """Apply one text feature (summarize, autocorrect, suggest, generate).

    Unknown features get a generic assistant prompt over the raw text.
    """
    system_prompt = TEXT_TOOL_SYSTEM_PROMPTS.get(feature, FALLBACK_SYSTEM_PROMPT)
    template = TEXT_TOOL_PROMPTS.get(feature)
    user_prompt = template.format(text=text) if template else text

    reply = await invoke_chat(
        chat_llm,
        [SystemMessage(content=system_prompt), HumanMessage(content=user_prompt)],
        timeout=timeout,
    )
    return reply or EMPTY_TOOL_REPLY
