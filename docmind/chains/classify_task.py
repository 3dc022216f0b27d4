"""Task classification: chat model first, keyword rules as the fallback."""

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage

from docmind.core.llm import invoke_chat
from docmind.core.logging import get_logger
from docmind.core.schemas_assistant import TaskCategory

logger = get_logger(__name__)

VALID_CATEGORIES = {category.value: category for category in TaskCategory}

CLASSIFIER_SYSTEM_PROMPT = (
    "You are a task classification expert. Respond with only the category name."
)

CLASSIFIER_PROMPT_TEMPLATE = """{context}Classify this user input into one of these categories:
- writing: for content creation, writing, generating text
- reading: for document analysis, reading comprehension
- qa: for questions and answers, explanations
- analysis: for data analysis, summarization, extraction
- reasoning: for logical reasoning, problem solving
- creative: for creative writing, storytelling, imagination

Input: "{input}"

Respond with only the category name:"""

# Checked in order; first family with a hit wins
WRITING_KEYWORDS = ("write", "create", "compose")
ANALYSIS_KEYWORDS = ("analyze", "summarize")
REASONING_KEYWORDS = ("think", "reason", "logic")
CREATIVE_KEYWORDS = ("creative", "imagine", "story")


def _mentions(text: str, keywords: tuple[str, ...]) -> bool:
    return any(keyword in text for keyword in keywords)


def classify_by_keywords(user_input: str, has_files: bool) -> TaskCategory:
    """Deterministic keyword classification."""
    text = user_input.lower()

    if _mentions(text, WRITING_KEYWORDS):
        return TaskCategory.WRITING
    if has_files:
        if _mentions(text, ANALYSIS_KEYWORDS):
            return TaskCategory.ANALYSIS
        return TaskCategory.READING
    if _mentions(text, REASONING_KEYWORDS):
        return TaskCategory.REASONING
    if _mentions(text, CREATIVE_KEYWORDS):
        return TaskCategory.CREATIVE
    return TaskCategory.QA


def parse_category(reply: str) -> TaskCategory | None:
    """Accept a model reply only if it is exactly one category token."""
    return VALID_CATEGORIES.get(reply.strip().lower())


async def classify_with_model(
    user_input: str,
    chat_llm: BaseChatModel,
    memory_context: str = "",
    timeout: float = 60.0,
) -> TaskCategory | None:
    """Ask the chat model for a category. Returns None on any failure."""
    context = f"Context: {memory_context}\n\n" if memory_context else ""
    messages = [
        SystemMessage(content=CLASSIFIER_SYSTEM_PROMPT),
        HumanMessage(content=CLASSIFIER_PROMPT_TEMPLATE.format(context=context, input=user_input)),
    ]

    try:
        reply = await invoke_chat(chat_llm, messages, timeout=timeout)
    except Exception as e:
        logger.warning(f"Classification error: {e}")
        return None

    category = parse_category(reply)
    if category is None:
        logger.info(f"Classifier reply not a category: {reply[:50]!r}")
    return category


async def classify_task(
    user_input: str,
    has_files: bool,
    chat_llm: BaseChatModel | None = None,
    memory_context: str = "",
    use_model: bool = True,
    timeout: float = 60.0,
) -> TaskCategory:
    """
    Classify a request into exactly one TaskCategory.

    Args:
        user_input: Raw user request
        has_files: Whether files were attached
        chat_llm: Chat model for tier-1 classification (None skips it)
        memory_context: Rendered memory block to prefix the prompt with
        use_model: Set False to go straight to keyword rules
        timeout: Deadline for the model call

    Returns:
        The model's category when valid, otherwise the keyword category
    """
    if use_model and chat_llm is not None:
        category = await classify_with_model(user_input, chat_llm, memory_context, timeout)
        if category is not None:
            return category

    return classify_by_keywords(user_input, has_files)
