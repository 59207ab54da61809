import logging
from typing import Iterable, List, Optional

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage
from langchain_core.prompts import ChatPromptTemplate, MessagesPlaceholder
from langchain_openai import ChatOpenAI

from ..config import Settings, load_settings, DEFAULT_CHAT_PROMPT
from ..schemas import ChatTurn
from ..utils import retry_async

log = logging.getLogger(__name__)

MAX_CONTEXT_TURNS = 20


def build_history(turns: Iterable[ChatTurn]) -> List[BaseMessage]:
    history: List[BaseMessage] = []
    for turn in turns:
        if not turn.content:
            continue
        if turn.role == "user":
            history.append(HumanMessage(content=turn.content))
        elif turn.role == "assistant":
            history.append(AIMessage(content=turn.content))
    return history[-MAX_CONTEXT_TURNS:]


def build_chain(settings: Settings):
    if not settings.openai_api_key:
        raise RuntimeError("OPENAI_API_KEY not configured")
    prompts = settings.prompts or {}
    system_text = prompts.get("system", {}).get("chat") or DEFAULT_CHAT_PROMPT
    prompt = ChatPromptTemplate.from_messages(
        [
            ("system", system_text),
            MessagesPlaceholder(variable_name="history"),
            ("human", "{input}"),
        ]
    )
    llm = ChatOpenAI(
        model=settings.openai_model,
        temperature=0.7,
        max_tokens=1024,
        api_key=settings.openai_api_key,
        base_url=settings.openai_base_url,
        max_retries=0,
    )
    return prompt | llm


async def chat_reply(
    message: str, context: Iterable[ChatTurn] = (), *, settings: Optional[Settings] = None
) -> str:
    settings = settings or load_settings()
    history = build_history(context)
    try:
        chain = build_chain(settings)
        result = await retry_async(
            lambda: chain.ainvoke({"input": message, "history": history}),
            attempts=settings.retry_attempts,
            base_delay=settings.retry_base_delay,
            max_delay=settings.retry_max_delay,
            label="chat completion",
        )
    except Exception:
        log.exception("chat: falling back to canned response")
        return fallback_response(message)
    text = getattr(result, "content", result)
    return str(text).strip() or fallback_response(message)


def fallback_response(message: str) -> str:
    text = message.lower()
    if "template" in text:
        return (
            "I offer several website templates including landing pages, business sites, and portfolios. "
            "Each template can be customized with your content and branding. "
            "What kind of website are you looking to create?"
        )
    if "component" in text:
        return (
            "Generated sites are assembled from headers, hero sections, feature grids, testimonials, "
            "and contact forms. Is there a specific section you're interested in?"
        )
    if "how" in text and any(word in text for word in ("create", "make", "generate")):
        return (
            "To create a website with Brix.AI, describe what you want in the prompt field and click "
            "'Generate'. For example: 'Create a professional website for a marketing agency with a "
            "modern design, a testimonials section, and a contact form.'"
        )
    return (
        "I'm here to help you create websites with Brix.AI. You can generate complete, customized "
        "websites by describing what you want in the prompt field. Is there something specific "
        "you'd like to know?"
    )
