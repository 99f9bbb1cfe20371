"""Session title derivation, locally or via the selected model."""

import re

from ollama_chat.services.generation_controller import GenerationController

TITLE_PROMPT_TEMPLATE = (
    "Generate a concise and informative title (at most 10 words) summarizing "
    "the prompt. Respond with only the title as plain text. Do not include any "
    "explanations, formatting, or additional content. "
    "The prompt to summarize is: ```{prompt}```"
)

_THINK_BLOCK = re.compile(r"^\s*<think>.*?</think>\s*", re.DOTALL)
_WHITESPACE = re.compile(r"\s+")


def derive_title(message: str, max_length: int = 40) -> str:
    """Collapse whitespace and truncate the message into a title."""
    title = _WHITESPACE.sub(" ", message).strip()
    if len(title) <= max_length:
        return title
    return title[: max_length - 3].rstrip() + "..."


def clean_model_title(raw: str, max_length: int = 80) -> str:
    """Strip reasoning blocks, quotes and markdown emphasis from a model title."""
    title = _THINK_BLOCK.sub("", raw)
    title = title.strip().strip("\"'*").strip()
    return derive_title(title, max_length=max_length)


class TitleService:
    """Generates concise session titles from the first user message."""

    def __init__(self, controller: GenerationController) -> None:
        self._controller = controller

    async def generate_title(self, message: str, model: str) -> str:
        """Ask the model to summarise a user message into a short title."""
        raw = await self._controller.suggest_title(
            TITLE_PROMPT_TEMPLATE.format(prompt=message), model
        )
        return clean_model_title(raw)
