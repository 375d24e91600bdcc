"""Chat model port."""

from typing import Dict, List, Optional, Protocol


class ChatModel(Protocol):
    """Port for chat completions."""

    default_model: str

    async def chat(
        self,
        messages: List[Dict[str, str]],
        model: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> str: ...
