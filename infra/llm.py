from typing import Dict, List, Optional

import openai
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from .config import Ollama, Timeouts
from .exceptions import GenerationError, ServiceConnectionError
from .logger import get_logger

log = get_logger("infra.llm")

OLLAMA_HINT = "Run: ollama serve"

_ROLE_TO_MESSAGE = {
    "system": SystemMessage,
    "user": HumanMessage,
    "assistant": AIMessage,
}


class LLMClient:
    """
    Chat client for Ollama, talking to its OpenAI-compatible endpoint
    through ChatOpenAI.
    """

    def __init__(
            self,
            host: str,
            default_model: str,
            temperature: float = 0.3,
            timeout: float = Timeouts.GENERATION,
    ) -> None:
        self.base_url = host.rstrip("/") + Ollama.OPENAI_BASE
        self.default_model = default_model
        self.temperature = temperature
        self.timeout = timeout

    def _model(self, model: Optional[str], temperature: Optional[float]) -> ChatOpenAI:
        return ChatOpenAI(
            base_url=self.base_url,
            # Ollama ignores the key but the client insists on one
            api_key="ollama",
            model=model or self.default_model,
            temperature=self.temperature if temperature is None else temperature,
            timeout=self.timeout,
            max_retries=0,
        )

    @staticmethod
    def to_messages(messages: List[Dict[str, str]]) -> List[BaseMessage]:
        converted = []
        for message in messages:
            role = str(message["role"])
            if role not in _ROLE_TO_MESSAGE:
                raise ValueError(f"Unknown chat role: {role}")
            converted.append(_ROLE_TO_MESSAGE[role](content=message["content"]))
        return converted

    async def chat(
            self,
            messages: List[Dict[str, str]],
            model: Optional[str] = None,
            temperature: Optional[float] = None,
    ) -> str:
        """
        Send a chat completion request and return the reply text.
        """
        chat_model = self._model(model, temperature)
        log.info("llm.chat.start", model=chat_model.model_name, messages=len(messages))

        try:
            response = await chat_model.ainvoke(self.to_messages(messages))
        except openai.APITimeoutError as e:
            log.error("llm.chat.timeout", timeout=self.timeout)
            raise ServiceConnectionError("Ollama", f"timed out after {self.timeout}s", OLLAMA_HINT) from e
        except openai.APIConnectionError as e:
            log.error("llm.chat.unreachable", base_url=self.base_url)
            raise ServiceConnectionError("Ollama", "connection failed", OLLAMA_HINT) from e
        except openai.APIStatusError as e:
            log.error("llm.chat.failed", status=e.status_code, error=str(e))
            raise GenerationError(f"Ollama chat error: HTTP {e.status_code}") from e

        log.info("llm.chat.complete", chars=len(str(response.content)))
        return str(response.content)
