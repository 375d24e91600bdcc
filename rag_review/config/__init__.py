from .ollama import ollama_config, OllamaConfig
from .runtime import runtime_config, RuntimeConfig
from .store import store_config, StoreConfig

__all__ = [
    "OllamaConfig",
    "RuntimeConfig",
    "StoreConfig",
    "ollama_config",
    "runtime_config",
    "store_config",
]
