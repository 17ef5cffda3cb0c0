"""Natural-language command generation (Ollama-backed)."""

from rcon_bridge.nlp.generator import OllamaCommandGenerator

__all__ = ["OllamaCommandGenerator"]
