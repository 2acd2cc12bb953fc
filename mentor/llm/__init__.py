"""
Generative model access.

Provides the OllamaClient used for synthesis and the TextGenerator protocol
any replacement client must satisfy.
"""

from .ollama_client import ModelResponse, OllamaClient, TextGenerator

__all__ = ["ModelResponse", "OllamaClient", "TextGenerator"]
