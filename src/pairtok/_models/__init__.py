"""Tokenizer and vocabulary implementations."""

from .tokenizer import Tokenizer
from .vocabulary import Vocabulary


__all__ = ["Tokenizer", "Vocabulary"]
