"""pairtok: byte-pair-encoding subword tokenizer."""

from ._models.tokenizer import Tokenizer
from ._models.vocabulary import Vocabulary
from ._bpe import merge_boundaries, pair_encode, pair_split
from ._progress import disable_progress, enable_progress
from .errors import ConfigurationError, PairTokError, PatternError, VocabularyError
from .factory import get_pattern, get_tokenizer, list_patterns
from .pattern import TokenPattern

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pairtok")
except PackageNotFoundError:
    __version__ = "dev"

__all__ = [
    "Tokenizer",
    "Vocabulary",
    "TokenPattern",
    "PairTokError",
    "ConfigurationError",
    "PatternError",
    "VocabularyError",
    "merge_boundaries",
    "pair_encode",
    "pair_split",
    "get_tokenizer",
    "get_pattern",
    "list_patterns",
    "enable_progress",
    "disable_progress",
]
