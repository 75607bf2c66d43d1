"""
Core types for tokenization.
"""

from collections.abc import Mapping

from typing_extensions import TypeAliasType

Token = TypeAliasType("Token", int)
TokenBytes = TypeAliasType("TokenBytes", bytes)
TokenPair = TypeAliasType("TokenPair", tuple[Token, Token])
Encoding = TypeAliasType("Encoding", dict[TokenPair, Token])
Ranks = TypeAliasType("Ranks", Mapping[TokenBytes, Token])
EncoderTable = TypeAliasType("EncoderTable", tuple[TokenBytes, ...])
