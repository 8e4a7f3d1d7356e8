# Parsing package initialization
# Tokenizer and command argument parsers

from .add_parser import parse_add_arguments
from .tokenizer import ArgumentMultimap, tokenize

__all__ = [
    "ArgumentMultimap",
    "parse_add_arguments",
    "tokenize",
]
