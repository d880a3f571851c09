"""
Best-effort recovery of a single JSON object from free-form model output.

Vision models asked for "JSON only" still wrap the object in code fences, prefix
it with a sentence, or trail it with commentary. The extractor runs an ordered
list of strategies and returns the first mapping any of them decodes. Every
strategy is total: it returns None instead of raising.
"""

import ast
import json
import re
from typing import Any, Dict, Optional, Sequence

from loguru import logger

_DECODE_ERRORS = (ValueError, SyntaxError, TypeError, MemoryError, RecursionError)


def decode_mapping(text: str) -> Optional[Dict[str, Any]]:
    """Decode text as a JSON object (control characters allowed), then as a Python literal."""
    text = text.strip()
    if not text:
        return None
    try:
        data = json.loads(text, strict=False)
    except _DECODE_ERRORS:
        try:
            data = ast.literal_eval(text)
        except _DECODE_ERRORS:
            return None
    if not isinstance(data, dict) or not all(isinstance(key, str) for key in data):
        return None
    try:
        # Python literals may hold sets, bytes or tuples that have no JSON form
        return json.loads(json.dumps(data))
    except _DECODE_ERRORS:
        return None


class ExtractionStrategy:
    name = "base"

    def __call__(self, raw_text: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError


class FencedBlockStrategy(ExtractionStrategy):
    """Inner content of the first ``` fenced block."""

    name = "fenced_block"
    pattern = re.compile(r"```[A-Za-z0-9_-]*[ \t]*\r?\n?(.*?)```", re.DOTALL)

    def __call__(self, raw_text: str) -> Optional[Dict[str, Any]]:
        match = self.pattern.search(raw_text)
        if not match:
            return None
        return decode_mapping(match.group(1))


class DirectDecodeStrategy(ExtractionStrategy):
    name = "direct"

    def __call__(self, raw_text: str) -> Optional[Dict[str, Any]]:
        return decode_mapping(raw_text)


class OuterBracesStrategy(ExtractionStrategy):
    """Largest span from the first '{' to the last '}'."""

    name = "outer_braces"

    def __call__(self, raw_text: str) -> Optional[Dict[str, Any]]:
        start = raw_text.find("{")
        end = raw_text.rfind("}")
        if start == -1 or end <= start:
            return None
        return decode_mapping(raw_text[start:end + 1])


DEFAULT_STRATEGIES = (FencedBlockStrategy(), DirectDecodeStrategy(), OuterBracesStrategy())


class ResilientRecordExtractor:
    """Turns text that should hold one JSON object into a mapping, never raising."""

    def __init__(self, strategies: Sequence[ExtractionStrategy] = DEFAULT_STRATEGIES):
        self.strategies = tuple(strategies)

    def extract(self, raw_text: Optional[str]) -> Dict[str, Any]:
        if not isinstance(raw_text, str) or not raw_text.strip():
            logger.debug("Empty model output, nothing to extract")
            return {}

        for strategy in self.strategies:
            result = strategy(raw_text)
            if result is not None:
                logger.debug(f"Extracted record with strategy '{strategy.name}'")
                return result
            logger.debug(f"Extraction strategy '{strategy.name}' found no object")

        logger.warning(f"Could not extract a JSON object from model output ({len(raw_text)} chars)")
        return {}


default_extractor = ResilientRecordExtractor()


def extract_record(raw_text: Optional[str]) -> Dict[str, Any]:
    return default_extractor.extract(raw_text)
