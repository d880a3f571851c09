"""Chat payload construction shared by the OpenAI-compatible providers."""

from typing import Any, Dict, List, Sequence

SYSTEM_PROMPT = "Return ONLY valid JSON. No markdown."


def build_messages(instructions: str, visual_references: Sequence[str]) -> List[Dict[str, Any]]:
    """One text part followed by an image_url part per reference."""
    content: List[Dict[str, Any]] = [{"type": "text", "text": instructions}]
    for reference in visual_references:
        content.append({
            "type": "image_url",
            "image_url": {"url": reference}
        })

    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": content}
    ]


def response_text(response) -> str:
    """Text of the first choice, or an empty string when the service sent none."""
    choices = getattr(response, "choices", None) or []
    if not choices:
        return ""
    message = getattr(choices[0], "message", None)
    return getattr(message, "content", None) or ""
