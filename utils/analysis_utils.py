import json
import re
from typing import Any, Optional

from exceptions import UpstreamError
from logger_manager import log_error

_FENCE_PATTERN = re.compile(r"^```[a-zA-Z]*\s*|\s*```$")


def strip_code_fences(text: str) -> str:
    """Remove a surrounding ```json ... ``` fence if the model added one."""
    return _FENCE_PATTERN.sub("", text.strip())


def response_text(content: Any) -> Optional[str]:
    """
    Flatten a chat model reply into text.

    Gemini replies are usually a plain string, but multi-part replies come
    back as a list of strings or {"type": "text", "text": ...} blocks.
    """
    if content is None:
        return None
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type") == "text":
                parts.append(part.get("text", ""))
        return "".join(parts)
    return str(content)


def parse_model_json(raw: Optional[str]) -> Any:
    """Decode the JSON body of a model reply, raising UpstreamError if unusable."""
    if raw is None or not raw.strip():
        raise UpstreamError("Empty response from Gemini AI")

    text = strip_code_fences(raw)
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    # fall back to the outermost object embedded in prose
    json_match = re.search(r"({.*})", text, re.DOTALL)
    if json_match:
        try:
            return json.loads(json_match.group(0))
        except json.JSONDecodeError as e:
            log_error(f"JSON parsing error: {e}")

    log_error(f"Could not find JSON in Gemini response: {raw[:300]}")
    raise UpstreamError("Gemini AI returned a response that is not valid JSON")
