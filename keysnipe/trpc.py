"""tRPC batch framing used by both the login and claim endpoints.

Batched calls are sent as an object keyed by "0", "1", ... and answered with
a JSON array in the same order; these helpers convert between that framing
and plain index-ordered lists.
"""

from typing import Any, Dict, List, Optional, Sequence

INVALID_RESPONSE = "Invalid Response"


def encode_batch(items: Sequence[Any]) -> Dict[str, Any]:
    """List -> tRPC batch body: {"0": {"json": item0}, "1": {"json": item1}, ...}"""
    return {str(index): {"json": item} for index, item in enumerate(items)}


def decode_batch(data: Any, size: int) -> List[Any]:
    """tRPC batch response -> list of exactly `size` entries, in request order.

    The API answers with a JSON array, but a map keyed by "0", "1", ... is
    accepted too. Missing indices come back as None so positions never shift;
    anything past the submitted batch is ignored.
    """
    if isinstance(data, list):
        entries = data[:size]
        return entries + [None] * (size - len(entries))
    if isinstance(data, dict):
        entries = [data.get(str(i)) for i in range(size)]
        if not any(str(i) in data for i in range(size)):
            raise ValueError("batch response has no indexed entries")
        return entries
    raise ValueError(f"unexpected batch response type: {type(data).__name__}")


def dig(data: Any, *path: str) -> Any:
    """Walk nested dicts, returning None as soon as a step is missing"""
    for step in path:
        if not isinstance(data, dict):
            return None
        data = data.get(step)
    return data


def error_message(entry: Any) -> Optional[str]:
    """Remote error message at error.json.message, if present"""
    message = dig(entry, "error", "json", "message")
    return None if message is None else str(message)
