from __future__ import annotations
import json
import re
from typing import Any, Dict, Optional

from .exceptions import ModelOutputError


_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)


def extract_json(raw: Optional[str]) -> str:
	"""Best-effort slice of the JSON object inside model output.

	Removes markdown fences, then keeps everything from the first ``{`` to the
	last ``}``. Returns ``"{}"`` when there is no such pair. Never raises.
	"""
	if not raw:
		return "{}"
	cleaned = _FENCE.sub("", raw)
	first = cleaned.find("{")
	last = cleaned.rfind("}")
	if first == -1 or last == -1 or last < first:
		return "{}"
	return cleaned[first : last + 1].strip()


def parse_json_object(raw: Optional[str]) -> Dict[str, Any]:
	text = extract_json(raw)
	try:
		data = json.loads(text)
	except json.JSONDecodeError as err:
		raise ModelOutputError(f"Model returned unparseable JSON: {err}") from err
	if not isinstance(data, dict):
		raise ModelOutputError("Model returned JSON that is not an object")
	return data
