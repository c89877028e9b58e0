#!env python
from __future__ import annotations

import enum
import hashlib
import logging

log = logging.getLogger(__name__)


class BlankMode(enum.Enum):
  """How a blank is filled in: free typing or a closed choice list."""
  TYPE = "type"
  PICKER = "picker"

  @classmethod
  def from_value(cls, value) -> BlankMode:
    if isinstance(value, BlankMode):
      return value
    try:
      return cls(str(value).strip().lower())
    except ValueError:
      valid = ", ".join(mode.value for mode in cls)
      raise ValueError(f"Unknown blank mode '{value}' (expected one of: {valid})") from None


def normalize_answer(value: str) -> str:
  return value.strip().lower()


def generate_stable_exercise_id(location: str, component: str, content: str) -> str:
  """
  Derive an identifier that stays the same for the same exercise content at the
  same location, so completion survives re-renders and restarts.
  """
  digest = hashlib.sha256(
    "\x1f".join([location or "", component, content]).encode("utf-8")
  ).hexdigest()
  return f"{component}-{digest[:16]}"
