#!env python
"""
Bracket syntax for inline blanks.

  [answer]                  free-text blank
  [answer|opt1|opt2]        blank with its own picker choices
  [answer|hint:text]        blank with a hint
  [answer|opt1|hint:text]   both

The answer is stored exactly as written; comparison later ignores case and
surrounding whitespace.
"""
from __future__ import annotations

import dataclasses
import logging
import re
from typing import Iterator, List, Optional, Tuple

log = logging.getLogger(__name__)

# Non-greedy, so "]" cannot appear inside an answer.  "." does not match a
# newline, so a blank never spans lines.
BLANK_PATTERN = re.compile(r"(\[.*?\])")
HINT_PREFIX = "hint:"


@dataclasses.dataclass(frozen=True)
class BlankSpec:
  index: int
  answer: str
  local_options: Tuple[str, ...] = ()
  hint: Optional[str] = None
  token: str = ""

  def choices(self, global_options=()) -> List[str]:
    return sorted(set(self.local_options) | set(global_options) | {self.answer})


def iter_segments(text: str) -> Iterator[Tuple[bool, str]]:
  """Yield (is_blank, part) for the literal text and bracket tokens of `text`, in order."""
  # re.split with a capturing group puts the matched tokens at the odd positions
  for position, part in enumerate(BLANK_PATTERN.split(text)):
    yield position % 2 == 1, part


def contains_blank(text: str) -> bool:
  return BLANK_PATTERN.search(text) is not None


def parse_blank_token(token: str, index: int) -> BlankSpec:
  items = token[1:-1].split("|")
  hint = None
  local_options = []
  for item in items[1:]:
    if item.startswith(HINT_PREFIX):
      hint = item[len(HINT_PREFIX):]
    else:
      local_options.append(item)
  return BlankSpec(
    index=index,
    answer=items[0],
    local_options=tuple(local_options),
    hint=hint,
    token=token,
  )


def parse_blanks(text: str) -> List[BlankSpec]:
  specs = []
  for is_blank, part in iter_segments(text):
    if is_blank:
      specs.append(parse_blank_token(part, len(specs)))
  log.debug(f"Parsed {len(specs)} blank(s)")
  return specs
