#!env python
"""
Per-blank input and validation state.

Each blank has a value plus `touched` (the user has changed it) and `blurred`
(focus left it since the last change). Whether a blank shows as right or
wrong is derived from those, the blank's answer and the exercise-wide
`submitted` flag every time it is asked for; nothing derived is stored.

While the user is still typing a prefix of the correct answer and has not
left the field, no error is shown. Leaving the field, or typing something that
can no longer become the answer, shows it.
"""
from __future__ import annotations

import dataclasses
import logging
from typing import List, Sequence

from InlineBlanks.blanks import BlankSpec
from InlineBlanks.misc import normalize_answer

log = logging.getLogger(__name__)


@dataclasses.dataclass
class BlankRuntimeState:
  value: str = ""
  touched: bool = False
  blurred: bool = False
  hint_shown: bool = False


@dataclasses.dataclass(frozen=True)
class DerivedStatus:
  value: str
  is_correct: bool
  is_wrong: bool
  touched: bool
  show_validation: bool
  is_partial_match: bool = False


class BlankValidationStateMachine:

  def __init__(self, specs: Sequence[BlankSpec] = (), *, reset_clears_blurred: bool = False):
    self.reset_clears_blurred = reset_clears_blurred
    self.specs: List[BlankSpec] = []
    self.states: List[BlankRuntimeState] = []
    self.submitted = False
    self.answers_shown = False
    self.load(specs)

  def __len__(self):
    return len(self.specs)

  @property
  def answers(self) -> List[str]:
    return [spec.answer for spec in self.specs]

  def load(self, specs: Sequence[BlankSpec]) -> None:
    """Take the specs parsed from (possibly new) content; a new blank count starts over."""
    specs = list(specs)
    if len(specs) != len(self.states):
      log.debug(f"Blank count changed {len(self.states)} -> {len(specs)}; resetting state")
      self.states = [BlankRuntimeState() for _ in specs]
      self.submitted = False
      self.answers_shown = False
    self.specs = specs

  def _state(self, index: int):
    if 0 <= index < len(self.states):
      return self.states[index]
    log.warning(f"Ignoring event for unknown blank {index} (have {len(self.states)})")
    return None

  def set_value(self, index: int, value: str) -> None:
    state = self._state(index)
    if state is None:
      return
    state.value = value
    state.touched = True
    # A change after leaving the field goes back to neutral until the next blur
    state.blurred = False

  def mark_blurred(self, index: int) -> None:
    state = self._state(index)
    if state is not None:
      state.blurred = True

  def toggle_hint(self, index: int) -> None:
    state = self._state(index)
    if state is not None:
      state.hint_shown = not state.hint_shown

  def submit_all(self) -> None:
    self.submitted = True
    self.answers_shown = False

  def reveal_all(self) -> None:
    for spec, state in zip(self.specs, self.states):
      state.value = spec.answer
    self.submitted = True
    self.answers_shown = True

  def reset(self) -> None:
    # Hint toggles are kept, and so is `blurred` unless reset_clears_blurred is set
    self.submitted = False
    self.answers_shown = False
    for state in self.states:
      state.value = ""
      state.touched = False
      if self.reset_clears_blurred:
        state.blurred = False

  def status(self, index: int) -> DerivedStatus:
    spec = self.specs[index]
    state = self.states[index]
    value = normalize_answer(state.value)
    answer = normalize_answer(spec.answer)

    is_correct = value == answer
    is_partial_match = len(value) > 0 and answer.startswith(value)
    show_validation = self.submitted or (state.touched and value != "")
    is_wrong = show_validation and not is_correct and (
      self.submitted or not is_partial_match or state.blurred
    )
    return DerivedStatus(
      value=state.value,
      is_correct=is_correct,
      is_wrong=is_wrong,
      touched=state.touched,
      show_validation=show_validation,
      is_partial_match=is_partial_match,
    )

  @property
  def all_correct(self) -> bool:
    return all(
      normalize_answer(state.value) == normalize_answer(spec.answer)
      for spec, state in zip(self.specs, self.states)
    )
