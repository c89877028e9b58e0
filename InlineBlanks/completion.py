#!env python
from __future__ import annotations

import logging
from typing import Optional

from InlineBlanks.progress import ProgressStore

log = logging.getLogger(__name__)


class ExerciseCompletionBridge:
  """
  Reports an exercise as complete to the progress store, once.

  `evaluate` may be called on every render. The first time all blanks are
  correct (and an exercise id is known) the store is notified; after that the
  bridge stays notified for as long as the same exercise id is mounted, even
  if answers become wrong and then right again. Mounting a different id starts
  over from what the store already knows.
  """

  def __init__(self, store: ProgressStore):
    self.store = store
    self.exercise_id: Optional[str] = None
    self.context_key = ""
    self.notified = False

  @property
  def is_completed(self) -> bool:
    return self.notified

  def mount(self, exercise_id: Optional[str], context_key: str = "") -> None:
    self.context_key = context_key
    if exercise_id == self.exercise_id:
      return
    self.exercise_id = exercise_id
    self.notified = bool(exercise_id) and self.store.is_exercise_complete(exercise_id)

  def evaluate(self, all_correct: bool) -> bool:
    """Returns True when this call notified the store."""
    if not all_correct or self.notified or not self.exercise_id:
      return False
    self.store.mark_exercise_complete(self.exercise_id, self.context_key)
    self.notified = True
    log.info(f"Exercise {self.exercise_id} complete")
    return True
