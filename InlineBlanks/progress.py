#!env python
from __future__ import annotations

import abc
import logging
import os
from datetime import datetime, timezone
from typing import Dict

import yaml

log = logging.getLogger(__name__)


class ProgressStore(abc.ABC):
  """Where finished exercises are recorded, keyed by stable exercise id."""

  @abc.abstractmethod
  def is_exercise_complete(self, exercise_id: str) -> bool:
    pass

  @abc.abstractmethod
  def mark_exercise_complete(self, exercise_id: str, context_key: str) -> None:
    pass


class InMemoryProgressStore(ProgressStore):

  def __init__(self):
    self.completed: Dict[str, str] = {}

  def is_exercise_complete(self, exercise_id: str) -> bool:
    return exercise_id in self.completed

  def mark_exercise_complete(self, exercise_id: str, context_key: str) -> None:
    self.completed[exercise_id] = context_key


class YamlProgressStore(ProgressStore):
  """
  Progress kept in a YAML file:

    completed:
      InlineBlanks-1a2b3c4d5e6f7a8b:
        context: /lessons/geography
        completed_at: '2026-01-01T12:00:00+00:00'
  """

  def __init__(self, path: str):
    self.path = path
    self.completed: Dict[str, dict] = {}
    if os.path.exists(path):
      with open(path, "r") as fid:
        data = yaml.safe_load(fid) or {}
      if not isinstance(data, dict) or not isinstance(data.get("completed", {}), dict):
        raise ValueError(f"Invalid progress file {path}: expected a 'completed' mapping")
      self.completed = dict(data.get("completed") or {})

  def is_exercise_complete(self, exercise_id: str) -> bool:
    return exercise_id in self.completed

  def mark_exercise_complete(self, exercise_id: str, context_key: str) -> None:
    self.completed[exercise_id] = {
      "context": context_key,
      "completed_at": datetime.now(timezone.utc).isoformat(),
    }
    directory = os.path.dirname(self.path)
    if directory:
      os.makedirs(directory, exist_ok=True)
    with open(self.path, "w") as fid:
      yaml.safe_dump({"completed": self.completed}, fid, sort_keys=True)
    log.debug(f"Wrote progress for {exercise_id} to {self.path}")
