#!env python
from __future__ import annotations

import dataclasses
import logging
from typing import Any, List, Optional

import yaml

from InlineBlanks import _env_flag
from InlineBlanks.misc import BlankMode

log = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class Settings:
  """User-level settings the exercise only reads."""
  show_hints: bool = True
  reset_clears_blurred: bool = False

  @classmethod
  def from_env(cls) -> Settings:
    return cls(
      show_hints=_env_flag("INLINEBLANKS_SHOW_HINTS", default=True),
      reset_clears_blurred=_env_flag("INLINEBLANKS_RESET_CLEARS_BLURRED", default=False),
    )


@dataclasses.dataclass
class ExerciseConfig:
  name: str
  content: str
  mode: BlankMode = BlankMode.TYPE
  options: List[str] = dataclasses.field(default_factory=list)
  location: str = ""

  @classmethod
  def from_dict(cls, exercise_dict: dict, *, label: str = "exercise") -> ExerciseConfig:
    def _require_type(value, expected, field_label: str):
      if not isinstance(value, expected):
        raise ValueError(f"Invalid type for {field_label}: expected {expected}, got {type(value)}")

    _require_type(exercise_dict, dict, label)
    if "content" not in exercise_dict:
      raise ValueError(f"Missing 'content' in {label}")
    _require_type(exercise_dict["content"], str, f"{label} content")

    name = exercise_dict.get("name", label)
    _require_type(name, str, f"{label} name")

    options = exercise_dict.get("options") or []
    _require_type(options, list, f"{label} options")
    options = [str(option) for option in options]

    location = exercise_dict.get("location", "") or ""
    _require_type(location, str, f"{label} location")

    return cls(
      name=name,
      content=exercise_dict["content"],
      mode=BlankMode.from_value(exercise_dict.get("mode", BlankMode.TYPE.value)),
      options=options,
      location=location,
    )


def _exercise_dicts(document: Any):
  if isinstance(document, dict) and "exercises" in document:
    exercises = document["exercises"]
    if not isinstance(exercises, list):
      raise ValueError(f"Invalid type for exercises: expected {list}, got {type(exercises)}")
    yield from exercises
  else:
    yield document


def load_exercises(path: str) -> List[ExerciseConfig]:
  """
  Load every exercise in a YAML file.

  A file holds one or more documents; each is either a single exercise mapping
  or a mapping with an `exercises` list.
  """
  with open(path) as fid:
    documents = [document for document in yaml.safe_load_all(fid) if document is not None]

  exercises = []
  for exercise_dict in (entry for document in documents for entry in _exercise_dicts(document)):
    exercises.append(ExerciseConfig.from_dict(exercise_dict, label=f"exercise {len(exercises) + 1}"))
  log.debug(f"Loaded {len(exercises)} exercise(s) from {path}")
  return exercises


def select_exercise(exercises: List[ExerciseConfig], name: Optional[str] = None) -> ExerciseConfig:
  if not exercises:
    raise ValueError("No exercises defined")
  if name is None:
    return exercises[0]
  for exercise in exercises:
    if exercise.name == name:
      return exercise
  available = ", ".join(exercise.name for exercise in exercises)
  raise ValueError(f"No exercise named '{name}' (available: {available})")
