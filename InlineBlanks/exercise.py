#!env python
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from InlineBlanks.blanks import BlankSpec, parse_blanks
from InlineBlanks.completion import ExerciseCompletionBridge
from InlineBlanks.config import ExerciseConfig, Settings
from InlineBlanks.contentast import ContentAST
from InlineBlanks.markdown_tree import markdown_to_tree
from InlineBlanks.misc import BlankMode, generate_stable_exercise_id
from InlineBlanks.progress import InMemoryProgressStore, ProgressStore
from InlineBlanks.state import BlankValidationStateMachine, DerivedStatus
from InlineBlanks.tables import BlankLookup, TableFlatteningAdapter, detect_table
from InlineBlanks.walker import flatten, leaf_blank_count, substitute

log = logging.getLogger(__name__)


class InlineBlanksExercise:
  """
  A piece of rich content with [bracketed] blanks, made interactive.

  The content tree is the source of truth: blank specs, the table decision and
  the exercise id are all derived again whenever it changes. Input events go
  to the validation state machine and every event re-checks completion.

  Example:
      exercise = InlineBlanksExercise.from_markdown("The capital of France is [Paris|hint:a city].")
      exercise.handle_input_change(0, "paris")
      exercise.handle_blur(0)
      exercise.render_html()
  """
  COMPONENT_NAME = "InlineBlanks"

  def __init__(
      self,
      content: ContentAST.Element,
      *,
      mode: BlankMode = BlankMode.TYPE,
      options: Optional[Sequence[str]] = None,
      location: str = "",
      settings: Optional[Settings] = None,
      progress_store: Optional[ProgressStore] = None,
      table_adapter: Optional[TableFlatteningAdapter] = None,
  ):
    self.mode = BlankMode.from_value(mode)
    self.options: List[str] = list(options or [])
    self.location = location
    self.settings = settings or Settings()
    self.table_adapter = table_adapter or TableFlatteningAdapter()
    self.state = BlankValidationStateMachine(reset_clears_blurred=self.settings.reset_clears_blurred)
    self.completion = ExerciseCompletionBridge(progress_store or InMemoryProgressStore())

    self.content: ContentAST.Element = ContentAST.Section()
    self.specs: List[BlankSpec] = []
    self.raw_text = ""
    self.is_table = False
    self.exercise_id = ""
    self._table_tree: Optional[ContentAST.Section] = None
    self.set_content(content)

  @classmethod
  def from_markdown(cls, source: str, **kwargs) -> InlineBlanksExercise:
    return cls(markdown_to_tree(source), **kwargs)

  @classmethod
  def from_config(cls, config: ExerciseConfig, **kwargs) -> InlineBlanksExercise:
    kwargs.setdefault("mode", config.mode)
    kwargs.setdefault("options", config.options)
    kwargs.setdefault("location", config.location)
    return cls.from_markdown(config.content, **kwargs)

  def set_content(self, content: ContentAST.Element) -> None:
    self.content = content
    text = flatten(content)
    self.specs = parse_blanks(text)
    self.state.load(self.specs)

    self.raw_text, self.is_table = detect_table(content)
    # The marked table only depends on the content, so it is built once here
    self._table_tree = self.table_adapter.build(self.raw_text) if self.is_table else None
    if not self.is_table:
      found = leaf_blank_count(content)
      if found != len(self.specs):
        log.warning(
          f"{len(self.specs)} blank(s) in the text but {found} inside single text nodes; "
          "a blank split by formatting pairs later blanks with the wrong answer"
        )

    self.exercise_id = generate_stable_exercise_id(self.location, self.COMPONENT_NAME, text)
    self.completion.mount(self.exercise_id, self.location)
    log.debug(
      f"Exercise {self.exercise_id}: {len(self.specs)} blank(s), "
      f"{'table' if self.is_table else 'tree'} rendering"
    )

  # Events

  def handle_input_change(self, index: int, value: str) -> None:
    self.state.set_value(index, value)
    self._check_completion()

  def handle_blur(self, index: int) -> None:
    self.state.mark_blurred(index)
    self._check_completion()

  def toggle_hint(self, index: int) -> None:
    self.state.toggle_hint(index)

  def check_answers(self) -> None:
    self.state.submit_all()
    self._check_completion()

  def show_all_answers(self) -> None:
    self.state.reveal_all()
    self._check_completion()

  def reset(self) -> None:
    self.state.reset()

  def _check_completion(self) -> bool:
    return self.completion.evaluate(self.state.all_correct)

  # Derived state

  @property
  def all_correct(self) -> bool:
    return self.state.all_correct

  @property
  def is_completed(self) -> bool:
    return self.completion.is_completed

  def status(self, index: int) -> DerivedStatus:
    return self.state.status(index)

  def statuses(self) -> List[DerivedStatus]:
    return [self.state.status(index) for index in range(len(self.specs))]

  # Rendering

  def render_blank(self, index: int, spec: BlankSpec, status: DerivedStatus) -> ContentAST.BlankControl:
    return ContentAST.BlankControl(
      index,
      spec,
      status,
      mode=self.mode,
      choices=spec.choices(self.options) if self.mode == BlankMode.PICKER else [],
      show_hint_toggle=self.settings.show_hints and bool(spec.hint),
      hint_shown=self.state.states[index].hint_shown,
    )

  def render(self) -> ContentAST.Div:
    self._check_completion()
    if self.is_table:
      lookup = BlankLookup(self.specs, self.state.status, self.render_blank)
      body = self.table_adapter.rehydrate(self._table_tree, lookup)
    else:
      body = substitute(self.content, self.specs, self.render_blank, self.state.status)

    wrapper = ContentAST.Div(attributes={"class": "inline-blanks"})
    if self.is_completed:
      wrapper.add_element(ContentAST.Span([ContentAST.Text("✓")], attributes={"class": "completion-badge"}))
    wrapper.add_element(body)
    return wrapper

  def render_html(self) -> str:
    return self.render().render("html")

  def render_markdown(self) -> str:
    return self.render().render("markdown")
