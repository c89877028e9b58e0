#!env python
"""
Blanks inside markdown tables.

Cell boundaries of a pipe table come from the text (pipes and the separator
row), so the tree walker cannot be used: by the time a table is a tree, the
bracket text may already be split across cells, and before it is a tree, the
cells do not exist yet. Tables therefore go through two passes:

  1. flatten the content, replace blank i with an inert marker carrying only i,
     and parse the marked text as markdown with the tables extension
  2. at render time, resolve each marker through a BlankLookup (index -> spec,
     status, render_blank) into the same control the walker would produce

A marker the markdown parser drops simply does not render.
"""
from __future__ import annotations

import logging
import re
from typing import Callable, List, Optional, Sequence, Tuple

from InlineBlanks.blanks import BlankSpec, iter_segments
from InlineBlanks.contentast import ContentAST
from InlineBlanks.markdown_tree import BLANK_MARKER_ATTRIBUTE, MarkdownTreeRenderer, default_strategy
from InlineBlanks.walker import RenderBlank, flatten

log = logging.getLogger(__name__)

SEPARATOR_ROW_RE = re.compile(r"^\s*\|[\s\-:|]+\|\s*$")
_LEADING_WHITESPACE_RE = re.compile(r"^\s*")


def dedent_text(text: str) -> str:
  """Strip the smallest indent of the non-blank lines from every line."""
  lines = text.split("\n")
  indents = [
    len(_LEADING_WHITESPACE_RE.match(line).group(0))
    for line in lines
    if line.strip()
  ]
  if not indents:
    return text
  min_indent = min(indents)
  if min_indent == 0:
    return text
  return "\n".join(line[min_indent:] if len(line) >= min_indent else line for line in lines)


def is_table(text: str) -> bool:
  lines = text.split("\n")
  has_pipes = any("|" in line for line in lines)
  has_separator = any(SEPARATOR_ROW_RE.match(line) for line in lines)
  return has_pipes and has_separator


def detect_table(root: ContentAST.Element) -> Tuple[str, bool]:
  """
  Flattened, dedented text of `root` and whether it reads as a pipe table.

  Inline formatting is kept as HTML tags so the table renderer rebuilds it
  inside the cells.
  """
  raw_text = dedent_text(flatten(root, inline_markup=True))
  return raw_text, is_table(raw_text)


class BlankLookup:
  """
  Index-keyed context shared by every marker in one render pass.

  Built fresh for each render and only read while it lasts.
  """

  def __init__(self, specs: Sequence[BlankSpec], status_for: Callable[[int], object], render_blank: RenderBlank):
    self.specs = list(specs)
    self.status_for = status_for
    self.render_blank = render_blank

  def resolve(self, index: int) -> Optional[ContentAST.Element]:
    if not 0 <= index < len(self.specs):
      log.debug(f"Blank marker {index} has no matching spec")
      return None
    spec = self.specs[index]
    return self.render_blank(index, spec, self.status_for(index))


def _marker_strategy(tag, attributes, children):
  if BLANK_MARKER_ATTRIBUTE in attributes:
    return ContentAST.BlankMarker(int(attributes[BLANK_MARKER_ATTRIBUTE]))
  return default_strategy(tag, attributes, children)


def _inline_paragraph_strategy(tag, attributes, children):
  # Paragraphs inside table content must not add block spacing
  return ContentAST.Span(children, attributes={**attributes, "class": "block"})


TABLE_OVERRIDES = {
  "span": _marker_strategy,
  "p": _inline_paragraph_strategy,
}


class TableFlatteningAdapter:

  def __init__(self, renderer: Optional[MarkdownTreeRenderer] = None):
    self.renderer = renderer or MarkdownTreeRenderer(tables=True, overrides=TABLE_OVERRIDES)

  @staticmethod
  def mark_blanks(raw_text: str) -> str:
    pieces = []
    index = 0
    for is_blank, part in iter_segments(raw_text):
      if is_blank:
        pieces.append(ContentAST.BlankMarker.TEMPLATE.format(index=index))
        index += 1
      else:
        pieces.append(part)
    return "".join(pieces)

  def build(self, raw_text: str) -> ContentAST.Section:
    """First pass: marked text -> tree holding BlankMarker nodes."""
    tree = self.renderer.render(self.mark_blanks(raw_text))
    expected = sum(1 for is_blank, _ in iter_segments(raw_text) if is_blank)
    found = len(self.markers(tree))
    if found != expected:
      log.debug(f"Table rendering kept {found} of {expected} blank marker(s)")
    return tree

  @staticmethod
  def markers(tree: ContentAST.Element) -> List[ContentAST.BlankMarker]:
    if isinstance(tree, ContentAST.BlankMarker):
      return [tree]
    found = []
    for child in tree.elements:
      found.extend(TableFlatteningAdapter.markers(child))
    return found

  def rehydrate(self, tree: ContentAST.Element, lookup: BlankLookup) -> ContentAST.Element:
    """Second pass: replace every BlankMarker with lookup.resolve(index)."""
    resolved = self._rehydrate_node(tree, lookup)
    return resolved if resolved is not None else ContentAST.Section()

  def _rehydrate_node(self, node, lookup) -> Optional[ContentAST.Element]:
    if isinstance(node, ContentAST.BlankMarker):
      return lookup.resolve(node.index)
    if isinstance(node, ContentAST.Text) or not node.elements:
      return node
    children = [self._rehydrate_node(child, lookup) for child in node.elements]
    return node.with_elements(child for child in children if child is not None)

  def render(self, raw_text: str, lookup: BlankLookup) -> ContentAST.Element:
    return self.rehydrate(self.build(raw_text), lookup)
