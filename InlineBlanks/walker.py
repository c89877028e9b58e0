#!env python
"""
Walks a ContentAST tree, finding blanks inside text leaves and replacing each
with whatever the caller's render_blank returns.

Blank numbering runs depth-first, left to right, across the whole tree, which
is the same order the blanks appear in flatten(root). That is what lets the
specs parsed from flattened text line up with blanks scattered over many
leaves and elements.

A bracket token must sit inside a single text leaf to be found. Markdown can
split one across leaves ("[2*3*4]" becomes "[2", <em>3</em>, "4]"): flatten()
still sees the whole token, so it gets a spec, but the walker never meets it
and every later blank is paired with the spec before its own.
leaf_blank_count() lets callers detect this.
"""
from __future__ import annotations

import html
import logging
from typing import Callable, List, Optional, Sequence, Tuple

from InlineBlanks.blanks import BlankSpec, contains_blank, iter_segments
from InlineBlanks.contentast import ContentAST

log = logging.getLogger(__name__)

RenderBlank = Callable[[int, BlankSpec, Optional[object]], ContentAST.Element]
StatusFor = Callable[[int], object]


def flatten(node: ContentAST.Element, *, inline_markup: bool = False) -> str:
  """
  Text of a tree with line breaks after block-level nodes (p, div, li, br).

  p and div end their own text with a newline, and a block node followed by a
  sibling gets one more, so paragraphs and table rows keep their line
  structure. Inline nodes add nothing, unless `inline_markup` is set: then
  inline formatting (strong, b, em, span, ...) is written back as HTML tags
  around its text, and text is HTML-escaped, so the result can be parsed again
  without losing that formatting.
  """
  if isinstance(node, ContentAST.Text):
    return html.escape(node.content, quote=False) if inline_markup else node.content
  if node.tag == "br":
    return "\n"
  if not node.elements:
    return ""
  content = _flatten_children(node.elements, inline_markup)
  if node.tag in ("p", "div"):
    content += "\n"
  elif inline_markup and node.tag in ContentAST.INLINE_TAGS:
    attrs = ContentAST.html_attributes(node.attributes)
    content = f"<{node.tag}{attrs}>{content}</{node.tag}>"
  return content


def _flatten_children(children: Sequence[ContentAST.Element], inline_markup: bool) -> str:
  last = len(children) - 1
  pieces = []
  for position, child in enumerate(children):
    text = flatten(child, inline_markup=inline_markup)
    if not isinstance(child, ContentAST.Text) and child.is_block and position < last:
      text += "\n"
    pieces.append(text)
  return "".join(pieces)


def leaf_blank_count(root: ContentAST.Element) -> int:
  """Number of bracket tokens the walker will find, i.e. those inside a single text leaf."""
  if isinstance(root, ContentAST.Text):
    return sum(1 for is_blank, _ in iter_segments(root.content) if is_blank)
  return sum(leaf_blank_count(child) for child in root.elements)


def substitute(
    root: ContentAST.Element,
    specs: Sequence[BlankSpec],
    render_blank: RenderBlank,
    status_for: Optional[StatusFor] = None,
) -> ContentAST.Element:
  """
  Replace every blank token in `root` with render_blank(index, spec, status).

  Elements are rebuilt with new children but keep their class, tag and
  attributes. Leaves without blanks are reused as-is. Tokens beyond the end of
  `specs` stay as literal bracket text.
  """
  nodes, counter = _substitute_node(root, specs, render_blank, status_for, 0)
  if counter < len(specs):
    log.debug(f"Substituted {counter} of {len(specs)} blank(s)")
  if len(nodes) == 1:
    return nodes[0]
  return ContentAST.Section(nodes)


def _substitute_node(node, specs, render_blank, status_for, counter) -> Tuple[List[ContentAST.Element], int]:
  if isinstance(node, ContentAST.Text):
    return _substitute_text(node, specs, render_blank, status_for, counter)
  if not node.elements:
    return [node], counter

  new_children = []
  for child in node.elements:
    replaced, counter = _substitute_node(child, specs, render_blank, status_for, counter)
    new_children.extend(replaced)
  return [node.with_elements(new_children)], counter


def _substitute_text(leaf, specs, render_blank, status_for, counter) -> Tuple[List[ContentAST.Element], int]:
  if not contains_blank(leaf.content):
    return [leaf], counter

  nodes = []
  for is_blank, part in iter_segments(leaf.content):
    if not is_blank:
      if part:
        nodes.append(ContentAST.Text(part))
      continue
    if counter >= len(specs):
      log.debug(f"No blank spec left for {part!r}; leaving it as text")
      nodes.append(ContentAST.Text(part))
      continue
    spec = specs[counter]
    status = status_for(counter) if status_for is not None else None
    nodes.append(render_blank(counter, spec, status))
    counter += 1
  return nodes, counter
