#!env python
"""
Markdown -> ContentAST trees, using python-markdown and BeautifulSoup.

python-markdown renders the source to HTML. Raw HTML written by the author
(inline tags such as <b>, whole <div> blocks, blank markers) passes through
unchanged, so parsing that HTML with BeautifulSoup yields one tree where
markdown formatting and authored tags are both real elements.

Conversion is driven by a dispatch table (tag -> strategy) fixed when the
renderer is built. Callers can override individual tags, which is how tables
turn blank markers back into ContentAST.BlankMarker nodes.
"""
from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

import markdown
from bs4 import BeautifulSoup
from bs4.element import NavigableString, Tag
from markdown.extensions import Extension

from InlineBlanks.contentast import ContentAST, make_element

log = logging.getLogger(__name__)

# Attribute carried by the inline marker emitted for each blank before table parsing
BLANK_MARKER_ATTRIBUTE = "data-blank"

# (tag, attributes, children) -> ContentAST node
TagStrategy = Callable[[str, Dict[str, str], List[ContentAST.Element]], Optional[ContentAST.Element]]


class AuthoredWhitespaceExtension(Extension):
  """Drops the prettify treeprocessor so the HTML holds only authored whitespace."""

  def extendMarkdown(self, md):
    md.treeprocessors.deregister("prettify", strict=False)


def default_strategy(tag: str, attributes: Dict[str, str], children) -> ContentAST.Element:
  return make_element(tag, children, attributes)


class MarkdownTreeRenderer:
  """
  Renders markdown text into a ContentAST.Section.

  Args:
      tables: enable the python-markdown "tables" extension
      overrides: tag -> strategy replacing the default conversion for that tag
  """

  def __init__(self, *, tables: bool = False, overrides: Optional[Dict[str, TagStrategy]] = None):
    self.tables = tables
    self.strategies: Dict[str, TagStrategy] = dict(overrides or {})

  def render(self, text: str) -> ContentAST.Section:
    extensions = [AuthoredWhitespaceExtension()]
    if self.tables:
      extensions.append("tables")
    html = markdown.markdown(text, extensions=extensions)
    if not html:
      log.debug("Markdown produced no output")
      return ContentAST.Section()
    # Attribute values stay plain strings ("class" included)
    soup = BeautifulSoup(html, "html.parser", multi_valued_attributes=None)
    return ContentAST.Section(self._convert_children(soup))

  def _convert_children(self, node: Tag) -> List[ContentAST.Element]:
    children = []
    for child in node.children:
      if isinstance(child, Tag):
        converted = self._convert_element(child)
        if converted is not None:
          children.append(converted)
      # Comments, doctypes and CDATA are NavigableString subclasses
      elif type(child) is NavigableString:
        children.append(ContentAST.Text(str(child)))
    return children

  def _convert_element(self, node: Tag) -> Optional[ContentAST.Element]:
    children = self._convert_children(node)
    strategy = self.strategies.get(node.name, default_strategy)
    return strategy(node.name, dict(node.attrs), children)


def markdown_to_tree(text: str) -> ContentAST.Section:
  """Parse authored content. Tables are deliberately left as text here."""
  return MarkdownTreeRenderer().render(text)
