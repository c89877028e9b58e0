from __future__ import annotations

import copy
import html
from typing import TYPE_CHECKING, Dict, List, Optional

from InlineBlanks.misc import BlankMode

if TYPE_CHECKING:
  from InlineBlanks.blanks import BlankSpec
  from InlineBlanks.state import DerivedStatus


class ContentAST:
  """
  Content Abstract Syntax Tree - the rich content that blanks live inside.

  A tree is made of two kinds of node:
  - ContentAST.Text: a text leaf, the only place blank brackets can appear
  - ContentAST.Element: a tagged node with an ordered list of children

  Blank substitution never edits an element in place. It asks the element for
  a copy with new children (Element.with_elements), so the class, tag and
  attributes authored in the source survive untouched.

  Key Components:
  - ContentAST.Section: tagless container (a fragment of sibling nodes)
  - ContentAST.Paragraph / Div / ListItem / LineBreak: block-level nodes
  - ContentAST.Strong / Emphasis / Span: inline formatting
  - ContentAST.Table / TableRow / TableCell: tables rebuilt from pipe syntax
  - ContentAST.Hint: collapsible hint block written as <hint title="..."> in content
  - ContentAST.BlankMarker: inert placeholder used while parsing tables
  - ContentAST.BlankControl: the interactive input that replaces a blank

  Examples:
    body = ContentAST.Section([
      ContentAST.Paragraph([
        ContentAST.Text("The capital of France is "),
        ContentAST.Strong([ContentAST.Text("[Paris]")]),
        ContentAST.Text("."),
      ])
    ])
    body.render("html")
  """

  BLOCK_TAGS = frozenset({"p", "div", "li", "br"})
  VOID_TAGS = frozenset({"br", "hr", "img", "input"})
  INLINE_TAGS = frozenset({"strong", "b", "em", "i", "u", "s", "del", "mark", "small", "sub", "sup", "code", "span", "a"})

  class Element:
    """
    Base class for all ContentAST nodes.

    Holds the child list (`elements`), the tag and the attribute mapping, and
    provides the format dispatch used by every node: render("html") calls
    render_html, render("markdown") calls render_markdown, and anything
    unknown falls back to markdown.

    Subclasses normally only fix TAG and override the render_* methods whose
    output differs from the generic "<tag attrs>children</tag>".
    """
    TAG: Optional[str] = None

    def __init__(self, elements=None, *, tag=None, attributes=None):
      self.elements: List[ContentAST.Element] = list(elements) if elements else []
      self.tag = tag if tag is not None else self.TAG
      self.attributes: Dict[str, str] = dict(attributes or {})

    def __str__(self):
      return self.render_markdown()

    def __repr__(self):
      return f"{self.__class__.__name__}(tag={self.tag!r}, attributes={self.attributes!r}, elements={self.elements!r})"

    def __eq__(self, other):
      if type(self) is not type(other):
        return NotImplemented
      return vars(self) == vars(other)

    __hash__ = None

    def add_element(self, element):
      self.elements.append(element)

    def add_elements(self, elements):
      self.elements.extend(elements)

    @property
    def is_block(self) -> bool:
      return self.tag in ContentAST.BLOCK_TAGS

    def with_elements(self, elements) -> ContentAST.Element:
      """Copy of this node with new children and everything else unchanged."""
      clone = copy.copy(self)
      clone.attributes = dict(self.attributes)
      clone.elements = list(elements)
      return clone

    def render(self, output_format, **kwargs):
      method_name = f"render_{output_format}"
      if hasattr(self, method_name):
        return getattr(self, method_name)(**kwargs)
      return self.render_markdown(**kwargs)

    def render_children(self, output_format, **kwargs) -> str:
      return "".join(element.render(output_format, **kwargs) for element in self.elements)

    def render_markdown(self, **kwargs):
      return self.render_children("markdown", **kwargs)

    def render_html(self, **kwargs):
      inner = self.render_children("html", **kwargs)
      if self.tag is None:
        return inner
      attrs = ContentAST.html_attributes(self.attributes)
      if self.tag in ContentAST.VOID_TAGS:
        return f"<{self.tag}{attrs}>"
      return f"<{self.tag}{attrs}>{inner}</{self.tag}>"

  class Section(Element):
    """Tagless container: renders only its children. Used as the root of parsed content."""

  class Text(Element):
    """
    Text leaf. Never has children; blank brackets live only here.

    Example:
        ContentAST.Text("Water boils at [100|hint:Celsius] degrees.")
    """
    def __init__(self, content: str):
      super().__init__()
      self.content = content

    def __repr__(self):
      return f"Text({self.content!r})"

    def with_elements(self, elements):
      raise TypeError("Text leaves cannot hold child nodes")

    def render_markdown(self, **kwargs):
      return self.content

    def render_html(self, **kwargs):
      return html.escape(self.content, quote=False)

  class Paragraph(Element):
    TAG = "p"

    def render_markdown(self, **kwargs):
      return super().render_markdown(**kwargs) + "\n\n"

  class Div(Element):
    TAG = "div"

    def render_markdown(self, **kwargs):
      return super().render_markdown(**kwargs) + "\n"

  class Span(Element):
    TAG = "span"

  class Strong(Element):
    TAG = "strong"

    def render_markdown(self, **kwargs):
      return f"**{super().render_markdown(**kwargs)}**"

  class Emphasis(Element):
    TAG = "em"

    def render_markdown(self, **kwargs):
      return f"*{super().render_markdown(**kwargs)}*"

  class LineBreak(Element):
    TAG = "br"

    def render_markdown(self, **kwargs):
      return "  \n"

  class ListItem(Element):
    TAG = "li"

    def render_markdown(self, **kwargs):
      return f"- {super().render_markdown(**kwargs).strip()}\n"

  class Table(Element):
    """
    Table rebuilt from pipe syntax.

    Rows may sit directly under the table or inside thead/tbody wrappers; the
    markdown rendering flattens them back into pipe rows with a separator after
    the first (header) row.
    """
    TAG = "table"

    def rows(self) -> List[ContentAST.TableRow]:
      def _collect(node):
        for child in node.elements:
          if isinstance(child, ContentAST.TableRow):
            yield child
          elif not isinstance(child, ContentAST.Text):
            yield from _collect(child)
      return list(_collect(self))

    def render_markdown(self, **kwargs):
      result = []
      for row_number, row in enumerate(self.rows()):
        cells = [cell.render("markdown", **kwargs).strip() for cell in row.cells()]
        result.append("| " + " | ".join(cells) + " |")
        if row_number == 0:
          result.append("| " + " | ".join(["---"] * len(cells)) + " |")
      return "\n".join(result) + "\n"

  class TableRow(Element):
    TAG = "tr"

    def cells(self) -> List[ContentAST.TableCell]:
      return [child for child in self.elements if isinstance(child, ContentAST.TableCell)]

  class TableCell(Element):
    TAG = "td"

  class BlankMarker(Element):
    """
    Inert placeholder for blank number `index`.

    Carries nothing but its index. It exists only between flattening a table
    to text and resolving the parsed table back into interactive blanks.
    """
    TAG = "span"
    TEMPLATE = '<span data-blank="{index}"></span>'

    def __init__(self, index: int):
      super().__init__(attributes={"data-blank": str(index)})
      self.index = index

    def __repr__(self):
      return f"BlankMarker({self.index})"

    def render_markdown(self, **kwargs):
      return self.TEMPLATE.format(index=self.index)

    def render_html(self, **kwargs):
      return self.TEMPLATE.format(index=self.index)

  class BlankControl(Element):
    """
    Interactive control standing in for one blank.

    In TYPE mode this is a free-text input, in PICKER mode a select over
    `choices`. The validation state (correct / wrong / neutral) comes from the
    DerivedStatus it was built with, and an optional hint toggle and hint text
    follow the input.

    Markdown rendering is a plain-text preview, e.g. "[Par]", "[Paris ✓]" or
    "[____ ✗] (a city)".
    """
    TAG = "span"

    def __init__(
        self,
        index: int,
        spec: BlankSpec,
        status: DerivedStatus,
        *,
        mode: BlankMode = BlankMode.TYPE,
        choices=None,
        show_hint_toggle=False,
        hint_shown=False,
    ):
      super().__init__(attributes={"class": "inline-blank", "data-blank-index": str(index)})
      self.index = index
      self.spec = spec
      self.status = status
      self.mode = mode
      self.choices: List[str] = list(choices or [])
      self.show_hint_toggle = show_hint_toggle
      self.hint_shown = hint_shown

    def __repr__(self):
      return f"BlankControl({self.index}, value={self.status.value!r}, state={self.state!r})"

    @property
    def state(self) -> str:
      if self.status.show_validation and self.status.is_correct:
        return "correct"
      if self.status.is_wrong:
        return "wrong"
      return "neutral"

    @property
    def hint_visible(self) -> bool:
      return bool(self.spec.hint) and self.hint_shown

    def render_markdown(self, **kwargs):
      value = self.status.value or "_" * max(len(self.spec.answer), 4)
      mark = {"correct": " ✓", "wrong": " ✗"}.get(self.state, "")
      hint = f" ({self.spec.hint})" if self.hint_visible else ""
      return f"[{value}{mark}]{hint}"

    def _render_input_html(self) -> str:
      width = max(len(self.spec.answer) * 10 + 10, 40)
      attrs = ContentAST.html_attributes({
        "type": "text",
        "name": f"blank-{self.index}",
        "value": self.status.value,
        "class": f"blank-input {self.state}",
        "autocapitalize": "off",
        "autocomplete": "off",
        "autocorrect": "off",
        "spellcheck": "false",
        "style": f"width: {width}px",
      })
      return f"<input{attrs}>"

    def _render_select_html(self) -> str:
      options = ['<option value="" disabled>...</option>']
      for choice in self.choices:
        selected = " selected" if choice == self.status.value else ""
        options.append(f'<option value="{html.escape(choice)}"{selected}>{html.escape(choice)}</option>')
      attrs = ContentAST.html_attributes({
        "name": f"blank-{self.index}",
        "class": f"blank-select {self.state}",
      })
      return f"<select{attrs}>{''.join(options)}</select>"

    def render_html(self, **kwargs):
      parts = [self._render_select_html() if self.mode == BlankMode.PICKER else self._render_input_html()]
      if self.show_hint_toggle:
        title = "Hide hint" if self.hint_shown else "Show hint"
        parts.append(f'<button type="button" class="hint-toggle" title="{title}" data-blank-index="{self.index}">?</button>')
      if self.hint_visible:
        parts.append(f'<span class="hint">({html.escape(self.spec.hint)})</span>')
      attrs = ContentAST.html_attributes(self.attributes)
      return f"<span{attrs}>{''.join(parts)}</span>"

  class Hint(Element):
    """
    Collapsible hint block: a "Show: <title>" toggle with its content below it.

    Written in content as raw HTML, e.g. `<hint title="Geography">On the Seine.</hint>`;
    a bare `open` attribute starts it expanded.
    """
    TAG = "hint"

    def __init__(self, elements=None, *, tag=None, attributes=None, title=None, is_open=None):
      super().__init__(elements, tag=tag, attributes=attributes)
      self.title = title if title is not None else self.attributes.get("title", "Hint")
      self.is_open = is_open if is_open is not None else "open" in self.attributes

    def toggle(self) -> None:
      self.is_open = not self.is_open

    @property
    def label(self) -> str:
      return f"{'Hide' if self.is_open else 'Show'}: {self.title}"

    def render_markdown(self, **kwargs):
      if not self.is_open:
        return f"> **{self.label}**\n\n"
      body = "\n> ".join(super().render_markdown(**kwargs).strip().splitlines())
      return f"> **{self.label}**\n>\n> {body}\n\n"

    def render_html(self, **kwargs):
      expanded = "true" if self.is_open else "false"
      parts = [
        f'<button type="button" class="hint-block-toggle" aria-expanded="{expanded}">'
        f'{html.escape(self.label)}</button>'
      ]
      if self.is_open:
        parts.append(f'<div class="hint-block-body">{self.render_children("html", **kwargs)}</div>')
      return f'<div class="hint-block">{"".join(parts)}</div>'

  @staticmethod
  def html_attributes(attributes: Dict[str, str]) -> str:
    return "".join(
      f' {name}="{html.escape(str(value), quote=True)}"'
      for name, value in attributes.items()
    )


# Element classes by tag, used when building trees from parsed markdown.
TAG_CLASSES = {
  "p": ContentAST.Paragraph,
  "div": ContentAST.Div,
  "span": ContentAST.Span,
  "strong": ContentAST.Strong,
  "b": ContentAST.Strong,
  "em": ContentAST.Emphasis,
  "i": ContentAST.Emphasis,
  "br": ContentAST.LineBreak,
  "li": ContentAST.ListItem,
  "table": ContentAST.Table,
  "tr": ContentAST.TableRow,
  "td": ContentAST.TableCell,
  "th": ContentAST.TableCell,
  "hint": ContentAST.Hint,
}


def make_element(tag: str, elements, attributes=None) -> ContentAST.Element:
  element_class = TAG_CLASSES.get(tag, ContentAST.Element)
  return element_class(elements, tag=tag, attributes=attributes)
