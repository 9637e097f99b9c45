from __future__ import annotations

import io
import textwrap

import pytest

from wikidown.config import RenderConfig
from wikidown.engine import create_parser, render_markdown_text, render_tree

SAMPLE = textwrap.dedent(
    """
    # Title

    Some *emphasis*, `code` and a [link](https://example.com).

    - tight
    - list

    1. loose

    2. list

    | a | b |
    | - | - |
    | 1 | 2 |

    > quote with ![image](img.png "title")

    Term
    : Definition

    Footnote[^1] and ~~struck~~ text.

    [^1]: The note.

    Water is H~2~O, x^2^ and $a_*b_*$.

    $$
    E=mc^2
    $$

    ```python
    print("hi")
    ```

        indented code

    <div>raw html</div>
    """
)


def _render_both(md, text: str) -> tuple[str, str]:
    tokens_env: dict = {}
    tokens = md.parse(text, tokens_env)
    walked = render_tree(md, tokens, tokens_env)

    stock_env: dict = {}
    stock = md.renderer.render(md.parse(text, stock_env), md.options, stock_env)
    return walked, stock


@pytest.mark.parametrize(
    "config",
    [
        RenderConfig(),
        RenderConfig(linkify=False, heading_anchors=False),
        RenderConfig(smart_punctuation=True),
    ],
)
def test_render_tree_without_hook_matches_markdown_it(config: RenderConfig):
    walked, stock = _render_both(create_parser(config), SAMPLE)

    assert walked == stock


def test_create_parser_enables_extensions():
    md = create_parser()
    html = render_markdown_text(md, "# Title\n\n| a |\n| - |\n| 1 |\n\n~~x~~ https://example.com")

    assert '<h1 id="title">Title</h1>' in html
    assert "<table>" in html
    assert "<s>x</s>" in html
    assert '<a href="https://example.com">https://example.com</a>' in html


def test_create_parser_respects_disabled_options():
    md = create_parser(RenderConfig(linkify=False, heading_anchors=False))
    html = render_markdown_text(md, "# Title\n\nhttps://example.com")

    assert "<h1>Title</h1>" in html
    assert "<a " not in html


def test_smart_punctuation_override():
    config = RenderConfig(smart_punctuation=True)

    assert "“" in render_markdown_text(create_parser(config), '"quoted"')
    assert "“" not in render_markdown_text(
        create_parser(config, smart_punctuation=False), '"quoted"'
    )


def test_raw_html_is_allowed():
    html = render_markdown_text(create_parser(), '<li class="x">item</li>')

    assert html.rstrip("\n") == '<li class="x">item</li>'


def test_hook_sees_enter_and_leave_visits():
    visits = []

    def hook(out: io.StringIO, node, entering: bool) -> bool:
        visits.append((node.type, entering))
        return False

    render_markdown_text(create_parser(), "para", hook=hook)

    assert visits == [
        ("root", True),
        ("paragraph", True),
        ("inline", True),
        ("text", True),
        ("text", False),
        ("inline", False),
        ("paragraph", False),
        ("root", False),
    ]


def test_hook_output_replaces_default_rendering():
    def hook(out, node, entering: bool) -> bool:
        if node.type == "heading":
            out.write("<h9>" if entering else "</h9>\n")
            return True
        return False

    html = render_markdown_text(create_parser(RenderConfig(heading_anchors=False)), "# Hi", hook=hook)

    assert html == "<h9>Hi</h9>\n"


def test_image_children_are_not_visited():
    types = []

    def hook(out, node, entering: bool) -> bool:
        if entering:
            types.append(node.type)
        return False

    html = render_markdown_text(create_parser(), "![alt *text*](a.png)", hook=hook)

    assert "image" in types
    assert "em" not in types
    assert 'alt="alt text"' in html


def test_create_parser_enables_scripts_and_math():
    html = render_markdown_text(create_parser(), "H~2~O and x^2^ and $a_*b_*$\n\n$$\nE=mc^2\n$$")

    assert "H<sub>2</sub>O" in html
    assert "x<sup>2</sup>" in html
    assert '<span class="math inline">a_*b_*</span>' in html
    assert "<em>" not in html
    assert '<div class="math block">' in html
    assert "E=mc^2" in html
