from __future__ import annotations

import string

from hypothesis import given, settings
from hypothesis import strategies as st

from wikidown.engine import create_parser, render_tree
from wikidown.preprocessor import preprocess_markdown
from wikidown.renderer import render_html
from wikidown.typography import apply_typography

MD = create_parser()

word = st.text(alphabet=string.ascii_letters, min_size=1, max_size=8)
phrase = st.lists(word, min_size=1, max_size=6).map(" ".join)

paragraph = phrase
heading = st.tuples(st.integers(min_value=1, max_value=6), phrase).map(
    lambda item: f"{'#' * item[0]} {item[1]}"
)
bullet_list = st.lists(phrase, min_size=1, max_size=4).map(
    lambda items: "\n".join(f"- {item}" for item in items)
)
fenced_code = st.lists(phrase, min_size=0, max_size=3).map(
    lambda lines: "\n".join(["```", *lines, "```"])
)
clean_document = st.lists(
    st.one_of(paragraph, heading, bullet_list, fenced_code), min_size=1, max_size=8
).map("\n\n".join)

markdownish = st.text(alphabet=string.ascii_letters + " \n\t-*+|`~#>[]()!=:.0123456789", max_size=200)


@given(clean_document)
def test_preprocess_is_idempotent_on_clean_documents(document: str):
    once = preprocess_markdown(document)

    assert preprocess_markdown(once) == once


@given(markdownish)
def test_preprocess_is_total(text: str):
    assert isinstance(preprocess_markdown(text), str)


@given(st.text(alphabet=string.ascii_letters + " ().+-/1234", max_size=40))
def test_code_spans_are_never_altered(content: str):
    text = f"(c) `{content}x` (c)"

    result = apply_typography(text)

    assert f"`{content}x`" in result
    assert result.startswith("©")
    assert result.endswith("©")


@settings(deadline=None)
@given(markdownish)
def test_render_tree_matches_markdown_it_render(text: str):
    walked_env: dict = {}
    walked = render_tree(MD, MD.parse(text, walked_env), walked_env)

    stock_env: dict = {}
    stock = MD.renderer.render(MD.parse(text, stock_env), MD.options, stock_env)

    assert walked == stock


@settings(deadline=None)
@given(markdownish)
def test_render_never_raises(text: str):
    assert isinstance(render_html(text, document_path="docs"), str)
