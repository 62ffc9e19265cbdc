# tests/core/test_classifier.py
import pytest

from textrange.dom.builder import DocumentBuilder
from textrange.dom.classifier import StyleClassifier
from textrange.dom.style import DefaultStyleResolver


@pytest.fixture
def classifier():
    return StyleClassifier(DefaultStyleResolver(honor_inline_style=True, honor_hidden_attribute=True))


@pytest.fixture
def parse():
    return DocumentBuilder(features="html.parser").parse


def test_block_nodes(classifier, parse):
    soup = parse('<div><span>a</span><b style="display:inline-block">b</b><li>c</li></div>')
    assert classifier.is_block_node(soup)
    assert classifier.is_block_node(soup.div)
    assert classifier.is_block_node(soup.li)
    assert not classifier.is_block_node(soup.span)
    assert not classifier.is_block_node(soup.b)
    assert not classifier.is_block_node(None)


def test_void_elements_contain_no_positions(parse):
    soup = parse("<p>a<br><img src='x.png'></p>")
    assert StyleClassifier.is_void_element(soup.br)
    assert StyleClassifier.is_void_element(soup.img)
    assert not StyleClassifier.contains_positions(soup.br)
    assert StyleClassifier.contains_positions(soup.p)
    assert StyleClassifier.contains_positions(soup.p.contents[0])


def test_whitespace_nodes_depend_on_white_space_mode(classifier, parse):
    soup = parse("<div> \n\t</div><pre> \n</pre><p style='white-space:pre-line'> \t</p><i style='white-space:pre-line'>\n</i>")
    assert classifier.is_whitespace_node(soup.div.contents[0])
    assert not classifier.is_whitespace_node(soup.pre.contents[0])
    assert classifier.is_whitespace_node(soup.p.contents[0])
    assert not classifier.is_whitespace_node(soup.i.contents[0])
    assert not classifier.is_whitespace_node(soup.div)


def test_form_feed_counts_as_whitespace(classifier, parse):
    soup = parse("<div>\f \f</div><p style='white-space:pre-line'>\f</p>")
    assert classifier.is_whitespace_node(soup.div.contents[0])
    assert classifier.is_whitespace_node(soup.p.contents[0])
    assert classifier.is_collapsed_whitespace_node(soup.div.contents[0])


def test_whitespace_between_blocks_collapses(classifier, parse):
    soup = parse("<div><p>a</p> <p>b</p></div>")
    assert classifier.is_collapsed_whitespace_node(soup.div.contents[1])


def test_whitespace_between_inlines_survives(classifier, parse):
    soup = parse("<div><span>a</span> <span>b</span></div>")
    assert not classifier.is_collapsed_whitespace_node(soup.div.contents[1])


def test_whitespace_before_line_break_collapses(classifier, parse):
    soup = parse("<div><span>a</span> <br>b</div>")
    assert classifier.is_collapsed_whitespace_node(soup.div.contents[1])


def test_hidden_and_collapsed_nodes(classifier, parse):
    soup = parse('<div>a<!--note--><script>x()</script><span style="display:none"><b>c</b></span>'
                 '<i style="visibility:hidden">d</i></div>')
    comment = soup.div.contents[1]
    assert classifier.is_collapsed_node(comment)
    assert classifier.is_collapsed_node(soup.script)
    assert classifier.is_collapsed_node(soup.script.contents[0])
    assert classifier.is_hidden(soup.b)
    assert classifier.is_collapsed_node(soup.b.contents[0])
    assert classifier.is_visibility_hidden_text_node(soup.i.contents[0])
    assert classifier.is_collapsed_node(soup.i.contents[0])
    # The element itself still lays out; only its text is invisible
    assert not classifier.is_collapsed_node(soup.i)
    assert not classifier.is_collapsed_node(soup.div.contents[0])
    assert not classifier.is_collapsed_node(soup)


def test_ignored_nodes(classifier, parse):
    soup = parse('<div><!--c--><span hidden>x</span><span>y</span></div>')
    comment, hidden, shown = soup.div.contents
    assert classifier.is_ignored_node(comment)
    assert classifier.is_ignored_node(hidden)
    assert not classifier.is_ignored_node(shown)


def test_has_inner_text(classifier, parse):
    soup = parse('<div><p> </p><p><!--c--></p><p><b>x</b></p><p hidden>y</p></div>')
    whitespace_only, comment_only, with_text, hidden = soup.find_all("p")
    assert not classifier.has_inner_text(whitespace_only)
    assert not classifier.has_inner_text(comment_only)
    assert classifier.has_inner_text(with_text)
    assert not classifier.has_inner_text(hidden)


def test_leading_and_trailing_separators(classifier, parse):
    soup = parse('<table><tr><td>1</td></tr></table><div>a</div><div></div>'
                 '<span>s</span><u><p>q</p></u><em style="display:inline-block">e</em>')
    empty_div = soup.find_all("div")[1]

    assert classifier.get_leading_space(soup.td) == ""
    assert classifier.get_trailing_space(soup.td) == "\t"
    assert classifier.get_leading_space(soup.div) == "\n"
    assert classifier.get_trailing_space(soup.div) == "\n"
    assert classifier.get_trailing_space(empty_div) == ""
    assert classifier.get_leading_space(soup.span) == ""
    assert classifier.get_trailing_space(soup.span) == ""
    # Inline wrappers delegate to their edge children
    assert classifier.get_leading_space(soup.u) == "\n"
    assert classifier.get_trailing_space(soup.u) == "\n"
    assert classifier.get_leading_space(soup.em) == ""
    assert classifier.get_trailing_space(soup.em) == ""
