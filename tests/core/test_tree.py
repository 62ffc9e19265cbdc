# tests/core/test_tree.py
import pytest
from bs4 import BeautifulSoup

from textrange.dom import tree
from textrange.dom.builder import DocumentBuilder
from textrange.dom.tree import NodeKind
from textrange.errors import StructuralInconsistencyError


@pytest.fixture
def soup():
    html = "<!DOCTYPE html><div id='main'>a<!--c--><p>b<br></p><?php x ?></div>"
    return DocumentBuilder(features="html.parser").parse(html)


def test_node_kinds(soup):
    doctype = soup.contents[0]
    text, comment, _, pi = soup.div.contents
    assert tree.node_kind(soup) is NodeKind.ROOT
    assert tree.node_kind(soup.div) is NodeKind.ELEMENT
    assert tree.node_kind(text) is NodeKind.TEXT
    assert tree.node_kind(comment) is NodeKind.COMMENT
    assert tree.node_kind(pi) is NodeKind.PROCESSING_INSTRUCTION
    assert tree.node_kind(doctype) is NodeKind.OTHER_DATA
    assert tree.is_character_data(comment)
    assert not tree.is_text(comment)
    with pytest.raises(TypeError):
        tree.node_kind(object())


def test_lengths_and_indices(soup):
    text, comment, p, _ = soup.div.contents
    assert tree.get_node_length(soup.div) == 4
    assert tree.get_node_length(text) == 1
    assert tree.get_node_length(p.br) == 0
    assert tree.get_node_index(p) == 2
    assert tree.get_child_at(soup.div, 1) is comment


def test_index_lookup_uses_identity():
    soup = BeautifulSoup("<p>x<b></b>x</p>", "html.parser")
    second = soup.p.contents[2]
    assert tree.get_node_index(second) == 2


def test_missing_child_is_a_structural_error(soup):
    with pytest.raises(StructuralInconsistencyError):
        tree.get_child_at(soup.div, 4)
    detached = soup.new_tag("span")
    soup.div.append(detached)
    del soup.div.contents[-1]  # parent pointer left dangling
    with pytest.raises(StructuralInconsistencyError):
        tree.get_node_index(detached)


def test_tree_order_walks(soup):
    text, comment, p, pi = soup.div.contents
    b = p.contents[0]
    assert tree.next_node(soup.div) is text
    assert tree.next_node(p) is b
    assert tree.next_node(p, exclude_children=True) is pi
    assert tree.next_node_descendants(p) is pi
    assert tree.next_node_descendants(pi) is None
    assert tree.previous_node(pi) is p.br
    assert tree.previous_node(text) is soup.div
    assert tree.previous_node(soup.contents[0]) is None
    assert tree.get_last_descendant_or_self(soup.div) is pi


def test_ancestors(soup):
    b = soup.p.contents[0]
    assert tree.get_ancestors(b) == [soup, soup.div, soup.p]
    assert tree.get_ancestors_and_self(b)[-1] is b


def test_inspect_node(soup):
    assert tree.inspect_node(soup) == "[Document]"
    assert tree.inspect_node(soup.div) == "[div#main, 4]"
    assert tree.inspect_node(soup.p.contents[0]) == "[text('b')]"
    assert tree.inspect_node(None) == "[None]"
