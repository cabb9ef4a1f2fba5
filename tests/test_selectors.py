"""Tests for selector matching and the exclusion pass."""

import logging

from bs4 import BeautifulSoup

from markweave.services.selectors import (
    SimpleSelector,
    annotate_exclusions,
    compile_selector,
    matches,
)


class TestCompileSelector:
    """Tests for compile_selector."""

    def test_tag_selector(self):
        """Test tag names are lower-cased."""
        assert compile_selector("NAV") == SimpleSelector(tag="nav")

    def test_compound_selector(self):
        """Test tag, classes and id compound into one selector."""
        selector = compile_selector("div.note.warning#intro")
        assert selector == SimpleSelector(tag="div", classes=("note", "warning"), element_id="intro")

    def test_universal_selector_has_no_tag(self):
        """Test * matches any tag."""
        assert compile_selector("*.ad") == SimpleSelector(classes=("ad",))

    def test_combinator_is_unsupported(self, caplog):
        """Test combinators are rejected with a warning."""
        with caplog.at_level(logging.WARNING):
            assert compile_selector("div > p") is None
        assert "Unsupported selector" in caplog.text

    def test_attribute_selector_is_unsupported(self):
        """Test attribute selectors are rejected."""
        assert compile_selector("a[href]") is None

    def test_empty_selector_is_unsupported(self):
        """Test blank selectors are rejected."""
        assert compile_selector("  ") is None

    def test_two_ids_never_match(self):
        """Test a selector demanding two different ids is rejected."""
        assert compile_selector("#a#b") is None


class TestMatches:
    """Tests for matches."""

    def test_class_membership(self, first_tag):
        """Test class selectors test membership in the class list."""
        node = first_tag('<div class="card ad wide">x</div>')
        assert matches(node, ".ad")
        assert matches(node, "div.card.wide")
        assert not matches(node, ".card-ad")

    def test_id_is_exact(self, first_tag):
        """Test id selectors compare the whole id."""
        node = first_tag('<section id="sidebar">x</section>')
        assert matches(node, "#sidebar")
        assert not matches(node, "#side")

    def test_tag_mismatch(self, first_tag):
        """Test a tag selector only matches that tag."""
        node = first_tag('<p class="ad">x</p>')
        assert not matches(node, "div.ad")

    def test_unrecognised_selector_matches_nothing(self, first_tag):
        """Test unsupported selectors never match and never raise."""
        node = first_tag("<div>x</div>")
        assert not matches(node, "div:first-child")


class TestAnnotateExclusions:
    """Tests for the exclusion pass."""

    def test_marks_excluded_nodes(self):
        """Test matching elements are marked excluded."""
        soup = BeautifulSoup("<nav>Menu</nav><p>Body</p>", "html.parser")
        annotation = annotate_exclusions(soup, ["nav"], [])
        assert annotation.is_excluded(soup.nav)
        assert not annotation.is_excluded(soup.p)

    def test_include_wins_over_exclude(self):
        """Test a node matching both lists is included, not excluded."""
        soup = BeautifulSoup('<div class="ad keep">x</div>', "html.parser")
        annotation = annotate_exclusions(soup, [".ad"], [".keep"])
        assert annotation.is_included(soup.div)
        assert not annotation.is_excluded(soup.div)

    def test_children_are_not_marked(self):
        """Test exclusion is recorded on the matching node only."""
        soup = BeautifulSoup("<aside><p>x</p></aside>", "html.parser")
        annotation = annotate_exclusions(soup, ["aside"], [])
        assert annotation.excluded == {id(soup.aside)}

    def test_no_selectors_gives_empty_map(self):
        """Test the pass is a no-op without selectors."""
        soup = BeautifulSoup("<p>x</p>", "html.parser")
        annotation = annotate_exclusions(soup, [], [])
        assert not annotation

    def test_root_tag_is_checked(self):
        """Test a Tag root is itself matched, not just its descendants."""
        soup = BeautifulSoup('<div class="ad"><p>x</p></div>', "html.parser")
        annotation = annotate_exclusions(soup.div, [".ad"], [])
        assert annotation.is_excluded(soup.div)

    def test_tree_is_not_modified(self):
        """Test the pass only annotates."""
        html = "<nav>Menu</nav><p>Body</p>"
        soup = BeautifulSoup(html, "html.parser")
        annotate_exclusions(soup, ["nav", "p"], [])
        assert str(soup) == html
