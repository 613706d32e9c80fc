"""Unit tests for structural suggestion parsing and grouping."""
import pytest
from seo_grader.utils.suggestions import SuggestionParser, SuggestionGrouper, GROUP_NAMES

class TestSuggestionParser:
    """Test parsing of pipe-delimited suggestions."""

    def test_parse_full_suggestion(self):
        """Test all four segments with a bracketed template."""
        item = SuggestionParser.parse(
            "ABOUT | About the Video | Add a summary | Template: [This video covers X.]", 0
        )

        assert item.category == "ABOUT"
        assert item.title == "About the Video"
        assert item.description == "Add a summary"
        assert item.template == "This video covers X."
        assert item.original_index == 0

    def test_parse_without_template(self):
        """Test a suggestion with no template marker."""
        item = SuggestionParser.parse("CTA | Subscribe | Ask viewers to subscribe", 2)

        assert item.category == "CTA"
        assert item.title == "Subscribe"
        assert item.description == "Ask viewers to subscribe"
        assert item.template == ""
        assert item.original_index == 2

    def test_parse_degenerate_input(self):
        """Test text without separators becomes a catch-all item."""
        item = SuggestionParser.parse("Just add more keywords", 3)

        assert item.category == "General"
        assert item.title == "SEO Enhancement"
        assert item.description == "Just add more keywords"
        assert item.template == ""
        assert item.original_index == 3

    def test_parse_empty_string(self):
        """Test empty input never raises and keeps fields non-empty."""
        item = SuggestionParser.parse("", 0)

        assert item.category == "General"
        assert item.title == "SEO Enhancement"
        assert item.description
        assert item.template == ""

    def test_parse_empty_segments_fall_back(self):
        """Test blank category and title segments."""
        item = SuggestionParser.parse(" |  | Do something", 1)

        assert item.category == "Misc"
        assert item.title == "Optimization"
        assert item.description == "Do something"

    def test_parse_two_segments_uses_title_as_description(self):
        """Test description falls back to the title when missing."""
        item = SuggestionParser.parse("DISCLAIMER | Affiliate disclosure", 0)

        assert item.category == "DISCLAIMER"
        assert item.description == "Affiliate disclosure"

    def test_template_marker_inside_description(self):
        """Test the description is cut at the template marker."""
        item = SuggestionParser.parse("SOCIAL | Links | Add links Template: [@[YourHandle]]", 0)

        assert item.description == "Add links"
        assert item.template == "@[YourHandle]"

    def test_template_without_brackets(self):
        """Test a template without a bracket pair is kept as is."""
        item = SuggestionParser.parse("CTA | Join | Invite | Template: Join the newsletter", 0)

        assert item.template == "Join the newsletter"

    @pytest.mark.parametrize("raw, expected", [
        ("A | B | C | Template: [x]", "x"),
        ("A | B | C | Template: []", ""),
        ("A | B | C | Template: [", "["),
        ("A | B | C | Template: [[nested]]", "[nested]"),
        ("A | B | C | Template:", ""),
    ])
    def test_extract_template_brackets(self, raw, expected):
        """Test only one matching bracket pair is removed."""
        assert SuggestionParser.extract_template(raw) == expected

    def test_parse_all_keeps_positions(self):
        """Test original indices follow input order."""
        items = SuggestionParser.parse_all(["A | B", "plain", "C | D | E"])

        assert [item.original_index for item in items] == [0, 1, 2]
        assert items[1].category == "General"

class TestSuggestionGrouper:
    """Test grouping of suggestions into display categories."""

    @pytest.mark.parametrize("category, group", [
        ("ABOUT", "About Sections"),
        ("about the channel", "About Sections"),
        ("SOCIAL", "Socials & Links"),
        ("Useful Links", "Socials & Links"),
        ("CTA", "Call to Actions"),
        ("Subscribe", "Call to Actions"),
        ("TIMESTAMPS", "Timestamps & Chapters"),
        ("Chapters", "Timestamps & Chapters"),
        ("Disclaimer", "Legal & Disclaimers"),
        ("Hashtags", "Miscellaneous"),
    ])
    def test_classify(self, category, group):
        """Test category classification."""
        assert SuggestionGrouper.classify(category) == group

    def test_classify_first_match_wins(self):
        """Test precedence when a category matches several rules."""
        assert SuggestionGrouper.classify("ABOUT LINKS") == "About Sections"
        assert SuggestionGrouper.classify("SOCIAL CTA") == "Socials & Links"

    def test_group_by_category(self):
        """Test grouping keeps input order within and across groups."""
        groups = SuggestionGrouper.group([
            "SOCIAL | Instagram | Add handle",
            "ABOUT | About | Summarize",
            "LINK | Website | Add site",
            "Something odd",
        ])

        assert list(groups.keys()) == ["Socials & Links", "About Sections", "Miscellaneous"]
        assert [item.original_index for item in groups["Socials & Links"]] == [0, 2]
        assert groups["Miscellaneous"][0].category == "General"

    def test_group_empty_list(self):
        """Test an empty list yields empty groups."""
        assert SuggestionGrouper.group([]) == {}

    def test_group_not_applicable(self):
        """Test None when grouping does not apply."""
        assert SuggestionGrouper.group(None) is None
        assert SuggestionGrouper.group(["ABOUT | A | B"], content_strategy=False) is None

    def test_group_names_are_known(self):
        """Test every produced group is a known display group."""
        groups = SuggestionGrouper.group(["CTA | a", "DISCLAIMER | b", "x"])
        assert set(groups).issubset(set(GROUP_NAMES))

    def test_combine_templates(self):
        """Test templates of a group are joined and blanks skipped."""
        items = SuggestionParser.parse_all([
            "SOCIAL | A | a | Template: [one]",
            "SOCIAL | B | b",
            "SOCIAL | C | c | Template: [two]",
        ])

        assert SuggestionGrouper.combine_templates(items) == "one\n\ntwo"
