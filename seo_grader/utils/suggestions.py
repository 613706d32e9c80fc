"""Parsing and grouping of structural description suggestions.

The grading model returns each structural suggestion as one pipe-delimited
string::

    "Category | Title | Suggestion | Template: [Full text to copy]"

Model output is not guaranteed to follow that shape, so parsing never raises:
anything that does not split into at least two segments becomes a single
catch-all item.
"""
from typing import Dict, Iterable, List, Optional, Tuple

from ..models.analysis import SuggestionItem

SEGMENT_SEPARATOR = "|"
TEMPLATE_MARKER = "Template:"

DEFAULT_CATEGORY = "General"
DEFAULT_TITLE = "SEO Enhancement"
FALLBACK_CATEGORY = "Misc"
FALLBACK_TITLE = "Optimization"

MISCELLANEOUS_GROUP = "Miscellaneous"

# First match wins
GROUP_RULES: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("ABOUT",), "About Sections"),
    (("SOCIAL", "LINK"), "Socials & Links"),
    (("CTA", "SUBSCRIBE"), "Call to Actions"),
    (("TIMESTAMP", "CHAPTER"), "Timestamps & Chapters"),
    (("DISCLAIMER",), "Legal & Disclaimers"),
)

GROUP_NAMES: Tuple[str, ...] = tuple(name for _, name in GROUP_RULES) + (MISCELLANEOUS_GROUP,)


class SuggestionParser:
    """Turns raw suggestion strings into SuggestionItem records."""

    @staticmethod
    def parse(raw: str, index: int) -> SuggestionItem:
        """Parse one raw suggestion string found at ``index`` of its source list."""
        raw = raw or ""
        parts = [part.strip() for part in raw.split(SEGMENT_SEPARATOR)]

        if len(parts) < 2:
            return SuggestionItem(
                category=DEFAULT_CATEGORY,
                title=DEFAULT_TITLE,
                description=raw if raw.strip() else DEFAULT_TITLE,
                template="",
                original_index=index,
            )

        category = parts[0] or FALLBACK_CATEGORY
        title = parts[1] or FALLBACK_TITLE
        description = parts[2] if len(parts) > 2 else ""

        template = SuggestionParser.extract_template(raw)
        if TEMPLATE_MARKER in description:
            description = description.split(TEMPLATE_MARKER, 1)[0].strip()

        return SuggestionItem(
            category=category,
            title=title,
            description=description or title,
            template=template,
            original_index=index,
        )

    @staticmethod
    def extract_template(raw: str) -> str:
        """Text after the first ``Template:`` marker, with one bracket pair removed."""
        marker_index = raw.find(TEMPLATE_MARKER)
        if marker_index == -1:
            return ""

        template = raw[marker_index + len(TEMPLATE_MARKER):].strip()
        if len(template) >= 2 and template.startswith("[") and template.endswith("]"):
            template = template[1:-1]
        return template

    @staticmethod
    def parse_all(items: Iterable[str]) -> List[SuggestionItem]:
        """Parse every item, keeping its position as ``original_index``."""
        return [SuggestionParser.parse(item, index) for index, item in enumerate(items)]


class SuggestionGrouper:
    """Buckets parsed suggestions into the fixed display groups."""

    @staticmethod
    def classify(category: str) -> str:
        """Group name for a suggestion category."""
        normalized = category.upper()
        for needles, group_name in GROUP_RULES:
            if any(needle in normalized for needle in needles):
                return group_name
        return MISCELLANEOUS_GROUP

    @staticmethod
    def group(
        items: Optional[List[str]],
        content_strategy: bool = True
    ) -> Optional[Dict[str, List[SuggestionItem]]]:
        """
        Group raw structural suggestions by display category.

        Returns None when grouping does not apply (not the content strategy
        card, or the report carries no structural suggestions), and an empty
        dict when there is simply nothing to show.
        """
        if not content_strategy or items is None:
            return None

        groups: Dict[str, List[SuggestionItem]] = {}
        for suggestion in SuggestionParser.parse_all(items):
            group_name = SuggestionGrouper.classify(suggestion.category)
            groups.setdefault(group_name, []).append(suggestion)
        return groups

    @staticmethod
    def combine_templates(items: Iterable[SuggestionItem]) -> str:
        """Join the non-empty templates of a group, one blank line apart."""
        return "\n\n".join(item.template for item in items if item.template)
