"""Tag field and description editing helpers."""
from typing import List

TAG_SEPARATOR = ","
JOINED_TAG_SEPARATOR = ", "
SECTION_SEPARATOR = "\n\n"


class TagReconciler:
    """Compares recommended tags against the comma separated tag field."""

    @staticmethod
    def active_tags(current_tags: str) -> List[str]:
        """Lower-cased, trimmed, non-empty tags of the field."""
        return [
            tag.strip().lower()
            for tag in (current_tags or "").split(TAG_SEPARATOR)
            if tag.strip()
        ]

    @staticmethod
    def is_added(tag: str, current_tags: str) -> bool:
        """Whether ``tag`` is already in the field (case-insensitive)."""
        return tag.strip().lower() in set(TagReconciler.active_tags(current_tags))

    @staticmethod
    def add_tag(tag: str, current_tags: str) -> str:
        """Append ``tag`` to the field unless it is already there."""
        candidate = tag.strip()
        if not (current_tags or "").strip():
            return candidate
        if not candidate:
            return current_tags

        existing = [piece.strip() for piece in current_tags.split(TAG_SEPARATOR)]
        if any(piece.lower() == candidate.lower() for piece in existing):
            return current_tags

        kept = [piece for piece in existing if piece]
        return JOINED_TAG_SEPARATOR.join(kept + [candidate])


class DescriptionEditor:
    """Description edits triggered from the report."""

    @staticmethod
    def append_section(description: str, text: str) -> str:
        """Append a block of text after the current description."""
        current = (description or "").strip()
        if not current:
            return text
        return f"{current}{SECTION_SEPARATOR}{text}"
