"""
Patch data models.

A patch is an ordered list of literal search/replace pairs. Order matters:
each pair applies to the content left by the pairs before it.
"""

from typing import Optional

from pydantic import BaseModel, Field

SEARCH_MARKER = "<<<<<<< SEARCH"
DIVIDER_MARKER = "======="
REPLACE_MARKER = ">>>>>>> REPLACE"

CDATA_OPEN = "<![CDATA["
CDATA_CLOSE = "]]>"

# text that the tag grammar would read as structure
_TAG_MARKUP = (
    "<DIFF",
    "</DIFF>",
    "<SEARCH>",
    "</SEARCH>",
    "<REPLACE>",
    "</REPLACE>",
    "<DESCRIPTION>",
    "</DESCRIPTION>",
    CDATA_OPEN,
)


def escape_cdata(text: str) -> str:
    """
    Wrap text in CDATA when the tag grammar could not carry it literally.

    A ``]]>`` inside wrapped text is split across two CDATA sections.
    """
    if not text.endswith("\r") and not any(markup in text for markup in _TAG_MARKUP):
        return text
    return CDATA_OPEN + text.replace(CDATA_CLOSE, "]]" + CDATA_CLOSE + CDATA_OPEN + ">") + CDATA_CLOSE


def _tagged_section(tag: str, text: str) -> str:
    if not text:
        return f"<{tag}></{tag}>"
    return f"<{tag}>\n{escape_cdata(text)}\n</{tag}>"


def _quote_attribute(value: str) -> str:
    if '"' not in value:
        return f'"{value}"'
    if "'" not in value:
        return f"'{value}'"
    raise ValueError(f"Attribute value {value!r} contains both quote characters")


class SearchReplace(BaseModel):
    """One search/replace operation."""

    search: str = Field(description="Exact text to locate")
    replace: str = Field(description="Text that replaces the located search text")
    id: Optional[str] = Field(
        default=None,
        description="External identifier from the tag grammar, for traceability",
    )
    description: Optional[str] = Field(
        default=None,
        description="Optional note describing the change",
    )
    replace_all: bool = Field(
        default=False,
        description="Replace every occurrence instead of the first one",
    )

    class Config:
        frozen = True

    @property
    def has_short_pattern(self) -> bool:
        """Whether the search text is too short to be a reliable anchor."""
        return len(self.search.strip()) < 5

    def inverse(self) -> "SearchReplace":
        """Return the operation that undoes this one."""
        return SearchReplace(
            search=self.replace,
            replace=self.search,
            id=self.id,
            description=f"Undo: {self.description}" if self.description else None,
            replace_all=self.replace_all,
        )

    def to_tagged(self) -> str:
        """
        Serialize as one tag-grammar block.

        A section whose text would read as markup, or would lose a trailing
        carriage return, is wrapped in CDATA so that it parses back unchanged.

        Raises:
            ValueError: If the id contains both kinds of quote.
        """
        attributes = f" id={_quote_attribute(self.id)}" if self.id else ""
        if self.replace_all:
            attributes += ' replace_all="true"'
        lines = [
            f"<DIFF{attributes}>",
            _tagged_section("SEARCH", self.search),
            _tagged_section("REPLACE", self.replace),
        ]
        if self.description:
            lines.append(f"<DESCRIPTION>{escape_cdata(self.description)}</DESCRIPTION>")
        lines.append("</DIFF>")
        return "\n".join(lines)


class PartialApplication(BaseModel):
    """Outcome of applying a patch up to its first failing operation."""

    content: str = Field(description="Content after the operations that succeeded")
    applied: int = Field(default=0, description="Number of operations applied")
    error: Optional[str] = Field(
        default=None,
        description="Message of the failure that stopped application",
    )
    failed_search: Optional[str] = Field(
        default=None,
        description="Search text of the operation that failed",
    )

    class Config:
        frozen = True

    @property
    def complete(self) -> bool:
        """Whether every operation was applied."""
        return self.error is None
