from __future__ import annotations

import html
from typing import List

from prompts import SECTION_MARKER
from schemas import GenerationStatus, RenderedStory, Section

SECTION_TITLES = [
    "I. THE LOCATION",
    "II. THE ORIGIN",
    "III. THE RISE",
    "IV. THE DESCENT",
    "V. THE INTERVENTION",
    "VI. THE COVER-UP",
    "VII. THE AFTERMATH",
    "VIII. FINAL NOTE",
]

PLACEHOLDER = "Waiting for case parameters..."


def section_title(index: int) -> str:
    if 0 <= index < len(SECTION_TITLES):
        return SECTION_TITLES[index]
    return f"SECTION {index + 1}"


def split_sections(buffer: str, streaming: bool = False) -> List[Section]:
    """Split the raw story on the section marker.

    Titles follow the piece's position in the raw split, so a blank piece
    still consumes its title. Only the last rendered piece carries the
    cursor, and only while streaming.
    """
    sections: List[Section] = []
    for index, piece in enumerate((buffer or "").split(SECTION_MARKER)):
        text = piece.strip()
        if not text:
            continue
        sections.append(
            Section(index=index, title=section_title(index), file_label=f"FILE-0{index + 1}", text=text)
        )
    if streaming and sections:
        sections[-1].cursor = True
    return sections


def render_cards_html(sections: List[Section], placeholder: str | None = None) -> str:
    if placeholder is not None:
        return f'<div class="placeholder"><p class="pulse">{html.escape(placeholder)}</p></div>'

    cards = []
    for section in sections:
        cursor = '<span class="cursor"></span>' if section.cursor else ""
        cards.append(
            '<div class="case-card">'
            '<div class="case-card-head">'
            f"<h3>{html.escape(section.title)}</h3>"
            f'<span class="file-label">{html.escape(section.file_label)}</span>'
            "</div>"
            f'<div class="case-card-body">{html.escape(section.text)}{cursor}</div>'
            "</div>"
        )
    return "\n".join(cards)


def render_story(buffer: str, status: GenerationStatus) -> RenderedStory:
    streaming = status == GenerationStatus.STREAMING
    if not buffer:
        sections: List[Section] = []
        placeholder = PLACEHOLDER
    else:
        sections = split_sections(buffer, streaming=streaming)
        placeholder = None

    return RenderedStory(
        status=status,
        sections=sections,
        placeholder=placeholder,
        receiving=streaming,
        # Pinned unconditionally while content arrives; manual scroll-away is not detected.
        pin_to_bottom=streaming,
        html=render_cards_html(sections, placeholder),
    )
