"""Render a segment mapping into linked prompt/code cards.

The renderer owns the current card set.  Every card carrying a segment id
is registered in an id -> cards index; hover transitions look the group up
there instead of scanning a display surface, so the behaviour is testable
without a browser.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Literal

from .models import CardView, RenderSnapshot, Segment

if TYPE_CHECKING:
    from rich.table import Table

logger = logging.getLogger(__name__)

PALETTE: tuple[str, ...] = (
    "#3498db",
    "#e74c3c",
    "#2ecc71",
    "#f39c12",
    "#9b59b6",
    "#1abc9c",
    "#d35400",
)


def color_for(index: int) -> str:
    """Deterministic wrap-around colour for the segment at *index*."""
    return PALETTE[index % len(PALETTE)]


def language_class(target_language: str) -> str:
    return f"language-{target_language.strip().lower()}"


class HoverState(Enum):
    unhovered = "unhovered"
    hovered_group_active = "hovered-group-active"


@dataclass
class Card:
    card_id: str
    kind: Literal["prompt", "code"]
    segment_id: str | None
    text: str
    color: str
    language_class: str | None = None
    linked: bool = False
    state: HoverState = HoverState.unhovered

    def view(self) -> CardView:
        return CardView(
            card_id=self.card_id,
            kind=self.kind,
            segment_id=self.segment_id,
            text=self.text,
            color=self.color,
            language_class=self.language_class,
            linked=self.linked,
        )


@dataclass
class DisplayPair:
    prompt_card: Card
    code_card: Card

    @property
    def segment_id(self) -> str | None:
        return self.prompt_card.segment_id

    @property
    def color(self) -> str:
        return self.prompt_card.color


@dataclass
class Renderer:
    """Builds both panels and runs the hover-link state machine."""

    prompt_panel: list[Card] = field(default_factory=list)
    code_panel: list[Card] = field(default_factory=list)
    target_language: str = ""
    _by_card_id: dict[str, Card] = field(default_factory=dict, init=False, repr=False)
    _by_segment_id: dict[str, list[Card]] = field(default_factory=dict, init=False, repr=False)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def clear(self) -> None:
        """Drop every card and every hover association."""
        self.prompt_panel = []
        self.code_panel = []
        self.target_language = ""
        self._by_card_id = {}
        self._by_segment_id = {}

    def render(self, mapping: Sequence[Segment], target_language: str) -> list[DisplayPair]:
        """Replace the current cards with a fresh set built from *mapping*."""
        self.clear()
        self.target_language = target_language.strip()
        lang_class = language_class(target_language)

        pairs: list[DisplayPair] = []
        for index, segment in enumerate(mapping):
            color = color_for(index)
            seg_id = segment.id or None
            prompt_card = Card(
                card_id=f"prompt-{index}",
                kind="prompt",
                segment_id=seg_id,
                text=segment.prompt_segment,
                color=color,
            )
            code_card = Card(
                card_id=f"code-{index}",
                kind="code",
                segment_id=seg_id,
                text=segment.code_segment,
                color=color,
                language_class=lang_class,
            )
            self.prompt_panel.append(prompt_card)
            self.code_panel.append(code_card)
            pairs.append(DisplayPair(prompt_card, code_card))

        self._install_hover_links([*self.prompt_panel, *self.code_panel])
        logger.debug("Rendered %d segment pairs (%s)", len(pairs), lang_class)
        return pairs

    def _install_hover_links(self, cards: Iterable[Card]) -> None:
        for card in cards:
            self._by_card_id[card.card_id] = card
            if card.segment_id:
                self._by_segment_id.setdefault(card.segment_id, []).append(card)

    # ------------------------------------------------------------------
    # Hover linking
    # ------------------------------------------------------------------

    def cards_for(self, segment_id: str) -> list[Card]:
        return list(self._by_segment_id.get(segment_id, ()))

    def pointer_enter(self, card_id: str) -> list[Card]:
        """Pointer entered a card: mark its whole id group as linked."""
        card = self._by_card_id.get(card_id)
        if card is None or not card.segment_id:
            return []
        card.state = HoverState.hovered_group_active
        group = self.cards_for(card.segment_id)
        for member in group:
            member.linked = True
        return group

    def pointer_leave(self, card_id: str) -> list[Card]:
        """Pointer left the originating card: unlink its id group."""
        card = self._by_card_id.get(card_id)
        if card is None or card.state is not HoverState.hovered_group_active:
            return []
        card.state = HoverState.unhovered
        group = self.cards_for(card.segment_id)
        for member in group:
            member.linked = False
        return group

    # ------------------------------------------------------------------
    # Output forms
    # ------------------------------------------------------------------

    def snapshot(self, code: str = "") -> RenderSnapshot:
        return RenderSnapshot(
            code=code,
            target_language=self.target_language,
            language_class=language_class(self.target_language) if self.target_language else "",
            prompt_cards=[c.view() for c in self.prompt_panel],
            code_cards=[c.view() for c in self.code_panel],
        )

    def rich_table(self) -> Table:
        """Both panels side by side as a rich Table, one row per pair."""
        from rich.syntax import Syntax
        from rich.table import Table
        from rich.text import Text

        table = Table(show_lines=True, expand=True)
        table.add_column("id", style="dim", no_wrap=True)
        table.add_column("Your prompt", ratio=1)
        table.add_column("Generated code", ratio=2)

        lexer = self.target_language.lower() or "text"
        for prompt_card, code_card in zip(self.prompt_panel, self.code_panel):
            table.add_row(
                Text(prompt_card.segment_id or "-", style=f"bold {prompt_card.color}"),
                Text(prompt_card.text, style=prompt_card.color),
                Syntax(code_card.text, lexer, word_wrap=True, background_color="default"),
            )
        return table
