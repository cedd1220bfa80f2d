"""Tests for card rendering and the hover-link state machine."""

from __future__ import annotations

import pydantic
import pytest
from rich.console import Console

from promptmap.models import Segment
from promptmap.renderer import PALETTE, HoverState, Renderer, color_for


def _mapping(n: int) -> list[Segment]:
    return [
        Segment(id=f"seg-{i + 1}", prompt_segment=f"prompt {i}", code_segment=f"code_{i}()")
        for i in range(n)
    ]


class TestPalette:
    def test_seven_fixed_colours(self):
        assert PALETTE == (
            "#3498db", "#e74c3c", "#2ecc71", "#f39c12", "#9b59b6", "#1abc9c", "#d35400",
        )

    @pytest.mark.parametrize("index", range(16))
    def test_wraps_modulo_seven(self, index):
        assert color_for(index) == PALETTE[index % 7]


class TestRender:
    @pytest.mark.parametrize("n", [0, 1, 2, 7, 9])
    def test_one_card_per_panel_per_segment(self, n):
        renderer = Renderer()
        pairs = renderer.render(_mapping(n), "Python")
        assert len(pairs) == n
        assert len(renderer.prompt_panel) == n
        assert len(renderer.code_panel) == n

    def test_cards_in_mapping_order(self):
        renderer = Renderer()
        renderer.render(_mapping(5), "Python")
        assert [c.segment_id for c in renderer.prompt_panel] == [f"seg-{i}" for i in range(1, 6)]
        assert [c.segment_id for c in renderer.code_panel] == [f"seg-{i}" for i in range(1, 6)]
        assert [c.text for c in renderer.prompt_panel] == [f"prompt {i}" for i in range(5)]

    def test_single_segment_pair(self):
        renderer = Renderer()
        mapping = [Segment(id="seg-1", prompt_segment="create a variable", code_segment="let x = 1;")]
        (pair,) = renderer.render(mapping, "JavaScript")

        assert pair.prompt_card.segment_id == "seg-1"
        assert pair.code_card.segment_id == "seg-1"
        assert pair.prompt_card.color == "#3498db"
        assert pair.code_card.color == "#3498db"
        assert pair.prompt_card.text == "create a variable"
        assert pair.code_card.text == "let x = 1;"

        renderer.pointer_enter(pair.code_card.card_id)
        assert pair.prompt_card.linked and pair.code_card.linked

    def test_code_card_gets_lowercase_language_class(self):
        renderer = Renderer()
        (pair,) = renderer.render(_mapping(1), "  TypeScript ")
        assert pair.code_card.language_class == "language-typescript"
        assert pair.prompt_card.language_class is None

    def test_colour_wraps_at_index_seven(self):
        renderer = Renderer()
        pairs = renderer.render(_mapping(9), "Python")
        assert pairs[7].color == pairs[0].color == PALETTE[0]
        assert pairs[8].color == PALETTE[1]
        for i, pair in enumerate(pairs):
            assert pair.prompt_card.color == pair.code_card.color == PALETTE[i % 7]

    def test_rerender_replaces_previous_cards(self):
        renderer = Renderer()
        renderer.render(_mapping(4), "Python")
        renderer.render(_mapping(2), "Go")
        assert len(renderer.prompt_panel) == 2
        assert len(renderer.code_panel) == 2
        assert renderer.cards_for("seg-3") == []

    def test_render_is_idempotent(self):
        renderer = Renderer()
        renderer.render(_mapping(3), "Python")
        first = renderer.snapshot("code")
        renderer.render(_mapping(3), "Python")
        assert renderer.snapshot("code") == first

    def test_render_resets_linked_state(self):
        renderer = Renderer()
        renderer.render(_mapping(2), "Python")
        renderer.pointer_enter("prompt-0")
        renderer.render(_mapping(2), "Python")
        assert not any(c.linked for c in renderer.prompt_panel + renderer.code_panel)

    def test_snapshot_shape(self):
        renderer = Renderer()
        renderer.render(_mapping(2), "Rust")
        snap = renderer.snapshot("fn main() {}")
        assert snap.code == "fn main() {}"
        assert snap.target_language == "Rust"
        assert snap.language_class == "language-rust"
        assert [c.kind for c in snap.prompt_cards] == ["prompt", "prompt"]
        assert [c.kind for c in snap.code_cards] == ["code", "code"]

    def test_empty_snapshot(self):
        snap = Renderer().snapshot()
        assert snap.prompt_cards == [] and snap.code_cards == []
        assert snap.language_class == ""

    def test_card_kind_is_restricted(self):
        renderer = Renderer()
        renderer.render(_mapping(1), "Python")
        card = renderer.prompt_panel[0]
        card.kind = "other"
        with pytest.raises(pydantic.ValidationError):
            card.view()

    def test_rich_table_has_row_per_pair(self):
        renderer = Renderer()
        renderer.render(_mapping(3), "Python")
        table = renderer.rich_table()
        assert table.row_count == 3
        console = Console(record=True, width=120)
        console.print(table)
        assert "prompt 2" in console.export_text()


class TestHoverLink:
    def test_enter_links_whole_group(self):
        renderer = Renderer()
        renderer.render(_mapping(3), "Python")
        group = renderer.pointer_enter("prompt-1")
        assert {c.card_id for c in group} == {"prompt-1", "code-1"}
        assert renderer.prompt_panel[1].linked
        assert renderer.code_panel[1].linked
        assert renderer.prompt_panel[1].state is HoverState.hovered_group_active

    def test_other_groups_unaffected(self):
        renderer = Renderer()
        renderer.render(_mapping(3), "Python")
        renderer.pointer_enter("code-0")
        others = renderer.prompt_panel[1:] + renderer.code_panel[1:]
        assert not any(c.linked for c in others)

    def test_leave_unlinks_group(self):
        renderer = Renderer()
        renderer.render(_mapping(2), "Python")
        renderer.pointer_enter("code-1")
        renderer.pointer_leave("code-1")
        assert not any(c.linked for c in renderer.prompt_panel + renderer.code_panel)
        assert renderer.code_panel[1].state is HoverState.unhovered

    def test_shared_id_across_k_cards(self):
        renderer = Renderer()
        mapping = [
            Segment(id="dup", prompt_segment="a", code_segment="a()"),
            Segment(id="other", prompt_segment="b", code_segment="b()"),
            Segment(id="dup", prompt_segment="c", code_segment="c()"),
        ]
        renderer.render(mapping, "Python")
        group = renderer.pointer_enter("prompt-2")
        assert len(group) == 4
        assert all(c.linked for c in renderer.cards_for("dup"))
        assert not any(c.linked for c in renderer.cards_for("other"))
        renderer.pointer_leave("prompt-2")
        assert not any(c.linked for c in renderer.cards_for("dup"))

    def test_card_without_id_never_transitions(self):
        renderer = Renderer()
        mapping = [
            Segment(id="", prompt_segment="a", code_segment="a()"),
            Segment(id="seg-2", prompt_segment="b", code_segment="b()"),
        ]
        renderer.render(mapping, "Python")
        assert renderer.pointer_enter("prompt-0") == []
        assert renderer.prompt_panel[0].state is HoverState.unhovered
        assert not any(c.linked for c in renderer.prompt_panel + renderer.code_panel)

    def test_unknown_card_is_noop(self):
        renderer = Renderer()
        renderer.render(_mapping(1), "Python")
        assert renderer.pointer_enter("prompt-99") == []
        assert renderer.pointer_leave("prompt-99") == []

    def test_stale_card_ids_inert_after_rerender(self):
        renderer = Renderer()
        renderer.render(_mapping(5), "Python")
        renderer.render(_mapping(1), "Python")
        assert renderer.pointer_enter("code-4") == []

    def test_leave_without_enter_is_noop(self):
        renderer = Renderer()
        renderer.render(_mapping(2), "Python")
        assert renderer.pointer_leave("prompt-1") == []
        assert renderer.code_panel[1].state is HoverState.unhovered

    def test_leave_from_partner_card_keeps_group_linked(self):
        renderer = Renderer()
        renderer.render(_mapping(2), "Python")
        renderer.pointer_enter("prompt-1")
        assert renderer.pointer_leave("code-1") == []
        assert renderer.prompt_panel[1].linked and renderer.code_panel[1].linked
        renderer.pointer_leave("prompt-1")
        assert not renderer.code_panel[1].linked
