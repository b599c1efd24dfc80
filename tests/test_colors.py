"""Tests for typetrainer.ui.colors – color pair table."""

from __future__ import annotations

import curses

from typetrainer.ui.colors import STYLE_PAIRS, TerminalColors, style_attr


class TestTerminalColors:
    def test_pairs_are_distinct(self):
        pairs = [TerminalColors.CORRECT, TerminalColors.FAULT, TerminalColors.PROMPT,
                 TerminalColors.INFO, TerminalColors.DIM]
        assert len(set(pairs)) == len(pairs)

    def test_pair_zero_is_not_used(self):
        # pair 0 is reserved by curses
        assert 0 not in TerminalColors.PALETTE

    def test_every_style_has_a_palette_entry(self):
        for pair in STYLE_PAIRS.values():
            assert pair in TerminalColors.PALETTE


class TestStyleAttrWithoutColors:
    def test_fault_is_reversed(self):
        assert style_attr("fault", colors_enabled=False) == curses.A_REVERSE

    def test_other_styles_are_plain(self):
        assert style_attr("correct", colors_enabled=False) == curses.A_NORMAL
        assert style_attr("plain", colors_enabled=False) == curses.A_NORMAL

    def test_unknown_style_with_colors(self):
        assert style_attr("plain", colors_enabled=True) == curses.A_NORMAL
