"""Test the blessed terminal interface."""

from unittest.mock import PropertyMock, patch

import blessed
import pytest

from modeline.terminal import TerminalInterface


@pytest.fixture
def terminal():
    return TerminalInterface(blessed.Terminal(force_styling=None))


def test_length_counts_wide_glyphs(terminal):
    assert terminal.length("abc") == 3
    assert terminal.length("日本") == 4


def test_fit_pads_and_truncates(terminal):
    assert terminal.fit("ab", 5) == "ab   "
    assert terminal.fit("abcdefgh", 5) == "abcde"


def test_draw_status_lines_skips_unchanged_rows(terminal, capsys):
    with patch.object(type(terminal.term), 'width', PropertyMock(return_value=20)):
        assert terminal.draw_status_lines({5: "left", 10: "right"}) == 2
        assert terminal.draw_status_lines({5: "left", 10: "right"}) == 0
        assert terminal.draw_status_lines({5: "left", 10: "changed"}) == 1

    out = capsys.readouterr().out
    assert "changed" in out


def test_width_change_forces_full_repaint(terminal):
    with patch.object(type(terminal.term), 'width', PropertyMock(return_value=20)):
        terminal.draw_status_lines({0: "a"})
    with patch.object(type(terminal.term), 'width', PropertyMock(return_value=30)):
        assert terminal.draw_status_lines({0: "a"}) == 1


def test_invalidate_frame_forces_repaint(terminal):
    with patch.object(type(terminal.term), 'width', PropertyMock(return_value=20)):
        terminal.draw_status_lines({0: "a"})
        terminal.invalidate_frame()
        assert terminal.draw_status_lines({0: "a"}) == 1


def test_too_narrow(terminal):
    with patch.object(type(terminal.term), 'width', PropertyMock(return_value=10)):
        assert terminal.too_narrow()
    with patch.object(type(terminal.term), 'width', PropertyMock(return_value=80)):
        assert not terminal.too_narrow()


def test_setup_and_cleanup(terminal):
    terminal.setup()
    assert terminal.is_fullscreen
    terminal.cleanup()
    assert not terminal.is_fullscreen


def test_get_key_timeout_returns_none(terminal):
    with patch.object(terminal.term, 'inkey', return_value=blessed.keyboard.Keystroke('')):
        assert terminal.get_key(timeout=0) is None
    with patch.object(terminal.term, 'inkey', return_value=blessed.keyboard.Keystroke('q')):
        assert str(terminal.get_key(timeout=0)) == 'q'
