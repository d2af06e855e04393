"""ANSI-aware text helpers and color parsing."""

from __future__ import annotations

import unittest

from ils.ansi import RESET, clip_ansi_line, display_width, fit_ansi_line, strip_ansi, truncate_name
from ils.colors import build_palette, is_valid_color_spec, parse_color, parse_hex_color
from ils.runtime.config import ColorRoles


class AnsiTextTests(unittest.TestCase):
    def test_display_width_ignores_escapes_and_counts_wide_chars(self) -> None:
        self.assertEqual(display_width("\033[31mred\033[0m"), 3)
        self.assertEqual(display_width("日本"), 4)
        self.assertEqual(display_width("a\tb"), 9)

    def test_clip_keeps_escapes_and_stops_before_wide_overflow(self) -> None:
        self.assertEqual(clip_ansi_line("\033[1mabcdef", 3), "\033[1mabc")
        self.assertEqual(clip_ansi_line("a日", 2), "a")
        self.assertEqual(clip_ansi_line("abc", 0), "")

    def test_fit_pads_and_resets_styled_lines(self) -> None:
        self.assertEqual(fit_ansi_line("ab", 4), "ab  ")
        fitted = fit_ansi_line("\033[32mgreen text", 5)
        self.assertEqual(fitted, f"\033[32mgreen{RESET}")
        self.assertEqual(strip_ansi(fitted), "green")

    def test_truncate_name(self) -> None:
        self.assertEqual(truncate_name("short", 10), "short")
        self.assertEqual(truncate_name("abcdefghij", 5), "abcd~")


class ColorTests(unittest.TestCase):
    def test_parse_hex_color(self) -> None:
        self.assertEqual(parse_hex_color("#ff8000"), (255, 128, 0))
        self.assertEqual(parse_hex_color("#fff"), (255, 255, 255))
        self.assertIsNone(parse_hex_color("#ggg"))

    def test_parse_color(self) -> None:
        self.assertEqual(parse_color("cyan"), "\033[96m")
        self.assertEqual(parse_color("cyan", background=True), "\033[106m")
        self.assertEqual(parse_color("#333333", background=True), "\033[48;2;51;51;51m")
        self.assertIsNone(parse_color("none"))
        self.assertIsNone(parse_color("chartreuse"))

    def test_valid_specs(self) -> None:
        for spec in ("none", "Yellow", "#abc", " #A0B0C0 "):
            self.assertTrue(is_valid_color_spec(spec), spec)
        for spec in ("", "#12", "beige", 7, None):
            self.assertFalse(is_valid_color_spec(spec), spec)

    def test_default_palette(self) -> None:
        palette = build_palette(ColorRoles())
        self.assertEqual(palette.header, "\033[97m\033[48;2;51;51;51m")
        self.assertEqual(palette.selected, "\033[92m")
        self.assertEqual(palette.directory, "\033[96m")
        self.assertEqual(palette.status, "\033[93m")

    def test_none_falls_back_to_builtin_styles(self) -> None:
        palette = build_palette(ColorRoles(path_fg="none", path_bg="none", directory_fg="none"))
        self.assertEqual(palette.header, "\033[7m")
        self.assertEqual(palette.directory, "\033[94m")

    def test_no_color_palette_keeps_reverse_video_only(self) -> None:
        palette = build_palette(ColorRoles(), no_color=True)
        self.assertEqual(palette.directory, "")
        self.assertEqual(palette.selected, "\033[7m")


if __name__ == "__main__":
    unittest.main()
