"""Solarized Bright theme constants and default colour roles."""

# Solarized Bright palette
BASE3 = "#FDF6E3"   # background
BASE2 = "#EEE8D5"   # panel bg
BASE1 = "#93A1A1"   # borders
BASE00 = "#657B83"  # body text
BASE01 = "#586E75"  # headers / emphasis

BLUE = "#268BD2"
GREEN = "#859900"
RED = "#DC322F"

FONT_STACK = '"JetBrains Mono", "Fira Code", "Cascadia Code", monospace'

# Host colour roles; the host may override any of them via options.colors
DEFAULT_COLOR_ROLES = {
    "light_blue": "#83B4DA",
    "dark_red": RED,
    "dark_grey": BASE00,
    "med_grey": BASE1,
    "green": GREEN,
}

PATTERN_BAR = "#252525"
NULL_RR_INTERVAL = "black"
