"""
Terminal rendering for GitHub Pulse Overview.

Turns classified activity into styled lines: an underlined repository
name, a header per non-empty bucket with its icon and bold count, and
one line per pull request with a clickable title and a dimmed
"(#123 merged 2 days ago)" annotation.
"""

from __future__ import annotations

import os
import sys
from typing import IO

import click

from .classify import Activity
from .timefmt import format_distance


OSC = "\x1b]"
BEL = "\x07"


def supports_hyperlinks(stream: IO | None = None) -> bool:
    """Guess whether the terminal behind stream renders OSC 8 hyperlinks."""
    forced = os.environ.get("FORCE_HYPERLINK")
    if forced is not None:
        return forced not in ("0", "false", "")

    stream = stream or sys.stdout
    if not hasattr(stream, "isatty") or not stream.isatty():
        return False
    if os.environ.get("CI"):
        return False

    if os.environ.get("WT_SESSION") or os.environ.get("DOMTERM"):
        return True
    if os.environ.get("TERM", "") in ("xterm-kitty", "xterm-ghostty", "alacritty"):
        return True

    program = os.environ.get("TERM_PROGRAM", "")
    if program in ("iTerm.app", "WezTerm", "vscode", "ghostty", "Hyper"):
        return True

    vte_version = os.environ.get("VTE_VERSION", "")
    if vte_version.isdigit() and int(vte_version) >= 5000:
        return True

    return False


def resolve_hyperlinks(mode: str, stream: IO | None = None) -> bool:
    """Map a hyperlinks setting (auto, true, false) to on or off."""
    if mode == "true":
        return True
    if mode == "false":
        return False
    return supports_hyperlinks(stream)


def terminal_link(text: str, url: str, enabled: bool) -> str:
    """Wrap text in an OSC 8 hyperlink, or append the URL when unsupported."""
    if not enabled:
        return f"{text} ({url})"
    return f"{OSC}8;;{url}{BEL}{text}{OSC}8;;{BEL}"


def window_phrase(window_days: int) -> str:
    if window_days == 7:
        return "the last week"
    if window_days == 1:
        return "the last day"
    return f"the last {window_days} days"


def render_activity(
    activity: Activity,
    hyperlinks: bool = False,
    window_days: int = 7,
) -> list[str]:
    """Render the bucket lines of one repository (without its name)."""
    if activity.is_empty:
        return [f"  No changes proposed or made within {window_phrase(window_days)}"]

    lines = []
    for bucket in activity.buckets:
        if not bucket.entries:
            continue
        lines.append(f"  {bucket.icon} {click.style(str(len(bucket)), bold=True)} Pull requests {bucket.label}")
        for entry in bucket.entries:
            link = terminal_link(entry.title, entry.url, hyperlinks)
            ago = f"{format_distance(entry.date, activity.now)} ago"
            lines.append(f"    - {link} {click.style(f'(#{entry.number} {bucket.label} {ago})', dim=True)}")

    return lines


def render_error(error: Exception) -> list[str]:
    """Render the line shown in place of a repository that failed to fetch."""
    return [click.style(f"  Failed to fetch pull requests: {error}", fg="red")]


def render_repo_header(repo: str) -> str:
    return click.style(repo, underline=True)
