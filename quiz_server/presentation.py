"""
Session output helpers.

Text is styled with rich and rendered to a plain ANSI string before it is
written to the client channel, so clients only need a terminal that
understands escape codes. Large banners use figlet fonts through asciimatics.
"""

from __future__ import annotations

import io
from typing import TYPE_CHECKING

from asciimatics.renderers import FigletText
from rich.console import Console, RenderableType
from rich.text import Text

if TYPE_CHECKING:
    from quiz_server.session import Session


def render(renderable: RenderableType, *, color: bool = True) -> str:
    """Render a rich renderable to a string, with or without ANSI codes."""
    buffer = io.StringIO()
    console = Console(
        file=buffer,
        force_terminal=color,
        no_color=not color,
        color_system="standard" if color else None,
        highlight=False,
        soft_wrap=True,
        width=200,
    )
    console.print(renderable, end="")
    return buffer.getvalue()


def colorize(text: object, style: str | None = None, *, color: bool = True) -> str:
    """Return ``text`` styled with a rich style name such as ``"magenta"``."""
    if not style or not color:
        return str(text)
    return render(Text(str(text), style=style), color=color)


def figlet(text: str, font: str = "standard") -> str:
    """Render ``text`` as large figlet lettering."""
    lines, _ = FigletText(text, font=font).rendered_text
    return "\n".join(line.rstrip() for line in lines).rstrip("\n")


def log(session: Session, msg: object, style: str | None = None) -> None:
    session.channel.write(colorize(msg, style, color=session.color) + "\n")


def biglog(session: Session, msg: object, style: str | None = None) -> None:
    banner = figlet(str(msg), font=session.banner_font)
    log(session, banner, style)


def errorlog(session: Session, msg: object) -> None:
    label = colorize("Error", "red", color=session.color)
    body = colorize(msg, "bold red on bright_yellow", color=session.color)
    session.channel.write(f"{label}: {body}\n")
