from __future__ import annotations

from dataclasses import dataclass

from markupsafe import Markup

from .templating import render_fragment

DIALOG_SIZES = ("sm", "md", "lg", "xl")


@dataclass
class FormDialog:
    """
    Overlay shell around create/edit form content.

    The dialog holds no field state; dismissing it navigates to ``close_url``.
    """
    title: str
    close_url: str
    size: str = "md"

    def __post_init__(self) -> None:
        if self.size not in DIALOG_SIZES:
            self.size = "md"

    # PUBLIC_INTERFACE
    def render(self, is_open: bool, content: Markup | str = "") -> Markup:
        """Render the overlay around ``content`` while open; nothing when closed."""
        if not is_open:
            return Markup("")
        return render_fragment("components/dialog.html", dialog=self, content=content)
