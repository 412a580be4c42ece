from __future__ import annotations

"""Result dialog shown after a translation, built with Flet."""

import logging
from typing import Callable

import flet as ft

logger = logging.getLogger(__name__)


class DialogNotifier:
    """Shows the message in a small window with "OK" and "Copy" buttons.

    ``notify`` runs the Flet app on the caller's event loop and returns once
    the window is closed. "Copy" puts the message on the clipboard through
    ``copy_fn`` and closes the window.
    """

    def __init__(self, copy_fn: Callable[[str], None] | None = None) -> None:
        self._copy_fn = copy_fn

    async def notify(self, title: str, message: str) -> bool:
        await ft.run_async(lambda page: self._build(page, title, message))
        return True

    @staticmethod
    def configure_page(page: ft.Page, title: str) -> None:
        page.title = title
        page.window.width = 480
        page.window.height = 320
        page.window.always_on_top = True
        page.theme_mode = ft.ThemeMode.LIGHT
        page.padding = 16

    def _build(self, page: ft.Page, title: str, message: str) -> None:
        self.configure_page(page, title)

        async def close(_) -> None:
            await page.window.close()

        async def copy(e) -> None:
            if self._copy_fn is not None:
                try:
                    self._copy_fn(message)
                except Exception:
                    logger.warning("Copy from dialog failed", exc_info=True)
            await close(e)

        page.add(
            ft.Column(
                [
                    ft.Text(title, size=18, weight=ft.FontWeight.BOLD),
                    ft.Divider(height=1),
                    ft.Container(
                        expand=True,
                        content=ft.Column(
                            [ft.Text(message, size=13, selectable=True)],
                            scroll=ft.ScrollMode.AUTO,
                        ),
                    ),
                    ft.Row(
                        [
                            ft.OutlinedButton(content="Copy", on_click=copy),
                            ft.FilledButton(
                                "OK",
                                on_click=close,
                                style=ft.ButtonStyle(bgcolor="#1976D2", color="white"),
                            ),
                        ],
                        alignment=ft.MainAxisAlignment.END,
                    ),
                ],
                expand=True,
                spacing=10,
            )
        )
        page.update()
