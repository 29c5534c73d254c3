"""Pointer geometry and the drag-and-drop sequence."""

from __future__ import annotations

import logging

from .driver.base import Box, ElementHandle, PageHandle, Point
from .errors import DriverError, PartialSequenceError

logger = logging.getLogger(__name__)


def center_of(box: Box) -> Point:
    return Point(box.x + box.width / 2, box.y + box.height / 2)


async def element_center(element: ElementHandle, *, label: str, selector: str) -> Point:
    """Center of ``element``'s bounding box; ``label`` names it in errors (source/target)."""
    action = f"get shape of {label} element"
    try:
        box = await element.bounding_box()
    except Exception as exc:
        raise DriverError(action, selector, exc) from exc
    if box is None:
        raise DriverError(action, selector, RuntimeError("element has no layout box"))
    return center_of(box)


async def drag_and_drop(
    page: PageHandle,
    source: Point,
    target: Point,
    *,
    button: str = "left",
    release_on_failure: bool = False,
) -> None:
    """
    Move to ``source``, press, move to ``target``, release.

    Each step is its own driver call and the first failure stops the sequence
    with a ``PartialSequenceError`` naming the step. With ``release_on_failure``
    a failure after the press is followed by one attempt to release the button.
    """
    try:
        await page.mouse_move(source)
    except Exception as exc:
        raise PartialSequenceError("move_to_source", exc) from exc

    try:
        await page.mouse_down(button=button, click_count=1)
    except Exception as exc:
        raise PartialSequenceError("press", exc) from exc

    try:
        await page.mouse_move(target)
    except Exception as exc:
        if release_on_failure:
            await _release_after_failure(page, button)
        raise PartialSequenceError("move_to_target", exc) from exc

    try:
        await page.mouse_up(button=button, click_count=1)
    except Exception as exc:
        raise PartialSequenceError("release", exc) from exc


async def _release_after_failure(page: PageHandle, button: str) -> None:
    try:
        await page.mouse_up(button=button, click_count=1)
    except Exception as exc:
        logger.warning("Mouse button may still be pressed, recovery release failed: %s", exc)
