"""
In-page scripts for the introspection commands.

Every script is a constant JavaScript function taking one argument object.
Caller-supplied values (selectors, flags, option values) travel in that
argument and are never spliced into the script source.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict


SNAPSHOT_MAX_DEPTH = 10

_SNAPSHOT_JS = """
({ maxDepth }) => {
  const capture = (element, depth) => {
    if (!element || depth > maxDepth) return null;

    const info = {
      tag: element.tagName.toLowerCase(),
      id: element.id || "",
      class: typeof element.className === "string" ? element.className : "",
      text: element.innerText || "",
      attributes: {},
      children: []
    };

    for (const attr of Array.from(element.attributes)) {
      info.attributes[attr.name] = attr.value;
    }

    for (const child of Array.from(element.children)) {
      const childInfo = capture(child, depth + 1);
      if (childInfo) info.children.push(childInfo);
    }
    return info;
  };

  return capture(document.documentElement, 0);
}
"""

_SELECT_ELEMENTS_JS = """
({ selector, getText, getAttributes }) => {
  return Array.from(document.querySelectorAll(selector)).map((el) => {
    const result = {
      tagName: el.tagName.toLowerCase(),
      id: el.id || "",
      className: typeof el.className === "string" ? el.className : ""
    };

    if (getText) {
      result.text = el.textContent || "";
    }

    if (getAttributes) {
      result.attributes = {};
      for (const attr of Array.from(el.attributes)) {
        result.attributes[attr.name] = attr.value;
      }
    }

    if (el.tagName === "INPUT" || el.tagName === "TEXTAREA" || el.tagName === "SELECT") {
      result.value = el.value || "";
    }

    const rect = el.getBoundingClientRect();
    result.rect = { x: rect.x, y: rect.y, width: rect.width, height: rect.height };
    return result;
  });
}
"""

_PAGE_TEXT_JS = """
({ trim, includeHidden }) => {
  const hidden = (style) => style.display === "none" || style.visibility === "hidden";

  const collect = (node) => {
    if (node.nodeType === Node.TEXT_NODE) {
      const parent = node.parentElement;
      if (!includeHidden && parent && hidden(window.getComputedStyle(parent))) {
        return "";
      }
      const text = node.textContent || "";
      return trim ? text.trim() : text;
    }
    if (node.nodeType !== Node.ELEMENT_NODE) return "";
    if (!includeHidden && hidden(window.getComputedStyle(node))) return "";

    let text = "";
    for (const child of Array.from(node.childNodes)) {
      text += collect(child);
    }
    return trim ? text.trim() : text;
  };

  return document.body ? collect(document.body) : "";
}
"""

_ELEMENT_TEXT_JS = """
({ selector, trim, includeHidden }) => {
  const elements = Array.from(document.querySelectorAll(selector));
  if (elements.length === 0) {
    return "No elements found matching selector: " + selector;
  }
  return elements.map((el) => {
    const style = window.getComputedStyle(el);
    if (!includeHidden && (style.display === "none" || style.visibility === "hidden")) {
      return "[Hidden element]";
    }
    const text = el.textContent || "";
    return trim ? text.trim() : text;
  }).join("\\n\\n");
}
"""

_SELECT_OPTION_JS = """
(el, { value }) => {
  el.value = value;
  el.dispatchEvent(new Event("change", { bubbles: true }));
  return true;
}
"""


@dataclass(frozen=True)
class PageScript:
    """A script source plus the JSON-serializable argument it is called with."""

    source: str
    arg: Dict[str, Any] = field(default_factory=dict)


def _require_flag(name: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"{name} must be a bool, got {type(value).__name__}")
    return value


def _require_text(name: str, value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a str, got {type(value).__name__}")
    return value


def snapshot_script(max_depth: int = SNAPSHOT_MAX_DEPTH) -> PageScript:
    if isinstance(max_depth, bool) or not isinstance(max_depth, int) or max_depth < 0:
        raise ValueError("max_depth must be a non-negative int")
    return PageScript(_SNAPSHOT_JS, {"maxDepth": max_depth})


def select_elements_script(selector: str, *, get_text: bool, get_attributes: bool) -> PageScript:
    return PageScript(
        _SELECT_ELEMENTS_JS,
        {
            "selector": _require_text("selector", selector),
            "getText": _require_flag("get_text", get_text),
            "getAttributes": _require_flag("get_attributes", get_attributes),
        },
    )


def text_script(selector: str = "", *, trim: bool = True, include_hidden: bool = False) -> PageScript:
    """Whole-page visible text for an empty selector, per-element text otherwise."""
    selector = _require_text("selector", selector)
    flags = {
        "trim": _require_flag("trim", trim),
        "includeHidden": _require_flag("include_hidden", include_hidden),
    }
    if not selector:
        return PageScript(_PAGE_TEXT_JS, flags)
    return PageScript(_ELEMENT_TEXT_JS, {"selector": selector, **flags})


def select_option_script(value: str) -> PageScript:
    """Element-scoped: evaluate against the resolved ``<select>`` element."""
    return PageScript(_SELECT_OPTION_JS, {"value": _require_text("value", value)})
