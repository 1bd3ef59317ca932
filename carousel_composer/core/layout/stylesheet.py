"""
Structured Stylesheet Model
==========================

Modules emit stylesheets as lists of rules and declarations instead of opaque
CSS strings. Values are checked when the stylesheet is rendered: a declaration
whose value could terminate the rule or the style block is dropped.
"""

import re
from typing import Any, List, Mapping, Optional, Union

from pydantic import BaseModel, Field

from carousel_composer.config.logging import get_logger
from carousel_composer.utils.html import sanitize_url

logger = get_logger(__name__)

_PROPERTY_PATTERN = re.compile(r"^(--|-)?[a-z][a-z0-9-]*$")
_UNSAFE_VALUE_PATTERN = re.compile(r"[<>{};\\]|javascript:|expression\(|@import", re.IGNORECASE)
_UNSAFE_SELECTOR_PATTERN = re.compile(r"[<{};\\]")
_URL_TOKEN_PATTERN = re.compile(r'url\("([^"]*)"\)')

DeclarationValue = Union[str, int, float]


def _mask_url_token(match: "re.Match") -> str:
    return "url()" if sanitize_url(match.group(1)) is not None else match.group(0)


def is_safe_value(value: str) -> bool:
    """
    Check a declaration value for characters that could escape the rule.

    Quoted ``url("...")`` tokens holding a safe URL are masked first, so the
    ``;`` of a ``data:image/png;base64,`` payload is accepted.
    """
    return not _UNSAFE_VALUE_PATTERN.search(_URL_TOKEN_PATTERN.sub(_mask_url_token, value))


class CSSDeclaration(BaseModel):
    """A single ``property: value`` pair."""
    property: str
    value: str
    important: bool = False

    def render(self) -> str:
        suffix = " !important" if self.important else ""
        return f"{self.property}: {self.value}{suffix};"

    def is_safe(self) -> bool:
        return bool(_PROPERTY_PATTERN.match(self.property)) and is_safe_value(self.value)


class CSSRule(BaseModel):
    """Selector plus declarations.

    ``layer`` marks the rule that positions the module in the stacking order;
    z-index overrides only touch layer rules.
    """
    selector: str
    declarations: List[CSSDeclaration] = Field(default_factory=list)
    layer: bool = True

    def get(self, prop: str) -> Optional[CSSDeclaration]:
        for declaration in self.declarations:
            if declaration.property == prop:
                return declaration
        return None

    def render(self) -> str:
        if _UNSAFE_SELECTOR_PATTERN.search(self.selector):
            logger.warning("Dropping rule with unsafe selector", selector=self.selector)
            return ""

        lines = []
        for declaration in self.declarations:
            if not declaration.is_safe():
                logger.warning(
                    "Dropping unsafe CSS declaration",
                    selector=self.selector,
                    property=declaration.property,
                )
                continue
            lines.append(f"  {declaration.render()}")

        if not lines:
            return ""
        body = "\n".join(lines)
        return f"{self.selector} {{\n{body}\n}}"


class Stylesheet(BaseModel):
    """Ordered collection of CSS rules emitted by one module."""
    rules: List[CSSRule] = Field(default_factory=list)

    def add(
        self,
        selector: str,
        declarations: Mapping[str, Any],
        layer: bool = True,
        important: bool = False,
    ) -> "Stylesheet":
        """
        Append a rule built from a mapping of properties to values.

        ``None`` values are skipped, so optional properties can be passed inline.
        """
        rule = CSSRule(selector=selector, layer=layer)
        for prop, value in declarations.items():
            if value is None:
                continue
            rule.declarations.append(
                CSSDeclaration(property=prop, value=str(value), important=important)
            )
        self.rules.append(rule)
        return self

    def extend(self, other: "Stylesheet") -> "Stylesheet":
        self.rules.extend(other.rules)
        return self

    def layer_rules(self) -> List[CSSRule]:
        return [rule for rule in self.rules if rule.layer]

    def render(self) -> str:
        rendered = [rule.render() for rule in self.rules]
        return "\n\n".join(part for part in rendered if part)

    def is_empty(self) -> bool:
        return not any(rule.declarations for rule in self.rules)
