"""Active-state rewriting for ``data-page`` attributes."""

from __future__ import annotations

import re

ACTIVE_CLASS = "active"


class DataPageRewriter:
    """Marks tags whose ``data-page`` matches the current page as active.

    The authoring-only ``data-page`` attribute is always removed; other
    attributes keep their order and values.
    """

    # Quoted values are consumed whole so a ">" inside one does not end the tag.
    _START_TAG = re.compile(
        r"""<(?P<name>[A-Za-z][A-Za-z0-9:-]*)"""
        r"""(?P<attrs>\s(?:[^<>"']|"[^"<]*"|'[^'<]*')*?)?(?P<close>/?)>"""
    )
    _DATA_PAGE = re.compile(
        r"""\s+data-page\s*=\s*(?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)'|(?P<bare>[^\s"'=<>`]+))""",
        re.IGNORECASE,
    )
    _CLASS = re.compile(
        r"""\sclass\s*=\s*(?:(?P<quote>["'])(?P<value>.*?)(?P=quote)|(?P<bare>[^\s"'=<>`]+))""",
        re.IGNORECASE | re.DOTALL,
    )

    def rewrite(self, text: str, page_id: str = "") -> str:
        if "data-page" not in text.lower():
            return text
        return self._START_TAG.sub(lambda match: self._rewrite_tag(match, page_id), text)

    def _rewrite_tag(self, match: re.Match[str], page_id: str) -> str:
        attrs = match.group("attrs") or ""
        data_page = self._DATA_PAGE.search(attrs)
        if data_page is None:
            return match.group(0)

        value = next(
            (data_page.group(key) for key in ("dq", "sq", "bare") if data_page.group(key) is not None),
            "",
        )
        before = attrs[: data_page.start()]
        after = attrs[data_page.end():]

        if page_id and value == page_id:
            attrs = self._with_active_class(before, after)
        else:
            attrs = before + after
        return f"<{match.group('name')}{attrs}{match.group('close')}>"

    def _with_active_class(self, before: str, after: str) -> str:
        remaining = before + after
        existing = self._CLASS.search(remaining)
        if existing is None:
            return f'{before} class="{ACTIVE_CLASS}"{after}'

        group = "value" if existing.group("quote") else "bare"
        current = existing.group(group)
        if ACTIVE_CLASS in current.split():
            return remaining
        updated = f"{current.rstrip()} {ACTIVE_CLASS}" if current.strip() else ACTIVE_CLASS
        if group == "bare":
            # Unquoted values cannot hold a space.
            updated = f'"{updated}"'
        return remaining[: existing.start(group)] + updated + remaining[existing.end(group):]


__all__ = ["ACTIVE_CLASS", "DataPageRewriter"]
