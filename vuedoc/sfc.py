"""Splitting of a single-file component into its template and script parts."""

import logging
from dataclasses import dataclass

from bs4 import BeautifulSoup, Tag

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SFCDescriptor:
    """The top-level sections of a single-file component."""

    template: Tag | None = None
    script: str | None = None
    lang: str = "js"


def _attribute(tag: Tag, name: str) -> str | None:
    value = tag.get(name)
    if isinstance(value, list):
        return " ".join(value)
    return value


def parse_sfc(source: str) -> SFCDescriptor:
    """Locate the top-level `<template>` and `<script>` blocks of a component."""
    soup = BeautifulSoup(source, "html.parser")
    template = soup.find("template", recursive=False)
    scripts = [
        tag for tag in soup.find_all("script", recursive=False) if isinstance(tag, Tag)
    ]
    # `<script setup>` is only used when it is the sole script block.
    script = next((s for s in scripts if not s.has_attr("setup")), None)
    if script is None and scripts:
        script = scripts[0]

    lang = "js"
    script_text = None
    if script is not None:
        script_text = script.string or ""
        lang = (_attribute(script, "lang") or "js").lower()
        logger.debug("Found %s script block (%d chars)", lang, len(script_text))

    return SFCDescriptor(
        template=template if isinstance(template, Tag) else None,
        script=script_text,
        lang=lang,
    )
