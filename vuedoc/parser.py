"""Entry point driving one documentation extraction run over a component."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from vuedoc.analysis_context import AnalysisContext
from vuedoc.component_model import ComponentDefinition, ComponentExtractor
from vuedoc.dispatcher import EventDispatcher, Listener
from vuedoc.entries import SlotEntry
from vuedoc.options import (
    SUPPORTED_FEATURES,
    ConfigurationError,
    ParserOptions,
    enabled_channels,
    options_from_config,
    validate_options,
)
from vuedoc.scope_resolver import ScopeResolver
from vuedoc.sfc import SFCDescriptor, parse_sfc
from vuedoc.syntax import parse_script
from vuedoc.template_scanner import TemplateScanner

logger = logging.getLogger(__name__)

SLOT_TAG_RE = re.compile(r"^(\S+)(?:\s+-?\s*(.*))?$", re.S)


class VuedocParser:
    """Parses a single-file component and streams entries to listeners.

    Listeners are registered per channel (`name`, `description`, `keywords`,
    `model`, `prop`, `data`, `computed`, `method`, `event`, `slot` and
    `end`) and receive an EntryEvent for every entry, in a fixed category
    order. `end` fires once, after every other entry.
    """

    SUPPORTED_FEATURES = SUPPORTED_FEATURES

    def __init__(self, options: ParserOptions) -> None:
        """Validate the options; raises ConfigurationError when invalid."""
        self.validate_options(options)
        self.options = options
        self._dispatcher = EventDispatcher()
        self._warnings: list[str] = []
        self._walking = False

    @classmethod
    def from_config(
        cls,
        config_path: str | Path | None = None,
        filename: str | Path | None = None,
        filecontent: str | None = None,
    ) -> VuedocParser:
        """Create a parser whose options come from a YAML configuration file."""
        options = options_from_config(config_path, filename, filecontent)
        logger.debug("Loaded parser options from %s", config_path or "defaults")
        return cls(options)

    @staticmethod
    def validate_options(options: ParserOptions) -> None:
        """Check parser options without running a walk."""
        validate_options(options)

    @property
    def warnings(self) -> tuple[str, ...]:
        """Non-fatal diagnostics collected by the last walk."""
        return tuple(self._warnings)

    def add_event_listener(self, channel: str, listener: Listener) -> None:
        """Subscribe a listener to a channel."""
        self._dispatcher.add_listener(channel, listener)

    def remove_event_listener(self, channel: str, listener: Listener) -> None:
        """Unsubscribe a listener from a channel."""
        self._dispatcher.remove_listener(channel, listener)

    def read_source(self) -> str:
        """Return the inline source, or read it from the configured file."""
        if self.options.filecontent is not None:
            return self.options.filecontent
        if not self.options.filename:
            raise ConfigurationError("options.filename is required to read a file")
        path = Path(self.options.filename)
        logger.info("Reading %s", path)
        return path.read_text(encoding=self.options.encoding)

    def walk(self) -> None:
        """Run the extraction, dispatching entries as they are found."""
        if self._walking:
            raise RuntimeError("walk() cannot be called while a walk is running")
        self._walking = True
        try:
            ctx = AnalysisContext(
                dispatcher=self._dispatcher,
                channels=enabled_channels(self.options.features),
                ignored_visibilities=frozenset(self.options.ignored_visibilities),
            )
            self._warnings = ctx.warnings
            sfc = parse_sfc(self.read_source())
            component = self._walk_script(sfc, ctx)
            self._walk_template(sfc, ctx, component)
            self._dispatcher.dispatch("end")
        finally:
            self._walking = False

    def _walk_script(
        self, sfc: SFCDescriptor, ctx: AnalysisContext
    ) -> ComponentDefinition | None:
        extractor = ComponentExtractor(ctx, ScopeResolver(), self.options.filename)
        component = None
        if sfc.script is not None:
            tree = parse_script(sfc.script, sfc.lang)
            if tree.root_node.has_error:
                logger.debug("Script of %s has syntax errors", self.options.filename)
            component = extractor.find_component(tree.root_node)
        extractor.emit_component(component)
        return component

    def _walk_template(
        self,
        sfc: SFCDescriptor,
        ctx: AnalysisContext,
        component: ComponentDefinition | None,
    ) -> None:
        declared: list[str] = []
        if sfc.template is not None and (ctx.enabled("slot") or ctx.enabled("event")):
            declared = TemplateScanner(ctx).scan(sfc.template)
        if component is None or not ctx.enabled("slot"):
            return
        for value in component.doc.tag_values("slot"):
            match = SLOT_TAG_RE.match(value.strip())
            if match is None or match.group(1) in declared:
                continue
            declared.append(match.group(1))
            ctx.emit(
                SlotEntry(name=match.group(1), description=match.group(2) or None)
            )
