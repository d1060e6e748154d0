"""Parser options, feature names and their validation."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from vuedoc.entries import VISIBILITIES
from vuedoc.load_config import load_config

# Feature name (and its aliases) -> emission channel.
FEATURE_CHANNELS: dict[str, str] = {
    "name": "name",
    "description": "description",
    "keywords": "keywords",
    "model": "model",
    "props": "prop",
    "prop": "prop",
    "data": "data",
    "computed": "computed",
    "methods": "method",
    "method": "method",
    "events": "event",
    "event": "event",
    "slots": "slot",
    "slot": "slot",
}

SUPPORTED_FEATURES: tuple[str, ...] = tuple(FEATURE_CHANNELS)

CHANNELS: tuple[str, ...] = (
    "name",
    "description",
    "keywords",
    "model",
    "prop",
    "data",
    "computed",
    "method",
    "event",
    "slot",
    "end",
)

DEFAULT_IGNORED_VISIBILITIES: tuple[str, ...] = ("protected", "private")


class ConfigurationError(ValueError):
    """Raised when parser options are invalid."""


@dataclass
class ParserOptions:
    """Options of one parsing run."""

    filename: str | Path | None = None
    filecontent: str | None = None
    features: Sequence[str] | None = None
    ignored_visibilities: Sequence[str] = field(
        default_factory=lambda: list(DEFAULT_IGNORED_VISIBILITIES)
    )
    encoding: str = "utf-8"


def validate_options(options: ParserOptions) -> None:
    """Check options before a walk starts; raise ConfigurationError if invalid."""
    if not options.filename and options.filecontent is None:
        raise ConfigurationError(
            "One of options.filename or options.filecontent is required"
        )

    features = options.features
    if features is not None:
        if isinstance(features, str) or not isinstance(features, (list, tuple)):
            raise ConfigurationError("options.features must be an array")
        for feature in features:
            if feature not in FEATURE_CHANNELS:
                raise ConfigurationError(
                    f"Unknown '{feature}' feature. "
                    f"Supported features: {', '.join(SUPPORTED_FEATURES)}"
                )

    ignored = options.ignored_visibilities
    if isinstance(ignored, str) or not isinstance(ignored, (list, tuple)):
        raise ConfigurationError("options.ignored_visibilities must be an array")
    for visibility in ignored:
        if visibility not in VISIBILITIES:
            raise ConfigurationError(
                f"Unknown '{visibility}' visibility. "
                f"Supported visibilities: {', '.join(VISIBILITIES)}"
            )


def enabled_channels(features: Sequence[str] | None) -> frozenset[str]:
    """Map a feature list to the set of enabled entry channels."""
    if features is None:
        return frozenset(FEATURE_CHANNELS.values())
    return frozenset(FEATURE_CHANNELS[f] for f in features)


def options_from_config(
    config: Mapping[str, Any] | str | Path | None = None,
    filename: str | Path | None = None,
    filecontent: str | None = None,
) -> ParserOptions:
    """Build validated ParserOptions from a configuration mapping or YAML file.

    A path (or None) is loaded with load_config, on top of the defaults.
    """
    if not isinstance(config, Mapping):
        config = load_config(config)
    parser_config = config.get("parser") or {}
    source_config = config.get("source") or {}
    options = ParserOptions(
        filename=filename,
        filecontent=filecontent,
        features=parser_config.get("features"),
        ignored_visibilities=parser_config.get(
            "ignored_visibilities", list(DEFAULT_IGNORED_VISIBILITIES)
        ),
        encoding=source_config.get("encoding", "utf-8"),
    )
    validate_options(options)
    return options
