"""Property lookup across an ordered chain of sources.

The chain is fixed when it is built and never changes afterwards. Earlier
sources shadow later ones: the first source holding a key supplies its value.

Example:
    >>> chain = PropertySourceChain.standard()
    >>> timeout = chain.get("app.timeout", timedelta, timedelta(seconds=30))
    >>> url = chain.get_required_as("app.base-url", TypeTag.URL)
"""

from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Any

from .converters import converter_for
from .errors import MissingPropertyError
from .models import PropertySourceMetaData, SourceKind
from .sources import (
    ApplicationPropertiesSource,
    EnvironmentSource,
    PropertySource,
    SystemPropertiesSource,
)

ErrorFactory = BaseException | Callable[[], BaseException]


class PropertySourceChain:
    """Ordered, immutable list of property sources with typed lookup."""

    def __init__(self, sources: Sequence[PropertySource]):
        self._sources: tuple[PropertySource, ...] = tuple(sources)

    @classmethod
    def standard(
        cls,
        resource_dir: Path | None = None,
        profiles: Sequence[str] = (),
        environ: Mapping[str, str] | None = None,
    ) -> "PropertySourceChain":
        """Build the standard chain: system properties, environment, application properties.

        Args:
            resource_dir: Directory holding ``application*.properties`` files
            profiles: Application properties profiles, lowest precedence first
            environ: Environment to capture instead of ``os.environ``
        """
        return cls(
            [
                SystemPropertiesSource(),
                EnvironmentSource(environ),
                ApplicationPropertiesSource(resource_dir, profiles, environ),
            ]
        )

    @property
    def property_sources(self) -> tuple[PropertySource, ...]:
        return self._sources

    def get_raw(self, key: str) -> str | None:
        """Return the raw value from the first source holding ``key``, or None."""
        for source in self._sources:
            if source.has_key(key):
                return source.raw_value(key)
        return None

    def get(self, key: str, target: Any = str, default: Any = None) -> Any:
        """Look up ``key`` and convert it to ``target``.

        The converter is resolved before the lookup, so an unsupported target
        fails even when the key is absent. ``default`` is returned as-is when
        no source holds the key; it is never converted.

        Raises:
            UnsupportedConversionError: If ``target`` has no converter
            ConversionError: If the value found cannot be converted
        """
        converter = converter_for(target)
        for source in self._sources:
            if source.has_key(key):
                return source.get_value(key, converter)
        return default

    def get_required(self, key: str, error: ErrorFactory | None = None) -> str:
        """Look up ``key`` as a string, failing if no source holds it.

        Args:
            key: Property key
            error: Exception (or zero-argument factory returning one) raised
                instead of :class:`MissingPropertyError`
        """
        value = self.get_raw(key)
        if value is None:
            raise _missing(key, error)
        return value

    def get_required_as(self, key: str, target: Any, error: ErrorFactory | None = None) -> Any:
        """Typed variant of :meth:`get_required`."""
        value = self.get(key, target)
        if value is None:
            raise _missing(key, error)
        return value

    def get_merged_by_prefix(self, prefix: str) -> dict[str, str]:
        """Merge every source's entries and keep the keys starting with ``prefix``.

        For keys held by several sources the highest-precedence value wins,
        matching :meth:`get_raw`.
        """
        merged: dict[str, str] = {}
        for source in reversed(self._sources):
            merged.update(source.all_entries())
        return {k: v for k, v in merged.items() if k.startswith(prefix)}

    def get_properties(self, kind: SourceKind) -> PropertySourceMetaData:
        """Return a snapshot of the first source of the given kind."""
        for source in self._sources:
            if source.kind == kind:
                return source.metadata()
        raise ValueError(f"No property source of kind {kind.value}")

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self._sources)!r})"


def _missing(key: str, error: ErrorFactory | None) -> BaseException:
    if error is None:
        return MissingPropertyError(key)
    if isinstance(error, BaseException):
        return error
    return error()
