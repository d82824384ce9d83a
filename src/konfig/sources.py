"""
Property sources.

A property source is a named backend holding string-keyed configuration
values. Three standard sources exist, consulted in this order of precedence:

1. :class:`SystemPropertiesSource` - the live process-wide store in
   :mod:`konfig.system`
2. :class:`EnvironmentSource` - the process environment, captured once
3. :class:`ApplicationPropertiesSource` - bundled ``application.properties``
   files, loaded once

## Implementing a source

Subclasses implement `kind`, `has_key`, `raw_value` and `all_entries`:

```python
class DictSource(PropertySource):
    def __init__(self, values):
        self._values = dict(values)

    @property
    def kind(self) -> SourceKind:
        return SourceKind.APP_PROPERTIES

    def has_key(self, key: str) -> bool:
        return key in self._values

    def raw_value(self, key: str) -> str | None:
        return self._values.get(key)

    def all_entries(self) -> dict[str, str]:
        return dict(self._values)
```
"""

import logging
import os
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from . import system
from .converters import Converter
from .models import PropertySourceMetaData, SourceKind
from .properties import load_properties

logger = logging.getLogger(__name__)

RESOURCE_DIR_ENV_VAR = "KONFIG_RESOURCE_DIR"
APPLICATION_PROPERTIES = "application"
PROPERTIES_SUFFIX = ".properties"


class PropertySource(ABC):
    """Abstract base class for property sources."""

    @property
    @abstractmethod
    def kind(self) -> SourceKind:
        """Return which standard source this is."""
        pass

    @abstractmethod
    def has_key(self, key: str) -> bool:
        """Check whether the source holds an entry for ``key``.

        An entry with an empty string value counts as present.
        """
        pass

    @abstractmethod
    def raw_value(self, key: str) -> str | None:
        """Return the raw string for ``key``, or None if absent."""
        pass

    @abstractmethod
    def all_entries(self) -> dict[str, str]:
        """Return a snapshot of every entry in the source."""
        pass

    def get_value(self, key: str, converter: Converter[Any]) -> Any:
        """Return the converted value for ``key``, or None if absent."""
        raw = self.raw_value(key)
        if raw is None:
            return None
        return converter.parse(raw)

    def metadata(self) -> PropertySourceMetaData:
        return PropertySourceMetaData(source=self.kind, values=self.all_entries())

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value})"


class SystemPropertiesSource(PropertySource):
    """Reads the process-wide system properties; reflects runtime changes."""

    @property
    def kind(self) -> SourceKind:
        return SourceKind.SYSTEM_PROPERTIES

    def has_key(self, key: str) -> bool:
        return system.has_property(key)

    def raw_value(self, key: str) -> str | None:
        return system.get_property(key)

    def all_entries(self) -> dict[str, str]:
        return system.snapshot()


class EnvironmentSource(PropertySource):
    """Reads environment variables captured when the source was created.

    Keys are matched literally: ``app.timeout`` does not match ``APP_TIMEOUT``.
    """

    def __init__(self, environ: Mapping[str, str] | None = None):
        self._environ = dict(os.environ if environ is None else environ)

    @property
    def kind(self) -> SourceKind:
        return SourceKind.ENV_PROPERTIES

    def has_key(self, key: str) -> bool:
        return key in self._environ

    def raw_value(self, key: str) -> str | None:
        return self._environ.get(key)

    def all_entries(self) -> dict[str, str]:
        return dict(self._environ)


def default_resource_dir(environ: Mapping[str, str] | None = None) -> Path:
    if environ is None:
        environ = os.environ
    env_dir = environ.get(RESOURCE_DIR_ENV_VAR)
    if env_dir:
        return Path(env_dir)
    return Path.cwd()


class ApplicationPropertiesSource(PropertySource):
    """Reads bundled ``application.properties`` files.

    ``application.properties`` is loaded first, then one
    ``application-<profile>.properties`` per profile, each overriding the
    entries before it. Missing files are skipped, so a service without
    bundled properties gets an empty source. Everything is read once, here;
    a malformed file raises :class:`~konfig.errors.PropertiesFormatError`
    immediately.

    Args:
        resource_dir: Directory holding the files. Defaults to
            ``$KONFIG_RESOURCE_DIR`` or the current working directory.
        profiles: Profile names, lowest precedence first
        environ: Environment consulted for ``$KONFIG_RESOURCE_DIR`` instead
            of ``os.environ``
    """

    def __init__(
        self,
        resource_dir: Path | None = None,
        profiles: Sequence[str] = (),
        environ: Mapping[str, str] | None = None,
    ):
        if resource_dir is None:
            resource_dir = default_resource_dir(environ)
        self.resource_dir = Path(resource_dir)
        self.profiles = tuple(profiles)
        self.loaded_files: tuple[Path, ...] = ()
        self._values = self._load()

    def _candidates(self) -> list[Path]:
        names = [APPLICATION_PROPERTIES]
        names.extend(f"{APPLICATION_PROPERTIES}-{profile}" for profile in self.profiles)
        return [self.resource_dir / f"{name}{PROPERTIES_SUFFIX}" for name in names]

    def _load(self) -> dict[str, str]:
        values: dict[str, str] = {}
        loaded: list[Path] = []
        for path in self._candidates():
            if not path.is_file():
                logger.debug(f"No properties file at {path}")
                continue
            values.update(load_properties(path))
            loaded.append(path)

        if not loaded:
            logger.info(f"No application properties found in {self.resource_dir}")
        self.loaded_files = tuple(loaded)
        return values

    @property
    def kind(self) -> SourceKind:
        return SourceKind.APP_PROPERTIES

    def has_key(self, key: str) -> bool:
        return key in self._values

    def raw_value(self, key: str) -> str | None:
        return self._values.get(key)

    def all_entries(self) -> dict[str, str]:
        return dict(self._values)
