"""The public accessor surface: property lookup plus deployment identity.

Most services only need :meth:`Environment.current`:

```python
from datetime import timedelta
from konfig import Environment

env = Environment.current()
if env.is_prod():
    timeout = env.get_property("client.timeout", timedelta, timedelta(seconds=5))
db_url = env.get_required_property("db.url")
```
"""

import logging
import os
import threading
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from .identity import (
    DEFAULT_APPLICATION,
    Application,
    ClientId,
    Cluster,
    DeploymentIdentity,
    NaisProperty,
    Namespace,
    current_identity,
)
from .models import PropertySourceMetaData, SourceKind
from .resolver import ErrorFactory, PropertySourceChain
from .sources import PropertySource

logger = logging.getLogger(__name__)

PROFILES_ENV_VAR = "KONFIG_PROFILES"


def profiles_for(
    identity: DeploymentIdentity, environ: Mapping[str, str] | None = None
) -> list[str]:
    """Return the application properties profiles for an identity.

    ``$KONFIG_PROFILES`` (comma-separated) wins when set. Otherwise the
    profiles are ``<cluster>`` then ``<cluster>-<namespace>``.
    """
    if environ is None:
        environ = os.environ
    explicit = environ.get(PROFILES_ENV_VAR)
    if explicit is not None:
        return [p.strip() for p in explicit.split(",") if p.strip()]
    cluster = identity.cluster.name
    return [cluster, f"{cluster}-{identity.namespace.name}"]


class Environment:
    """Configuration and deployment facts for the running service."""

    def __init__(
        self,
        identity: DeploymentIdentity,
        chain: PropertySourceChain,
        environ: Mapping[str, str] | None = None,
    ):
        self.identity = identity
        self.chain = chain
        self._environ = environ

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        resource_dir: Path | None = None,
        profiles: Sequence[str] | None = None,
    ) -> "Environment":
        """Build a fresh environment, bypassing the process-wide cache.

        Args:
            environ: Environment variables to use instead of ``os.environ``
            resource_dir: Directory holding ``application*.properties`` files
            profiles: Profiles to load; derived from the identity when None
        """
        identity = DeploymentIdentity.from_env(environ)
        if profiles is None:
            profiles = profiles_for(identity, environ)
        chain = PropertySourceChain.standard(resource_dir, profiles, environ)
        return cls(identity, chain, environ)

    @classmethod
    def current(cls) -> "Environment":
        """Return the process-wide environment, creating it on first call."""
        global _current

        if _current is not None:
            return _current

        with _current_lock:
            if _current is not None:
                return _current
            identity = current_identity()
            chain = PropertySourceChain.standard(profiles=profiles_for(identity))
            _current = cls(identity, chain)
            logger.debug(f"Created process environment: {_current!r}")
            return _current

    # Identity

    def get_cluster(self) -> Cluster:
        return self.identity.cluster

    def get_namespace(self) -> Namespace:
        return self.identity.namespace

    def get_application(self) -> Application:
        return self.identity.application

    def get_client_id(self) -> ClientId:
        return self.identity.client_id

    def cluster_name(self) -> str:
        return self.identity.cluster.name

    def namespace(self) -> str:
        return self.identity.namespace.name

    def application(self) -> str:
        return self.identity.application.name

    def client_id(self) -> str:
        return self.identity.client_id.value

    def image_name(self) -> str | None:
        return self.identity.image_name

    def is_prod(self) -> bool:
        return self.identity.cluster.is_prod

    def is_dev(self) -> bool:
        return self.identity.cluster.is_dev

    def is_vtp(self) -> bool:
        return self.identity.cluster.is_vtp

    def is_local(self) -> bool:
        return self.identity.cluster.is_local

    def is_fss(self) -> bool:
        return self.identity.cluster.is_fss

    def is_gcp(self) -> bool:
        return self.identity.cluster.is_gcp

    # Well-known values

    def get_nais_app_name(self) -> str:
        """Application name as configured, falling back to ``"vtp"``."""
        return self.get_property(NaisProperty.APPLICATION.value, default=DEFAULT_APPLICATION)

    def _getenv(self, name: str) -> str | None:
        environ = os.environ if self._environ is None else self._environ
        return environ.get(name)

    def get_truststore_path(self) -> str | None:
        return self._getenv(NaisProperty.TRUSTSTORE_PATH.value)

    def get_truststore_password(self) -> str | None:
        return self._getenv(NaisProperty.TRUSTSTORE_PASSWORD.value)

    # Properties

    @property
    def property_sources(self) -> tuple[PropertySource, ...]:
        return self.chain.property_sources

    def get_property(self, key: str, target: Any = str, default: Any = None) -> Any:
        """See :meth:`PropertySourceChain.get`."""
        return self.chain.get(key, target, default)

    def get_required_property(self, key: str, error: ErrorFactory | None = None) -> str:
        """See :meth:`PropertySourceChain.get_required`."""
        return self.chain.get_required(key, error)

    def get_required_property_as(
        self, key: str, target: Any, error: ErrorFactory | None = None
    ) -> Any:
        return self.chain.get_required_as(key, target, error)

    def get_properties_with_prefix(self, prefix: str) -> dict[str, str]:
        return self.chain.get_merged_by_prefix(prefix)

    def get_properties(self, kind: SourceKind) -> PropertySourceMetaData:
        return self.chain.get_properties(kind)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}[cluster={self.identity.cluster}, "
            f"namespace={self.identity.namespace}, "
            f"property_sources={list(self.property_sources)}]"
        )


_current: Environment | None = None
_current_lock = threading.Lock()


def _reset_current_environment() -> None:
    """Forget the cached environment. Only meant for tests."""
    global _current

    with _current_lock:
        _current = None
