"""Deployment identity derived from NAIS environment variables.

The identity tells a service where it runs (cluster, namespace) and what it
runs as (application, client id, image). It is computed once per process by
:func:`current_identity` and never recomputed.
"""

import logging
import os
import threading
from collections.abc import Mapping
from enum import Enum

from pydantic import computed_field

from .models import KonfigBaseModel

logger = logging.getLogger(__name__)

LOCAL_CLUSTER = "local"
VTP_CLUSTER = "vtp"
DEFAULT_NAMESPACE = "default"
DEFAULT_APPLICATION = "vtp"


class NaisProperty(str, Enum):
    """Well-known environment variables set by the NAIS platform."""

    CLUSTER = "NAIS_CLUSTER_NAME"
    NAMESPACE = "NAIS_NAMESPACE"
    APPLICATION = "NAIS_APP_NAME"
    CLIENT_ID = "NAIS_CLIENT_ID"
    IMAGE = "NAIS_APP_IMAGE"
    TRUSTSTORE_PATH = "NAV_TRUSTSTORE_PATH"
    TRUSTSTORE_PASSWORD = "NAV_TRUSTSTORE_PASSWORD"

    @property
    def property_name(self) -> str:
        return self.value


class Cluster(KonfigBaseModel):
    """A cluster name and the facets derived from it.

    Example:
        >>> cluster = Cluster(name="prod-gcp")
        >>> cluster.is_prod, cluster.is_gcp, cluster.is_fss
        (True, True, False)
    """

    name: str

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_prod(self) -> bool:
        return self.name.startswith("prod")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_dev(self) -> bool:
        return self.name.startswith("dev")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_vtp(self) -> bool:
        return self.name == VTP_CLUSTER

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_local(self) -> bool:
        return self.name == LOCAL_CLUSTER

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_fss(self) -> bool:
        return "fss" in self.name

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_gcp(self) -> bool:
        return "gcp" in self.name

    @classmethod
    def from_env(cls, environ: Mapping[str, str]) -> "Cluster":
        return cls(name=environ.get(NaisProperty.CLUSTER.value) or LOCAL_CLUSTER)

    def __str__(self) -> str:
        return self.name


class Namespace(KonfigBaseModel):
    name: str

    @classmethod
    def from_env(cls, environ: Mapping[str, str]) -> "Namespace":
        return cls(name=environ.get(NaisProperty.NAMESPACE.value) or DEFAULT_NAMESPACE)

    def __str__(self) -> str:
        return self.name


class Application(KonfigBaseModel):
    name: str

    @classmethod
    def from_env(cls, environ: Mapping[str, str]) -> "Application":
        return cls(name=environ.get(NaisProperty.APPLICATION.value) or DEFAULT_APPLICATION)

    def __str__(self) -> str:
        return self.name


class ClientId(KonfigBaseModel):
    value: str

    @classmethod
    def from_env(cls, environ: Mapping[str, str]) -> "ClientId | None":
        """Return the explicitly configured client id, or None."""
        value = environ.get(NaisProperty.CLIENT_ID.value)
        return cls(value=value) if value else None

    @classmethod
    def compose(
        cls, cluster: Cluster, namespace: Namespace, application: Application
    ) -> "ClientId":
        return cls(value=f"{cluster.name}:{namespace.name}:{application.name}")

    def __str__(self) -> str:
        return self.value


class DeploymentIdentity(KonfigBaseModel):
    """Where and what this process runs as.

    Attributes:
        cluster: Cluster the process runs in
        namespace: Kubernetes namespace
        application: Application name
        client_id: Explicit client id, or ``cluster:namespace:application``
        image_name: Container image, None when not set
    """

    cluster: Cluster
    namespace: Namespace
    application: Application
    client_id: ClientId
    image_name: str | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "DeploymentIdentity":
        """Derive the identity from environment variables (``os.environ`` by default)."""
        if environ is None:
            environ = os.environ
        cluster = Cluster.from_env(environ)
        namespace = Namespace.from_env(environ)
        application = Application.from_env(environ)
        client_id = ClientId.from_env(environ) or ClientId.compose(cluster, namespace, application)
        return cls(
            cluster=cluster,
            namespace=namespace,
            application=application,
            client_id=client_id,
            image_name=environ.get(NaisProperty.IMAGE.value),
        )


_current: DeploymentIdentity | None = None
_current_lock = threading.Lock()


def current_identity() -> DeploymentIdentity:
    """Return the process-wide deployment identity, computing it on first call.

    Thread-safe: concurrent first callers block until the single computation
    finishes and then all receive the same instance.
    """
    global _current

    # Fast path: return cached identity without lock
    if _current is not None:
        return _current

    with _current_lock:
        # Another thread may have finished while we waited
        if _current is not None:
            return _current

        identity = DeploymentIdentity.from_env()
        logger.debug(
            f"Deployment identity: cluster={identity.cluster}, namespace={identity.namespace}, "
            f"application={identity.application}, client_id={identity.client_id}"
        )
        _current = identity
        return _current


def _reset_current_identity() -> None:
    """Forget the cached identity. Only meant for tests."""
    global _current

    with _current_lock:
        _current = None
