"""konfig - layered configuration lookup and deployment identity.

Values are resolved from three sources, highest precedence first:

1. System properties (:mod:`konfig.system`, seeded from ``KONFIG_OPTS``)
2. Environment variables
3. Bundled ``application.properties`` files

and optionally converted to typed values (durations, periods, dates, URIs,
URLs, numbers, booleans).

## Quick Example

```python
from datetime import timedelta
from konfig import Environment, TypeTag

env = Environment.current()
timeout = env.get_property("http.timeout", timedelta, timedelta(seconds=10))
retries = env.get_property("http.retries", TypeTag.INTEGER, 3)
kafka = env.get_properties_with_prefix("kafka.")
print(env.cluster_name(), env.client_id(), env.is_prod())
```
"""

from .converters import Converter, TypeTag, convert, converter_for, format_value
from .environment import Environment
from .errors import (
    ConversionError,
    KonfigError,
    MissingPropertyError,
    PropertiesFormatError,
    UnsupportedConversionError,
)
from .identity import (
    Application,
    ClientId,
    Cluster,
    DeploymentIdentity,
    NaisProperty,
    Namespace,
    current_identity,
)
from .models import Period, PropertySourceMetaData, SourceKind
from .resolver import PropertySourceChain
from .sources import (
    ApplicationPropertiesSource,
    EnvironmentSource,
    PropertySource,
    SystemPropertiesSource,
)
from .version import PACKAGE_NAME, PACKAGE_VERSION, get_package_info

__all__ = [
    # Lookup
    "Environment",
    "PropertySourceChain",
    "PropertySource",
    "SystemPropertiesSource",
    "EnvironmentSource",
    "ApplicationPropertiesSource",
    "SourceKind",
    "PropertySourceMetaData",
    # Conversion
    "TypeTag",
    "Converter",
    "converter_for",
    "convert",
    "format_value",
    "Period",
    # Identity
    "DeploymentIdentity",
    "Cluster",
    "Namespace",
    "Application",
    "ClientId",
    "NaisProperty",
    "current_identity",
    # Errors
    "KonfigError",
    "UnsupportedConversionError",
    "ConversionError",
    "MissingPropertyError",
    "PropertiesFormatError",
    # Version
    "PACKAGE_NAME",
    "PACKAGE_VERSION",
    "get_package_info",
]
