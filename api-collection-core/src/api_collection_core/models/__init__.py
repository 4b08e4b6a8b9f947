"""Read-only data model for collections, environments, requests and auth."""

from api_collection_core.models.auth import (
    INHERIT,
    ApiKeyAuth,
    Auth,
    AuthConfig,
    BasicAuth,
    BearerAuth,
    GenericAuth,
    NoAuth,
    OAuth2Auth,
    auth_from_dict,
)
from api_collection_core.models.collection import Collection, CollectionConfig, Environment
from api_collection_core.models.request import (
    BodyVariant,
    FormEntry,
    Header,
    Param,
    RequestBody,
    RequestDefaults,
    RequestTemplate,
)
from api_collection_core.models.variables import (
    ResolvedVariable,
    ResolvedVariableMap,
    SecretVariable,
    TypedValue,
    ValueVariant,
    Variable,
    VariableSource,
    VariableValue,
    VariantList,
    scalar_value,
    secret_values,
    values_of,
)

__all__ = [
    "INHERIT",
    "ApiKeyAuth",
    "Auth",
    "AuthConfig",
    "BasicAuth",
    "BearerAuth",
    "BodyVariant",
    "Collection",
    "CollectionConfig",
    "Environment",
    "FormEntry",
    "GenericAuth",
    "Header",
    "NoAuth",
    "OAuth2Auth",
    "Param",
    "RequestBody",
    "RequestDefaults",
    "RequestTemplate",
    "ResolvedVariable",
    "ResolvedVariableMap",
    "SecretVariable",
    "TypedValue",
    "ValueVariant",
    "Variable",
    "VariableSource",
    "VariableValue",
    "VariantList",
    "auth_from_dict",
    "scalar_value",
    "secret_values",
    "values_of",
]
