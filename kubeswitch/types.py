"""Data model for the switch configuration, state files and sanitized kubeconfigs."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from fractions import Fraction
from typing import Any, Mapping, TypeVar

__all__ = [
    "StoreKind",
    "GCPAuthenticationType",
    "HookType",
    "VALID_STORE_KINDS",
    "VALID_CONFIG_VERSIONS",
    "VALID_HOOK_TYPES",
    "ContextAlias",
    "KubeconfigPath",
    "ConfigOld",
    "Cache",
    "KubeconfigStore",
    "Config",
    "StoreConfigVault",
    "StoreConfigGardener",
    "GKEAuthentication",
    "StoreConfigGKE",
    "StoreConfigAzure",
    "StoreConfigEKS",
    "StoreConfigRancher",
    "HookExecution",
    "Hook",
    "HookState",
    "Index",
    "IndexState",
    "EnvMap",
    "AuthProvider",
    "ExecProvider",
    "User",
    "KubeUser",
    "Cluster",
    "KubeCluster",
    "Context",
    "KubeContext",
    "TypeMeta",
    "KubeConfig",
    "parse_duration",
    "format_duration",
]


class StoreKind(str, enum.Enum):
    """Supported kubeconfig store kinds."""

    FILESYSTEM = "filesystem"
    VAULT = "vault"
    GARDENER = "gardener"
    GKE = "gke"
    AZURE = "azure"
    EKS = "eks"
    RANCHER = "rancher"

    def __str__(self) -> str:
        return self.value


class GCPAuthenticationType(str, enum.Enum):
    """Ways to authenticate against GCP for the GKE store."""

    GCLOUD = "gcloud"
    GOOGLE_API = "api-key"
    SERVICE_ACCOUNT = "service-account"
    LEGACY = "legacy"

    def __str__(self) -> str:
        return self.value


class HookType(str, enum.Enum):
    """Kinds of hooks: an external executable or an inline shell command."""

    EXECUTABLE = "Executable"
    INLINE_COMMAND = "InlineCommand"

    def __str__(self) -> str:
        return self.value


VALID_STORE_KINDS = frozenset(kind.value for kind in StoreKind)
VALID_CONFIG_VERSIONS = frozenset({"v1alpha1"})
VALID_HOOK_TYPES = frozenset(kind.value for kind in HookType)

_E = TypeVar("_E", bound=enum.Enum)

_UTC = timezone.utc
_ZERO_TIME = datetime(1, 1, 1, tzinfo=_UTC)

_NS_PER_UNIT = {
    "ns": 1,
    "us": 1_000,
    "\u00b5s": 1_000,
    "\u03bcs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}
_DURATION_PART = re.compile(r"(\d+\.?\d*|\.\d+)(ns|us|\u00b5s|\u03bcs|ms|s|m|h)")
_TIME_PATTERN = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})[Tt ](\d{2}):(\d{2}):(\d{2})(\.\d+)?"
    r"\s*(Z|z|[+-]\d{2}:?\d{2})?$"
)


# --------------------------------------------------------------------------
# durations and timestamps
# --------------------------------------------------------------------------


def parse_duration(value: str) -> float:
    """Parse a duration string such as ``"1h30m"`` or ``"2.5s"`` into seconds."""
    if not isinstance(value, str):
        raise ValueError(f"invalid duration {value!r}: expected a string")
    body = value
    negative = False
    if body[:1] in "+-" and body:
        negative = body[0] == "-"
        body = body[1:]
    if body == "0":
        return 0.0
    if not body:
        raise ValueError(f"invalid duration {value!r}")

    total = Fraction(0)
    position = 0
    for match in _DURATION_PART.finditer(body):
        if match.start() != position:
            break
        number, unit = match.groups()
        total += Fraction(number) * _NS_PER_UNIT[unit]
        position = match.end()
    if position != len(body):
        raise ValueError(f"invalid duration {value!r}")

    seconds = float(total / 1_000_000_000)
    return -seconds if negative else seconds


def _with_fraction(value: int, precision: int) -> str:
    whole, remainder = divmod(value, 10**precision)
    fraction = f"{remainder:0{precision}d}".rstrip("0")
    return f"{whole}.{fraction}" if fraction else str(whole)


def format_duration(seconds: float) -> str:
    """Render seconds in the compact ``1h2m3s`` duration notation."""
    nanoseconds = round(Fraction(seconds) * 1_000_000_000)
    sign = "-" if nanoseconds < 0 else ""
    magnitude = abs(nanoseconds)

    if magnitude == 0:
        return "0s"
    if magnitude < 1_000:
        return f"{sign}{magnitude}ns"
    if magnitude < 1_000_000:
        return f"{sign}{_with_fraction(magnitude, 3)}\u00b5s"
    if magnitude < 1_000_000_000:
        return f"{sign}{_with_fraction(magnitude, 6)}ms"

    whole_seconds, remainder = divmod(magnitude, 1_000_000_000)
    hours, whole_seconds = divmod(whole_seconds, 3600)
    minutes, whole_seconds = divmod(whole_seconds, 60)
    second_text = _with_fraction(whole_seconds * 1_000_000_000 + remainder, 9)
    if hours:
        return f"{sign}{hours}h{minutes}m{second_text}s"
    if minutes:
        return f"{sign}{minutes}m{second_text}s"
    return f"{sign}{second_text}s"


def _parse_time(value: Any) -> datetime:
    if value is None:
        return _ZERO_TIME
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=_UTC)
    if not isinstance(value, str):
        raise ValueError(f"invalid timestamp {value!r}")
    match = _TIME_PATTERN.match(value.strip())
    if not match:
        raise ValueError(f"invalid timestamp {value!r}")
    year, month, day, hour, minute, second, fraction, offset = match.groups()
    microsecond = int((fraction[1:] + "000000")[:6]) if fraction else 0
    if offset is None or offset in ("Z", "z"):
        tzinfo = _UTC
    else:
        digits = offset[1:].replace(":", "")
        delta = timedelta(hours=int(digits[:2]), minutes=int(digits[2:]))
        tzinfo = timezone(-delta if offset[0] == "-" else delta)
    return datetime(
        int(year), int(month), int(day), int(hour), int(minute), int(second),
        microsecond, tzinfo=tzinfo,
    )


def _format_time(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=_UTC)
    text = (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
        f"T{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
    )
    if value.microsecond:
        text += "." + f"{value.microsecond:06d}".rstrip("0")
    offset = value.utcoffset() or timedelta(0)
    if offset == timedelta(0):
        return text + "Z"
    total_minutes = int(offset.total_seconds()) // 60
    sign = "-" if total_minutes < 0 else "+"
    hours, minutes = divmod(abs(total_minutes), 60)
    return f"{text}{sign}{hours:02d}:{minutes:02d}"


# --------------------------------------------------------------------------
# decoding helpers
# --------------------------------------------------------------------------


def _mapping(data: Any, what: str) -> Mapping[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ValueError(f"{what} must be a mapping, got {type(data).__name__}")
    return data


def _sequence(data: Any, what: str) -> list[Any]:
    if data is None:
        return []
    if isinstance(data, (str, bytes)) or not isinstance(data, (list, tuple)):
        raise ValueError(f"{what} must be a sequence, got {type(data).__name__}")
    return list(data)


def _str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list, tuple)):
        raise ValueError(f"expected a scalar value, got {type(value).__name__}")
    return str(value)


def _optional_str(value: Any) -> str | None:
    return None if value is None else _str(value)


def _optional_bool(value: Any) -> bool | None:
    if value is None:
        return None
    if not isinstance(value, bool):
        raise ValueError(f"expected a boolean, got {value!r}")
    return value


def _optional_duration(value: Any) -> float | None:
    return None if value is None else parse_duration(value)


def _str_list(value: Any, what: str) -> list[str]:
    return [_str(item) for item in _sequence(value, what)]


def _str_dict(value: Any, what: str) -> dict[str, str]:
    return {_str(key): _str(item) for key, item in _mapping(value, what).items()}


def _coerce(enum_type: type[_E], value: Any) -> _E | str:
    """Return the enum member for ``value``, or the raw string if it is unknown."""
    text = _str(value)
    try:
        return enum_type(text)
    except ValueError:
        return text


# --------------------------------------------------------------------------
# aliases
# --------------------------------------------------------------------------


@dataclass
class ContextAlias:
    """Alias names for contexts, keyed by context name."""

    context_to_alias_mapping: dict[str, str] | None = None

    @classmethod
    def from_dict(cls, data: Any) -> ContextAlias:
        raw = _mapping(data, "alias file").get("contextToAliasMapping")
        if raw is None:
            return cls()
        return cls(_str_dict(raw, "contextToAliasMapping"))

    def to_dict(self) -> dict[str, Any]:
        return {"contextToAliasMapping": dict(self.context_to_alias_mapping or {})}


# --------------------------------------------------------------------------
# hooks
# --------------------------------------------------------------------------


@dataclass
class HookExecution:
    """How often a hook runs; no interval means on demand only."""

    interval: float | None = None


@dataclass
class Hook:
    """A command run before searching for kubeconfigs."""

    name: str = ""
    type: HookType | str = ""
    path: str | None = None
    arguments: list[str] = field(default_factory=list)
    execution: HookExecution | None = None

    @classmethod
    def from_dict(cls, data: Any) -> Hook:
        raw = _mapping(data, "hook")
        execution = None
        if raw.get("execution") is not None:
            execution_raw = _mapping(raw["execution"], "hook execution")
            execution = HookExecution(_optional_duration(execution_raw.get("interval")))
        return cls(
            name=_str(raw.get("name")),
            type=_coerce(HookType, raw.get("type")),
            path=_optional_str(raw.get("path")),
            arguments=_str_list(raw.get("arguments"), "hook arguments"),
            execution=execution,
        )


@dataclass
class HookState:
    """When a hook was last run."""

    hook_name: str = ""
    last_execution_time: datetime = _ZERO_TIME

    @classmethod
    def from_dict(cls, data: Any) -> HookState:
        raw = _mapping(data, "hook state")
        return cls(
            hook_name=_str(raw.get("hookName")),
            last_execution_time=_parse_time(raw.get("lastExecutionTime")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "hookName": self.hook_name,
            "lastExecutionTime": _format_time(self.last_execution_time),
        }


# --------------------------------------------------------------------------
# configuration
# --------------------------------------------------------------------------


@dataclass
class KubeconfigPath:
    """A search path in the old configuration format."""

    path: str = ""
    store: StoreKind | str = ""


@dataclass
class ConfigOld:
    """The previous configuration file format, kept for upgrades."""

    kind: str = ""
    kubeconfig_name: str = ""
    kubeconfig_rediscovery_interval: float | None = None
    vault_api_address: str = ""
    hooks: list[Hook] = field(default_factory=list)
    kubeconfig_paths: list[KubeconfigPath] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> ConfigOld:
        raw = _mapping(data, "configuration")
        paths = []
        for item in _sequence(raw.get("kubeconfigPaths"), "kubeconfigPaths"):
            entry = _mapping(item, "kubeconfig path")
            paths.append(
                KubeconfigPath(
                    path=_str(entry.get("path")),
                    store=_coerce(StoreKind, entry.get("store")),
                )
            )
        return cls(
            kind=_str(raw.get("kind")),
            kubeconfig_name=_str(raw.get("kubeconfigName")),
            kubeconfig_rediscovery_interval=_optional_duration(
                raw.get("kubeconfigRediscoveryInterval")
            ),
            vault_api_address=_str(raw.get("vaultAPIAddress")),
            hooks=[Hook.from_dict(h) for h in _sequence(raw.get("hooks"), "hooks")],
            kubeconfig_paths=paths,
        )


@dataclass
class Cache:
    """Cache settings for a kubeconfig store."""

    kind: str = ""
    config: Any = None


@dataclass
class KubeconfigStore:
    """Configuration of one kubeconfig store."""

    kind: StoreKind | str = ""
    id: str | None = None
    kubeconfig_name: str | None = None
    paths: list[str] = field(default_factory=list)
    refresh_index_after: float | None = None
    required: bool | None = None
    show_prefix: bool | None = None
    config: Any = None
    cache: Cache | None = None

    @classmethod
    def from_dict(cls, data: Any) -> KubeconfigStore:
        raw = _mapping(data, "kubeconfig store")
        cache = None
        if raw.get("cache") is not None:
            cache_raw = _mapping(raw["cache"], "cache")
            cache = Cache(kind=_str(cache_raw.get("kind")), config=cache_raw.get("config"))
        return cls(
            kind=_coerce(StoreKind, raw.get("kind")),
            id=_optional_str(raw.get("id")),
            kubeconfig_name=_optional_str(raw.get("kubeconfigName")),
            paths=_str_list(raw.get("paths"), "paths"),
            refresh_index_after=_optional_duration(raw.get("refreshIndexAfter")),
            required=_optional_bool(raw.get("required")),
            show_prefix=_optional_bool(raw.get("showPrefix")),
            config=raw.get("config"),
            cache=cache,
        )


@dataclass
class Config:
    """The switch configuration file."""

    kind: str = ""
    version: str = ""
    kubeconfig_name: str | None = None
    show_preview: bool | None = None
    refresh_index_after: float | None = None
    hooks: list[Hook] = field(default_factory=list)
    kubeconfig_stores: list[KubeconfigStore] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> Config:
        raw = _mapping(data, "configuration")
        return cls(
            kind=_str(raw.get("kind")),
            version=_str(raw.get("version")),
            kubeconfig_name=_optional_str(raw.get("kubeconfigName")),
            show_preview=_optional_bool(raw.get("showPreview")),
            refresh_index_after=_optional_duration(raw.get("refreshIndexAfter")),
            hooks=[Hook.from_dict(h) for h in _sequence(raw.get("hooks"), "hooks")],
            kubeconfig_stores=[
                KubeconfigStore.from_dict(s)
                for s in _sequence(raw.get("kubeconfigStores"), "kubeconfigStores")
            ],
        )


@dataclass
class StoreConfigVault:
    """Vault store settings."""

    vault_api_address: str = ""


@dataclass
class StoreConfigGardener:
    """Gardener store settings."""

    gardener_api_kubeconfig_path: str = ""
    landscape_name: str | None = None


@dataclass
class GKEAuthentication:
    """How the GKE store authenticates against GCP."""

    authentication_type: GCPAuthenticationType | None = None
    api_key_file_path: str | None = None
    service_account_file_path: str | None = None


@dataclass
class StoreConfigGKE:
    """GKE store settings."""

    gke_authentication: GKEAuthentication | None = None
    gcp_account: str | None = None
    project_ids: list[str] = field(default_factory=list)


@dataclass
class StoreConfigAzure:
    """Azure store settings."""

    subscription_id: str | None = None
    endpoint: str | None = None
    resource_groups: list[str] = field(default_factory=list)


@dataclass
class StoreConfigEKS:
    """EKS store settings."""

    region: str | None = None
    profile: str = ""


@dataclass
class StoreConfigRancher:
    """Rancher store settings."""

    rancher_api_address: str = ""
    rancher_token: str = ""


# --------------------------------------------------------------------------
# index
# --------------------------------------------------------------------------


@dataclass
class Index:
    """Index of a kubeconfig store: context name to kubeconfig path."""

    kind: StoreKind | str = ""
    context_to_path_mapping: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> Index:
        raw = _mapping(data, "index")
        return cls(
            kind=_coerce(StoreKind, raw.get("kind")),
            context_to_path_mapping=_str_dict(
                raw.get("contextToPathMapping"), "contextToPathMapping"
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": str(self.kind),
            "contextToPathMapping": dict(self.context_to_path_mapping),
        }


@dataclass
class IndexState:
    """When the index of a kubeconfig store was last refreshed."""

    kind: StoreKind | str = ""
    last_update_time: datetime = _ZERO_TIME

    @classmethod
    def from_dict(cls, data: Any) -> IndexState:
        raw = _mapping(data, "index state")
        return cls(
            kind=_coerce(StoreKind, raw.get("kind")),
            last_update_time=_parse_time(raw.get("lastExecutionTime")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": str(self.kind),
            "lastExecutionTime": _format_time(self.last_update_time),
        }


# --------------------------------------------------------------------------
# sanitized kubeconfig
# --------------------------------------------------------------------------


@dataclass
class EnvMap:
    """An environment variable passed to an exec credential plugin."""

    name: str = ""
    value: str = ""


@dataclass
class AuthProvider:
    """An auth provider plugin reference."""

    name: str = ""
    config: dict[str, str] = field(default_factory=dict)


@dataclass
class ExecProvider:
    """An exec credential plugin reference."""

    api_version: str = ""
    args: list[str] = field(default_factory=list)
    command: str = ""
    env: list[EnvMap] = field(default_factory=list)


@dataclass
class User:
    """Authentication plugins of a user; credentials are never kept."""

    auth_provider: AuthProvider | None = None
    exec_provider: ExecProvider | None = None


@dataclass
class KubeUser:
    """A named user in a kubeconfig."""

    name: str = ""
    user: User = field(default_factory=User)


@dataclass
class Cluster:
    """Connection details of a cluster."""

    server: str = ""
    certificate_authority_data: str = ""
    insecure: bool = False


@dataclass
class KubeCluster:
    """A named cluster in a kubeconfig."""

    name: str = ""
    cluster: Cluster = field(default_factory=Cluster)


@dataclass
class Context:
    """The cluster and user a context refers to."""

    cluster: str = ""
    user: str = ""


@dataclass
class KubeContext:
    """A named context in a kubeconfig."""

    name: str = ""
    context: Context = field(default_factory=Context)


@dataclass
class TypeMeta:
    """Kind and API version of a document."""

    kind: str = ""
    api_version: str = ""


def _user_from_dict(data: Any) -> User:
    raw = _mapping(data, "user")
    auth_provider = None
    if raw.get("auth-provider") is not None:
        provider = _mapping(raw["auth-provider"], "auth-provider")
        auth_provider = AuthProvider(
            name=_str(provider.get("name")),
            config=_str_dict(provider.get("config"), "auth-provider config"),
        )
    exec_provider = None
    if raw.get("exec") is not None:
        provider = _mapping(raw["exec"], "exec")
        exec_provider = ExecProvider(
            api_version=_str(provider.get("apiVersion")),
            args=_str_list(provider.get("args"), "exec args"),
            command=_str(provider.get("command")),
            env=[
                EnvMap(
                    name=_str(_mapping(item, "env").get("name")),
                    value=_str(_mapping(item, "env").get("value")),
                )
                for item in _sequence(provider.get("env"), "exec env")
            ],
        )
    return User(auth_provider=auth_provider, exec_provider=exec_provider)


def _user_to_dict(user: User) -> dict[str, Any]:
    result: dict[str, Any] = {}
    if user.auth_provider is not None:
        result["auth-provider"] = {
            "config": dict(user.auth_provider.config),
            "name": user.auth_provider.name,
        }
    if user.exec_provider is not None:
        provider = user.exec_provider
        exec_dict: dict[str, Any] = {}
        if provider.api_version:
            exec_dict["apiVersion"] = provider.api_version
        exec_dict["args"] = list(provider.args)
        exec_dict["command"] = provider.command
        exec_dict["env"] = [{"name": e.name, "value": e.value} for e in provider.env]
        result["exec"] = exec_dict
    return result


def _cluster_to_dict(cluster: Cluster) -> dict[str, Any]:
    result: dict[str, Any] = {}
    if cluster.certificate_authority_data:
        result["certificate-authority-data"] = cluster.certificate_authority_data
    result["server"] = cluster.server
    if cluster.insecure:
        result["insecure-skip-tls-verify"] = True
    return result


@dataclass
class KubeConfig:
    """A kubeconfig without credentials, used for previews and context discovery."""

    type_meta: TypeMeta = field(default_factory=TypeMeta)
    current_context: str = ""
    contexts: list[KubeContext] = field(default_factory=list)
    clusters: list[KubeCluster] = field(default_factory=list)
    users: list[KubeUser] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> KubeConfig:
        raw = _mapping(data, "kubeconfig")
        contexts = []
        for item in _sequence(raw.get("contexts"), "contexts"):
            entry = _mapping(item, "context")
            body = _mapping(entry.get("context"), "context body")
            contexts.append(
                KubeContext(
                    name=_str(entry.get("name")),
                    context=Context(
                        cluster=_str(body.get("cluster")), user=_str(body.get("user"))
                    ),
                )
            )
        clusters = []
        for item in _sequence(raw.get("clusters"), "clusters"):
            entry = _mapping(item, "cluster")
            body = _mapping(entry.get("cluster"), "cluster body")
            insecure = body.get("insecure-skip-tls-verify")
            clusters.append(
                KubeCluster(
                    name=_str(entry.get("name")),
                    cluster=Cluster(
                        server=_str(body.get("server")),
                        certificate_authority_data=_str(
                            body.get("certificate-authority-data")
                        ),
                        insecure=bool(_optional_bool(insecure)),
                    ),
                )
            )
        users = []
        for item in _sequence(raw.get("users"), "users"):
            entry = _mapping(item, "user entry")
            users.append(
                KubeUser(name=_str(entry.get("name")), user=_user_from_dict(entry.get("user")))
            )
        return cls(
            type_meta=TypeMeta(
                kind=_str(raw.get("kind")), api_version=_str(raw.get("apiVersion"))
            ),
            current_context=_str(raw.get("current-context")),
            contexts=contexts,
            clusters=clusters,
            users=users,
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.type_meta.kind:
            result["kind"] = self.type_meta.kind
        if self.type_meta.api_version:
            result["apiVersion"] = self.type_meta.api_version
        result["current-context"] = self.current_context
        result["contexts"] = [
            {
                "name": c.name,
                "context": {"cluster": c.context.cluster, "user": c.context.user},
            }
            for c in self.contexts
        ]
        result["clusters"] = [
            {"name": c.name, "cluster": _cluster_to_dict(c.cluster)} for c in self.clusters
        ]
        result["users"] = [{"name": u.name, "user": _user_to_dict(u.user)} for u in self.users]
        return result