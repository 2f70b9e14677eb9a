"""Logtail collection configs, plugin inputs and logging settings, with their JSON forms."""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from dataclasses import MISSING, dataclass, field, fields
from typing import Any

INPUT_TYPE_SYSLOG = "syslog"
INPUT_TYPE_STREAMLOG = "streamlog"
INPUT_TYPE_PLUGIN = "plugin"
INPUT_TYPE_FILE = "file"

LOG_FILE_TYPE_APSARA_LOG = "apsara_log"
LOG_FILE_TYPE_REGEX_LOG = "common_reg_log"
LOG_FILE_TYPE_JSON_LOG = "json_log"
LOG_FILE_TYPE_DELIMITER_LOG = "delimiter_log"

OUTPUT_TYPE_LOG_SERVICE = "LogService"

MERGE_TYPE_TOPIC = "topic"
MERGE_TYPE_LOGSTORE = "logstore"

# Any other topic format is a regex over the file path.
TOPIC_FORMAT_NONE = "none"
TOPIC_FORMAT_MACHINE_GROUP = "group_topic"

PLUGIN_INPUT_TYPE_DOCKER_STDOUT = "service_docker_stdout"
PLUGIN_INPUT_TYPE_CANAL = "service_canal"

LOGGING_URI = "logging"

_INPUT_TYPES = frozenset(
    {INPUT_TYPE_SYSLOG, INPUT_TYPE_STREAMLOG, INPUT_TYPE_PLUGIN, INPUT_TYPE_FILE}
)


class NoConfigFieldError(LookupError):
    """The config has no field with the requested name."""

    def __init__(self, message: str = "no this config field") -> None:
        super().__init__(message)


class InvalidTypeError(TypeError):
    """The config detail is not a JSON object."""

    def __init__(self, message: str = "invalid config type") -> None:
        super().__init__(message)


# --- decoding helpers -------------------------------------------------------

Decoder = Callable[[Any], Any]


def _decode_str(value: Any) -> str:
    if isinstance(value, str):
        return value
    raise ValueError(f"expected a string, got {value!r}")


def _decode_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"expected a number, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise ValueError(f"expected an integer, got {value!r}")


def _decode_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    raise ValueError(f"expected a boolean, got {value!r}")


def _decode_any(value: Any) -> Any:
    return value


def _decode_list(item: Decoder) -> Decoder:
    def decode(value: Any) -> list:
        if not isinstance(value, list):
            raise ValueError(f"expected a list, got {value!r}")
        return [item(v) for v in value]

    return decode


def _decode_map(item: Decoder) -> Decoder:
    def decode(value: Any) -> dict:
        if not isinstance(value, Mapping):
            raise ValueError(f"expected an object, got {value!r}")
        return {_decode_str(k): item(v) for k, v in value.items()}

    return decode


def _decode_obj(cls: type) -> Decoder:
    def decode(value: Any) -> Any:
        if value is None:
            return cls()
        return cls.from_dict(value)

    return decode


def _f(
    json_name: str,
    decode: Decoder,
    *,
    default: Any = MISSING,
    factory: Any = MISSING,
    omitempty: bool = False,
) -> Any:
    meta = {"json": json_name, "decode": decode, "omitempty": omitempty}
    if factory is not MISSING:
        return field(default_factory=factory, metadata=meta)
    return field(default=default, metadata=meta)


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, list, tuple, dict)):
        return len(value) == 0
    if isinstance(value, bool):
        return not value
    if isinstance(value, (int, float)):
        return value == 0
    return False


def _encode(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, Mapping):
        return {k: _encode(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_encode(v) for v in value]
    return value


def _json_default(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    raise TypeError(f"cannot encode {type(value).__name__}")


def _to_dict(obj: Any) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for f in fields(obj):
        value = getattr(obj, f.name)
        if f.metadata["omitempty"] and _is_empty(value):
            continue
        out[f.metadata["json"]] = _encode(value)
    return out


def _from_dict(cls: type, data: Any) -> Any:
    if not isinstance(data, Mapping):
        raise ValueError(f"expected an object for {cls.__name__}, got {data!r}")
    folded: dict[str, str] = {}
    for key in data:
        folded.setdefault(str(key).lower(), key)
    kwargs: dict[str, Any] = {}
    for f in fields(cls):
        name = f.metadata["json"]
        if name in data:
            raw = data[name]
        elif name.lower() in folded:
            raw = data[folded[name.lower()]]
        else:
            continue
        if raw is None:
            continue
        kwargs[f.name] = f.metadata["decode"](raw)
    return cls(**kwargs)


class _JsonModel:
    """Maps dataclass fields to JSON keys declared in field metadata."""

    def to_dict(self) -> dict[str, Any]:
        return _to_dict(self)

    @classmethod
    def from_dict(cls, data: Any):
        return _from_dict(cls, data)


_STR_LIST = _decode_list(_decode_str)
_STR_MAP = _decode_map(_decode_str)
_ANY_MAP = _decode_map(_decode_any)


# --- input details ----------------------------------------------------------


@dataclass
class InputDetail(_JsonModel):
    """Legacy flat input detail; kept for older configs."""

    log_type: str = _f("logType", _decode_str, default="")
    log_path: str = _f("logPath", _decode_str, default="")
    file_pattern: str = _f("filePattern", _decode_str, default="")
    local_storage: bool = _f("localStorage", _decode_bool, default=False)
    time_key: str = _f("timeKey", _decode_str, default="")
    time_format: str = _f("timeFormat", _decode_str, default="")
    log_begin_regex: str = _f("logBeginRegex", _decode_str, default="")
    regex: str = _f("regex", _decode_str, default="")
    keys: list[str] = _f("key", _STR_LIST, factory=list)
    filter_keys: list[str] = _f("filterKey", _STR_LIST, factory=list)
    filter_regex: list[str] = _f("filterRegex", _STR_LIST, factory=list)
    topic_format: str = _f("topicFormat", _decode_str, default="")
    separator: str = _f("separator", _decode_str, default="")
    auto_extend: bool = _f("autoExtend", _decode_bool, default=False)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON object form."""
        return _to_dict(self)

    @classmethod
    def from_dict(cls, data: Any):
        """Build from a decoded JSON object."""
        return _from_dict(cls, data)


@dataclass
class SensitiveKey(_JsonModel):
    """A key whose value is masked before upload."""

    key: str = _f("key", _decode_str, default="")
    type: str = _f("type", _decode_str, default="")
    regex_begin: str = _f("regex_begin", _decode_str, default="")
    regex_content: str = _f("regex_content", _decode_str, default="")
    all: bool = _f("all", _decode_bool, default=False)
    const_string: str = _f("const", _decode_str, default="")

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON object form."""
        return _to_dict(self)

    @classmethod
    def from_dict(cls, data: Any):
        """Build from a decoded JSON object."""
        return _from_dict(cls, data)


@dataclass
class PluginInputItem(_JsonModel):
    """One plugin stage: its type and its free-form detail."""

    type: str = _f("type", _decode_str, default="")
    detail: Any = _f("detail", _decode_any, default=None)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON object form."""
        return _to_dict(self)

    @classmethod
    def from_dict(cls, data: Any):
        """Build from a decoded JSON object."""
        return _from_dict(cls, data)


def _decode_items(value: Any) -> list[PluginInputItem]:
    if not isinstance(value, list):
        raise ValueError(f"expected a list, got {value!r}")
    return [PluginInputItem.from_dict(v) for v in value if v is not None]


@dataclass
class LogConfigPluginInput(_JsonModel):
    """Plugin pipeline: inputs, processors, aggregators and flushers."""

    inputs: list[PluginInputItem] = _f("inputs", _decode_items, factory=list)
    processors: list[PluginInputItem] = _f(
        "processors", _decode_items, factory=list, omitempty=True
    )
    aggregators: list[PluginInputItem] = _f(
        "aggregators", _decode_items, factory=list, omitempty=True
    )
    flushers: list[PluginInputItem] = _f(
        "flushers", _decode_items, factory=list, omitempty=True
    )

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON object form."""
        return _to_dict(self)

    @classmethod
    def from_dict(cls, data: Any):
        """Build from a decoded JSON object."""
        return _from_dict(cls, data)


@dataclass
class CommonConfigInputDetail(_JsonModel):
    """Settings shared by every input detail."""

    local_storage: bool = _f("localStorage", _decode_bool, default=False)
    filter_keys: list[str] = _f("filterKey", _STR_LIST, factory=list, omitempty=True)
    filter_regex: list[str] = _f(
        "filterRegex", _STR_LIST, factory=list, omitempty=True
    )
    shard_hash_key: list[str] = _f(
        "shardHashKey", _STR_LIST, factory=list, omitempty=True
    )
    enable_tag: bool = _f("enableTag", _decode_bool, default=False)
    enable_raw_log: bool = _f("enableRawLog", _decode_bool, default=False)
    max_send_rate: int = _f("maxSendRate", _decode_int, default=0)
    send_rate_expire: int = _f("sendRateExpire", _decode_int, default=0)
    sensitive_keys: list[SensitiveKey] = _f(
        "sensitive_keys",
        _decode_list(_decode_obj(SensitiveKey)),
        factory=list,
        omitempty=True,
    )
    merge_type: str = _f("mergeType", _decode_str, default="", omitempty=True)
    delay_alarm_bytes: int = _f(
        "delayAlarmBytes", _decode_int, default=0, omitempty=True
    )
    adjust_time_zone: bool = _f("adjustTimezone", _decode_bool, default=False)
    log_time_zone: str = _f("logTimezone", _decode_str, default="", omitempty=True)
    priority: int = _f("priority", _decode_int, default=0, omitempty=True)

    @classmethod
    def _defaults(cls) -> dict[str, Any]:
        return {
            "local_storage": True,
            "enable_tag": True,
            "max_send_rate": -1,
            "merge_type": MERGE_TYPE_TOPIC,
        }

    @classmethod
    def with_defaults(cls):
        """Return an instance carrying the service's recommended defaults."""
        return cls(**cls._defaults())

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON object form."""
        return _to_dict(self)

    @classmethod
    def from_dict(cls, data: Any):
        """Build from a decoded JSON object."""
        return _from_dict(cls, data)


@dataclass
class LocalFileConfigInputDetail(CommonConfigInputDetail):
    """Settings shared by every file input."""

    log_type: str = _f("logType", _decode_str, default="")
    log_path: str = _f("logPath", _decode_str, default="")
    file_pattern: str = _f("filePattern", _decode_str, default="")
    time_format: str = _f("timeFormat", _decode_str, default="")
    topic_format: str = _f("topicFormat", _decode_str, default="", omitempty=True)
    preserve: bool = _f("preserve", _decode_bool, default=False)
    preserve_depth: int = _f("preserveDepth", _decode_int, default=0)
    file_encoding: str = _f("fileEncoding", _decode_str, default="", omitempty=True)
    discard_unmatch: bool = _f("discardUnmatch", _decode_bool, default=False)
    max_depth: int = _f("maxDepth", _decode_int, default=0)
    tail_existed: bool = _f("tailExisted", _decode_bool, default=False)
    discard_non_utf8: bool = _f("discardNonUtf8", _decode_bool, default=False)
    delay_skip_bytes: int = _f("delaySkipBytes", _decode_int, default=0)
    is_docker_file: bool = _f("dockerFile", _decode_bool, default=False)
    docker_include_label: dict[str, str] = _f(
        "dockerIncludeLabel", _STR_MAP, factory=dict, omitempty=True
    )
    docker_exclude_label: dict[str, str] = _f(
        "dockerExcludeLabel", _STR_MAP, factory=dict, omitempty=True
    )
    docker_include_env: dict[str, str] = _f(
        "dockerIncludeEnv", _STR_MAP, factory=dict, omitempty=True
    )
    docker_exclude_env: dict[str, str] = _f(
        "dockerExcludeEnv", _STR_MAP, factory=dict, omitempty=True
    )
    plugin_detail: dict[str, Any] = _f("plugin", _ANY_MAP, factory=dict, omitempty=True)
    advanced: dict[str, Any] = _f("advanced", _ANY_MAP, factory=dict, omitempty=True)

    @classmethod
    def _defaults(cls) -> dict[str, Any]:
        return {
            **super()._defaults(),
            "file_encoding": "utf8",
            "max_depth": 100,
            "topic_format": TOPIC_FORMAT_NONE,
            "preserve": True,
            "discard_unmatch": True,
        }


@dataclass
class ApsaraLogConfigInputDetail(LocalFileConfigInputDetail):
    """Apsara-format file input."""

    log_begin_regex: str = _f("logBeginRegex", _decode_str, default="")

    @classmethod
    def _defaults(cls) -> dict[str, Any]:
        return {
            **super()._defaults(),
            "log_begin_regex": ".*",
            "log_type": LOG_FILE_TYPE_APSARA_LOG,
        }


@dataclass
class RegexConfigInputDetail(LocalFileConfigInputDetail):
    """File input parsed with a regular expression."""

    key: list[str] = _f("key", _STR_LIST, factory=list)
    log_begin_regex: str = _f("logBeginRegex", _decode_str, default="")
    regex: str = _f("regex", _decode_str, default="")
    customized_fields: str = _f(
        "customizedFields", _decode_str, default="", omitempty=True
    )

    @classmethod
    def _defaults(cls) -> dict[str, Any]:
        return {
            **super()._defaults(),
            "log_begin_regex": ".*",
            "regex": "(.*)",
            "log_type": LOG_FILE_TYPE_REGEX_LOG,
        }


@dataclass
class JSONConfigInputDetail(LocalFileConfigInputDetail):
    """File input holding one JSON object per line."""

    time_key: str = _f("timeKey", _decode_str, default="")

    @classmethod
    def _defaults(cls) -> dict[str, Any]:
        return {**super()._defaults(), "log_type": LOG_FILE_TYPE_JSON_LOG}


@dataclass
class DelimiterConfigInputDetail(LocalFileConfigInputDetail):
    """File input split on a separator."""

    separator: str = _f("separator", _decode_str, default="")
    quote: str = _f("quote", _decode_str, default="")
    key: list[str] = _f("key", _STR_LIST, factory=list)
    time_key: str = _f("timeKey", _decode_str, default="")
    auto_extend: bool = _f("autoExtend", _decode_bool, default=False)
    accept_no_enough_keys: bool = _f(
        "acceptNoEnoughKeys", _decode_bool, default=False
    )

    @classmethod
    def _defaults(cls) -> dict[str, Any]:
        return {
            **super()._defaults(),
            "quote": "\u0001",
            "auto_extend": True,
            "log_type": LOG_FILE_TYPE_DELIMITER_LOG,
        }


@dataclass
class PluginLogConfigInputDetail(CommonConfigInputDetail):
    """Plugin input such as docker stdout or binlog."""

    plugin_detail: LogConfigPluginInput = _f(
        "plugin", _decode_obj(LogConfigPluginInput), factory=LogConfigPluginInput
    )


@dataclass
class StreamLogConfigInputDetail(CommonConfigInputDetail):
    """Syslog stream input."""

    tag: str = _f("tag", _decode_str, default="")


@dataclass
class OutputDetail(_JsonModel):
    """Where collected logs are written."""

    project_name: str = _f("projectName", _decode_str, default="")
    log_store_name: str = _f("logstoreName", _decode_str, default="")

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON object form."""
        return _to_dict(self)

    @classmethod
    def from_dict(cls, data: Any):
        """Build from a decoded JSON object."""
        return _from_dict(cls, data)


@dataclass
class LogConfig(_JsonModel):
    """A logtail collection config.

    ``input_detail`` is either a detail object or, after decoding, a plain dict
    that the ``convert_to_*`` functions turn into a typed detail.
    """

    name: str = _f("configName", _decode_str, default="")
    log_sample: str = _f("logSample", _decode_str, default="")
    input_type: str = _f("inputType", _decode_str, default="")
    input_detail: Any = _f("inputDetail", _decode_any, default=None)
    output_type: str = _f("outputType", _decode_str, default="")
    output_detail: OutputDetail = _f(
        "outputDetail", _decode_obj(OutputDetail), factory=OutputDetail
    )
    create_time: int = _f("CreateTime", _decode_int, default=0)
    last_modify_time: int = _f(
        "lastModifyTime", _decode_int, default=0, omitempty=True
    )

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON object form."""
        return _to_dict(self)

    @classmethod
    def from_dict(cls, data: Any):
        """Build from a decoded JSON object."""
        return _from_dict(cls, data)


# --- plugin details ---------------------------------------------------------


@dataclass
class ConfigPluginCanal(_JsonModel):
    """Detail of the MySQL binlog (canal) plugin."""

    host: str = _f("Host", _decode_str, default="127.0.0.1")
    port: int = _f("Port", _decode_int, default=3306)
    user: str = _f("User", _decode_str, default="root")
    password: str = _f("Password", _decode_str, default="")
    flavor: str = _f("Flavor", _decode_str, default="mysql")
    server_id: int = _f("ServerID", _decode_int, default=1205)
    include_tables: list[str] = _f("IncludeTables", _STR_LIST, factory=list)
    exclude_tables: list[str] = _f("ExcludeTables", _STR_LIST, factory=list)
    start_bin_name: str = _f("StartBinName", _decode_str, default="")
    start_bin_log_pos: int = _f("StartBinLogPos", _decode_int, default=0)
    heart_beat_period: int = _f("HeartBeatPeriod", _decode_int, default=60)
    read_timeout: int = _f("ReadTimeout", _decode_int, default=90)
    enable_ddl: bool = _f("EnableDDL", _decode_bool, default=False)
    enable_xid: bool = _f("EnableXID", _decode_bool, default=False)
    enable_gtid: bool = _f("EnableGTID", _decode_bool, default=True)
    enable_insert: bool = _f("EnableInsert", _decode_bool, default=True)
    enable_update: bool = _f("EnableUpdate", _decode_bool, default=True)
    enable_delete: bool = _f("EnableDelete", _decode_bool, default=True)
    text_to_string: bool = _f("TextToString", _decode_bool, default=False)
    start_from_begining: bool = _f("StartFromBegining", _decode_bool, default=False)
    charset: str = _f("Charset", _decode_str, default="utf8")

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON object form."""
        return _to_dict(self)


@dataclass
class ConfigPluginDockerStdout(_JsonModel):
    """Detail of the docker stdout plugin."""

    include_label: dict[str, str] = _f("IncludeLabel", _STR_MAP, factory=dict)
    exclude_label: dict[str, str] = _f("ExcludeLabel", _STR_MAP, factory=dict)
    include_env: dict[str, str] = _f("IncludeEnv", _STR_MAP, factory=dict)
    exclude_env: dict[str, str] = _f("ExcludeEnv", _STR_MAP, factory=dict)
    flush_interval_ms: int = _f("FlushIntervalMs", _decode_int, default=3000)
    timeout_ms: int = _f("TimeoutMs", _decode_int, default=3000)
    begin_line_regex: str = _f("BeginLineRegex", _decode_str, default="")
    begin_line_timeout_ms: int = _f("BeginLineTimeoutMs", _decode_int, default=3000)
    begin_line_check_length: int = _f(
        "BeginLineCheckLength", _decode_int, default=10 * 1024
    )
    max_log_size: int = _f("MaxLogSize", _decode_int, default=512 * 1024)
    stdout: bool = _f("Stdout", _decode_bool, default=True)
    stderr: bool = _f("Stderr", _decode_bool, default=True)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON object form."""
        return _to_dict(self)


# --- service logging --------------------------------------------------------


@dataclass
class LoggingDetail(_JsonModel):
    """One kind of service log and the logstore receiving it."""

    type: str = _f("type", _decode_str, default="")
    logstore: str = _f("logstore", _decode_str, default="")

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON object form."""
        return _to_dict(self)

    @classmethod
    def from_dict(cls, data: Any):
        """Build from a decoded JSON object."""
        return _from_dict(cls, data)


@dataclass
class Logging(_JsonModel):
    """Service logging settings of a project."""

    project: str = _f("loggingProject", _decode_str, default="")
    logging_details: list[LoggingDetail] = _f(
        "loggingDetails", _decode_list(_decode_obj(LoggingDetail)), factory=list
    )

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON object form."""
        return _to_dict(self)

    @classmethod
    def from_dict(cls, data: Any):
        """Build from a decoded JSON object."""
        return _from_dict(cls, data)


# --- functions --------------------------------------------------------------


def is_valid_input_type(input_type: str) -> bool:
    """Tell whether ``input_type`` is one the service accepts."""
    return input_type in _INPUT_TYPES


def create_plugin_input_item(type_: str, detail: Any) -> PluginInputItem:
    """Build a plugin stage of the given type."""
    return PluginInputItem(type=type_, detail=detail)


def get_file_config_input_detail_type(detail: Any) -> str | None:
    """Return the ``logType`` of a decoded file detail, or None if it has none."""
    if isinstance(detail, Mapping) and "logType" in detail:
        log_type = detail["logType"]
        if not isinstance(log_type, str):
            raise TypeError(f"logType must be a string, got {log_type!r}")
        return log_type
    return None


def _convert(detail: Any, cls: type, accept: Callable[[Mapping], bool]):
    if not isinstance(detail, Mapping) or not accept(detail):
        return None
    try:
        normalized = json.loads(json.dumps(detail, default=_json_default))
        return cls.from_dict(normalized)
    except (TypeError, ValueError):
        return None


def _log_type_is(log_type: str) -> Callable[[Mapping], bool]:
    return lambda d: "logType" in d and d["logType"] == log_type


def convert_to_input_detail(detail: Any) -> InputDetail | None:
    """Decode a regex file detail into the legacy flat form."""
    return _convert(detail, InputDetail, _log_type_is(LOG_FILE_TYPE_REGEX_LOG))


def convert_to_apsara_log_config_input_detail(
    detail: Any,
) -> ApsaraLogConfigInputDetail | None:
    """Decode an apsara file detail, or return None if it is not one."""
    return _convert(
        detail, ApsaraLogConfigInputDetail, _log_type_is(LOG_FILE_TYPE_APSARA_LOG)
    )


def convert_to_regex_config_input_detail(detail: Any) -> RegexConfigInputDetail | None:
    """Decode a regex file detail, or return None if it is not one."""
    return _convert(detail, RegexConfigInputDetail, _log_type_is(LOG_FILE_TYPE_REGEX_LOG))


def convert_to_json_config_input_detail(detail: Any) -> JSONConfigInputDetail | None:
    """Decode a JSON file detail, or return None if it is not one."""
    return _convert(detail, JSONConfigInputDetail, _log_type_is(LOG_FILE_TYPE_JSON_LOG))


def convert_to_delimiter_config_input_detail(
    detail: Any,
) -> DelimiterConfigInputDetail | None:
    """Decode a delimiter file detail, or return None if it is not one."""
    return _convert(
        detail, DelimiterConfigInputDetail, _log_type_is(LOG_FILE_TYPE_DELIMITER_LOG)
    )


def convert_to_plugin_log_config_input_detail(
    detail: Any,
) -> PluginLogConfigInputDetail | None:
    """Decode a plugin detail: one with ``plugin`` and without ``logType``."""
    return _convert(
        detail,
        PluginLogConfigInputDetail,
        lambda d: "plugin" in d and "logType" not in d,
    )


def convert_to_stream_log_config_input_detail(
    detail: Any,
) -> StreamLogConfigInputDetail | None:
    """Decode a stream detail: one with a ``tag``."""
    return _convert(detail, StreamLogConfigInputDetail, lambda d: "tag" in d)


def add_necessary_local_file_input_config_field(detail: dict[str, Any]) -> None:
    """Fill missing fields every file input needs."""
    detail.setdefault("fileEncoding", "utf8")
    detail.setdefault("maxDepth", 100)
    detail.setdefault("topicFormat", TOPIC_FORMAT_NONE)
    detail.setdefault("preserve", True)
    detail.setdefault("discardUnmatch", True)
    detail.setdefault("timeFormat", "")


def add_necessary_apsara_log_input_config_field(detail: dict[str, Any]) -> None:
    """Fill missing fields an apsara input needs."""
    detail.setdefault("logBeginRegex", ".*")


def add_necessary_regex_log_input_config_field(detail: dict[str, Any]) -> None:
    """Fill missing fields a regex input needs."""
    detail.setdefault("logBeginRegex", ".*")
    detail.setdefault("regex", "(.*)")
    detail.setdefault("key", ["content"])


def add_necessary_json_log_input_config_field(detail: dict[str, Any]) -> None:
    """Fill missing fields a JSON input needs."""
    detail.setdefault("timeKey", "")


def add_necessary_delimiter_log_input_config_field(detail: dict[str, Any]) -> None:
    """Fill missing fields a delimiter input needs."""
    detail.setdefault("quote", "\u0001")
    detail.setdefault("autoExtend", True)
    detail.setdefault("timeKey", "")


_TYPE_FILLERS: dict[str, Callable[[dict[str, Any]], None]] = {
    LOG_FILE_TYPE_APSARA_LOG: add_necessary_apsara_log_input_config_field,
    LOG_FILE_TYPE_REGEX_LOG: add_necessary_regex_log_input_config_field,
    LOG_FILE_TYPE_JSON_LOG: add_necessary_json_log_input_config_field,
    LOG_FILE_TYPE_DELIMITER_LOG: add_necessary_delimiter_log_input_config_field,
}


def add_necessary_input_config_field(detail: dict[str, Any]) -> None:
    """Fill missing common fields and, for file inputs, their type's fields."""
    detail.setdefault("localStorage", True)
    detail.setdefault("enableTag", True)
    detail.setdefault("maxSendRate", -1)
    detail.setdefault("mergeType", MERGE_TYPE_TOPIC)
    log_type = detail.get("logType")
    if isinstance(log_type, str):
        add_necessary_local_file_input_config_field(detail)
        filler = _TYPE_FILLERS.get(log_type)
        if filler is not None:
            filler(detail)


def update_input_config_field(detail: Any, key: str, val: Any) -> None:
    """Replace an existing field of a decoded detail."""
    if not isinstance(detail, dict):
        raise InvalidTypeError()
    if key not in detail:
        raise NoConfigFieldError()
    detail[key] = val