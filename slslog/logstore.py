"""Logstores: their settings, shards, raw log upload, cursors, pulls and indexes."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from .compression import CompressType, compress_block, decompress_block
from .transport import (
    BadResponseError,
    ClientError,
    Response,
    ServiceError,
    SlsError,
    error_from_response,
)

INDEX_NOT_EXIST_CODE = "IndexConfigNotExist"


class _Requester(Protocol):
    def request(
        self,
        method: str,
        uri: str,
        headers: Mapping[str, str],
        body: bytes | None,
    ) -> Response: ...


def _lookup(data: Mapping[str, Any], key: str, default: Any) -> Any:
    """Find ``key`` in ``data``, matching case-insensitively as a fallback."""
    if key in data:
        value = data[key]
    else:
        lowered = key.lower()
        for candidate, value in data.items():
            if str(candidate).lower() == lowered:
                break
        else:
            return default
    return default if value is None else value


def _require_mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValueError(f"expected an object for {what}, got {data!r}")
    return data


@dataclass
class Shard:
    """One shard of a logstore."""

    shard_id: int = 0
    status: str = ""
    inclusive_begin_key: str = ""
    exclusive_end_key: str = ""
    create_time: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> "Shard":
        data = _require_mapping(data, "Shard")
        return cls(
            shard_id=int(_lookup(data, "shardID", 0)),
            status=str(_lookup(data, "status", "")),
            inclusive_begin_key=str(_lookup(data, "inclusiveBeginKey", "")),
            exclusive_end_key=str(_lookup(data, "exclusiveEndKey", "")),
            create_time=int(_lookup(data, "createTime", 0)),
        )


@dataclass
class EncryptUserCmkConf:
    """A customer-managed key used to encrypt a logstore."""

    cmk_key_id: str = ""
    arn: str = ""
    region_id: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"cmk_key_id": self.cmk_key_id, "arn": self.arn, "region_id": self.region_id}

    @classmethod
    def from_dict(cls, data: Any) -> "EncryptUserCmkConf":
        data = _require_mapping(data, "EncryptUserCmkConf")
        return cls(
            cmk_key_id=str(_lookup(data, "cmk_key_id", "")),
            arn=str(_lookup(data, "arn", "")),
            region_id=str(_lookup(data, "region_id", "")),
        )


@dataclass
class EncryptConf:
    """Encryption settings of a logstore."""

    enable: bool = False
    encrypt_type: str = ""
    user_cmk_info: EncryptUserCmkConf | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"enable": self.enable, "encrypt_type": self.encrypt_type}
        if self.user_cmk_info is not None:
            out["user_cmk_info"] = self.user_cmk_info.to_dict()
        return out

    @classmethod
    def from_dict(cls, data: Any) -> "EncryptConf":
        data = _require_mapping(data, "EncryptConf")
        info = _lookup(data, "user_cmk_info", None)
        return cls(
            enable=bool(_lookup(data, "enable", False)),
            encrypt_type=str(_lookup(data, "encrypt_type", "")),
            user_cmk_info=EncryptUserCmkConf.from_dict(info) if info is not None else None,
        )


def _encode_index(index: Any) -> bytes:
    if hasattr(index, "to_dict"):
        payload = index.to_dict()
    elif isinstance(index, Mapping):
        payload = dict(index)
    else:
        raise TypeError(f"cannot encode index of type {type(index).__name__}")
    return json.dumps(payload).encode("utf-8")


def _json_headers(body: bytes) -> dict[str, str]:
    return {
        "x-log-bodyrawsize": str(len(body)),
        "Content-Type": "application/json",
        "Accept-Encoding": "deflate",
    }


def _read_error(response: Response, fallback: str) -> SlsError:
    """Error of a failed pull request; undecodable bodies give ``fallback``."""
    error = error_from_response(response)
    if isinstance(error, BadResponseError):
        return ClientError(fallback)
    return error


@dataclass
class LogStore:
    """A logstore of a project and the operations on it."""

    name: str = ""
    ttl: int = 0
    shard_count: int = 0
    web_tracking: bool = False
    auto_split: bool = False
    max_split_shard: int = 0
    append_meta: bool = False
    telemetry_type: str = ""
    hot_ttl: int = 0
    mode: str = ""
    create_time: int = 0
    last_modify_time: int = 0
    encrypt_conf: EncryptConf | None = None
    product_type: str = ""
    project: Any = field(default=None, repr=False, compare=False)
    put_log_compress_type: CompressType = field(default=CompressType.LZ4, compare=False)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "logstoreName": self.name,
            "ttl": self.ttl,
            "shardCount": self.shard_count,
            "enable_tracking": self.web_tracking,
            "autoSplit": self.auto_split,
            "maxSplitShard": self.max_split_shard,
            "appendMeta": self.append_meta,
            "telemetryType": self.telemetry_type,
        }
        if self.hot_ttl:
            out["hot_ttl"] = self.hot_ttl
        if self.mode:
            out["mode"] = self.mode
        if self.create_time:
            out["createTime"] = self.create_time
        if self.last_modify_time:
            out["lastModifyTime"] = self.last_modify_time
        if self.encrypt_conf is not None:
            out["encrypt_conf"] = self.encrypt_conf.to_dict()
        if self.product_type:
            out["productType"] = self.product_type
        return out

    @classmethod
    def from_dict(cls, data: Any, project: Any = None) -> "LogStore":
        data = _require_mapping(data, "LogStore")
        encrypt = _lookup(data, "encrypt_conf", None)
        return cls(
            name=str(_lookup(data, "logstoreName", "")),
            ttl=int(_lookup(data, "ttl", 0)),
            shard_count=int(_lookup(data, "shardCount", 0)),
            web_tracking=bool(_lookup(data, "enable_tracking", False)),
            auto_split=bool(_lookup(data, "autoSplit", False)),
            max_split_shard=int(_lookup(data, "maxSplitShard", 0)),
            append_meta=bool(_lookup(data, "appendMeta", False)),
            telemetry_type=str(_lookup(data, "telemetryType", "")),
            hot_ttl=int(_lookup(data, "hot_ttl", 0)),
            mode=str(_lookup(data, "mode", "")),
            create_time=int(_lookup(data, "createTime", 0)),
            last_modify_time=int(_lookup(data, "lastModifyTime", 0)),
            encrypt_conf=EncryptConf.from_dict(encrypt) if encrypt is not None else None,
            product_type=str(_lookup(data, "productType", "")),
            project=project,
        )

    # --- plumbing -----------------------------------------------------------

    def _send(
        self, method: str, uri: str, headers: Mapping[str, str], body: bytes | None = None
    ) -> Response:
        if self.project is None:
            raise ClientError(f"logstore {self.name!r} is not bound to a project")
        requester: _Requester = self.project
        return requester.request(method, uri, headers, body)

    def _call(
        self, method: str, uri: str, headers: Mapping[str, str], body: bytes | None = None
    ) -> Response:
        response = self._send(method, uri, headers, body)
        if response.status_code != 200:
            raise error_from_response(response)
        return response

    # --- operations ---------------------------------------------------------

    def set_put_log_compress_type(self, compress_type: int) -> None:
        """Choose the body compression used when putting logs."""
        try:
            self.put_log_compress_type = CompressType(compress_type)
        except ValueError:
            raise ValueError(f"invalid compress type {compress_type!r}") from None

    def list_shards(self) -> list[Shard]:
        """Return the shards of this logstore."""
        response = self._call(
            "GET", f"/logstores/{self.name}/shards", {"x-log-bodyrawsize": "0"}
        )
        try:
            data = response.json()
            if not isinstance(data, list):
                raise ValueError("expected a list of shards")
            return [Shard.from_dict(item) for item in data]
        except (ValueError, TypeError, UnicodeDecodeError):
            raise BadResponseError(
                response.body.decode("utf-8", errors="replace"),
                response.headers,
                response.status_code,
            ) from None

    def put_raw_log(self, raw_log_data: bytes) -> None:
        """Upload an already serialised log group; empty data sends nothing."""
        if not raw_log_data:
            return
        raw = bytes(raw_log_data)
        headers = {
            "x-log-bodyrawsize": str(len(raw)),
            "Content-Type": "application/x-protobuf",
        }
        if self.put_log_compress_type is CompressType.LZ4:
            body = compress_block(raw)
            headers["x-log-compresstype"] = "lz4"
        else:
            body = raw
        self._call("POST", f"/logstores/{self.name}", headers, body)

    def get_cursor(self, shard_id: int, from_: str) -> str:
        """Return the cursor of a shard at ``from_``: a unix time, "begin" or "end"."""
        uri = f"/logstores/{self.name}/shards/{shard_id}?type=cursor&from={from_}"
        response = self._send("GET", uri, {"x-log-bodyrawsize": "0"})
        if response.status_code != 200:
            raise _read_error(response, "failed to get cursor")
        try:
            data = response.json()
            if not isinstance(data, Mapping):
                raise ValueError("expected an object")
            return str(_lookup(data, "cursor", ""))
        except (ValueError, UnicodeDecodeError):
            raise BadResponseError(
                response.body.decode("utf-8", errors="replace"),
                response.headers,
                response.status_code,
            ) from None

    def get_logs_bytes(
        self, shard_id: int, cursor: str, end_cursor: str, log_group_max_count: int
    ) -> tuple[bytes, str]:
        """Pull raw log group data from a shard; return it and the next cursor."""
        headers = {
            "x-log-bodyrawsize": "0",
            "Accept": "application/x-protobuf",
            "Accept-Encoding": "lz4",
        }
        base = f"/logstores/{self.name}/shards/{shard_id}?type=logs&cursor={cursor}"
        if end_cursor:
            uri = f"{base}&end_cursor={end_cursor}&count={log_group_max_count}"
        else:
            uri = f"{base}&count={log_group_max_count}"
        response = self._send("GET", uri, headers)
        if response.status_code != 200:
            raise _read_error(response, "failed to get cursor")

        compress_type = response.headers.get("x-log-compresstype")
        if not compress_type:
            raise ClientError("can't find 'x-log-compresstype' header")
        if compress_type != "lz4":
            raise ClientError(f"unexpected compress type:{compress_type}")
        next_cursor = response.headers.get("x-log-cursor")
        if not next_cursor:
            raise ClientError("can't find 'x-log-cursor' header")
        raw_size_text = response.headers.get("x-log-bodyrawsize")
        if not raw_size_text:
            raise ClientError("can't find 'x-log-bodyrawsize' header")
        try:
            raw_size = int(raw_size_text)
            data = decompress_block(response.body, raw_size)
        except ValueError as exc:
            raise ClientError(str(exc)) from exc
        return data, next_cursor

    def create_index(self, index: Any) -> None:
        """Create the index of this logstore from an index object or mapping."""
        body = _encode_index(index)
        self._call("POST", f"/logstores/{self.name}/index", _json_headers(body), body)

    def create_index_string(self, index_str: str) -> None:
        """Create the index of this logstore from its JSON text."""
        body = index_str.encode("utf-8")
        self._call("POST", f"/logstores/{self.name}/index", _json_headers(body), body)

    def update_index(self, index: Any) -> None:
        """Replace the index of this logstore."""
        body = _encode_index(index)
        self._call("PUT", f"/logstores/{self.name}/index", _json_headers(body), body)

    def update_index_string(self, index_str: str) -> None:
        """Replace the index of this logstore with the given JSON text."""
        body = index_str.encode("utf-8")
        self._call("PUT", f"/logstores/{self.name}/index", _json_headers(body), body)

    def delete_index(self) -> None:
        """Delete the index of this logstore."""
        self._call("DELETE", f"/logstores/{self.name}/index", _json_headers(b""))

    def get_index(self) -> dict[str, Any]:
        """Return the index of this logstore as a decoded JSON object."""
        response = self._call("GET", f"/logstores/{self.name}/index", _json_headers(b""))
        try:
            data = response.json()
            if not isinstance(data, dict):
                raise ValueError("expected an object")
            return data
        except (ValueError, UnicodeDecodeError):
            raise BadResponseError(
                response.body.decode("utf-8", errors="replace"),
                response.headers,
                response.status_code,
            ) from None

    def get_index_string(self) -> str:
        """Return the index of this logstore as JSON text."""
        response = self._call("GET", f"/logstores/{self.name}/index", _json_headers(b""))
        return response.body.decode("utf-8")

    def check_index_exist(self) -> bool:
        """Tell whether this logstore has an index."""
        try:
            self.get_index()
        except ServiceError as exc:
            if exc.code == INDEX_NOT_EXIST_CODE:
                return False
            raise
        return True