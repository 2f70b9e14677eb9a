# slslog

Building blocks for a client of a hosted log service:

- `slslog.config`: logtail collection configs, plugin pipelines and service
  logging settings, as dataclasses with their JSON forms.
- `slslog.logstore`: the `LogStore` dataclass and the operations on one
  logstore. These cover shards, raw log upload, cursors, log pulls and indexes.
- `slslog.transport`: endpoint parsing, the `Response` type, the error classes
  and a urllib-based `UrllibTransport`.
- `slslog.compression`: LZ4 block compression for upload and download bodies.

## Installation

```
pip install slslog
```

## Logtail configs

Input details are dataclasses. The classmethod `with_defaults()` returns an
instance that carries the service's recommended defaults:

```python
from slslog.config import (
    LogConfig, OutputDetail, RegexConfigInputDetail,
    convert_to_regex_config_input_detail,
)

detail = RegexConfigInputDetail.with_defaults()
detail.log_path = "/var/log/app"
detail.file_pattern = "*.log"

config = LogConfig(
    name="app-config",
    input_type="file",
    output_type="LogService",
    input_detail=detail,
    output_detail=OutputDetail("my-project", "app-logs"),
)
payload = config.to_dict()
```

`LogConfig.from_dict` leaves the input detail as a plain dict. Use the
`convert_to_*` functions to turn that dict into the matching dataclass:

- `convert_to_regex_config_input_detail`
- `convert_to_json_config_input_detail`
- `convert_to_delimiter_config_input_detail`
- `convert_to_apsara_log_config_input_detail`
- `convert_to_plugin_log_config_input_detail`
- `convert_to_stream_log_config_input_detail`
- `convert_to_input_detail`

Each returns `None` when the dict is not of that kind.

Two helpers work on a raw detail dict:

- `add_necessary_input_config_field(detail)` fills in missing common fields. For
  file inputs it also fills in the fields of the detail's `logType`.
- `update_input_config_field(detail, key, val)` replaces an existing field. It
  raises `NoConfigFieldError` if the key is absent and `InvalidTypeError` if the
  detail is not a dict.

Plugin pipelines use these classes:

- `LogConfigPluginInput`, whose stages are built with `create_plugin_input_item`.
- `ConfigPluginDockerStdout` and `ConfigPluginCanal`, which hold their plugin's
  defaults.

Service logging settings are `Logging` and `LoggingDetail`.

## Logstores

A `LogStore` sends its requests through the object in its `project` field. That
object must have a method `request(method, uri, headers, body)` that returns a
`slslog.transport.Response`. One built on the pieces in `slslog.transport`:

```python
from slslog.logstore import LogStore
from slslog.transport import UrllibTransport, parse_endpoint


class Requester:
    def __init__(self, project_name, endpoint):
        self.endpoint = parse_endpoint(endpoint, project_name)
        self.transport = UrllibTransport(proxy=self.endpoint.proxy)

    def request(self, method, uri, headers, body):
        return self.transport.send(method, self.endpoint.base_url + uri, headers, body)


store = LogStore(name="app-logs", project=Requester("my-project", "log.example.com"))
for shard in store.list_shards():
    print(shard.shard_id, shard.status)

cursor = store.get_cursor(0, "begin")
data, next_cursor = store.get_logs_bytes(0, cursor, "", 100)
```

How `parse_endpoint` treats the endpoint:

- A bare host uses `http://`, and an `https://` prefix is kept.
- `using_http` or `force_http` turns the scheme to plain HTTP.
- An endpoint given as an IP address is also returned as `Endpoint.proxy`.

`put_raw_log` uploads an already serialised log group. By default the body is
LZ4-compressed; `set_put_log_compress_type(CompressType.NONE)` sends it as is.
The index operations are:

- `create_index` and `create_index_string`
- `update_index` and `update_index_string`
- `delete_index`
- `get_index` and `get_index_string`
- `check_index_exist`

## Compression

`slslog.compression` has three functions:

- `compress_block(data)` returns a raw LZ4 block without a size prefix. If
  compression does not shrink the data, it falls back to a single literal run
  built by `copy_incompressible`.
- `decompress_block(data, raw_size)` raises `ValueError` unless the block
  expands to exactly `raw_size` bytes.

## Errors

Failed service calls raise subclasses of `slslog.transport.SlsError`:

- `ServiceError` carries the service's error code and message, the request id
  and the HTTP status.
- `ClientError` wraps local failures, such as a missing response header or an
  unreachable host.
- `BadResponseError` is raised when a response body cannot be understood.

## What this package does not do

- It has no project object. It does not list, create, update or delete
  logstores, and it does not manage logtail configs, machine groups or
  logging settings on the service.
- It does not sign requests or add credentials. The requester object given to
  a `LogStore` must add whatever the service requires.
- It does not encode or decode the protobuf log group format. `put_raw_log`
  takes bytes that are already serialised, and `get_logs_bytes` returns raw
  decompressed bytes.
- It does not retry requests, and it provides no command-line tool.