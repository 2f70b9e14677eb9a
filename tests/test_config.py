import json

import pytest

from slslog.config import (
    INPUT_TYPE_FILE,
    INPUT_TYPE_PLUGIN,
    LOG_FILE_TYPE_DELIMITER_LOG,
    LOG_FILE_TYPE_JSON_LOG,
    LOG_FILE_TYPE_REGEX_LOG,
    OUTPUT_TYPE_LOG_SERVICE,
    PLUGIN_INPUT_TYPE_DOCKER_STDOUT,
    ApsaraLogConfigInputDetail,
    CommonConfigInputDetail,
    ConfigPluginCanal,
    ConfigPluginDockerStdout,
    DelimiterConfigInputDetail,
    InputDetail,
    InvalidTypeError,
    JSONConfigInputDetail,
    LocalFileConfigInputDetail,
    LogConfig,
    LogConfigPluginInput,
    Logging,
    LoggingDetail,
    NoConfigFieldError,
    OutputDetail,
    PluginInputItem,
    PluginLogConfigInputDetail,
    RegexConfigInputDetail,
    SensitiveKey,
    StreamLogConfigInputDetail,
    add_necessary_apsara_log_input_config_field,
    add_necessary_delimiter_log_input_config_field,
    add_necessary_input_config_field,
    add_necessary_json_log_input_config_field,
    add_necessary_local_file_input_config_field,
    add_necessary_regex_log_input_config_field,
    convert_to_apsara_log_config_input_detail,
    convert_to_delimiter_config_input_detail,
    convert_to_input_detail,
    convert_to_json_config_input_detail,
    convert_to_plugin_log_config_input_detail,
    convert_to_regex_config_input_detail,
    convert_to_stream_log_config_input_detail,
    create_plugin_input_item,
    get_file_config_input_detail_type,
    is_valid_input_type,
    update_input_config_field,
)

PROJECT = "test-project"
LOGSTORE = "test-logstore"


def _through_wire(config: LogConfig) -> LogConfig:
    return LogConfig.from_dict(json.loads(json.dumps(config.to_dict())))


def _make_config(name, detail, input_type=INPUT_TYPE_FILE):
    return LogConfig(
        name=name,
        input_detail=detail,
        input_type=input_type,
        output_type=OUTPUT_TYPE_LOG_SERVICE,
        output_detail=OutputDetail(project_name=PROJECT, log_store_name=LOGSTORE),
    )


def _check_envelope(dest, name, input_type=INPUT_TYPE_FILE):
    assert dest.name == name
    assert dest.input_type == input_type
    assert dest.output_detail.project_name == PROJECT
    assert dest.output_detail.log_store_name == LOGSTORE
    assert dest.output_type == OUTPUT_TYPE_LOG_SERVICE


def test_normal_file_config_round_trip():
    regex = RegexConfigInputDetail.with_defaults()
    config = _make_config("go-sdk-simple-file-config", regex)
    regex.key = ["content"]
    regex.regex = "(.*)"
    regex.log_begin_regex = ".*"
    regex.log_path = "/usr/local/ilogtail"
    regex.file_pattern = "ilogtail.LOG"
    regex.discard_unmatch = False
    regex.is_docker_file = True
    regex.docker_include_env = {"ALIYUN_LOGTAIL_USER_DEFINED_ID": ""}
    assert regex.log_type == LOG_FILE_TYPE_REGEX_LOG

    dest = _through_wire(config)
    _check_envelope(dest, "go-sdk-simple-file-config")
    got = convert_to_regex_config_input_detail(dest.input_detail)
    assert got is not None
    assert got.key == regex.key
    assert got.time_format == regex.time_format
    assert got.regex == regex.regex
    assert got.log_begin_regex == regex.log_begin_regex
    assert got.log_path == regex.log_path
    assert got.log_type == regex.log_type
    assert got.file_pattern == regex.file_pattern
    assert got.is_docker_file is True
    assert got.docker_include_env == {"ALIYUN_LOGTAIL_USER_DEFINED_ID": ""}
    assert got == regex


def test_regex_file_config_round_trip():
    regex = RegexConfigInputDetail.with_defaults()
    config = _make_config("go-sdk-regex-file-config", regex)
    regex.discard_unmatch = False
    regex.key = ["logger", "time", "cluster", "hostname", "sr", "app",
                 "workdir", "exe", "corepath", "signature", "backtrace"]
    regex.regex = (
        "\\S*\\s+(\\S*)\\s+(\\S*\\s+\\S*)\\s+\\S*\\s+(\\S*)\\s+(\\S*)\\s+(\\S*)"
        "\\s+(\\S*)\\s+(\\S*)\\s+(\\S*)\\s+(\\S*)\\s+\\S*\\s+(\\S*)\\s*([^$]+)"
    )
    regex.time_format = "%Y/%m/%d %H:%M:%S"
    regex.log_begin_regex = "INFO core_dump_info_data .*"
    regex.log_path = "/cloud/log/tianji/TianjiClient#/core_dump_manager"
    regex.file_pattern = "core_dump_info_data.log*"
    regex.max_depth = 0
    assert regex.log_type == LOG_FILE_TYPE_REGEX_LOG

    dest = _through_wire(config)
    _check_envelope(dest, "go-sdk-regex-file-config")
    got = convert_to_regex_config_input_detail(dest.input_detail)
    assert got is not None
    assert got.key == regex.key
    assert got.time_format == "%Y/%m/%d %H:%M:%S"
    assert got.regex == regex.regex
    assert got.log_begin_regex == "INFO core_dump_info_data .*"
    assert got.log_path == regex.log_path
    assert got.file_pattern == "core_dump_info_data.log*"
    assert got.max_depth == 0


def test_json_file_config_round_trip_and_update():
    detail = JSONConfigInputDetail.with_defaults()
    config = _make_config("go-sdk-json-config", detail)
    detail.time_key = "key_time"
    detail.time_format = "%Y/%m/%d %H:%M:%S"
    detail.log_path = "/cloud/log/"
    detail.file_pattern = "access.log*"
    assert detail.log_type == LOG_FILE_TYPE_JSON_LOG

    dest = _through_wire(config)
    _check_envelope(dest, "go-sdk-json-config")
    got = convert_to_json_config_input_detail(dest.input_detail)
    assert got is not None
    assert got.time_key == "key_time"
    assert got.time_format == detail.time_format
    assert got.log_path == "/cloud/log/"
    assert got.log_type == LOG_FILE_TYPE_JSON_LOG
    assert got.file_pattern == "access.log*"

    detail.max_depth = 88
    got = convert_to_json_config_input_detail(_through_wire(config).input_detail)
    assert got.max_depth == 88


def test_delimiter_file_config_round_trip():
    detail = DelimiterConfigInputDetail.with_defaults()
    config = _make_config("go-sdk-delimiter-config", detail)
    detail.quote = "\u0001"
    detail.key = ["1", "2", "3", "4", "5"]
    detail.separator = '"'
    detail.time_key = "1"
    detail.time_format = "xxxx"
    detail.log_path = "/var/log/log"
    detail.file_pattern = "xxxx.log"
    assert detail.log_type == LOG_FILE_TYPE_DELIMITER_LOG

    dest = _through_wire(config)
    _check_envelope(dest, "go-sdk-delimiter-config")
    got = convert_to_delimiter_config_input_detail(dest.input_detail)
    assert got is not None
    assert got.quote == "\u0001"
    assert got.separator == '"'
    assert got.key == ["1", "2", "3", "4", "5"]
    assert got.time_key == "1"
    assert got.time_format == "xxxx"
    assert got.log_path == "/var/log/log"
    assert got.log_type == LOG_FILE_TYPE_DELIMITER_LOG
    assert got.file_pattern == "xxxx.log"
    assert got.auto_extend is True


def test_plugin_config_round_trip():
    plugin = PluginLogConfigInputDetail.with_defaults()
    config = _make_config("go-sdk-plugin-config", plugin, INPUT_TYPE_PLUGIN)
    stdout = ConfigPluginDockerStdout()
    stdout.include_env = {"x": "y", "dddd": ""}
    stdout.exclude_env = {"no_this_env": ""}
    pipeline = LogConfigPluginInput()
    pipeline.inputs.append(
        create_plugin_input_item(PLUGIN_INPUT_TYPE_DOCKER_STDOUT, stdout)
    )
    plugin.plugin_detail = pipeline

    dest = _through_wire(config)
    _check_envelope(dest, "go-sdk-plugin-config", INPUT_TYPE_PLUGIN)
    got = convert_to_plugin_log_config_input_detail(dest.input_detail)
    assert got is not None
    assert got.plugin_detail.to_dict() == plugin.plugin_detail.to_dict()
    assert got.plugin_detail.inputs[0].type == PLUGIN_INPUT_TYPE_DOCKER_STDOUT
    assert got.plugin_detail.inputs[0].detail["IncludeEnv"] == {"x": "y", "dddd": ""}


def test_common_defaults_json():
    assert CommonConfigInputDetail.with_defaults().to_dict() == {
        "localStorage": True,
        "enableTag": True,
        "enableRawLog": False,
        "maxSendRate": -1,
        "sendRateExpire": 0,
        "mergeType": "topic",
        "adjustTimezone": False,
    }


def test_local_file_defaults():
    detail = LocalFileConfigInputDetail.with_defaults()
    assert detail.file_encoding == "utf8"
    assert detail.max_depth == 100
    assert detail.topic_format == "none"
    assert detail.preserve is True
    assert detail.discard_unmatch is True
    assert detail.local_storage is True
    assert detail.max_send_rate == -1


def test_subclass_defaults():
    apsara = ApsaraLogConfigInputDetail.with_defaults()
    assert (apsara.log_type, apsara.log_begin_regex) == ("apsara_log", ".*")
    regex = RegexConfigInputDetail.with_defaults()
    assert (regex.regex, regex.log_begin_regex) == ("(.*)", ".*")
    stream = StreamLogConfigInputDetail.with_defaults()
    assert stream.merge_type == "topic"
    assert stream.tag == ""


def test_omitempty_fields_appear_when_set():
    detail = RegexConfigInputDetail.with_defaults()
    data = detail.to_dict()
    assert "customizedFields" not in data
    assert "plugin" not in data
    assert data["topicFormat"] == "none"
    detail.customized_fields = "x"
    assert detail.to_dict()["customizedFields"] == "x"


def test_log_config_create_time_key():
    data = LogConfig(name="c").to_dict()
    assert data["CreateTime"] == 0
    assert "lastModifyTime" not in data
    decoded = LogConfig.from_dict({"configName": "c", "createTime": 5, "lastModifyTime": 7})
    assert decoded.create_time == 5
    assert decoded.last_modify_time == 7


def test_sensitive_keys_round_trip():
    detail = CommonConfigInputDetail(
        sensitive_keys=[SensitiveKey(key="k", type="const", all=True, const_string="***")]
    )
    data = detail.to_dict()
    assert data["sensitive_keys"][0] == {
        "key": "k", "type": "const", "regex_begin": "", "regex_content": "",
        "all": True, "const": "***",
    }
    assert CommonConfigInputDetail.from_dict(data) == detail


def test_canal_plugin_json_keys():
    password = "password"
    data = ConfigPluginCanal(password=password).to_dict()
    assert data["Host"] == "127.0.0.1"
    assert data["Port"] == 3306
    assert data["ServerID"] == 1205
    assert data["Password"] == "password"
    assert data["EnableGTID"] is True
    assert data["EnableDDL"] is False
    assert data["Charset"] == "utf8"


def test_docker_stdout_defaults():
    data = ConfigPluginDockerStdout().to_dict()
    assert data["BeginLineCheckLength"] == 10240
    assert data["MaxLogSize"] == 524288
    assert data["FlushIntervalMs"] == 3000
    assert data["Stdout"] is True and data["Stderr"] is True


def test_plugin_input_item_from_dict():
    item = PluginInputItem.from_dict({"type": "t", "detail": {"a": 1}})
    assert item == PluginInputItem(type="t", detail={"a": 1})


def test_logging_round_trip():
    logging = Logging(
        project="p", logging_details=[LoggingDetail(type="operation_log", logstore="s")]
    )
    data = logging.to_dict()
    assert data == {
        "loggingProject": "p",
        "loggingDetails": [{"type": "operation_log", "logstore": "s"}],
    }
    assert Logging.from_dict(data) == logging


def test_output_detail_keys():
    assert OutputDetail("p", "s").to_dict() == {"projectName": "p", "logstoreName": "s"}


def test_is_valid_input_type():
    assert is_valid_input_type("file")
    assert is_valid_input_type("syslog")
    assert is_valid_input_type("streamlog")
    assert is_valid_input_type("plugin")
    assert not is_valid_input_type("other")


def test_get_file_config_input_detail_type():
    assert get_file_config_input_detail_type({"logType": "json_log"}) == "json_log"
    assert get_file_config_input_detail_type({"x": 1}) is None
    assert get_file_config_input_detail_type("text") is None
    with pytest.raises(TypeError):
        get_file_config_input_detail_type({"logType": 3})


def test_convert_rejects_mismatched_type():
    detail = {"logType": "json_log"}
    assert convert_to_regex_config_input_detail(detail) is None
    assert convert_to_delimiter_config_input_detail(detail) is None
    assert convert_to_apsara_log_config_input_detail(detail) is None
    assert convert_to_json_config_input_detail("not a dict") is None
    assert convert_to_plugin_log_config_input_detail({"plugin": {}, "logType": "x"}) is None
    assert convert_to_stream_log_config_input_detail({"x": 1}) is None


def test_convert_rejects_bad_field_type():
    assert convert_to_json_config_input_detail({"logType": "json_log", "maxDepth": "abc"}) is None


def test_convert_stream_and_apsara():
    stream = convert_to_stream_log_config_input_detail({"tag": "t", "localStorage": True})
    assert stream == StreamLogConfigInputDetail(tag="t", local_storage=True)
    apsara = convert_to_apsara_log_config_input_detail(
        {"logType": "apsara_log", "logBeginRegex": "x"}
    )
    assert apsara.log_begin_regex == "x"


def test_convert_to_input_detail():
    got = convert_to_input_detail({"logType": "common_reg_log", "key": ["a"], "filterKey": ["b"]})
    assert got == InputDetail(log_type="common_reg_log", keys=["a"], filter_keys=["b"])
    assert convert_to_input_detail({"logType": "json_log"}) is None


def test_add_necessary_fields_delimiter():
    detail = {"logType": "delimiter_log", "maxDepth": 3}
    add_necessary_input_config_field(detail)
    assert detail == {
        "logType": "delimiter_log", "maxDepth": 3, "localStorage": True,
        "enableTag": True, "maxSendRate": -1, "mergeType": "topic",
        "fileEncoding": "utf8", "topicFormat": "none", "preserve": True,
        "discardUnmatch": True, "timeFormat": "", "quote": "\u0001",
        "autoExtend": True, "timeKey": "",
    }


def test_add_necessary_fields_without_log_type():
    detail = {}
    add_necessary_input_config_field(detail)
    assert detail == {"localStorage": True, "enableTag": True,
                      "maxSendRate": -1, "mergeType": "topic"}
    detail = {"logType": 5}
    add_necessary_input_config_field(detail)
    assert "fileEncoding" not in detail


def test_add_necessary_type_specific():
    regex = {"regex": "x"}
    add_necessary_regex_log_input_config_field(regex)
    assert regex == {"regex": "x", "logBeginRegex": ".*", "key": ["content"]}
    apsara = {}
    add_necessary_apsara_log_input_config_field(apsara)
    assert apsara == {"logBeginRegex": ".*"}
    js = {}
    add_necessary_json_log_input_config_field(js)
    assert js == {"timeKey": ""}
    delim = {"quote": "'"}
    add_necessary_delimiter_log_input_config_field(delim)
    assert delim == {"quote": "'", "autoExtend": True, "timeKey": ""}
    local = {}
    add_necessary_local_file_input_config_field(local)
    assert local["maxDepth"] == 100 and local["timeFormat"] == ""


def test_update_input_config_field():
    detail = {"a": 1}
    update_input_config_field(detail, "a", 2)
    assert detail == {"a": 2}
    with pytest.raises(NoConfigFieldError):
        update_input_config_field(detail, "b", 1)
    with pytest.raises(InvalidTypeError):
        update_input_config_field(["a"], "a", 1)