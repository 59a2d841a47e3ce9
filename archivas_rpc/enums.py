from enum import Enum


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"


class ErrorKind(str, Enum):
    TIMEOUT = "timeout"
    HTTP_ERROR = "http_error"
    NETWORK_ERROR = "network_error"
    DECODE_ERROR = "decode_error"
    CONFIG_ERROR = "config_error"
    ALL_HOSTS_FAILED = "all_hosts_failed"
