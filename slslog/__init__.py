"""Log service client pieces: logtail configs, logstore operations, HTTP transport and LZ4 compression."""

__version__ = "0.1.0"

__all__ = ["config", "transport", "compression", "logstore"]