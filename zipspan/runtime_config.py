"""Runtime configuration state management."""

# Global runtime configuration state
_config = {
    "debug": False,
    "strict_trace_id": True,
}


def set_debug(value: bool) -> None:
    _config["debug"] = value


def get_debug() -> bool:
    return _config["debug"]


def set_strict_trace_id(value: bool) -> None:
    _config["strict_trace_id"] = value


def get_strict_trace_id() -> bool:
    return _config["strict_trace_id"]


def reset() -> None:
    """Restore defaults."""
    _config["debug"] = False
    _config["strict_trace_id"] = True
