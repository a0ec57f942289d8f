from __future__ import annotations

PARAM_PREFIX = ":"


def normalize_path(path: str) -> str:
    """Drop a single trailing slash; an empty path counts as the root."""
    value = path or "/"
    if len(value) > 1 and value.endswith("/"):
        value = value[:-1]
    return value


def split_segments(path: str) -> list[str]:
    return normalize_path(path).split("/")


def is_param_segment(segment: str) -> bool:
    return segment.startswith(PARAM_PREFIX)


def pattern_shape(pattern: str) -> str:
    """Pattern with parameter names erased, e.g. ``/child/:id`` -> ``/child/:``."""
    return "/".join(PARAM_PREFIX if is_param_segment(segment) else segment for segment in split_segments(pattern))


def extract_params(pattern: str, concrete_path: str) -> dict[str, str] | None:
    pattern_segments = split_segments(pattern)
    path_segments = split_segments(concrete_path)
    if len(pattern_segments) != len(path_segments):
        return None

    params: dict[str, str] = {}
    for expected, actual in zip(pattern_segments, path_segments):
        if is_param_segment(expected):
            if not actual:
                return None
            params[expected[len(PARAM_PREFIX):]] = actual
        elif expected != actual:
            return None
    return params


def matches(pattern: str, concrete_path: str) -> bool:
    return extract_params(pattern, concrete_path) is not None
