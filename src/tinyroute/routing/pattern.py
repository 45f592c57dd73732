"""Route pattern compilation, matching, and placeholder extraction.

A pattern is a ``/``-delimited template whose segments are either
literal text or a ``{name}`` placeholder::

    "users/{id}/posts/{post_id}"

Each placeholder compiles to a ``\\w+`` capture and the whole pattern
must match the whole (slash-trimmed) request path. Literal text is
not escaped beyond the path separator. Patterns come from the
application, never from request data.
"""

import re

from tinyroute.errors import MalformedPatternError

_PLACEHOLDER = re.compile(r"\{(\w+)\}")
_BRACED = re.compile(r"\{([^{}]*)\}")


def normalize_path(path: str) -> str:
    """Trim leading and trailing slashes: ``"/users/42/"`` -> ``"users/42"``."""
    return path.strip("/")


def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile a route pattern into a full-match regular expression.

    Examples::

        compile_pattern("users/{id}").pattern  -> r"users\\/(\\w+)"
        compile_pattern("users/{id}").fullmatch("users/42")  -> <Match>
        compile_pattern("users/{id}").fullmatch("users/42/x")  -> None
    """
    regex = _PLACEHOLDER.sub(lambda _m: r"(\w+)", pattern)
    return re.compile(regex.replace("/", r"\/"))


def matches(matcher: re.Pattern[str], uri: str) -> bool:
    """True if *matcher* matches the entire normalized *uri*."""
    return matcher.fullmatch(normalize_path(uri)) is not None


def extract_placeholders(pattern: str, uri: str) -> dict[str, str]:
    """Bind each ``{name}`` segment of *pattern* to the same-index segment of *uri*.

    A placeholder whose position is past the end of *uri* is left out
    of the result rather than raising.

    Example::

        extract_placeholders("users/{id}/posts/{post_id}", "users/42/posts/7")
        -> {"id": "42", "post_id": "7"}
    """
    uri_segments = normalize_path(uri).split("/")
    placeholders: dict[str, str] = {}

    for index, segment in enumerate(normalize_path(pattern).split("/")):
        match = _PLACEHOLDER.fullmatch(segment)
        if match is None:
            continue
        if index < len(uri_segments):
            placeholders[match.group(1)] = uri_segments[index]

    return placeholders


def placeholder_names(pattern: str) -> tuple[str, ...]:
    """Return placeholder names in the order they appear in *pattern*."""
    names: list[str] = []
    for segment in normalize_path(pattern).split("/"):
        match = _PLACEHOLDER.fullmatch(segment)
        if match is not None:
            names.append(match.group(1))
    return tuple(names)


def validate_pattern(pattern: str) -> None:
    """Raise ``MalformedPatternError`` if *pattern* has a bad placeholder.

    Rejected:
        - unterminated or stray braces (``users/{id``)
        - names that are not identifiers (``{1st}``, ``{}``)
        - placeholders sharing a segment with other text (``file-{id}``)
        - the same name used twice (``{id}/{id}``)
    """
    seen: set[str] = set()

    for segment in normalize_path(pattern).split("/"):
        if "{" not in segment and "}" not in segment:
            continue

        match = _PLACEHOLDER.fullmatch(segment)
        if match is None:
            raise MalformedPatternError(pattern, _segment_problem(segment))

        name = match.group(1)
        if not name.isidentifier():
            raise MalformedPatternError(
                pattern, f"placeholder name {name!r} is not a valid identifier"
            )
        if name in seen:
            raise MalformedPatternError(pattern, f"duplicate placeholder {{{name}}}")
        seen.add(name)


def _segment_problem(segment: str) -> str:
    opens = segment.count("{")
    closes = segment.count("}")
    if opens != closes or segment.find("}") < segment.find("{"):
        return f"unterminated placeholder in segment {segment!r}"

    braced = _BRACED.fullmatch(segment)
    if braced is not None:
        return f"placeholder name {braced.group(1)!r} is not a valid identifier"

    return f"placeholder must span a whole segment, got {segment!r}"
