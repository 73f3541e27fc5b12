"""
Template string parsing.

A template is literal markup with ``{token}`` placeholders. ``{{`` and
``}}`` produce literal braces. Literal text is trusted and kept as-is;
only placeholder values are escaped at render time.
"""

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple, Union

from pyqt_metadata.exceptions import InvalidTemplate


@dataclass(frozen=True)
class Literal:
    """Literal template text."""
    text: str


@dataclass(frozen=True)
class Placeholder:
    """
    A ``{token}`` reference.

    ``token`` is ``Name`` or ``Name.attribute`` where ``Name`` may itself be a
    dotted, fully-qualified annotation name. The whole token is also the key
    used for MetadataProvider data.
    """
    token: str

    def candidates(self) -> Iterator[Tuple[str, Optional[str]]]:
        """
        Yield (annotation_name, attribute) readings of the token.

        The whole token as an annotation name comes first, so qualified names
        like ``{app.meta.Icon}`` are not mistaken for ``app.meta`` + ``Icon``.
        """
        yield self.token, None
        head, dot, tail = self.token.rpartition(".")
        if dot and head and tail:
            yield head, tail


Segment = Union[Literal, Placeholder]


def parse_template(template: str) -> Tuple[Segment, ...]:
    """
    Split a template into literal and placeholder segments.

    Args:
        template: Template string

    Returns:
        Tuple of Literal and Placeholder segments, in order

    Raises:
        InvalidTemplate: On unbalanced braces or empty placeholders
    """
    if not isinstance(template, str):
        raise InvalidTemplate(f"Template must be a string, got {type(template).__name__}")

    segments = []
    literal = []
    i = 0
    n = len(template)

    while i < n:
        ch = template[i]
        if ch == "{":
            if template.startswith("{{", i):
                literal.append("{")
                i += 2
                continue
            end = template.find("}", i + 1)
            if end == -1:
                raise InvalidTemplate(f"Unclosed '{{' at offset {i} in template {template!r}")
            token = template[i + 1:end].strip()
            if not token or "{" in token:
                raise InvalidTemplate(
                    f"Invalid placeholder {template[i:end + 1]!r} at offset {i} in template {template!r}"
                )
            if literal:
                segments.append(Literal("".join(literal)))
                literal = []
            segments.append(Placeholder(token))
            i = end + 1
        elif ch == "}":
            if template.startswith("}}", i):
                literal.append("}")
                i += 2
                continue
            raise InvalidTemplate(f"Unmatched '}}' at offset {i} in template {template!r}")
        else:
            literal.append(ch)
            i += 1

    if literal:
        segments.append(Literal("".join(literal)))
    return tuple(segments)


def placeholders_of(segments: Tuple[Segment, ...]) -> Tuple[Placeholder, ...]:
    return tuple(s for s in segments if isinstance(s, Placeholder))
