"""
Async signature scanning for TypeScript source text.

Both generated API files and wrapper files declare operations as
`async name(params): Promise<T>`. Scanning them with the same routine
keeps the two method lists comparable. The scan is syntactic: overloads,
generics and inherited members are not resolved.
"""

import re
from dataclasses import dataclass
from typing import Optional

RE_ASYNC_START = re.compile(
    r"\basync\s+(?:function\s*\*?\s*)?([A-Za-z_$][\w$]*)\s*(?:<[^()]*?>\s*)?\("
)
RE_PROMISE_RETURN = re.compile(r"\s*:\s*Promise\s*<")


@dataclass(frozen=True)
class AsyncSignature:
    """An async callable with a typed Promise return."""

    name: str
    return_type: str
    line_number: int


def _find_closing(text: str, start: int, opening: str, closing: str) -> Optional[int]:
    """
    Return the index of the bracket closing the one at `start`.

    Arrow tokens (`=>`) are skipped when balancing angle brackets.
    """
    depth = 0
    for index in range(start, len(text)):
        char = text[index]
        if char == opening:
            depth += 1
        elif char == closing:
            if closing == ">" and index > 0 and text[index - 1] == "=":
                continue
            depth -= 1
            if depth == 0:
                return index
    return None


def scan_async_signatures(text: str) -> list[AsyncSignature]:
    """
    Find every `async name(...): Promise<T>` declaration in declaration order.

    Args:
        text: TypeScript source text.

    Returns:
        List of AsyncSignature in the order they appear in the text.
    """
    signatures: list[AsyncSignature] = []
    position = 0

    while True:
        match = RE_ASYNC_START.search(text, position)
        if match is None:
            break
        position = match.end()

        params_open = match.end() - 1
        params_close = _find_closing(text, params_open, "(", ")")
        if params_close is None:
            continue

        promise = RE_PROMISE_RETURN.match(text, params_close + 1)
        if promise is None:
            continue

        type_open = promise.end() - 1
        type_close = _find_closing(text, type_open, "<", ">")
        if type_close is None:
            continue

        return_type = " ".join(text[type_open + 1:type_close].split())
        signatures.append(AsyncSignature(
            name=match.group(1),
            return_type=return_type,
            line_number=text.count("\n", 0, match.start()) + 1,
        ))
        position = type_close + 1

    return signatures
