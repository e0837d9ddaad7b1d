"""
Executable resolver — find the real program behind an interpreter.

When a Python or shell script is affected, ``/proc/<pid>/exe`` points at
the interpreter, which tells us nothing about the owning service.  For
interpreter processes the script path is dug out of the command line
instead.
"""

from __future__ import annotations

import re

DELETED_MARKER = " (deleted)"

# Interpreter binaries, optionally version-suffixed or prelink-patched
# ("python2.7", "bash.#prelink#", "perl;5c0e13a2").
INTERPRETER_RE = re.compile(r"bin/(bash|perl|ruby|python|php)([\d.]*|\.#prelink#)(;.*)?$")
_INTERPRETER_TOKEN_RE = re.compile(r"(^|/)(bash|perl|ruby|python|php)[\d.]*$")
_FLAG_OR_WORD_RE = re.compile(r"^[-\w]+$")


def strip_deleted(path: str) -> str:
    """Remove the kernel's deleted-file marker from a link target."""
    if path.endswith(DELETED_MARKER):
        return path[: -len(DELETED_MARKER)]
    return path


def is_interpreter(path: str) -> bool:
    return INTERPRETER_RE.search(path) is not None


def script_path(command_line: tuple[str, ...] | list[str]) -> str | None:
    """First absolute path following the interpreter invocation.

    Flags (``-u``, ``--foo``) and bare words between the interpreter and
    the script are skipped; anything else ends the search.  A process
    that rewrote its title into one space-joined string is split on
    whitespace.
    """
    tokens = list(command_line)
    start = _interpreter_index(tokens)
    if start is None:
        tokens = " ".join(tokens).split()
        start = _interpreter_index(tokens)
    if start is None:
        return None

    for token in tokens[start + 1:]:
        if token.startswith("/"):
            return token.split()[0]
        if not _FLAG_OR_WORD_RE.match(token):
            break
    return None


def _interpreter_index(tokens: list[str]) -> int | None:
    return next(
        (i for i, t in enumerate(tokens) if _INTERPRETER_TOKEN_RE.search(t)),
        None,
    )


def resolve(raw_exe_path: str, command_line: tuple[str, ...] | list[str] = ()) -> str:
    """Resolve the executable a process actually runs.

    Args:
        raw_exe_path: Target of the process's exe link.
        command_line: The process's argv.

    Returns:
        The script path for interpreter processes, else the executable
        path — never carrying the deleted marker.
    """
    exe = strip_deleted(raw_exe_path)
    if not is_interpreter(exe):
        return exe
    return script_path(command_line) or exe
