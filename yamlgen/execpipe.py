"""Pipe data through an external program.

``run`` feeds bytes to a subprocess and collects what it prints. Standard
output and standard error are drained on their own threads while the input
is written, so a program that produces a lot of output cannot block on a full
pipe.
"""

from __future__ import annotations

import io
import shutil
import subprocess
import threading
from typing import IO

from .errors import GeneratorError
from .logging_config import get_logger

logger = get_logger(__name__)

_CHUNK_SIZE = 64 * 1024


class ExecPipeError(GeneratorError):
    """Exception raised when the piped program fails.

    The message names the program, the cause and the captured stderr text.
    """

    def __init__(
        self, name: str, cause: str, stderr: str = "", returncode: int | None = None
    ):
        super().__init__(f"error: {name}, cause={cause}, stderr={stderr!r}")
        self.name = name
        self.cause = cause
        self.stderr = stderr
        self.returncode = returncode


class ExecutableNotFoundError(ExecPipeError):
    """Exception raised when the program is not on the executable search path."""

    def __init__(self, name: str):
        super().__init__(name, "executable file not found in $PATH")


def check_path(executable: str) -> str:
    """Check that an executable exists on PATH.

    Args:
        executable: Program name.

    Returns:
        Full path of the executable.

    Raises:
        ExecutableNotFoundError: If it cannot be found.
    """
    path = shutil.which(executable)
    if path is None:
        raise ExecutableNotFoundError(executable)
    logger.debug("Found %s at %s", executable, path)
    return path


def _drain(source: IO[bytes], sink: IO[bytes] | list[bytes]) -> None:
    """Copy everything from source into sink until EOF."""
    try:
        while True:
            chunk = source.read(_CHUNK_SIZE)
            if not chunk:
                break
            if isinstance(sink, list):
                sink.append(chunk)
            else:
                sink.write(chunk)
    finally:
        source.close()


def run(
    writer: IO[bytes], reader: bytes | IO[bytes], name: str, *args: str
) -> None:
    """Run a program with reader as its stdin and writer receiving its stdout.

    Args:
        writer: Binary stream receiving the program's standard output.
        reader: Bytes, or a binary stream, fed to the program's standard input.
        name: Program to execute.
        *args: Program arguments.

    Raises:
        ExecPipeError: If the program cannot be started or exits non-zero.
    """
    data = reader if isinstance(reader, (bytes, bytearray)) else reader.read()
    cmd = [name, *args]
    logger.debug("Running %s with %d bytes of input", cmd, len(data))

    try:
        proc = subprocess.Popen(
            cmd,
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
    except OSError as e:
        raise ExecPipeError(name, str(e)) from e

    stderr_chunks: list[bytes] = []
    # stdout reader starts before anything is written
    drains = [
        threading.Thread(target=_drain, args=(proc.stdout, writer), daemon=True),
        threading.Thread(
            target=_drain, args=(proc.stderr, stderr_chunks), daemon=True
        ),
    ]
    for thread in drains:
        thread.start()

    try:
        proc.stdin.write(data)
    except BrokenPipeError:
        # program exited without reading everything; its status tells why
        logger.debug("%s closed its input early", name)
    finally:
        try:
            proc.stdin.close()
        except BrokenPipeError:
            pass

    returncode = proc.wait()
    for thread in drains:
        thread.join()

    stderr = b"".join(stderr_chunks).decode("utf-8", errors="replace")
    if returncode != 0:
        raise ExecPipeError(
            name, f"exit status {returncode}", stderr, returncode=returncode
        )
    if stderr:
        logger.debug("%s stderr: %s", name, stderr.rstrip())


def format_source(data: bytes, enabled: bool, formatter: str, *args: str) -> bytes:
    """Pipe rendered source through the formatter when enabled.

    Args:
        data: Rendered source.
        enabled: Whether formatting is on; disabled returns data unchanged.
        formatter: Formatter executable.
        *args: Formatter arguments.

    Returns:
        Formatted source.
    """
    if not enabled:
        return data
    check_path(formatter)
    out = io.BytesIO()
    run(out, data, formatter, *args)
    return out.getvalue()
