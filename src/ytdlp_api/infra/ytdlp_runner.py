"""Subprocess-backed implementation of :class:`~ytdlp_api.core.protocols.ToolRunner`.

This module is the **only** place in the codebase that starts the
``yt-dlp`` executable.  All OS and subprocess exceptions are caught here
and re-raised as typed :class:`~ytdlp_api.exceptions.YtdlpApiError`
subclasses — nothing raw escapes the infrastructure boundary.

The executable is started with ``create_subprocess_exec`` (no shell), so
arguments are passed verbatim.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

from ytdlp_api.core.models import RunLimits
from ytdlp_api.exceptions import (
    ExtractionTimeoutError,
    MetadataExtractionError,
    OutputLimitExceededError,
    ToolNotFoundError,
    VideoUnavailableError,
    append_ytdlp_upgrade_suggestion,
)
from ytdlp_api.log import get_logger

logger = get_logger(__name__)

_READ_CHUNK_SIZE: int = 64 * 1024


class YtDlpRunner:
    """Concrete :class:`ToolRunner` that runs the yt-dlp executable.

    Usage::

        runner = YtDlpRunner()
        stdout = await runner.run(["--dump-json", "--", url], limits=limits)

    This class satisfies the :class:`~ytdlp_api.core.protocols.ToolRunner`
    protocol structurally — no explicit inheritance required.
    """

    # Substrings in yt-dlp error messages that indicate the target itself
    # is unavailable (as opposed to a transient or extraction error).
    _UNAVAILABLE_SIGNALS: tuple[str, ...] = (
        "unavailable",
        "private video",
        "removed",
        "not available",
        "account terminated",
        "video has been removed",
        "this video is no longer available",
        "sign in to confirm your age",
    )

    def __init__(self, binary: str = "yt-dlp") -> None:
        self.binary: str = binary

    # ------------------------------------------------------------------
    # Protocol method
    # ------------------------------------------------------------------

    async def run(self, args: Sequence[str], *, limits: RunLimits) -> str:
        """Run yt-dlp with *args* and return its stdout as text.

        Raises
        ------
        ToolNotFoundError
            When the executable cannot be started.
        ExtractionTimeoutError
            When the process outlives *limits.timeout*; it is killed.
        OutputLimitExceededError
            When stdout or stderr exceeds *limits.max_output_bytes*; it is killed.
        VideoUnavailableError
            When yt-dlp reports the target as unavailable / private / removed.
        MetadataExtractionError
            For every other non-zero exit.
        """
        cmd = [self.binary, *args]
        logger.debug("Running %s", cmd)

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except (FileNotFoundError, PermissionError) as exc:
            raise ToolNotFoundError(
                f"Cannot start {self.binary}: {exc}",
                hint="Install yt-dlp or point YT_DLP_BIN at the executable.",
            ) from exc

        try:
            stdout, stderr = await asyncio.wait_for(
                self._collect(process, limits.max_output_bytes),
                timeout=limits.timeout,
            )
        except asyncio.TimeoutError as exc:
            await self._terminate(process)
            logger.warning("%s timed out after %ss", self.binary, limits.timeout)
            raise ExtractionTimeoutError(
                f"yt-dlp timed out after {limits.timeout:g}s",
            ) from exc
        except OutputLimitExceededError:
            await self._terminate(process)
            logger.warning(
                "%s exceeded the %d byte output limit",
                self.binary,
                limits.max_output_bytes,
            )
            raise

        if process.returncode != 0:
            self._raise_mapped(
                stderr.decode("utf-8", errors="replace").strip(),
                process.returncode,
            )

        return stdout.decode("utf-8", errors="replace")

    # ------------------------------------------------------------------
    # Process plumbing
    # ------------------------------------------------------------------

    @staticmethod
    async def _read_bounded(
        stream: asyncio.StreamReader,
        max_bytes: int,
        label: str,
    ) -> bytes:
        """Read *stream* to EOF, raising once more than *max_bytes* arrive."""
        chunks: list[bytes] = []
        total = 0
        while True:
            chunk = await stream.read(_READ_CHUNK_SIZE)
            if not chunk:
                return b"".join(chunks)
            total += len(chunk)
            if total > max_bytes:
                raise OutputLimitExceededError(
                    f"yt-dlp {label} exceeded {max_bytes} bytes",
                )
            chunks.append(chunk)

    @classmethod
    async def _collect(
        cls,
        process: asyncio.subprocess.Process,
        max_output_bytes: int,
    ) -> tuple[bytes, bytes]:
        """Read stdout and stderr concurrently, each under *max_output_bytes*."""
        assert process.stdout is not None
        assert process.stderr is not None

        readers = (
            asyncio.ensure_future(
                cls._read_bounded(process.stdout, max_output_bytes, "output"),
            ),
            asyncio.ensure_future(
                cls._read_bounded(process.stderr, max_output_bytes, "stderr"),
            ),
        )
        try:
            stdout, stderr = await asyncio.gather(*readers)
            await process.wait()
        except BaseException:
            for reader in readers:
                reader.cancel()
            raise
        return stdout, stderr

    @staticmethod
    async def _terminate(process: asyncio.subprocess.Process) -> None:
        """Kill *process* (if still running) and reap it.

        Remaining pipe contents are drained so the transport can see EOF.
        """
        if process.returncode is None:
            try:
                process.kill()
            except ProcessLookupError:
                pass
        await process.communicate()

    # ------------------------------------------------------------------
    # Exception mapping
    # ------------------------------------------------------------------

    @classmethod
    def _raise_mapped(cls, stderr: str, returncode: int | None) -> None:
        """Translate a non-zero yt-dlp exit into a domain exception.

        Always raises.
        """
        message = stderr or f"yt-dlp exited with status {returncode}"
        msg_lower = message.lower()
        if any(signal in msg_lower for signal in cls._UNAVAILABLE_SIGNALS):
            raise VideoUnavailableError(
                message,
                hint="The video may be private, removed, or geo-restricted.",
            )
        raise MetadataExtractionError(
            message,
            hint=append_ytdlp_upgrade_suggestion(
                "Check that the URL is reachable.",
            ),
        )
