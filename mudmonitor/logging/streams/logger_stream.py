import asyncio
import datetime
import io
import os
import pathlib
import sys
import threading
from collections import defaultdict
from typing import (
    Callable,
    Dict,
    TypeVar,
)

import msgspec

from mudmonitor.logging.config.logging_config import LoggingConfig
from mudmonitor.logging.config.stream_type import StreamType
from mudmonitor.logging.models import Entry, Log

T = TypeVar('T', bound=Entry)

DEFAULT_TEMPLATE = "{timestamp} - {level} - {thread_id} - {filename}:{function_name}.{line_number} - {message}"
ERROR_TEMPLATE = "{timestamp} - {level} - {thread_id}.{filename}:{function_name}.{line_number} - {error}"


class LoggerStream:
    def __init__(
        self,
        name: str | None = None,
        template: str | None = None,
        filename: str | None = None,
        directory: str | None = None,
    ) -> None:
        if name is None:
            name = "default"

        self._name = name
        self._default_template = template
        self._default_logfile = filename
        self._default_log_directory = directory

        self._init_lock = asyncio.Lock()
        self._loop: asyncio.AbstractEventLoop | None = None

        self._files: Dict[str, io.BufferedRandom] = {}
        self._file_locks: Dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._cwd: str | None = None
        self._default_logfile_path: str | None = None

        self._config = LoggingConfig()
        self._initialized: bool = False

    @property
    def name(self):
        return self._name

    async def initialize(self):

        async with self._init_lock:

            if self._initialized:
                return

            self._loop = asyncio.get_running_loop()

            if self._cwd is None:
                self._cwd = await self._loop.run_in_executor(
                    None,
                    os.getcwd,
                )

            self._initialized = True

    async def open_file(
        self,
        filename: str,
        directory: str | None = None,
        is_default: bool = False,
    ):
        if self._loop is None:
            await self.initialize()

        logfile_path = self._to_logfile_path(filename, directory=directory)

        async with self._file_locks[logfile_path]:
            await self._loop.run_in_executor(
                None,
                self._open_file,
                logfile_path,
            )

        if is_default:
            self._default_logfile_path = logfile_path

        return logfile_path

    def _open_file(
        self,
        logfile_path: str,
    ):
        resolved_path = pathlib.Path(logfile_path).absolute().resolve()
        resolved_path.parent.mkdir(parents=True, exist_ok=True)

        self._files[logfile_path] = open(str(resolved_path), "ab+")

    async def close(self):
        if self._loop is None:
            return

        await asyncio.gather(
            *[self._close_file(logfile_path) for logfile_path in list(self._files)]
        )

        self._initialized = False

    async def _close_file(self, logfile_path: str):
        async with self._file_locks[logfile_path]:
            await self._loop.run_in_executor(
                None,
                self._close_file_at_path,
                logfile_path,
            )

    def _close_file_at_path(self, logfile_path: str):
        if (
            logfile := self._files.get(logfile_path)
        ) and logfile.closed is False:
            logfile.close()

    def _to_logfile_path(
        self,
        filename: str,
        directory: str | None = None,
    ):
        filename_path = pathlib.Path(filename)

        if filename_path.suffix != ".json":
            raise ValueError(
                f"Log file {filename} must be a .json file"
            )

        if directory is None:
            directory = self._config.directory or self._cwd

        return os.path.join(directory, filename_path)

    async def log(
        self,
        entry: T | Log[T],
        template: str | None = None,
        path: str | None = None,
        filter: Callable[[T], bool] | None = None,
    ):
        filename: str | None = None
        directory: str | None = None

        if path:
            logfile_path = pathlib.Path(path)
            is_logfile = len(logfile_path.suffix) > 0

            filename = logfile_path.name if is_logfile else None
            directory = str(logfile_path.parent.absolute()) if is_logfile else str(logfile_path.absolute())

        if template is None:
            template = self._default_template

        if filename is None:
            filename = self._default_logfile

        if directory is None:
            directory = self._default_log_directory or self._config.directory

        if filename or directory:
            await self._log_to_file(
                entry,
                filename=filename,
                directory=directory,
                filter=filter,
            )

        else:
            await self._log(
                entry,
                template=template,
                filter=filter,
            )

    async def _log(
        self,
        entry_or_log: T | Log[T],
        template: str | None = None,
        filter: Callable[[T], bool] | None = None,
    ):
        entry = entry_or_log.entry if isinstance(entry_or_log, Log) else entry_or_log

        if self._config.enabled(self._name, entry.level) is False:
            return

        if filter and filter(entry) is False:
            return

        if self._initialized is False:
            await self.initialize()

        if template is None:
            template = DEFAULT_TEMPLATE

        log_file, line_number, function_name = self._find_caller(entry_or_log)
        context = {
            "filename": log_file,
            "function_name": function_name,
            "line_number": line_number,
            "thread_id": threading.get_native_id(),
            "timestamp": datetime.datetime.now(datetime.UTC).isoformat(),
        }

        try:
            line = entry.to_template(template, context=context)

        except (KeyError, IndexError, ValueError) as err:
            line = entry.to_template(
                ERROR_TEMPLATE,
                context={**context, "error": f"Bad log template: {err}"},
            )

        await self._loop.run_in_executor(
            None,
            self._write_to_console,
            line,
            self._config.output,
        )

    def _write_to_console(self, line: str, stream_type: StreamType):
        stream = sys.stdout if stream_type == StreamType.STDOUT else sys.stderr

        try:
            stream.write(line + "\n")
            stream.flush()

        except (OSError, ValueError):
            # Closed or detached console stream, nothing left to report to.
            pass

    async def _log_to_file(
        self,
        entry_or_log: T | Log[T],
        filename: str | None = None,
        directory: str | None = None,
        filter: Callable[[T], bool] | None = None,
    ):
        entry = entry_or_log.entry if isinstance(entry_or_log, Log) else entry_or_log

        if self._config.enabled(self._name, entry.level) is False:
            return

        if filter and filter(entry) is False:
            return

        if self._initialized is False:
            await self.initialize()

        if filename is None:
            filename = f"{self._name}.json"

        try:
            logfile_path = self._to_logfile_path(filename, directory=directory)

            if self._files.get(logfile_path) is None or self._files[logfile_path].closed:
                await self.open_file(
                    filename,
                    directory=directory,
                )

        except (OSError, ValueError) as err:
            log_file, line_number, function_name = self._find_caller(entry_or_log)
            await self._write_error(
                entry,
                log_file,
                function_name,
                line_number,
                err,
            )
            return

        if isinstance(entry_or_log, Log):
            log = entry_or_log

        else:
            log_file, line_number, function_name = self._find_caller(entry_or_log)
            log = Log(
                entry=entry,
                filename=log_file,
                function_name=function_name,
                line_number=line_number,
            )

        async with self._file_locks[logfile_path]:
            try:
                await self._loop.run_in_executor(
                    None,
                    self._write_to_file,
                    log,
                    logfile_path,
                )

            except (OSError, TypeError, msgspec.EncodeError) as err:
                await self._write_error(
                    entry,
                    log.filename,
                    log.function_name,
                    log.line_number,
                    err,
                )

    async def _write_error(
        self,
        entry: Entry,
        filename: str,
        function_name: str,
        line_number: int,
        err: Exception,
    ):
        await self._loop.run_in_executor(
            None,
            self._write_to_console,
            entry.to_template(
                ERROR_TEMPLATE,
                context={
                    "filename": filename,
                    "function_name": function_name,
                    "line_number": line_number,
                    "error": f"{entry.message} (log file unavailable: {err})",
                    "thread_id": threading.get_native_id(),
                    "timestamp": datetime.datetime.now(datetime.UTC).isoformat(),
                },
            ),
            StreamType.STDERR,
        )

    def _write_to_file(
        self,
        log: Log,
        logfile_path: str,
    ):
        if (
            logfile := self._files.get(logfile_path)
        ) and (
            logfile.closed is False
        ):
            logfile.write(msgspec.json.encode(log) + b"\n")
            logfile.flush()

    def _find_caller(self, entry_or_log: T | Log[T]):
        if isinstance(entry_or_log, Log):
            return (
                entry_or_log.filename,
                entry_or_log.line_number,
                entry_or_log.function_name,
            )

        frame = sys._getframe(3)
        code = frame.f_code

        return (
            code.co_filename,
            frame.f_lineno,
            code.co_name,
        )
