from __future__ import annotations

import asyncio
import datetime
import pathlib
import sys
import threading
from typing import (
    Callable,
    Dict,
    TypeVar,
)

from mudmonitor.logging.models import Entry, Log

from .logger_context import LoggerContext

T = TypeVar('T', bound=Entry)


def _split_path(path: str | None) -> tuple[str | None, str | None]:
    if not path:
        return None, None

    logfile_path = pathlib.Path(path)
    is_logfile = len(logfile_path.suffix) > 0

    filename = logfile_path.name if is_logfile else None
    directory = str(logfile_path.parent.absolute()) if is_logfile else str(logfile_path.absolute())

    return filename, directory


class Logger:
    def __init__(self) -> None:
        self._contexts: Dict[str, LoggerContext] = {}

    def configure(
        self,
        name: str | None = None,
        template: str | None = None,
        path: str | None = None,
    ):
        if name is None:
            name = 'default'

        filename, directory = _split_path(path)

        self._contexts[name] = LoggerContext(
            name=name,
            template=template,
            filename=filename,
            directory=directory,
        )

    def context(
        self,
        name: str | None = None,
        template: str | None = None,
        path: str | None = None,
        nested: bool = False,
    ):
        if name is None:
            name = 'default'

        filename, directory = _split_path(path)

        if self._contexts.get(name) is None:

            self._contexts[name] = LoggerContext(
                name=name,
                template=template,
                filename=filename,
                directory=directory,
                nested=nested,
            )

        else:
            context = self._contexts[name]
            context.template = template if template else context.template
            context.filename = filename if filename else context.filename
            context.directory = directory if directory else context.directory
            context.nested = nested

        return self._contexts[name]

    async def log(
        self,
        entry: T,
        name: str | None = None,
        template: str | None = None,
        path: str | None = None,
        filter: Callable[[T], bool] | None = None,
    ):
        if name is None:
            name = 'default'

        frame = sys._getframe(1)
        code = frame.f_code

        async with self.context(
            name=name,
            nested=True,
        ) as ctx:
            await ctx.log(
                Log(
                    entry=entry,
                    filename=code.co_filename,
                    function_name=code.co_name,
                    line_number=frame.f_lineno,
                    thread_id=threading.get_native_id(),
                    timestamp=datetime.datetime.now(datetime.UTC).isoformat()
                ),
                template=template,
                path=path,
                filter=filter,
            )

    async def batch(
        self,
        *entries: T,
        name: str | None = None,
    ):
        if name is None:
            name = 'default'

        frame = sys._getframe(1)
        code = frame.f_code

        async with self.context(
            name=name,
            nested=True,
        ) as ctx:
            await asyncio.gather(*[
                ctx.log(
                    Log(
                        entry=entry,
                        filename=code.co_filename,
                        function_name=code.co_name,
                        line_number=frame.f_lineno,
                        thread_id=threading.get_native_id(),
                        timestamp=datetime.datetime.now(datetime.UTC).isoformat()
                    ),
                ) for entry in entries
            ])

    async def close(self):
        if len(self._contexts) > 0:
            await asyncio.gather(*[
                context.stream.close() for context in self._contexts.values()
            ])
