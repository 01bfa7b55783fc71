from .logger_stream import LoggerStream


class LoggerContext:
    def __init__(
        self,
        name: str | None = None,
        template: str | None = None,
        filename: str | None = None,
        directory: str | None = None,
        nested: bool = False,
    ) -> None:
        self.name = name
        self.template = template
        self.filename = filename
        self.directory = directory
        self.stream = LoggerStream(
            name=name,
            template=template,
            filename=filename,
            directory=directory,
        )
        self.nested = nested

    async def __aenter__(self):
        await self.stream.initialize()

        if self.filename:
            try:
                await self.stream.open_file(
                    self.filename,
                    directory=self.directory,
                    is_default=True,
                )

            except (OSError, ValueError):
                # Reported on the console by the first write to this file.
                pass

        return self.stream

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.nested is False:
            await self.stream.close()
