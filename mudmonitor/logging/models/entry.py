from enum import Enum
from typing import Any, Dict

import msgspec

from .log_level import LogLevel


class Entry(msgspec.Struct, kw_only=True):
    message: str | None = None
    tags: set[str] = msgspec.field(
        default_factory=set,
    )
    level: LogLevel

    def fields(self) -> Dict[str, Any]:
        values: Dict[str, Any] = {}
        for field in self.__struct_fields__:
            value = getattr(self, field)

            if isinstance(value, Enum):
                value = value.value

            elif isinstance(value, (set, frozenset)):
                value = ",".join(sorted(str(item) for item in value))

            values[field] = value

        return values

    def to_template(
        self,
        template: str,
        context: Dict[str, Any] | None = None,
    ) -> str:
        kwargs = self.fields()

        if context:
            kwargs.update(context)

        return template.format(**kwargs)
