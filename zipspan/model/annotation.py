"""Timestamped event attached to a span."""

from dataclasses import dataclass

from zipspan.errors import ValidationError


@dataclass(frozen=True, order=True)
class Annotation:
    timestamp: int  # epoch microseconds
    value: str

    @classmethod
    def create(cls, timestamp: int, value: str) -> "Annotation":
        if isinstance(timestamp, bool) or not isinstance(timestamp, int):
            raise ValidationError("annotation timestamp must be an integer", {"timestamp": timestamp})
        if not isinstance(value, str):
            raise ValidationError("annotation value must be a string", {"timestamp": timestamp, "value": value})
        return cls(timestamp=timestamp, value=value)

    def to_dict(self) -> dict:
        return {"timestamp": self.timestamp, "value": self.value}
