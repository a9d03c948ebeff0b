from dataclasses import dataclass


@dataclass(frozen=True)
class SourceDocument:
    """A document handed over by the acquisition step."""

    name: str
    uri: str
    size: int
