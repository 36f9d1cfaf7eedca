from typing import Protocol


class DocumentStore(Protocol):
    def get_text(self, uri: str) -> str | None: ...
