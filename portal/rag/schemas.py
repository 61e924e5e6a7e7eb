from dataclasses import dataclass

FRAGMENT_SEPARATOR = "\n---\n"


@dataclass(frozen=True)
class ContextResult:
    text: str = ""
    fragments_count: int = 0
    vector_store_available: bool = True
