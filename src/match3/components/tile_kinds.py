from dataclasses import dataclass, field
from typing import List

from match3.constants import KIND_NAMES

@dataclass(slots=True)
class TileKinds:
    """Number of dealable kinds plus display names, stored on the session entity."""
    count: int
    names: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        names = list(self.names) or list(KIND_NAMES)
        while len(names) < self.count:
            names.append(f"kind{len(names)}")
        self.names = names[:self.count]

    def name_for(self, kind: int) -> str:
        return self.names[kind]
