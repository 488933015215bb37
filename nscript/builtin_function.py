from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class BuiltinFunction:
    name: str
    arity: Optional[int]  # None accepts any number of arguments
    fn: Any  # (CallNode, Position) -> Node
    def __repr__(self) -> str:
        return f"<builtin {self.name}>"
