from typing import Dict, Iterator, List, Optional, Tuple

from nscript.ast import Node


class Environment:
    """Maps variable names to values for one session.

    Names are unique and keep the order they were first assigned in.
    Re-assigning a name replaces its value in place; nothing is ever
    removed.
    """
    def __init__(self):
        self.values: Dict[str, Node] = {}

    def lookup(self, name: str) -> Optional[Node]:
        return self.values.get(name)

    def assign(self, name: str, value: Node):
        self.values[name] = value

    def names(self) -> List[str]:
        return list(self.values)

    def items(self) -> Iterator[Tuple[str, Node]]:
        return iter(self.values.items())

    def __contains__(self, name: str) -> bool:
        return name in self.values

    def __len__(self) -> int:
        return len(self.values)

    def __repr__(self) -> str:
        bindings = ', '.join(f"{name}={value.to_string()}" for name, value in self.values.items())
        return f"Environment({bindings})"
