from dataclasses import dataclass, field
from typing import Dict, List, Optional

@dataclass(slots=True)
class CellPool:
    """Inert cell entities waiting for reuse, bucketed by cell type name."""
    free: Dict[str, List[int]] = field(default_factory=dict)

    def take(self, type_name: str) -> Optional[int]:
        bucket = self.free.get(type_name)
        if not bucket:
            return None
        return bucket.pop()

    def put(self, type_name: str, entity: int) -> None:
        self.free.setdefault(type_name, []).append(entity)

    def count(self, type_name: Optional[str] = None) -> int:
        if type_name is not None:
            return len(self.free.get(type_name, ()))
        return sum(len(bucket) for bucket in self.free.values())
