import math
from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class Page:
    number: int
    per_page: int
    total: int

    @classmethod
    def from_request(cls, raw_number, per_page: int, total: int) -> "Page":
        try:
            number = int(raw_number)
        except (TypeError, ValueError):
            number = 1
        return cls(number=max(number, 1), per_page=per_page, total=total)

    @property
    def pages(self) -> int:
        return max(math.ceil(self.total / self.per_page), 1)

    @property
    def offset(self) -> int:
        return (self.number - 1) * self.per_page

    @property
    def previous(self) -> Optional[int]:
        return self.number - 1 if self.number > 1 else None

    @property
    def next(self) -> Optional[int]:
        return self.number + 1 if self.number < self.pages else None

    def page_numbers(self) -> List[int]:
        return list(range(1, self.pages + 1))
