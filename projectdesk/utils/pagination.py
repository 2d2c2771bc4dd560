from dataclasses import dataclass
from fastapi import Query


@dataclass
class Pagination:
    page: int
    per_page: int

    @property
    def offset(self) -> int:
        return self.page * self.per_page

    def apply(self, query):
        return query.offset(self.offset).limit(self.per_page)


def get_pagination(
    page: int = Query(0, ge=0, description="0-based page number"),
    per_page: int = Query(10, ge=1, le=100, description="Items per page"),
) -> Pagination:
    return Pagination(page=page, per_page=per_page)
