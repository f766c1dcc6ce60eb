from typing import Any, Callable, Generic, List, Sequence, Tuple, TypeVar

T = TypeVar("T")


class Table(Generic[T]):
    """Maps an entity type onto a backend table.

    ``columns`` is the ordered list of ``(column, extractor)`` pairs. The same order
    is used to select rows (so ``from_row`` receives values in that order) and to
    build insert statements. ``key`` names the primary key columns.
    """

    def __init__(self, name: str,
                 columns: Sequence[Tuple[str, Callable[[T], Any]]],
                 key: Sequence[str],
                 from_row: Callable[..., T]):
        column_names = [column for column, _ in columns]
        for key_column in key:
            if key_column not in column_names:
                raise ValueError(f"Key column {key_column} not mapped in {name}")
        self.name = name
        self.columns: List[Tuple[str, Callable[[T], Any]]] = list(columns)
        self.key: Tuple[str, ...] = tuple(key)
        self._from_row = from_row

    @property
    def column_names(self) -> List[str]:
        return [column for column, _ in self.columns]

    @property
    def value_columns(self) -> List[str]:
        return [column for column in self.column_names if column not in self.key]

    def select_list(self) -> str:
        return ", ".join(self.column_names)

    def from_row(self, row) -> T:
        return self._from_row(*row)

    def to_row(self, record: T) -> Tuple[Any, ...]:
        return tuple(extract(record) for _, extract in self.columns)

    def __str__(self):
        return self.name
