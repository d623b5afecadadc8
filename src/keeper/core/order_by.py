"""Order clause builder."""


class OrderBy:
    """Accumulates ``column ASC|DESC`` pairs in insertion order.

    ``str(OrderBy().add("name").add("id", ascend=False))`` gives
    ``"name ASC, id DESC"``.
    """

    def __init__(self) -> None:
        self._parts: list[str] = []

    def add(self, column: str, ascend: bool = True) -> "OrderBy":
        self._parts.append(f"{column} {'ASC' if ascend else 'DESC'}")
        return self

    def __bool__(self) -> bool:
        return bool(self._parts)

    def __str__(self) -> str:
        return ", ".join(self._parts)

    def __repr__(self) -> str:
        return f"<OrderBy {self}>"
