class InMemoryStorage:
    """Dict based persistence backend. Data lives as long as the instance does"""

    def __init__(self, initial_data: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial_data or {})

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def aclose(self) -> None: ...
