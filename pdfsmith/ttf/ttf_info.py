"""Typed key/value store for font metrics."""

from __future__ import annotations


class NoKeyFoundError(LookupError):
    """The requested key is not present."""

    def __init__(self, key: str) -> None:
        super().__init__(f"no key found: {key}")
        self.key = key


class WrongTypeError(TypeError):
    """The value stored under a key has another type than requested."""

    def __init__(self, key: str) -> None:
        super().__init__(f"get wrong type: {key}")
        self.key = key


class TtfInfo(dict):
    """A dictionary with typed getters that raise on missing or mistyped keys."""

    def _get(self, key: str, check) -> object:
        try:
            value = self[key]
        except KeyError:
            raise NoKeyFoundError(key) from None
        if not check(value):
            raise WrongTypeError(key)
        return value

    def get_bool(self, key: str) -> bool:
        return self._get(key, lambda v: isinstance(v, bool))

    def get_string(self, key: str) -> str:
        return self._get(key, lambda v: isinstance(v, str))

    def get_int(self, key: str) -> int:
        return self._get(key, lambda v: isinstance(v, int) and not isinstance(v, bool))

    def get_ints(self, key: str) -> list[int]:
        return self._get(
            key,
            lambda v: isinstance(v, list)
            and all(isinstance(i, int) and not isinstance(i, bool) for i in v),
        )

    def get_int_map(self, key: str) -> dict[int, int]:
        return self._get(key, lambda v: isinstance(v, dict))