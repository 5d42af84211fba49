"""
registry.py

Named builder registry shared by the preset factories.

FACTORY LAYER
-------------
Used by:
- track_factory.py      (synthetic cone layouts)
- vehicle_factory.py    (physics presets)
- optimizer_factory.py  (path optimizers per race mode)

Keys are plain strings. Enum members are accepted wherever a key is
expected and are stored under their ``value``, so a race mode and its
string spelling resolve to the same builder.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Dict, Generic, Optional, TypeVar, Union


T = TypeVar("T")

Key = Union[str, Enum]
Builder = Callable[..., T]


def _key(name: Key) -> str:
    if isinstance(name, Enum):
        return str(name.value)
    return name


class Registry(Generic[T]):
    """
    Registry of named builders, each returning a fresh object per call.

    Notes
    -----
    - Names are case-sensitive
    - Read-only after module import; not guarded for concurrent writes
    """

    def __init__(self, kind: str = "builder") -> None:
        self._kind = kind
        self._builders: Dict[str, Builder] = {}

    # ------------------------------------------------------------

    def register(self, name: Key, builder: Optional[Builder] = None):
        """
        Register a builder under ``name``.

        Called with a builder it registers immediately; called with only a
        name it returns a decorator.

        Raises
        ------
        ValueError
            If the name is already taken.
        """
        key = _key(name)

        def _add(fn: Builder) -> Builder:
            if key in self._builders:
                raise ValueError(f"{self._kind.capitalize()} '{key}' already registered.")
            self._builders[key] = fn
            return fn

        if builder is None:
            return _add
        return _add(builder)

    # ------------------------------------------------------------

    def create(self, name: Key, **kwargs) -> T:
        """
        Build a fresh instance.

        Parameters
        ----------
        name : str | Enum
            Registered name.
        **kwargs
            Forwarded to the builder.

        Raises
        ------
        ValueError
            If the name is unknown. The message lists the valid names.
        """
        key = _key(name)
        builder = self._builders.get(key)
        if builder is None:
            raise ValueError(
                f"Unknown {self._kind} '{key}'. Available: {', '.join(self.available)}"
            )
        return builder(**kwargs)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, (str, Enum)):
            return False
        return _key(name) in self._builders

    def __len__(self) -> int:
        return len(self._builders)

    @property
    def available(self) -> list[str]:
        """
        Sorted registered names.
        """
        return sorted(self._builders)
