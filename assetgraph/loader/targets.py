"""Per-target string settings with a default fallback."""

from __future__ import annotations

from collections.abc import Iterator

from pydantic import BaseModel, Field

# Reserved target key meaning "no platform-specific override".
DEFAULT_TARGET = "default"


class MultiTargetString(BaseModel):
    """A string value with optional overrides per build target.

    The default lives in its own field, so no target key can collide with it.
    Looking up a target without an override always yields the default.
    """

    default: str = ""
    overrides: dict[str, str] = Field(default_factory=dict)

    def get(self, target: str) -> str:
        if target == DEFAULT_TARGET:
            return self.default
        return self.overrides.get(target, self.default)

    def set(self, target: str, value: str) -> None:
        if target == DEFAULT_TARGET:
            self.default = value
        else:
            self.overrides[target] = value

    def remove(self, target: str) -> None:
        self.overrides.pop(target, None)

    def has_override(self, target: str) -> bool:
        return target in self.overrides

    def values(self) -> Iterator[tuple[str, str]]:
        """Yield (target, value) pairs, the default first."""
        yield DEFAULT_TARGET, self.default
        yield from self.overrides.items()

    def copy(self) -> MultiTargetString:
        return MultiTargetString(default=self.default, overrides=dict(self.overrides))

    def __getitem__(self, target: str) -> str:
        return self.get(target)

    def __setitem__(self, target: str, value: str) -> None:
        self.set(target, value)
