"""Interface every text rendering backend provides to the bake stages."""

from __future__ import annotations

from typing import Any, Protocol, Tuple

# (x, y, width, height) of the ink box, relative to the left end of the baseline
InkRect = Tuple[float, float, float, float]


class RenderBackend(Protocol):
    def measure(self, sequence: str) -> Tuple[float, InkRect]:
        ...

    def new_surface(self, width: int, height: int) -> Any:
        ...

    def draw_text_at(self, surface: Any, sequence: str, origin: Tuple[float, float]) -> None:
        ...

    def snapshot_alpha(self, surface: Any) -> bytes:
        ...
