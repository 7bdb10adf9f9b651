"""Layer registry — numbered, named, colored drawing layers.

INVARIANT: Layer numbers are unique and write-once. Layer 0 is created
when the session starts and is read-only from then on.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from nanocad.domain.errors import ErrorKind, LayerError
from nanocad.domain.units import parse_hex_color


@dataclass(frozen=True)
class Color:
    """RGBA color, one byte per channel."""

    r: int
    g: int
    b: int
    alpha: int = 255

    @classmethod
    def from_hex(cls, text: str) -> Color:
        """Build an opaque color from ``RRGGBB``."""
        r, g, b = parse_hex_color(text)
        return cls(r, g, b)

    @property
    def hex(self) -> str:
        return f"{self.r:02x}{self.g:02x}{self.b:02x}"

    def to_dict(self) -> dict[str, int]:
        return {"r": self.r, "g": self.g, "b": self.b, "alpha": self.alpha}


@dataclass(frozen=True)
class Layer:
    num: int
    name: str
    color: Color

    def to_dict(self) -> dict[str, object]:
        return {
            "num": self.num,
            "name": self.name,
            "color": self.color.to_dict(),
            "hex": self.color.hex,
        }


class LayerRegistry:
    """Insertion-ordered collection of layers with write-once numbers."""

    def __init__(self) -> None:
        self._layers: list[Layer] = []

    def __iter__(self) -> Iterator[Layer]:
        return iter(self._layers)

    def __len__(self) -> int:
        return len(self._layers)

    def set_layer(self, num: int, name: str, color_hex: str) -> Layer:
        """Create layer *num*.

        Raises:
            LayerError: ``LayerImmutable`` when *num* already exists (which
                always includes layer 0 once the session is initialized).
        """
        if num < 0:
            raise LayerError(
                f"Invalid layer number {num}", kind=ErrorKind.LINE_SYNTAX, detail={"num": num}
            )
        if self.get_layer(num) is not None:
            if num == 0:
                msg = "Can't alter any parameters of the 0 layer. The 0 layer is read-only."
            else:
                msg = f"Layer {num} already exists and can't be changed"
            raise LayerError(msg, detail={"num": num})

        layer = Layer(num=num, name=name, color=Color.from_hex(color_hex))
        self._layers.append(layer)
        return layer

    def get_layer(self, num: int) -> Layer | None:
        """Linear search by number. ``None`` when absent; callers pick a fallback."""
        for layer in self._layers:
            if layer.num == num:
                return layer
        return None

    def truncate(self, size: int) -> None:
        """Drop layers created after the registry held *size* entries."""
        del self._layers[size:]
