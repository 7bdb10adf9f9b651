"""Session — sole owner of one engine lifetime's mutable state.

The session holds the object, dimension, layer, variable and history
containers. Services mutate them only inside :meth:`Session.transaction`,
which rolls every container back to its entry state if the block raises,
so a rejected line never leaves partial effects behind.

INVARIANT: Containers only grow, and only in insertion order. Indices
into the object list stay valid for the whole session; object variables
rely on that.

The session does no locking. A host that renders on another thread must
serialize every mutating call itself.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING

from nanocad.config.models import EngineConfig
from nanocad.domain.layers import Layer, LayerRegistry
from nanocad.domain.variables import VariableStore

if TYPE_CHECKING:
    from collections.abc import Iterator

    from nanocad.domain.dimensions import Dimension
    from nanocad.domain.objects import CadObject

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Snapshot:
    objects: int
    dimensions: int
    layers: int
    history: int
    variables: tuple[int, int | None]


class Session:
    """Engine state for one drawing, from initialization to teardown.

    Layer 0 is created on construction from ``config.layers``.
    """

    def __init__(self, config: EngineConfig | None = None) -> None:
        self.config = config or EngineConfig()
        self._objects: list[CadObject] = []
        self._dimensions: list[Dimension] = []
        self._history: list[str] = []
        self.layers = LayerRegistry()
        self.variables = VariableStore(
            self._objects,
            max_substitutions=self.config.limits.max_substitutions,
        )
        self.layers.set_layer(0, self.config.layers.default_name, self.config.layers.default_color)

    # --- Read-only views ---

    @property
    def objects(self) -> tuple[CadObject, ...]:
        return tuple(self._objects)

    @property
    def dimensions(self) -> tuple[Dimension, ...]:
        return tuple(self._dimensions)

    @property
    def history(self) -> tuple[str, ...]:
        return tuple(self._history)

    def get_object(self, index: int) -> CadObject:
        return self._objects[index]

    def get_layer(self, num: int) -> Layer | None:
        return self.layers.get_layer(num)

    @property
    def next_object_id(self) -> int:
        return len(self._objects)

    # --- Mutation (inside a transaction) ---

    def add_object(self, obj: CadObject) -> int:
        """Append *obj*, rebind ``^`` to it, and return its index."""
        self._objects.append(obj)
        index = len(self._objects) - 1
        self.variables.rebind_last(index)
        return index

    def add_dimension(self, dim: Dimension) -> None:
        self._dimensions.append(dim)

    def add_history(self, line: str) -> None:
        self._history.append(line)

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """Run a block of mutations all-or-nothing."""
        snapshot = self._snapshot()
        try:
            yield self
        except BaseException:
            self._restore(snapshot)
            logger.debug("Rolled back session to %s", snapshot)
            raise

    def _snapshot(self) -> _Snapshot:
        return _Snapshot(
            objects=len(self._objects),
            dimensions=len(self._dimensions),
            layers=len(self.layers),
            history=len(self._history),
            variables=self.variables.snapshot(),
        )

    def _restore(self, snapshot: _Snapshot) -> None:
        del self._objects[snapshot.objects :]
        del self._dimensions[snapshot.dimensions :]
        del self._history[snapshot.history :]
        self.layers.truncate(snapshot.layers)
        self.variables.restore(snapshot.variables)
