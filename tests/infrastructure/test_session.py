"""Tests for Session state ownership and transactional rollback."""

from __future__ import annotations

import pytest

from nanocad.config.models import EngineConfig, LayersConfig
from nanocad.domain.dimensions import Dimension
from nanocad.domain.objects import CadObject
from nanocad.domain.types import Coordinate, ObjectType
from nanocad.domain.variables import FixedValue
from nanocad.infrastructure.session import Session


def _line(session: Session) -> CadObject:
    return CadObject(
        id=session.next_object_id,
        type=ObjectType.LINE,
        layer=0,
        coords=(Coordinate(0, 0), Coordinate(1, 1)),
    )


class TestInit:
    def test_default_layer(self, session: Session) -> None:
        layer = session.get_layer(0)
        assert layer is not None
        assert layer.name == "Default"
        assert layer.color.hex == "f9f9f9"

    def test_configured_layer(self) -> None:
        config = EngineConfig(layers=LayersConfig(default_name="Base", default_color="000000"))
        session = Session(config)
        assert session.get_layer(0).name == "Base"

    def test_empty_containers(self, session: Session) -> None:
        assert session.objects == ()
        assert session.dimensions == ()
        assert session.history == ()
        assert session.next_object_id == 0


class TestMutation:
    def test_add_object_rebinds_last(self, session: Session) -> None:
        first = session.add_object(_line(session))
        second = session.add_object(_line(session))
        assert (first, second) == (0, 1)
        assert session.variables.last_object == 1
        assert session.get_object(1).id == 1

    def test_views_are_snapshots(self, session: Session) -> None:
        objects = session.objects
        session.add_object(_line(session))
        assert objects == ()
        assert len(session.objects) == 1


class TestTransaction:
    def test_commit(self, session: Session) -> None:
        with session.transaction() as s:
            s.add_object(_line(s))
            s.add_history("line x0;y0, x1;y1")
        assert len(session.objects) == 1
        assert session.history == ("line x0;y0, x1;y1",)

    def test_rollback_restores_everything(self, session: Session) -> None:
        session.add_object(_line(session))
        session.add_history("first")

        with pytest.raises(RuntimeError), session.transaction() as s:
            s.add_object(_line(s))
            s.add_dimension(
                Dimension(Coordinate(0, 0), Coordinate(1, 0), Coordinate(0, 1), Coordinate(1, 1))
            )
            s.layers.set_layer(1, "Walls", "ff0000")
            s.variables.set("pi", FixedValue(3.0))
            s.add_history("second")
            raise RuntimeError("boom")

        assert len(session.objects) == 1
        assert session.dimensions == ()
        assert session.get_layer(1) is None
        assert "pi" not in session.variables
        assert session.variables.last_object == 0
        assert session.history == ("first",)
        assert session.next_object_id == 1
