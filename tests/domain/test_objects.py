"""Tests for primitive construction."""

from __future__ import annotations

import pytest

from nanocad.domain.errors import ArityError, CoordinateError, ErrorKind, ObjectError
from nanocad.domain.objects import (
    CadObject,
    build_object,
    parse_object_type,
    split_object_args,
)
from nanocad.domain.types import Coordinate, ObjectType


class TestParseObjectType:
    def test_known(self) -> None:
        assert parse_object_type("circle") is ObjectType.CIRCLE

    def test_unknown(self) -> None:
        with pytest.raises(ObjectError) as exc_info:
            parse_object_type("polygon")
        assert exc_info.value.kind is ErrorKind.OBJECT_TYPE_INVALID


class TestSplitObjectArgs:
    def test_points_only(self) -> None:
        parsed = split_object_args(["x0;y0", "x1;y1"])
        assert parsed.points == ("x0;y0", "x1;y1")
        assert parsed.layer == 0
        assert parsed.binding is None

    def test_layer_then_binding(self) -> None:
        parsed = split_object_args(["x0;y0", "x1;y1", "l2", "&wall"])
        assert parsed.points == ("x0;y0", "x1;y1")
        assert parsed.layer == 2
        assert parsed.binding == "&wall"

    def test_binding_must_be_last(self) -> None:
        parsed = split_object_args(["x0;y0", "x1;y1", "&wall", "l2"])
        assert parsed.points == ("x0;y0", "x1;y1", "&wall")
        assert parsed.layer == 2
        assert parsed.binding is None

    def test_repeated_layer_token_stays_a_point(self) -> None:
        parsed = split_object_args(["x0;y0", "l1", "l2"])
        assert parsed.layer == 2
        assert parsed.points == ("x0;y0", "l1")


class TestBuildObject:
    def test_line(self) -> None:
        obj, binding = build_object(0, ObjectType.LINE, ["x0;y0", "x10;y10"])
        assert obj.coords == (Coordinate(0, 0), Coordinate(10, 10))
        assert obj.layer == 0
        assert binding is None

    def test_relative_second_point(self) -> None:
        obj, _ = build_object(3, ObjectType.RECT, ["x10;y20", "w1m"])
        assert obj.id == 3
        assert obj.coords == (Coordinate(10, 20), Coordinate(1010, 20))

    def test_layer_and_binding(self) -> None:
        obj, binding = build_object(0, ObjectType.LINE, ["x0;y0", "h5", "l4", "&post"])
        assert obj.layer == 4
        assert obj.coords[1] == Coordinate(0, 5)
        assert binding == "&post"

    @pytest.mark.parametrize("args", [["x0;y0"], ["x0;y0", "x1;y1", "x2;y2"], []])
    def test_wrong_point_count(self, args: list[str]) -> None:
        with pytest.raises(ArityError) as exc_info:
            build_object(0, ObjectType.LINE, args)
        assert exc_info.value.kind is ErrorKind.ARGUMENT_ARITY

    def test_relative_first_point(self) -> None:
        with pytest.raises(CoordinateError):
            build_object(0, ObjectType.LINE, ["w5", "x1;y1"])


class TestCadObject:
    def test_circle_radius(self) -> None:
        circle = CadObject(0, ObjectType.CIRCLE, 0, (Coordinate(0, 0), Coordinate(3, 4)))
        assert circle.radius == 5.0

    def test_radius_only_for_circles(self) -> None:
        line = CadObject(0, ObjectType.LINE, 0, (Coordinate(0, 0), Coordinate(3, 4)))
        with pytest.raises(ObjectError):
            _ = line.radius

    def test_bounding_box_rect(self) -> None:
        rect = CadObject(0, ObjectType.RECT, 0, (Coordinate(10, 0), Coordinate(0, 20)))
        assert rect.bounding_box() == (0, 0, 10, 20)

    def test_bounding_box_circle(self) -> None:
        circle = CadObject(0, ObjectType.CIRCLE, 0, (Coordinate(10, 10), Coordinate(13, 14)))
        assert circle.bounding_box() == (5, 5, 15, 15)

    def test_to_dict(self) -> None:
        line = CadObject(7, ObjectType.LINE, 1, (Coordinate(0, 0), Coordinate(1, 2)))
        assert line.to_dict() == {
            "id": 7,
            "type": "line",
            "layer": 1,
            "coords": [(0, 0), (1, 2)],
        }
