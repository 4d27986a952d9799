from dataclasses import replace

import pytest

from navforge.span import AreaType, Span


def make_span():
    return Span(min=2, max=10, area=AreaType(4), next=None)


def test_can_retrieve_span_data_after_building():
    span = make_span()
    assert span.min == 2
    assert span.max == 10
    assert span.area == AreaType(4)
    assert span.next is None


def test_can_retrieve_span_data_after_setting():
    span = make_span()
    storage = {}
    span_key = 0
    storage[span_key] = replace(span)

    span.min = 1
    span.max = 4
    span.area = AreaType(3)
    span.next = span_key

    assert span.min == 1
    assert span.max == 4
    assert span.area == AreaType(3)
    assert span.next == span_key
    assert storage[span_key] == make_span()


def test_area_type_default_is_not_walkable():
    assert AreaType() == AreaType.NOT_WALKABLE
    assert not AreaType().is_walkable()


def test_area_type_walkability():
    assert AreaType.DEFAULT_WALKABLE == 255
    assert AreaType.DEFAULT_WALKABLE.is_walkable()
    assert AreaType(4).is_walkable()


def test_area_type_range():
    with pytest.raises(ValueError):
        AreaType(256)
    with pytest.raises(ValueError):
        AreaType(-1)


def test_span_max_height_constant():
    span = Span(min=0, max=Span.MAX_HEIGHT, area=AreaType(1), next=None)
    assert span.max == 0xFFFF
    assert span.area.is_walkable()