import re

import pytest
import formstream


def test_boundary_is_generated_once():
    generator = formstream.BoundaryGenerator()
    boundary = generator.current()

    assert re.match(r"^[0-9a-f]{33,}$", boundary)
    assert generator.current() == boundary


def test_boundaries_differ_between_generators():
    boundaries = {formstream.BoundaryGenerator().current() for _ in range(100)}

    assert len(boundaries) == 100


def test_boundary_set_and_reset():
    generator = formstream.BoundaryGenerator()
    generator.set("SpecialBoundary")
    assert generator.current() == "SpecialBoundary"

    generator.reset()
    assert generator.current() != "SpecialBoundary"


@pytest.mark.parametrize("value", ["", None, b"bytes"])
def test_boundary_set_rejects_invalid_values(value):
    with pytest.raises(ValueError):
        formstream.BoundaryGenerator().set(value)
