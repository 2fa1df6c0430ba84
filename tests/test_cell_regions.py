import pytest
from neuroscene import settings
from neuroscene.model_types import SegmentGroup
from neuroscene.cell_regions import create_region_elements, create_cell_regions_group, get_region_element

def test_reserved_groups_are_coloured():
    groups = [
        SegmentGroup("soma_group", members=["0"]),
        SegmentGroup("axon_group", members=["1"]),
        SegmentGroup("dendrite_group", members=["2"]),
        SegmentGroup("all", includes=["soma_group", "axon_group", "dendrite_group"]),
    ]
    elements = create_region_elements(groups)
    assert [(e.id, e.name, e.default_color) for e in elements] == [
        ("soma_group", "Soma", settings.SOMA_COLOR),
        ("axon_group", "Axons", settings.AXON_COLOR),
        ("dendrite_group", "Dendrites", settings.DENDRITE_COLOR),
    ]
    assert all(e.segment_group == e.id for e in elements)

def test_other_groups_are_ignored():
    assert get_region_element("apical_dends") is None
    assert create_region_elements([SegmentGroup("all")]) == []
    assert create_region_elements(None) == []

def test_cell_regions_group_deduplicates():
    first = create_region_elements([SegmentGroup("soma_group"), SegmentGroup("axon_group")])
    second = create_region_elements([SegmentGroup("soma_group")])
    regions = create_cell_regions_group(first + second)

    assert regions.id == "CellRegions"
    assert regions.name == "Cell Regions"
    assert [e.id for e in regions.visual_group_elements] == ["soma_group", "axon_group"]
    assert all(e.parent is regions for e in regions.visual_group_elements)
