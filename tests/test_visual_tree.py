import pytest
from neuroscene.model_types import (
    NeuroMLDocument, Morphology, Segment, SegmentGroup, Point3DWithDiam,
    Cell, BiophysicalProperties, ChannelDensity, OpaqueComponent,
    Network, Population
)
from neuroscene.scene_types import EntityNode, AspectNode, CompositeNode, VISUALIZATION_TREE
from neuroscene.registry import ModelRegistry, UnknownComponentError
from neuroscene.visual_tree import populate_visual_tree, find_owning_aspect

@pytest.fixture
def tree():
    entity = EntityNode("model", [AspectNode("neuroml")])
    return entity.get_aspect("neuroml").get_sub_tree(VISUALIZATION_TREE)

def _morphology(morph_id):
    segments = [
        Segment("0", "Soma", Point3DWithDiam(0, 0, 0, 10), Point3DWithDiam(0, 0, 0, 10)),
        Segment("1", "Dend", Point3DWithDiam(0, 50, 0, 2), parent="0"),
    ]
    groups = [
        SegmentGroup("soma_group", members=["0"]),
        SegmentGroup("dendrite_group", members=["1"]),
        SegmentGroup("all", includes=["soma_group", "dendrite_group"]),
    ]
    return Morphology(morph_id, segments, groups)

def _cell(cell_id):
    densities = BiophysicalProperties("bio", [
        ChannelDensity("na_all", "NaConductance", "all", "120 mS_per_cm2"),
        ChannelDensity("Leak_all", "LeakConductance", "all", "0.3 mS_per_cm2"),
    ])
    return Cell(cell_id, _morphology(f"{cell_id}_morph"), densities)

def test_cell_document(tree):
    doc = NeuroMLDocument("doc")
    doc.add_cell(_cell("pyr"))
    populate_visual_tree(tree, doc)

    assert [c.id for c in tree.children] == ["CellRegions", "pyr_ChannelDensities", "pyr"]
    regions = tree.children[0]
    assert [e.id for e in regions.visual_group_elements] == ["soma_group", "dendrite_group"]

    geometry = tree.get_child("pyr")
    assert [c.node_type for c in geometry.children] == ["sphere", "cylinder"]
    assert geometry.children[0].group_elements == ["soma_group", "all"]
    assert geometry.children[1].position == {'x': 0.0, 'y': 0.0, 'z': 0.0}

def test_cell_regions_attached_once_per_model(tree):
    doc = NeuroMLDocument("doc")
    doc.add_morphology(_morphology("m1"))
    doc.add_cell(_cell("a"))
    doc.add_cell(_cell("b"))
    populate_visual_tree(tree, doc)

    regions = [c for c in tree.children if c.id == "CellRegions"]
    assert len(regions) == 1
    assert tree.children[0] is regions[0]
    assert [c.id for c in tree.children[1:]] == [
        "m1", "a_ChannelDensities", "a", "b_ChannelDensities", "b"
    ]

def test_no_regions_without_reserved_groups(tree):
    doc = NeuroMLDocument("doc")
    doc.add_morphology(Morphology("m", [Segment("0", "s", Point3DWithDiam(1, 1, 1, 1))]))
    populate_visual_tree(tree, doc)
    assert [c.id for c in tree.children] == ["m"]

def test_empty_document_is_a_no_op(tree):
    populate_visual_tree(tree, NeuroMLDocument("empty"))
    assert tree.children == []

def test_single_network_expands_into_tree(tree):
    doc = NeuroMLDocument("doc")
    doc.add_component(OpaqueComponent("iaf", "iafCell"))
    doc.add_network(Network("net", [Population("pop", "iaf", size=2)]))
    populate_visual_tree(tree, doc)
    assert [c.id for c in tree.children] == ["pop[0]", "pop[1]"]

def test_each_network_gets_its_own_composite(tree):
    doc = NeuroMLDocument("doc")
    doc.add_component(OpaqueComponent("iaf", "iafCell"))
    doc.add_network(Network("net1", [Population("a", "iaf", size=1)]))
    doc.add_network(Network("net2", [Population("b", "iaf", size=2)]))
    populate_visual_tree(tree, doc)

    assert [c.id for c in tree.children] == ["net1", "net2"]
    assert [c.id for c in tree.get_child("net1").children] == ["a[0]"]
    assert [c.id for c in tree.get_child("net2").children] == ["b[0]", "b[1]"]

def test_population_cells_contribute_regions_and_subtrees(tree):
    doc = NeuroMLDocument("doc")
    registry = ModelRegistry({"pyr": _cell("pyr")})
    doc.add_network(Network("net", [Population("cells", "pyr", size=1)]))
    populate_visual_tree(tree, doc, registry)

    assert [c.id for c in tree.children] == ["CellRegions", "cells[0]"]
    instance = tree.get_child("cells[0]")
    assert [c.id for c in instance.children] == ["pyr", "pyr_ChannelDensities"]
    assert len(instance.get_child("pyr").children) == 2

def test_unknown_population_component_propagates(tree):
    doc = NeuroMLDocument("doc")
    doc.add_network(Network("net", [Population("pop", "nowhere", size=1)]))
    with pytest.raises(UnknownComponentError):
        populate_visual_tree(tree, doc)

def test_unknown_component_leaves_tree_untouched(tree):
    doc = NeuroMLDocument("doc")
    doc.add_morphology(_morphology("m1"))
    doc.add_cell(_cell("pyr"))
    doc.add_network(Network("net", [Population("pop", "nowhere", size=1)]))
    with pytest.raises(UnknownComponentError):
        populate_visual_tree(tree, doc)
    assert tree.children == []

def test_nested_composite_destination_still_redirects(tree):
    sub = tree.add_child(CompositeNode("sub", "sub"))
    nested = EntityNode("x", [AspectNode("neuroml")])
    doc = NeuroMLDocument("doc")
    doc.add_component(OpaqueComponent("iaf", "iafCell"))
    doc.add_network(Network("net", [Population("p", "iaf", size=2)]))
    registry = ModelRegistry.from_document(doc, {"p[0]": nested})

    populate_visual_tree(sub, doc, registry)

    assert find_owning_aspect(sub) is tree.parent
    assert [c.id for c in sub.children] == ["p[1]"]
    nested_tree = nested.get_aspect("neuroml").get_sub_tree(VISUALIZATION_TREE)
    # Destination is a nested composite, so a composite of the same id is created first
    assert [c.id for c in nested_tree.children] == ["sub"]
    assert [c.id for c in nested_tree.children[0].children] == ["p[0]"]

def test_explicit_aspect_overrides_tree_parent(tree):
    other_aspect = AspectNode("other")
    nested = EntityNode("x", [AspectNode("other")])
    doc = NeuroMLDocument("doc")
    doc.add_component(OpaqueComponent("iaf", "iafCell"))
    doc.add_network(Network("net", [Population("p", "iaf", size=1)]))
    registry = ModelRegistry.from_document(doc, {"p[0]": nested})

    populate_visual_tree(tree, doc, registry, aspect=other_aspect)

    assert tree.children == []
    nested_tree = nested.get_aspect("other").get_sub_tree(VISUALIZATION_TREE)
    assert [c.id for c in nested_tree.children] == ["p[0]"]

def test_repeated_population_appends_duplicates(tree):
    doc = NeuroMLDocument("doc")
    doc.add_morphology(_morphology("m1"))
    populate_visual_tree(tree, doc)
    populate_visual_tree(tree, doc)
    assert [c.id for c in tree.children] == ["CellRegions", "m1", "CellRegions", "m1"]
