# FILE: neuroscene/neuroscene/visual_tree.py

from .model_types import Cell
from .scene_types import CompositeNode, AspectNode
from .registry import ModelRegistry
from .membership import resolve_segment_groups
from .segment_geometry import build_segment_nodes
from .cell_regions import create_region_elements, create_cell_regions_group
from .channel_densities import create_channel_densities
from .network_expander import NetworkPopulationExpander

class VisualTreePopulator:
    """
    Populates a visualization tree from a NeuroML document: cell regions,
    standalone morphologies, cells with their channel densities, and the
    populations of every network.
    """
    def __init__(self, registry):
        self.registry = registry

    def populate(self, visualization_tree, document, aspect=None):
        if aspect is None:
            aspect = find_owning_aspect(visualization_tree)

        # Resolve every population component before touching the tree, so an
        # unknown component leaves the tree as it was.
        population_components = self._resolve_population_components(document)

        # Region overlay first, once for the whole model
        region_elements = []
        for segment_groups in self._all_segment_group_lists(document, population_components):
            region_elements.extend(create_region_elements(segment_groups))
        if region_elements:
            visualization_tree.add_child(create_cell_regions_group(region_elements))

        for morphology in document.morphologies:
            segments_map = resolve_segment_groups(morphology.segment_groups)
            node = build_segment_nodes(morphology.segments, segments_map, morphology.id)
            visualization_tree.add_child(node)

        for cell in document.cells:
            densities = create_channel_densities(cell)
            nodes = self.create_cell_node(cell)
            if densities is not None:
                visualization_tree.add_child(densities)
            visualization_tree.add_child(nodes)

        expander = NetworkPopulationExpander(aspect, self.registry, self.create_instance_node)
        if len(document.networks) == 1:
            expander.add_network_to(document.networks[0], visualization_tree)
        else:
            for network in document.networks:
                network_node = visualization_tree.add_child(CompositeNode(network.id, network.id))
                expander.add_network_to(network, network_node)

    def create_cell_node(self, cell, node_id=None):
        """Geometry of a cell: one primitive per segment of its morphology."""
        morphology = cell.morphology
        segments_map = resolve_segment_groups(morphology.segment_groups)
        return build_segment_nodes(morphology.segments, segments_map, node_id or cell.id, cell.id)

    def create_instance_node(self, cell, instance_name):
        """Full sub-tree of one cell instance in a population."""
        instance_node = CompositeNode(instance_name, instance_name)
        instance_node.add_child(self.create_cell_node(cell))
        densities = create_channel_densities(cell)
        if densities is not None:
            instance_node.add_child(densities)
        return instance_node

    def _resolve_population_components(self, document):
        """Component id -> component for every population; raises UnknownComponentError."""
        components = {}
        for network in document.networks:
            for population in network.populations:
                if population.component not in components:
                    components[population.component] = self.registry.get_component(population.component)
        return components

    def _all_segment_group_lists(self, document, population_components):
        for morphology in document.morphologies:
            yield morphology.segment_groups
        for cell in document.cells:
            yield cell.morphology.segment_groups

        # Cells only reachable through populations still contribute their regions
        seen = {cell.id for cell in document.cells}
        for component_id, component in population_components.items():
            if component_id in seen: continue
            if getattr(component, 'component_type', None) == Cell.component_type:
                yield component.morphology.segment_groups

def find_owning_aspect(node):
    """Walks up the parents of a scene node until the AspectNode owning its tree."""
    while node is not None and not isinstance(node, AspectNode):
        node = getattr(node, 'parent', None)
    return node

def populate_visual_tree(visualization_tree, document, registry=None, aspect=None):
    """
    Appends the scene nodes of `document` to `visualization_tree`.
    `aspect` defaults to the aspect owning the tree. Not idempotent: a
    second call appends a second copy.
    """
    if registry is None:
        registry = ModelRegistry.from_document(document)
    VisualTreePopulator(registry).populate(visualization_tree, document, aspect)
