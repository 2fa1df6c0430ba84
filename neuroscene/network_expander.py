# FILE: neuroscene/neuroscene/network_expander.py

from . import settings
from .model_types import Cell
from .scene_types import (
    CompositeNode, SphereNode, AspectSubTreeNode, VISUALIZATION_TREE, ORIGIN
)

def get_array_name(population_id, index):
    """Name of the i-th instance of a population, e.g. 'pop0[3]'."""
    return f"{population_id}[{index}]"

class NetworkPopulationExpander:
    """
    Expands the populations of a network into one visual object per instance.

    `build_cell_node(cell, instance_name)` builds the sub-tree of a compound
    cell; every other component is drawn as a fixed size sphere. Instances
    whose name matches a nested entity in the registry are placed in that
    entity's own visualization tree instead of the current one.
    """
    def __init__(self, aspect, registry, build_cell_node):
        self.aspect = aspect
        self.registry = registry
        self.build_cell_node = build_cell_node

    def add_network_to(self, network, parent):
        for population in network.populations:
            self.add_population_to(population, parent)

    def add_population_to(self, population, parent):
        # Unknown components propagate: the model and its definitions disagree.
        component = self.registry.get_component(population.component)

        if population.is_instance_list():
            for i, instance in enumerate(population.instances):
                location = instance.location.to_position() if instance.location is not None else None
                instance_name = get_array_name(population.id, i)
                visual_object = self.get_visual_object_for_component(component, instance_name, location)
                self.add_visual_object_to_tree(instance_name, visual_object, parent)
        else:
            size = population.get_size()
            for i in range(size):
                # Counted populations carry no positions
                instance_name = get_array_name(population.id, i)
                visual_object = self.get_visual_object_for_component(component, instance_name, None)
                self.add_visual_object_to_tree(instance_name, visual_object, parent)

    def get_visual_object_for_component(self, component, instance_name, location=None):
        if getattr(component, 'component_type', None) == Cell.component_type:
            return self.build_cell_node(component, instance_name)

        sphere = SphereNode(instance_name, instance_name, radius=settings.POINT_CELL_RADIUS,
                            position=location if location is not None else ORIGIN)
        return sphere

    def add_visual_object_to_tree(self, instance_name, visual_object, composite):
        entity = self.registry.get_entity(instance_name)
        if entity is None:
            composite.add_child(visual_object)
            return

        aspect = entity.get_aspect(self.aspect.id) if self.aspect is not None else None
        if aspect is None:
            print(f"Warning: Entity '{entity.id}' has no aspect matching the current one. "
                  f"Adding '{instance_name}' to '{composite.id}' instead.")
            composite.add_child(visual_object)
            return

        # Same aspect of the sub entity: its own visualization tree receives the object
        sub_entity_tree = aspect.get_sub_tree(VISUALIZATION_TREE)
        if composite.node_type == AspectSubTreeNode.node_type:
            sub_entity_tree.add_child(visual_object)
        else:
            get_composite_node(sub_entity_tree, composite.id).add_child(visual_object)

def get_composite_node(sub_tree, composite_id):
    """Finds the composite child with the given id, creating it if needed."""
    composite = sub_tree.get_child(composite_id, CompositeNode.node_type)
    if composite is None:
        composite = sub_tree.add_child(CompositeNode(composite_id, composite_id))
    return composite
