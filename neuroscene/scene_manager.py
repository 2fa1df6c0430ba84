# FILE: neuroscene/neuroscene/scene_manager.py

from .neuroml_parser import NeuroMLParser
from .registry import ModelRegistry
from .scene_types import EntityNode, AspectNode, VISUALIZATION_TREE, get_scene_description
from .visual_tree import populate_visual_tree

class SceneManager:
    """Parses a NeuroML model and keeps the visualization tree built from it."""
    def __init__(self, aspect_id="neuroml"):
        self.neuroml_parser = NeuroMLParser()
        self.aspect_id = aspect_id
        self.current_document = None
        self.registry = None
        self.entity = None

    def create_entity(self, entity_id="model"):
        self.entity = EntityNode(entity_id, [AspectNode(self.aspect_id)])
        return self.entity

    def get_visualization_tree(self):
        if self.entity is None:
            return None
        return self.entity.get_aspect(self.aspect_id).get_sub_tree(VISUALIZATION_TREE)

    def load_neuroml_from_string(self, neuroml_string, entities=None):
        """
        Orchestrates NeuroML parsing AND scene population.
        `entities` maps instance names (e.g. 'pop0[2]') to nested EntityNodes.
        """
        # Step 1: Parse into the source model
        self.current_document = self.neuroml_parser.parse_neuroml_string(neuroml_string)

        # Step 2: Components discovered while parsing become the lookup registry
        self.registry = ModelRegistry.from_document(self.current_document, entities)

        # Step 3: Fresh entity and tree for every load
        self.create_entity(self.current_document.id or "model")
        visualization_tree = self.get_visualization_tree()
        populate_visual_tree(visualization_tree, self.current_document, self.registry)
        return visualization_tree

    def get_scene_description(self):
        visualization_tree = self.get_visualization_tree()
        if visualization_tree is None:
            return []
        return get_scene_description(visualization_tree)
