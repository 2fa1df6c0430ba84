# FILE: neuroscene/neuroscene/scene_types.py

import numpy as np

VISUALIZATION_TREE = "visualization_tree"

ORIGIN = {'x': 0.0, 'y': 0.0, 'z': 0.0}

class PhysicalQuantity:
    """A numeric value with its unit string, e.g. (120.0, 'mS_per_cm2')."""
    def __init__(self, value, unit=""):
        self.value = value
        self.unit = unit

    def to_dict(self):
        return {"value": self.value, "unit": self.unit}

    def __eq__(self, other):
        if not isinstance(other, PhysicalQuantity): return NotImplemented
        return self.value == other.value and self.unit == other.unit

    def __repr__(self):
        return f"PhysicalQuantity({self.value!r}, {self.unit!r})"

class SceneNode:
    """Base class for every node of the scene tree."""
    node_type = "node"

    def __init__(self, id, name=None):
        self.id = id
        self.name = name if name is not None else id
        self.parent = None

    def to_dict(self):
        return {"id": self.id, "name": self.name, "type": self.node_type}

    def __repr__(self):
        return f"{type(self).__name__}(id={self.id!r}, name={self.name!r})"

class SphereNode(SceneNode):
    node_type = "sphere"

    def __init__(self, id, name=None, radius=0.0, position=None):
        super().__init__(id, name)
        self.radius = radius
        self.position = dict(position) if position else dict(ORIGIN)
        self.group_elements = [] # Ids of the segment groups this object belongs to

    def to_dict(self):
        data = super().to_dict()
        data.update({
            "radius": self.radius, "position": self.position,
            "group_elements": self.group_elements
        })
        return data

class CylinderNode(SceneNode):
    """
    A tapered cylinder between `position` (proximal end) and `distal`.
    `height` is kept at 0: renderers derive the length from the two endpoints.
    """
    node_type = "cylinder"

    def __init__(self, id, name=None):
        super().__init__(id, name)
        self.position = None
        self.distal = None
        self.bottom_radius = None
        self.top_radius = None
        self.height = 0.0
        self.group_elements = []

    def get_axis_length(self):
        if self.position is None or self.distal is None:
            return None
        p = np.array([self.position['x'], self.position['y'], self.position['z']])
        d = np.array([self.distal['x'], self.distal['y'], self.distal['z']])
        return float(np.linalg.norm(d - p))

    def to_dict(self):
        data = super().to_dict()
        data.update({
            "position": self.position, "distal": self.distal,
            "bottom_radius": self.bottom_radius, "top_radius": self.top_radius,
            "height": self.height, "group_elements": self.group_elements
        })
        return data

class CompositeNode(SceneNode):
    node_type = "composite"

    def __init__(self, id, name=None):
        super().__init__(id, name)
        self.children = []

    def add_child(self, node):
        node.parent = self
        self.children.append(node)
        return node

    def get_child(self, child_id, node_type=None):
        for child in self.children:
            if child.id == child_id and (node_type is None or child.node_type == node_type):
                return child
        return None

    def to_dict(self):
        data = super().to_dict()
        data["children"] = [c.to_dict() for c in self.children]
        return data

class VisualGroupElementNode(SceneNode):
    """One entry of a visual group, pointing at the segment group it colours."""
    node_type = "visual_group_element"

    def __init__(self, id, name=None, default_color=None, segment_group=None, parameter=None):
        super().__init__(id, name)
        self.default_color = default_color
        self.segment_group = segment_group if segment_group is not None else id
        self.parameter = parameter # PhysicalQuantity or None

    def to_dict(self):
        data = super().to_dict()
        data.update({
            "default_color": self.default_color,
            "segment_group": self.segment_group,
            "parameter": self.parameter.to_dict() if self.parameter else None
        })
        return data

class VisualGroupNode(SceneNode):
    """A colour overlay over segment groups (cell regions, channel densities)."""
    node_type = "visual_group"

    def __init__(self, id, name=None, color=None, group_type=None,
                 low_spectrum_color=None, high_spectrum_color=None):
        super().__init__(id, name)
        self.color = color
        self.type = group_type
        self.low_spectrum_color = low_spectrum_color
        self.high_spectrum_color = high_spectrum_color
        self.visual_group_elements = []

    def add_element(self, element):
        element.parent = self
        self.visual_group_elements.append(element)
        return element

    def get_element(self, element_id):
        return next((e for e in self.visual_group_elements if e.id == element_id), None)

    def to_dict(self):
        data = super().to_dict()
        data.update({
            "color": self.color, "group_type": self.type,
            "low_spectrum_color": self.low_spectrum_color,
            "high_spectrum_color": self.high_spectrum_color,
            "elements": [e.to_dict() for e in self.visual_group_elements]
        })
        return data

class AspectSubTreeNode(CompositeNode):
    """Root of one of an aspect's trees (only the visualization tree is used here)."""
    node_type = "aspect_subtree"

    def __init__(self, id, tree_type=VISUALIZATION_TREE):
        super().__init__(id, tree_type)
        self.tree_type = tree_type

class AspectNode:
    """An aspect of an entity. Owns its sub trees, created on first request."""
    def __init__(self, id):
        self.id = id
        self.entity = None
        self.sub_trees = {}

    def get_sub_tree(self, tree_type=VISUALIZATION_TREE):
        sub_tree = self.sub_trees.get(tree_type)
        if sub_tree is None:
            sub_tree = AspectSubTreeNode(f"{self.id}_{tree_type}", tree_type)
            sub_tree.parent = self
            self.sub_trees[tree_type] = sub_tree
        return sub_tree

    def __repr__(self):
        return f"AspectNode(id={self.id!r})"

class EntityNode:
    """A simulated entity, possibly nested inside another one, with its aspects."""
    def __init__(self, id, aspects=None):
        self.id = id
        self.aspects = []
        for aspect in aspects or []:
            self.add_aspect(aspect)

    def add_aspect(self, aspect):
        aspect.entity = self
        self.aspects.append(aspect)
        return aspect

    def get_aspect(self, aspect_id):
        return next((a for a in self.aspects if a.id == aspect_id), None)

    def __repr__(self):
        return f"EntityNode(id={self.id!r})"

def get_scene_description(tree):
    """
    Flattens a scene tree into a list of node dicts linked by `parent_id`,
    depth first, children in order.
    """
    scene_objects = []
    _traverse(tree, None, scene_objects)
    return scene_objects

def _traverse(node, parent_instance_id, scene_objects, instance_prefix=""):
    # Node ids only have to be unique among siblings, so the flat id is the path.
    current_instance_id = f"{instance_prefix}{node.id}"
    entry = {key: value for key, value in node.to_dict().items() if key != "children"}
    entry["id"] = current_instance_id
    entry["canonical_id"] = node.id
    entry["parent_id"] = parent_instance_id
    scene_objects.append(entry)
    for child in getattr(node, 'children', []):
        _traverse(child, current_instance_id, scene_objects, instance_prefix=f"{current_instance_id}::")
