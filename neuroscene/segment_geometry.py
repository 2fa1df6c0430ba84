# FILE: neuroscene/neuroscene/segment_geometry.py

from .scene_types import CompositeNode, SphereNode, CylinderNode

def get_visual_object_from_segment(segment, parent_distal=None):
    """
    Builds the primitive for one segment. The proximal point falls back to
    the parent's distal point; a segment whose two ends coincide exactly
    becomes a sphere, anything else a cylinder.
    """
    proximal = segment.proximal if segment.proximal is not None else parent_distal
    distal = segment.distal

    if proximal is not None and proximal.same_point(distal):
        sphere = SphereNode(segment.id, segment.name)
        sphere.radius = proximal.diameter / 2
        sphere.position = proximal.to_position()
        return sphere

    cylinder = CylinderNode(segment.id, segment.name)
    if proximal is not None:
        cylinder.position = proximal.to_position()
        cylinder.bottom_radius = proximal.diameter / 2
    if distal is not None:
        cylinder.top_radius = distal.diameter / 2
        cylinder.distal = distal.to_position()
    cylinder.height = 0.0
    return cylinder

def build_segment_nodes(segments, segments_map, composite_id, name=None):
    """
    Returns a CompositeNode holding one primitive per segment, in input order.
    Each primitive carries the groups found for it in `segments_map`.
    """
    group_node = CompositeNode(composite_id, name)

    # Index every distal point first so that parents listed after their
    # children still provide the proximal fallback.
    distal_points = {s.id: s.distal for s in segments}

    for segment in segments:
        parent_distal = None
        if segment.parent is not None:
            parent_distal = distal_points.get(segment.parent)
            if parent_distal is None:
                print(f"Warning: Segment '{segment.id}' references missing parent '{segment.parent}'.")

        visual_object = get_visual_object_from_segment(segment, parent_distal)
        if visual_object.id in segments_map:
            visual_object.group_elements = list(segments_map[visual_object.id])
        group_node.add_child(visual_object)

    return group_node
