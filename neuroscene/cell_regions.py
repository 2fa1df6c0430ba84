# FILE: neuroscene/neuroscene/cell_regions.py

from . import settings
from .scene_types import VisualGroupNode, VisualGroupElementNode

SOMA = "soma_group"
AXONS = "axon_group"
DENDRITES = "dendrite_group"

CELL_REGIONS_ID = "CellRegions"
CELL_REGIONS_NAME = "Cell Regions"

# Reserved group id -> (display name, colour)
REGION_STYLES = {
    SOMA: ("Soma", settings.SOMA_COLOR),
    AXONS: ("Axons", settings.AXON_COLOR),
    DENDRITES: ("Dendrites", settings.DENDRITE_COLOR),
}

def get_region_element(segment_group_id):
    """Returns a coloured element for a reserved region group, or None for any other group."""
    style = REGION_STYLES.get(segment_group_id)
    if style is None:
        return None
    name, color = style
    return VisualGroupElementNode(segment_group_id, name, default_color=color, segment_group=segment_group_id)

def create_region_elements(segment_groups):
    elements = []
    for group in segment_groups or []:
        element = get_region_element(group.id)
        if element is not None:
            elements.append(element)
    return elements

def create_cell_regions_group(elements):
    """Wraps region elements in the 'Cell Regions' group, keeping the first element seen per region."""
    cell_regions = VisualGroupNode(CELL_REGIONS_ID, CELL_REGIONS_NAME)
    for element in elements:
        if cell_regions.get_element(element.id) is None:
            cell_regions.add_element(element)
    return cell_regions
