# FILE: neuroscene/neuroscene/channel_densities.py

import re

from . import settings
from .scene_types import CompositeNode, VisualGroupNode, VisualGroupElementNode, PhysicalQuantity

CHANNEL_DENSITIES_NAME = "Channel Densities"

# "<number> <unit>", both parts optional, e.g. "120 mS_per_cm2", "2.5e-2 S_per_m2"
COND_DENSITY_PATTERN = re.compile(
    r"\s*([-+]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][-+]?[0-9]+)?)?\s*(\w*)"
)

def parse_cond_density(cond_density):
    """
    Parses a conductance density string into a PhysicalQuantity.
    Reads a leading number and unit, ignoring anything after them.
    Returns None when the string does not start with a number.
    """
    if not isinstance(cond_density, str):
        return None
    match = COND_DENSITY_PATTERN.match(cond_density)
    if match is None or match.group(1) is None:
        return None
    return PhysicalQuantity(float(match.group(1)), match.group(2))

def create_density_element(density):
    element = VisualGroupElementNode(
        density.id, density.id,
        default_color=settings.DENSITY_COLOR,
        segment_group=density.segment_group
    )
    element.parameter = parse_cond_density(density.cond_density)
    if element.parameter is None:
        print(f"Warning: Could not parse conductance density '{density.cond_density}' of '{density.id}'.")
    return element

def create_channel_densities(cell):
    """
    Builds the 'Channel Densities' composite of a cell: one visual group per
    ion channel, one element per density record (leak records excepted).
    Returns None if the cell declares no channel densities.
    """
    channel_densities = cell.get_channel_densities() if hasattr(cell, 'get_channel_densities') else []
    if not channel_densities:
        return None

    densities = CompositeNode(f"{cell.id}_ChannelDensities", CHANNEL_DENSITIES_NAME)
    groups_map = {}

    for density in channel_densities:
        vis = groups_map.get(density.ion_channel)
        if vis is None:
            vis = VisualGroupNode(
                density.ion_channel, density.ion_channel,
                group_type=settings.DENSITY_GROUP_TYPE,
                low_spectrum_color=settings.LOW_SPECTRUM_COLOR,
                high_spectrum_color=settings.HIGH_SPECTRUM_COLOR
            )
            densities.add_child(vis)
            groups_map[density.ion_channel] = vis

        if density.id == settings.LEAK_DENSITY_ID:
            continue
        vis.add_element(create_density_element(density))

    return densities
