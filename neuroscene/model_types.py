# FILE: neuroscene/neuroscene/model_types.py

# --- Population type tags (as written in NeuroML) ---
POPULATION_LIST = "populationList"
POPULATION_GRID = "population"

def _to_float(value, default=0.0):
    if value is None: return default
    try:
        return float(value)
    except (ValueError, TypeError):
        print(f"Warning: Could not parse '{value}' as float, returning {default}")
        return default

class Point3DWithDiam:
    """A 3D point carrying the diameter of the segment at that point."""
    def __init__(self, x, y, z, diameter):
        self.x = _to_float(x)
        self.y = _to_float(y)
        self.z = _to_float(z)
        self.diameter = _to_float(diameter)

    def same_point(self, other):
        # Exact comparison, no tolerance
        if other is None: return False
        return (self.x == other.x and self.y == other.y and
                self.z == other.z and self.diameter == other.diameter)

    def to_position(self):
        return {'x': self.x, 'y': self.y, 'z': self.z}

    def to_dict(self):
        return {"x": self.x, "y": self.y, "z": self.z, "diameter": self.diameter}

    @classmethod
    def from_dict(cls, data):
        if data is None: return None
        return cls(data.get('x', 0.0), data.get('y', 0.0), data.get('z', 0.0), data.get('diameter', 0.0))

class Segment:
    """A single segment of a morphology. `parent` is the id of the parent segment, if any."""
    def __init__(self, id, name, distal, proximal=None, parent=None):
        self.id = str(id)
        self.name = name if name is not None else self.id
        self.distal = distal
        self.proximal = proximal
        self.parent = str(parent) if parent is not None else None

    def to_dict(self):
        return {
            "id": self.id, "name": self.name,
            "proximal": self.proximal.to_dict() if self.proximal else None,
            "distal": self.distal.to_dict() if self.distal else None,
            "parent": self.parent
        }

    @classmethod
    def from_dict(cls, data):
        if data.get('distal') is None:
            raise ValueError(f"Segment '{data.get('id')}' is missing its distal point")
        return cls(
            data['id'], data.get('name'),
            Point3DWithDiam.from_dict(data['distal']),
            Point3DWithDiam.from_dict(data.get('proximal')),
            data.get('parent')
        )

class SegmentGroup:
    """A named set of segments, optionally including other groups."""
    def __init__(self, id, members=None, includes=None):
        self.id = id
        self.members = [str(m) for m in members] if members else [] # Segment ids
        self.includes = list(includes) if includes else []          # Ids of included groups

    def to_dict(self):
        return {"id": self.id, "members": self.members, "includes": self.includes}

    @classmethod
    def from_dict(cls, data):
        return cls(data['id'], data.get('members'), data.get('includes'))

class Morphology:
    def __init__(self, id, segments=None, segment_groups=None):
        self.id = id
        self.segments = segments if segments else []
        self.segment_groups = segment_groups if segment_groups else []

    def get_segment(self, segment_id):
        segment_id = str(segment_id)
        for s in self.segments:
            if s.id == segment_id:
                return s
        return None

    def get_segment_group(self, group_id):
        for g in self.segment_groups:
            if g.id == group_id:
                return g
        return None

    def to_dict(self):
        return {
            "id": self.id,
            "segments": [s.to_dict() for s in self.segments],
            "segment_groups": [g.to_dict() for g in self.segment_groups]
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            data['id'],
            [Segment.from_dict(s) for s in data.get('segments', [])],
            [SegmentGroup.from_dict(g) for g in data.get('segment_groups', [])]
        )

class ChannelDensity:
    """Conductance density of one ion channel over a segment group."""
    def __init__(self, id, ion_channel, segment_group, cond_density=""):
        self.id = id
        self.ion_channel = ion_channel
        self.segment_group = segment_group
        self.cond_density = cond_density if cond_density is not None else "" # e.g. "120 mS_per_cm2"

    def to_dict(self):
        return {
            "id": self.id, "ion_channel": self.ion_channel,
            "segment_group": self.segment_group, "cond_density": self.cond_density
        }

    @classmethod
    def from_dict(cls, data):
        return cls(data['id'], data['ion_channel'], data.get('segment_group', 'all'), data.get('cond_density'))

class BiophysicalProperties:
    def __init__(self, id=None, channel_densities=None):
        self.id = id
        self.channel_densities = channel_densities if channel_densities else []

    def to_dict(self):
        return {"id": self.id, "channel_densities": [d.to_dict() for d in self.channel_densities]}

    @classmethod
    def from_dict(cls, data):
        if data is None: return None
        return cls(data.get('id'), [ChannelDensity.from_dict(d) for d in data.get('channel_densities', [])])

class Cell:
    """A compound cell: a morphology plus optional biophysical properties."""
    component_type = "cell"

    def __init__(self, id, morphology=None, biophysical_properties=None):
        self.id = id
        self.morphology = morphology if morphology is not None else Morphology(f"{id}_morphology")
        self.biophysical_properties = biophysical_properties

    def get_channel_densities(self):
        if self.biophysical_properties is None:
            return []
        return self.biophysical_properties.channel_densities

    def to_dict(self):
        return {
            "id": self.id, "component_type": self.component_type,
            "morphology": self.morphology.to_dict(),
            "biophysical_properties": self.biophysical_properties.to_dict() if self.biophysical_properties else None
        }

    @classmethod
    def from_dict(cls, data):
        morphology_data = data.get('morphology')
        return cls(
            data['id'],
            Morphology.from_dict(morphology_data) if morphology_data else None,
            BiophysicalProperties.from_dict(data.get('biophysical_properties'))
        )

class OpaqueComponent:
    """Any component without a morphology (point neurons, spike sources, ...)."""
    def __init__(self, id, component_type, attributes=None):
        self.id = id
        self.component_type = component_type # The NeuroML tag, e.g. 'iafCell'
        self.attributes = attributes if attributes else {}

    def to_dict(self):
        return {"id": self.id, "component_type": self.component_type, "attributes": self.attributes}

    @classmethod
    def from_dict(cls, data):
        return cls(data['id'], data['component_type'], data.get('attributes'))

class Location:
    def __init__(self, x, y, z):
        self.x = _to_float(x)
        self.y = _to_float(y)
        self.z = _to_float(z)

    def to_position(self):
        return {'x': self.x, 'y': self.y, 'z': self.z}

    def to_dict(self):
        return self.to_position()

    @classmethod
    def from_dict(cls, data):
        if data is None: return None
        return cls(data.get('x', 0.0), data.get('y', 0.0), data.get('z', 0.0))

class Instance:
    def __init__(self, id, location=None):
        self.id = id
        self.location = location

    def to_dict(self):
        return {"id": self.id, "location": self.location.to_dict() if self.location else None}

    @classmethod
    def from_dict(cls, data):
        return cls(data.get('id'), Location.from_dict(data.get('location')))

class Population:
    """Repeated instances of one component, either listed explicitly or counted."""
    def __init__(self, id, component, population_type=None, instances=None, size=None):
        self.id = id
        self.component = component # Id of the referenced component
        self.population_type = population_type
        self.instances = instances if instances else []
        self.size = size

    def is_instance_list(self):
        return self.population_type == POPULATION_LIST

    def get_size(self):
        if self.size is not None:
            return int(_to_float(self.size))
        return len(self.instances)

    def to_dict(self):
        return {
            "id": self.id, "component": self.component, "population_type": self.population_type,
            "instances": [i.to_dict() for i in self.instances], "size": self.size
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            data['id'], data['component'], data.get('population_type'),
            [Instance.from_dict(i) for i in data.get('instances', [])],
            data.get('size')
        )

class Network:
    def __init__(self, id, populations=None):
        self.id = id
        self.populations = populations if populations else []

    def add_population(self, population):
        self.populations.append(population)

    def to_dict(self):
        return {"id": self.id, "populations": [p.to_dict() for p in self.populations]}

    @classmethod
    def from_dict(cls, data):
        return cls(data['id'], [Population.from_dict(p) for p in data.get('populations', [])])

class NeuroMLDocument:
    """Holds every top-level fragment of a parsed NeuroML model."""
    def __init__(self, id=None):
        self.id = id
        self.morphologies = [] # Standalone morphologies
        self.cells = []
        self.networks = []
        self.components = [] # OpaqueComponent objects

    def add_morphology(self, morphology): self.morphologies.append(morphology)
    def add_cell(self, cell): self.cells.append(cell)
    def add_network(self, network): self.networks.append(network)
    def add_component(self, component): self.components.append(component)

    def get_morphology(self, morphology_id):
        return next((m for m in self.morphologies if m.id == morphology_id), None)

    def get_cell(self, cell_id):
        return next((c for c in self.cells if c.id == cell_id), None)

    def get_network(self, network_id):
        return next((n for n in self.networks if n.id == network_id), None)

    def all_components(self):
        """Cells and opaque components, keyed by id."""
        components = {c.id: c for c in self.components}
        components.update({c.id: c for c in self.cells})
        return components

    def to_dict(self):
        return {
            "id": self.id,
            "morphologies": [m.to_dict() for m in self.morphologies],
            "cells": [c.to_dict() for c in self.cells],
            "networks": [n.to_dict() for n in self.networks],
            "components": [c.to_dict() for c in self.components]
        }

    @classmethod
    def from_dict(cls, data):
        instance = cls(data.get('id'))
        instance.morphologies = [Morphology.from_dict(m) for m in data.get('morphologies', [])]
        instance.cells = [Cell.from_dict(c) for c in data.get('cells', [])]
        instance.networks = [Network.from_dict(n) for n in data.get('networks', [])]
        instance.components = [OpaqueComponent.from_dict(c) for c in data.get('components', [])]
        return instance
