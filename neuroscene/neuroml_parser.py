# FILE: neuroscene/neuroscene/neuroml_parser.py
import xml.etree.ElementTree as ET
import io
from .model_types import (
    NeuroMLDocument, Morphology, Segment, SegmentGroup, Point3DWithDiam,
    Cell, BiophysicalProperties, ChannelDensity, OpaqueComponent,
    Network, Population, Instance, Location
)

# Top-level tags that are not plain components
STRUCTURAL_TAGS = ['morphology', 'cell', 'network', 'biophysicalProperties', 'include', 'notes', 'annotation']

class NeuroMLParser:
    def __init__(self):
        self.document = NeuroMLDocument()

    def _strip_namespace(self, neuroml_content_string):
        it = ET.iterparse(io.StringIO(neuroml_content_string))
        for _, el in it:
            if '}' in el.tag:
                el.tag = el.tag.split('}', 1)[1]
        return it.root

    def parse_neuroml_string(self, neuroml_content_string):
        self.document = NeuroMLDocument()
        root = self._strip_namespace(neuroml_content_string)
        self.document.id = root.get('id')

        # Morphologies and biophysics first so cells can reference them by id
        standalone_biophysics = {}
        for element in root.findall('morphology'):
            self.document.add_morphology(self._parse_morphology(element))
        for element in root.findall('biophysicalProperties'):
            props = self._parse_biophysical_properties(element)
            standalone_biophysics[props.id] = props

        for element in root:
            if element.tag == 'cell':
                cell = self._parse_cell(element, standalone_biophysics)
                if cell: self.document.add_cell(cell)
            elif element.tag == 'network':
                self.document.add_network(self._parse_network(element))
            elif element.tag not in STRUCTURAL_TAGS and element.get('id'):
                self.document.add_component(OpaqueComponent(element.get('id'), element.tag, dict(element.attrib)))

        return self.document

    def _parse_point(self, point_el):
        if point_el is None: return None
        return Point3DWithDiam(point_el.get('x'), point_el.get('y'), point_el.get('z'), point_el.get('diameter'))

    def _parse_morphology(self, morph_el):
        morphology = Morphology(morph_el.get('id'))

        for seg_el in morph_el.findall('segment'):
            seg_id = seg_el.get('id')
            distal = self._parse_point(seg_el.find('distal'))
            if seg_id is None or distal is None:
                print(f"Warning: Skipping segment '{seg_id}' of morphology '{morphology.id}' without id or distal point.")
                continue
            parent_el = seg_el.find('parent')
            parent = parent_el.get('segment') if parent_el is not None else None
            proximal = self._parse_point(seg_el.find('proximal'))
            morphology.segments.append(Segment(seg_id, seg_el.get('name'), distal, proximal, parent))

        for group_el in morph_el.findall('segmentGroup'):
            group_id = group_el.get('id')
            if not group_id: continue
            members = [m.get('segment') for m in group_el.findall('member') if m.get('segment') is not None]
            includes = [i.get('segmentGroup') for i in group_el.findall('include') if i.get('segmentGroup')]
            morphology.segment_groups.append(SegmentGroup(group_id, members, includes))

        return morphology

    def _parse_biophysical_properties(self, bio_el):
        props = BiophysicalProperties(bio_el.get('id'))
        membrane_el = bio_el.find('membraneProperties')
        if membrane_el is None:
            return props

        for density_el in membrane_el:
            # channelDensity, channelDensityNernst, ...
            if not density_el.tag.startswith('channelDensity'): continue
            density_id = density_el.get('id')
            ion_channel = density_el.get('ionChannel')
            if not density_id or not ion_channel:
                print(f"Warning: Skipping <{density_el.tag}> without id or ionChannel.")
                continue
            props.channel_densities.append(ChannelDensity(
                density_id, ion_channel,
                density_el.get('segmentGroup', 'all'),
                density_el.get('condDensity', '')
            ))
        return props

    def _parse_cell(self, cell_el, standalone_biophysics):
        cell_id = cell_el.get('id')
        if not cell_id:
            print("Warning: Skipping <cell> without an id.")
            return None

        morph_el = cell_el.find('morphology')
        if morph_el is not None:
            morphology = self._parse_morphology(morph_el)
        else:
            morphology = self.document.get_morphology(cell_el.get('morphology'))
            if morphology is None:
                print(f"Warning: Cell '{cell_id}' has no morphology. It will be drawn without segments.")

        bio_el = cell_el.find('biophysicalProperties')
        if bio_el is not None:
            biophysics = self._parse_biophysical_properties(bio_el)
        else:
            biophysics = standalone_biophysics.get(cell_el.get('biophysicalProperties'))

        return Cell(cell_id, morphology, biophysics)

    def _parse_network(self, net_el):
        network = Network(net_el.get('id'))
        for pop_el in net_el.findall('population'):
            pop_id = pop_el.get('id')
            component = pop_el.get('component')
            if not pop_id or not component:
                print(f"Warning: Skipping population '{pop_id}' of network '{network.id}' without a component.")
                continue

            instances = []
            for inst_el in pop_el.findall('instance'):
                loc_el = inst_el.find('location')
                location = Location(loc_el.get('x'), loc_el.get('y'), loc_el.get('z')) if loc_el is not None else None
                instances.append(Instance(inst_el.get('id'), location))

            size_str = pop_el.get('size')
            try:
                size = int(size_str) if size_str is not None else None
            except ValueError:
                print(f"Warning: Could not parse size '{size_str}' of population '{pop_id}'. Using the instance count.")
                size = None

            network.add_population(Population(pop_id, component, pop_el.get('type'), instances, size))
        return network
