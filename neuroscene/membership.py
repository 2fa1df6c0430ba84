# FILE: neuroscene/neuroscene/membership.py

import networkx as nx

class SegmentGroupGraph:
    """
    Include graph of a morphology's segment groups. An edge G -> H means
    "G includes H", so every segment of H is also a segment of G.
    The graph may contain cycles; all queries go through networkx and terminate.
    """
    def __init__(self, segment_groups):
        self.segment_groups = list(segment_groups) if segment_groups else []
        self.graph = nx.DiGraph()
        # Declaration order, used to keep every result deterministic
        self._order = {}

        for group in self.segment_groups:
            self._add_group_node(group.id)
            self.graph.nodes[group.id]['members'].extend(group.members or [])

        for group in self.segment_groups:
            for included_id in group.includes or []:
                if included_id not in self.graph:
                    print(f"Warning: Segment group '{group.id}' includes undefined group '{included_id}'.")
                    self._add_group_node(included_id)
                self.graph.add_edge(group.id, included_id)

    def _add_group_node(self, group_id):
        if group_id in self.graph: return
        self._order[group_id] = len(self._order)
        self.graph.add_node(group_id, members=[])

    def _sorted(self, group_ids):
        return sorted(group_ids, key=lambda g: self._order[g])

    def direct_members(self, group_id):
        if group_id not in self.graph: return []
        return list(self.graph.nodes[group_id]['members'])

    def members_of(self, group_id):
        """Segments of a group, including those reached through include edges."""
        if group_id not in self.graph: return []
        members = []
        seen = set()
        for g in [group_id] + self._sorted(nx.descendants(self.graph, group_id)):
            for segment_id in self.graph.nodes[g]['members']:
                if segment_id not in seen:
                    seen.add(segment_id)
                    members.append(segment_id)
        return members

    def containing_groups(self, group_id):
        """Every group that includes `group_id`, directly or transitively."""
        if group_id not in self.graph: return []
        return self._sorted(nx.ancestors(self.graph, group_id))

    def containing_groups_string(self, group_id):
        """Semicolon separated list of the groups containing `group_id`, e.g. 'dendrite_group; all'."""
        return "; ".join(self.containing_groups(group_id))

    def resolve_segment_groups(self):
        """
        Maps every segment id to the ids of the groups it belongs to.
        Direct memberships come first, then the groups reaching them through
        include edges; each group is listed once per segment.
        """
        segments_map = {}
        for group in self.segment_groups:
            for segment_id in self.graph.nodes[group.id]['members']:
                groups = segments_map.setdefault(segment_id, [])
                if group.id not in groups:
                    groups.append(group.id)

        for group_id in self._sorted(self.graph.nodes):
            containers = self.containing_groups(group_id)
            if not containers: continue
            for segment_id in self.graph.nodes[group_id]['members']:
                groups = segments_map.setdefault(segment_id, [])
                for container_id in containers:
                    if container_id not in groups:
                        groups.append(container_id)
        return segments_map

def resolve_segment_groups(segment_groups):
    """Segment id -> list of group ids, with membership closed over include edges."""
    return SegmentGroupGraph(segment_groups).resolve_segment_groups()
