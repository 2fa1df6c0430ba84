# FILE: neuroscene/neuroscene/registry.py

class UnknownComponentError(KeyError):
    """A population references a component that was never registered."""
    pass

class ModelRegistry:
    """
    Read-only lookups used while populating the scene tree:
    component id -> Cell/OpaqueComponent, and
    instance name (e.g. 'pop0[3]') -> EntityNode of a nested entity.
    """
    def __init__(self, components=None, entities=None):
        self.components = dict(components) if components else {}
        self.entities = dict(entities) if entities else {}

    def register_component(self, component):
        self.components[component.id] = component

    def register_entity(self, name, entity):
        self.entities[name] = entity

    def get_component(self, component_id):
        component = self.components.get(component_id)
        if component is None:
            raise UnknownComponentError(f"Component '{component_id}' is not defined in the model")
        return component

    def get_entity(self, instance_name):
        return self.entities.get(instance_name)

    @classmethod
    def from_document(cls, document, entities=None):
        return cls(document.all_components(), entities)
