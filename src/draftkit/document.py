"""Layers and drawings.

A ``Drawing`` holds its layers in a ``PersistentSortedMap`` keyed by
layer name, and each ``Layer`` holds its entities in a
``PersistentSortedMap`` keyed by entity id.  Both are immutable: every
edit returns a new value that shares all untouched layers and
entities with the old one, so earlier versions of a drawing (undo
history, a plot running in the background) stay valid.

Every entity lives in exactly one layer.  Entity-level edits on a
drawing locate the containing layer, edit the layer, then swap the new
layer into the drawing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import List, Optional

from draftkit.color import AUTO, IndexedColor
from draftkit.entities import Entity
from draftkit.errors import DrawingIntegrityError, EntityNotFoundError
from draftkit.geom import BoundingBox
from draftkit.pcollections import PersistentSortedMap
from draftkit.settings import DrawingSettings

logger = logging.getLogger(__name__)

DEFAULT_LAYER_NAME = "0"


@dataclass(frozen=True)
class Layer:
    name: str
    color: IndexedColor = AUTO
    is_visible: bool = True
    entities: PersistentSortedMap = field(default_factory=PersistentSortedMap)

    def update(self, **overrides) -> Layer:
        return replace(self, **overrides)

    def add(self, entity: Entity) -> Layer:
        return replace(self, entities=self.entities.set(entity.id, entity))

    def remove(self, entity: Entity) -> Layer:
        if not self.entity_exists(entity):
            raise EntityNotFoundError('entity {} is not on layer {!r}'.format(entity.id, self.name))
        return replace(self, entities=self.entities.remove(entity.id))

    def replace(self, old: Entity, new: Entity) -> Layer:
        """swap ``old`` for ``new``; ``old`` must be on this layer"""
        if not self.entity_exists(old):
            raise EntityNotFoundError('entity {} is not on layer {!r}'.format(old.id, self.name))
        return replace(self, entities=self.entities.remove(old.id).set(new.id, new))

    def entity_exists(self, entity: Entity) -> bool:
        return entity.id in self.entities

    def get_entities(self) -> List[Entity]:
        return list(self.entities.values())

    @property
    def entity_count(self) -> int:
        return len(self.entities)


def _default_layers() -> PersistentSortedMap:
    return PersistentSortedMap.from_items([(DEFAULT_LAYER_NAME, Layer(DEFAULT_LAYER_NAME))])


@dataclass(frozen=True)
class Drawing:
    """An immutable drawing: settings, named layers, the current layer
    and an author.  ``Drawing()`` has the single, current layer "0"."""

    settings: DrawingSettings = field(default_factory=DrawingSettings)
    layers: PersistentSortedMap = field(default_factory=_default_layers)
    current_layer_name: str = DEFAULT_LAYER_NAME
    author: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.layers, PersistentSortedMap):
            object.__setattr__(self, 'layers', PersistentSortedMap.from_items(
                (layer.name, layer) for layer in self.layers))
        if self.current_layer_name not in self.layers:
            raise DrawingIntegrityError(
                'current layer {!r} is not in the drawing'.format(self.current_layer_name))

    def update(self, **overrides) -> Drawing:
        return replace(self, **overrides)

    ## layers
    ## ------

    @property
    def current_layer(self) -> Layer:
        return self.layers[self.current_layer_name]

    def get_layer(self, name: str) -> Layer:
        layer = self.layers.get(name)
        if layer is None:
            raise EntityNotFoundError('no layer named {!r}'.format(name))
        return layer

    def layer_exists(self, name: str) -> bool:
        return name in self.layers

    def get_layers(self) -> List[Layer]:
        """every layer, ordered by name"""
        return list(self.layers.values())

    def add_layer(self, layer: Layer) -> Drawing:
        if layer.name in self.layers:
            raise DrawingIntegrityError('layer {!r} already exists'.format(layer.name))
        return replace(self, layers=self.layers.set(layer.name, layer))

    def remove_layer(self, layer) -> Drawing:
        name = layer if isinstance(layer, str) else layer.name
        if name not in self.layers:
            raise EntityNotFoundError('no layer named {!r}'.format(name))
        if name == self.current_layer_name:
            raise DrawingIntegrityError('cannot remove the current layer {!r}'.format(name))
        return replace(self, layers=self.layers.remove(name))

    def replace_layer(self, old: Layer, new: Layer) -> Drawing:
        """Swap layer ``old`` for ``new``.  A rename is allowed as long as
        the new name is free; the current layer follows the rename."""
        if old.name not in self.layers:
            raise EntityNotFoundError('no layer named {!r}'.format(old.name))
        layers = self.layers
        current = self.current_layer_name
        if new.name != old.name:
            if new.name in layers:
                raise DrawingIntegrityError('layer {!r} already exists'.format(new.name))
            layers = layers.remove(old.name)
            if current == old.name:
                current = new.name
        return replace(self, layers=layers.set(new.name, new), current_layer_name=current)

    def set_current_layer(self, name: str) -> Drawing:
        if name not in self.layers:
            raise EntityNotFoundError('no layer named {!r}'.format(name))
        return replace(self, current_layer_name=name)

    ## entities
    ## --------

    def get_entities(self) -> List[Entity]:
        """every entity, layers in name order and entities in id order"""
        return [e for layer in self.layers.values() for e in layer.entities.values()]

    def containing_layer(self, entity: Entity) -> Optional[Layer]:
        found = None
        for layer in self.layers.values():
            if layer.entity_exists(entity):
                if found is not None:
                    raise DrawingIntegrityError(
                        'entity {} is on layers {!r} and {!r}'.format(entity.id, found.name, layer.name))
                found = layer
        return found

    def add_entity(self, entity: Entity, layer_name: Optional[str] = None) -> Drawing:
        """add ``entity`` to the named layer, or the current layer"""
        layer = self.get_layer(self.current_layer_name if layer_name is None else layer_name)
        holder = self.containing_layer(entity)
        if holder is not None and holder.name != layer.name:
            raise DrawingIntegrityError(
                'entity {} is already on layer {!r}'.format(entity.id, holder.name))
        return self.replace_layer(layer, layer.add(entity))

    def replace_entity(self, old: Entity, new: Entity) -> Drawing:
        layer = self.containing_layer(old)
        if layer is None:
            logger.debug("replace of entity %s not in the drawing ignored", old.id)
            return self
        return self.replace_layer(layer, layer.replace(old, new))

    def remove_entity(self, entity: Entity) -> Drawing:
        layer = self.containing_layer(entity)
        if layer is None:
            logger.debug("remove of entity %s not in the drawing ignored", entity.id)
            return self
        return self.replace_layer(layer, layer.remove(entity))

    def get_extents(self, visible_only: bool = True) -> Optional[BoundingBox]:
        """bounding box of every entity on (visible) layers, or ``None``
        for an empty drawing"""
        return BoundingBox.includes(
            e.bounding_box
            for layer in self.layers.values() if layer.is_visible or not visible_only
            for e in layer.entities.values())


__all__ = [
    "DEFAULT_LAYER_NAME",
    "Layer",
    "Drawing",
]
