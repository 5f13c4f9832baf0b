"""Permission-based pruning of the navigation menu.

filter_menu never mutates its input; it returns a new tuple of MenuItems.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from canteen_authz.services.decision import PermissionSet


@dataclass(frozen=True)
class MenuItem:
    key: str
    label: str
    permission: Optional[str] = None
    children: Optional[Tuple['MenuItem', ...]] = None
    requires_children: bool = False

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {'key': self.key, 'label': self.label}
        if self.permission is not None:
            out['permission'] = self.permission
        if self.children is not None:
            out['children'] = [c.to_dict() for c in self.children]
        if self.requires_children:
            out['requires_children'] = True
        return out


def build_menu(config: Iterable[Mapping[str, Any]]) -> Tuple[MenuItem, ...]:
    items = []
    for node in config:
        children = node.get('children')
        items.append(MenuItem(
            key=node['key'],
            label=node.get('label', node['key']),
            permission=node.get('permission'),
            children=build_menu(children) if children is not None else None,
            requires_children=bool(node.get('requires_children', False)),
        ))
    return tuple(items)


def _with_children(item: MenuItem, children: Tuple[MenuItem, ...]) -> MenuItem:
    return MenuItem(item.key, item.label, item.permission, children, item.requires_children)


def filter_menu(items: Iterable[MenuItem], permissions: PermissionSet) -> Tuple[MenuItem, ...]:
    kept: List[MenuItem] = []
    for item in items:
        if permissions.is_wildcard:
            if item.children is not None:
                item = _with_children(item, filter_menu(item.children, permissions))
            kept.append(item)
            continue

        if item.permission is None:
            if item.children is None:
                kept.append(item)
                continue
            children = filter_menu(item.children, permissions)
            # permission-less groups exist only to hold children
            if children:
                kept.append(_with_children(item, children))
            continue

        if not permissions.allows(item.permission):
            continue
        if item.children is not None:
            children = filter_menu(item.children, permissions)
            if not children and item.requires_children:
                continue
            item = _with_children(item, children)
        kept.append(item)
    return tuple(kept)


__all__ = ['MenuItem', 'build_menu', 'filter_menu']
