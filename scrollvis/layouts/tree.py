"""Tidy tree layout (Buchheim, Jünger & Leipert's linear-time Walker algorithm).

Siblings are separated by 1 unit, cousins by 2. The result is normalized into
the layout size: the extreme nodes keep half a separation of margin on each side
and depth maps linearly onto the height, so the root sits at y = 0.
"""

import logging
from dataclasses import dataclass

from scrollvis.layouts.base import LayoutProvider, Point
from scrollvis.store import EntityStore, HierarchyNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TreeLink:
    source: str  # parent id
    target: str  # child id
    type: str | None
    source_xy: Point
    target_xy: Point


class _WalkNode:
    __slots__ = ("node", "parent", "children", "ancestor", "apportion_ancestor",
                 "prelim", "mod", "change", "shift", "thread", "number")

    def __init__(self, node: HierarchyNode | None, number: int) -> None:
        self.node = node
        self.parent: _WalkNode | None = None
        self.children: list[_WalkNode] = []
        self.ancestor: _WalkNode = self
        self.apportion_ancestor: _WalkNode | None = None
        self.prelim = 0.0
        self.mod = 0.0
        self.change = 0.0
        self.shift = 0.0
        self.thread: _WalkNode | None = None
        self.number = number


def _separation(a: _WalkNode, b: _WalkNode) -> float:
    return 1.0 if a.node.parent is b.node.parent else 2.0


def _next_left(v: _WalkNode) -> _WalkNode | None:
    return v.children[0] if v.children else v.thread


def _next_right(v: _WalkNode) -> _WalkNode | None:
    return v.children[-1] if v.children else v.thread


def _move_subtree(wm: _WalkNode, wp: _WalkNode, shift: float) -> None:
    change = shift / (wp.number - wm.number)
    wp.change -= change
    wp.shift += shift
    wm.change += change
    wp.prelim += shift
    wp.mod += shift


def _execute_shifts(v: _WalkNode) -> None:
    shift = 0.0
    change = 0.0
    for w in reversed(v.children):
        w.prelim += shift
        w.mod += shift
        change += w.change
        shift += w.shift + change


def _next_ancestor(vim: _WalkNode, v: _WalkNode, ancestor: _WalkNode) -> _WalkNode:
    return vim.ancestor if vim.ancestor.parent is v.parent else ancestor


def _apportion(v: _WalkNode, w: _WalkNode | None, ancestor: _WalkNode) -> _WalkNode:
    if w is None:
        return ancestor
    vip = vop = v
    vim: _WalkNode | None = w
    vom = v.parent.children[0]
    sip = vip.mod
    sop = vop.mod
    sim = vim.mod
    som = vom.mod
    while True:
        vim = _next_right(vim)
        vip = _next_left(vip)
        if vim is None or vip is None:
            break
        vom = _next_left(vom)
        vop = _next_right(vop)
        vop.ancestor = v
        shift = vim.prelim + sim - vip.prelim - sip + _separation(vim, vip)
        if shift > 0:
            _move_subtree(_next_ancestor(vim, v, ancestor), v, shift)
            sip += shift
            sop += shift
        sim += vim.mod
        sip += vip.mod
        som += vom.mod
        sop += vop.mod
    if vim is not None and _next_right(vop) is None:
        vop.thread = vim
        vop.mod += sim - sop
    if vip is not None and _next_left(vom) is None:
        vom.thread = vip
        vom.mod += sip - som
        ancestor = v
    return ancestor


def _first_walk(v: _WalkNode) -> None:
    siblings = v.parent.children
    w = siblings[v.number - 1] if v.number else None
    if v.children:
        _execute_shifts(v)
        midpoint = (v.children[0].prelim + v.children[-1].prelim) / 2
        if w is not None:
            v.prelim = w.prelim + _separation(v, w)
            v.mod = v.prelim - midpoint
        else:
            v.prelim = midpoint
    elif w is not None:
        v.prelim = w.prelim + _separation(v, w)
    v.parent.apportion_ancestor = _apportion(
        v, w, v.parent.apportion_ancestor or siblings[0],
    )


def _build(root: HierarchyNode) -> tuple[_WalkNode, list[_WalkNode]]:
    """Mirror the hierarchy; return the walk root and its nodes in pre-order."""
    top = _WalkNode(root, 0)
    order: list[_WalkNode] = []
    stack = [top]
    while stack:
        wn = stack.pop()
        order.append(wn)
        for i, child in enumerate(wn.node.children):
            cw = _WalkNode(child, i)
            cw.parent = wn
            wn.children.append(cw)
        stack.extend(reversed(wn.children))
    sentinel = _WalkNode(None, 0)
    sentinel.children = [top]
    top.parent = sentinel
    return top, order


def tidy_tree(root: HierarchyNode, width: float, height: float) -> dict[str, Point]:
    """Place every hierarchy node inside a ``width`` by ``height`` box."""
    top, order = _build(root)

    # Post-order with siblings left to right: each node's previous sibling
    # must already be placed when it is walked.
    post: list[_WalkNode] = []
    stack = [top]
    while stack:
        wn = stack.pop()
        post.append(wn)
        stack.extend(wn.children)
    for wn in reversed(post):
        _first_walk(wn)
    top.parent.mod = -top.prelim

    raw: dict[str, float] = {}
    for wn in order:  # parents before children
        raw[wn.node.id] = wn.prelim + wn.parent.mod
        wn.mod += wn.parent.mod

    left = min(order, key=lambda wn: raw[wn.node.id])
    right = max(order, key=lambda wn: raw[wn.node.id])
    max_depth = max(wn.node.depth for wn in order)

    s = 1.0 if left is right else _separation(left, right) / 2
    tx = s - raw[left.node.id]
    kx = width / (raw[right.node.id] + s + tx)
    ky = height / (max_depth or 1)
    return {
        wn.node.id: ((raw[wn.node.id] + tx) * kx, wn.node.depth * ky)
        for wn in order
    }


class TreeLayout(LayoutProvider):
    """Deterministic tidy layout of the store's hierarchy."""

    def __init__(self, store: EntityStore, width: float, height: float) -> None:
        super().__init__(store)
        self.width = width
        self.height = height
        self._coords: dict[str, Point] | None = None

    def positions(self) -> dict[str, Point]:
        if not self.store.has_hierarchy:
            return {}
        if self._coords is None:
            self._coords = tidy_tree(self.store.root(), self.width, self.height)
            logger.debug("Tree layout computed for %d nodes", len(self._coords))
        return dict(self._coords)

    def links(self) -> list[TreeLink]:
        if not self.store.has_hierarchy:
            return []
        coords = self.positions()
        return [
            TreeLink(
                source=parent.id,
                target=child.id,
                type=child.link_type,
                source_xy=coords[parent.id],
                target_xy=coords[child.id],
            )
            for parent, child in self.store.root().links()
        ]
