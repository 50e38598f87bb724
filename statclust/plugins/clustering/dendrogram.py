# statclust/plugins/clustering/dendrogram.py

"""Dendrogram reconstruction from an agglomeration schedule."""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterator, List, Optional, Sequence

from statclust.core.errors import ScheduleError
from statclust.plugins.clustering.agglomeration import AgglomerationSchedule

# Rescaled distance axis of the dendrogram chart.
RESCALE_MAX = 25.0


@dataclass(eq=False)
class DendrogramNode:
    """Binary tree node; leaves are single cases, internal nodes are merges."""

    id: int
    height: float
    cases: FrozenSet[int]
    left: Optional['DendrogramNode'] = None
    right: Optional['DendrogramNode'] = None
    stage: Optional[int] = None
    label: Optional[str] = None
    case_number: Optional[int] = None
    x_position: float = 0.0

    @property
    def is_leaf(self) -> bool:
        """Whether the node has no children."""
        return self.left is None and self.right is None

    def iter_postorder(self) -> Iterator['DendrogramNode']:
        """Yield the subtree's nodes, children before parents, left first."""
        stack = [(self, False)]
        while stack:
            node, visited = stack.pop()
            if node.is_leaf or visited:
                yield node
                continue
            stack.append((node, True))
            stack.append((node.right, False))
            stack.append((node.left, False))

    def leaves(self) -> List['DendrogramNode']:
        """Leaves of the subtree in left-to-right order."""
        return [n for n in self.iter_postorder() if n.is_leaf]


@dataclass
class Dendrogram:
    """A full dendrogram and its display metadata."""

    root: DendrogramNode
    max_height: float
    num_items: int
    case_labels: List[str] = field(default_factory=list)
    ordered_cases: List[int] = field(default_factory=list)

    def rescaled_height(self, height: float, scale: float = RESCALE_MAX) -> float:
        """Map a merge height onto the 0..scale display axis."""
        if self.max_height <= 0:
            return 0.0
        return height / self.max_height * scale

    def internal_nodes(self) -> List[DendrogramNode]:
        """Internal nodes ordered by originating stage."""
        nodes = [n for n in self.root.iter_postorder() if not n.is_leaf]
        return sorted(nodes, key=lambda n: n.stage)


def _assign_positions(root: DendrogramNode) -> List[int]:
    """Give leaves consecutive x positions and parents their children's midpoint."""
    ordered = []
    for node in root.iter_postorder():
        if node.is_leaf:
            node.x_position = float(len(ordered))
            ordered.append(next(iter(node.cases)))
        else:
            node.x_position = (node.left.x_position + node.right.x_position) / 2.0
    return ordered


def build_dendrogram(
    schedule: AgglomerationSchedule,
    case_labels: Optional[Sequence[str]] = None,
    case_numbers: Optional[Sequence[int]] = None,
) -> Dendrogram:
    """Replay the schedule into a binary tree.

    :param schedule: complete agglomeration schedule
    :param case_labels: display label of each case (defaults to case numbers)
    :param case_numbers: 1-based case numbers (defaults to 1..n)
    :raises ScheduleError: if the schedule is incomplete or inconsistent
    """
    n = schedule.num_cases
    if n < 1:
        raise ScheduleError('cannot build a dendrogram without cases')
    if len(schedule) != n - 1:
        raise ScheduleError(
            f'schedule has {len(schedule)} stages, {n - 1} expected for {n} cases'
        )
    case_numbers = list(case_numbers) if case_numbers is not None else list(range(1, n + 1))
    case_labels = list(case_labels) if case_labels is not None else [str(c) for c in case_numbers]
    if len(case_labels) != n or len(case_numbers) != n:
        raise ScheduleError('one label and case number per case is required')

    live: Dict[int, DendrogramNode] = {
        i: DendrogramNode(
            id=i,
            height=0.0,
            cases=frozenset([i]),
            label=case_labels[i],
            case_number=case_numbers[i],
        )
        for i in range(n)
    }

    for idx, stage in enumerate(schedule):
        if stage.stage != idx + 1:
            raise ScheduleError(f'stage {stage.stage} found at position {idx + 1}')
        a, b = (c - 1 for c in stage.clusters_combined)
        if a == b or a not in live or b not in live:
            raise ScheduleError(
                f'stage {stage.stage} combines unknown or absorbed clusters '
                f'{stage.clusters_combined}'
            )
        left, right = live[a], live.pop(b)
        live[a] = DendrogramNode(
            id=n + idx,
            height=float(stage.coefficients),
            cases=left.cases | right.cases,
            left=left,
            right=right,
            stage=stage.stage,
        )

    (root,) = live.values()
    ordered = _assign_positions(root)
    return Dendrogram(
        root=root,
        max_height=root.height,
        num_items=n,
        case_labels=case_labels,
        ordered_cases=ordered,
    )
