import logging
from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from coursepilot.schemas.course import Course, normalize_code

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PrereqGraph:
    nodes: frozenset[str]
    edges: Mapping[str, tuple[str, ...]]  # prereq -> dependents, catalog order
    prereqs: Mapping[str, tuple[str, ...]]  # course -> prereqs, declared order

    def direct_prerequisites(self, code: str) -> tuple[str, ...]:
        return self.prereqs.get(normalize_code(code), ())

    def indirect_prerequisites(self, code: str) -> list[str]:
        """Prerequisites of the direct prerequisites, one level removed.

        Deduplicated against the direct set and the course itself, so a cycle
        such as A -> B -> A never reports A as its own indirect prerequisite.
        """
        target = normalize_code(code)
        direct = self.direct_prerequisites(target)
        seen = {target, *direct}
        indirect: list[str] = []
        for prereq in direct:
            for candidate in self.prereqs.get(prereq, ()):
                if candidate in seen:
                    continue
                seen.add(candidate)
                indirect.append(candidate)
        return indirect

    def unlocks(self, code: str) -> tuple[str, ...]:
        return self.edges.get(normalize_code(code), ())

    def prerequisite_closure(self, code: str) -> list[str]:
        """Every ancestor of a course, nearest first. Terminates on cyclic data."""
        target = normalize_code(code)
        visited = {target}
        order: list[str] = []
        queue = deque(self.prereqs.get(target, ()))
        while queue:
            node = queue.popleft()
            if node in visited:
                continue
            visited.add(node)
            order.append(node)
            queue.extend(self.prereqs.get(node, ()))
        return order

    def find_cycles(self) -> list[str]:
        """Codes that sit on a prerequisite cycle or depend on one.

        Kahn's algorithm: whatever never reaches indegree zero is blocked by a cycle.
        """
        indegree = {n: 0 for n in self.nodes}
        for course, reqs in self.prereqs.items():
            indegree[course] = len(reqs)

        queue = deque(n for n, d in indegree.items() if d == 0)
        resolved: set[str] = set()
        while queue:
            node = queue.popleft()
            resolved.add(node)
            for nxt in self.edges.get(node, ()):
                indegree[nxt] -= 1
                if indegree[nxt] == 0:
                    queue.append(nxt)

        return sorted(n for n in indegree if n not in resolved)


def build_graph(courses: Iterable[Course]) -> PrereqGraph:
    nodes: set[str] = set()
    edges: dict[str, list[str]] = {}
    prereqs: dict[str, tuple[str, ...]] = {}

    for course in courses:
        nodes.add(course.code)
        nodes.update(course.prerequisites)
        prereqs[course.code] = course.prerequisites
        for req in course.prerequisites:
            edges.setdefault(req, []).append(course.code)

    graph = PrereqGraph(
        nodes=frozenset(nodes),
        edges=MappingProxyType({k: tuple(v) for k, v in edges.items()}),
        prereqs=MappingProxyType(prereqs),
    )
    cyclic = graph.find_cycles()
    if cyclic:
        logger.warning("Prerequisite cycle detected involving: %s", ", ".join(cyclic))
    return graph
