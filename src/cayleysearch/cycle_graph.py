# src/cayleysearch/cycle_graph.py
from __future__ import annotations

from collections.abc import Iterator

from cayleysearch.context import GroupCtx
from cayleysearch.groups import associativity_violation, power_cycle
from cayleysearch.utility import InvariantViolation, bit

GRAPH_FORMATS = ("graphviz", "csacademy")


class CycleGraph:
    """
    Cycle structure of a group: the power cycle of every non-identity
    element, grouped by length.

    Rendering walks from the longest cycles to the shortest and leaves out
    a cycle whose elements all lie on a cycle already drawn (e.g. the cycle
    of g² inside the cycle of g, or g⁻¹ after g).
    """

    def __init__(self, ctx: GroupCtx):
        witness = associativity_violation(ctx)
        if witness is not None:
            i, j, k = witness
            raise InvariantViolation(
                f"Cycle graph needs a group table: ({i} * {j}) * {k} != {i} * ({j} * {k})."
            )
        self.order = ctx.order
        self.cycles: dict[int, list[list[int]]] = {}
        # element -> bitmap of the generators whose cycle passes through it
        self.cycles_by_value: list[int] = [0] * (ctx.order + 1)

        for element in range(2, ctx.order + 1):
            cycle = power_cycle(ctx, element)
            self.cycles_by_value[1] |= bit(element)
            for value in cycle:
                self.cycles_by_value[value] |= bit(element)
            self.cycles.setdefault(len(cycle), []).append(cycle)

    def drawn_cycles(self) -> Iterator[list[int]]:
        added = 0
        for length in sorted(self.cycles, reverse=True):
            for cycle in self.cycles[length]:
                # generators whose cycle contains every element of this one
                covering = ~0
                for element in cycle:
                    covering &= self.cycles_by_value[element]
                    if not covering:
                        break
                if covering & added:
                    continue
                added |= bit(cycle[0])
                yield cycle

    def graphviz(self) -> str:
        lines = [
            "strict graph Group {",
            "    node [shape=circle, fontsize=6, fixedsize=true, width=0.2]",
            "    1 [style=filled]",
            "",
        ]
        for cycle in self.drawn_cycles():
            chain = " -- ".join(str(e) for e in cycle)
            lines.append(f"    1 -- {chain} -- 1")
        lines.append("}")
        return "\n".join(lines) + "\n"

    def csacademy(self) -> str:
        """Edge list for the CS Academy graph editor, one blank line between cycles."""
        out = []
        for cycle in self.drawn_cycles():
            path = [1, *cycle, 1]
            for a, b in zip(path, path[1:]):
                out.append(f"{a} {b}\n")
            out.append("\n")
        return "".join(out)

    def render(self, fmt: str) -> str:
        key = (fmt or "").strip().lower()
        if key == "graphviz":
            return self.graphviz()
        if key == "csacademy":
            return self.csacademy()
        raise ValueError(f"Unknown graph format '{fmt}'. Choose one of: {', '.join(GRAPH_FORMATS)}")
