"""Linear-scan register allocation over virtual register live ranges."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

_SEPARATOR = "-" * 40


class NotConfiguredError(RuntimeError):
    """Raised when an analysis is requested before the register count is set."""


@dataclass
class _Interval:
    reg_id: int
    start: int
    end: int

    @property
    def lifetime(self) -> int:
        return self.end - self.start


def _choose_spill(active: list[_Interval], current: _Interval) -> _Interval:
    """Pick the interval to spill among the active ones and the current one."""
    candidate = current
    for interval in [*active, current]:
        if interval.end > candidate.end:
            candidate = interval
        elif interval.end == candidate.end and interval.lifetime <= candidate.lifetime:
            # Shorter lifetime wins; on a tie the most recently allocated wins.
            candidate = interval
    return candidate


class LinearScan:
    """Allocates physical registers to virtual registers by linear scan."""

    def __init__(self) -> None:
        self.register_count: Optional[int] = None
        self.allocations: dict[int, Optional[int]] = {}
        self.spill_iterations: dict[int, list[int]] = {}
        self._registers: list[_Interval] = []
        self._by_id: dict[int, _Interval] = {}

    @property
    def configured(self) -> bool:
        """Whether a positive number of physical registers has been set."""
        return self.register_count is not None and self.register_count > 0

    def _require_configured(self, action: str) -> int:
        if not self.configured:
            raise NotConfiguredError(f"cannot {action}: register count not set")
        assert self.register_count is not None
        return self.register_count

    def set_register_count(self, count: int) -> None:
        """Set the number of physical registers and reset every analysis."""
        if count < 0:
            raise ValueError("register count must not be negative")
        self.register_count = count
        self.spill_iterations = {}
        self.allocations = {}

    def add_virtual_register(self, reg_id: int, start: int, end: int) -> None:
        """Record a virtual register live from line start to line end.

        A register already known keeps its position and takes the new range.
        """
        existing = self._by_id.get(reg_id)
        if existing is not None:
            existing.start = start
            existing.end = end
            return
        position = next(
            (pos for pos, interval in enumerate(self._registers) if interval.start > start),
            len(self._registers),
        )
        interval = _Interval(reg_id, start, end)
        self._registers.insert(position, interval)
        self._by_id[reg_id] = interval

    def allocate(self, k: int) -> dict[int, Optional[int]]:
        """Allocate with k physical registers.

        Returns each virtual register, in scan order, mapped to its physical
        register or to None when it was spilled.
        """
        total = self._require_configured("allocate")
        if not 1 <= k <= total:
            raise ValueError(f"k must be between 1 and {total}")

        free = [True] * k
        active: list[_Interval] = []
        assigned: dict[int, Optional[int]] = {}
        iterations: list[int] = []
        self.spill_iterations[k] = iterations

        index = 0
        while index < len(self._registers):
            current = self._registers[index]

            still_active = []
            for interval in active:
                if interval.end <= current.start:
                    register = assigned[interval.reg_id]
                    assert register is not None
                    free[register] = True
                else:
                    still_active.append(interval)
            active = still_active

            if len(active) < k:
                register = free.index(True)
                free[register] = False
                active.append(current)
                assigned[current.reg_id] = register
            else:
                victim = _choose_spill(active, current)
                iterations.append(index)
                if victim is not current:
                    # Release the victim's register and retry the current one.
                    active = [interval for interval in active if interval is not victim]
                    released = assigned[victim.reg_id]
                    assert released is not None
                    free[released] = True
                    assigned[victim.reg_id] = None
                    continue
                assigned[current.reg_id] = None
            index += 1

        self.allocations = {
            interval.reg_id: assigned.get(interval.reg_id) for interval in self._registers
        }
        return dict(self.allocations)

    def describe_registers(self) -> str:
        """Return the stored live ranges in scan order."""
        lines = "".join(
            f"id: {interval.reg_id} [{interval.start}-{interval.end}]\n"
            for interval in self._registers
        )
        return f"===REGISTRADORES===\n{lines}===================\n"

    def _describe_allocations(self) -> str:
        return "".join(
            f"vr{reg_id}: {'SPILL' if register is None else register}\n"
            for reg_id, register in self.allocations.items()
        )

    def allocate_all(self) -> str:
        """Allocate for every k from the register count down to 2 and report."""
        total = self._require_configured("allocate")
        parts = []
        for k in range(total, 1, -1):
            self.allocate(k)
            parts.append(f"K = {k}\n\n{self._describe_allocations()}{_SEPARATOR}\n")
        return "".join(parts)

    def summary(self) -> str:
        """Report, for each k down to 2, whether allocation spilled and where."""
        total = self._require_configured("summarise the analyses")
        lines = [_SEPARATOR]
        for k in range(total, 1, -1):
            iterations = self.spill_iterations.get(k)
            if iterations:
                joined = ", ".join(str(i) for i in iterations)
                lines.append(f"\nK = {k}: SPILL on interation(s): {joined}")
            else:
                lines.append(f"\nK = {k}: Successful Allocation")
        return "".join(lines)