"""
Sequence Generator

Draws random hook + selling-points + cta combinations from a clip set and
keeps only the structurally distinct ones.

Architecture:
    Partition by role → Ceiling (binomial sum) → Random draws with dedup → Sequences

The number of sequences is capped (10 by default) and the number of draws is
bounded (100 by default), so tiny clip pools terminate quickly with whatever
distinct combinations were found.

Usage:
    from restitch.sequence_generator import generate_sequences

    sequences = generate_sequences(registry.clips(), rng=random.Random(7))
"""

import math
import random
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Set, Tuple

from .config import get_settings
from .exceptions import EmptyInputError, MissingRoleError, UnknownSequenceError
from .logger import logger
from .models import Clip, ClipRole, Sequence


def binomial(n: int, k: int) -> int:
    """C(n, k), 0 when k > n."""
    return math.comb(n, k) if 0 <= k <= n else 0


def combination_ceiling(hooks: int, points: int, ctas: int, max_points: int) -> int:
    """
    Upper bound on distinct combinations.

    hooks * ctas * sum(C(points, k) for k in 1..max_points); the sum is 1
    when max_points is 0 (the single hook+cta pairing).
    """
    if max_points <= 0:
        point_sets = 1
    else:
        point_sets = sum(binomial(points, k) for k in range(1, max_points + 1))
    return hooks * ctas * point_sets


Signature = Tuple[str, Tuple[str, ...], str]


def combination_signature(hook: Clip, points: Iterable[Clip], cta: Clip) -> Signature:
    """Order-normalized identity: selling-point order does not matter."""
    return (hook.id, tuple(sorted(p.id for p in points)), cta.id)


@dataclass
class RolePartition:
    hooks: List[Clip]
    points: List[Clip]
    ctas: List[Clip]

    @classmethod
    def from_clips(cls, clips: Iterable[Clip]) -> "RolePartition":
        partition = cls(hooks=[], points=[], ctas=[])
        buckets = {
            ClipRole.HOOK: partition.hooks,
            ClipRole.SELLING_POINT: partition.points,
            ClipRole.CTA: partition.ctas,
        }
        for clip in clips:
            buckets[clip.role].append(clip)
        return partition


class SequenceGenerator:
    """
    Randomized sampler of distinct sequences.

    Each ``generate`` call owns its own dedup set; nothing is shared
    between calls.
    """

    def __init__(
        self,
        max_sequences: Optional[int] = None,
        max_attempts: Optional[int] = None,
        max_selling_points: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ):
        limits = get_settings().generation
        self.max_sequences = limits.max_sequences if max_sequences is None else max_sequences
        self.max_attempts = limits.max_attempts if max_attempts is None else max_attempts
        self.max_selling_points = (
            limits.max_selling_points if max_selling_points is None else max_selling_points
        )
        self.rng = rng or random.Random()

        # Populated by the last generate() call
        self.last_target = 0
        self.last_attempts = 0

    def generate(self, clips: Iterable[Clip]) -> List[Sequence]:
        clips = list(clips)
        if not clips:
            raise EmptyInputError("No clips to build sequences from; add some clips first")

        partition = RolePartition.from_clips(clips)
        missing = []
        if not partition.hooks:
            missing.append(ClipRole.HOOK.value)
        if not partition.ctas:
            missing.append(ClipRole.CTA.value)
        if missing:
            raise MissingRoleError(missing)

        max_points = min(self.max_selling_points, len(partition.points))
        ceiling = combination_ceiling(
            len(partition.hooks), len(partition.points), len(partition.ctas), max_points
        )
        target = min(self.max_sequences, ceiling)

        sequences: List[Sequence] = []
        seen: Set[Signature] = set()
        attempts = 0

        while len(sequences) < target and attempts < self.max_attempts:
            attempts += 1
            hook = self.rng.choice(partition.hooks)
            cta = self.rng.choice(partition.ctas)
            points = self._draw_points(partition.points, max_points)

            signature = combination_signature(hook, points, cta)
            if signature in seen:
                continue
            seen.add(signature)

            sequences.append(
                Sequence.from_clips(f"sequence-{len(sequences) + 1}", [hook, *points, cta])
            )

        self.last_target = target
        self.last_attempts = attempts

        if len(sequences) < target:
            logger.warning(
                f"Generated {len(sequences)}/{target} sequences; "
                f"attempt budget of {self.max_attempts} exhausted"
            )
        else:
            logger.info(f"Generated {len(sequences)} unique sequences in {attempts} attempts")
        return sequences

    def _draw_points(self, points: List[Clip], max_points: int) -> List[Clip]:
        """Random count in 1..max_points, then a prefix of a shuffled index list."""
        if max_points <= 0:
            return []
        count = self.rng.randint(1, max_points)
        indices = list(range(len(points)))
        self.rng.shuffle(indices)
        return [points[i] for i in indices[:count]]


def generate_sequences(
    clips: Iterable[Clip],
    rng: Optional[random.Random] = None,
    **limits,
) -> List[Sequence]:
    """Convenience wrapper around SequenceGenerator.generate."""
    return SequenceGenerator(rng=rng, **limits).generate(clips)


class SequenceSet:
    """Working set of the latest generation run."""

    def __init__(self, sequences: Optional[Iterable[Sequence]] = None):
        self._sequences: Dict[str, Sequence] = {}
        self.replace(sequences or [])

    def __len__(self) -> int:
        return len(self._sequences)

    def __iter__(self) -> Iterator[Sequence]:
        return iter(list(self._sequences.values()))

    def replace(self, sequences: Iterable[Sequence]) -> None:
        """A new run discards the previous set wholesale."""
        self._sequences = {s.id: s for s in sequences}

    def get(self, sequence_id: str) -> Sequence:
        try:
            return self._sequences[sequence_id]
        except KeyError:
            raise UnknownSequenceError(sequence_id) from None

    def remove(self, sequence_id: str) -> Sequence:
        self.get(sequence_id)
        return self._sequences.pop(sequence_id)
