"""
Phase Merger: coalesces adjacent phased SNVs into synthetic MNVs.

Records arrive in ascending (chromosome, position) order and are held in a
short window so that a later SNV can still be paired with an earlier one on
the same local phase set. Every record is forwarded downstream exactly once,
in buffer order, either when it falls out of range of the incoming record or
when the merger is flushed.
"""

from collections import deque
from collections.abc import Callable

from ..models.core import MERGE_FILTER, SageVariant
from ..utils.logging import get_logger

logger = get_logger(__name__)

BUFFER = 2

MnvConstructor = Callable[[SageVariant, SageVariant], SageVariant]
Consumer = Callable[[SageVariant], None]


def is_passing_phased_snv(variant: SageVariant) -> bool:
    return variant.is_passing and variant.local_phase_set > 0 and not variant.is_indel


def is_mnv_candidate(existing: SageVariant, incoming: SageVariant) -> bool:
    """
    Check whether a buffered record can pair with an incoming phased SNV.

    Adjacency is measured from the effective end of the buffered record, so a
    record already widened by an earlier merge still pairs with its neighbour.
    """
    return (
        is_passing_phased_snv(existing)
        and existing.local_phase_set == incoming.local_phase_set
        and incoming.position - existing.end <= BUFFER
    )


class PhaseMerger:
    """
    Streaming merge stage between a variant source and a downstream consumer.

    Args:
        consumer: Called once per finalized record, in order.
        factory: Builds a synthetic MNV from (earlier, later). Must not mutate
            its arguments.

    Use as a context manager to guarantee the buffer is drained:

        with PhaseMerger(writer.write, MnvFactory()) as merger:
            for variant in reader:
                merger.accept(variant)
    """

    def __init__(self, consumer: Consumer, factory: MnvConstructor):
        self.consumer = consumer
        self.factory = factory
        self._buffer: deque[SageVariant] = deque()
        self._chromosome: str | None = None
        self._position = 0
        self._finished_chromosomes: set[str] = set()

        self.accepted = 0
        self.forwarded = 0
        self.mnv_created = 0
        self.mnv_passing = 0
        self.discarded = 0

    def __enter__(self) -> "PhaseMerger":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type is not None:
            logger.warning(
                "Flushing %d buffered records after %s; output stops at %s:%d",
                len(self._buffer),
                exc_type.__name__,
                self._chromosome,
                self._position,
            )
        self.flush()

    def __len__(self) -> int:
        return len(self._buffer)

    @property
    def buffered(self) -> list[SageVariant]:
        """Snapshot of the records currently held, in forwarding order."""
        return list(self._buffer)

    def accept(self, variant: SageVariant) -> None:
        self._check_order(variant)
        self.accepted += 1

        self._flush_before(variant)
        if is_passing_phased_snv(variant):
            self._merge(variant)

        self._buffer.append(variant)

    def flush(self) -> None:
        """Forward every buffered record and empty the buffer."""
        while self._buffer:
            self._forward(self._buffer.popleft())

    def _merge(self, variant: SageVariant) -> None:
        merged: deque[SageVariant] = deque()
        for entry in self._buffer:
            if not is_mnv_candidate(entry, variant):
                merged.append(entry)
                continue

            mnv = self.factory(entry, variant)
            self.mnv_created += 1
            merged.append(mnv)

            if not mnv.is_passing:
                logger.debug("MNV %s failed filters %s", mnv, sorted(mnv.filters))
                merged.append(entry)
                continue

            self.mnv_passing += 1
            logger.debug("Merged %s and %s into %s", entry, variant, mnv)
            entry.filters.add(MERGE_FILTER)
            variant.filters.add(MERGE_FILTER)
            if entry.synthetic:
                # Superseded by the longer MNV, never forwarded.
                self.discarded += 1
                logger.debug("Replaced synthetic %s with %s", entry, mnv)
            else:
                merged.append(entry)

        self._buffer = merged

    def _flush_before(self, variant: SageVariant) -> None:
        while self._buffer:
            entry = self._buffer[0]
            if entry.chromosome == variant.chromosome and entry.end >= variant.position - BUFFER:
                return
            self._forward(self._buffer.popleft())

    def _forward(self, variant: SageVariant) -> None:
        self.forwarded += 1
        self.consumer(variant)

    def _check_order(self, variant: SageVariant) -> None:
        if variant.chromosome != self._chromosome:
            if variant.chromosome in self._finished_chromosomes:
                raise ValueError(
                    f"Variant {variant} returns to chromosome {variant.chromosome} "
                    f"after it was already passed"
                )
            if self._chromosome is not None:
                self._finished_chromosomes.add(self._chromosome)
            self._chromosome = variant.chromosome
        elif variant.position < self._position:
            raise ValueError(
                f"Variant {variant} is out of order: previous position was {self._position}"
            )
        self._position = variant.position
