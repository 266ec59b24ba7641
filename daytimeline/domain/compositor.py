"""
Core business logic for composing a staff member's day timeline.

This is the heart of the application - pure domain logic without any
external dependencies (no API calls, no database, no I/O). Every stage takes
immutable inputs and returns a new tuple, so each one can be exercised on its
own.
"""

import logging
from collections import Counter
from typing import List, Optional, Sequence, Tuple

from .models import (
    AppointmentInterval,
    BlockInterval,
    ClampedEvent,
    FreeSpan,
    Minute,
    Segment,
    SegmentKind,
    ShiftWindow,
    Timeline,
)

logger = logging.getLogger(__name__)


def clamp_interval(
    start: Minute,
    end: Minute,
    shift_start: Minute,
    shift_end: Minute,
) -> Optional[Tuple[Minute, Minute]]:
    """
    Intersect an interval with the shift window.

    Returns None when nothing of positive length is left.
    """
    clamped_start = max(start, shift_start)
    clamped_end = min(end, shift_end)

    if clamped_start >= clamped_end:
        return None

    return clamped_start, clamped_end


def clamp_events(
    shift: ShiftWindow,
    appointments: Sequence[AppointmentInterval] = (),
    blocks: Sequence[BlockInterval] = (),
) -> Tuple[ClampedEvent, ...]:
    """
    Clip the break, every appointment and every block to the shift window.

    Events come out in source order: break, appointments, blocks. That order
    only matters for ids and for tie-breaks between equal events.
    """
    events: List[ClampedEvent] = []

    break_interval = shift.break_interval()
    if break_interval is not None:
        clamped = clamp_interval(
            break_interval.start, break_interval.end, shift.start, shift.end
        )
        if clamped:
            events.append(
                ClampedEvent(
                    id="break",
                    clamped_start=clamped[0],
                    clamped_end=clamped[1],
                    kind=SegmentKind.BREAK,
                    source_id="break",
                )
            )

    for idx, appointment in enumerate(appointments):
        clamped = clamp_interval(appointment.start, appointment.end, shift.start, shift.end)
        if not clamped:
            logger.debug("Appointment %s lies outside the shift, dropped", appointment.id)
            continue
        events.append(
            ClampedEvent(
                id=f"apt-{idx}",
                clamped_start=clamped[0],
                clamped_end=clamped[1],
                kind=SegmentKind.APPOINTMENT,
                ref=appointment.payload,
                source_id=appointment.id,
            )
        )

    for idx, block in enumerate(blocks):
        clamped = clamp_interval(block.start, block.end, shift.start, shift.end)
        if not clamped:
            logger.debug("Block %s lies outside the shift, dropped", block.id)
            continue
        events.append(
            ClampedEvent(
                id=f"blk-{idx}",
                clamped_start=clamped[0],
                clamped_end=clamped[1],
                kind=SegmentKind.BLOCK,
                ref=block.payload,
                source_id=block.id,
            )
        )

    return tuple(events)


def collect_boundaries(
    shift: ShiftWindow,
    events: Sequence[ClampedEvent],
) -> Tuple[Minute, ...]:
    """Return the sorted, distinct boundary points of the window and all events."""
    boundaries = {shift.start, shift.end}
    for event in events:
        boundaries.add(event.clamped_start)
        boundaries.add(event.clamped_end)
    return tuple(sorted(boundaries))


def extract_free_spans(
    shift: ShiftWindow,
    boundaries: Sequence[Minute],
    events: Sequence[ClampedEvent],
) -> Tuple[FreeSpan, ...]:
    """
    Walk consecutive boundary pairs and keep the uncovered ones.

    A span is covered when some event satisfies
    ``clamped_start <= span_start < clamped_end``. Because every event
    endpoint is a boundary, that count is simply the number of events started
    so far minus the number already ended. Touching free spans are merged.
    """
    starts = Counter(event.clamped_start for event in events)
    ends = Counter(event.clamped_end for event in events)

    free: List[FreeSpan] = []
    active = 0

    for span_start, span_end in zip(boundaries, boundaries[1:]):
        active += starts[span_start] - ends[span_start]

        if span_start < shift.start or span_end > shift.end:
            continue
        if active > 0:
            continue

        if free and free[-1].end == span_start:
            free[-1] = FreeSpan(start=free[-1].start, end=span_end)
        else:
            free.append(FreeSpan(start=span_start, end=span_end))

    return tuple(free)


def order_events(events: Sequence[ClampedEvent]) -> Tuple[ClampedEvent, ...]:
    """
    Sort events by start; on equal starts the longer event goes first.

    The sort is stable, so equal events keep their source order.
    """
    return tuple(sorted(events, key=lambda e: (e.clamped_start, -e.duration)))


def _segment_for_event(event: ClampedEvent) -> Segment:
    return Segment(
        start=event.clamped_start,
        end=event.clamped_end,
        kind=event.kind,
        ref=event.ref,
        source_id=event.source_id,
    )


def merge_segments(
    free_spans: Sequence[FreeSpan],
    events: Sequence[ClampedEvent],
) -> Timeline:
    """
    Merge free spans and events into one ascending sequence of segments.

    Both inputs are put in order here rather than trusted to arrive sorted.
    """
    gaps = sorted(free_spans, key=lambda span: span.start)
    ordered = order_events(events)

    timeline: List[Segment] = []
    gap_idx = 0
    event_idx = 0

    while gap_idx < len(gaps) or event_idx < len(ordered):
        gap = gaps[gap_idx] if gap_idx < len(gaps) else None
        event = ordered[event_idx] if event_idx < len(ordered) else None

        if gap is not None and (event is None or gap.start <= event.clamped_start):
            timeline.append(Segment(start=gap.start, end=gap.end, kind=SegmentKind.AVAILABLE))
            gap_idx += 1
        else:
            timeline.append(_segment_for_event(event))
            event_idx += 1

    return tuple(timeline)


class TimelineCompositor:
    """
    Composes a working day into ordered, typed segments.

    Algorithm:
    1. Clamp break, appointments and blocks to the shift window
    2. Collect every endpoint into a sorted boundary set
    3. Classify each elementary span as covered or free, merging free spans
    4. Merge free spans and events by start (longer event first on ties)

    The compositor keeps no state between calls.
    """

    def compose(
        self,
        shift: ShiftWindow,
        appointments: Sequence[AppointmentInterval] = (),
        blocks: Sequence[BlockInterval] = (),
    ) -> Timeline:
        """
        Build the timeline for one working day.

        Args:
            shift: The day's shift window; must be a working shift
            appointments: Booked appointments, in the order received
            blocks: Blocked intervals, in the order received

        Returns:
            Tuple of Segment objects covering the shift window

        Raises:
            ValueError: If the shift is a day off
        """
        if not shift.is_working:
            raise ValueError("Cannot compose a timeline for a non-working shift")

        events = clamp_events(shift, appointments, blocks)
        boundaries = collect_boundaries(shift, events)
        free_spans = extract_free_spans(shift, boundaries, events)

        timeline = merge_segments(free_spans, events)

        logger.debug(
            "Composed %d segments from %d events for shift %d-%d",
            len(timeline), len(events), shift.start, shift.end,
        )
        return timeline
