"""
Pipeline event logging utilities for QUIRE (Tier 2 logging).

Provides uniform interfaces for logging export events to a JSON Lines event log.
For detailed within-context logging (Tier 1), use quire.utils.logger instead.

Usage:
    from quire.utils.event_logging import log_pipeline_event

    log_pipeline_event(
        event_type="export_completed",
        document_id="resume-123",
        source="server_export",
        page_count=1,
    )
"""

import json
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from quire.utils.timestamp import now_exact

load_dotenv()
LOGS_PATH = Path(os.getenv("QUIRE_LOGS_PATH", "outs/logs"))
EVENTS_FILE = Path(os.getenv("QUIRE_EVENTS_FILE", str(LOGS_PATH / "export_events.log")))

# Event types that end an export attempt
TERMINAL_EVENTS = {"export_completed", "export_failed", "export_superseded"}


def log_pipeline_event(
    event_type: str,
    document_id: str,
    source: str,
    events_file: Optional[Path] = None,
    **extra_fields,
) -> None:
    """
    Log an event to the pipeline event log.

    Events are appended in JSON Lines format (one JSON object per line), which
    makes filtering by event_type, document_id, or source straightforward.

    Args:
        event_type: Type of event (e.g., "export_started", "export_failed")
        document_id: Document identifier
        source: Event source (e.g., "client_export", "server_export", "cli")
        events_file: Override for the event log location (default: QUIRE_EVENTS_FILE)
        **extra_fields: Additional event-specific fields

    Example:
        log_pipeline_event(
            event_type="export_completed",
            document_id="resume-123",
            source="client_export",
            page_count=2,
            elapsed_s=3.2,
        )
    """
    events_file = Path(events_file) if events_file else EVENTS_FILE
    events_file.parent.mkdir(parents=True, exist_ok=True)

    event = {
        "timestamp": now_exact(),
        "event_type": event_type,
        "document_id": document_id,
        "source": source,
        **extra_fields,
    }

    with open(events_file, "a", encoding="utf-8") as f:
        f.write(json.dumps(event, default=str) + "\n")


def get_recent_events(
    n: int = 10,
    document_id: Optional[str] = None,
    event_type: Optional[str] = None,
    events_file: Optional[Path] = None,
) -> list[dict]:
    """
    Get the last n events from the event log, optionally filtered.

    Args:
        n: Number of recent events to return (default: 10)
        document_id: Filter to only events for this document (optional)
        event_type: Filter to only events of this type (optional)
        events_file: Override for the event log location

    Returns:
        List of event dicts (most recent last)
    """
    events_file = Path(events_file) if events_file else EVENTS_FILE
    if not events_file.exists():
        return []

    events = []
    with open(events_file, "r", encoding="utf-8") as f:
        for line in f:
            try:
                events.append(json.loads(line.strip()))
            except json.JSONDecodeError:
                # Skip malformed lines
                continue

    if document_id:
        events = [e for e in events if e.get("document_id") == document_id]

    if event_type:
        events = [e for e in events if e.get("event_type") == event_type]

    return events[-n:] if len(events) > n else events


def last_export_outcome(document_id: str, events_file: Optional[Path] = None) -> Optional[dict]:
    """Most recent terminal export event for a document, or None if it was never exported."""
    events = get_recent_events(
        n=10_000, document_id=document_id, events_file=events_file
    )
    terminal = [e for e in events if e.get("event_type") in TERMINAL_EVENTS]
    return terminal[-1] if terminal else None
