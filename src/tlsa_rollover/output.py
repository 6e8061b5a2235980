"""Output helpers for presenting rollover run results."""

from __future__ import annotations

import json
from importlib import resources
from typing import List, Optional

from jinja2.sandbox import SandboxedEnvironment

from .providers import ChangeSet, ResourceRecordSet
from .rollover import RolloverResult

_TEMPLATE_PACKAGE = "tlsa_rollover.resources.templates"

_ENV = SandboxedEnvironment(autoescape=False, trim_blocks=True, lstrip_blocks=True)


def _render_template(template_name: str, context: dict) -> str:
    """Render a packaged template with the provided context.

    Args:
        template_name (str): Template filename to render.
        context (dict): Render context.

    Returns:
        str: Rendered template output.
    """
    source = resources.files(_TEMPLATE_PACKAGE).joinpath(template_name).read_text(encoding="utf-8")
    return _ENV.from_string(source).render(**context)


def _serialize_record_sets(record_sets: List[ResourceRecordSet]) -> List[dict]:
    """Serialize record sets for output.

    Args:
        record_sets (List[ResourceRecordSet]): Record sets to serialize.

    Returns:
        List[dict]: Serialized record sets.
    """
    return [
        {
            "name": record_set.name,
            "type": record_set.record_type,
            "ttl": record_set.ttl,
            "data": list(record_set.data),
        }
        for record_set in record_sets
    ]


def _serialize_change(change: Optional[ChangeSet]) -> Optional[dict]:
    """Serialize a change set for output.

    Args:
        change (Optional[ChangeSet]): Change computed by the run.

    Returns:
        Optional[dict]: Additions and deletions, or None when no change was computed.
    """
    if change is None:
        return None
    return {
        "additions": _serialize_record_sets(change.additions),
        "deletions": _serialize_record_sets(change.deletions),
    }


def build_json_payload(result: RolloverResult, report_time: str) -> dict:
    """Build a JSON-serializable payload for a run result.

    Args:
        result (RolloverResult): Run result.
        report_time (str): UTC report timestamp string.

    Returns:
        dict: JSON-serializable payload.
    """
    hook: Optional[dict] = None
    if result.hook is not None:
        hook = {"status": "ok", "returncode": result.hook.returncode}
    elif result.hook_error is not None:
        hook = {
            "status": "failed",
            "returncode": result.hook_error.returncode,
            "error": str(result.hook_error),
        }
    return {
        "report_time_utc": report_time,
        "state": result.state.value,
        "certificate": {
            "name": result.certificate.name,
            "path": str(result.certificate.path),
            "common_name": result.certificate.common_name,
            "alt_names": list(result.certificate.alt_names),
        },
        "digest": result.digest,
        "previous_digest": result.previous_digest,
        "marker": {
            "path": str(result.marker_path) if result.marker_path else None,
            "age": result.marker_age,
        },
        "records": [{"name": record.name, "data": record.data} for record in result.records],
        "change": _serialize_change(result.change),
        "mirror": {name: str(target) for name, target in result.mirror.items()},
        "hook": hook,
    }


def to_json(result: RolloverResult, report_time: str) -> str:
    """Render a run result as formatted JSON.

    Args:
        result (RolloverResult): Run result.
        report_time (str): UTC report timestamp string.

    Returns:
        str: JSON string.
    """
    return json.dumps(build_json_payload(result, report_time), indent=2)


def to_text(result: RolloverResult, report_time: str) -> str:
    """Render a run result as plain text.

    Args:
        result (RolloverResult): Run result.
        report_time (str): UTC report timestamp string.

    Returns:
        str: Rendered text output.
    """
    context = build_json_payload(result, report_time)
    context["report_time"] = report_time
    return _render_template("text.j2", context).rstrip("\n")


__all__ = ["build_json_payload", "to_json", "to_text"]
