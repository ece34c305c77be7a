# campsite/normalizers/history.py
from campsite.editor.panel import HistoryView


def normalize_history(view: HistoryView, include_snapshots=False):
    entry = view.entry
    data = {
        "id": entry.id,
        "section_id": entry.section_id,
        "editor_id": entry.editor_id,
        "editor_name": entry.editor_name,
        "created_at": entry.created_at.isoformat() if entry.created_at else None,
        "diff": [{"kind": line.kind, "text": line.text} for line in view.lines],
        "rendered": view.rendered,
    }

    if include_snapshots:
        data["before_snapshot"] = entry.before_snapshot
        data["after_snapshot"] = entry.after_snapshot

    return data
