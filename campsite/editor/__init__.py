# campsite/editor/__init__.py
from .blocks import (
    BLOCK_TYPES,
    DEFAULT_ALLOWED_TYPES,
    ContentBlock,
    DraftId,
    PersistedId,
)
from .diff import DiffLine, diff_lines, render_diff
from .draft import CommitOutcome, EditorMode, SectionBlockEditor
from .errors import (
    BlockNotFound,
    CommitInProgress,
    EditorError,
    LoadError,
    MutationError,
    PermissionDenied,
    SectionNotFound,
    StaleWrite,
    StoreError,
    ValidationError,
)
from .layout import pack_rows
from .panel import HistoryView, SectionDraft, SectionPanel
from .reorder import DragController, move_index
from .resize import ResizeController, column_delta
from .sections import Actor, ContentSection, SectionHistoryEntry
from .snapshot import build_snapshot
from .store import BlockStore, SectionStore
