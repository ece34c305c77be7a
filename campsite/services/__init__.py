# campsite/services/__init__.py
from .block_store import SqlBlockStore
from .section_store import SqlSectionStore
