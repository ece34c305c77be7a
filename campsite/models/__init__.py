# campsite/models/__init__.py
from .block import Block
from .section import Section
from .section_history import SectionHistory
from .user import User
