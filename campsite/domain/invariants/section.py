# campsite/domain/invariants/section.py
from .block import assert_block
from .exceptions import InvariantViolation


def assert_section_title(title):
    if not isinstance(title, str) or not title.strip():
        raise InvariantViolation("Section title must not be empty.")


def assert_section(section):
    """
    Checked on the row before an update is committed. Block orders are left
    out: a commit rewrites them one store call at a time.
    """
    assert_section_title(section.title)

    if section.owner_id in (section.editor_ids or []):
        raise InvariantViolation("The owner cannot be listed as an assigned editor.")

    for block in section.blocks:
        assert_block(block)
