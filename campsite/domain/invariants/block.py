# campsite/domain/invariants/block.py
from campsite.editor.blocks import BLOCK_TYPES, MAX_WIDTH, MIN_WIDTH
from .exceptions import InvariantViolation


def assert_block_type(block_type, allowed=BLOCK_TYPES):
    if block_type not in allowed:
        raise InvariantViolation(f"Unknown block type '{block_type}'.")


def assert_block_width(width):
    if not isinstance(width, int) or isinstance(width, bool):
        raise InvariantViolation(f"Block width must be an integer, got {width!r}.")
    if not MIN_WIDTH <= width <= MAX_WIDTH:
        raise InvariantViolation(
            f"Block width must be between {MIN_WIDTH} and {MAX_WIDTH}, got {width}."
        )


def assert_block(block):
    assert_block_type(block.type)
    assert_block_width(block.width)
    if not isinstance(block.order_index, int) or block.order_index < 1:
        raise InvariantViolation("Block order must start at 1.")
