"""DayBlocks core library — block store, recurrence, ordering and metrics.

Public API re-exports for convenient imports:
    from dayblocks import DayBlocks, FixedClock, BlockStore, ...
"""

# Workspace & paths
from dayblocks.workspace import (
    workspace_root,
    init_workspace,
    load_settings,
    get_user_timezone,
    system_clock,
    today_str,
    blocks_path,
    settings_path,
    hooks_config_path,
    log_path,
)

# File I/O
from dayblocks.fileio import (
    read_text,
    read_json,
    read_yaml,
    write_json_atomic,
    write_yaml_atomic,
)

# Models
from dayblocks.models import (
    CATEGORIES,
    Block,
    Settings,
    DayCount,
)

# Clock
from dayblocks.clock import (
    SystemClock,
    FixedClock,
    trailing_dates,
)

# Store & engines
from dayblocks.store import BlockStore, decode_snapshot, encode_snapshot
from dayblocks.recurrence import propagate
from dayblocks.metrics import progress, streak, weekly_histogram
from dayblocks import ordering

# Hooks
from dayblocks.hooks import run_hooks, load_hooks_config

# Session
from dayblocks.session import DayBlocks, validate_new_block
