"""Tiger case study for QMDP planning and belief tracking."""

from .tiger import (
    TIGER_LEFT,
    TIGER_RIGHT,
    OPEN_LEFT,
    OPEN_RIGHT,
    LISTEN,
    HEAR_LEFT,
    HEAR_RIGHT,
    tiger_states,
    tiger_actions,
    tiger_observations,
    TigerConfig,
    TigerPOMDP,
    build_tiger_pomdp,
    build_tiger_tabular,
)

__all__ = [
    'TIGER_LEFT',
    'TIGER_RIGHT',
    'OPEN_LEFT',
    'OPEN_RIGHT',
    'LISTEN',
    'HEAR_LEFT',
    'HEAR_RIGHT',
    'tiger_states',
    'tiger_actions',
    'tiger_observations',
    'TigerConfig',
    'TigerPOMDP',
    'build_tiger_pomdp',
    'build_tiger_tabular',
]
