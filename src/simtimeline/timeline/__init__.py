# Timeline module
# v1.0: Scaling, step-function playback and the built-in template library

from .scaler import (
    scale_timeline,
    scale_scenario,
    scaled_offsets,
)
from .playback import (
    resolve_snapshot,
    resolve_keyframe,
    active_keyframe_index,
    next_keyframe_offset,
    is_complete,
)
from .templates import (
    ScenarioTemplate,
    SCENARIO_TEMPLATES,
    list_templates,
    get_template,
    create_empty_scenario,
    scenario_from_template,
)

__all__ = [
    # Scaler
    'scale_timeline',
    'scale_scenario',
    'scaled_offsets',

    # Playback
    'resolve_snapshot',
    'resolve_keyframe',
    'active_keyframe_index',
    'next_keyframe_offset',
    'is_complete',

    # Templates
    'ScenarioTemplate',
    'SCENARIO_TEMPLATES',
    'list_templates',
    'get_template',
    'create_empty_scenario',
    'scenario_from_template',
]
