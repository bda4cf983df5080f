"""Support Calc SDK - Guideline schedule lookup and worksheet calculation."""

from .config import (
    get_config_dir,
    get_settings_path,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    clear_setting,
    get_default_guideline,
    get_user_guidelines_dir,
    ConfigError,
    DEFAULT_GUIDELINE,
)

from .schemas import (
    GuidelineFile,
    ObligationLookup,
    SharedParentingRules,
    SharedParentingWorksheet,
    StandardWorksheet,
    Transfer,
    TransferDirection,
    WorksheetInput,
    WorksheetLine,
    WorksheetResult,
)

from .schedule import (
    GuidelineError,
    GuidelineSchedule,
    basic_obligation,
)

from .guidelines import (
    GuidelineNotFoundError,
    find_guideline_path,
    list_guidelines,
    load_guideline,
    validate_guideline,
)

from .inputs import (
    EXAMPLE_INPUT,
    ScenarioError,
    build_inputs,
    coerce_amount,
    coerce_count,
    load_scenario,
    read_scenario,
)

from .worksheet import (
    evaluate,
    is_shared_parenting,
    responsibility_split,
)

__all__ = [
    # Config
    "get_config_dir",
    "get_settings_path",
    "load_settings",
    "save_settings",
    "get_setting",
    "set_setting",
    "clear_setting",
    "get_default_guideline",
    "get_user_guidelines_dir",
    "ConfigError",
    "DEFAULT_GUIDELINE",
    # Schemas
    "GuidelineFile",
    "ObligationLookup",
    "SharedParentingRules",
    "SharedParentingWorksheet",
    "StandardWorksheet",
    "Transfer",
    "TransferDirection",
    "WorksheetInput",
    "WorksheetLine",
    "WorksheetResult",
    # Schedule
    "GuidelineError",
    "GuidelineNotFoundError",
    "GuidelineSchedule",
    "basic_obligation",
    "find_guideline_path",
    "list_guidelines",
    "load_guideline",
    "validate_guideline",
    # Inputs
    "EXAMPLE_INPUT",
    "ScenarioError",
    "build_inputs",
    "coerce_amount",
    "coerce_count",
    "load_scenario",
    "read_scenario",
    # Worksheet
    "evaluate",
    "is_shared_parenting",
    "responsibility_split",
]
