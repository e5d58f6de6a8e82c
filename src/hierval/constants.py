"""Constants shared across the validation pipeline."""

DEFAULT_LOCALE = "en-us"

PLUGIN_NAME = "HierarchyValidation"

CONFIG_FILE_NAME = ".hierval.json"

DRYSYNC_ROUTE = "hierarchy/drysync"
