"""
Reading of the configuration file.
"""

import os

from configobj import ConfigObj, ParseError

from noderegression.build_list import BUILD_INDEX_URL
from noderegression.errors import NodeRegressionError
from noderegression.run_build import BUILD_BASE_URL

DEFAULT_CONF_FNAME = os.path.expanduser(
    os.path.join("~", ".noderegression", "noderegression.cfg")
)


def default_cache_dir(environ=None):
    """
    Returns the directory where downloaded builds persist by default.
    """
    environ = os.environ if environ is None else environ
    base = environ.get("XDG_CACHE_HOME") or environ.get("LOCALAPPDATA")
    if not base:
        if os.name == "nt":
            base = os.path.join(os.path.expanduser("~"), "AppData", "Local")
        else:
            base = os.path.join(os.path.expanduser("~"), ".cache")
    return os.path.join(base, "noderegression")


# default values when not defined in config file.
# Note that this is also the list of options that can be used in config file
DEFAULTS = {
    "persist": None,
    "build-base-url": BUILD_BASE_URL,
    "index-url": BUILD_INDEX_URL,
    "http-timeout": 30.0,
    "target": [],
}


def get_config(conf_path):
    """
    Get custom defaults from configuration file in argument.
    """
    defaults = dict(DEFAULTS)
    if conf_path:
        try:
            config = ConfigObj(conf_path)
        except ParseError as exc:
            raise NodeRegressionError(
                "Error while reading the config file %s:\n  %s" % (conf_path, exc)
            )
        defaults.update(config)

    if isinstance(defaults["target"], str):
        # a single value in the config file is not parsed as a list
        defaults["target"] = [defaults["target"]] if defaults["target"] else []
    if not defaults["persist"]:
        defaults["persist"] = default_cache_dir()
    return defaults
