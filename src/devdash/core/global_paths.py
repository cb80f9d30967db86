"""Per-user directories for devdash, resolved with platformdirs."""

import os
from pathlib import Path

from platformdirs import user_config_dir, user_data_dir

APP_NAME = "devdash"


class GlobalPath:
    """Directory lookup. ``DEVDASH_TEST_HOME`` relocates everything for tests."""

    @classmethod
    def _override(cls) -> str | None:
        return os.environ.get("DEVDASH_TEST_HOME")

    @classmethod
    def data(cls) -> str:
        override = cls._override()
        if override:
            return str(Path(override) / "data")
        return user_data_dir(APP_NAME)

    @classmethod
    def log(cls) -> str:
        return str(Path(cls.data()) / "log")

    @classmethod
    def config(cls) -> str:
        override = cls._override()
        if override:
            return str(Path(override) / "config")
        return user_config_dir(APP_NAME)
